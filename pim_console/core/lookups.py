"""Reference data loading for the item creation wizard.

All lookups are read-only and independent, so they are fetched concurrently.
A failed lookup falls back to an empty list and records an error message
for an inline banner; it never fails the whole load.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any

from pim_console.config import settings
from pim_console.domain.exceptions import describe_error
from pim_console.infra.logging import get_logger
from pim_console.schemas.entities import (
    AssociationRule,
    AssociationType,
    AttributeGroup,
    Category,
    Family,
    Item,
    ItemType,
)
from pim_console.services import PimServices

logger = get_logger(__name__)

LOOKUP_FAILED_MESSAGE = "Required data could not be loaded. Please try again later."


@dataclass(frozen=True)
class LookupResult:
    """Reference data fetched for one wizard session.

    Attributes:
        errors: Lookup name → message, for each lookup that failed
    """

    item_types: list[ItemType] = field(default_factory=list)
    categories: list[Category] = field(default_factory=list)
    families: list[Family] = field(default_factory=list)
    attribute_groups: list[AttributeGroup] = field(default_factory=list)
    association_types: list[AssociationType] = field(default_factory=list)
    association_rules: list[AssociationRule] = field(default_factory=list)
    items: list[Item] = field(default_factory=list)
    errors: dict[str, str] = field(default_factory=dict)

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    def dismiss_errors(self) -> LookupResult:
        """Return the same data with the error banner cleared."""
        return LookupResult(
            item_types=self.item_types,
            categories=self.categories,
            families=self.families,
            attribute_groups=self.attribute_groups,
            association_types=self.association_types,
            association_rules=self.association_rules,
            items=self.items,
            errors={},
        )


class LookupLoader:
    """Fetches every lookup list concurrently.

    ``cancel()`` marks the loader as torn down: results that arrive later
    are discarded. In-flight requests are not aborted.
    """

    def __init__(self, services: PimServices, limit: int | None = None) -> None:
        self._services = services
        self._limit = limit or settings.lookup_limit
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True

    def _fetchers(self) -> dict[str, Callable[[], Awaitable[list[Any]]]]:
        services = self._services
        limit = self._limit

        async def paged(service: Any) -> list[Any]:
            page = await service.list(limit=limit)
            return page.items

        return {
            "item_types": lambda: paged(services.item_types),
            "categories": lambda: paged(services.categories),
            "families": lambda: paged(services.families),
            "attribute_groups": lambda: services.attribute_groups.list(include_attributes=True),
            "association_types": lambda: paged(services.association_types),
            "association_rules": lambda: paged(services.association_rules),
            "items": lambda: paged(services.items),
        }

    async def load(self) -> LookupResult | None:
        """Load every lookup.

        Returns:
            LookupResult, or None when the loader was cancelled meanwhile
        """
        fetchers = self._fetchers()
        started = time.perf_counter()

        results = await asyncio.gather(
            *(fetch() for fetch in fetchers.values()),
            return_exceptions=True,
        )

        if self._cancelled:
            logger.debug("Lookup results discarded after cancel")
            return None

        data: dict[str, list[Any]] = {}
        errors: dict[str, str] = {}
        for name, result in zip(fetchers, results):
            if isinstance(result, BaseException):
                if not isinstance(result, Exception):
                    raise result
                logger.error("Lookup failed", lookup=name, error=str(result))
                errors[name] = describe_error(result, LOOKUP_FAILED_MESSAGE)
                data[name] = []
            else:
                data[name] = list(result or [])

        logger.info(
            "Lookups loaded",
            duration_ms=int((time.perf_counter() - started) * 1000),
            failed=sorted(errors),
            counts={name: len(values) for name, values in data.items()},
        )
        return LookupResult(**data, errors=errors)
