"""Item creation submission.

The item is created first, then every association one at a time. The
backend offers no transactional batch endpoint, so a failure midway leaves
the item and the associations created so far in place.
"""

from __future__ import annotations

import json
import time
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Any

from pim_console.core.association_rules import ApplicableRule, ManualAssociationDraft
from pim_console.core.item_wizard import (
    ItemFormState,
    WizardContext,
    mark_submitted,
    validate_all,
)
from pim_console.domain.exceptions import AssociationSubmissionError, ValidationError
from pim_console.infra.logging import get_logger, log_context
from pim_console.schemas.entities import Association, Item
from pim_console.services import PimServices

logger = get_logger(__name__)


@dataclass(frozen=True)
class AssociationDraftPayload:
    """One association to create once the source item exists."""

    association_type_id: str
    target_item_id: str
    order_index: int | float | None = None
    metadata: dict[str, Any] | None = None
    rule_id: str | None = None

    def to_payload(self, source_item_id: str) -> dict[str, Any]:
        return {
            "associationTypeId": self.association_type_id,
            "sourceItemId": source_item_id,
            "targetItemId": self.target_item_id,
            "orderIndex": self.order_index,
            "metadata": self.metadata,
        }


@dataclass(frozen=True)
class SubmissionResult:
    item: Item
    associations: list[Association] = field(default_factory=list)
    state: ItemFormState | None = None


def _blank_to_none(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


def build_item_payload(state: ItemFormState) -> dict[str, Any]:
    """Body of the item create call."""
    return {
        "itemTypeId": state.item_type_id,
        "categoryId": _blank_to_none(state.category_id),
        "familyId": _blank_to_none(state.family_id),
        "code": _blank_to_none(state.code),
        "externalCode": _blank_to_none(state.external_code),
        "sku": _blank_to_none(state.sku),
        "status": state.status.value,
        "attributes": dict(state.attribute_values),
    }


def parse_metadata(raw: str) -> dict[str, Any] | None:
    """Parse manual metadata as JSON; non-JSON text is kept as a note."""
    raw = raw.strip()
    if not raw:
        return None
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError:
        return {"note": raw}
    if isinstance(parsed, dict):
        return parsed
    return {"value": parsed}


def parse_order_index(raw: str) -> int | float | None:
    """Parse a manual order index.

    Raises:
        ValidationError: Not a number
    """
    raw = raw.strip()
    if not raw:
        return None
    try:
        number = float(raw)
    except ValueError as e:
        raise ValidationError(f"Order index must be a number, got {raw!r}", field="order_index") from e
    return int(number) if number.is_integer() else number


def plan_associations(
    state: ItemFormState,
    applicable: Iterable[ApplicableRule],
) -> list[AssociationDraftPayload]:
    """Order the associations to create.

    Rule-derived first (rules in presentation order, targets in pick order,
    ``orderIndex`` 1..N within each rule), then complete manual rows in
    entry order. Empty and half-filled manual rows are skipped.
    """
    drafts: list[AssociationDraftPayload] = []
    for entry in applicable:
        for position, target_id in enumerate(state.selected_targets(entry.id), start=1):
            drafts.append(
                AssociationDraftPayload(
                    association_type_id=entry.association_type.id,
                    target_item_id=target_id,
                    order_index=position,
                    rule_id=entry.id,
                )
            )

    for row in state.manual_associations:
        if not row.is_complete:
            continue
        drafts.append(_manual_draft(row))
    return drafts


def _manual_draft(row: ManualAssociationDraft) -> AssociationDraftPayload:
    return AssociationDraftPayload(
        association_type_id=row.association_type_id.strip(),
        target_item_id=row.target_item_id.strip(),
        order_index=parse_order_index(row.order_index),
        metadata=parse_metadata(row.metadata),
    )


class ItemSubmitter:
    """Creates an item and its associations from a reviewed form."""

    def __init__(self, services: PimServices) -> None:
        self._services = services

    async def submit(self, context: WizardContext) -> SubmissionResult:
        """Submit the form held by ``context``.

        Returns:
            SubmissionResult with the created item, its associations and the
            state moved to ``submitted``

        Raises:
            StepValidationError: The form does not validate
            ApiError: Item creation failed; nothing else was attempted
            AssociationSubmissionError: An association failed after the item
                was created
        """
        state = context.state
        validate_all(context)
        drafts = plan_associations(state, context.applicable_rules)
        started = time.perf_counter()

        item = await self._services.items.create(build_item_payload(state))
        logger.info("Item created", item_id=item.id, associations=len(drafts))

        with log_context(item_id=item.id):
            created = await self._create_associations(item, drafts)

        logger.info(
            "Item submission completed",
            item_id=item.id,
            associations=len(created),
            duration_ms=int((time.perf_counter() - started) * 1000),
        )
        return SubmissionResult(
            item=item,
            associations=created,
            state=mark_submitted(state, item.id),
        )

    async def _create_associations(
        self,
        item: Item,
        drafts: Sequence[AssociationDraftPayload],
    ) -> list[Association]:
        created: list[Association] = []
        for draft in drafts:
            try:
                association = await self._services.associations.create(draft.to_payload(item.id))
            except Exception as e:
                logger.error(
                    "Association creation failed",
                    association_type_id=draft.association_type_id,
                    target_item_id=draft.target_item_id,
                    created=len(created),
                    error=str(e),
                )
                raise AssociationSubmissionError(item, created, draft, e) from e
            created.append(association)
        return created
