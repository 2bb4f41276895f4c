"""Tests for concurrent reference data loading."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from pim_console.core.lookups import LOOKUP_FAILED_MESSAGE, LookupLoader
from pim_console.domain.exceptions import ApiError
from pim_console.schemas.common import Page
from pim_console.schemas.entities import AttributeGroup, Category, ItemType


@pytest.fixture
def mock_services() -> MagicMock:
    services = MagicMock()
    for name in ("item_types", "categories", "families", "association_types", "association_rules", "items"):
        getattr(services, name).list = AsyncMock(return_value=Page(items=[], total=0))
    services.item_types.list = AsyncMock(return_value=Page(items=[ItemType(id="t1")], total=1))
    services.categories.list = AsyncMock(return_value=Page(items=[Category(id="c1")], total=1))
    services.attribute_groups.list = AsyncMock(return_value=[AttributeGroup(id="g1")])
    return services


class TestLookupLoader:
    """Tests for LookupLoader."""

    @pytest.mark.asyncio
    async def test_load_all(self, mock_services: MagicMock) -> None:
        result = await LookupLoader(mock_services, limit=50).load()

        assert result is not None
        assert [t.id for t in result.item_types] == ["t1"]
        assert [c.id for c in result.categories] == ["c1"]
        assert [g.id for g in result.attribute_groups] == ["g1"]
        assert result.families == []
        assert not result.has_errors

        mock_services.item_types.list.assert_awaited_once_with(limit=50)
        mock_services.attribute_groups.list.assert_awaited_once_with(include_attributes=True)

    @pytest.mark.asyncio
    async def test_failed_lookup_falls_back_to_empty(self, mock_services: MagicMock) -> None:
        mock_services.categories.list = AsyncMock(side_effect=ApiError("Categories unavailable", status=503))
        mock_services.families.list = AsyncMock(side_effect=RuntimeError("boom"))

        result = await LookupLoader(mock_services).load()

        assert result.categories == []
        assert result.families == []
        assert [t.id for t in result.item_types] == ["t1"]
        assert result.errors == {
            "categories": "Categories unavailable",
            "families": LOOKUP_FAILED_MESSAGE,
        }

    @pytest.mark.asyncio
    async def test_dismiss_errors_keeps_data(self, mock_services: MagicMock) -> None:
        mock_services.families.list = AsyncMock(side_effect=RuntimeError("boom"))

        result = (await LookupLoader(mock_services).load()).dismiss_errors()

        assert result.errors == {}
        assert [t.id for t in result.item_types] == ["t1"]

    @pytest.mark.asyncio
    async def test_lookups_run_concurrently(self, mock_services: MagicMock) -> None:
        started = asyncio.Event()
        release = asyncio.Event()

        async def slow_item_types(**_: object) -> Page:
            started.set()
            await release.wait()
            return Page(items=[], total=0)

        async def categories_after_item_types_started(**_: object) -> Page:
            # only completes if item types are in flight at the same time
            await started.wait()
            release.set()
            return Page(items=[], total=0)

        mock_services.item_types.list = slow_item_types
        mock_services.categories.list = categories_after_item_types_started

        result = await asyncio.wait_for(LookupLoader(mock_services).load(), timeout=1)

        assert result is not None

    @pytest.mark.asyncio
    async def test_cancel_discards_results(self, mock_services: MagicMock) -> None:
        loader = LookupLoader(mock_services)

        async def cancel_midway(**_: object) -> Page:
            loader.cancel()
            return Page(items=[ItemType(id="t1")], total=1)

        mock_services.item_types.list = cancel_midway

        assert await loader.load() is None
        assert loader.cancelled
