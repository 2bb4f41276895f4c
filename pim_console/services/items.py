"""Items service."""

from __future__ import annotations

from typing import Any

from pim_console.schemas.common import Page
from pim_console.schemas.entities import Item
from pim_console.services import endpoints
from pim_console.services.base import ResourceService
from pim_console.services.mappers import map_item, map_page


class ItemsService(ResourceService[Item]):
    """CRUD plus attribute, history and bulk operations on ``/items``."""

    base_path = endpoints.ITEMS
    mapper = map_item

    async def get_attributes(self, item_id: str) -> dict[str, Any]:
        return await self._client.get(endpoints.item_attributes(item_id)) or {}

    async def update_attributes(self, item_id: str, attributes: dict[str, Any]) -> dict[str, Any]:
        return await self._client.put(endpoints.item_attributes(item_id), attributes) or {}

    async def get_history(self, item_id: str) -> list[dict[str, Any]]:
        payload = await self._client.get(endpoints.item_history(item_id))
        if isinstance(payload, dict):
            payload = payload.get("items")
        return payload if isinstance(payload, list) else []

    async def bulk_update(self, updates: list[dict[str, Any]]) -> None:
        """Apply ``[{id, data}]`` updates in one call."""
        await self._client.post(endpoints.ITEMS_BULK_UPDATE, {"updates": updates})

    async def bulk_delete(self, ids: list[str]) -> None:
        await self._client.post(endpoints.ITEMS_BULK_DELETE, {"ids": ids})

    async def list_by_category(self, category_id: str, **params: Any) -> Page[Item]:
        payload = await self._client.get(endpoints.category_items(category_id), params=params)
        return map_page(payload, map_item)

    async def list_by_family(self, family_id: str, **params: Any) -> Page[Item]:
        payload = await self._client.get(endpoints.family_items(family_id), params=params)
        return map_page(payload, map_item)

    async def list_by_type(self, item_type_id: str, **params: Any) -> Page[Item]:
        payload = await self._client.get(endpoints.item_type_items(item_type_id), params=params)
        return map_page(payload, map_item)
