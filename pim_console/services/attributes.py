"""Attribute and attribute group services."""

from __future__ import annotations

from typing import Any

from pim_console.schemas.entities import Attribute, AttributeGroup
from pim_console.services import endpoints
from pim_console.services.base import ResourceService
from pim_console.services.mappers import map_attribute, map_attribute_group


class AttributesService(ResourceService[Attribute]):
    base_path = endpoints.ATTRIBUTES
    mapper = map_attribute


class AttributeGroupsService(ResourceService[AttributeGroup]):
    """Attribute groups.

    Unlike the other collections, ``list`` returns a plain list: callers
    never page through groups.
    """

    base_path = endpoints.ATTRIBUTE_GROUPS
    mapper = map_attribute_group

    async def list(self, include_attributes: bool = False, **params: Any) -> list[AttributeGroup]:  # type: ignore[override]
        if include_attributes:
            params["includeAttributes"] = True
        payload = await self._client.get(self.base_path, params=params)
        items = payload.get("items") if isinstance(payload, dict) else None
        return [map_attribute_group(group) for group in items or []]

    async def resolve(
        self,
        item_type_id: str | None = None,
        category_id: str | None = None,
        family_id: str | None = None,
    ) -> tuple[list[AttributeGroup], list[str]]:
        """Ask the backend which groups apply to a taxonomy selection.

        Returns:
            Tuple of (attribute groups, ids of the required groups)
        """
        payload = await self._client.get(
            endpoints.ATTRIBUTE_GROUPS_RESOLVE,
            params={
                "itemTypeId": item_type_id,
                "categoryId": category_id,
                "familyId": family_id,
            },
        )
        payload = payload if isinstance(payload, dict) else {}
        groups = payload.get("attributeGroups")
        if not isinstance(groups, list):
            groups = []
        return (
            [map_attribute_group(group) for group in groups],
            list(payload.get("requiredAttributeGroupIds") or []),
        )
