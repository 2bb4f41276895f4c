"""Association services: types, rules, associations and column config."""

from __future__ import annotations

from typing import Literal

from pim_console.schemas.entities import (
    Association,
    AssociationColumnConfig,
    AssociationColumnDefinition,
    AssociationRule,
    AssociationType,
)
from pim_console.services import endpoints
from pim_console.services.base import ReadCreateService, ResourceService
from pim_console.services.mappers import (
    map_association,
    map_association_rule,
    map_association_type,
    map_column_config,
)

ColumnRole = Literal["source", "target"]


class AssociationTypesService(ResourceService[AssociationType]):
    """Association types; ``list`` accepts sourceItemTypeId / targetItemTypeId."""

    base_path = endpoints.ASSOCIATION_TYPES
    mapper = map_association_type


class AssociationRulesService(ReadCreateService[AssociationRule]):
    """Association rules are created once and never edited from the console."""

    base_path = endpoints.ASSOCIATION_RULES
    mapper = map_association_rule


class AssociationsService(ResourceService[Association]):
    """Associations between items; ``list`` accepts associationTypeId,
    sourceItemId and targetItemId filters."""

    base_path = endpoints.ASSOCIATIONS
    mapper = map_association

    async def get_column_config(
        self,
        association_type_id: str,
        role: ColumnRole,
    ) -> AssociationColumnConfig | None:
        payload = await self._client.get(
            endpoints.association_type_column_config(association_type_id),
            params={"role": role},
        )
        return map_column_config(payload)

    async def update_column_config(
        self,
        association_type_id: str,
        role: ColumnRole,
        columns: list[AssociationColumnDefinition],
    ) -> AssociationColumnConfig:
        """Replace the column layout for one side of an association type.

        Falls back to the submitted layout when the backend returns no body.
        """
        payload = await self._client.put(
            endpoints.association_type_column_config(association_type_id),
            {
                "role": role,
                "columns": [column.model_dump(by_alias=True) for column in columns],
            },
            params={"role": role},
        )
        return map_column_config(payload) or AssociationColumnConfig(
            association_type_id=association_type_id,
            role=role,
            columns=columns,
        )
