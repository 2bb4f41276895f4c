"""REST resource services."""

from dataclasses import dataclass

from pim_console.infra.http_client import ApiClient, get_api_client
from pim_console.services.associations import (
    AssociationRulesService,
    AssociationsService,
    AssociationTypesService,
)
from pim_console.services.attributes import AttributeGroupsService, AttributesService
from pim_console.services.base import ReadCreateService, ResourceService
from pim_console.services.items import ItemsService
from pim_console.services.taxonomy import CategoriesService, FamiliesService, ItemTypesService
from pim_console.services.users import UsersService


@dataclass(frozen=True)
class PimServices:
    """Every resource service, sharing one API client."""

    items: ItemsService
    item_types: ItemTypesService
    categories: CategoriesService
    families: FamiliesService
    attributes: AttributesService
    attribute_groups: AttributeGroupsService
    association_types: AssociationTypesService
    association_rules: AssociationRulesService
    associations: AssociationsService
    users: UsersService

    @classmethod
    def from_client(cls, client: ApiClient) -> "PimServices":
        return cls(
            items=ItemsService(client),
            item_types=ItemTypesService(client),
            categories=CategoriesService(client),
            families=FamiliesService(client),
            attributes=AttributesService(client),
            attribute_groups=AttributeGroupsService(client),
            association_types=AssociationTypesService(client),
            association_rules=AssociationRulesService(client),
            associations=AssociationsService(client),
            users=UsersService(client),
        )


# Singleton instance
_services: PimServices | None = None


def get_services() -> PimServices:
    """Get the services bundle wired to the API client singleton."""
    global _services
    if _services is None:
        _services = PimServices.from_client(get_api_client())
    return _services


__all__ = [
    "AssociationRulesService",
    "AssociationTypesService",
    "AssociationsService",
    "AttributeGroupsService",
    "AttributesService",
    "CategoriesService",
    "FamiliesService",
    "ItemTypesService",
    "ItemsService",
    "PimServices",
    "ReadCreateService",
    "ResourceService",
    "UsersService",
    "get_services",
]
