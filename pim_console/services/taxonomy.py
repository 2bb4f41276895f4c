"""Taxonomy services: item types, categories, families."""

from pim_console.schemas.entities import Category, Family, ItemType
from pim_console.services import endpoints
from pim_console.services.base import ResourceService
from pim_console.services.mappers import map_category, map_family, map_item_type


class ItemTypesService(ResourceService[ItemType]):
    base_path = endpoints.ITEM_TYPES
    mapper = map_item_type


class CategoriesService(ResourceService[Category]):
    """Categories; ``list`` accepts search, parentCategoryId, itemTypeId, limit, skip."""

    base_path = endpoints.CATEGORIES
    mapper = map_category


class FamiliesService(ResourceService[Family]):
    base_path = endpoints.FAMILIES
    mapper = map_family
