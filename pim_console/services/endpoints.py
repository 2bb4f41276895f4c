"""REST endpoint paths (relative to the API base URL).

Ids are percent-encoded as single path segments.
"""

from urllib.parse import quote

ITEMS = "/items"
ITEMS_BULK_UPDATE = "/items/bulk-update"
ITEMS_BULK_DELETE = "/items/bulk-delete"
ITEM_TYPES = "/item-types"
CATEGORIES = "/categories"
FAMILIES = "/families"
ATTRIBUTES = "/attributes"
ATTRIBUTE_GROUPS = "/attribute-groups"
ATTRIBUTE_GROUPS_RESOLVE = "/attribute-groups/resolve"
ASSOCIATION_TYPES = "/association-types"
ASSOCIATION_RULES = "/association-rules"
ASSOCIATIONS = "/associations"
USERS = "/users"


def _segment(entity_id: str) -> str:
    return quote(str(entity_id), safe="")


def by_id(base: str, entity_id: str) -> str:
    return f"{base}/{_segment(entity_id)}"


def item_attributes(item_id: str) -> str:
    return f"{by_id(ITEMS, item_id)}/attributes"


def item_history(item_id: str) -> str:
    return f"{by_id(ITEMS, item_id)}/history"


def category_items(category_id: str) -> str:
    return f"{by_id(CATEGORIES, category_id)}/items"


def family_items(family_id: str) -> str:
    return f"{by_id(FAMILIES, family_id)}/items"


def item_type_items(item_type_id: str) -> str:
    return f"{by_id(ITEM_TYPES, item_type_id)}/items"


def association_type_column_config(association_type_id: str) -> str:
    return f"{by_id(ASSOCIATION_TYPES, association_type_id)}/column-config"


def user_role(user_id: str) -> str:
    return f"{by_id(USERS, user_id)}/role"
