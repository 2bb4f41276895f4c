"""Backend DTO → view model mappers.

Each mapper renames backend fields and defaults the nullable ones so the
rest of the console can rely on lists being lists and flags being flags.
"""

from collections.abc import Callable
from typing import Any, TypeVar

from pim_console.schemas.common import Page, UserRef, UserReference
from pim_console.schemas.entities import (
    Association,
    AssociationColumnConfig,
    AssociationColumnDefinition,
    AssociationRule,
    AssociationType,
    AssociationTypeItemRef,
    Attribute,
    AttributeGroup,
    AttributeGroupBinding,
    AttributeType,
    AttributeValue,
    Category,
    CategoryFamilySummary,
    Family,
    HierarchyNode,
    Item,
    ItemType,
)
from pim_console.schemas.users import ApiPagination, UserListResponse, UserSummary

T = TypeVar("T")

Dto = dict[str, Any]


def _list(value: Any) -> list[Any]:
    return list(value) if isinstance(value, list) else []


def map_page(payload: Any, mapper: Callable[[Dto], T]) -> Page[T]:
    """Map a ``{items, total}`` list payload."""
    payload = payload if isinstance(payload, dict) else {}
    items = _list(payload.get("items"))
    total = payload.get("total")
    return Page(
        items=[mapper(item) for item in items],
        total=total if total is not None else len(items),
    )


def map_user(user: Any) -> UserRef:
    """Map an audit user reference: object, bare id string or null."""
    if user is None:
        return None
    if isinstance(user, str):
        return user
    return UserReference(
        id=user.get("id", ""),
        email=user.get("email"),
        name=user.get("name"),
        profile_photo_url=user.get("profilePhotoUrl"),
        role=user.get("role"),
    )


def _audit(dto: Dto) -> dict[str, Any]:
    return {
        "created_at": dto.get("createdAt"),
        "updated_at": dto.get("updatedAt"),
        "created_by": map_user(dto.get("createdBy")),
        "updated_by": map_user(dto.get("updatedBy")),
    }


def map_attribute_bindings(bindings: Any) -> list[AttributeGroupBinding]:
    return [
        AttributeGroupBinding(
            id=binding.get("id"),
            attribute_group_id=binding["attributeGroupId"],
            inherited=bool(binding.get("inherited")),
            required=bool(binding.get("required")),
        )
        for binding in _list(bindings)
    ]


def _attribute_group_count(dto: Dto) -> int:
    count = dto.get("attributeGroupCount")
    if count is not None:
        return count
    return len(_list(dto.get("attributeGroupIds")))


def _taxonomy_fields(dto: Dto) -> dict[str, Any]:
    return {
        "id": dto["id"],
        "key": dto.get("key"),
        "name": dto.get("name") or "",
        "description": dto.get("description"),
        "name_localization_id": dto.get("nameLocalizationId"),
        "description_localization_id": dto.get("descriptionLocalizationId"),
        "attribute_group_ids": _list(dto.get("attributeGroupIds")),
        "attribute_group_bindings": map_attribute_bindings(dto.get("attributeGroupBindings")),
        "attribute_group_count": _attribute_group_count(dto),
    }


# =============================================================================
# Attributes
# =============================================================================


def _attribute_type(raw: Any) -> AttributeType:
    try:
        return AttributeType(raw)
    except ValueError:
        return AttributeType.TEXT


def map_attribute(dto: Dto) -> Attribute:
    options = dto.get("options")
    return Attribute(
        id=dto["id"],
        key=dto.get("key"),
        name=dto.get("name") or "",
        type=_attribute_type(dto.get("type")),
        required=bool(dto.get("isRequired", dto.get("required", False))),
        unique=bool(dto.get("isUnique", dto.get("unique", False))),
        options=list(options) if isinstance(options, list) else None,
        default_value=dto.get("defaultValue"),
        validation=dto.get("validationRules"),
        description=dto.get("description"),
        help_text=dto.get("helpText"),
        tags=_list(dto.get("tags")),
        ui_settings=dto.get("uiSettings"),
        **_audit(dto),
    )


def map_attribute_group(dto: Dto) -> AttributeGroup:
    attributes = [map_attribute(attr) for attr in _list(dto.get("attributes"))]
    attribute_count = dto.get("attributeCount")
    return AttributeGroup(
        id=dto["id"],
        key=dto.get("key"),
        name=dto.get("name") or "",
        description=dto.get("description"),
        note=dto.get("note"),
        attribute_ids=_list(dto.get("attributeIds")),
        attribute_count=attribute_count if attribute_count is not None else len(attributes),
        attributes=attributes,
        order=dto.get("displayOrder") or 0,
        tags=_list(dto.get("tags")),
        logo_url=dto.get("logoUrl"),
        **_audit(dto),
    )


# =============================================================================
# Taxonomy
# =============================================================================


def map_item_type(dto: Dto) -> ItemType:
    return ItemType(
        **_taxonomy_fields(dto),
        category_ids=_list(dto.get("categoryIds")),
        linked_family_ids=_list(dto.get("linkedFamilyIds")),
        lifecycle_status=dto.get("lifecycleStatus"),
        is_system_item_type=bool(dto.get("isSystemItemType")),
        **_audit(dto),
    )


def map_category(dto: Dto) -> Category:
    return Category(
        **_taxonomy_fields(dto),
        parent_category_id=dto.get("parentCategoryId"),
        hierarchy_path=_list(dto.get("hierarchyPath")),
        default_item_type_id=dto.get("defaultItemTypeId"),
        linked_item_type_ids=_list(dto.get("linkedItemTypeIds")),
        linked_family_ids=_list(dto.get("linkedFamilyIds")),
        is_system_category=bool(dto.get("isSystemCategory")),
        allow_item_creation=bool(dto.get("allowItemCreation")),
        **_audit(dto),
    )


def map_family(dto: Dto) -> Family:
    return Family(
        **_taxonomy_fields(dto),
        parent_family_id=dto.get("parentFamilyId"),
        hierarchy_path=_list(dto.get("hierarchyPath")),
        category_id=dto.get("categoryId"),
        is_system_family=bool(dto.get("isSystemFamily")),
        **_audit(dto),
    )


def map_hierarchy_node(dto: Dto) -> HierarchyNode:
    return HierarchyNode(
        id=dto["id"],
        key=dto.get("key"),
        name_localization_id=dto.get("nameLocalizationId"),
        name=dto.get("name") or "",
    )


def map_category_family_summary(dto: Dto) -> CategoryFamilySummary:
    return CategoryFamilySummary(
        id=dto["id"],
        key=dto.get("key"),
        name_localization_id=dto.get("nameLocalizationId"),
        name=dto.get("name") or "",
        full_path=dto.get("fullPath") or "",
        hierarchy=[map_hierarchy_node(node) for node in _list(dto.get("hierarchy"))],
    )


# =============================================================================
# Items
# =============================================================================


def _map_attribute_values(raw: Any) -> dict[str, AttributeValue]:
    """Attribute values arrive keyed by id or as a list of records."""
    values: dict[str, AttributeValue] = {}
    if isinstance(raw, list):
        for entry in raw:
            attribute_id = entry.get("attributeId")
            if attribute_id:
                values[attribute_id] = AttributeValue(
                    attribute_id=attribute_id,
                    value=entry.get("value"),
                    locale=entry.get("locale"),
                )
    elif isinstance(raw, dict):
        for attribute_id, entry in raw.items():
            if isinstance(entry, dict) and "value" in entry:
                values[attribute_id] = AttributeValue(
                    attribute_id=attribute_id,
                    value=entry.get("value"),
                    locale=entry.get("locale"),
                )
            else:
                values[attribute_id] = AttributeValue(attribute_id=attribute_id, value=entry)
    return values


def map_item(dto: Dto) -> Item:
    return Item(
        id=dto["id"],
        code=dto.get("code"),
        external_code=dto.get("externalCode"),
        sku=dto.get("sku"),
        name=dto.get("name"),
        item_type_id=dto.get("itemTypeId") or "",
        category_id=dto.get("categoryId"),
        family_id=dto.get("familyId"),
        status=dto.get("status") or "draft",
        version=dto.get("version") or 1,
        attributes=_map_attribute_values(dto.get("attributes", dto.get("attributeValues"))),
        **_audit(dto),
    )


# =============================================================================
# Associations
# =============================================================================


def _map_item_type_ref(dto: Dto | None) -> AssociationTypeItemRef | None:
    if not dto:
        return None
    return AssociationTypeItemRef(
        **_taxonomy_fields(dto),
        category_ids=_list(dto.get("categoryIds")),
        linked_family_ids=_list(dto.get("linkedFamilyIds")),
    )


def map_association_type(dto: Dto) -> AssociationType:
    return AssociationType(
        id=dto["id"],
        key=dto.get("key") or "",
        name=dto.get("name") or "",
        name_localization_id=dto.get("nameLocalizationId"),
        description=dto.get("description"),
        description_localization_id=dto.get("descriptionLocalizationId"),
        source_item_type_id=dto.get("sourceItemTypeId"),
        target_item_type_id=dto.get("targetItemTypeId"),
        source_item_type=_map_item_type_ref(dto.get("sourceItemType")),
        target_item_type=_map_item_type_ref(dto.get("targetItemType")),
        source_categories=[map_category_family_summary(s) for s in _list(dto.get("sourceCategories"))],
        target_categories=[map_category_family_summary(s) for s in _list(dto.get("targetCategories"))],
        source_families=[map_category_family_summary(s) for s in _list(dto.get("sourceFamilies"))],
        target_families=[map_category_family_summary(s) for s in _list(dto.get("targetFamilies"))],
        cardinality=dto.get("cardinality") or "many-to-many",
        is_required=bool(dto.get("isRequired")),
        direction=dto.get("direction") or "directed",
        metadata_schema=dto.get("metadataSchema"),
        **_audit(dto),
    )


def map_association_rule(dto: Dto) -> AssociationRule:
    return AssociationRule(
        id=dto["id"],
        association_type_id=dto.get("associationTypeId"),
        applies_to=dto.get("appliesTo") or "source",
        name=dto.get("name"),
        description=dto.get("description"),
        source_category_ids=_list(dto.get("sourceCategoryIds")),
        source_family_ids=_list(dto.get("sourceFamilyIds")),
        target_category_ids=_list(dto.get("targetCategoryIds")),
        target_family_ids=_list(dto.get("targetFamilyIds")),
        min_targets=dto.get("minTargets") or 0,
        max_targets=dto.get("maxTargets"),
        metadata_schema=dto.get("metadataSchema"),
        **_audit(dto),
    )


def map_association(dto: Dto) -> Association:
    return Association(
        id=dto["id"],
        association_type_id=dto["associationTypeId"],
        source_item_id=dto["sourceItemId"],
        target_item_id=dto["targetItemId"],
        metadata=dto.get("metadata"),
        order_index=dto.get("orderIndex"),
        **_audit(dto),
    )


def map_column_definition(dto: Dto, index: int) -> AssociationColumnDefinition:
    order = dto.get("order")
    return AssociationColumnDefinition(
        key=dto["key"],
        source=dto["source"],
        label_localization_id=dto.get("labelLocalizationId"),
        visible=bool(dto.get("visible")),
        order=order if order is not None else index,
        width=dto.get("width"),
        alignment=dto.get("alignment") or "start",
        options=dto.get("options"),
    )


def map_column_config(dto: Dto | None) -> AssociationColumnConfig | None:
    if not dto:
        return None
    return AssociationColumnConfig(
        id=dto.get("id"),
        association_type_id=dto.get("associationTypeId"),
        role=dto["role"],
        columns=[
            map_column_definition(column, index)
            for index, column in enumerate(_list(dto.get("columns")))
        ],
        created_at=dto.get("createdAt"),
        updated_at=dto.get("updatedAt"),
    )


# =============================================================================
# Users
# =============================================================================


def _without_nulls(dto: Dto) -> Dto:
    return {key: value for key, value in dto.items() if value is not None}


def map_user_summary(dto: Dto) -> UserSummary:
    return UserSummary.model_validate(_without_nulls(dto))


def map_user_list(dto: Any) -> UserListResponse:
    dto = dto if isinstance(dto, dict) else {}
    pagination = dto.get("pagination")
    return UserListResponse(
        items=[map_user_summary(user) for user in _list(dto.get("items"))],
        pagination=ApiPagination.model_validate(
            _without_nulls(pagination) if isinstance(pagination, dict) else {}
        ),
    )
