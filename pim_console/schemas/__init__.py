"""Pydantic view models for the PIM REST resources."""

from pim_console.schemas.common import AuditedModel, Page, UserRef, UserReference, ViewModel
from pim_console.schemas.entities import (
    Association,
    AssociationColumnConfig,
    AssociationColumnDefinition,
    AssociationDirection,
    AssociationRule,
    AssociationType,
    AssociationTypeItemRef,
    Attribute,
    AttributeGroup,
    AttributeGroupBinding,
    AttributeType,
    AttributeValue,
    Cardinality,
    Category,
    CategoryFamilySummary,
    Family,
    HierarchyNode,
    Item,
    ItemStatus,
    ItemType,
    TaxonomyNode,
)
from pim_console.schemas.users import (
    UserListResponse,
    UserRoleUpdateRequest,
    UserSummary,
    UserUpdateRequest,
)
from pim_console.schemas.workflow import ActionType, WorkflowNodeConfig

__all__ = [
    "ActionType",
    "Association",
    "AssociationColumnConfig",
    "AssociationColumnDefinition",
    "AssociationDirection",
    "AssociationRule",
    "AssociationType",
    "AssociationTypeItemRef",
    "Attribute",
    "AttributeGroup",
    "AttributeGroupBinding",
    "AttributeType",
    "AttributeValue",
    "AuditedModel",
    "Cardinality",
    "Category",
    "CategoryFamilySummary",
    "Family",
    "HierarchyNode",
    "Item",
    "ItemStatus",
    "ItemType",
    "Page",
    "TaxonomyNode",
    "UserListResponse",
    "UserRef",
    "UserReference",
    "UserRoleUpdateRequest",
    "UserSummary",
    "UserUpdateRequest",
    "ViewModel",
    "WorkflowNodeConfig",
]
