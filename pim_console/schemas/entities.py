"""View models for the PIM catalogue entities.

These are plain records: taxonomy nodes (item types, categories, families),
attribute definitions, items and the association graph.
"""

from enum import Enum
from typing import Any, Literal

from pydantic import Field

from pim_console.schemas.common import AuditedModel, ViewModel


class AttributeType(str, Enum):
    """Attribute value kinds."""

    # Basic
    TEXT = "text"
    NUMBER = "number"
    BOOLEAN = "boolean"
    DATE = "date"
    DATETIME = "datetime"
    TIME = "time"

    # Enumerations
    SELECT = "select"
    MULTISELECT = "multiselect"

    # Files / media
    FILE = "file"
    IMAGE = "image"
    ATTACHMENT = "attachment"

    # Composite
    OBJECT = "object"
    ARRAY = "array"
    JSON = "json"
    FORMULA = "formula"
    EXPRESSION = "expression"
    TABLE = "table"

    # Visual
    COLOR = "color"
    RICH_TEXT = "rich_text"
    RATING = "rating"
    BARCODE = "barcode"
    QR = "qr"

    READONLY = "readonly"


class ItemStatus(str, Enum):
    DRAFT = "draft"
    ACTIVE = "active"
    INACTIVE = "inactive"
    ARCHIVED = "archived"


class Cardinality(str, Enum):
    ONE_TO_ONE = "one-to-one"
    ONE_TO_MANY = "one-to-many"
    MANY_TO_ONE = "many-to-one"
    MANY_TO_MANY = "many-to-many"


class AssociationDirection(str, Enum):
    DIRECTED = "directed"
    BIDIRECTIONAL = "bidirectional"


# =============================================================================
# Attributes
# =============================================================================


class Attribute(AuditedModel):
    """Attribute definition.

    Attributes:
        type: Value kind, drives the field widget
        required: Declared flag; may be promoted by a required group binding
        options: Allowed values for select/multiselect
    """

    id: str
    key: str | None = None
    name: str = ""
    type: AttributeType = AttributeType.TEXT
    required: bool = False
    unique: bool = False
    options: list[str] | None = None
    default_value: Any = None
    validation: dict[str, Any] | None = None
    description: str | None = None
    help_text: str | None = None
    tags: list[str] = Field(default_factory=list)
    ui_settings: dict[str, Any] | None = None


class AttributeGroup(AuditedModel):
    """Named, reusable bundle of attribute definitions."""

    id: str
    key: str | None = None
    name: str = ""
    description: str | None = None
    note: str | None = None
    attribute_ids: list[str] = Field(default_factory=list)
    attribute_count: int = 0
    attributes: list[Attribute] = Field(default_factory=list)
    order: int = 0
    tags: list[str] = Field(default_factory=list)
    logo_url: str | None = None


class AttributeGroupBinding(ViewModel):
    """Links an attribute group to a taxonomy node."""

    id: str | None = None
    attribute_group_id: str
    inherited: bool = False
    required: bool = False


# =============================================================================
# Taxonomy
# =============================================================================


class TaxonomyNode(AuditedModel):
    """Fields shared by item types, categories and families."""

    id: str
    key: str | None = None
    name: str = ""
    description: str | None = None
    name_localization_id: str | None = None
    description_localization_id: str | None = None
    attribute_group_ids: list[str] = Field(default_factory=list)
    attribute_group_bindings: list[AttributeGroupBinding] = Field(default_factory=list)
    attribute_group_count: int = 0


class ItemType(TaxonomyNode):
    category_ids: list[str] = Field(default_factory=list)
    linked_family_ids: list[str] = Field(default_factory=list)
    lifecycle_status: str | None = None
    is_system_item_type: bool = False


class Category(TaxonomyNode):
    """Category node.

    ``hierarchy_path`` lists ancestor ids; ``parent_category_id`` points at
    the direct parent. Both are used to rebuild the lineage.
    """

    parent_category_id: str | None = None
    hierarchy_path: list[str] = Field(default_factory=list)
    default_item_type_id: str | None = None
    linked_item_type_ids: list[str] = Field(default_factory=list)
    linked_family_ids: list[str] = Field(default_factory=list)
    is_system_category: bool = False
    allow_item_creation: bool = False


class Family(TaxonomyNode):
    parent_family_id: str | None = None
    hierarchy_path: list[str] = Field(default_factory=list)
    category_id: str | None = None
    is_system_family: bool = False


class HierarchyNode(ViewModel):
    id: str
    key: str | None = None
    name_localization_id: str | None = None
    name: str = ""


class CategoryFamilySummary(HierarchyNode):
    hierarchy: list[HierarchyNode] = Field(default_factory=list)
    full_path: str = ""


# =============================================================================
# Items
# =============================================================================


class AttributeValue(ViewModel):
    attribute_id: str
    value: Any = None
    locale: str | None = None


class Item(AuditedModel):
    """Catalogue item instance.

    ``attributes`` is keyed by attribute id; ``version`` is bumped by the
    backend on every update.
    """

    id: str
    code: str | None = None
    external_code: str | None = None
    sku: str | None = None
    name: str | None = None
    item_type_id: str
    category_id: str | None = None
    family_id: str | None = None
    status: ItemStatus = ItemStatus.DRAFT
    version: int = 1
    attributes: dict[str, AttributeValue] = Field(default_factory=dict)


# =============================================================================
# Associations
# =============================================================================


class AssociationTypeItemRef(TaxonomyNode):
    category_ids: list[str] = Field(default_factory=list)
    linked_family_ids: list[str] = Field(default_factory=list)


class AssociationType(AuditedModel):
    """Directed relationship kind between two item types."""

    id: str
    key: str = ""
    name: str = ""
    name_localization_id: str | None = None
    description: str | None = None
    description_localization_id: str | None = None
    source_item_type_id: str | None = None
    target_item_type_id: str | None = None
    source_item_type: AssociationTypeItemRef | None = None
    target_item_type: AssociationTypeItemRef | None = None
    source_categories: list[CategoryFamilySummary] = Field(default_factory=list)
    target_categories: list[CategoryFamilySummary] = Field(default_factory=list)
    source_families: list[CategoryFamilySummary] = Field(default_factory=list)
    target_families: list[CategoryFamilySummary] = Field(default_factory=list)
    cardinality: Cardinality = Cardinality.MANY_TO_MANY
    is_required: bool = False
    direction: AssociationDirection = AssociationDirection.DIRECTED
    metadata_schema: dict[str, Any] | None = None


class AssociationRule(AuditedModel):
    """Scopes an association type to category/family sets with target bounds.

    Empty id lists are wildcards. ``max_targets`` of None or 0 means
    unbounded.
    """

    id: str
    association_type_id: str | None = None
    applies_to: Literal["source", "target"] = "source"
    name: str | None = None
    description: str | None = None
    source_category_ids: list[str] = Field(default_factory=list)
    source_family_ids: list[str] = Field(default_factory=list)
    target_category_ids: list[str] = Field(default_factory=list)
    target_family_ids: list[str] = Field(default_factory=list)
    min_targets: int = 0
    max_targets: int | None = None
    metadata_schema: dict[str, Any] | None = None


class Association(AuditedModel):
    """Materialized edge between two items."""

    id: str
    association_type_id: str
    source_item_id: str
    target_item_id: str
    metadata: dict[str, Any] | None = None
    order_index: int | float | None = None


class AssociationColumnDefinition(ViewModel):
    key: str
    source: str
    label_localization_id: str | None = None
    visible: bool = True
    order: int = 0
    width: int | None = None
    alignment: Literal["start", "center", "end"] = "start"
    options: dict[str, Any] | None = None


class AssociationColumnConfig(ViewModel):
    id: str | None = None
    association_type_id: str | None = None
    role: Literal["source", "target"]
    columns: list[AssociationColumnDefinition] = Field(default_factory=list)
    created_at: str | None = None
    updated_at: str | None = None
