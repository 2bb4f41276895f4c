"""Workflow action configuration forms.

Each ``ActionType`` has a form template: an ordered list of ``FieldSpec``
describing the keys of the node's ``action_config`` bag. The default
registry is verified at import time so every action type renders a form.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from pim_console.domain.exceptions import RegistryIncompleteError, UnknownActionTypeError
from pim_console.schemas.workflow import ActionType, WorkflowNodeConfig

ConfigBag = Mapping[str, Any]
VisibleWhen = Callable[[ConfigBag], bool]


class ActionCategory(str, Enum):
    ITEM = "item"
    BOARD = "board"
    NOTIFICATION = "notification"
    EXTERNAL = "external"
    DATA = "data"


CATEGORY_LABELS: dict[ActionCategory, str] = {
    ActionCategory.ITEM: "Item operations",
    ActionCategory.BOARD: "Board operations",
    ActionCategory.NOTIFICATION: "Notifications",
    ActionCategory.EXTERNAL: "External systems",
    ActionCategory.DATA: "Data processing",
}


@dataclass(frozen=True)
class ActionDef:
    action_type: ActionType
    label: str
    category: ActionCategory


ACTION_CATALOG: tuple[ActionDef, ...] = (
    ActionDef(ActionType.CREATE_ITEM, "Create item", ActionCategory.ITEM),
    ActionDef(ActionType.UPDATE_ITEM, "Update item", ActionCategory.ITEM),
    ActionDef(ActionType.DELETE_ITEM, "Delete item", ActionCategory.ITEM),
    ActionDef(ActionType.CLONE_ITEM, "Clone item", ActionCategory.ITEM),
    ActionDef(ActionType.FIND_ITEMS, "Find items", ActionCategory.ITEM),
    ActionDef(ActionType.BULK_UPDATE_ITEMS, "Bulk update items", ActionCategory.ITEM),
    ActionDef(ActionType.UPDATE_FIELD, "Update field (quick)", ActionCategory.ITEM),
    ActionDef(ActionType.ASSIGN_ATTRIBUTE, "Assign attribute", ActionCategory.ITEM),
    ActionDef(ActionType.CREATE_BOARD_TASK, "Create board task", ActionCategory.BOARD),
    ActionDef(ActionType.UPDATE_BOARD_TASK, "Update board task", ActionCategory.BOARD),
    ActionDef(ActionType.MOVE_BOARD_TASK, "Move board task", ActionCategory.BOARD),
    ActionDef(ActionType.ASSIGN_BOARD_TASK, "Assign board task", ActionCategory.BOARD),
    ActionDef(ActionType.ARCHIVE_BOARD_TASK, "Archive board task", ActionCategory.BOARD),
    ActionDef(ActionType.SEND_NOTIFICATION, "Send notification", ActionCategory.NOTIFICATION),
    ActionDef(ActionType.SEND_EMAIL, "Send email", ActionCategory.NOTIFICATION),
    ActionDef(ActionType.WEBHOOK, "Send webhook", ActionCategory.EXTERNAL),
    ActionDef(ActionType.HTTP_REQUEST, "HTTP request", ActionCategory.EXTERNAL),
    ActionDef(ActionType.TRANSFORM_DATA, "Transform data", ActionCategory.DATA),
    ActionDef(ActionType.SET_VARIABLE, "Set variable", ActionCategory.DATA),
    ActionDef(ActionType.LOG, "Write log", ActionCategory.DATA),
    ActionDef(ActionType.FIRE_EVENT, "Fire event", ActionCategory.DATA),
)


def catalog_by_category() -> dict[ActionCategory, list[ActionDef]]:
    """Catalog entries grouped for the action picker, in category order."""
    grouped: dict[ActionCategory, list[ActionDef]] = {c: [] for c in ActionCategory}
    for entry in ACTION_CATALOG:
        grouped[entry.category].append(entry)
    return {c: entries for c, entries in grouped.items() if entries}


class FieldKind(str, Enum):
    TEXT = "text"
    TEXTAREA = "textarea"
    NUMBER = "number"
    SELECT = "select"
    CHECKBOX = "checkbox"
    JSON = "json"
    ITEM_TYPE = "item_type"
    CATEGORY = "category"
    FAMILY = "family"
    ATTRIBUTE_VALUES = "attribute_values"


@dataclass(frozen=True)
class FieldSpec:
    """One input of an action form.

    Attributes:
        key: Key in the ``action_config`` bag
        options: (value, label) pairs for select fields
        visible_when: Predicate over the current bag; always shown when None
    """

    key: str
    label: str
    kind: FieldKind = FieldKind.TEXT
    required: bool = False
    placeholder: str | None = None
    default: Any = None
    options: tuple[tuple[str, str], ...] = ()
    visible_when: VisibleWhen | None = field(default=None, compare=False)

    def is_visible(self, bag: ConfigBag) -> bool:
        return self.visible_when is None or self.visible_when(bag)

    def value_in(self, bag: ConfigBag) -> Any:
        return bag.get(self.key, self.default)


class ActionFormRegistry:
    """Maps action types to their form templates."""

    def __init__(self) -> None:
        self._forms: dict[ActionType, tuple[FieldSpec, ...]] = {}

    def register(self, action_type: ActionType | str, fields: Iterable[FieldSpec]) -> None:
        """Register the form of an action type.

        Raises:
            ValueError: Unknown action type, or duplicate field keys
        """
        fields = tuple(fields)
        keys = [f.key for f in fields]
        if len(keys) != len(set(keys)):
            raise ValueError(f"Duplicate field keys in form for '{action_type}': {keys}")
        self._forms[ActionType(action_type)] = fields

    def get(self, action_type: ActionType | str) -> tuple[FieldSpec, ...]:
        """Form template of an action type.

        Raises:
            UnknownActionTypeError: No form registered for the tag
        """
        try:
            return self._forms[ActionType(action_type)]
        except (KeyError, ValueError) as e:
            raise UnknownActionTypeError(f"No form registered for action type '{action_type}'") from e

    def available(self) -> list[ActionType]:
        return list(self._forms.keys())

    def verify_complete(self) -> None:
        """Raises RegistryIncompleteError when some action type has no form."""
        missing = [t.value for t in ActionType if t not in self._forms]
        if missing:
            raise RegistryIncompleteError("ActionFormRegistry", missing)


# =============================================================================
# Default templates
# =============================================================================

ITEM_ID_PLACEHOLDER = "{{trigger.item.id}}"
TASK_ID_PLACEHOLDER = "{{trigger.taskId}}"

HTTP_METHOD_OPTIONS = tuple((m, m) for m in ("GET", "POST", "PUT", "PATCH", "DELETE"))
PRIORITY_OPTIONS = (("low", "Low"), ("medium", "Medium"), ("high", "High"), ("critical", "Critical"))
RECIPIENT_TYPE_OPTIONS = (("user", "Specific user"), ("role", "Role"), ("expression", "Template expression"))
AUTH_TYPE_OPTIONS = (("none", "None"), ("bearer", "Bearer token"), ("basic", "Basic auth"), ("apiKey", "API key"))
TRANSFORM_OPTIONS = (("pick", "Pick fields"), ("filter", "Filter"), ("flatten", "Flatten"), ("merge", "Merge"))
LOG_LEVEL_OPTIONS = (("info", "Info"), ("warn", "Warning"), ("error", "Error"))


def _has(*keys: str) -> VisibleWhen:
    return lambda bag: all(bag.get(k) for k in keys)


def _equals(key: str, value: str, default: str | None = None) -> VisibleWhen:
    return lambda bag: bag.get(key, default) == value


def _item_id(label: str = "Item ID") -> FieldSpec:
    return FieldSpec("itemId", label, required=True, placeholder=ITEM_ID_PLACEHOLDER)


def _task_id() -> FieldSpec:
    return FieldSpec("taskId", "Task ID", required=True, placeholder=TASK_ID_PLACEHOLDER)


def _scope_filters(prefix: str = "") -> list[FieldSpec]:
    return [
        FieldSpec("categoryIds", f"{prefix}Category IDs (comma separated)", placeholder="id1,id2"),
        FieldSpec("familyIds", f"{prefix}Family IDs (comma separated)", placeholder="id1,id2"),
    ]


def _build_default_registry() -> ActionFormRegistry:
    registry = ActionFormRegistry()

    # Items
    registry.register(ActionType.CREATE_ITEM, [
        FieldSpec("itemTypeId", "Item type", FieldKind.ITEM_TYPE, required=True),
        FieldSpec("categoryId", "Category", FieldKind.CATEGORY, visible_when=_has("itemTypeId")),
        FieldSpec("familyId", "Family", FieldKind.FAMILY, visible_when=_has("itemTypeId", "categoryId")),
        FieldSpec("attributes", "Attributes", FieldKind.ATTRIBUTE_VALUES, default={}, visible_when=_has("itemTypeId")),
    ])
    registry.register(ActionType.UPDATE_ITEM, [
        _item_id(),
        FieldSpec("itemTypeId", "Item type for attribute schema", FieldKind.ITEM_TYPE),
        FieldSpec("categoryId", "New category", placeholder="{{trigger.item.categoryId}} or ID"),
        FieldSpec("familyId", "New family", placeholder="{{trigger.item.familyId}} or ID"),
        FieldSpec("bumpVersion", "Bump version", FieldKind.CHECKBOX, default=False),
        FieldSpec("attributes", "Attributes", FieldKind.ATTRIBUTE_VALUES, default={}, visible_when=_has("itemTypeId")),
    ])
    registry.register(ActionType.DELETE_ITEM, [_item_id()])
    registry.register(ActionType.CLONE_ITEM, [
        _item_id("Source item ID"),
        FieldSpec("itemTypeId", "Item type for attribute schema", FieldKind.ITEM_TYPE),
        FieldSpec("overrides", "Attribute overrides", FieldKind.ATTRIBUTE_VALUES, default={}, visible_when=_has("itemTypeId")),
    ])
    registry.register(ActionType.FIND_ITEMS, [
        FieldSpec("itemTypeId", "Item type", FieldKind.ITEM_TYPE),
        *_scope_filters(),
        FieldSpec("limit", "Limit", FieldKind.NUMBER, default=50),
    ])
    registry.register(ActionType.BULK_UPDATE_ITEMS, [
        FieldSpec("itemTypeId", "Item type", FieldKind.ITEM_TYPE, required=True),
        *_scope_filters("Filter: "),
        FieldSpec("updateCategoryId", "New category ID"),
        FieldSpec("updateFamilyId", "New family ID"),
        FieldSpec("limit", "Limit", FieldKind.NUMBER, default=50),
    ])
    registry.register(ActionType.UPDATE_FIELD, [
        _item_id(),
        FieldSpec("attributeKey", "Attribute key", required=True, placeholder="status"),
        FieldSpec("value", "New value", required=True, placeholder="approved or {{trigger.value}}"),
    ])
    registry.register(ActionType.ASSIGN_ATTRIBUTE, [
        _item_id(),
        FieldSpec("attributeId", "Attribute ID", required=True),
        FieldSpec("value", "Value", required=True, placeholder="{{trigger.value}} or a static value"),
    ])

    # Boards
    registry.register(ActionType.CREATE_BOARD_TASK, [
        FieldSpec("boardId", "Board ID", required=True, placeholder="{{trigger.boardId}} or ID"),
        FieldSpec("title", "Title", required=True, placeholder="{{trigger.item.name}} task"),
        FieldSpec("columnId", "Target column ID", placeholder="First column when empty"),
        FieldSpec("description", "Description", FieldKind.TEXTAREA),
        FieldSpec("priority", "Priority", FieldKind.SELECT, options=PRIORITY_OPTIONS),
        FieldSpec("assigneeId", "Assignee ID", placeholder="{{trigger.assigneeId}} or user ID"),
        FieldSpec("dueDate", "Due date", placeholder="2024-12-31 or {{trigger.dueDate}}"),
    ])
    registry.register(ActionType.UPDATE_BOARD_TASK, [
        _task_id(),
        FieldSpec("title", "New title", placeholder="Leave empty to keep"),
        FieldSpec("priority", "Priority", FieldKind.SELECT, options=PRIORITY_OPTIONS),
        FieldSpec("dueDate", "Due date", placeholder="2024-12-31 or {{trigger.dueDate}}"),
    ])
    registry.register(ActionType.MOVE_BOARD_TASK, [
        _task_id(),
        FieldSpec("targetColumnId", "Target column ID", required=True),
        FieldSpec("targetOrder", "Order in column", FieldKind.NUMBER, placeholder="Appended when empty"),
    ])
    registry.register(ActionType.ASSIGN_BOARD_TASK, [
        _task_id(),
        FieldSpec("assigneeId", "Assignee ID", placeholder="{{trigger.userId}}, empty to unassign"),
    ])
    registry.register(ActionType.ARCHIVE_BOARD_TASK, [_task_id()])

    # Notifications
    registry.register(ActionType.SEND_NOTIFICATION, [
        FieldSpec("eventKey", "Notification event key", required=True, placeholder="item.approved"),
        FieldSpec("recipientType", "Recipient type", FieldKind.SELECT, default="user", options=RECIPIENT_TYPE_OPTIONS),
        FieldSpec("recipient", "Recipient"),
        FieldSpec("dataJson", "Extra data (JSON)", FieldKind.JSON, default="{}"),
    ])
    registry.register(ActionType.SEND_EMAIL, [
        FieldSpec("to", "To", required=True, placeholder="user@example.com"),
        FieldSpec("subject", "Subject", required=True, placeholder="{{trigger.item.name}} updated"),
        FieldSpec("body", "Body", FieldKind.TEXTAREA, required=True),
        FieldSpec("cc", "CC"),
        FieldSpec("bcc", "BCC"),
    ])

    # External systems
    registry.register(ActionType.WEBHOOK, [
        FieldSpec("url", "URL", required=True, placeholder="https://api.example.com/hook"),
        FieldSpec("method", "HTTP method", FieldKind.SELECT, default="POST", options=HTTP_METHOD_OPTIONS),
        FieldSpec("headersJson", "Headers (JSON)", FieldKind.JSON, default="{}"),
        FieldSpec("bodyJson", "Body (JSON)", FieldKind.JSON, default="{}"),
    ])
    registry.register(ActionType.HTTP_REQUEST, [
        FieldSpec("url", "URL", required=True, placeholder="https://api.example.com/data"),
        FieldSpec("method", "HTTP method", FieldKind.SELECT, default="GET", options=HTTP_METHOD_OPTIONS),
        FieldSpec("authType", "Auth type", FieldKind.SELECT, default="none", options=AUTH_TYPE_OPTIONS),
        FieldSpec("authToken", "Token", visible_when=_equals("authType", "bearer")),
        FieldSpec("authUsername", "Username", visible_when=_equals("authType", "basic")),
        FieldSpec("authPassword", "Password", visible_when=_equals("authType", "basic")),
        FieldSpec("apiKeyHeader", "Header name", placeholder="X-API-Key", visible_when=_equals("authType", "apiKey")),
        FieldSpec("apiKeyValue", "API key value", visible_when=_equals("authType", "apiKey")),
        FieldSpec("headersJson", "Headers (JSON)", FieldKind.JSON, default="{}"),
        FieldSpec("bodyJson", "Body (JSON)", FieldKind.JSON, default="{}"),
        FieldSpec("retryCount", "Retry count", FieldKind.NUMBER, default=0),
        FieldSpec("timeout", "Timeout (ms)", FieldKind.NUMBER, default=30000),
    ])

    # Data
    registry.register(ActionType.TRANSFORM_DATA, [
        FieldSpec("sourceExpression", "Source expression", placeholder="{{steps.find_items.items}}"),
        FieldSpec("operation", "Operation", FieldKind.SELECT, default="pick", options=TRANSFORM_OPTIONS),
        FieldSpec("pickKeys", "Fields (comma separated)", placeholder="name, status, categoryId",
                  visible_when=_equals("operation", "pick", "pick")),
        FieldSpec("filterKey", "Filter field", placeholder="status", visible_when=_equals("operation", "filter", "pick")),
        FieldSpec("filterValue", "Filter value", placeholder="active", visible_when=_equals("operation", "filter", "pick")),
        FieldSpec("targetExpression", "Target expression", placeholder="{{steps.other_node.result}}",
                  visible_when=_equals("operation", "merge", "pick")),
    ])
    registry.register(ActionType.SET_VARIABLE, [
        FieldSpec("variableName", "Variable name", required=True, placeholder="myVar"),
        FieldSpec("value", "Value", required=True, placeholder="{{trigger.item.id}} or a static value"),
    ])
    registry.register(ActionType.LOG, [
        FieldSpec("message", "Message", FieldKind.TEXTAREA, required=True),
        FieldSpec("level", "Level", FieldKind.SELECT, default="info", options=LOG_LEVEL_OPTIONS),
    ])
    registry.register(ActionType.FIRE_EVENT, [
        FieldSpec("eventKey", "Event key", required=True, placeholder="item.approved"),
        FieldSpec("payloadJson", "Extra payload (JSON)", FieldKind.JSON, default="{}"),
    ])
    return registry


default_action_registry = _build_default_registry()
default_action_registry.verify_complete()


# =============================================================================
# Rendering and reducers
# =============================================================================


def render_action_form(
    config: WorkflowNodeConfig,
    registry: ActionFormRegistry | None = None,
) -> list[FieldSpec]:
    """Visible fields for the node's action type; none before one is picked.

    Raises:
        UnknownActionTypeError: The tag has no registered form
    """
    if config.action_type is None:
        return []
    fields = (registry or default_action_registry).get(config.action_type)
    return [f for f in fields if f.is_visible(config.action_config)]


def change_action_type(config: WorkflowNodeConfig, action_type: ActionType | str | None) -> WorkflowNodeConfig:
    """Pick an action; the config bag always starts empty."""
    new_type = ActionType(action_type) if action_type else None
    return config.model_copy(update={"action_type": new_type, "action_config": {}})


def _with_bag(config: WorkflowNodeConfig, bag: dict[str, Any]) -> WorkflowNodeConfig:
    return config.model_copy(update={"action_config": bag})


def update_action_config(config: WorkflowNodeConfig, key: str, value: Any) -> WorkflowNodeConfig:
    """Write one key of the bag.

    For ``create_item`` the taxonomy fields cascade: a new item type resets
    category, family and attribute values; a new category resets family and
    attribute values; a new family resets attribute values.
    """
    bag = dict(config.action_config)
    if config.action_type is ActionType.CREATE_ITEM:
        if key == "itemTypeId":
            return _with_bag(config, {"itemTypeId": value, "attributes": {}})
        if key == "categoryId":
            bag.update(categoryId=value, familyId="", attributes={})
            return _with_bag(config, bag)
        if key == "familyId":
            bag.update(familyId=value, attributes={})
            return _with_bag(config, bag)
    bag[key] = value
    return _with_bag(config, bag)


def attribute_values_key(action_type: ActionType | None) -> str:
    return "overrides" if action_type is ActionType.CLONE_ITEM else "attributes"


def set_attribute_override(config: WorkflowNodeConfig, attribute_key: str, value: Any) -> WorkflowNodeConfig:
    """Set one attribute value: clone overrides, or create/update values."""
    bag_key = attribute_values_key(config.action_type)
    bag = dict(config.action_config)
    values = dict(bag.get(bag_key) or {})
    values[attribute_key] = value
    bag[bag_key] = values
    return _with_bag(config, bag)


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def missing_required_fields(
    config: WorkflowNodeConfig,
    registry: ActionFormRegistry | None = None,
) -> list[str]:
    """Keys of visible required fields left blank."""
    return [
        f.key
        for f in render_action_form(config, registry)
        if f.required and _is_blank(f.value_in(config.action_config))
    ]
