"""Attribute field widgets, rendering and value coercion.

Every ``AttributeType`` maps to exactly one ``FieldWidget``. The default
registry is checked for completeness at import time so a new attribute type
cannot silently render nothing.
"""

from __future__ import annotations

import json
import re
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, datetime, time
from enum import Enum
from typing import Any, Literal

from pim_console.domain.exceptions import (
    RegistryIncompleteError,
    UnknownAttributeTypeError,
    ValidationError,
)
from pim_console.schemas.entities import Attribute, AttributeType

RenderMode = Literal["edit", "view"]

EMPTY_DISPLAY = "—"

_COLOR_RE = re.compile(r"^#[0-9a-fA-F]{6}$")

MAX_RATING = 5


class InputKind(str, Enum):
    TEXT = "text"
    TEXTAREA = "textarea"
    NUMBER = "number"
    RADIO = "radio"
    DATE = "date"
    DATETIME = "datetime-local"
    TIME = "time"
    SELECT = "select"
    CHECKBOXES = "checkboxes"
    FILE = "file"
    CODE = "code"
    COLOR = "color"
    STARS = "stars"
    STATIC = "static"


@dataclass(frozen=True)
class FieldWidget:
    """How one attribute type is edited.

    Attributes:
        kind: Input control
        placeholder: Template, ``{name}`` is the lower-cased attribute name
        uses_options: Choices come from ``Attribute.options``
        accept: File input filter
        editable: False for types that are always displayed read-only
    """

    kind: InputKind
    placeholder: str | None = None
    uses_options: bool = False
    accept: str | None = None
    editable: bool = True

    def placeholder_for(self, attribute: Attribute) -> str | None:
        if self.placeholder is None:
            return None
        return self.placeholder.format(name=(attribute.name or attribute.key or "").lower())


@dataclass(frozen=True)
class RenderedField:
    attribute_id: str
    label: str
    widget: FieldWidget
    value: Any
    display_value: str
    read_only: bool
    required: bool
    placeholder: str | None = None
    options: tuple[str, ...] = ()
    description: str | None = None


class AttributeFieldRegistry:
    """Maps attribute types to their field widgets."""

    def __init__(self) -> None:
        self._widgets: dict[AttributeType, FieldWidget] = {}

    def register(self, attribute_type: AttributeType | str, widget: FieldWidget) -> None:
        """Register the widget for an attribute type.

        Raises:
            ValueError: Unknown attribute type or not a FieldWidget
        """
        if not isinstance(widget, FieldWidget):
            raise ValueError(f"widget must be a FieldWidget, got {widget}")
        self._widgets[AttributeType(attribute_type)] = widget

    def get(self, attribute_type: AttributeType | str) -> FieldWidget:
        """Look up a widget.

        Raises:
            UnknownAttributeTypeError: No widget for the type
        """
        try:
            return self._widgets[AttributeType(attribute_type)]
        except (KeyError, ValueError) as e:
            raise UnknownAttributeTypeError(
                f"No field widget registered for attribute type '{attribute_type}'"
            ) from e

    def available_types(self) -> list[AttributeType]:
        return list(self._widgets.keys())

    def verify_complete(self) -> None:
        """Raises RegistryIncompleteError when some attribute type has no widget."""
        missing = [t.value for t in AttributeType if t not in self._widgets]
        if missing:
            raise RegistryIncompleteError("AttributeFieldRegistry", missing)


def _build_default_registry() -> AttributeFieldRegistry:
    registry = AttributeFieldRegistry()
    enter = "Enter {name}"
    json_text = FieldWidget(InputKind.CODE, placeholder="Enter valid JSON")

    registry.register(AttributeType.TEXT, FieldWidget(InputKind.TEXT, placeholder=enter))
    registry.register(AttributeType.NUMBER, FieldWidget(InputKind.NUMBER, placeholder=enter))
    registry.register(AttributeType.BOOLEAN, FieldWidget(InputKind.RADIO))
    registry.register(AttributeType.DATE, FieldWidget(InputKind.DATE))
    registry.register(AttributeType.DATETIME, FieldWidget(InputKind.DATETIME))
    registry.register(AttributeType.TIME, FieldWidget(InputKind.TIME))
    registry.register(
        AttributeType.SELECT,
        FieldWidget(InputKind.SELECT, placeholder="Select {name}", uses_options=True),
    )
    registry.register(AttributeType.MULTISELECT, FieldWidget(InputKind.CHECKBOXES, uses_options=True))
    registry.register(AttributeType.FILE, FieldWidget(InputKind.FILE))
    registry.register(AttributeType.ATTACHMENT, FieldWidget(InputKind.FILE))
    registry.register(AttributeType.IMAGE, FieldWidget(InputKind.FILE, accept="image/*"))
    registry.register(AttributeType.OBJECT, json_text)
    registry.register(AttributeType.ARRAY, json_text)
    registry.register(AttributeType.JSON, json_text)
    registry.register(AttributeType.TABLE, json_text)
    registry.register(AttributeType.FORMULA, FieldWidget(InputKind.STATIC, editable=False))
    registry.register(AttributeType.EXPRESSION, FieldWidget(InputKind.STATIC, editable=False))
    registry.register(AttributeType.COLOR, FieldWidget(InputKind.COLOR, placeholder="#ffffff"))
    registry.register(AttributeType.RICH_TEXT, FieldWidget(InputKind.TEXTAREA, placeholder=enter))
    registry.register(AttributeType.RATING, FieldWidget(InputKind.STARS))
    registry.register(AttributeType.BARCODE, FieldWidget(InputKind.TEXT, placeholder="Enter barcode"))
    registry.register(AttributeType.QR, FieldWidget(InputKind.TEXT, placeholder="Enter QR code data"))
    registry.register(AttributeType.READONLY, FieldWidget(InputKind.STATIC, editable=False))
    return registry


default_field_registry = _build_default_registry()
default_field_registry.verify_complete()


# =============================================================================
# Rendering
# =============================================================================


def _is_blank(value: Any) -> bool:
    return value is None or value == "" or value == [] or value == {}


def display_value(attribute: Attribute, value: Any) -> str:
    """Text shown for a value in view mode."""
    kind = attribute.type
    if kind in (AttributeType.JSON, AttributeType.OBJECT, AttributeType.ARRAY, AttributeType.TABLE):
        return json.dumps(value if value is not None else {}, indent=2)
    if _is_blank(value):
        return EMPTY_DISPLAY
    if kind is AttributeType.BOOLEAN:
        return "Yes" if value else "No"
    if kind is AttributeType.MULTISELECT and isinstance(value, (list, tuple)):
        return ", ".join(str(v) for v in value)
    if kind is AttributeType.IMAGE:
        return "Image attached"
    if kind in (AttributeType.FILE, AttributeType.ATTACHMENT):
        return "File attached"
    if kind is AttributeType.RATING:
        return f"{value}/{MAX_RATING}"
    if isinstance(value, (date, time)):
        return value.isoformat()
    return str(value)


def render_attribute(
    attribute: Attribute,
    value: Any = None,
    mode: RenderMode = "edit",
    *,
    required: bool | None = None,
    registry: AttributeFieldRegistry | None = None,
) -> RenderedField:
    """Describe how an attribute is shown.

    Args:
        attribute: Definition
        value: Current value
        mode: ``view`` forces read-only
        required: Effective requirement, when resolved; defaults to the
            declared flag
        registry: Widget registry, the default one when omitted

    Raises:
        UnknownAttributeTypeError: Type has no widget
    """
    widget = (registry or default_field_registry).get(attribute.type)
    return RenderedField(
        attribute_id=attribute.id,
        label=attribute.name or attribute.key or attribute.id,
        widget=widget,
        value=value,
        display_value=display_value(attribute, value),
        read_only=mode == "view" or not widget.editable,
        required=attribute.required if required is None else required,
        placeholder=widget.placeholder_for(attribute),
        options=tuple(attribute.options or ()) if widget.uses_options else (),
        description=attribute.description,
    )


# =============================================================================
# Coercion
# =============================================================================


def _invalid(attribute: Attribute, message: str) -> ValidationError:
    return ValidationError(f"{attribute.name or attribute.id}: {message}", field=attribute.id)


def _coerce_number(attribute: Attribute, raw: Any) -> int | float:
    if isinstance(raw, bool):
        raise _invalid(attribute, "expected a number")
    if isinstance(raw, (int, float)):
        return raw
    try:
        number = float(str(raw).strip())
    except ValueError as e:
        raise _invalid(attribute, f"expected a number, got {raw!r}") from e
    return int(number) if number.is_integer() else number


def _coerce_boolean(attribute: Attribute, raw: Any) -> bool:
    if isinstance(raw, bool):
        return raw
    text = str(raw).strip().lower()
    if text in ("true", "yes", "1"):
        return True
    if text in ("false", "no", "0"):
        return False
    raise _invalid(attribute, f"expected true or false, got {raw!r}")


def _coerce_temporal(attribute: Attribute, raw: Any) -> str:
    parsers = {
        AttributeType.DATE: date.fromisoformat,
        AttributeType.DATETIME: datetime.fromisoformat,
        AttributeType.TIME: time.fromisoformat,
    }
    parse = parsers[attribute.type]
    if isinstance(raw, (date, time)):
        return raw.isoformat()
    try:
        return parse(str(raw).strip()).isoformat()
    except ValueError as e:
        raise _invalid(attribute, f"expected an ISO {attribute.type.value}, got {raw!r}") from e


def _coerce_select(attribute: Attribute, raw: Any) -> str:
    value = str(raw)
    options = attribute.options or []
    if options and value not in options:
        raise _invalid(attribute, f"{value!r} is not one of {options}")
    return value


def _coerce_multiselect(attribute: Attribute, raw: Any) -> list[str]:
    if isinstance(raw, str):
        values = [v.strip() for v in raw.split(",") if v.strip()]
    elif isinstance(raw, Iterable):
        values = [str(v) for v in raw]
    else:
        raise _invalid(attribute, "expected a list of options")
    options = attribute.options or []
    unknown = [v for v in values if options and v not in options]
    if unknown:
        raise _invalid(attribute, f"{unknown} not in {options}")
    return list(dict.fromkeys(values))


def _coerce_json(attribute: Attribute, raw: Any) -> Any:
    if not isinstance(raw, str):
        parsed = raw
    else:
        try:
            parsed = json.loads(raw)
        except json.JSONDecodeError as e:
            raise _invalid(attribute, "invalid JSON") from e
    if attribute.type is AttributeType.OBJECT and not isinstance(parsed, dict):
        raise _invalid(attribute, "expected a JSON object")
    if attribute.type in (AttributeType.ARRAY, AttributeType.TABLE) and not isinstance(parsed, list):
        raise _invalid(attribute, "expected a JSON array")
    return parsed


def _coerce_color(attribute: Attribute, raw: Any) -> str:
    value = str(raw).strip()
    if not _COLOR_RE.match(value):
        raise _invalid(attribute, f"expected a #rrggbb color, got {raw!r}")
    return value.lower()


def _coerce_rating(attribute: Attribute, raw: Any) -> int:
    number = _coerce_number(attribute, raw)
    if not float(number).is_integer() or not 0 <= number <= MAX_RATING:
        raise _invalid(attribute, f"rating must be an integer between 0 and {MAX_RATING}")
    return int(number)


_COERCERS = {
    AttributeType.NUMBER: _coerce_number,
    AttributeType.BOOLEAN: _coerce_boolean,
    AttributeType.DATE: _coerce_temporal,
    AttributeType.DATETIME: _coerce_temporal,
    AttributeType.TIME: _coerce_temporal,
    AttributeType.SELECT: _coerce_select,
    AttributeType.MULTISELECT: _coerce_multiselect,
    AttributeType.OBJECT: _coerce_json,
    AttributeType.ARRAY: _coerce_json,
    AttributeType.JSON: _coerce_json,
    AttributeType.TABLE: _coerce_json,
    AttributeType.COLOR: _coerce_color,
    AttributeType.RATING: _coerce_rating,
}


def coerce_attribute_value(attribute: Attribute, raw: Any) -> Any:
    """Validate and convert user input for an attribute.

    Blank input is allowed for every type and yields None. Text-like types
    are passed through unchanged.

    Raises:
        ValidationError: Input does not fit the attribute type
    """
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        return None
    coerce = _COERCERS.get(attribute.type)
    if coerce is None:
        return raw
    return coerce(attribute, raw)
