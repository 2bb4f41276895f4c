"""Exception hierarchy for the console core."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from pim_console.schemas.entities import Association, Item

GENERIC_ERROR_MESSAGE = "Unexpected error"


class PimConsoleError(Exception):
    """Base class for all console errors."""


class ApiError(PimConsoleError):
    """Raised when a REST call fails (HTTP error status or transport failure).

    Attributes:
        message: Best-effort human readable message
        code: Backend error code (``UNKNOWN_ERROR`` when absent)
        status: HTTP status (0 for transport failures)
        details: Raw ``error.details`` or the response body
        fields: Per-field validation errors sent by the backend
    """

    def __init__(
        self,
        message: str,
        code: str = "UNKNOWN_ERROR",
        status: int = 0,
        details: Any = None,
        fields: list[dict[str, Any]] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.status = status
        self.details = details
        self.fields = fields or []


class NotFoundError(ApiError):
    """Raised for HTTP 404 responses."""


class ValidationError(PimConsoleError):
    """Client-side validation failure, recoverable by user correction."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.field = field


class StepValidationError(ValidationError):
    """Raised when a wizard step blocks forward navigation."""

    def __init__(self, step: str, message: str, field: str | None = None) -> None:
        super().__init__(message, field=field)
        self.step = step


class CardinalityError(ValidationError):
    """Raised when a rule selection violates its min/max target bounds."""

    def __init__(
        self,
        rule_id: str,
        selected: int,
        min_targets: int,
        max_targets: int | None,
    ) -> None:
        if selected < min_targets:
            message = (
                f"Association rule {rule_id} needs at least {min_targets} "
                f"target(s), {selected} selected"
            )
        else:
            message = (
                f"Association rule {rule_id} allows at most {max_targets} "
                f"target(s), {selected} selected"
            )
        super().__init__(message, field=rule_id)
        self.rule_id = rule_id
        self.selected = selected
        self.min_targets = min_targets
        self.max_targets = max_targets


class LineageMismatchError(PimConsoleError):
    """Raised in strict mode when hierarchy_path and parent pointers disagree."""

    def __init__(self, node_id: str, from_path: list[str], from_parents: list[str]) -> None:
        super().__init__(
            f"Lineage of {node_id} is inconsistent: hierarchy_path={from_path} "
            f"parent chain={from_parents}"
        )
        self.node_id = node_id
        self.from_path = from_path
        self.from_parents = from_parents


class UnknownActionTypeError(PimConsoleError):
    """Raised when no form template is registered for an action type."""


class UnknownAttributeTypeError(PimConsoleError):
    """Raised when no field widget is registered for an attribute type."""


class RegistryIncompleteError(PimConsoleError):
    """Raised at startup when some tags have no registered handler."""

    def __init__(self, registry: str, missing: list[str]) -> None:
        super().__init__(f"{registry} has no handler for: {sorted(missing)}")
        self.registry = registry
        self.missing = missing


class AssociationSubmissionError(PimConsoleError):
    """An association failed after the item was already created.

    Nothing is rolled back: the created item and every association created
    before the failure are left in place and reported here.
    """

    def __init__(
        self,
        item: Item,
        created_associations: list[Association],
        draft: Any,
        cause: Exception,
    ) -> None:
        super().__init__(
            f"Item {item.id} was created but association "
            f"{len(created_associations) + 1} failed: {describe_error(cause)}"
        )
        self.item = item
        self.created_associations = created_associations
        self.draft = draft
        self.cause = cause


def describe_error(exc: BaseException, fallback: str | None = None) -> str:
    """Best-effort message extraction for user-visible errors."""
    if isinstance(exc, (ApiError, ValidationError)) and exc.message:
        return exc.message
    if fallback:
        return fallback
    return GENERIC_ERROR_MESSAGE
