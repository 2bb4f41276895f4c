"""Common schemas shared by every resource."""

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class ViewModel(BaseModel):
    """Base for frontend view models.

    Attributes are snake_case; serialization with ``by_alias=True`` produces
    the camelCase keys the backend speaks.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class Page(ViewModel, Generic[T]):
    """List endpoint payload: ``{items, total}``."""

    items: list[T] = Field(default_factory=list)
    total: int = 0


class UserReference(ViewModel):
    """Compact user summary attached to audited entities."""

    id: str
    email: str | None = None
    name: str | None = None
    profile_photo_url: str | None = None
    role: Any = None


# created_by / updated_by: full reference, bare user id, or unknown
UserRef = UserReference | str | None


class AuditedModel(ViewModel):
    """Timestamps and authorship present on every managed entity."""

    created_at: str | None = None
    updated_at: str | None = None
    created_by: UserRef = None
    updated_by: UserRef = None
