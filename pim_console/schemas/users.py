"""User administration schemas."""

from typing import Literal

from pydantic import Field

from pim_console.schemas.common import ViewModel


class UserTenantSummary(ViewModel):
    id: str
    name: str | None = None
    role_id: str | None = None
    role_name: str | None = None


class UserSummary(ViewModel):
    id: str
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    phone: str = ""
    location: str = ""
    department: str = ""
    primary_role_id: str | None = None
    primary_role_name: str | None = None
    active_role_id: str | None = None
    tenants: list[UserTenantSummary] = Field(default_factory=list)
    notifications_enabled: bool = False
    email_notifications_enabled: bool = False
    profile_photo_url: str = ""
    two_factor_enabled: bool = False
    authz_version: int = 0
    last_login_at: str | None = None
    created_at: str | None = None
    updated_at: str | None = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class ApiPagination(ViewModel):
    page: int = 1
    page_size: int = 20
    total_items: int = 0
    total_pages: int = 0


class UserListResponse(ViewModel):
    items: list[UserSummary] = Field(default_factory=list)
    pagination: ApiPagination = Field(default_factory=ApiPagination)


class UserUpdateRequest(ViewModel):
    """Partial profile update; unset fields are not sent."""

    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    phone: str | None = None
    location: str | None = None
    department: str | None = None
    notifications_enabled: bool | None = None
    email_notifications_enabled: bool | None = None


class UserRoleUpdateRequest(ViewModel):
    role_id: str
    tenant_id: str | None = None


UserStatusFilter = Literal["active", "inactive", "partial"]
