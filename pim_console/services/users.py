"""Users service."""

from pim_console.infra.http_client import ApiClient
from pim_console.infra.logging import get_logger
from pim_console.schemas.users import (
    UserListResponse,
    UserRoleUpdateRequest,
    UserStatusFilter,
    UserSummary,
    UserUpdateRequest,
)
from pim_console.services import endpoints
from pim_console.services.mappers import map_user_list, map_user_summary

logger = get_logger(__name__)


class UsersService:
    """User administration: list, read, profile update and role change."""

    def __init__(self, client: ApiClient) -> None:
        self._client = client

    async def list(
        self,
        page: int | None = None,
        page_size: int | None = None,
        search: str | None = None,
        role_id: str | None = None,
        status: UserStatusFilter | None = None,
        language: str | None = None,
    ) -> UserListResponse:
        payload = await self._client.get(
            endpoints.USERS,
            params={
                "page": page,
                "pageSize": page_size,
                "search": search,
                "roleId": role_id,
                "status": status,
                "language": language,
            },
        )
        return map_user_list(payload)

    async def get_by_id(self, user_id: str, language: str | None = None) -> UserSummary:
        payload = await self._client.get(
            endpoints.by_id(endpoints.USERS, user_id),
            params={"language": language},
        )
        return map_user_summary(payload)

    async def update(
        self,
        user_id: str,
        request: UserUpdateRequest,
        language: str | None = None,
    ) -> UserSummary:
        payload = await self._client.put(
            endpoints.by_id(endpoints.USERS, user_id),
            request.model_dump(by_alias=True, exclude_none=True),
            params={"language": language},
        )
        logger.info("User updated", user_id=user_id)
        return map_user_summary(payload)

    async def update_role(
        self,
        user_id: str,
        request: UserRoleUpdateRequest,
        language: str | None = None,
    ) -> UserSummary:
        payload = await self._client.put(
            endpoints.user_role(user_id),
            request.model_dump(by_alias=True, exclude_none=True),
            params={"language": language},
        )
        logger.info("User role updated", user_id=user_id, role_id=request.role_id)
        return map_user_summary(payload)
