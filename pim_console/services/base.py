"""Base classes for REST resource services."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Generic, TypeVar

from pim_console.infra.http_client import ApiClient
from pim_console.infra.logging import get_logger
from pim_console.schemas.common import Page
from pim_console.services import endpoints
from pim_console.services.mappers import map_page

logger = get_logger(__name__)

ModelT = TypeVar("ModelT")


class ReadCreateService(Generic[ModelT]):
    """List, fetch and create over one REST collection.

    Subclasses set ``base_path`` and ``mapper``. Services hold no state
    besides the client: every call goes to the backend.
    """

    base_path: str = ""
    mapper: Callable[[dict[str, Any]], ModelT]

    def __init__(self, client: ApiClient) -> None:
        self._client = client

    def _map(self, payload: Any) -> ModelT:
        return type(self).mapper(payload)

    async def list(self, **params: Any) -> Page[ModelT]:
        """List entities; keyword arguments become query parameters."""
        payload = await self._client.get(self.base_path, params=params)
        return map_page(payload, type(self).mapper)

    async def get_by_id(self, entity_id: str) -> ModelT:
        payload = await self._client.get(endpoints.by_id(self.base_path, entity_id))
        return self._map(payload)

    async def create(self, payload: dict[str, Any]) -> ModelT:
        created = await self._client.post(self.base_path, payload)
        entity = self._map(created)
        logger.info("Entity created", resource=self.base_path, entity_id=getattr(entity, "id", None))
        return entity


class ResourceService(ReadCreateService[ModelT]):
    """Full CRUD service: adds update and delete."""

    async def update(self, entity_id: str, payload: dict[str, Any]) -> ModelT:
        updated = await self._client.put(endpoints.by_id(self.base_path, entity_id), payload)
        logger.info("Entity updated", resource=self.base_path, entity_id=entity_id)
        return self._map(updated)

    async def delete(self, entity_id: str) -> None:
        await self._client.delete(endpoints.by_id(self.base_path, entity_id))
        logger.info("Entity deleted", resource=self.base_path, entity_id=entity_id)
