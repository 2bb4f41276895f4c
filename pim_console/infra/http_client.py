"""API Client - async HTTP transport for the PIM REST backend.

Every successful response is an ``{ok, data, meta}`` envelope; the client
returns the unwrapped ``data`` payload. Failures are raised as ``ApiError``
with the backend's ``error.message`` when available.
"""

import time
from typing import Any

import httpx

from pim_console.config import settings
from pim_console.domain.exceptions import GENERIC_ERROR_MESSAGE, ApiError, NotFoundError
from pim_console.infra.logging import get_logger

logger = get_logger(__name__)


class ApiClient:
    """HTTP client for the PIM REST API."""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        token: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize API client.

        Args:
            base_url: API base URL (defaults to settings)
            timeout: Request timeout in seconds (defaults to settings)
            token: Bearer token (defaults to settings, empty = none)
            transport: Optional httpx transport (used by tests)
        """
        self.base_url = base_url or settings.api_base_url
        self.timeout = timeout if timeout is not None else settings.api_timeout
        self.token = token if token is not None else settings.api_token
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            headers = {"Content-Type": "application/json"}
            if self.token:
                headers["Authorization"] = f"Bearer {self.token}"
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                headers=headers,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def get(self, url: str, params: dict[str, Any] | None = None) -> Any:
        return await self.request("GET", url, params=params)

    async def post(
        self,
        url: str,
        body: Any = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        return await self.request("POST", url, body=body, params=params)

    async def put(
        self,
        url: str,
        body: Any = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        return await self.request("PUT", url, body=body, params=params)

    async def delete(self, url: str, params: dict[str, Any] | None = None) -> Any:
        return await self.request("DELETE", url, params=params)

    async def request(
        self,
        method: str,
        url: str,
        body: Any = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        """Send a request and return the unwrapped ``data`` payload.

        Args:
            method: HTTP method
            url: Path relative to the base URL
            body: JSON body (omitted when None)
            params: Query parameters (None values are dropped)

        Returns:
            The envelope's ``data`` field, the raw JSON body when there is no
            envelope, or None for empty responses

        Raises:
            NotFoundError: On HTTP 404
            ApiError: On any other error status or transport failure
        """
        client = await self._get_client()
        query = _clean_params(params)
        started = time.perf_counter()

        try:
            response = await client.request(
                method,
                url,
                json=body,
                params=query or None,
            )
            response.raise_for_status()

        except httpx.HTTPStatusError as e:
            error = _error_from_response(e.response)
            logger.error(
                "API request failed",
                method=method,
                url=url,
                status_code=e.response.status_code,
                error_code=error.code,
                error=error.message,
            )
            raise error from e

        except httpx.HTTPError as e:
            logger.error(
                "API request could not be sent",
                method=method,
                url=url,
                error=str(e),
            )
            raise ApiError(
                str(e) or GENERIC_ERROR_MESSAGE,
                code="NETWORK_ERROR",
            ) from e

        duration_ms = int((time.perf_counter() - started) * 1000)
        logger.debug(
            "API request completed",
            method=method,
            url=url,
            status_code=response.status_code,
            duration_ms=duration_ms,
        )
        return _unwrap(response)


def _clean_params(params: dict[str, Any] | None) -> dict[str, Any]:
    """Drop None values and stringify booleans the way the backend expects."""
    if not params:
        return {}
    cleaned: dict[str, Any] = {}
    for key, value in params.items():
        if value is None:
            continue
        if isinstance(value, bool):
            value = "true" if value else "false"
        cleaned[key] = value
    return cleaned


def _read_json(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return None


def _unwrap(response: httpx.Response) -> Any:
    payload = _read_json(response)
    if isinstance(payload, dict) and "data" in payload:
        return payload["data"]
    return payload


def _error_from_response(response: httpx.Response) -> ApiError:
    """Build an ApiError from an error response envelope."""
    payload = _read_json(response)
    error = payload.get("error") if isinstance(payload, dict) else None

    if isinstance(error, dict):
        message = error.get("message") or response.reason_phrase or GENERIC_ERROR_MESSAGE
        code = error.get("code") or "UNKNOWN_ERROR"
        details = error.get("details")
        fields = error.get("fields")
    else:
        message = response.reason_phrase or GENERIC_ERROR_MESSAGE
        code = "UNKNOWN_ERROR"
        details = payload if payload is not None else response.text[:500]
        fields = None

    error_cls = NotFoundError if response.status_code == 404 else ApiError
    return error_cls(
        message,
        code=code,
        status=response.status_code,
        details=details,
        fields=fields,
    )


# Singleton instance
_api_client: ApiClient | None = None


def get_api_client() -> ApiClient:
    """Get API client singleton."""
    global _api_client
    if _api_client is None:
        _api_client = ApiClient()
    return _api_client
