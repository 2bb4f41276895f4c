"""Infrastructure - HTTP client, logging."""

from pim_console.infra.http_client import ApiClient, get_api_client
from pim_console.infra.logging import get_logger, setup_logging

__all__ = [
    "ApiClient",
    "get_api_client",
    "get_logger",
    "setup_logging",
]
