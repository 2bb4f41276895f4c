"""Console startup and shutdown.

Startup:
- Configure logging
- Verify every attribute type and action type has a handler
- Wire the services bundle to the API client

Shutdown:
- Close the HTTP client
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from pim_console.config import settings
from pim_console.core.action_config import default_action_registry
from pim_console.core.attribute_fields import default_field_registry
from pim_console.infra.http_client import get_api_client
from pim_console.infra.logging import get_logger, setup_logging
from pim_console.services import PimServices, get_services

logger = get_logger(__name__)


def startup() -> PimServices:
    """Prepare the console and return its services.

    Raises:
        RegistryIncompleteError: A tag has no registered handler
    """
    setup_logging()
    logger.info(
        "PIM console starting",
        environment=settings.environment,
        api_base_url=settings.api_base_url,
    )

    default_field_registry.verify_complete()
    default_action_registry.verify_complete()
    logger.info(
        "Form registries verified",
        attribute_types=len(default_field_registry.available_types()),
        action_types=len(default_action_registry.available()),
    )
    return get_services()


async def shutdown() -> None:
    await get_api_client().close()
    logger.info("PIM console stopped")


@asynccontextmanager
async def console_session() -> AsyncGenerator[PimServices, None]:
    """Run a block of console work between startup and shutdown."""
    services = startup()
    try:
        yield services
    finally:
        await shutdown()
