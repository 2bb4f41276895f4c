"""Tests for console startup, settings and logging."""

import logging
from unittest.mock import AsyncMock, patch

import pytest
import structlog

from pim_console import bootstrap
from pim_console.config import Settings
from pim_console.domain.exceptions import RegistryIncompleteError
from pim_console.infra.logging import get_logger, log_context, setup_logging
from pim_console.services import PimServices


class TestSettings:
    def test_env_prefix(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PIM_API_BASE_URL", "https://pim.example.com/api")
        monkeypatch.setenv("PIM_API_TIMEOUT", "2.5")

        settings = Settings()

        assert settings.api_base_url == "https://pim.example.com/api"
        assert settings.api_timeout_ms == 2500
        assert settings.lookup_limit == 200


class TestBootstrap:
    def test_startup_returns_services(self) -> None:
        services = bootstrap.startup()

        assert isinstance(services, PimServices)

    def test_startup_fails_on_incomplete_registry(self) -> None:
        with patch.object(
            bootstrap.default_action_registry,
            "verify_complete",
            side_effect=RegistryIncompleteError("ActionFormRegistry", ["log"]),
        ):
            with pytest.raises(RegistryIncompleteError):
                bootstrap.startup()

    @pytest.mark.asyncio
    async def test_console_session_closes_client(self) -> None:
        with patch.object(bootstrap, "shutdown", new=AsyncMock()) as mock_shutdown:
            async with bootstrap.console_session() as services:
                assert isinstance(services, PimServices)

        mock_shutdown.assert_awaited_once()


class TestLogging:
    def test_log_context_binds_and_clears(self) -> None:
        setup_logging(level="debug", json_output=True)

        with log_context(item_id="i1"):
            assert structlog.contextvars.get_contextvars()["item_id"] == "i1"

        assert "item_id" not in structlog.contextvars.get_contextvars()

    def test_http_stack_quieted(self) -> None:
        setup_logging(level="DEBUG")

        assert logging.getLogger("httpx").level == logging.WARNING

    def test_logger_binds_initial_context(self) -> None:
        logger = get_logger(__name__, item_id="i1")

        assert logger is not None
