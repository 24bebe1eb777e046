"""Health gateway MCP server — application factory.

This module provides:
- create_app() for testability (integration tests create fresh server instances)
- Module-level `mcp` variable for FastMCP discovery
"""

from __future__ import annotations

import logging

from fastmcp import FastMCP

from healthgw.core.config.settings import get_settings
from healthgw.domains.health.connectors import HealthPlatform, SettingsLauncher
from healthgw.domains.health.connectors.mock_platform import (
    LoggingSettingsLauncher,
    MockHealthPlatform,
)
from healthgw.domains.health.domain_logic.models import SdkStatus
from healthgw.domains.health.gateway.facade import create_gateway
from healthgw.domains.health.tools.gateway_tools import register_gateway_tools

logger = logging.getLogger(__name__)


def create_app(
    *,
    platform_override: HealthPlatform | None = None,
    settings_launcher_override: SettingsLauncher | None = None,
) -> FastMCP:
    """Create and configure the health gateway MCP server.

    1. Creates the FastMCP server instance
    2. Picks the health platform (mock unless overridden)
    3. Wires the gateway facade over a fresh store handle
    4. Registers the tools
    """
    settings = get_settings()

    server = FastMCP(
        "Health Data Gateway",
        instructions=(
            "Bridges a platform health store (steps, distance, calories, heart "
            "rate) to host applications. Call health_connect_call with a method "
            "name and arguments; results use epoch-millisecond timestamps."
        ),
    )

    # --- Health platform ---
    if platform_override is not None:
        platform = platform_override
    else:
        status = SdkStatus.AVAILABLE if settings.mock_store_available else SdkStatus.UNAVAILABLE
        platform = MockHealthPlatform.with_mock_data(settings.mock_seed_days, status=status)
        logger.info(
            "Using mock health platform (%d days of data, status %s)",
            settings.mock_seed_days,
            status.value,
        )

    launcher = settings_launcher_override or LoggingSettingsLauncher()
    facade = create_gateway(platform, launcher, settings)

    @server.tool
    def health_check() -> dict:
        """Check server health and return basic status information."""
        return {
            "status": "ok",
            "server": "Health Data Gateway",
            "version": "0.1.0",
            "platform_version": settings.platform_version,
            "query_multiple_mode": settings.query_multiple_mode,
            "methods": len(facade.methods),
        }

    register_gateway_tools(server, facade)
    logger.info("Gateway tools registered (%d methods)", len(facade.methods))

    return server


# Module-level instance for FastMCP discovery.
# Lazy: only created when this module is loaded directly (not when tests import create_app).
def __getattr__(name: str):
    if name == "mcp":
        global mcp  # noqa: PLW0603
        mcp = create_app()
        return mcp
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
