"""MCP tools exposing the gateway facade to host runtimes."""

from __future__ import annotations

import json
import logging
import time
from typing import TYPE_CHECKING, Any

from fastmcp import FastMCP

from healthgw.domains.health.domain_logic.errors import GatewayError

if TYPE_CHECKING:
    from healthgw.domains.health.gateway.facade import GatewayFacade

logger = logging.getLogger(__name__)


def register_gateway_tools(mcp: FastMCP, facade: GatewayFacade) -> None:
    """Register the health store call tool on the MCP server."""

    @mcp.tool
    async def health_connect_call(
        method: str,
        arguments: dict[str, Any] | None = None,
    ) -> str:
        """Call a health store method through the gateway.

        Returns a JSON envelope: ``{"status": "ok", "result": ...}`` on
        success, ``{"status": "error", "error": {"code", "message",
        "retryable"}}`` on failure.

        Args:
            method: Method name, e.g. 'querySteps', 'getCapabilities',
                'aggregateSteps'. Unknown names fail with NOT_IMPLEMENTED.
            arguments: Method arguments. Range queries take 'startTime'
                and 'endTime' as epoch milliseconds; 'getDailySteps' takes
                'date'; 'queryMultiple' also takes 'dataTypes'.
        """
        start_time = time.monotonic()
        try:
            result = await facade.call(method, arguments or {})
        except GatewayError as exc:
            logger.info("%s failed: %s %s", method, exc.code, exc.detail)
            return json.dumps({
                "status": "error",
                "method": method,
                "error": exc.to_dict(),
            })

        elapsed_ms = (time.monotonic() - start_time) * 1000
        return json.dumps({
            "status": "ok",
            "method": method,
            "result": result,
            "duration_ms": round(elapsed_ms, 1),
        })

    @mcp.tool
    def list_gateway_methods() -> list[str]:
        """List the method names accepted by health_connect_call."""
        return facade.methods
