"""Gateway entry point: ``health-gateway`` or ``python -m healthgw.core.server.main``."""

from __future__ import annotations

import logging
from ipaddress import ip_address

from healthgw.core.config.settings import Settings, get_settings
from healthgw.core.server.app import create_app

logger = logging.getLogger(__name__)

TRANSPORT = "streamable-http"


def is_loopback_host(host: str) -> bool:
    if host == "localhost":
        return True
    try:
        return ip_address(host.strip("[]")).is_loopback
    except ValueError:
        return False


def check_bind(settings: Settings) -> None:
    """Refuse a non-loopback bind unless explicitly allowed.

    The gateway has no auth layer, so anything reachable from another host
    can read the health store.
    """
    if is_loopback_host(settings.gateway_host):
        return
    if not settings.gateway_allow_insecure_bind:
        raise RuntimeError(
            f"Refusing to expose the health gateway on {settings.gateway_host}. "
            "Bind to a loopback address or set GATEWAY_ALLOW_INSECURE_BIND=true."
        )
    logger.warning(
        "Health gateway bound to non-loopback host %s without authentication",
        settings.gateway_host,
    )


def run() -> None:
    """Serve the gateway tools over Streamable HTTP."""
    settings = get_settings()
    logging.basicConfig(level=getattr(logging, settings.gateway_log_level.upper(), logging.INFO))
    check_bind(settings)

    zone = settings.resolve_timezone()
    logger.info(
        "Health gateway %s on %s:%d (zone=%s, queryMultiple=%s, mock store %s, %d seed days)",
        settings.platform_version,
        settings.gateway_host,
        settings.gateway_port,
        zone,
        settings.query_multiple_mode,
        "available" if settings.mock_store_available else "unavailable",
        settings.mock_seed_days,
    )

    create_app().run(transport=TRANSPORT, host=settings.gateway_host, port=settings.gateway_port)


if __name__ == "__main__":
    run()
