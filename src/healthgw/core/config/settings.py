"""Application settings loaded from environment variables."""

from __future__ import annotations

from datetime import tzinfo
from typing import Literal
from zoneinfo import ZoneInfo

from pydantic_settings import BaseSettings
from tzlocal import get_localzone


class Settings(BaseSettings):
    """Health gateway server configuration."""

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    # Server
    # Loopback by default: there is no auth layer in front of the gateway.
    gateway_host: str = "127.0.0.1"
    gateway_port: int = 8001
    gateway_log_level: str = "info"
    gateway_allow_insecure_bind: bool = False

    # Gateway
    platform_version: str = "1.1.0"
    # IANA zone for daily totals; empty means the host's local zone.
    gateway_timezone: str = ""
    query_multiple_mode: Literal["concurrent", "sequential"] = "concurrent"

    # Mock platform (used when no platform adapter is injected)
    mock_store_available: bool = True
    mock_seed_days: int = 7

    def resolve_timezone(self) -> tzinfo:
        """The zone used for calendar-day boundaries.

        An empty ``gateway_timezone`` resolves to the host zone (``TZ`` or
        the system setting) as a full IANA zone, so DST transitions apply.
        """
        if self.gateway_timezone:
            return ZoneInfo(self.gateway_timezone)
        return get_localzone()


def get_settings() -> Settings:
    """Create and return a Settings instance."""
    return Settings()
