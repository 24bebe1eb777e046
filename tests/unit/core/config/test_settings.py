"""Tests for environment-driven settings."""

from __future__ import annotations

import time
from datetime import date, datetime, timedelta

import pytest
import tzlocal
from pydantic import ValidationError

from healthgw.core.config.settings import get_settings
from healthgw.domains.health.gateway.query_gateway import day_range

WINTER = datetime(2026, 1, 15, 12)
SUMMER = datetime(2026, 7, 15, 12)


@pytest.fixture
def new_york_host(monkeypatch):
    """Make America/New_York the host zone for the duration of a test."""
    if not hasattr(time, "tzset"):
        pytest.skip("time.tzset is unavailable on this platform")
    monkeypatch.setenv("TZ", "America/New_York")
    time.tzset()
    tzlocal.reload_localzone()
    yield
    monkeypatch.undo()
    time.tzset()
    tzlocal.reload_localzone()


class TestSettings:
    def test_defaults(self):
        settings = get_settings()
        assert settings.gateway_host == "127.0.0.1"
        assert settings.platform_version == "1.1.0"
        assert settings.query_multiple_mode == "concurrent"
        assert settings.mock_store_available is True

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("QUERY_MULTIPLE_MODE", "sequential")
        monkeypatch.setenv("GATEWAY_PORT", "9100")
        settings = get_settings()
        assert settings.query_multiple_mode == "sequential"
        assert settings.gateway_port == 9100

    def test_invalid_fan_out_mode_rejected(self, monkeypatch):
        monkeypatch.setenv("QUERY_MULTIPLE_MODE", "parallel")
        with pytest.raises(ValidationError):
            get_settings()


class TestTimezone:
    def test_empty_timezone_follows_host_dst(self, new_york_host):
        zone = get_settings().resolve_timezone()
        assert WINTER.replace(tzinfo=zone).utcoffset() == timedelta(hours=-5)
        assert SUMMER.replace(tzinfo=zone).utcoffset() == timedelta(hours=-4)

    def test_named_timezone_follows_dst(self, monkeypatch):
        monkeypatch.setenv("GATEWAY_TIMEZONE", "Europe/Berlin")
        zone = get_settings().resolve_timezone()
        assert WINTER.replace(tzinfo=zone).utcoffset() == timedelta(hours=1)
        assert SUMMER.replace(tzinfo=zone).utcoffset() == timedelta(hours=2)

    def test_named_timezone_overrides_host(self, new_york_host, monkeypatch):
        monkeypatch.setenv("GATEWAY_TIMEZONE", "UTC")
        zone = get_settings().resolve_timezone()
        assert SUMMER.replace(tzinfo=zone).utcoffset() == timedelta(0)

    def test_host_day_boundaries_shift_with_dst(self, new_york_host):
        zone = get_settings().resolve_timezone()
        winter = day_range(date(2026, 1, 15), zone)
        summer = day_range(date(2026, 7, 15), zone)
        assert winter.start.utcoffset() == timedelta(hours=-5)
        assert summer.start.utcoffset() == timedelta(hours=-4)

    def test_spring_forward_day_is_23_hours(self, new_york_host):
        zone = get_settings().resolve_timezone()
        r = day_range(date(2026, 3, 8), zone)
        assert r.end_millis - r.start_millis == 23 * 3600 * 1000
