"""Shared test fixtures for the health gateway tests."""

from __future__ import annotations

import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

# ---------------------------------------------------------------------------
# Test hermeticity
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def _force_hermetic_test_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GATEWAY_TIMEZONE", "")
    monkeypatch.setenv("QUERY_MULTIPLE_MODE", "concurrent")
    monkeypatch.setenv("MOCK_STORE_AVAILABLE", "true")
    monkeypatch.setenv("MOCK_SEED_DAYS", "7")
    for name in ("GATEWAY_HOST", "GATEWAY_PORT", "GATEWAY_ALLOW_INSECURE_BIND"):
        monkeypatch.delenv(name, raising=False)

# Allow running tests without `pip install -e .` by making `src/` importable.
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_SRC_DIR = _PROJECT_ROOT / "src"
if str(_SRC_DIR) not in sys.path:
    sys.path.insert(0, str(_SRC_DIR))

from healthgw.domains.health.connectors.mock_platform import (  # noqa: E402
    InMemoryHealthStore,
    MockHealthPlatform,
)
from healthgw.domains.health.connectors.records import (  # noqa: E402
    ActiveCaloriesRecord,
    DistanceRecord,
    HeartRateReading,
    HeartRateRecord,
    RecordMetadata,
    StepsRecord,
)
from healthgw.domains.health.connectors.store_handle import StoreHandle  # noqa: E402
from healthgw.domains.health.domain_logic.models import SdkStatus  # noqa: E402
from healthgw.domains.health.gateway.capabilities import CapabilityProvider  # noqa: E402
from healthgw.domains.health.gateway.facade import GatewayFacade  # noqa: E402
from healthgw.domains.health.gateway.query_gateway import QueryGateway  # noqa: E402

# All fixture data lives on this UTC day.
DAY = datetime(2026, 3, 10, tzinfo=timezone.utc)

SHEALTH = "com.sec.android.app.shealth"
GOOGLE_FIT = "com.google.android.apps.fitness"
FITBIT = "com.fitbit.FitbitMobile"


def at(hours: float, day: datetime = DAY) -> datetime:
    return day + timedelta(hours=hours)


def sample_records() -> list:
    """Deterministic store records around ``DAY``."""
    hr_start = at(10)
    return [
        StepsRecord(count=1200, start_time=at(9), end_time=at(9.5),
                    metadata=RecordMetadata(data_origin=SHEALTH, id="steps-1")),
        StepsRecord(count=3400, start_time=at(13), end_time=at(14),
                    metadata=RecordMetadata(data_origin="com.example.tracker")),
        # Next day
        StepsRecord(count=500, start_time=at(25), end_time=at(26),
                    metadata=RecordMetadata(data_origin=SHEALTH, id="steps-3")),
        DistanceRecord(meters=950.5, start_time=at(9), end_time=at(9.5),
                       metadata=RecordMetadata(data_origin=GOOGLE_FIT, id="distance-1")),
        ActiveCaloriesRecord(kilocalories=48.2, start_time=at(9), end_time=at(9.5),
                             metadata=RecordMetadata(data_origin=GOOGLE_FIT)),
        HeartRateRecord(
            start_time=hr_start,
            end_time=hr_start + timedelta(minutes=4),
            metadata=RecordMetadata(data_origin=FITBIT, id="hr-1"),
            samples=tuple(
                HeartRateReading(time=hr_start + timedelta(minutes=i), beats_per_minute=70 + i)
                for i in range(5)
            ),
        ),
        # Straddles midnight at the start of DAY
        HeartRateRecord(
            start_time=at(-2 / 60),
            end_time=at(2 / 60),
            metadata=RecordMetadata(data_origin=FITBIT, id="hr-2"),
            samples=(
                HeartRateReading(time=at(-2 / 60), beats_per_minute=58),
                HeartRateReading(time=at(0), beats_per_minute=59),
                HeartRateReading(time=at(2 / 60), beats_per_minute=60),
            ),
        ),
    ]


# ---------------------------------------------------------------------------
# Fake platforms
# ---------------------------------------------------------------------------

class CountingPlatform(MockHealthPlatform):
    """MockHealthPlatform that counts client creations and status checks."""

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.clients_created = 0
        self.status_checks = 0

    def get_sdk_status(self) -> SdkStatus:
        self.status_checks += 1
        return super().get_sdk_status()

    def create_client(self) -> InMemoryHealthStore:
        self.clients_created += 1
        return super().create_client()


class UntouchableStore:
    """Store client that fails the test if any method is invoked.

    ``pytest.fail`` raises a BaseException, so gateway error wrapping cannot
    hide the call.
    """

    async def get_granted_permissions(self) -> set[str]:
        pytest.fail("store.get_granted_permissions must not be called")

    async def read_records(self, data_type, time_range):
        pytest.fail("store.read_records must not be called")

    async def aggregate(self, metric, time_range):
        pytest.fail("store.aggregate must not be called")


class UntouchablePlatform:
    def get_sdk_status(self) -> SdkStatus:
        return SdkStatus.AVAILABLE

    def create_client(self) -> UntouchableStore:
        return UntouchableStore()


class FailingStore:
    """Store client whose every call raises."""

    def __init__(self, exc: Exception | None = None) -> None:
        self.exc = exc or ConnectionError("store went away")

    async def get_granted_permissions(self) -> set[str]:
        raise self.exc

    async def read_records(self, data_type, time_range):
        raise self.exc

    async def aggregate(self, metric, time_range):
        raise self.exc


class StaticPlatform:
    """Platform that hands out a prebuilt client."""

    def __init__(self, client, status: SdkStatus = SdkStatus.AVAILABLE) -> None:
        self.client = client
        self.status = status

    def get_sdk_status(self):
        return self.status

    def create_client(self):
        return self.client


class RaisingStatusPlatform:
    """Platform whose status check raises."""

    def get_sdk_status(self):
        raise RuntimeError("status service crashed")

    def create_client(self):
        raise AssertionError("must not create a client")


class RecordingLauncher:
    """SettingsLauncher that records calls and can be told to fail."""

    def __init__(self, fail_health: bool = False, fail_app: bool = False) -> None:
        self.fail_health = fail_health
        self.fail_app = fail_app
        self.calls: list[str] = []

    def open_health_settings(self) -> None:
        self.calls.append("health")
        if self.fail_health:
            raise RuntimeError("health settings activity not found")

    def open_app_settings(self) -> None:
        self.calls.append("app")
        if self.fail_app:
            raise RuntimeError("app settings activity not found")


def build_facade(
    platform,
    launcher=None,
    *,
    zone=timezone.utc,
    fan_out_mode: str = "concurrent",
) -> GatewayFacade:
    handle = StoreHandle(platform)
    return GatewayFacade(
        handle,
        CapabilityProvider(handle, version="1.1.0"),
        QueryGateway(handle, fan_out_mode=fan_out_mode),
        launcher or RecordingLauncher(),
        zone=zone,
    )


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def store() -> InMemoryHealthStore:
    """In-memory store holding ``sample_records()`` with all permissions."""
    return InMemoryHealthStore(sample_records())


@pytest.fixture
def platform(store: InMemoryHealthStore) -> CountingPlatform:
    return CountingPlatform(store=store)


@pytest.fixture
def handle(platform: CountingPlatform) -> StoreHandle:
    return StoreHandle(platform)


@pytest.fixture
def unavailable_handle() -> StoreHandle:
    return StoreHandle(MockHealthPlatform(status=SdkStatus.UNAVAILABLE))


@pytest.fixture
def launcher() -> RecordingLauncher:
    return RecordingLauncher()


@pytest.fixture
def facade(platform: CountingPlatform, launcher: RecordingLauncher) -> GatewayFacade:
    return build_facade(platform, launcher)


@pytest.fixture
def untouchable_facade() -> GatewayFacade:
    return build_facade(UntouchablePlatform())
