"""In-memory HealthPlatform implementation.

Serves records from memory instead of a device store. Used as the default
platform when no real adapter is configured, and as the store in tests.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from healthgw.domains.health.connectors.mock_data import (
    get_mock_activity_records,
    get_mock_heart_rate_records,
)
from healthgw.domains.health.connectors.records import (
    ActiveCaloriesRecord,
    DistanceRecord,
    HeartRateRecord,
    StepsRecord,
    StoreRecord,
)
from healthgw.domains.health.domain_logic.models import (
    REQUIRED_PERMISSIONS,
    AggregateMetric,
    DataType,
    SdkStatus,
    TimeRange,
)

logger = logging.getLogger(__name__)

_RECORD_TYPES: dict[DataType, type] = {
    DataType.STEPS: StepsRecord,
    DataType.DISTANCE: DistanceRecord,
    DataType.CALORIES: ActiveCaloriesRecord,
    DataType.HEART_RATE: HeartRateRecord,
}


def _record_total(record: StoreRecord) -> float:
    if isinstance(record, StepsRecord):
        return record.count
    if isinstance(record, DistanceRecord):
        return record.meters
    if isinstance(record, ActiveCaloriesRecord):
        return record.kilocalories
    raise TypeError(f"Cannot total {type(record).__name__}")


class InMemoryHealthStore:
    """HealthStoreClient over a list of records.

    ``read_records`` returns records overlapping the range, as the platform
    SDK does. ``aggregate`` totals records that start inside the range.
    """

    def __init__(
        self,
        records: Iterable[StoreRecord] = (),
        granted_permissions: Iterable[str] = REQUIRED_PERMISSIONS,
    ) -> None:
        self._records: list[StoreRecord] = list(records)
        self._granted = set(granted_permissions)

    def add(self, *records: StoreRecord) -> None:
        self._records.extend(records)

    async def get_granted_permissions(self) -> set[str]:
        return set(self._granted)

    async def read_records(
        self, data_type: DataType, time_range: TimeRange
    ) -> Sequence[StoreRecord]:
        record_type = _RECORD_TYPES[data_type]
        return [
            r for r in self._records
            if isinstance(r, record_type)
            and r.start_time < time_range.end
            and r.end_time >= time_range.start
        ]

    async def aggregate(
        self, metric: AggregateMetric, time_range: TimeRange
    ) -> float | None:
        record_type = _RECORD_TYPES[metric.data_type]
        matching = [
            r for r in self._records
            if isinstance(r, record_type)
            and time_range.start <= r.start_time < time_range.end
        ]
        if not matching:
            return None
        return sum(_record_total(r) for r in matching)


class MockHealthPlatform:
    """HealthPlatform whose client is an InMemoryHealthStore."""

    def __init__(
        self,
        store: InMemoryHealthStore | None = None,
        status: SdkStatus = SdkStatus.AVAILABLE,
    ) -> None:
        self.store = store if store is not None else InMemoryHealthStore()
        self.status = status

    @classmethod
    def with_mock_data(
        cls, days: int = 7, status: SdkStatus = SdkStatus.AVAILABLE
    ) -> MockHealthPlatform:
        """Platform seeded with ``days`` days of mock activity and heart rate."""
        steps, distance, calories = get_mock_activity_records(days)
        store = InMemoryHealthStore([
            *steps, *distance, *calories, *get_mock_heart_rate_records(days),
        ])
        return cls(store=store, status=status)

    def get_sdk_status(self) -> SdkStatus:
        return self.status

    def create_client(self) -> InMemoryHealthStore:
        return self.store


class LoggingSettingsLauncher:
    """SettingsLauncher for hosts without a settings UI. Only logs."""

    def open_health_settings(self) -> None:
        logger.info("Health store settings requested")

    def open_app_settings(self) -> None:
        logger.info("App settings requested")
