"""Store-native record types.

Platform adapters return these from ``HealthStoreClient.read_records``. They
mirror the shape of the platform SDK's records: a time span, a payload, and
metadata carrying the record id and the package that wrote it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class RecordMetadata:
    data_origin: str
    id: str | None = None


@dataclass(frozen=True)
class StepsRecord:
    count: int
    start_time: datetime
    end_time: datetime
    metadata: RecordMetadata


@dataclass(frozen=True)
class DistanceRecord:
    meters: float
    start_time: datetime
    end_time: datetime
    metadata: RecordMetadata


@dataclass(frozen=True)
class ActiveCaloriesRecord:
    kilocalories: float
    start_time: datetime
    end_time: datetime
    metadata: RecordMetadata


@dataclass(frozen=True)
class HeartRateReading:
    """A single instantaneous beats-per-minute reading."""

    time: datetime
    beats_per_minute: int


@dataclass(frozen=True)
class HeartRateRecord:
    """A series of readings written together by one app."""

    start_time: datetime
    end_time: datetime
    metadata: RecordMetadata
    samples: tuple[HeartRateReading, ...] = field(default_factory=tuple)


StoreRecord = StepsRecord | DistanceRecord | ActiveCaloriesRecord | HeartRateRecord
