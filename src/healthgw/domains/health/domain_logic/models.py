"""Value types shared by the gateway: time ranges, samples, capabilities."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any

from healthgw.domains.health.domain_logic.errors import InvalidArgument

SOURCE_NAME = "health_connect"
PLATFORM_NAME = "health_connect"


class DataType(str, Enum):
    """Health data types the gateway can read."""

    STEPS = "steps"
    DISTANCE = "distance"
    CALORIES = "calories"
    HEART_RATE = "heart_rate"

    @property
    def unit(self) -> str:
        return _UNITS[self]

    @property
    def read_permission(self) -> str:
        return _READ_PERMISSIONS[self]

    @classmethod
    def parse(cls, value: Any) -> DataType:
        """Parse a wire value, raising InvalidArgument for unknown types."""
        try:
            return cls(value)
        except ValueError:
            raise InvalidArgument(f"Unknown data type: {value!r}") from None


_UNITS = {
    DataType.STEPS: "count",
    DataType.DISTANCE: "meters",
    DataType.CALORIES: "kcal",
    DataType.HEART_RATE: "bpm",
}

_READ_PERMISSIONS = {
    DataType.STEPS: "READ_STEPS",
    DataType.DISTANCE: "READ_DISTANCE",
    DataType.CALORIES: "READ_ACTIVE_CALORIES_BURNED",
    DataType.HEART_RATE: "READ_HEART_RATE",
}

# Permissions the gateway needs before it reports itself as authorized.
REQUIRED_PERMISSIONS: frozenset[str] = frozenset(_READ_PERMISSIONS.values())


class AggregateMetric(str, Enum):
    """Store-computed totals."""

    STEPS_TOTAL = "steps_total"
    DISTANCE_TOTAL = "distance_total"
    CALORIES_TOTAL = "calories_total"

    @property
    def data_type(self) -> DataType:
        return _METRIC_TYPES[self]

    @classmethod
    def for_data_type(cls, data_type: DataType) -> AggregateMetric:
        for metric, dt in _METRIC_TYPES.items():
            if dt is data_type:
                return metric
        raise InvalidArgument(f"No aggregate metric for data type {data_type.value!r}")


_METRIC_TYPES = {
    AggregateMetric.STEPS_TOTAL: DataType.STEPS,
    AggregateMetric.DISTANCE_TOTAL: DataType.DISTANCE,
    AggregateMetric.CALORIES_TOTAL: DataType.CALORIES,
}


_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_ONE_MS = timedelta(milliseconds=1)


class SdkStatus(str, Enum):
    """Availability of the platform health SDK on this device."""

    AVAILABLE = "available"
    UNAVAILABLE = "unavailable"
    UPDATE_REQUIRED = "update_required"
    UNKNOWN = "unknown"


def to_millis(instant: datetime) -> int:
    """Convert an aware datetime to epoch milliseconds."""
    return (instant - _EPOCH) // _ONE_MS


def from_millis(millis: int) -> datetime:
    """Convert epoch milliseconds to an aware UTC datetime.

    Raises InvalidArgument when the value falls outside the years 1..9999.
    """
    try:
        return _EPOCH + timedelta(milliseconds=millis)
    except OverflowError as exc:
        raise InvalidArgument(f"Epoch millis {millis} is out of range") from exc


@dataclass(frozen=True)
class TimeRange:
    """Half-open interval ``[start, end)`` of aware instants."""

    start: datetime
    end: datetime

    def __post_init__(self) -> None:
        if self.start.tzinfo is None or self.end.tzinfo is None:
            raise InvalidArgument("TimeRange bounds must be timezone-aware")
        if self.start > self.end:
            raise InvalidArgument(
                f"TimeRange start {self.start.isoformat()} is after end {self.end.isoformat()}"
            )

    @classmethod
    def from_millis(cls, start_ms: int, end_ms: int) -> TimeRange:
        return cls(start=from_millis(start_ms), end=from_millis(end_ms))

    @property
    def start_millis(self) -> int:
        return to_millis(self.start)

    @property
    def end_millis(self) -> int:
        return to_millis(self.end)

    @property
    def is_empty(self) -> bool:
        return self.start == self.end

    def contains_span(self, start: datetime, end: datetime) -> bool:
        """True if ``[start, end]`` lies within this range's bounds."""
        return self.start <= start <= end <= self.end


@dataclass(frozen=True)
class HealthSample:
    """One normalized measurement."""

    id: str
    data_type: DataType
    value: float
    unit: str
    start_time: datetime
    end_time: datetime
    origin_package: str
    origin_display_name: str
    source: str = SOURCE_NAME

    def to_dict(self) -> dict[str, Any]:
        """Wire shape: epoch-millisecond timestamps, origin under ``metadata``."""
        return {
            "id": self.id,
            "source": self.source,
            "dataType": self.data_type.value,
            "value": self.value,
            "unit": self.unit,
            "startTime": to_millis(self.start_time),
            "endTime": to_millis(self.end_time),
            "metadata": {
                "dataOrigin": self.origin_package,
                "sourceApp": self.origin_display_name,
            },
        }


@dataclass(frozen=True)
class Capabilities:
    """What the store offers right now. Recomputed on every request."""

    available: bool
    authorized: bool
    version: str = ""
    supported_types: frozenset[str] = field(default_factory=frozenset)
    platform: str = PLATFORM_NAME

    @classmethod
    def unavailable(cls) -> Capabilities:
        return cls(available=False, authorized=False)

    def to_dict(self) -> dict[str, Any]:
        return {
            "platform": self.platform,
            "isAvailable": self.available,
            "isAuthorized": self.authorized,
            "version": self.version,
            "supportedDataTypes": sorted(self.supported_types),
        }


@dataclass(frozen=True)
class AggregateResult:
    metric: AggregateMetric
    total: float
    range: TimeRange
