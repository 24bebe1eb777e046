"""Mock store records for development and testing.

Represents a median healthy adult syncing from two apps: a phone-based
tracker writing steps/distance/calories and a watch writing heart rate.
Output is deterministic for a given ``days`` and ``end``.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from healthgw.domains.health.connectors.records import (
    ActiveCaloriesRecord,
    DistanceRecord,
    HeartRateReading,
    HeartRateRecord,
    RecordMetadata,
    StepsRecord,
)

_PHONE_APP = "com.google.android.apps.fitness"
_WATCH_APP = "com.sec.android.app.shealth"

# (hour of day, steps) walking bouts per day
_DAILY_BOUTS = [(7, 1800), (12, 2400), (18, 3100)]
_STRIDE_M = 0.76
_KCAL_PER_STEP = 0.04


def _day_starts(days: int, end: datetime) -> list[datetime]:
    midnight = end.astimezone(timezone.utc).replace(hour=0, minute=0, second=0, microsecond=0)
    return [midnight - timedelta(days=offset) for offset in range(days - 1, -1, -1)]


def get_mock_activity_records(
    days: int = 7, end: datetime | None = None
) -> tuple[list[StepsRecord], list[DistanceRecord], list[ActiveCaloriesRecord]]:
    """Return steps, distance and calorie records for the last ``days`` days."""
    end = end or datetime.now(timezone.utc)
    steps: list[StepsRecord] = []
    distance: list[DistanceRecord] = []
    calories: list[ActiveCaloriesRecord] = []

    for day in _day_starts(days, end):
        for hour, count in _DAILY_BOUTS:
            start = day + timedelta(hours=hour)
            stop = start + timedelta(minutes=45)
            tag = start.strftime("%Y%m%d%H")
            steps.append(StepsRecord(
                count=count, start_time=start, end_time=stop,
                metadata=RecordMetadata(data_origin=_PHONE_APP, id=f"steps-{tag}"),
            ))
            distance.append(DistanceRecord(
                meters=round(count * _STRIDE_M, 1), start_time=start, end_time=stop,
                metadata=RecordMetadata(data_origin=_PHONE_APP, id=f"distance-{tag}"),
            ))
            calories.append(ActiveCaloriesRecord(
                kilocalories=round(count * _KCAL_PER_STEP, 1), start_time=start, end_time=stop,
                # Calorie records from this tracker carry no id.
                metadata=RecordMetadata(data_origin=_PHONE_APP),
            ))
    return steps, distance, calories


def get_mock_heart_rate_records(
    days: int = 7, end: datetime | None = None
) -> list[HeartRateRecord]:
    """Return one heart-rate series per morning, five readings a minute apart."""
    end = end or datetime.now(timezone.utc)
    records: list[HeartRateRecord] = []
    for day in _day_starts(days, end):
        start = day + timedelta(hours=8)
        readings = tuple(
            HeartRateReading(time=start + timedelta(minutes=i), beats_per_minute=64 + 2 * i)
            for i in range(5)
        )
        records.append(HeartRateRecord(
            start_time=start,
            end_time=readings[-1].time,
            metadata=RecordMetadata(
                data_origin=_WATCH_APP, id=f"hr-{start.strftime('%Y%m%d')}"
            ),
            samples=readings,
        ))
    return records
