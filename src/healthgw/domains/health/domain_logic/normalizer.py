"""Record normalizer — store-native records to HealthSample.

One pure function per data type. The only non-determinism is the fresh id
assigned when a record carries none (and for every heart-rate reading, since
one record holds many readings).
"""

from __future__ import annotations

import uuid
from collections.abc import Iterable

from healthgw.domains.health.connectors.records import (
    ActiveCaloriesRecord,
    DistanceRecord,
    HeartRateRecord,
    RecordMetadata,
    StepsRecord,
    StoreRecord,
)
from healthgw.domains.health.domain_logic.models import DataType, HealthSample
from healthgw.domains.health.domain_logic.source_resolver import resolve


def _new_id() -> str:
    return uuid.uuid4().hex


def _origin(metadata: RecordMetadata) -> dict[str, str]:
    return {
        "origin_package": metadata.data_origin,
        "origin_display_name": resolve(metadata.data_origin),
    }


def normalize_steps(record: StepsRecord) -> HealthSample:
    return HealthSample(
        id=record.metadata.id or _new_id(),
        data_type=DataType.STEPS,
        value=record.count,
        unit=DataType.STEPS.unit,
        start_time=record.start_time,
        end_time=record.end_time,
        **_origin(record.metadata),
    )


def normalize_distance(record: DistanceRecord) -> HealthSample:
    return HealthSample(
        id=record.metadata.id or _new_id(),
        data_type=DataType.DISTANCE,
        value=record.meters,
        unit=DataType.DISTANCE.unit,
        start_time=record.start_time,
        end_time=record.end_time,
        **_origin(record.metadata),
    )


def normalize_calories(record: ActiveCaloriesRecord) -> HealthSample:
    return HealthSample(
        id=record.metadata.id or _new_id(),
        data_type=DataType.CALORIES,
        value=record.kilocalories,
        unit=DataType.CALORIES.unit,
        start_time=record.start_time,
        end_time=record.end_time,
        **_origin(record.metadata),
    )


def normalize_heart_rate(record: HeartRateRecord) -> list[HealthSample]:
    """One sample per embedded reading, each a zero-length span."""
    origin = _origin(record.metadata)
    return [
        HealthSample(
            id=_new_id(),
            data_type=DataType.HEART_RATE,
            value=reading.beats_per_minute,
            unit=DataType.HEART_RATE.unit,
            start_time=reading.time,
            end_time=reading.time,
            **origin,
        )
        for reading in record.samples
    ]


_SINGLE = {
    DataType.STEPS: normalize_steps,
    DataType.DISTANCE: normalize_distance,
    DataType.CALORIES: normalize_calories,
}


def normalize_records(
    data_type: DataType, records: Iterable[StoreRecord]
) -> list[HealthSample]:
    """Normalize every record of ``data_type``, flattening heart-rate series."""
    if data_type is DataType.HEART_RATE:
        return [sample for record in records for sample in normalize_heart_rate(record)]
    normalize = _SINGLE[data_type]
    return [normalize(record) for record in records]
