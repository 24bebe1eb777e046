"""Query gateway — reads and aggregates against the health store.

All store calls are awaited; nothing here blocks the event loop. Store
failures are wrapped in QueryFailed / AggregateFailed with the original
exception chained.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable
from datetime import date, datetime, time, timedelta, tzinfo
from typing import Literal

from healthgw.domains.health.connectors.store_handle import StoreHandle
from healthgw.domains.health.domain_logic.errors import (
    AggregateFailed,
    InvalidArgument,
    NotAvailable,
    QueryFailed,
)
from healthgw.domains.health.domain_logic.models import (
    AggregateMetric,
    AggregateResult,
    DataType,
    HealthSample,
    TimeRange,
)
from healthgw.domains.health.domain_logic.normalizer import normalize_records

logger = logging.getLogger(__name__)

FanOutMode = Literal["concurrent", "sequential"]


def day_range(local_date: date, zone: tzinfo) -> TimeRange:
    """``[local_date 00:00, local_date+1 00:00)`` in ``zone``."""
    try:
        next_date = local_date + timedelta(days=1)
    except OverflowError as exc:
        raise InvalidArgument(f"No day follows {local_date.isoformat()}") from exc
    start = datetime.combine(local_date, time.min, tzinfo=zone)
    end = datetime.combine(next_date, time.min, tzinfo=zone)
    return TimeRange(start=start, end=end)


class QueryGateway:
    """Typed read/aggregate operations over the shared store handle."""

    def __init__(
        self, handle: StoreHandle, *, fan_out_mode: FanOutMode = "concurrent"
    ) -> None:
        if fan_out_mode not in ("concurrent", "sequential"):
            raise ValueError(f"Unknown fan-out mode: {fan_out_mode!r}")
        self._handle = handle
        self._fan_out_mode = fan_out_mode

    async def query_records(
        self, data_type: DataType, time_range: TimeRange
    ) -> list[HealthSample]:
        """Normalized samples of ``data_type`` lying inside ``time_range``."""
        if not isinstance(time_range, TimeRange):
            raise InvalidArgument("time_range must be a TimeRange")
        client = self._handle.get()
        if client is None:
            raise NotAvailable("Health store not available")

        try:
            records = await client.read_records(data_type, time_range)
        except Exception as exc:
            logger.exception("Reading %s records failed", data_type.value)
            raise QueryFailed(str(exc)) from exc

        samples = normalize_records(data_type, records)
        inside = [s for s in samples if time_range.contains_span(s.start_time, s.end_time)]
        if len(inside) != len(samples):
            logger.debug(
                "Dropped %d %s samples outside the requested range",
                len(samples) - len(inside),
                data_type.value,
            )
        return inside

    async def query_multiple(
        self, data_types: Iterable[DataType], time_range: TimeRange
    ) -> dict[DataType, list[HealthSample]]:
        """Fan ``query_records`` out over several types.

        Runs the per-type queries together or one after another depending on
        the configured mode. The first failure propagates.
        """
        types = list(dict.fromkeys(data_types))
        if not types:
            raise InvalidArgument("At least one data type is required")

        if self._fan_out_mode == "sequential":
            return {dt: await self.query_records(dt, time_range) for dt in types}

        results = await asyncio.gather(
            *(self.query_records(dt, time_range) for dt in types)
        )
        return dict(zip(types, results))

    async def aggregate(
        self, metric: AggregateMetric, time_range: TimeRange
    ) -> AggregateResult:
        """Store-computed total; zero when there is no store or no data."""
        client = self._handle.get()
        if client is None:
            return AggregateResult(metric=metric, total=0, range=time_range)

        try:
            total = await client.aggregate(metric, time_range)
        except Exception as exc:
            logger.exception("Aggregating %s failed", metric.value)
            raise AggregateFailed(str(exc)) from exc

        return AggregateResult(
            metric=metric,
            total=total if total is not None else 0,
            range=time_range,
        )

    async def daily_total(
        self, data_type: DataType, local_date: date, zone: tzinfo
    ) -> float:
        """Total for one calendar day in ``zone``."""
        metric = AggregateMetric.for_data_type(data_type)
        result = await self.aggregate(metric, day_range(local_date, zone))
        return result.total

    async def today_total(
        self, data_type: DataType, zone: tzinfo, now: datetime | None = None
    ) -> float:
        """Total from local midnight today up to ``now``."""
        now = (now or datetime.now(zone)).astimezone(zone)
        start = datetime.combine(now.date(), time.min, tzinfo=zone)
        metric = AggregateMetric.for_data_type(data_type)
        result = await self.aggregate(metric, TimeRange(start=start, end=now))
        return result.total
