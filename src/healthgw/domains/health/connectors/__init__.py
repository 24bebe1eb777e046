"""Health store connectors — abstraction layer over the platform health SDK."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from healthgw.domains.health.connectors.records import StoreRecord
    from healthgw.domains.health.domain_logic.models import (
        AggregateMetric,
        DataType,
        SdkStatus,
        TimeRange,
    )


@runtime_checkable
class HealthStoreClient(Protocol):
    """Connected client for the platform health store.

    Every method may perform long-running I/O and is awaited by the gateway.
    """

    async def get_granted_permissions(self) -> set[str]:
        """Permission tokens the user has granted to this app."""
        ...

    async def read_records(
        self, data_type: DataType, time_range: TimeRange
    ) -> Sequence[StoreRecord]:
        """Store-native records overlapping ``time_range``."""
        ...

    async def aggregate(
        self, metric: AggregateMetric, time_range: TimeRange
    ) -> float | None:
        """Store-computed total, or None when there is no data."""
        ...


@runtime_checkable
class HealthPlatform(Protocol):
    """Entry point into the platform SDK: status check and client factory.

    Both methods are called synchronously on the event loop thread, from
    the store handle and the status checks. They must return promptly and
    must not block on I/O. An adapter whose SDK needs I/O to answer should
    cache the status and defer the connection into the client's async
    methods.
    """

    def get_sdk_status(self) -> SdkStatus:
        """Current SDK availability. Must not block."""
        ...

    def create_client(self) -> HealthStoreClient:
        """Construct a client without connecting. Must not block."""
        ...


@runtime_checkable
class SettingsLauncher(Protocol):
    """Opens host settings screens. Each method raises on failure."""

    def open_health_settings(self) -> None:
        ...

    def open_app_settings(self) -> None:
        ...
