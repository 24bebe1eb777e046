"""Gateway facade — method name + argument bag in, result or GatewayError out.

This is the only component that knows the host channel's shape. Arguments
are validated here, before any store I/O, and then handed to the typed
CapabilityProvider / QueryGateway operations.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Mapping
from datetime import tzinfo
from typing import TYPE_CHECKING, Any

from healthgw.domains.health.connectors import HealthPlatform, SettingsLauncher
from healthgw.domains.health.connectors.store_handle import StoreHandle
from healthgw.domains.health.domain_logic.errors import (
    InvalidArgument,
    OpenSettingsFailed,
    Unimplemented,
    Unsupported,
)
from healthgw.domains.health.domain_logic.models import (
    AggregateMetric,
    DataType,
    TimeRange,
    from_millis,
)
from healthgw.domains.health.gateway.capabilities import CapabilityProvider
from healthgw.domains.health.gateway.query_gateway import QueryGateway

if TYPE_CHECKING:
    from healthgw.core.config.settings import Settings

logger = logging.getLogger(__name__)

Handler = Callable[[Mapping[str, Any]], Awaitable[Any]]

_QUERY_METHODS = {
    "querySteps": DataType.STEPS,
    "queryDistance": DataType.DISTANCE,
    "queryCalories": DataType.CALORIES,
    "queryHeartRate": DataType.HEART_RATE,
}


# ---------------------------------------------------------------------------
# Argument validation
# ---------------------------------------------------------------------------

def _require_millis(args: Mapping[str, Any], key: str) -> int:
    """Required epoch-millisecond integer argument."""
    if key not in args or args[key] is None:
        raise InvalidArgument(f"Missing required argument '{key}'")
    value = args[key]
    # bool is an int subclass; reject it explicitly.
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidArgument(
            f"Argument '{key}' must be an integer epoch-millisecond timestamp, "
            f"got {type(value).__name__}"
        )
    return value


def _require_range(args: Mapping[str, Any]) -> TimeRange:
    start = _require_millis(args, "startTime")
    end = _require_millis(args, "endTime")
    return TimeRange.from_millis(start, end)


def _require_data_types(args: Mapping[str, Any]) -> list[DataType]:
    value = args.get("dataTypes")
    if value is None:
        raise InvalidArgument("Missing required argument 'dataTypes'")
    if isinstance(value, (str, bytes)) or not isinstance(value, (list, tuple)):
        raise InvalidArgument("Argument 'dataTypes' must be a list of data type names")
    return [DataType.parse(v) for v in value]


# ---------------------------------------------------------------------------
# Facade
# ---------------------------------------------------------------------------

class GatewayFacade:
    """Single entry point for the host channel.

    Usage::

        facade = create_gateway(platform, launcher, settings)
        steps = await facade.call("querySteps", {"startTime": t0, "endTime": t1})

        # or, without awaiting on the caller's side:
        future = facade.dispatch("getCapabilities", {}, callback=on_done)
    """

    def __init__(
        self,
        handle: StoreHandle,
        capabilities: CapabilityProvider,
        queries: QueryGateway,
        settings_launcher: SettingsLauncher,
        *,
        zone: tzinfo,
    ) -> None:
        self._handle = handle
        self._capabilities = capabilities
        self._queries = queries
        self._launcher = settings_launcher
        self._zone = zone
        self._handlers: dict[str, Handler] = {
            "isAvailable": self._is_available,
            "isInstalled": self._is_installed,
            "getSdkStatus": self._get_sdk_status,
            "hasPermissions": self._has_permissions,
            "requestPermissions": self._request_permissions,
            "getCapabilities": self._get_capabilities,
            "queryMultiple": self._query_multiple,
            "getTodaySteps": self._get_today_steps,
            "getDailySteps": self._get_daily_steps,
            "getDailyDistance": self._unsupported("getDailyDistance"),
            "getDailyCalories": self._unsupported("getDailyCalories"),
            "aggregateSteps": self._aggregate_steps,
            "openSettings": self._open_settings,
            "disconnect": self._disconnect,
        }
        for method, data_type in _QUERY_METHODS.items():
            self._handlers[method] = self._query_handler(data_type)

    @property
    def methods(self) -> list[str]:
        return sorted(self._handlers)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def call(self, method: str, args: Mapping[str, Any] | None = None) -> Any:
        """Run ``method`` and return its wire-shaped result.

        Raises:
            GatewayError: the typed failure for this call.
        """
        handler = self._handlers.get(method)
        if handler is None:
            raise Unimplemented(f"Unknown method '{method}'")
        if args is None:
            args = {}
        elif not isinstance(args, Mapping):
            raise InvalidArgument("Arguments must be a mapping")

        logger.debug("Dispatching %s", method)
        return await handler(args)

    def dispatch(
        self,
        method: str,
        args: Mapping[str, Any] | None = None,
        callback: Callable[[asyncio.Future], None] | None = None,
    ) -> asyncio.Future:
        """Schedule ``call`` on the running loop and return immediately.

        The returned future resolves to the result or raises the GatewayError.
        Must be called from the event loop's thread.
        """
        task = asyncio.get_running_loop().create_task(self.call(method, args))
        if callback is not None:
            task.add_done_callback(callback)
        return task

    # ------------------------------------------------------------------
    # Handlers
    # ------------------------------------------------------------------

    async def _is_available(self, args: Mapping[str, Any]) -> bool:
        return self._capabilities.is_available()

    async def _is_installed(self, args: Mapping[str, Any]) -> bool:
        return self._capabilities.is_installed()

    async def _get_sdk_status(self, args: Mapping[str, Any]) -> str:
        return self._capabilities.get_sdk_status().value

    async def _has_permissions(self, args: Mapping[str, Any]) -> bool:
        return await self._capabilities.has_permissions()

    async def _request_permissions(self, args: Mapping[str, Any]) -> bool:
        return await self._capabilities.request_permissions()

    async def _get_capabilities(self, args: Mapping[str, Any]) -> dict[str, Any]:
        capabilities = await self._capabilities.get_capabilities()
        return capabilities.to_dict()

    def _query_handler(self, data_type: DataType) -> Handler:
        async def handler(args: Mapping[str, Any]) -> list[dict[str, Any]]:
            time_range = _require_range(args)
            samples = await self._queries.query_records(data_type, time_range)
            return [s.to_dict() for s in samples]

        return handler

    async def _query_multiple(self, args: Mapping[str, Any]) -> dict[str, list[dict[str, Any]]]:
        data_types = _require_data_types(args)
        time_range = _require_range(args)
        results = await self._queries.query_multiple(data_types, time_range)
        return {
            dt.value: [s.to_dict() for s in samples]
            for dt, samples in results.items()
        }

    async def _get_today_steps(self, args: Mapping[str, Any]) -> int:
        total = await self._queries.today_total(DataType.STEPS, self._zone)
        return int(total)

    async def _get_daily_steps(self, args: Mapping[str, Any]) -> int:
        date_ms = _require_millis(args, "date")
        try:
            local_date = from_millis(date_ms).astimezone(self._zone).date()
        except OverflowError as exc:
            raise InvalidArgument(f"Date {date_ms} is out of range in {self._zone}") from exc
        total = await self._queries.daily_total(DataType.STEPS, local_date, self._zone)
        return int(total)

    async def _aggregate_steps(self, args: Mapping[str, Any]) -> dict[str, int]:
        time_range = _require_range(args)
        result = await self._queries.aggregate(AggregateMetric.STEPS_TOTAL, time_range)
        return {
            "totalSteps": int(result.total),
            "startTime": time_range.start_millis,
            "endTime": time_range.end_millis,
        }

    async def _open_settings(self, args: Mapping[str, Any]) -> None:
        try:
            self._launcher.open_health_settings()
            return None
        except Exception:
            logger.warning("Opening health settings failed; falling back to app settings",
                           exc_info=True)
        try:
            self._launcher.open_app_settings()
        except Exception as exc:
            raise OpenSettingsFailed(str(exc)) from exc
        return None

    async def _disconnect(self, args: Mapping[str, Any]) -> None:
        self._handle.release()
        return None

    @staticmethod
    def _unsupported(method: str) -> Handler:
        async def handler(args: Mapping[str, Any]) -> Any:
            raise Unsupported(f"'{method}' is not supported yet")

        return handler


def create_gateway(
    platform: HealthPlatform,
    settings_launcher: SettingsLauncher,
    settings: Settings,
) -> GatewayFacade:
    """Wire a facade, its components, and a fresh store handle."""
    handle = StoreHandle(platform)
    return GatewayFacade(
        handle,
        CapabilityProvider(handle, version=settings.platform_version),
        QueryGateway(handle, fan_out_mode=settings.query_multiple_mode),
        settings_launcher,
        zone=settings.resolve_timezone(),
    )
