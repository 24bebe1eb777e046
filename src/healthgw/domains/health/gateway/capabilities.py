"""Capability provider — availability, authorization and SDK status."""

from __future__ import annotations

import logging

from healthgw.domains.health.connectors.store_handle import StoreHandle
from healthgw.domains.health.domain_logic.errors import (
    AvailabilityCheckFailed,
    InstallCheckFailed,
    NotAvailable,
    PermissionCheckFailed,
    PermissionRequestFailed,
    PermissionRequestRequired,
    StatusCheckFailed,
)
from healthgw.domains.health.domain_logic.models import (
    REQUIRED_PERMISSIONS,
    Capabilities,
    DataType,
    SdkStatus,
)

logger = logging.getLogger(__name__)


class CapabilityProvider:
    """Reports what the store can do right now.

    Nothing is cached: permissions can be granted or revoked between calls.
    """

    def __init__(self, handle: StoreHandle, *, version: str = "1.1.0") -> None:
        self._handle = handle
        self._version = version

    def get_sdk_status(self) -> SdkStatus:
        try:
            status = self._handle.platform.get_sdk_status()
        except Exception as exc:
            raise StatusCheckFailed(str(exc)) from exc
        try:
            return SdkStatus(status)
        except ValueError:
            logger.warning("Unrecognised SDK status %r", status)
            return SdkStatus.UNKNOWN

    def is_available(self) -> bool:
        try:
            status = self._handle.platform.get_sdk_status()
        except Exception as exc:
            raise AvailabilityCheckFailed(str(exc)) from exc
        return status == SdkStatus.AVAILABLE

    def is_installed(self) -> bool:
        try:
            status = self._handle.platform.get_sdk_status()
        except Exception as exc:
            raise InstallCheckFailed(str(exc)) from exc
        return status != SdkStatus.UNAVAILABLE

    async def has_permissions(self) -> bool:
        client = self._handle.get()
        if client is None:
            return False
        return REQUIRED_PERMISSIONS <= await self._granted(client)

    async def request_permissions(self) -> bool:
        """Confirm that all permissions are granted.

        The interactive prompt belongs to the host; when anything is missing
        this raises PermissionRequestRequired so the host can run it.
        """
        client = self._handle.get()
        if client is None:
            raise NotAvailable("Health store not available")
        try:
            granted = await client.get_granted_permissions()
        except Exception as exc:
            logger.exception("Permission lookup failed during request")
            raise PermissionRequestFailed(str(exc)) from exc

        missing = REQUIRED_PERMISSIONS - set(granted)
        if missing:
            raise PermissionRequestRequired(
                "Missing permissions must be requested by the host: "
                + ", ".join(sorted(missing))
            )
        return True

    async def get_capabilities(self) -> Capabilities:
        client = self._handle.get()
        if client is None:
            return Capabilities.unavailable()

        granted = await self._granted(client)
        return Capabilities(
            available=True,
            authorized=REQUIRED_PERMISSIONS <= granted,
            version=self._version,
            supported_types=frozenset(dt.value for dt in DataType),
        )

    async def _granted(self, client) -> set[str]:
        try:
            return set(await client.get_granted_permissions())
        except Exception as exc:
            logger.exception("Permission lookup failed")
            raise PermissionCheckFailed(str(exc)) from exc
