"""Gateway error taxonomy.

Every failure the facade can report is a ``GatewayError`` subclass with a
stable ``code``. Store errors are wrapped (``raise ... from exc``) so the
original exception stays reachable through ``__cause__``.
"""

from __future__ import annotations

from typing import Any


class GatewayError(Exception):
    """Base exception for all gateway errors."""

    code: str = "GATEWAY_ERROR"
    retryable: bool = False

    def __init__(self, detail: str = "") -> None:
        super().__init__(detail or self.code)
        self.detail = detail

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "message": self.detail,
            "retryable": self.retryable,
        }


class InvalidArgument(GatewayError):
    """Missing or malformed caller input."""

    code = "INVALID_ARGS"


class NotAvailable(GatewayError):
    """No health store on this device (until the environment changes)."""

    code = "NOT_AVAILABLE"


class PermissionCheckFailed(GatewayError):
    code = "PERMISSION_CHECK_FAILED"
    retryable = True


class PermissionRequestFailed(GatewayError):
    code = "PERMISSION_REQUEST_FAILED"
    retryable = True


class PermissionRequestRequired(GatewayError):
    """Permissions are missing; the host must run its own prompt flow."""

    code = "PERMISSION_REQUEST_REQUIRED"


class AvailabilityCheckFailed(GatewayError):
    code = "AVAILABILITY_CHECK_FAILED"
    retryable = True


class InstallCheckFailed(GatewayError):
    code = "INSTALL_CHECK_FAILED"
    retryable = True


class StatusCheckFailed(GatewayError):
    code = "STATUS_CHECK_FAILED"
    retryable = True


class QueryFailed(GatewayError):
    code = "QUERY_FAILED"
    retryable = True


class AggregateFailed(GatewayError):
    code = "AGGREGATE_FAILED"
    retryable = True


class Unimplemented(GatewayError):
    """Unknown method name."""

    code = "NOT_IMPLEMENTED"


class Unsupported(GatewayError):
    """Known operation that has not been built yet."""

    code = "UNSUPPORTED"


class OpenSettingsFailed(GatewayError):
    code = "OPEN_SETTINGS_FAILED"
    retryable = True
