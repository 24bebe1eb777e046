"""Process-wide handle to the health store client.

The client is created lazily, at most once, and only while the platform
reports the SDK as available. ``refresh`` re-checks after an environment
change (store installed, removed, or updated).
"""

from __future__ import annotations

import logging
import threading

from healthgw.domains.health.connectors import HealthPlatform, HealthStoreClient
from healthgw.domains.health.domain_logic.models import SdkStatus

logger = logging.getLogger(__name__)


class StoreHandle:
    """Guarded lazy singleton around ``HealthPlatform.create_client``.

    Usage::

        handle = StoreHandle(platform)
        client = handle.get()
        if client is None:
            ...  # store not available on this device
    """

    def __init__(self, platform: HealthPlatform) -> None:
        self._platform = platform
        self._client: HealthStoreClient | None = None
        self._initialized = False
        self._lock = threading.Lock()

    @property
    def platform(self) -> HealthPlatform:
        return self._platform

    def get(self) -> HealthStoreClient | None:
        """Return the client, initializing it on first use."""
        if self._initialized:
            return self._client
        with self._lock:
            if not self._initialized:
                self._client = self._connect()
                self._initialized = True
            return self._client

    def refresh(self) -> HealthStoreClient | None:
        """Re-check the SDK status and create or drop the client to match."""
        with self._lock:
            available = self._check_status()
            if available and self._client is None:
                self._client = self._platform.create_client()
                logger.info("Health store became available; client created")
            elif not available and self._client is not None:
                self._client = None
                logger.info("Health store no longer available; client released")
            self._initialized = True
            return self._client

    def release(self) -> None:
        """Drop the client. The next ``get`` initializes again."""
        with self._lock:
            self._client = None
            self._initialized = False

    def _connect(self) -> HealthStoreClient | None:
        if not self._check_status():
            logger.info("Health store not available; running without a client")
            return None
        logger.debug("Creating health store client")
        return self._platform.create_client()

    def _check_status(self) -> bool:
        try:
            status = self._platform.get_sdk_status()
        except Exception:
            logger.exception("Health store status check failed")
            return False
        return status == SdkStatus.AVAILABLE
