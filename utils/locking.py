"""
Per-resource lock registry.

Serializes read-check-write sequences for a single resource key
('equipment:<id>', 'staff:<id>') inside one process. Different keys never
share a lock, so requests for different resources do not wait on each other.
"""

import logging
import threading
from contextlib import contextmanager

from utils.errors import ResourceBusyError

logger = logging.getLogger(__name__)


def resource_key(resource_type: str, resource_id) -> str:
    """Build the lock key for a resource, e.g. 'equipment:<id>'."""
    return f"{resource_type}:{resource_id}"


class ResourceLockRegistry:
    """Lazily created threading.Lock per resource key with bounded waits."""

    def __init__(self, default_timeout: float = 5.0):
        self.default_timeout = default_timeout
        self._locks = {}
        self._registry_lock = threading.Lock()

    def init_app(self, app):
        """Read the default lock wait from app config."""
        self.default_timeout = float(
            app.config.get('RESOURCE_LOCK_TIMEOUT', self.default_timeout)
        )
        app.extensions['resource_locks'] = self

    def _lock_for(self, key: str) -> threading.Lock:
        with self._registry_lock:
            lock = self._locks.get(key)
            if lock is None:
                lock = threading.Lock()
                self._locks[key] = lock
            return lock

    @contextmanager
    def hold(self, key: str, timeout: float = None):
        """
        Hold the lock for a resource key.

        Args:
            key: Resource key
            timeout: Seconds to wait (defaults to RESOURCE_LOCK_TIMEOUT)

        Raises:
            ResourceBusyError: If the lock is not acquired in time
        """
        wait = self.default_timeout if timeout is None else timeout
        lock = self._lock_for(key)

        if not lock.acquire(timeout=wait):
            logger.warning(f"Lock wait exceeded for {key} after {wait:g}s")
            raise ResourceBusyError(key, wait)
        try:
            yield
        finally:
            lock.release()

    def is_locked(self, key: str) -> bool:
        """True if some request currently holds the key."""
        with self._registry_lock:
            lock = self._locks.get(key)
        return lock is not None and lock.locked()
