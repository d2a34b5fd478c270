"""
Tests for the per-resource lock registry.
"""

import threading

import pytest

from utils.errors import PersistenceError, ResourceBusyError
from utils.locking import ResourceLockRegistry, resource_key


class TestResourceKey:
    """Tests for lock key naming."""

    def test_key_format(self):
        """Keys are '<type>:<id>'."""
        assert resource_key('equipment', 'abc') == 'equipment:abc'
        assert resource_key('staff', 7) == 'staff:7'


class TestResourceLockRegistry:
    """Tests for bounded per-key locking."""

    def test_hold_and_release(self):
        """A key is locked only while held."""
        registry = ResourceLockRegistry()

        with registry.hold('equipment:1'):
            assert registry.is_locked('equipment:1') is True
        assert registry.is_locked('equipment:1') is False

    def test_timeout_raises_busy(self):
        """A second holder gives up after its timeout."""
        registry = ResourceLockRegistry(default_timeout=0.05)

        with registry.hold('staff:1'):
            with pytest.raises(ResourceBusyError) as exc:
                with registry.hold('staff:1'):
                    pass

        assert isinstance(exc.value, PersistenceError)
        assert exc.value.resource_key == 'staff:1'
        assert exc.value.retryable is True

    def test_zero_timeout(self):
        """A zero timeout fails immediately when the key is taken."""
        registry = ResourceLockRegistry()

        with registry.hold('staff:1'):
            with pytest.raises(ResourceBusyError):
                with registry.hold('staff:1', timeout=0):
                    pass

    def test_keys_are_independent(self):
        """Holding one key never blocks another."""
        registry = ResourceLockRegistry(default_timeout=0.05)

        with registry.hold('equipment:1'):
            with registry.hold('equipment:2'):
                assert registry.is_locked('equipment:2') is True

    def test_released_after_exception(self):
        """The lock is released when the body raises."""
        registry = ResourceLockRegistry()

        with pytest.raises(RuntimeError):
            with registry.hold('equipment:1'):
                raise RuntimeError('boom')

        assert registry.is_locked('equipment:1') is False

    def test_waiter_gets_lock_after_release(self):
        """A waiting thread proceeds once the holder releases."""
        registry = ResourceLockRegistry(default_timeout=5)
        acquired = threading.Event()
        order = []

        def waiter():
            with registry.hold('staff:9'):
                order.append('waiter')
            acquired.set()

        with registry.hold('staff:9'):
            thread = threading.Thread(target=waiter)
            thread.start()
            order.append('holder')

        assert acquired.wait(timeout=5)
        thread.join(timeout=5)
        assert order == ['holder', 'waiter']

    def test_init_app_reads_config(self, app):
        """Default timeout comes from RESOURCE_LOCK_TIMEOUT."""
        registry = ResourceLockRegistry()
        registry.init_app(app)

        assert registry.default_timeout == 10.0
