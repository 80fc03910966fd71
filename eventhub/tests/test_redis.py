"""
Test Redis integration and the per-event lock.
"""
import pytest

from eventhub.core.exceptions import ConflictError, LockUnavailableError
from eventhub.services import locking
from eventhub.services.locking import event_lock


class TestRedisIntegration:
    """Test Redis functionality."""

    def test_redis_lock_basic(self, fake_redis):
        """Test Redis lock acquisition and release."""
        lock = fake_redis.lock("test_lock", timeout=10)

        assert lock.acquire(blocking=False) is True
        lock.release()

    def test_redis_lock_blocking(self, fake_redis):
        """Test that a lock cannot be acquired twice."""
        lock1 = fake_redis.lock("resource_lock", timeout=10)
        lock2 = fake_redis.lock("resource_lock", timeout=10)

        assert lock1.acquire(blocking=False) is True
        assert lock2.acquire(blocking=False) is False

        lock1.release()
        assert lock2.acquire(blocking=False) is True
        lock2.release()


class TestEventLock:
    """Test the event_lock context manager."""

    def test_lock_held_inside_block(self, redis_client):
        with event_lock(42):
            assert redis_client.get("event_lock:42") is not None

        assert redis_client.get("event_lock:42") is None

    def test_lock_released_on_error(self, redis_client):
        with pytest.raises(RuntimeError):
            with event_lock(7):
                raise RuntimeError("boom")

        assert redis_client.get("event_lock:7") is None

    def test_locks_are_per_event(self, redis_client):
        with event_lock(1):
            with event_lock(2):
                assert redis_client.get("event_lock:1") is not None
                assert redis_client.get("event_lock:2") is not None

    def test_busy_event_raises_conflict(self, redis_client, monkeypatch):
        monkeypatch.setattr(locking, "EVENT_LOCK_WAIT", 0.2)
        other = redis_client.lock("event_lock:5", timeout=10)
        assert other.acquire(blocking=False)

        try:
            with pytest.raises(LockUnavailableError) as exc_info:
                with event_lock(5):
                    pass
        finally:
            other.release()

        assert isinstance(exc_info.value, ConflictError)
        assert exc_info.value.status_code == 409

    def test_expired_lock_does_not_mask_result(self, redis_client):
        """Test that losing the lock while holding it only logs."""
        with event_lock(9):
            redis_client.delete("event_lock:9")
