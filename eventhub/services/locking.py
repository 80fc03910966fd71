import logging
from contextlib import contextmanager
from typing import Iterator

import redis

from eventhub.core.config import EVENT_LOCK_TIMEOUT, EVENT_LOCK_WAIT
from eventhub.core.exceptions import LockUnavailableError
from eventhub.core.redis_config import get_redis_client

logger = logging.getLogger(__name__)


@contextmanager
def event_lock(event_id: int) -> Iterator[None]:
    """
    Serialize capacity-sensitive work on one event across processes.

    Request creation and moderation both read the confirmed count and then
    write; holding this lock around the whole transaction (commit included)
    keeps two callers from confirming past the participant limit.
    """
    redis_client = get_redis_client()
    lock = redis_client.lock(f"event_lock:{event_id}", timeout=EVENT_LOCK_TIMEOUT, blocking_timeout=EVENT_LOCK_WAIT)

    try:
        acquired = lock.acquire(blocking=True, blocking_timeout=EVENT_LOCK_WAIT)
    except redis.exceptions.LockError:
        acquired = False
    if not acquired:
        logger.warning("Could not acquire lock for event=%s", event_id)
        raise LockUnavailableError(f"Event with id={event_id} is being modified, please try again.")

    try:
        yield
    finally:
        try:
            lock.release()
        except redis.exceptions.LockError:
            # expired while held; the transaction has already finished
            logger.warning("Lock for event=%s expired before release", event_id)
