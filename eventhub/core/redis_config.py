from functools import lru_cache

import redis

from eventhub.core.config import REDIS_URL


def get_redis_url() -> str:
    return REDIS_URL


@lru_cache
def get_redis_client() -> redis.Redis:
    """Process-wide client; redis-py pools connections behind it."""
    return redis.from_url(get_redis_url(), decode_responses=True)
