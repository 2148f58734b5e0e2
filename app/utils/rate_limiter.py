from typing import Optional
from redis import Redis, ConnectionPool
from redis.exceptions import RedisError
import logging

from app.core.config import settings

logger = logging.getLogger(__name__)

_pool: Optional[ConnectionPool] = None
_client: Optional[Redis] = None


def get_client() -> Redis:
    global _pool, _client
    if _client is None:
        _pool = ConnectionPool.from_url(settings.REDIS_URL, decode_responses=True)
        _client = Redis(connection_pool=_pool)
    return _client


def allow(key: str, limit: int, window_seconds: int) -> bool:
    """Return True if action under key is allowed within window, else False.

    Uses INCR + EXPIRE (nx) for a fixed window per key. When Redis is
    unreachable the action is allowed and a warning is logged.
    """
    try:
        r = get_client()
        with r.pipeline() as pipe:
            pipe.incr(key, 1)
            pipe.expire(key, window_seconds, nx=True)
            count, _ = pipe.execute()
    except RedisError as e:
        logger.warning(f"Rate limiter unavailable for {key}: {e}")
        return True
    return int(count) <= limit


def allow_for_email(action: str, email: str, limit: int, window_seconds: int = 60) -> bool:
    safe_email = (email or "").lower()
    key = f"fintar:{action}:{safe_email}"
    return allow(key, limit, window_seconds)
