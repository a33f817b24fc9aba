# storefront/services/cache_service.py
import redis
from redis.exceptions import RedisError

from storefront.domain.errors import DependencyError
from storefront.utils.settings import REDIS_URL, REDIS_SOCKET_TIMEOUT
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class RedisListingCache:
    """
    -get / set with TTL
    -delete every key matching a glob pattern (SCAN, never KEYS)
    Redis failures come out as DependencyError; callers decide whether
    to swallow them.
    """

    def __init__(self, client: redis.Redis):
        self.redis = client

    @classmethod
    def from_url(cls, url: str | None = None) -> "RedisListingCache":
        return cls(
            redis.Redis.from_url(
                url or REDIS_URL,
                decode_responses=True,
                socket_timeout=REDIS_SOCKET_TIMEOUT,
                socket_connect_timeout=REDIS_SOCKET_TIMEOUT,
            )
        )

    def get(self, key: str) -> str | None:
        try:
            return self.redis.get(key)
        except RedisError as e:
            logger.warning(f"Cache GET {key} failed: {e}")
            raise DependencyError("Cache read failed") from e

    def set(self, key: str, value: str, ttl: int) -> None:
        try:
            self.redis.set(name=key, value=value, ex=ttl)
        except RedisError as e:
            logger.warning(f"Cache SET {key} failed: {e}")
            raise DependencyError("Cache write failed") from e

    def delete_by_pattern(self, pattern: str) -> int:
        try:
            keys = list(self.redis.scan_iter(match=pattern, count=500))
            if not keys:
                return 0
            return self.redis.delete(*keys)
        except RedisError as e:
            logger.warning(f"Cache invalidation {pattern} failed: {e}")
            raise DependencyError("Cache invalidation failed") from e

    def close(self) -> None:
        self.redis.close()
