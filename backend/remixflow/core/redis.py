import redis

from remixflow.core.config import settings

_redis_client: redis.Redis | None = None


def get_redis() -> redis.Redis:
    """Lazily creates the shared store client so importing the app never connects."""
    global _redis_client
    if _redis_client is None:
        _redis_client = redis.Redis.from_url(settings.REDIS_URL, decode_responses=True)
    return _redis_client
