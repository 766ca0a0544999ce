"""Optional Redis client for the alert pubsub channel.

Redis is off unless ``REDIS_URL`` is set; callers treat ``None`` as
"not configured" rather than as a failure.
"""

from loguru import logger
from redis.asyncio import Redis
from redis.exceptions import RedisError

from config.settings import settings

_redis_client: Redis | None = None


async def get_redis() -> Redis | None:
    global _redis_client
    if not settings.redis_url:
        return None
    if _redis_client is None:
        _redis_client = Redis.from_url(settings.redis_url, decode_responses=True)
        logger.info("[REDIS] Client created")
    return _redis_client


async def ping_redis(client: Redis | None) -> bool | None:
    """True/False for a configured client, None when Redis is disabled."""
    if client is None:
        return None
    try:
        await client.ping()
    except (RedisError, OSError) as e:
        logger.warning(f"[REDIS] Ping failed: {e}")
        return False
    return True


async def close_redis() -> None:
    global _redis_client
    if _redis_client is not None:
        await _redis_client.aclose()
        _redis_client = None
