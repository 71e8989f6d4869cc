import redis.asyncio as redis

from plateup.core.config import settings


def create_redis_client() -> redis.Redis:
    """
    Creates the async Redis client used for onboarding drafts.

    The connection pool is opened lazily on first command.
    """
    return redis.from_url(settings.REDIS_URL, decode_responses=True)
