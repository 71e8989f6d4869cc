import logging
from typing import Optional

import redis.asyncio as redis
from pydantic import ValidationError
from redis.exceptions import RedisError

from plateup.core.exceptions import SessionStoreError
from plateup.models.onboarding import OnboardingSession

logger = logging.getLogger(__name__)


def session_key(uid: str) -> str:
    return f"onboarding_session:{uid}"


class RedisSessionStore:
    """
    Keeps in-progress onboarding sessions as JSON drafts in Redis.

    A draft expires `ttl_seconds` after its last save, so abandoned wizards
    clean themselves up.
    """

    def __init__(self, redis_client: redis.Redis, ttl_seconds: int):
        self._redis = redis_client
        self._ttl_seconds = ttl_seconds

    async def load(self, uid: str) -> Optional[OnboardingSession]:
        try:
            session_json = await self._redis.get(session_key(uid))
        except RedisError as e:
            logger.error(f"Redis error loading onboarding session for '{uid}': {e}")
            raise SessionStoreError("Could not load the onboarding session.") from e
        if not session_json:
            return None
        try:
            return OnboardingSession.model_validate_json(session_json)
        except ValidationError as e:
            logger.warning(f"Discarding unreadable onboarding draft for '{uid}': {e}")
            return None

    async def save(self, uid: str, session: OnboardingSession) -> None:
        try:
            await self._redis.set(
                session_key(uid),
                session.model_dump_json(by_alias=True),
                ex=self._ttl_seconds,
            )
        except RedisError as e:
            logger.error(f"Redis error saving onboarding session for '{uid}': {e}")
            raise SessionStoreError("Could not save the onboarding session.") from e

    async def delete(self, uid: str) -> None:
        try:
            await self._redis.delete(session_key(uid))
        except RedisError as e:
            logger.error(f"Redis error deleting onboarding session for '{uid}': {e}")
            raise SessionStoreError("Could not discard the onboarding session.") from e
