import logging
from functools import lru_cache

import redis.asyncio as redis
from cachetools import TTLCache, cached
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from firebase_admin import auth
from google.cloud.firestore_v1.async_client import AsyncClient

from plateup.core.config import settings
from plateup.db.firebase import get_firebase_auth, get_firestore_client
from plateup.models.user import AuthUser
from plateup.services.blueprint_generator import (
    BlueprintGenerator,
    get_blueprint_generator,
)
from plateup.services.profile_store import FirestoreProfileStore
from plateup.services.session_store import RedisSessionStore

logger = logging.getLogger(__name__)
bearer_scheme = HTTPBearer()

# Decoded ID token claims, held for less than a token's one-hour lifetime.
token_claims_cache = TTLCache(
    maxsize=settings.AUTH_CACHE_SIZE, ttl=settings.AUTH_CACHE_TTL_SECONDS
)


@lru_cache()
def get_auth_dependency() -> auth:
    return get_firebase_auth()


@cached(cache=token_claims_cache)
def decode_id_token(token: str, firebase_auth: auth) -> dict:
    """
    Returns the claims of a Firebase ID token presented by the onboarding app.

    Raises:
        HTTPException: 401 for an invalid, expired or revoked token; 500 if
            Firebase could not be asked.
    """
    try:
        logger.debug("Token not cached; verifying with Firebase.")
        return firebase_auth.verify_id_token(token)
    except (
        auth.InvalidIdTokenError,
        auth.ExpiredIdTokenError,
        auth.RevokedIdTokenError,
    ) as e:
        logger.warning(f"Rejected onboarding request token: {e}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Invalid or expired token: {e}",
        )
    except Exception as e:
        logger.error(f"Firebase token verification failed: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Could not verify the sign-in token.",
        )


async def get_current_user(
    cred: HTTPAuthorizationCredentials = Depends(bearer_scheme),
    firebase_auth: auth = Depends(get_auth_dependency),
) -> AuthUser:
    """The signed-in user whose onboarding session the request acts on."""
    if not cred:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Sign in before starting onboarding.",
        )

    claims = decode_id_token(cred.credentials, firebase_auth)
    return AuthUser(
        uid=claims["uid"],
        email=claims.get("email"),
        name=claims.get("name"),
    )


def get_redis_client(request: Request) -> redis.Redis:
    """Returns the Redis client opened in the application lifespan."""
    return request.app.state.redis


def get_session_store(
    redis_client: redis.Redis = Depends(get_redis_client),
) -> RedisSessionStore:
    return RedisSessionStore(
        redis_client, ttl_seconds=settings.ONBOARDING_SESSION_TTL_SECONDS
    )


def get_profile_store(
    db: AsyncClient = Depends(get_firestore_client),
) -> FirestoreProfileStore:
    return FirestoreProfileStore(db)


def get_generator() -> BlueprintGenerator:
    try:
        return get_blueprint_generator()
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=str(e),
        )
