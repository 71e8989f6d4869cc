"""
Tests for Firebase ID token handling on onboarding requests.
"""

import asyncio
from unittest.mock import MagicMock

import pytest
from fastapi import HTTPException
from fastapi.security import HTTPAuthorizationCredentials
from firebase_admin import auth

from plateup.api.deps import decode_id_token, get_current_user, token_claims_cache


@pytest.fixture(autouse=True)
def empty_claims_cache():
    token_claims_cache.clear()
    yield
    token_claims_cache.clear()


@pytest.fixture
def firebase_auth():
    firebase_auth = MagicMock()
    firebase_auth.verify_id_token.return_value = {
        "uid": "user-1",
        "email": "sam@example.com",
        "name": "Sam",
    }
    return firebase_auth


def test_verified_claims_are_cached(firebase_auth):
    first = decode_id_token("token-a", firebase_auth)
    second = decode_id_token("token-a", firebase_auth)

    assert first == second
    firebase_auth.verify_id_token.assert_called_once_with("token-a")


def test_invalid_token_is_unauthorized(firebase_auth):
    firebase_auth.verify_id_token.side_effect = auth.InvalidIdTokenError("bad token")

    with pytest.raises(HTTPException) as exc_info:
        decode_id_token("token-b", firebase_auth)

    assert exc_info.value.status_code == 401
    assert len(token_claims_cache) == 0


def test_verification_outage_is_server_error(firebase_auth):
    firebase_auth.verify_id_token.side_effect = RuntimeError("network unreachable")

    with pytest.raises(HTTPException) as exc_info:
        decode_id_token("token-c", firebase_auth)

    assert exc_info.value.status_code == 500
    assert exc_info.value.detail == "Could not verify the sign-in token."


def test_current_user_comes_from_claims(firebase_auth):
    cred = HTTPAuthorizationCredentials(scheme="Bearer", credentials="token-d")

    user = asyncio.run(get_current_user(cred=cred, firebase_auth=firebase_auth))

    assert user.uid == "user-1"
    assert user.email == "sam@example.com"
    assert user.name == "Sam"


def test_missing_credentials_are_unauthorized(firebase_auth):
    with pytest.raises(HTTPException) as exc_info:
        asyncio.run(get_current_user(cred=None, firebase_auth=firebase_auth))

    assert exc_info.value.status_code == 401
    assert exc_info.value.detail == "Sign in before starting onboarding."
    firebase_auth.verify_id_token.assert_not_called()
