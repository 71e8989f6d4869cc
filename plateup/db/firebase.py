import logging

import firebase_admin
from firebase_admin import auth, credentials, firestore_async
from google.cloud.firestore_v1.async_client import AsyncClient

from plateup.core.config import settings

logger = logging.getLogger(__name__)


def initialize_firebase() -> firebase_admin.App:
    """
    Returns the default Firebase app, initializing it on first use with the
    service account at GOOGLE_APPLICATION_CREDENTIALS.
    """
    try:
        return firebase_admin.get_app()
    except ValueError:
        logger.info(f"Initializing Firebase for project '{settings.FIREBASE_PROJECT_ID}'.")
        return firebase_admin.initialize_app(
            credentials.Certificate(settings.GOOGLE_APPLICATION_CREDENTIALS),
            {"projectId": settings.FIREBASE_PROJECT_ID},
        )


def get_firestore_client() -> AsyncClient:
    """Async Firestore client; user profiles live in the `users` collection."""
    return firestore_async.client()


def get_firebase_auth():
    return auth
