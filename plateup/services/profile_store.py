import logging
from datetime import datetime, timezone
from typing import Optional

from google.api_core import exceptions as google_exceptions
from google.cloud.firestore_v1.async_client import AsyncClient

from plateup.core.exceptions import ProfilePersistenceError
from plateup.models.profile import UserProfile
from plateup.models.user import UserInDB

logger = logging.getLogger(__name__)


class FirestoreProfileStore:
    """
    Persists finished onboarding profiles to `users/{uid}`.

    Saves are upserts merged by uid, so a retried save after a failure is safe.
    """

    def __init__(self, db: AsyncClient):
        self._db = db

    def _user_doc(self, uid: str):
        return self._db.collection("users").document(uid)

    async def save(self, profile: UserProfile) -> None:
        profile_data = profile.model_dump(by_alias=True, exclude={"blueprint"})
        data_to_save = {
            "profile": profile_data,
            "nutritionTargets": profile.macro_targets.model_dump(by_alias=True),
            "calorieTarget": profile.calorie_target,
            "healthBlueprint": profile.blueprint.model_dump(by_alias=True)
            if profile.blueprint
            else None,
            "onboardingComplete": True,
            "onboardedAt": datetime.now(timezone.utc),
            "currentWeightKg": profile.physical_stats.weight_kg,
        }
        try:
            await self._user_doc(profile.uid).set(data_to_save, merge=True)
            logger.info(f"Saved onboarding profile for user '{profile.uid}'.")
        except (google_exceptions.GoogleAPICallError, google_exceptions.RetryError) as e:
            logger.error(
                f"Firestore error saving profile for '{profile.uid}': {e}",
                exc_info=True,
            )
            raise ProfilePersistenceError(
                "A database error occurred while saving the profile."
            ) from e

    async def load_user(self, uid: str) -> Optional[UserInDB]:
        try:
            doc = await self._user_doc(uid).get()
        except (google_exceptions.GoogleAPICallError, google_exceptions.RetryError) as e:
            logger.error(f"Firestore error loading profile for '{uid}': {e}")
            raise ProfilePersistenceError(
                "A database error occurred while loading the profile."
            ) from e
        if not doc.exists:
            return None
        return UserInDB(uid=doc.id, **doc.to_dict())

    async def load(self, uid: str) -> Optional[UserProfile]:
        user = await self.load_user(uid)
        if user is None or user.profile is None:
            return None
        if user.health_blueprint is not None and user.profile.blueprint is None:
            return user.profile.model_copy(update={"blueprint": user.health_blueprint})
        return user.profile
