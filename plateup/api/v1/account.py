import logging

from fastapi import APIRouter, Depends, HTTPException, status

from plateup.api.deps import get_current_user, get_profile_store
from plateup.core.exceptions import ProfilePersistenceError
from plateup.models.profile import UserProfile
from plateup.models.user import AuthUser
from plateup.services.profile_store import FirestoreProfileStore

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/me", response_model=AuthUser, summary="Get Authenticated User")
def read_users_me(current_user: AuthUser = Depends(get_current_user)):
    """
    Returns the claims of the authenticated user.
    """
    return current_user


@router.get(
    "/profile",
    response_model=UserProfile,
    status_code=status.HTTP_200_OK,
    summary="Get User Profile",
)
async def get_user_profile(
    current_user: AuthUser = Depends(get_current_user),
    profiles: FirestoreProfileStore = Depends(get_profile_store),
):
    """Retrieves the profile saved when the user finished onboarding."""
    logger.info(f"Retrieving profile for user '{current_user.uid}'.")
    try:
        profile = await profiles.load(current_user.uid)
    except ProfilePersistenceError as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e)
        )
    if profile is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="User profile not found."
        )
    return profile
