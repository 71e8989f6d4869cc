from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr
from pydantic.alias_generators import to_camel

from plateup.models.blueprint import DerivedBlueprint, MacroTargets
from plateup.models.profile import UserProfile


class AuthUser(BaseModel):
    """Represents the authenticated user object derived from a Firebase ID token."""

    uid: str
    email: Optional[EmailStr] = None
    name: Optional[str] = None


class UserInDB(BaseModel):
    """Represents the user document as stored in Firestore after onboarding."""

    uid: str
    onboarding_complete: bool = False
    onboarded_at: Optional[datetime] = None
    current_weight_kg: Optional[float] = None
    profile: Optional[UserProfile] = None
    nutrition_targets: Optional[MacroTargets] = None
    calorie_target: Optional[int] = None
    health_blueprint: Optional[DerivedBlueprint] = None

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )
