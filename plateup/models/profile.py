from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel

from plateup.models.blueprint import DerivedBlueprint, MacroTargets
from plateup.models.enums import (
    ActivityLevel,
    DietaryRestriction,
    EatingChallenge,
    EnergyPattern,
    ExerciseFrequency,
    ExerciseType,
    FeaturePreference,
    FoodPreference,
    GuidanceLevel,
    HealthGoal,
    IntegrationPreference,
    LearningStyle,
    LifestyleChallenge,
    MealTimingPreference,
    WorkSchedule,
)
from plateup.models.onboarding import PhysicalStats, WeightGoal


class UserProfile(BaseModel):
    """
    The permanent profile produced when onboarding finishes.

    Immutable once built; changes go through a new profile and another save.
    """

    uid: str
    email: Optional[EmailStr] = None
    name: Optional[str] = None

    selected_goals: List[HealthGoal]
    primary_goal: HealthGoal
    success_vision: str
    physical_stats: PhysicalStats

    energy_pattern: Optional[EnergyPattern] = None
    exercise_frequency: Optional[ExerciseFrequency] = None
    activity_level: Optional[ActivityLevel] = None
    exercise_types: List[ExerciseType] = Field(default_factory=list)
    work_schedule: Optional[WorkSchedule] = None
    meal_timing_preference: Optional[MealTimingPreference] = None
    lifestyle_challenges: List[LifestyleChallenge] = Field(default_factory=list)
    eating_challenges: List[EatingChallenge] = Field(default_factory=list)
    dietary_restrictions: List[DietaryRestriction] = Field(default_factory=list)
    food_preferences: List[FoodPreference] = Field(default_factory=list)
    weight_goal: Optional[WeightGoal] = None
    learning_style: Optional[LearningStyle] = None
    guidance_level: Optional[GuidanceLevel] = None
    feature_preferences: List[FeaturePreference] = Field(default_factory=list)
    integration_preferences: List[IntegrationPreference] = Field(default_factory=list)

    bmi: Optional[float] = None
    calorie_target: int
    macro_targets: MacroTargets
    blueprint: Optional[DerivedBlueprint] = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )
