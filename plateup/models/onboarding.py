from datetime import datetime, timezone
from typing import List, Optional, Set

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from plateup.models.blueprint import DerivedBlueprint
from plateup.models.enums import (
    ActivityLevel,
    BiologicalSex,
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
    WeightFocusArea,
    WeightGoalType,
    WeightTimeline,
    WorkSchedule,
)
from plateup.models.screens import FIRST_SCREEN, TOTAL_SCREENS


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PhysicalStats(BaseModel):
    """Body basics. Height is always stored in cm and weight in kg."""

    height_cm: float = 0
    weight_kg: float = 0
    age: int = 0
    biological_sex: Optional[BiologicalSex] = None
    use_metric_units: bool = False

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class EnergyLevel(BaseModel):
    hour: int = Field(ge=0, le=23)
    level: int = Field(ge=1, le=5)


class WeightGoal(BaseModel):
    goal_type: Optional[WeightGoalType] = None
    target_weight_kg: Optional[float] = Field(default=None, gt=0)
    timeline: Optional[WeightTimeline] = None
    focus_area: Optional[WeightFocusArea] = None

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class OnboardingSession(BaseModel):
    """
    The in-progress record of a user's wizard answers.

    Owned by a single OnboardingFlowController for the lifetime of the wizard
    and stored as a draft between requests.
    """

    current_screen: int = Field(default=int(FIRST_SCREEN), ge=1, le=TOTAL_SCREENS)
    screen_entered_at: datetime = Field(default_factory=_utcnow)
    show_value_preview: bool = False
    is_processing: bool = False
    processing_started_at: Optional[datetime] = None

    selected_goals: Set[HealthGoal] = Field(default_factory=set)
    primary_goal: Optional[HealthGoal] = None
    success_vision: str = ""
    physical_stats: PhysicalStats = Field(default_factory=PhysicalStats)

    energy_pattern: Optional[EnergyPattern] = None
    energy_levels: List[EnergyLevel] = Field(default_factory=list)

    exercise_frequency: Optional[ExerciseFrequency] = None
    activity_level: Optional[ActivityLevel] = None
    exercise_types: Set[ExerciseType] = Field(default_factory=set)

    work_schedule: Optional[WorkSchedule] = None
    meal_timing_preference: Optional[MealTimingPreference] = None
    lifestyle_challenges: Set[LifestyleChallenge] = Field(default_factory=set)

    eating_challenges: Set[EatingChallenge] = Field(default_factory=set)
    dietary_restrictions: Set[DietaryRestriction] = Field(default_factory=set)
    food_preferences: Set[FoodPreference] = Field(default_factory=set)

    weight_goal: WeightGoal = Field(default_factory=WeightGoal)
    learning_style: Optional[LearningStyle] = None
    guidance_level: Optional[GuidanceLevel] = None
    feature_preferences: Set[FeaturePreference] = Field(default_factory=set)
    integration_preferences: Set[IntegrationPreference] = Field(default_factory=set)

    blueprint: Optional[DerivedBlueprint] = None
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        validate_assignment=True,
    )
