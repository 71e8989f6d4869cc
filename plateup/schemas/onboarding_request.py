from typing import Any, Dict, List, Literal, Optional, Set

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

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
    WorkSchedule,
)
from plateup.models.onboarding import EnergyLevel, PhysicalStats, WeightGoal
from plateup.services.profile_derivation import inches_to_cm, pounds_to_kg


class BodyBasicsUpdate(BaseModel):
    """Body basics as entered; imperial values are converted to cm and kg."""

    height: float = Field(gt=0, description="Height in cm, or inches when imperial.")
    weight: float = Field(gt=0, description="Weight in kg, or lbs when imperial.")
    age: int = Field(gt=0, lt=130)
    biological_sex: BiologicalSex
    unit: Literal["metric", "imperial"] = "metric"

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_physical_stats(self) -> PhysicalStats:
        metric = self.unit == "metric"
        return PhysicalStats(
            height_cm=self.height if metric else inches_to_cm(self.height),
            weight_kg=self.weight if metric else pounds_to_kg(self.weight),
            age=self.age,
            biological_sex=self.biological_sex,
            use_metric_units=metric,
        )


class AnswersUpdate(BaseModel):
    """
    Answers for the current screen. Only the fields that are sent are written;
    they must all belong to the screen the user is on.
    """

    selected_goals: Optional[Set[HealthGoal]] = None
    primary_goal: Optional[HealthGoal] = None
    success_vision: Optional[str] = Field(default=None, max_length=500)
    physical_stats: Optional[BodyBasicsUpdate] = None
    energy_pattern: Optional[EnergyPattern] = None
    energy_levels: Optional[List[EnergyLevel]] = None
    exercise_frequency: Optional[ExerciseFrequency] = None
    activity_level: Optional[ActivityLevel] = None
    exercise_types: Optional[Set[ExerciseType]] = None
    work_schedule: Optional[WorkSchedule] = None
    meal_timing_preference: Optional[MealTimingPreference] = None
    lifestyle_challenges: Optional[Set[LifestyleChallenge]] = None
    eating_challenges: Optional[Set[EatingChallenge]] = None
    dietary_restrictions: Optional[Set[DietaryRestriction]] = None
    food_preferences: Optional[Set[FoodPreference]] = None
    weight_goal: Optional[WeightGoal] = None
    learning_style: Optional[LearningStyle] = None
    guidance_level: Optional[GuidanceLevel] = None
    feature_preferences: Optional[Set[FeaturePreference]] = None
    integration_preferences: Optional[Set[IntegrationPreference]] = None

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
    )

    def to_answers(self) -> Dict[str, Any]:
        answers = {name: getattr(self, name) for name in self.model_fields_set}
        if self.physical_stats is not None:
            answers["physical_stats"] = self.physical_stats.to_physical_stats()
        return answers


class SkipRequest(BaseModel):
    screen: int
