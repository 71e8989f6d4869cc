import enum
from datetime import datetime, timezone
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer
from pydantic.alias_generators import to_camel


class BlueprintSource(str, enum.Enum):
    AI = "ai"
    LOCAL = "local"


class MacroTargets(BaseModel):
    """Daily macronutrient targets in grams."""

    protein: int = Field(ge=0)
    carbs: int = Field(ge=0)
    fat: int = Field(ge=0)
    fiber: int = Field(default=30, ge=0)

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class MealTimingRecommendations(BaseModel):
    """Named eating windows, as free text (e.g. "7:00 AM - 9:00 AM")."""

    breakfast_window: Optional[str] = None
    lunch_window: str
    dinner_window: str
    snack_windows: List[str] = Field(default_factory=list)
    fasting_window: Optional[str] = None

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class DerivedBlueprint(BaseModel):
    """
    Nutrition targets computed once from a completed onboarding session.
    """

    daily_calorie_target: int = Field(gt=0)
    macro_targets: MacroTargets
    # Percent of macro calories from protein, carbs and fat.
    macro_percentages: Dict[str, float] = Field(default_factory=dict)
    meal_timing: MealTimingRecommendations
    personalized_advice: List[str] = Field(default_factory=list)
    weekly_goals: List[str] = Field(default_factory=list)
    supplement_recommendations: Optional[List[str]] = None
    source: BlueprintSource = BlueprintSource.LOCAL
    generated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class BlueprintGenerationStatus(enum.Enum):
    COMPLETE = "complete"
    ERROR = "error"


class BlueprintResult(BaseModel):
    """
    Outcome of a blueprint generation attempt. Exactly one of blueprint or
    error is set.
    """

    status: BlueprintGenerationStatus
    blueprint: Optional[DerivedBlueprint] = None
    error: Optional[str] = None
    finished_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def success(cls, blueprint: DerivedBlueprint) -> "BlueprintResult":
        return cls(status=BlueprintGenerationStatus.COMPLETE, blueprint=blueprint)

    @classmethod
    def failure(cls, reason: str) -> "BlueprintResult":
        return cls(status=BlueprintGenerationStatus.ERROR, error=reason)

    @property
    def ok(self) -> bool:
        return self.status is BlueprintGenerationStatus.COMPLETE

    @field_serializer("finished_at")
    def serialize_finished_at(self, value: datetime, _info):
        """Converts the finished_at datetime to a Unix timestamp."""
        return value.timestamp()

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
