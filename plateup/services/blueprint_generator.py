import json
import logging
from functools import lru_cache
from typing import List, Optional, Protocol

from google import genai
from google.genai import errors as genai_errors
from google.genai import types
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from plateup.core.config import settings
from plateup.core.exceptions import BlueprintGenerationError, IncompleteSessionError
from plateup.models.blueprint import (
    BlueprintSource,
    DerivedBlueprint,
    MacroTargets,
    MealTimingRecommendations,
)
from plateup.models.onboarding import OnboardingSession
from plateup.services import profile_derivation

logger = logging.getLogger(__name__)

# Answer fields sent to the model; wizard bookkeeping stays local.
PROMPT_FIELDS = {
    "selected_goals",
    "primary_goal",
    "success_vision",
    "physical_stats",
    "energy_pattern",
    "exercise_frequency",
    "activity_level",
    "exercise_types",
    "work_schedule",
    "meal_timing_preference",
    "lifestyle_challenges",
    "eating_challenges",
    "dietary_restrictions",
    "food_preferences",
    "weight_goal",
}

BLUEPRINT_PROMPT = """You are an expert nutritionist creating a personalized health blueprint for a client.

CLIENT PROFILE:
{profile}

REFERENCE FIGURES (Mifflin-St Jeor, adjusted for the primary goal):
- Daily calorie target: {calorie_target} kcal

Create a blueprint that includes:
1. dailyCalorieTarget: integer kcal, based on the goal and the reference figure.
2. macroTargets: protein, carbs, fat and fiber in grams (integers).
3. mealTiming: breakfastWindow, lunchWindow, dinnerWindow as text such as
   "7:00 AM - 9:00 AM", optional snackWindows (list) and fastingWindow.
   Consider their work schedule and meal timing preference.
4. personalizedAdvice: 5-7 specific, actionable recommendations.
5. weeklyGoals: 3-5 measurable goals for the first week.
6. supplementRecommendations: optional, evidence-based, only if truly beneficial.

Respond with a single JSON object using exactly these keys."""


class BlueprintGenerator(Protocol):
    async def generate(self, session: OnboardingSession) -> DerivedBlueprint: ...


class _MacroResponse(BaseModel):
    protein: float = Field(ge=0)
    carbs: float = Field(ge=0)
    fat: float = Field(ge=0)
    fiber: Optional[float] = Field(default=None, ge=0)


class _MealTimingResponse(BaseModel):
    breakfast_window: Optional[str] = None
    lunch_window: Optional[str] = None
    dinner_window: Optional[str] = None
    snack_windows: Optional[List[str]] = None
    fasting_window: Optional[str] = None

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class BlueprintResponse(BaseModel):
    """The model's JSON answer. Everything is optional and checked at the boundary."""

    daily_calorie_target: Optional[float] = Field(default=None, gt=0)
    macro_targets: Optional[_MacroResponse] = None
    meal_timing: Optional[_MealTimingResponse] = None
    personalized_advice: List[str] = Field(default_factory=list)
    weekly_goals: List[str] = Field(default_factory=list)
    supplement_recommendations: Optional[List[str]] = None

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def build_prompt(session: OnboardingSession, calorie_target: Optional[int]) -> str:
    profile = session.model_dump(mode="json", by_alias=True, include=PROMPT_FIELDS)
    return BLUEPRINT_PROMPT.format(
        profile=json.dumps(profile, indent=2, sort_keys=True),
        calorie_target=calorie_target if calorie_target is not None else "unknown",
    )


def merge_response(
    response: BlueprintResponse, fallback: DerivedBlueprint
) -> DerivedBlueprint:
    """Fills whatever the model left out with the locally derived figures."""
    macros = fallback.macro_targets
    if response.macro_targets is not None:
        macros = MacroTargets(
            protein=round(response.macro_targets.protein),
            carbs=round(response.macro_targets.carbs),
            fat=round(response.macro_targets.fat),
            fiber=round(response.macro_targets.fiber)
            if response.macro_targets.fiber is not None
            else fallback.macro_targets.fiber,
        )

    timing = fallback.meal_timing
    if response.meal_timing is not None:
        provided = response.meal_timing.model_dump(exclude_none=True)
        timing = MealTimingRecommendations(**{**timing.model_dump(), **provided})

    return DerivedBlueprint(
        daily_calorie_target=round(response.daily_calorie_target)
        if response.daily_calorie_target
        else fallback.daily_calorie_target,
        macro_targets=macros,
        macro_percentages=profile_derivation.macro_percentages(macros),
        meal_timing=timing,
        personalized_advice=response.personalized_advice or fallback.personalized_advice,
        weekly_goals=response.weekly_goals or fallback.weekly_goals,
        supplement_recommendations=response.supplement_recommendations
        if response.supplement_recommendations is not None
        else fallback.supplement_recommendations,
        source=BlueprintSource.AI,
    )


class LocalBlueprintGenerator:
    """Derives the blueprint without a network round trip."""

    async def generate(self, session: OnboardingSession) -> DerivedBlueprint:
        try:
            return profile_derivation.derive_blueprint(session)
        except IncompleteSessionError as e:
            raise BlueprintGenerationError(str(e)) from e


class GeminiBlueprintGenerator:
    """
    Generates the blueprint with Gemini.

    The session is serialized into the prompt, the model is asked for JSON and
    the reply is validated before it becomes a DerivedBlueprint.
    """

    def __init__(self, client: genai.Client, model: str):
        self._client = client
        self._model = model

    async def generate(self, session: OnboardingSession) -> DerivedBlueprint:
        try:
            fallback = profile_derivation.derive_blueprint(session)
        except IncompleteSessionError as e:
            raise BlueprintGenerationError(str(e)) from e

        prompt = build_prompt(session, fallback.daily_calorie_target)
        try:
            response = await self._client.aio.models.generate_content(
                model=self._model,
                contents=prompt,
                config=types.GenerateContentConfig(
                    response_mime_type="application/json",
                    temperature=0.4,
                ),
            )
        except genai_errors.APIError as e:
            logger.error(f"Gemini blueprint request failed: {e}", exc_info=True)
            raise BlueprintGenerationError(f"Blueprint request failed: {e}") from e

        text = response.text
        if not text:
            raise BlueprintGenerationError("Blueprint response was empty.")

        try:
            parsed = BlueprintResponse.model_validate_json(text)
        except ValidationError as e:
            logger.warning(f"Discarding malformed blueprint response: {e}")
            raise BlueprintGenerationError(
                "Blueprint response did not match the expected shape."
            ) from e

        return merge_response(parsed, fallback)


@lru_cache(maxsize=None)
def get_blueprint_generator() -> BlueprintGenerator:
    """
    Initializes and returns a cached instance of the configured generator.

    Raises:
        ValueError: If the Gemini generator is selected without an API key.
    """
    if settings.BLUEPRINT_GENERATOR == "local":
        logger.info("Using the local blueprint generator.")
        return LocalBlueprintGenerator()

    logger.info("Initializing Gemini blueprint generator for the first time...")
    if not settings.GEMINI_API_KEY:
        logger.critical("GEMINI_API_KEY is not set. Blueprint generator cannot be created.")
        raise ValueError("Cannot initialize blueprint generator: API key is missing.")

    client = genai.Client(api_key=settings.GEMINI_API_KEY)
    return GeminiBlueprintGenerator(client=client, model=settings.GEMINI_MODEL)
