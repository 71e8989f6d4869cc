"""
Tests for blueprint generation, with the Gemini client mocked out.
"""

import asyncio
import json
from unittest.mock import AsyncMock, MagicMock

import pytest
from google.genai import errors as genai_errors

from plateup.core.config import settings
from plateup.core.exceptions import BlueprintGenerationError
from plateup.models.blueprint import BlueprintSource
from plateup.models.onboarding import OnboardingSession
from plateup.services import blueprint_generator as bg
from plateup.services import profile_derivation


def make_client(text=None, error=None):
    client = MagicMock()
    if error is not None:
        client.aio.models.generate_content = AsyncMock(side_effect=error)
    else:
        client.aio.models.generate_content = AsyncMock(return_value=MagicMock(text=text))
    return client


FULL_RESPONSE = {
    "dailyCalorieTarget": 1900,
    "macroTargets": {"protein": 140.4, "carbs": 180, "fat": 63, "fiber": 32},
    "mealTiming": {
        "breakfastWindow": "7:30 AM - 8:30 AM",
        "lunchWindow": "12:30 PM - 1:30 PM",
        "dinnerWindow": "6:30 PM - 7:30 PM",
        "snackWindows": ["4:00 PM"],
    },
    "personalizedAdvice": ["Eat protein at breakfast", "Walk after lunch"],
    "weeklyGoals": ["Log every meal for 5 days"],
    "supplementRecommendations": [],
}


def test_gemini_response_becomes_blueprint(completed_session):
    client = make_client(text=json.dumps(FULL_RESPONSE))
    generator = bg.GeminiBlueprintGenerator(client=client, model="gemini-test")

    blueprint = asyncio.run(generator.generate(completed_session))

    assert blueprint.source is BlueprintSource.AI
    assert blueprint.daily_calorie_target == 1900
    assert blueprint.macro_targets.protein == 140
    assert blueprint.macro_targets.fiber == 32
    assert blueprint.macro_percentages == {"protein": 30.3, "carbs": 39.0, "fat": 30.7}
    assert blueprint.meal_timing.snack_windows == ["4:00 PM"]
    assert blueprint.supplement_recommendations == []

    kwargs = client.aio.models.generate_content.await_args.kwargs
    assert kwargs["model"] == "gemini-test"
    assert kwargs["config"].response_mime_type == "application/json"
    assert "Run a 5K without stopping" in kwargs["contents"]
    assert "2044 kcal" in kwargs["contents"]


def test_partial_response_is_filled_from_local_figures(completed_session):
    client = make_client(text=json.dumps({"personalizedAdvice": ["Sleep by 11"]}))
    generator = bg.GeminiBlueprintGenerator(client=client, model="gemini-test")

    blueprint = asyncio.run(generator.generate(completed_session))
    local = profile_derivation.derive_blueprint(completed_session)

    assert blueprint.personalized_advice == ["Sleep by 11"]
    assert blueprint.daily_calorie_target == local.daily_calorie_target
    assert blueprint.macro_targets == local.macro_targets
    assert blueprint.meal_timing == local.meal_timing
    assert blueprint.weekly_goals == local.weekly_goals


@pytest.mark.parametrize(
    "text",
    [
        "not json at all",
        json.dumps({"dailyCalorieTarget": -5}),
        json.dumps({"macroTargets": {"protein": "lots"}}),
    ],
)
def test_malformed_response_raises(completed_session, text):
    generator = bg.GeminiBlueprintGenerator(client=make_client(text=text), model="m")

    with pytest.raises(BlueprintGenerationError):
        asyncio.run(generator.generate(completed_session))


def test_empty_response_raises(completed_session):
    generator = bg.GeminiBlueprintGenerator(client=make_client(text=""), model="m")

    with pytest.raises(BlueprintGenerationError, match="empty"):
        asyncio.run(generator.generate(completed_session))


def test_api_error_is_wrapped(completed_session):
    error = genai_errors.APIError(
        503,
        {"error": {"code": 503, "message": "The model is overloaded.", "status": "UNAVAILABLE"}},
    )
    generator = bg.GeminiBlueprintGenerator(client=make_client(error=error), model="m")

    with pytest.raises(BlueprintGenerationError) as exc_info:
        asyncio.run(generator.generate(completed_session))
    assert exc_info.value.__cause__ is error


def test_incomplete_session_never_reaches_the_model():
    client = make_client(text=json.dumps(FULL_RESPONSE))
    generator = bg.GeminiBlueprintGenerator(client=client, model="m")

    with pytest.raises(BlueprintGenerationError):
        asyncio.run(generator.generate(OnboardingSession()))
    client.aio.models.generate_content.assert_not_awaited()


def test_local_generator(completed_session):
    blueprint = asyncio.run(bg.LocalBlueprintGenerator().generate(completed_session))
    assert blueprint.source is BlueprintSource.LOCAL

    with pytest.raises(BlueprintGenerationError):
        asyncio.run(bg.LocalBlueprintGenerator().generate(OnboardingSession()))


def test_prompt_only_includes_answers(completed_session):
    prompt = bg.build_prompt(completed_session, 2044)

    assert '"primaryGoal": "weight_loss"' in prompt
    assert "currentScreen" not in prompt
    assert "isProcessing" not in prompt


@pytest.fixture
def fresh_generator_cache():
    bg.get_blueprint_generator.cache_clear()
    yield
    bg.get_blueprint_generator.cache_clear()


def test_configured_local_generator(fresh_generator_cache):
    assert isinstance(bg.get_blueprint_generator(), bg.LocalBlueprintGenerator)
    assert bg.get_blueprint_generator() is bg.get_blueprint_generator()


def test_gemini_generator_requires_api_key(fresh_generator_cache, monkeypatch):
    monkeypatch.setattr(settings, "BLUEPRINT_GENERATOR", "gemini")
    monkeypatch.setattr(settings, "GEMINI_API_KEY", "")

    with pytest.raises(ValueError):
        bg.get_blueprint_generator()


def test_gemini_generator_is_built_from_settings(fresh_generator_cache, monkeypatch):
    monkeypatch.setattr(settings, "BLUEPRINT_GENERATOR", "gemini")
    monkeypatch.setattr(settings, "GEMINI_API_KEY", "secret")
    client_cls = MagicMock()
    monkeypatch.setattr(bg.genai, "Client", client_cls)

    generator = bg.get_blueprint_generator()

    assert isinstance(generator, bg.GeminiBlueprintGenerator)
    client_cls.assert_called_once_with(api_key="secret")
