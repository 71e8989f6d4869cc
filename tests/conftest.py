"""
Pytest configuration and fixtures for the PlateUp backend tests.
"""

import os
from datetime import datetime, timedelta, timezone

import pytest

# Set test environment before importing plateup modules
os.environ.setdefault("GOOGLE_APPLICATION_CREDENTIALS", "service-account.json")
os.environ.setdefault("FIREBASE_PROJECT_ID", "plateup-test")
os.environ.setdefault("GEMINI_API_KEY", "test-key")
os.environ.setdefault("REDIS_URL", "redis://localhost:6379/0")
os.environ["BLUEPRINT_GENERATOR"] = "local"

from plateup.core.exceptions import BlueprintGenerationError  # noqa: E402
from plateup.models.enums import (  # noqa: E402
    ActivityLevel,
    BiologicalSex,
    EnergyPattern,
    ExerciseFrequency,
    HealthGoal,
    MealTimingPreference,
    WorkSchedule,
)
from plateup.models.onboarding import OnboardingSession, PhysicalStats  # noqa: E402
from plateup.models.screens import Screen  # noqa: E402
from plateup.services.blueprint_generator import LocalBlueprintGenerator  # noqa: E402
from plateup.services.onboarding_flow import OnboardingFlowController  # noqa: E402


class FakeClock:
    """A clock that only moves when told to."""

    def __init__(self, start: datetime = datetime(2026, 1, 5, 8, 0, tzinfo=timezone.utc)):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now = self.now + timedelta(seconds=seconds)


class StubGenerator:
    """Returns a canned blueprint, or raises the configured error."""

    def __init__(self, blueprint=None, error: Exception = None):
        self.blueprint = blueprint
        self.error = error
        self.calls = 0

    async def generate(self, session):
        self.calls += 1
        if self.error is not None:
            raise self.error
        if self.blueprint is not None:
            return self.blueprint
        return await LocalBlueprintGenerator().generate(session)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def generator():
    return StubGenerator()


@pytest.fixture
def failing_generator():
    return StubGenerator(error=BlueprintGenerationError("Gemini is unavailable."))


@pytest.fixture
def controller(generator, clock):
    """A controller over a fresh session on the splash screen."""
    return OnboardingFlowController.start(generator, clock=clock)


@pytest.fixture
def completed_session():
    """A session whose answers satisfy every gated screen."""
    return OnboardingSession(
        current_screen=int(Screen.BUILDING_BLUEPRINT),
        selected_goals={HealthGoal.WEIGHT_LOSS, HealthGoal.MORE_ENERGY},
        primary_goal=HealthGoal.WEIGHT_LOSS,
        success_vision="Run a 5K without stopping",
        physical_stats=PhysicalStats(
            height_cm=175,
            weight_kg=70,
            age=30,
            biological_sex=BiologicalSex.MALE,
            use_metric_units=True,
        ),
        energy_pattern=EnergyPattern.MORNING_PERSON,
        exercise_frequency=ExerciseFrequency.REGULAR,
        activity_level=ActivityLevel.MODERATELY_ACTIVE,
        work_schedule=WorkSchedule.TRADITIONAL,
        meal_timing_preference=MealTimingPreference.REGULAR,
    )


@pytest.fixture
def completed_controller(completed_session, generator, clock):
    return OnboardingFlowController(completed_session, generator, clock=clock)
