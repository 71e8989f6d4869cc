"""
Endpoint tests for the onboarding and account routers.

Auth, the Redis draft store, Firestore and the blueprint generator are all
replaced through FastAPI dependency overrides; the app lifespan is not run.
"""

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from plateup.api.deps import (
    get_current_user,
    get_generator,
    get_profile_store,
    get_session_store,
)
from plateup.core.exceptions import ProfilePersistenceError, SessionStoreError
from plateup.main import app
from plateup.models.onboarding import OnboardingSession
from plateup.models.screens import Screen
from plateup.models.user import AuthUser
from plateup.services.blueprint_generator import LocalBlueprintGenerator

UID = "user-1"


class InMemorySessionStore:
    """Stores drafts as JSON, the same way the Redis store does."""

    def __init__(self):
        self.drafts = {}
        self.fail_delete = False

    async def load(self, uid):
        raw = self.drafts.get(uid)
        return OnboardingSession.model_validate_json(raw) if raw else None

    async def save(self, uid, session):
        self.drafts[uid] = session.model_dump_json(by_alias=True)

    async def delete(self, uid):
        if self.fail_delete:
            raise SessionStoreError("Could not discard the onboarding session.")
        self.drafts.pop(uid, None)


class InMemoryProfileStore:
    def __init__(self):
        self.profiles = {}
        self.fail = False

    async def save(self, profile):
        if self.fail:
            raise ProfilePersistenceError("A database error occurred while saving the profile.")
        self.profiles[profile.uid] = profile

    async def load(self, uid):
        return self.profiles.get(uid)


@pytest.fixture
def sessions():
    return InMemorySessionStore()


@pytest.fixture
def profiles():
    return InMemoryProfileStore()


@pytest.fixture
def client(sessions, profiles, generator):
    app.dependency_overrides[get_current_user] = lambda: AuthUser(
        uid=UID, email="sam@example.com", name="Sam"
    )
    app.dependency_overrides[get_session_store] = lambda: sessions
    app.dependency_overrides[get_profile_store] = lambda: profiles
    app.dependency_overrides[get_generator] = lambda: generator
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def on_blueprint_screen(sessions, completed_session):
    sessions.drafts[UID] = completed_session.model_dump_json(by_alias=True)


def test_root(client):
    assert client.get("/").json() == {"message": "Welcome to the PlateUp API"}


def test_me(client):
    response = client.get("/api/v1/account/me")
    assert response.status_code == 200
    assert response.json()["uid"] == UID


def test_start_session(client, sessions):
    response = client.post("/api/v1/onboarding/session")

    assert response.status_code == 201
    body = response.json()
    assert body["currentScreen"] == 1
    assert body["screenName"] == "splash"
    assert body["totalScreens"] == 17
    assert body["canProceed"] is True
    assert UID in sessions.drafts


def test_requests_without_session_are_404(client):
    assert client.get("/api/v1/onboarding/session").status_code == 404
    assert client.post("/api/v1/onboarding/session/advance").status_code == 404


def test_goal_selection_through_the_api(client):
    client.post("/api/v1/onboarding/session")
    client.post("/api/v1/onboarding/session/skip", json={"screen": Screen.GOAL_SELECTION})

    response = client.patch(
        "/api/v1/onboarding/session/answers", json={"selectedGoals": ["more_energy"]}
    )
    assert response.json()["canProceed"] is False
    refused = client.post("/api/v1/onboarding/session/advance")
    assert refused.status_code == 409
    assert client.get("/api/v1/onboarding/session").json()["currentScreen"] == 3

    client.patch(
        "/api/v1/onboarding/session/answers",
        json={"selectedGoals": ["more_energy", "gut_health"]},
    )
    response = client.post("/api/v1/onboarding/session/advance")
    assert response.status_code == 200
    assert response.json()["screenName"] == "primary_goal"

    response = client.patch(
        "/api/v1/onboarding/session/answers", json={"primaryGoal": "weight_loss"}
    )
    assert response.status_code == 422

    client.patch("/api/v1/onboarding/session/answers", json={"primaryGoal": "gut_health"})
    suggestions = client.get("/api/v1/onboarding/vision-suggestions").json()["suggestions"]
    assert len(suggestions) == 3


def test_answers_for_another_screen_conflict(client):
    client.post("/api/v1/onboarding/session")
    client.post("/api/v1/onboarding/session/skip", json={"screen": Screen.SUCCESS_VISION})

    response = client.patch(
        "/api/v1/onboarding/session/answers", json={"energyPattern": "night_owl"}
    )
    assert response.status_code == 409


def test_empty_and_unknown_answers_are_rejected(client):
    client.post("/api/v1/onboarding/session")

    assert client.patch("/api/v1/onboarding/session/answers", json={}).status_code == 400
    assert (
        client.patch("/api/v1/onboarding/session/answers", json={"favoriteColor": "red"}).status_code
        == 422
    )


def test_imperial_body_basics_are_stored_metric(client):
    client.post("/api/v1/onboarding/session")
    client.post("/api/v1/onboarding/session/skip", json={"screen": Screen.BODY_BASICS})

    response = client.patch(
        "/api/v1/onboarding/session/answers",
        json={
            "physicalStats": {
                "height": 69,
                "weight": 154,
                "age": 30,
                "biologicalSex": "male",
                "unit": "imperial",
            }
        },
    )

    stats = response.json()["session"]["physicalStats"]
    assert stats["heightCm"] == 175.3
    assert stats["weightKg"] == 69.85
    assert stats["useMetricUnits"] is False
    assert response.json()["canProceed"] is True


def test_retreat_and_invalid_skip(client):
    client.post("/api/v1/onboarding/session")

    assert client.post("/api/v1/onboarding/session/retreat").json()["currentScreen"] == 1
    assert client.post("/api/v1/onboarding/session/skip", json={"screen": 18}).status_code == 422


def test_blueprint_and_completion(client, on_blueprint_screen, sessions, profiles):
    response = client.post("/api/v1/onboarding/session/blueprint")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "complete"
    assert body["blueprint"]["dailyCalorieTarget"] == 2044
    assert body["blueprint"]["source"] == "local"
    assert set(body["blueprint"]["macroPercentages"]) == {"protein", "carbs", "fat"}
    assert isinstance(body["finishedAt"], float)
    assert client.get("/api/v1/onboarding/session").json()["screenName"] == "health_blueprint"

    response = client.post("/api/v1/onboarding/session/complete")

    assert response.status_code == 200
    assert response.json()["calorieTarget"] == 2044
    assert response.json()["email"] == "sam@example.com"
    assert profiles.profiles[UID].blueprint is not None
    assert UID not in sessions.drafts

    profile = client.get("/api/v1/account/profile")
    assert profile.status_code == 200
    assert profile.json()["primaryGoal"] == "weight_loss"


def test_blueprint_failure_is_bad_gateway(client, on_blueprint_screen, generator, sessions):
    generator.error = RuntimeError("model overloaded")

    response = client.post("/api/v1/onboarding/session/blueprint")

    assert response.status_code == 502
    assert "model overloaded" in response.json()["detail"]
    draft = OnboardingSession.model_validate_json(sessions.drafts[UID])
    assert draft.current_screen == Screen.BUILDING_BLUEPRINT
    assert draft.is_processing is False


def test_blueprint_refused_away_from_building_screen(client, generator, sessions):
    client.post("/api/v1/onboarding/session")

    response = client.post("/api/v1/onboarding/session/blueprint")

    assert response.status_code == 409
    assert "screen 16" in response.json()["detail"]
    assert generator.calls == 0
    assert OnboardingSession.model_validate_json(sessions.drafts[UID]).blueprint is None


def test_processing_flag_is_stored_while_generating(client, on_blueprint_screen, sessions):
    stored = {}

    class ObservingGenerator:
        async def generate(self, session):
            draft = OnboardingSession.model_validate_json(sessions.drafts[UID])
            stored["processing"] = draft.is_processing
            stored["started_at"] = draft.processing_started_at
            return await LocalBlueprintGenerator().generate(session)

    app.dependency_overrides[get_generator] = lambda: ObservingGenerator()

    response = client.post("/api/v1/onboarding/session/blueprint")

    assert response.status_code == 200
    assert stored["processing"] is True
    assert stored["started_at"] is not None
    draft = OnboardingSession.model_validate_json(sessions.drafts[UID])
    assert draft.is_processing is False
    assert draft.processing_started_at is None


def test_concurrent_blueprint_request_conflicts(client, completed_session, sessions, generator):
    running = completed_session.model_copy(
        update={"is_processing": True, "processing_started_at": datetime.now(timezone.utc)}
    )
    sessions.drafts[UID] = running.model_dump_json(by_alias=True)

    response = client.post("/api/v1/onboarding/session/blueprint")

    assert response.status_code == 409
    assert "already in progress" in response.json()["detail"]
    assert generator.calls == 0
    assert client.get("/api/v1/onboarding/session").json()["isProcessing"] is True


def test_abandoned_processing_flag_does_not_block(client, completed_session, sessions, generator):
    abandoned = completed_session.model_copy(
        update={
            "is_processing": True,
            "processing_started_at": datetime.now(timezone.utc) - timedelta(minutes=10),
        }
    )
    sessions.drafts[UID] = abandoned.model_dump_json(by_alias=True)

    response = client.post("/api/v1/onboarding/session/blueprint")

    assert response.status_code == 200
    assert generator.calls == 1


def test_advance_from_building_screen_needs_blueprint(client, on_blueprint_screen):
    response = client.post("/api/v1/onboarding/session/advance")

    assert response.status_code == 409
    assert client.get("/api/v1/onboarding/session").json()["currentScreen"] == 16


def test_complete_requires_finished_answers(client):
    client.post("/api/v1/onboarding/session")

    response = client.post("/api/v1/onboarding/session/complete")
    assert response.status_code == 409
    assert "goal_selection" in response.json()["detail"]


def test_failed_profile_save_keeps_draft(client, on_blueprint_screen, sessions, profiles):
    profiles.fail = True

    response = client.post("/api/v1/onboarding/session/complete")

    assert response.status_code == 503
    assert UID in sessions.drafts


def test_draft_cleanup_failure_does_not_fail_completion(
    client, on_blueprint_screen, sessions, profiles
):
    sessions.fail_delete = True

    response = client.post("/api/v1/onboarding/session/complete")

    assert response.status_code == 200
    assert UID in profiles.profiles


def test_profile_missing_before_onboarding(client):
    assert client.get("/api/v1/account/profile").status_code == 404
