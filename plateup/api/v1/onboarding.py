import logging

from fastapi import APIRouter, Depends, HTTPException, status

from plateup.api.deps import (
    get_current_user,
    get_generator,
    get_profile_store,
    get_session_store,
)
from plateup.core.exceptions import (
    IncompleteSessionError,
    InvalidAnswerError,
    InvalidScreenError,
    ProfilePersistenceError,
    ScreenFieldError,
    SessionStoreError,
)
from plateup.models.blueprint import BlueprintResult
from plateup.models.onboarding import OnboardingSession
from plateup.models.profile import UserProfile
from plateup.models.user import AuthUser
from plateup.schemas.onboarding_request import AnswersUpdate, SkipRequest
from plateup.schemas.onboarding_response import (
    OnboardingState,
    VisionSuggestionsResponse,
)
from plateup.services.blueprint_generator import BlueprintGenerator
from plateup.services.onboarding_flow import OnboardingFlowController
from plateup.services.profile_store import FirestoreProfileStore
from plateup.services.session_store import RedisSessionStore

logger = logging.getLogger(__name__)
router = APIRouter()


async def _load_controller(
    uid: str, store: RedisSessionStore, generator: BlueprintGenerator
) -> OnboardingFlowController:
    try:
        session = await store.load(uid)
    except SessionStoreError as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e)
        )
    if session is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No onboarding session in progress. Please start one first.",
        )
    controller = OnboardingFlowController(session, generator)
    controller.tick()
    return controller


async def _save_session(
    uid: str, store: RedisSessionStore, session: OnboardingSession
) -> None:
    try:
        await store.save(uid, session)
    except SessionStoreError as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e)
        )


@router.post(
    "/session",
    response_model=OnboardingState,
    status_code=status.HTTP_201_CREATED,
    summary="Start Onboarding",
    description="Starts a fresh onboarding session, replacing any draft in progress.",
)
async def start_session(
    current_user: AuthUser = Depends(get_current_user),
    store: RedisSessionStore = Depends(get_session_store),
    generator: BlueprintGenerator = Depends(get_generator),
):
    logger.info(f"User '{current_user.uid}' starting onboarding.")
    controller = OnboardingFlowController.start(generator)
    await _save_session(current_user.uid, store, controller.session)
    return OnboardingState.from_controller(controller)


@router.get(
    "/session",
    response_model=OnboardingState,
    summary="Get Onboarding State",
)
async def get_session(
    current_user: AuthUser = Depends(get_current_user),
    store: RedisSessionStore = Depends(get_session_store),
    generator: BlueprintGenerator = Depends(get_generator),
):
    """Returns the wizard state, applying the splash screen's auto-advance if due."""
    controller = await _load_controller(current_user.uid, store, generator)
    await _save_session(current_user.uid, store, controller.session)
    return OnboardingState.from_controller(controller)


@router.patch(
    "/session/answers",
    response_model=OnboardingState,
    summary="Answer Current Screen",
)
async def update_answers(
    payload: AnswersUpdate,
    current_user: AuthUser = Depends(get_current_user),
    store: RedisSessionStore = Depends(get_session_store),
    generator: BlueprintGenerator = Depends(get_generator),
):
    controller = await _load_controller(current_user.uid, store, generator)
    answers = payload.to_answers()
    if not answers:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Request body cannot be empty.",
        )

    try:
        controller.update_answers(**answers)
    except ScreenFieldError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except InvalidAnswerError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e)
        )

    await _save_session(current_user.uid, store, controller.session)
    return OnboardingState.from_controller(controller)


@router.post(
    "/session/advance",
    response_model=OnboardingState,
    summary="Advance To Next Screen",
)
async def advance(
    current_user: AuthUser = Depends(get_current_user),
    store: RedisSessionStore = Depends(get_session_store),
    generator: BlueprintGenerator = Depends(get_generator),
):
    controller = await _load_controller(current_user.uid, store, generator)
    if not controller.advance():
        await _save_session(current_user.uid, store, controller.session)
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Screen {controller.current_screen} is not complete.",
        )
    await _save_session(current_user.uid, store, controller.session)
    return OnboardingState.from_controller(controller)


@router.post(
    "/session/retreat",
    response_model=OnboardingState,
    summary="Go Back One Screen",
)
async def retreat(
    current_user: AuthUser = Depends(get_current_user),
    store: RedisSessionStore = Depends(get_session_store),
    generator: BlueprintGenerator = Depends(get_generator),
):
    controller = await _load_controller(current_user.uid, store, generator)
    controller.retreat()
    await _save_session(current_user.uid, store, controller.session)
    return OnboardingState.from_controller(controller)


@router.post(
    "/session/skip",
    response_model=OnboardingState,
    summary="Jump To Screen",
)
async def skip_to(
    payload: SkipRequest,
    current_user: AuthUser = Depends(get_current_user),
    store: RedisSessionStore = Depends(get_session_store),
    generator: BlueprintGenerator = Depends(get_generator),
):
    controller = await _load_controller(current_user.uid, store, generator)
    try:
        controller.skip_to(payload.screen)
    except InvalidScreenError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e)
        )
    await _save_session(current_user.uid, store, controller.session)
    return OnboardingState.from_controller(controller)


@router.get(
    "/vision-suggestions",
    response_model=VisionSuggestionsResponse,
    summary="Suggest Success Visions",
)
async def get_vision_suggestions(
    current_user: AuthUser = Depends(get_current_user),
    store: RedisSessionStore = Depends(get_session_store),
    generator: BlueprintGenerator = Depends(get_generator),
):
    controller = await _load_controller(current_user.uid, store, generator)
    return VisionSuggestionsResponse(suggestions=controller.vision_suggestions())


@router.post(
    "/session/blueprint",
    response_model=BlueprintResult,
    summary="Generate Health Blueprint",
    description=(
        "Generates the blueprint on the building-blueprint screen and moves to "
        "the results screen on success. The draft reports isProcessing while "
        "the generator runs."
    ),
)
async def generate_blueprint(
    current_user: AuthUser = Depends(get_current_user),
    store: RedisSessionStore = Depends(get_session_store),
    generator: BlueprintGenerator = Depends(get_generator),
):
    logger.info(f"User '{current_user.uid}' requesting a health blueprint.")
    controller = await _load_controller(current_user.uid, store, generator)

    refused = controller.begin_blueprint()
    if refused is not None:
        await _save_session(current_user.uid, store, controller.session)
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=refused.error)

    await _save_session(current_user.uid, store, controller.session)
    try:
        result = await controller.finish_blueprint()
    finally:
        await _save_session(current_user.uid, store, controller.session)

    if not result.ok:
        logger.warning(
            f"Blueprint generation for '{current_user.uid}' failed: {result.error}"
        )
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=result.error)
    logger.info(f"Blueprint ready for user '{current_user.uid}'.")
    return result


@router.post(
    "/session/complete",
    response_model=UserProfile,
    status_code=status.HTTP_200_OK,
    summary="Complete Onboarding",
    description="Saves the profile derived from the session and discards the draft.",
)
async def complete_onboarding(
    current_user: AuthUser = Depends(get_current_user),
    store: RedisSessionStore = Depends(get_session_store),
    profiles: FirestoreProfileStore = Depends(get_profile_store),
    generator: BlueprintGenerator = Depends(get_generator),
):
    logger.info(f"User '{current_user.uid}' attempting to complete onboarding.")
    controller = await _load_controller(current_user.uid, store, generator)

    try:
        profile = controller.finalize(
            uid=current_user.uid, email=current_user.email, name=current_user.name
        )
    except IncompleteSessionError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))

    try:
        await profiles.save(profile)
    except ProfilePersistenceError as e:
        # The draft stays in Redis so the client can retry.
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e)
        )

    try:
        await store.delete(current_user.uid)
    except SessionStoreError as e:
        logger.warning(
            f"Profile saved but draft for '{current_user.uid}' was not discarded: {e}"
        )

    logger.info(f"Successfully onboarded user '{current_user.uid}'.")
    return profile
