import logging
from datetime import datetime, timezone
from typing import Any, Callable, List, Optional

from pydantic import ValidationError

from plateup.core.config import settings
from plateup.core.exceptions import (
    BlueprintGenerationError,
    InvalidAnswerError,
    InvalidScreenError,
    ScreenFieldError,
    SessionFinalizedError,
)
from plateup.models.blueprint import BlueprintResult
from plateup.models.enums import WEIGHT_RELATED_GOALS
from plateup.models.onboarding import OnboardingSession
from plateup.models.profile import UserProfile
from plateup.models.screens import (
    AUTO_ADVANCE_SCREEN,
    BLUEPRINT_SCREEN,
    FIRST_SCREEN,
    RESULTS_SCREEN,
    TOTAL_SCREENS,
    Screen,
    fields_for_screen,
)
from plateup.services import profile_derivation, validation
from plateup.services.blueprint_generator import BlueprintGenerator

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class OnboardingFlowController:
    """
    Drives the onboarding wizard over a single OnboardingSession.

    Navigation is a linear state machine over screens 1..TOTAL_SCREENS:
    advance() is gated by the current screen's rule, retreat() and skip_to()
    are always legal. The splash screen's timed auto-advance is a timer event
    evaluated by tick() against the injected clock, so no real time has to
    pass for it to be exercised.
    """

    def __init__(
        self,
        session: OnboardingSession,
        generator: BlueprintGenerator,
        clock: Clock = utc_now,
        preview_after: float = settings.SPLASH_PREVIEW_SECONDS,
        advance_after: float = settings.SPLASH_DURATION_SECONDS,
        stale_after: float = settings.BLUEPRINT_STALE_AFTER_SECONDS,
    ):
        self._session = session
        self._generator = generator
        self._clock = clock
        self._preview_after = preview_after
        self._advance_after = advance_after
        self._stale_after = stale_after
        self._finalized = False

    @classmethod
    def start(
        cls, generator: BlueprintGenerator, clock: Clock = utc_now, **kwargs
    ) -> "OnboardingFlowController":
        """Creates a controller over a fresh session on the first screen."""
        now = clock()
        session = OnboardingSession(
            current_screen=int(FIRST_SCREEN),
            screen_entered_at=now,
            created_at=now,
            updated_at=now,
        )
        return cls(session, generator, clock=clock, **kwargs)

    @property
    def session(self) -> OnboardingSession:
        return self._session

    @property
    def current_screen(self) -> int:
        return self._session.current_screen

    @property
    def is_processing(self) -> bool:
        return self._session.is_processing

    @property
    def is_finalized(self) -> bool:
        return self._finalized

    @property
    def generation_in_progress(self) -> bool:
        """
        True while another request is generating the blueprint. A flag older
        than `stale_after` seconds is treated as abandoned.
        """
        if not self._session.is_processing:
            return False
        started = self._session.processing_started_at
        if started is None:
            return True
        return (self._clock() - started).total_seconds() < self._stale_after

    def can_proceed(self, screen: Optional[int] = None) -> bool:
        if screen is None:
            screen = self.current_screen
        if screen == BLUEPRINT_SCREEN and self._session.blueprint is None:
            return False
        return validation.can_proceed(self._session, screen)

    def next_screen(self) -> int:
        """The screen advance() would land on, skipping screens that do not apply."""
        target = self.current_screen + 1
        if target == Screen.WEIGHT_GOALS and not (
            self._session.selected_goals & WEIGHT_RELATED_GOALS
        ):
            target += 1
        return min(target, TOTAL_SCREENS)

    def advance(self) -> bool:
        """
        Moves past the current screen if its gating rule holds.

        Returns False, leaving the session untouched, when the rule does not
        hold or the wizard is already on its last screen. The building
        blueprint screen is only left through generate_blueprint().
        """
        self._ensure_mutable()
        if self.current_screen >= TOTAL_SCREENS:
            return False
        if not self.can_proceed():
            logger.debug(f"Advance from screen {self.current_screen} refused.")
            return False
        self._enter(self.next_screen())
        return True

    def retreat(self) -> int:
        self._ensure_mutable()
        self._enter(max(int(FIRST_SCREEN), self.current_screen - 1))
        return self.current_screen

    def skip_to(self, screen: int) -> int:
        self._ensure_mutable()
        if not FIRST_SCREEN <= screen <= TOTAL_SCREENS:
            raise InvalidScreenError(screen, TOTAL_SCREENS)
        self._enter(screen)
        return self.current_screen

    def tick(self) -> bool:
        """
        Fires any due timer events. Returns True if the wizard moved.

        On the splash screen the value preview is revealed after
        `preview_after` seconds and the wizard advances unconditionally after
        `advance_after` seconds.
        """
        if self._finalized or self.current_screen != AUTO_ADVANCE_SCREEN:
            return False
        elapsed = (self._clock() - self._session.screen_entered_at).total_seconds()
        if elapsed >= self._preview_after and not self._session.show_value_preview:
            self._session.show_value_preview = True
        if elapsed >= self._advance_after:
            self._enter(self.next_screen())
            return True
        return False

    def update_answers(self, **answers: Any) -> None:
        """
        Writes answers owned by the current screen into the session.

        Raises:
            ScreenFieldError: If a field belongs to another screen.
            InvalidAnswerError: If a value fails validation, or the primary
                goal is not one of the selected goals.
        """
        self._ensure_mutable()
        owned = fields_for_screen(self.current_screen)
        foreign = set(answers) - owned
        if foreign:
            raise ScreenFieldError(self.current_screen, foreign)

        try:
            candidate = OnboardingSession.model_validate(
                {**self._session.model_dump(), **answers}
            )
        except ValidationError as e:
            raise InvalidAnswerError(str(e)) from e

        if (
            "primary_goal" in answers
            and candidate.primary_goal is not None
            and candidate.primary_goal not in candidate.selected_goals
        ):
            raise InvalidAnswerError(
                f"Primary goal '{candidate.primary_goal.value}' is not one of the selected goals."
            )

        for name in answers:
            setattr(self._session, name, getattr(candidate, name))

        if (
            self._session.primary_goal is not None
            and self._session.primary_goal not in self._session.selected_goals
        ):
            self._session.primary_goal = None
        self._session.updated_at = self._clock()

    def vision_suggestions(self) -> List[str]:
        return profile_derivation.vision_suggestions(self._session.primary_goal)

    async def generate_blueprint(self) -> BlueprintResult:
        """
        Generates the health blueprint and moves to the results screen.

        Only runs on the building-blueprint screen. Failures are returned as
        an error result and leave the wizard where it was so the caller can
        offer a retry. Cancellation propagates; the processing flag is cleared
        either way.
        """
        refused = self.begin_blueprint()
        if refused is not None:
            return refused
        return await self.finish_blueprint()

    def begin_blueprint(self) -> Optional[BlueprintResult]:
        """
        Marks blueprint generation as started.

        Returns an error result, without touching the session, when generation
        cannot start: wrong screen, another generation running, or answers
        missing. Returns None once the processing flag is set.
        """
        self._ensure_mutable()
        if self.current_screen != BLUEPRINT_SCREEN:
            return BlueprintResult.failure(
                f"The blueprint is built on screen {int(BLUEPRINT_SCREEN)}, "
                f"not screen {self.current_screen}."
            )
        if self.generation_in_progress:
            return BlueprintResult.failure("Blueprint generation is already in progress.")

        missing = profile_derivation.missing_answers(self._session)
        if missing:
            return BlueprintResult.failure(
                f"Onboarding session is missing: {', '.join(missing)}."
            )

        self._session.is_processing = True
        self._session.processing_started_at = self._clock()
        return None

    async def finish_blueprint(self) -> BlueprintResult:
        """Awaits the generator for a generation started by begin_blueprint()."""
        self._ensure_mutable()
        if not self._session.is_processing:
            return BlueprintResult.failure("Blueprint generation has not been started.")

        try:
            blueprint = await self._generator.generate(self._session)
        except BlueprintGenerationError as e:
            logger.warning(f"Blueprint generation failed: {e}")
            return BlueprintResult.failure(str(e))
        except Exception as e:
            logger.error(f"Unexpected blueprint generation failure: {e}", exc_info=True)
            return BlueprintResult.failure(f"Blueprint generation failed: {e}")
        finally:
            self._session.is_processing = False
            self._session.processing_started_at = None

        self._session.blueprint = blueprint
        self._enter(RESULTS_SCREEN)
        return BlueprintResult.success(blueprint)

    def finalize(
        self, uid: str, email: Optional[str] = None, name: Optional[str] = None
    ) -> UserProfile:
        """Derives the permanent profile. The controller is read-only afterwards."""
        self._ensure_mutable()
        profile = profile_derivation.build_user_profile(
            self._session, uid=uid, email=email, name=name
        )
        self._finalized = True
        return profile

    def _enter(self, screen: int) -> None:
        self._session.current_screen = int(screen)
        self._session.screen_entered_at = self._clock()
        self._session.updated_at = self._session.screen_entered_at
        if screen == AUTO_ADVANCE_SCREEN:
            self._session.show_value_preview = False

    def _ensure_mutable(self) -> None:
        if self._finalized:
            raise SessionFinalizedError("Onboarding session has already been finalized.")
