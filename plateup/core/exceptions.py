class OnboardingError(Exception):
    """Base class for errors raised by the onboarding wizard."""


class InvalidScreenError(OnboardingError):
    def __init__(self, screen: int, total: int):
        self.screen = screen
        super().__init__(f"Screen {screen} is outside the range 1..{total}.")


class ScreenFieldError(OnboardingError):
    """Raised when answers are written for a screen that is not current."""

    def __init__(self, screen: int, fields):
        self.screen = screen
        self.fields = sorted(fields)
        super().__init__(
            f"Screen {screen} does not own the field(s): {', '.join(self.fields)}."
        )


class InvalidAnswerError(OnboardingError):
    pass


class SessionFinalizedError(OnboardingError):
    pass


class IncompleteSessionError(OnboardingError):
    """Raised when derivation needs answers that have not been collected."""

    def __init__(self, missing):
        self.missing = list(missing)
        super().__init__(f"Onboarding session is missing: {', '.join(self.missing)}.")


class BlueprintGenerationError(Exception):
    pass


class ProfilePersistenceError(Exception):
    pass


class SessionStoreError(Exception):
    pass
