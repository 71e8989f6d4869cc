from typing import List

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from plateup.models.onboarding import OnboardingSession
from plateup.models.screens import TOTAL_SCREENS, Screen
from plateup.services.onboarding_flow import OnboardingFlowController


class OnboardingState(BaseModel):
    """What a client needs to render the wizard's current step."""

    current_screen: int
    screen_name: str
    total_screens: int = TOTAL_SCREENS
    can_proceed: bool
    is_processing: bool
    show_value_preview: bool
    session: OnboardingSession

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    @classmethod
    def from_controller(cls, controller: OnboardingFlowController) -> "OnboardingState":
        return cls(
            current_screen=controller.current_screen,
            screen_name=Screen(controller.current_screen).name.lower(),
            can_proceed=controller.can_proceed(),
            is_processing=controller.is_processing,
            show_value_preview=controller.session.show_value_preview,
            session=controller.session,
        )


class VisionSuggestionsResponse(BaseModel):
    suggestions: List[str]
