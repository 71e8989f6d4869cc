"""
Gating rules for the onboarding wizard.

Each rule is a pure predicate over the session that must hold before the
wizard may move past its screen. Screens without a rule are permissive.
"""

from typing import Callable, Dict, List

from plateup.models.onboarding import OnboardingSession
from plateup.models.screens import Screen

MIN_SELECTED_GOALS = 2
MAX_SELECTED_GOALS = 4

GateRule = Callable[[OnboardingSession], bool]


def goals_selected(session: OnboardingSession) -> bool:
    return MIN_SELECTED_GOALS <= len(session.selected_goals) <= MAX_SELECTED_GOALS


def primary_goal_chosen(session: OnboardingSession) -> bool:
    return (
        session.primary_goal is not None
        and session.primary_goal in session.selected_goals
    )


def vision_written(session: OnboardingSession) -> bool:
    return bool(session.success_vision.strip())


def body_basics_complete(session: OnboardingSession) -> bool:
    stats = session.physical_stats
    return (
        stats.height_cm > 0
        and stats.weight_kg > 0
        and stats.age > 0
        and stats.biological_sex is not None
    )


def energy_pattern_chosen(session: OnboardingSession) -> bool:
    return session.energy_pattern is not None


def activity_described(session: OnboardingSession) -> bool:
    return session.exercise_frequency is not None and session.activity_level is not None


def lifestyle_described(session: OnboardingSession) -> bool:
    return (
        session.work_schedule is not None
        and session.meal_timing_preference is not None
    )


GATE_RULES: Dict[Screen, GateRule] = {
    Screen.GOAL_SELECTION: goals_selected,
    Screen.PRIMARY_GOAL: primary_goal_chosen,
    Screen.SUCCESS_VISION: vision_written,
    Screen.BODY_BASICS: body_basics_complete,
    Screen.ENERGY_PATTERNS: energy_pattern_chosen,
    Screen.ACTIVITY_LEVEL: activity_described,
    Screen.LIFESTYLE: lifestyle_described,
}


def can_proceed(session: OnboardingSession, screen: int) -> bool:
    """Returns True if the wizard may leave `screen` with the current answers."""
    try:
        rule = GATE_RULES.get(Screen(screen))
    except ValueError:
        return True
    return rule is None or rule(session)


def unmet_gates(session: OnboardingSession) -> List[Screen]:
    """Lists the gated screens whose rule does not hold, in screen order."""
    return [screen for screen, rule in sorted(GATE_RULES.items()) if not rule(session)]
