import enum
from typing import Dict, FrozenSet


class Screen(enum.IntEnum):
    """The onboarding wizard's screens, in presentation order (1-based)."""

    SPLASH = 1
    DIFFERENTIATION = 2
    GOAL_SELECTION = 3
    PRIMARY_GOAL = 4
    SUCCESS_VISION = 5
    BODY_BASICS = 6
    ENERGY_PATTERNS = 7
    ACTIVITY_LEVEL = 8
    LIFESTYLE = 9
    EATING_CHALLENGES = 10
    WEIGHT_GOALS = 11
    LEARNING_STYLE = 12
    GUIDANCE_LEVEL = 13
    FEATURE_PREFERENCES = 14
    INTEGRATION_PREFERENCES = 15
    BUILDING_BLUEPRINT = 16
    HEALTH_BLUEPRINT = 17


FIRST_SCREEN = Screen.SPLASH
TOTAL_SCREENS = len(Screen)
AUTO_ADVANCE_SCREEN = Screen.SPLASH
BLUEPRINT_SCREEN = Screen.BUILDING_BLUEPRINT
RESULTS_SCREEN = Screen.HEALTH_BLUEPRINT


# Each screen owns a disjoint slice of the session.
SCREEN_FIELDS: Dict[Screen, FrozenSet[str]] = {
    Screen.GOAL_SELECTION: frozenset({"selected_goals"}),
    Screen.PRIMARY_GOAL: frozenset({"primary_goal"}),
    Screen.SUCCESS_VISION: frozenset({"success_vision"}),
    Screen.BODY_BASICS: frozenset({"physical_stats"}),
    Screen.ENERGY_PATTERNS: frozenset({"energy_pattern", "energy_levels"}),
    Screen.ACTIVITY_LEVEL: frozenset(
        {"exercise_frequency", "activity_level", "exercise_types"}
    ),
    Screen.LIFESTYLE: frozenset(
        {"work_schedule", "meal_timing_preference", "lifestyle_challenges"}
    ),
    Screen.EATING_CHALLENGES: frozenset(
        {"eating_challenges", "dietary_restrictions", "food_preferences"}
    ),
    Screen.WEIGHT_GOALS: frozenset({"weight_goal"}),
    Screen.LEARNING_STYLE: frozenset({"learning_style"}),
    Screen.GUIDANCE_LEVEL: frozenset({"guidance_level"}),
    Screen.FEATURE_PREFERENCES: frozenset({"feature_preferences"}),
    Screen.INTEGRATION_PREFERENCES: frozenset({"integration_preferences"}),
}


def fields_for_screen(screen: int) -> FrozenSet[str]:
    try:
        return SCREEN_FIELDS.get(Screen(screen), frozenset())
    except ValueError:
        return frozenset()
