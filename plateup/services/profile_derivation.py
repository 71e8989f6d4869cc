"""
Pure derivations from a completed onboarding session.

Computes BMI, the Mifflin-St Jeor calorie target, the macro split, meal-timing
windows and canned advice, and assembles the permanent UserProfile.
"""

import logging
from typing import Dict, Iterable, List, Optional

from plateup.core.exceptions import IncompleteSessionError
from plateup.models.blueprint import (
    BlueprintSource,
    DerivedBlueprint,
    MacroTargets,
    MealTimingRecommendations,
)
from plateup.models.enums import (
    ActivityLevel,
    BiologicalSex,
    DietaryRestriction,
    EatingChallenge,
    HealthGoal,
    LifestyleChallenge,
    MealTimingPreference,
)
from plateup.models.onboarding import OnboardingSession
from plateup.models.profile import UserProfile
from plateup.services.validation import unmet_gates

logger = logging.getLogger(__name__)

POUNDS_TO_KG_FACTOR = 0.453592
INCHES_TO_CM_FACTOR = 2.54

# Mifflin-St Jeor sex constants; the neutral offset is the mean of the two.
SEX_OFFSETS: Dict[BiologicalSex, float] = {
    BiologicalSex.MALE: 5.0,
    BiologicalSex.FEMALE: -161.0,
}
NEUTRAL_SEX_OFFSET = (SEX_OFFSETS[BiologicalSex.MALE] + SEX_OFFSETS[BiologicalSex.FEMALE]) / 2

ACTIVITY_MULTIPLIERS: Dict[ActivityLevel, float] = {
    ActivityLevel.SEDENTARY: 1.2,
    ActivityLevel.LIGHTLY_ACTIVE: 1.375,
    ActivityLevel.MODERATELY_ACTIVE: 1.55,
    ActivityLevel.VERY_ACTIVE: 1.725,
    ActivityLevel.EXTRA_ACTIVE: 1.9,
}
DEFAULT_ACTIVITY_LEVEL = ActivityLevel.MODERATELY_ACTIVE

GOAL_ADJUSTMENTS: Dict[HealthGoal, float] = {
    HealthGoal.WEIGHT_LOSS: 0.8,
    HealthGoal.WEIGHT_GAIN: 1.2,
    HealthGoal.MUSCLE_GAIN: 1.1,
}

PROTEIN_GRAMS_PER_POUND = 0.8
CARB_CALORIE_SHARE = 0.40
FAT_CALORIE_SHARE = 0.30
DAILY_FIBER_GRAMS = 30
CALORIES_PER_GRAM = {"protein": 4, "carbs": 4, "fat": 9}

VISION_SUGGESTIONS: Dict[HealthGoal, List[str]] = {
    HealthGoal.WEIGHT_LOSS: [
        "Feel confident and energetic in my favorite clothes",
        "Run a 5K without stopping",
        "Look and feel my best for my upcoming event",
    ],
    HealthGoal.WEIGHT_GAIN: [
        "Reach a healthy weight that I can maintain",
        "Eat enough every day without feeling stuffed",
        "Feel strong and sturdy in my own body",
    ],
    HealthGoal.MUSCLE_GAIN: [
        "See visible muscle definition and feel stronger",
        "Lift heavier weights with confidence",
        "Build a lean, athletic physique",
    ],
    HealthGoal.BETTER_SLEEP: [
        "Wake up refreshed and energized every morning",
        "Fall asleep easily without tossing and turning",
        "Have consistent, restorative sleep every night",
    ],
    HealthGoal.MORE_ENERGY: [
        "Power through my day without afternoon crashes",
        "Have energy to play with my kids after work",
        "Feel vibrant and focused throughout the day",
    ],
    HealthGoal.GUT_HEALTH: [
        "Enjoy meals without discomfort or bloating",
        "Have regular, comfortable digestion",
        "Feel light and comfortable after eating",
    ],
    HealthGoal.GENERAL_HEALTH: [
        "Feel strong, healthy, and capable every day",
        "Build sustainable healthy habits for life",
        "Be the healthiest version of myself",
    ],
}

WEEKLY_GOALS = [
    "Hit your daily protein target at least 6 days this week",
    "Complete all planned workouts",
    "Get 7+ hours of sleep at least 5 nights",
    "Prep meals for at least 3 days",
    "Log all meals consistently",
]


def pounds_to_kg(pounds: float) -> float:
    return round(pounds * POUNDS_TO_KG_FACTOR, 2)


def inches_to_cm(inches: float) -> float:
    return round(inches * INCHES_TO_CM_FACTOR, 1)


def vision_suggestions(goal: Optional[HealthGoal]) -> List[str]:
    """Three canned success visions for a primary goal (none when unset)."""
    if goal is None:
        return []
    return list(VISION_SUGGESTIONS[goal])


def bmi(height_cm: float, weight_kg: float) -> Optional[float]:
    if not height_cm or not weight_kg or height_cm <= 0 or weight_kg <= 0:
        return None
    height_m = height_cm / 100
    return round(weight_kg / (height_m * height_m), 1)


def calculate_bmr(
    weight_kg: float,
    height_cm: float,
    age: int,
    sex: Optional[BiologicalSex],
) -> float:
    """Basal metabolic rate (kcal/day) by the Mifflin-St Jeor equation."""
    offset = SEX_OFFSETS.get(sex, NEUTRAL_SEX_OFFSET)
    return 10 * weight_kg + 6.25 * height_cm - 5 * age + offset


def activity_multiplier(level: Optional[ActivityLevel]) -> float:
    return ACTIVITY_MULTIPLIERS[level or DEFAULT_ACTIVITY_LEVEL]


def goal_adjustment(goal: Optional[HealthGoal]) -> float:
    return GOAL_ADJUSTMENTS.get(goal, 1.0)


def calculate_tdee(
    weight_kg: float,
    height_cm: float,
    age: int,
    sex: Optional[BiologicalSex],
    level: Optional[ActivityLevel],
) -> float:
    return calculate_bmr(weight_kg, height_cm, age, sex) * activity_multiplier(level)


def calculate_calorie_target(
    weight_kg: Optional[float],
    height_cm: Optional[float],
    age: Optional[int],
    sex: Optional[BiologicalSex],
    level: Optional[ActivityLevel],
    primary_goal: Optional[HealthGoal],
) -> Optional[int]:
    """
    Daily calorie target: TDEE scaled by the primary goal's adjustment.

    Returns None when age, height or weight is missing; a target is never
    produced from partial body stats.
    """
    if not weight_kg or not height_cm or not age:
        return None
    if weight_kg <= 0 or height_cm <= 0 or age <= 0:
        return None
    tdee = calculate_tdee(weight_kg, height_cm, age, sex, level)
    return round(tdee * goal_adjustment(primary_goal))


def calorie_target_for(session: OnboardingSession) -> Optional[int]:
    stats = session.physical_stats
    return calculate_calorie_target(
        stats.weight_kg,
        stats.height_cm,
        stats.age,
        stats.biological_sex,
        session.activity_level,
        session.primary_goal,
    )


def calculate_macro_targets(calorie_target: int, weight_kg: float) -> MacroTargets:
    weight_lbs = weight_kg / POUNDS_TO_KG_FACTOR
    return MacroTargets(
        protein=round(weight_lbs * PROTEIN_GRAMS_PER_POUND),
        carbs=round(calorie_target * CARB_CALORIE_SHARE / CALORIES_PER_GRAM["carbs"]),
        fat=round(calorie_target * FAT_CALORIE_SHARE / CALORIES_PER_GRAM["fat"]),
        fiber=DAILY_FIBER_GRAMS,
    )


def macro_percentages(macros: MacroTargets) -> Dict[str, float]:
    """Share of macro calories coming from protein, carbs and fat (percent)."""
    calories = {
        name: getattr(macros, name) * per_gram
        for name, per_gram in CALORIES_PER_GRAM.items()
    }
    total = sum(calories.values())
    if total == 0:
        return {name: 0.0 for name in calories}
    return {name: round(value / total * 100, 1) for name, value in calories.items()}


def recommend_meal_timing(session: OnboardingSession) -> MealTimingRecommendations:
    preference = session.meal_timing_preference
    fasts = preference is MealTimingPreference.INTERMITTENT_FASTING

    breakfast = "7:00 AM - 9:00 AM"
    snacks = ["10:00 AM", "3:00 PM"]
    if preference is MealTimingPreference.SKIP_BREAKFAST or fasts:
        breakfast = None
        snacks = ["3:00 PM"]

    fasting = None
    if fasts:
        fasting = "8:00 PM - 12:00 PM"
    elif session.primary_goal is HealthGoal.WEIGHT_LOSS:
        fasting = "7:30 PM - 7:00 AM"

    dinner = "6:00 PM - 7:30 PM"
    if preference is MealTimingPreference.LATE_EATER:
        dinner = "7:30 PM - 9:00 PM"

    return MealTimingRecommendations(
        breakfast_window=breakfast,
        lunch_window="12:00 PM - 1:30 PM",
        dinner_window=dinner,
        snack_windows=snacks,
        fasting_window=fasting,
    )


def personalized_advice(session: OnboardingSession) -> List[str]:
    goal_label = session.primary_goal.label.lower() if session.primary_goal else "your goals"
    advice = [
        f"Focus on {goal_label} by maintaining a consistent meal schedule",
        "Prioritize protein intake to support your fitness goals",
        "Stay hydrated with at least 3 liters of water daily",
        "Track your progress weekly to ensure you're moving toward your goals",
    ]
    if (
        LifestyleChallenge.LIMITED_COOKING_TIME in session.lifestyle_challenges
        or LifestyleChallenge.BUSY_SCHEDULE in session.lifestyle_challenges
    ):
        advice.append(
            "Consider meal prep on Sundays to stay on track during busy weekdays"
        )
    if EatingChallenge.LATE_NIGHT_SNACKING in session.eating_challenges:
        advice.append("Close your kitchen after dinner and keep a protein snack ready")
    if EatingChallenge.STRESS_EATING in session.eating_challenges:
        advice.append("Pause for a short walk or a glass of water before stress snacks")
    return advice


def supplement_recommendations(
    restrictions: Iterable[DietaryRestriction],
) -> List[str]:
    if DietaryRestriction.VEGAN in set(restrictions):
        return ["Vitamin B12", "Vitamin D3", "Omega-3 (algae-based)"]
    return ["Vitamin D3", "Omega-3 fish oil"]


def missing_answers(session: OnboardingSession) -> List[str]:
    return [screen.name.lower() for screen in unmet_gates(session)]


def derive_blueprint(session: OnboardingSession) -> DerivedBlueprint:
    """
    Builds the blueprint locally from a completed session.

    Raises:
        IncompleteSessionError: If any gated screen's answers are missing.
    """
    missing = missing_answers(session)
    if missing:
        raise IncompleteSessionError(missing)

    calorie_target = calorie_target_for(session)
    if calorie_target is None:
        raise IncompleteSessionError(["body_basics"])

    macros = calculate_macro_targets(calorie_target, session.physical_stats.weight_kg)
    return DerivedBlueprint(
        daily_calorie_target=calorie_target,
        macro_targets=macros,
        macro_percentages=macro_percentages(macros),
        meal_timing=recommend_meal_timing(session),
        personalized_advice=personalized_advice(session),
        weekly_goals=list(WEEKLY_GOALS),
        supplement_recommendations=supplement_recommendations(
            session.dietary_restrictions
        ),
        source=BlueprintSource.LOCAL,
    )


def build_user_profile(
    session: OnboardingSession,
    uid: str,
    email: Optional[str] = None,
    name: Optional[str] = None,
) -> UserProfile:
    """
    Assembles the permanent profile from a completed session.

    Figures from an attached blueprint win over local derivation, so the
    profile agrees with what the user was shown on the results screen.
    """
    missing = missing_answers(session)
    if missing:
        raise IncompleteSessionError(missing)

    stats = session.physical_stats
    if session.blueprint is not None:
        calorie_target = session.blueprint.daily_calorie_target
        macro_targets = session.blueprint.macro_targets
    else:
        calorie_target = calorie_target_for(session)
        macro_targets = calculate_macro_targets(calorie_target, stats.weight_kg)

    weight_goal = session.weight_goal
    has_weight_goal = any(
        value is not None for value in weight_goal.model_dump().values()
    )

    logger.debug(f"Built profile for '{uid}' with a {calorie_target} kcal target.")
    return UserProfile(
        uid=uid,
        email=email,
        name=name,
        selected_goals=sorted(session.selected_goals),
        primary_goal=session.primary_goal,
        success_vision=session.success_vision.strip(),
        physical_stats=stats,
        energy_pattern=session.energy_pattern,
        exercise_frequency=session.exercise_frequency,
        activity_level=session.activity_level,
        exercise_types=sorted(session.exercise_types),
        work_schedule=session.work_schedule,
        meal_timing_preference=session.meal_timing_preference,
        lifestyle_challenges=sorted(session.lifestyle_challenges),
        eating_challenges=sorted(session.eating_challenges),
        dietary_restrictions=sorted(session.dietary_restrictions),
        food_preferences=sorted(session.food_preferences),
        weight_goal=weight_goal if has_weight_goal else None,
        learning_style=session.learning_style,
        guidance_level=session.guidance_level,
        feature_preferences=sorted(session.feature_preferences),
        integration_preferences=sorted(session.integration_preferences),
        bmi=bmi(stats.height_cm, stats.weight_kg),
        calorie_target=calorie_target,
        macro_targets=macro_targets,
        blueprint=session.blueprint,
    )
