"""
Answer types collected by the onboarding wizard.

Every enum stores a stable snake_case value (what is persisted and sent over
the API) together with the label shown to the user.
"""

import enum


class LabelledEnum(str, enum.Enum):
    """A string enum whose members also carry a display label."""

    def __new__(cls, value: str, label: str):
        member = str.__new__(cls, value)
        member._value_ = value
        member.label = label
        return member


class HealthGoal(LabelledEnum):
    WEIGHT_LOSS = ("weight_loss", "Weight Loss")
    WEIGHT_GAIN = ("weight_gain", "Weight Gain")
    MUSCLE_GAIN = ("muscle_gain", "Muscle Gain")
    BETTER_SLEEP = ("better_sleep", "Better Sleep")
    MORE_ENERGY = ("more_energy", "More Energy")
    GUT_HEALTH = ("gut_health", "Gut Health")
    GENERAL_HEALTH = ("general_health", "General Health")


WEIGHT_RELATED_GOALS = frozenset(
    {HealthGoal.WEIGHT_LOSS, HealthGoal.WEIGHT_GAIN, HealthGoal.MUSCLE_GAIN}
)


class BiologicalSex(LabelledEnum):
    MALE = ("male", "Male")
    FEMALE = ("female", "Female")
    OTHER = ("other", "Other")
    PREFER_NOT_TO_SAY = ("prefer_not_to_say", "Prefer not to say")


class EnergyPattern(LabelledEnum):
    MORNING_PERSON = ("morning_person", "Morning Person")
    NIGHT_OWL = ("night_owl", "Night Owl")
    CONSISTENT = ("consistent", "Consistent Energy")
    AFTERNOON_CRASHER = ("afternoon_crasher", "Afternoon Crasher")


class ExerciseFrequency(LabelledEnum):
    NONE = ("none", "I don't exercise")
    OCCASIONAL = ("occasional", "1-2 times per week")
    REGULAR = ("regular", "3-4 times per week")
    FREQUENT = ("frequent", "5+ times per week")
    DAILY = ("daily", "Every day")


class ActivityLevel(LabelledEnum):
    SEDENTARY = ("sedentary", "Mostly sitting")
    LIGHTLY_ACTIVE = ("lightly_active", "Light activity")
    MODERATELY_ACTIVE = ("moderately_active", "Moderate activity")
    VERY_ACTIVE = ("very_active", "Very active")
    EXTRA_ACTIVE = ("extra_active", "Extra active")


class ExerciseType(LabelledEnum):
    CARDIO = ("cardio", "Cardio")
    WEIGHTLIFTING = ("weightlifting", "Weight training")
    YOGA = ("yoga", "Yoga/Pilates")
    SPORTS = ("sports", "Sports")
    WALKING = ("walking", "Walking/Hiking")
    CYCLING = ("cycling", "Cycling")
    SWIMMING = ("swimming", "Swimming")


class WorkSchedule(LabelledEnum):
    TRADITIONAL = ("traditional", "Traditional 9-5")
    FLEXIBLE = ("flexible", "Flexible hours")
    SHIFT_WORK = ("shift_work", "Shift work")
    IRREGULAR = ("irregular", "Irregular schedule")
    WORK_FROM_HOME = ("work_from_home", "Work from home")
    PART_TIME = ("part_time", "Part-time")


class MealTimingPreference(LabelledEnum):
    REGULAR = ("regular", "Regular meal times")
    FLEXIBLE = ("flexible", "Flexible timing")
    SKIP_BREAKFAST = ("skip_breakfast", "I skip breakfast")
    LATE_EATER = ("late_eater", "I eat late")
    INTERMITTENT_FASTING = ("intermittent_fasting", "I do intermittent fasting")


class LifestyleChallenge(LabelledEnum):
    BUSY_SCHEDULE = ("busy_schedule", "Very busy schedule")
    TRAVEL_FREQUENTLY = ("travel_frequently", "Travel frequently")
    IRREGULAR_HOURS = ("irregular_hours", "Irregular work hours")
    LIMITED_COOKING_TIME = ("limited_cooking_time", "Limited time to cook")
    EAT_OUT_OFTEN = ("eat_out_often", "Eat out often")
    FAMILY_OBLIGATIONS = ("family_obligations", "Family meal obligations")


class EatingChallenge(LabelledEnum):
    EMOTIONAL_EATING = ("emotional_eating", "Emotional eating")
    LATE_NIGHT_SNACKING = ("late_night_snacking", "Late night snacking")
    PORTION_CONTROL = ("portion_control", "Portion control")
    CRAVINGS = ("cravings", "Sugar/carb cravings")
    SOCIAL_EATING = ("social_eating", "Overeating in social situations")
    STRESS_EATING = ("stress_eating", "Stress eating")
    BOREDOM_EATING = ("boredom_eating", "Boredom eating")


class DietaryRestriction(LabelledEnum):
    VEGETARIAN = ("vegetarian", "Vegetarian")
    VEGAN = ("vegan", "Vegan")
    GLUTEN_FREE = ("gluten_free", "Gluten-free")
    DAIRY_FREE = ("dairy_free", "Dairy-free")
    KETO = ("keto", "Keto")
    PALEO = ("paleo", "Paleo")
    LOW_CARB = ("low_carb", "Low-carb")
    MEDITERRANEAN = ("mediterranean", "Mediterranean")


class FoodPreference(LabelledEnum):
    QUICK_MEALS = ("quick_meals", "Quick & easy meals")
    MEAL_PREP = ("meal_prep", "Meal prepping")
    FRESH_INGREDIENTS = ("fresh_ingredients", "Fresh ingredients")
    COMFORT_FOODS = ("comfort_foods", "Comfort foods")
    INTERNATIONAL_FLAVORS = ("international_flavors", "International flavors")
    SIMPLE_INGREDIENTS = ("simple_ingredients", "Simple ingredients")


class WeightGoalType(LabelledEnum):
    SPECIFIC_TARGET = ("specific_target", "I have a specific target")
    NOT_SURE_ABOUT_NUMBERS = ("not_sure_about_numbers", "I'm not sure about numbers")
    FEEL_BETTER_IN_BODY = ("feel_better_in_body", "I just want to feel better in my body")


class WeightTimeline(LabelledEnum):
    THREE_MONTHS = ("three_months", "3 months")
    SIX_MONTHS = ("six_months", "6 months")
    ONE_YEAR = ("one_year", "1 year")
    NOT_SURE = ("not_sure", "I'm not sure")


class WeightFocusArea(LabelledEnum):
    LOSE_WEIGHT = ("lose_weight", "I want to lose some weight")
    MAINTAIN_WEIGHT = ("maintain_weight", "I want to maintain my current weight")
    GAIN_WEIGHT = ("gain_weight", "I want to gain weight healthily")
    FEEL_BETTER = ("feel_better", "Focus on how I feel, not the scale")


class LearningStyle(LabelledEnum):
    SHOW_ME_DATA = ("show_me_data", "Show me the data")
    KEEP_IT_SIMPLE = ("keep_it_simple", "Keep it simple")
    EXPLAIN_WHY = ("explain_why", "Explain the why")
    LEARN_FROM_OTHERS = ("learn_from_others", "Learn from others")
    LET_ME_EXPERIMENT = ("let_me_experiment", "Let me experiment")


class GuidanceLevel(LabelledEnum):
    LIGHT_TOUCH = ("light_touch", "Light touch")
    BALANCED = ("balanced", "Balanced approach")
    DEEP_DIVE = ("deep_dive", "Deep dive")


class FeaturePreference(LabelledEnum):
    CALORIE_TRACKING = ("calorie_tracking", "Calorie/macro tracking")
    FOOD_QUALITY = ("food_quality", "Food quality insights")
    PHOTO_LOGGING = ("photo_logging", "Photo-based food logging")
    DAILY_TIPS = ("daily_tips", "Daily tips and education")
    MEAL_PLANNING = ("meal_planning", "Meal planning help")
    PROGRESS_TRACKING = ("progress_tracking", "Progress tracking and trends")
    MOOD_MONITORING = ("mood_monitoring", "Mood and stress monitoring")
    SLEEP_OPTIMIZATION = ("sleep_optimization", "Sleep optimization")
    ENERGY_TRACKING = ("energy_tracking", "Energy tracking")
    EXERCISE_INTEGRATION = ("exercise_integration", "Exercise integration")
    SMART_REMINDERS = ("smart_reminders", "Smart reminders")


class IntegrationPreference(LabelledEnum):
    FITNESS_TRACKER = ("fitness_tracker", "Smartwatch/Fitness tracker")
    HEALTH_PLATFORM = ("health_platform", "Apple Health/Google Fit")
    SLEEP_TRACKING = ("sleep_tracking", "Sleep tracking apps")
    MEDITATION = ("meditation", "Meditation apps")
    OTHER_HEALTH = ("other_health", "Other health apps")
    KEEP_IT_SIMPLE = ("keep_it_simple", "Keep it simple - just PlateUp")
