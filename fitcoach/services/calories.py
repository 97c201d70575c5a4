"""Calorie target and body metric calculations."""

import logging
import math
from typing import Optional, Tuple

from fitcoach.models.user_profile import ActivityLevel, FitnessGoal, Gender, UserProfile

logger = logging.getLogger(__name__)

FALLBACK_CALORIES = 2000

ACTIVITY_MULTIPLIERS = {
    ActivityLevel.SEDENTARY: 1.2,
    ActivityLevel.LIGHT: 1.375,
    ActivityLevel.MODERATE: 1.55,
    ActivityLevel.VERY_ACTIVE: 1.725,
    ActivityLevel.EXTRA_ACTIVE: 1.9,
}
DEFAULT_ACTIVITY_MULTIPLIER = ACTIVITY_MULTIPLIERS[ActivityLevel.MODERATE]

GOAL_CALORIE_ADJUSTMENTS = {
    FitnessGoal.WEIGHT_LOSS: -300,
    FitnessGoal.MUSCLE_GAIN: 300,
}

BMI_UNDERWEIGHT = 18.5
BMI_NORMAL = 24.9
BMI_OVERWEIGHT = 29.9


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up, as the web client did."""
    return int(math.floor(value + 0.5))


def basal_metabolic_rate(profile: UserProfile) -> Optional[float]:
    """
    Harris-Benedict BMR.

    Returns:
        BMR in kcal/day, or None when weight, height or age is missing
    """
    if not profile.weight or not profile.height or not profile.age:
        return None

    if profile.gender == Gender.MALE:
        return 88.362 + 13.397 * profile.weight + 4.799 * profile.height - 5.677 * profile.age
    return 447.593 + 9.247 * profile.weight + 3.098 * profile.height - 4.330 * profile.age


def activity_multiplier(level: Optional[ActivityLevel]) -> float:
    return ACTIVITY_MULTIPLIERS.get(level, DEFAULT_ACTIVITY_MULTIPLIER)


def estimate_target_calories(profile: UserProfile) -> int:
    """
    Recommended daily calories for the profile's goal.

    BMR scaled by the activity multiplier, then shifted by the goal
    adjustment. Profiles without weight, height or age get a flat 2000.
    """
    bmr = basal_metabolic_rate(profile)
    if bmr is None:
        logger.debug(f"Profile {profile.uid} lacks body stats, using {FALLBACK_CALORIES} kcal")
        return FALLBACK_CALORIES

    target = bmr * activity_multiplier(profile.activity_level)
    target += GOAL_CALORIE_ADJUSTMENTS.get(profile.fitness_goal, 0)
    return round_half_up(target)


def body_mass_index(profile: UserProfile) -> Optional[float]:
    if not profile.weight or not profile.height:
        return None
    return profile.weight / (profile.height / 100) ** 2


def bmi_category(bmi: float) -> str:
    if bmi < BMI_UNDERWEIGHT:
        return "Underweight"
    if bmi < BMI_NORMAL:
        return "Normal"
    if bmi < BMI_OVERWEIGHT:
        return "Overweight"
    return "Obese"


def healthy_weight_range(height_cm: float) -> Tuple[float, float]:
    """Weights (kg) bounding the normal BMI band for a height."""
    meters = height_cm / 100
    return (
        round(BMI_UNDERWEIGHT * meters * meters, 1),
        round(BMI_NORMAL * meters * meters, 1),
    )
