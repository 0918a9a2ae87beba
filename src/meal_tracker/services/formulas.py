"""Energy and macronutrient formulas."""

import math

from meal_tracker.domain.nutrition import CALORIES_PER_GRAM, MacroTargets
from meal_tracker.domain.profiles import UserProfile
from meal_tracker.errors import ValidationError

ACTIVITY_MULTIPLIERS: dict[str, float] = {
    "sedentary": 1.2,
    "light": 1.375,
    "moderate": 1.55,
    "active": 1.725,
    "very_active": 1.9,
}

_ACTIVITY_ALIASES = {
    "lightly_active": "light",
    "moderately_active": "moderate",
    "extremely_active": "very_active",
}

_PROTEIN_G_PER_KG = 2.0
_FAT_SHARE = {"male": 0.30, "female": 0.35}


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up."""
    return int(math.floor(value + 0.5))


def normalize_activity_level(activity_level: str) -> str:
    """Map legacy activity labels onto the canonical set."""
    canonical = _ACTIVITY_ALIASES.get(activity_level, activity_level)
    if canonical not in ACTIVITY_MULTIPLIERS:
        raise ValidationError.single(
            "activity_level", f"Unknown activity level: {activity_level}"
        )
    return canonical


def calculate_bmr(weight_kg: float, height_cm: float, age: int, gender: str) -> int:
    """Return basal metabolic rate using the Mifflin-St Jeor equation."""
    base = 10 * weight_kg + 6.25 * height_cm - 5 * age
    offset = 5 if gender == "male" else -161
    return round_half_up(base + offset)


def calculate_tdee(bmr: int, activity_level: str) -> int:
    """Return total daily energy expenditure for an activity level."""
    multiplier = ACTIVITY_MULTIPLIERS[normalize_activity_level(activity_level)]
    return round_half_up(bmr * multiplier)


def calculate_macro_targets(tdee: int, weight_kg: float, gender: str) -> MacroTargets:
    """Split a calorie budget into protein, fat and carbohydrate targets.

    Protein is fixed per kilogram of body weight, fat takes a gender-specific
    share of the budget and carbohydrates fill the remainder.
    """
    protein_g = round_half_up(_PROTEIN_G_PER_KG * weight_kg)
    fat_calories = tdee * _FAT_SHARE.get(gender, _FAT_SHARE["female"])
    fat_g = round_half_up(fat_calories / CALORIES_PER_GRAM["fat"])
    carbs_calories = tdee - protein_g * CALORIES_PER_GRAM["protein"] - fat_calories
    carbs_g = max(0, round_half_up(carbs_calories / CALORIES_PER_GRAM["carbs"]))
    return MacroTargets(
        calories=tdee,
        protein_g=protein_g,
        carbs_g=carbs_g,
        fat_g=fat_g,
    )


def calculate_bmr_and_tdee(profile: UserProfile, weight_kg: float) -> tuple[int, int]:
    """Return BMR and TDEE for a profile at the given weight."""
    bmr = calculate_bmr(weight_kg, profile.height_cm, profile.age, profile.gender)
    return bmr, calculate_tdee(bmr, profile.activity_level)
