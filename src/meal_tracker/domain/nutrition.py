"""Shared nutrition vocabulary and request model base."""

from dataclasses import dataclass
from typing import Literal

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

MealType = Literal["breakfast", "lunch", "dinner", "snack"]
FoodSource = Literal["manual", "ai"]
Gender = Literal["male", "female"]
ActivityLevel = Literal["sedentary", "light", "moderate", "active", "very_active"]

MEAL_TYPES: tuple[str, ...] = ("breakfast", "lunch", "dinner", "snack")
ACTIVITY_LEVELS: tuple[str, ...] = (
    "sedentary",
    "light",
    "moderate",
    "active",
    "very_active",
)

CALORIES_PER_GRAM = {"protein": 4, "carbs": 4, "fat": 9}


class RequestModel(BaseModel):
    """Base for inbound payloads; accepts snake_case or camelCase keys."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


@dataclass(frozen=True)
class MacroTargets:
    """Daily macronutrient targets in grams."""

    calories: int
    protein_g: int
    carbs_g: int
    fat_g: int
