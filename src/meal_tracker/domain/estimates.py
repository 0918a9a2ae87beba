"""Models for AI macro estimates."""

from typing import Literal

from pydantic import BaseModel, Field

from meal_tracker.domain.nutrition import RequestModel

Confidence = Literal["high", "medium", "low"]


class MacroEstimateRequest(RequestModel):
    """Food description sent to the estimator."""

    food_name: str = Field(min_length=1, max_length=200)
    serving_size: str | None = Field(default=None, max_length=100)
    notes: str | None = Field(default=None, max_length=500)


class MacroEstimate(BaseModel):
    """Estimated macros for a described food."""

    calories: int = Field(ge=0, le=10000)
    protein_g: float = Field(ge=0, le=1000)
    carbs_g: float = Field(ge=0, le=1000)
    fat_g: float = Field(ge=0, le=1000)
    confidence: Confidence = "medium"
    reasoning: str = ""
