"""AI-assisted macro estimation for free-text food descriptions."""

import logging
import math
from dataclasses import dataclass
from typing import Protocol

from pydantic import ValidationError as PydanticValidationError

from meal_tracker.domain.estimates import MacroEstimate, MacroEstimateRequest
from meal_tracker.errors import EstimationFailedError, EstimatorUnavailableError
from meal_tracker.services.formulas import round_half_up
from meal_tracker.services.validation import parse_input

_CONFIDENCE_LEVELS = {"high", "medium", "low"}
_MACRO_FIELDS = ("protein_g", "carbs_g", "fat_g")

SYSTEM_PROMPT = (
    "You are a nutrition expert. Estimate the macronutrients for food items "
    "accurately. Respond with a JSON object only."
)

MACRO_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "calories": {"type": "number", "minimum": 0},
        "protein_g": {"type": "number", "minimum": 0},
        "carbs_g": {"type": "number", "minimum": 0},
        "fat_g": {"type": "number", "minimum": 0},
        "confidence": {"type": "string", "enum": ["high", "medium", "low"]},
        "reasoning": {"type": "string"},
    },
    "required": [
        "calories",
        "protein_g",
        "carbs_g",
        "fat_g",
        "confidence",
        "reasoning",
    ],
    "additionalProperties": False,
}

_logger = logging.getLogger(__name__)


class MacroEstimatorClient(Protocol):
    """Interface for an LLM that returns structured JSON."""

    async def complete(
        self,
        *,
        model: str,
        system_prompt: str,
        prompt: str,
        schema: dict[str, object],
    ) -> dict[str, object]:
        """Return the parsed JSON answer."""


@dataclass
class MacroEstimationService:
    """Service that builds estimation prompts and normalises answers."""

    client: MacroEstimatorClient | None
    model: str

    async def estimate(
        self,
        food_name: str,
        serving_size: str | None = None,
        notes: str | None = None,
    ) -> MacroEstimate:
        """Estimate calories and macros; the result is never persisted."""
        request = parse_input(
            MacroEstimateRequest,
            {"food_name": food_name, "serving_size": serving_size, "notes": notes},
        )
        if self.client is None:
            raise EstimatorUnavailableError("AI macro estimation is not configured")
        raw = await self.client.complete(
            model=self.model,
            system_prompt=SYSTEM_PROMPT,
            prompt=build_prompt(request),
            schema=MACRO_SCHEMA,
        )
        return normalize_estimate(raw)


def build_prompt(request: MacroEstimateRequest) -> str:
    """Describe the food for the model."""
    lines = [f"Estimate the macronutrients for: {request.food_name}"]
    if request.serving_size:
        lines.append(f"Amount: {request.serving_size}")
    if request.notes:
        lines.append(f"Additional notes: {request.notes}")
    return "\n".join(lines)


def normalize_estimate(raw: dict[str, object]) -> MacroEstimate:
    """Round values, default unknown confidence and reject unusable numbers."""
    try:
        calories = float(raw["calories"])
        macros = {name: float(raw.get(name, 0) or 0) for name in _MACRO_FIELDS}
    except (KeyError, TypeError, ValueError) as exc:
        raise EstimationFailedError("Estimator returned malformed values") from exc
    values = [calories, *macros.values()]
    if not all(math.isfinite(value) for value in values):
        raise EstimationFailedError("Estimator returned non-finite values")
    if any(value < 0 for value in values):
        raise EstimationFailedError("Estimator returned negative values")

    confidence = str(raw.get("confidence", "")).lower()
    if confidence not in _CONFIDENCE_LEVELS:
        _logger.info("Unknown estimate confidence %r, using medium", confidence)
        confidence = "medium"
    try:
        return MacroEstimate(
            calories=round_half_up(calories),
            protein_g=round(macros["protein_g"], 1),
            carbs_g=round(macros["carbs_g"], 1),
            fat_g=round(macros["fat_g"], 1),
            confidence=confidence,
            reasoning=str(raw.get("reasoning") or ""),
        )
    except PydanticValidationError as exc:
        raise EstimationFailedError("Estimator returned out-of-range values") from exc
