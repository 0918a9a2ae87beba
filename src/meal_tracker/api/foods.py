"""AI food helper endpoints."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, Request

from meal_tracker.api.dependencies import API_PREFIX, get_container, require_user
from meal_tracker.domain.estimates import MacroEstimateRequest
from meal_tracker.services.validation import parse_input

router = APIRouter(prefix=f"{API_PREFIX}/foods", tags=["foods"])


@router.post("/estimate-macros")
async def estimate_macros(
    request: Request,
    payload: dict[str, Any] = Body(...),
    user_id: str = Depends(require_user),  # noqa: ARG001
) -> dict[str, object]:
    """Estimate macros for a described food; nothing is saved."""
    description = parse_input(MacroEstimateRequest, payload)
    estimation = await get_container(request).macro_estimation_service.estimate(
        description.food_name,
        serving_size=description.serving_size,
        notes=description.notes,
    )
    return {"estimation": estimation}
