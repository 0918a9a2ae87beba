"""Logging streak endpoints."""

from __future__ import annotations

from datetime import date
from typing import Any

from fastapi import APIRouter, Body, Depends, Request

from meal_tracker.api.dependencies import API_PREFIX, get_container, require_user
from meal_tracker.errors import ValidationError

router = APIRouter(prefix=f"{API_PREFIX}/streak", tags=["streak"])


@router.get("")
def get_streak(
    request: Request, user_id: str = Depends(require_user)
) -> dict[str, object]:
    """Return the caller's streak summary."""
    streak = get_container(request).streak_service.get_streak(user_id)
    return {"streak": streak}


@router.get("/calendar")
def get_calendar(
    request: Request,
    year: int | None = None,
    month: int | None = None,
    user_id: str = Depends(require_user),
) -> dict[str, object]:
    """Return logged days for a month, the current month by default."""
    container = get_container(request)
    today = container.streak_service.today()
    calendar = container.streak_service.get_calendar(
        user_id, year or today.year, month or today.month
    )
    return {"calendar": calendar}


@router.post("/freeze")
def use_freeze(
    request: Request,
    payload: dict[str, Any] | None = Body(default=None),
    user_id: str = Depends(require_user),
) -> dict[str, object]:
    """Spend a freeze credit on a missed day, yesterday by default."""
    raw_date = (payload or {}).get("date")
    day = None
    if raw_date is not None:
        try:
            day = date.fromisoformat(str(raw_date))
        except ValueError as exc:
            raise ValidationError.single(
                "date", "Date must be in YYYY-MM-DD format"
            ) from exc
    streak = get_container(request).streak_service.use_freeze(user_id, day)
    return {"streak": streak}
