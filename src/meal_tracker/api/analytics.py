"""Daily summary and analytics endpoints."""

from __future__ import annotations

from datetime import date  # noqa: TC003

from fastapi import APIRouter, Depends, Request

from meal_tracker.api.dependencies import API_PREFIX, get_container, require_user

router = APIRouter(prefix=API_PREFIX, tags=["analytics"])


@router.get("/nutrition/daily/{day}")
def daily_summary(
    day: str, request: Request, user_id: str = Depends(require_user)
) -> dict[str, object]:
    """Return totals and the meal breakdown for one day."""
    summary = get_container(request).analytics_service.get_daily_summary(user_id, day)
    return {"summary": summary}


@router.get("/analytics/trends")
def trends(  # noqa: PLR0913
    request: Request,
    period: str | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
    target_calories: int | None = None,
    user_id: str = Depends(require_user),
) -> dict[str, object]:
    """Return period analytics for a named period or an explicit range."""
    container = get_container(request)
    target = _resolve_target(request, user_id, target_calories)
    analytics = container.analytics_service.get_trends(
        user_id,
        period=period,
        start_date=start_date,
        end_date=end_date,
        target_calories=target,
    )
    return {"analytics": analytics}


@router.get("/analytics/weekly")
def weekly(
    request: Request,
    weeks: int = 4,
    target_calories: int | None = None,
    user_id: str = Depends(require_user),
) -> dict[str, object]:
    """Return trailing weekly roll-ups, oldest first."""
    target = _resolve_target(request, user_id, target_calories)
    analytics = get_container(request).analytics_service.get_weekly_summaries(
        user_id, weeks=weeks, target_calories=target
    )
    return {"analytics": analytics}


@router.get("/analytics/monthly")
def monthly(
    request: Request,
    year: int,
    month: int,
    target_calories: int | None = None,
    user_id: str = Depends(require_user),
) -> dict[str, object]:
    """Return analytics for one calendar month."""
    target = _resolve_target(request, user_id, target_calories)
    analytics = get_container(request).analytics_service.get_monthly(
        user_id, year, month, target_calories=target
    )
    return {"analytics": analytics}


def _resolve_target(
    request: Request, user_id: str, target_calories: int | None
) -> int | None:
    """Use the explicit target, falling back to the user's current TDEE."""
    if target_calories is not None:
        return target_calories
    return get_container(request).profile_service.current_tdee(user_id)
