"""Profile and body-tracking endpoints."""

from __future__ import annotations

from datetime import date  # noqa: TC003
from typing import Any

from fastapi import APIRouter, Body, Depends, Request, status

from meal_tracker.api.dependencies import API_PREFIX, get_container, require_user

router = APIRouter(prefix=f"{API_PREFIX}/profile", tags=["profile"])


@router.get("")
def get_profile(
    request: Request, user_id: str = Depends(require_user)
) -> dict[str, object]:
    """Return the profile with current weight and energy values."""
    profile = get_container(request).profile_service.get_profile(user_id)
    return {"profile": profile}


@router.post("", status_code=status.HTTP_201_CREATED)
def create_profile(
    request: Request,
    payload: dict[str, Any] = Body(...),
    user_id: str = Depends(require_user),
) -> dict[str, object]:
    """Create the caller's profile."""
    profile = get_container(request).profile_service.create_profile(user_id, payload)
    return {"profile": profile}


@router.put("")
def update_profile(
    request: Request,
    payload: dict[str, Any] = Body(...),
    user_id: str = Depends(require_user),
) -> dict[str, object]:
    """Update provided profile fields."""
    profile = get_container(request).profile_service.update_profile(user_id, payload)
    return {"profile": profile}


@router.get("/macro-targets")
def get_macro_targets(
    request: Request, user_id: str = Depends(require_user)
) -> dict[str, object]:
    """Return daily macro targets for the current weight."""
    targets = get_container(request).profile_service.get_macro_targets(user_id)
    return {"macro_targets": targets}


@router.get("/tracking")
def list_tracking(  # noqa: PLR0913
    request: Request,
    start_date: date | None = None,
    end_date: date | None = None,
    limit: int = 50,
    offset: int = 0,
    user_id: str = Depends(require_user),
) -> dict[str, object]:
    """Return body measurements, most recent first."""
    tracking = get_container(request).profile_service.list_tracking(
        user_id,
        {
            "start_date": start_date,
            "end_date": end_date,
            "limit": limit,
            "offset": offset,
        },
    )
    return {"tracking": tracking, "count": len(tracking)}


@router.post("/tracking", status_code=status.HTTP_201_CREATED)
def create_tracking(
    request: Request,
    payload: dict[str, Any] = Body(...),
    user_id: str = Depends(require_user),
) -> dict[str, object]:
    """Record a body measurement."""
    tracking = get_container(request).profile_service.create_tracking(
        user_id, payload
    )
    return {"tracking": tracking}
