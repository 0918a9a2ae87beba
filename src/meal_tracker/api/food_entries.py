"""Food entry endpoints."""

from __future__ import annotations

from datetime import date  # noqa: TC003
from typing import Any

from fastapi import APIRouter, Body, Depends, Request, status

from meal_tracker.api.dependencies import API_PREFIX, get_container, require_user

router = APIRouter(prefix=f"{API_PREFIX}/food-entries", tags=["food-entries"])


@router.get("")
def list_entries(  # noqa: PLR0913
    request: Request,
    start_date: date | None = None,
    end_date: date | None = None,
    meal_type: str | None = None,
    limit: int = 50,
    offset: int = 0,
    user_id: str = Depends(require_user),
) -> dict[str, object]:
    """Return entries, newest first."""
    entries = get_container(request).food_entry_service.list_entries(
        user_id,
        {
            "start_date": start_date,
            "end_date": end_date,
            "meal_type": meal_type,
            "limit": limit,
            "offset": offset,
        },
    )
    return {"entries": entries, "count": len(entries)}


@router.post("", status_code=status.HTTP_201_CREATED)
def create_entry(
    request: Request,
    payload: dict[str, Any] = Body(...),
    user_id: str = Depends(require_user),
) -> dict[str, object]:
    """Log a food entry."""
    entry = get_container(request).food_entry_service.create(user_id, payload)
    return {"entry": entry}


@router.post("/bulk-delete")
def bulk_delete_entries(
    request: Request,
    payload: dict[str, Any] = Body(...),
    user_id: str = Depends(require_user),
) -> dict[str, object]:
    """Delete several entries at once."""
    deleted = get_container(request).food_entry_service.bulk_delete(
        user_id, payload.get("ids")
    )
    return {"deleted_count": deleted}


@router.get("/{entry_id}")
def get_entry(
    entry_id: str, request: Request, user_id: str = Depends(require_user)
) -> dict[str, object]:
    """Return a single entry."""
    entry = get_container(request).food_entry_service.get(entry_id, user_id)
    return {"entry": entry}


@router.put("/{entry_id}")
def update_entry(
    entry_id: str,
    request: Request,
    payload: dict[str, Any] = Body(...),
    user_id: str = Depends(require_user),
) -> dict[str, object]:
    """Update provided entry fields."""
    entry = get_container(request).food_entry_service.update(
        entry_id, user_id, payload
    )
    return {"entry": entry}


@router.delete("/{entry_id}")
def delete_entry(
    entry_id: str, request: Request, user_id: str = Depends(require_user)
) -> dict[str, object]:
    """Delete an entry; deleting a missing id is not an error."""
    deleted = get_container(request).food_entry_service.delete(entry_id, user_id)
    return {"deleted": deleted}
