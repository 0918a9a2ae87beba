"""Favourite food endpoints."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, Request, status

from meal_tracker.api.dependencies import API_PREFIX, get_container, require_user

router = APIRouter(prefix=f"{API_PREFIX}/favorites", tags=["favorites"])


@router.get("")
def list_favorites(  # noqa: PLR0913
    request: Request,
    q: str | None = None,
    category: str | None = None,
    limit: int = 50,
    offset: int = 0,
    user_id: str = Depends(require_user),
) -> dict[str, object]:
    """Return favourites by usage, or search them by name when q is given."""
    service = get_container(request).favorite_food_service
    if q is not None:
        favorites = service.search(user_id, q, limit=limit)
    else:
        favorites = service.list_favorites(
            user_id, {"category": category, "limit": limit, "offset": offset}
        )
    return {"favorites": favorites, "count": len(favorites)}


@router.post("", status_code=status.HTTP_201_CREATED)
def create_favorite(
    request: Request,
    payload: dict[str, Any] = Body(...),
    user_id: str = Depends(require_user),
) -> dict[str, object]:
    """Save a favourite food."""
    favorite = get_container(request).favorite_food_service.create(user_id, payload)
    return {"favorite": favorite}


@router.post("/bulk-delete")
def bulk_delete_favorites(
    request: Request,
    payload: dict[str, Any] = Body(...),
    user_id: str = Depends(require_user),
) -> dict[str, object]:
    """Delete several favourites at once."""
    deleted = get_container(request).favorite_food_service.bulk_delete(
        user_id, payload.get("ids")
    )
    return {"deleted_count": deleted}


@router.get("/{favorite_id}")
def get_favorite(
    favorite_id: str, request: Request, user_id: str = Depends(require_user)
) -> dict[str, object]:
    """Return a single favourite."""
    favorite = get_container(request).favorite_food_service.get(favorite_id, user_id)
    return {"favorite": favorite}


@router.put("/{favorite_id}")
def update_favorite(
    favorite_id: str,
    request: Request,
    payload: dict[str, Any] = Body(...),
    user_id: str = Depends(require_user),
) -> dict[str, object]:
    """Update provided favourite fields."""
    favorite = get_container(request).favorite_food_service.update(
        favorite_id, user_id, payload
    )
    return {"favorite": favorite}


@router.delete("/{favorite_id}")
def delete_favorite(
    favorite_id: str, request: Request, user_id: str = Depends(require_user)
) -> dict[str, object]:
    """Delete a favourite; deleting a missing id is not an error."""
    deleted = get_container(request).favorite_food_service.delete(
        favorite_id, user_id
    )
    return {"deleted": deleted}


@router.post("/{favorite_id}/log", status_code=status.HTTP_201_CREATED)
def log_favorite(
    favorite_id: str,
    request: Request,
    payload: dict[str, Any] = Body(...),
    user_id: str = Depends(require_user),
) -> dict[str, object]:
    """Add a favourite to the food log."""
    entry = get_container(request).favorite_food_service.add_to_log(
        favorite_id,
        user_id,
        meal_type=payload.get("meal_type") or payload.get("mealType"),
        entry_date=payload.get("entry_date") or payload.get("entryDate"),
    )
    return {"entry": entry}
