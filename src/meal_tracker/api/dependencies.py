"""Shared FastAPI dependencies."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import Header, HTTPException, Request, status

if TYPE_CHECKING:
    from meal_tracker.containers import AppContainer

API_PREFIX = "/api/v1/meal-tracker"
_BEARER_PREFIX = "Bearer "


def get_container(request: Request) -> AppContainer:
    """Return the container attached to the running app."""
    return request.app.state.container


def require_user(
    request: Request,
    authorization: str | None = Header(default=None),
) -> str:
    """Resolve the calling user's id from a bearer token."""
    if not authorization or not authorization.startswith(_BEARER_PREFIX):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing or invalid authorization header",
        )
    token = authorization[len(_BEARER_PREFIX) :].strip()
    container = get_container(request)
    user_id = container.token_verifier.verify(token) if token else None
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
        )
    return user_id
