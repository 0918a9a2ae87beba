"""Helpers shared by the Supabase repositories."""

from collections.abc import Callable, Iterable
from datetime import date, datetime
from typing import Any

from postgrest.exceptions import APIError

from meal_tracker.errors import ConflictError, PersistenceError

UNIQUE_VIOLATION = "23505"
# Default PostgREST max-rows; larger reads are fetched in pages.
PAGE_SIZE = 1000


def execute(
    query: Any,
    action: str,
    conflict_codes: Iterable[str] = (UNIQUE_VIOLATION,),
) -> Any:
    """Run a PostgREST request, translating API errors into domain errors."""
    try:
        return query.execute()
    except APIError as exc:
        if exc.code in set(conflict_codes):
            message = f"Could not {action}: record already exists"
            if exc.code != UNIQUE_VIOLATION and exc.message:
                message = exc.message
            raise ConflictError(message) from exc
        raise PersistenceError(f"Failed to {action}") from exc


def fetch_all(
    build: Callable[[], Any], action: str, page_size: int = PAGE_SIZE
) -> list[dict[str, Any]]:
    """Read every row of an ordered query, one page at a time."""
    rows: list[dict[str, Any]] = []
    while True:
        start = len(rows)
        response = execute(build().range(start, start + page_size - 1), action)
        page = response.data or []
        rows.extend(page)
        if len(page) < page_size:
            return rows


def to_row(payload: dict[str, object]) -> dict[str, object]:
    """Convert dates and timestamps into ISO strings for PostgREST."""
    row: dict[str, object] = {}
    for key, value in payload.items():
        if isinstance(value, date):
            row[key] = value.isoformat()
        else:
            row[key] = value
    return row


def parse_date(raw: object) -> date:
    """Parse a YYYY-MM-DD column value."""
    if isinstance(raw, datetime):
        return raw.date()
    if isinstance(raw, date):
        return raw
    return date.fromisoformat(str(raw)[:10])


def parse_datetime(raw: object) -> datetime:
    """Parse a timestamptz column value."""
    if isinstance(raw, datetime):
        return raw
    return datetime.fromisoformat(str(raw))


def parse_optional_datetime(raw: object) -> datetime | None:
    """Parse a nullable timestamptz column value."""
    if isinstance(raw, str) and raw:
        return datetime.fromisoformat(raw)
    if isinstance(raw, datetime):
        return raw
    return None


def optional_float(raw: object) -> float | None:
    """Parse a nullable numeric column value."""
    return None if raw is None else float(raw)


def optional_int(raw: object) -> int | None:
    """Parse a nullable integer column value."""
    return None if raw is None else int(raw)
