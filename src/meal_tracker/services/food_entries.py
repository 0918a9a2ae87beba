"""Services for logging and querying food entries."""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, date, datetime
from typing import Protocol

from meal_tracker.domain.food_entries import (
    BulkDeleteRequest,
    FoodEntry,
    FoodEntryCreate,
    FoodEntryPatch,
    FoodEntryQuery,
)
from meal_tracker.errors import NotFoundError
from meal_tracker.services.validation import parse_input


def utc_today() -> date:
    """Return the current calendar date on the server clock."""
    return datetime.now(tz=UTC).date()


class FoodEntryRepository(Protocol):
    """Persistence interface for food entries."""

    def create_entry(self, user_id: str, payload: dict[str, object]) -> FoodEntry:
        """Insert an entry and return it."""

    def list_entries(self, user_id: str, query: FoodEntryQuery) -> list[FoodEntry]:
        """Return a page of entries, newest first."""

    def list_entries_between(
        self, user_id: str, start_date: date, end_date: date
    ) -> list[FoodEntry]:
        """Return every entry with entry_date in the inclusive range."""

    def list_logged_dates(self, user_id: str) -> list[date]:
        """Return the distinct dates that have at least one entry."""

    def get_entry(self, entry_id: str, user_id: str) -> FoodEntry | None:
        """Return an entry owned by the user, if present."""

    def update_entry(
        self, entry_id: str, user_id: str, changes: dict[str, object]
    ) -> FoodEntry | None:
        """Apply changes to an owned entry and return it."""

    def delete_entry(self, entry_id: str, user_id: str) -> bool:
        """Delete an owned entry, reporting whether a row was removed."""

    def delete_entries(self, user_id: str, entry_ids: list[str]) -> int:
        """Delete owned entries and return how many were removed."""


@dataclass
class FoodEntryService:
    """Application service for food entries."""

    repository: FoodEntryRepository
    today: Callable[[], date] = utc_today

    def prepare(self, data: object) -> dict[str, object]:
        """Validate new entry data and fill defaults."""
        entry = parse_input(FoodEntryCreate, data)
        payload = entry.model_dump()
        if payload["entry_date"] is None:
            payload["entry_date"] = self.today()
        return payload

    def create(self, user_id: str, data: object) -> FoodEntry:
        """Validate and store a new entry."""
        return self.repository.create_entry(user_id, self.prepare(data))

    def list_entries(self, user_id: str, query: object = None) -> list[FoodEntry]:
        """Return entries matching the query filters."""
        filters = parse_input(FoodEntryQuery, query)
        return self.repository.list_entries(user_id, filters)

    def get(self, entry_id: str, user_id: str) -> FoodEntry:
        """Return an owned entry or raise NotFoundError."""
        entry = self.repository.get_entry(entry_id, user_id)
        if entry is None:
            raise NotFoundError("Food entry")
        return entry

    def update(self, entry_id: str, user_id: str, patch: object) -> FoodEntry:
        """Merge the provided fields into an owned entry."""
        changes = parse_input(FoodEntryPatch, patch).changes()
        if not changes:
            return self.get(entry_id, user_id)
        changes["updated_at"] = datetime.now(tz=UTC)
        entry = self.repository.update_entry(entry_id, user_id, changes)
        if entry is None:
            raise NotFoundError("Food entry")
        return entry

    def delete(self, entry_id: str, user_id: str) -> bool:
        """Delete an owned entry; missing ids return False."""
        return self.repository.delete_entry(entry_id, user_id)

    def bulk_delete(self, user_id: str, entry_ids: object) -> int:
        """Delete several owned entries at once."""
        request = parse_input(BulkDeleteRequest, {"ids": entry_ids})
        unique_ids = list(dict.fromkeys(request.ids))
        return self.repository.delete_entries(user_id, unique_ids)

    def list_between(
        self, user_id: str, start_date: date, end_date: date
    ) -> list[FoodEntry]:
        """Return every entry in an inclusive date range."""
        return self.repository.list_entries_between(user_id, start_date, end_date)

    def logged_dates(self, user_id: str) -> set[date]:
        """Return the set of dates with at least one entry."""
        return set(self.repository.list_logged_dates(user_id))
