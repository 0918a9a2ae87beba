"""Supabase implementation for food entries."""

from dataclasses import dataclass
from datetime import date

from supabase import Client

from meal_tracker.adapters.supabase_support import (
    PAGE_SIZE,
    execute,
    fetch_all,
    optional_float,
    parse_date,
    parse_datetime,
    to_row,
)
from meal_tracker.domain.food_entries import FoodEntry, FoodEntryQuery
from meal_tracker.errors import PersistenceError
from meal_tracker.services.food_entries import FoodEntryRepository

TABLE = "food_entries"


@dataclass
class SupabaseFoodEntryRepository(FoodEntryRepository):
    """Supabase-backed repository for food entries."""

    client: Client
    page_size: int = PAGE_SIZE

    def create_entry(self, user_id: str, payload: dict[str, object]) -> FoodEntry:
        """Insert an entry and return it."""
        response = execute(
            self.client.table(TABLE).insert({"user_id": user_id, **to_row(payload)}),
            "create food entry",
        )
        if not response.data:
            raise PersistenceError("Failed to create food entry")
        return parse_food_entry(response.data[0])

    def list_entries(self, user_id: str, query: FoodEntryQuery) -> list[FoodEntry]:
        """Return a page of entries, newest first."""
        request = self.client.table(TABLE).select("*").eq("user_id", user_id)
        if query.start_date:
            request = request.gte("entry_date", query.start_date.isoformat())
        if query.end_date:
            request = request.lte("entry_date", query.end_date.isoformat())
        if query.meal_type:
            request = request.eq("meal_type", query.meal_type)
        request = (
            request.order("entry_date", desc=True)
            .order("created_at", desc=True)
            .range(query.offset, query.offset + query.limit - 1)
        )
        response = execute(request, "list food entries")
        return [parse_food_entry(row) for row in response.data or []]

    def list_entries_between(
        self, user_id: str, start_date: date, end_date: date
    ) -> list[FoodEntry]:
        """Return every entry with entry_date in the inclusive range."""
        rows = fetch_all(
            lambda: self.client.table(TABLE)
            .select("*")
            .eq("user_id", user_id)
            .gte("entry_date", start_date.isoformat())
            .lte("entry_date", end_date.isoformat())
            .order("entry_date")
            .order("created_at")
            .order("id"),
            "list food entries",
            self.page_size,
        )
        return [parse_food_entry(row) for row in rows]

    def list_logged_dates(self, user_id: str) -> list[date]:
        """Return the distinct dates that have at least one entry."""
        rows = fetch_all(
            lambda: self.client.rpc("list_logged_dates", {"p_user_id": user_id}),
            "list logged dates",
            self.page_size,
        )
        return [parse_date(row["entry_date"]) for row in rows]

    def get_entry(self, entry_id: str, user_id: str) -> FoodEntry | None:
        """Return an entry owned by the user, if present."""
        response = execute(
            self.client.table(TABLE)
            .select("*")
            .eq("id", entry_id)
            .eq("user_id", user_id)
            .limit(1),
            "load food entry",
        )
        if not response.data:
            return None
        return parse_food_entry(response.data[0])

    def update_entry(
        self, entry_id: str, user_id: str, changes: dict[str, object]
    ) -> FoodEntry | None:
        """Apply changes to an owned entry and return it."""
        response = execute(
            self.client.table(TABLE)
            .update(to_row(changes))
            .eq("id", entry_id)
            .eq("user_id", user_id),
            "update food entry",
        )
        if not response.data:
            return None
        return parse_food_entry(response.data[0])

    def delete_entry(self, entry_id: str, user_id: str) -> bool:
        """Delete an owned entry, reporting whether a row was removed."""
        response = execute(
            self.client.table(TABLE).delete().eq("id", entry_id).eq("user_id", user_id),
            "delete food entry",
        )
        return bool(response.data)

    def delete_entries(self, user_id: str, entry_ids: list[str]) -> int:
        """Delete owned entries and return how many were removed."""
        response = execute(
            self.client.table(TABLE)
            .delete()
            .eq("user_id", user_id)
            .in_("id", entry_ids),
            "delete food entries",
        )
        return len(response.data or [])


def parse_food_entry(row: dict[str, object]) -> FoodEntry:
    """Parse a food_entries row into a domain model."""
    return FoodEntry(
        id=str(row["id"]),
        user_id=str(row["user_id"]),
        food_name=str(row.get("food_name", "")),
        calories=int(row.get("calories", 0)),
        protein_g=float(row.get("protein_g") or 0.0),
        carbs_g=float(row.get("carbs_g") or 0.0),
        fat_g=float(row.get("fat_g") or 0.0),
        meal_type=str(row.get("meal_type", "")),
        entry_date=parse_date(row["entry_date"]),
        source=str(row.get("source") or "manual"),
        ai_confidence=optional_float(row.get("ai_confidence")),
        original_description=row.get("original_description"),
        created_at=parse_datetime(row["created_at"]),
        updated_at=parse_datetime(row.get("updated_at") or row["created_at"]),
    )
