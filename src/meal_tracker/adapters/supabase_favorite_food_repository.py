"""Supabase implementation for favourite foods."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from supabase import Client

from meal_tracker.adapters.supabase_food_entry_repository import parse_food_entry
from meal_tracker.adapters.supabase_support import (
    execute,
    parse_datetime,
    parse_optional_datetime,
    to_row,
)
from meal_tracker.domain.favorites import FavoriteFood, FavoriteFoodQuery
from meal_tracker.domain.food_entries import FoodEntry
from meal_tracker.errors import NotFoundError, PersistenceError
from meal_tracker.services.favorites import FavoriteFoodRepository

TABLE = "favorite_foods"


@dataclass
class SupabaseFavoriteFoodRepository(FavoriteFoodRepository):
    """Supabase-backed repository for favourite foods."""

    client: Client

    def create_favorite(
        self, user_id: str, payload: dict[str, object]
    ) -> FavoriteFood:
        """Insert a favourite and return it."""
        response = execute(
            self.client.table(TABLE).insert({"user_id": user_id, **to_row(payload)}),
            "create favorite food",
        )
        if not response.data:
            raise PersistenceError("Failed to create favorite food")
        return _parse_favorite(response.data[0])

    def list_favorites(
        self, user_id: str, query: FavoriteFoodQuery
    ) -> list[FavoriteFood]:
        """Return favourites ordered by usage."""
        request = self.client.table(TABLE).select("*").eq("user_id", user_id)
        if query.category:
            request = request.eq("category", query.category)
        request = _ordered(request).range(
            query.offset, query.offset + query.limit - 1
        )
        response = execute(request, "list favorite foods")
        return [_parse_favorite(row) for row in response.data or []]

    def search_favorites(
        self, user_id: str, text: str, limit: int
    ) -> list[FavoriteFood]:
        """Return favourites whose name contains the text."""
        pattern = f"%{_escape_like(text)}%"
        request = (
            self.client.table(TABLE)
            .select("*")
            .eq("user_id", user_id)
            .ilike("name", pattern)
        )
        response = execute(_ordered(request).limit(limit), "search favorite foods")
        return [_parse_favorite(row) for row in response.data or []]

    def get_favorite(self, favorite_id: str, user_id: str) -> FavoriteFood | None:
        """Return an owned favourite, if present."""
        response = execute(
            self.client.table(TABLE)
            .select("*")
            .eq("id", favorite_id)
            .eq("user_id", user_id)
            .limit(1),
            "load favorite food",
        )
        if not response.data:
            return None
        return _parse_favorite(response.data[0])

    def update_favorite(
        self, favorite_id: str, user_id: str, changes: dict[str, object]
    ) -> FavoriteFood | None:
        """Apply changes to an owned favourite and return it."""
        response = execute(
            self.client.table(TABLE)
            .update(to_row(changes))
            .eq("id", favorite_id)
            .eq("user_id", user_id),
            "update favorite food",
        )
        if not response.data:
            return None
        return _parse_favorite(response.data[0])

    def delete_favorite(self, favorite_id: str, user_id: str) -> bool:
        """Delete an owned favourite."""
        response = execute(
            self.client.table(TABLE)
            .delete()
            .eq("id", favorite_id)
            .eq("user_id", user_id),
            "delete favorite food",
        )
        return bool(response.data)

    def delete_favorites(self, user_id: str, favorite_ids: list[str]) -> int:
        """Delete owned favourites and return how many were removed."""
        response = execute(
            self.client.table(TABLE)
            .delete()
            .eq("user_id", user_id)
            .in_("id", favorite_ids),
            "delete favorite foods",
        )
        return len(response.data or [])

    def log_favorite(
        self,
        favorite_id: str,
        user_id: str,
        entry: dict[str, object],
        used_at: datetime,
    ) -> FoodEntry:
        """Insert the entry and bump usage inside one database function call."""
        response = execute(
            self.client.rpc(
                "log_favorite_food",
                {
                    "p_favorite_id": favorite_id,
                    "p_user_id": user_id,
                    "p_entry": to_row(entry),
                    "p_used_at": used_at.isoformat(),
                },
            ),
            "log favorite food",
        )
        rows = response.data
        if isinstance(rows, dict):
            rows = [rows]
        if not rows:
            raise NotFoundError("Favorite food")
        return parse_food_entry(rows[0])


def _ordered(request: Any) -> Any:
    """Most used first, never-used last, then alphabetical."""
    return (
        request.order("usage_count", desc=True)
        .order("last_used_at", desc=True, nullsfirst=False)
        .order("name")
    )


def _escape_like(text: str) -> str:
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _parse_favorite(row: dict[str, object]) -> FavoriteFood:
    """Parse a favorite_foods row into a domain model."""
    return FavoriteFood(
        id=str(row["id"]),
        user_id=str(row["user_id"]),
        name=str(row.get("name", "")),
        calories=int(row.get("calories", 0)),
        protein_g=float(row.get("protein_g") or 0.0),
        carbs_g=float(row.get("carbs_g") or 0.0),
        fat_g=float(row.get("fat_g") or 0.0),
        serving_size=row.get("serving_size"),
        category=row.get("category"),
        usage_count=int(row.get("usage_count") or 0),
        last_used_at=parse_optional_datetime(row.get("last_used_at")),
        created_at=parse_datetime(row["created_at"]),
        updated_at=parse_datetime(row.get("updated_at") or row["created_at"]),
    )
