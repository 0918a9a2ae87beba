"""Services for managing favourite foods."""

from dataclasses import dataclass
from datetime import UTC, date, datetime
from typing import Protocol

from meal_tracker.domain.favorites import (
    FavoriteFood,
    FavoriteFoodCreate,
    FavoriteFoodPatch,
    FavoriteFoodQuery,
    FavoriteLogRequest,
)
from meal_tracker.domain.food_entries import BulkDeleteRequest, FoodEntry
from meal_tracker.errors import NotFoundError, ValidationError
from meal_tracker.services.food_entries import FoodEntryService
from meal_tracker.services.validation import parse_input

MAX_SEARCH_LENGTH = 200


class FavoriteFoodRepository(Protocol):
    """Persistence interface for favourite foods."""

    def create_favorite(
        self, user_id: str, payload: dict[str, object]
    ) -> FavoriteFood:
        """Insert a favourite and return it."""

    def list_favorites(
        self, user_id: str, query: FavoriteFoodQuery
    ) -> list[FavoriteFood]:
        """Return favourites ordered by usage."""

    def search_favorites(
        self, user_id: str, text: str, limit: int
    ) -> list[FavoriteFood]:
        """Return favourites whose name contains the text."""

    def get_favorite(self, favorite_id: str, user_id: str) -> FavoriteFood | None:
        """Return an owned favourite, if present."""

    def update_favorite(
        self, favorite_id: str, user_id: str, changes: dict[str, object]
    ) -> FavoriteFood | None:
        """Apply changes to an owned favourite and return it."""

    def delete_favorite(self, favorite_id: str, user_id: str) -> bool:
        """Delete an owned favourite."""

    def delete_favorites(self, user_id: str, favorite_ids: list[str]) -> int:
        """Delete owned favourites and return how many were removed."""

    def log_favorite(
        self,
        favorite_id: str,
        user_id: str,
        entry: dict[str, object],
        used_at: datetime,
    ) -> FoodEntry:
        """Insert the entry and record the use in one transaction."""


@dataclass
class FavoriteFoodService:
    """Application service for favourite foods."""

    repository: FavoriteFoodRepository
    food_entries: FoodEntryService

    def create(self, user_id: str, data: object) -> FavoriteFood:
        """Validate and store a new favourite."""
        favorite = parse_input(FavoriteFoodCreate, data)
        return self.repository.create_favorite(user_id, favorite.model_dump())

    def list_favorites(self, user_id: str, query: object = None) -> list[FavoriteFood]:
        """Return favourites, most used first."""
        filters = parse_input(FavoriteFoodQuery, query)
        return self.repository.list_favorites(user_id, filters)

    def search(self, user_id: str, text: str, limit: int = 10) -> list[FavoriteFood]:
        """Find favourites by case-insensitive name substring."""
        text = text.strip()
        if not text:
            return self.list_favorites(user_id, {"limit": limit})
        if len(text) > MAX_SEARCH_LENGTH:
            raise ValidationError.single("q", "Search text is too long")
        filters = parse_input(FavoriteFoodQuery, {"limit": limit})
        return self.repository.search_favorites(user_id, text, filters.limit)

    def get(self, favorite_id: str, user_id: str) -> FavoriteFood:
        """Return an owned favourite or raise NotFoundError."""
        favorite = self.repository.get_favorite(favorite_id, user_id)
        if favorite is None:
            raise NotFoundError("Favorite food")
        return favorite

    def update(self, favorite_id: str, user_id: str, patch: object) -> FavoriteFood:
        """Merge the provided fields into an owned favourite."""
        changes = parse_input(FavoriteFoodPatch, patch).changes()
        if not changes:
            return self.get(favorite_id, user_id)
        changes["updated_at"] = datetime.now(tz=UTC)
        favorite = self.repository.update_favorite(favorite_id, user_id, changes)
        if favorite is None:
            raise NotFoundError("Favorite food")
        return favorite

    def delete(self, favorite_id: str, user_id: str) -> bool:
        """Delete an owned favourite; missing ids return False."""
        return self.repository.delete_favorite(favorite_id, user_id)

    def bulk_delete(self, user_id: str, favorite_ids: object) -> int:
        """Delete several owned favourites at once."""
        request = parse_input(BulkDeleteRequest, {"ids": favorite_ids})
        unique_ids = list(dict.fromkeys(request.ids))
        return self.repository.delete_favorites(user_id, unique_ids)

    def add_to_log(
        self,
        favorite_id: str,
        user_id: str,
        meal_type: str,
        entry_date: date | str | None = None,
    ) -> FoodEntry:
        """Log a favourite as a food entry and bump its usage."""
        request = parse_input(
            FavoriteLogRequest, {"meal_type": meal_type, "entry_date": entry_date}
        )
        favorite = self.get(favorite_id, user_id)
        entry = self.food_entries.prepare(
            {
                "food_name": favorite.name,
                "calories": favorite.calories,
                "protein_g": favorite.protein_g,
                "carbs_g": favorite.carbs_g,
                "fat_g": favorite.fat_g,
                "meal_type": request.meal_type,
                "entry_date": request.entry_date,
                "source": "manual",
            }
        )
        return self.repository.log_favorite(
            favorite_id, user_id, entry, used_at=datetime.now(tz=UTC)
        )
