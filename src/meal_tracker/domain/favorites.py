"""Domain models for favourite foods."""

from dataclasses import dataclass
from datetime import date, datetime

from pydantic import Field

from meal_tracker.domain.food_entries import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from meal_tracker.domain.nutrition import MealType, RequestModel


@dataclass(frozen=True)
class FavoriteFood:
    """A reusable food template."""

    id: str
    user_id: str
    name: str
    calories: int
    protein_g: float
    carbs_g: float
    fat_g: float
    serving_size: str | None
    category: str | None
    usage_count: int
    last_used_at: datetime | None
    created_at: datetime
    updated_at: datetime


class FavoriteFoodCreate(RequestModel):
    """Validated input for a new favourite."""

    name: str = Field(min_length=1, max_length=200)
    calories: int = Field(ge=0, le=10000)
    protein_g: float = Field(default=0, ge=0, le=1000)
    carbs_g: float = Field(default=0, ge=0, le=1000)
    fat_g: float = Field(default=0, ge=0, le=1000)
    serving_size: str | None = Field(default=None, max_length=100)
    category: str | None = Field(default=None, max_length=100)


class FavoriteFoodPatch(RequestModel):
    """Partial update; omitted or null fields keep their stored value."""

    name: str | None = Field(default=None, min_length=1, max_length=200)
    calories: int | None = Field(default=None, ge=0, le=10000)
    protein_g: float | None = Field(default=None, ge=0, le=1000)
    carbs_g: float | None = Field(default=None, ge=0, le=1000)
    fat_g: float | None = Field(default=None, ge=0, le=1000)
    serving_size: str | None = Field(default=None, max_length=100)
    category: str | None = Field(default=None, max_length=100)

    def changes(self) -> dict[str, object]:
        """Return only the fields that should be written."""
        return self.model_dump(exclude_unset=True, exclude_none=True)


class FavoriteFoodQuery(RequestModel):
    """Filters and pagination for listing favourites."""

    category: str | None = Field(default=None, max_length=100)
    limit: int = Field(default=DEFAULT_PAGE_SIZE, gt=0, le=MAX_PAGE_SIZE)
    offset: int = Field(default=0, ge=0)


class FavoriteLogRequest(RequestModel):
    """Input for adding a favourite to the food log."""

    meal_type: MealType
    entry_date: date | None = None
