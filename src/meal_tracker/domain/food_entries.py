"""Domain models for logged food entries."""

from dataclasses import dataclass
from datetime import date, datetime

from pydantic import Field, model_validator

from meal_tracker.domain.nutrition import FoodSource, MealType, RequestModel

DEFAULT_PAGE_SIZE = 50
MAX_PAGE_SIZE = 100


@dataclass(frozen=True)
class FoodEntry:
    """A single logged food item."""

    id: str
    user_id: str
    food_name: str
    calories: int
    protein_g: float
    carbs_g: float
    fat_g: float
    meal_type: str
    entry_date: date
    source: str
    ai_confidence: float | None
    original_description: str | None
    created_at: datetime
    updated_at: datetime


class FoodEntryCreate(RequestModel):
    """Validated input for a new food entry."""

    food_name: str = Field(min_length=1, max_length=200)
    calories: int = Field(ge=0, le=10000)
    protein_g: float = Field(default=0, ge=0, le=1000)
    carbs_g: float = Field(default=0, ge=0, le=1000)
    fat_g: float = Field(default=0, ge=0, le=1000)
    meal_type: MealType
    entry_date: date | None = None
    source: FoodSource = "manual"
    ai_confidence: float | None = Field(default=None, ge=0, le=1)
    original_description: str | None = Field(default=None, max_length=500)


class FoodEntryPatch(RequestModel):
    """Partial update; omitted or null fields keep their stored value."""

    food_name: str | None = Field(default=None, min_length=1, max_length=200)
    calories: int | None = Field(default=None, ge=0, le=10000)
    protein_g: float | None = Field(default=None, ge=0, le=1000)
    carbs_g: float | None = Field(default=None, ge=0, le=1000)
    fat_g: float | None = Field(default=None, ge=0, le=1000)
    meal_type: MealType | None = None
    entry_date: date | None = None
    source: FoodSource | None = None
    ai_confidence: float | None = Field(default=None, ge=0, le=1)
    original_description: str | None = Field(default=None, max_length=500)

    def changes(self) -> dict[str, object]:
        """Return only the fields that should be written."""
        return self.model_dump(exclude_unset=True, exclude_none=True)


class FoodEntryQuery(RequestModel):
    """Filters and pagination for listing entries."""

    start_date: date | None = None
    end_date: date | None = None
    meal_type: MealType | None = None
    limit: int = Field(default=DEFAULT_PAGE_SIZE, gt=0, le=MAX_PAGE_SIZE)
    offset: int = Field(default=0, ge=0)

    @model_validator(mode="after")
    def _check_range(self) -> "FoodEntryQuery":
        if self.start_date and self.end_date and self.start_date > self.end_date:
            raise ValueError("start_date must not be after end_date")
        return self


class BulkDeleteRequest(RequestModel):
    """Ids to delete in one call."""

    ids: list[str] = Field(min_length=1, max_length=MAX_PAGE_SIZE)
