"""Domain models for user profiles and body tracking."""

from dataclasses import dataclass, field
from datetime import date, datetime

from pydantic import Field, model_validator

from meal_tracker.domain.food_entries import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from meal_tracker.domain.nutrition import (
    ActivityLevel,
    Gender,
    MacroTargets,
    RequestModel,
)


@dataclass(frozen=True)
class UserProfile:
    """Physical attributes used for energy calculations."""

    user_id: str
    height_cm: int
    age: int
    gender: str
    activity_level: str
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class ProfileTracking:
    """A dated body measurement with an energy snapshot."""

    id: str
    user_id: str
    weight_kg: float | None
    muscle_mass_kg: float | None
    body_fat_percentage: float | None
    bmr_calories: int | None
    tdee_calories: int | None
    recorded_date: date
    created_at: datetime


@dataclass(frozen=True)
class ExtendedUserProfile:
    """Profile enriched with the latest weight and derived energy values."""

    user_id: str
    height_cm: int
    age: int
    gender: str
    activity_level: str
    created_at: datetime
    updated_at: datetime
    current_weight_kg: float | None = None
    current_bmr: int | None = None
    current_tdee: int | None = None
    last_weight_recorded: date | None = None
    macro_targets: MacroTargets | None = None
    weight_history: list[ProfileTracking] = field(default_factory=list)


class ProfileCreate(RequestModel):
    """Validated input for a new profile."""

    height_cm: int = Field(ge=50, le=300)
    age: int = Field(ge=1, le=150)
    gender: Gender
    activity_level: ActivityLevel


class ProfilePatch(RequestModel):
    """Partial profile update."""

    height_cm: int | None = Field(default=None, ge=50, le=300)
    age: int | None = Field(default=None, ge=1, le=150)
    gender: Gender | None = None
    activity_level: ActivityLevel | None = None

    def changes(self) -> dict[str, object]:
        """Return only the fields that should be written."""
        return self.model_dump(exclude_unset=True, exclude_none=True)


class ProfileTrackingCreate(RequestModel):
    """Validated input for a body measurement."""

    weight_kg: float | None = Field(default=None, ge=20, le=500)
    muscle_mass_kg: float | None = Field(default=None, ge=0, le=200)
    body_fat_percentage: float | None = Field(default=None, ge=0, le=100)
    recorded_date: date | None = None

    @model_validator(mode="after")
    def _require_measurement(self) -> "ProfileTrackingCreate":
        if (
            self.weight_kg is None
            and self.muscle_mass_kg is None
            and self.body_fat_percentage is None
        ):
            raise ValueError("At least one measurement must be provided")
        return self


class ProfileTrackingQuery(RequestModel):
    """Filters and pagination for tracking history."""

    start_date: date | None = None
    end_date: date | None = None
    limit: int = Field(default=DEFAULT_PAGE_SIZE, gt=0, le=MAX_PAGE_SIZE)
    offset: int = Field(default=0, ge=0)

    @model_validator(mode="after")
    def _check_range(self) -> "ProfileTrackingQuery":
        if self.start_date and self.end_date and self.start_date > self.end_date:
            raise ValueError("start_date must not be after end_date")
        return self
