"""Services for user profiles and body tracking."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, replace
from datetime import UTC, date, datetime
from typing import Protocol

from meal_tracker.domain.nutrition import MacroTargets
from meal_tracker.domain.profiles import (
    ExtendedUserProfile,
    ProfileCreate,
    ProfilePatch,
    ProfileTracking,
    ProfileTrackingCreate,
    ProfileTrackingQuery,
    UserProfile,
)
from meal_tracker.errors import ConflictError, NotFoundError, PersistenceError
from meal_tracker.services.food_entries import utc_today
from meal_tracker.services.formulas import (
    calculate_bmr_and_tdee,
    calculate_macro_targets,
)
from meal_tracker.services.validation import parse_input

HISTORY_LIMIT = 30

_logger = logging.getLogger(__name__)


class ProfileRepository(Protocol):
    """Persistence interface for profiles and tracking rows."""

    def get_profile(self, user_id: str) -> UserProfile | None:
        """Return the user's profile, if present."""

    def create_profile(self, user_id: str, payload: dict[str, object]) -> UserProfile:
        """Insert a profile; raises ConflictError if one exists."""

    def update_profile(
        self, user_id: str, changes: dict[str, object]
    ) -> UserProfile | None:
        """Apply changes to the profile and return it."""

    def create_tracking(
        self, user_id: str, payload: dict[str, object]
    ) -> ProfileTracking:
        """Insert a tracking row and return it."""

    def list_tracking(
        self, user_id: str, query: ProfileTrackingQuery
    ) -> list[ProfileTracking]:
        """Return tracking rows, most recent first."""

    def get_latest_weight(self, user_id: str) -> ProfileTracking | None:
        """Return the most recent tracking row that has a weight."""


@dataclass
class ProfileService:
    """Application service for profiles and body measurements."""

    repository: ProfileRepository
    today: Callable[[], date] = utc_today

    def create_profile(self, user_id: str, data: object) -> UserProfile:
        """Create the user's profile; at most one per user."""
        profile = parse_input(ProfileCreate, data)
        if self.repository.get_profile(user_id) is not None:
            raise ConflictError("Profile already exists")
        return self.repository.create_profile(user_id, profile.model_dump())

    def get_profile(self, user_id: str) -> ExtendedUserProfile:
        """Return the profile with current weight, energy and history."""
        profile = self.repository.get_profile(user_id)
        if profile is None:
            raise NotFoundError("Profile")
        latest = self.repository.get_latest_weight(user_id)
        try:
            history = self.repository.list_tracking(
                user_id, ProfileTrackingQuery(limit=HISTORY_LIMIT)
            )
        except PersistenceError:
            _logger.warning(
                "Weight history unavailable for user %s", user_id, exc_info=True
            )
            history = []

        extended = ExtendedUserProfile(
            user_id=profile.user_id,
            height_cm=profile.height_cm,
            age=profile.age,
            gender=profile.gender,
            activity_level=profile.activity_level,
            created_at=profile.created_at,
            updated_at=profile.updated_at,
            weight_history=history,
        )
        if latest is None or latest.weight_kg is None:
            return extended

        bmr, tdee = calculate_bmr_and_tdee(profile, latest.weight_kg)
        return replace(
            extended,
            current_weight_kg=latest.weight_kg,
            current_bmr=bmr,
            current_tdee=tdee,
            last_weight_recorded=latest.recorded_date,
            macro_targets=calculate_macro_targets(
                tdee, latest.weight_kg, profile.gender
            ),
        )

    def update_profile(self, user_id: str, patch: object) -> UserProfile:
        """Merge the provided fields into the profile."""
        changes = parse_input(ProfilePatch, patch).changes()
        if not changes:
            profile = self.repository.get_profile(user_id)
        else:
            changes["updated_at"] = datetime.now(tz=UTC)
            profile = self.repository.update_profile(user_id, changes)
        if profile is None:
            raise NotFoundError("Profile")
        return profile

    def create_tracking(self, user_id: str, data: object) -> ProfileTracking:
        """Record a body measurement with a BMR/TDEE snapshot when possible."""
        measurement = parse_input(ProfileTrackingCreate, data)
        payload = measurement.model_dump()
        if payload["recorded_date"] is None:
            payload["recorded_date"] = self.today()
        payload["bmr_calories"] = None
        payload["tdee_calories"] = None
        if measurement.weight_kg is not None:
            profile = self.repository.get_profile(user_id)
            if profile is not None:
                bmr, tdee = calculate_bmr_and_tdee(profile, measurement.weight_kg)
                payload["bmr_calories"] = bmr
                payload["tdee_calories"] = tdee
        return self.repository.create_tracking(user_id, payload)

    def list_tracking(
        self, user_id: str, query: object = None
    ) -> list[ProfileTracking]:
        """Return measurements, most recent first."""
        filters = parse_input(ProfileTrackingQuery, query)
        return self.repository.list_tracking(user_id, filters)

    def get_macro_targets(self, user_id: str) -> MacroTargets:
        """Return daily macro targets from the current weight and TDEE."""
        profile = self.get_profile(user_id)
        if profile.macro_targets is None:
            raise NotFoundError("Weight measurement")
        return profile.macro_targets

    def current_tdee(self, user_id: str) -> int | None:
        """Return the current TDEE, or None without a profile or weight."""
        profile = self.repository.get_profile(user_id)
        if profile is None:
            return None
        latest = self.repository.get_latest_weight(user_id)
        if latest is None or latest.weight_kg is None:
            return None
        return calculate_bmr_and_tdee(profile, latest.weight_kg)[1]
