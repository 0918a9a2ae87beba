"""Supabase implementation for profiles and body tracking."""

from dataclasses import dataclass

from supabase import Client

from meal_tracker.adapters.supabase_support import (
    execute,
    optional_float,
    optional_int,
    parse_date,
    parse_datetime,
    to_row,
)
from meal_tracker.domain.profiles import (
    ProfileTracking,
    ProfileTrackingQuery,
    UserProfile,
)
from meal_tracker.errors import PersistenceError
from meal_tracker.services.profiles import ProfileRepository

PROFILES_TABLE = "user_profiles"
TRACKING_TABLE = "profile_tracking"


@dataclass
class SupabaseProfileRepository(ProfileRepository):
    """Supabase-backed repository for profiles and tracking rows."""

    client: Client

    def get_profile(self, user_id: str) -> UserProfile | None:
        """Return the user's profile, if present."""
        response = execute(
            self.client.table(PROFILES_TABLE)
            .select("*")
            .eq("user_id", user_id)
            .limit(1),
            "load profile",
        )
        if not response.data:
            return None
        return _parse_profile(response.data[0])

    def create_profile(self, user_id: str, payload: dict[str, object]) -> UserProfile:
        """Insert a profile; a duplicate row surfaces as ConflictError."""
        response = execute(
            self.client.table(PROFILES_TABLE).insert(
                {"user_id": user_id, **to_row(payload)}
            ),
            "create profile",
        )
        if not response.data:
            raise PersistenceError("Failed to create profile")
        return _parse_profile(response.data[0])

    def update_profile(
        self, user_id: str, changes: dict[str, object]
    ) -> UserProfile | None:
        """Apply changes to the profile and return it."""
        response = execute(
            self.client.table(PROFILES_TABLE)
            .update(to_row(changes))
            .eq("user_id", user_id),
            "update profile",
        )
        if not response.data:
            return None
        return _parse_profile(response.data[0])

    def create_tracking(
        self, user_id: str, payload: dict[str, object]
    ) -> ProfileTracking:
        """Insert a tracking row and return it."""
        response = execute(
            self.client.table(TRACKING_TABLE).insert(
                {"user_id": user_id, **to_row(payload)}
            ),
            "create profile tracking",
        )
        if not response.data:
            raise PersistenceError("Failed to create profile tracking")
        return _parse_tracking(response.data[0])

    def list_tracking(
        self, user_id: str, query: ProfileTrackingQuery
    ) -> list[ProfileTracking]:
        """Return tracking rows, most recent first."""
        request = self.client.table(TRACKING_TABLE).select("*").eq("user_id", user_id)
        if query.start_date:
            request = request.gte("recorded_date", query.start_date.isoformat())
        if query.end_date:
            request = request.lte("recorded_date", query.end_date.isoformat())
        request = (
            request.order("recorded_date", desc=True)
            .order("created_at", desc=True)
            .range(query.offset, query.offset + query.limit - 1)
        )
        response = execute(request, "list profile tracking")
        return [_parse_tracking(row) for row in response.data or []]

    def get_latest_weight(self, user_id: str) -> ProfileTracking | None:
        """Return the most recent tracking row that has a weight."""
        response = execute(
            self.client.table(TRACKING_TABLE)
            .select("*")
            .eq("user_id", user_id)
            .not_.is_("weight_kg", "null")
            .order("recorded_date", desc=True)
            .order("created_at", desc=True)
            .limit(1),
            "load latest weight",
        )
        if not response.data:
            return None
        return _parse_tracking(response.data[0])


def _parse_profile(row: dict[str, object]) -> UserProfile:
    """Parse a user_profiles row into a domain model."""
    return UserProfile(
        user_id=str(row["user_id"]),
        height_cm=int(row["height_cm"]),
        age=int(row["age"]),
        gender=str(row["gender"]),
        activity_level=str(row["activity_level"]),
        created_at=parse_datetime(row["created_at"]),
        updated_at=parse_datetime(row.get("updated_at") or row["created_at"]),
    )


def _parse_tracking(row: dict[str, object]) -> ProfileTracking:
    """Parse a profile_tracking row into a domain model."""
    return ProfileTracking(
        id=str(row["id"]),
        user_id=str(row["user_id"]),
        weight_kg=optional_float(row.get("weight_kg")),
        muscle_mass_kg=optional_float(row.get("muscle_mass_kg")),
        body_fat_percentage=optional_float(row.get("body_fat_percentage")),
        bmr_calories=optional_int(row.get("bmr_calories")),
        tdee_calories=optional_int(row.get("tdee_calories")),
        recorded_date=parse_date(row["recorded_date"]),
        created_at=parse_datetime(row["created_at"]),
    )
