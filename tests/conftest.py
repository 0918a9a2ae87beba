"""Shared test fixtures."""

from dataclasses import dataclass, field, replace
from datetime import UTC, date, datetime, timedelta
from uuid import uuid4

import pytest

from meal_tracker.config import Settings
from meal_tracker.containers import AppContainer
from meal_tracker.domain.favorites import FavoriteFood, FavoriteFoodQuery
from meal_tracker.domain.food_entries import FoodEntry, FoodEntryQuery
from meal_tracker.domain.profiles import (
    ProfileTracking,
    ProfileTrackingQuery,
    UserProfile,
)
from meal_tracker.errors import ConflictError, NotFoundError, PersistenceError
from meal_tracker.services.analytics import AnalyticsService
from meal_tracker.services.auth import TokenVerifier
from meal_tracker.services.favorites import FavoriteFoodRepository, FavoriteFoodService
from meal_tracker.services.food_entries import FoodEntryRepository, FoodEntryService
from meal_tracker.services.macro_estimation import (
    MacroEstimationService,
    MacroEstimatorClient,
)
from meal_tracker.services.profiles import ProfileRepository, ProfileService
from meal_tracker.services.streaks import StreakFreezeRepository, StreakService

USER_ID = "user-1"
OTHER_USER_ID = "user-2"
TOKEN = "valid-token"
OTHER_TOKEN = "other-token"
AUTH_HEADERS = {"Authorization": f"Bearer {TOKEN}"}
TODAY = date(2024, 3, 15)
_EPOCH = datetime(2024, 1, 1, tzinfo=UTC)


def _clock(counter: int) -> datetime:
    return _EPOCH + timedelta(seconds=counter)


@dataclass
class InMemoryFoodEntryRepository(FoodEntryRepository):
    """In-memory food entry repository for tests."""

    entries: dict[str, FoodEntry] = field(default_factory=dict)

    def create_entry(self, user_id: str, payload: dict[str, object]) -> FoodEntry:
        now = _clock(len(self.entries))
        entry = FoodEntry(
            id=str(uuid4()),
            user_id=user_id,
            created_at=now,
            updated_at=now,
            **payload,
        )
        self.entries[entry.id] = entry
        return entry

    def list_entries(self, user_id: str, query: FoodEntryQuery) -> list[FoodEntry]:
        matches = [
            entry
            for entry in self._owned(user_id)
            if (query.start_date is None or entry.entry_date >= query.start_date)
            and (query.end_date is None or entry.entry_date <= query.end_date)
            and (query.meal_type is None or entry.meal_type == query.meal_type)
        ]
        matches.sort(
            key=lambda entry: (entry.entry_date, entry.created_at), reverse=True
        )
        return matches[query.offset : query.offset + query.limit]

    def list_entries_between(
        self, user_id: str, start_date: date, end_date: date
    ) -> list[FoodEntry]:
        return [
            entry
            for entry in self._owned(user_id)
            if start_date <= entry.entry_date <= end_date
        ]

    def list_logged_dates(self, user_id: str) -> list[date]:
        return sorted({entry.entry_date for entry in self._owned(user_id)})

    def get_entry(self, entry_id: str, user_id: str) -> FoodEntry | None:
        entry = self.entries.get(entry_id)
        if entry is None or entry.user_id != user_id:
            return None
        return entry

    def update_entry(
        self, entry_id: str, user_id: str, changes: dict[str, object]
    ) -> FoodEntry | None:
        entry = self.get_entry(entry_id, user_id)
        if entry is None:
            return None
        updated = replace(entry, **changes)
        self.entries[entry_id] = updated
        return updated

    def delete_entry(self, entry_id: str, user_id: str) -> bool:
        if self.get_entry(entry_id, user_id) is None:
            return False
        del self.entries[entry_id]
        return True

    def delete_entries(self, user_id: str, entry_ids: list[str]) -> int:
        return sum(1 for entry_id in entry_ids if self.delete_entry(entry_id, user_id))

    def _owned(self, user_id: str) -> list[FoodEntry]:
        return [entry for entry in self.entries.values() if entry.user_id == user_id]


@dataclass
class InMemoryFavoriteFoodRepository(FavoriteFoodRepository):
    """In-memory favourite repository sharing the entry store for logging."""

    entries: InMemoryFoodEntryRepository
    favorites: dict[str, FavoriteFood] = field(default_factory=dict)

    def create_favorite(
        self, user_id: str, payload: dict[str, object]
    ) -> FavoriteFood:
        now = _clock(len(self.favorites))
        favorite = FavoriteFood(
            id=str(uuid4()),
            user_id=user_id,
            usage_count=0,
            last_used_at=None,
            created_at=now,
            updated_at=now,
            **payload,
        )
        self.favorites[favorite.id] = favorite
        return favorite

    def list_favorites(
        self, user_id: str, query: FavoriteFoodQuery
    ) -> list[FavoriteFood]:
        items = [
            favorite
            for favorite in self._owned(user_id)
            if query.category is None or favorite.category == query.category
        ]
        return _rank(items)[query.offset : query.offset + query.limit]

    def search_favorites(
        self, user_id: str, text: str, limit: int
    ) -> list[FavoriteFood]:
        needle = text.lower()
        items = [
            favorite
            for favorite in self._owned(user_id)
            if needle in favorite.name.lower()
        ]
        return _rank(items)[:limit]

    def get_favorite(self, favorite_id: str, user_id: str) -> FavoriteFood | None:
        favorite = self.favorites.get(favorite_id)
        if favorite is None or favorite.user_id != user_id:
            return None
        return favorite

    def update_favorite(
        self, favorite_id: str, user_id: str, changes: dict[str, object]
    ) -> FavoriteFood | None:
        favorite = self.get_favorite(favorite_id, user_id)
        if favorite is None:
            return None
        updated = replace(favorite, **changes)
        self.favorites[favorite_id] = updated
        return updated

    def delete_favorite(self, favorite_id: str, user_id: str) -> bool:
        if self.get_favorite(favorite_id, user_id) is None:
            return False
        del self.favorites[favorite_id]
        return True

    def delete_favorites(self, user_id: str, favorite_ids: list[str]) -> int:
        return sum(
            1
            for favorite_id in favorite_ids
            if self.delete_favorite(favorite_id, user_id)
        )

    def log_favorite(
        self,
        favorite_id: str,
        user_id: str,
        entry: dict[str, object],
        used_at: datetime,
    ) -> FoodEntry:
        favorite = self.get_favorite(favorite_id, user_id)
        if favorite is None:
            raise NotFoundError("Favorite food")
        created = self.entries.create_entry(user_id, entry)
        self.favorites[favorite_id] = replace(
            favorite, usage_count=favorite.usage_count + 1, last_used_at=used_at
        )
        return created

    def _owned(self, user_id: str) -> list[FavoriteFood]:
        return [item for item in self.favorites.values() if item.user_id == user_id]


def _rank(items: list[FavoriteFood]) -> list[FavoriteFood]:
    """Usage desc, last use desc with never-used last, then name."""
    ranked = sorted(items, key=lambda item: item.name)
    ranked = sorted(
        ranked,
        key=lambda item: item.last_used_at or datetime.min.replace(tzinfo=UTC),
        reverse=True,
    )
    return sorted(ranked, key=lambda item: item.usage_count, reverse=True)


@dataclass
class InMemoryProfileRepository(ProfileRepository):
    """In-memory profile repository for tests."""

    profiles: dict[str, UserProfile] = field(default_factory=dict)
    tracking: list[ProfileTracking] = field(default_factory=list)
    fail_history: bool = False

    def get_profile(self, user_id: str) -> UserProfile | None:
        return self.profiles.get(user_id)

    def create_profile(self, user_id: str, payload: dict[str, object]) -> UserProfile:
        if user_id in self.profiles:
            raise ConflictError("Could not create profile: record already exists")
        now = _clock(len(self.profiles))
        profile = UserProfile(
            user_id=user_id, created_at=now, updated_at=now, **payload
        )
        self.profiles[user_id] = profile
        return profile

    def update_profile(
        self, user_id: str, changes: dict[str, object]
    ) -> UserProfile | None:
        profile = self.profiles.get(user_id)
        if profile is None:
            return None
        updated = replace(profile, **changes)
        self.profiles[user_id] = updated
        return updated

    def create_tracking(
        self, user_id: str, payload: dict[str, object]
    ) -> ProfileTracking:
        row = ProfileTracking(
            id=str(uuid4()),
            user_id=user_id,
            created_at=_clock(len(self.tracking)),
            **payload,
        )
        self.tracking.append(row)
        return row

    def list_tracking(
        self, user_id: str, query: ProfileTrackingQuery
    ) -> list[ProfileTracking]:
        if self.fail_history:
            raise PersistenceError("Failed to list profile tracking")
        rows = [
            row
            for row in self.tracking
            if row.user_id == user_id
            and (query.start_date is None or row.recorded_date >= query.start_date)
            and (query.end_date is None or row.recorded_date <= query.end_date)
        ]
        rows.sort(key=lambda row: (row.recorded_date, row.created_at), reverse=True)
        return rows[query.offset : query.offset + query.limit]

    def get_latest_weight(self, user_id: str) -> ProfileTracking | None:
        rows = [
            row
            for row in self.tracking
            if row.user_id == user_id and row.weight_kg is not None
        ]
        if not rows:
            return None
        return max(rows, key=lambda row: (row.recorded_date, row.created_at))


@dataclass
class InMemoryStreakRepository(StreakFreezeRepository):
    """In-memory freeze credit store for tests."""

    default_credits: int = 2
    credits: dict[str, int] = field(default_factory=dict)
    frozen: dict[str, set[date]] = field(default_factory=dict)

    def get_freeze_credits(self, user_id: str) -> int:
        return self.credits.get(user_id, self.default_credits)

    def list_frozen_dates(self, user_id: str) -> list[date]:
        return sorted(self.frozen.get(user_id, set()))

    def add_freeze(self, user_id: str, day: date) -> int:
        remaining = self.get_freeze_credits(user_id)
        if remaining <= 0:
            raise ConflictError("No freeze credits remaining")
        self.frozen.setdefault(user_id, set()).add(day)
        self.credits[user_id] = remaining - 1
        return remaining - 1


@dataclass
class FakeMacroClient(MacroEstimatorClient):
    """Fake estimator returning a fixed payload."""

    payload: dict[str, object] = field(
        default_factory=lambda: {
            "calories": 164.6,
            "protein_g": 31.04,
            "carbs_g": 0,
            "fat_g": 3.57,
            "confidence": "high",
            "reasoning": "Grilled chicken breast, about 100 g.",
        }
    )
    prompts: list[str] = field(default_factory=list)

    async def complete(
        self,
        *,
        model: str,
        system_prompt: str,
        prompt: str,
        schema: dict[str, object],
    ) -> dict[str, object]:
        self.prompts.append(prompt)
        return self.payload


@dataclass
class FakeTokenVerifier(TokenVerifier):
    """Token verifier backed by a static token table."""

    tokens: dict[str, str] = field(
        default_factory=lambda: {TOKEN: USER_ID, OTHER_TOKEN: OTHER_USER_ID}
    )

    def verify(self, token: str) -> str | None:
        return self.tokens.get(token)


def fixed_today() -> date:
    return TODAY


def make_food_service(
    repository: InMemoryFoodEntryRepository | None = None,
) -> FoodEntryService:
    return FoodEntryService(repository or InMemoryFoodEntryRepository(), fixed_today)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key=(
            "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9."
            "eyJyb2xlIjoic2VydmljZV9yb2xlIn0."
            "c2lnbmF0dXJl"
        ),
        openrouter_api_key="openrouter-key",
    )


@pytest.fixture
def food_repository() -> InMemoryFoodEntryRepository:
    return InMemoryFoodEntryRepository()


@pytest.fixture
def profile_repository() -> InMemoryProfileRepository:
    return InMemoryProfileRepository()


@pytest.fixture
def macro_client() -> FakeMacroClient:
    return FakeMacroClient()


@pytest.fixture
def container(
    settings: Settings,
    food_repository: InMemoryFoodEntryRepository,
    profile_repository: InMemoryProfileRepository,
    macro_client: FakeMacroClient,
) -> AppContainer:
    food_entry_service = FoodEntryService(food_repository)
    favorite_food_service = FavoriteFoodService(
        repository=InMemoryFavoriteFoodRepository(entries=food_repository),
        food_entries=food_entry_service,
    )

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        token_verifier=FakeTokenVerifier(),
        food_entry_service=food_entry_service,
        favorite_food_service=favorite_food_service,
        profile_service=ProfileService(profile_repository),
        analytics_service=AnalyticsService(food_entry_service),
        streak_service=StreakService(
            food_entries=food_entry_service,
            freezes=InMemoryStreakRepository(),
        ),
        macro_estimation_service=MacroEstimationService(
            client=macro_client, model=settings.macro_model
        ),
        close_resources=close_resources,
    )
