"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from meal_tracker.adapters.openai_macro_client import OpenAIMacroClient
from meal_tracker.adapters.supabase_favorite_food_repository import (
    SupabaseFavoriteFoodRepository,
)
from meal_tracker.adapters.supabase_food_entry_repository import (
    SupabaseFoodEntryRepository,
)
from meal_tracker.adapters.supabase_profile_repository import (
    SupabaseProfileRepository,
)
from meal_tracker.adapters.supabase_streak_repository import SupabaseStreakRepository
from meal_tracker.adapters.supabase_token_verifier import SupabaseTokenVerifier
from meal_tracker.config import Settings
from meal_tracker.services.analytics import AnalyticsService
from meal_tracker.services.auth import TokenVerifier
from meal_tracker.services.favorites import FavoriteFoodService
from meal_tracker.services.food_entries import FoodEntryService
from meal_tracker.services.macro_estimation import MacroEstimationService
from meal_tracker.services.profiles import ProfileService
from meal_tracker.services.streaks import StreakService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    token_verifier: TokenVerifier
    food_entry_service: FoodEntryService
    favorite_food_service: FavoriteFoodService
    profile_service: ProfileService
    analytics_service: AnalyticsService
    streak_service: StreakService
    macro_estimation_service: MacroEstimationService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    food_entry_repository = SupabaseFoodEntryRepository(supabase_client)
    favorite_repository = SupabaseFavoriteFoodRepository(supabase_client)
    profile_repository = SupabaseProfileRepository(supabase_client)
    streak_repository = SupabaseStreakRepository(
        supabase_client, default_credits=resolved_settings.default_freeze_credits
    )

    food_entry_service = FoodEntryService(food_entry_repository)
    favorite_food_service = FavoriteFoodService(
        repository=favorite_repository,
        food_entries=food_entry_service,
    )
    profile_service = ProfileService(profile_repository)
    analytics_service = AnalyticsService(food_entry_service)
    streak_service = StreakService(
        food_entries=food_entry_service,
        freezes=streak_repository,
    )

    macro_client = None
    if resolved_settings.openrouter_api_key:
        macro_client = OpenAIMacroClient.create(
            api_key=resolved_settings.openrouter_api_key,
            base_url=resolved_settings.openrouter_base_url,
        )
    macro_estimation_service = MacroEstimationService(
        client=macro_client,
        model=resolved_settings.macro_model,
    )

    async def close_resources() -> None:
        if macro_client is not None:
            await macro_client.close()

    return AppContainer(
        settings=resolved_settings,
        token_verifier=SupabaseTokenVerifier(supabase_client),
        food_entry_service=food_entry_service,
        favorite_food_service=favorite_food_service,
        profile_service=profile_service,
        analytics_service=analytics_service,
        streak_service=streak_service,
        macro_estimation_service=macro_estimation_service,
        close_resources=close_resources,
    )
