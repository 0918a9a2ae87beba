"""Supabase implementation for streak freeze credits."""

from dataclasses import dataclass
from datetime import date

from supabase import Client

from meal_tracker.adapters.supabase_support import (
    PAGE_SIZE,
    UNIQUE_VIOLATION,
    execute,
    fetch_all,
    parse_date,
)
from meal_tracker.services.streaks import StreakFreezeRepository

DEFAULT_FREEZE_CREDITS = 2
# Raised by use_streak_freeze when the balance is empty.
NO_CREDITS_ERROR = "P0001"


@dataclass
class SupabaseStreakRepository(StreakFreezeRepository):
    """Supabase-backed freeze credit balance and frozen dates."""

    client: Client
    default_credits: int = DEFAULT_FREEZE_CREDITS
    page_size: int = PAGE_SIZE

    def get_freeze_credits(self, user_id: str) -> int:
        """Return the remaining freeze credits for a user."""
        response = execute(
            self.client.table("meal_streaks")
            .select("freeze_credits")
            .eq("user_id", user_id)
            .limit(1),
            "load freeze credits",
        )
        if not response.data:
            return self.default_credits
        return int(response.data[0].get("freeze_credits") or 0)

    def list_frozen_dates(self, user_id: str) -> list[date]:
        """Return dates already covered by a freeze."""
        rows = fetch_all(
            lambda: self.client.table("streak_freezes")
            .select("frozen_date")
            .eq("user_id", user_id)
            .order("frozen_date"),
            "list frozen dates",
            self.page_size,
        )
        return [parse_date(row["frozen_date"]) for row in rows]

    def add_freeze(self, user_id: str, day: date) -> int:
        """Spend one credit on a date and return the credits left."""
        response = execute(
            self.client.rpc(
                "use_streak_freeze",
                {
                    "p_user_id": user_id,
                    "p_frozen_date": day.isoformat(),
                    "p_default_credits": self.default_credits,
                },
            ),
            "use streak freeze",
            conflict_codes=(UNIQUE_VIOLATION, NO_CREDITS_ERROR),
        )
        return int(response.data or 0)
