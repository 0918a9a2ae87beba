"""Logging streaks computed from food entry dates."""

from collections.abc import Callable, Iterable
from dataclasses import dataclass, replace
from datetime import date, timedelta
from typing import Protocol

from meal_tracker.domain.stats import StreakCalendar, StreakSummary
from meal_tracker.errors import ConflictError, ValidationError
from meal_tracker.services.food_entries import FoodEntryService, utc_today

_ONE_DAY = timedelta(days=1)
MONTHS_PER_YEAR = 12


class StreakFreezeRepository(Protocol):
    """Persistence interface for streak freeze credits."""

    def get_freeze_credits(self, user_id: str) -> int:
        """Return the remaining freeze credits for a user."""

    def list_frozen_dates(self, user_id: str) -> list[date]:
        """Return dates already covered by a freeze."""

    def add_freeze(self, user_id: str, day: date) -> int:
        """Spend one credit on a date and return the credits left."""


def compute_streak(
    logged_dates: Iterable[date],
    today: date,
    frozen_dates: Iterable[date] = (),
) -> StreakSummary:
    """Derive streak statistics from the set of logged dates.

    The current streak counts back from today, or from yesterday while today
    has no entry yet. Frozen dates keep a run alive without adding to it.
    """
    logged = set(logged_dates)
    frozen = set(frozen_dates) - logged

    current = 0
    day = today if today in logged else today - _ONE_DAY
    while day in logged or day in frozen:
        if day in logged:
            current += 1
        day -= _ONE_DAY

    longest = 0
    run = 0
    previous: date | None = None
    for day in sorted(logged | frozen):
        if previous is None or day - previous != _ONE_DAY:
            run = 0
        if day in logged:
            run += 1
        longest = max(longest, run)
        previous = day

    return StreakSummary(
        current_streak=current,
        longest_streak=longest,
        total_logged_days=len(logged),
        last_logged_date=max(logged) if logged else None,
        frozen_dates=sorted(frozen),
    )


@dataclass
class StreakService:
    """Application service for streaks and freeze credits."""

    food_entries: FoodEntryService
    freezes: StreakFreezeRepository
    today: Callable[[], date] = utc_today

    def get_streak(self, user_id: str) -> StreakSummary:
        """Return the user's current streak summary."""
        logged = self.food_entries.logged_dates(user_id)
        return self._summarize(user_id, logged)

    def get_calendar(self, user_id: str, year: int, month: int) -> StreakCalendar:
        """Return logged and frozen days of a month with the streak summary."""
        if not 1 <= month <= MONTHS_PER_YEAR:
            raise ValidationError.single("month", "Month must be between 1 and 12")
        logged = self.food_entries.logged_dates(user_id)
        summary = self._summarize(user_id, logged)

        def in_month(day: date) -> bool:
            return day.year == year and day.month == month

        return StreakCalendar(
            year=year,
            month=month,
            logged_dates=sorted(day for day in logged if in_month(day)),
            frozen_dates=[day for day in summary.frozen_dates if in_month(day)],
            streak=summary,
        )

    def use_freeze(self, user_id: str, day: date | None = None) -> StreakSummary:
        """Spend a freeze credit on a missed day, yesterday by default."""
        today = self.today()
        day = day or today - _ONE_DAY
        if day >= today:
            raise ValidationError.single("date", "Only past dates can be frozen")
        logged = self.food_entries.logged_dates(user_id)
        if day in logged:
            raise ConflictError("Date already has food entries")
        if day in self.freezes.list_frozen_dates(user_id):
            raise ConflictError("Date is already frozen")
        if self.freezes.get_freeze_credits(user_id) <= 0:
            raise ConflictError("No freeze credits remaining")
        self.freezes.add_freeze(user_id, day)
        return self._summarize(user_id, logged)

    def _summarize(self, user_id: str, logged: set[date]) -> StreakSummary:
        summary = compute_streak(
            logged, self.today(), self.freezes.list_frozen_dates(user_id)
        )
        return replace(
            summary, freeze_credits=self.freezes.get_freeze_credits(user_id)
        )
