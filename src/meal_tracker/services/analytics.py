"""Daily and period nutrition analytics derived from food entries."""

import calendar
from collections import defaultdict
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import MAXYEAR, MINYEAR, date, timedelta

from meal_tracker.domain.food_entries import FoodEntry
from meal_tracker.domain.nutrition import CALORIES_PER_GRAM, MEAL_TYPES
from meal_tracker.domain.stats import (
    DailyNutritionSummary,
    MacroDistribution,
    MacroTrends,
    NutritionBreakdown,
    PeriodAnalytics,
    WeeklyAnalytics,
    WeeklySummary,
)
from meal_tracker.errors import ValidationError
from meal_tracker.services.food_entries import FoodEntryService, utc_today

PERIOD_DAYS = {"7d": 7, "14d": 14, "30d": 30, "90d": 90}
DEFAULT_PERIOD = "7d"
MAX_RANGE_DAYS = 366
MAX_WEEKS = 12
MONTHS_PER_YEAR = 12
GOAL_TOLERANCE_CALORIES = 200
TREND_THRESHOLD = 0.10


@dataclass
class AnalyticsService:
    """Computes summaries on demand; nothing is cached or stored."""

    food_entries: FoodEntryService
    today: Callable[[], date] = utc_today

    def get_daily_summary(
        self, user_id: str, day: date | str
    ) -> DailyNutritionSummary:
        """Return totals and the per-meal breakdown for one day."""
        day = _parse_date(day, "date")
        entries = self.food_entries.list_between(user_id, day, day)
        return summarize_day(day, entries)

    def get_trends(
        self,
        user_id: str,
        period: str | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
        target_calories: int | None = None,
    ) -> PeriodAnalytics:
        """Return analytics for a named period ending today or an explicit range."""
        start, end = self._resolve_range(period, start_date, end_date)
        return self._analyze(user_id, start, end, target_calories)

    def get_monthly(
        self,
        user_id: str,
        year: int,
        month: int,
        target_calories: int | None = None,
    ) -> PeriodAnalytics:
        """Return analytics for one calendar month."""
        if not 1 <= month <= MONTHS_PER_YEAR:
            raise ValidationError.single("month", "Month must be between 1 and 12")
        if not MINYEAR <= year <= MAXYEAR:
            raise ValidationError.single("year", "Year is out of range")
        last_day = calendar.monthrange(year, month)[1]
        start = date(year, month, 1)
        end = date(year, month, last_day)
        return self._analyze(user_id, start, end, target_calories)

    def get_weekly_summaries(
        self, user_id: str, weeks: int = 4, target_calories: int | None = None
    ) -> WeeklyAnalytics:
        """Return trailing seven-day windows ending today, oldest first."""
        if not 1 <= weeks <= MAX_WEEKS:
            raise ValidationError.single(
                "weeks", f"Weeks must be between 1 and {MAX_WEEKS}"
            )
        today = self.today()
        first_start = today - timedelta(days=7 * weeks - 1)
        entries = self.food_entries.list_between(user_id, first_start, today)
        by_day = _group_by_day(entries)

        summaries = []
        for index in range(weeks - 1, -1, -1):
            week_end = today - timedelta(days=7 * index)
            week_start = week_end - timedelta(days=6)
            daily = [
                summarize_day(day, by_day.get(day, []))
                for day in _days(week_start, week_end)
            ]
            summaries.append(
                _weekly_summary(week_start, week_end, daily, target_calories)
            )

        logged = sum(summary.days_logged for summary in summaries)
        return WeeklyAnalytics(
            weeks=summaries,
            calorie_trend=_trend(
                summaries[0].average_calories, summaries[-1].average_calories
            ),
            protein_trend=_trend(
                summaries[0].average_protein_g, summaries[-1].average_protein_g
            ),
            consistency_score=_percent(logged, 7 * weeks),
        )

    def _resolve_range(
        self, period: str | None, start_date: date | None, end_date: date | None
    ) -> tuple[date, date]:
        if start_date is not None or end_date is not None:
            if start_date is None or end_date is None:
                raise ValidationError.single(
                    "start_date", "start_date and end_date must be given together"
                )
            start = _parse_date(start_date, "start_date")
            end = _parse_date(end_date, "end_date")
            if start > end:
                raise ValidationError.single(
                    "start_date", "start_date must not be after end_date"
                )
            if (end - start).days + 1 > MAX_RANGE_DAYS:
                raise ValidationError.single(
                    "end_date", f"Range must not exceed {MAX_RANGE_DAYS} days"
                )
            return start, end

        period = period or DEFAULT_PERIOD
        if period not in PERIOD_DAYS:
            raise ValidationError.single(
                "period", f"Period must be one of {', '.join(PERIOD_DAYS)}"
            )
        end = self.today()
        return end - timedelta(days=PERIOD_DAYS[period] - 1), end

    def _analyze(
        self, user_id: str, start: date, end: date, target_calories: int | None
    ) -> PeriodAnalytics:
        entries = self.food_entries.list_between(user_id, start, end)
        by_day = _group_by_day(entries)
        daily = [summarize_day(day, by_day.get(day, [])) for day in _days(start, end)]
        return build_period_analytics(start, end, daily, target_calories)


def summarize_day(day: date, entries: Iterable[FoodEntry]) -> DailyNutritionSummary:
    """Aggregate entries for a day; every meal type is always present."""
    meals: dict[str, list[FoodEntry]] = {meal_type: [] for meal_type in MEAL_TYPES}
    for entry in entries:
        meals.setdefault(entry.meal_type, []).append(entry)

    breakdown = {meal_type: _breakdown(items) for meal_type, items in meals.items()}
    total = _breakdown([entry for items in meals.values() for entry in items])
    return DailyNutritionSummary(
        date=day,
        total_calories=total.calories,
        total_protein_g=total.protein_g,
        total_carbs_g=total.carbs_g,
        total_fat_g=total.fat_g,
        entry_count=total.entry_count,
        meal_breakdown=breakdown,
    )


def build_period_analytics(
    start: date,
    end: date,
    daily: list[DailyNutritionSummary],
    target_calories: int | None = None,
) -> PeriodAnalytics:
    """Compute averages, goal rate, consistency and trends over daily summaries."""
    days = len(daily)
    total_calories = sum(day.total_calories for day in daily)
    total_protein = _round(sum(day.total_protein_g for day in daily))
    total_carbs = _round(sum(day.total_carbs_g for day in daily))
    total_fat = _round(sum(day.total_fat_g for day in daily))
    logged_days = sum(1 for day in daily if day.entry_count > 0)

    half = days // 2
    first, second = daily[:half], daily[half:]
    return PeriodAnalytics(
        start_date=start,
        end_date=end,
        days=days,
        daily_breakdown=daily,
        average_calories=_average(total_calories, days),
        average_protein_g=_average(total_protein, days),
        average_carbs_g=_average(total_carbs, days),
        average_fat_g=_average(total_fat, days),
        total_calories=total_calories,
        total_protein_g=total_protein,
        total_carbs_g=total_carbs,
        total_fat_g=total_fat,
        goal_achievement_rate=_goal_rate(daily, target_calories),
        consistency_score=_percent(logged_days, days),
        macro_trends=MacroTrends(
            calories=_half_trend(first, second, "total_calories"),
            protein=_half_trend(first, second, "total_protein_g"),
            carbs=_half_trend(first, second, "total_carbs_g"),
            fat=_half_trend(first, second, "total_fat_g"),
        ),
        macro_distribution=_distribution(total_protein, total_carbs, total_fat),
    )


def _weekly_summary(
    start: date,
    end: date,
    daily: list[DailyNutritionSummary],
    target_calories: int | None,
) -> WeeklySummary:
    days = len(daily)
    return WeeklySummary(
        week_start=start,
        week_end=end,
        average_calories=_average(sum(day.total_calories for day in daily), days),
        average_protein_g=_average(sum(day.total_protein_g for day in daily), days),
        average_carbs_g=_average(sum(day.total_carbs_g for day in daily), days),
        average_fat_g=_average(sum(day.total_fat_g for day in daily), days),
        days_logged=sum(1 for day in daily if day.entry_count > 0),
        goal_achievement_rate=_goal_rate(daily, target_calories),
    )


def _breakdown(entries: list[FoodEntry]) -> NutritionBreakdown:
    return NutritionBreakdown(
        calories=sum(entry.calories for entry in entries),
        protein_g=_round(sum(entry.protein_g for entry in entries)),
        carbs_g=_round(sum(entry.carbs_g for entry in entries)),
        fat_g=_round(sum(entry.fat_g for entry in entries)),
        entry_count=len(entries),
    )


def _group_by_day(entries: Iterable[FoodEntry]) -> dict[date, list[FoodEntry]]:
    grouped: dict[date, list[FoodEntry]] = defaultdict(list)
    for entry in entries:
        grouped[entry.entry_date].append(entry)
    return grouped


def _days(start: date, end: date) -> list[date]:
    return [start + timedelta(days=offset) for offset in range((end - start).days + 1)]


def _goal_rate(
    daily: list[DailyNutritionSummary], target_calories: int | None
) -> float | None:
    if target_calories is None or not daily:
        return None
    hits = sum(
        1
        for day in daily
        if abs(day.total_calories - target_calories) <= GOAL_TOLERANCE_CALORIES
    )
    return _percent(hits, len(daily))


def _half_trend(
    first: list[DailyNutritionSummary],
    second: list[DailyNutritionSummary],
    attribute: str,
) -> str:
    if not first or not second:
        return "stable"
    first_mean = sum(getattr(day, attribute) for day in first) / len(first)
    second_mean = sum(getattr(day, attribute) for day in second) / len(second)
    return _trend(first_mean, second_mean)


def _trend(before: float, after: float) -> str:
    if before == 0:
        return "increasing" if after > 0 else "stable"
    change = (after - before) / before
    if change > TREND_THRESHOLD:
        return "increasing"
    if change < -TREND_THRESHOLD:
        return "decreasing"
    return "stable"


def _distribution(protein_g: float, carbs_g: float, fat_g: float) -> MacroDistribution:
    protein_kcal = protein_g * CALORIES_PER_GRAM["protein"]
    carbs_kcal = carbs_g * CALORIES_PER_GRAM["carbs"]
    fat_kcal = fat_g * CALORIES_PER_GRAM["fat"]
    total = protein_kcal + carbs_kcal + fat_kcal
    if total == 0:
        return MacroDistribution(protein=0.0, carbs=0.0, fat=0.0)
    return MacroDistribution(
        protein=round(100 * protein_kcal / total, 1),
        carbs=round(100 * carbs_kcal / total, 1),
        fat=round(100 * fat_kcal / total, 1),
    )


def _parse_date(value: date | str, field: str) -> date:
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(value)
    except (TypeError, ValueError) as exc:
        raise ValidationError.single(
            field, "Date must be in YYYY-MM-DD format"
        ) from exc


def _average(total: float, days: int) -> float:
    return round(total / days, 1) if days else 0.0


def _percent(part: int, whole: int) -> float:
    return round(100 * part / whole, 1) if whole else 0.0


def _round(value: float) -> float:
    return round(value, 2)
