"""Domain models for derived nutrition statistics."""

from dataclasses import dataclass, field
from datetime import date


@dataclass(frozen=True)
class NutritionBreakdown:
    """Totals for a group of food entries."""

    calories: int = 0
    protein_g: float = 0.0
    carbs_g: float = 0.0
    fat_g: float = 0.0
    entry_count: int = 0


@dataclass(frozen=True)
class DailyNutritionSummary:
    """Totals for one day with a per-meal breakdown."""

    date: date
    total_calories: int
    total_protein_g: float
    total_carbs_g: float
    total_fat_g: float
    entry_count: int
    meal_breakdown: dict[str, NutritionBreakdown]


@dataclass(frozen=True)
class MacroTrends:
    """Direction of each metric between the two halves of a period."""

    calories: str
    protein: str
    carbs: str
    fat: str


@dataclass(frozen=True)
class MacroDistribution:
    """Share of energy from each macronutrient, in percent."""

    protein: float
    carbs: float
    fat: float


@dataclass(frozen=True)
class PeriodAnalytics:
    """Aggregates over an inclusive date range."""

    start_date: date
    end_date: date
    days: int
    daily_breakdown: list[DailyNutritionSummary]
    average_calories: float
    average_protein_g: float
    average_carbs_g: float
    average_fat_g: float
    total_calories: int
    total_protein_g: float
    total_carbs_g: float
    total_fat_g: float
    goal_achievement_rate: float | None
    consistency_score: float
    macro_trends: MacroTrends
    macro_distribution: MacroDistribution


@dataclass(frozen=True)
class WeeklySummary:
    """Averages for one trailing seven-day window."""

    week_start: date
    week_end: date
    average_calories: float
    average_protein_g: float
    average_carbs_g: float
    average_fat_g: float
    days_logged: int
    goal_achievement_rate: float | None


@dataclass(frozen=True)
class WeeklyAnalytics:
    """Several weekly windows, oldest first."""

    weeks: list[WeeklySummary]
    calorie_trend: str
    protein_trend: str
    consistency_score: float


@dataclass(frozen=True)
class StreakSummary:
    """Logging streak derived from entry dates."""

    current_streak: int
    longest_streak: int
    total_logged_days: int
    last_logged_date: date | None
    freeze_credits: int = 0
    frozen_dates: list[date] = field(default_factory=list)


@dataclass(frozen=True)
class StreakCalendar:
    """Logged and frozen days within one calendar month."""

    year: int
    month: int
    logged_dates: list[date]
    frozen_dates: list[date]
    streak: StreakSummary
