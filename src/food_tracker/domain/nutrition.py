"""Domain models for recognized foods and logged meals."""

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class FoodItem:
    """Single food item reported by the recognition service."""

    name: str
    calories: float
    protein: float
    carbs: float
    fats: float
    quantity: str | None = None


@dataclass(frozen=True)
class MacroTotals:
    """Macro totals rounded to whole units."""

    calories: int
    protein: int
    carbs: int
    fats: int


@dataclass(frozen=True)
class Meal:
    """One recognition result attributed to a calendar day."""

    date: date
    foods: tuple[FoodItem, ...]
    total_macros: MacroTotals


@dataclass(frozen=True)
class DailySummary:
    """Whole-day macro totals across every logged meal."""

    calories: int
    protein: int
    carbs: int
    fats: int


@dataclass(frozen=True)
class LedgerSnapshot:
    """Persisted ledger state as read back from storage."""

    meals: list[Meal]
    target: int | None
