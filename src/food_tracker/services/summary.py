"""Whole-day summary derived from the ledger."""

from food_tracker.domain.nutrition import DailySummary
from food_tracker.services.ledger import DailyLedger
from food_tracker.services.meals import sum_macros


def recompute(ledger: DailyLedger) -> DailySummary:
    """Return day totals summed over every raw food item, rounded once."""
    totals = sum_macros(food for meal in ledger.meals for food in meal.foods)
    return DailySummary(
        calories=totals.calories,
        protein=totals.protein,
        carbs=totals.carbs,
        fats=totals.fats,
    )


def progress_ratio(summary: DailySummary, target: int) -> float:
    """Return consumed calories as an unclamped fraction of the target."""
    if target <= 0:
        return 0.0
    return summary.calories / target
