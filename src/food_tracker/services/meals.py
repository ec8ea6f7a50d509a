"""Meal aggregation from recognized food items."""

import math
from collections.abc import Iterable, Sequence
from datetime import date

from food_tracker.domain.nutrition import FoodItem, MacroTotals, Meal


def build_meal(day: date, foods: Sequence[FoodItem]) -> Meal:
    """Build a meal whose totals are the rounded sum of its foods."""
    if not foods:
        raise ValueError("A meal needs at least one food item")
    return Meal(date=day, foods=tuple(foods), total_macros=sum_macros(foods))


def sum_macros(foods: Iterable[FoodItem]) -> MacroTotals:
    """Sum raw macros across foods and round each total once."""
    calories = protein = carbs = fats = 0.0
    for food in foods:
        calories += food.calories
        protein += food.protein
        carbs += food.carbs
        fats += food.fats
    return MacroTotals(
        calories=round_half_up(calories),
        protein=round_half_up(protein),
        carbs=round_half_up(carbs),
        fats=round_half_up(fats),
    )


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves rounded away from zero."""
    if value < 0:
        return -math.floor(-value + 0.5)
    return math.floor(value + 0.5)
