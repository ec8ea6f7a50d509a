"""Tests for the daily ledger."""

from datetime import date, timedelta

import pytest

from food_tracker.domain.nutrition import FoodItem, LedgerSnapshot, Meal
from food_tracker.services.ledger import DailyLedger
from food_tracker.services.meals import build_meal

TODAY = date(2026, 10, 19)
YESTERDAY = TODAY - timedelta(days=1)


def _meal(day: date, calories: float = 300) -> Meal:
    return build_meal(
        day,
        [FoodItem(name="Pasta", calories=calories, protein=10, carbs=50, fats=5)],
    )


def test_add_meal_same_day_appends() -> None:
    ledger = DailyLedger(target=2000)
    first, second = _meal(TODAY), _meal(TODAY, calories=500)

    ledger.add_meal(first)
    ledger.add_meal(second)

    assert ledger.meals == (first, second)
    assert ledger.day == TODAY


def test_add_meal_from_new_day_rolls_over() -> None:
    ledger = DailyLedger(target=2000)
    ledger.add_meal(_meal(YESTERDAY))
    today_meal = _meal(TODAY)

    ledger.add_meal(today_meal)

    assert ledger.meals == (today_meal,)
    assert ledger.day == TODAY
    assert ledger.target == 2000


def test_empty_ledger_has_no_day() -> None:
    assert DailyLedger(target=2000).day is None


def test_remove_meal_returns_removed_meal() -> None:
    first, second = _meal(TODAY), _meal(TODAY, calories=500)
    ledger = DailyLedger(target=2000, meals=[first, second])

    removed = ledger.remove_meal(0)

    assert removed == first
    assert ledger.meals == (second,)


@pytest.mark.parametrize("index", [2, 5, -1])
def test_remove_meal_out_of_range_is_noop(index: int) -> None:
    meals = [_meal(TODAY), _meal(TODAY, calories=500)]
    ledger = DailyLedger(target=2000, meals=meals)

    assert ledger.remove_meal(index) is None
    assert ledger.meals == tuple(meals)


def test_remove_last_meal_empties_ledger() -> None:
    ledger = DailyLedger(target=2000, meals=[_meal(TODAY)])

    ledger.remove_meal(0)

    assert len(ledger) == 0
    assert ledger.day is None


def test_meals_view_is_read_only() -> None:
    ledger = DailyLedger(target=2000, meals=[_meal(TODAY)])

    assert isinstance(ledger.meals, tuple)


def test_restore_without_snapshot_uses_default_target() -> None:
    ledger = DailyLedger.restore(None, TODAY, default_target=2000)

    assert ledger.meals == ()
    assert ledger.target == 2000


def test_restore_discards_stale_meals_and_keeps_target() -> None:
    snapshot = LedgerSnapshot(meals=[_meal(YESTERDAY)], target=1800)

    ledger = DailyLedger.restore(snapshot, TODAY, default_target=2000)

    assert ledger.meals == ()
    assert ledger.target == 1800


def test_restore_keeps_todays_meals() -> None:
    meals = [_meal(TODAY), _meal(TODAY, calories=120)]
    snapshot = LedgerSnapshot(meals=meals, target=None)

    ledger = DailyLedger.restore(snapshot, TODAY, default_target=2000)

    assert ledger.meals == tuple(meals)
    assert ledger.target == 2000


def test_set_target_rejects_negative() -> None:
    ledger = DailyLedger(target=2000)

    with pytest.raises(ValueError):
        ledger.set_target(-1)
    assert ledger.target == 2000


def test_set_target_rejects_non_integer() -> None:
    ledger = DailyLedger(target=2000)

    with pytest.raises(TypeError):
        ledger.set_target(True)


def test_set_target_accepts_zero() -> None:
    ledger = DailyLedger(target=2000)

    ledger.set_target(0)

    assert ledger.target == 0
