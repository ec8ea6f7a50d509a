"""Daily ledger of meals with day rollover."""

import logging
from datetime import date

from food_tracker.domain.nutrition import LedgerSnapshot, Meal

_logger = logging.getLogger(__name__)


class DailyLedger:
    """Holds every meal eaten on the current day plus the calorie target.

    All meals share a single calendar day. Adding a meal from another day
    discards the existing meals first.
    """

    def __init__(self, target: int, meals: list[Meal] | None = None) -> None:
        self._meals: list[Meal] = []
        self._target = _validate_target(target)
        for meal in meals or []:
            self.add_meal(meal)

    @classmethod
    def restore(
        cls, snapshot: LedgerSnapshot | None, today: date, default_target: int
    ) -> "DailyLedger":
        """Create a ledger from persisted state, dropping meals from past days."""
        if snapshot is None:
            return cls(target=default_target)
        target = default_target if snapshot.target is None else snapshot.target
        meals = snapshot.meals
        if meals and meals[0].date != today:
            _logger.info(
                "Discarding %s stored meals from %s", len(meals), meals[0].date
            )
            meals = []
        return cls(target=target, meals=meals)

    @property
    def meals(self) -> tuple[Meal, ...]:
        """Meals logged today in insertion order."""
        return tuple(self._meals)

    @property
    def day(self) -> date | None:
        """Calendar day of the ledger, or None when it is empty."""
        if not self._meals:
            return None
        return self._meals[0].date

    @property
    def target(self) -> int:
        """Daily calorie target."""
        return self._target

    def set_target(self, target: int) -> None:
        """Update the daily calorie target."""
        self._target = _validate_target(target)

    def add_meal(self, meal: Meal) -> None:
        """Append a meal, rolling the ledger over when the day changed."""
        if self._meals and self.day != meal.date:
            _logger.info("Rolling ledger over from %s to %s", self.day, meal.date)
            self._meals.clear()
        self._meals.append(meal)

    def remove_meal(self, index: int) -> Meal | None:
        """Remove the meal at index; out-of-range indices are ignored."""
        if not 0 <= index < len(self._meals):
            return None
        return self._meals.pop(index)

    def __len__(self) -> int:
        return len(self._meals)


def _validate_target(target: int) -> int:
    if isinstance(target, bool) or not isinstance(target, int):
        raise TypeError("target must be an integer")
    if target < 0:
        raise ValueError("target must not be negative")
    return target
