"""Ledger persistence over a simple key-value store."""

import json
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date, datetime
from typing import Annotated, Protocol

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidationError,
    field_validator,
)

from food_tracker.domain.nutrition import LedgerSnapshot, Meal
from food_tracker.domain.recognition import RecognizedFood
from food_tracker.services.meals import build_meal

FOOD_DATA_KEY = "foodData"
DAILY_TARGET_KEY = "dailyTarget"

_LEGACY_DATE_FORMAT = "%a %b %d %Y"

_logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    """Durable string key-value storage."""

    def get(self, key: str) -> str | None:
        """Return the stored value for a key, if any."""

    def set(self, key: str, value: str) -> None:
        """Store a value under a key."""

    def delete(self, key: str) -> None:
        """Remove a key if present."""


@dataclass
class InMemoryKeyValueStore(KeyValueStore):
    """Process-local store for tests and ephemeral runs."""

    _values: dict[str, str]

    def __init__(self) -> None:
        self._values = {}

    def get(self, key: str) -> str | None:
        """Return the stored value for a key."""
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        """Store a value under a key."""
        self._values[key] = value

    def delete(self, key: str) -> None:
        """Remove a key if present."""
        self._values.pop(key, None)


class _StoredMeal(BaseModel):
    model_config = ConfigDict(extra="ignore")

    day: date = Field(alias="date")
    foods: list[RecognizedFood] = Field(min_length=1)

    @field_validator("day", mode="before")
    @classmethod
    def _parse_legacy_date(cls, value: object) -> object:
        if isinstance(value, str):
            try:
                return datetime.strptime(value, _LEGACY_DATE_FORMAT).date()
            except ValueError:
                return value
        return value


_MEALS_ADAPTER = TypeAdapter(list[_StoredMeal])
_TARGET_ADAPTER = TypeAdapter(Annotated[int, Field(ge=0, strict=True)])


@dataclass
class LedgerRepository:
    """Loads and saves meals and the calorie target as two storage slots."""

    store: KeyValueStore

    def load(self) -> LedgerSnapshot | None:
        """Return stored ledger state; unreadable slots are treated as absent."""
        raw_meals = self.store.get(FOOD_DATA_KEY)
        raw_target = self.store.get(DAILY_TARGET_KEY)
        if raw_meals is None and raw_target is None:
            return None
        return LedgerSnapshot(
            meals=_decode_meals(raw_meals),
            target=_decode_target(raw_target),
        )

    def save(self, meals: Sequence[Meal], target: int) -> None:
        """Persist meals and target.

        If the target cannot be written, the meals slot is put back to its
        previous value before the error propagates.
        """
        previous_meals = self.store.get(FOOD_DATA_KEY)
        self.store.set(FOOD_DATA_KEY, json.dumps([_encode_meal(m) for m in meals]))
        try:
            self.store.set(DAILY_TARGET_KEY, json.dumps(target))
        except Exception:
            if previous_meals is None:
                self.store.delete(FOOD_DATA_KEY)
            else:
                self.store.set(FOOD_DATA_KEY, previous_meals)
            raise


def _encode_meal(meal: Meal) -> dict[str, object]:
    foods: list[dict[str, object]] = []
    for food in meal.foods:
        entry: dict[str, object] = {"name": food.name}
        if food.quantity is not None:
            entry["quantity"] = food.quantity
        entry.update(
            {
                "calories": food.calories,
                "protein": food.protein,
                "carbs": food.carbs,
                "fats": food.fats,
            }
        )
        foods.append(entry)
    return {
        "date": meal.date.isoformat(),
        "foods": foods,
        "totalMacros": {
            "calories": meal.total_macros.calories,
            "protein": meal.total_macros.protein,
            "carbs": meal.total_macros.carbs,
            "fats": meal.total_macros.fats,
        },
    }


def _decode_meals(raw: str | None) -> list[Meal]:
    if raw is None:
        return []
    try:
        stored = _MEALS_ADAPTER.validate_json(raw)
    except ValidationError as exc:
        _logger.warning("Ignoring unreadable %s: %s", FOOD_DATA_KEY, exc)
        return []
    # Stored totalMacros are ignored; totals are rebuilt from foods.
    return [
        build_meal(meal.day, [food.to_food_item() for food in meal.foods])
        for meal in stored
    ]


def _decode_target(raw: str | None) -> int | None:
    if raw is None:
        return None
    try:
        return _TARGET_ADAPTER.validate_json(raw)
    except ValidationError as exc:
        _logger.warning("Ignoring unreadable %s: %s", DAILY_TARGET_KEY, exc)
        return None
