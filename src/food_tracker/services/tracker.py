"""Food tracking workflow over the daily ledger."""

import logging
from collections.abc import Callable, Iterator, Sequence
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import date

from food_tracker.domain.nutrition import DailySummary, FoodItem, Meal
from food_tracker.services.ledger import DailyLedger
from food_tracker.services.meals import build_meal
from food_tracker.services.recognition import RecognitionService
from food_tracker.services.storage import LedgerRepository
from food_tracker.services.summary import progress_ratio, recompute

_logger = logging.getLogger(__name__)


@dataclass
class FoodTrackerService:
    """Applies user events to the ledger and persists every mutation.

    Summaries are never cached; each read recomputes them from the ledger.
    """

    ledger: DailyLedger
    repository: LedgerRepository
    recognition_service: RecognitionService
    today: Callable[[], date]

    @classmethod
    def start(
        cls,
        *,
        repository: LedgerRepository,
        recognition_service: RecognitionService,
        today: Callable[[], date],
        default_target: int,
    ) -> "FoodTrackerService":
        """Load persisted state once and build the service around it."""
        snapshot = repository.load()
        ledger = DailyLedger.restore(snapshot, today(), default_target)
        service = cls(
            ledger=ledger,
            repository=repository,
            recognition_service=recognition_service,
            today=today,
        )
        if snapshot is not None and len(snapshot.meals) != len(ledger):
            service._save()
        return service

    async def log_meal_photo(self, image_bytes: bytes) -> Meal:
        """Recognize a meal photo and add it to today's ledger.

        Recognition errors propagate and leave the ledger untouched.
        """
        foods = await self.recognition_service.recognize(image_bytes)
        return self.add_foods(foods)

    def add_foods(self, foods: Sequence[FoodItem]) -> Meal:
        """Build a meal for today from recognized foods and record it."""
        meal = build_meal(self.today(), foods)
        with self._persisted():
            self.ledger.add_meal(meal)
        _logger.info(
            "Logged meal with %s items (%s kcal)",
            len(meal.foods),
            meal.total_macros.calories,
        )
        return meal

    def remove_meal(self, index: int) -> Meal | None:
        """Remove the meal at index; returns None when nothing was removed."""
        if not 0 <= index < len(self.ledger):
            return None
        with self._persisted():
            removed = self.ledger.remove_meal(index)
        _logger.info("Removed meal %s", index)
        return removed

    def set_target(self, target: int) -> None:
        """Update and persist the daily calorie target."""
        with self._persisted():
            self.ledger.set_target(target)

    def summary(self) -> DailySummary:
        """Return today's totals."""
        return recompute(self.ledger)

    def progress(self) -> float:
        """Return consumed calories as a fraction of the target."""
        return progress_ratio(self.summary(), self.ledger.target)

    @contextmanager
    def _persisted(self) -> Iterator[None]:
        """Save the ledger after a mutation, restoring it if either step fails."""
        meals, target = list(self.ledger.meals), self.ledger.target
        try:
            yield
            self._save()
        except Exception:
            self.ledger = DailyLedger(target=target, meals=meals)
            raise

    def _save(self) -> None:
        self.repository.save(self.ledger.meals, self.ledger.target)
