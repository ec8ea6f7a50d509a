"""FastAPI application factory."""

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request, status

from food_tracker.api.ledger_models import (
    FoodView,
    LedgerView,
    Macros,
    MealLogged,
    MealRemoved,
    MealView,
    TargetUpdate,
)
from food_tracker.app_logging import configure_logging
from food_tracker.containers import AppContainer
from food_tracker.domain.errors import NoFoodDetectedError, RecognitionError
from food_tracker.domain.nutrition import Meal
from food_tracker.services.tracker import FoodTrackerService


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)
    # One recognition may be in flight at a time.
    recognition_slot = asyncio.Lock()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/ledger")
    async def get_ledger(request: Request) -> LedgerView:
        """Return today's summary and per-meal breakdown."""
        tracker = _tracker(request)
        return _ledger_view(tracker)

    @app.put("/ledger/target")
    async def set_target(update: TargetUpdate, request: Request) -> LedgerView:
        """Change the daily calorie target."""
        tracker = _tracker(request)
        tracker.set_target(update.target)
        return _ledger_view(tracker)

    @app.post("/ledger/meals", status_code=status.HTTP_201_CREATED)
    async def log_meal(request: Request) -> MealLogged:
        """Recognize the meal photo in the request body and record it."""
        state_container: AppContainer = request.app.state.container
        tracker = state_container.tracker_service
        image_bytes = await request.body()
        if not image_bytes:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Request body must contain an image.",
            )
        if recognition_slot.locked():
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="A meal photo is already being analyzed.",
            )
        async with recognition_slot:
            try:
                meal = await tracker.log_meal_photo(image_bytes)
            except NoFoodDetectedError as exc:
                logger.info("No food detected: %s", exc.user_message)
                raise HTTPException(
                    status_code=422,
                    detail=exc.user_message,
                ) from exc
            except RecognitionError as exc:
                logger.exception("Meal recognition failed")
                raise HTTPException(
                    status_code=status.HTTP_502_BAD_GATEWAY,
                    detail=_format_recognition_error(state_container, exc),
                ) from exc
        return MealLogged(
            meal=_meal_view(len(tracker.ledger) - 1, meal),
            ledger=_ledger_view(tracker),
        )

    @app.delete("/ledger/meals/{index}")
    async def remove_meal(
        index: int, request: Request, confirm: bool = False
    ) -> MealRemoved:
        """Remove a meal once the user has confirmed it."""
        tracker = _tracker(request)
        if not confirm:
            raise HTTPException(
                status_code=status.HTTP_428_PRECONDITION_REQUIRED,
                detail="Confirm removal with ?confirm=true.",
            )
        removed = tracker.remove_meal(index)
        return MealRemoved(removed=removed is not None, ledger=_ledger_view(tracker))

    return app


def _tracker(request: Request) -> FoodTrackerService:
    state_container: AppContainer = request.app.state.container
    return state_container.tracker_service


def _format_recognition_error(
    state_container: AppContainer, exc: RecognitionError
) -> str:
    """Return a user-facing failure message with local debug info."""
    fallback = exc.user_message
    if state_container.settings.environment == "local":
        cause = exc.__cause__ or exc
        detail = f"{type(cause).__name__}: {cause}".strip()
        if detail:
            return f"{fallback} (debug: {detail})"
    return fallback


def _ledger_view(tracker: FoodTrackerService) -> LedgerView:
    summary = tracker.summary()
    progress = tracker.progress()
    return LedgerView(
        day=tracker.ledger.day,
        target=tracker.ledger.target,
        summary=Macros(
            calories=summary.calories,
            protein=summary.protein,
            carbs=summary.carbs,
            fats=summary.fats,
        ),
        progress=progress,
        progress_percent=min(max(progress, 0.0), 1.0) * 100,
        meals=[
            _meal_view(index, meal) for index, meal in enumerate(tracker.ledger.meals)
        ],
    )


def _meal_view(index: int, meal: Meal) -> MealView:
    totals = meal.total_macros
    return MealView(
        index=index,
        date=meal.date,
        total_macros=Macros(
            calories=totals.calories,
            protein=totals.protein,
            carbs=totals.carbs,
            fats=totals.fats,
        ),
        foods=[
            FoodView(
                name=food.name,
                quantity=food.quantity,
                calories=food.calories,
                protein=food.protein,
                carbs=food.carbs,
                fats=food.fats,
            )
            for food in meal.foods
        ],
    )
