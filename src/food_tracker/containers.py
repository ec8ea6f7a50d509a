"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from functools import partial

from food_tracker.adapters.json_file_store import JsonFileKeyValueStore
from food_tracker.adapters.openai_recognition_client import OpenAIRecognitionClient
from food_tracker.config import Settings, parse_timezone
from food_tracker.services.clock import today
from food_tracker.services.recognition import RecognitionService
from food_tracker.services.storage import LedgerRepository
from food_tracker.services.tracker import FoodTrackerService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    tracker_service: FoodTrackerService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    timezone_name = parse_timezone(resolved_settings.timezone)
    recognition_client = OpenAIRecognitionClient.create(
        resolved_settings.openai_api_key,
        reasoning_effort=resolved_settings.openai_reasoning_effort,
        store=resolved_settings.openai_store,
        timeout_seconds=resolved_settings.recognition_timeout_seconds,
    )
    recognition_service = RecognitionService(
        client=recognition_client,
        model=resolved_settings.openai_model,
        timeout_seconds=resolved_settings.recognition_timeout_seconds,
    )
    repository = LedgerRepository(
        JsonFileKeyValueStore(resolved_settings.storage_path)
    )
    tracker_service = FoodTrackerService.start(
        repository=repository,
        recognition_service=recognition_service,
        today=partial(today, timezone_name),
        default_target=resolved_settings.default_daily_target,
    )

    async def close_resources() -> None:
        await recognition_client.close()

    return AppContainer(
        settings=resolved_settings,
        tracker_service=tracker_service,
        close_resources=close_resources,
    )
