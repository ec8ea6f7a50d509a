"""Shared test fixtures."""

import asyncio
import json
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path

import pytest

from food_tracker.config import Settings
from food_tracker.containers import AppContainer
from food_tracker.services.recognition import RecognitionClient, RecognitionService
from food_tracker.services.storage import (
    InMemoryKeyValueStore,
    KeyValueStore,
    LedgerRepository,
)
from food_tracker.services.tracker import FoodTrackerService

TODAY = date(2026, 10, 19)

RICE_OUTPUT = json.dumps(
    {
        "foods": [
            {
                "name": "Rice",
                "quantity": "200g",
                "calories": 200,
                "protein": 5,
                "carbs": 45,
                "fats": 1,
            }
        ]
    }
)


@dataclass
class FakeRecognitionClient(RecognitionClient):
    """Fake recognition client returning queued outputs."""

    outputs: list[str] = field(default_factory=lambda: [RICE_OUTPUT])
    error: Exception | None = None
    delay_seconds: float = 0.0
    started: asyncio.Event | None = None
    gate: asyncio.Event | None = None
    calls: list[dict[str, str]] = field(default_factory=list)

    async def recognize(
        self,
        *,
        model: str,
        image_data_url: str,
        prompt: str,
    ) -> str:
        self.calls.append(
            {"model": model, "image_data_url": image_data_url, "prompt": prompt}
        )
        if self.started is not None:
            self.started.set()
        if self.gate is not None:
            await self.gate.wait()
        if self.delay_seconds:
            await asyncio.sleep(self.delay_seconds)
        if self.error is not None:
            raise self.error
        if len(self.outputs) > 1:
            return self.outputs.pop(0)
        return self.outputs[0]


@dataclass
class FakeClock:
    """Callable returning a settable calendar day."""

    current: date = TODAY

    def __call__(self) -> date:
        return self.current


@dataclass
class FailingKeyValueStore(KeyValueStore):
    """In-memory store whose writes fail for selected keys."""

    values: dict[str, str] = field(default_factory=dict)
    failing_keys: set[str] = field(default_factory=set)

    def get(self, key: str) -> str | None:
        return self.values.get(key)

    def set(self, key: str, value: str) -> None:
        if key in self.failing_keys:
            raise OSError("No space left on device")
        self.values[key] = value

    def delete(self, key: str) -> None:
        self.values.pop(key, None)


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        openai_api_key="openai-key",
        storage_path=tmp_path / "store.json",
        environment="test",
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def recognition_client() -> FakeRecognitionClient:
    return FakeRecognitionClient()


@pytest.fixture
def recognition_service(
    recognition_client: FakeRecognitionClient,
) -> RecognitionService:
    return RecognitionService(client=recognition_client, model="gpt-5.2")


@pytest.fixture
def store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def repository(store: InMemoryKeyValueStore) -> LedgerRepository:
    return LedgerRepository(store)


@pytest.fixture
def tracker_service(
    repository: LedgerRepository,
    recognition_service: RecognitionService,
    clock: FakeClock,
) -> FoodTrackerService:
    return FoodTrackerService.start(
        repository=repository,
        recognition_service=recognition_service,
        today=clock,
        default_target=2000,
    )


@pytest.fixture
def container(
    settings: Settings, tracker_service: FoodTrackerService
) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        tracker_service=tracker_service,
        close_resources=close_resources,
    )


@pytest.fixture
def failing_store() -> FailingKeyValueStore:
    return FailingKeyValueStore()
