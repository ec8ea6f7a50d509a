"""Key-value store persisted to a local JSON file."""

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path

from food_tracker.services.storage import KeyValueStore

_logger = logging.getLogger(__name__)


@dataclass
class JsonFileKeyValueStore(KeyValueStore):
    """Stores string values in a single JSON object on disk.

    Reads treat a missing or unreadable file as empty. Writes replace only a
    file whose contents cannot be decoded; I/O errors propagate.
    """

    path: Path

    def get(self, key: str) -> str | None:
        """Return the stored value for a key."""
        try:
            values = self._read()
        except OSError as exc:
            _logger.warning("Ignoring unreadable store file %s: %s", self.path, exc)
            return None
        value = values.get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        """Store a value under a key."""
        values = self._read()
        values[key] = value
        self._write(values)

    def delete(self, key: str) -> None:
        """Remove a key if present."""
        values = self._read()
        if values.pop(key, None) is not None:
            self._write(values)

    def _read(self) -> dict[str, object]:
        if not self.path.exists():
            return {}
        raw = self.path.read_text(encoding="utf-8")
        try:
            data = json.loads(raw)
        except ValueError as exc:
            _logger.warning("Ignoring undecodable store file %s: %s", self.path, exc)
            return {}
        if not isinstance(data, dict):
            _logger.warning("Ignoring store file %s without a JSON object", self.path)
            return {}
        return data

    def _write(self, values: dict[str, object]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_name(f"{self.path.name}.tmp")
        tmp_path.write_text(json.dumps(values, ensure_ascii=False), encoding="utf-8")
        os.replace(tmp_path, self.path)
