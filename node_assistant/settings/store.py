"""Key-value settings stores."""
from __future__ import annotations

import json
import os
import tempfile
import threading
from pathlib import Path
from typing import Dict, Mapping, Protocol

from ..errors import SettingsError
from ..log import get_logger

logger = get_logger(__name__)


class SettingsStore(Protocol):
    """String settings looked up by key; absent keys read as ``""``."""

    def get(self, key: str) -> str:
        ...

    def set(self, key: str, value: str) -> None:
        ...

    def update(self, values: Mapping[str, str]) -> None:
        ...


class InMemorySettingsStore:
    """Settings kept in process memory."""

    def __init__(self, initial: Mapping[str, str] | None = None) -> None:
        self._values: Dict[str, str] = dict(initial or {})
        self._lock = threading.Lock()

    def get(self, key: str) -> str:
        with self._lock:
            return self._values.get(key, "")

    def set(self, key: str, value: str) -> None:
        self.update({key: value})

    def update(self, values: Mapping[str, str]) -> None:
        with self._lock:
            self._values.update({key: str(value) for key, value in values.items()})

    def as_dict(self) -> Dict[str, str]:
        with self._lock:
            return dict(self._values)


class JsonFileSettingsStore:
    """Settings persisted to a flat JSON object on disk.

    The file is re-read on every lookup so changes written by another
    process are picked up, and replaced atomically on every write.
    """

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)
        self._lock = threading.Lock()

    def get(self, key: str) -> str:
        with self._lock:
            value = self._load().get(key, "")
        return value if isinstance(value, str) else str(value)

    def set(self, key: str, value: str) -> None:
        self.update({key: value})

    def update(self, values: Mapping[str, str]) -> None:
        with self._lock:
            data = self._load()
            data.update({key: str(value) for key, value in values.items()})
            self._write(data)
        logger.info("Settings updated: %s", ", ".join(sorted(values)))

    def as_dict(self) -> Dict[str, str]:
        with self._lock:
            return {key: str(value) for key, value in self._load().items()}

    def _load(self) -> Dict[str, object]:
        if not self.path.exists():
            return {}
        with self.path.open("r", encoding="utf-8") as handle:
            text = handle.read()
        if not text.strip():
            return {}
        try:
            data = json.loads(text)
        except ValueError as exc:
            raise SettingsError(f"Settings file {self.path} is not valid JSON: {exc}") from exc
        if not isinstance(data, dict):
            raise SettingsError(f"Settings file {self.path} does not hold a JSON object")
        return data

    def _write(self, data: Mapping[str, object]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=".settings-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(data, handle, ensure_ascii=False, indent=2)
            os.replace(tmp_name, self.path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise
