"""Dict-backed in-memory backends for unit tests."""

from __future__ import annotations

from typing import Any

from qfmatch.core.exceptions import DataFileNotFoundError


class MemoryDataProvider:
    """Dict-backed IDataProvider; a missing key or ``None`` value is absent."""

    def __init__(self, files: dict[str, Any] | None = None) -> None:
        self._files: dict[str, Any] = dict(files or {})
        self.calls: list[str] = []

    def load(self, description: str, path: str) -> Any:
        self.calls.append(path)
        data = self._files.get(path)
        if data is None:
            raise DataFileNotFoundError(description)
        return data


class MemoryCacheBackend:
    """Dict-backed ICacheBackend for unit tests."""

    def __init__(self) -> None:
        self._store: dict[str, str] = {}

    def get(self, key: str) -> str | None:
        return self._store.get(key)

    def setex(self, key: str, ttl: int, value: str) -> None:
        self._store[key] = value
