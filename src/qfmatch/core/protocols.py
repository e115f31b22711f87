"""Protocol interfaces for qfmatch abstractions.

Storage is reached only through these Protocols: structural typing,
no inheritance required, easy to test with isinstance().
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


# ---------------------------------------------------------------------------
# Data Provider
# ---------------------------------------------------------------------------

@runtime_checkable
class IDataProvider(Protocol):
    """Resolves a logical resource to parsed JSON data.

    ``description`` names the resource in error messages ("votes", "rounds");
    ``path`` locates it relative to the provider's root. Implementations raise
    ``DataFileNotFoundError(description)`` when the resource is absent.
    """

    def load(self, description: str, path: str) -> Any: ...


# ---------------------------------------------------------------------------
# Cache Backend
# ---------------------------------------------------------------------------

@runtime_checkable
class ICacheBackend(Protocol):
    """Redis-compatible cache interface."""

    def get(self, key: str) -> str | None: ...

    def setex(self, key: str, ttl: int, value: str) -> None: ...
