"""Type aliases used across qfmatch."""

from __future__ import annotations

from typing import Any

JsonDict = dict[str, Any]
TransactionId = str
Overrides = dict[TransactionId, str]
