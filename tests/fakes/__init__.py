"""Shared test doubles: memory backends and the round fixtures."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from qfmatch.persistence.memory_backend import MemoryCacheBackend, MemoryDataProvider

FIXTURES_DIR = Path(__file__).resolve().parent.parent / "fixtures"

CHAIN_ID = "1"
ROUND_ID = "0x1234"

VOTES_PATH = f"{CHAIN_ID}/rounds/{ROUND_ID}/votes.json"
APPLICATIONS_PATH = f"{CHAIN_ID}/rounds/{ROUND_ID}/applications.json"
ROUNDS_PATH = f"{CHAIN_ID}/rounds.json"
PASSPORT_SCORES_PATH = "passport_scores.json"

FIXTURE_PATHS = [VOTES_PATH, APPLICATIONS_PATH, ROUNDS_PATH, PASSPORT_SCORES_PATH]


def load_fixture(path: str) -> Any:
    return json.loads((FIXTURES_DIR / path).read_text(encoding="utf-8"))


def fixture_files(**replacements: Any) -> dict[str, Any]:
    """All round fixtures keyed by provider path.

    Keyword arguments replace a fixture by its short name (``votes``,
    ``applications``, ``rounds``, ``passport_scores``); ``None`` removes it.
    """
    files = {
        "votes": load_fixture(VOTES_PATH),
        "applications": load_fixture(APPLICATIONS_PATH),
        "rounds": load_fixture(ROUNDS_PATH),
        "passport_scores": load_fixture(PASSPORT_SCORES_PATH),
    }
    files.update(replacements)
    return dict(zip(FIXTURE_PATHS, files.values()))


def fixture_provider(**replacements: Any) -> MemoryDataProvider:
    return MemoryDataProvider(fixture_files(**replacements))


__all__ = [
    "CHAIN_ID",
    "FIXTURES_DIR",
    "MemoryCacheBackend",
    "MemoryDataProvider",
    "ROUND_ID",
    "fixture_files",
    "fixture_provider",
    "load_fixture",
]
