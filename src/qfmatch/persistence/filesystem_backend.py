"""Local file system backend implementing IDataProvider."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from qfmatch.core.exceptions import DataFileNotFoundError


class FileSystemDataProvider:
    """IDataProvider reading JSON files below a base directory.

    Paths that resolve outside the base directory are reported as missing.
    """

    def __init__(self, base_path: str | Path) -> None:
        self._base_path = Path(base_path)

    @property
    def base_path(self) -> Path:
        return self._base_path

    def load(self, description: str, path: str) -> Any:
        root = self._base_path.resolve()
        full_path = (root / path).resolve()
        if not full_path.is_relative_to(root) or not full_path.is_file():
            raise DataFileNotFoundError(description)
        with full_path.open(encoding="utf-8") as fh:
            return json.load(fh)
