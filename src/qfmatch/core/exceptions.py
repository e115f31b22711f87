"""qfmatch exception hierarchy."""

from __future__ import annotations


class MatchingError(Exception):
    """Base exception for all qfmatch errors."""


class DataFileNotFoundError(MatchingError):
    """A required input resource could not be located by the data provider."""

    def __init__(self, description: str) -> None:
        self.description = description
        super().__init__(f"cannot find {description} file")


class ResourceNotFoundError(MatchingError):
    """A required entity is missing from otherwise loaded data."""

    def __init__(self, resource: str) -> None:
        self.resource = resource
        super().__init__(f"{resource} not found")


class OverridesColumnNotFoundError(MatchingError):
    """The overrides file lacks a required column."""

    def __init__(self, column: str) -> None:
        self.column = column
        super().__init__(f"cannot find column {column} in the overrides file")


class CalculationError(MatchingError):
    """Domain violation reported while computing matches."""


class DataProviderError(MatchingError):
    """Storage backend failed for a reason other than a missing resource."""


class OverridesFormatError(MatchingError):
    """The overrides upload cannot be read as UTF-8 CSV."""
