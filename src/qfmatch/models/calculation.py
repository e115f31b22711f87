"""Calculation models: engine input, engine output, and the final report row."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, field_serializer
from pydantic.alias_generators import to_camel


def _plain_number(value: float) -> float | int:
    """Render integral floats as ints so ``15.0`` serializes as ``15``."""
    if value.is_integer():
        return int(value)
    return value


class Contribution(BaseModel):
    """Normalized contribution consumed by the QF engine."""

    model_config = {"frozen": True}

    id: str
    contributor: str
    recipient: str
    amount: float


class CalculationResult(BaseModel):
    """Per-recipient output of the QF engine."""

    total_received: float = 0.0
    sum_of_sqrt: float = 0.0
    matched: float = 0.0


class AugmentedResult(CalculationResult):
    """Engine result joined with the recipient's application metadata."""

    model_config = {"alias_generator": to_camel, "populate_by_name": True}

    project_id: str
    application_id: str
    contributions_count: int = 0
    project_name: Optional[str] = None
    payout_address: Optional[str] = None

    @field_serializer("total_received", "sum_of_sqrt", "matched")
    def _serialize_amount(self, value: float) -> float | int:
        return _plain_number(value)
