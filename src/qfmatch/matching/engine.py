"""Linear quadratic-funding engine.

Pure allocation function: contributions in, per-recipient calculations out.
A recipient's raw match is ``(sum of sqrt of contributions)^2 - total``,
contributions from the same contributor to the same recipient being summed
first. Raw matches are scaled down to the pool when they exceed it, or
always when ``ignore_saturation`` is set.
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from typing import Optional

from pydantic import BaseModel

from qfmatch.core.exceptions import CalculationError
from qfmatch.models.calculation import CalculationResult, Contribution


class QFOptions(BaseModel):
    model_config = {"frozen": True}

    minimum_amount: Optional[float] = None
    ignore_saturation: bool = False


def aggregate_contributions(
    contributions: Iterable[Contribution],
) -> dict[str, dict[str, float]]:
    """Sum amounts per recipient, then per contributor, in first-seen order."""
    aggregated: dict[str, dict[str, float]] = {}
    for c in contributions:
        by_contributor = aggregated.setdefault(c.recipient, {})
        by_contributor[c.contributor] = by_contributor.get(c.contributor, 0.0) + c.amount
    return aggregated


def linear_qf(
    contributions: Iterable[Contribution],
    match_amount: float,
    options: QFOptions | None = None,
) -> dict[str, CalculationResult]:
    if options is None:
        options = QFOptions()
    if match_amount < 0:
        raise CalculationError(f"match amount must be non-negative, got {match_amount}")

    minimum = options.minimum_amount or 0.0
    calculations: dict[str, CalculationResult] = {}
    total_raw = 0.0

    for recipient, by_contributor in aggregate_contributions(contributions).items():
        total_received = 0.0
        sum_of_sqrt = 0.0
        for amount in by_contributor.values():
            if amount >= minimum:
                sum_of_sqrt += math.sqrt(amount)
            total_received += amount

        raw = sum_of_sqrt ** 2 - total_received
        total_raw += raw
        calculations[recipient] = CalculationResult(
            total_received=total_received,
            sum_of_sqrt=sum_of_sqrt,
            matched=raw,
        )

    saturated = total_raw > match_amount
    if (saturated or options.ignore_saturation) and total_raw > 0:
        for calc in calculations.values():
            calc.matched = calc.matched * match_amount / total_raw
    elif total_raw <= 0:
        for calc in calculations.values():
            calc.matched = 0.0

    return calculations
