"""FastAPI dependencies shared by the routes."""

from __future__ import annotations

from typing import Optional

from fastapi import Query, Request

from qfmatch.core.protocols import IDataProvider
from qfmatch.matching.calculator import CalculatorOptions


def get_data_provider(request: Request) -> IDataProvider:
    """Data provider configured for this app instance."""
    return request.app.state.data_provider


def _flag(value: Optional[str]) -> bool:
    return value is not None and value.lower() == "true"


def calculator_options(
    chain_id: str,
    round_id: str,
    minimum_amount: Optional[float] = Query(None, alias="minimumAmount"),
    passport_threshold: Optional[float] = Query(None, alias="passportThreshold"),
    enable_passport: Optional[str] = Query(None, alias="enablePassport"),
    ignore_saturation: Optional[str] = Query(None, alias="ignoreSaturation"),
) -> CalculatorOptions:
    """Build calculation options from path and query parameters.

    Saturation is ignored unless ``ignoreSaturation`` is explicitly given.
    """
    return CalculatorOptions(
        chain_id=chain_id,
        round_id=round_id,
        minimum_amount=minimum_amount,
        passport_threshold=passport_threshold,
        enable_passport=_flag(enable_passport),
        ignore_saturation=True if ignore_saturation is None else _flag(ignore_saturation),
    )
