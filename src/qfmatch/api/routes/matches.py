"""Matching calculation endpoints."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.responses import JSONResponse, Response

from qfmatch.api.dependencies import calculator_options, get_data_provider
from qfmatch.api.errors import error_response
from qfmatch.core.protocols import IDataProvider
from qfmatch.matching.calculator import Calculator, CalculatorOptions
from qfmatch.matching.exports import render_matches_csv
from qfmatch.matching.overrides import parse_overrides
from qfmatch.models.calculation import AugmentedResult

router = APIRouter(tags=["matches"])


def _matches_json(results: list[AugmentedResult], status_code: int) -> JSONResponse:
    body = [r.model_dump(by_alias=True, exclude_none=True) for r in results]
    return JSONResponse(status_code=status_code, content=body)


@router.get("/chains/{chain_id}/rounds/{round_id}/matches.csv")
async def get_matches_csv(
    options: CalculatorOptions = Depends(calculator_options),
    provider: IDataProvider = Depends(get_data_provider),
) -> Response:
    """Return the round's matches as CSV."""
    results = await Calculator(provider, options).calculate()
    return Response(content=render_matches_csv(results), media_type="text/csv")


@router.get("/chains/{chain_id}/rounds/{round_id}/matches")
async def get_matches(
    options: CalculatorOptions = Depends(calculator_options),
    provider: IDataProvider = Depends(get_data_provider),
) -> JSONResponse:
    """Return the round's matches."""
    results = await Calculator(provider, options).calculate()
    return _matches_json(results, 200)


@router.post("/chains/{chain_id}/rounds/{round_id}/matches")
async def post_matches(
    overrides: Optional[UploadFile] = File(None),
    options: CalculatorOptions = Depends(calculator_options),
    provider: IDataProvider = Depends(get_data_provider),
) -> JSONResponse:
    """Recalculate the round's matches with manually uploaded overrides."""
    if overrides is None:
        return error_response(400, "overrides param required")

    parsed = parse_overrides(await overrides.read())
    options = options.model_copy(update={"overrides": parsed})
    results = await Calculator(provider, options).calculate()
    return _matches_json(results, 201)
