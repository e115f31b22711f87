"""Round data exports."""

from __future__ import annotations

import asyncio

from fastapi import APIRouter, Depends
from fastapi.responses import RedirectResponse, Response

from qfmatch.api.dependencies import get_data_provider
from qfmatch.core.protocols import IDataProvider
from qfmatch.matching.calculator import resource_paths
from qfmatch.matching.exports import render_vote_coefficients_csv

router = APIRouter(tags=["data"])


@router.get("/", include_in_schema=False)
async def root() -> RedirectResponse:
    return RedirectResponse(url="/data")


@router.get("/data/{chain_id}/rounds/{round_id}/vote_coefficients.csv")
async def get_vote_coefficients(
    chain_id: str,
    round_id: str,
    provider: IDataProvider = Depends(get_data_provider),
) -> Response:
    """Every vote of the round with its voter's passport coefficient."""
    paths = resource_paths(chain_id, round_id)
    votes, scores = await asyncio.gather(
        asyncio.to_thread(provider.load, *paths["votes"]),
        asyncio.to_thread(provider.load, *paths["passport_scores"]),
    )
    return Response(content=render_vote_coefficients_csv(votes, scores), media_type="text/csv")
