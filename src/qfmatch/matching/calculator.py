"""Matching calculation for a single round.

Loads round data through an injected data provider, decides which
contributions are eligible, runs the linear QF engine and joins its output
with application metadata.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional

from pydantic import BaseModel, Field

from qfmatch.core.exceptions import CalculationError, ResourceNotFoundError
from qfmatch.core.protocols import IDataProvider
from qfmatch.core.types import Overrides
from qfmatch.matching.augment import augment_results
from qfmatch.matching.eligibility import PassportConfig, is_included
from qfmatch.matching.engine import QFOptions, linear_qf
from qfmatch.models.calculation import AugmentedResult, Contribution
from qfmatch.models.round_data import (
    Application,
    IdentityScore,
    RawContribution,
    Round,
)

logger = logging.getLogger(__name__)

PASSPORT_SCORES_PATH = "passport_scores.json"


class CalculatorOptions(BaseModel):
    """Per-call calculation parameters."""

    model_config = {"frozen": True}

    chain_id: str
    round_id: str
    minimum_amount: Optional[float] = None
    passport_threshold: Optional[float] = None
    enable_passport: bool = False
    ignore_saturation: bool = True
    overrides: Overrides = Field(default_factory=dict)

    @property
    def passport(self) -> PassportConfig:
        return PassportConfig(enabled=self.enable_passport, threshold=self.passport_threshold)


class RoundInputs(BaseModel):
    """Everything loaded from the data provider for one calculation."""

    rounds: list[Round]
    votes: list[RawContribution]
    applications: list[Application]
    passport_scores: list[IdentityScore]


def resource_paths(chain_id: str, round_id: str) -> dict[str, tuple[str, str]]:
    """Map each input field to its ``(description, path)`` in the provider."""
    return {
        "votes": ("votes", f"{chain_id}/rounds/{round_id}/votes.json"),
        "applications": ("applications", f"{chain_id}/rounds/{round_id}/applications.json"),
        "rounds": ("rounds", f"{chain_id}/rounds.json"),
        "passport_scores": ("passport scores", PASSPORT_SCORES_PATH),
    }


def normalize_contribution(raw: RawContribution) -> Contribution:
    if raw.amount_usd < 0:
        raise CalculationError(f"contribution {raw.id} has a negative amount")
    return Contribution(
        id=raw.id,
        contributor=raw.voter.lower(),
        recipient=raw.application_id,
        amount=raw.amount_usd,
    )


class Calculator:
    """Computes matching amounts for one round.

    The data provider is passed in explicitly and is only read from; a
    Calculator holds no state shared with other calculations.
    """

    def __init__(self, data_provider: IDataProvider, options: CalculatorOptions) -> None:
        self._provider = data_provider
        self._options = options

    async def load_inputs(self) -> RoundInputs:
        """Load the four round resources concurrently."""
        paths = resource_paths(self._options.chain_id, self._options.round_id)
        loaded: list[Any] = await asyncio.gather(*(
            asyncio.to_thread(self._provider.load, description, path)
            for description, path in paths.values()
        ))
        inputs = RoundInputs(**dict(zip(paths.keys(), loaded)))
        logger.debug(
            "loaded round %s/%s: %d votes, %d applications, %d passport scores",
            self._options.chain_id, self._options.round_id,
            len(inputs.votes), len(inputs.applications), len(inputs.passport_scores),
        )
        return inputs

    async def calculate(self) -> list[AugmentedResult]:
        return self.compute(await self.load_inputs())

    def compute(self, inputs: RoundInputs) -> list[AugmentedResult]:
        """Run the calculation on already loaded inputs."""
        opts = self._options

        round_ = next((r for r in inputs.rounds if r.id == opts.round_id), None)
        if round_ is None:
            raise ResourceNotFoundError("round")
        if round_.match_amount_usd is None:
            raise ResourceNotFoundError("round match amount")

        configured_minimum = (
            opts.minimum_amount if opts.minimum_amount is not None else round_.minimum_amount
        )
        minimum_amount = configured_minimum if configured_minimum is not None else 0.0

        contributions = [normalize_contribution(raw) for raw in inputs.votes]
        identities = {score.address: score for score in inputs.passport_scores}
        passport = opts.passport

        eligible = [
            c for c in contributions
            if is_included(
                c,
                identities.get(c.contributor),
                opts.overrides.get(c.id),
                minimum_amount,
                passport,
            )
        ]
        logger.debug("%d of %d contributions eligible", len(eligible), len(contributions))

        results = linear_qf(
            eligible,
            round_.match_amount_usd,
            QFOptions(minimum_amount=configured_minimum, ignore_saturation=opts.ignore_saturation),
        )
        augmented = augment_results(results, inputs.applications)
        logger.info(
            "round %s/%s: matched %d recipients from %d contributions",
            opts.chain_id, opts.round_id, len(augmented), len(eligible),
        )
        return augmented
