"""Per-contribution eligibility rules."""

from __future__ import annotations

import math
import re
from typing import Optional

from pydantic import BaseModel

from qfmatch.matching.overrides import INCLUDE_COEFFICIENT
from qfmatch.models.calculation import Contribution
from qfmatch.models.round_data import IdentityScore

_SCORE_PREFIX = re.compile(r"\s*[+-]?(?:Infinity|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


class PassportConfig(BaseModel):
    """Identity verification settings for one calculation."""

    model_config = {"frozen": True}

    enabled: bool = False
    threshold: Optional[float] = None


def parse_score(raw: str) -> float:
    """Read the leading decimal number of ``raw``, ignoring trailing text.

    ``"12abc"`` reads as 12; text with no numeric prefix reads as NaN.
    """
    match = _SCORE_PREFIX.match(raw)
    if match is None:
        return math.nan
    return float(match.group(0))


def _raw_score(identity: Optional[IdentityScore]) -> float:
    """Identity raw score; missing counts as 0."""
    if identity is None or identity.evidence is None:
        return 0.0
    raw = identity.evidence.raw_score
    if raw is None:
        return 0.0
    if isinstance(raw, str):
        return parse_score(raw)
    return float(raw)


def has_eligible_identity(identity: Optional[IdentityScore], passport: PassportConfig) -> bool:
    if not passport.enabled:
        return True
    if passport.threshold is not None:
        # NaN never compares greater, so scores without a numeric prefix are rejected
        return _raw_score(identity) > passport.threshold
    if identity is None or identity.evidence is None:
        return False
    return identity.evidence.success


def is_included(
    contribution: Contribution,
    identity: Optional[IdentityScore],
    override: Optional[str],
    minimum_amount: float,
    passport: PassportConfig,
) -> bool:
    """Decide whether a contribution takes part in the matching calculation.

    Rules, first match wins:

    1. an override other than ``"1"`` excludes the contribution;
    2. amounts below ``minimum_amount`` are excluded;
    3. otherwise the contributor's identity verification decides.

    An override of ``"1"`` does not bypass rules 2 and 3.
    """
    if override is not None and override != INCLUDE_COEFFICIENT:
        return False
    if contribution.amount < minimum_amount:
        return False
    return has_eligible_identity(identity, passport)
