"""CSV exports of calculation results and per-vote identity coefficients."""

from __future__ import annotations

import csv
import io
from collections.abc import Iterable, Sequence
from typing import Any

from qfmatch.core.types import JsonDict
from qfmatch.models.calculation import AugmentedResult

MATCHES_COLUMNS = [
    "matched",
    "contributionsCount",
    "sumOfSqrt",
    "totalReceived",
    "projectId",
    "applicationId",
    "payoutAddress",
    "projectName",
]

VOTE_COEFFICIENT_COLUMNS = [
    "id",
    "projectId",
    "applicationId",
    "roundId",
    "token",
    "voter",
    "grantAddress",
    "amount",
    "amountUSD",
    "coefficient",
    "status",
    "last_score_timestamp",
    "type",
    "success",
    "rawScore",
    "threshold",
]


def _cell(value: Any) -> Any:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return value


def render_csv(header: Sequence[str], rows: Iterable[Sequence[Any]]) -> str:
    """Render rows as ``\\n``-separated CSV without a trailing newline."""
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(header)
    for row in rows:
        writer.writerow([_cell(v) for v in row])
    return buf.getvalue().removesuffix("\n")


def render_matches_csv(results: Iterable[AugmentedResult]) -> str:
    rows = []
    for result in results:
        dumped = result.model_dump(by_alias=True)
        rows.append([dumped[column] for column in MATCHES_COLUMNS])
    return render_csv(MATCHES_COLUMNS, rows)


# ---------------------------------------------------------------------------
# Vote coefficients
# ---------------------------------------------------------------------------

def flatten_passport_scores(scores: Iterable[JsonDict]) -> dict[str, JsonDict]:
    """Index raw passport scores by lower-cased address.

    Evidence fields are lifted to the top level and a ``coefficient`` of 1 or
    0 records whether the evidence reports success.
    """
    flattened: dict[str, JsonDict] = {}
    for score in scores:
        entry = {k: v for k, v in score.items() if k not in ("evidence", "error")}
        evidence = score.get("evidence") or {}
        entry.update(evidence)
        entry["coefficient"] = 1 if evidence.get("success") else 0
        flattened[str(score["address"]).lower()] = entry
    return flattened


def vote_coefficients(votes: Iterable[JsonDict], scores: Iterable[JsonDict]) -> list[list[Any]]:
    """Join every vote with its voter's flattened passport score."""
    by_address = flatten_passport_scores(scores)
    rows: list[list[Any]] = []
    for vote in votes:
        voter = str(vote["voter"]).lower()
        combined = {**vote, **by_address.get(voter, {"coefficient": 0}), "voter": voter}
        rows.append([combined.get(column) for column in VOTE_COEFFICIENT_COLUMNS])
    return rows


def render_vote_coefficients_csv(votes: Iterable[JsonDict], scores: Iterable[JsonDict]) -> str:
    return render_csv(VOTE_COEFFICIENT_COLUMNS, vote_coefficients(votes, scores))
