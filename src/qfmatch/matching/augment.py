"""Join engine output with application metadata."""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from qfmatch.core.exceptions import ResourceNotFoundError
from qfmatch.models.calculation import AugmentedResult, CalculationResult
from qfmatch.models.round_data import Application


def augment_results(
    results: Mapping[str, CalculationResult],
    applications: Iterable[Application],
) -> list[AugmentedResult]:
    """Build one report row per engine recipient, ordered by application id.

    Engine recipients are application ids. A recipient with no matching
    application means the inputs are inconsistent and raises
    ``ResourceNotFoundError("application")``.
    """
    by_id = {app.id: app for app in applications}

    augmented: list[AugmentedResult] = []
    for recipient, calc in results.items():
        application = by_id.get(recipient)
        if application is None:
            raise ResourceNotFoundError("application")

        augmented.append(AugmentedResult(
            total_received=calc.total_received,
            sum_of_sqrt=calc.sum_of_sqrt,
            matched=calc.matched,
            project_id=application.project_id,
            application_id=application.id,
            contributions_count=application.votes,
            project_name=application.project_name,
            payout_address=application.payout_address,
        ))

    augmented.sort(key=lambda r: r.application_id)
    return augmented
