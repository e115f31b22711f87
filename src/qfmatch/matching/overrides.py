"""Manual per-contribution overrides uploaded as CSV."""

from __future__ import annotations

import csv
import io

from qfmatch.core.exceptions import OverridesColumnNotFoundError, OverridesFormatError
from qfmatch.core.types import Overrides

TRANSACTION_ID_COLUMN = "transactionId"
COEFFICIENT_COLUMN = "coefficient"
INCLUDE_COEFFICIENT = "1"


def parse_overrides(buf: bytes) -> Overrides:
    """Parse an overrides CSV into ``{transactionId: coefficient}``.

    The header must name both required columns; this is checked before any
    row is read. Later rows win over earlier rows for the same transaction.
    """
    try:
        text = buf.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise OverridesFormatError("overrides file is not valid UTF-8") from exc

    reader = csv.DictReader(io.StringIO(text))
    try:
        headers = reader.fieldnames or []
        for column in (TRANSACTION_ID_COLUMN, COEFFICIENT_COLUMN):
            if column not in headers:
                raise OverridesColumnNotFoundError(column)

        overrides: Overrides = {}
        for row in reader:
            # short rows leave the coefficient unset, which still counts as an exclusion
            overrides[row[TRANSACTION_ID_COLUMN]] = row[COEFFICIENT_COLUMN] or ""
    except csv.Error as exc:
        raise OverridesFormatError(f"overrides file is not valid CSV: {exc}") from exc
    return overrides
