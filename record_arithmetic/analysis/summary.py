from __future__ import annotations

from typing import Any, Dict, List

import pandas as pd

from record_arithmetic.models.record import Dataset, Record


HEADER_COLUMNS = (
    "npts",
    "ncmp",
    "delta",
    "b",
    "e",
    "reftime",
    "leven",
    "iftype",
    "depmin",
    "depmax",
    "depmen",
    "kstnm",
    "kcmpnm",
)


def header_table(data: Dataset | Record) -> pd.DataFrame:
    """One row per record with its header fields, in dataset order.

    ``iftype`` is stored as its string value. Keys found in ``extra`` are
    appended as additional columns (missing values are NaN/None).
    """
    data = Dataset.coerce(data)
    rows: List[Dict[str, Any]] = [rec.header.to_dict() for rec in data]
    extra_cols: List[str] = []
    for row in rows:
        for key in row:
            if key not in HEADER_COLUMNS and key not in extra_cols:
                extra_cols.append(key)
    df = pd.DataFrame(rows, columns=list(HEADER_COLUMNS) + extra_cols)
    df.index.name = "record"
    return df
