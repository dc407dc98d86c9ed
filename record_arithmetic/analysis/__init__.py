"""Record combination package.

Design principle:
  - Records and datasets are immutable inputs; every result is a new record.
  - All mismatch handling lives in :mod:`.resolver`; :mod:`.engine` only
    broadcasts, folds and rebuilds headers.

No resampling or time shifting is ever performed: mismatching records that
are allowed to proceed are combined sample index by sample index.
"""

from .engine import Operator, broadcast_size, combine, fold_records
from .operators import add_records, divide_records, multiply_records, subtract_records
from .resolver import ResolvedPair, resolve
from .summary import header_table

__all__ = [
    "Operator",
    "broadcast_size",
    "combine",
    "fold_records",
    "add_records",
    "divide_records",
    "multiply_records",
    "subtract_records",
    "ResolvedPair",
    "resolve",
    "header_table",
]
