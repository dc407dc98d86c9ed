"""Record Arithmetic -- elementwise combination of seismic-style trace records.

This package provides tools for:
- Representing records (header + float64 sample matrix) and datasets
- Adding, subtracting, multiplying and dividing records across or within datasets
- Broadcasting single-record datasets against longer ones
- Reconciling mismatching records with per-attribute policies
  (error / warn / ignore / truncate / pad)

Key principles:
- Inputs are never mutated; results are new records
- No resampling: records are combined sample index by sample index
- Explicit configuration: policies are immutable values passed to every call

Main subpackages:
- models: Data models (RecordHeader, Record, Dataset, PolicySet)
- analysis: Compatibility resolver, combination engine, operator entry points
"""

from .analysis import add_records, combine, divide_records, multiply_records, subtract_records
from .errors import (
    AttributeMismatch,
    DatasetSizeMismatch,
    PayloadShapeError,
    RecordArithmeticError,
    UnsupportedPolicy,
)
from .models import Dataset, IfType, PolicySet, Record, RecordHeader

__all__ = [
    "add_records",
    "combine",
    "divide_records",
    "multiply_records",
    "subtract_records",
    "AttributeMismatch",
    "DatasetSizeMismatch",
    "PayloadShapeError",
    "RecordArithmeticError",
    "UnsupportedPolicy",
    "Dataset",
    "IfType",
    "PolicySet",
    "Record",
    "RecordHeader",
]
