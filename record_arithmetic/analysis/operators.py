"""Arithmetic entry points.

Each function fixes the operator and forwards everything else to
:func:`~record_arithmetic.analysis.engine.combine`::

    diff = subtract_records(data)              # record 1 - record 2 - ...
    diff = subtract_records(data1, data2)      # position by position
    total = add_records(a, b, c, npts="pad", newhdr=True)
"""

from __future__ import annotations

from typing import Any, Optional

from record_arithmetic.models.policy import PolicySet
from record_arithmetic.models.record import Dataset
from .engine import DatasetLike, Operator, combine


def _dispatch(
    op: Operator,
    datasets: tuple,
    newhdr: bool,
    policy: Optional[PolicySet],
    max_workers: Optional[int],
    options: dict,
) -> Dataset:
    if not datasets:
        raise ValueError("At least one dataset is required")
    target = datasets[0] if len(datasets) == 1 else list(datasets)
    return combine(op, target, policy=policy, newhdr=newhdr, max_workers=max_workers, **options)


def add_records(
    *datasets: DatasetLike,
    newhdr: bool = False,
    policy: Optional[PolicySet] = None,
    max_workers: Optional[int] = None,
    **options: Any,
) -> Dataset:
    """Add records within one dataset, or across datasets."""
    return _dispatch(Operator.ADD, datasets, newhdr, policy, max_workers, options)


def subtract_records(
    *datasets: DatasetLike,
    newhdr: bool = False,
    policy: Optional[PolicySet] = None,
    max_workers: Optional[int] = None,
    **options: Any,
) -> Dataset:
    """Subtract records 2+ from record 1 of one dataset, or datasets 2+ from dataset 1.

    The result header comes from the first dataset unless ``newhdr=True``,
    in which case it comes from the last one.
    """
    return _dispatch(Operator.SUBTRACT, datasets, newhdr, policy, max_workers, options)


def multiply_records(
    *datasets: DatasetLike,
    newhdr: bool = False,
    policy: Optional[PolicySet] = None,
    max_workers: Optional[int] = None,
    **options: Any,
) -> Dataset:
    """Multiply records within one dataset, or across datasets."""
    return _dispatch(Operator.MULTIPLY, datasets, newhdr, policy, max_workers, options)


def divide_records(
    *datasets: DatasetLike,
    newhdr: bool = False,
    policy: Optional[PolicySet] = None,
    max_workers: Optional[int] = None,
    **options: Any,
) -> Dataset:
    """Divide records left to right. Division by zero yields inf/NaN samples."""
    return _dispatch(Operator.DIVIDE, datasets, newhdr, policy, max_workers, options)
