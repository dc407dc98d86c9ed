"""Multi-record elementwise combination engine.

Every N-ary arithmetic entry point (:mod:`record_arithmetic.analysis.operators`)
delegates here. This is the single place where dataset broadcasting, the
left-to-right fold, mismatch reconciliation and header inheritance live.

Fold order
----------
For datasets ``D0, D1, ..., Dn`` each output position ``i`` is::

    ((D0[i] op D1[i]) op D2[i]) ... op Dn[i]

with length-1 datasets reusing their only record at every position. A
single dataset is folded over its own records into one record.

Header inheritance
------------------
The result header is copied from the first operand (``newhdr=False``) or
the last one (``newhdr=True``). Only ``npts``, ``ncmp``, ``e`` and the
derived ``depmin``/``depmax``/``depmen`` are rewritten from the payload.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from enum import Enum
import logging
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple, Union

import numpy as np

from record_arithmetic.errors import DatasetSizeMismatch, PayloadShapeError, UnsupportedPolicy
from record_arithmetic.models.header import RecordHeader
from record_arithmetic.models.policy import PolicySet
from record_arithmetic.models.record import Dataset, Record
from record_arithmetic.models.stats import dep_stats
from .resolver import resolve

logger = logging.getLogger(__name__)


class Operator(str, Enum):
    """Elementwise operator applied between record payloads."""

    ADD = "+"
    SUBTRACT = "-"
    MULTIPLY = "*"
    DIVIDE = "/"

    @classmethod
    def parse(cls, value: "Operator | str") -> "Operator":
        if isinstance(value, cls):
            return value
        for item in cls:
            if value == item.value or str(value).lower() == item.name.lower():
                return item
        raise UnsupportedPolicy(f"Unknown operator: {value!r}; expected one of {[o.value for o in cls]}")


_ELEMENTWISE: Dict[Operator, Callable[[np.ndarray, np.ndarray], np.ndarray]] = {
    Operator.ADD: np.add,
    Operator.SUBTRACT: np.subtract,
    Operator.MULTIPLY: np.multiply,
    Operator.DIVIDE: np.true_divide,
}


DatasetLike = Union[Dataset, Record, Iterable[Record]]


def _as_datasets(datasets: Union[DatasetLike, Sequence[DatasetLike]]) -> List[Dataset]:
    if isinstance(datasets, (Dataset, Record)):
        return [Dataset.coerce(datasets)]
    items = list(datasets)
    if items and all(isinstance(d, Record) for d in items):
        # a plain list of records is one dataset
        return [Dataset.coerce(items)]
    out = [Dataset.coerce(d) for d in items]
    if not out:
        raise ValueError("At least one dataset is required")
    return out


def broadcast_size(sizes: Sequence[int]) -> int:
    """Common output length of datasets with the given sizes.

    Every size must be 1 or the maximum size.
    """
    n_max = max(sizes)
    bad = [n for n in sizes if n not in (1, n_max)]
    if bad:
        raise DatasetSizeMismatch(sizes)
    return n_max


def _apply(op: Operator, dep_a: np.ndarray, dep_b: np.ndarray) -> np.ndarray:
    if dep_a.shape != dep_b.shape:
        raise PayloadShapeError(
            f"Cannot apply '{op.value}' to payloads of shape {dep_a.shape} and {dep_b.shape}; "
            "set npts/ncmp to 'truncate' or 'pad' to reconcile sizes"
        )
    # IEEE semantics: x/0 -> inf, 0/0 -> nan, no guard
    with np.errstate(divide="ignore", invalid="ignore", over="ignore", under="ignore"):
        return _ELEMENTWISE[op](dep_a, dep_b)


def _fit_ind(ind: Optional[np.ndarray], npts: int) -> Optional[np.ndarray]:
    """Parent sample locations resized to ``npts`` (NaN where none exist)."""
    if ind is None or npts == 0:
        return None
    if ind.shape[0] >= npts:
        return ind[:npts].copy()
    out = np.full(npts, np.nan, dtype=np.float64)
    out[: ind.shape[0]] = ind
    return out


def result_header(parent: RecordHeader, dep: np.ndarray) -> RecordHeader:
    """Parent header with the payload-derived fields recomputed.

    ``extra`` is copied so the result never shares state with the parent.
    """
    depmin, depmax, depmen = dep_stats(dep)
    extra = None if parent.extra is None else dict(parent.extra)
    if dep.size == 0:
        return replace(parent, npts=0, ncmp=0, depmin=depmin, depmax=depmax, depmen=depmen, extra=extra)
    npts, ncmp = int(dep.shape[0]), int(dep.shape[1])
    return replace(
        parent,
        npts=npts,
        ncmp=ncmp,
        e=float(parent.b) + float(parent.delta) * (npts - 1),
        depmin=depmin,
        depmax=depmax,
        depmen=depmen,
        extra=extra,
    )


def fold_records(
    op: Operator,
    operands: Sequence[Record],
    policy: PolicySet,
    *,
    newhdr: bool = False,
) -> Tuple[Record, Tuple[str, ...]]:
    """Left fold ``op`` over ``operands`` and build the result record.

    Returns the new record and the warnings raised along the fold.
    """
    if len(operands) < 2:
        raise ValueError(f"A fold needs at least 2 records, got {len(operands)}")

    first = operands[0]
    warnings: List[str] = []

    # The accumulator keeps the first operand's header for attribute checks.
    acc = first
    for rec in operands[1:]:
        pair = resolve(acc, rec, policy)
        warnings.extend(pair.warnings)
        if pair.npts == 0:
            acc = Record.dataless(acc.header)
            continue
        dep = _apply(op, pair.dep_a, pair.dep_b)
        acc = Record(header=replace(acc.header, npts=pair.npts, ncmp=pair.ncmp), dep=dep, ind=None)

    parent = operands[-1] if newhdr else first
    header = result_header(parent.header, acc.dep)
    out = Record(header=header, dep=acc.dep, ind=_fit_ind(parent.ind, header.npts))
    return out, tuple(warnings)


def _run_positions(
    handler: Callable[[int], Tuple[Record, Tuple[str, ...]]],
    n: int,
    max_workers: Optional[int],
) -> List[Tuple[Record, Tuple[str, ...]]]:
    workers = 1 if max_workers is None else max(1, min(int(max_workers), n))
    if workers == 1:
        return [handler(i) for i in range(n)]
    logger.debug("combining %d positions on %d threads", n, workers)
    with ThreadPoolExecutor(max_workers=workers) as pool:
        # map keeps position order and re-raises the first failure
        return list(pool.map(handler, range(n)))


def combine(
    op: "Operator | str",
    datasets: Union[DatasetLike, Sequence[DatasetLike]],
    *,
    policy: Optional[PolicySet] = None,
    newhdr: bool = False,
    max_workers: Optional[int] = None,
    **options: Any,
) -> Dataset:
    """Combine records elementwise across (or within) datasets.

    Parameters
    ----------
    op:
        :class:`Operator` or its symbol (``"+"``, ``"-"``, ``"*"``, ``"/"``).
    datasets:
        A single Dataset (or Record) to fold over its own records, or a
        sequence of datasets combined position by position.
    policy:
        Mismatch reactions. Defaults to :class:`PolicySet` defaults.
    newhdr:
        Inherit the header of the last operand instead of the first.
    max_workers:
        Evaluate output positions on a thread pool of this size.
    **options:
        Policy overrides (``npts="pad"``, ``begin="ignore"``...).

    Returns
    -------
    Dataset
        One record per output position, with the warnings raised by
        ``warn`` policies.

    Raises
    ------
    DatasetSizeMismatch, AttributeMismatch, PayloadShapeError, UnsupportedPolicy
        No partial result is ever returned.
    """
    operator = Operator.parse(op)
    pol = PolicySet.from_options(policy, **options)
    sets = _as_datasets(datasets)

    if len(sets) == 1:
        data = sets[0]
        if len(data) < 2:
            return data
        rec, warnings = fold_records(operator, data.records, pol, newhdr=newhdr)
        return Dataset(records=(rec,), warnings=warnings)

    n = broadcast_size([len(d) for d in sets])
    if n == 0:
        return Dataset(records=())

    def handler(i: int) -> Tuple[Record, Tuple[str, ...]]:
        operands = [d[0] if len(d) == 1 else d[i] for d in sets]
        return fold_records(operator, operands, pol, newhdr=newhdr)

    results = _run_positions(handler, n, max_workers)

    warnings: List[str] = []
    for i, (_, w) in enumerate(results):
        warnings.extend(f"record {i}: {msg}" for msg in w)
    return Dataset(records=tuple(rec for rec, _ in results), warnings=tuple(warnings))
