from __future__ import annotations

"""Compatibility checks between two records before an elementwise operation.

Each header attribute is compared and the configured reaction applied:

- ``error``: raise :class:`~record_arithmetic.errors.AttributeMismatch`
- ``warn``: record a warning, continue
- ``ignore``: continue silently
- ``truncate`` / ``pad`` (npts, ncmp only): resize the in-flight payloads

Nothing here resamples or shifts samples. Records with different sample
intervals, begin times or kinds are combined index-for-index.
"""

from dataclasses import dataclass
import logging
import math
from typing import Callable, List, Optional, Tuple

import numpy as np

from record_arithmetic.errors import AttributeMismatch
from record_arithmetic.models.policy import PolicySet
from record_arithmetic.models.record import Record

logger = logging.getLogger(__name__)

# relative tolerance when comparing floating header values
REL_TOL = 1e-9


@dataclass(frozen=True)
class ResolvedPair:
    """Payloads ready for the numeric step, with the shape they share."""

    dep_a: np.ndarray
    dep_b: np.ndarray
    npts: int
    ncmp: int
    warnings: Tuple[str, ...] = ()


def _same_float(a: Optional[float], b: Optional[float]) -> bool:
    if a is None or b is None:
        return a is None and b is None
    return math.isclose(float(a), float(b), rel_tol=REL_TOL, abs_tol=0.0)


def _resize(dep: np.ndarray, axis: int, n: int) -> np.ndarray:
    """Drop trailing entries or append zeros along ``axis`` to reach ``n``."""
    cur = dep.shape[axis]
    if cur == n:
        return dep
    if cur > n:
        return dep[:n, :] if axis == 0 else dep[:, :n]
    pad = [(0, 0), (0, 0)]
    pad[axis] = (0, n - cur)
    return np.pad(dep, pad, mode="constant", constant_values=0.0)


def _react(attribute: str, reaction: str, detail: str, warnings: List[str]) -> None:
    if reaction == "error":
        raise AttributeMismatch(attribute, detail)
    if reaction == "warn":
        msg = f"{attribute} mismatch: {detail}"
        logger.warning(msg)
        warnings.append(msg)


def _check_size(
    attribute: str,
    axis: int,
    dep_a: np.ndarray,
    dep_b: np.ndarray,
    reaction: str,
    warnings: List[str],
) -> Tuple[np.ndarray, np.ndarray]:
    na, nb = dep_a.shape[axis], dep_b.shape[axis]
    if na == nb:
        return dep_a, dep_b
    if reaction == "truncate":
        n = min(na, nb)
    elif reaction == "pad":
        n = max(na, nb)
    else:
        _react(attribute, reaction, f"{na} vs {nb}", warnings)
        return dep_a, dep_b
    return _resize(dep_a, axis, n), _resize(dep_b, axis, n)


# (policy attribute, predicate telling the records match, description)
_ADVISORY_CHECKS: Tuple[Tuple[str, Callable[[Record, Record], bool], Callable[[Record, Record], str]], ...] = (
    (
        "delta",
        lambda a, b: _same_float(a.header.delta, b.header.delta),
        lambda a, b: f"{a.header.delta!r} vs {b.header.delta!r}",
    ),
    (
        "begin",
        lambda a, b: _same_float(a.header.b, b.header.b),
        lambda a, b: f"{a.header.b!r} vs {b.header.b!r}",
    ),
    (
        "ref",
        lambda a, b: _same_float(a.header.reftime, b.header.reftime),
        lambda a, b: f"{a.header.reftime!r} vs {b.header.reftime!r}",
    ),
    (
        # any unevenly sampled record trips the check, not only differing flags
        "leven",
        lambda a, b: bool(a.header.leven) and bool(b.header.leven),
        lambda a, b: f"leven {a.header.leven} vs {b.header.leven}",
    ),
    (
        "iftype",
        lambda a, b: a.header.iftype == b.header.iftype,
        lambda a, b: f"{a.header.iftype.value} vs {b.header.iftype.value}",
    ),
)


def resolve(rec_a: Record, rec_b: Record, policy: PolicySet) -> ResolvedPair:
    """Reconcile two records according to ``policy``.

    Parameters
    ----------
    rec_a:
        The accumulator (left operand).
    rec_b:
        The next operand (right operand).
    policy:
        Reactions per attribute.

    Returns
    -------
    ResolvedPair
        Normalized payloads. Under ``warn``/``ignore`` for npts/ncmp the
        payload shapes may still differ; the caller must not broadcast them.

    Raises
    ------
    AttributeMismatch
        For the first mismatching attribute whose policy is ``error``.
    """
    if rec_a.is_dataless or rec_b.is_dataless:
        empty = np.zeros((0, 0), dtype=np.float64)
        return ResolvedPair(dep_a=empty, dep_b=empty, npts=0, ncmp=0)

    warnings: List[str] = []

    dep_a, dep_b = _check_size("npts", 0, rec_a.dep, rec_b.dep, policy.npts, warnings)
    dep_a, dep_b = _check_size("ncmp", 1, dep_a, dep_b, policy.ncmp, warnings)

    for attribute, same, describe in _ADVISORY_CHECKS:
        reaction = policy.reaction(attribute)
        if reaction == "ignore" or same(rec_a, rec_b):
            continue
        _react(attribute, reaction, describe(rec_a, rec_b), warnings)

    npts, ncmp = dep_a.shape
    return ResolvedPair(
        dep_a=dep_a,
        dep_b=dep_b,
        npts=int(npts),
        ncmp=int(ncmp),
        warnings=tuple(warnings),
    )
