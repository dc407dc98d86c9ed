"""Size queries and derived statistics of a record payload.

Payloads are float64 arrays of shape ``(npts, ncmp)``. An empty payload
(``size == 0``) marks a dataless record.
"""

from __future__ import annotations

from typing import Any, Tuple

import numpy as np


def payload_size(dep: np.ndarray) -> Tuple[int, int]:
    """Return ``(npts, ncmp)`` of a payload; ``(0, 0)`` when it is empty."""
    x = np.asarray(dep)
    if x.size == 0:
        return 0, 0
    if x.ndim == 1:
        return int(x.shape[0]), 1
    if x.ndim != 2:
        raise ValueError(f"Payload must be 1D or 2D, got shape {x.shape}")
    return int(x.shape[0]), int(x.shape[1])


def is_dataless(obj: Any) -> bool:
    """True for an empty payload, or a record whose payload is empty."""
    dep = getattr(obj, "dep", obj)
    if dep is None:
        return True
    return np.asarray(dep).size == 0


def component_stats(dep: np.ndarray) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Per-component min, max and mean, each of shape ``(ncmp,)``.

    Non-finite samples propagate (no nan-skipping). Empty payloads give
    empty arrays.
    """
    x = np.asarray(dep, dtype=float)
    if x.size == 0:
        empty = np.zeros(0, dtype=float)
        return empty, empty.copy(), empty.copy()
    if x.ndim == 1:
        x = x[:, None]
    return np.min(x, axis=0), np.max(x, axis=0), np.mean(x, axis=0)


def dep_stats(dep: np.ndarray) -> Tuple[float, float, float]:
    """Return ``(depmin, depmax, depmen)`` over every sample of the payload.

    All three are NaN for an empty payload.
    """
    cmin, cmax, cmean = component_stats(dep)
    if cmin.size == 0:
        return float("nan"), float("nan"), float("nan")
    # every component has npts samples, so the mean of means is the overall mean
    return float(np.min(cmin)), float(np.max(cmax)), float(np.mean(cmean))
