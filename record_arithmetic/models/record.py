from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Iterable, Iterator, Optional, Tuple, overload

import numpy as np

from .header import IfType, RecordHeader
from .stats import dep_stats, payload_size


def as_payload(dep: Any) -> np.ndarray:
    """Coerce samples to a read-only float64 copy of shape ``(npts, ncmp)``.

    A 1D input becomes a single component. Empty input becomes ``(0, 0)``.
    """
    x = np.array(dep, dtype=np.float64, copy=True)
    if x.size == 0:
        x = np.zeros((0, 0), dtype=np.float64)
    elif x.ndim == 1:
        x = x[:, None]
    elif x.ndim != 2:
        raise ValueError(f"Payload must be 1D or 2D, got shape {x.shape}")
    x.setflags(write=False)
    return x


def _same_header(a: RecordHeader, b: RecordHeader) -> bool:
    da, db = a.to_dict(), b.to_dict()
    if da.keys() != db.keys():
        return False
    for key, va in da.items():
        vb = db[key]
        if isinstance(va, float) and isinstance(vb, float) and np.isnan(va) and np.isnan(vb):
            continue
        if va != vb:
            return False
    return True


@dataclass(frozen=True, eq=False)
class Record:
    """
    One trace: a header plus its dependent (and optional independent) samples.

    Notes
    - ``dep`` is float64, shaped ``(npts, ncmp)``; rows are time/frequency
      samples, columns are components.
    - ``ind`` holds the actual sample locations of an unevenly sampled record
      (length ``npts``), None otherwise.
    - An empty ``dep`` is a dataless (metadata only) record.
    - Equality compares header values and samples (NaN equals NaN); records
      are not hashable.
    """
    header: RecordHeader
    dep: np.ndarray
    ind: Optional[np.ndarray] = None

    def __post_init__(self) -> None:
        dep = as_payload(self.dep)
        object.__setattr__(self, "dep", dep)
        if dep.size:
            npts, ncmp = payload_size(dep)
            if self.header.npts != npts or self.header.ncmp != ncmp:
                raise ValueError(
                    f"Header/payload mismatch: header (npts={self.header.npts}, ncmp={self.header.ncmp}), "
                    f"payload shape {dep.shape}"
                )
        if self.ind is not None:
            ind = np.array(self.ind, dtype=np.float64, copy=True).ravel()
            ind.setflags(write=False)
            if dep.size and ind.shape[0] != dep.shape[0]:
                raise ValueError(f"ind must have {dep.shape[0]} samples, got {ind.shape[0]}")
            object.__setattr__(self, "ind", ind)

    @property
    def npts(self) -> int:
        return payload_size(self.dep)[0]

    @property
    def ncmp(self) -> int:
        return payload_size(self.dep)[1]

    @property
    def is_dataless(self) -> bool:
        return self.dep.size == 0

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Record):
            return NotImplemented
        if (self.ind is None) != (other.ind is None):
            return False
        if self.ind is not None and not np.array_equal(self.ind, other.ind, equal_nan=True):
            return False
        return _same_header(self.header, other.header) and np.array_equal(self.dep, other.dep, equal_nan=True)

    __hash__ = None  # type: ignore[assignment]

    @classmethod
    def from_samples(
        cls,
        dep: Any,
        *,
        delta: float,
        b: float = 0.0,
        reftime: Optional[float] = None,
        iftype: IfType | str = IfType.TIME,
        ind: Any = None,
        **header_fields: Any,
    ) -> Record:
        """Build a record from samples, deriving the size and statistics fields.

        ``leven`` defaults to True unless ``ind`` is given. Remaining keyword
        arguments are passed to :class:`RecordHeader` (``kstnm``, ``extra``...).
        """
        x = as_payload(dep)
        npts, ncmp = payload_size(x)
        depmin, depmax, depmen = dep_stats(x)
        leven = header_fields.pop("leven", ind is None)
        if "e" in header_fields:
            e = float(header_fields.pop("e"))
        elif ind is not None and npts:
            e = float(np.asarray(ind, dtype=float).ravel()[-1])
        else:
            e = float(b) + float(delta) * max(npts - 1, 0)
        header = RecordHeader(
            npts=npts,
            ncmp=ncmp,
            delta=float(delta),
            b=float(b),
            e=e,
            reftime=None if reftime is None else float(reftime),
            leven=bool(leven),
            iftype=IfType.parse(iftype),
            depmin=depmin,
            depmax=depmax,
            depmen=depmen,
            **header_fields,
        )
        return cls(header=header, dep=x, ind=ind)

    @classmethod
    def dataless(cls, header: RecordHeader) -> Record:
        """A metadata-only record carrying ``header`` unchanged."""
        return cls(header=header, dep=np.zeros((0, 0), dtype=np.float64))

    def with_header(self, **changes: Any) -> Record:
        return replace(self, header=replace(self.header, **changes))


@dataclass(frozen=True)
class Dataset:
    """Ordered records; position pairs records across datasets.

    ``warnings`` holds the advisory messages raised while building the
    dataset (e.g. mismatches under a ``warn`` policy).
    """
    records: Tuple[Record, ...]
    warnings: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "records", tuple(self.records))
        object.__setattr__(self, "warnings", tuple(self.warnings))

    @classmethod
    def of(cls, *records: Record) -> Dataset:
        return cls(records=tuple(records))

    @classmethod
    def coerce(cls, obj: "Dataset | Record | Iterable[Record]") -> Dataset:
        """Accept a Dataset, a single Record, or an iterable of Records."""
        if isinstance(obj, Dataset):
            return obj
        if isinstance(obj, Record):
            return cls(records=(obj,))
        records = tuple(obj)
        bad = [type(r).__name__ for r in records if not isinstance(r, Record)]
        if bad:
            raise TypeError(f"Expected Record items, got {bad[:5]}")
        return cls(records=records)

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self) -> Iterator[Record]:
        return iter(self.records)

    @overload
    def __getitem__(self, i: int) -> Record: ...

    @overload
    def __getitem__(self, i: slice) -> Dataset: ...

    def __getitem__(self, i):
        if isinstance(i, slice):
            return Dataset(records=self.records[i])
        return self.records[i]
