from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional


class IfType(str, Enum):
    """Record kind (what the dependent samples represent)."""

    TIME = "itime"  # time series
    RLIM = "irlim"  # spectral, real/imaginary
    AMPH = "iamph"  # spectral, amplitude/phase
    XY = "ixy"  # general x vs y
    XYZ = "ixyz"  # general 3-D

    @classmethod
    def parse(cls, value: "IfType | str") -> "IfType":
        if isinstance(value, cls):
            return value
        key = str(value).strip().lower()
        for item in cls:
            if key in (item.value, item.name.lower()):
                return item
        raise ValueError(f"Unknown iftype: {value!r}")


@dataclass(frozen=True)
class RecordHeader:
    """
    Header of one record.

    Notes
    - ``npts``/``ncmp`` describe the payload shape ``(npts, ncmp)``.
    - ``b``/``e`` are begin/end times relative to ``reftime`` (seconds).
    - ``reftime`` is the absolute reference epoch in seconds, None if unset.
    - ``depmin``/``depmax``/``depmen`` are derived from the payload and are
      NaN for a dataless record.
    """
    npts: int
    ncmp: int
    delta: float
    b: float
    e: float
    reftime: Optional[float] = None
    leven: bool = True
    iftype: IfType = IfType.TIME
    depmin: float = float("nan")
    depmax: float = float("nan")
    depmen: float = float("nan")

    kstnm: Optional[str] = None
    kcmpnm: Optional[str] = None
    extra: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        """Flat JSON-friendly dict (``extra`` entries are merged in)."""
        d: Dict[str, Any] = {
            "npts": self.npts,
            "ncmp": self.ncmp,
            "delta": self.delta,
            "b": self.b,
            "e": self.e,
            "reftime": self.reftime,
            "leven": self.leven,
            "iftype": self.iftype.value,
            "depmin": self.depmin,
            "depmax": self.depmax,
            "depmen": self.depmen,
            "kstnm": self.kstnm,
            "kcmpnm": self.kcmpnm,
        }
        for key, value in (self.extra or {}).items():
            d.setdefault(key, value)
        return d
