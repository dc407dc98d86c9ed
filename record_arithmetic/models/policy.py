"""Mismatch policies for record combination.

A :class:`PolicySet` maps each checked header attribute to a reaction. It
is an immutable value passed explicitly to every call; there is no
session-wide default object. Override fields with keyword options::

    policy = PolicySet.from_options(npts="pad", begin="ignore")
    policy = dataclasses.replace(policy, delta="warn")
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields, replace
from typing import Any, Dict, Literal, Optional, Tuple

from record_arithmetic.errors import UnsupportedPolicy


SizeReaction = Literal["error", "warn", "ignore", "truncate", "pad"]
Reaction = Literal["error", "warn", "ignore"]

SIZE_REACTIONS: Tuple[str, ...] = ("error", "warn", "ignore", "truncate", "pad")
REACTIONS: Tuple[str, ...] = ("error", "warn", "ignore")

# attributes whose mismatch can be normalized by resizing the payload
SIZE_ATTRIBUTES: Tuple[str, ...] = ("npts", "ncmp")
ADVISORY_ATTRIBUTES: Tuple[str, ...] = ("delta", "begin", "ref", "leven", "iftype")


@dataclass(frozen=True)
class PolicySet:
    """Per-attribute reaction to mismatching records.

    Attributes
    ----------
    npts, ncmp : {"error","warn","ignore","truncate","pad"}
        Different number of samples / components. ``truncate`` drops
        trailing rows/columns, ``pad`` appends zeros. ``warn``/``ignore``
        leave the payload untouched.
    delta, begin, ref, leven, iftype : {"error","warn","ignore"}
        Different sample interval, begin time, reference time, uneven
        sampling, record kind. Never alter the payload.
    """

    npts: SizeReaction = "error"
    ncmp: SizeReaction = "error"
    delta: Reaction = "error"
    begin: Reaction = "warn"
    ref: Reaction = "warn"
    leven: Reaction = "error"
    iftype: Reaction = "error"

    def __post_init__(self) -> None:
        for f in fields(self):
            value = getattr(self, f.name)
            allowed = SIZE_REACTIONS if f.name in SIZE_ATTRIBUTES else REACTIONS
            norm = str(value).strip().lower() if isinstance(value, str) else value
            if norm not in allowed:
                raise UnsupportedPolicy(
                    f"Option '{f.name}' must be one of {list(allowed)}, got {value!r}"
                )
            object.__setattr__(self, f.name, norm)

    @classmethod
    def from_options(cls, base: Optional[PolicySet] = None, **options: Any) -> PolicySet:
        """Build a policy set from keyword options, on top of ``base`` if given."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(options) - known)
        if unknown:
            raise UnsupportedPolicy(f"Unknown option(s): {unknown}; expected a subset of {sorted(known)}")
        return replace(base or cls(), **options)

    def reaction(self, attribute: str) -> str:
        return getattr(self, attribute)

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)
