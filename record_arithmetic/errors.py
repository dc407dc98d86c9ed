"""Typed exceptions raised by the record combination engine.

All exceptions derive from :class:`ValueError` so that callers used to the
plain ``ValueError`` contract of the analysis functions keep working.
"""

from __future__ import annotations

from typing import Sequence


class RecordArithmeticError(ValueError):
    """Base class for every failure of a record combination."""


class DatasetSizeMismatch(RecordArithmeticError):
    """Dataset lengths are neither 1 nor the common broadcast length."""

    def __init__(self, sizes: Sequence[int]) -> None:
        self.sizes = tuple(int(n) for n in sizes)
        super().__init__(
            f"Datasets must have 1 record or {max(self.sizes, default=0)} records, got sizes {list(self.sizes)}"
        )


class AttributeMismatch(RecordArithmeticError):
    """A header attribute differs and its policy is ``error``."""

    def __init__(self, attribute: str, detail: str = "") -> None:
        self.attribute = attribute
        self.detail = detail
        msg = f"Records differ in '{attribute}'"
        if detail:
            msg += f": {detail}"
        super().__init__(msg)


class UnsupportedPolicy(RecordArithmeticError):
    """Unknown option name, policy value or operator symbol."""


class PayloadShapeError(RecordArithmeticError):
    """Payload shapes still differ when the numeric operation runs.

    Raised when ``npts``/``ncmp`` are set to ``warn`` or ``ignore`` and the
    records really have different sizes. Shapes are never broadcast.
    """
