from __future__ import annotations

import dataclasses

import numpy as np
import pytest

from record_arithmetic.errors import UnsupportedPolicy
from record_arithmetic.models import (
    Dataset,
    IfType,
    PolicySet,
    Record,
    component_stats,
    dep_stats,
    is_dataless,
    payload_size,
)


def test_from_samples_derives_size_and_statistics() -> None:
    rec = Record.from_samples([1.0, 4.0, -2.0, 5.0], delta=0.5, b=10.0)

    assert rec.dep.shape == (4, 1)
    assert rec.dep.dtype == np.float64
    assert rec.header.npts == 4
    assert rec.header.ncmp == 1
    assert rec.header.e == pytest.approx(11.5)
    assert rec.header.depmin == -2.0
    assert rec.header.depmax == 5.0
    assert rec.header.depmen == pytest.approx(2.0)
    assert rec.header.leven is True
    assert rec.header.iftype is IfType.TIME


def test_from_samples_uneven_uses_ind() -> None:
    rec = Record.from_samples([1.0, 2.0, 3.0], delta=1.0, ind=[0.0, 0.4, 2.5])
    assert rec.header.leven is False
    assert rec.header.e == pytest.approx(2.5)
    np.testing.assert_array_equal(rec.ind, [0.0, 0.4, 2.5])


def test_header_payload_mismatch_is_rejected() -> None:
    rec = Record.from_samples(np.ones((5, 2)), delta=1.0)
    bad_header = dataclasses.replace(rec.header, npts=3)
    with pytest.raises(ValueError):
        Record(header=bad_header, dep=rec.dep)


def test_ind_length_must_match_npts() -> None:
    with pytest.raises(ValueError):
        Record.from_samples([1.0, 2.0, 3.0], delta=1.0, ind=[0.0, 1.0])


def test_dataless_record_keeps_header() -> None:
    rec = Record.from_samples(np.arange(6.0).reshape(3, 2), delta=0.1, kstnm="ANMO")
    empty = Record.dataless(rec.header)

    assert empty.is_dataless
    assert is_dataless(empty)
    assert empty.header is rec.header
    assert empty.npts == 0 and empty.ncmp == 0


def test_record_equality_compares_values() -> None:
    a = Record.from_samples([1.0, 2.0], delta=0.1, kstnm="ANMO")
    same = Record.from_samples([1.0, 2.0], delta=0.1, kstnm="ANMO")
    other = Record.from_samples([1.0, 2.5], delta=0.1, kstnm="ANMO")
    renamed = Record.from_samples([1.0, 2.0], delta=0.1, kstnm="CCM")

    assert a == same
    assert a != other
    assert a != renamed
    assert (a == "ANMO") is False

    # NaN statistics of dataless records do not break equality
    nan_stats = {"depmin": float("nan"), "depmax": float("nan"), "depmen": float("nan")}
    left = Record.dataless(dataclasses.replace(a.header, npts=0, ncmp=0, **nan_stats))
    right = Record.dataless(dataclasses.replace(same.header, npts=0, ncmp=0, **nan_stats))
    assert left == right


def test_record_copies_and_freezes_samples() -> None:
    raw = np.array([[1.0, 2.0], [3.0, 4.0]])
    ind = np.array([0.0, 0.5])
    rec = Record.from_samples(raw, delta=0.5, ind=ind)

    raw[0, 0] = 100.0
    ind[1] = 9.0

    np.testing.assert_array_equal(rec.dep, [[1.0, 2.0], [3.0, 4.0]])
    np.testing.assert_array_equal(rec.ind, [0.0, 0.5])
    with pytest.raises(ValueError):
        rec.dep[1, 1] = 0.0
    with pytest.raises(ValueError):
        rec.ind[0] = 1.0


def test_stats_helpers() -> None:
    dep = np.array([[1.0, 10.0], [3.0, -10.0]])
    assert payload_size(dep) == (2, 2)
    assert payload_size(np.zeros(0)) == (0, 0)

    cmin, cmax, cmean = component_stats(dep)
    np.testing.assert_array_equal(cmin, [1.0, -10.0])
    np.testing.assert_array_equal(cmax, [3.0, 10.0])
    np.testing.assert_array_equal(cmean, [2.0, 0.0])

    assert dep_stats(dep) == (-10.0, 10.0, 1.0)
    assert all(np.isnan(v) for v in dep_stats(np.zeros((0, 0))))


def test_dataset_coerce_and_indexing() -> None:
    a = Record.from_samples([1.0], delta=1.0)
    b = Record.from_samples([2.0], delta=1.0)

    assert len(Dataset.coerce(a)) == 1
    data = Dataset.coerce([a, b])
    assert len(data) == 2
    assert data[1] is b
    assert isinstance(data[:1], Dataset)
    assert [r is s for r, s in zip(data, [a, b])] == [True, True]

    with pytest.raises(TypeError):
        Dataset.coerce([a, "not a record"])


class TestPolicySet:
    def test_defaults(self) -> None:
        p = PolicySet()
        assert p.to_dict() == {
            "npts": "error",
            "ncmp": "error",
            "delta": "error",
            "begin": "warn",
            "ref": "warn",
            "leven": "error",
            "iftype": "error",
        }

    def test_from_options_overrides_base(self) -> None:
        base = PolicySet(delta="warn")
        p = PolicySet.from_options(base, npts="PAD", begin="ignore")
        assert p.npts == "pad"
        assert p.begin == "ignore"
        assert p.delta == "warn"
        # base is untouched
        assert base.npts == "error"

    @pytest.mark.parametrize(
        "options",
        [
            {"npts": "stretch"},
            {"delta": "pad"},
            {"iftype": "truncate"},
            {"leven": None},
        ],
    )
    def test_bad_values_raise(self, options) -> None:
        with pytest.raises(UnsupportedPolicy):
            PolicySet.from_options(**options)

    def test_unknown_option_name_raises(self) -> None:
        with pytest.raises(UnsupportedPolicy):
            PolicySet.from_options(sampling="error")

    def test_unsupported_policy_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            PolicySet(ncmp="nope")


def test_iftype_parse() -> None:
    assert IfType.parse("irlim") is IfType.RLIM
    assert IfType.parse("amph") is IfType.AMPH
    with pytest.raises(ValueError):
        IfType.parse("ixyzw")
