"""Tests for binary, case and count codecs."""

from __future__ import annotations

import numpy as np
import pandas as pd
import pytest

from flagfield.codecs import (
    NO_CASE,
    BinaryCodec,
    CaseCodec,
    CountCodec,
    FlagCodec,
    as_bits,
    create_codec,
    fit_count,
)
from flagfield.errors import CaseOverlap, CountOverflow, MissingValue
from flagfield.registry import create_registry
from flagfield.schemas.flags import Binary, Case, Count, Numeric, flag_width


class TestBinaryCodec:
    """Tests for BinaryCodec."""

    def test_encode_decode(self) -> None:
        """True/False should map to 1/0 and back."""
        codec = BinaryCodec()
        assert codec.encode(True) == 1
        assert codec.encode(False) == 0
        assert codec.decode(1) is True
        assert codec.decode(0) is False

    def test_truthy_values(self) -> None:
        """Non-boolean raw values use their truthiness."""
        codec = BinaryCodec()
        assert codec.encode(np.bool_(True)) == 1
        assert codec.encode(0) == 0

    def test_missing_without_sentinel_raises(self) -> None:
        """Missing values need a sentinel."""
        codec = BinaryCodec(name="missing")
        with pytest.raises(MissingValue, match="missing"):
            codec.encode(None)

    def test_missing_column_reports_rows(self) -> None:
        """Column errors should list the failing rows."""
        codec = BinaryCodec(name="missing")
        with pytest.raises(MissingValue, match=r"\(2 rows\)"):
            codec.encode_column([True, np.nan, False, None])

    def test_sentinel(self) -> None:
        """Missing values encode as the sentinel and decode to NA."""
        codec = BinaryCodec(width=2, na_sentinel=0b11)
        assert codec.encode_column([True, None, False]) == [1, 3, 0]
        decoded = codec.decode_column([1, 3, 0])
        assert decoded.dtype == "boolean"
        assert decoded.iloc[0] == True  # noqa: E712
        assert decoded.isna().tolist() == [False, True, False]

    def test_na_value(self) -> None:
        """A configured NA indicator is treated as missing."""
        codec = BinaryCodec(width=2, na_sentinel=0b11, na_value=-9)
        assert codec.encode(-9) == 3
        assert codec.encode(1) == 1


class TestCaseCodec:
    """Tests for CaseCodec."""

    def test_width_reserves_no_case_code(self) -> None:
        """Width must leave room for the no-case code."""
        assert flag_width(Case(1)) == 1
        assert flag_width(Case(3)) == 2
        assert flag_width(Case(4)) == 3
        assert flag_width(Case(7)) == 3
        assert Case(3).no_case_code == 3
        assert Case(4).no_case_code == 7

    def test_first_true_wins(self) -> None:
        """Exclusive mode encodes the first true predicate."""
        codec = CaseCodec(Case(3))
        assert codec.encode((False, False, True)) == 2
        assert codec.encode((False, True, True)) == 1
        assert codec.encode([True, True, True]) == 0

    def test_no_case(self) -> None:
        """No true predicate gives the reserved code, decoded as NO_CASE."""
        codec = CaseCodec(Case(3))
        code = codec.encode((False, False, False))
        assert code == 3
        assert codec.decode(code) == NO_CASE
        assert codec.decode(0) == 0

    def test_missing_predicates_are_false(self) -> None:
        """NA predicate outcomes never match."""
        codec = CaseCodec(Case(2))
        assert codec.encode((None, True)) == 1
        assert codec.encode((np.nan, pd.NA)) == codec.no_case_code

    def test_resolved_index(self) -> None:
        """Integer raw values are taken as case indices."""
        codec = CaseCodec(Case(3))
        assert codec.encode(2) == 2
        assert codec.encode(np.int64(0)) == 0
        assert codec.encode(None) == 3

    def test_integral_float_index(self) -> None:
        """Whole-number floats are taken as case indices."""
        codec = CaseCodec(Case(3))
        assert codec.encode(2.0) == 2
        assert codec.encode(np.float64(0.0)) == 0
        assert codec.encode_column(pd.Series([2, None, 0])) == [2, 3, 0]

    def test_fractional_index_rejected(self) -> None:
        """Fractional indices are rejected."""
        codec = CaseCodec(Case(3), name="quality")
        with pytest.raises(ValueError, match="not an integer"):
            codec.encode(1.5)

    def test_index_out_of_range(self) -> None:
        """Indices outside the case count are rejected."""
        codec = CaseCodec(Case(3), name="quality")
        with pytest.raises(ValueError, match="quality"):
            codec.encode(3)

    def test_wrong_row_length(self) -> None:
        """Rows must have one outcome per case."""
        codec = CaseCodec(Case(3))
        with pytest.raises(ValueError, match="expected 3"):
            codec.encode((True, False))

    def test_non_exclusive_last(self) -> None:
        """The "last" rule picks the last true predicate."""
        codec = CaseCodec(Case(3, exclusive=False, overlap="last"))
        assert codec.encode((True, False, True)) == 2

    def test_non_exclusive_error(self) -> None:
        """The "error" rule rejects overlapping predicates."""
        codec = CaseCodec(Case(3, exclusive=False, overlap="error"), name="q")
        assert codec.encode((False, True, False)) == 1
        with pytest.raises(CaseOverlap, match=r"sample indices: \[1\]"):
            codec.encode_column([(True, False, False), (True, True, False)])

    def test_exclusive_ignores_overlap_rule(self) -> None:
        """Exclusive mode always uses priority order."""
        codec = CaseCodec(Case(2, exclusive=True, overlap="error"))
        assert codec.encode((True, True)) == 0

    def test_invalid_overlap_rule(self) -> None:
        """Unknown overlap rules are rejected."""
        with pytest.raises(ValueError, match="overlap"):
            Case(2, overlap="union")

    def test_decode_column(self) -> None:
        """Decoded cases form a nullable integer column."""
        codec = CaseCodec(Case(3))
        decoded = codec.decode_column([0, 2, 3])
        assert decoded.dtype == "Int64"
        assert decoded.tolist() == [0, 2, NO_CASE]


class TestCountCodec:
    """Tests for CountCodec and fit_count."""

    def test_fit_count(self) -> None:
        """The reduction pass finds the column maximum."""
        kind = fit_count([0, 3, 7, None])
        assert kind == Count(7)
        assert flag_width(kind) == 3

    def test_fit_empty_column(self) -> None:
        """An empty column gives a 1-bit flag."""
        kind = fit_count([])
        assert kind.max_value == 0
        assert flag_width(kind) == 1

    def test_fit_negative_raises(self) -> None:
        """Negative counts cannot be sized."""
        with pytest.raises(CountOverflow, match="Count out of range"):
            fit_count([1, -2, 3], name="runs")

    @pytest.mark.parametrize("max_value", [1, 5, 7, 8, 100, 1023])
    def test_max_fits_max_plus_one_overflows(self, max_value) -> None:
        """The fitted max always encodes; max + 1 always overflows."""
        codec = CountCodec(fit_count([0, max_value]))
        assert codec.encode(max_value) == max_value
        with pytest.raises(CountOverflow):
            codec.encode(max_value + 1)

    def test_zero_padding(self) -> None:
        """Counts are zero-padded to the flag width."""
        codec = CountCodec(Count(7))
        assert as_bits(codec.encode(5), codec.width) == "101"
        assert as_bits(codec.encode(1), codec.width) == "001"

    def test_non_integer_rejected(self) -> None:
        """Fractional counts are rejected."""
        codec = CountCodec(Count(7))
        with pytest.raises(ValueError, match="not an integer"):
            codec.encode(2.5)

    def test_column_overflow_reports_rows(self) -> None:
        """Column errors should list every overflowing row."""
        codec = CountCodec(Count(3), name="runs")
        with pytest.raises(CountOverflow, match=r"sample indices: \[1, 3\]"):
            codec.encode_column([0, 4, 2, 9])

    def test_sentinel(self) -> None:
        """The default sentinel sits above max_value and decodes to NA."""
        definition = create_registry("r").append("runs", Count(7), na_sentinel=True)["runs"]
        assert definition.na_sentinel == 15
        assert definition.width == 4
        codec = create_codec(definition)
        assert codec.encode_column([7, None, 0]) == [7, 15, 0]
        decoded = codec.decode_column([7, 15, 0])
        assert decoded.isna().tolist() == [False, True, False]

    def test_missing_without_sentinel(self) -> None:
        """Missing counts need a sentinel."""
        codec = CountCodec(Count(7), name="runs")
        with pytest.raises(MissingValue):
            codec.encode_column([1, None])


class TestCreateCodec:
    """Tests for the codec factory."""

    @pytest.mark.parametrize(
        "kind,expected",
        [
            (Binary(), BinaryCodec),
            (Case(3), CaseCodec),
            (Count(5), CountCodec),
        ],
    )
    def test_kind_dispatch(self, kind, expected) -> None:
        """Each kind should get its own codec with the definition's width."""
        reg = create_registry("r").append("flag", kind)
        codec = create_codec(reg["flag"])
        assert isinstance(codec, expected)
        assert codec.width == reg["flag"].width

    def test_codecs_satisfy_protocol(self) -> None:
        """All codecs should implement FlagCodec."""
        reg = create_registry("r").append("v", Numeric("half"))
        assert isinstance(create_codec(reg["v"]), FlagCodec)
        assert isinstance(BinaryCodec(), FlagCodec)
