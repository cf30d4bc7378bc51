"""Tests for the vectorized check helpers."""

from __future__ import annotations

import numpy as np
import pandas as pd

from flagfield import checks


class TestMissingAndSpecialValues:
    """Tests for is_missing / is_nan / is_infinite."""

    def test_is_missing(self) -> None:
        """None and NaN are missing."""
        s = pd.Series([1.0, None, np.nan, 0.0])
        assert checks.is_missing(s).tolist() == [False, True, True, False]

    def test_is_nan_coerces(self) -> None:
        """Non-numeric values count as NaN."""
        s = pd.Series([1.0, np.nan, "x"], dtype=object)
        assert checks.is_nan(s).tolist() == [False, True, True]

    def test_is_infinite(self) -> None:
        """Both infinities are flagged, NaN is not."""
        s = pd.Series([1.0, np.inf, -np.inf, np.nan])
        assert checks.is_infinite(s).tolist() == [False, True, True, False]

    def test_index_preserved(self) -> None:
        """Outputs keep the input index."""
        s = pd.Series([1.0, np.inf], index=[5, 9])
        assert checks.is_infinite(s).index.tolist() == [5, 9]


class TestRangeAndMembership:
    """Tests for in_range / is_member / matches_pattern."""

    def test_in_range_inclusive(self) -> None:
        """Bounds are inclusive by default and missing is out of range."""
        s = pd.Series([-100.0, 0.0, 60.0, np.nan])
        assert checks.in_range(s, -90, 60).tolist() == [False, True, True, False]

    def test_in_range_exclusive(self) -> None:
        """Bounds can be excluded."""
        s = pd.Series([-90.0, 0.0, 60.0])
        assert checks.in_range(s, -90, 60, inclusive="neither").tolist() == [False, True, False]

    def test_is_member(self) -> None:
        """Membership against a set of allowed values."""
        s = pd.Series(["good", "bad", "fair"])
        assert checks.is_member(s, {"good", "fair"}).tolist() == [True, False, True]

    def test_matches_pattern(self) -> None:
        """Regular expression matches, missing never matches."""
        s = pd.Series(["KLGA", "jfk", None])
        assert checks.matches_pattern(s, r"^K[A-Z]{3}$").tolist() == [True, False, False]


class TestDigitCounts:
    """Tests for character and digit counters."""

    def test_count_characters(self) -> None:
        """String length, missing stays missing."""
        result = checks.count_characters(pd.Series(["abc", "", None]))
        assert result.dtype == "Int64"
        assert result.iloc[:2].tolist() == [3, 0]
        assert result.isna().tolist() == [False, False, True]

    def test_count_integer_digits(self) -> None:
        """Sign is not a digit."""
        result = checks.count_integer_digits(pd.Series([123.4, -5.0, 0.25]))
        assert result.tolist() == [3, 1, 1]

    def test_count_decimals(self) -> None:
        """Shortest decimal form is used; whole numbers have none."""
        result = checks.count_decimals(pd.Series([1.25, 3.0, 0.1, np.nan]))
        assert result.dtype == "Int64"
        assert result.iloc[:3].tolist() == [2, 0, 1]
        assert result.isna().tolist() == [False, False, False, True]

    def test_count_decimals_all_whole(self) -> None:
        """A column without fractions gives zeros."""
        result = checks.count_decimals(pd.Series([1, 20, 300]))
        assert result.tolist() == [0, 0, 0]
