"""Vectorized tests that produce raw flag columns.

These helpers cover the common checks a QA bitfield records. Each takes a
Series and returns a column ready for one FlagBuilder method:
- boolean Series for binary flags (and case predicates)
- nullable Int64 Series for count flags

Rules:
- Never modify the input
- Missing inputs give missing outputs where the result would be meaningless
"""

from __future__ import annotations

from typing import Iterable

import numpy as np
import pandas as pd


def is_missing(series: pd.Series) -> pd.Series:
    """True where the value is None/NaN/NaT/pd.NA."""
    return series.isna()


def is_nan(series: pd.Series) -> pd.Series:
    """True where the value is NaN once coerced to numeric (missing and non-numeric included)."""
    numeric = pd.to_numeric(series, errors="coerce")
    return pd.Series(np.isnan(numeric.to_numpy(dtype=float, na_value=np.nan)), index=series.index)


def is_infinite(series: pd.Series) -> pd.Series:
    """True where a numeric value is +inf or -inf."""
    numeric = pd.to_numeric(series, errors="coerce")
    return pd.Series(np.isinf(numeric.to_numpy(dtype=float, na_value=np.nan)), index=series.index)


def in_range(
    series: pd.Series,
    lo: float,
    hi: float,
    inclusive: str = "both",
) -> pd.Series:
    """True where lo <= value <= hi (bounds per `inclusive`).

    Missing values are never in range.
    """
    return series.between(lo, hi, inclusive=inclusive).fillna(False).astype(bool)


def is_member(series: pd.Series, values: Iterable[object]) -> pd.Series:
    """True where the value is one of `values`."""
    return series.isin(list(values))


def matches_pattern(series: pd.Series, pattern: str) -> pd.Series:
    """True where the string value matches a regular expression.

    Missing values do not match.
    """
    return series.astype("string").str.contains(pattern, regex=True).fillna(False).astype(bool)


def count_characters(series: pd.Series) -> pd.Series:
    """Number of characters of each value's string form."""
    text = series.astype("string")
    return text.str.len().astype("Int64")


def _decimal_parts(series: pd.Series) -> tuple[pd.Series, pd.Series]:
    """Split numbers into integer and fractional digit strings."""
    numeric = pd.to_numeric(series, errors="coerce").abs()
    # repr-style formatting keeps the shortest round-tripping digits
    text = numeric.map(
        lambda v: pd.NA if pd.isna(v) else np.format_float_positional(float(v), trim="-")
    )
    parts = text.astype("string").str.split(".", n=1, expand=True)
    if parts.shape[1] == 1:
        parts[1] = pd.NA
    return parts[0], parts[1]


def count_integer_digits(series: pd.Series) -> pd.Series:
    """Number of digits before the decimal point (sign excluded)."""
    whole, _ = _decimal_parts(series)
    return whole.str.len().astype("Int64")


def count_decimals(series: pd.Series) -> pd.Series:
    """Number of significant digits after the decimal point.

    Whole numbers have 0 decimals; missing values stay missing.
    """
    whole, frac = _decimal_parts(series)
    digits = frac.str.len().astype("Int64")
    return digits.mask(whole.notna() & digits.isna(), 0).astype("Int64")
