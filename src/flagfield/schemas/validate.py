"""Validation helpers for raw columns and encoded fields.

All helpers raise a FlagFieldError subclass with actionable messages including:
- Dataset name (if provided)
- Offending flags/columns
- Count of failing rows
- Sample of failing row indices (first 5)
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Sized

import numpy as np
import pandas as pd

from flagfield.errors import (
    CountOverflow,
    LengthMismatch,
    MissingColumn,
)


def format_error(
    dataset: str | None,
    rule: str,
    detail: str,
    failing_indices: list[Any] | None = None,
    count: int | None = None,
) -> str:
    """Format a validation error message consistently."""
    parts = []
    if dataset:
        parts.append(f"[{dataset}]")
    parts.append(rule)
    parts.append(f": {detail}")
    if count is not None:
        parts.append(f" ({count} rows)")
    if failing_indices:
        sample = failing_indices[:5]
        parts.append(f" | sample indices: {sample}")
    return "".join(parts)


def is_na(value: Any) -> bool:
    """Return True for None, NaN, NaT and pd.NA scalars."""
    if value is None:
        return True
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        # Sequences (e.g. case predicate rows) are never missing scalars
        return False


def require_columns(
    columns: Iterable[str],
    required: Iterable[str],
    dataset: str | None = None,
) -> None:
    """Raise MissingColumn if required columns are missing.

    Args:
        columns: Available column names (e.g., mapping keys or df.columns)
        required: Required column names
        dataset: Optional dataset name for error messages

    Raises:
        MissingColumn: If any required columns are missing
    """
    available = set(columns)
    missing = [name for name in required if name not in available]
    if missing:
        raise MissingColumn(format_error(dataset, "Missing columns", f"{missing}"))


def require_equal_length(
    columns: Mapping[str, Sized],
    dataset: str | None = None,
) -> int:
    """Raise LengthMismatch unless every column has the same record count.

    Args:
        columns: Mapping of column name to column
        dataset: Optional dataset name for error messages

    Returns:
        The shared record count (0 for an empty mapping)

    Raises:
        LengthMismatch: If columns differ in length
    """
    lengths = {name: len(col) for name, col in columns.items()}
    distinct = set(lengths.values())
    if len(distinct) > 1:
        detail = ", ".join(f"{name}={n}" for name, n in lengths.items())
        raise LengthMismatch(
            format_error(dataset, "Length mismatch", f"columns differ in length ({detail})")
        )
    return distinct.pop() if distinct else 0


def require_nonnegative_int(
    values: Iterable[Any],
    name: str,
    max_value: int | None = None,
    dataset: str | None = None,
) -> None:
    """Raise CountOverflow if values are negative or above max_value.

    Missing values are skipped; the count codec decides what to do with them.

    Args:
        values: Column of integer-like values
        name: Flag name for error messages
        max_value: Largest allowed value (inclusive), or None for no upper bound
        dataset: Optional dataset name for error messages

    Raises:
        CountOverflow: If any value is outside [0, max_value]
    """
    values = list(values)
    if not values:
        return

    upper = float("inf") if max_value is None else max_value
    bad = np.array(
        [not is_na(v) and not 0 <= int(v) <= upper for v in values],
        dtype=bool,
    )

    bad_count = int(bad.sum())
    if bad_count > 0:
        raise CountOverflow(
            format_error(
                dataset,
                "Count out of range",
                f"flag '{name}' must be in [0, {upper}]",
                np.flatnonzero(bad).tolist(),
                bad_count,
            )
        )


def require_separator(sep: str | None) -> str:
    """Raise ValueError unless sep can delimit bit groups unambiguously."""
    if not sep:
        raise ValueError("A non-empty separator is required in lookup-table mode")
    if "0" in sep or "1" in sep:
        raise ValueError(f"Separator must not contain '0' or '1', got {sep!r}")
    return sep
