"""Decode packed bitfields back into per-flag values.

Each flag's bits are cut out of the packed integer and handed to the flag's
codec. Lookup-table mode skips the codecs and returns the literal bit
groups joined by a separator, for audits by eye.
"""

from __future__ import annotations

from typing import Any, Sequence

import numpy as np
import pandas as pd

from flagfield.codecs import create_codec
from flagfield.encode import EncodedField
from flagfield.errors import RegistryFieldMismatch
from flagfield.registry import Registry
from flagfield.schemas.validate import format_error, require_separator


def _field_values(
    field: EncodedField | pd.Series | Sequence[int],
    width: int | None,
) -> tuple[list[int], pd.Index | None, int | None]:
    """Return (codes, index, declared width) for any supported field input."""
    if isinstance(field, EncodedField):
        declared = field.width if width is None else width
        return [int(v) for v in field.values], field.values.index, declared
    if isinstance(field, pd.Series):
        return [int(v) for v in field], field.index, width
    return [int(v) for v in field], None, width


def _check_width(codes: list[int], declared: int | None, registry: Registry) -> None:
    total = registry.total_width
    if declared is not None and declared != total:
        raise RegistryFieldMismatch(
            f"[{registry.name}] Field width {declared} does not match registry "
            f"width {total}"
        )

    bad = np.array([c < 0 or c.bit_length() > total for c in codes], dtype=bool)
    if bad.any():
        raise RegistryFieldMismatch(
            format_error(
                registry.name,
                "Field too wide",
                f"values do not fit the registry width of {total} bits",
                np.flatnonzero(bad).tolist(),
                int(bad.sum()),
            )
        )


def decode(
    field: EncodedField | pd.Series | Sequence[int],
    registry: Registry,
    lookup_table: bool = False,
    sep: str | None = None,
    width: int | None = None,
    verbose: bool = False,
) -> pd.DataFrame | pd.Series:
    """Reconstruct per-flag values from a packed bitfield.

    Args:
        field: EncodedField, or a plain integer column read back from storage
        registry: Registry layout the field was encoded with
        lookup_table: If True, return bit strings instead of typed values
        sep: Separator between flag bit groups (required in lookup-table
            mode; must not contain '0' or '1')
        width: Declared field width, when field is a plain column
        verbose: Whether to print progress

    Returns:
        DataFrame with one column per flag (typed mode), or a Series of
        separator-joined bit strings (lookup-table mode)

    Raises:
        RegistryFieldMismatch: If the field width differs from the registry's
        ValueError: If lookup-table mode gets an unusable separator
    """
    if lookup_table:
        sep = require_separator(sep)

    codes, index, declared = _field_values(field, width)
    _check_width(codes, declared, registry)
    total = registry.total_width

    if verbose:
        mode = "lookup table" if lookup_table else "typed values"
        print(f"[decode] Unpacking {len(codes)} records ({len(registry)} flags, {mode})...")

    if lookup_table:
        groups = [
            (flag.shift(total), flag.mask, flag.width) for flag in registry
        ]
        strings = [
            sep.join(format((code >> shift) & mask, f"0{w}b") for shift, mask, w in groups)
            for code in codes
        ]
        return pd.Series(strings, index=index, dtype=object, name=registry.name)

    data: dict[str, Any] = {}
    for flag in registry:
        shift = flag.shift(total)
        column = create_codec(flag).decode_column([(c >> shift) & flag.mask for c in codes])
        data[flag.name] = column.array

    if index is None:
        index = pd.RangeIndex(len(codes))
    decoded = pd.DataFrame(data, index=index, columns=registry.names)

    if verbose:
        print(f"[decode] Complete: {len(decoded)} records")

    return decoded
