"""Encode raw flag columns into one packed integer per record.

Encoding is two-phase:
1. Size the layout. Count flags need a reduction pass over their column
   (see flagfield.codecs.fit_count) before their width is known; the
   registry is final once every flag is appended.
2. Pack. Every record is encoded independently: each flag's codec turns the
   raw value into its bit pattern, which is shifted into the flag's range.
   The first declared flag lands in the most significant bits.

The whole batch either encodes or fails; no partial output is returned.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

import pandas as pd

from flagfield.codecs import case_rows, create_codec
from flagfield.config import DEFAULT_CONFIG, NATIVE_MAX_WIDTH, FieldConfig
from flagfield.errors import FieldWidthExceeded, IndexMismatch
from flagfield.registry import Registry
from flagfield.schemas.flags import Case
from flagfield.schemas.validate import require_columns, require_equal_length


@dataclass
class EncodedField:
    """Packed bitfield column.

    Attributes:
        values: One non-negative integer per record (uint64 when width <= 64,
            Python ints otherwise)
        width: Number of bits per record (the registry's total width)
        registry_name: Name of the registry that produced the field
    """

    values: pd.Series
    width: int
    registry_name: str = ""

    def __len__(self) -> int:
        return len(self.values)

    def to_bits(self) -> pd.Series:
        """Render every record as a zero-padded bit string."""
        return self.values.map(lambda v: format(int(v), f"0{self.width}b") if self.width else "")


def _column_index(columns: Mapping[str, Any], dataset: str) -> pd.Index | None:
    """Return the shared index of the pandas columns, if any.

    Records are joined by position, so every pandas column must carry the
    same index. Plain sequences are taken in order.
    """
    index = None
    first = None
    for name, col in columns.items():
        if not isinstance(col, (pd.Series, pd.DataFrame)):
            continue
        if index is None:
            index, first = col.index, name
        elif not col.index.equals(index):
            raise IndexMismatch(
                f"[{dataset}] Column '{name}' index does not match column '{first}'"
            )
    return index


def encode(
    registry: Registry,
    columns: Mapping[str, Any] | pd.DataFrame,
    config: FieldConfig | None = None,
    verbose: bool | None = None,
) -> EncodedField:
    """Pack one raw column per flag into a bitfield column.

    Args:
        registry: Final registry layout
        columns: Mapping (or DataFrame) of flag name to raw column. Case
            flags take a predicate table (DataFrame / 2-D array / rows) or
            resolved case indices.
        config: Field configuration (max_width, verbose); defaults to the
            registry's own max_width with verbose off
        verbose: Override config.verbose

    Returns:
        EncodedField with one integer per record

    Raises:
        FieldWidthExceeded: If the layout is wider than the width limit
        MissingColumn: If a flag has no column
        LengthMismatch: If columns differ in length
        IndexMismatch: If pandas columns carry different indexes
        CountOverflow, MissingValue, CaseOverlap: From the flag codecs
    """
    max_width = registry.max_width if config is None else config.max_width
    config = config or DEFAULT_CONFIG
    verbose = config.verbose if verbose is None else verbose
    total = registry.total_width

    if total > max_width:
        raise FieldWidthExceeded(
            f"[{registry.name}] Layout needs {total} bits, max_width is {max_width}"
        )

    if isinstance(columns, pd.DataFrame):
        columns = {name: columns[name] for name in columns.columns}

    require_columns(columns.keys(), registry.names, dataset=registry.name)
    selected = {name: columns[name] for name in registry.names}
    n_records = require_equal_length(selected, dataset=registry.name)
    index = _column_index(selected, registry.name)

    if verbose:
        print(f"[encode] Packing {n_records} records into {total} bits ({len(registry)} flags)...")

    packed = [0] * n_records
    for flag in registry:
        codec = create_codec(flag)
        raw = selected[flag.name]
        values = case_rows(raw) if isinstance(flag.kind, Case) else list(raw)
        codes = codec.encode_column(values)
        shift = flag.shift(total)
        packed = [acc | (code << shift) for acc, code in zip(packed, codes)]
        if verbose:
            print(f"[encode]   {flag.name}: bits {flag.start}-{flag.end - 1}")

    dtype = "uint64" if total <= NATIVE_MAX_WIDTH else object
    series = pd.Series(packed, index=index, dtype=dtype, name=registry.name)

    if verbose:
        print(f"[encode] Complete: {len(series)} records")

    return EncodedField(values=series, width=total, registry_name=registry.name)
