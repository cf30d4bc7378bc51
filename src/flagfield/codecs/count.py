"""Count flag codec.

Counts are written as plain zero-padded binary. The flag width is fixed
from the largest value in the column (see fit_count), so a count column is
encoded in two phases: a reduction pass that sizes the flag, then the
per-record encode pass.
"""

from __future__ import annotations

from typing import Any, Iterable, Sequence

import pandas as pd

from flagfield.errors import CountOverflow, MissingValue
from flagfield.schemas.flags import Count, flag_width
from flagfield.schemas.validate import format_error, is_na, require_nonnegative_int


def fit_count(values: Iterable[Any], name: str = "count") -> Count:
    """Reduction pass: size a count flag from the maximum of its column.

    Missing values are ignored. An empty or all-missing column gives
    max_value 0 (a 1-bit flag).

    Raises:
        CountOverflow: If the column holds negative values
    """
    values = list(values)
    require_nonnegative_int(values, name, dataset=name)
    present = [int(v) for v in values if not is_na(v)]
    return Count(max_value=max(present, default=0))


class CountCodec:
    """Codec for Count flags.

    Args:
        kind: Count kind carrying the fitted max_value
        na_sentinel: Bit pattern emitted for missing values, or None
        name: Flag name for error messages
    """

    def __init__(
        self,
        kind: Count,
        na_sentinel: int | None = None,
        name: str = "count",
    ) -> None:
        self.kind = kind
        self.na_sentinel = na_sentinel
        self.width = flag_width(kind, na_sentinel)
        self.name = name

    def encode(self, raw: Any) -> int:
        if is_na(raw):
            if self.na_sentinel is None:
                raise MissingValue(
                    f"Flag '{self.name}' got a missing value but reserves no NA sentinel"
                )
            return self.na_sentinel
        value = int(raw)
        if value != raw:
            raise ValueError(f"Flag '{self.name}': count {raw!r} is not an integer")
        if not 0 <= value <= self.kind.max_value:
            raise CountOverflow(
                f"Flag '{self.name}': count {value} outside [0, {self.kind.max_value}]"
            )
        return value

    def decode(self, bits: int) -> Any:
        if self.na_sentinel is not None and bits == self.na_sentinel:
            return pd.NA
        return bits

    def encode_column(self, values: Iterable[Any]) -> list[int]:
        values = list(values)
        require_nonnegative_int(values, self.name, self.kind.max_value, dataset=self.name)
        if self.na_sentinel is None:
            missing = [i for i, v in enumerate(values) if is_na(v)]
            if missing:
                raise MissingValue(
                    format_error(
                        self.name,
                        "Missing values",
                        "flag reserves no NA sentinel",
                        missing,
                        len(missing),
                    )
                )
        return [self.encode(v) for v in values]

    def decode_column(self, codes: Sequence[int]) -> pd.Series:
        return pd.Series([self.decode(int(c)) for c in codes], dtype="Int64")
