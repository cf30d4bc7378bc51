"""Binary flag codec.

True encodes as 1 and False as 0. A flag may reserve a sentinel pattern for
records whose source datum is missing, so "not tested" stays distinct from
both outcomes.
"""

from __future__ import annotations

from typing import Any, Iterable, Sequence

import numpy as np
import pandas as pd

from flagfield.errors import MissingValue
from flagfield.schemas.validate import format_error, is_na


class BinaryCodec:
    """Codec for Binary flags.

    Args:
        width: Flag width (1, or 2+ when a sentinel is reserved)
        na_sentinel: Bit pattern emitted for missing values, or None
        na_value: Extra raw value treated as missing (None/NaN always are)
        name: Flag name for error messages
    """

    def __init__(
        self,
        width: int = 1,
        na_sentinel: int | None = None,
        na_value: Any = None,
        name: str = "binary",
    ) -> None:
        self.width = width
        self.na_sentinel = na_sentinel
        self.na_value = na_value
        self.name = name

    def is_missing(self, raw: Any) -> bool:
        if is_na(raw):
            return True
        if self.na_value is None:
            return False
        return bool(raw == self.na_value)

    def encode(self, raw: Any) -> int:
        if self.is_missing(raw):
            if self.na_sentinel is None:
                raise MissingValue(
                    f"Flag '{self.name}' got a missing value but reserves no NA sentinel"
                )
            return self.na_sentinel
        return 1 if bool(raw) else 0

    def decode(self, bits: int) -> Any:
        if self.na_sentinel is not None and bits == self.na_sentinel:
            return pd.NA
        return bits != 0

    def encode_column(self, values: Iterable[Any]) -> list[int]:
        values = list(values)
        missing = np.array([self.is_missing(v) for v in values], dtype=bool)
        if self.na_sentinel is None and missing.any():
            raise MissingValue(
                format_error(
                    self.name,
                    "Missing values",
                    "flag reserves no NA sentinel",
                    np.flatnonzero(missing).tolist(),
                    int(missing.sum()),
                )
            )
        return [
            self.na_sentinel if miss else (1 if bool(v) else 0)
            for v, miss in zip(values, missing)
        ]

    def decode_column(self, codes: Sequence[int]) -> pd.Series:
        return pd.Series([self.decode(int(c)) for c in codes], dtype="boolean")
