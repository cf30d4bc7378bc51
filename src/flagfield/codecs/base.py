"""Codec interface shared by all flag kinds.

A codec converts one raw value to the integer bit pattern of its flag and
back. Column helpers work on whole columns so errors can report every
failing row at once.
"""

from __future__ import annotations

from typing import Any, Iterable, Protocol, Sequence, runtime_checkable

import pandas as pd


@runtime_checkable
class FlagCodec(Protocol):
    """Protocol for flag codecs.

    Bit patterns are plain non-negative ints of exactly the flag's width.
    """

    width: int

    def encode(self, raw: Any) -> int:
        """Encode one raw value to a bit pattern."""
        ...

    def decode(self, bits: int) -> Any:
        """Decode one bit pattern back to a value."""
        ...

    def encode_column(self, values: Iterable[Any]) -> list[int]:
        """Encode a whole raw column."""
        ...

    def decode_column(self, codes: Sequence[int]) -> pd.Series:
        """Decode a column of bit patterns into a typed Series."""
        ...


def as_bits(code: int, width: int) -> str:
    """Render a bit pattern as a zero-padded, most-significant-first string."""
    return format(code, f"0{width}b")
