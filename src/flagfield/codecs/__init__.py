"""Per-kind flag codecs.

Each flag kind has a codec that turns one raw value into the bit pattern of
its flag and back:

- BinaryCodec: booleans, optional NA sentinel
- CaseCodec: first matching predicate, reserved no-case code
- CountCodec: zero-padded non-negative integers
- NumericCodec: sign/exponent/mantissa packing

create_codec builds the codec for a registry flag definition.
"""

from __future__ import annotations

from flagfield.codecs.base import FlagCodec, as_bits
from flagfield.codecs.binary import BinaryCodec
from flagfield.codecs.case import NO_CASE, CaseCodec, case_rows
from flagfield.codecs.count import CountCodec, fit_count
from flagfield.codecs.numeric import NumericCodec, pack_float, unpack_float
from flagfield.schemas.flags import Binary, Case, Count, FlagDefinition, Numeric


def create_codec(definition: FlagDefinition) -> FlagCodec:
    """Factory function to create the codec for a flag definition.

    Args:
        definition: Registry flag definition

    Returns:
        Codec whose width matches the definition
    """
    kind = definition.kind
    if isinstance(kind, Binary):
        return BinaryCodec(
            width=definition.width,
            na_sentinel=definition.na_sentinel,
            name=definition.name,
        )
    if isinstance(kind, Case):
        return CaseCodec(kind, name=definition.name)
    if isinstance(kind, Count):
        return CountCodec(kind, na_sentinel=definition.na_sentinel, name=definition.name)
    if isinstance(kind, Numeric):
        return NumericCodec(kind, name=definition.name)
    raise TypeError(f"Unsupported flag kind: {type(kind)}")


__all__ = [
    "FlagCodec",
    "as_bits",
    "BinaryCodec",
    "CaseCodec",
    "CountCodec",
    "NumericCodec",
    "NO_CASE",
    "case_rows",
    "fit_count",
    "pack_float",
    "unpack_float",
    "create_codec",
]
