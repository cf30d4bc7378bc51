"""Numeric flag codec.

Real values are packed into a sign/exponent/mantissa layout taken from the
flag's precision (see flagfield.schemas.precision):

    value = (-1)^sign * 1.mantissa * 2^(exponent - bias)

- sign is set for negative values, including -0.0
- zero stores an all-zero exponent and mantissa
- exponents too large for the layout store the all-ones exponent with a
  zero mantissa (infinity)
- exponents too small store an all-zero exponent with a denormalized
  mantissa; magnitudes below the smallest subnormal flush to signed zero
- the mantissa is rounded to nearest, ties away from zero
- NaN (and missing values) store the all-ones exponent with the top
  mantissa bit set

Round trips are exact only for values whose mantissa fits the precision.
"""

from __future__ import annotations

import math
from typing import Any, Iterable, Sequence

import pandas as pd

from flagfield.schemas.flags import Numeric
from flagfield.schemas.precision import PrecisionSpec
from flagfield.schemas.validate import is_na


def _round_half_away(x: float) -> int:
    """Round a non-negative float to the nearest int, ties away from zero."""
    whole = math.floor(x)
    return whole + 1 if x - whole >= 0.5 else whole


def _as_float(value: Any) -> float:
    if is_na(value):
        return math.nan
    try:
        return float(value)
    except OverflowError:
        # Python ints beyond the double range
        return math.copysign(math.inf, value)


def pack_float(value: Any, spec: PrecisionSpec) -> int:
    """Encode a real value into the bit layout of spec.

    Args:
        value: Real value (None/NaN encode as NaN)
        spec: Target precision layout

    Returns:
        Bit pattern of spec.total_width bits
    """
    e_bits = spec.exponent_bits
    m_bits = spec.mantissa_bits
    max_exp = spec.max_exponent

    x = _as_float(value)
    if math.isnan(x):
        return (max_exp << m_bits) | (1 << (m_bits - 1))

    sign = 1 if math.copysign(1.0, x) < 0 else 0

    def assemble(exponent: int, mantissa: int) -> int:
        return (sign << (e_bits + m_bits)) | (exponent << m_bits) | mantissa

    a = abs(x)
    if math.isinf(a):
        return assemble(max_exp, 0)
    if a == 0:
        return assemble(0, 0)

    # a = frac * 2**exp2 with frac in [0.5, 1), i.e. 1.m * 2**(exp2 - 1)
    frac, exp2 = math.frexp(a)
    stored = exp2 - 1 + spec.bias

    if stored >= 1:
        q = _round_half_away(math.ldexp(frac, m_bits + 1))
        if q == 1 << (m_bits + 1):
            # Rounding carried out of the mantissa
            q >>= 1
            stored += 1
        if stored >= max_exp:
            return assemble(max_exp, 0)
        return assemble(stored, q - (1 << m_bits))

    # Subnormal: a = mantissa * 2**(1 - bias - m_bits)
    scaled = math.ldexp(a, spec.bias - 1 + m_bits)
    if scaled < 1.0:
        return assemble(0, 0)
    q = _round_half_away(scaled)
    if q == 1 << m_bits:
        return assemble(1, 0)
    return assemble(0, q)


def unpack_float(bits: int, spec: PrecisionSpec) -> float:
    """Decode a bit pattern produced by pack_float."""
    e_bits = spec.exponent_bits
    m_bits = spec.mantissa_bits
    max_exp = spec.max_exponent

    sign = (bits >> (e_bits + m_bits)) & 1
    exponent = (bits >> m_bits) & max_exp
    mantissa = bits & ((1 << m_bits) - 1)

    if exponent == max_exp:
        magnitude = math.inf if mantissa == 0 else math.nan
    elif exponent == 0:
        magnitude = math.ldexp(mantissa, 1 - spec.bias - m_bits)
    else:
        magnitude = math.ldexp(mantissa + (1 << m_bits), exponent - spec.bias - m_bits)

    return -magnitude if sign else magnitude


class NumericCodec:
    """Codec for Numeric flags.

    Args:
        kind: Numeric kind naming the precision
        name: Flag name for error messages
    """

    def __init__(self, kind: Numeric, name: str = "numeric") -> None:
        self.kind = kind
        self.spec = kind.spec
        self.width = self.spec.total_width
        self.name = name

    def encode(self, raw: Any) -> int:
        return pack_float(raw, self.spec)

    def decode(self, bits: int) -> float:
        return unpack_float(bits, self.spec)

    def encode_column(self, values: Iterable[Any]) -> list[int]:
        return [pack_float(v, self.spec) for v in values]

    def decode_column(self, codes: Sequence[int]) -> pd.Series:
        return pd.Series([self.decode(int(c)) for c in codes], dtype="float64")
