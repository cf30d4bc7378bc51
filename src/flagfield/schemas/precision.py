"""Floating-point bit layouts for numeric flags.

Each precision class is described by its sign/exponent/mantissa widths and
exponent bias. The layouts follow IEEE 754 binary16/32/64:

    half:   1 | 5  | 10   bias 15
    single: 1 | 8  | 23   bias 127
    double: 1 | 11 | 52   bias 1023
"""

from __future__ import annotations

from dataclasses import dataclass

from flagfield.errors import UnknownPrecision


@dataclass(frozen=True)
class PrecisionSpec:
    """Bit layout of one floating-point precision class.

    Attributes:
        name: Canonical precision name (e.g., "half")
        sign_bits: Number of sign bits (always 1)
        exponent_bits: Width of the stored exponent
        mantissa_bits: Width of the stored fraction (leading 1 is implicit)
        bias: Constant added to the true exponent before storage
    """

    name: str
    sign_bits: int
    exponent_bits: int
    mantissa_bits: int
    bias: int

    def __post_init__(self) -> None:
        if self.sign_bits != 1:
            raise ValueError(f"sign_bits must be 1, got {self.sign_bits}")
        if self.bias != 2 ** (self.exponent_bits - 1) - 1:
            raise ValueError(
                f"bias ({self.bias}) must be 2^(exponent_bits - 1) - 1 "
                f"for exponent_bits={self.exponent_bits}"
            )

    @property
    def total_width(self) -> int:
        return self.sign_bits + self.exponent_bits + self.mantissa_bits

    @property
    def max_exponent(self) -> int:
        """Reserved all-ones exponent pattern (infinity / NaN)."""
        return (1 << self.exponent_bits) - 1


HALF = PrecisionSpec("half", 1, 5, 10, 15)
SINGLE = PrecisionSpec("single", 1, 8, 23, 127)
DOUBLE = PrecisionSpec("double", 1, 11, 52, 1023)

PRECISIONS: dict[str, PrecisionSpec] = {
    "half": HALF,
    "single": SINGLE,
    "double": DOUBLE,
}

# numpy-style names map onto the same layouts
_ALIASES = {
    "float16": "half",
    "float32": "single",
    "float64": "double",
}


def spec_for(name: str) -> PrecisionSpec:
    """Look up the bit layout for a precision name.

    Args:
        name: Precision name ("half", "single", "double") or numpy alias

    Returns:
        PrecisionSpec for that precision

    Raises:
        UnknownPrecision: If the name is not recognized
    """
    key = str(name).lower()
    key = _ALIASES.get(key, key)
    if key not in PRECISIONS:
        raise UnknownPrecision(
            f"Unknown precision {name!r}; expected one of "
            f"{sorted(PRECISIONS) + sorted(_ALIASES)}"
        )
    return PRECISIONS[key]
