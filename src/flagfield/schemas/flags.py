"""Flag kinds and flag definitions.

A flag is one named, typed region of a bitfield. Its kind decides how many
bits it needs:

- Binary: 1 bit (2 bits when a missing-value sentinel is reserved)
- Case: enough bits for case_count codes plus one reserved "no case" code
- Count: enough bits for the largest observed value
- Numeric: the full width of the chosen floating-point precision

Bit positions are counted from the most significant end of the field, so
position 0 is the leftmost bit and the first declared flag reads first.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal, Union

from flagfield.schemas.precision import PrecisionSpec, spec_for

OverlapRule = Literal["first", "last", "error"]

OVERLAP_RULES = ("first", "last", "error")

# Default missing-value pattern for a sentinel-carrying binary flag
BINARY_NA_SENTINEL = 0b11


@dataclass(frozen=True)
class Binary:
    """True/false test outcome."""

    kind_name = "binary"

    def label(self) -> str:
        return "binary"


@dataclass(frozen=True)
class Case:
    """Index of the first matching case among an ordered set of predicates.

    Attributes:
        case_count: Number of predicates (cases)
        exclusive: Whether the predicates are declared mutually exclusive
        overlap: Rule for several true predicates in non-exclusive mode
            ("first", "last" or "error"); exclusive mode always uses "first"
    """

    case_count: int
    exclusive: bool = True
    overlap: OverlapRule = "first"

    kind_name = "case"

    def __post_init__(self) -> None:
        if self.case_count < 1:
            raise ValueError(f"case_count must be >= 1, got {self.case_count}")
        if self.overlap not in OVERLAP_RULES:
            raise ValueError(
                f"overlap must be one of {OVERLAP_RULES}, got {self.overlap!r}"
            )

    @property
    def no_case_code(self) -> int:
        """Reserved code for records where no predicate is true."""
        return (1 << self.case_count.bit_length()) - 1

    def label(self) -> str:
        mode = "exclusive" if self.exclusive else f"non-exclusive/{self.overlap}"
        return f"case({self.case_count}, {mode})"


@dataclass(frozen=True)
class Count:
    """Bounded non-negative integer.

    Attributes:
        max_value: Largest value the flag must hold (fixed from the data)
    """

    max_value: int

    kind_name = "count"

    def __post_init__(self) -> None:
        if self.max_value < 0:
            raise ValueError(f"max_value must be >= 0, got {self.max_value}")

    def label(self) -> str:
        return f"count(max={self.max_value})"


@dataclass(frozen=True)
class Numeric:
    """Real value stored in a sign/exponent/mantissa layout.

    Attributes:
        precision: Precision name ("half", "single", "double")
    """

    precision: str = "half"

    kind_name = "numeric"

    def __post_init__(self) -> None:
        # Fail early on unknown precisions
        spec_for(self.precision)

    @property
    def spec(self) -> PrecisionSpec:
        return spec_for(self.precision)

    def label(self) -> str:
        return f"numeric({self.spec.name})"


FlagKind = Union[Binary, Case, Count, Numeric]


def default_na_sentinel(kind: FlagKind) -> int:
    """Return the sentinel pattern used when a flag asks for one without a value.

    Raises:
        ValueError: If the kind cannot reserve a sentinel
    """
    if isinstance(kind, Binary):
        return BINARY_NA_SENTINEL
    if isinstance(kind, Count):
        width = max(1, (kind.max_value + 1).bit_length())
        return (1 << width) - 1
    raise ValueError(
        f"{kind.label()} flags cannot reserve an NA sentinel; "
        "case flags use the no-case code and numeric flags use NaN"
    )


def resolve_na_sentinel(kind: FlagKind, na_sentinel: int | bool | None) -> int | None:
    """Validate a requested NA sentinel.

    Args:
        kind: Flag kind
        na_sentinel: None/False for no sentinel, True for the default pattern,
            or an explicit non-negative bit pattern

    Returns:
        The sentinel pattern, or None

    Raises:
        ValueError: If the pattern collides with a regular value
    """
    if na_sentinel is None or na_sentinel is False:
        return None
    if na_sentinel is True:
        return default_na_sentinel(kind)

    sentinel = int(na_sentinel)
    if sentinel < 0:
        raise ValueError(f"na_sentinel must be >= 0, got {sentinel}")
    if isinstance(kind, Binary) and sentinel in (0, 1):
        raise ValueError("na_sentinel for a binary flag must differ from 0 and 1")
    if isinstance(kind, Count) and sentinel <= kind.max_value:
        raise ValueError(
            f"na_sentinel ({sentinel}) must be greater than max_value ({kind.max_value})"
        )
    if isinstance(kind, (Case, Numeric)):
        default_na_sentinel(kind)
    return sentinel


def flag_width(kind: FlagKind, na_sentinel: int | None = None) -> int:
    """Number of bits a flag of this kind occupies."""
    if isinstance(kind, Binary):
        if na_sentinel is None:
            return 1
        return max(2, na_sentinel.bit_length())
    if isinstance(kind, Case):
        # ceil(log2(case_count + 1)): one code is reserved for "no case"
        return max(1, kind.case_count.bit_length())
    if isinstance(kind, Count):
        top = kind.max_value if na_sentinel is None else max(kind.max_value, na_sentinel)
        return max(1, top.bit_length())
    if isinstance(kind, Numeric):
        return kind.spec.total_width
    raise TypeError(f"Unsupported flag kind: {type(kind)}")


@dataclass(frozen=True)
class FlagDefinition:
    """One flag of a registry.

    Attributes:
        name: Flag name, unique within its registry
        kind: Flag kind (Binary, Case, Count, Numeric)
        start: First bit position, counted from the most significant end
        width: Number of bits
        na_sentinel: Bit pattern reserved for missing values, if any
        description: Free-text description for reports
    """

    name: str
    kind: FlagKind
    start: int
    width: int
    na_sentinel: int | None = None
    description: str = ""

    @property
    def end(self) -> int:
        """One past the last bit position."""
        return self.start + self.width

    @property
    def mask(self) -> int:
        return (1 << self.width) - 1

    def shift(self, total_width: int) -> int:
        """Left shift that places this flag's bits inside a total_width field."""
        return total_width - self.end

    def overlaps(self, start: int, width: int) -> bool:
        return start < self.end and self.start < start + width

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "kind": kind_to_dict(self.kind),
            "start": self.start,
            "width": self.width,
            "na_sentinel": self.na_sentinel,
            "description": self.description,
        }

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> FlagDefinition:
        d = d.copy()
        d["kind"] = kind_from_dict(d["kind"])
        return cls(**d)


def kind_to_dict(kind: FlagKind) -> dict[str, Any]:
    """Serialize a flag kind for JSON."""
    if isinstance(kind, Binary):
        return {"type": "binary"}
    if isinstance(kind, Case):
        return {
            "type": "case",
            "case_count": kind.case_count,
            "exclusive": kind.exclusive,
            "overlap": kind.overlap,
        }
    if isinstance(kind, Count):
        return {"type": "count", "max_value": kind.max_value}
    if isinstance(kind, Numeric):
        return {"type": "numeric", "precision": kind.precision}
    raise TypeError(f"Unsupported flag kind: {type(kind)}")


def kind_from_dict(d: dict[str, Any]) -> FlagKind:
    """Rebuild a flag kind from its JSON form."""
    d = d.copy()
    kind_type = d.pop("type")
    if kind_type == "binary":
        return Binary()
    if kind_type == "case":
        return Case(**d)
    if kind_type == "count":
        return Count(**d)
    if kind_type == "numeric":
        return Numeric(**d)
    raise ValueError(f"Unknown flag kind type: {kind_type!r}")
