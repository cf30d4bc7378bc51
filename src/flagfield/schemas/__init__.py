"""Schema definitions for bitfield layouts.

This package defines the contract layer - what a flag and its bit layout
look like. Nothing here encodes data, it only defines structure.

Schemas:
- precision: Floating-point bit layouts per precision class
- flags: Flag kinds and flag definitions
- validate: Validation helpers for raw columns
"""

from flagfield.schemas.flags import (
    Binary,
    Case,
    Count,
    FlagDefinition,
    FlagKind,
    Numeric,
    flag_width,
    resolve_na_sentinel,
)
from flagfield.schemas.precision import (
    DOUBLE,
    HALF,
    PRECISIONS,
    SINGLE,
    PrecisionSpec,
    spec_for,
)
from flagfield.schemas.validate import (
    format_error,
    is_na,
    require_columns,
    require_equal_length,
    require_nonnegative_int,
    require_separator,
)

__all__ = [
    # Precision
    "PrecisionSpec",
    "HALF",
    "SINGLE",
    "DOUBLE",
    "PRECISIONS",
    "spec_for",
    # Flags
    "Binary",
    "Case",
    "Count",
    "Numeric",
    "FlagKind",
    "FlagDefinition",
    "flag_width",
    "resolve_na_sentinel",
    # Validation helpers
    "format_error",
    "is_na",
    "require_columns",
    "require_equal_length",
    "require_nonnegative_int",
    "require_separator",
]
