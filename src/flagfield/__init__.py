"""Compact QA bitfields: pack per-record test outcomes into one integer.

Every record (table row or raster cell) gets a single fixed-width integer
whose bit ranges hold the outcomes of a sequence of tests: binary checks,
case matches, counts and real values. A registry records which flag owns
which bits, so the decoder can rebuild every outcome later.

Key components:
    - Registry: Layout of flags and their bit ranges
    - FlagBuilder: Grows a registry together with its raw columns
    - encode / decode: Pack and unpack bitfield columns
    - checks: Vectorized helpers producing raw flag columns

Example usage:
    from flagfield import FlagBuilder, decode

    builder = FlagBuilder("qa", "Hourly temperature QA")
    builder.binary("missing", df["temp_c"].isna())
    builder.numeric("temp", df["temp_c"], precision="half")
    field = builder.encode()

    flags = decode(field, builder.registry)
"""

from flagfield.build import FlagBuilder
from flagfield.codecs import NO_CASE, create_codec, fit_count
from flagfield.config import DEFAULT_CONFIG, FieldConfig
from flagfield.decode import decode
from flagfield.encode import EncodedField, encode
from flagfield.errors import (
    BitRangeCollision,
    BitRangeGap,
    CaseOverlap,
    CountOverflow,
    DuplicateFlagName,
    FieldWidthExceeded,
    FlagFieldError,
    IndexMismatch,
    LengthMismatch,
    MissingColumn,
    MissingValue,
    RegistryFieldMismatch,
    UnknownPrecision,
)
from flagfield.registry import (
    Registry,
    append,
    create_registry,
    describe,
    print_registry_summary,
    registry_frame,
)
from flagfield.schemas import (
    Binary,
    Case,
    Count,
    FlagDefinition,
    Numeric,
    PrecisionSpec,
    spec_for,
)

__all__ = [
    # Config
    "FieldConfig",
    "DEFAULT_CONFIG",
    # Schemas
    "PrecisionSpec",
    "spec_for",
    "Binary",
    "Case",
    "Count",
    "Numeric",
    "FlagDefinition",
    # Registry
    "Registry",
    "create_registry",
    "append",
    "describe",
    "registry_frame",
    "print_registry_summary",
    # Codecs
    "NO_CASE",
    "create_codec",
    "fit_count",
    # Encode / decode
    "EncodedField",
    "encode",
    "decode",
    # Builder
    "FlagBuilder",
    # Errors
    "FlagFieldError",
    "DuplicateFlagName",
    "BitRangeCollision",
    "BitRangeGap",
    "UnknownPrecision",
    "CountOverflow",
    "MissingValue",
    "CaseOverlap",
    "MissingColumn",
    "LengthMismatch",
    "IndexMismatch",
    "FieldWidthExceeded",
    "RegistryFieldMismatch",
]
