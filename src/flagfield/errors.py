"""Error taxonomy for bitfield layout, encoding and decoding.

Every error is a ValueError: they all describe a configuration or data-shape
defect that has to be fixed upstream. Nothing here is retried.
"""

from __future__ import annotations


class FlagFieldError(ValueError):
    """Base class for all bitfield errors."""


class DuplicateFlagName(FlagFieldError):
    """A flag with the same name already exists in the registry."""


class BitRangeCollision(FlagFieldError):
    """An explicit position overlaps the bit range of an existing flag."""


class BitRangeGap(FlagFieldError):
    """An explicit position would leave bits that no flag owns."""


class UnknownPrecision(FlagFieldError):
    """The requested floating-point precision is not supported."""


class CountOverflow(FlagFieldError):
    """A count value does not fit the range fixed for its flag."""


class MissingValue(FlagFieldError):
    """A missing value was seen by a flag that reserves no NA sentinel."""


class CaseOverlap(FlagFieldError):
    """More than one case predicate was true under the "error" overlap rule."""


class MissingColumn(FlagFieldError):
    """A registered flag has no raw column to encode."""


class LengthMismatch(FlagFieldError):
    """Raw columns do not all have the same number of records."""


class FieldWidthExceeded(FlagFieldError):
    """The layout needs more bits than the configured maximum width."""


class RegistryFieldMismatch(FlagFieldError):
    """An encoded field was produced with a different layout than the registry."""


class IndexMismatch(FlagFieldError):
    """Raw pandas columns carry different indexes, so records would misalign."""
