"""Configuration settings for bitfield encoding.

FieldConfig carries the few knobs that are not part of a registry layout:
the widest integer the caller's storage can hold and the default precision
for numeric flags.
"""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any

from flagfield.schemas.precision import PRECISIONS

# Widest field that still fits a native unsigned integer column
NATIVE_MAX_WIDTH = 64

# Hard ceiling for Python-int (object dtype) fields
ABSOLUTE_MAX_WIDTH = 1024


@dataclass
class FieldConfig:
    """Configuration for building, encoding and decoding bitfields.

    Attributes:
        max_width: Maximum number of bits one encoded record may use (default 64)
        default_precision: Precision used by numeric flags when none is given
        verbose: Whether encode/decode print progress
    """

    max_width: int = NATIVE_MAX_WIDTH
    default_precision: str = "half"
    verbose: bool = False

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        self._validate()

    def _validate(self) -> None:
        """Validate all configuration parameters."""
        errors = []

        if not 1 <= self.max_width <= ABSOLUTE_MAX_WIDTH:
            errors.append(
                f"max_width must be in [1, {ABSOLUTE_MAX_WIDTH}], got {self.max_width}"
            )

        if self.default_precision not in PRECISIONS:
            errors.append(
                f"default_precision must be one of {sorted(PRECISIONS)}, "
                f"got {self.default_precision!r}"
            )

        if errors:
            raise ValueError("FieldConfig validation failed:\n  - " + "\n  - ".join(errors))

    def to_dict(self) -> dict[str, Any]:
        """Convert config to dictionary for JSON serialization."""
        return asdict(self)

    def to_json(self, indent: int = 2) -> str:
        """Serialize config to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    def save(self, path: Path | str) -> Path:
        """Save config to JSON file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.to_json())
        return path

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> FieldConfig:
        """Create config from dictionary."""
        return cls(**d)

    @classmethod
    def from_json(cls, json_str: str) -> FieldConfig:
        """Create config from JSON string."""
        return cls.from_dict(json.loads(json_str))

    @classmethod
    def load(cls, path: Path | str) -> FieldConfig:
        """Load config from JSON file."""
        path = Path(path)
        return cls.from_json(path.read_text())


DEFAULT_CONFIG = FieldConfig()
