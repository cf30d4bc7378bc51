"""Bit-range registry for one bitfield layout.

A Registry is the ordered catalog of flags and the bit ranges they own.
It grows append-only: every append returns a new Registry and leaves the
original untouched, so a failed append never leaves a half-updated layout.

Layout rules:
- Ranges are counted from the most significant bit (position 0 is leftmost)
- Flags are placed right after the last occupied bit unless an explicit
  position is requested
- Ranges are pairwise disjoint and together cover [0, total_width)
- total_width never exceeds max_width
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Iterator

from flagfield.config import DEFAULT_CONFIG, FieldConfig
from flagfield.errors import (
    BitRangeCollision,
    BitRangeGap,
    DuplicateFlagName,
    FieldWidthExceeded,
)
from flagfield.schemas.flags import (
    FlagDefinition,
    FlagKind,
    flag_width,
    resolve_na_sentinel,
)


@dataclass(frozen=True)
class Registry:
    """Ordered, immutable collection of flag definitions.

    Attributes:
        name: Registry name
        description: Free-text description
        flags: Flag definitions in declaration order
        max_width: Largest total width this layout may grow to
    """

    name: str
    description: str = ""
    flags: tuple[FlagDefinition, ...] = field(default_factory=tuple)
    max_width: int = DEFAULT_CONFIG.max_width

    def __post_init__(self) -> None:
        self._check_layout()

    def _check_layout(self) -> None:
        """Verify that ranges are disjoint, gap-free and within max_width."""
        names = [f.name for f in self.flags]
        if len(set(names)) != len(names):
            dupes = sorted({n for n in names if names.count(n) > 1})
            raise DuplicateFlagName(f"[{self.name}] Duplicate flag names: {dupes}")

        cursor = 0
        for flag in sorted(self.flags, key=lambda f: f.start):
            if flag.start < cursor:
                raise BitRangeCollision(
                    f"[{self.name}] Flag '{flag.name}' bits [{flag.start}, {flag.end}) "
                    f"overlap an earlier flag"
                )
            if flag.start > cursor:
                raise BitRangeGap(
                    f"[{self.name}] Bits [{cursor}, {flag.start}) are not owned by any flag"
                )
            cursor = flag.end

        if cursor > self.max_width:
            raise FieldWidthExceeded(
                f"[{self.name}] Layout needs {cursor} bits, max_width is {self.max_width}"
            )

    @property
    def total_width(self) -> int:
        """Number of bits one encoded record needs."""
        return max((f.end for f in self.flags), default=0)

    @property
    def names(self) -> list[str]:
        return [f.name for f in self.flags]

    def __len__(self) -> int:
        return len(self.flags)

    def __iter__(self) -> Iterator[FlagDefinition]:
        return iter(self.flags)

    def __contains__(self, name: object) -> bool:
        return name in self.names

    def __getitem__(self, name: str) -> FlagDefinition:
        for flag in self.flags:
            if flag.name == name:
                return flag
        raise KeyError(f"[{self.name}] No flag named {name!r}")

    def append(
        self,
        name: str,
        kind: FlagKind,
        position: int | None = None,
        na_sentinel: int | bool | None = None,
        description: str = "",
    ) -> Registry:
        """Return a new registry with one more flag. See append()."""
        return append(self, name, kind, position, na_sentinel, description)

    def to_dict(self) -> dict[str, Any]:
        """Convert registry to dictionary for JSON serialization."""
        return {
            "name": self.name,
            "description": self.description,
            "max_width": self.max_width,
            "total_width": self.total_width,
            "flags": [f.to_dict() for f in self.flags],
        }

    def to_json(self, indent: int = 2) -> str:
        """Serialize registry to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    def save(self, path: Path | str) -> Path:
        """Save registry layout to JSON file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.to_json())
        return path

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Registry:
        """Create registry from dictionary.

        The layout is re-validated, so a tampered file fails loudly.
        """
        d = d.copy()
        d.pop("total_width", None)
        d["flags"] = tuple(FlagDefinition.from_dict(f) for f in d.get("flags", []))
        return cls(**d)

    @classmethod
    def from_json(cls, json_str: str) -> Registry:
        """Create registry from JSON string."""
        return cls.from_dict(json.loads(json_str))

    @classmethod
    def load(cls, path: Path | str) -> Registry:
        """Load registry layout from JSON file."""
        path = Path(path)
        return cls.from_json(path.read_text())


def create_registry(
    name: str,
    description: str = "",
    config: FieldConfig | None = None,
) -> Registry:
    """Create an empty registry.

    Args:
        name: Registry name
        description: Free-text description
        config: Field configuration (max_width); defaults to DEFAULT_CONFIG

    Returns:
        Registry with no flags and total_width 0
    """
    config = config or DEFAULT_CONFIG
    return Registry(name=name, description=description, max_width=config.max_width)


def append(
    registry: Registry,
    name: str,
    kind: FlagKind,
    position: int | None = None,
    na_sentinel: int | bool | None = None,
    description: str = "",
) -> Registry:
    """Return a new registry with one additional flag.

    Args:
        registry: Registry to grow (not modified)
        name: Flag name, unique within the registry
        kind: Flag kind; decides the width
        position: Explicit start bit; must equal the current end of the layout
            (earlier positions collide, later ones leave unowned bits)
        na_sentinel: None for no sentinel, True for the default pattern, or
            an explicit bit pattern (binary and count flags only)
        description: Free-text description for reports

    Returns:
        New Registry with the flag appended

    Raises:
        DuplicateFlagName: If name is already present
        BitRangeCollision: If position overlaps an existing flag
        BitRangeGap: If position is past the current end
        FieldWidthExceeded: If the layout would exceed max_width
    """
    if name in registry:
        raise DuplicateFlagName(f"[{registry.name}] Flag {name!r} already exists")

    sentinel = resolve_na_sentinel(kind, na_sentinel)
    width = flag_width(kind, sentinel)
    end = registry.total_width

    if position is None:
        start = end
    else:
        if position < 0:
            raise ValueError(f"position must be >= 0, got {position}")
        clashes = [f.name for f in registry.flags if f.overlaps(position, width)]
        if clashes:
            raise BitRangeCollision(
                f"[{registry.name}] Flag {name!r} bits [{position}, {position + width}) "
                f"overlap {clashes}"
            )
        if position > end:
            raise BitRangeGap(
                f"[{registry.name}] Flag {name!r} at position {position} would leave "
                f"bits [{end}, {position}) unowned"
            )
        start = position

    if start + width > registry.max_width:
        raise FieldWidthExceeded(
            f"[{registry.name}] Flag {name!r} needs bits [{start}, {start + width}), "
            f"max_width is {registry.max_width}"
        )

    definition = FlagDefinition(
        name=name,
        kind=kind,
        start=start,
        width=width,
        na_sentinel=sentinel,
        description=description,
    )
    return replace(registry, flags=registry.flags + (definition,))
