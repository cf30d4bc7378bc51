"""Bit-range registry: the layout of one bitfield.

Key components:
    - Registry: Immutable, ordered flag catalog
    - create_registry / append: Build a layout flag by flag
    - describe / registry_frame: Human-readable summaries

Example usage:
    from flagfield.registry import create_registry
    from flagfield.schemas import Binary, Numeric

    reg = create_registry("qa", "Quality flags")
    reg = reg.append("missing", Binary())
    reg = reg.append("value", Numeric("half"))
    print(describe(reg))
"""

from flagfield.registry.registry import Registry, append, create_registry
from flagfield.registry.report import (
    describe,
    print_registry_summary,
    registry_frame,
)

__all__ = [
    "Registry",
    "create_registry",
    "append",
    "describe",
    "registry_frame",
    "print_registry_summary",
]
