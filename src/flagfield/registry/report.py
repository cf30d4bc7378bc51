"""Human-readable registry summaries."""

from __future__ import annotations

import pandas as pd

from flagfield.registry.registry import Registry

REPORT_COLUMNS = ["flag", "kind", "start", "end", "width", "na_sentinel", "description"]


def registry_frame(registry: Registry) -> pd.DataFrame:
    """Summarize a registry as one row per flag.

    Args:
        registry: Registry to summarize

    Returns:
        DataFrame with REPORT_COLUMNS, in declaration order
    """
    rows = [
        {
            "flag": f.name,
            "kind": f.kind.label(),
            "start": f.start,
            "end": f.end,
            "width": f.width,
            "na_sentinel": pd.NA if f.na_sentinel is None else f.na_sentinel,
            "description": f.description,
        }
        for f in registry.flags
    ]
    return pd.DataFrame(rows, columns=REPORT_COLUMNS)


def describe(registry: Registry) -> str:
    """Render a text report of a registry (name, kind, bit range, description).

    Bit ranges are inclusive and counted from the most significant bit.
    """
    lines = [f"registry: {registry.name}"]
    if registry.description:
        lines.append(f"  {registry.description}")
    lines.append(f"  width: {registry.total_width} bits ({len(registry)} flags)")

    if not registry.flags:
        lines.append("  (no flags)")
        return "\n".join(lines)

    name_w = max(len(f.name) for f in registry.flags)
    kind_w = max(len(f.kind.label()) for f in registry.flags)
    for f in registry.flags:
        bits = f"bits {f.start}-{f.end - 1}"
        line = f"  {f.name:<{name_w}}  {f.kind.label():<{kind_w}}  {bits:<12}"
        if f.na_sentinel is not None:
            line += f"  na={format(f.na_sentinel, f'0{f.width}b')}"
        if f.description:
            line += f"  {f.description}"
        lines.append(line.rstrip())
    return "\n".join(lines)


def print_registry_summary(registry: Registry) -> None:
    """Print describe(registry) with the registry stage prefix."""
    print("[registry] Layout summary:")
    for line in describe(registry).splitlines():
        print(f"  {line}")
