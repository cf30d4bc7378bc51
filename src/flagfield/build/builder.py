"""Build a bitfield layout and its raw columns together.

FlagBuilder is the explicit context object that carries everything the
encoder needs: the registry being grown and the raw column of every flag
added so far. Nothing is looked up from module-level state.

Usage:
    builder = FlagBuilder("qa", "Station QA flags")
    builder.binary("missing", df["temp_c"].isna())
    builder.case("quality", [df["qc"] == "good", df["qc"] == "fair", df["qc"] == "poor"])
    builder.count("run_length", df["run_length"])
    builder.numeric("value", df["temp_c"], precision="half")
    field = builder.encode()

The builder owns its registry exclusively. Once encode() has run the layout
is frozen and further flags are rejected.
"""

from __future__ import annotations

from typing import Any, Sequence

import numpy as np
import pandas as pd

from flagfield.codecs import fit_count
from flagfield.config import DEFAULT_CONFIG, FieldConfig
from flagfield.encode import EncodedField, encode
from flagfield.errors import CountOverflow, LengthMismatch
from flagfield.registry import Registry, create_registry, describe
from flagfield.schemas.flags import Binary, Case, Count, FlagDefinition, FlagKind, Numeric
from flagfield.schemas.validate import is_na, require_equal_length


def _mark_missing(values: Any, na_value: Any, source: Any = None) -> Any:
    """Replace records flagged by na_value with None so codecs see them as missing.

    na_value is compared against source when given (the datum the test was
    run on), otherwise against values themselves.
    """
    if na_value is None:
        return values
    reference = values if source is None else source
    hits = [not is_na(v) and bool(v == na_value) for v in reference]
    if len(hits) != len(values):
        raise LengthMismatch(
            f"source has {len(hits)} records but values have {len(values)}"
        )
    if isinstance(values, pd.Series):
        marked = values.astype(object)
        marked[np.array(hits, dtype=bool)] = None
        return marked
    return [None if hit else v for v, hit in zip(values, hits)]


def _predicate_table(predicates: Any) -> pd.DataFrame | np.ndarray:
    """Normalize predicates to a table with one boolean column per case.

    pandas inputs keep their index. Anything else becomes a 2-D array so the
    encoder joins it to the other columns by position.
    """
    if isinstance(predicates, pd.DataFrame):
        return predicates
    if isinstance(predicates, pd.Series):
        # A single predicate column
        return predicates.to_frame()
    if isinstance(predicates, np.ndarray):
        if predicates.ndim == 1:
            return predicates.reshape(-1, 1)
        if predicates.ndim != 2:
            raise ValueError(
                f"predicate array must be 1-D or 2-D, got shape {predicates.shape}"
            )
        return predicates
    columns = list(predicates)
    if not columns:
        raise ValueError("case flags need at least one predicate")
    if any(isinstance(p, pd.Series) for p in columns):
        columns = [p if isinstance(p, pd.Series) else pd.Series(p) for p in columns]
        return pd.concat(columns, axis=1, ignore_index=True)
    return np.column_stack([np.asarray(p, dtype=object) for p in columns])


class FlagBuilder:
    """Grows a registry and collects the raw column of each flag.

    Args:
        name: Registry name
        description: Registry description
        config: Field configuration (max_width, default precision, verbose)
    """

    def __init__(
        self,
        name: str,
        description: str = "",
        config: FieldConfig | None = None,
    ) -> None:
        self.config = config or DEFAULT_CONFIG
        self._registry = create_registry(name, description, self.config)
        self._columns: dict[str, Any] = {}
        self._frozen = False

    @property
    def registry(self) -> Registry:
        return self._registry

    @property
    def columns(self) -> dict[str, Any]:
        """Raw columns by flag name (a copy of the mapping)."""
        return dict(self._columns)

    @property
    def frozen(self) -> bool:
        return self._frozen

    def _add(
        self,
        name: str,
        kind: FlagKind,
        values: Any,
        position: int | None,
        na_sentinel: int | bool | None,
        description: str,
    ) -> FlagDefinition:
        if self._frozen:
            raise RuntimeError(
                f"[{self._registry.name}] Registry is frozen after encoding; "
                f"cannot add flag {name!r}"
            )
        require_equal_length({**self._columns, name: values}, dataset=self._registry.name)
        # append() returns a new registry, so a failure leaves the builder untouched
        self._registry = self._registry.append(
            name, kind, position=position, na_sentinel=na_sentinel, description=description
        )
        self._columns[name] = values
        return self._registry[name]

    def binary(
        self,
        name: str,
        values: Any,
        na_value: Any = None,
        na_sentinel: int | bool | None = None,
        position: int | None = None,
        description: str = "",
        source: Any = None,
    ) -> FlagDefinition:
        """Add a true/false flag.

        Args:
            name: Flag name
            values: Boolean column
            na_value: Source datum meaning "not tested"; implies a default
                sentinel. Compared against source when given, otherwise
                against values
            na_sentinel: Sentinel pattern for missing values (True for default)
            position: Explicit start bit
            description: Flag description
            source: Column the test was evaluated on, same length as values
        """
        if na_value is not None and na_sentinel is None:
            na_sentinel = True
        values = _mark_missing(values, na_value, source)
        return self._add(name, Binary(), values, position, na_sentinel, description)

    def case(
        self,
        name: str,
        predicates: pd.DataFrame | np.ndarray | Sequence[Any],
        exclusive: bool = True,
        overlap: str = "first",
        position: int | None = None,
        description: str = "",
    ) -> FlagDefinition:
        """Add a flag recording which of several predicates matched first.

        Args:
            name: Flag name
            predicates: DataFrame or 2-D array (one column per case), a
                list of boolean columns in priority order, or a single
                boolean Series / 1-D array for a one-case flag
            exclusive: Whether the cases are declared mutually exclusive
            overlap: Rule for several true cases in non-exclusive mode
                ("first", "last" or "error")
            position: Explicit start bit
            description: Flag description
        """
        table = _predicate_table(predicates)
        if table.shape[1] == 0:
            raise ValueError("case flags need at least one predicate")
        kind = Case(case_count=table.shape[1], exclusive=exclusive, overlap=overlap)
        return self._add(name, kind, table, position, None, description)

    def count(
        self,
        name: str,
        values: Any,
        max_value: int | None = None,
        na_value: Any = None,
        na_sentinel: int | bool | None = None,
        position: int | None = None,
        description: str = "",
    ) -> FlagDefinition:
        """Add a non-negative integer flag sized to the column maximum.

        Args:
            name: Flag name
            values: Integer column
            max_value: Reserve room up to this value instead of the observed max
            na_value: Raw value meaning "not tested"; implies a default sentinel
            na_sentinel: Sentinel pattern for missing values (True for default)
            position: Explicit start bit
            description: Flag description

        Raises:
            CountOverflow: If values are negative or exceed max_value
        """
        if na_value is not None and na_sentinel is None:
            na_sentinel = True
        values = _mark_missing(values, na_value)

        kind = fit_count(values, name=name)
        if max_value is not None:
            if kind.max_value > max_value:
                raise CountOverflow(
                    f"[{name}] Observed max {kind.max_value} exceeds max_value {max_value}"
                )
            kind = Count(max_value=max_value)
        return self._add(name, kind, values, position, na_sentinel, description)

    def numeric(
        self,
        name: str,
        values: Any,
        precision: str | None = None,
        position: int | None = None,
        description: str = "",
    ) -> FlagDefinition:
        """Add a real-valued flag.

        Args:
            name: Flag name
            values: Real column (missing values encode as NaN)
            precision: "half", "single" or "double" (default from config)
            position: Explicit start bit
            description: Flag description
        """
        kind = Numeric(precision or self.config.default_precision)
        return self._add(name, kind, values, position, None, description)

    def describe(self) -> str:
        return describe(self._registry)

    def encode(self, verbose: bool | None = None) -> EncodedField:
        """Freeze the layout and pack all collected columns."""
        self._frozen = True
        return encode(self._registry, self._columns, self.config, verbose=verbose)
