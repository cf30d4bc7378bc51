"""Case flag codec.

A case flag stores which of an ordered set of predicates matched a record.
Predicates are evaluated upstream; each raw value is either the row of
predicate outcomes (in priority order) or an already resolved case index.

Records where no predicate holds get the reserved "no case" code, the
highest value the flag's width can represent. It decodes to NO_CASE (-1)
so it can never be mistaken for case 0.
"""

from __future__ import annotations

from typing import Any, Iterable, Sequence

import numpy as np
import pandas as pd

from flagfield.errors import CaseOverlap
from flagfield.schemas.flags import Case, flag_width
from flagfield.schemas.validate import format_error, is_na

NO_CASE = -1


def case_rows(predicates: Any) -> list[Any]:
    """Turn a predicate table into one raw value per record.

    Accepts a DataFrame (one boolean column per case), a 2-D array, or any
    sequence of per-record rows / resolved indices.
    """
    if isinstance(predicates, pd.DataFrame):
        return list(predicates.itertuples(index=False, name=None))
    if isinstance(predicates, np.ndarray) and predicates.ndim == 2:
        return [tuple(row) for row in predicates]
    return list(predicates)


class CaseCodec:
    """Codec for Case flags.

    Args:
        kind: Case kind (case count, exclusivity, overlap rule)
        name: Flag name for error messages
    """

    def __init__(self, kind: Case, name: str = "case") -> None:
        self.kind = kind
        self.width = flag_width(kind)
        self.name = name

    @property
    def no_case_code(self) -> int:
        return self.kind.no_case_code

    def resolve(self, raw: Any) -> int | None:
        """Return the matching case index for one record, or None."""
        if is_na(raw):
            return None
        if isinstance(raw, (bool, np.bool_)):
            raw = (raw,)
        if isinstance(raw, (float, np.floating)):
            # Resolved indices in a column with missing values arrive as float64
            if not float(raw).is_integer():
                raise ValueError(f"Flag '{self.name}': case index {raw!r} is not an integer")
            raw = int(raw)
        if isinstance(raw, (int, np.integer)):
            index = int(raw)
            if not 0 <= index < self.kind.case_count:
                raise ValueError(
                    f"Flag '{self.name}': case index {index} outside "
                    f"[0, {self.kind.case_count})"
                )
            return index

        row = tuple(raw)
        if len(row) != self.kind.case_count:
            raise ValueError(
                f"Flag '{self.name}': expected {self.kind.case_count} predicate "
                f"outcomes, got {len(row)}"
            )
        # Missing predicate outcomes count as "not true"
        matches = [i for i, hit in enumerate(row) if not is_na(hit) and bool(hit)]
        if not matches:
            return None
        if self.kind.exclusive or self.kind.overlap == "first":
            return matches[0]
        if self.kind.overlap == "last":
            return matches[-1]
        if len(matches) > 1:
            raise CaseOverlap(
                f"Flag '{self.name}': cases {matches} are all true for one record"
            )
        return matches[0]

    def encode(self, raw: Any) -> int:
        index = self.resolve(raw)
        return self.no_case_code if index is None else index

    def decode(self, bits: int) -> int:
        if bits >= self.kind.case_count:
            return NO_CASE
        return bits

    def encode_column(self, values: Iterable[Any]) -> list[int]:
        codes = []
        overlaps = []
        for i, raw in enumerate(values):
            try:
                codes.append(self.encode(raw))
            except CaseOverlap:
                overlaps.append(i)
        if overlaps:
            raise CaseOverlap(
                format_error(
                    self.name,
                    "Overlapping cases",
                    "more than one predicate is true",
                    overlaps,
                    len(overlaps),
                )
            )
        return codes

    def decode_column(self, codes: Sequence[int]) -> pd.Series:
        return pd.Series([self.decode(int(c)) for c in codes], dtype="Int64")
