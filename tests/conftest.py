"""Pytest configuration and fixtures."""

from __future__ import annotations

import numpy as np
import pandas as pd
import pytest

from flagfield.registry import Registry, create_registry
from flagfield.schemas.flags import Binary, Case, Count, Numeric


@pytest.fixture
def scenario_registry() -> Registry:
    """Four-flag layout: missing | quality | run_length | value."""
    reg = create_registry("scenario", "One flag of every kind")
    reg = reg.append("missing", Binary(), position=0, description="value not recorded")
    reg = reg.append("quality", Case(3), description="good / fair / poor")
    reg = reg.append("run_length", Count(7), description="consecutive flagged hours")
    reg = reg.append("value", Numeric("half"), description="observed value")
    return reg


@pytest.fixture
def scenario_columns() -> dict[str, list]:
    """Raw columns for a single scenario record."""
    return {
        "missing": [False],
        "quality": [2],
        "run_length": [5],
        "value": [3.625],
    }


@pytest.fixture
def make_qa_frame():
    """Factory fixture for creating hourly QA DataFrames."""

    def _make(
        n_rows: int = 24,
        seed: int = 42,
        missing_frac: float = 0.2,
    ) -> pd.DataFrame:
        rng = np.random.default_rng(seed)
        temp_c = np.round(rng.normal(20.0, 5.0, n_rows), 1)
        temp_c[rng.random(n_rows) < missing_frac] = np.nan
        quality = rng.choice(["good", "fair", "poor", "bad"], size=n_rows)

        return pd.DataFrame(
            {
                "station_id": "KLGA",
                "temp_c": temp_c,
                "quality": quality,
                "run_length": rng.integers(0, 12, n_rows),
            },
            index=pd.RangeIndex(100, 100 + n_rows),
        )

    return _make
