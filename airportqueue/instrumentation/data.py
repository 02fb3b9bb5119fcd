"""Time-series storage for periodic simulation samples.

Data collects (time, value) pairs during a run, for example the length of a
class queue at every sampling tick, and aggregates them afterwards.
Aggregations over an empty series are undefined and return NaN.
"""

from __future__ import annotations

import builtins
import math
from typing import Any, List, Tuple

import pandas as pd

from airportqueue.core.temporal import Instant


class Data:
    """Container for timestamped metric samples.

    Samples are stored in append order; the scheduler guarantees they are
    recorded with non-decreasing times.
    """

    def __init__(self) -> None:
        self._samples: List[Tuple[float, Any]] = []

    def add_stat(self, value: Any, time: Instant) -> None:
        """Record a data point at the given simulation time."""
        self._samples.append((time.to_seconds(), value))

    def clear(self) -> None:
        self._samples.clear()

    @property
    def values(self) -> List[Tuple[float, Any]]:
        """All recorded samples as (time_seconds, value) tuples."""
        return self._samples

    def times(self) -> list[float]:
        return [t for t, _ in self._samples]

    def raw_values(self) -> list[Any]:
        return [v for _, v in self._samples]

    def between(self, start_s: float, end_s: float) -> Data:
        """Return a new Data with samples in [start, end)."""
        result = Data()
        result._samples = [(t, v) for t, v in self._samples if start_s <= t < end_s]
        return result

    def count(self) -> int:
        return len(self._samples)

    def sum(self) -> float:
        return builtins.sum(v for _, v in self._samples)

    def mean(self) -> float:
        """Mean of sample values, NaN if no samples were taken."""
        if not self._samples:
            return math.nan
        return self.sum() / len(self._samples)

    def max(self) -> float:
        """Maximum sample value, NaN if no samples were taken."""
        if not self._samples:
            return math.nan
        return builtins.max(v for _, v in self._samples)

    def to_dataframe(self) -> pd.DataFrame:
        """Samples as a DataFrame with columns ``time_s`` and ``value``."""
        return pd.DataFrame(self._samples, columns=["time_s", "value"])

    def __len__(self) -> int:
        return len(self._samples)

    def __bool__(self) -> bool:
        return len(self._samples) > 0
