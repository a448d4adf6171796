"""
Statistics Result Container.

A StatsResult pairs two stacked statistic arrays:

    row_stats  float64[k_row, rows]   one column per matrix row
    col_stats  float64[k_col, cols]   one column per matrix column

Row ``i`` of each array holds one statistic, always in this order:

    0  nonzero count
    1  mean
    2  variance

A producer stores only the leading rows it computed (k = 0..3), so asking
for a statistic beyond that raises StatisticUnavailableError. No default is
ever synthesized for a missing statistic.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Tuple
import numpy as np

from ..error import DimensionMismatchError, StatisticUnavailableError

__all__ = ['Stats', 'StatsResult']


class Stats(IntEnum):
    """
    Statistic levels. Each level includes all levels below it.
    """
    NONE = 0           # Nothing computed
    NONZERO_COUNT = 1  # Nonzero count
    MEAN = 2           # Nonzero count, mean
    VARIANCE = 3       # Nonzero count, mean, variance


_STAT_NAMES = {
    Stats.NONZERO_COUNT: "nonzeros",
    Stats.MEAN: "mean",
    Stats.VARIANCE: "variance",
}


def _as_stats_array(arr, name: str) -> np.ndarray:
    arr = np.asarray(arr)
    if arr.ndim != 2:
        raise DimensionMismatchError(f"{name} must be 2-D, got {arr.ndim}-D")
    if arr.shape[0] > len(_STAT_NAMES):
        raise DimensionMismatchError(
            f"{name} holds at most {len(_STAT_NAMES)} statistics, got {arr.shape[0]}"
        )
    return arr


@dataclass(frozen=True, eq=False)
class StatsResult:
    """Row and column statistics from one streaming pass.

    Attributes:
        row_stats: (0-3, rows) array of per-row statistics
        col_stats: (0-3, cols) array of per-column statistics

    Example:
        >>> res = StatsResult(row_stats=np.array([[2., 1.]]), col_stats=np.zeros((0, 3)))
        >>> res.row_nonzeros()
        array([2., 1.])
        >>> res.row_mean()
        Traceback (most recent call last):
        ...
        StatisticUnavailableError: sclstream error 42: row mean not calculated in this StatsResult
    """

    row_stats: np.ndarray
    col_stats: np.ndarray

    def __post_init__(self):
        object.__setattr__(self, "row_stats", _as_stats_array(self.row_stats, "row_stats"))
        object.__setattr__(self, "col_stats", _as_stats_array(self.col_stats, "col_stats"))

    # =========================================================================
    # Row Statistics
    # =========================================================================

    def row_nonzeros(self) -> np.ndarray:
        return _select(self.row_stats, Stats.NONZERO_COUNT, "row")

    def row_mean(self) -> np.ndarray:
        return _select(self.row_stats, Stats.MEAN, "row")

    def row_variance(self) -> np.ndarray:
        return _select(self.row_stats, Stats.VARIANCE, "row")

    # =========================================================================
    # Column Statistics
    # =========================================================================

    def col_nonzeros(self) -> np.ndarray:
        return _select(self.col_stats, Stats.NONZERO_COUNT, "col")

    def col_mean(self) -> np.ndarray:
        return _select(self.col_stats, Stats.MEAN, "col")

    def col_variance(self) -> np.ndarray:
        return _select(self.col_stats, Stats.VARIANCE, "col")

    # =========================================================================
    # Structure
    # =========================================================================

    @property
    def row_level(self) -> Stats:
        """Highest statistic available for rows."""
        return Stats(self.row_stats.shape[0])

    @property
    def col_level(self) -> Stats:
        """Highest statistic available for columns."""
        return Stats(self.col_stats.shape[0])

    @property
    def shape(self) -> Tuple[int, int]:
        """(rows, cols) of the matrix the statistics describe."""
        return (self.row_stats.shape[1], self.col_stats.shape[1])

    def transpose(self) -> "StatsResult":
        """Swap row and column statistics. The arrays are shared, not copied."""
        return StatsResult(row_stats=self.col_stats, col_stats=self.row_stats)

    @property
    def T(self) -> "StatsResult":
        return self.transpose()

    def __repr__(self) -> str:
        return (
            f"StatsResult(shape={self.shape}, row_level={self.row_level.name}, "
            f"col_level={self.col_level.name})"
        )


def _select(stats: np.ndarray, level: Stats, axis: str) -> np.ndarray:
    if stats.shape[0] < level:
        raise StatisticUnavailableError(_STAT_NAMES[level], axis)
    return stats[level - 1]
