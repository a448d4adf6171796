"""
Streaming Matrix Statistics.

Computes per-row and per-column nonzero counts, means and variances of the
matrix a loader (or transform chain) produces, in one pass over its chunks.

Mathematical Background:
    Only stored nonzero values are visited. For each group (a row or a
    column) a running count n, mean m and sum of squared deviations M2 over
    the nonzeros is kept and merged chunk by chunk (Chan et al.):

        n  = n_a + n_b
        d  = m_b - m_a
        m  = m_a + d * n_b / n
        M2 = M2_a + M2_b + d^2 * n_a * n_b / n

    The implicit zeros are folded in at the end. With N entries per group
    (cols for a row, rows for a column) and z = N - n zeros:

        mean     = m * n / N
        M2_total = M2 + m^2 * n * z / N
        variance = M2_total / (N - ddof)

Stored entries equal to zero (for example after clamping to 0) do not
count as nonzeros.
"""

from __future__ import annotations

from typing import Optional
import logging
import numpy as np

from .._config import config
from ..error import InvalidArgumentError
from ..sparse._base import MatrixLoader
from ._result import Stats, StatsResult

__all__ = ['compute_matrix_stats']

logger = logging.getLogger("sclstream.statistics")


class _MomentAccumulator:
    """Running count, mean and M2 over the nonzeros of each group."""

    __slots__ = ('count', 'mean', 'm2')

    def __init__(self, n_groups: int):
        self.count = np.zeros(n_groups, dtype=np.float64)
        self.mean = np.zeros(n_groups, dtype=np.float64)
        self.m2 = np.zeros(n_groups, dtype=np.float64)

    def update(self, groups: np.ndarray, values: np.ndarray) -> None:
        """Merge values belonging to several groups."""
        idx, inv = np.unique(groups, return_inverse=True)
        n_b = np.bincount(inv).astype(np.float64)
        mean_b = np.bincount(inv, weights=values) / n_b
        m2_b = np.bincount(inv, weights=(values - mean_b[inv]) ** 2)
        self._merge(idx, n_b, mean_b, m2_b)

    def update_one(self, group: int, values: np.ndarray) -> None:
        """Merge values that all belong to one group."""
        mean_b = values.mean()
        m2_b = np.sum((values - mean_b) ** 2)
        self._merge(group, float(values.shape[0]), mean_b, m2_b)

    def _merge(self, idx, n_b, mean_b, m2_b) -> None:
        n_a = self.count[idx]
        mean_a = self.mean[idx]
        n = n_a + n_b
        delta = mean_b - mean_a
        self.mean[idx] = mean_a + delta * n_b / n
        self.m2[idx] = self.m2[idx] + m2_b + delta ** 2 * n_a * n_b / n
        self.count[idx] = n

    def finalize(self, total: int, level: Stats, ddof: int) -> np.ndarray:
        """Stack the first ``level`` statistics, zeros included."""
        out = np.empty((int(level), self.count.shape[0]), dtype=np.float64)
        if level >= Stats.NONZERO_COUNT:
            out[0] = self.count
        if level >= Stats.MEAN:
            with np.errstate(divide='ignore', invalid='ignore'):
                out[1] = self.mean * self.count / total
        if level >= Stats.VARIANCE:
            if total - ddof > 0:
                zeros = total - self.count
                m2 = self.m2 + self.mean ** 2 * self.count * zeros / total
                out[2] = m2 / (total - ddof)
            else:
                out[2] = np.nan
        out.setflags(write=False)
        return out


def _as_level(level, name: str) -> Stats:
    try:
        return Stats(level)
    except ValueError:
        raise InvalidArgumentError(
            f"{name} must be one of {[s.name for s in Stats]}, got {level!r}"
        ) from None


def compute_matrix_stats(
    loader: MatrixLoader,
    row_stats: Stats = Stats.NONE,
    col_stats: Stats = Stats.NONE,
    ddof: Optional[int] = None,
) -> StatsResult:
    """Compute row and column statistics in one pass over ``loader``.

    The loader is restarted first and drained to exhaustion. Works on raw
    loaders and transform chains alike.

    Args:
        loader: Any MatrixLoader.
        row_stats: Highest statistic to compute per row.
        col_stats: Highest statistic to compute per column.
        ddof: Delta degrees of freedom for variance
            (default ``config.compute.ddof``).

    Returns:
        StatsResult holding exactly the requested statistic rows.

    Raises:
        InvalidArgumentError: If a level is not a Stats value.

    Examples:
        >>> loader = CSCLoader.from_dense([[1., 0.], [3., 4.]])
        >>> res = compute_matrix_stats(loader, row_stats=Stats.MEAN, col_stats=Stats.VARIANCE)
        >>> res.row_mean()
        array([0.5, 3.5])
        >>> res.col_variance()
        array([2., 8.])
    """
    row_level = _as_level(row_stats, "row_stats")
    col_level = _as_level(col_stats, "col_stats")
    if ddof is None:
        ddof = config.ddof

    n_rows, n_cols = loader.rows, loader.cols
    row_acc = _MomentAccumulator(n_rows) if row_level > Stats.NONE else None
    col_acc = _MomentAccumulator(n_cols) if col_level > Stats.NONE else None

    loader.restart()
    n_chunks = 0
    while loader.load():
        n_chunks += 1
        if row_acc is None and col_acc is None:
            continue
        values = loader.val_data()
        rows = loader.row_data()
        nonzero = values != 0
        if not nonzero.all():
            values = values[nonzero]
            rows = rows[nonzero]
        if values.shape[0] == 0:
            continue
        if row_acc is not None:
            row_acc.update(rows, values)
        if col_acc is not None:
            col_acc.update_one(loader.current_column, values)

    logger.debug("Computed stats (row=%s, col=%s) over %d chunks of %r",
                 row_level.name, col_level.name, n_chunks, loader)

    if row_acc is not None:
        row_out = row_acc.finalize(n_cols, row_level, ddof)
    else:
        row_out = np.zeros((0, n_rows), dtype=np.float64)
    if col_acc is not None:
        col_out = col_acc.finalize(n_rows, col_level, ddof)
    else:
        col_out = np.zeros((0, n_cols), dtype=np.float64)

    return StatsResult(row_stats=row_out, col_stats=col_out)
