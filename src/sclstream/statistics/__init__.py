"""
sclstream Statistics Module.

Single-pass row and column statistics over a loader chain:

    - Nonzero counts
    - Means (implicit zeros included)
    - Variances (implicit zeros included, configurable ddof)

Results come back in a StatsResult, which only answers for the statistics
that were requested and raises StatisticUnavailableError for the rest.

Example:
    >>> from sclstream.sparse import CSCLoader
    >>> from sclstream.statistics import Stats, compute_matrix_stats
    >>>
    >>> loader = CSCLoader.from_scipy(mat)
    >>> res = compute_matrix_stats(loader, row_stats=Stats.NONZERO_COUNT,
    ...                            col_stats=Stats.VARIANCE)
    >>> res.col_variance()
    >>> res.transpose().row_mean()   # same array as res.col_mean()
"""

from sclstream.statistics._result import (
    Stats,
    StatsResult,
)

from sclstream.statistics._compute import (
    compute_matrix_stats,
)

__all__ = [
    "Stats",
    "StatsResult",
    "compute_matrix_stats",
]
