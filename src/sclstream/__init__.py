"""
sclstream - Streaming Sparse Matrix Layer

Chunked, pull-based processing of column-major sparse matrices:
- Loaders that stream CSC data one chunk at a time
- Composable in-place transform chains (global / row / column parameters)
- Single-pass row and column statistics

Modules:
- sparse: Chunk buffers, loaders, materialization
- transforms: Parameter fits and transform chains
- statistics: Streaming statistics and the StatsResult container

Architecture:
    ┌──────────────────────────────────────────────┐
    │  consumer (compute_matrix_stats / to_scipy)  │
    ├──────────────────────────────────────────────┤
    │  MatrixTransform ... MatrixTransform         │
    ├──────────────────────────────────────────────┤
    │  CSCLoader | CallbackLoader  (owns Chunk)    │
    └──────────────────────────────────────────────┘

Example:
    >>> import sclstream
    >>> from sclstream import CSCLoader, MinByRow, ParameterFit, Stats
    >>>
    >>> loader = CSCLoader.from_scipy(mat)
    >>> chain = MinByRow(loader, ParameterFit(row_params=caps))
    >>> res = sclstream.compute_matrix_stats(chain, col_stats=Stats.VARIANCE)
    >>> res.col_mean()
"""

__version__ = '0.1.0'

# Import main modules
from . import sparse
from . import transforms
from . import statistics
from . import error
from ._config import (
    config,
    get_config,
    LoaderConfig,
    ComputeConfig,
    set_chunk_size,
    set_ddof,
)

# Re-export common types
from .sparse import (
    Chunk,
    MatrixLoader,
    ChunkedLoader,
    CSCLoader,
    CallbackLoader,
    to_scipy,
)

from .transforms import (
    ParamScope,
    ParameterFit,
    MatrixTransform,
    compose,
    Min,
    MinByRow,
    MinByCol,
)

from .statistics import (
    Stats,
    StatsResult,
    compute_matrix_stats,
)

from .error import (
    SclStreamError,
    InvalidArgumentError,
    DimensionMismatchError,
    ParameterIndexError,
    StatisticUnavailableError,
)

__all__ = [
    # Version
    '__version__',

    # Modules
    'sparse',
    'transforms',
    'statistics',
    'error',

    # Config
    'config',
    'get_config',
    'LoaderConfig',
    'ComputeConfig',
    'set_chunk_size',
    'set_ddof',

    # Loaders
    'Chunk',
    'MatrixLoader',
    'ChunkedLoader',
    'CSCLoader',
    'CallbackLoader',
    'to_scipy',

    # Transforms
    'ParamScope',
    'ParameterFit',
    'MatrixTransform',
    'compose',
    'Min',
    'MinByRow',
    'MinByCol',

    # Statistics
    'Stats',
    'StatsResult',
    'compute_matrix_stats',

    # Errors
    'SclStreamError',
    'InvalidArgumentError',
    'DimensionMismatchError',
    'ParameterIndexError',
    'StatisticUnavailableError',
]
