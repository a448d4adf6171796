"""
Callback-Based Loaders

A CallbackLoader lets users plug any column source into a streaming chain
by implementing two methods in Python. Columns are fetched one at a time
and released once the cursor moves past them.

Use Cases:

1. Lazy Loading: read columns from disk on demand (HDF5, Zarr)
2. Generated data: synthesize columns without storing the matrix
3. Custom storage: compressed or remote column stores

Example:

    import h5py

    class HDF5ColumnLoader(CallbackLoader):
        '''Column loader over an HDF5 group.'''

        def __init__(self, filepath):
            self.f = h5py.File(filepath, 'r')
            self._shape = tuple(self.f.attrs['shape'])
            super().__init__()

        def get_shape(self):
            return self._shape

        def get_col_data(self, j):
            grp = self.f[f'col_{j}']
            return grp['data'][:], grp['indices'][:]

        def close(self):
            self.f.close()
            super().close()

    with HDF5ColumnLoader('data.h5') as loader:
        result = compute_matrix_stats(loader, col_stats=Stats.MEAN)
"""

from abc import abstractmethod
from typing import Optional, Tuple
import numpy as np

from ..error import DimensionMismatchError
from ._loader import ChunkedLoader

__all__ = ['CallbackLoader']


class CallbackLoader(ChunkedLoader):
    """
    Callback-based column loader.

    Required Methods to Implement:
        get_shape() -> Tuple[int, int]: Return (rows, cols)
        get_col_data(j) -> Tuple[ndarray, ndarray]: Return (values, row indices) for column j

    Optional Methods to Override:
        release_col(j): Release resources once column j is consumed
        close(): Cleanup when done

    Memory Contract:
        Arrays returned by get_col_data() are held until the cursor moves
        to the next column, then release_col() is called.
    """

    def __init__(self, chunk_size: Optional[int] = None):
        """Initialize callback loader.

        Note:
            Subclasses should call super().__init__() after setting up
            any attributes get_shape() needs.
        """
        self._shape_cache: Optional[Tuple[int, int]] = None
        self._cached_col_idx = -1
        self._cached_values: Optional[np.ndarray] = None
        self._cached_indices: Optional[np.ndarray] = None
        self._closed = False
        super().__init__(chunk_size)

    # =========================================================================
    # Abstract Methods - User Must Implement
    # =========================================================================

    @abstractmethod
    def get_shape(self) -> Tuple[int, int]:
        """Return matrix dimensions (rows, cols)."""
        ...

    @abstractmethod
    def get_col_data(self, j: int) -> Tuple[np.ndarray, np.ndarray]:
        """Return data for column j.

        Returns:
            Tuple of (values, indices) as numpy arrays
            - values: stored values of column j
            - indices: row index of each value
        """
        ...

    # =========================================================================
    # Optional Methods - User May Override
    # =========================================================================

    def release_col(self, j: int) -> None:
        """Release resources for column j. Default does nothing."""
        pass

    def close(self) -> None:
        """Close and release all resources.

        Override to add custom cleanup. Always call super().close().
        """
        if not self._closed:
            self._drop_cached()
            self._closed = True

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    # =========================================================================
    # MatrixLoader Implementation
    # =========================================================================

    @property
    def rows(self) -> int:
        return self._get_shape_cached()[0]

    @property
    def cols(self) -> int:
        return self._get_shape_cached()[1]

    def get_column(self, j: int) -> Tuple[np.ndarray, np.ndarray]:
        if j != self._cached_col_idx:
            self._drop_cached()
            values, indices = self.get_col_data(j)
            values = np.asarray(values)
            indices = np.asarray(indices)
            if values.shape[0] != indices.shape[0]:
                raise DimensionMismatchError(
                    f"Column {j}: {values.shape[0]} values but {indices.shape[0]} indices"
                )
            if indices.shape[0] and (indices.min() < 0 or indices.max() >= self.rows):
                raise DimensionMismatchError(
                    f"Column {j}: row indices must lie in [0, {self.rows})"
                )
            self._cached_col_idx = j
            self._cached_values = values
            self._cached_indices = indices
        return self._cached_values, self._cached_indices

    def restart(self) -> None:
        self._drop_cached()
        super().restart()

    def _get_shape_cached(self) -> Tuple[int, int]:
        if self._shape_cache is None:
            rows, cols = self.get_shape()
            self._shape_cache = (int(rows), int(cols))
        return self._shape_cache

    def _drop_cached(self) -> None:
        if self._cached_col_idx >= 0:
            self.release_col(self._cached_col_idx)
        self._cached_col_idx = -1
        self._cached_values = None
        self._cached_indices = None
