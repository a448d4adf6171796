"""
Chunked Column Loaders

Storage-side loaders that own a Chunk buffer and walk a CSC matrix column
by column. A column with more stored entries than the buffer holds is
delivered as consecutive chunks sharing ``current_column``; empty columns
produce no chunk at all.

Example:
    >>> import scipy.sparse as sp
    >>> mat = sp.random(1000, 200, density=0.05, format='csc')
    >>> loader = CSCLoader.from_scipy(mat, chunk_size=256)
    >>> n = 0
    >>> while loader.load():
    ...     n += loader.capacity
    >>> n == mat.nnz
    True
"""

from abc import abstractmethod
from typing import Any, Optional, Tuple
import logging
import numpy as np
import scipy.sparse as sp

from .._config import config
from ..error import DimensionMismatchError
from ._base import MatrixLoader
from ._chunk import Chunk

__all__ = ['ChunkedLoader', 'CSCLoader']

logger = logging.getLogger("sclstream.sparse")


class ChunkedLoader(MatrixLoader):
    """
    Base class for loaders that own a chunk buffer.

    Subclasses provide the column data; this class keeps the cursor
    (column, offset within column) and fills the chunk.

    Required Methods to Implement:
        rows, cols: Matrix dimensions
        get_column(j) -> Tuple[ndarray, ndarray]: (values, row indices) of column j
    """

    def __init__(self, chunk_size: Optional[int] = None):
        """
        Args:
            chunk_size: Entries per chunk (default ``config.loader.chunk_size``)
        """
        if chunk_size is None:
            chunk_size = config.chunk_size
        self._chunk = Chunk(chunk_size)
        self._col = 0
        self._offset = 0
        self._exhausted = False

    @abstractmethod
    def get_column(self, j: int) -> Tuple[np.ndarray, np.ndarray]:
        """Return (values, row indices) stored in column j."""
        ...

    @property
    def chunk(self) -> Chunk:
        return self._chunk

    @property
    def chunk_size(self) -> int:
        """Allocated entries in the chunk buffer."""
        return self._chunk.buffer_size

    def load(self) -> bool:
        if self._exhausted:
            return False

        chunk = self._chunk
        while self._col < self.cols:
            values, rows = self.get_column(self._col)
            remaining = len(values) - self._offset
            if remaining > 0:
                start = self._offset
                n = min(remaining, chunk.buffer_size)
                chunk.fill(values[start:start + n], rows[start:start + n], self._col)
                self._offset += n
                return True
            self._col += 1
            self._offset = 0

        self._exhausted = True
        return False

    def restart(self) -> None:
        logger.debug("Restarting %r", self)
        self._col = 0
        self._offset = 0
        self._exhausted = False


class CSCLoader(ChunkedLoader):
    """
    Loader over in-memory CSC arrays.

    The arrays are read, never written; transforms mutate the chunk copy.

    Example:
        >>> loader = CSCLoader(
        ...     data=[5.0, 2.0, 9.0],
        ...     indices=[0, 1, 0],
        ...     indptr=[0, 2, 3],
        ...     shape=(2, 2),
        ... )
        >>> loader.load()
        True
        >>> loader.val_data()
        array([5., 2.])
    """

    def __init__(
        self,
        data: Any,
        indices: Any,
        indptr: Any,
        shape: Tuple[int, int],
        chunk_size: Optional[int] = None,
    ):
        """
        Args:
            data: Stored values, length nnz
            indices: Row index of each stored value, length nnz
            indptr: Column pointers, length cols + 1
            shape: (rows, cols)
            chunk_size: Entries per chunk (default from config)

        Raises:
            DimensionMismatchError: If the arrays do not describe a
                (rows, cols) CSC matrix.
        """
        data = np.asarray(data, dtype=np.float64)
        indices = np.asarray(indices, dtype=np.int64)
        indptr = np.asarray(indptr, dtype=np.int64)
        rows, cols = int(shape[0]), int(shape[1])

        if data.ndim != 1 or indices.ndim != 1 or indptr.ndim != 1:
            raise DimensionMismatchError("CSC arrays must be one-dimensional")
        if data.shape[0] != indices.shape[0]:
            raise DimensionMismatchError(
                f"data ({data.shape[0]}) and indices ({indices.shape[0]}) differ in length"
            )
        if indptr.shape[0] != cols + 1:
            raise DimensionMismatchError(
                f"indptr has length {indptr.shape[0]}, expected {cols + 1}"
            )
        if indptr[0] != 0 or indptr[-1] != data.shape[0] or np.any(np.diff(indptr) < 0):
            raise DimensionMismatchError("indptr must be non-decreasing from 0 to nnz")
        if indices.shape[0] and (indices.min() < 0 or indices.max() >= rows):
            raise DimensionMismatchError(f"Row indices must lie in [0, {rows})")

        self._data = data
        self._indices = indices
        self._indptr = indptr
        self._shape = (rows, cols)
        super().__init__(chunk_size)

    @classmethod
    def from_scipy(cls, mat: Any, chunk_size: Optional[int] = None) -> 'CSCLoader':
        """Create loader from any scipy sparse matrix or array."""
        csc = sp.csc_matrix(mat)
        return cls(csc.data, csc.indices, csc.indptr, csc.shape, chunk_size=chunk_size)

    @classmethod
    def from_dense(cls, dense: Any, chunk_size: Optional[int] = None) -> 'CSCLoader':
        """Create loader from a 2-D array-like; zeros are not stored."""
        arr = np.asarray(dense, dtype=np.float64)
        if arr.ndim != 2:
            raise DimensionMismatchError(f"Expected 2-D input, got {arr.ndim}-D")
        return cls.from_scipy(sp.csc_matrix(arr), chunk_size=chunk_size)

    @property
    def rows(self) -> int:
        return self._shape[0]

    @property
    def cols(self) -> int:
        return self._shape[1]

    @property
    def nnz(self) -> int:
        """Number of stored entries."""
        return self._data.shape[0]

    def get_column(self, j: int) -> Tuple[np.ndarray, np.ndarray]:
        start, end = self._indptr[j], self._indptr[j + 1]
        return self._data[start:end], self._indices[start:end]

    def __repr__(self) -> str:
        return f"CSCLoader(shape={self._shape}, nnz={self.nnz}, chunk_size={self.chunk_size})"
