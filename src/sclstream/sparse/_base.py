"""
Matrix Loader Base Classes

This module defines the pull-based loader interface every stage of a
streaming chain implements. Storage-backed loaders produce chunks;
transforms wrap a loader and rewrite the chunk it produced. A consumer
only ever sees a MatrixLoader and cannot tell the two apart.

Type Hierarchy:

    MatrixLoader (ABC)
    ├── ChunkedLoader (ABC)        - Owns a Chunk, walks columns in order
    │   ├── CSCLoader              - In-memory CSC arrays
    │   └── CallbackLoader         - User-defined column access
    └── MatrixTransform (ABC)      - Wraps one upstream loader
        └── Min, MinByRow, MinByCol

Pull Protocol:

1. ``load()`` populates the next chunk and returns True, or returns False
   once the stream is exhausted. After False the chunk must not be read,
   and every later call returns False as well.

2. A chunk is never partial: it covers entries of a single column and
   ``current_column`` names that column.

3. ``restart()`` rewinds to the first column.

Example:

    loader = CSCLoader.from_scipy(mat)
    while loader.load():
        col = loader.current_column
        vals = loader.val_data()
        rows = loader.row_data()
"""

from abc import ABC, abstractmethod
from typing import Tuple
import numpy as np

from ._chunk import Chunk

__all__ = [
    'MatrixLoader',
]


class MatrixLoader(ABC):
    """
    Abstract base class for all loaders and transforms.

    Required Properties (subclasses must implement):
        rows: Number of matrix rows
        cols: Number of matrix columns
        chunk: The Chunk populated by the last successful load()

    Required Methods (subclasses must implement):
        load(): Advance to and populate the next chunk
        restart(): Rewind to the first column
    """

    # =========================================================================
    # Abstract Interface
    # =========================================================================

    @property
    @abstractmethod
    def rows(self) -> int:
        """Number of rows."""
        ...

    @property
    @abstractmethod
    def cols(self) -> int:
        """Number of columns."""
        ...

    @property
    @abstractmethod
    def chunk(self) -> Chunk:
        """Chunk buffer owned by the root loader of this chain."""
        ...

    @abstractmethod
    def load(self) -> bool:
        """Populate the next chunk.

        Returns:
            True if a chunk was loaded, False on exhaustion.
        """
        ...

    @abstractmethod
    def restart(self) -> None:
        """Rewind the stream to the first column."""
        ...

    # =========================================================================
    # Derived Accessors
    # =========================================================================

    @property
    def shape(self) -> Tuple[int, int]:
        """Matrix dimensions (rows, cols)."""
        return (self.rows, self.cols)

    @property
    def capacity(self) -> int:
        """Valid entries in the current chunk."""
        return self.chunk.capacity

    @property
    def current_column(self) -> int:
        """Column of the current chunk."""
        return self.chunk.current_column

    def val_data(self) -> np.ndarray:
        """Writable view of the current chunk's values."""
        return self.chunk.values

    def row_data(self) -> np.ndarray:
        """View of the current chunk's row indices."""
        return self.chunk.row_indices

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(shape={self.shape})"
