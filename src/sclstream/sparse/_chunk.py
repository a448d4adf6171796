"""Chunk Buffers.

A Chunk is the unit of data moved through a loader chain: a run of stored
entries from one column of a CSC matrix.

Ownership Model:
    - OWNED by the loader that allocated it (exactly one per root loader)
    - BORROWED by every transform for the duration of one ``load()`` call
    - Overwritten in place on each ``load()``, never reallocated

Layout:
    values       float64[buffer_size]  stored values
    row_indices  uint32[buffer_size]   row of each stored value
    capacity     int                   entries valid in this load
    current_column int                 column the entries belong to
"""

import numpy as np

from ..error import DimensionMismatchError, InvalidArgumentError

__all__ = ['Chunk']


VALUE_DTYPE = np.float64
INDEX_DTYPE = np.uint32


class Chunk:
    """Fixed-size buffer holding one chunk of sparse column data.

    Attributes:
        capacity: Number of valid entries (``<= buffer_size``).
        current_column: Column index of the entries currently held.

    Example:
        >>> chunk = Chunk(4)
        >>> chunk.fill([5.0, 2.0], [0, 3], column=1)
        >>> chunk.values
        array([5., 2.])
        >>> chunk.capacity, chunk.current_column
        (2, 1)
    """

    __slots__ = ('_values', '_row_indices', 'capacity', 'current_column')

    def __init__(self, buffer_size: int):
        if buffer_size <= 0:
            raise InvalidArgumentError(
                f"Chunk buffer size must be positive, got {buffer_size}"
            )
        self._values = np.zeros(buffer_size, dtype=VALUE_DTYPE)
        self._row_indices = np.zeros(buffer_size, dtype=INDEX_DTYPE)
        self.capacity = 0
        self.current_column = 0

    @property
    def buffer_size(self) -> int:
        """Allocated number of entries."""
        return self._values.shape[0]

    @property
    def values(self) -> np.ndarray:
        """View of the valid values. Writes go straight to the buffer."""
        return self._values[:self.capacity]

    @property
    def row_indices(self) -> np.ndarray:
        """View of the valid row indices."""
        return self._row_indices[:self.capacity]

    def fill(self, values: np.ndarray, rows: np.ndarray, column: int) -> None:
        """Overwrite the chunk with entries from ``column``.

        Args:
            values: Stored values to copy.
            rows: Row indices parallel to ``values``.
            column: Column the entries belong to.

        Raises:
            DimensionMismatchError: If ``values`` and ``rows`` differ in
                length or do not fit in the buffer.
        """
        values = np.asarray(values)
        rows = np.asarray(rows)
        if values.shape[0] != rows.shape[0]:
            raise DimensionMismatchError(
                f"values ({values.shape[0]}) and rows ({rows.shape[0]}) differ in length"
            )
        n = values.shape[0]
        if n > self.buffer_size:
            raise DimensionMismatchError(
                f"Cannot place {n} entries in a chunk of {self.buffer_size}"
            )
        self._values[:n] = values
        self._row_indices[:n] = rows
        self.capacity = n
        self.current_column = column

    def __len__(self) -> int:
        return self.capacity

    def __repr__(self) -> str:
        return (
            f"Chunk(capacity={self.capacity}, buffer_size={self.buffer_size}, "
            f"current_column={self.current_column})"
        )
