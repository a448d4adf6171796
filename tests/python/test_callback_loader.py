"""Tests for Callback-Based Loaders.

CallbackLoader lets users implement column access in Python; these tests
use a simple in-memory implementation.
"""

import pytest
import numpy as np
from typing import Tuple

from sclstream.error import DimensionMismatchError
from sclstream.sparse import CallbackLoader, to_scipy
from sclstream.statistics import Stats, compute_matrix_stats


class SimpleColumns(CallbackLoader):
    """
    Matrix:
    [[1, 0, 4],
     [0, 0, 0],
     [2, 3, 5]]
    """

    def __init__(self, chunk_size=None):
        self._cols_data = [
            (np.array([1.0, 2.0]), np.array([0, 2])),  # Col 0
            (np.array([3.0]), np.array([2])),          # Col 1
            (np.array([4.0, 5.0]), np.array([0, 2])),  # Col 2
        ]
        self.fetched = []
        self.released = []
        super().__init__(chunk_size=chunk_size)

    def get_shape(self) -> Tuple[int, int]:
        return (3, 3)

    def get_col_data(self, j: int) -> Tuple[np.ndarray, np.ndarray]:
        self.fetched.append(j)
        return self._cols_data[j]

    def release_col(self, j: int) -> None:
        self.released.append(j)


class TestCallbackLoader:
    """Test CallbackLoader with a simple in-memory implementation."""

    def test_properties(self):
        with SimpleColumns() as loader:
            assert loader.shape == (3, 3)
            assert loader.rows == 3
            assert loader.cols == 3

    def test_to_scipy(self):
        with SimpleColumns() as loader:
            expected = np.array([
                [1, 0, 4],
                [0, 0, 0],
                [2, 3, 5]
            ], dtype=np.float64)
            np.testing.assert_array_equal(to_scipy(loader).toarray(), expected)

    def test_each_column_fetched_once_per_pass(self):
        loader = SimpleColumns(chunk_size=1)
        while loader.load():
            pass
        assert loader.fetched == [0, 1, 2]

    def test_columns_released(self):
        loader = SimpleColumns()
        while loader.load():
            pass
        loader.close()
        assert sorted(loader.released) == [0, 1, 2]

    def test_column_stats(self):
        with SimpleColumns(chunk_size=1) as loader:
            res = compute_matrix_stats(loader, col_stats=Stats.MEAN)
            np.testing.assert_array_equal(res.col_nonzeros(), [2.0, 1.0, 2.0])
            np.testing.assert_allclose(res.col_mean(), [1.0, 1.0, 3.0])

    def test_mismatched_column_data(self):
        class Broken(SimpleColumns):
            def get_col_data(self, j):
                return np.array([1.0, 2.0]), np.array([0])

        with pytest.raises(DimensionMismatchError):
            Broken().load()

    @pytest.mark.parametrize("rows", [[-1, 2], [0, 3]])
    def test_row_index_out_of_range(self, rows):
        class OutOfRange(SimpleColumns):
            def get_col_data(self, j):
                return np.array([1.0, 2.0]), np.array(rows)

        loader = OutOfRange()
        with pytest.raises(DimensionMismatchError):
            loader.load()
        with pytest.raises(DimensionMismatchError):
            compute_matrix_stats(OutOfRange(), row_stats=Stats.MEAN)
