"""Materialization of loader chains into scipy matrices."""

from typing import List
import logging
import numpy as np
import scipy.sparse as sp

from ._base import MatrixLoader

__all__ = ['to_scipy']

logger = logging.getLogger("sclstream.sparse")


def to_scipy(loader: MatrixLoader) -> sp.csc_matrix:
    """Drain a loader (or transform chain) into a CSC matrix.

    The loader is restarted first, so the result always covers the whole
    matrix. Each chunk is copied out before the next pull overwrites it.

    Args:
        loader: Any MatrixLoader.

    Returns:
        scipy.sparse.csc_matrix of shape ``loader.shape`` with float64 values.

    Example:
        >>> chain = Min(CSCLoader.from_dense([[5, 0], [2, 9]]), ParameterFit.constant(4.0))
        >>> to_scipy(chain).toarray()
        array([[4., 0.],
               [2., 4.]])
    """
    loader.restart()

    values: List[np.ndarray] = []
    rows: List[np.ndarray] = []
    cols: List[np.ndarray] = []
    while loader.load():
        values.append(loader.val_data().copy())
        rows.append(loader.row_data().astype(np.int64))
        cols.append(np.full(loader.capacity, loader.current_column, dtype=np.int64))

    if values:
        data = np.concatenate(values)
        row_ind = np.concatenate(rows)
        col_ind = np.concatenate(cols)
    else:
        data = np.zeros(0, dtype=np.float64)
        row_ind = np.zeros(0, dtype=np.int64)
        col_ind = np.zeros(0, dtype=np.int64)

    logger.debug("Materialized %d entries from %r", data.shape[0], loader)
    return sp.csc_matrix((data, (row_ind, col_ind)), shape=loader.shape)
