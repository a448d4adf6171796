"""
Transform Parameter Fits

A ParameterFit holds the values a transform reads while it rewrites a
chunk. Parameters live in three spaces, each addressed by a slot index
``k`` so one fit can carry several parameters (slot 0 is the bound of a
clamp, for instance):

    global   float64[n_global_slots]           one scalar per slot
    row      float64[n_row_slots, n_rows]      one vector per slot
    col      float64[n_col_slots, n_cols]      one vector per slot

A fit is immutable once built and is shared by reference between every
transform (and every chain) that uses it.

Coverage:
    Lookups inside ``load()`` are plain numpy indexing with no bounds
    check. Coverage of every row and column a loader can produce is
    verified once, when a transform is constructed (see ``check_covers``).
"""

from __future__ import annotations

from enum import IntEnum
from typing import Any, Optional, Union
import numpy as np

from ..error import DimensionMismatchError, ParameterIndexError

__all__ = [
    'ParamScope',
    'ParameterFit',
    'resolve_param',
]


class ParamScope(IntEnum):
    """Granularity at which a transform selects its parameter."""
    GLOBAL = 0         # One scalar for the whole chunk
    ROW = 1            # One scalar per entry, by its row index
    COL = 2            # One scalar per chunk, by current_column


def _frozen(arr: Any, ndim: int, name: str) -> np.ndarray:
    if arr is None:
        out = np.zeros((0,) * ndim, dtype=np.float64)
    else:
        out = np.array(arr, dtype=np.float64, copy=True)
        if out.ndim < ndim:
            out = out.reshape((1,) * (ndim - out.ndim) + out.shape)
        if out.ndim != ndim:
            raise DimensionMismatchError(
                f"{name} must have at most {ndim} dimensions, got {out.ndim}"
            )
    out.setflags(write=False)
    return out


class ParameterFit:
    """Read-only parameter provider for transforms.

    Args:
        global_params: Scalar or 1-D array, one value per slot.
        row_params: 1-D array (single slot) or 2-D ``(slots, rows)``.
        col_params: 1-D array (single slot) or 2-D ``(slots, cols)``.

    Example:
        >>> fit = ParameterFit(row_params=[4.0, 1.0])
        >>> fit.row_params(0, 1)
        1.0
        >>> fit.row_params(0, np.array([0, 1, 0]))
        array([4., 1., 4.])
    """

    __slots__ = ('_global', '_row', '_col')

    def __init__(
        self,
        global_params: Optional[Any] = None,
        row_params: Optional[Any] = None,
        col_params: Optional[Any] = None,
    ):
        self._global = _frozen(global_params, 1, "global_params")
        self._row = _frozen(row_params, 2, "row_params")
        self._col = _frozen(col_params, 2, "col_params")

    @classmethod
    def constant(cls, *values: float) -> 'ParameterFit':
        """Fit with only global parameters, one per slot."""
        return cls(global_params=list(values))

    # =========================================================================
    # Lookup
    # =========================================================================

    def global_params(self, k: int) -> float:
        """Global parameter in slot k."""
        return float(self._global[k])

    def row_params(self, k: int, row: Union[int, np.ndarray]) -> Union[float, np.ndarray]:
        """Row parameter in slot k; ``row`` may be an index array."""
        if np.ndim(row) == 0:
            return float(self._row[k, row])
        return self._row[k, row]

    def col_params(self, k: int, col: int) -> float:
        """Column parameter in slot k."""
        return float(self._col[k, col])

    # =========================================================================
    # Introspection
    # =========================================================================

    @property
    def global_array(self) -> np.ndarray:
        return self._global

    @property
    def row_array(self) -> np.ndarray:
        return self._row

    @property
    def col_array(self) -> np.ndarray:
        return self._col

    @property
    def n_rows(self) -> int:
        """Rows covered by the row parameter space."""
        return self._row.shape[1]

    @property
    def n_cols(self) -> int:
        """Columns covered by the column parameter space."""
        return self._col.shape[1]

    def n_slots(self, scope: ParamScope) -> int:
        """Number of slots in the given parameter space."""
        if scope == ParamScope.GLOBAL:
            return self._global.shape[0]
        if scope == ParamScope.ROW:
            return self._row.shape[0]
        return self._col.shape[0]

    def check_covers(self, scope: ParamScope, slot: int, rows: int, cols: int) -> None:
        """Verify the fit can answer every lookup for a (rows, cols) matrix.

        Raises:
            ParameterIndexError: If the parameter space has no such slot.
            DimensionMismatchError: If the row/column vector is shorter
                than the matrix dimension.
        """
        scope = ParamScope(scope)
        if not 0 <= slot < self.n_slots(scope):
            raise ParameterIndexError(
                f"{scope.name.lower()} parameters have {self.n_slots(scope)} slots, "
                f"slot {slot} requested"
            )
        if scope == ParamScope.ROW and self.n_rows < rows:
            raise DimensionMismatchError(
                f"Row parameters cover {self.n_rows} rows, matrix has {rows}"
            )
        if scope == ParamScope.COL and self.n_cols < cols:
            raise DimensionMismatchError(
                f"Column parameters cover {self.n_cols} columns, matrix has {cols}"
            )

    def __repr__(self) -> str:
        return (
            f"ParameterFit(global={self._global.shape}, "
            f"row={self._row.shape}, col={self._col.shape})"
        )


def resolve_param(
    fit: ParameterFit,
    scope: ParamScope,
    slot: int,
    chunk,
) -> Union[float, np.ndarray]:
    """Parameter for the entries of ``chunk``.

    Returns a scalar for GLOBAL and COL scope and an array parallel to
    ``chunk.values`` for ROW scope.
    """
    if scope == ParamScope.GLOBAL:
        return fit.global_params(slot)
    if scope == ParamScope.ROW:
        return fit.row_params(slot, chunk.row_indices)
    return fit.col_params(slot, chunk.current_column)
