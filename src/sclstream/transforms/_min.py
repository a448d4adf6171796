"""
Minimum Clamp Transforms

Clamp every stored value from above: ``v <- min(v, bound)``. The bound is
read from slot 0 of the fit by default.

    Min        bound = fit.global_params(slot)
    MinByRow   bound = fit.row_params(slot, row of the entry)
    MinByCol   bound = fit.col_params(slot, current_column)

Clamping never increases a value, and stacking two clamps with the same
bound gives the same result as one. A NaN bound leaves values unchanged,
while a NaN value stays NaN.
"""

from typing import Union
import numpy as np

from ._base import MatrixTransform
from ._fit import ParamScope

__all__ = ['Min', 'MinByRow', 'MinByCol']


class _MinTransform(MatrixTransform):

    def apply(self, values: np.ndarray, param: Union[float, np.ndarray]) -> None:
        np.copyto(values, param, where=param < values)


class Min(_MinTransform):
    """Clamp all values to one global bound.

    Example:
        >>> chain = Min(loader, ParameterFit.constant(4.0))
    """
    scope = ParamScope.GLOBAL


class MinByRow(_MinTransform):
    """Clamp each value to the bound of its row.

    Example:
        >>> fit = ParameterFit(row_params=[4.0, 1.0])
        >>> chain = MinByRow(loader, fit)
    """
    scope = ParamScope.ROW


class MinByCol(_MinTransform):
    """Clamp each value to the bound of its column."""
    scope = ParamScope.COL
