"""
sclstream Transforms Module.

In-place value transforms that wrap a MatrixLoader and rewrite each chunk as
it is pulled. Parameters come from a shared, read-only ParameterFit and are
selected at one of three granularities (ParamScope):

    - GLOBAL: one value for the whole matrix
    - ROW: one value per matrix row
    - COL: one value per matrix column

Example:
    >>> from functools import partial
    >>> from sclstream.sparse import CSCLoader
    >>> from sclstream.transforms import ParameterFit, Min, MinByRow, compose
    >>>
    >>> loader = CSCLoader.from_scipy(mat)
    >>> chain = compose(
    ...     loader,
    ...     partial(MinByRow, fit=ParameterFit(row_params=row_caps)),
    ...     partial(Min, fit=ParameterFit.constant(100.0)),
    ... )
    >>> while chain.load():
    ...     consume(chain.val_data())
"""

from ._fit import (
    ParamScope,
    ParameterFit,
    resolve_param,
)

from ._base import (
    MatrixTransform,
    compose,
)

from ._min import (
    Min,
    MinByRow,
    MinByCol,
)

__all__ = [
    # Parameters
    "ParamScope",
    "ParameterFit",
    "resolve_param",
    # Chain
    "MatrixTransform",
    "compose",
    # Clamp
    "Min",
    "MinByRow",
    "MinByCol",
]
