"""
Transform Chain Base Classes

A MatrixTransform wraps exactly one upstream MatrixLoader and rewrites the
values of every chunk that loader produces, in place. Since a transform is
itself a MatrixLoader, transforms stack into chains:

    CSCLoader -> MinByRow -> Min -> consumer

Pull Semantics:

1. ``load()`` calls ``load()`` on the wrapped loader.
2. On False it returns False and leaves the chunk untouched.
3. Otherwise it resolves its parameter for the chunk (per ParamScope)
   and applies its elementwise function to every valid entry.

Each transform in a chain makes one full pass over each chunk.

Ownership:
    The chunk belongs to the root loader. A transform reaches it through
    ``self.loader.chunk`` during ``load()`` and keeps no reference to it.
"""

from abc import abstractmethod
from typing import Callable, Union
import logging
import numpy as np

from ..sparse._base import MatrixLoader
from ..sparse._chunk import Chunk
from ._fit import ParamScope, ParameterFit, resolve_param

__all__ = [
    'MatrixTransform',
    'compose',
]

logger = logging.getLogger("sclstream.transforms")


class MatrixTransform(MatrixLoader):
    """
    Base class for in-place value transforms.

    Subclasses set ``scope`` and implement ``apply(values, param)``, which
    must write its result into ``values``.

    Attributes:
        scope: Parameter granularity (class attribute)
        slot: Parameter slot read from the fit
    """

    scope: ParamScope = ParamScope.GLOBAL

    def __init__(self, loader: MatrixLoader, fit: ParameterFit, slot: int = 0):
        """
        Args:
            loader: Upstream loader (or transform) to wrap
            fit: Parameter provider, shared and never modified
            slot: Parameter slot to read

        Raises:
            ParameterIndexError: If ``fit`` lacks ``slot`` in this scope.
            DimensionMismatchError: If ``fit`` does not cover every row
                (ROW scope) or column (COL scope) of ``loader``.
        """
        fit.check_covers(self.scope, slot, loader.rows, loader.cols)
        self._loader = loader
        self._fit = fit
        self._slot = slot
        logger.debug("Wrapping %r in %s (scope=%s, slot=%d)",
                     loader, self.__class__.__name__, self.scope.name, slot)

    @abstractmethod
    def apply(self, values: np.ndarray, param: Union[float, np.ndarray]) -> None:
        """Rewrite ``values`` in place using ``param``."""
        ...

    # =========================================================================
    # MatrixLoader Implementation
    # =========================================================================

    @property
    def loader(self) -> MatrixLoader:
        """Wrapped upstream loader."""
        return self._loader

    @property
    def fit(self) -> ParameterFit:
        return self._fit

    @property
    def slot(self) -> int:
        return self._slot

    @property
    def rows(self) -> int:
        return self._loader.rows

    @property
    def cols(self) -> int:
        return self._loader.cols

    @property
    def chunk(self) -> Chunk:
        return self._loader.chunk

    def load(self) -> bool:
        if not self._loader.load():
            return False

        chunk = self._loader.chunk
        if chunk.capacity:
            param = resolve_param(self._fit, self.scope, self._slot, chunk)
            self.apply(chunk.values, param)
        return True

    def restart(self) -> None:
        self._loader.restart()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self._loader!r})"


def compose(loader: MatrixLoader, *stages: Callable[[MatrixLoader], MatrixLoader]) -> MatrixLoader:
    """Wrap ``loader`` in each stage, first stage innermost.

    Args:
        loader: Root loader
        *stages: Callables taking the upstream loader and returning the
            wrapping loader, e.g. ``functools.partial(Min, fit=fit)``

    Returns:
        The outermost loader of the chain.

    Example:
        >>> chain = compose(
        ...     CSCLoader.from_scipy(mat),
        ...     partial(MinByRow, fit=row_fit),
        ...     partial(Min, fit=ParameterFit.constant(10.0)),
        ... )
    """
    for stage in stages:
        loader = stage(loader)
    return loader
