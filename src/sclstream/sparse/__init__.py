"""sclstream Sparse Loader Module.

Pull-based chunk loaders over column-major (CSC) sparse matrices.

Type Hierarchy:

    MatrixLoader (ABC)
    ├── ChunkedLoader                 # Owns the Chunk buffer
    │   ├── CSCLoader                 # In-memory CSC arrays / scipy / dense
    │   └── CallbackLoader            # User-extensible column callbacks
    └── MatrixTransform               # see sclstream.transforms

Quick Start:
    >>> from sclstream.sparse import CSCLoader, to_scipy
    >>>
    >>> loader = CSCLoader.from_scipy(scipy_mat, chunk_size=4096)
    >>> while loader.load():
    ...     handle(loader.current_column, loader.row_data(), loader.val_data())
    >>>
    >>> # Back to scipy
    >>> mat = to_scipy(loader)

Key Classes:
    - Chunk: Fixed-size buffer of (values, row indices) for one column
    - MatrixLoader: Pull protocol shared by loaders and transforms
    - CSCLoader: Loader over CSC arrays
    - CallbackLoader: User-defined column access

Key Functions:
    - to_scipy: Drain a chain into scipy.sparse.csc_matrix
"""

from ._chunk import Chunk
from ._base import MatrixLoader
from ._loader import ChunkedLoader, CSCLoader
from ._callback import CallbackLoader
from ._materialize import to_scipy

__all__ = [
    'Chunk',
    'MatrixLoader',
    'ChunkedLoader',
    'CSCLoader',
    'CallbackLoader',
    'to_scipy',
]
