"""
Pytest configuration and shared fixtures for sclstream tests.
"""

import pytest
import numpy as np
from pathlib import Path
import sys

# Add src to path for imports
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root / "src"))

import scipy.sparse as sp

from sclstream import config
from sclstream.sparse import CSCLoader


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture(autouse=True)
def reset_config():
    """Every test starts from default configuration."""
    config.reset()
    yield
    config.reset()


@pytest.fixture
def dense_matrix_small():
    """Create a small dense numpy matrix (3x4).

    Matrix:
    [[1, 0, 2, 0],
     [0, 3, 0, 4],
     [5, 0, 0, 6]]
    """
    return np.array([
        [1, 0, 2, 0],
        [0, 3, 0, 4],
        [5, 0, 0, 6]
    ], dtype=np.float64)


@pytest.fixture
def scipy_csc_matrix(dense_matrix_small):
    """Same matrix as dense_matrix_small in scipy CSC format."""
    return sp.csc_matrix(dense_matrix_small)


@pytest.fixture
def small_loader(scipy_csc_matrix):
    """Loader over the small matrix with a buffer larger than any column."""
    return CSCLoader.from_scipy(scipy_csc_matrix, chunk_size=8)


@pytest.fixture
def random_dense_matrix():
    """Random 40x25 matrix with ~20% nonzeros, some negative."""
    rng = np.random.default_rng(42)
    dense = rng.normal(loc=2.0, scale=3.0, size=(40, 25))
    dense[rng.random(dense.shape) > 0.2] = 0.0
    return dense


@pytest.fixture
def random_loader(random_dense_matrix):
    """Loader over the random matrix with a small buffer to force split columns."""
    return CSCLoader.from_dense(random_dense_matrix, chunk_size=3)


# =============================================================================
# Helper Functions
# =============================================================================

def _drain(loader):
    """Pull every chunk; return list of (column, rows, values) copies."""
    out = []
    while loader.load():
        out.append((
            loader.current_column,
            loader.row_data().copy(),
            loader.val_data().copy(),
        ))
    return out


@pytest.fixture
def drain():
    """Helper that pulls a loader to exhaustion."""
    return _drain
