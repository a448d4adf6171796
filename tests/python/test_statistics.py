"""
Tests for StatsResult and streaming statistics.
"""

from functools import partial

import pytest
import numpy as np

from sclstream import ComputeConfig, config
from sclstream.error import (
    DimensionMismatchError, InvalidArgumentError, SclStreamError, StatisticUnavailableError,
)
from sclstream.sparse import CSCLoader
from sclstream.statistics import Stats, StatsResult, compute_matrix_stats
from sclstream.transforms import Min, MinByRow, ParameterFit, compose


def _dense_stats(dense, axis, ddof=1):
    """Reference statistics with implicit zeros included."""
    return (
        np.count_nonzero(dense, axis=axis).astype(np.float64),
        dense.mean(axis=axis),
        dense.var(axis=axis, ddof=ddof),
    )


class TestStatsResult:
    """Test availability checks and transpose."""

    @pytest.fixture
    def full_result(self):
        row = np.array([[1.0, 2.0], [0.5, 1.5], [0.1, 0.2]])
        col = np.array([[3.0, 0.0, 1.0], [1.0, 0.0, 2.0]])
        return StatsResult(row_stats=row, col_stats=col)

    def test_row_accessors(self, full_result):
        np.testing.assert_array_equal(full_result.row_nonzeros(), [1.0, 2.0])
        np.testing.assert_array_equal(full_result.row_mean(), [0.5, 1.5])
        np.testing.assert_array_equal(full_result.row_variance(), [0.1, 0.2])

    def test_col_accessors(self, full_result):
        np.testing.assert_array_equal(full_result.col_nonzeros(), [3.0, 0.0, 1.0])
        np.testing.assert_array_equal(full_result.col_mean(), [1.0, 0.0, 2.0])
        with pytest.raises(StatisticUnavailableError):
            full_result.col_variance()

    def test_only_nonzeros(self):
        res = StatsResult(row_stats=np.array([[2.0, 0.0, 1.0]]), col_stats=np.zeros((0, 4)))

        np.testing.assert_array_equal(res.row_nonzeros(), [2.0, 0.0, 1.0])
        with pytest.raises(StatisticUnavailableError):
            res.row_mean()
        with pytest.raises(StatisticUnavailableError):
            res.row_variance()
        with pytest.raises(StatisticUnavailableError):
            res.col_nonzeros()

    def test_mean_needs_two_rows(self):
        short = StatsResult(row_stats=np.ones((1, 3)), col_stats=np.zeros((0, 2)))
        with pytest.raises(StatisticUnavailableError):
            short.row_mean()

        stats = np.array([[1.0, 1.0, 1.0], [4.0, 5.0, 6.0]])
        ok = StatsResult(row_stats=stats, col_stats=np.zeros((0, 2)))
        np.testing.assert_array_equal(ok.row_mean(), [4.0, 5.0, 6.0])

    def test_error_names_statistic(self):
        res = StatsResult(row_stats=np.zeros((0, 2)), col_stats=np.ones((2, 2)))
        with pytest.raises(StatisticUnavailableError) as exc_info:
            res.col_variance()
        assert exc_info.value.statistic == "variance"
        assert exc_info.value.axis == "col"
        assert exc_info.value.code == SclStreamError.ERROR_STATISTIC_UNAVAILABLE
        assert isinstance(exc_info.value, LookupError)

    def test_levels(self, full_result):
        assert full_result.row_level == Stats.VARIANCE
        assert full_result.col_level == Stats.MEAN
        assert full_result.shape == (2, 3)

    def test_transpose(self, full_result):
        t = full_result.transpose()
        assert t.row_stats is full_result.col_stats
        assert t.col_stats is full_result.row_stats
        np.testing.assert_array_equal(t.row_nonzeros(), full_result.col_nonzeros())
        np.testing.assert_array_equal(t.col_variance(), full_result.row_variance())

    def test_double_transpose(self, full_result):
        tt = full_result.transpose().transpose()
        assert tt.row_stats is full_result.row_stats
        assert tt.col_stats is full_result.col_stats
        assert tt.row_level == full_result.row_level
        assert tt.col_level == full_result.col_level

    def test_frozen(self, full_result):
        with pytest.raises(AttributeError):
            full_result.row_stats = np.zeros((0, 2))

    def test_invalid_arrays(self):
        with pytest.raises(DimensionMismatchError):
            StatsResult(row_stats=np.zeros(3), col_stats=np.zeros((0, 2)))
        with pytest.raises(DimensionMismatchError):
            StatsResult(row_stats=np.zeros((4, 3)), col_stats=np.zeros((0, 2)))


class TestComputeMatrixStats:
    """Test the single-pass statistics producer."""

    def test_matches_dense(self, random_loader, random_dense_matrix):
        res = compute_matrix_stats(random_loader, row_stats=Stats.VARIANCE,
                                   col_stats=Stats.VARIANCE)

        nnz, mean, var = _dense_stats(random_dense_matrix, axis=1)
        np.testing.assert_array_equal(res.row_nonzeros(), nnz)
        np.testing.assert_allclose(res.row_mean(), mean)
        np.testing.assert_allclose(res.row_variance(), var)

        nnz, mean, var = _dense_stats(random_dense_matrix, axis=0)
        np.testing.assert_array_equal(res.col_nonzeros(), nnz)
        np.testing.assert_allclose(res.col_mean(), mean)
        np.testing.assert_allclose(res.col_variance(), var)

    def test_requested_levels_only(self, small_loader):
        res = compute_matrix_stats(small_loader, row_stats=Stats.NONZERO_COUNT,
                                   col_stats=Stats.MEAN)
        assert res.row_stats.shape == (1, 3)
        assert res.col_stats.shape == (2, 4)
        with pytest.raises(StatisticUnavailableError):
            res.row_mean()
        with pytest.raises(StatisticUnavailableError):
            res.col_variance()

    def test_nothing_requested(self, small_loader):
        res = compute_matrix_stats(small_loader)
        assert res.row_level == Stats.NONE
        assert res.col_level == Stats.NONE
        assert res.shape == (3, 4)

    def test_small_values(self, small_loader):
        res = compute_matrix_stats(small_loader, row_stats=Stats.MEAN,
                                   col_stats=Stats.NONZERO_COUNT)
        np.testing.assert_array_equal(res.row_nonzeros(), [2.0, 2.0, 2.0])
        np.testing.assert_allclose(res.row_mean(), [0.75, 1.75, 2.75])
        np.testing.assert_array_equal(res.col_nonzeros(), [2.0, 1.0, 1.0, 2.0])

    def test_ddof_from_config(self, random_loader, random_dense_matrix):
        with config.local(compute=ComputeConfig(ddof=0)):
            res = compute_matrix_stats(random_loader, col_stats=Stats.VARIANCE)
        np.testing.assert_allclose(res.col_variance(), random_dense_matrix.var(axis=0))

    def test_ddof_argument(self, random_loader, random_dense_matrix):
        res = compute_matrix_stats(random_loader, row_stats=Stats.VARIANCE, ddof=0)
        np.testing.assert_allclose(res.row_variance(), random_dense_matrix.var(axis=1))

    def test_variance_undefined_for_single_entry(self):
        loader = CSCLoader.from_dense([[3.0], [0.0]])
        res = compute_matrix_stats(loader, row_stats=Stats.VARIANCE, col_stats=Stats.VARIANCE)
        assert np.all(np.isnan(res.row_variance()))
        np.testing.assert_allclose(res.col_variance(), [4.5])

    def test_clamped_to_zero_not_counted(self, small_loader):
        chain = Min(small_loader, ParameterFit.constant(0.0))
        res = compute_matrix_stats(chain, row_stats=Stats.MEAN, col_stats=Stats.NONZERO_COUNT)
        np.testing.assert_array_equal(res.row_nonzeros(), [0.0, 0.0, 0.0])
        np.testing.assert_array_equal(res.row_mean(), [0.0, 0.0, 0.0])
        np.testing.assert_array_equal(res.col_nonzeros(), [0.0, 0.0, 0.0, 0.0])

    def test_through_chain(self, random_dense_matrix):
        bounds = np.linspace(0.0, 3.0, random_dense_matrix.shape[0])
        chain = compose(
            CSCLoader.from_dense(random_dense_matrix, chunk_size=2),
            partial(MinByRow, fit=ParameterFit(row_params=bounds)),
            partial(Min, fit=ParameterFit.constant(2.0)),
        )
        clamped = np.minimum(np.minimum(random_dense_matrix, bounds[:, None]), 2.0)
        clamped[random_dense_matrix == 0] = 0.0

        res = compute_matrix_stats(chain, col_stats=Stats.VARIANCE)
        nnz, mean, var = _dense_stats(clamped, axis=0)
        np.testing.assert_array_equal(res.col_nonzeros(), nnz)
        np.testing.assert_allclose(res.col_mean(), mean)
        np.testing.assert_allclose(res.col_variance(), var)

    def test_transpose_serves_other_axis(self, random_dense_matrix):
        res = compute_matrix_stats(CSCLoader.from_dense(random_dense_matrix),
                                   col_stats=Stats.MEAN)
        np.testing.assert_allclose(res.transpose().row_mean(), random_dense_matrix.mean(axis=0))

    def test_results_read_only(self, small_loader):
        res = compute_matrix_stats(small_loader, row_stats=Stats.MEAN)
        with pytest.raises(ValueError):
            res.row_mean()[0] = 1.0

    def test_invalid_level(self, small_loader):
        with pytest.raises(InvalidArgumentError):
            compute_matrix_stats(small_loader, row_stats=7)

    def test_repeatable(self, random_loader):
        a = compute_matrix_stats(random_loader, row_stats=Stats.VARIANCE)
        b = compute_matrix_stats(random_loader, row_stats=Stats.VARIANCE)
        np.testing.assert_array_equal(a.row_stats, b.row_stats)
