"""Unit tests for stockmodeler.analysis.returns module."""

import numpy as np
import pandas as pd
import pytest

from stockmodeler.analysis.returns import (
    compute_log_returns,
    estimate_return_statistics,
    latest_close,
)
from stockmodeler.errors import InsufficientDataError, InvalidParameterError


class TestComputeLogReturns:
    def test_length_is_prices_minus_one(self, sample_prices):
        returns = compute_log_returns(sample_prices)
        assert len(returns) == len(sample_prices) - 1

    def test_matches_log_ratio(self):
        returns = compute_log_returns([100.0, 110.0, 99.0])
        np.testing.assert_allclose(returns, [np.log(1.1), np.log(0.9)])

    def test_drops_missing_and_non_positive(self):
        returns = compute_log_returns([100.0, np.nan, 0.0, 110.0, -5.0, 121.0])
        np.testing.assert_allclose(returns, [np.log(1.1), np.log(1.1)])

    def test_single_price_gives_empty(self):
        assert len(compute_log_returns([100.0])) == 0

    def test_accepts_series(self, sample_prices):
        assert isinstance(compute_log_returns(pd.Series(sample_prices)), np.ndarray)


class TestLatestClose:
    def test_last_valid_price(self):
        assert latest_close([10.0, 11.0, np.nan]) == 11.0

    def test_no_valid_price_raises(self):
        with pytest.raises(InsufficientDataError):
            latest_close([np.nan, 0.0])


class TestEstimateReturnStatistics:
    def test_sample_stdev_uses_n_minus_one(self):
        stats = estimate_return_statistics([0.01, -0.01, 0.02, 0.0])
        assert stats.mean == pytest.approx(0.005)
        assert stats.stdev == pytest.approx(np.std([0.01, -0.01, 0.02, 0.0], ddof=1))
        assert stats.count == 4

    def test_identical_values_have_zero_stdev(self):
        stats = estimate_return_statistics([0.001] * 10)
        assert stats.mean == pytest.approx(0.001)
        assert stats.stdev == pytest.approx(0.0, abs=1e-15)

    def test_order_is_irrelevant(self):
        a = estimate_return_statistics([0.03, -0.02, 0.01, 0.005])
        b = estimate_return_statistics([0.005, 0.01, 0.03, -0.02])
        assert a.mean == pytest.approx(b.mean)
        assert a.stdev == pytest.approx(b.stdev)

    @pytest.mark.parametrize("returns", [[], [0.01]])
    def test_fewer_than_two_observations(self, returns):
        with pytest.raises(InsufficientDataError):
            estimate_return_statistics(returns)

    def test_missing_values_rejected(self):
        with pytest.raises(InvalidParameterError):
            estimate_return_statistics([0.01, np.nan, 0.02])
