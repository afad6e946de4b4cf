"""Tests for nettoplan.financial.calculators.returns."""

import math
from datetime import date
from decimal import Decimal

import pytest

from nettoplan.core.exceptions import InvalidInputError
from nettoplan.financial.calculators.returns import (
    analyze_returns,
    max_drawdown,
    monthly_returns,
)
from nettoplan.financial.models import PricePoint


def _alternating_closes(count):
    """+10%, -10%, +10%, ... starting at 100."""
    closes = [Decimal("100")]
    for i in range(count - 1):
        step = Decimal("1.1") if i % 2 == 0 else Decimal("0.9")
        closes.append(closes[-1] * step)
    return closes


class TestMonthlyReturns:
    def test_simple_returns(self, make_series):
        assert monthly_returns(make_series([100, 110, 99])) == [Decimal("0.1"), Decimal("-0.1")]

    def test_skips_non_positive_denominator(self, make_series):
        assert monthly_returns(make_series([0, 100, 110])) == [Decimal("0.1")]


class TestMaxDrawdown:
    def test_peak_to_trough(self, make_series):
        assert max_drawdown(make_series([100, 120, 90, 110, 60, 130])) == Decimal("-0.5")

    def test_monotonic_series_has_no_drawdown(self, rising_series):
        assert max_drawdown(rising_series) == 0

    def test_zero_peak_skipped(self, make_series):
        assert max_drawdown(make_series([0, 0, 0])) == 0


@pytest.mark.smoke
class TestAnalyzeReturns:
    def test_steady_growth(self, rising_series):
        summary = analyze_returns("VWCE.DE", rising_series)
        assert summary is not None
        assert float(summary.average_annual_return) == pytest.approx(1.01**12 - 1, rel=1e-9)
        assert float(summary.volatility) == pytest.approx(0, abs=1e-12)
        assert summary.max_drawdown == 0
        assert summary.data_points == 24
        assert summary.start_date == date(2020, 1, 1)
        assert summary.end_date == date(2021, 12, 1)

    def test_volatility_uses_population_variance(self, make_series):
        # 12 returns: six +10%, six -10% -> mean 0, monthly sigma 0.1
        summary = analyze_returns("ALT", make_series(_alternating_closes(13)))
        assert summary.average_annual_return == 0
        assert float(summary.volatility) == pytest.approx(0.1 * math.sqrt(12), rel=1e-9)
        assert float(summary.sharpe_ratio) == pytest.approx(-0.02 / (0.1 * math.sqrt(12)), rel=1e-9)
        assert summary.max_drawdown < 0

    def test_zero_volatility_sharpe_is_zero(self, make_series):
        # Doubling every month: every return is exactly 1.0
        summary = analyze_returns("DBL", make_series([2**i for i in range(12)]))
        assert summary.volatility == 0
        assert summary.sharpe_ratio == 0
        assert summary.average_annual_return == Decimal(2**12 - 1)

    def test_flat_series(self, make_series):
        summary = analyze_returns("FLAT", make_series([50] * 12))
        assert summary.average_annual_return == 0
        assert summary.sharpe_ratio == 0
        assert summary.max_drawdown == 0

    def test_insufficient_points(self, make_series):
        assert analyze_returns("NEW", make_series([100 + i for i in range(11)])) is None

    def test_exactly_twelve_points(self, make_series):
        assert analyze_returns("OK", make_series([100 + i for i in range(12)])) is not None

    def test_no_usable_deltas(self, make_series):
        assert analyze_returns("ZERO", make_series([0] * 12)) is None

    def test_crypto_unsupported(self, rising_series):
        assert analyze_returns("BTC", rising_series, asset_type="crypto") is None

    def test_stock_supported(self, rising_series):
        assert analyze_returns("AAPL.US", rising_series, asset_type="stock") is not None

    def test_not_chronological_raises(self, rising_series):
        shuffled = list(reversed(rising_series))
        with pytest.raises(InvalidInputError, match="chronological"):
            analyze_returns("REV", shuffled)

    def test_duplicate_dates_raise(self, rising_series):
        duplicated = rising_series + [PricePoint(rising_series[-1].date, Decimal("1"))]
        with pytest.raises(InvalidInputError):
            analyze_returns("DUP", duplicated)

    def test_to_dict(self, rising_series):
        data = analyze_returns("VWCE.DE", rising_series).to_dict()
        assert data["symbol"] == "VWCE.DE"
        assert data["start_date"] == "2020-01-01"
        assert isinstance(data["volatility"], float)
