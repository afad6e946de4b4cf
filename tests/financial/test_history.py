"""Tests for nettoplan.financial.history."""

from decimal import Decimal

import pytest

from nettoplan.core.config_schema import NettoplanConfig
from nettoplan.core.utils.cache import TTLCache
from nettoplan.financial.calculators.projection import project
from nettoplan.financial.history import HistoricalReturns
from nettoplan.financial.models import PortfolioSnapshot, SnapshotHolding


@pytest.fixture
def price_source(make_series, rising_series):
    """Callable price source that records which symbols were fetched."""
    series = {
        "VWCE.DE": rising_series,
        "NEW.US": make_series([100, 101, 102]),
    }
    calls = []

    def source(symbol):
        calls.append(symbol)
        return series.get(symbol, [])

    source.calls = calls
    return source


class TestHistoricalReturns:
    def test_analysis_is_cached(self, price_source, clock):
        history = HistoricalReturns(price_source, cache=TTLCache(clock=clock))
        first = history.analysis("VWCE.DE", "etf")
        second = history.analysis("VWCE.DE", "etf")
        assert first is second
        assert price_source.calls == ["VWCE.DE"]

    def test_cache_expires(self, price_source, clock):
        history = HistoricalReturns(price_source, cache=TTLCache(default_ttl=3600, clock=clock))
        history.analysis("VWCE.DE")
        clock.advance(3600)
        history.analysis("VWCE.DE")
        assert price_source.calls == ["VWCE.DE", "VWCE.DE"]

    def test_insufficient_data_cached_as_none(self, price_source, clock):
        history = HistoricalReturns(price_source, cache=TTLCache(clock=clock))
        assert history.analysis("NEW.US") is None
        assert history.analysis("NEW.US") is None
        assert price_source.calls == ["NEW.US"]

    def test_crypto_not_fetched(self, price_source):
        history = HistoricalReturns(price_source)
        assert history.analysis("BTC", "crypto") is None
        assert price_source.calls == []

    def test_invalidate(self, price_source, clock):
        history = HistoricalReturns(price_source, cache=TTLCache(clock=clock))
        history.analysis("VWCE.DE")
        history.invalidate("VWCE.DE")
        history.analysis("VWCE.DE")
        assert price_source.calls == ["VWCE.DE", "VWCE.DE"]

    def test_expected_return_prefers_history(self, price_source):
        history = HistoricalReturns(price_source)
        assert float(history.expected_return("VWCE.DE", "etf")) == pytest.approx(1.01**12 - 1, rel=1e-9)

    def test_expected_return_falls_back_to_default(self, price_source):
        history = HistoricalReturns(price_source)
        assert history.expected_return("NEW.US", "stock") == Decimal("0.08")
        assert history.expected_return("BTC", "crypto") == Decimal("0.15")

    def test_return_overrides_feed_projection(self, price_source):
        history = HistoricalReturns(price_source)
        snapshot = PortfolioSnapshot(
            holdings=[
                SnapshotHolding("VWCE.DE", "etf", 10, 1000),
                SnapshotHolding("NEW.US", "stock", 1, 100),
                SnapshotHolding("TAGESGELD", "cash", 1, 500),
            ]
        )
        overrides = history.return_overrides(snapshot.holdings)
        assert list(overrides) == ["VWCE.DE"]
        assert "TAGESGELD" not in price_source.calls

        result = project(snapshot, return_overrides=overrides, years=1)
        assert result.summary.ending_value > snapshot.net_worth

    def test_from_config(self, price_source):
        settings = NettoplanConfig.model_validate(
            {"cache": {"ttl_seconds": 60}, "returns": {"asset_type_returns": {"stock": "0.05"}}}
        )
        history = HistoricalReturns.from_config(price_source, settings)
        assert history.cache.default_ttl == 60
        assert history.expected_return("NEW", "stock") == Decimal("0.05")
