"""
Cached historical-return lookup.

Glue between a price source (broker export, market-data client, CSV
reader; anything callable as ``source(symbol) -> [PricePoint, ...]``) and
the pure calculators. Analyses are cached per symbol for 24 hours by
default, including "insufficient data" answers.

Usage:
    history = HistoricalReturns(load_monthly_closes)
    overrides = history.return_overrides(snapshot.holdings)
    result = project(snapshot, plans, overrides, years=10)
"""

from collections.abc import Callable, Iterable, Sequence
from decimal import Decimal

from loguru import logger

from nettoplan.core.config_schema import NettoplanConfig
from nettoplan.core.utils.cache import TTLCache
from nettoplan.financial.calculators.return_defaults import DEFAULT_POLICY, ReturnPolicy, default_return
from nettoplan.financial.calculators.returns import UNSUPPORTED_ASSET_TYPES, ReturnSummary, analyze_returns
from nettoplan.financial.models import AssetType, PricePoint, SnapshotHolding

PriceSource = Callable[[str], Sequence[PricePoint]]


class HistoricalReturns:
    """Per-symbol return analysis with caching and default fallback."""

    def __init__(
        self,
        price_source: PriceSource,
        cache: TTLCache | None = None,
        policy: ReturnPolicy | None = None,
    ):
        self.price_source = price_source
        self.cache = cache if cache is not None else TTLCache()
        self.policy = policy or DEFAULT_POLICY

    @classmethod
    def from_config(cls, price_source: PriceSource, settings: NettoplanConfig) -> "HistoricalReturns":
        """Build with the cache TTL and return policy from validated settings."""
        return cls(
            price_source,
            cache=TTLCache(default_ttl=settings.cache.ttl_seconds),
            policy=settings.return_policy(),
        )

    def analysis(self, symbol: str, asset_type: AssetType | str | None = None) -> ReturnSummary | None:
        """Return the (cached) analysis for ``symbol``, or None if there is no usable history."""
        if asset_type is not None and AssetType.parse(asset_type) in UNSUPPORTED_ASSET_TYPES:
            return None

        def compute() -> ReturnSummary | None:
            logger.debug(f"Analyzing price history for {symbol}")
            return analyze_returns(symbol, self.price_source(symbol), asset_type)

        return self.cache.get_or_set(("analysis", symbol), compute)

    def expected_return(self, symbol: str, asset_type: AssetType | str | None = None) -> Decimal:
        """Historical average annual return, falling back to the default table."""
        summary = self.analysis(symbol, asset_type)
        if summary is not None:
            return summary.average_annual_return
        return default_return(asset_type, symbol, self.policy)

    def return_overrides(self, holdings: Iterable[SnapshotHolding]) -> dict[str, Decimal]:
        """Historical returns for the holdings that have one, keyed by symbol.

        Holdings without usable history are left out so the projector applies
        its own defaults to them.
        """
        overrides = {}
        for holding in holdings:
            if holding.asset_type == AssetType.CASH:
                continue
            summary = self.analysis(holding.symbol, holding.asset_type)
            if summary is not None:
                overrides[holding.symbol] = summary.average_annual_return
        return overrides

    def invalidate(self, symbol: str) -> None:
        """Forget the cached analysis for one symbol."""
        self.cache.invalidate(("analysis", symbol))
