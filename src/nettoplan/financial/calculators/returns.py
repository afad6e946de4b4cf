"""Historical return analysis.

Turns a monthly price series into annualized return, volatility, Sharpe
ratio and maximum drawdown. Pure function over already-fetched data.

Conventions that downstream consumers rely on:
- Annual return compounds the mean monthly return: (1 + mu)^12 - 1.
- Annual volatility scales the monthly standard deviation by sqrt(12)
  (not a compounded variance).
- Population variance (divide by n), not sample variance.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from loguru import logger

from nettoplan.core.exceptions import InvalidInputError
from nettoplan.financial.models import ZERO, AssetType, PricePoint

RISK_FREE_RATE = Decimal("0.02")
MONTHS_PER_YEAR = 12
MIN_PRICE_POINTS = 12

# No comparable historical series for spot crypto feeds
UNSUPPORTED_ASSET_TYPES = frozenset({AssetType.CRYPTO})


@dataclass(frozen=True)
class ReturnSummary:
    """Statistical summary of one symbol's price history."""

    symbol: str
    average_annual_return: Decimal
    volatility: Decimal
    sharpe_ratio: Decimal
    max_drawdown: Decimal  # <= 0
    data_points: int
    start_date: date
    end_date: date

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "symbol": self.symbol,
            "average_annual_return": float(self.average_annual_return),
            "volatility": float(self.volatility),
            "sharpe_ratio": float(self.sharpe_ratio),
            "max_drawdown": float(self.max_drawdown),
            "data_points": self.data_points,
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
        }


def monthly_returns(prices: Sequence[PricePoint]) -> list[Decimal]:
    """Simple period-over-period returns, skipping non-positive denominators."""
    returns = []
    for prev, curr in zip(prices, prices[1:]):
        if prev.close > 0:
            returns.append((curr.close - prev.close) / prev.close)
    return returns


def max_drawdown(prices: Sequence[PricePoint]) -> Decimal:
    """Most negative peak-to-trough decline (0 if the series never falls)."""
    worst = ZERO
    peak = None
    for point in prices:
        if peak is None or point.close > peak:
            peak = point.close
        if peak <= 0:
            continue
        drawdown = (point.close - peak) / peak
        if drawdown < worst:
            worst = drawdown
    return worst


def _check_chronological(symbol: str, prices: Sequence[PricePoint]) -> None:
    for prev, curr in zip(prices, prices[1:]):
        if curr.date <= prev.date:
            raise InvalidInputError(
                f"Price series for {symbol} must be strictly chronological: {prev.date} then {curr.date}"
            )


def analyze_returns(
    symbol: str,
    prices: Sequence[PricePoint],
    asset_type: AssetType | str | None = None,
) -> ReturnSummary | None:
    """Analyze a monthly price series.

    Args:
        symbol: Symbol the series belongs to (carried into the summary).
        prices: Chronological price points, one per month.
        asset_type: Optional asset type; unsupported types short-circuit.

    Returns:
        ReturnSummary, or None when there is not enough usable data or the
        asset type has no comparable history. Callers fall back to
        ``default_return`` in that case.
    """
    if asset_type is not None and AssetType.parse(asset_type) in UNSUPPORTED_ASSET_TYPES:
        logger.debug(f"No historical analysis for {symbol}: unsupported asset type {asset_type}")
        return None

    prices = list(prices)
    if len(prices) < MIN_PRICE_POINTS:
        logger.debug(f"Insufficient data for {symbol}: {len(prices)} price points")
        return None

    _check_chronological(symbol, prices)

    returns = monthly_returns(prices)
    if not returns:
        logger.debug(f"Insufficient data for {symbol}: no usable monthly returns")
        return None

    count = Decimal(len(returns))
    mean = sum(returns, ZERO) / count
    annual_return = (1 + mean) ** MONTHS_PER_YEAR - 1

    variance = sum(((r - mean) ** 2 for r in returns), ZERO) / count
    volatility = variance.sqrt() * Decimal(MONTHS_PER_YEAR).sqrt()

    sharpe = (annual_return - RISK_FREE_RATE) / volatility if volatility > 0 else ZERO

    return ReturnSummary(
        symbol=symbol,
        average_annual_return=annual_return,
        volatility=volatility,
        sharpe_ratio=sharpe,
        max_drawdown=max_drawdown(prices),
        data_points=len(prices),
        start_date=prices[0].date,
        end_date=prices[-1].date,
    )
