"""Core financial data models.

Plain value objects exchanged between the calculators and their callers:
price series, portfolio snapshots and recurring contribution plans.
Any valuation layer (broker import, price API, manual entry) can produce
these; the calculators never fetch anything themselves.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum

from nettoplan.core.exceptions import InvalidInputError

ZERO = Decimal("0")


def to_decimal(value) -> Decimal:
    """Convert ints, floats and strings to Decimal without float noise."""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


class AssetType(Enum):
    """Asset classes known to the projector and the return defaults."""

    STOCK = "stock"
    ETF = "etf"
    CRYPTO = "crypto"
    CASH = "cash"

    @classmethod
    def parse(cls, value: AssetType | str) -> AssetType:
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise InvalidInputError(f"Unknown asset type: {value!r}") from None


@dataclass(frozen=True)
class PricePoint:
    """Closing price for one period of a historical series."""

    date: date
    close: Decimal

    def __post_init__(self):
        object.__setattr__(self, "close", to_decimal(self.close))


@dataclass(frozen=True)
class SnapshotHolding:
    """One position as valued by the caller.

    Attributes:
        symbol: Ticker or identifier, used as the key in projections.
        asset_type: stock, etf, crypto or cash.
        shares: Number of units held.
        value: Current market value in the projection currency.
    """

    symbol: str
    asset_type: AssetType
    shares: Decimal
    value: Decimal

    def __post_init__(self):
        if not self.symbol:
            raise InvalidInputError("Holding symbol cannot be empty")
        object.__setattr__(self, "asset_type", AssetType.parse(self.asset_type))
        for field_name in ["shares", "value"]:
            val = to_decimal(getattr(self, field_name))
            if val < 0:
                raise InvalidInputError(f"Holding {self.symbol} has negative {field_name}: {val}")
            object.__setattr__(self, field_name, val)


@dataclass(frozen=True)
class PortfolioSnapshot:
    """Point-in-time view of a portfolio: positions plus uninvested cash."""

    holdings: tuple[SnapshotHolding, ...] = ()
    cash: Decimal = ZERO

    def __post_init__(self):
        holdings = tuple(self.holdings)
        symbols = [h.symbol for h in holdings]
        duplicates = sorted({s for s in symbols if symbols.count(s) > 1})
        if duplicates:
            raise InvalidInputError(f"Duplicate holdings in snapshot: {duplicates}")
        object.__setattr__(self, "holdings", holdings)

        cash = to_decimal(self.cash)
        if cash < 0:
            raise InvalidInputError(f"Snapshot cash cannot be negative: {cash}")
        object.__setattr__(self, "cash", cash)

    @property
    def investment_value(self) -> Decimal:
        """Value of all non-cash holdings."""
        return sum((h.value for h in self.holdings if h.asset_type != AssetType.CASH), ZERO)

    @property
    def cash_value(self) -> Decimal:
        """Standalone cash plus cash-type holdings."""
        return self.cash + sum((h.value for h in self.holdings if h.asset_type == AssetType.CASH), ZERO)

    @property
    def net_worth(self) -> Decimal:
        return self.investment_value + self.cash_value


@dataclass(frozen=True)
class ContributionPlan:
    """Recurring monthly contribution (Sparplan) into one symbol.

    Attributes:
        symbol: Target holding; created on first contribution if missing.
        monthly_amount: New capital injected every month. Must be positive.
        active: Inactive plans are ignored entirely.
        start_date: First month (inclusive) the plan contributes.
        end_date: Last month (inclusive); None runs until the horizon.
        asset_type: Asset type used when the plan creates a new holding.
    """

    symbol: str
    monthly_amount: Decimal
    active: bool = True
    start_date: date | None = None
    end_date: date | None = None
    asset_type: AssetType = AssetType.ETF

    def __post_init__(self):
        if not self.symbol:
            raise InvalidInputError("Contribution plan symbol cannot be empty")
        amount = to_decimal(self.monthly_amount)
        if amount <= 0:
            raise InvalidInputError(f"Contribution plan for {self.symbol} needs a positive monthly amount, got {amount}")
        object.__setattr__(self, "monthly_amount", amount)
        object.__setattr__(self, "asset_type", AssetType.parse(self.asset_type))
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise InvalidInputError(f"Contribution plan for {self.symbol} ends before it starts")

    def covers(self, month_start: date) -> bool:
        """True if the plan contributes in the month beginning at ``month_start``."""
        if not self.active:
            return False
        if self.start_date and month_start < self.start_date.replace(day=1):
            return False
        if self.end_date and month_start > self.end_date.replace(day=1):
            return False
        return True


@dataclass
class HoldingState:
    """Mutable per-run state of one holding inside a projection."""

    symbol: str
    asset_type: AssetType
    shares: Decimal
    value: Decimal
    annual_return: Decimal

    @property
    def is_cash(self) -> bool:
        return self.asset_type == AssetType.CASH
