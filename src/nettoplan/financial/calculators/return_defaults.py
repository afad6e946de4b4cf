"""Default expected annual returns.

A deliberately simple heuristic, not a live calibration. Used when no
explicit return and no usable historical analysis exists for a symbol.

Precedence:
1. Exchange suffix of the symbol (``SAP.DE`` -> European equity default).
2. Asset type table.
3. Global fallback.

Scenario multipliers live here too, since both are static policy data.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum

from nettoplan.core.exceptions import InvalidInputError
from nettoplan.financial.models import AssetType


class Scenario(Enum):
    """Projection scenario applied on top of base returns."""

    CONSERVATIVE = "conservative"
    REALISTIC = "realistic"
    OPTIMISTIC = "optimistic"

    @classmethod
    def parse(cls, value: "Scenario | str") -> "Scenario":
        try:
            return cls(value)
        except ValueError:
            raise InvalidInputError(f"Unknown scenario: {value!r}") from None


# === Region defaults (keyed by exchange suffix, upper-case, without the dot) ===

US_EQUITY_RETURN = Decimal("0.08")
EUROPE_EQUITY_RETURN = Decimal("0.06")
EMERGING_EQUITY_RETURN = Decimal("0.09")

REGION_RETURNS: dict[str, Decimal] = {
    "US": US_EQUITY_RETURN,
    "DE": EUROPE_EQUITY_RETURN,
    "AS": EUROPE_EQUITY_RETURN,
    "PA": EUROPE_EQUITY_RETURN,
    "L": EUROPE_EQUITY_RETURN,
    "HK": EMERGING_EQUITY_RETURN,
    "SS": EMERGING_EQUITY_RETURN,
}

ASSET_TYPE_RETURNS: dict[AssetType, Decimal] = {
    AssetType.ETF: Decimal("0.07"),  # global equity average
    AssetType.STOCK: Decimal("0.08"),
    AssetType.CRYPTO: Decimal("0.15"),  # high risk/reward
    AssetType.CASH: Decimal("0.00"),
}

FALLBACK_RETURN = Decimal("0.07")

SCENARIO_MULTIPLIERS: dict[Scenario, Decimal] = {
    Scenario.CONSERVATIVE: Decimal("0.6"),
    Scenario.REALISTIC: Decimal("1.0"),
    Scenario.OPTIMISTIC: Decimal("1.4"),
}


@dataclass
class ReturnPolicy:
    """Lookup tables behind ``default_return``. Override via config."""

    region_returns: dict[str, Decimal] = field(default_factory=lambda: dict(REGION_RETURNS))
    asset_type_returns: dict[AssetType, Decimal] = field(default_factory=lambda: dict(ASSET_TYPE_RETURNS))
    fallback_return: Decimal = FALLBACK_RETURN
    scenario_multipliers: dict[Scenario, Decimal] = field(default_factory=lambda: dict(SCENARIO_MULTIPLIERS))

    def region_return(self, symbol: str | None) -> Decimal | None:
        """Return the region default if the symbol carries a known exchange suffix."""
        if not symbol or "." not in symbol:
            return None
        suffix = symbol.rsplit(".", 1)[1].upper()
        return self.region_returns.get(suffix)

    def multiplier(self, scenario: Scenario | str) -> Decimal:
        return self.scenario_multipliers[Scenario.parse(scenario)]


DEFAULT_POLICY = ReturnPolicy()


def default_return(
    asset_type: AssetType | str | None,
    symbol: str | None = None,
    policy: ReturnPolicy | None = None,
) -> Decimal:
    """Default expected annual return for an asset.

    Args:
        asset_type: stock, etf, crypto or cash (unknown types use the fallback).
        symbol: Optional ticker; an exchange suffix takes precedence over the type.
        policy: Lookup tables, defaults to the built-in policy.

    Returns:
        Annual return as a decimal fraction (0.07 = 7%).
    """
    policy = policy or DEFAULT_POLICY

    region = policy.region_return(symbol)
    if region is not None:
        return region

    if asset_type is None:
        return policy.fallback_return
    try:
        kind = AssetType.parse(asset_type)
    except ValueError:
        return policy.fallback_return
    return policy.asset_type_returns.get(kind, policy.fallback_return)


def projection_scenarios(base_return, policy: ReturnPolicy | None = None) -> dict[str, Decimal]:
    """Scenario-adjusted variants of a base annual return."""
    policy = policy or DEFAULT_POLICY
    base = Decimal(str(base_return))
    return {scenario.value: base * policy.multiplier(scenario) for scenario in Scenario}
