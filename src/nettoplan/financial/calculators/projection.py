"""Month-by-month portfolio projection.

Answers "what does the portfolio become under growth + Sparplan
contributions alone":
- Each non-cash holding grows by annual_return / 12 every month
  (simple monthly compounding).
- Active contribution plans inject new capital every month they cover.
  Contributions are never drawn from the cash balance.
- Income and expenses are NOT modelled here; ``net_cash_flow`` is always 0.

Scenario multipliers (conservative / realistic / optimistic) scale each
snapshot holding's return once, when it is seeded. Holdings created by a
contribution plan keep their unscaled return.

Pure math: no I/O and no shared state between runs.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from loguru import logger

from nettoplan.financial.calculators.return_defaults import (
    DEFAULT_POLICY,
    ReturnPolicy,
    Scenario,
    default_return,
)
from nettoplan.financial.models import (
    ZERO,
    AssetType,
    ContributionPlan,
    HoldingState,
    PortfolioSnapshot,
    to_decimal,
)

MONTHS_PER_YEAR = 12
CASH_LABEL = "Cash"
UNSCALED = Decimal(1)


@dataclass(frozen=True)
class ProjectionPoint:
    """Portfolio state at the end of one projected month."""

    month_index: int
    date: date
    net_worth: Decimal
    portfolio_value: Decimal
    cash_value: Decimal
    investment_value: Decimal
    cumulative_contributions: Decimal
    net_cash_flow: Decimal  # income/expense flows are out of scope, always 0
    breakdown: tuple[tuple[str, Decimal], ...] = ()


@dataclass(frozen=True)
class ProjectionSummary:
    """Headline numbers of a projection run."""

    starting_value: Decimal = ZERO
    ending_value: Decimal = ZERO
    total_gain: Decimal = ZERO  # ending - starting - contributions
    total_contributions: Decimal = ZERO
    average_annual_return: Decimal = ZERO  # CAGR, 0 when starting_value <= 0


@dataclass
class ProjectionResult:
    """Points plus summary for one scenario."""

    scenario: Scenario
    points: list[ProjectionPoint] = field(default_factory=list)
    summary: ProjectionSummary = field(default_factory=ProjectionSummary)

    @property
    def months(self) -> int:
        return len(self.points)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "scenario": self.scenario.value,
            "summary": {
                "starting_value": round(float(self.summary.starting_value), 2),
                "ending_value": round(float(self.summary.ending_value), 2),
                "total_gain": round(float(self.summary.total_gain), 2),
                "total_contributions": round(float(self.summary.total_contributions), 2),
                "average_annual_return": float(self.summary.average_annual_return),
            },
            "points": [
                {
                    "month": p.month_index,
                    "date": p.date.isoformat(),
                    "net_worth": round(float(p.net_worth), 2),
                    "cash_value": round(float(p.cash_value), 2),
                    "investment_value": round(float(p.investment_value), 2),
                    "cumulative_contributions": round(float(p.cumulative_contributions), 2),
                }
                for p in self.points
            ],
        }


@dataclass(frozen=True)
class ContributionImpact:
    """Effect of a changed contribution schedule on a milestone."""

    months_saved: int
    value_difference: Decimal


@dataclass
class ScenarioComparison:
    """The same inputs projected under every scenario."""

    years: Decimal
    results: dict[Scenario, ProjectionResult] = field(default_factory=dict)

    def format_table(self) -> str:
        """Format comparison as text table."""
        lines = []
        lines.append("=" * 75)
        lines.append("  Projection Scenario Comparison")
        lines.append("=" * 75)
        lines.append(f"\nHorizon: {self.years} years")
        lines.append("")

        lines.append("-" * 75)
        lines.append(f"{'Scenario':<15} {'Start':>14} {'End':>14} {'Contributions':>14} {'CAGR':>8}")
        lines.append("-" * 75)

        for scenario, result in self.results.items():
            s = result.summary
            lines.append(
                f"{scenario.value:<15} {s.starting_value:>14,.0f} {s.ending_value:>14,.0f} "
                f"{s.total_contributions:>14,.0f} {s.average_annual_return * 100:>7.2f}%"
            )

        lines.append("-" * 75)
        return "\n".join(lines)


def add_months(start: date, months: int) -> date:
    """First day of the month ``months`` after ``start``'s month."""
    total = start.year * 12 + (start.month - 1) + months
    return date(total // 12, total % 12 + 1, 1)


def _months_for(years) -> int:
    return int((to_decimal(years) * MONTHS_PER_YEAR).to_integral_value())


def _seed_return(
    symbol: str,
    asset_type: AssetType,
    return_overrides: Mapping[str, Decimal],
    multiplier: Decimal,
    policy: ReturnPolicy,
) -> Decimal:
    override = return_overrides.get(symbol)
    if override is not None:
        base = to_decimal(override)
        source = "override"
    else:
        base = default_return(asset_type, symbol, policy)
        source = "default"
    logger.debug(f"{symbol}: base return {base:.4f} ({source}), scenario-adjusted {base * multiplier:.4f}")
    return base * multiplier


def _snapshot_point(
    month_index: int,
    point_date: date,
    holdings: dict[str, HoldingState],
    standalone_cash: Decimal,
    cumulative_contributions: Decimal,
) -> ProjectionPoint:
    investment_value = ZERO
    cash_value = standalone_cash
    breakdown = []
    for symbol, holding in holdings.items():
        if holding.is_cash:
            cash_value += holding.value
        else:
            investment_value += holding.value
        breakdown.append((symbol, holding.value))
    breakdown.append((CASH_LABEL, standalone_cash))

    net_worth = investment_value + cash_value
    return ProjectionPoint(
        month_index=month_index,
        date=point_date,
        net_worth=net_worth,
        portfolio_value=net_worth,
        cash_value=cash_value,
        investment_value=investment_value,
        cumulative_contributions=cumulative_contributions,
        net_cash_flow=ZERO,
        breakdown=tuple(breakdown),
    )


def project(
    snapshot: PortfolioSnapshot,
    contribution_plans: Iterable[ContributionPlan] = (),
    return_overrides: Mapping[str, Decimal] | None = None,
    years=10,
    scenario: Scenario | str = Scenario.REALISTIC,
    start_date: date | None = None,
    policy: ReturnPolicy | None = None,
) -> ProjectionResult:
    """Project a portfolio month by month.

    Args:
        snapshot: Current holdings and standalone cash.
        contribution_plans: Recurring contributions (Sparpläne).
        return_overrides: Expected annual return per symbol; symbols without
            one use ``default_return``.
        years: Projection horizon. ``years <= 0`` yields an empty result.
        scenario: conservative, realistic or optimistic.
        start_date: Month of the first projected point (defaults to this month).
        policy: Return defaults and scenario multipliers.

    Returns:
        ProjectionResult with one point per month and a summary.
    """
    scenario = Scenario.parse(scenario)
    policy = policy or DEFAULT_POLICY
    return_overrides = return_overrides or {}
    plans = list(contribution_plans)
    months = _months_for(years)

    if months <= 0:
        return ProjectionResult(scenario=scenario)

    multiplier = policy.multiplier(scenario)
    start = (start_date or date.today()).replace(day=1)

    logger.debug(
        f"Projecting {len(snapshot.holdings)} holdings, {len(plans)} plans over {months} months ({scenario.value})"
    )

    holdings: dict[str, HoldingState] = {}
    for item in snapshot.holdings:
        holdings[item.symbol] = HoldingState(
            symbol=item.symbol,
            asset_type=item.asset_type,
            shares=item.shares,
            value=item.value,
            annual_return=_seed_return(item.symbol, item.asset_type, return_overrides, multiplier, policy),
        )

    standalone_cash = snapshot.cash
    cumulative_contributions = ZERO
    points: list[ProjectionPoint] = []

    for month in range(months):
        current = add_months(start, month)

        # 1. Growth
        for holding in holdings.values():
            if not holding.is_cash:
                holding.value += holding.value * (holding.annual_return / MONTHS_PER_YEAR)

        # 2. Sparplan contributions (new money, not taken from cash)
        for plan in plans:
            if not plan.covers(current):
                continue
            amount = plan.monthly_amount
            cumulative_contributions += amount

            holding = holdings.get(plan.symbol)
            if holding is None:
                holdings[plan.symbol] = HoldingState(
                    symbol=plan.symbol,
                    asset_type=plan.asset_type,
                    shares=Decimal(1),
                    value=amount,
                    annual_return=_seed_return(plan.symbol, plan.asset_type, return_overrides, UNSCALED, policy),
                )
                continue

            if holding.shares > 0 and holding.value > 0:
                implied_price = holding.value / holding.shares
                holding.shares += amount / implied_price
            holding.value += amount

        # 3. Snapshot
        points.append(_snapshot_point(month, current, holdings, standalone_cash, cumulative_contributions))

    return ProjectionResult(
        scenario=scenario,
        points=points,
        summary=summarize(snapshot.net_worth, points, months),
    )


def summarize(starting_value: Decimal, points: list[ProjectionPoint], months: int) -> ProjectionSummary:
    """Build the summary for a run that started at ``starting_value``."""
    if not points or months <= 0:
        return ProjectionSummary()

    ending_value = points[-1].net_worth
    total_contributions = points[-1].cumulative_contributions
    total_gain = ending_value - starting_value - total_contributions

    if starting_value > 0:
        years = Decimal(months) / MONTHS_PER_YEAR
        cagr = (ending_value / starting_value) ** (1 / years) - 1
    else:
        cagr = ZERO

    return ProjectionSummary(
        starting_value=starting_value,
        ending_value=ending_value,
        total_gain=total_gain,
        total_contributions=total_contributions,
        average_annual_return=cagr,
    )


def compare_scenarios(
    snapshot: PortfolioSnapshot,
    contribution_plans: Iterable[ContributionPlan] = (),
    return_overrides: Mapping[str, Decimal] | None = None,
    years=10,
    start_date: date | None = None,
    policy: ReturnPolicy | None = None,
) -> ScenarioComparison:
    """Project the same inputs under every scenario."""
    plans = list(contribution_plans)
    comparison = ScenarioComparison(years=to_decimal(years))
    for scenario in Scenario:
        comparison.results[scenario] = project(
            snapshot,
            plans,
            return_overrides,
            years=years,
            scenario=scenario,
            start_date=start_date,
            policy=policy,
        )
    return comparison


def calculate_milestone_reach(result: ProjectionResult, target_amount) -> ProjectionPoint | None:
    """First projected point whose net worth reaches ``target_amount``."""
    target = to_decimal(target_amount)
    return next((p for p in result.points if p.net_worth >= target), None)


def calculate_contribution_impact(
    base: ProjectionResult,
    increased: ProjectionResult,
    milestone,
) -> ContributionImpact:
    """Compare two projections: months saved reaching a milestone, and end-value difference."""
    base_point = calculate_milestone_reach(base, milestone)
    increased_point = calculate_milestone_reach(increased, milestone)

    months_saved = 0
    if base_point and increased_point:
        months_saved = base_point.month_index - increased_point.month_index

    return ContributionImpact(
        months_saved=months_saved,
        value_difference=increased.summary.ending_value - base.summary.ending_value,
    )
