"""Financial calculators: returns, projection, German tax, social contributions."""

from .german_tax import (
    DEFAULT_SCHEDULE_2024,
    GermanTaxCalculator,
    GermanTaxSchedule,
    IncomeTaxZones,
    TaxBreakdown,
    TaxResult,
    TaxScenarioInput,
    calculate_german_tax,
)
from .projection import (
    ContributionImpact,
    ProjectionPoint,
    ProjectionResult,
    ProjectionSummary,
    ScenarioComparison,
    calculate_contribution_impact,
    calculate_milestone_reach,
    compare_scenarios,
    project,
)
from .return_defaults import (
    DEFAULT_POLICY,
    ReturnPolicy,
    Scenario,
    default_return,
    projection_scenarios,
)
from .returns import ReturnSummary, analyze_returns
from .social_contributions import (
    DEFAULT_SOCIAL_SCHEDULE,
    SocialContributionEstimate,
    SocialContributionSchedule,
    estimate_social_contributions,
)
from .tax_tables import FilingStatus, TaxClass

__all__ = [
    "DEFAULT_POLICY",
    "DEFAULT_SCHEDULE_2024",
    "DEFAULT_SOCIAL_SCHEDULE",
    "ContributionImpact",
    "FilingStatus",
    "GermanTaxCalculator",
    "GermanTaxSchedule",
    "IncomeTaxZones",
    "ProjectionPoint",
    "ProjectionResult",
    "ProjectionSummary",
    "ReturnPolicy",
    "ReturnSummary",
    "Scenario",
    "ScenarioComparison",
    "SocialContributionEstimate",
    "SocialContributionSchedule",
    "TaxBreakdown",
    "TaxClass",
    "TaxResult",
    "TaxScenarioInput",
    "analyze_returns",
    "calculate_contribution_impact",
    "calculate_german_tax",
    "calculate_milestone_reach",
    "compare_scenarios",
    "default_return",
    "estimate_social_contributions",
    "project",
    "projection_scenarios",
]
