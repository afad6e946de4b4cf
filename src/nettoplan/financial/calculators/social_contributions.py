"""Social-insurance contribution estimate (employee share).

Each component is ``rate * min(gross_salary, ceiling)``. Above a ceiling the
contribution stops growing, so the average contribution rate falls as
salary rises, so contributions are regressive above the ceilings.

Pension and unemployment insurance share the pension ceiling; health and
care insurance share the health ceiling.
"""

from dataclasses import dataclass
from decimal import Decimal

from nettoplan.core.exceptions import InvalidInputError
from nettoplan.financial.calculators import tax_tables as tt
from nettoplan.financial.models import ZERO, to_decimal


@dataclass(frozen=True)
class SocialContributionSchedule:
    """Rates and annual ceilings for one contribution year."""

    pension_rate: Decimal = tt.PENSION_RATE
    health_rate: Decimal = tt.HEALTH_RATE + tt.HEALTH_ADDITIONAL_RATE
    unemployment_rate: Decimal = tt.UNEMPLOYMENT_RATE
    care_rate: Decimal = tt.CARE_RATE
    pension_ceiling: Decimal = tt.PENSION_CEILING_2024
    health_ceiling: Decimal = tt.HEALTH_CEILING_2024


DEFAULT_SOCIAL_SCHEDULE = SocialContributionSchedule()


@dataclass(frozen=True)
class SocialContributionEstimate:
    """Annual employee contributions; ``total`` is the exact sum of the four parts."""

    pension_contribution: Decimal = ZERO
    health_contribution: Decimal = ZERO
    unemployment_contribution: Decimal = ZERO
    care_contribution: Decimal = ZERO

    @property
    def total(self) -> Decimal:
        return (
            self.pension_contribution
            + self.health_contribution
            + self.unemployment_contribution
            + self.care_contribution
        )

    def to_dict(self) -> dict:
        return {
            "pension_contribution": float(self.pension_contribution),
            "health_contribution": float(self.health_contribution),
            "unemployment_contribution": float(self.unemployment_contribution),
            "care_contribution": float(self.care_contribution),
            "total": float(self.total),
        }


def estimate_social_contributions(
    gross_salary,
    schedule: SocialContributionSchedule | None = None,
) -> SocialContributionEstimate:
    """Estimate annual employee social contributions for a gross salary.

    Args:
        gross_salary: Annual gross employment income.
        schedule: Rates and ceilings, defaults to 2024.

    Raises:
        InvalidInputError: If gross_salary is negative.
    """
    schedule = schedule or DEFAULT_SOCIAL_SCHEDULE
    gross = to_decimal(gross_salary)
    if gross < 0:
        raise InvalidInputError(f"Gross salary cannot be negative: {gross}")

    pension_base = min(gross, schedule.pension_ceiling)
    health_base = min(gross, schedule.health_ceiling)

    return SocialContributionEstimate(
        pension_contribution=pension_base * schedule.pension_rate,
        health_contribution=health_base * schedule.health_rate,
        unemployment_contribution=pension_base * schedule.unemployment_rate,
        care_contribution=health_base * schedule.care_rate,
    )
