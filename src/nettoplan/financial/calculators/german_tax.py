"""
German Tax Calculator (Einkommensteuer + Solidaritätszuschlag + Kirchensteuer)

Implements:
- Progressive income tax per the §32a EStG zone formula (2024 constants)
- Ehegattensplitting for joint filers
- Flat 25% Abgeltungsteuer (plus 5.5% Soli) on capital gains and dividends
  above the Sparer-Pauschbetrag
- 5.5% solidarity surcharge above the exemption threshold
- Church tax as a percentage of income tax
- Net income after tax and employee social contributions

The schedule is injected (GermanTaxSchedule) so other years can be plugged
in through configuration; the default is 2024.

All arithmetic is Decimal.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from decimal import ROUND_FLOOR, Decimal

from loguru import logger

from nettoplan.core.exceptions import InvalidInputError
from nettoplan.financial.calculators import tax_tables as tt
from nettoplan.financial.calculators.social_contributions import (
    DEFAULT_SOCIAL_SCHEDULE,
    SocialContributionEstimate,
    SocialContributionSchedule,
    estimate_social_contributions,
)
from nettoplan.financial.calculators.tax_tables import FilingStatus, TaxClass
from nettoplan.financial.models import ZERO, to_decimal

# =============================================================================
# SCHEDULE
# =============================================================================


@dataclass(frozen=True)
class IncomeTaxZones:
    """The five zones of the §32a EStG tariff."""

    basic_allowance: Decimal = tt.GRUNDFREIBETRAG_2024
    zone_2_upper: Decimal = tt.ZONE_2_UPPER_2024
    zone_3_upper: Decimal = tt.ZONE_3_UPPER_2024
    zone_4_upper: Decimal = tt.ZONE_4_UPPER_2024
    zone_2_coefficients: tuple[Decimal, Decimal] = tt.ZONE_2_COEFFICIENTS_2024
    zone_3_coefficients: tuple[Decimal, Decimal, Decimal] = tt.ZONE_3_COEFFICIENTS_2024
    zone_4_rate: Decimal = tt.ZONE_4_RATE_2024
    zone_4_offset: Decimal = tt.ZONE_4_OFFSET_2024
    zone_5_rate: Decimal = tt.ZONE_5_RATE_2024
    zone_5_offset: Decimal = tt.ZONE_5_OFFSET_2024
    divisor: Decimal = tt.PROGRESSION_DIVISOR

    @staticmethod
    def _whole_euros(taxable_income: Decimal) -> Decimal:
        return to_decimal(taxable_income).to_integral_value(rounding=ROUND_FLOOR)

    def tax(self, taxable_income) -> Decimal:
        """Income tax for a single assessment on ``taxable_income`` (floored to euros)."""
        y = self._whole_euros(taxable_income)

        if y <= self.basic_allowance:
            return ZERO

        if y <= self.zone_2_upper:
            a, b = self.zone_2_coefficients
            x = (y - self.basic_allowance) / self.divisor
            return (a * x + b) * x

        if y <= self.zone_3_upper:
            a, b, c = self.zone_3_coefficients
            z = (y - self.zone_2_upper) / self.divisor
            return (a * z + b) * z + c

        if y <= self.zone_4_upper:
            return self.zone_4_rate * y - self.zone_4_offset

        return self.zone_5_rate * y - self.zone_5_offset

    def marginal_rate(self, taxable_income) -> Decimal:
        """Derivative of ``tax`` at ``taxable_income``."""
        y = self._whole_euros(taxable_income)

        if y <= self.basic_allowance:
            return ZERO

        if y <= self.zone_2_upper:
            a, b = self.zone_2_coefficients
            x = (y - self.basic_allowance) / self.divisor
            return (2 * a * x + b) / self.divisor

        if y <= self.zone_3_upper:
            a, b, _ = self.zone_3_coefficients
            z = (y - self.zone_2_upper) / self.divisor
            return (2 * a * z + b) / self.divisor

        if y <= self.zone_4_upper:
            return self.zone_4_rate

        return self.zone_5_rate


@dataclass(frozen=True)
class GermanTaxSchedule:
    """All published constants one assessment needs."""

    year: int = 2024
    zones: IncomeTaxZones = field(default_factory=IncomeTaxZones)
    work_related_expenses_flat: Decimal = tt.WORK_RELATED_EXPENSES_FLAT_2024
    solidarity_rate: Decimal = tt.SOLIDARITY_RATE
    solidarity_threshold_single: Decimal = tt.SOLIDARITY_THRESHOLD_SINGLE
    solidarity_threshold_joint: Decimal = tt.SOLIDARITY_THRESHOLD_JOINT
    # None -> hard cutoff at the threshold; a rate enables the Milderungszone
    solidarity_phase_in_rate: Decimal | None = None
    church_tax_rate_default: Decimal = tt.CHURCH_TAX_RATE_DEFAULT
    capital_gains_tax_rate: Decimal = tt.CAPITAL_GAINS_TAX_RATE
    capital_gains_allowance_single: Decimal = tt.CAPITAL_GAINS_ALLOWANCE_SINGLE
    capital_gains_allowance_joint: Decimal = tt.CAPITAL_GAINS_ALLOWANCE_JOINT
    social: SocialContributionSchedule = field(default_factory=lambda: DEFAULT_SOCIAL_SCHEDULE)

    def solidarity_threshold(self, filing_status: FilingStatus) -> Decimal:
        if filing_status == FilingStatus.MARRIED_JOINT:
            return self.solidarity_threshold_joint
        return self.solidarity_threshold_single

    def capital_gains_allowance(self, filing_status: FilingStatus) -> Decimal:
        if filing_status == FilingStatus.MARRIED_JOINT:
            return self.capital_gains_allowance_joint
        return self.capital_gains_allowance_single


DEFAULT_SCHEDULE_2024 = GermanTaxSchedule()


# =============================================================================
# INPUT / RESULT
# =============================================================================

_MONEY_FIELDS = (
    "gross_salary",
    "bonus",
    "other_employment_income",
    "self_employment_income",
    "capital_gains",
    "dividends",
    "capital_gains_allowance",
    "work_related_expenses",
    "special_expenses",
    "extraordinary_burdens",
    "additional_deductions",
    "pension_contribution",
    "health_contribution",
    "unemployment_contribution",
    "care_contribution",
)

_SOCIAL_FIELDS = (
    "pension_contribution",
    "health_contribution",
    "unemployment_contribution",
    "care_contribution",
)


@dataclass(frozen=True)
class TaxScenarioInput:
    """One year of income and deductions for a German tax assessment.

    Optional amounts left as None fall back to schedule defaults:
    capital_gains_allowance -> Sparer-Pauschbetrag for the filing status,
    work_related_expenses -> Werbungskostenpauschale (capped at wages),
    social contributions -> estimated from wages when
    ``estimate_social_contributions`` is set.

    Capital gains and dividends together form the capital income taxed at
    the flat rate above the allowance.
    """

    filing_status: FilingStatus = FilingStatus.SINGLE
    tax_class: TaxClass = TaxClass.I

    gross_salary: Decimal = ZERO
    bonus: Decimal = ZERO
    other_employment_income: Decimal = ZERO
    self_employment_income: Decimal = ZERO
    capital_gains: Decimal = ZERO
    dividends: Decimal = ZERO
    capital_gains_allowance: Decimal | None = None

    work_related_expenses: Decimal | None = None
    special_expenses: Decimal = ZERO
    extraordinary_burdens: Decimal = ZERO
    additional_deductions: Decimal = ZERO

    pension_contribution: Decimal | None = None
    health_contribution: Decimal | None = None
    unemployment_contribution: Decimal | None = None
    care_contribution: Decimal | None = None
    estimate_social_contributions: bool = True

    solidarity_enabled: bool = True
    church_tax_enabled: bool = False
    church_tax_rate: Decimal | None = None
    capital_gains_tax_enabled: bool = True

    year: int | None = None

    def __post_init__(self):
        try:
            object.__setattr__(self, "filing_status", FilingStatus(self.filing_status))
        except ValueError:
            raise InvalidInputError(f"Unknown filing status: {self.filing_status!r}") from None
        try:
            object.__setattr__(self, "tax_class", TaxClass(self.tax_class))
        except ValueError:
            raise InvalidInputError(f"Tax class must be 1-6, got {self.tax_class!r}") from None

        for field_name in _MONEY_FIELDS:
            val = getattr(self, field_name)
            if val is None:
                continue
            val = to_decimal(val)
            if val < 0:
                raise InvalidInputError(f"{field_name} cannot be negative: {val}")
            object.__setattr__(self, field_name, val)

        if self.church_tax_rate is not None:
            rate = to_decimal(self.church_tax_rate)
            if not 0 <= rate <= 1:
                raise InvalidInputError(f"church_tax_rate must be between 0 and 1, got {rate}")
            object.__setattr__(self, "church_tax_rate", rate)

    @classmethod
    def from_mapping(cls, data: Mapping) -> "TaxScenarioInput":
        """Build from a plain dict (e.g. form state), rejecting unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise InvalidInputError(f"Unknown tax input fields: {unknown}")
        return cls(**data)

    @property
    def married_splitting(self) -> bool:
        return self.filing_status == FilingStatus.MARRIED_JOINT

    @property
    def employment_income(self) -> Decimal:
        """Wages subject to social insurance."""
        return self.gross_salary + self.bonus + self.other_employment_income

    @property
    def capital_income(self) -> Decimal:
        return self.capital_gains + self.dividends

    @property
    def has_explicit_social_contributions(self) -> bool:
        return any(getattr(self, name) is not None for name in _SOCIAL_FIELDS)


@dataclass(frozen=True)
class TaxBreakdown:
    """Where the gross goes."""

    gross_annual: Decimal
    employment_net: Decimal
    capital_net: Decimal
    social_contributions: Decimal
    deductions: Decimal


@dataclass(frozen=True)
class TaxResult:
    """Complete result of a German tax assessment.

    ``solidarity_tax`` is the surcharge on progressive income tax only. The
    surcharge on the flat capital-gains tax is part of ``capital_gains_tax``
    and also reported as ``capital_gains_solidarity``.

    ``marginal_tax_rate`` covers the progressive tariff (with its
    surcharges) only. Flat-taxed capital income is not in it, so with large
    capital income it can sit below ``effective_tax_rate``.
    """

    total_gross_income: Decimal
    taxable_income: Decimal  # progressive base (before splitting)
    taxable_capital_income: Decimal
    total_taxable_income: Decimal
    income_tax: Decimal
    solidarity_tax: Decimal
    church_tax: Decimal
    capital_gains_tax: Decimal
    capital_gains_solidarity: Decimal  # included in capital_gains_tax
    total_tax: Decimal
    net_income: Decimal
    effective_tax_rate: Decimal
    marginal_tax_rate: Decimal
    social: SocialContributionEstimate
    breakdown: TaxBreakdown
    year: int

    @property
    def total_social_contributions(self) -> Decimal:
        return self.social.total

    @property
    def net_monthly(self) -> Decimal:
        return self.net_income / 12

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "year": self.year,
            "income": {
                "total_gross": round(float(self.total_gross_income), 2),
                "taxable": round(float(self.taxable_income), 2),
                "taxable_capital": round(float(self.taxable_capital_income), 2),
            },
            "tax": {
                "income_tax": round(float(self.income_tax), 2),
                "solidarity_tax": round(float(self.solidarity_tax), 2),
                "church_tax": round(float(self.church_tax), 2),
                "capital_gains_tax": round(float(self.capital_gains_tax), 2),
                "capital_gains_solidarity": round(float(self.capital_gains_solidarity), 2),
                "total": round(float(self.total_tax), 2),
            },
            "social": self.social.to_dict(),
            "net": {
                "annual": round(float(self.net_income), 2),
                "monthly": round(float(self.net_monthly), 2),
            },
            "rates": {
                "effective": float(self.effective_tax_rate),
                "marginal": float(self.marginal_tax_rate),
            },
        }


# =============================================================================
# CALCULATOR
# =============================================================================


class GermanTaxCalculator:
    """Annual German income tax assessment for employees and small investors."""

    def __init__(self, schedule: GermanTaxSchedule | None = None):
        self.schedule = schedule or DEFAULT_SCHEDULE_2024

    def income_tax(self, taxable_income, married_splitting: bool = False) -> Decimal:
        """Tariff tax, applying the splitting procedure for joint filers."""
        taxable = to_decimal(taxable_income)
        if married_splitting:
            return self.schedule.zones.tax(taxable / 2) * 2
        return self.schedule.zones.tax(taxable)

    def solidarity_surcharge(self, income_tax: Decimal, filing_status: FilingStatus) -> Decimal:
        """Soli on income tax: exactly 0 up to the threshold."""
        threshold = self.schedule.solidarity_threshold(filing_status)
        if income_tax <= threshold:
            return ZERO

        full = income_tax * self.schedule.solidarity_rate
        if self.schedule.solidarity_phase_in_rate is None:
            return full
        return min(full, (income_tax - threshold) * self.schedule.solidarity_phase_in_rate)

    def _solidarity_marginal_factor(self, income_tax: Decimal, filing_status: FilingStatus) -> Decimal:
        threshold = self.schedule.solidarity_threshold(filing_status)
        if income_tax <= threshold:
            return ZERO
        phase_in = self.schedule.solidarity_phase_in_rate
        if phase_in is not None and (income_tax - threshold) * phase_in < income_tax * self.schedule.solidarity_rate:
            return phase_in
        return self.schedule.solidarity_rate

    def social_contributions(self, scenario: TaxScenarioInput) -> SocialContributionEstimate:
        """Explicit contributions if any were given, else the estimate (if enabled)."""
        if scenario.has_explicit_social_contributions:
            return SocialContributionEstimate(
                pension_contribution=scenario.pension_contribution or ZERO,
                health_contribution=scenario.health_contribution or ZERO,
                unemployment_contribution=scenario.unemployment_contribution or ZERO,
                care_contribution=scenario.care_contribution or ZERO,
            )
        if scenario.estimate_social_contributions:
            return estimate_social_contributions(scenario.employment_income, self.schedule.social)
        return SocialContributionEstimate()

    def calculate(self, scenario: TaxScenarioInput | Mapping) -> TaxResult:
        """Perform a complete assessment."""
        if isinstance(scenario, Mapping):
            scenario = TaxScenarioInput.from_mapping(scenario)

        schedule = self.schedule
        status = scenario.filing_status

        # Income
        wages = scenario.employment_income
        earned = wages + scenario.self_employment_income
        capital_income = scenario.capital_income
        total_gross_income = earned + capital_income

        # Deductions
        if scenario.work_related_expenses is not None:
            work_related = scenario.work_related_expenses
        else:
            work_related = min(schedule.work_related_expenses_flat, wages)
        deductions = (
            work_related + scenario.special_expenses + scenario.extraordinary_burdens + scenario.additional_deductions
        )
        taxable_income = max(ZERO, earned - deductions)

        # Progressive income tax
        income_tax = self.income_tax(taxable_income, scenario.married_splitting)

        # Flat capital gains tax
        allowance = (
            scenario.capital_gains_allowance
            if scenario.capital_gains_allowance is not None
            else schedule.capital_gains_allowance(status)
        )
        taxable_capital_income = max(ZERO, capital_income - allowance)
        capital_gains_tax = ZERO
        capital_gains_solidarity = ZERO
        if scenario.capital_gains_tax_enabled:
            flat_tax = taxable_capital_income * schedule.capital_gains_tax_rate
            if scenario.solidarity_enabled:
                capital_gains_solidarity = flat_tax * schedule.solidarity_rate
            capital_gains_tax = flat_tax + capital_gains_solidarity

        # Surcharges on income tax
        solidarity_tax = ZERO
        if scenario.solidarity_enabled:
            solidarity_tax = self.solidarity_surcharge(income_tax, status)

        church_rate = (
            scenario.church_tax_rate if scenario.church_tax_rate is not None else schedule.church_tax_rate_default
        )
        church_tax = income_tax * church_rate if scenario.church_tax_enabled else ZERO

        total_tax = income_tax + solidarity_tax + church_tax + capital_gains_tax

        # Net
        social = self.social_contributions(scenario)
        net_income = total_gross_income - total_tax - social.total

        effective_rate = total_tax / total_gross_income if total_gross_income > 0 else ZERO

        split_base = taxable_income / 2 if scenario.married_splitting else taxable_income
        surcharge_factor = 1 + (church_rate if scenario.church_tax_enabled else ZERO)
        if scenario.solidarity_enabled:
            surcharge_factor += self._solidarity_marginal_factor(income_tax, status)
        marginal_rate = schedule.zones.marginal_rate(split_base) * surcharge_factor

        logger.debug(
            f"Tax {schedule.year}: taxable {taxable_income:,.2f} ({status.value}) -> income tax {income_tax:,.2f}, "
            f"soli {solidarity_tax:,.2f}, church {church_tax:,.2f}, capital {capital_gains_tax:,.2f}"
        )

        breakdown = TaxBreakdown(
            gross_annual=total_gross_income,
            employment_net=earned - income_tax - solidarity_tax - church_tax - social.total,
            capital_net=capital_income - capital_gains_tax,
            social_contributions=social.total,
            deductions=deductions,
        )

        return TaxResult(
            total_gross_income=total_gross_income,
            taxable_income=taxable_income,
            taxable_capital_income=taxable_capital_income,
            total_taxable_income=taxable_income + taxable_capital_income,
            income_tax=income_tax,
            solidarity_tax=solidarity_tax,
            church_tax=church_tax,
            capital_gains_tax=capital_gains_tax,
            capital_gains_solidarity=capital_gains_solidarity,
            total_tax=total_tax,
            net_income=net_income,
            effective_tax_rate=effective_rate,
            marginal_tax_rate=marginal_rate,
            social=social,
            breakdown=breakdown,
            year=scenario.year or schedule.year,
        )


def calculate_german_tax(
    scenario: TaxScenarioInput | Mapping | None = None,
    schedule: GermanTaxSchedule | None = None,
    **kwargs,
) -> TaxResult:
    """Convenience wrapper: ``calculate_german_tax(gross_salary=60000)`` or with an input object."""
    if scenario is None:
        scenario = TaxScenarioInput.from_mapping(kwargs)
    elif kwargs:
        raise InvalidInputError("Pass either a scenario or keyword fields, not both")
    return GermanTaxCalculator(schedule).calculate(scenario)
