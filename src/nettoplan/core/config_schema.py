"""Pydantic models for config validation.

``Config.validated()`` returns a typed ``NettoplanConfig``. Its sections
convert into the plain objects the calculators take: ``GermanTaxSchedule``,
``SocialContributionSchedule`` and ``ReturnPolicy``. Values left out of a
section keep the built-in 2024 defaults.
"""

from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from nettoplan.financial.calculators import tax_tables as tt
from nettoplan.financial.calculators.german_tax import GermanTaxSchedule
from nettoplan.financial.calculators.return_defaults import (
    ASSET_TYPE_RETURNS,
    FALLBACK_RETURN,
    REGION_RETURNS,
    SCENARIO_MULTIPLIERS,
    ReturnPolicy,
    Scenario,
)
from nettoplan.financial.calculators.social_contributions import SocialContributionSchedule
from nettoplan.financial.models import AssetType

_LOG_LEVELS = {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}


def _check_fraction(name: str, value: Decimal | None) -> None:
    if value is not None and not 0 <= value <= 1:
        raise ValueError(f"{name} must be between 0 and 1, got {value}")


class TaxConfig(BaseModel):
    """Income tax, surcharge and capital-gains settings."""

    model_config = ConfigDict(extra="forbid")

    year: int = 2024
    work_related_expenses_flat: Decimal = Field(default=tt.WORK_RELATED_EXPENSES_FLAT_2024, ge=0)
    solidarity_rate: Decimal = tt.SOLIDARITY_RATE
    solidarity_threshold_single: Decimal = Field(default=tt.SOLIDARITY_THRESHOLD_SINGLE, ge=0)
    solidarity_threshold_joint: Decimal = Field(default=tt.SOLIDARITY_THRESHOLD_JOINT, ge=0)
    solidarity_phase_in_rate: Decimal | None = None
    church_tax_rate: Decimal = tt.CHURCH_TAX_RATE_DEFAULT
    capital_gains_tax_rate: Decimal = tt.CAPITAL_GAINS_TAX_RATE
    capital_gains_allowance_single: Decimal = Field(default=tt.CAPITAL_GAINS_ALLOWANCE_SINGLE, ge=0)
    capital_gains_allowance_joint: Decimal = Field(default=tt.CAPITAL_GAINS_ALLOWANCE_JOINT, ge=0)

    @model_validator(mode="after")
    def _rates_are_fractions(self) -> TaxConfig:
        for name in ("solidarity_rate", "solidarity_phase_in_rate", "church_tax_rate", "capital_gains_tax_rate"):
            _check_fraction(name, getattr(self, name))
        return self


class SocialConfig(BaseModel):
    """Employee social-insurance rates and annual ceilings."""

    model_config = ConfigDict(extra="forbid")

    pension_rate: Decimal = tt.PENSION_RATE
    health_rate: Decimal = tt.HEALTH_RATE + tt.HEALTH_ADDITIONAL_RATE
    unemployment_rate: Decimal = tt.UNEMPLOYMENT_RATE
    care_rate: Decimal = tt.CARE_RATE
    pension_ceiling: Decimal = Field(default=tt.PENSION_CEILING_2024, ge=0)
    health_ceiling: Decimal = Field(default=tt.HEALTH_CEILING_2024, ge=0)

    @model_validator(mode="after")
    def _rates_are_fractions(self) -> SocialConfig:
        for name in ("pension_rate", "health_rate", "unemployment_rate", "care_rate"):
            _check_fraction(name, getattr(self, name))
        return self

    def to_schedule(self) -> SocialContributionSchedule:
        return SocialContributionSchedule(**self.model_dump())


class ReturnsConfig(BaseModel):
    """Default-return overrides. Entries are merged over the built-in tables."""

    model_config = ConfigDict(extra="forbid")

    region_returns: dict[str, Decimal] = {}
    asset_type_returns: dict[AssetType, Decimal] = {}
    fallback_return: Decimal = FALLBACK_RETURN

    @field_validator("region_returns")
    @classmethod
    def _normalize_suffixes(cls, v: dict[str, Decimal]) -> dict[str, Decimal]:
        return {suffix.lstrip(".").upper(): rate for suffix, rate in v.items()}


class ProjectionConfig(BaseModel):
    """Projection horizon and scenario settings."""

    model_config = ConfigDict(extra="forbid")

    years: Decimal = Decimal("10")
    scenario: Scenario = Scenario.REALISTIC
    scenario_multipliers: dict[Scenario, Decimal] = {}

    @model_validator(mode="after")
    def _multipliers_ordered(self) -> ProjectionConfig:
        merged = {**SCENARIO_MULTIPLIERS, **self.scenario_multipliers}
        if any(m < 0 for m in merged.values()):
            raise ValueError("scenario multipliers cannot be negative")
        ordered = [merged[Scenario.CONSERVATIVE], merged[Scenario.REALISTIC], merged[Scenario.OPTIMISTIC]]
        if ordered != sorted(ordered):
            raise ValueError(f"scenario multipliers must satisfy conservative <= realistic <= optimistic: {ordered}")
        return self


class CacheConfig(BaseModel):
    """Historical-analysis cache settings."""

    ttl_seconds: float = Field(default=24 * 60 * 60, gt=0)


class LoggingConfig(BaseModel):
    """Loguru sink settings."""

    level: str = "WARNING"
    file: str | None = None

    @field_validator("level")
    @classmethod
    def _known_level(cls, v: str) -> str:
        level = v.upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"unknown log level {v!r}")
        return level


class NettoplanConfig(BaseModel):
    """Root configuration model.

    Uses ``extra="allow"`` so applications can bolt on custom sections
    without touching this schema.
    """

    model_config = ConfigDict(extra="allow")

    tax: TaxConfig = TaxConfig()
    social: SocialConfig = SocialConfig()
    returns: ReturnsConfig = ReturnsConfig()
    projection: ProjectionConfig = ProjectionConfig()
    cache: CacheConfig = CacheConfig()
    logging: LoggingConfig = LoggingConfig()

    def social_schedule(self) -> SocialContributionSchedule:
        return self.social.to_schedule()

    def tax_schedule(self) -> GermanTaxSchedule:
        tax = self.tax
        return GermanTaxSchedule(
            year=tax.year,
            work_related_expenses_flat=tax.work_related_expenses_flat,
            solidarity_rate=tax.solidarity_rate,
            solidarity_threshold_single=tax.solidarity_threshold_single,
            solidarity_threshold_joint=tax.solidarity_threshold_joint,
            solidarity_phase_in_rate=tax.solidarity_phase_in_rate,
            church_tax_rate_default=tax.church_tax_rate,
            capital_gains_tax_rate=tax.capital_gains_tax_rate,
            capital_gains_allowance_single=tax.capital_gains_allowance_single,
            capital_gains_allowance_joint=tax.capital_gains_allowance_joint,
            social=self.social_schedule(),
        )

    def return_policy(self) -> ReturnPolicy:
        return ReturnPolicy(
            region_returns={**REGION_RETURNS, **self.returns.region_returns},
            asset_type_returns={**ASSET_TYPE_RETURNS, **self.returns.asset_type_returns},
            fallback_return=self.returns.fallback_return,
            scenario_multipliers={**SCENARIO_MULTIPLIERS, **self.projection.scenario_multipliers},
        )
