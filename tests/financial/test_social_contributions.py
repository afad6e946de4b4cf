"""Tests for nettoplan.financial.calculators.social_contributions."""

from decimal import Decimal

import pytest

from nettoplan.core.exceptions import InvalidInputError
from nettoplan.financial.calculators.social_contributions import (
    SocialContributionSchedule,
    estimate_social_contributions,
)


class TestEstimate:
    def test_below_ceilings(self):
        estimate = estimate_social_contributions(50_000)
        assert estimate.pension_contribution == Decimal("4650")
        assert estimate.health_contribution == Decimal("4500")
        assert estimate.unemployment_contribution == Decimal("650")
        assert estimate.care_contribution == Decimal("887.5")
        assert estimate.total == Decimal("10687.5")

    def test_capped_at_ceilings(self):
        estimate = estimate_social_contributions(200_000)
        assert estimate.pension_contribution == Decimal("8425.8")
        assert estimate.health_contribution == Decimal("5589")
        assert estimate.unemployment_contribution == Decimal("1177.8")
        assert estimate.care_contribution == Decimal("1102.275")

    def test_total_is_exact_sum(self):
        estimate = estimate_social_contributions(77_777.77)
        parts = (
            estimate.pension_contribution
            + estimate.health_contribution
            + estimate.unemployment_contribution
            + estimate.care_contribution
        )
        assert estimate.total == parts

    def test_regressive_above_ceilings(self):
        rates = [estimate_social_contributions(g).total / g for g in (40_000, 62_100, 90_600, 150_000, 300_000)]
        assert rates[0] == rates[1]
        assert rates[1] > rates[2] > rates[3] > rates[4]

    def test_total_never_decreases(self):
        totals = [estimate_social_contributions(g).total for g in range(0, 200_001, 10_000)]
        assert totals == sorted(totals)

    def test_zero(self):
        assert estimate_social_contributions(0).total == 0

    def test_negative_raises(self):
        with pytest.raises(InvalidInputError, match="negative"):
            estimate_social_contributions(-1)

    def test_custom_schedule(self):
        schedule = SocialContributionSchedule(pension_ceiling=Decimal("96600"))
        estimate = estimate_social_contributions(100_000, schedule)
        assert estimate.pension_contribution == Decimal("8983.8")

    def test_to_dict(self):
        data = estimate_social_contributions(50_000).to_dict()
        assert data["total"] == pytest.approx(10_687.5)
