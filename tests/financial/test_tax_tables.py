"""Tests for nettoplan.financial.calculators.tax_tables."""

from decimal import Decimal

from nettoplan.financial.calculators import tax_tables as tt
from nettoplan.financial.calculators.tax_tables import FilingStatus, TaxClass


class TestIncomeTaxZones:
    def test_zone_bounds_ascending(self):
        bounds = [tt.GRUNDFREIBETRAG_2024, tt.ZONE_2_UPPER_2024, tt.ZONE_3_UPPER_2024, tt.ZONE_4_UPPER_2024]
        assert bounds == sorted(bounds)

    def test_grundfreibetrag_2024(self):
        assert tt.GRUNDFREIBETRAG_2024 == Decimal("11604")

    def test_top_rates(self):
        assert tt.ZONE_4_RATE_2024 == Decimal("0.42")
        assert tt.ZONE_5_RATE_2024 == Decimal("0.45")


class TestSurcharges:
    def test_joint_threshold_is_double(self):
        assert tt.SOLIDARITY_THRESHOLD_JOINT == 2 * tt.SOLIDARITY_THRESHOLD_SINGLE

    def test_joint_capital_allowance_is_double(self):
        assert tt.CAPITAL_GAINS_ALLOWANCE_JOINT == 2 * tt.CAPITAL_GAINS_ALLOWANCE_SINGLE


class TestSocialInsurance:
    def test_monthly_ceilings(self):
        assert tt.PENSION_CEILING_2024 / 12 == Decimal("7550")
        assert tt.HEALTH_CEILING_2024 / 12 == Decimal("5175")

    def test_health_ceiling_below_pension_ceiling(self):
        assert tt.HEALTH_CEILING_2024 < tt.PENSION_CEILING_2024


class TestEnums:
    def test_filing_status_values(self):
        assert FilingStatus("single") == FilingStatus.SINGLE
        assert FilingStatus("married_joint") == FilingStatus.MARRIED_JOINT

    def test_tax_classes(self):
        assert [c.value for c in TaxClass] == [1, 2, 3, 4, 5, 6]
