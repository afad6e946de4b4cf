"""
Tax Tables for German Tax Calculations - 2024 Tax Year

Single source of truth for all tax and social-insurance constants.
This module has NO dependencies on other modules to prevent import cycles.

Sources:
- Income tax: §32a EStG as amended for 2024 (Grundfreibetrag 11,604)
- Solidarity surcharge: SolZG 1995 §3, §4
- Flat capital-gains tax: §32d EStG, Sparer-Pauschbetrag §20 (9) EStG
- Social insurance: Sozialversicherungsrechengrößen 2024 (West)

Last updated: January 2024
"""

from decimal import Decimal
from enum import Enum

# =============================================================================
# FILING STATUS / TAX CLASS
# =============================================================================


class FilingStatus(Enum):
    """Tax filing status."""

    SINGLE = "single"
    MARRIED_JOINT = "married_joint"  # Zusammenveranlagung -> splitting


class TaxClass(Enum):
    """Lohnsteuerklasse. Recorded on the scenario; the annual assessment does not depend on it."""

    I = 1  # noqa: E741
    II = 2
    III = 3
    IV = 4
    V = 5
    VI = 6


# =============================================================================
# INCOME TAX 2024 (§32a EStG)
# =============================================================================
# Zone 1: y <= 11,604                 -> 0
# Zone 2: 11,604 < y <= 17,005        -> (922.98 * x + 1,400) * x,  x = (y - 11,604) / 10,000
# Zone 3: 17,005 < y <= 66,760        -> (181.19 * z + 2,397) * z + 1,025.38,  z = (y - 17,005) / 10,000
# Zone 4: 66,760 < y <= 277,825       -> 0.42 * y - 10,602.13
# Zone 5: y > 277,825                 -> 0.45 * y - 18,936.88

GRUNDFREIBETRAG_2024 = Decimal("11604")
ZONE_2_UPPER_2024 = Decimal("17005")
ZONE_3_UPPER_2024 = Decimal("66760")
ZONE_4_UPPER_2024 = Decimal("277825")

ZONE_2_COEFFICIENTS_2024 = (Decimal("922.98"), Decimal("1400"))
ZONE_3_COEFFICIENTS_2024 = (Decimal("181.19"), Decimal("2397"), Decimal("1025.38"))
ZONE_4_RATE_2024 = Decimal("0.42")
ZONE_4_OFFSET_2024 = Decimal("10602.13")
ZONE_5_RATE_2024 = Decimal("0.45")
ZONE_5_OFFSET_2024 = Decimal("18936.88")

PROGRESSION_DIVISOR = Decimal("10000")

# Werbungskostenpauschale (employee flat allowance for work-related expenses)
WORK_RELATED_EXPENSES_FLAT_2024 = Decimal("1230")


# =============================================================================
# SOLIDARITY SURCHARGE
# =============================================================================
# 5.5% of income tax, only once income tax exceeds the exemption threshold.

SOLIDARITY_RATE = Decimal("0.055")
SOLIDARITY_THRESHOLD_SINGLE = Decimal("16344")
SOLIDARITY_THRESHOLD_JOINT = Decimal("32688")
# Milderungszone rate on the excess over the threshold (used only if enabled)
SOLIDARITY_PHASE_IN_RATE = Decimal("0.119")


# =============================================================================
# CHURCH TAX
# =============================================================================
# 8% in Bavaria and Baden-Württemberg, 9% elsewhere

CHURCH_TAX_RATE_DEFAULT = Decimal("0.09")


# =============================================================================
# CAPITAL GAINS (Abgeltungsteuer)
# =============================================================================

CAPITAL_GAINS_TAX_RATE = Decimal("0.25")
CAPITAL_GAINS_ALLOWANCE_SINGLE = Decimal("1000")
CAPITAL_GAINS_ALLOWANCE_JOINT = Decimal("2000")


# =============================================================================
# SOCIAL INSURANCE 2024 (employee share, West)
# =============================================================================
# Annual contribution ceilings (Beitragsbemessungsgrenzen)

PENSION_CEILING_2024 = Decimal("90600")  # 7,550 / month
HEALTH_CEILING_2024 = Decimal("62100")  # 5,175 / month

PENSION_RATE = Decimal("0.093")
HEALTH_RATE = Decimal("0.073")
HEALTH_ADDITIONAL_RATE = Decimal("0.017")  # average Zusatzbeitrag, employee half
UNEMPLOYMENT_RATE = Decimal("0.013")
CARE_RATE = Decimal("0.01775")  # childless rate, the higher of the two
