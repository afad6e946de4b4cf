"""Portfolio projection and German tax: models, calculators, history lookup."""

from .models import (
    AssetType,
    ContributionPlan,
    PortfolioSnapshot,
    PricePoint,
    SnapshotHolding,
)

__all__ = [
    "AssetType",
    "ContributionPlan",
    "PortfolioSnapshot",
    "PricePoint",
    "SnapshotHolding",
]
