"""
Derived valuation results.

Never persisted; recomputed on every valuation call.
"""

from dataclasses import dataclass, replace

from portfolio_engine.core.models.asset import Asset
from portfolio_engine.core.types.financial import ZERO


@dataclass(frozen=True)
class AssetCalculations:
    """Values of one asset in a view currency."""

    raw_base_value: float
    converted_value: float
    display_value: float
    percentage_of_scope: float = ZERO

    def with_percentage(self, percentage: float) -> "AssetCalculations":
        """Return a copy with percentage_of_scope set."""
        return replace(self, percentage_of_scope=percentage)

    def to_dict(self) -> dict[str, float]:
        """Convert calculations to dictionary."""
        return {
            "raw_base_value": self.raw_base_value,
            "converted_value": self.converted_value,
            "display_value": self.display_value,
            "percentage_of_scope": self.percentage_of_scope,
        }


@dataclass(frozen=True)
class ValuedAsset:
    """An asset paired with its calculations."""

    asset: Asset
    calculations: AssetCalculations

    @property
    def display_value(self) -> float:
        return self.calculations.display_value

