"""
Snapshot comparison results.

These shapes feed the comparison report and the spreadsheet export.
"""

from dataclasses import dataclass, field
from typing import Any

from portfolio_engine.core.enums import AssetClass, ChangeType, ComparisonScope


@dataclass(frozen=True)
class AssetDelta:
    """Change in USD value of one asset name between two snapshots."""

    asset_name: str
    origin_currency: str
    value_a: float
    value_b: float
    delta_usd: float
    asset_class: AssetClass | None = None
    price_change_percent: float | None = None

    @property
    def is_new(self) -> bool:
        return self.value_a == 0.0 and self.value_b != 0.0

    def to_dict(self) -> dict[str, Any]:
        """Convert delta to dictionary."""
        return {
            "asset_name": self.asset_name,
            "origin_currency": self.origin_currency,
            "asset_class": self.asset_class.value if self.asset_class else None,
            "value_a": self.value_a,
            "value_b": self.value_b,
            "delta_usd": self.delta_usd,
            "price_change_percent": self.price_change_percent,
        }


@dataclass(frozen=True)
class PositionChange:
    """An asset name present in only one of two snapshots."""

    asset_name: str
    asset_class: AssetClass
    sub_class: str
    origin_currency: str
    value_usd: float
    change_type: ChangeType

    def to_dict(self) -> dict[str, Any]:
        """Convert change to dictionary."""
        return {
            "asset_name": self.asset_name,
            "asset_class": self.asset_class.value,
            "sub_class": self.sub_class,
            "origin_currency": self.origin_currency,
            "value_usd": self.value_usd,
            "change_type": self.change_type.value,
        }


@dataclass(frozen=True)
class ComparisonReport:
    """Sectioned comparison of two snapshots."""

    snapshot_a_name: str
    snapshot_b_name: str
    sections: dict[ComparisonScope, list[AssetDelta]] = field(default_factory=dict)
    position_changes: list[PositionChange] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.position_changes and not any(self.sections.values())

    def to_dict(self) -> dict[str, Any]:
        """Convert report to dictionary."""
        return {
            "snapshot_a": self.snapshot_a_name,
            "snapshot_b": self.snapshot_b_name,
            "sections": {
                scope.value: [delta.to_dict() for delta in deltas]
                for scope, deltas in self.sections.items()
            },
            "position_changes": [change.to_dict() for change in self.position_changes],
        }
