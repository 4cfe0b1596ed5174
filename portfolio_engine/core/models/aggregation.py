"""
Aggregation inputs and results: filter criteria, buckets and groups.
"""

from collections.abc import Collection
from dataclasses import dataclass
from datetime import date
from typing import Any

from portfolio_engine.core.enums import AssetClass
from portfolio_engine.core.models.asset import Asset
from portfolio_engine.core.types.financial import ZERO

# Filterable attribute names on Asset
FILTER_FIELDS = (
    "asset_class",
    "sub_class",
    "account_entity",
    "account_bank",
    "origin_currency",
    "beneficiary",
    "is_cash_equivalent",
)


@dataclass(frozen=True)
class AssetFilter:
    """Include/exclude criteria applied before aggregation.

    An empty include tuple means "no constraint". A value matching an
    exclude tuple removes the asset even when it is also included.
    Setting either maturity bound drops assets without a maturity date.
    """

    asset_class: tuple[AssetClass, ...] = ()
    sub_class: tuple[str, ...] = ()
    account_entity: tuple[str, ...] = ()
    account_bank: tuple[str, ...] = ()
    origin_currency: tuple[str, ...] = ()
    beneficiary: tuple[str, ...] = ()
    is_cash_equivalent: tuple[bool, ...] = ()
    exclude_asset_class: tuple[AssetClass, ...] = ()
    exclude_sub_class: tuple[str, ...] = ()
    exclude_account_entity: tuple[str, ...] = ()
    exclude_account_bank: tuple[str, ...] = ()
    exclude_origin_currency: tuple[str, ...] = ()
    exclude_beneficiary: tuple[str, ...] = ()
    exclude_is_cash_equivalent: tuple[bool, ...] = ()
    maturity_from: date | None = None
    maturity_to: date | None = None

    @property
    def is_empty(self) -> bool:
        """Check if the filter constrains nothing."""
        return self == AssetFilter()

    def matches(self, asset: Asset) -> bool:
        """Check if an asset passes every criterion."""
        for field_name in FILTER_FIELDS:
            value = getattr(asset, field_name)
            included: Collection[Any] = getattr(self, field_name)
            excluded: Collection[Any] = getattr(self, f"exclude_{field_name}")
            if included and value not in included:
                return False
            if value in excluded:
                return False

        if self.maturity_from is not None or self.maturity_to is not None:
            if asset.maturity_date is None:
                return False
            if self.maturity_from is not None and asset.maturity_date < self.maturity_from:
                return False
            if self.maturity_to is not None and asset.maturity_date > self.maturity_to:
                return False
        return True


@dataclass(frozen=True)
class AggregateBucket:
    """Count and value of the assets sharing one dimension value."""

    count: int
    value: float
    percentage: float = ZERO

    def to_dict(self) -> dict[str, Any]:
        """Convert bucket to dictionary."""
        return {"count": self.count, "value": self.value, "percentage": self.percentage}


@dataclass(frozen=True)
class AssetGroup:
    """Assets sharing the same values on every group-by field."""

    key: tuple[Any, ...]
    assets: tuple[Asset, ...]
    total_value: float
    asset_count: int
    percentage_of_total: float = ZERO

    @property
    def label(self) -> str:
        """Key joined for display, e.g. "Public Equity / Big Tech"."""
        return " / ".join(str(part) for part in self.key)

    def to_dict(self) -> dict[str, Any]:
        """Convert group to dictionary."""
        return {
            "key": self.label,
            "asset_count": self.asset_count,
            "total_value": self.total_value,
            "percentage_of_total": self.percentage_of_total,
            "assets": [asset.name for asset in self.assets],
        }
