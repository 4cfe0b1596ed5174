"""
Portfolio snapshot domain model.

A snapshot is an immutable capture of every asset and the FX table at
save time. It is created once, never updated, and only read by the
comparison engine.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from typing import Any
from uuid import uuid4

from portfolio_engine.core.models.asset import Asset
from portfolio_engine.core.models.fx import FXRate, FXRates, fx_rates_from_dict, fx_rates_to_dict
from portfolio_engine.core.types.financial import ZERO


@dataclass(frozen=True)
class SnapshotTotals:
    """USD totals stored alongside a snapshot.

    Values are converted (pre-factor) USD amounts.
    """

    total_value_usd: float = ZERO
    liquid_fixed_income_value_usd: float = ZERO
    private_equity_value_usd: float = ZERO
    real_estate_value_usd: float = ZERO

    def to_dict(self) -> dict[str, float]:
        """Convert totals to dictionary."""
        return {
            "total_value_usd": self.total_value_usd,
            "liquid_fixed_income_value_usd": self.liquid_fixed_income_value_usd,
            "private_equity_value_usd": self.private_equity_value_usd,
            "real_estate_value_usd": self.real_estate_value_usd,
        }


@dataclass(frozen=True)
class PortfolioSnapshot:
    """Immutable saved copy of a portfolio."""

    name: str
    assets: tuple[Asset, ...]
    fx_rates: Mapping[str, FXRate]
    totals: SnapshotTotals = field(default_factory=SnapshotTotals)
    description: str | None = None
    id: str = field(default_factory=lambda: str(uuid4()))
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    @classmethod
    def capture(
        cls,
        name: str,
        assets: Iterable[Asset],
        fx_rates: FXRates,
        description: str | None = None,
        created_at: datetime | None = None,
    ) -> "PortfolioSnapshot":
        """Capture the current portfolio as a new snapshot.

        Assets and rates are copied, so later edits to the live portfolio
        never leak into the snapshot.

        Args:
            name: Snapshot name
            assets: Current assets
            fx_rates: FX table in effect at save time
            description: Optional description
            created_at: Capture time (default now)

        Returns:
            New PortfolioSnapshot with computed totals
        """
        from portfolio_engine.engine.summary import snapshot_totals

        asset_copies = tuple(replace(asset) for asset in assets)
        rate_copies = {currency: replace(rate) for currency, rate in fx_rates.items()}
        return cls(
            name=name,
            description=description,
            assets=asset_copies,
            fx_rates=rate_copies,
            totals=snapshot_totals(asset_copies, rate_copies),
            created_at=created_at or datetime.now(UTC),
        )

    def asset_names(self) -> list[str]:
        """Distinct asset names in first-seen order."""
        return list(dict.fromkeys(asset.name for asset in self.assets))

    def to_dict(self) -> dict[str, Any]:
        """Convert snapshot to its persisted record shape."""
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "snapshot_date": self.created_at.isoformat(),
            "created_at": self.created_at.isoformat(),
            "assets": [asset.to_dict() for asset in self.assets],
            "fx_rates": fx_rates_to_dict(self.fx_rates),
            **self.totals.to_dict(),
        }

    @classmethod
    def from_dict(cls, record: Mapping[str, Any]) -> "PortfolioSnapshot":
        """Create a snapshot from a persisted record."""
        created = record.get("created_at") or record.get("snapshot_date")
        created_at = (
            datetime.fromisoformat(created.replace("Z", "+00:00"))
            if isinstance(created, str)
            else created or datetime.now(UTC)
        )
        totals = SnapshotTotals(
            total_value_usd=float(record.get("total_value_usd") or ZERO),
            liquid_fixed_income_value_usd=float(
                record.get("liquid_fixed_income_value_usd") or ZERO
            ),
            private_equity_value_usd=float(record.get("private_equity_value_usd") or ZERO),
            real_estate_value_usd=float(record.get("real_estate_value_usd") or ZERO),
        )
        return cls(
            id=str(record.get("id") or uuid4()),
            name=record.get("name", ""),
            description=record.get("description"),
            assets=tuple(Asset.from_dict(item) for item in record.get("assets", [])),
            fx_rates=fx_rates_from_dict(record.get("fx_rates", {})),
            totals=totals,
            created_at=created_at,
        )
