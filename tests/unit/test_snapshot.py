"""
Unit tests for portfolio snapshots.
"""

from datetime import UTC, datetime

import pytest

from portfolio_engine.core.models.asset import Asset
from portfolio_engine.core.models.fx import FXRate
from portfolio_engine.core.models.snapshot import PortfolioSnapshot, SnapshotTotals


class TestPortfolioSnapshot:
    """Test suite for PortfolioSnapshot."""

    @pytest.fixture
    def snapshot(
        self, sample_assets: list[Asset], fx_rates: dict[str, FXRate]
    ) -> PortfolioSnapshot:
        """Snapshot of the sample portfolio."""
        return PortfolioSnapshot.capture(
            "Year end",
            sample_assets,
            fx_rates,
            description="Closing positions",
            created_at=datetime(2024, 12, 31, 18, 0, tzinfo=UTC),
        )

    def test_should_compute_usd_totals_before_factor(self, snapshot: PortfolioSnapshot) -> None:
        """Test stored totals use converted values."""
        totals = snapshot.totals

        assert totals.total_value_usd == pytest.approx(149000.0)
        assert totals.private_equity_value_usd == pytest.approx(5000.0)
        assert totals.real_estate_value_usd == pytest.approx(100000.0)
        assert totals.liquid_fixed_income_value_usd == pytest.approx(44000.0)

    def test_should_copy_assets_and_rates(
        self,
        snapshot: PortfolioSnapshot,
        sample_assets: list[Asset],
        fx_rates: dict[str, FXRate],
    ) -> None:
        """Test later edits to the live table do not leak into the snapshot."""
        fx_rates["USD"] = FXRate(to_usd=1.0, to_ils=10.0)
        sample_assets.clear()

        assert snapshot.fx_rates["USD"].to_ils == 4.0
        assert len(snapshot.assets) == 9

    def test_should_list_distinct_names(
        self, fx_rates: dict[str, FXRate], sample_assets: list[Asset]
    ) -> None:
        """Test asset_names keeps first-seen order without duplicates."""
        assets = [*sample_assets[:2], sample_assets[0]]
        snapshot = PortfolioSnapshot.capture("Dup", assets, fx_rates)
        assert snapshot.asset_names() == ["USD Cash", "ILS Cash"]

    def test_should_persist_and_restore(self, snapshot: PortfolioSnapshot) -> None:
        """Test to_dict/from_dict keep the snapshot."""
        record = snapshot.to_dict()

        assert record["snapshot_date"] == "2024-12-31T18:00:00+00:00"
        assert record["total_value_usd"] == pytest.approx(149000.0)
        assert record["fx_rates"]["EUR"]["to_ILS"] == 4.4

        restored = PortfolioSnapshot.from_dict(record)
        assert restored == snapshot

    def test_should_default_missing_totals(self) -> None:
        """Test from_dict on a minimal record."""
        snapshot = PortfolioSnapshot.from_dict(
            {"name": "Empty", "created_at": "2025-01-01T00:00:00Z"}
        )
        assert snapshot.assets == ()
        assert snapshot.totals == SnapshotTotals()
        assert snapshot.created_at.year == 2025
