"""
Snapshot comparison engine.

Both snapshots are revalued under one current FX table, never their own
stored rates, so every delta reflects holdings changes and price moves
rather than FX drift between the two save dates.
"""

from collections.abc import Mapping, Sequence
from dataclasses import replace

from loguru import logger

from portfolio_engine.core.constants import DEFAULT_TOP_N, PUBLIC_EQUITY_TOP_N
from portfolio_engine.core.enums import (
    AssetClass,
    ChangeType,
    ComparisonScope,
    Dimension,
    ViewCurrency,
)
from portfolio_engine.core.models.aggregation import AssetFilter
from portfolio_engine.core.models.asset import Asset
from portfolio_engine.core.models.comparison import AssetDelta, ComparisonReport, PositionChange
from portfolio_engine.core.models.fx import FXRates
from portfolio_engine.core.models.snapshot import PortfolioSnapshot
from portfolio_engine.core.types.financial import ZERO, relative_change_percent, round_percentage
from portfolio_engine.core.utils.decorators import log_operation
from portfolio_engine.engine.aggregation import aggregate

# Sections of the comparison report, in display order
REPORT_SECTIONS: tuple[ComparisonScope, ...] = (
    ComparisonScope.CASH,
    ComparisonScope.PUBLIC_EQUITY,
    ComparisonScope.FIXED_INCOME,
    ComparisonScope.PRIVATE_EQUITY,
    ComparisonScope.REAL_ESTATE,
)

DEFAULT_SECTION_TOP_N: dict[ComparisonScope, int] = {
    scope: PUBLIC_EQUITY_TOP_N if scope == ComparisonScope.PUBLIC_EQUITY else DEFAULT_TOP_N
    for scope in REPORT_SECTIONS
}


def scope_filter(scope: ComparisonScope) -> AssetFilter | None:
    """Build the asset filter selecting one comparison scope."""
    if scope == ComparisonScope.ALL:
        return None
    return AssetFilter(asset_class=tuple(c for c in AssetClass if scope.includes(c)))


def get_top_deltas(deltas: Sequence[AssetDelta], n: int) -> list[AssetDelta]:
    """
    Keep the n largest deltas by absolute USD change.

    The sort is stable, so ties keep their original order. A non-positive
    n keeps nothing.
    """
    return sorted(deltas, key=lambda delta: abs(delta.delta_usd), reverse=True)[: max(n, 0)]


class PortfolioComparison:
    """
    Compare two snapshots under a single current FX table.

    When either snapshot is missing every method returns an empty result.
    """

    def __init__(
        self,
        snapshot_a: PortfolioSnapshot | None,
        snapshot_b: PortfolioSnapshot | None,
        current_fx_rates: FXRates,
    ):
        self.snapshot_a = snapshot_a
        self.snapshot_b = snapshot_b
        self.current_fx_rates = current_fx_rates

    @property
    def is_comparable(self) -> bool:
        """Check if both sides are present."""
        return self.snapshot_a is not None and self.snapshot_b is not None

    def _values_by_name(
        self, assets: Sequence[Asset], scope: ComparisonScope
    ) -> dict[str, float]:
        buckets = aggregate(
            assets,
            Dimension.NAME,
            self.current_fx_rates,
            ViewCurrency.USD,
            filters=scope_filter(scope),
        )
        return {str(name): bucket.value for name, bucket in buckets.items()}

    @staticmethod
    def _first_by_name(assets: Sequence[Asset], scope: ComparisonScope) -> dict[str, Asset]:
        first: dict[str, Asset] = {}
        for asset in assets:
            if scope.includes(asset.asset_class):
                first.setdefault(asset.name, asset)
        return first

    @log_operation
    def calculate_deltas(
        self, scope: ComparisonScope | str = ComparisonScope.ALL
    ) -> list[AssetDelta]:
        """
        Per-name USD value deltas within a scope.

        A name present on only one side counts as 0 on the other.
        Names keep first-encounter order, snapshot A first.
        """
        snapshot_a, snapshot_b = self.snapshot_a, self.snapshot_b
        if snapshot_a is None or snapshot_b is None:
            return []
        scope = ComparisonScope(scope)

        values_a = self._values_by_name(snapshot_a.assets, scope)
        values_b = self._values_by_name(snapshot_b.assets, scope)
        first_a = self._first_by_name(snapshot_a.assets, scope)
        first_b = self._first_by_name(snapshot_b.assets, scope)

        deltas = []
        for name in dict.fromkeys([*values_a, *values_b]):
            reference = first_a.get(name) or first_b[name]
            value_a = values_a.get(name, ZERO)
            value_b = values_b.get(name, ZERO)
            deltas.append(
                AssetDelta(
                    asset_name=name,
                    origin_currency=reference.origin_currency,
                    asset_class=reference.asset_class,
                    value_a=value_a,
                    value_b=value_b,
                    delta_usd=value_b - value_a,
                )
            )
        logger.debug(f"Computed {len(deltas)} deltas for scope {scope.value}")
        return deltas

    def calculate_public_equity_deltas(self) -> list[AssetDelta]:
        """
        Public equity deltas with the price move isolated.

        price_change_percent = (price_b / price_a - 1) * 100, set only for
        names held in both snapshots with a positive price in A.
        """
        snapshot_a, snapshot_b = self.snapshot_a, self.snapshot_b
        if snapshot_a is None or snapshot_b is None:
            return []

        deltas = self.calculate_deltas(ComparisonScope.PUBLIC_EQUITY)
        first_a = self._first_by_name(snapshot_a.assets, ComparisonScope.PUBLIC_EQUITY)
        first_b = self._first_by_name(snapshot_b.assets, ComparisonScope.PUBLIC_EQUITY)

        enriched = []
        for delta in deltas:
            asset_a = first_a.get(delta.asset_name)
            asset_b = first_b.get(delta.asset_name)
            change = None
            if asset_a is not None and asset_b is not None:
                change = relative_change_percent(asset_a.price, asset_b.price)
            if change is not None:
                delta = replace(delta, price_change_percent=round_percentage(change))
            enriched.append(delta)
        return enriched

    @log_operation
    def find_new_and_deleted_positions(self) -> list[PositionChange]:
        """
        Names held in only one of the two snapshots.

        Deleted positions (only in A) come first and use A's class,
        sub-class and value; new positions (only in B) use B's.
        """
        snapshot_a, snapshot_b = self.snapshot_a, self.snapshot_b
        if snapshot_a is None or snapshot_b is None:
            return []

        values_a = self._values_by_name(snapshot_a.assets, ComparisonScope.ALL)
        values_b = self._values_by_name(snapshot_b.assets, ComparisonScope.ALL)
        first_a = self._first_by_name(snapshot_a.assets, ComparisonScope.ALL)
        first_b = self._first_by_name(snapshot_b.assets, ComparisonScope.ALL)

        changes = [
            self._position_change(first_a[name], values_a[name], ChangeType.DELETED)
            for name in values_a
            if name not in values_b
        ]
        changes.extend(
            self._position_change(first_b[name], values_b[name], ChangeType.NEW)
            for name in values_b
            if name not in values_a
        )
        return changes

    @staticmethod
    def _position_change(asset: Asset, value: float, change_type: ChangeType) -> PositionChange:
        return PositionChange(
            asset_name=asset.name,
            asset_class=asset.asset_class,
            sub_class=asset.sub_class,
            origin_currency=asset.origin_currency,
            value_usd=value,
            change_type=change_type,
        )

    def build_report(
        self, top_n: Mapping[ComparisonScope, int] | None = None
    ) -> ComparisonReport:
        """
        Build the sectioned comparison report.

        Each section keeps its top-N deltas by magnitude, then drops
        rows whose delta is exactly zero.

        Args:
            top_n: Rows per section (defaults: 15 for public equity, 10 otherwise)

        Returns:
            ComparisonReport; empty when a snapshot is missing
        """
        name_a = self.snapshot_a.name if self.snapshot_a else ""
        name_b = self.snapshot_b.name if self.snapshot_b else ""
        if not self.is_comparable:
            return ComparisonReport(snapshot_a_name=name_a, snapshot_b_name=name_b)

        limits = {**DEFAULT_SECTION_TOP_N, **(top_n or {})}
        sections: dict[ComparisonScope, list[AssetDelta]] = {}
        for scope in REPORT_SECTIONS:
            deltas = (
                self.calculate_public_equity_deltas()
                if scope == ComparisonScope.PUBLIC_EQUITY
                else self.calculate_deltas(scope)
            )
            top = get_top_deltas(deltas, limits[scope])
            sections[scope] = [delta for delta in top if delta.delta_usd != ZERO]

        report = ComparisonReport(
            snapshot_a_name=name_a,
            snapshot_b_name=name_b,
            sections=sections,
            position_changes=self.find_new_and_deleted_positions(),
        )
        logger.info(
            f"Comparison {name_a} -> {name_b}: "
            f"{sum(len(rows) for rows in sections.values())} changed rows, "
            f"{len(report.position_changes)} new/deleted positions"
        )
        return report
