"""
Portfolio summary view models.
"""

from dataclasses import dataclass, field
from typing import Any

from portfolio_engine.core.enums import AssetClass
from portfolio_engine.core.models.aggregation import AggregateBucket
from portfolio_engine.core.models.calculations import ValuedAsset
from portfolio_engine.core.types.financial import ZERO


@dataclass(frozen=True)
class YtwBucket:
    """Value-weighted yield to worst of a group of fixed income holdings."""

    weighted_ytw: float
    total_value: float


@dataclass(frozen=True)
class SubClassTotal:
    """Sub-class row of the class > sub-class > name hierarchy."""

    sub_class: str
    total: float
    names: list[tuple[str, float]] = field(default_factory=list)


@dataclass(frozen=True)
class ClassTotal:
    """Class row of the class > sub-class > name hierarchy."""

    asset_class: AssetClass
    total: float
    sub_classes: list[SubClassTotal] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "class": self.asset_class.value,
            "total": self.total,
            "sub_classes": [
                {
                    "sub_class": sub.sub_class,
                    "total": sub.total,
                    "names": [{"name": name, "total": value} for name, value in sub.names],
                }
                for sub in self.sub_classes
            ],
        }


@dataclass(frozen=True)
class PortfolioSummary:
    """Headline views of a portfolio in one view currency."""

    view_currency: str
    total_value: float
    holdings_by_class: dict[AssetClass, AggregateBucket]
    holdings_by_entity: list[tuple[str, AggregateBucket]]
    top_positions: list[ValuedAsset]
    fixed_income_ytw: float = ZERO
    ytw_by_sub_class: dict[str, YtwBucket] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert summary to dictionary."""
        return {
            "view_currency": self.view_currency,
            "total_value": self.total_value,
            "holdings_by_class": [
                {"class": asset_class.value, **bucket.to_dict()}
                for asset_class, bucket in self.holdings_by_class.items()
            ],
            "holdings_by_entity": [
                {"entity": entity, "value": bucket.value, "percentage": bucket.percentage}
                for entity, bucket in self.holdings_by_entity
            ],
            "top_positions": [
                {
                    "name": valued.asset.name,
                    "class": valued.asset.asset_class.value,
                    "sub_class": valued.asset.sub_class,
                    "value": valued.calculations.display_value,
                    "percentage": valued.calculations.percentage_of_scope,
                }
                for valued in self.top_positions
            ],
            "fixed_income_ytw": {
                "weighted_average": self.fixed_income_ytw,
                "by_subclass": [
                    {
                        "sub_class": sub_class,
                        "weighted_ytw": bucket.weighted_ytw,
                        "total_value": bucket.total_value,
                    }
                    for sub_class, bucket in self.ytw_by_sub_class.items()
                ],
            },
        }


@dataclass(frozen=True)
class HoldingRow:
    """One name across account entities; cash rows are one per currency."""

    name: str
    currency: str
    price: float | None
    entity_quantities: dict[str, float]
    entity_values_usd: dict[str, float]
    entity_values_ils: dict[str, float]

    @property
    def total_quantity(self) -> float:
        return sum(self.entity_quantities.values())

    @property
    def total_usd(self) -> float:
        return sum(self.entity_values_usd.values())

    @property
    def total_ils(self) -> float:
        return sum(self.entity_values_ils.values())


def _sum_by_entity(rows: list[HoldingRow], attribute: str) -> dict[str, float]:
    totals: dict[str, float] = {}
    for row in rows:
        for entity, value in getattr(row, attribute).items():
            totals[entity] = totals.get(entity, ZERO) + value
    return totals


@dataclass(frozen=True)
class HoldingSection:
    """Rows of one sub-class with their subtotals."""

    label: str
    rows: list[HoldingRow]

    @property
    def entity_totals_usd(self) -> dict[str, float]:
        return _sum_by_entity(self.rows, "entity_values_usd")

    @property
    def entity_totals_ils(self) -> dict[str, float]:
        return _sum_by_entity(self.rows, "entity_values_ils")

    @property
    def total_usd(self) -> float:
        return sum(row.total_usd for row in self.rows)

    @property
    def total_ils(self) -> float:
        return sum(row.total_ils for row in self.rows)


@dataclass(frozen=True)
class HoldingClass:
    """Sections of one asset class."""

    asset_class: AssetClass
    sections: list[HoldingSection]

    @property
    def rows(self) -> list[HoldingRow]:
        return [row for section in self.sections for row in section.rows]

    @property
    def entity_totals_usd(self) -> dict[str, float]:
        return _sum_by_entity(self.rows, "entity_values_usd")

    @property
    def entity_totals_ils(self) -> dict[str, float]:
        return _sum_by_entity(self.rows, "entity_values_ils")

    @property
    def total_usd(self) -> float:
        return sum(section.total_usd for section in self.sections)

    @property
    def total_ils(self) -> float:
        return sum(section.total_ils for section in self.sections)


@dataclass(frozen=True)
class HoldingsReport:
    """
    Holdings per name and account entity, in USD and ILS.

    Private equity is left out. Real estate comes last, at factored value,
    and is kept out of the grand totals.
    """

    entities: list[str]
    classes: list[HoldingClass]

    @property
    def liquid_classes(self) -> list[HoldingClass]:
        return [c for c in self.classes if c.asset_class != AssetClass.REAL_ESTATE]

    @property
    def grand_total_usd(self) -> float:
        return sum(c.total_usd for c in self.liquid_classes)

    @property
    def grand_total_ils(self) -> float:
        return sum(c.total_ils for c in self.liquid_classes)

    @property
    def grand_entity_totals_usd(self) -> dict[str, float]:
        return _sum_by_entity(
            [row for c in self.liquid_classes for row in c.rows], "entity_values_usd"
        )

    @property
    def grand_entity_totals_ils(self) -> dict[str, float]:
        return _sum_by_entity(
            [row for c in self.liquid_classes for row in c.rows], "entity_values_ils"
        )


@dataclass(frozen=True)
class PrivateEquityRow:
    """One private equity company."""

    company: str
    price: float | None
    factor: float
    liquidation_year: str | None
    total_usd: float


@dataclass(frozen=True)
class PrivateEquitySection:
    """Companies of one investment stage, largest first."""

    sub_class: str
    rows: list[PrivateEquityRow]

    @property
    def total_usd(self) -> float:
        return sum(row.total_usd for row in self.rows)


@dataclass(frozen=True)
class PrivateEquitySummary:
    """Private equity companies grouped by stage, at factored USD value."""

    sections: list[PrivateEquitySection]

    @property
    def total_usd(self) -> float:
        return sum(section.total_usd for section in self.sections)
