"""
Portfolio summary views built on the aggregation engine.

Holdings by class and entity, top positions, value-weighted yield to
worst, the class > sub-class > name hierarchy, the USD totals stored
with a snapshot, and the per-entity holdings and private equity reports
behind the spreadsheet export.
"""

from collections.abc import Iterable, Mapping, Sequence

from loguru import logger

from portfolio_engine.core.constants import CASH_DEFAULT_PRICE, DEFAULT_TOP_POSITIONS
from portfolio_engine.core.enums import (
    CLASS_DISPLAY_ORDER,
    CLASS_SUB_CLASSES,
    AssetClass,
    Dimension,
    PercentageBasis,
    PrivateEquitySubClass,
    ViewCurrency,
)
from portfolio_engine.core.models.aggregation import AggregateBucket, AssetFilter
from portfolio_engine.core.models.asset import Asset
from portfolio_engine.core.models.calculations import ValuedAsset
from portfolio_engine.core.models.fx import FXRates
from portfolio_engine.core.models.snapshot import SnapshotTotals
from portfolio_engine.core.models.summary import (
    ClassTotal,
    HoldingClass,
    HoldingRow,
    HoldingSection,
    HoldingsReport,
    PortfolioSummary,
    PrivateEquityRow,
    PrivateEquitySection,
    PrivateEquitySummary,
    SubClassTotal,
    YtwBucket,
)
from portfolio_engine.core.types.financial import ZERO, safe_divide
from portfolio_engine.core.utils.decorators import log_operation
from portfolio_engine.engine.aggregation import (
    CONVERTED_VALUE,
    aggregate,
    group_assets,
    value_assets,
)
from portfolio_engine.engine.valuation import effective_factor, valuate

# Stage order of the private equity report
PRIVATE_EQUITY_STAGE_ORDER: tuple[str, ...] = (
    PrivateEquitySubClass.NEAR_FUTURE.value,
    PrivateEquitySubClass.GROWTH.value,
    PrivateEquitySubClass.INITIAL.value,
)


def holdings_by_class(
    assets: Sequence[Asset], fx_rates: FXRates, view_currency: ViewCurrency | str
) -> dict[AssetClass, AggregateBucket]:
    """Count, value and share of grand total per asset class."""
    return aggregate(  # type: ignore[return-value]
        assets, Dimension.CLASS, fx_rates, view_currency, basis=PercentageBasis.GRAND_TOTAL
    )


def holdings_by_entity(
    assets: Sequence[Asset], fx_rates: FXRates, view_currency: ViewCurrency | str
) -> list[tuple[str, AggregateBucket]]:
    """Holdings per account entity, largest first."""
    buckets = aggregate(
        assets,
        Dimension.ACCOUNT_ENTITY,
        fx_rates,
        view_currency,
        basis=PercentageBasis.GRAND_TOTAL,
    )
    return sorted(
        ((str(entity), bucket) for entity, bucket in buckets.items()),
        key=lambda item: item[1].value,
        reverse=True,
    )


def top_positions(
    assets: Sequence[Asset],
    fx_rates: FXRates,
    view_currency: ViewCurrency | str,
    n: int = DEFAULT_TOP_POSITIONS,
) -> list[ValuedAsset]:
    """The n largest holdings by display value."""
    valued = value_assets(assets, fx_rates, view_currency, PercentageBasis.GRAND_TOTAL)
    return sorted(valued, key=lambda item: item.display_value, reverse=True)[:n]


def _ytw_bucket(entries: Sequence[tuple[Asset, float]]) -> YtwBucket:
    weighted = sum((asset.ytw or ZERO) * value for asset, value in entries)
    total = sum(value for _, value in entries)
    return YtwBucket(weighted_ytw=safe_divide(weighted, total), total_value=total)


def _ytw_holdings(
    assets: Sequence[Asset], fx_rates: FXRates, view_currency: ViewCurrency | str
) -> list[tuple[Asset, float]]:
    return [
        (asset, valuate(asset, fx_rates, view_currency).display_value)
        for asset in assets
        if asset.asset_class == AssetClass.FIXED_INCOME and asset.ytw is not None
    ]


def weighted_ytw(
    assets: Sequence[Asset], fx_rates: FXRates, view_currency: ViewCurrency | str
) -> float:
    """
    Value-weighted yield to worst across fixed income holdings.

    Holdings without a ytw figure are ignored; 0 when nothing qualifies.
    """
    return _ytw_bucket(_ytw_holdings(assets, fx_rates, view_currency)).weighted_ytw


def ytw_by_sub_class(
    assets: Sequence[Asset], fx_rates: FXRates, view_currency: ViewCurrency | str
) -> dict[str, YtwBucket]:
    """Value-weighted yield to worst per fixed income sub-class."""
    grouped: dict[str, list[tuple[Asset, float]]] = {}
    for asset, value in _ytw_holdings(assets, fx_rates, view_currency):
        grouped.setdefault(asset.sub_class, []).append((asset, value))
    return {sub_class: _ytw_bucket(entries) for sub_class, entries in grouped.items()}


@log_operation
def hierarchy_totals(
    assets: Sequence[Asset], fx_rates: FXRates, view_currency: ViewCurrency | str
) -> list[ClassTotal]:
    """
    Class > sub-class > name totals.

    Classes follow the fixed display order and are dropped when their
    total is not positive; sub-classes and names are sorted by value,
    largest first.
    """
    groups = group_assets(
        assets,
        (Dimension.CLASS, Dimension.SUB_CLASS, Dimension.NAME),
        fx_rates,
        view_currency,
    )
    tree: dict[AssetClass, dict[str, list[tuple[str, float]]]] = {}
    for group in groups:
        asset_class, sub_class, name = group.key
        tree.setdefault(asset_class, {}).setdefault(sub_class, []).append(
            (name, group.total_value)
        )

    totals = []
    for asset_class in CLASS_DISPLAY_ORDER:
        sub_class_map = tree.get(asset_class)
        if not sub_class_map:
            continue
        sub_classes = sorted(
            (
                SubClassTotal(
                    sub_class=sub_class,
                    total=sum(value for _, value in names),
                    names=sorted(names, key=lambda item: item[1], reverse=True),
                )
                for sub_class, names in sub_class_map.items()
            ),
            key=lambda sub: sub.total,
            reverse=True,
        )
        class_total = sum(sub.total for sub in sub_classes)
        if class_total > ZERO:
            totals.append(
                ClassTotal(asset_class=asset_class, total=class_total, sub_classes=sub_classes)
            )
    return totals


def snapshot_totals(assets: Sequence[Asset], fx_rates: FXRates) -> SnapshotTotals:
    """
    USD totals saved with a snapshot.

    Uses converted values, before any factor discount. Everything outside
    Private Equity and Real Estate counts as liquid + fixed income.
    """
    by_class = aggregate(
        assets, Dimension.CLASS, fx_rates, ViewCurrency.USD, measure=CONVERTED_VALUE
    )
    values = {asset_class: bucket.value for asset_class, bucket in by_class.items()}
    private_equity = values.get(AssetClass.PRIVATE_EQUITY, ZERO)
    real_estate = values.get(AssetClass.REAL_ESTATE, ZERO)
    total = sum(values.values())
    return SnapshotTotals(
        total_value_usd=total,
        liquid_fixed_income_value_usd=total - private_equity - real_estate,
        private_equity_value_usd=private_equity,
        real_estate_value_usd=real_estate,
    )


@log_operation
def build_summary(
    assets: Sequence[Asset],
    fx_rates: FXRates,
    view_currency: ViewCurrency | str,
    top_n: int = DEFAULT_TOP_POSITIONS,
    filters: AssetFilter | None = None,
) -> PortfolioSummary:
    """
    Build the headline summary views for a set of assets.

    Args:
        assets: Assets to summarise
        fx_rates: FX table keyed by currency code
        view_currency: USD or ILS
        top_n: Number of top positions to list
        filters: Criteria applied before summarising

    Returns:
        PortfolioSummary
    """
    if filters is not None:
        assets = [asset for asset in assets if filters.matches(asset)]

    by_class = holdings_by_class(assets, fx_rates, view_currency)
    summary = PortfolioSummary(
        view_currency=str(view_currency),
        total_value=sum(bucket.value for bucket in by_class.values()),
        holdings_by_class=by_class,
        holdings_by_entity=holdings_by_entity(assets, fx_rates, view_currency),
        top_positions=top_positions(assets, fx_rates, view_currency, top_n),
        fixed_income_ytw=weighted_ytw(assets, fx_rates, view_currency),
        ytw_by_sub_class=ytw_by_sub_class(assets, fx_rates, view_currency),
    )
    logger.info(
        f"Summary of {len(assets)} assets: total {summary.total_value:,.2f} {summary.view_currency}"
    )
    return summary


def _present_in_order(keys: Iterable[str], preferred: Sequence[str]) -> list[str]:
    """Keys in preferred order, then the rest in first-encounter order."""
    seen = list(dict.fromkeys(keys))
    return [key for key in preferred if key in seen] + [key for key in seen if key not in preferred]


def _holding_row_key(asset: Asset) -> str:
    """Cash rows are one per currency, every other row one per name."""
    if asset.asset_class == AssetClass.CASH:
        return asset.origin_currency
    return asset.name


@log_operation
def holdings_report(
    assets: Sequence[Asset],
    fx_rates: FXRates,
    entities: Sequence[str] | None = None,
) -> HoldingsReport:
    """
    Quantity per account entity and USD/ILS totals for every holding.

    Private equity is left out and cash is grouped by currency. Classes
    follow the display order with real estate moved last; sub-classes
    follow their declared order and rows keep first-encounter order.
    Values are display values, so real estate is factored.

    Args:
        assets: Assets to report
        fx_rates: FX table keyed by currency code
        entities: Preferred entity column order; unlisted entities follow
    """
    filters = AssetFilter(exclude_asset_class=(AssetClass.PRIVATE_EQUITY,))
    fields = (Dimension.CLASS, Dimension.SUB_CLASS, _holding_row_key, Dimension.ACCOUNT_ENTITY)
    usd_groups = group_assets(assets, fields, fx_rates, ViewCurrency.USD, filters)
    ils_groups = group_assets(assets, fields, fx_rates, ViewCurrency.ILS, filters)

    first_assets: dict[tuple[AssetClass, str, str], Asset] = {}
    quantities: dict[tuple[AssetClass, str, str], dict[str, float]] = {}
    values_usd: dict[tuple[AssetClass, str, str], dict[str, float]] = {}
    values_ils: dict[tuple[AssetClass, str, str], dict[str, float]] = {}
    for usd_group, ils_group in zip(usd_groups, ils_groups, strict=True):
        asset_class, sub_class, row_key, entity = usd_group.key
        key = (asset_class, sub_class, row_key)
        first_assets.setdefault(key, usd_group.assets[0])
        quantities.setdefault(key, {})[entity] = sum(a.quantity for a in usd_group.assets)
        values_usd.setdefault(key, {})[entity] = usd_group.total_value
        values_ils.setdefault(key, {})[entity] = ils_group.total_value

    tree: dict[AssetClass, dict[str, list[HoldingRow]]] = {}
    for key, first in first_assets.items():
        asset_class, sub_class, row_key = key
        row = HoldingRow(
            name=row_key,
            currency=first.origin_currency,
            price=CASH_DEFAULT_PRICE if asset_class == AssetClass.CASH else first.price,
            entity_quantities=quantities[key],
            entity_values_usd=values_usd[key],
            entity_values_ils=values_ils[key],
        )
        tree.setdefault(asset_class, {}).setdefault(sub_class, []).append(row)

    class_order = [
        c
        for c in CLASS_DISPLAY_ORDER
        if c not in (AssetClass.PRIVATE_EQUITY, AssetClass.REAL_ESTATE)
    ]
    classes = []
    for asset_class in [*class_order, AssetClass.REAL_ESTATE]:
        sub_class_map = tree.get(asset_class)
        if not sub_class_map:
            continue
        order = _present_in_order(sub_class_map, CLASS_SUB_CLASSES[asset_class])
        if asset_class == AssetClass.CASH:
            rows = [row for sub_class in order for row in sub_class_map[sub_class]]
            sections = [HoldingSection(label=asset_class.value, rows=rows)]
        else:
            sections = [
                HoldingSection(label=sub_class, rows=sub_class_map[sub_class])
                for sub_class in order
            ]
        classes.append(HoldingClass(asset_class=asset_class, sections=sections))

    preferred = list(entities or ())
    seen = dict.fromkeys(str(group.key[-1]) for group in usd_groups)
    report = HoldingsReport(
        entities=[*preferred, *(entity for entity in seen if entity not in preferred)],
        classes=classes,
    )
    logger.debug(
        f"Holdings report: {len(first_assets)} rows, {report.grand_total_usd:,.2f} USD "
        f"excluding real estate"
    )
    return report


@log_operation
def private_equity_summary(
    assets: Sequence[Asset],
    fx_rates: FXRates,
    liquidation_years: Mapping[str, str] | None = None,
) -> PrivateEquitySummary:
    """
    Private equity companies by stage at factored USD value.

    Stages run Near Future, Growth, Initial, then any other stage seen.
    Companies within a stage are sorted by value, largest first. Price and
    factor come from the first holding of each company.

    Args:
        assets: Assets to report; only private equity is used
        fx_rates: FX table keyed by currency code
        liquidation_years: Expected liquidation year per company name
    """
    liquidation_years = liquidation_years or {}
    groups = group_assets(
        assets,
        (Dimension.SUB_CLASS, Dimension.NAME),
        fx_rates,
        ViewCurrency.USD,
        AssetFilter(asset_class=(AssetClass.PRIVATE_EQUITY,)),
    )

    stages: dict[str, list[PrivateEquityRow]] = {}
    for group in groups:
        sub_class, company = group.key
        first = group.assets[0]
        stages.setdefault(sub_class, []).append(
            PrivateEquityRow(
                company=company,
                price=first.price,
                factor=effective_factor(first),
                liquidation_year=liquidation_years.get(company),
                total_usd=group.total_value,
            )
        )

    return PrivateEquitySummary(
        sections=[
            PrivateEquitySection(
                sub_class=stage,
                rows=sorted(stages[stage], key=lambda row: row.total_usd, reverse=True),
            )
            for stage in _present_in_order(stages, PRIVATE_EQUITY_STAGE_ORDER)
        ]
    )
