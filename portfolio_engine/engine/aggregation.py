"""
Multi-dimensional aggregation of valued assets.

Every summary view goes through aggregate(): holdings by class, entity,
bank, currency or beneficiary, the liquidity matrix columns, snapshot
totals and the comparison grouping. Percentages are computed against
a basis declared per call; denominators always come from the
unfiltered input.
"""

from collections.abc import Callable, Hashable, Iterable, Sequence
from datetime import date

from loguru import logger

from portfolio_engine.core.constants import (
    DAYS_PER_YEAR,
    MATURITY_WINDOW_LONG,
    MATURITY_WINDOW_MATURED,
    MATURITY_WINDOW_NONE,
    MATURITY_WINDOWS,
)
from portfolio_engine.core.enums import AssetClass, Dimension, PercentageBasis, ViewCurrency
from portfolio_engine.core.models.aggregation import AggregateBucket, AssetFilter, AssetGroup
from portfolio_engine.core.models.asset import Asset
from portfolio_engine.core.models.calculations import ValuedAsset
from portfolio_engine.core.models.fx import FXRates
from portfolio_engine.core.types.financial import ZERO, percentage_of
from portfolio_engine.core.utils.decorators import log_operation
from portfolio_engine.engine.valuation import valuate

DimensionKey = Dimension | Callable[[Asset], Hashable]

# AssetCalculations fields aggregate() can sum
DISPLAY_VALUE = "display_value"
CONVERTED_VALUE = "converted_value"


def maturity_window(asset: Asset, as_of: date | None = None) -> str:
    """
    Bucket an asset by time to maturity.

    Returns one of "< 1Y", "1-2Y", "2-5Y", "5-10Y", "10Y+",
    "Matured" or "No maturity".
    """
    if asset.maturity_date is None:
        return MATURITY_WINDOW_NONE
    reference = as_of or date.today()
    days = (asset.maturity_date - reference).days
    if days < 0:
        return MATURITY_WINDOW_MATURED
    years = days / DAYS_PER_YEAR
    for label, upper in MATURITY_WINDOWS:
        if years < upper:
            return label
    return MATURITY_WINDOW_LONG


def dimension_key(asset: Asset, dimension: DimensionKey, as_of: date | None = None) -> Hashable:
    """Get the bucket key of an asset along a dimension."""
    if isinstance(dimension, Dimension):
        if dimension == Dimension.MATURITY_WINDOW:
            return maturity_window(asset, as_of)
        return getattr(asset, dimension.value)
    return dimension(asset)


def apply_filters(assets: Iterable[Asset], filters: AssetFilter | None) -> list[Asset]:
    """Keep the assets matching the filter (all of them when None)."""
    if filters is None:
        return list(assets)
    return [asset for asset in assets if filters.matches(asset)]


def class_totals(
    values: Sequence[tuple[Asset, float]],
) -> dict[AssetClass, float]:
    """Sum values per asset class."""
    totals: dict[AssetClass, float] = {}
    for asset, value in values:
        totals[asset.asset_class] = totals.get(asset.asset_class, ZERO) + value
    return totals


def basis_total(
    totals: dict[AssetClass, float],
    basis: PercentageBasis,
    classes: Iterable[AssetClass] = (),
) -> float:
    """
    Get the denominator for a percentage basis.

    Args:
        totals: Per-class totals over the unfiltered input
        basis: Declared percentage basis
        classes: Classes present in the bucket (CLASS_LOCAL only)

    Returns:
        Denominator; may be 0
    """
    if basis == PercentageBasis.CLASS_LOCAL:
        return sum(totals.get(asset_class, ZERO) for asset_class in set(classes))
    excluded = basis.excluded_classes()
    return sum(value for asset_class, value in totals.items() if asset_class not in excluded)


def _measured_values(
    assets: Iterable[Asset],
    fx_rates: FXRates,
    view_currency: ViewCurrency | str,
    strict: bool,
    measure: str = DISPLAY_VALUE,
) -> list[tuple[Asset, float]]:
    return [
        (asset, getattr(valuate(asset, fx_rates, view_currency, strict=strict), measure))
        for asset in assets
    ]


@log_operation
def aggregate(
    assets: Sequence[Asset],
    dimension: DimensionKey,
    fx_rates: FXRates,
    view_currency: ViewCurrency | str,
    filters: AssetFilter | None = None,
    basis: PercentageBasis | None = None,
    as_of: date | None = None,
    *,
    strict: bool = False,
    measure: str = DISPLAY_VALUE,
) -> dict[Hashable, AggregateBucket]:
    """
    Group assets along one dimension and sum their values.

    Args:
        assets: Unfiltered input assets
        dimension: Dimension or callable returning the bucket key
        fx_rates: FX table keyed by currency code
        view_currency: USD or ILS
        filters: Criteria applied before bucketing
        basis: Percentage basis (default GRAND_TOTAL)
        as_of: Reference date for maturity windows
        strict: Raise MissingRateError on missing FX entries
        measure: AssetCalculations field to sum (display or converted value)

    Returns:
        Buckets keyed by dimension value, in first-encounter order
    """
    basis = basis or PercentageBasis.GRAND_TOTAL
    values = _measured_values(assets, fx_rates, view_currency, strict, measure)
    totals = class_totals(values)

    counts: dict[Hashable, int] = {}
    sums: dict[Hashable, float] = {}
    classes: dict[Hashable, set[AssetClass]] = {}
    for asset, value in values:
        if filters is not None and not filters.matches(asset):
            continue
        key = dimension_key(asset, dimension, as_of)
        counts[key] = counts.get(key, 0) + 1
        sums[key] = sums.get(key, ZERO) + value
        classes.setdefault(key, set()).add(asset.asset_class)

    grand_total = basis_total(totals, basis)
    buckets: dict[Hashable, AggregateBucket] = {}
    for key, total in sums.items():
        denominator = (
            basis_total(totals, basis, classes[key])
            if basis == PercentageBasis.CLASS_LOCAL
            else grand_total
        )
        buckets[key] = AggregateBucket(
            count=counts[key],
            value=total,
            percentage=percentage_of(total, denominator),
        )

    logger.debug(f"Aggregated {len(values)} assets into {len(buckets)} buckets")
    return buckets


def value_assets(
    assets: Sequence[Asset],
    fx_rates: FXRates,
    view_currency: ViewCurrency | str,
    basis: PercentageBasis | None = None,
    *,
    strict: bool = False,
) -> list[ValuedAsset]:
    """
    Value every asset and fill percentage_of_scope against the basis.

    Under CLASS_LOCAL each asset is measured against its own class total.
    """
    basis = basis or PercentageBasis.GRAND_TOTAL
    calculations = [valuate(asset, fx_rates, view_currency, strict=strict) for asset in assets]
    totals = class_totals(
        [(asset, calc.display_value) for asset, calc in zip(assets, calculations, strict=True)]
    )
    grand_total = basis_total(totals, basis)

    valued = []
    for asset, calc in zip(assets, calculations, strict=True):
        denominator = (
            basis_total(totals, basis, (asset.asset_class,))
            if basis == PercentageBasis.CLASS_LOCAL
            else grand_total
        )
        valued.append(
            ValuedAsset(
                asset=asset,
                calculations=calc.with_percentage(percentage_of(calc.display_value, denominator)),
            )
        )
    return valued


def total_value(
    assets: Iterable[Asset],
    fx_rates: FXRates,
    view_currency: ViewCurrency | str,
    filters: AssetFilter | None = None,
    *,
    strict: bool = False,
) -> float:
    """Sum of display values of the matching assets."""
    return sum(
        value
        for _, value in _measured_values(
            apply_filters(assets, filters), fx_rates, view_currency, strict
        )
    )


@log_operation
def group_assets(
    assets: Sequence[Asset],
    fields: Sequence[DimensionKey],
    fx_rates: FXRates,
    view_currency: ViewCurrency | str,
    filters: AssetFilter | None = None,
    basis: PercentageBasis | None = None,
    as_of: date | None = None,
    *,
    strict: bool = False,
) -> list[AssetGroup]:
    """
    Group assets by several fields at once.

    Groups are returned in first-encounter order; with no fields every
    matching asset lands in a single group keyed by ().
    """
    basis = basis or PercentageBasis.GRAND_TOTAL
    values = _measured_values(assets, fx_rates, view_currency, strict)
    totals = class_totals(values)
    grand_total = basis_total(totals, basis)

    members: dict[tuple[Hashable, ...], list[tuple[Asset, float]]] = {}
    for asset, value in values:
        if filters is not None and not filters.matches(asset):
            continue
        key = tuple(dimension_key(asset, field, as_of) for field in fields)
        members.setdefault(key, []).append((asset, value))

    groups = []
    for key, entries in members.items():
        group_total = sum(value for _, value in entries)
        denominator = (
            basis_total(totals, basis, (asset.asset_class for asset, _ in entries))
            if basis == PercentageBasis.CLASS_LOCAL
            else grand_total
        )
        groups.append(
            AssetGroup(
                key=key,
                assets=tuple(asset for asset, _ in entries),
                total_value=group_total,
                asset_count=len(entries),
                percentage_of_total=percentage_of(group_total, denominator),
            )
        )
    return groups
