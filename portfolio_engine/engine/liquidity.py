"""
Liquidity classification and the category x beneficiary matrix.
"""

from collections.abc import Collection, Iterable, Sequence

from loguru import logger

from portfolio_engine.core.enums import (
    AssetClass,
    FixedIncomeSubClass,
    LiquidityCategory,
    ViewCurrency,
)
from portfolio_engine.core.models.asset import Asset
from portfolio_engine.core.models.fx import FXRates
from portfolio_engine.core.models.liquidity import LiquidityMatrixData
from portfolio_engine.core.types.financial import ZERO
from portfolio_engine.core.utils.decorators import log_operation
from portfolio_engine.engine.valuation import valuate

_CASH_LIKE_SUB_CLASSES = tuple(
    sub_class for sub_class in FixedIncomeSubClass if sub_class.is_cash_like
)
_EQUITY_CLASSES = (AssetClass.PUBLIC_EQUITY, AssetClass.COMMODITIES)


def classify(
    asset: Asset,
    limited_liquidity_names: Collection[str],
    always_funds_names: Collection[str] = (),
) -> LiquidityCategory:
    """
    Classify an asset into a liquidity category.

    Rules are checked in order, first match wins:
        1. Cash class -> Cash
        2. Fixed Income Bank Deposit / Money Market -> Cash
        3. Fixed Income Private Credit -> Funds
        4. Name in always_funds_names -> Funds
        5. Other Fixed Income -> Bonds
        6. Real Estate -> Real Estate
        7. Private Equity -> Private Equity
        8. Public Equity / Commodities -> Limited when flagged by name,
           else Liquid
        9. Anything else -> Equities - Liquid

    Args:
        asset: Asset to classify
        limited_liquidity_names: Names flagged as limited liquidity
        always_funds_names: Names always counted as Funds

    Returns:
        LiquidityCategory
    """
    asset_class = asset.asset_class
    if asset_class == AssetClass.CASH:
        return LiquidityCategory.CASH
    is_fixed_income = asset_class == AssetClass.FIXED_INCOME
    if is_fixed_income and asset.sub_class in _CASH_LIKE_SUB_CLASSES:
        return LiquidityCategory.CASH
    if is_fixed_income and asset.sub_class == FixedIncomeSubClass.PRIVATE_CREDIT:
        return LiquidityCategory.FUNDS
    if asset.name in always_funds_names:
        return LiquidityCategory.FUNDS
    if is_fixed_income:
        return LiquidityCategory.BONDS
    if asset_class == AssetClass.REAL_ESTATE:
        return LiquidityCategory.REAL_ESTATE
    if asset_class == AssetClass.PRIVATE_EQUITY:
        return LiquidityCategory.PRIVATE_EQUITY
    if asset_class in _EQUITY_CLASSES and asset.name in limited_liquidity_names:
        return LiquidityCategory.EQUITIES_LIMITED
    return LiquidityCategory.EQUITIES_LIQUID


def eligible_limited_liquidity_assets(
    assets: Iterable[Asset], always_funds_names: Collection[str] = ()
) -> list[Asset]:
    """Assets that may be flagged as limited liquidity.

    Public Equity and Commodities holdings, minus the always-funds names.
    """
    return [
        asset
        for asset in assets
        if asset.asset_class in _EQUITY_CLASSES and asset.name not in always_funds_names
    ]


@log_operation
def build_matrix(
    assets: Sequence[Asset],
    limited_liquidity_names: Collection[str],
    fx_rates: FXRates,
    view_currency: ViewCurrency | str,
    beneficiaries: Sequence[str],
    always_funds_names: Collection[str] = (),
    *,
    strict: bool = False,
) -> LiquidityMatrixData:
    """
    Build the liquidity category x beneficiary matrix.

    Every cell starts at 0 so the shape is fixed. Assets whose
    beneficiary is not listed are skipped.

    Args:
        assets: Assets to place
        limited_liquidity_names: Names flagged as limited liquidity
        fx_rates: FX table keyed by currency code
        view_currency: USD or ILS
        beneficiaries: Matrix columns, in display order
        always_funds_names: Names always counted as Funds
        strict: Raise MissingRateError on missing FX entries

    Returns:
        LiquidityMatrixData with row, column and grand totals
    """
    limited = frozenset(limited_liquidity_names)
    funds = frozenset(always_funds_names)
    matrix = {
        category: {beneficiary: ZERO for beneficiary in beneficiaries}
        for category in LiquidityCategory
    }

    skipped = 0
    for asset in assets:
        if asset.beneficiary not in matrix[LiquidityCategory.CASH]:
            skipped += 1
            logger.debug(
                f"Skipping {asset.name}: beneficiary '{asset.beneficiary}' not in matrix"
            )
            continue
        category = classify(asset, limited, funds)
        value = valuate(asset, fx_rates, view_currency, strict=strict).display_value
        matrix[category][asset.beneficiary] += value

    if skipped:
        logger.warning(f"Liquidity matrix skipped {skipped} assets with unknown beneficiaries")

    row_totals = {category: sum(row.values()) for category, row in matrix.items()}
    column_totals = {
        beneficiary: sum(matrix[category][beneficiary] for category in LiquidityCategory)
        for beneficiary in beneficiaries
    }
    return LiquidityMatrixData(
        matrix=matrix,
        row_totals=row_totals,
        column_totals=column_totals,
        grand_total=sum(row_totals.values()),
    )
