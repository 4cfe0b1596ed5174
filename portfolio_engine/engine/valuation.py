"""
Per-asset valuation.

raw = quantity * price
converted = raw * rate(origin -> view)
display = converted * factor   (Private Equity and Real Estate only)
"""

from portfolio_engine.core.constants import CASH_DEFAULT_PRICE, DEFAULT_FACTOR
from portfolio_engine.core.enums import AssetClass, ViewCurrency
from portfolio_engine.core.models.asset import Asset, derive_pe_price
from portfolio_engine.core.models.calculations import AssetCalculations
from portfolio_engine.core.models.fx import FXRates
from portfolio_engine.core.types.financial import ZERO
from portfolio_engine.engine.conversion import rate_for

__all__ = ["derive_pe_price", "display_value", "effective_factor", "effective_price", "valuate"]


def effective_price(asset: Asset) -> float:
    """Price used for valuation: cash defaults to 1, others to 0 when unset."""
    if asset.asset_class == AssetClass.CASH:
        if asset.price is None or asset.price <= ZERO:
            return CASH_DEFAULT_PRICE
        return asset.price
    return asset.price if asset.price is not None else ZERO


def effective_factor(asset: Asset) -> float:
    """Discount applied to display value; 1.0 outside PE and RE."""
    if not asset.asset_class.uses_factor:
        return DEFAULT_FACTOR
    return asset.factor if asset.factor is not None else DEFAULT_FACTOR


def valuate(
    asset: Asset,
    fx_rates: FXRates,
    view_currency: ViewCurrency | str,
    *,
    strict: bool = False,
) -> AssetCalculations:
    """
    Value a single asset in the view currency.

    Args:
        asset: Asset to value
        fx_rates: FX table keyed by currency code
        view_currency: USD or ILS
        strict: Raise MissingRateError instead of using the identity rate

    Returns:
        AssetCalculations with percentage_of_scope left at 0
    """
    raw_base_value = asset.quantity * effective_price(asset)
    converted_value = raw_base_value * rate_for(
        asset.origin_currency, view_currency, fx_rates, strict=strict
    )
    return AssetCalculations(
        raw_base_value=raw_base_value,
        converted_value=converted_value,
        display_value=converted_value * effective_factor(asset),
    )


def display_value(
    asset: Asset,
    fx_rates: FXRates,
    view_currency: ViewCurrency | str,
    *,
    strict: bool = False,
) -> float:
    """Shortcut for valuate(...).display_value."""
    return valuate(asset, fx_rates, view_currency, strict=strict).display_value
