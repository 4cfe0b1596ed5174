"""
Currency conversion through the ILS anchor.

Every cross rate is derived from to_ILS:

    rate(X -> ILS) = fx[X].to_ils
    rate(X -> USD) = fx[X].to_ils / fx[USD].to_ils

The stored to_USD field is never used here, so a manual edit of one
currency's to_ILS can never leave the USD view inconsistent.
"""

from collections.abc import Iterable

from loguru import logger

from portfolio_engine.core.constants import ANCHOR_CURRENCY, IDENTITY_RATE, USD_CURRENCY
from portfolio_engine.core.enums import ViewCurrency
from portfolio_engine.core.exceptions.portfolio import MissingRateError
from portfolio_engine.core.models.asset import Asset
from portfolio_engine.core.models.fx import FXRates
from portfolio_engine.core.types.financial import ZERO


def _missing_rate(currency: str, view_currency: str, strict: bool) -> float:
    if strict:
        raise MissingRateError(currency, view_currency)
    logger.warning(
        f"No FX rate for {currency}, using identity rate {IDENTITY_RATE} for {view_currency} view"
    )
    return IDENTITY_RATE


def rate_for(
    from_currency: str,
    view_currency: ViewCurrency | str,
    fx_rates: FXRates,
    *,
    strict: bool = False,
) -> float:
    """
    Get the multiplier converting an amount into the view currency.

    Args:
        from_currency: Origin currency code
        view_currency: USD or ILS
        fx_rates: FX table keyed by currency code
        strict: Raise instead of falling back when a rate is missing

    Returns:
        Conversion rate; 1.0 for same-currency or missing entries,
        0.0 when the USD anchor is not positive

    Raises:
        MissingRateError: In strict mode, when a needed rate is missing
    """
    from_currency = from_currency.upper()
    view = str(view_currency).upper()

    if from_currency == view:
        return IDENTITY_RATE

    if from_currency == ANCHOR_CURRENCY:
        from_to_ils = IDENTITY_RATE
    else:
        rate = fx_rates.get(from_currency)
        if rate is None:
            return _missing_rate(from_currency, view, strict)
        from_to_ils = rate.to_ils

    if view == ANCHOR_CURRENCY:
        return from_to_ils

    usd_rate = fx_rates.get(USD_CURRENCY)
    if usd_rate is None:
        return _missing_rate(USD_CURRENCY, view, strict)
    if usd_rate.to_ils <= ZERO:
        logger.warning(f"USD anchor rate is {usd_rate.to_ils}, converting {from_currency} to 0")
        return ZERO
    return from_to_ils / usd_rate.to_ils


def convert(
    amount: float,
    from_currency: str,
    view_currency: ViewCurrency | str,
    fx_rates: FXRates,
    *,
    strict: bool = False,
) -> float:
    """Convert an amount into the view currency."""
    return amount * rate_for(from_currency, view_currency, fx_rates, strict=strict)


def find_missing_currencies(
    assets: Iterable[Asset],
    fx_rates: FXRates,
    view_currency: ViewCurrency | str,
) -> list[str]:
    """
    List the currencies that would fall back to the identity rate.

    Lets callers reject a valuation up front instead of silently
    counting foreign amounts at 1:1.
    """
    view = str(view_currency).upper()
    needed: dict[str, None] = {}
    for asset in assets:
        currency = asset.origin_currency
        if currency == view:
            continue
        if currency != ANCHOR_CURRENCY:
            needed[currency] = None
        if view == USD_CURRENCY:
            needed[USD_CURRENCY] = None
    return [currency for currency in needed if currency not in fx_rates]
