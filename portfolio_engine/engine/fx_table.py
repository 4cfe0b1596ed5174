"""
FX table maintenance: manual overrides, quote conversion and merging.

Fetching rates is left to a collaborator; these helpers only shape the
table the engine consumes.
"""

from collections.abc import Iterable, Mapping
from datetime import UTC, datetime

from loguru import logger

from portfolio_engine.core.constants import ANCHOR_CURRENCY, IDENTITY_RATE, USD_CURRENCY
from portfolio_engine.core.enums import Currency
from portfolio_engine.core.exceptions.portfolio import ValidationError
from portfolio_engine.core.models.fx import FXRate, FXRates
from portfolio_engine.core.types.financial import ZERO, safe_divide

MANUAL_SOURCE = "manual"
API_SOURCE = "api"


def manual_rate(
    currency: str,
    to_ils: float,
    fx_rates: FXRates,
    now: datetime | None = None,
) -> FXRate:
    """
    Build a manual override for one currency.

    to_USD is derived through the current USD anchor so the display
    field stays consistent with to_ILS.

    Raises:
        ValidationError: If to_ils is not positive
    """
    if to_ils <= ZERO:
        raise ValidationError(f"Manual {currency} rate must be positive, got {to_ils}")
    currency = currency.upper()

    usd = fx_rates.get(USD_CURRENCY)
    if currency == USD_CURRENCY:
        to_usd = IDENTITY_RATE
    elif usd is None:
        to_usd = ZERO
    else:
        to_usd = safe_divide(to_ils, usd.to_ils)

    logger.info(f"Manual FX override for {currency}: {to_ils} ILS")
    return FXRate(
        to_usd=to_usd,
        to_ils=to_ils,
        last_updated=now or datetime.now(UTC),
        source=MANUAL_SOURCE,
        is_manual_override=True,
    )


def rates_from_usd_quotes(
    quotes: Mapping[str, float],
    currencies: Iterable[str] | None = None,
    now: datetime | None = None,
) -> dict[str, FXRate]:
    """
    Build an FX table from USD-based quotes (units of X per 1 USD).

    Currencies without a quote are skipped with a warning.

    Raises:
        ValidationError: If the ILS quote is missing or not positive
    """
    usd_to_ils = quotes.get(ANCHOR_CURRENCY)
    if usd_to_ils is None or usd_to_ils <= ZERO:
        raise ValidationError("USD quotes must include a positive ILS rate")

    timestamp = now or datetime.now(UTC)
    wanted = [c.upper() for c in currencies] if currencies else [c.value for c in Currency]

    table: dict[str, FXRate] = {}
    for currency in wanted:
        if currency == USD_CURRENCY:
            to_usd, to_ils = IDENTITY_RATE, usd_to_ils
        elif currency == ANCHOR_CURRENCY:
            to_usd, to_ils = IDENTITY_RATE / usd_to_ils, IDENTITY_RATE
        else:
            quote = quotes.get(currency)
            if not quote:
                logger.warning(f"No USD quote for {currency}, leaving it out of the table")
                continue
            # quote is X per USD, so one X is worth 1/quote USD
            to_usd = IDENTITY_RATE / quote
            to_ils = to_usd * usd_to_ils
        table[currency] = FXRate(
            to_usd=to_usd, to_ils=to_ils, last_updated=timestamp, source=API_SOURCE
        )
    return table


def merge_fx_rates(current: FXRates, fetched: FXRates) -> dict[str, FXRate]:
    """
    Merge freshly fetched rates into the current table.

    Manual overrides in the current table win over fetched rates and keep
    their own timestamp. Currencies present on only one side are kept.
    """
    merged = dict(current)
    kept = []
    for currency, rate in fetched.items():
        existing = current.get(currency)
        if existing is not None and existing.is_manual_override:
            kept.append(currency)
            continue
        merged[currency] = rate
    if kept:
        logger.info(f"Kept manual FX overrides for: {', '.join(kept)}")
    return merged


def latest_update(fx_rates: FXRates) -> datetime | None:
    """Most recent last_updated stamp in the table."""
    stamps = [rate.last_updated for rate in fx_rates.values() if rate.last_updated]
    return max(stamps) if stamps else None
