"""
Display formatting for amounts and percentages.
"""

from portfolio_engine.core.enums import ViewCurrency
from portfolio_engine.core.types.financial import round_half_up

CURRENCY_SYMBOLS: dict[str, str] = {
    "USD": "$",
    "ILS": "₪",
    "EUR": "€",
    "GBP": "£",
    "CHF": "CHF",
    "CAD": "C$",
    "HKD": "HK$",
}

_MILLION = 1_000_000
_THOUSAND = 1_000


def currency_symbol(currency: str) -> str:
    """Symbol for a currency code, the code itself when unknown."""
    return CURRENCY_SYMBOLS.get(str(currency).upper(), str(currency))


def format_currency(amount: float, currency: ViewCurrency | str) -> str:
    """
    Format a whole-unit amount with symbol and thousands separators.

    Examples:
        >>> format_currency(1234567.6, "USD")
        '$1,234,568'
        >>> format_currency(-950, "ILS")
        '-₪950'
    """
    rounded = round_half_up(amount)
    sign = "-" if rounded < 0 else ""
    return f"{sign}{currency_symbol(currency)}{abs(rounded):,.0f}"


def format_percentage(value: float) -> str:
    """
    Format a percentage with one decimal.

    Examples:
        >>> format_percentage(12.345)
        '12.3%'
    """
    return f"{value:.1f}%"


def format_compact(value: float, currency: str) -> str:
    """
    Format an amount with K/M suffixes.

    Millions keep two decimals, thousands and smaller amounts none.

    Examples:
        >>> format_compact(2_500_000, "EUR")
        '€2.50M'
        >>> format_compact(-12_400, "USD")
        '-$12K'
    """
    symbol = currency_symbol(currency)
    sign = "-" if value < 0 else ""
    magnitude = abs(value)
    if magnitude >= _MILLION:
        return f"{sign}{symbol}{magnitude / _MILLION:.2f}M"
    if magnitude >= _THOUSAND:
        return f"{sign}{symbol}{round_half_up(magnitude / _THOUSAND):.0f}K"
    return f"{sign}{symbol}{round_half_up(magnitude):.0f}"


def format_signed_percentage(value: float | None) -> str:
    """Format a price change with an explicit sign, "-" when not applicable."""
    if value is None:
        return "-"
    prefix = "+" if value >= 0 else ""
    return f"{prefix}{value:.2f}%"
