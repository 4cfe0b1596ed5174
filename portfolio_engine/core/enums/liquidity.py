"""
Liquidity category enumeration.

This module defines the seven buckets assets are classified into
for the liquidity report.
"""

from enum import StrEnum


class LiquidityCategory(StrEnum):
    """
    Liquidity categories, ordered from most to least liquid.

    Iteration order is the row order of the liquidity matrix.
    """

    CASH = "Cash"
    BONDS = "Bonds"
    EQUITIES_LIQUID = "Equities - Liquid"
    EQUITIES_LIMITED = "Equities - Limited Liquidity"
    FUNDS = "Funds"
    REAL_ESTATE = "Real Estate"
    PRIVATE_EQUITY = "Private Equity"

    @property
    def description(self) -> str:
        """Human readable definition of the category."""
        return _DESCRIPTIONS[self]


_DESCRIPTIONS: dict[LiquidityCategory, str] = {
    LiquidityCategory.CASH: "Cash class + Bank Deposit + Money Market (Fixed Income)",
    LiquidityCategory.BONDS: (
        "Fixed Income excluding Bank Deposit, Money Market, and Private Credit"
    ),
    LiquidityCategory.EQUITIES_LIQUID: (
        "Public Equity + Commodities & more (excluding limited liquidity assets)"
    ),
    LiquidityCategory.EQUITIES_LIMITED: "Manually flagged assets with limited liquidity",
    LiquidityCategory.FUNDS: "Private Credit (Fixed Income) + configured fund overrides",
    LiquidityCategory.REAL_ESTATE: "All Real Estate class",
    LiquidityCategory.PRIVATE_EQUITY: "All Private Equity class",
}
