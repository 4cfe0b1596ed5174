"""
Asset class, sub-class and currency enumerations.

This module defines the allowed asset classes, the sub-classes each class
accepts, and the currencies holdings can be denominated in.
"""

from enum import StrEnum


class Currency(StrEnum):
    """
    Supported origin currencies.

    ILS is the anchor currency of the FX table.
    """

    ILS = "ILS"
    USD = "USD"
    CHF = "CHF"
    EUR = "EUR"
    CAD = "CAD"
    HKD = "HKD"
    GBP = "GBP"

    @classmethod
    def from_string(cls, value: str) -> "Currency":
        """
        Convert string to Currency enum, with case-insensitive matching.

        Raises:
            ValueError: If currency is not supported
        """
        try:
            return cls(value.strip().upper())
        except ValueError:
            raise ValueError(
                f"Unsupported currency: {value}. "
                f"Supported currencies: {', '.join(c.value for c in cls)}"
            ) from None


class ViewCurrency(StrEnum):
    """Currencies a portfolio can be reported in."""

    USD = "USD"
    ILS = "ILS"

    @property
    def symbol(self) -> str:
        """Display symbol for the currency."""
        return "$" if self == self.USD else "₪"


class AssetClass(StrEnum):
    """
    Allowed asset classes.

    Every asset belongs to exactly one class.
    """

    PUBLIC_EQUITY = "Public Equity"
    PRIVATE_EQUITY = "Private Equity"
    FIXED_INCOME = "Fixed Income"
    CASH = "Cash"
    COMMODITIES = "Commodities & more"
    REAL_ESTATE = "Real Estate"

    @property
    def uses_factor(self) -> bool:
        """Check if display values are discounted by the asset factor."""
        return self in (self.PRIVATE_EQUITY, self.REAL_ESTATE)

    @property
    def is_liquid(self) -> bool:
        """Check if class counts towards liquid holdings."""
        return self not in (self.PRIVATE_EQUITY, self.REAL_ESTATE)

    def allowed_sub_classes(self) -> tuple[str, ...]:
        """Get the sub-class values this class accepts."""
        return CLASS_SUB_CLASSES[self]

    def accepts_sub_class(self, sub_class: str) -> bool:
        """Check if a sub-class belongs to this class."""
        return sub_class in CLASS_SUB_CLASSES[self]


class PublicEquitySubClass(StrEnum):
    """Public equity sub-classes."""

    BIG_TECH = "Big Tech"
    CHINA = "China"
    OTHER = "other"


class PrivateEquitySubClass(StrEnum):
    """Private equity sub-classes (investment stage)."""

    INITIAL = "Initial"
    NEAR_FUTURE = "Near Future"
    GROWTH = "Growth"
    NONE = "none"


class FixedIncomeSubClass(StrEnum):
    """Fixed income sub-classes."""

    MONEY_MARKET = "Money Market"
    GOV_1_2 = "Gov 1-2"
    GOV_LONG = "Gov long"
    CPI_LINKED = "CPI linked"
    CORPORATE = "Corporate"
    REIT_STOCK = "REIT stock"
    PRIVATE_CREDIT = "Private Credit"
    BANK_DEPOSIT = "Bank Deposit"
    NONE = "none"

    @property
    def is_cash_like(self) -> bool:
        """Check if sub-class is treated as cash."""
        return self in (self.MONEY_MARKET, self.BANK_DEPOSIT)


class CommoditiesSubClass(StrEnum):
    """Commodities & more sub-classes."""

    CRYPTOCURRENCY = "Cryptocurrency"
    COMMODITIES = "Commodities"


class RealEstateSubClass(StrEnum):
    """Real estate sub-classes."""

    LIVING = "Living"
    TEL_AVIV = "Tel-Aviv"
    ABROAD = "Abroad"


# Cash sub-classes are the currency codes themselves
CLASS_SUB_CLASSES: dict[AssetClass, tuple[str, ...]] = {
    AssetClass.PUBLIC_EQUITY: tuple(s.value for s in PublicEquitySubClass),
    AssetClass.PRIVATE_EQUITY: tuple(s.value for s in PrivateEquitySubClass),
    AssetClass.FIXED_INCOME: tuple(s.value for s in FixedIncomeSubClass),
    AssetClass.CASH: tuple(c.value for c in Currency),
    AssetClass.COMMODITIES: tuple(s.value for s in CommoditiesSubClass),
    AssetClass.REAL_ESTATE: tuple(s.value for s in RealEstateSubClass),
}

# Display order used by hierarchical totals
CLASS_DISPLAY_ORDER: tuple[AssetClass, ...] = (
    AssetClass.CASH,
    AssetClass.PUBLIC_EQUITY,
    AssetClass.FIXED_INCOME,
    AssetClass.REAL_ESTATE,
    AssetClass.PRIVATE_EQUITY,
    AssetClass.COMMODITIES,
)
