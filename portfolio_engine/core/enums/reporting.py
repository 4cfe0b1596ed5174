"""
Reporting enumerations.

This module defines aggregation dimensions, percentage bases,
comparison scopes and position change types.
"""

from enum import StrEnum

from .asset_classes import AssetClass


class Dimension(StrEnum):
    """
    Asset fields the aggregation engine can group by.

    Values are the attribute names on Asset, except MATURITY_WINDOW
    which is derived from the maturity date.
    """

    NAME = "name"
    CLASS = "asset_class"
    SUB_CLASS = "sub_class"
    ACCOUNT_ENTITY = "account_entity"
    ACCOUNT_BANK = "account_bank"
    ORIGIN_CURRENCY = "origin_currency"
    BENEFICIARY = "beneficiary"
    MATURITY_WINDOW = "maturity_window"

    @classmethod
    def from_string(cls, value: str) -> "Dimension":
        """
        Convert string to Dimension, accepting "class" as an alias.

        Raises:
            ValueError: If dimension is not supported
        """
        normalized = value.strip().lower()
        if normalized == "class":
            return cls.CLASS
        try:
            return cls(normalized)
        except ValueError:
            raise ValueError(
                f"Unsupported dimension: {value}. "
                f"Supported dimensions: {', '.join(d.value for d in cls)}"
            ) from None


class PercentageBasis(StrEnum):
    """
    Denominators used for percentage-of-scope figures.

    Each view declares exactly one basis.
    """

    GRAND_TOTAL = "grand_total"
    CLASS_LOCAL = "class_local"
    EXCLUDING_PE_AND_RE = "excluding_pe_and_re"
    EXCLUDING_PE = "excluding_pe"

    def excluded_classes(self) -> frozenset[AssetClass]:
        """Get the classes left out of the grand total for this basis."""
        if self == self.EXCLUDING_PE_AND_RE:
            return frozenset({AssetClass.PRIVATE_EQUITY, AssetClass.REAL_ESTATE})
        if self == self.EXCLUDING_PE:
            return frozenset({AssetClass.PRIVATE_EQUITY})
        return frozenset()


class ComparisonScope(StrEnum):
    """
    Asset scopes a snapshot comparison can be restricted to.
    """

    CASH = "cash"
    FIXED_INCOME = "fixed_income"
    PUBLIC_EQUITY = "public_equity"
    PRIVATE_EQUITY = "private_equity"
    REAL_ESTATE = "real_estate"
    LIQUID = "liquid"
    ALL = "all"

    def includes(self, asset_class: AssetClass) -> bool:
        """Check if an asset class falls inside this scope."""
        if self == self.ALL:
            return True
        if self == self.LIQUID:
            return asset_class.is_liquid
        return asset_class in _SCOPE_CLASSES[self]


_SCOPE_CLASSES: dict[ComparisonScope, frozenset[AssetClass]] = {
    ComparisonScope.CASH: frozenset({AssetClass.CASH}),
    ComparisonScope.FIXED_INCOME: frozenset({AssetClass.FIXED_INCOME}),
    ComparisonScope.PUBLIC_EQUITY: frozenset({AssetClass.PUBLIC_EQUITY}),
    ComparisonScope.PRIVATE_EQUITY: frozenset({AssetClass.PRIVATE_EQUITY}),
    ComparisonScope.REAL_ESTATE: frozenset({AssetClass.REAL_ESTATE}),
}


class ChangeType(StrEnum):
    """Position change types between two snapshots."""

    NEW = "new"
    DELETED = "deleted"
