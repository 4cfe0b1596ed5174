"""
Core enumerations for the portfolio engine.

This module provides centralized enumerations for domain concepts
like asset classes, currencies, liquidity categories and report scopes.
"""

from .asset_classes import (
    CLASS_DISPLAY_ORDER,
    CLASS_SUB_CLASSES,
    AssetClass,
    CommoditiesSubClass,
    Currency,
    FixedIncomeSubClass,
    PrivateEquitySubClass,
    PublicEquitySubClass,
    RealEstateSubClass,
    ViewCurrency,
)
from .liquidity import LiquidityCategory
from .reporting import ChangeType, ComparisonScope, Dimension, PercentageBasis

__all__ = [
    "AssetClass",
    "CLASS_DISPLAY_ORDER",
    "CLASS_SUB_CLASSES",
    "ChangeType",
    "CommoditiesSubClass",
    "ComparisonScope",
    "Currency",
    "Dimension",
    "FixedIncomeSubClass",
    "LiquidityCategory",
    "PercentageBasis",
    "PrivateEquitySubClass",
    "PublicEquitySubClass",
    "RealEstateSubClass",
    "ViewCurrency",
]
