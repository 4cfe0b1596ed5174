"""
Validation utilities for asset records.

Violations are collected into a list rather than raised one at a time,
so the editing layer can show every problem at once.
"""

from collections.abc import Mapping, Sequence
from typing import Any

from portfolio_engine.core.enums import AssetClass, Currency
from portfolio_engine.core.types.financial import ZERO

SUPPORTED_CURRENCIES = frozenset(c.value for c in Currency)


def check_non_negative(value: float | None, message: str) -> str | None:
    """Return message if value is missing or negative.

    Args:
        value: Value to check
        message: Error message for a failed check

    Returns:
        The error message, or None when the value is valid
    """
    if value is None or value < ZERO:
        return message
    return None


def check_unit_interval(value: float | None, param_name: str = "Factor") -> str | None:
    """Return an error if a set value lies outside [0, 1].

    Args:
        value: Value to check, None is accepted
        param_name: Parameter name for error messages

    Returns:
        The error message, or None when the value is valid
    """
    if value is not None and not (ZERO <= value <= 1.0):
        return f"{param_name} must be between 0 and 1"
    return None


def check_entity_bank(
    entity: str, bank: str, entity_banks: Mapping[str, Sequence[str]]
) -> str | None:
    """Check that a bank is configured for an account entity."""
    if entity not in entity_banks:
        return f"Unknown account entity: {entity}"
    if bank not in entity_banks[entity]:
        return f"Invalid bank {bank} for entity {entity}"
    return None


def validate_asset(
    asset: Any, entity_banks: Mapping[str, Sequence[str]] | None = None
) -> list[str]:
    """Collect every validation error for an asset or asset draft.

    Args:
        asset: Asset or AssetDraft (read through attributes)
        entity_banks: Allowed banks per account entity; pairing is
            checked only when a table is supplied

    Returns:
        List of error messages, empty when the asset is valid
    """
    errors: list[str] = []
    asset_class = asset.asset_class
    class_error: str | None = None
    if asset_class is None:
        class_error = "Asset class is required"
    elif not isinstance(asset_class, AssetClass):
        try:
            asset_class = AssetClass(asset_class)
        except ValueError:
            class_error = f"Unknown asset class: {asset_class}"
            asset_class = None
    is_cash = asset_class == AssetClass.CASH

    if not is_cash and not (asset.name or "").strip():
        errors.append("Name is required")
    if class_error:
        errors.append(class_error)

    if asset_class is not None:
        if not asset.sub_class:
            errors.append("Sub-class is required")
        elif not asset_class.accepts_sub_class(asset.sub_class):
            errors.append(f"Sub-class {asset.sub_class} is not valid for {asset_class}")

    if not asset.account_entity:
        errors.append("Account entity is required")
    if not asset.account_bank:
        errors.append("Account bank is required")

    currency = asset.origin_currency
    if not currency:
        errors.append("Currency is required")
    elif currency.upper() not in SUPPORTED_CURRENCIES:
        errors.append(f"Unsupported currency: {currency}")

    quantity_error = check_non_negative(asset.quantity, "Quantity must be non-negative")
    if quantity_error:
        errors.append(quantity_error)

    # Cash price is optional and defaults to 1
    if not is_cash:
        price_error = check_non_negative(asset.price, "Price must be non-negative")
        if price_error:
            errors.append(price_error)

    if asset_class == AssetClass.PRIVATE_EQUITY:
        factor_error = check_unit_interval(asset.factor)
        if factor_error:
            errors.append(factor_error)

    if is_cash and currency and asset.sub_class and asset.sub_class != currency.upper():
        errors.append(
            f"Cash sub-class must match currency ({asset.sub_class} != {currency.upper()})"
        )

    if entity_banks is not None and asset.account_entity and asset.account_bank:
        pairing_error = check_entity_bank(asset.account_entity, asset.account_bank, entity_banks)
        if pairing_error:
            errors.append(pairing_error)

    return errors
