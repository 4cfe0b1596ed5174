"""
Unit tests for asset validation utilities.
"""

from collections.abc import Callable

import pytest

from portfolio_engine.core.enums import AssetClass
from portfolio_engine.core.models.asset import Asset, AssetDraft
from portfolio_engine.core.utils.validation import (
    check_entity_bank,
    check_non_negative,
    check_unit_interval,
    validate_asset,
)


class TestValidationHelpers:
    """Test the single-rule helpers."""

    def test_should_flag_missing_or_negative_values(self) -> None:
        """Test check_non_negative."""
        assert check_non_negative(0.0, "bad") is None
        assert check_non_negative(5.0, "bad") is None
        assert check_non_negative(-0.01, "bad") == "bad"
        assert check_non_negative(None, "bad") == "bad"

    @pytest.mark.parametrize("value", [None, 0.0, 0.5, 1.0])
    def test_should_accept_unit_interval_values(self, value: float | None) -> None:
        """Test check_unit_interval accepts [0, 1] and None."""
        assert check_unit_interval(value) is None

    @pytest.mark.parametrize("value", [-0.1, 1.01])
    def test_should_reject_values_outside_unit_interval(self, value: float) -> None:
        """Test check_unit_interval rejects out-of-range factors."""
        assert check_unit_interval(value) == "Factor must be between 0 and 1"

    def test_should_check_entity_bank_table(self) -> None:
        """Test entity and bank lookup."""
        table = {"Tom": ["Tom Trust"]}
        assert check_entity_bank("Tom", "Tom Trust", table) is None
        assert check_entity_bank("Tom", "Poalim", table) == "Invalid bank Poalim for entity Tom"
        assert check_entity_bank("Dana", "Poalim", table) == "Unknown account entity: Dana"


class TestValidateAsset:
    """Test full-record validation."""

    def test_should_accept_valid_asset(self, make_asset: Callable[..., Asset]) -> None:
        """Test a valid asset has no errors."""
        assert validate_asset(make_asset()) == []

    def test_should_reject_sub_class_of_other_class(self) -> None:
        """Test sub-class must belong to the class."""
        draft = AssetDraft(
            name="Bond",
            asset_class=AssetClass.FIXED_INCOME,
            sub_class="Big Tech",
            account_entity="Shimon",
            account_bank="Poalim",
            origin_currency="USD",
            quantity=1.0,
            price=1.0,
        )
        assert validate_asset(draft) == ["Sub-class Big Tech is not valid for Fixed Income"]

    def test_should_reject_unknown_class_and_currency(self) -> None:
        """Test unknown class and unsupported currency are both reported."""
        draft = AssetDraft(
            name="Thing",
            asset_class="Art",  # type: ignore[arg-type]
            sub_class="Paintings",
            account_entity="Shimon",
            account_bank="Poalim",
            origin_currency="JPY",
            quantity=1.0,
            price=1.0,
        )
        errors = validate_asset(draft)
        assert "Unknown asset class: Art" in errors
        assert "Unsupported currency: JPY" in errors

    def test_should_reject_private_equity_factor_above_one(self) -> None:
        """Test factor range for private equity."""
        draft = AssetDraft(
            name="Startup",
            asset_class=AssetClass.PRIVATE_EQUITY,
            sub_class="Initial",
            account_entity="Shimon",
            account_bank="Poalim",
            origin_currency="USD",
            quantity=1.0,
            price=1.0,
            factor=1.5,
        )
        assert validate_asset(draft) == ["Factor must be between 0 and 1"]

    def test_should_require_cash_sub_class_to_match_currency(self) -> None:
        """Test cash sub-class/currency consistency."""
        draft = AssetDraft(
            asset_class=AssetClass.CASH,
            sub_class="EUR",
            account_entity="Shimon",
            account_bank="Poalim",
            origin_currency="USD",
            quantity=100.0,
        )
        assert validate_asset(draft) == ["Cash sub-class must match currency (EUR != USD)"]

    def test_should_not_require_price_or_name_for_cash(self) -> None:
        """Test cash price and name are optional."""
        draft = AssetDraft(
            asset_class=AssetClass.CASH,
            sub_class="USD",
            account_entity="Shimon",
            account_bank="Poalim",
            origin_currency="USD",
            quantity=100.0,
        )
        assert validate_asset(draft) == []
