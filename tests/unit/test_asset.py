"""
Unit tests for the Asset and AssetDraft models.
"""

from collections.abc import Callable
from datetime import date

import pytest

from portfolio_engine.core.enums import AssetClass
from portfolio_engine.core.exceptions.portfolio import AssetValidationError
from portfolio_engine.core.models.asset import (
    Asset,
    AssetDraft,
    compute_cash_equivalent,
    derive_pe_price,
)

AS_OF = date(2025, 1, 1)
ENTITY_BANKS = {"Shimon": ["Poalim", "Leumi"], "Guy": ["Julius Bär"]}


class TestAsset:
    """Test suite for the immutable Asset model."""

    def test_should_normalize_plain_values(self) -> None:
        """Test class, currency and date normalization."""
        asset = Asset(
            name="Bund",
            asset_class="Fixed Income",  # type: ignore[arg-type]
            sub_class="Gov long",
            account_entity="Guy",
            account_bank="Julius Bär",
            origin_currency="eur",
            quantity=10.0,
            price=100.0,
            maturity_date="2027-06-30",  # type: ignore[arg-type]
        )

        assert asset.asset_class == AssetClass.FIXED_INCOME
        assert asset.origin_currency == "EUR"
        assert asset.maturity_date == date(2027, 6, 30)
        assert asset.has_maturity

    def test_should_generate_unique_ids(self, make_asset: Callable[..., Asset]) -> None:
        """Test that each asset gets its own id."""
        assert make_asset().id != make_asset().id

    def test_should_be_immutable(self, make_asset: Callable[..., Asset]) -> None:
        """Test that assets cannot be edited in place."""
        asset = make_asset()
        with pytest.raises(AttributeError):
            asset.price = 200.0  # type: ignore[misc]

    def test_should_convert_to_persisted_record(self, make_asset: Callable[..., Asset]) -> None:
        """Test record shape uses the "class" key."""
        record = make_asset(maturity_date=date(2030, 1, 1)).to_dict()

        assert record["class"] == "Public Equity"
        assert "asset_class" not in record
        assert record["maturity_date"] == "2030-01-01"

    def test_should_load_from_persisted_record(self) -> None:
        """Test from_dict with string numbers, ISIN key and timestamps."""
        asset = Asset.from_dict(
            {
                "id": "a-1",
                "name": "Apple",
                "class": "Public Equity",
                "sub_class": "Big Tech",
                "account_entity": "Shimon",
                "account_bank": "Poalim",
                "origin_currency": "usd",
                "quantity": "10",
                "price": "150.5",
                "ISIN": "US0378331005",
                "created_at": "2024-05-01T10:00:00Z",
            }
        )

        assert asset.id == "a-1"
        assert asset.quantity == 10.0
        assert asset.price == 150.5
        assert asset.factor is None
        assert asset.isin == "US0378331005"
        assert asset.origin_currency == "USD"
        assert asset.created_at is not None and asset.created_at.year == 2024

    def test_should_keep_record_identity_through_dict(
        self, make_asset: Callable[..., Asset]
    ) -> None:
        """Test to_dict/from_dict preserve the asset."""
        asset = make_asset(ytw=3.5)
        assert Asset.from_dict(asset.to_dict()) == asset


class TestCashEquivalent:
    """Test suite for cash-equivalent detection."""

    def test_should_treat_cash_as_cash_equivalent(self) -> None:
        """Test cash class always qualifies."""
        assert compute_cash_equivalent(AssetClass.CASH, "USD", None, AS_OF)

    def test_should_treat_money_market_and_deposits_as_cash_equivalent(self) -> None:
        """Test cash-like fixed income sub-classes qualify without maturity."""
        assert compute_cash_equivalent(AssetClass.FIXED_INCOME, "Money Market", None, AS_OF)
        assert compute_cash_equivalent(AssetClass.FIXED_INCOME, "Bank Deposit", None, AS_OF)

    def test_should_use_maturity_horizon_for_other_fixed_income(self) -> None:
        """Test the one-year horizon."""
        assert compute_cash_equivalent(
            AssetClass.FIXED_INCOME, "Gov 1-2", date(2025, 12, 31), AS_OF
        )
        assert not compute_cash_equivalent(
            AssetClass.FIXED_INCOME, "Gov 1-2", date(2026, 6, 30), AS_OF
        )
        assert not compute_cash_equivalent(AssetClass.FIXED_INCOME, "Corporate", None, AS_OF)

    def test_should_honour_custom_horizon(self) -> None:
        """Test a configured horizon."""
        assert compute_cash_equivalent(
            AssetClass.FIXED_INCOME, "Corporate", date(2025, 3, 1), AS_OF, horizon_days=90
        )
        assert not compute_cash_equivalent(
            AssetClass.FIXED_INCOME, "Corporate", date(2025, 6, 1), AS_OF, horizon_days=90
        )

    def test_should_never_flag_equity(self) -> None:
        """Test non-fixed-income classes never qualify."""
        assert not compute_cash_equivalent(
            AssetClass.PUBLIC_EQUITY, "Big Tech", date(2025, 2, 1), AS_OF
        )


class TestDerivePrivateEquityPrice:
    """Test suite for price derivation from an ownership stake."""

    def test_should_derive_price_from_company_value(self) -> None:
        """Test price = company value * holding% / quantity."""
        assert derive_pe_price(1_000_000.0, 2.5, 100.0) == 250.0

    def test_should_round_derived_price_half_up(self) -> None:
        """Test 2.5 rounds to 3."""
        assert derive_pe_price(1000.0, 25.0, 100.0) == 3.0

    def test_should_keep_manual_price_when_inputs_incomplete(self) -> None:
        """Test fallback to the manual price."""
        assert derive_pe_price(None, 2.5, 100.0, manual_price=42.0) == 42.0
        assert derive_pe_price(1_000_000.0, None, 100.0, manual_price=42.0) == 42.0
        assert derive_pe_price(1_000_000.0, 2.5, 0.0, manual_price=42.0) == 42.0
        assert derive_pe_price(1_000_000.0, 2.5, None) is None


class TestAssetDraft:
    """Test suite for the editable AssetDraft."""

    @pytest.fixture
    def cash_draft(self) -> AssetDraft:
        """Cash draft with nothing but the essentials."""
        return AssetDraft(
            name="",
            asset_class=AssetClass.CASH,
            account_entity="Shimon",
            account_bank="Poalim",
            origin_currency="chf",
            quantity=2500.0,
        )

    def test_should_default_cash_sub_class_and_price(self, cash_draft: AssetDraft) -> None:
        """Test cash defaults applied by finalize."""
        cash_draft.finalize(as_of=AS_OF)

        assert cash_draft.sub_class == "CHF"
        assert cash_draft.origin_currency == "CHF"
        assert cash_draft.price == 1.0
        assert cash_draft.is_cash_equivalent

    def test_should_name_cash_after_sub_class(self, cash_draft: AssetDraft) -> None:
        """Test unnamed cash takes its sub-class as name."""
        asset = cash_draft.finalize(as_of=AS_OF).build()
        assert asset.name == "CHF"

    def test_should_default_factor_for_private_equity(self) -> None:
        """Test factor defaults to 1.0 for PE and RE."""
        draft = AssetDraft(asset_class=AssetClass.REAL_ESTATE).finalize()
        assert draft.factor == 1.0

        draft = AssetDraft(asset_class=AssetClass.PUBLIC_EQUITY).finalize()
        assert draft.factor is None

    def test_should_derive_beneficiary_from_entity(self) -> None:
        """Test beneficiary lookup."""
        draft = AssetDraft(account_entity="Guy").finalize(entity_beneficiary={"Guy": "Kids"})
        assert draft.beneficiary == "Kids"

    def test_should_derive_pe_price_when_requested(self) -> None:
        """Test ownership-based pricing on finalize."""
        draft = AssetDraft(
            asset_class=AssetClass.PRIVATE_EQUITY,
            quantity=100.0,
            price=10.0,
            pe_company_value=1_000_000.0,
            pe_holding_percentage=2.5,
        )
        assert draft.finalize().price == 10.0
        assert draft.finalize(derive_price_from_ownership=True).price == 250.0

    def test_should_collect_every_error_on_empty_draft(self) -> None:
        """Test that validation reports all problems at once."""
        errors = AssetDraft().validate()

        assert errors == [
            "Name is required",
            "Asset class is required",
            "Account entity is required",
            "Account bank is required",
            "Currency is required",
            "Quantity must be non-negative",
            "Price must be non-negative",
        ]

    def test_should_raise_with_all_errors_on_build(self) -> None:
        """Test build raises AssetValidationError carrying every error."""
        draft = AssetDraft(name="Bad", asset_class=AssetClass.PUBLIC_EQUITY, quantity=-1.0)

        with pytest.raises(AssetValidationError, match="Invalid Bad") as exc_info:
            draft.build()

        assert "Quantity must be non-negative" in exc_info.value.errors
        assert "Sub-class is required" in exc_info.value.errors

    def test_should_check_entity_bank_pairing(self) -> None:
        """Test the bank must be configured for the entity."""
        draft = AssetDraft(
            name="Apple",
            asset_class=AssetClass.PUBLIC_EQUITY,
            sub_class="Big Tech",
            account_entity="Guy",
            account_bank="Poalim",
            origin_currency="USD",
            quantity=1.0,
            price=1.0,
        )

        assert draft.validate() == []
        assert draft.validate(ENTITY_BANKS) == ["Invalid bank Poalim for entity Guy"]

    def test_should_round_trip_existing_asset(self, make_asset: Callable[..., Asset]) -> None:
        """Test editing an asset without changes rebuilds the same asset."""
        asset = make_asset()
        assert AssetDraft.from_asset(asset).build() == asset

    def test_should_drop_factor_outside_factor_classes(self) -> None:
        """Test factor is only stored for PE and RE."""
        draft = AssetDraft(
            name="Apple",
            asset_class=AssetClass.PUBLIC_EQUITY,
            sub_class="Big Tech",
            account_entity="Shimon",
            account_bank="Poalim",
            origin_currency="USD",
            quantity=1.0,
            price=1.0,
            factor=0.5,
        )
        assert draft.build().factor is None
