"""
Unit tests for ILS-anchored currency conversion.
"""

from collections.abc import Callable
from unittest.mock import Mock, patch

import pytest

from portfolio_engine.core.enums import ViewCurrency
from portfolio_engine.core.exceptions.portfolio import MissingRateError
from portfolio_engine.core.models.asset import Asset
from portfolio_engine.core.models.fx import FXRate
from portfolio_engine.engine.conversion import convert, find_missing_currencies, rate_for


class TestRateFor:
    """Test suite for rate_for."""

    def test_should_return_identity_for_same_currency(self, fx_rates: dict[str, FXRate]) -> None:
        """Test same-currency conversion needs no table entry."""
        assert rate_for("USD", ViewCurrency.USD, fx_rates) == 1.0
        assert rate_for("ILS", ViewCurrency.ILS, {}) == 1.0

    def test_should_use_to_ils_for_ils_view(self, fx_rates: dict[str, FXRate]) -> None:
        """Test X -> ILS is the stored to_ILS."""
        assert rate_for("EUR", ViewCurrency.ILS, fx_rates) == pytest.approx(4.4)
        assert rate_for("USD", ViewCurrency.ILS, fx_rates) == pytest.approx(4.0)

    def test_should_derive_usd_rate_through_ils_anchor(
        self, fx_rates: dict[str, FXRate]
    ) -> None:
        """Test EUR -> USD uses to_ILS / USD.to_ILS, not the stale to_USD."""
        assert fx_rates["EUR"].to_usd == 1.5
        assert rate_for("EUR", ViewCurrency.USD, fx_rates) == pytest.approx(1.1)

    def test_should_convert_ils_to_usd_without_ils_entry(self) -> None:
        """Test ILS origin uses the implicit 1.0 anchor."""
        table = {"USD": FXRate(to_usd=1.0, to_ils=4.0)}
        assert rate_for("ILS", "USD", table) == pytest.approx(0.25)

    def test_should_accept_lower_case_codes(self, fx_rates: dict[str, FXRate]) -> None:
        """Test currency codes are normalized."""
        assert rate_for("eur", "usd", fx_rates) == pytest.approx(1.1)

    @patch("portfolio_engine.engine.conversion.logger")
    def test_should_fall_back_to_identity_and_warn(
        self, mock_logger: Mock, fx_rates: dict[str, FXRate]
    ) -> None:
        """Test a missing currency counts 1:1 with a warning."""
        assert rate_for("GBP", ViewCurrency.USD, fx_rates) == 1.0
        mock_logger.warning.assert_called_once()
        assert "GBP" in mock_logger.warning.call_args[0][0]

    def test_should_fall_back_when_usd_anchor_missing(self) -> None:
        """Test a missing USD entry falls back for the USD view."""
        table = {"EUR": FXRate(to_usd=1.1, to_ils=4.4)}
        assert rate_for("EUR", ViewCurrency.USD, table) == 1.0

    def test_should_raise_in_strict_mode(self, fx_rates: dict[str, FXRate]) -> None:
        """Test strict mode turns the fallback into an error."""
        with pytest.raises(MissingRateError, match="GBP for USD view"):
            rate_for("GBP", ViewCurrency.USD, fx_rates, strict=True)

        with pytest.raises(MissingRateError, match="currency: USD"):
            rate_for("ILS", ViewCurrency.USD, {}, strict=True)

    def test_should_return_zero_when_usd_anchor_not_positive(self) -> None:
        """Test a zero USD anchor cannot divide by zero."""
        table = {"USD": FXRate(to_usd=1.0, to_ils=0.0), "EUR": FXRate(to_usd=1.1, to_ils=4.4)}
        assert rate_for("EUR", ViewCurrency.USD, table) == 0.0


class TestConvert:
    """Test suite for convert."""

    def test_should_multiply_amount_by_rate(self, fx_rates: dict[str, FXRate]) -> None:
        """Test amount conversion."""
        assert convert(1000.0, "CHF", ViewCurrency.USD, fx_rates) == pytest.approx(1200.0)
        assert convert(1000.0, "CHF", ViewCurrency.ILS, fx_rates) == pytest.approx(4800.0)

    def test_should_keep_usd_and_ils_views_consistent(self, fx_rates: dict[str, FXRate]) -> None:
        """Test ILS view equals USD view times the USD anchor."""
        for currency in ("EUR", "CHF", "ILS", "USD"):
            usd = convert(1000.0, currency, ViewCurrency.USD, fx_rates)
            ils = convert(1000.0, currency, ViewCurrency.ILS, fx_rates)
            assert ils == pytest.approx(usd * fx_rates["USD"].to_ils)


class TestFindMissingCurrencies:
    """Test suite for find_missing_currencies."""

    def test_should_report_nothing_for_complete_table(
        self, sample_assets: list[Asset], fx_rates: dict[str, FXRate]
    ) -> None:
        """Test the sample portfolio is fully covered."""
        assert find_missing_currencies(sample_assets, fx_rates, ViewCurrency.USD) == []

    def test_should_list_missing_currencies_in_order(
        self, make_asset: Callable[..., Asset]
    ) -> None:
        """Test missing origin currencies and the USD anchor are reported."""
        assets = [
            make_asset(origin_currency="GBP"),
            make_asset(origin_currency="ILS"),
            make_asset(origin_currency="GBP"),
        ]
        table = {"EUR": FXRate(to_usd=1.1, to_ils=4.4)}

        assert find_missing_currencies(assets, table, ViewCurrency.USD) == ["GBP", "USD"]
        assert find_missing_currencies(assets, table, ViewCurrency.ILS) == ["GBP"]
