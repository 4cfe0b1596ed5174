"""
Unit tests for the exception hierarchy.
"""

import pytest

from portfolio_engine.core.exceptions.portfolio import (
    AssetValidationError,
    ConfigurationError,
    MissingRateError,
    PortfolioEngineException,
    ValidationError,
)


class TestExceptionHierarchy:
    """Test exception inheritance and messages."""

    @pytest.mark.parametrize(
        "exc_type", [ValidationError, ConfigurationError, MissingRateError]
    )
    def test_should_derive_from_base_exception(self, exc_type: type[Exception]) -> None:
        """Test every engine error can be caught through the base class."""
        assert issubclass(exc_type, PortfolioEngineException)

    def test_should_collect_every_asset_error(self) -> None:
        """Test AssetValidationError keeps all violations."""
        error = AssetValidationError(["Name is required", "Quantity must be non-negative"])

        assert isinstance(error, ValidationError)
        assert error.errors == ["Name is required", "Quantity must be non-negative"]
        assert str(error) == "Invalid asset: Name is required; Quantity must be non-negative"

    def test_should_name_asset_in_message(self) -> None:
        """Test asset name appears in the message."""
        error = AssetValidationError(["Price must be non-negative"], asset_name="Apple")

        assert error.asset_name == "Apple"
        assert str(error).startswith("Invalid Apple:")

    def test_should_describe_missing_rate(self) -> None:
        """Test MissingRateError message with and without view currency."""
        assert str(MissingRateError("JPY")) == "No FX rate available for currency: JPY"

        error = MissingRateError("JPY", "USD")
        assert error.currency == "JPY"
        assert error.view_currency == "USD"
        assert str(error) == "No FX rate available for currency: JPY for USD view"
