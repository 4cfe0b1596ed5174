"""
Custom exception hierarchy for the portfolio engine.

This module defines domain-specific exceptions for better error handling.
"""


class PortfolioEngineException(Exception):
    """Base exception for all portfolio engine errors."""

    pass


class ValidationError(PortfolioEngineException):
    """Raised when input validation fails."""

    pass


class AssetValidationError(ValidationError):
    """Raised when an asset draft cannot be built.

    Carries every violation found, not only the first one.
    """

    def __init__(self, errors: list[str], asset_name: str | None = None):
        self.errors = list(errors)
        self.asset_name = asset_name
        label = asset_name or "asset"
        super().__init__(f"Invalid {label}: {'; '.join(self.errors)}")


class MissingRateError(PortfolioEngineException):
    """Raised in strict mode when a currency has no FX table entry."""

    def __init__(self, currency: str, view_currency: str | None = None):
        self.currency = currency
        self.view_currency = view_currency
        target = f" for {view_currency} view" if view_currency else ""
        super().__init__(f"No FX rate available for currency: {currency}{target}")


class ConfigurationError(PortfolioEngineException):
    """Raised when configuration is invalid."""

    pass

