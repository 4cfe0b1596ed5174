"""
Unit tests for the engine operation logging decorator.
"""
# ruff: noqa: ARG001

from unittest.mock import Mock, patch

import pytest

from portfolio_engine.core.enums import Dimension, ViewCurrency
from portfolio_engine.core.exceptions.portfolio import MissingRateError
from portfolio_engine.core.utils.decorators import log_operation


class TestLogOperationDecorator:
    """Test suite for @log_operation decorator."""

    @patch("loguru.logger")
    def test_should_log_start_and_completion(self, mock_logger: Mock) -> None:
        """Test debug entries around a successful call."""

        @log_operation
        def test_function(assets: list[str], view_currency: ViewCurrency) -> list[str]:
            return list(assets)

        result = test_function(["a", "b"], ViewCurrency.USD)

        assert result == ["a", "b"]
        assert mock_logger.debug.call_count == 2
        mock_logger.error.assert_not_called()

        start_call = mock_logger.debug.call_args_list[0]
        assert "Engine operation started" in start_call[0][0]
        assert start_call[1]["extra"]["view_currency"] == "USD"
        assert start_call[1]["extra"]["asset_count"] == 2

        done_call = mock_logger.debug.call_args_list[1]
        assert "Engine operation completed" in done_call[0][0]
        assert done_call[1]["extra"]["success"] is True
        assert done_call[1]["extra"]["result_type"] == "list"
        assert done_call[1]["extra"]["result_size"] == 2
        assert "execution_time_ms" in done_call[1]["extra"]

    @patch("loguru.logger")
    def test_should_log_failure_and_reraise(self, mock_logger: Mock) -> None:
        """Test errors are logged with their type and propagated."""

        @log_operation
        def failing_function(view_currency: str) -> None:
            raise MissingRateError("GBP", view_currency)

        with pytest.raises(MissingRateError):
            failing_function("USD")

        mock_logger.error.assert_called_once()
        error_extra = mock_logger.error.call_args[1]["extra"]
        assert error_extra["success"] is False
        assert error_extra["error_type"] == "MissingRateError"
        assert "GBP" in error_extra["error_message"]

    @patch("loguru.logger")
    def test_should_summarise_only_known_parameters(self, mock_logger: Mock) -> None:
        """Test context keeps selected parameters and skips the rest."""

        @log_operation
        def test_function(
            assets: list[str],
            dimension: Dimension,
            fx_rates: dict[str, float],
            filters: object = None,
        ) -> int:
            return 0

        test_function([], Dimension.CLASS, {"USD": 1.0})

        context = mock_logger.debug.call_args_list[0][1]["extra"]
        assert context["dimension"] == "asset_class"
        assert context["asset_count"] == 0
        assert "fx_rates" not in context
        assert "filters" not in context

    @patch("loguru.logger")
    def test_should_name_callable_dimensions(self, mock_logger: Mock) -> None:
        """Test callables are logged by name."""

        def by_liquidity(asset: object) -> bool:
            return True

        @log_operation
        def test_function(dimension: object) -> None:
            return None

        test_function(by_liquidity)

        context = mock_logger.debug.call_args_list[0][1]["extra"]
        assert context["dimension"] == "by_liquidity"

    @patch("loguru.logger")
    def test_should_generate_unique_correlation_ids(self, mock_logger: Mock) -> None:
        """Test each call gets its own correlation id."""

        @log_operation
        def test_function() -> None:
            return None

        test_function()
        test_function()

        first = mock_logger.debug.call_args_list[0][1]["extra"]["correlation_id"]
        second = mock_logger.debug.call_args_list[2][1]["extra"]["correlation_id"]
        assert first != second
        assert len(first) == 8

    @patch("loguru.logger")
    def test_should_skip_self_on_methods(self, mock_logger: Mock) -> None:
        """Test methods are logged by qualified name without self."""

        class Engine:
            @log_operation
            def run(self, scope: str = "all") -> dict[str, int]:
                return {"rows": 1}

        assert Engine().run() == {"rows": 1}

        start_call = mock_logger.debug.call_args_list[0]
        assert "Engine.run" in start_call[0][0]
        assert "self" not in start_call[1]["extra"]
        assert start_call[1]["extra"]["scope"] == "all"

    def test_should_preserve_function_metadata(self) -> None:
        """Test functools.wraps keeps name and docstring."""

        @log_operation
        def documented() -> None:
            """Docstring."""

        assert documented.__name__ == "documented"
        assert documented.__doc__ == "Docstring."
