"""
Logging decorators for engine operations.
"""

import functools
from collections.abc import Callable
from typing import Any, TypeVar

# Arguments worth echoing into the log context; everything else is summarised
_CONTEXT_PARAMS = ("view_currency", "dimension", "basis", "scope", "top_n", "strict")


def _serialize_parameter_value(value: Any) -> Any:
    """Serialize parameter value for logging."""
    if hasattr(value, "value"):
        return str(value.value)  # Handle enum values
    if callable(value):
        return getattr(value, "__name__", type(value).__name__)
    return value


def _extract_operation_context(bound_args: Any) -> dict[str, Any]:
    """Extract loggable context from function arguments."""
    context: dict[str, Any] = {}
    for param_name, value in bound_args.arguments.items():
        if param_name == "self":
            continue
        if param_name in _CONTEXT_PARAMS and value is not None:
            context[param_name] = _serialize_parameter_value(value)
        elif param_name == "assets":
            try:
                context["asset_count"] = len(value)
            except TypeError:
                context["asset_count"] = None
    return context


def _setup_logging_context(
    func: Callable[..., Any], args: tuple[Any, ...], kwargs: dict[str, Any]
) -> dict[str, Any]:
    """Setup logging context for an engine operation."""
    import inspect
    import uuid

    sig = inspect.signature(func)
    bound_args = sig.bind(*args, **kwargs)
    bound_args.apply_defaults()

    return {
        "correlation_id": str(uuid.uuid4())[:8],
        **_extract_operation_context(bound_args),
    }


def _result_size(result: Any) -> int | None:
    if isinstance(result, dict | list | tuple):
        return len(result)
    return None


F = TypeVar("F", bound=Callable[..., Any])


def log_operation(func: F) -> F:
    """Decorator to log engine operations with correlation IDs and timing."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        import time

        from loguru import logger

        func_name = func.__qualname__
        context = _setup_logging_context(func, args, kwargs)
        logger.debug(f"Engine operation started: {func_name}", extra=context)
        start_time = time.perf_counter()

        try:
            result = func(*args, **kwargs)
        except Exception as e:
            execution_time_ms = (time.perf_counter() - start_time) * 1000
            logger.error(
                f"Engine operation failed: {func_name}",
                extra={
                    **context,
                    "success": False,
                    "execution_time_ms": round(execution_time_ms, 2),
                    "error_type": type(e).__name__,
                    "error_message": str(e),
                },
            )
            raise

        execution_time_ms = (time.perf_counter() - start_time) * 1000
        logger.debug(
            f"Engine operation completed: {func_name}",
            extra={
                **context,
                "success": True,
                "execution_time_ms": round(execution_time_ms, 2),
                "result_type": type(result).__name__,
                "result_size": _result_size(result),
            },
        )
        return result

    return wrapper  # type: ignore
