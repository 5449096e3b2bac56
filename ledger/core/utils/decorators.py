"""
Utility decorators for engine entry points.
"""

import functools
import inspect
import time
import uuid
from collections.abc import Callable
from typing import Any, TypeVar

from loguru import logger

F = TypeVar("F", bound=Callable[..., Any])

_CONTEXT_PARAMS = ("symbol", "year", "month", "years", "start_year", "policy", "held_only")


def _serialize_parameter_value(value: Any) -> Any:
    """Serialize parameter value for logging."""
    if hasattr(value, "value"):
        return str(value.value)  # Handle enum values
    if hasattr(value, "symbol") and isinstance(value.symbol, str):
        return value.symbol  # Holdings, dividends and strategies log by symbol
    if hasattr(value, "isoformat"):
        return value.isoformat()
    return value


def _extract_calculation_context(
    func: Callable[..., Any], args: tuple[Any, ...], kwargs: dict[str, Any]
) -> dict[str, Any]:
    """Extract loggable context from function arguments."""
    sig = inspect.signature(func)
    bound_args = sig.bind(*args, **kwargs)
    bound_args.apply_defaults()

    context: dict[str, Any] = {"correlation_id": str(uuid.uuid4())[:8]}
    for param_name, value in bound_args.arguments.items():
        if param_name in _CONTEXT_PARAMS and value is not None:
            context[param_name] = _serialize_parameter_value(value)
        elif param_name == "holding" and value is not None:
            context["symbol"] = _serialize_parameter_value(value)
        elif param_name == "strategy" and value is not None:
            context["strategy_id"] = getattr(value, "id", None)
    return context


def _result_size(result: Any) -> int | None:
    """Number of rows in a sequence-shaped result, if any."""
    if isinstance(result, list | tuple):
        return len(result)
    rows = getattr(result, "rows", None)
    if isinstance(rows, list | tuple):
        return len(rows)
    return None


def log_calculation(func: F) -> F:
    """Decorator to log engine calculations with correlation IDs and timing."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        context = _extract_calculation_context(func, args, kwargs)
        func_name = func.__name__
        logger.debug(f"Calculation started: {func_name}", extra=context)
        start_time = time.perf_counter()

        try:
            result = func(*args, **kwargs)
        except Exception as e:
            execution_time_ms = (time.perf_counter() - start_time) * 1000
            logger.error(
                f"Calculation failed: {func_name}",
                extra={
                    **context,
                    "execution_time_ms": round(execution_time_ms, 2),
                    "error_type": type(e).__name__,
                    "error_message": str(e),
                },
            )
            raise

        execution_time_ms = (time.perf_counter() - start_time) * 1000
        success_context = {
            **context,
            "execution_time_ms": round(execution_time_ms, 2),
            "result_type": type(result).__name__,
        }
        size = _result_size(result)
        if size is not None:
            success_context["result_rows"] = size
        logger.debug(f"Calculation completed: {func_name}", extra=success_context)
        return result

    return wrapper  # type: ignore
