"""
Observability Infrastructure

Provides structured logging, correlation tracking and Prometheus metrics for
shift operations, bulk template transitions and backend calls.
"""

import contextvars
import functools
import inspect
import logging
import sys
import time
import uuid
from collections.abc import Callable
from typing import Any, TypeVar

import structlog
from prometheus_client import Counter, Histogram, start_http_server

from shift_engine.custom_types import Failure

from .config import Settings, settings

# Context variables for correlation tracking
correlation_id_var: contextvars.ContextVar[str] = contextvars.ContextVar(
    "correlation_id", default=""
)

F = TypeVar("F", bound=Callable[..., Any])

# Prometheus metrics
SHIFT_OPERATIONS = Counter(
    "shift_engine_operations_total",
    "Total shift engine operations",
    ["operation_type", "status"],
)

SHIFT_OPERATION_DURATION = Histogram(
    "shift_engine_operation_duration_seconds",
    "Shift engine operation duration",
    ["operation_type"],
)

BACKEND_REQUESTS = Counter(
    "shift_engine_backend_requests_total",
    "Shift backend requests",
    ["operation", "status"],
)

BACKEND_REQUEST_DURATION = Histogram(
    "shift_engine_backend_request_duration_seconds",
    "Shift backend request duration",
    ["operation"],
)

TEMPLATE_TRANSITIONS = Counter(
    "shift_engine_template_transitions_total",
    "Bulk template status transitions",
    ["from_status", "to_status"],
)

PARTIAL_SWAP_FAILURES = Counter(
    "shift_engine_partial_swap_failures_total",
    "Swaps where exactly one move succeeded",
)


class CorrelationIdProcessor:
    """Structlog processor to add correlation ID to all log entries."""

    def __call__(
        self, logger: Any, name: str, event_dict: dict[str, Any]
    ) -> dict[str, Any]:
        correlation_id = correlation_id_var.get("")

        if correlation_id:
            event_dict["correlation_id"] = correlation_id

        return event_dict


def setup_structured_logging(config: Settings | None = None) -> None:
    """Configure structured logging with JSON output and correlation tracking."""
    config = config or settings
    log_level = getattr(logging, config.LOG_LEVEL.upper(), logging.INFO)

    processors = [
        structlog.contextvars.merge_contextvars,
        CorrelationIdProcessor(),
        structlog.processors.TimeStamper(fmt="ISO"),
        structlog.processors.add_log_level,
        structlog.processors.add_logger_name,
    ]

    if config.LOG_FORMAT == "json":
        processors.append(structlog.processors.format_exc_info)
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(
            structlog.dev.ConsoleRenderer(colors=config.ENVIRONMENT == "local")
        )

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=log_level,
    )

    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)


def setup_metrics(config: Settings | None = None) -> None:
    """Expose Prometheus metrics over HTTP when enabled."""
    config = config or settings
    if not config.ENABLE_METRICS:
        return

    start_http_server(config.METRICS_PORT)


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)


def set_correlation_id(correlation_id: str | None = None) -> str:
    """Set correlation ID for operation tracking."""
    if correlation_id is None:
        correlation_id = str(uuid.uuid4())

    correlation_id_var.set(correlation_id)
    return correlation_id


def get_correlation_id() -> str:
    """Get current correlation ID."""
    return correlation_id_var.get("")


def log_error_with_context(
    error: Exception,
    operation: str,
    context: dict[str, Any] | None = None,
    severity: str = "error",
    include_traceback: bool = False,
) -> None:
    """Log errors with structured context."""
    logger = get_logger("error_tracking")

    error_data = {
        "operation": operation,
        "error_type": type(error).__name__,
        "error_message": str(error),
        "severity": severity,
        "correlation_id": get_correlation_id(),
    }

    if getattr(error, "details", None):
        error_data["error_details"] = error.details

    if context:
        error_data.update(context)

    if severity == "warning":
        logger.warning("Recoverable error occurred", **error_data)
    else:
        logger.error("Error occurred", **error_data, exc_info=include_traceback)


def log_backend_request(
    operation: str,
    duration_seconds: float,
    error: str | None = None,
    status_code: int | None = None,
) -> None:
    """Record a single shift backend call."""
    logger = get_logger("shift_backend")

    status = "error" if error else "success"
    BACKEND_REQUESTS.labels(operation=operation, status=status).inc()
    BACKEND_REQUEST_DURATION.labels(operation=operation).observe(duration_seconds)

    request_data = {
        "operation": operation,
        "duration_seconds": duration_seconds,
        "status_code": status_code,
        "correlation_id": get_correlation_id(),
    }

    if error:
        logger.warning("Backend request failed", **request_data, error=error)
    else:
        logger.debug("Backend request completed", **request_data)


def log_template_transition(
    template_id: str, from_status: str, to_status: str, **context: Any
) -> None:
    """Record a bulk template status change."""
    TEMPLATE_TRANSITIONS.labels(from_status=from_status, to_status=to_status).inc()
    get_logger("bulk_templates").info(
        "Bulk template transitioned",
        template_id=template_id,
        from_status=from_status,
        to_status=to_status,
        correlation_id=get_correlation_id(),
        **context,
    )


def monitor_operation(operation_type: str, include_args: bool = False):
    """
    Decorator to monitor engine operations with metrics and logging.

    Operations report expected failures by returning ``Failure``; those are
    counted with status ``failure``. Exceptions escaping the wrapped call are
    counted with status ``error`` and re-raised. A correlation id is created
    for the call when none is bound yet.
    """

    def decorator(func: F) -> F:
        def _start(
            args: tuple, kwargs: dict
        ) -> tuple[Any, dict[str, Any], contextvars.Token | None]:
            token = None
            if not correlation_id_var.get(""):
                token = correlation_id_var.set(str(uuid.uuid4()))

            log_context = {
                "operation": operation_type,
                "function": func.__name__,
                "correlation_id": get_correlation_id(),
            }
            if include_args:
                log_context.update(
                    {
                        "args_count": len(args),
                        "kwargs_keys": list(kwargs.keys()),
                    }
                )
            return get_logger(func.__module__), log_context, token

        def _finish(
            logger: Any, log_context: dict[str, Any], result: Any, duration: float
        ) -> None:
            SHIFT_OPERATION_DURATION.labels(operation_type=operation_type).observe(
                duration
            )
            if isinstance(result, Failure):
                SHIFT_OPERATIONS.labels(
                    operation_type=operation_type, status="failure"
                ).inc()
                logger.info(
                    "Operation rejected",
                    **log_context,
                    duration_seconds=duration,
                    error_type=getattr(result.error, "error_type", None),
                    error=str(result.error),
                )
            else:
                SHIFT_OPERATIONS.labels(
                    operation_type=operation_type, status="success"
                ).inc()
                logger.info(
                    "Operation completed successfully",
                    **log_context,
                    duration_seconds=duration,
                )

        def _fail(
            logger: Any, log_context: dict[str, Any], error: Exception, duration: float
        ) -> None:
            SHIFT_OPERATIONS.labels(operation_type=operation_type, status="error").inc()
            logger.error(
                "Operation failed",
                **log_context,
                duration_seconds=duration,
                error=str(error),
                error_type=type(error).__name__,
                exc_info=True,
            )

        @functools.wraps(func)
        async def async_wrapper(*args, **kwargs):
            logger, log_context, token = _start(args, kwargs)
            start_time = time.perf_counter()
            logger.debug("Operation started", **log_context)

            try:
                result = await func(*args, **kwargs)
            except Exception as e:
                _fail(logger, log_context, e, time.perf_counter() - start_time)
                raise
            finally:
                if token is not None:
                    correlation_id_var.reset(token)

            _finish(logger, log_context, result, time.perf_counter() - start_time)
            return result

        @functools.wraps(func)
        def sync_wrapper(*args, **kwargs):
            logger, log_context, token = _start(args, kwargs)
            start_time = time.perf_counter()
            logger.debug("Operation started", **log_context)

            try:
                result = func(*args, **kwargs)
            except Exception as e:
                _fail(logger, log_context, e, time.perf_counter() - start_time)
                raise
            finally:
                if token is not None:
                    correlation_id_var.reset(token)

            _finish(logger, log_context, result, time.perf_counter() - start_time)
            return result

        if inspect.iscoroutinefunction(func):
            return async_wrapper  # type: ignore[return-value]
        return sync_wrapper  # type: ignore[return-value]

    return decorator


_observability_initialized = False


def initialize_observability(config: Settings | None = None) -> None:
    """
    Initialize all observability components.

    Runs once per process; later calls are no-ops so the metrics port is
    bound at most once.
    """
    global _observability_initialized
    if _observability_initialized:
        return

    config = config or settings
    setup_structured_logging(config)
    setup_metrics(config)
    _observability_initialized = True

    logger = get_logger("observability")
    logger.info(
        "Observability system initialized",
        log_format=config.LOG_FORMAT,
        log_level=config.LOG_LEVEL,
        metrics_enabled=config.ENABLE_METRICS,
    )
