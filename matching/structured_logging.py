"""
Structured logging infrastructure for product search.

Provides JSON logging with:
- Multiple log levels (DEBUG, INFO, WARNING, ERROR, CRITICAL)
- Rotating file handlers (daily rotation, 30-day retention)
- Separate error log file
- Performance tracking (search latency)
- Search context (query, strategy, extracted attributes)

Usage:
    from matching.structured_logging import get_logger, log_search

    logger = get_logger(__name__)
    logger.info("Starting search", extra={"query": "iphone 15"})

    # Or use convenience functions:
    log_search(query="iphone 15", strategy="exact_model", products_found=3,
               search_time_ms=12.5)
"""

import json
import logging
import sys
import time
import traceback
from datetime import datetime, timezone
from functools import wraps
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path
from typing import Any, Callable, Dict, Optional

ROOT_LOGGER_NAME = "phonesearch"


# =============================================================================
# JSON Formatter
# =============================================================================

class JSONFormatter(logging.Formatter):
    """
    Formats log records as JSON for structured logging.

    Output format:
    {
        "timestamp": "2026-10-18T10:30:00.123456Z",
        "level": "INFO",
        "logger": "phonesearch.matching.search",
        "message": "Search complete",
        "event": "search_complete",
        "strategy": "exact_model",
        ...
    }
    """

    EXTRA_FIELDS = [
        # Query fields
        "event", "query", "normalized_query", "extracted_info", "features",
        # Strategy and results
        "strategy", "outcome", "products_found", "result_count", "success",
        # Catalog
        "criteria", "limit", "pattern",
        # Performance timing
        "search_latency_ms", "elapsed_ms", "function",
        # Error tracking
        "error", "error_type", "stack_trace", "context",
    ]

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_data = {
            "timestamp": datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%fZ"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        # Extra fields are passed via logger.info("msg", extra={...})
        for field in self.EXTRA_FIELDS:
            if hasattr(record, field):
                value = getattr(record, field)
                if value is not None:
                    log_data[field] = value

        if record.exc_info:
            log_data["error_type"] = record.exc_info[0].__name__ if record.exc_info[0] else None
            log_data["stack_trace"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


class ConsoleFormatter(logging.Formatter):
    """
    Human-readable formatter for console output.

    Output format:
    2026-10-18 10:30:00 | INFO | phonesearch.matching.search | Search complete | event=search_complete
    """

    COLORS = {
        "DEBUG": "\033[36m",    # Cyan
        "INFO": "\033[32m",     # Green
        "WARNING": "\033[33m",  # Yellow
        "ERROR": "\033[31m",    # Red
        "CRITICAL": "\033[35m", # Magenta
        "RESET": "\033[0m",
    }

    def format(self, record: logging.LogRecord) -> str:
        """Format log record for console."""
        timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        level = record.levelname

        color = self.COLORS.get(level, "")
        reset = self.COLORS["RESET"]

        msg = f"{timestamp} | {color}{level:8}{reset} | {record.name} | {record.getMessage()}"

        context_parts = []
        for field in ["event", "strategy", "search_latency_ms"]:
            if hasattr(record, field) and getattr(record, field) is not None:
                context_parts.append(f"{field}={getattr(record, field)}")

        if context_parts:
            msg += f" | {', '.join(context_parts)}"

        if record.exc_info:
            msg += f"\n{self.formatException(record.exc_info)}"

        return msg


# =============================================================================
# Logger Setup
# =============================================================================

_loggers: Dict[str, logging.Logger] = {}
_initialized = False


def setup_logging(
    log_dir: str = "logs",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
    enable_console: bool = True,
    enable_file: bool = True,
    enable_error_log: bool = True,
) -> None:
    """
    Initialize the logging system.

    Creates:
    - logs/search.log (all logs, JSON, rotating daily, 30-day retention)
    - logs/errors.log (ERROR and above, rotating daily, 30-day retention)
    - Console output (if enabled)

    Args:
        log_dir: Directory for log files
        console_level: Minimum level for console output
        file_level: Minimum level for file output
        enable_console: Whether to output to console
        enable_file: Whether to write search.log
        enable_error_log: Whether to write errors.log (ERROR and above)
    """
    global _initialized
    if _initialized:
        return

    log_path = Path(log_dir)
    if enable_file or enable_error_log:
        log_path.mkdir(parents=True, exist_ok=True)

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(logging.DEBUG)  # Capture all, handlers filter
    root_logger.handlers = []

    if enable_console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(console_level)
        console_handler.setFormatter(ConsoleFormatter())
        root_logger.addHandler(console_handler)

    if enable_file:
        file_handler = TimedRotatingFileHandler(
            filename=str(log_path / "search.log"),
            when="midnight",
            interval=1,
            backupCount=30,  # Keep 30 days
            encoding="utf-8",
        )
        file_handler.setLevel(file_level)
        file_handler.setFormatter(JSONFormatter())
        file_handler.suffix = "%Y-%m-%d"
        root_logger.addHandler(file_handler)

    if enable_error_log:
        error_handler = TimedRotatingFileHandler(
            filename=str(log_path / "errors.log"),
            when="midnight",
            interval=1,
            backupCount=30,
            encoding="utf-8",
        )
        error_handler.setLevel(logging.ERROR)
        error_handler.setFormatter(JSONFormatter())
        error_handler.suffix = "%Y-%m-%d"
        root_logger.addHandler(error_handler)

    _initialized = True


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for a module.

    Args:
        name: Module name (usually __name__)

    Returns:
        Logger under the phonesearch namespace

    Example:
        logger = get_logger(__name__)
        logger.info("Search started", extra={"query": "iphone 15"})
    """
    # Don't auto-initialize here - app.py controls logging setup
    if name.startswith(f"{ROOT_LOGGER_NAME}."):
        logger_name = name
    else:
        logger_name = f"{ROOT_LOGGER_NAME}.{name}"

    if logger_name not in _loggers:
        _loggers[logger_name] = logging.getLogger(logger_name)

    return _loggers[logger_name]


# =============================================================================
# Convenience Functions
# =============================================================================

def log_strategy_attempt(
    strategy: str,
    outcome: str,
    products_found: int = 0,
    error: Optional[str] = None,
    **extra
) -> None:
    """
    Log the outcome of one cascade step.

    Args:
        strategy: Strategy tag (exact_model, brand_based, ...)
        outcome: success, declined, suggested or error
        products_found: Products the strategy returned
        error: Error message if the strategy failed
        **extra: Additional fields
    """
    logger = get_logger("strategy")
    level = logging.WARNING if error else logging.DEBUG
    logger.log(
        level,
        f"Strategy {strategy}: {outcome}",
        extra={
            "event": "strategy_attempt",
            "strategy": strategy,
            "outcome": outcome,
            "products_found": products_found,
            "error": error,
            **extra
        }
    )


def log_search(
    query: str,
    strategy: str,
    products_found: int,
    search_time_ms: float,
    success: bool = True,
    extracted_info: Optional[Dict[str, Any]] = None,
    features: Optional[list] = None,
    **extra
) -> None:
    """
    Log a completed search call.

    Args:
        query: Original query text
        strategy: Strategy that produced the result
        products_found: Number of products returned
        search_time_ms: Total time for the cascade
        success: Whether the result is a confident match
        extracted_info: Attributes extracted from the query
        features: Feature keywords detected
        **extra: Additional fields
    """
    logger = get_logger("search")
    logger.info(
        f"Search complete: {products_found} products (strategy: {strategy})",
        extra={
            "event": "search_complete",
            "query": query,
            "strategy": strategy,
            "products_found": products_found,
            "success": success,
            "extracted_info": extracted_info,
            "features": features,
            "search_latency_ms": round(search_time_ms, 2),
            **extra
        }
    )


def log_error(
    error: Exception,
    context: Optional[str] = None,
    **extra
) -> None:
    """
    Log an error with full context.

    Args:
        error: The exception
        context: What was happening when it was raised
        **extra: Additional fields
    """
    logger = get_logger("error")
    logger.error(
        f"Error: {type(error).__name__}: {error}",
        extra={
            "event": "error",
            "error_type": type(error).__name__,
            "stack_trace": traceback.format_exc(),
            "context": context,
            **extra
        },
        exc_info=True
    )


# =============================================================================
# Performance Timing
# =============================================================================

def timed(event_name: str, logger_name: str = "performance"):
    """
    Decorator to time function execution and log it.

    Usage:
        @timed("catalog_load")
        def load_catalog(path: str) -> DataFrameCatalog:
            ...

    Args:
        event_name: Name of the event for logging
        logger_name: Logger to use
    """
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(*args, **kwargs):
            start = time.perf_counter()
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                elapsed_ms = (time.perf_counter() - start) * 1000
                get_logger(logger_name).error(
                    f"{event_name} failed after {elapsed_ms:.2f}ms",
                    extra={
                        "event": f"{event_name}_error",
                        "elapsed_ms": round(elapsed_ms, 2),
                        "function": func.__name__,
                        "error_type": type(e).__name__,
                    },
                    exc_info=True
                )
                raise
            elapsed_ms = (time.perf_counter() - start) * 1000
            get_logger(logger_name).debug(
                f"{event_name} completed",
                extra={
                    "event": f"{event_name}_timing",
                    "elapsed_ms": round(elapsed_ms, 2),
                    "function": func.__name__,
                }
            )
            return result
        return wrapper
    return decorator


class Timer:
    """
    Context manager for timing code blocks.

    Usage:
        with Timer() as t:
            # ... do work ...
        print(f"Took {t.elapsed_ms}ms")
    """

    def __init__(self):
        self.start_time = None
        self.end_time = None
        self.elapsed_ms = 0.0

    def __enter__(self) -> "Timer":
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, *args) -> None:
        self.end_time = time.perf_counter()
        self.elapsed_ms = (self.end_time - self.start_time) * 1000
