"""
Monitoring helpers for the concierge service.
Structured (JSON) log formatting and operation timing.
"""

import time
from typing import Callable, Any
from functools import wraps
import logging
import json
from datetime import datetime, timezone
import asyncio

logger = logging.getLogger(__name__)

# LogRecord attributes copied into the JSON payload when set via `extra=`
_EXTRA_FIELDS = ("duration_ms", "operation", "tier", "candidates")


# ============================================================================
# STRUCTURED LOGGING
# ============================================================================

class JSONFormatter(logging.Formatter):
    """Render each record as a single JSON line."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
        }
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)
        for field in _EXTRA_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                log_data[field] = value
        return json.dumps(log_data, default=str)


# ============================================================================
# PERFORMANCE TRACKING
# ============================================================================

def track_performance(operation_name: str):
    """Decorator that logs how long the wrapped call took (sync or async)."""
    def _log(elapsed_ms: float, error: Exception = None) -> None:
        extra = {"operation": operation_name, "duration_ms": round(elapsed_ms, 1)}
        if error is None:
            logger.info(f"{operation_name} completed in {elapsed_ms:.0f}ms", extra=extra)
        else:
            logger.error(f"{operation_name} failed after {elapsed_ms:.0f}ms: {error}", extra=extra)

    def decorator(func: Callable) -> Callable:
        @wraps(func)
        async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
            start = time.perf_counter()
            try:
                result = await func(*args, **kwargs)
            except Exception as e:
                _log((time.perf_counter() - start) * 1000, e)
                raise
            _log((time.perf_counter() - start) * 1000)
            return result

        @wraps(func)
        def sync_wrapper(*args: Any, **kwargs: Any) -> Any:
            start = time.perf_counter()
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                _log((time.perf_counter() - start) * 1000, e)
                raise
            _log((time.perf_counter() - start) * 1000)
            return result

        if asyncio.iscoroutinefunction(func):
            return async_wrapper
        return sync_wrapper

    return decorator
