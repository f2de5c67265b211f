from __future__ import annotations

import inspect
import logging
from functools import wraps
from typing import Any, Callable

_logger = logging.getLogger("converter_hub.actions")


def log_action(
    action: str, verbose: bool = False
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Decorator to log model actions at INFO level.

    Logs action, currency code, value when present, and result (OK/ERROR).
    Does not swallow exceptions.
    """

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        signature = inspect.signature(func)

        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            # Best-effort extraction of common fields
            bound = signature.bind_partial(*args, **kwargs)
            code = bound.arguments.get("code")
            value = bound.arguments.get("value")
            try:
                result = func(*args, **kwargs)
            except Exception as exc:
                _logger.info(
                    "%s code='%s' value=%s result=ERROR error_type=%s "
                    "error_message='%s'",
                    action,
                    code,
                    value,
                    type(exc).__name__,
                    str(exc).replace("'", "\\'"),
                )
                raise
            _logger.info("%s code='%s' value=%s result=OK", action, code, value)
            if verbose and result is not None:
                _logger.info("%s details={%s}", action, result)
            return result

        return wrapper

    return decorator
