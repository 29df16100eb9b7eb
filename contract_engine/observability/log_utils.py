"""
Helpers for putting request context into log records.

Contract payloads carry rendered documents, CSV uploads and Cognito
credentials; these helpers keep those out of the log stream while still
recording enough to trace a failed generation.

Dependencies: logging (stdlib)
System role: Logging helper functions
"""

import logging
from typing import Any

from contract_engine.core.exceptions import ContractEngineException

REDACTED = "***"

# Substrings of context keys whose values never reach the log stream
SENSITIVE_KEYS = ("password", "token", "secret", "authorization")

# Attributes LogRecord refuses to have overwritten through extra
RESERVED_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}


def safe_log_value(value: Any, max_length: int = 500) -> str:
    """
    Render a value for a log record.

    Document and CSV bodies are summarized by size, collections by length,
    and long strings are truncated.
    """
    try:
        if value is None:
            return "None"
        if isinstance(value, str):
            val_str = value
        elif isinstance(value, (bytes, bytearray)):
            val_str = f"bytes({len(value)})"
        elif isinstance(value, (list, tuple)):
            val_str = f"{type(value).__name__}({len(value)} items)"
        elif isinstance(value, dict):
            val_str = f"dict({len(value)} keys)"
        else:
            val_str = str(value)

        if len(val_str) > max_length:
            return val_str[:max_length] + f"... (truncated, {len(val_str)} total)"
        return val_str
    except Exception as e:
        return f"<unable to log: {type(e).__name__}>"


def is_sensitive(key: str) -> bool:
    lowered = key.lower()
    return any(marker in lowered for marker in SENSITIVE_KEYS)


def log_exception_with_context(
    logger: logging.Logger,
    message: str,
    exc: Exception,
    **context,
) -> None:
    """
    Log an exception with its request context as record attributes.

    Sensitive keys are redacted. Details of a ContractEngineException
    (contract id, template id, provider id) are merged in under their own
    names unless the caller already supplied them.
    """
    fields = dict(context)
    if isinstance(exc, ContractEngineException):
        for key, val in exc.details.items():
            if key not in RESERVED_ATTRS:
                fields.setdefault(key, val)

    safe_context = {
        key: REDACTED if is_sensitive(key) else safe_log_value(val)
        for key, val in fields.items()
    }
    safe_context.update({
        "error_type": type(exc).__name__,
        "error_msg": exc.message if isinstance(exc, ContractEngineException) else str(exc),
    })
    logger.exception(message, extra=safe_context)
