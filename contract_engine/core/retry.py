"""
Retry policy for AWS operations.

Transient AWS errors (throttling, 5xx, timeouts) are retried with
exponential backoff and jitter. Everything else propagates on the first
failure.

Dependencies: tenacity, botocore
System role: Shared retry decorator for the AWS boundary
"""

import functools
import logging
from typing import Any, Callable, TypeVar

from botocore.exceptions import ClientError, ConnectionClosedError, EndpointConnectionError
from tenacity import (
    Retrying,
    before_sleep_log,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential_jitter,
)

from contract_engine.configs.retry import RetrySettings

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])

RETRYABLE_ERROR_CODES = frozenset({
    "ThrottlingException",
    "Throttling",
    "ProvisionedThroughputExceededException",
    "RequestLimitExceeded",
    "ServiceUnavailable",
    "InternalServerError",
    "InternalError",
    "RequestTimeout",
    "SlowDown",
})


def is_retryable_error(exc: BaseException) -> bool:
    """
    Decide whether an exception is worth retrying.

    Args:
        exc: Raised exception

    Returns:
        bool: True for transient AWS errors
    """
    if isinstance(exc, (EndpointConnectionError, ConnectionClosedError)):
        return True
    if isinstance(exc, ClientError):
        code = exc.response.get("Error", {}).get("Code", "")
        return code in RETRYABLE_ERROR_CODES
    return False


def build_retrying(settings: RetrySettings | None = None) -> Retrying:
    """
    Build a tenacity Retrying controller from settings.

    Args:
        settings: Retry settings (defaults to application settings)

    Returns:
        Retrying: Configured controller
    """
    if settings is None:
        from contract_engine.configs import get_settings

        settings = get_settings().retry

    return Retrying(
        retry=retry_if_exception(is_retryable_error),
        stop=stop_after_attempt(settings.max_attempts),
        wait=wait_exponential_jitter(initial=settings.initial_wait, max=settings.max_wait),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )


def aws_retry(func: F) -> F:
    """Retry the decorated AWS call on transient errors."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        return build_retrying()(func, *args, **kwargs)

    return wrapper  # type: ignore
