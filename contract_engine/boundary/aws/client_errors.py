"""
AWS error translation for boundary clients.

Dependencies: botocore, tenacity (via core.retry)
System role: Turns botocore ClientError into AwsServiceError after retries
"""

import functools
import logging
from typing import Any, Callable, TypeVar

from botocore.exceptions import BotoCoreError, ClientError

from contract_engine.core.exceptions import AwsServiceError
from contract_engine.core.retry import aws_retry

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


def translate_client_errors(service: str) -> Callable[[F], F]:
    """
    Retry transient failures, then raise AwsServiceError for what is left.

    Args:
        service: AWS service name used in the error, e.g. "s3"

    Returns:
        Decorator for boundary client methods
    """

    def decorator(func: F) -> F:
        retried = aws_retry(func)

        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            try:
                return retried(*args, **kwargs)
            except ClientError as e:
                error = AwsServiceError.from_client_error(e, service, func.__name__)
                logger.error(
                    "AWS call failed",
                    extra={"service": service, "operation": func.__name__, "code": error.code},
                )
                raise error from e
            except BotoCoreError as e:
                logger.error(
                    "AWS call failed",
                    extra={"service": service, "operation": func.__name__, "error": str(e)},
                )
                raise AwsServiceError(
                    f"{service} {func.__name__} failed: {e}",
                    service=service,
                    operation=func.__name__,
                ) from e

        return wrapper  # type: ignore

    return decorator
