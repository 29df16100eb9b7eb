"""
Router error handling.

Decorator that maps domain exceptions raised by services onto HTTP
responses so every endpoint reports errors the same way.

Dependencies: fastapi, contract_engine.core.exceptions
System role: Exception to HTTP status translation
"""

import functools
import logging
from typing import Any, Callable, TypeVar

from fastapi import HTTPException, status

from contract_engine.core.exceptions import (
    AwsServiceError,
    ContractEngineException,
    CsvParsingError,
    NotFoundError,
    OwnershipError,
    ValidationError,
)
from contract_engine.observability.log_utils import log_exception_with_context

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


def error_detail(error: ContractEngineException) -> dict[str, Any]:
    """JSON body of a domain error."""
    detail: dict[str, Any] = {"error": type(error).__name__, "message": error.message}
    if error.details:
        detail["details"] = error.details
    if isinstance(error, AwsServiceError):
        detail["code"] = error.code
        detail["hints"] = error.hints
    return detail


def handle_errors(func: F) -> F:
    """
    Decorator to transform domain errors into HTTPExceptions.

    NotFound -> 404, Validation/CsvParsing -> 400, Ownership -> 403,
    AwsService -> 502, anything else -> 500.
    """

    @functools.wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return await func(*args, **kwargs)

        except HTTPException:
            raise

        except NotFoundError as e:
            logger.warning("Resource not found", extra={"error": e.message})
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=error_detail(e))

        except (ValidationError, CsvParsingError) as e:
            logger.warning("Invalid request", extra={"error": e.message})
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=error_detail(e))

        except OwnershipError as e:
            logger.warning("Ownership check failed", extra={"error": e.message})
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=error_detail(e))

        except AwsServiceError as e:
            logger.error(
                "AWS call failed",
                extra={"service": e.service, "operation": e.operation, "code": e.code},
            )
            raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=error_detail(e))

        except Exception as e:
            log_exception_with_context(logger, "Unexpected failure", e, endpoint=func.__name__)
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail={"error": "InternalError", "message": f"An internal error occurred: {e}"},
            )

    return wrapper  # type: ignore
