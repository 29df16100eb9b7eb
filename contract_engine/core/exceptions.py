"""
Exception hierarchy for Contract Engine.

Provides layered exception structure for domain-specific errors.
All exceptions include context for observability and debugging.

Dependencies: botocore (for ClientError translation only)
System role: Centralized exception handling across the application
"""

from typing import Any

from botocore.exceptions import ClientError

# Remediation hints printed by operational commands and returned by the API.
REMEDIATION_HINTS: dict[str, list[str]] = {
    "AccessDeniedException": [
        "IAM policy attached to the caller is missing the required action",
        "Check the resource ARN in the policy matches the target table/bucket/pool",
    ],
    "AccessDenied": [
        "IAM policy attached to the caller is missing the required S3 action",
        "Check the bucket policy and any explicit Deny statements",
    ],
    "NotAuthorizedException": [
        "IAM permissions issue for the Cognito admin API",
        "User Pool ID might be incorrect",
    ],
    "UserNotFoundException": [
        "The username does not exist in this user pool",
        "Usernames are case sensitive; try the email address used at sign-up",
    ],
    "ResourceNotFoundException": [
        "Table or user pool does not exist in the configured region",
        "Check DYNAMODB_API_ID / DYNAMODB_ENV and AWS_REGION",
    ],
    "NoSuchBucket": [
        "Bucket name is wrong or lives in another account",
        "Check S3_STORAGE_BUCKET",
    ],
    "MessageRejected": [
        "Sender address is not verified in SES",
        "In the SES sandbox the recipient must be verified too",
    ],
    "ThrottlingException": [
        "Request rate exceeded; re-run the command after a short wait",
    ],
    "ExpiredTokenException": [
        "Temporary credentials expired; refresh your AWS session",
    ],
    "UnrecognizedClientException": [
        "AWS credentials are invalid or missing",
        "Check AWS_PROFILE or the default credential chain",
    ],
}


class ContractEngineException(Exception):
    """Base exception for all Contract Engine errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize base exception with message and optional context.

        Args:
            message: Human-readable error message
            details: Optional dictionary of additional context for debugging
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including details."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ValidationError(ContractEngineException):
    """Raised when input validation fails."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize validation error.

        Args:
            message: Error message
            field: Field name that failed validation
            details: Additional context
        """
        details = details or {}
        if field:
            details["field"] = field
        super().__init__(message, details)


class NotFoundError(ContractEngineException):
    """Raised when a record cannot be found."""

    def __init__(
        self,
        resource: str,
        resource_id: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize not found error.

        Args:
            resource: Resource kind, e.g. "Provider"
            resource_id: ID of the missing record
            details: Additional context
        """
        details = details or {}
        details["resource"] = resource
        details["resource_id"] = resource_id
        self.resource = resource
        self.resource_id = resource_id
        super().__init__(f"{resource} not found: {resource_id}", details)


class OwnershipError(ContractEngineException):
    """Raised when a user modifies a record they do not own."""


class CsvParsingError(ContractEngineException):
    """Raised when an uploaded CSV cannot be read at all."""


class TemplateRenderError(ContractEngineException):
    """Raised when a template cannot be rendered."""

    def __init__(
        self,
        message: str,
        template_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if template_id:
            details["template_id"] = template_id
        super().__init__(message, details)


class StorageError(ContractEngineException):
    """Raised when an S3 storage operation fails or an object is missing."""

    def __init__(
        self,
        message: str,
        key: str | None = None,
        operation: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if key:
            details["key"] = key
        if operation:
            details["operation"] = operation
        super().__init__(message, details)


class AwsServiceError(ContractEngineException):
    """Raised when an AWS call fails with a non-retryable error."""

    def __init__(
        self,
        message: str,
        service: str,
        operation: str,
        code: str | None = None,
        hints: list[str] | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize AWS service error.

        Args:
            message: Error message
            service: AWS service name (s3, dynamodb, cognito-idp, ses)
            operation: Operation that failed
            code: AWS error code
            hints: Remediation hints for operators
            details: Additional context
        """
        details = details or {}
        details.update({"service": service, "operation": operation})
        if code:
            details["code"] = code
        self.service = service
        self.operation = operation
        self.code = code
        self.hints = hints or []
        super().__init__(message, details)

    @classmethod
    def from_client_error(
        cls,
        error: ClientError,
        service: str,
        operation: str,
    ) -> "AwsServiceError":
        """
        Build an AwsServiceError from a botocore ClientError.

        Args:
            error: Original ClientError
            service: AWS service name
            operation: Operation that failed

        Returns:
            AwsServiceError: Error carrying code and remediation hints
        """
        code = error_code(error)
        message = error.response.get("Error", {}).get("Message") or str(error)
        return cls(
            f"{service} {operation} failed: {message}",
            service=service,
            operation=operation,
            code=code,
            hints=REMEDIATION_HINTS.get(code or "", []),
        )


def error_code(error: ClientError) -> str | None:
    """Return the AWS error code carried by a ClientError."""
    return error.response.get("Error", {}).get("Code")
