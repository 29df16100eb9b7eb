"""
Test suite for AWS retry policy and error translation.

System role: Verification of transient error handling
"""

from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError, EndpointConnectionError

from contract_engine.configs.retry import RetrySettings
from contract_engine.core.exceptions import AwsServiceError, NotFoundError, ValidationError
from contract_engine.boundary.aws.client_errors import translate_client_errors
from contract_engine.core.retry import aws_retry, build_retrying, is_retryable_error


@pytest.fixture
def no_wait() -> RetrySettings:
    return RetrySettings(max_attempts=3, initial_wait=0, max_wait=0)


class TestIsRetryableError:
    def test_throttling(self, client_error) -> None:
        assert is_retryable_error(client_error("ThrottlingException"))

    def test_access_denied(self, client_error) -> None:
        assert not is_retryable_error(client_error("AccessDenied"))

    def test_connection_error(self) -> None:
        assert is_retryable_error(EndpointConnectionError(endpoint_url="https://dynamodb.us-east-2.amazonaws.com"))

    def test_other_exception(self) -> None:
        assert not is_retryable_error(ValueError("nope"))


class TestBuildRetrying:
    """Test the tenacity controller built from settings."""

    def test_retries_transient_errors(self, no_wait: RetrySettings, client_error) -> None:
        call = MagicMock(side_effect=[client_error("SlowDown"), client_error("SlowDown"), "ok"])

        assert build_retrying(no_wait)(call) == "ok"
        assert call.call_count == 3

    def test_gives_up_after_max_attempts(self, no_wait: RetrySettings, client_error) -> None:
        call = MagicMock(side_effect=client_error("ThrottlingException"))

        with pytest.raises(ClientError):
            build_retrying(no_wait)(call)
        assert call.call_count == 3

    def test_permanent_error_not_retried(self, no_wait: RetrySettings, client_error) -> None:
        call = MagicMock(side_effect=client_error("AccessDenied"))

        with pytest.raises(ClientError):
            build_retrying(no_wait)(call)
        assert call.call_count == 1


class TestAwsRetry:
    """Test the decorator used by the boundary clients."""

    def test_decorated_call_retried(self, client_error) -> None:
        call = MagicMock(side_effect=[client_error("ProvisionedThroughputExceededException"), {"Item": {}}])

        @aws_retry
        def get_item() -> dict:
            return call()

        assert get_item() == {"Item": {}}
        assert call.call_count == 2

    def test_translated_after_retries(self, client_error) -> None:
        call = MagicMock(side_effect=client_error("ThrottlingException", "Scan", "Rate exceeded"))

        @translate_client_errors("dynamodb")
        def scan() -> list:
            return call()

        with pytest.raises(AwsServiceError) as exc_info:
            scan()

        assert exc_info.value.code == "ThrottlingException"
        assert exc_info.value.details["operation"] == "scan"
        assert call.call_count == 3


class TestExceptions:
    def test_from_client_error_carries_hints(self, client_error) -> None:
        error = AwsServiceError.from_client_error(
            client_error("NoSuchBucket", "GetObject", "The bucket does not exist"),
            service="s3",
            operation="get_object",
        )

        assert error.code == "NoSuchBucket"
        assert error.message == "s3 get_object failed: The bucket does not exist"
        assert error.hints
        assert error.details["service"] == "s3"

    def test_unknown_code_has_no_hints(self, client_error) -> None:
        error = AwsServiceError.from_client_error(client_error("Weird"), service="ses", operation="send_email")
        assert error.hints == []

    def test_not_found_message(self) -> None:
        error = NotFoundError("Provider", "prov-1")

        assert error.message == "Provider not found: prov-1"
        assert error.details == {"resource": "Provider", "resource_id": "prov-1"}

    def test_validation_str_includes_details(self) -> None:
        error = ValidationError("Bad value", field="name")
        assert str(error) == "Bad value | Details: {'field': 'name'}"
