"""
Shared test fixtures and configuration for entire test suite.

Provides: AWS error factories, sample provider/template records, mocked CRUD objects
Dependencies: pytest, botocore
System role: Test infrastructure and fixture management
"""

import os
from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError

# No backoff delays and no real credentials lookups during tests
os.environ.setdefault("RETRY_INITIAL_WAIT", "0")
os.environ.setdefault("RETRY_MAX_WAIT", "0")
os.environ.setdefault("AWS_REGION", "us-east-2")
os.environ.setdefault("COGNITO_USER_POOL_ID", "us-east-2_testpool")
os.environ.setdefault("EMAIL_FROM_EMAIL", "noreply@example.com")


def make_client_error(code: str, operation: str = "Operation", message: str = "boom") -> ClientError:
    """Build a botocore ClientError carrying an AWS error code."""
    return ClientError({"Error": {"Code": code, "Message": message}}, operation)


@pytest.fixture
def client_error():
    """Factory fixture for botocore ClientErrors."""
    return make_client_error


@pytest.fixture
def sample_provider() -> dict:
    """Stored provider record as returned by the repository."""
    return {
        "id": "prov-1",
        "employeeId": "EMP001",
        "name": "Jane Smith",
        "providerType": "Physician",
        "specialty": "Cardiology",
        "credentials": "MD",
        "compensationYear": "2025",
        "baseSalary": 250000,
        "startDate": "2025-07-01",
        "totalFTE": 1.0,
        "clinicalFTE": 0.8,
        "medicalDirectorFTE": 0.2,
        "dynamicFields": '{"Retention Bonus": "5000", "Call Schedule": "1:4"}',
        "owner": "alice",
        "createdAt": "2025-01-01T00:00:00.000Z",
        "updatedAt": "2025-01-01T00:00:00.000Z",
    }


@pytest.fixture
def sample_template() -> dict:
    """Stored HTML template record."""
    return {
        "id": "tmpl-1",
        "name": "ScheduleA",
        "version": "1.0.0",
        "type": "Schedule A",
        "contractYear": "2025",
        "content": "<p>Dear {{ProviderName}}, salary {{BaseSalary}} from {{StartDate}}.</p>",
        "placeholders": ["ProviderName", "BaseSalary", "StartDate"],
        "clauseIds": [],
        "owner": "alice",
        "createdAt": "2025-01-01T00:00:00.000Z",
        "updatedAt": "2025-01-01T00:00:00.000Z",
    }


@pytest.fixture
def mock_crud() -> MagicMock:
    """Repository mock with create/create_many echoing their input."""
    crud = MagicMock()
    crud.create.side_effect = lambda **fields: {"id": "new-id", **fields}
    crud.create_many.side_effect = lambda items: [{"id": f"new-{i}", **item} for i, item in enumerate(items)]
    return crud
