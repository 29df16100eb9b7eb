"""
Test suite for bearer token authentication and the admin guard.

The dependency functions are called directly with a mocked Cognito client,
and once through the app to check the 401 response.

System role: Verification of API authentication and authorization
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi import HTTPException
from fastapi.security import HTTPAuthorizationCredentials
from fastapi.testclient import TestClient

from contract_engine.api.deps import get_cognito_client, get_provider_service
from contract_engine.api.deps.auth import get_current_user, require_admin
from contract_engine.configs.cognito import CognitoSettings
from contract_engine.configs.settings import Settings
from contract_engine.core.exceptions import AwsServiceError
from contract_engine.main import create_app
from contract_engine.models.user import CurrentUser


def bearer(token: str = "access-token") -> HTTPAuthorizationCredentials:
    return HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)


@pytest.fixture
def mock_cognito() -> MagicMock:
    cognito = MagicMock()
    cognito.get_user_from_access_token.return_value = {
        "Username": "alice",
        "UserAttributes": [
            {"Name": "sub", "Value": "sub-alice"},
            {"Name": "email", "Value": "alice@example.com"},
        ],
    }
    cognito.list_groups_for_user.return_value = ["Admin"]
    return cognito


class TestGetCurrentUser:
    def test_resolves_user(self, mock_cognito: MagicMock) -> None:
        user = get_current_user(bearer(), mock_cognito)

        assert user == CurrentUser(username="alice", user_id="sub-alice", email="alice@example.com", groups=["Admin"])
        mock_cognito.get_user_from_access_token.assert_called_once_with("access-token")

    def test_missing_token(self, mock_cognito: MagicMock) -> None:
        with pytest.raises(HTTPException) as exc_info:
            get_current_user(None, mock_cognito)

        assert exc_info.value.status_code == 401
        mock_cognito.get_user_from_access_token.assert_not_called()

    def test_revoked_token(self, mock_cognito: MagicMock) -> None:
        mock_cognito.get_user_from_access_token.side_effect = AwsServiceError(
            "Access Token has been revoked",
            service="cognito-idp",
            operation="get_user_from_access_token",
            code="NotAuthorizedException",
        )

        with pytest.raises(HTTPException) as exc_info:
            get_current_user(bearer(), mock_cognito)

        assert exc_info.value.status_code == 401
        assert exc_info.value.headers == {"WWW-Authenticate": "Bearer"}

    def test_cognito_unavailable(self, mock_cognito: MagicMock) -> None:
        mock_cognito.get_user_from_access_token.side_effect = AwsServiceError(
            "cognito-idp get_user failed",
            service="cognito-idp",
            operation="get_user_from_access_token",
            code="InternalErrorException",
        )

        with pytest.raises(HTTPException) as exc_info:
            get_current_user(bearer(), mock_cognito)

        assert exc_info.value.status_code == 502


class TestRequireAdmin:
    def test_admin_passes(self) -> None:
        user = CurrentUser(username="root", groups=["Admin"])
        assert require_admin(user, Settings()) is user

    def test_custom_admin_group(self) -> None:
        settings = Settings(cognito=CognitoSettings(admin_group="ContractAdmins"))

        with pytest.raises(HTTPException) as exc_info:
            require_admin(CurrentUser(username="root", groups=["Admin"]), settings)

        assert exc_info.value.status_code == 403


def test_request_without_token_is_rejected(mock_cognito: MagicMock) -> None:
    app = create_app()
    app.dependency_overrides[get_cognito_client] = lambda: mock_cognito
    client = TestClient(app)

    response = client.get("/api/v1/providers")

    assert response.status_code == 401
    assert response.headers["WWW-Authenticate"] == "Bearer"


def test_request_with_token_reaches_service(mock_cognito: MagicMock) -> None:
    service = AsyncMock()
    service.list_providers.return_value = []
    app = create_app()
    app.dependency_overrides[get_cognito_client] = lambda: mock_cognito
    app.dependency_overrides[get_provider_service] = lambda: service
    client = TestClient(app)

    response = client.get("/api/v1/providers", headers={"Authorization": "Bearer access-token"})

    assert response.status_code == 200
    assert response.json() == []
