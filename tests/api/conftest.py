"""Pytest fixtures for API tests."""

import pytest
from fastapi.testclient import TestClient

from contract_engine.api.deps import get_current_user
from contract_engine.main import create_app
from contract_engine.models.user import CurrentUser


@pytest.fixture
def current_user() -> CurrentUser:
    return CurrentUser(username="alice", user_id="sub-alice", email="alice@example.com")


@pytest.fixture
def admin_user() -> CurrentUser:
    return CurrentUser(username="root", user_id="sub-root", groups=["Admin"])


@pytest.fixture
def app(current_user: CurrentUser):
    """Application with authentication resolved to a fixed non-admin user."""
    app = create_app()
    app.dependency_overrides[get_current_user] = lambda: current_user
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)


@pytest.fixture
def as_admin(app, admin_user: CurrentUser) -> CurrentUser:
    """Switch the authenticated user to an Admin group member."""
    app.dependency_overrides[get_current_user] = lambda: admin_user
    return admin_user
