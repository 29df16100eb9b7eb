"""
Test suite for the clause and dynamic block endpoints.

System role: Verification of clause library and dynamic block HTTP API
"""

from unittest.mock import AsyncMock

import pytest

from contract_engine.api.deps import get_clause_service, get_dynamic_block_service
from contract_engine.core.exceptions import NotFoundError, OwnershipError

API = "/api/v1"

CLAUSE = {
    "id": "c1",
    "title": "Call Coverage",
    "text": "Provider shares call.",
    "applicableProviderTypes": ["Physician"],
    "conditions": [{"field": "specialty", "operator": "equals", "value": "Cardiology"}],
}

BLOCK = {
    "id": "b1",
    "name": "Call block",
    "placeholder": "CallBlock",
    "conditions": [],
    "alwaysInclude": [],
    "owner": "alice",
}


@pytest.fixture
def mock_clause_service(app) -> AsyncMock:
    service = AsyncMock()
    app.dependency_overrides[get_clause_service] = lambda: service
    return service


@pytest.fixture
def mock_block_service(app) -> AsyncMock:
    service = AsyncMock()
    app.dependency_overrides[get_dynamic_block_service] = lambda: service
    return service


class TestClauses:
    def test_create(self, client, mock_clause_service: AsyncMock) -> None:
        mock_clause_service.create_clause.return_value = CLAUSE

        response = client.post(
            f"{API}/clauses",
            json={
                "title": "Call Coverage",
                "text": "Provider shares call.",
                "applicableProviderTypes": ["Physician"],
                "conditions": [{"field": "specialty", "operator": "equals", "value": "Cardiology"}],
            },
        )

        assert response.status_code == 201
        args, kwargs = mock_clause_service.create_clause.call_args
        assert args == ("alice",)
        assert kwargs["applicableProviderTypes"] == ["Physician"]
        assert kwargs["conditions"][0]["operator"] == "equals"

    def test_create_rejects_unknown_operator(self, client, mock_clause_service: AsyncMock) -> None:
        response = client.post(
            f"{API}/clauses",
            json={"title": "T", "text": "x", "conditions": [{"field": "a", "operator": "contains"}]},
        )

        assert response.status_code == 422

    def test_list_by_category(self, client, mock_clause_service: AsyncMock) -> None:
        mock_clause_service.list_clauses.return_value = [CLAUSE]

        response = client.get(f"{API}/clauses", params={"category": "Call"})

        assert response.json()[0]["applicableProviderTypes"] == ["Physician"]
        mock_clause_service.list_clauses.assert_awaited_once_with("Call")

    def test_applicable(self, client, mock_clause_service: AsyncMock) -> None:
        mock_clause_service.applicable_clauses.return_value = [CLAUSE]

        response = client.get(f"{API}/clauses/applicable/prov-1")

        assert [c["id"] for c in response.json()] == ["c1"]

    def test_applicable_unknown_provider(self, client, mock_clause_service: AsyncMock) -> None:
        mock_clause_service.applicable_clauses.side_effect = NotFoundError("Provider", "ghost")

        assert client.get(f"{API}/clauses/applicable/ghost").status_code == 404

    def test_patch_and_delete(self, client, mock_clause_service: AsyncMock) -> None:
        mock_clause_service.update_clause.return_value = {**CLAUSE, "title": "New"}

        response = client.patch(f"{API}/clauses/c1", json={"title": "New"})

        assert response.json()["title"] == "New"
        mock_clause_service.update_clause.assert_awaited_once_with("c1", {"title": "New"})
        assert client.delete(f"{API}/clauses/c1").status_code == 204


class TestDynamicBlocks:
    def test_create_passes_user(self, client, mock_block_service: AsyncMock, current_user) -> None:
        mock_block_service.create_block.return_value = BLOCK

        response = client.post(f"{API}/dynamic-blocks", json={"name": "Call block", "placeholder": "CallBlock"})

        assert response.status_code == 201
        assert response.json()["alwaysInclude"] == []
        args, kwargs = mock_block_service.create_block.call_args
        assert args[0] == current_user
        assert kwargs["placeholder"] == "CallBlock"
        assert kwargs["outputType"] == "text"

    def test_update_not_owner(self, client, mock_block_service: AsyncMock) -> None:
        mock_block_service.update_block.side_effect = OwnershipError(
            "You do not have permission to update this dynamic block", {"block_id": "b1"}
        )

        response = client.patch(f"{API}/dynamic-blocks/b1", json={"name": "Renamed"})

        assert response.status_code == 403
        assert response.json()["detail"]["details"] == {"block_id": "b1"}

    def test_list(self, client, mock_block_service: AsyncMock) -> None:
        mock_block_service.list_blocks.return_value = [BLOCK]

        response = client.get(f"{API}/dynamic-blocks", params={"placeholder": "CallBlock"})

        assert response.json()[0]["placeholder"] == "CallBlock"
        mock_block_service.list_blocks.assert_awaited_once_with("CallBlock")

    def test_delete_missing(self, client, mock_block_service: AsyncMock) -> None:
        mock_block_service.delete_block.side_effect = NotFoundError("DynamicBlock", "b9")

        assert client.delete(f"{API}/dynamic-blocks/b9").status_code == 404
