"""
Test suite for the template endpoints.

System role: Verification of template HTTP API
"""

from unittest.mock import AsyncMock

import pytest

from contract_engine.api.deps import get_template_service
from contract_engine.core.exceptions import StorageError, ValidationError

API = "/api/v1"


@pytest.fixture
def mock_template_service(app, sample_template: dict) -> AsyncMock:
    service = AsyncMock()
    service.get_template.return_value = sample_template
    service.create_template.return_value = sample_template
    app.dependency_overrides[get_template_service] = lambda: service
    return service


class TestCreate:
    def test_create_html_template(self, client, mock_template_service: AsyncMock) -> None:
        response = client.post(
            f"{API}/templates",
            json={"name": "ScheduleA", "contractYear": "2025", "content": "<p>{{ProviderName}}</p>"},
        )

        assert response.status_code == 201
        body = response.json()
        assert body["placeholders"] == ["ProviderName", "BaseSalary", "StartDate"]
        assert body["contractYear"] == "2025"
        kwargs = mock_template_service.create_template.call_args.kwargs
        assert kwargs["owner"] == "alice"
        assert kwargs["version"] == "1.0.0"
        assert kwargs["type"] == "Schedule A"
        assert kwargs["clause_ids"] == []

    def test_rejects_bad_version(self, client, mock_template_service: AsyncMock) -> None:
        response = client.post(f"{API}/templates", json={"name": "T", "version": "1"})

        assert response.status_code == 422
        mock_template_service.create_template.assert_not_awaited()

    def test_upload_file(self, client, mock_template_service: AsyncMock) -> None:
        response = client.post(
            f"{API}/templates/upload",
            files={"file": ("schedule.docx", b"PK-bytes", "application/octet-stream")},
            data={"name": "ScheduleA", "contract_year": "2025"},
        )

        assert response.status_code == 201
        kwargs = mock_template_service.create_template.call_args.kwargs
        assert kwargs["file_bytes"] == b"PK-bytes"
        assert kwargs["file_name"] == "schedule.docx"
        assert kwargs["contract_year"] == "2025"

    def test_upload_unsupported(self, client, mock_template_service: AsyncMock) -> None:
        mock_template_service.create_template.side_effect = ValidationError(
            "Unsupported template file type", field="file"
        )

        response = client.post(
            f"{API}/templates/upload",
            files={"file": ("schedule.pdf", b"%PDF", "application/pdf")},
            data={"name": "ScheduleA"},
        )

        assert response.status_code == 400
        assert response.json()["detail"]["error"] == "ValidationError"


class TestReadUpdate:
    def test_list(self, client, mock_template_service: AsyncMock, sample_template: dict) -> None:
        mock_template_service.list_templates.return_value = [sample_template]

        response = client.get(f"{API}/templates", params={"year": "2025"})

        assert [t["id"] for t in response.json()] == ["tmpl-1"]
        mock_template_service.list_templates.assert_awaited_once_with("2025")

    def test_patch(self, client, mock_template_service: AsyncMock, sample_template: dict) -> None:
        mock_template_service.update_template.return_value = sample_template

        response = client.patch(f"{API}/templates/tmpl-1", json={"clauseIds": ["c1"]})

        assert response.status_code == 200
        mock_template_service.update_template.assert_awaited_once_with("tmpl-1", {"clauseIds": ["c1"]})

    def test_delete(self, client, mock_template_service: AsyncMock) -> None:
        assert client.delete(f"{API}/templates/tmpl-1").status_code == 204
        mock_template_service.delete_template.assert_awaited_once_with("tmpl-1", owner="alice")


class TestFiles:
    def test_download_docx(self, client, mock_template_service: AsyncMock) -> None:
        mock_template_service.get_template_file.return_value = (b"docx-bytes", "schedule.docx")

        response = client.get(f"{API}/templates/tmpl-1/file")

        assert response.status_code == 200
        assert response.content == b"docx-bytes"
        assert response.headers["content-type"].startswith(
            "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
        )
        assert 'filename="schedule.docx"' in response.headers["content-disposition"]

    def test_download_without_file(self, client, mock_template_service: AsyncMock) -> None:
        mock_template_service.get_template_file.side_effect = StorageError(
            "Template tmpl-1 has no stored file", operation="get_template_file"
        )

        response = client.get(f"{API}/templates/tmpl-1/file")

        assert response.status_code == 500
        assert response.json()["detail"]["error"] == "InternalError"

    def test_file_url(self, client, mock_template_service: AsyncMock) -> None:
        mock_template_service.get_template_file_url.return_value = {
            "template_id": "tmpl-1",
            "s3_key": "templates/tmpl-1/schedule.docx",
            "download_url": "https://signed.example/t",
        }

        response = client.get(f"{API}/templates/tmpl-1/file-url")

        assert response.json() == {
            "templateId": "tmpl-1",
            "s3Key": "templates/tmpl-1/schedule.docx",
            "downloadUrl": "https://signed.example/t",
        }

    def test_replace_file(self, client, mock_template_service: AsyncMock, sample_template: dict) -> None:
        mock_template_service.upload_template_file.return_value = sample_template

        response = client.post(
            f"{API}/templates/tmpl-1/file",
            files={"file": ("new.docx", b"bytes", "application/octet-stream")},
        )

        assert response.status_code == 200
        mock_template_service.upload_template_file.assert_awaited_once_with(
            "tmpl-1", b"bytes", "new.docx", owner="alice"
        )


class TestPlaceholdersAndMappings:
    def test_placeholders(self, client, mock_template_service: AsyncMock) -> None:
        mock_template_service.get_placeholders.return_value = ["ProviderName"]

        response = client.get(f"{API}/templates/tmpl-1/placeholders")

        assert response.json() == {"templateId": "tmpl-1", "placeholders": ["ProviderName"]}

    def test_set_mappings(self, client, mock_template_service: AsyncMock) -> None:
        mock_template_service.set_mappings.return_value = [
            {"id": "m0", "templateId": "tmpl-1", "placeholder": "Schedule", "mappedColumn": "Call Schedule"}
        ]

        response = client.put(
            f"{API}/templates/tmpl-1/mappings",
            json={"mappings": [{"placeholder": "Schedule", "mappedColumn": "Call Schedule"}]},
        )

        assert response.status_code == 200
        assert response.json()[0]["mappedColumn"] == "Call Schedule"
        mock_template_service.set_mappings.assert_awaited_once_with(
            "tmpl-1", [{"placeholder": "Schedule", "mappedColumn": "Call Schedule"}]
        )

    def test_duplicate_mappings(self, client, mock_template_service: AsyncMock) -> None:
        mock_template_service.set_mappings.side_effect = ValidationError(
            "Placeholders mapped more than once", field="mappings", details={"duplicates": ["A"]}
        )

        response = client.put(
            f"{API}/templates/tmpl-1/mappings",
            json={"mappings": [{"placeholder": "A", "mappedColumn": "x"}, {"placeholder": "A", "mappedColumn": "y"}]},
        )

        assert response.status_code == 400
        assert response.json()["detail"]["details"]["duplicates"] == ["A"]
