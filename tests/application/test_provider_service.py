"""
Test suite for ProviderService.

Tests CSV upload orchestration, provider CRUD and bulk deletion.
Uses mocked dependencies (ProviderCRUD, AuditService).

System role: Verification of provider service orchestration layer
"""

import threading
from unittest.mock import AsyncMock, MagicMock

import pytest

from contract_engine.application.services.provider_service import ProviderService, chunked
from contract_engine.core.csv_upload import CsvUploadOptions
from contract_engine.core.exceptions import NotFoundError

HEADER = "Compensation Year,Employee ID,Provider Name,Provider Type,Specialty,Base Salary,Call Schedule"
CSV = "\n".join([
    HEADER,
    "2025,EMP001,Jane Smith,Physician,Cardiology,250000,1:4",
    "2025,EMP002,John Doe,APP,Hospitalist,120000,",
    "2025,EMP003,,APP,Hospitalist,120000,",
]) + "\n"


@pytest.fixture
def mock_audit() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def provider_service(mock_crud: MagicMock, mock_audit: AsyncMock) -> ProviderService:
    """Provide ProviderService with mocked repository and audit."""
    mock_crud.get_by_compensation_year.return_value = []
    return ProviderService(mock_crud, mock_audit)


def test_chunked() -> None:
    assert chunked([1, 2, 3, 4, 5], 2) == [[1, 2], [3, 4], [5]]


class TestUploadCsv:
    """Test CSV upload orchestration."""

    @pytest.mark.asyncio
    async def test_creates_valid_rows(
        self, provider_service: ProviderService, mock_crud: MagicMock, mock_audit: AsyncMock
    ) -> None:
        summary = await provider_service.upload_csv(CSV, owner="alice")

        assert summary["created"] == 2
        assert summary["valid_rows"] == 2
        assert summary["invalid_rows"] == 1
        assert summary["success"] is False
        assert summary["errors"][0].row == 4

        written = mock_crud.create_many.call_args.args[0]
        assert written[0]["owner"] == "alice"
        assert written[0]["dynamicFields"] == '{"Call Schedule": "1:4"}'
        assert written[1]["dynamicFields"] is None
        mock_audit.record.assert_awaited_once()
        assert mock_audit.record.call_args.args[0] == "PROVIDERS_UPLOADED"

    @pytest.mark.asyncio
    async def test_validate_only_writes_nothing(
        self, provider_service: ProviderService, mock_crud: MagicMock, mock_audit: AsyncMock
    ) -> None:
        summary = await provider_service.upload_csv(
            CSV, owner="alice", options=CsvUploadOptions(validate_only=True)
        )

        assert summary["validate_only"] is True
        assert summary["valid_rows"] == 2
        mock_crud.create_many.assert_not_called()
        mock_audit.record.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_existing_employee_updated(
        self, provider_service: ProviderService, mock_crud: MagicMock
    ) -> None:
        mock_crud.get_by_compensation_year.return_value = [
            {"id": "existing", "employeeId": "EMP001", "compensationYear": "2025"},
            {"id": "other", "employeeId": "EMP999", "compensationYear": "2025"},
        ]

        summary = await provider_service.upload_csv(CSV, owner="alice")

        assert summary["replaced"] == 1
        assert summary["created"] == 1
        assert mock_crud.update_by_id.call_args.args[0] == "existing"

    @pytest.mark.asyncio
    async def test_existing_rows_loaded_once_per_year(
        self, provider_service: ProviderService, mock_crud: MagicMock
    ) -> None:
        rows = [f"2025,EMP{i:03d},Provider {i},Physician,Cardiology,250000," for i in range(200)]
        rows += [f"2026,EMP{i:03d},Provider {i},Physician,Cardiology,260000," for i in range(3)]
        content = "\n".join([HEADER, *rows]) + "\n"

        summary = await provider_service.upload_csv(content, owner="alice")

        assert summary["created"] == 203
        assert [c.args for c in mock_crud.get_by_compensation_year.call_args_list] == [("2025",), ("2026",)]
        mock_crud.get_by_employee_year.assert_not_called()

    @pytest.mark.asyncio
    async def test_replace_year_deletes_first(
        self, provider_service: ProviderService, mock_crud: MagicMock
    ) -> None:
        mock_crud.get_ids.return_value = ["old-1", "old-2"]
        mock_crud.delete_by_id.return_value = True

        summary = await provider_service.upload_csv(CSV, owner="alice", replace_year=True)

        mock_crud.get_ids.assert_called_once_with("2025")
        assert summary["replaced"] == 2
        assert summary["created"] == 2
        mock_crud.get_by_compensation_year.assert_not_called()

    @pytest.mark.asyncio
    async def test_batches_by_batch_size(self, mock_crud: MagicMock, mock_audit: AsyncMock) -> None:
        mock_crud.get_by_compensation_year.return_value = []
        service = ProviderService(mock_crud, mock_audit, CsvUploadOptions(batch_size=1))

        await service.upload_csv(CSV, owner="alice")

        assert mock_crud.create_many.call_count == 2


class TestProviderCrud:
    @pytest.mark.asyncio
    async def test_list_sorted_by_name(self, provider_service: ProviderService, mock_crud: MagicMock) -> None:
        mock_crud.get_by_compensation_year.return_value = [
            {"id": "2", "name": "zoe"},
            {"id": "1", "name": "Adam", "dynamicFields": '{"A": "1"}'},
        ]

        providers = await provider_service.list_providers("2025")

        assert [p["id"] for p in providers] == ["1", "2"]
        assert providers[0]["dynamicFields"] == {"A": "1"}
        assert providers[1]["dynamicFields"] == {}

    @pytest.mark.asyncio
    async def test_repository_runs_off_event_loop(
        self, provider_service: ProviderService, mock_crud: MagicMock, sample_provider: dict
    ) -> None:
        threads: list[str] = []

        def get_by_id(provider_id: str) -> dict:
            threads.append(threading.current_thread().name)
            return sample_provider

        mock_crud.get_by_id.side_effect = get_by_id

        await provider_service.get_provider("prov-1")

        assert threads and threading.main_thread().name not in threads

    @pytest.mark.asyncio
    async def test_get_missing(self, provider_service: ProviderService, mock_crud: MagicMock) -> None:
        mock_crud.get_by_id.return_value = None

        with pytest.raises(NotFoundError):
            await provider_service.get_provider("nope")

    @pytest.mark.asyncio
    async def test_update_strips_system_fields(
        self, provider_service: ProviderService, mock_crud: MagicMock, sample_provider: dict
    ) -> None:
        mock_crud.update_by_id.return_value = sample_provider

        provider = await provider_service.update_provider(
            "prov-1", {"id": "x", "owner": "mallory", "specialty": "Oncology", "dynamicFields": {"A": "1"}}
        )

        mock_crud.update_by_id.assert_called_once_with("prov-1", specialty="Oncology", dynamicFields='{"A": "1"}')
        assert provider["dynamicFields"]["Call Schedule"] == "1:4"

    @pytest.mark.asyncio
    async def test_update_missing(self, provider_service: ProviderService, mock_crud: MagicMock) -> None:
        mock_crud.update_by_id.return_value = None

        with pytest.raises(NotFoundError):
            await provider_service.update_provider("nope", {"specialty": "X"})

    @pytest.mark.asyncio
    async def test_delete_missing(self, provider_service: ProviderService, mock_crud: MagicMock) -> None:
        mock_crud.delete_by_id.return_value = False

        with pytest.raises(NotFoundError):
            await provider_service.delete_provider("nope")


class TestDeleteAll:
    @pytest.mark.asyncio
    async def test_deletes_in_chunks(
        self, provider_service: ProviderService, mock_crud: MagicMock, mock_audit: AsyncMock
    ) -> None:
        mock_crud.get_ids.return_value = [f"p{i}" for i in range(60)]
        mock_crud.delete_by_id.side_effect = lambda provider_id: provider_id != "p59"

        deleted = await provider_service.delete_all_providers("2025", audit_user="admin")

        assert deleted == 59
        assert mock_crud.delete_by_id.call_count == 60
        mock_audit.record.assert_awaited_once_with("PROVIDERS_DELETED", "admin", {"deleted": 59, "year": "2025"})

    @pytest.mark.asyncio
    async def test_count(self, provider_service: ProviderService, mock_crud: MagicMock) -> None:
        mock_crud.get_ids.return_value = ["a", "b"]
        mock_crud.count.return_value = 7

        assert await provider_service.count_providers("2025") == 2
        assert await provider_service.count_providers() == 7
