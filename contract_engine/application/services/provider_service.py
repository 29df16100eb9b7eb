"""
Provider service orchestrator.

Coordinates CSV uploads and provider lifecycle operations.

Dependencies: contract_engine.core.csv_upload, contract_engine.boundary.db.CRUD
System role: Provider use case orchestration
"""

import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any

from contract_engine.application.services.audit_service import AuditService
from contract_engine.boundary.db.CRUD.provider_crud import ProviderCRUD
from contract_engine.core.csv_upload import CsvUploadOptions, CsvUploadService
from contract_engine.core.dynamic_fields import parse_dynamic_fields, stringify_dynamic_fields
from contract_engine.core.exceptions import NotFoundError
from contract_engine.core.provider_schema import SYSTEM_FIELDS

logger = logging.getLogger(__name__)

DELETE_CHUNK_SIZE = 25
DELETE_WORKERS = 5


def chunked(items: list, size: int) -> list[list]:
    """Split a list into consecutive chunks."""
    return [items[i:i + size] for i in range(0, len(items), size)]


def to_provider_dict(item: dict[str, Any]) -> dict[str, Any]:
    """Stored provider -> API shape (dynamicFields decoded)."""
    provider = dict(item)
    provider["dynamicFields"] = parse_dynamic_fields(item.get("dynamicFields"))
    return provider


class ProviderService:
    """Provider service orchestrator."""

    def __init__(
        self,
        providers: ProviderCRUD,
        audit: AuditService,
        options: CsvUploadOptions | None = None,
    ) -> None:
        """
        Initialize provider service.

        Args:
            providers: Provider table CRUD
            audit: Audit trail service
            options: Default CSV upload options
        """
        self.providers = providers
        self.audit = audit
        self.options = options or CsvUploadOptions()

    async def upload_csv(
        self,
        content: str | bytes,
        owner: str,
        replace_year: bool = False,
        options: CsvUploadOptions | None = None,
    ) -> dict[str, Any]:
        """
        Validate a provider CSV and write the valid rows.

        Rows matching an existing employee/year are updated in place.
        With replace_year, every existing provider of the uploaded years is
        deleted first.

        Args:
            content: Raw CSV content
            owner: Uploading username
            replace_year: Replace all providers of the uploaded years
            options: Upload options (defaults to the service options)

        Returns:
            dict: Upload summary with errors and column analysis
        """
        options = options or self.options
        result = CsvUploadService(options).parse_and_validate(content)

        summary: dict[str, Any] = {
            "success": result.success,
            **result.summary.model_dump(),
            "created": 0,
            "replaced": 0,
            "validate_only": options.validate_only,
            "errors": result.errors,
            "column_analysis": result.column_analysis,
        }
        if options.validate_only or not result.data:
            logger.info(
                "CSV upload not written",
                extra={"validate_only": options.validate_only, "valid_rows": len(result.data)},
            )
            return summary

        years = sorted({str(row["compensationYear"]) for row in result.data})
        if replace_year:
            for year in years:
                deleted = await self.delete_all_providers(year, audit_user=None)
                summary["replaced"] += deleted

        existing_by_key: dict[tuple[str, str], dict[str, Any]] = {}
        if not replace_year:
            for year in years:
                for existing in await asyncio.to_thread(self.providers.get_by_compensation_year, year):
                    existing_by_key[(str(existing.get("employeeId")), year)] = existing

        new_items: list[dict[str, Any]] = []
        for row in result.data:
            item = {k: v for k, v in row.items() if k not in SYSTEM_FIELDS}
            item["dynamicFields"] = stringify_dynamic_fields(row.get("dynamicFields"))
            item["owner"] = owner

            existing = existing_by_key.get((str(item["employeeId"]), str(item["compensationYear"])))
            if existing:
                await asyncio.to_thread(self.providers.update_by_id, existing["id"], **item)
                summary["replaced"] += 1
            else:
                new_items.append(item)

        for batch in chunked(new_items, options.batch_size):
            created = await asyncio.to_thread(self.providers.create_many, batch)
            summary["created"] += len(created)

        logger.info(
            "Providers uploaded",
            extra={"created_count": summary["created"], "replaced_count": summary["replaced"], "years": years},
        )
        await self.audit.record(
            "PROVIDERS_UPLOADED",
            owner,
            {
                "created": summary["created"],
                "replaced": summary["replaced"],
                "years": years,
                "errors": len(result.errors),
            },
        )
        return summary

    async def list_providers(self, year: str | None = None) -> list[dict[str, Any]]:
        """List providers, optionally for one compensation year, sorted by name."""
        if year:
            items = await asyncio.to_thread(self.providers.get_by_compensation_year, year)
        else:
            items = await asyncio.to_thread(self.providers.get_all)
        providers = [to_provider_dict(item) for item in items]
        return sorted(providers, key=lambda p: (p.get("name") or "").lower())

    async def get_provider(self, provider_id: str) -> dict[str, Any]:
        """
        Get provider by ID.

        Raises:
            NotFoundError: If provider not found
        """
        item = await asyncio.to_thread(self.providers.get_by_id, provider_id)
        if not item:
            raise NotFoundError("Provider", provider_id)
        return to_provider_dict(item)

    async def update_provider(self, provider_id: str, fields: dict[str, Any]) -> dict[str, Any]:
        """
        Update provider attributes.

        Raises:
            NotFoundError: If provider not found
        """
        updates = {k: v for k, v in fields.items() if k not in SYSTEM_FIELDS}
        if "dynamicFields" in updates:
            updates["dynamicFields"] = stringify_dynamic_fields(updates["dynamicFields"])

        item = await asyncio.to_thread(self.providers.update_by_id, provider_id, **updates)
        if not item:
            raise NotFoundError("Provider", provider_id)
        logger.info("Provider updated", extra={"provider_id": provider_id, "fields": list(updates)})
        return to_provider_dict(item)

    async def delete_provider(self, provider_id: str) -> None:
        """
        Delete provider.

        Raises:
            NotFoundError: If provider not found
        """
        if not await asyncio.to_thread(self.providers.delete_by_id, provider_id):
            raise NotFoundError("Provider", provider_id)
        logger.info("Provider deleted", extra={"provider_id": provider_id})

    def _delete_chunked(self, ids: list[str]) -> int:
        deleted = 0
        with ThreadPoolExecutor(max_workers=DELETE_WORKERS) as pool:
            for index, chunk in enumerate(chunked(ids, DELETE_CHUNK_SIZE)):
                results = list(pool.map(self.providers.delete_by_id, chunk))
                deleted += sum(1 for ok in results if ok)
                logger.debug("Provider chunk deleted", extra={"chunk": index, "size": len(chunk)})
        return deleted

    async def delete_all_providers(self, year: str | None = None, audit_user: str | None = "system") -> int:
        """
        Delete every provider, or every provider of one year.

        Deletes run in chunks of 25 with a small thread pool per chunk.

        Returns:
            int: Number of providers deleted
        """
        ids = await asyncio.to_thread(self.providers.get_ids, year)
        deleted = await asyncio.to_thread(self._delete_chunked, ids)
        logger.warning("Providers deleted", extra={"deleted": deleted, "year": year})
        if audit_user:
            await self.audit.record("PROVIDERS_DELETED", audit_user, {"deleted": deleted, "year": year})
        return deleted

    async def count_providers(self, year: str | None = None) -> int:
        """Count providers, optionally for one year."""
        if year:
            return len(await asyncio.to_thread(self.providers.get_ids, year))
        return await asyncio.to_thread(self.providers.count)
