"""
Contract generation service orchestrator.

Loads provider, template, field mappings and clauses, renders the contract
(DOCX templates through python-docx, HTML templates through the placeholder
merge), archives it in immutable storage and records a generation log.

Dependencies: contract_engine.core (rendering), contract_engine.boundary
(DynamoDB, immutable S3 storage)
System role: Contract generation use case orchestration
"""

import asyncio
import html
import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Literal

from contract_engine.application.services.audit_service import AuditService
from contract_engine.boundary.aws.contract_storage import ImmutableContractStorage, build_contract_id
from contract_engine.boundary.aws.s3_client import S3StorageClient
from contract_engine.boundary.db.CRUD.clause_crud import ClauseCRUD
from contract_engine.boundary.db.CRUD.generation_log_crud import GenerationLogCRUD
from contract_engine.boundary.db.CRUD.mapping_crud import MappingCRUD
from contract_engine.boundary.db.CRUD.provider_crud import ProviderCRUD
from contract_engine.boundary.db.CRUD.template_crud import TemplateCRUD
from contract_engine.boundary.db.base import utc_now_iso
from contract_engine.core.clause_rules import select_applicable_clauses
from contract_engine.core.docx_generator import (
    DOCX_CONTENT_TYPE,
    generate_filename,
    prepare_template_data,
    render_docx,
    render_html_to_docx,
)
from contract_engine.core.dynamic_fields import parse_dynamic_fields
from contract_engine.core.exceptions import ContractEngineException, NotFoundError, ValidationError
from contract_engine.core.fte_breakdown import build_fte_breakdown, render_fte_breakdown
from contract_engine.core.template_processor import merge_template_with_data

logger = logging.getLogger(__name__)

OutputType = Literal["docx", "html"]

STATUS_SUCCESS = "SUCCESS"
STATUS_PARTIAL = "PARTIAL_SUCCESS"
STATUS_FAILED = "FAILED"

HTML_CONTENT_TYPE = "text/html"


@dataclass
class RenderedContract:
    """Document produced for one provider/template pair."""

    body: bytes
    file_name: str
    content_type: str
    warnings: list[str] = field(default_factory=list)


def clauses_html(clauses: list[dict[str, Any]]) -> str:
    """Render selected clauses as an "Additional Provisions" section."""
    if not clauses:
        return ""
    sections = "".join(
        f"<h3>{html.escape(c.get('title') or '')}</h3><p>{html.escape(c.get('text') or '')}</p>"
        for c in clauses
    )
    return f"<h2>Additional Provisions</h2>{sections}"


def clauses_text(clauses: list[dict[str, Any]]) -> str:
    return "\n\n".join(f"{c.get('title') or ''}\n{c.get('text') or ''}".strip() for c in clauses)


def resolve_contract_year(template: dict[str, Any], provider: dict[str, Any]) -> str:
    """Template contract year, else provider compensation year, else the current year."""
    year = template.get("contractYear") or provider.get("compensationYear") or date.today().year
    return str(year)


class ContractService:
    """Contract generation service orchestrator."""

    def __init__(
        self,
        providers: ProviderCRUD,
        templates: TemplateCRUD,
        mappings: MappingCRUD,
        clauses: ClauseCRUD,
        generation_logs: GenerationLogCRUD,
        s3: S3StorageClient,
        storage: ImmutableContractStorage,
        audit: AuditService,
    ) -> None:
        """
        Initialize contract service.

        Args:
            providers: Provider table CRUD
            templates: Template table CRUD
            mappings: Mapping table CRUD
            clauses: Clause table CRUD
            generation_logs: Generation log table CRUD
            s3: Storage bucket client (template files)
            storage: Immutable contract archive
            audit: Audit trail service
        """
        self.providers = providers
        self.templates = templates
        self.mappings = mappings
        self.clauses = clauses
        self.generation_logs = generation_logs
        self.s3 = s3
        self.storage = storage
        self.audit = audit

    async def _load(self, crud, resource: str, id: str) -> dict[str, Any]:
        item = await asyncio.to_thread(crud.get_by_id, id)
        if not item:
            raise NotFoundError(resource, id)
        return item

    def _applicable_clauses(self, provider: dict[str, Any], template: dict[str, Any]) -> list[dict[str, Any]]:
        candidates = [c for c in (self.clauses.get_by_id(cid) for cid in template.get("clauseIds") or []) if c]
        return list(select_applicable_clauses(provider, candidates))

    def _render(
        self,
        provider: dict[str, Any],
        template: dict[str, Any],
        mapping: dict[str, str],
        clauses: list[dict[str, Any]],
        contract_year: str,
        output: OutputType,
    ) -> RenderedContract:
        run_date = date.today().isoformat()
        file_name = generate_filename({**template, "contractYear": contract_year}, provider, run_date)
        breakdown = build_fte_breakdown(provider)
        s3_key = template.get("s3Key") or ""

        if s3_key.lower().endswith(".docx"):
            if output == "html":
                raise ValidationError("DOCX templates can only produce DOCX output", field="outputType")
            data = prepare_template_data(provider, mapping)
            data.setdefault("FTEBreakdown", render_fte_breakdown(breakdown, "text"))
            data.setdefault("Clauses", clauses_text(clauses))
            result = render_docx(self.s3.get_object_bytes(s3_key), data)
            return RenderedContract(result.content, file_name, DOCX_CONTENT_TYPE, list(result.warnings))

        content = template.get("content")
        if not content and s3_key:
            content = self.s3.get_object_bytes(s3_key).decode("utf-8", errors="replace")
        if not content:
            raise ValidationError("Template has no content", field="content")

        merged = merge_template_with_data(provider, content, mapping)
        document = merged.content
        if "{{FTEBreakdown}}" not in content:
            document += render_fte_breakdown(breakdown, "table")
        document += clauses_html(clauses)

        if output == "html":
            return RenderedContract(
                document.encode("utf-8"),
                file_name[: -len(".docx")] + ".html",
                HTML_CONTENT_TYPE,
                list(merged.warnings),
            )
        return RenderedContract(render_html_to_docx(document), file_name, DOCX_CONTENT_TYPE, list(merged.warnings))

    async def generate_contract(
        self,
        provider_id: str,
        template_id: str,
        generated_by: str,
        output: OutputType = "docx",
    ) -> dict[str, Any]:
        """
        Generate, archive and log one contract.

        Args:
            provider_id: Provider ID
            template_id: Template ID
            generated_by: Acting username
            output: "docx" or "html"

        Returns:
            dict: Generated contract (log id, contract id, key, hash, URL, status, warnings)

        Raises:
            NotFoundError: If the provider or template does not exist
            ValidationError: If the template cannot produce the requested output
        """
        contract_year: str | None = None
        try:
            provider = await self._load(self.providers, "Provider", provider_id)
            template = await self._load(self.templates, "Template", template_id)
            contract_year = resolve_contract_year(template, provider)
            mappings = await asyncio.to_thread(self.mappings.get_by_template, template_id)
            mapping = {m["placeholder"]: m["mappedColumn"] for m in mappings}
            clauses = await asyncio.to_thread(self._applicable_clauses, provider, template)

            rendered = await asyncio.to_thread(
                self._render, provider, template, mapping, clauses, contract_year, output
            )

            contract_id = build_contract_id(provider_id, template_id, contract_year)
            snapshot = {**provider, "dynamicFields": parse_dynamic_fields(provider.get("dynamicFields"))}
            stored = await asyncio.to_thread(
                self.storage.store_contract,
                contract_id,
                rendered.file_name,
                rendered.body,
                snapshot,
                template,
                rendered.content_type,
            )
        except ContractEngineException as e:
            await self._log_failure(provider_id, template_id, contract_year, generated_by, output, e)
            raise

        status = STATUS_PARTIAL if rendered.warnings else STATUS_SUCCESS
        log = await asyncio.to_thread(
            self.generation_logs.create,
            providerId=provider_id,
            templateId=template_id,
            contractYear=contract_year,
            generatedAt=stored.generated_at,
            generatedBy=generated_by,
            outputType=output,
            status=status,
            fileUrl=stored.permanent_url,
            notes="; ".join(rendered.warnings) or None,
            contractId=contract_id,
            fileName=stored.file_name,
            s3Key=stored.s3_key,
            fileHash=stored.file_hash,
            storedAt=stored.generated_at,
        )
        logger.info(
            "Contract generated",
            extra={
                "provider_id": provider_id,
                "template_id": template_id,
                "contract_id": contract_id,
                "status": status,
                "warnings": len(rendered.warnings),
            },
        )
        await self.audit.record(
            "CONTRACT_GENERATED",
            generated_by,
            {"provider_id": provider_id, "template_id": template_id, "contract_id": contract_id, "status": status},
        )

        return {
            "log_id": log["id"],
            "contract_id": contract_id,
            "provider_id": provider_id,
            "template_id": template_id,
            "contract_year": contract_year,
            "file_name": stored.file_name,
            "s3_key": stored.s3_key,
            "file_hash": stored.file_hash,
            "download_url": stored.permanent_url,
            "status": status,
            "warnings": rendered.warnings,
            "generated_at": stored.generated_at,
        }

    async def _log_failure(
        self,
        provider_id: str,
        template_id: str,
        contract_year: str | None,
        generated_by: str,
        output: str,
        error: ContractEngineException,
    ) -> None:
        logger.error(
            "Contract generation failed",
            extra={"provider_id": provider_id, "template_id": template_id, "error": error.message},
        )
        await asyncio.to_thread(
            self.generation_logs.create,
            providerId=provider_id,
            templateId=template_id,
            contractYear=contract_year,
            generatedAt=utc_now_iso(),
            generatedBy=generated_by,
            outputType=output,
            status=STATUS_FAILED,
            notes=error.message,
        )

    def _resolve_template_id(self, provider: dict[str, Any]) -> str | None:
        tag = provider.get("templateTag")
        if not tag:
            return None
        template = self.templates.get_by_name(tag) or self.templates.get_by_id(tag)
        return template["id"] if template else None

    async def bulk_generate(
        self,
        provider_ids: list[str],
        generated_by: str,
        template_id: str | None = None,
        output: OutputType = "docx",
    ) -> dict[str, Any]:
        """
        Generate contracts for many providers, one at a time.

        Without template_id each provider's templateTag (template name or id)
        picks the template. Failures are reported per provider.

        Returns:
            dict: total, succeeded, failed and per-provider items
        """
        items: list[dict[str, Any]] = []
        for provider_id in provider_ids:
            item: dict[str, Any] = {"provider_id": provider_id, "success": False, "template_id": template_id}
            try:
                resolved = template_id
                if resolved is None:
                    provider = await self._load(self.providers, "Provider", provider_id)
                    resolved = await asyncio.to_thread(self._resolve_template_id, provider)
                    if resolved is None:
                        raise ValidationError(
                            f"No template assigned to provider {provider_id}", field="templateTag"
                        )
                item["template_id"] = resolved
                result = await self.generate_contract(provider_id, resolved, generated_by, output)
                item.update(success=True, log_id=result["log_id"], status=result["status"])
            except ContractEngineException as e:
                item["error"] = e.message
            items.append(item)

        succeeded = sum(1 for item in items if item["success"])
        logger.info(
            "Bulk generation finished",
            extra={"total": len(items), "succeeded": succeeded, "failed": len(items) - succeeded},
        )
        return {
            "total": len(items),
            "succeeded": succeeded,
            "failed": len(items) - succeeded,
            "items": items,
        }

    async def _stored_log(self, log_id: str) -> dict[str, Any]:
        log = await self._load(self.generation_logs, "ContractGenerationLog", log_id)
        if not (log.get("contractId") and log.get("storedAt") and log.get("fileName")):
            raise ValidationError(f"Generation log {log_id} has no stored contract", field="logId")
        return log

    async def get_download_url(self, log_id: str) -> str:
        """
        Download URL of the contract recorded by a generation log.

        Raises:
            NotFoundError: If the log does not exist
            ValidationError: If the log has no stored contract
            StorageError: If the contract cannot be found in storage
        """
        log = await self._stored_log(log_id)
        return await asyncio.to_thread(
            self.storage.get_download_url, log["contractId"], log["storedAt"], log["fileName"]
        )

    async def verify_contract(self, log_id: str) -> bool:
        """Recompute the stored contract's hash and compare with the archive."""
        log = await self._stored_log(log_id)
        valid = await asyncio.to_thread(
            self.storage.verify_integrity, log["contractId"], log["storedAt"], log["fileName"]
        )
        logger.info("Contract verified", extra={"log_id": log_id, "valid": valid})
        return valid

    async def list_versions(self, provider_id: str, template_id: str, year: str) -> list[dict[str, Any]]:
        """Every archived version of a provider/template/year contract, newest first."""
        contract_id = build_contract_id(provider_id, template_id, year)
        versions = await asyncio.to_thread(self.storage.list_versions, contract_id)
        return [version.model_dump() for version in versions]

    async def list_logs(
        self,
        provider_id: str | None = None,
        year: str | None = None,
        status: str | None = None,
    ) -> list[dict[str, Any]]:
        """Generation logs filtered by provider, year or status, newest first."""
        if provider_id:
            logs = await asyncio.to_thread(self.generation_logs.get_by_provider, provider_id)
        elif year:
            logs = await asyncio.to_thread(self.generation_logs.get_by_contract_year, year)
        elif status:
            logs = await asyncio.to_thread(self.generation_logs.get_by_status, status)
        else:
            logs = await asyncio.to_thread(self.generation_logs.get_all)
        return sorted(logs, key=lambda log: log.get("generatedAt") or "", reverse=True)
