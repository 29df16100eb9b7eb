"""
Template service orchestrator.

Coordinates template lifecycle, template file storage and placeholder
field mappings.

Dependencies: contract_engine.boundary (DynamoDB, S3), contract_engine.core
System role: Template use case orchestration
"""

import asyncio
import logging
import mimetypes
from typing import Any

from contract_engine.application.services.audit_service import AuditService
from contract_engine.boundary.aws.s3_client import S3StorageClient
from contract_engine.boundary.db.base import new_id
from contract_engine.boundary.db.CRUD.mapping_crud import MappingCRUD
from contract_engine.boundary.db.CRUD.template_crud import TemplateCRUD
from contract_engine.configs.s3_storage import S3StorageSettings
from contract_engine.core.docx_generator import DOCX_CONTENT_TYPE, extract_docx_text
from contract_engine.core.exceptions import NotFoundError, StorageError, ValidationError
from contract_engine.core.template_processor import extract_placeholders, validate_template

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = (".docx", ".html", ".htm")


def _extension(file_name: str) -> str:
    lowered = file_name.lower()
    return next((ext for ext in ALLOWED_EXTENSIONS if lowered.endswith(ext)), "")


def placeholders_from_file(file_bytes: bytes, file_name: str) -> list[str]:
    """
    Extract placeholders from an uploaded template file.

    Raises:
        ValidationError: If the file type is not supported
    """
    extension = _extension(file_name)
    if extension == ".docx":
        return extract_placeholders(extract_docx_text(file_bytes))
    if extension in (".html", ".htm"):
        return extract_placeholders(file_bytes.decode("utf-8", errors="replace"))
    raise ValidationError(
        f"Unsupported template file type: {file_name}",
        field="file",
        details={"allowed": list(ALLOWED_EXTENSIONS)},
    )


class TemplateService:
    """Template service orchestrator."""

    def __init__(
        self,
        templates: TemplateCRUD,
        mappings: MappingCRUD,
        s3: S3StorageClient,
        settings: S3StorageSettings,
        audit: AuditService,
    ) -> None:
        """
        Initialize template service.

        Args:
            templates: Template table CRUD
            mappings: Mapping table CRUD
            s3: Storage bucket client
            settings: Storage prefixes
            audit: Audit trail service
        """
        self.templates = templates
        self.mappings = mappings
        self.s3 = s3
        self.settings = settings
        self.audit = audit

    def _template_key(self, template_id: str, file_name: str) -> str:
        return f"{self.settings.templates_prefix}{template_id}/{file_name}"

    def _store_file(self, template_id: str, file_bytes: bytes, file_name: str) -> str:
        key = self._template_key(template_id, file_name)
        if _extension(file_name) == ".docx":
            content_type = DOCX_CONTENT_TYPE
        else:
            content_type = mimetypes.guess_type(file_name)[0] or "text/html"
        self.s3.put_object(key, file_bytes, content_type=content_type, metadata={"template-id": template_id})
        return key

    async def create_template(
        self,
        name: str,
        owner: str,
        version: str = "1.0.0",
        type: str = "Schedule A",
        contract_year: str | None = None,
        description: str | None = None,
        content: str | None = None,
        clause_ids: list[str] | None = None,
        file_bytes: bytes | None = None,
        file_name: str | None = None,
    ) -> dict[str, Any]:
        """
        Create a template from HTML content and/or an uploaded file.

        Placeholders come from the HTML content, or from the file when no
        content is given.

        Returns:
            dict: Created template

        Raises:
            ValidationError: If the definition or file is invalid
        """
        valid, errors = validate_template({"name": name, "version": version, "type": type})
        if not valid:
            raise ValidationError("Invalid template", details={"errors": errors})
        if not content and not file_bytes:
            raise ValidationError("Template needs HTML content or a file", field="content")

        template_id = new_id()
        placeholders = extract_placeholders(content) if content else []
        s3_key = None
        if file_bytes is not None:
            file_name = file_name or "template.docx"
            file_placeholders = await asyncio.to_thread(placeholders_from_file, file_bytes, file_name)
            placeholders = placeholders or file_placeholders
            s3_key = await asyncio.to_thread(self._store_file, template_id, file_bytes, file_name)

        template = await asyncio.to_thread(
            self.templates.create,
            id=template_id,
            name=name,
            description=description,
            version=version,
            type=type,
            contractYear=contract_year,
            content=content,
            s3Key=s3_key,
            placeholders=placeholders,
            clauseIds=clause_ids or [],
            owner=owner,
        )
        logger.info(
            "Template created",
            extra={"template_id": template_id, "template_name": name, "placeholders": len(placeholders)},
        )
        await self.audit.record("TEMPLATE_CREATED", owner, {"template_id": template_id, "name": name})
        return template

    async def list_templates(self, year: str | None = None) -> list[dict[str, Any]]:
        if year:
            items = await asyncio.to_thread(self.templates.get_by_contract_year, year)
        else:
            items = await asyncio.to_thread(self.templates.get_all)
        return sorted(items, key=lambda t: t.get("createdAt", ""), reverse=True)

    async def get_template(self, template_id: str) -> dict[str, Any]:
        """
        Get template by ID.

        Raises:
            NotFoundError: If template not found
        """
        template = await asyncio.to_thread(self.templates.get_by_id, template_id)
        if not template:
            raise NotFoundError("Template", template_id)
        return template

    async def update_template(self, template_id: str, fields: dict[str, Any]) -> dict[str, Any]:
        """
        Update template attributes. New HTML content re-extracts placeholders.

        Raises:
            NotFoundError: If template not found
            ValidationError: If the merged definition is invalid
        """
        current = await self.get_template(template_id)
        merged = {**current, **{k: v for k, v in fields.items() if v is not None}}
        valid, errors = validate_template(
            {"name": merged.get("name"), "version": merged.get("version"), "type": merged.get("type")}
        )
        if not valid:
            raise ValidationError("Invalid template", details={"errors": errors})

        updates = {k: v for k, v in fields.items() if v is not None}
        if "content" in updates:
            updates["placeholders"] = extract_placeholders(updates["content"])

        template = await asyncio.to_thread(self.templates.update_by_id, template_id, **updates)
        if not template:
            raise NotFoundError("Template", template_id)
        logger.info("Template updated", extra={"template_id": template_id, "fields": list(updates)})
        return template

    async def upload_template_file(
        self,
        template_id: str,
        file_bytes: bytes,
        file_name: str,
        owner: str | None = None,
    ) -> dict[str, Any]:
        """Replace a template's stored file and refresh its placeholders."""
        current = await self.get_template(template_id)
        placeholders = await asyncio.to_thread(placeholders_from_file, file_bytes, file_name)
        key = await asyncio.to_thread(self._store_file, template_id, file_bytes, file_name)

        updates: dict[str, Any] = {"s3Key": key}
        if not current.get("content"):
            updates["placeholders"] = placeholders
        template = await asyncio.to_thread(self.templates.update_by_id, template_id, **updates)
        logger.info("Template file uploaded", extra={"template_id": template_id, "key": key})
        await self.audit.record("TEMPLATE_FILE_UPLOADED", owner, {"template_id": template_id, "key": key})
        return template or current

    async def get_template_file(self, template_id: str) -> tuple[bytes, str]:
        """
        Load a template's stored file.

        Returns:
            tuple[bytes, str]: (content, file name)

        Raises:
            StorageError: If the template has no stored file
        """
        template = await self.get_template(template_id)
        key = template.get("s3Key")
        if not key:
            raise StorageError("Template has no stored file", operation="get_template_file")
        return await asyncio.to_thread(self.s3.get_object_bytes, key), key.rsplit("/", 1)[-1]

    async def get_template_file_url(self, template_id: str) -> dict[str, str]:
        """Presigned download URL of a template's stored file."""
        template = await self.get_template(template_id)
        key = template.get("s3Key")
        if not key:
            raise StorageError("Template has no stored file", operation="get_template_file_url")
        url, _ = await asyncio.to_thread(
            self.s3.generate_presigned_download_url, key, expires_in=self.settings.presigned_url_expiry
        )
        return {"template_id": template_id, "s3_key": key, "download_url": url}

    async def delete_template(self, template_id: str, owner: str | None = None) -> None:
        """
        Delete a template, its stored files and its mappings.

        Raises:
            NotFoundError: If template not found
        """
        await self.get_template(template_id)
        await asyncio.to_thread(self.s3.delete_prefix, f"{self.settings.templates_prefix}{template_id}/")
        removed_mappings = await asyncio.to_thread(self.mappings.delete_by_template, template_id)
        await asyncio.to_thread(self.templates.delete_by_id, template_id)
        logger.info(
            "Template deleted",
            extra={"template_id": template_id, "mappings_removed": removed_mappings},
        )
        await self.audit.record("TEMPLATE_DELETED", owner, {"template_id": template_id})

    async def get_placeholders(self, template_id: str) -> list[str]:
        """Placeholders of a template, re-extracted from content when not stored."""
        template = await self.get_template(template_id)
        if template.get("placeholders"):
            return list(template["placeholders"])
        if template.get("content"):
            return extract_placeholders(template["content"])
        if template.get("s3Key"):
            file_bytes, file_name = await self.get_template_file(template_id)
            return await asyncio.to_thread(placeholders_from_file, file_bytes, file_name)
        return []

    async def set_mappings(self, template_id: str, mappings: list[dict[str, str]]) -> list[dict[str, Any]]:
        """
        Replace a template's field mappings.

        Args:
            template_id: Template ID
            mappings: [{"placeholder", "mappedColumn"}]

        Raises:
            NotFoundError: If template not found
            ValidationError: If a placeholder is mapped twice
        """
        await self.get_template(template_id)
        placeholders = [m["placeholder"] for m in mappings]
        duplicates = sorted({p for p in placeholders if placeholders.count(p) > 1})
        if duplicates:
            raise ValidationError("Placeholder mapped more than once", field="placeholder", details={"duplicates": duplicates})

        items = [
            {"templateId": template_id, "placeholder": m["placeholder"], "mappedColumn": m["mappedColumn"]}
            for m in mappings
        ]
        await asyncio.to_thread(self.mappings.delete_by_template, template_id)
        created = await asyncio.to_thread(self.mappings.create_many, items)
        logger.info("Mappings set", extra={"template_id": template_id, "count": len(created)})
        return created

    async def get_mappings(self, template_id: str) -> list[dict[str, Any]]:
        return await asyncio.to_thread(self.mappings.get_by_template, template_id)

    async def get_mapping_dict(self, template_id: str) -> dict[str, str]:
        """Mappings of a template as {placeholder: mappedColumn}."""
        return {m["placeholder"]: m["mappedColumn"] for m in await self.get_mappings(template_id)}
