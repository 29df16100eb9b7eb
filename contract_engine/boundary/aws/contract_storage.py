"""
Immutable contract storage on S3.

Every generated contract is written once under
contracts/immutable/{contractId}/{timestamp}/{fileName} together with a
metadata JSON (provider/template snapshots and SHA-256 hash) under
contracts/metadata/{contractId}/{timestamp}.json. Objects are never
overwritten; a regenerated contract is a new timestamped version.

Dependencies: boto3 (via S3StorageClient), pydantic
System role: Authoritative archive of generated contracts
"""

import hashlib
import json
import logging
from datetime import datetime, timezone
from typing import Any

from pydantic import Field

from contract_engine.boundary.aws.s3_client import S3StorageClient
from contract_engine.boundary.db.base import utc_now_iso
from contract_engine.configs.s3_storage import S3StorageSettings
from contract_engine.core.exceptions import AwsServiceError, StorageError
from contract_engine.core.docx_generator import DOCX_CONTENT_TYPE
from contract_engine.models.common import CamelModel

logger = logging.getLogger(__name__)

STORAGE_VERSION = "1.0.0"


def build_contract_id(provider_id: str, template_id: str, contract_year: str | int) -> str:
    """Contract id shared by every version: {providerId}-{templateId}-{contractYear}."""
    return f"{provider_id}-{template_id}-{contract_year}"


def sha256_hex(body: bytes) -> str:
    return hashlib.sha256(body).hexdigest()


def to_iso(moment: datetime | None) -> str | None:
    """UTC ISO timestamp in the archive format, e.g. "2025-01-31T12:00:00.123Z"."""
    if moment is None:
        return None
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class ImmutableContract(CamelModel):
    """A stored contract version with its snapshots."""

    contract_id: str
    file_name: str
    s3_key: str
    provider_data: dict[str, Any] = Field(default_factory=dict)
    template_data: dict[str, Any] = Field(default_factory=dict)
    generated_at: str
    version: str = STORAGE_VERSION
    permanent_url: str | None = None
    permanent_url_expires_at: str | None = None
    file_hash: str
    file_size: int = 0


class ContractVersion(CamelModel):
    """Summary of one stored version."""

    contract_id: str
    provider_id: str | None = None
    provider_name: str | None = None
    template_id: str | None = None
    template_name: str | None = None
    generated_at: str
    file_name: str | None = None
    status: str = "SUCCESS"
    file_size: int | None = None
    permanent_url: str | None = None
    version: str = STORAGE_VERSION


class ImmutableContractStorage:
    """Write-once contract archive."""

    def __init__(self, s3_client: S3StorageClient, settings: S3StorageSettings) -> None:
        """
        Initialize storage.

        Args:
            s3_client: Client bound to the storage bucket
            settings: Prefixes and URL expiry
        """
        self._s3 = s3_client
        self._settings = settings

    def contract_key(self, contract_id: str, timestamp: str, file_name: str) -> str:
        return f"{self._settings.contracts_prefix}{contract_id}/{timestamp}/{file_name}"

    def metadata_key(self, contract_id: str, timestamp: str) -> str:
        return f"{self._settings.metadata_prefix}{contract_id}/{timestamp}.json"

    def store_contract(
        self,
        contract_id: str,
        file_name: str,
        body: bytes,
        provider_snapshot: dict[str, Any],
        template_snapshot: dict[str, Any],
        content_type: str = DOCX_CONTENT_TYPE,
    ) -> ImmutableContract:
        """
        Store a new contract version.

        Args:
            contract_id: Contract id (see build_contract_id)
            file_name: Download file name
            body: Document bytes
            provider_snapshot: Provider record at generation time
            template_snapshot: Template record at generation time
            content_type: MIME type of the document

        Returns:
            ImmutableContract: Stored version with hash and URL
        """
        timestamp = utc_now_iso()
        key = self.contract_key(contract_id, timestamp, file_name)
        metadata_key = self.metadata_key(contract_id, timestamp)
        file_hash = sha256_hex(body)

        self._s3.put_object(
            key,
            body,
            content_type=content_type,
            metadata={
                "contract-id": contract_id,
                "generated-at": timestamp,
                "version": STORAGE_VERSION,
                "file-hash": file_hash,
                "immutable": "true",
            },
        )

        permanent_url, url_expires_at = self._s3.generate_presigned_download_url(
            key,
            expires_in=self._settings.permanent_url_expiry,
            file_name=file_name,
        )

        contract = ImmutableContract(
            contract_id=contract_id,
            file_name=file_name,
            s3_key=key,
            provider_data=provider_snapshot,
            template_data=template_snapshot,
            generated_at=timestamp,
            permanent_url=permanent_url,
            permanent_url_expires_at=to_iso(url_expires_at),
            file_hash=file_hash,
            file_size=len(body),
        )

        self._s3.put_object(
            metadata_key,
            json.dumps(contract.model_dump(by_alias=True), default=str).encode("utf-8"),
            content_type="application/json",
            metadata={
                "contract-id": contract_id,
                "generated-at": timestamp,
                "version": STORAGE_VERSION,
            },
        )

        logger.info(
            "Contract stored",
            extra={"contract_id": contract_id, "key": key, "size": len(body)},
        )
        return contract

    def get_contract_metadata(self, contract_id: str, timestamp: str) -> ImmutableContract | None:
        """Load a version's metadata, or None if it does not exist."""
        metadata_key = self.metadata_key(contract_id, timestamp)
        if not self._s3.file_exists(metadata_key):
            return None
        raw = self._s3.get_object_bytes(metadata_key)
        return ImmutableContract.model_validate(json.loads(raw))

    def get_download_url(self, contract_id: str, timestamp: str, file_name: str) -> str:
        """
        Get a download URL for a version.

        Uses the stored URL while it is still valid, otherwise presigns a new
        one. Presigned URLs live at most 7 days, so older versions always get a
        fresh URL.

        Raises:
            StorageError: If the contract cannot be found or presigned
        """
        key = self.contract_key(contract_id, timestamp, file_name)
        try:
            metadata = self.get_contract_metadata(contract_id, timestamp)
            if metadata and metadata.permanent_url and (metadata.permanent_url_expires_at or "") > utc_now_iso():
                return metadata.permanent_url
            if not self._s3.file_exists(key):
                raise StorageError("Contract not found or inaccessible", key=key, operation="get_download_url")
            url, _ = self._s3.generate_presigned_download_url(
                key,
                expires_in=self._settings.permanent_url_expiry,
                file_name=file_name,
            )
            return url
        except AwsServiceError as e:
            raise StorageError(
                "Contract not found or inaccessible",
                key=key,
                operation="get_download_url",
                details={"code": e.code},
            ) from e

    def verify_integrity(self, contract_id: str, timestamp: str, file_name: str) -> bool:
        """Recompute the SHA-256 of a stored file and compare it with the recorded hash."""
        key = self.contract_key(contract_id, timestamp, file_name)
        metadata = self.get_contract_metadata(contract_id, timestamp)
        if metadata is None or not self._s3.file_exists(key):
            logger.warning("Integrity check on missing contract", extra={"key": key})
            return False

        current_hash = sha256_hex(self._s3.get_object_bytes(key))
        valid = current_hash == metadata.file_hash
        if not valid:
            logger.error(
                "Contract hash mismatch",
                extra={"contract_id": contract_id, "timestamp": timestamp},
            )
        return valid

    def list_versions(self, contract_id: str) -> list[ContractVersion]:
        """List every stored version of a contract, newest first."""
        versions: list[ContractVersion] = []
        for key in self._s3.list_keys(f"{self._settings.metadata_prefix}{contract_id}/"):
            if not key.endswith(".json"):
                continue
            timestamp = key.rsplit("/", 1)[-1][: -len(".json")]
            metadata = self.get_contract_metadata(contract_id, timestamp)
            if metadata is None:
                continue
            versions.append(ContractVersion(
                contract_id=metadata.contract_id,
                provider_id=metadata.provider_data.get("id"),
                provider_name=metadata.provider_data.get("name"),
                template_id=metadata.template_data.get("id"),
                template_name=metadata.template_data.get("name"),
                generated_at=metadata.generated_at,
                file_name=metadata.file_name,
                file_size=metadata.file_size,
                permanent_url=metadata.permanent_url,
                version=metadata.version,
            ))
        return sorted(versions, key=lambda v: v.generated_at, reverse=True)

    def test_connection(self) -> dict[str, Any]:
        """Check the bucket is reachable and report the configured prefixes."""
        result: dict[str, Any] = {
            "bucket": self._s3.bucket,
            "contracts_prefix": self._settings.contracts_prefix,
            "metadata_prefix": self._settings.metadata_prefix,
        }
        try:
            self._s3.head_bucket()
        except AwsServiceError as e:
            logger.error("S3 connection test failed", extra={"code": e.code})
            return {**result, "success": False, "error": e.message, "code": e.code, "hints": e.hints}
        return {**result, "success": True}
