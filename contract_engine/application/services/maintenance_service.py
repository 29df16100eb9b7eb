"""
Maintenance service.

Operational checks and one-off data repairs run by hand against the AWS
services: Cognito email configuration, S3 contract cleanup, orphaned
contract detection, record owner fixes and provider attribute cleanup.

Every mutating operation supports a dry run and returns a report dict that
the admin CLI prints.

Dependencies: contract_engine.boundary (Cognito, S3, DynamoDB)
System role: Operational command use cases
"""

import asyncio
import logging
from collections import Counter
from typing import Any

from contract_engine.boundary.aws.cognito_client import CognitoAdminClient, attributes_to_dict
from contract_engine.boundary.aws.contract_storage import ImmutableContractStorage
from contract_engine.boundary.aws.s3_client import S3StorageClient
from contract_engine.boundary.db.registry import TableRegistry
from contract_engine.configs.settings import Settings
from contract_engine.core.exceptions import ValidationError
from contract_engine.core.fte_breakdown import FTE_COMPONENTS

logger = logging.getLogger(__name__)

OWNED_MODELS = ("Provider", "Clause", "Template", "DynamicBlock")
FTE_FIELDS = tuple(key for key, _ in FTE_COMPONENTS) + ("totalFTE",)
CONTRACT_STATUSES = ("SUCCESS", "PARTIAL_SUCCESS", "FAILED")
COGNITO_DAILY_EMAIL_LIMIT = 50


def contract_id_from_key(key: str, prefix: str) -> str | None:
    """
    Contract id of an archived object key, None for keys outside the layout.

    Keys look like {prefix}{contractId}/{timestamp}/{fileName}.
    """
    if not prefix.endswith("/"):
        prefix += "/"
    if not key.startswith(prefix):
        return None
    parts = key[len(prefix):].split("/")
    if len(parts) < 3 or not parts[0]:
        return None
    return parts[0]


class MaintenanceService:
    """Operational command use cases."""

    def __init__(
        self,
        registry: TableRegistry,
        s3: S3StorageClient,
        cognito: CognitoAdminClient,
        storage: ImmutableContractStorage,
        settings: Settings,
    ) -> None:
        """
        Initialize maintenance service.

        Args:
            registry: Repositories for every table
            s3: Storage bucket client
            cognito: User pool admin client
            storage: Immutable contract archive
            settings: Application settings
        """
        self.registry = registry
        self.s3 = s3
        self.cognito = cognito
        self.storage = storage
        self.settings = settings

    async def check_cognito_email_config(self) -> dict[str, Any]:
        """
        Inspect how the user pool sends email.

        Returns:
            dict: Pool identity, email configuration, message templates,
            detected problems and hints
        """
        pool = await asyncio.to_thread(self.cognito.describe_user_pool)
        email_config = pool.get("EmailConfiguration") or {}
        invite = (pool.get("AdminCreateUserConfig") or {}).get("InviteMessageTemplate") or {}
        verification = pool.get("VerificationMessageTemplate") or {}

        problems: list[str] = []
        hints: list[str] = []
        sending_account = email_config.get("EmailSendingAccount", "COGNITO_DEFAULT")
        if not email_config:
            problems.append("Email is not configured in the user pool")
            hints.append("Configure email in the Cognito console under Messaging")
        elif sending_account == "COGNITO_DEFAULT":
            problems.append(
                f"Pool uses the Cognito default sender (limited to {COGNITO_DAILY_EMAIL_LIMIT} emails per day)"
            )
            hints.append("Switch the pool to DEVELOPER sending with a verified SES identity")
        elif sending_account == "DEVELOPER" and not email_config.get("SourceArn"):
            problems.append("DEVELOPER sending is enabled but no SES SourceArn is set")
            hints.append("Set EmailConfiguration.SourceArn to the verified SES identity ARN")

        invite_message = invite.get("EmailMessage")
        if invite_message and "{####}" not in invite_message:
            problems.append("Invite message does not contain the {####} temporary password code")
            hints.append("Add {####} and {username} to the invite email template")

        if not problems:
            hints.extend([
                "If emails are not received, check spam folders",
                "Check the recipient address is verified while SES is in sandbox mode",
                "Check the SES sending quota",
            ])

        report = {
            "name": pool.get("Name"),
            "id": pool.get("Id"),
            "status": pool.get("Status"),
            "email_configuration": {
                "configured": bool(email_config),
                "sending_account": sending_account if email_config else None,
                "from": email_config.get("From"),
                "reply_to": email_config.get("ReplyToEmailAddress"),
                "source_arn": email_config.get("SourceArn"),
            },
            "invite_template": {
                "subject": invite.get("EmailSubject") or "Default",
                "message": invite_message or "Default",
            },
            "verification_message": {
                "subject": verification.get("EmailSubject") or pool.get("EmailVerificationSubject"),
                "message": verification.get("EmailMessage") or pool.get("EmailVerificationMessage"),
            },
            "problems": problems,
            "hints": hints,
        }
        logger.info("Cognito email config checked", extra={"pool_id": pool.get("Id"), "problems": len(problems)})
        return report

    async def cleanup_s3_contracts(self, prefix: str | None = None, dry_run: bool = True) -> dict[str, Any]:
        """Delete every object under a contracts prefix (dry run by default)."""
        prefix = prefix or self.settings.s3_storage.contracts_prefix
        if not prefix.strip("/"):
            raise ValidationError("Refusing to clean the bucket root", field="prefix")
        return await asyncio.to_thread(self.s3.delete_prefix, prefix, dry_run=dry_run)

    async def find_orphaned_contracts(self, delete: bool = False) -> dict[str, Any]:
        """
        Compare archived contracts in S3 with the generation logs.

        Contract ids are the first path segment below the contracts prefix:
        {contracts_prefix}{contractId}/{timestamp}/{fileName}.

        Args:
            delete: Delete the S3 objects that have no generation log

        Returns:
            dict: matching, s3_only and dynamo_only contract ids, the log status
            distribution and, when deleting, the delete result
        """
        prefix = self.settings.s3_storage.contracts_prefix
        s3_keys_by_contract: dict[str, list[str]] = {}
        for key in await asyncio.to_thread(self.s3.list_keys, prefix):
            contract_id = contract_id_from_key(key, prefix)
            if contract_id:
                s3_keys_by_contract.setdefault(contract_id, []).append(key)

        logs = await asyncio.to_thread(self.registry.generation_logs.get_all)
        status_distribution = Counter(log.get("status") or "UNKNOWN" for log in logs)
        logged_ids = {log["contractId"] for log in logs if log.get("contractId")}
        s3_ids = set(s3_keys_by_contract)

        report: dict[str, Any] = {
            "matching": sorted(s3_ids & logged_ids),
            "s3_only": sorted(s3_ids - logged_ids),
            "dynamo_only": sorted(logged_ids - s3_ids),
            "status_distribution": dict(status_distribution),
            "deleted": 0,
            "failed": [],
        }
        if delete and report["s3_only"]:
            keys = [key for cid in report["s3_only"] for key in s3_keys_by_contract[cid]]
            report["deleted"], report["failed"] = await asyncio.to_thread(self.s3.delete_keys, keys)

        logger.info(
            "Orphaned contracts checked",
            extra={
                "matching": len(report["matching"]),
                "s3_only": len(report["s3_only"]),
                "dynamo_only": len(report["dynamo_only"]),
                "deleted": report["deleted"],
            },
        )
        return report

    async def fix_record_owners(self, model: str, target_owner: str, dry_run: bool = True) -> dict[str, Any]:
        """
        Reassign the owner of every record of a model.

        Raises:
            ValidationError: If the model has no owner field
        """
        if model not in OWNED_MODELS:
            raise ValidationError(
                f"Model {model} has no owner field",
                field="model",
                details={"allowed": list(OWNED_MODELS)},
            )
        crud = self.registry.by_model(model)
        items = await asyncio.to_thread(crud.get_all)
        to_fix = [item for item in items if item.get("owner") != target_owner]

        updated = 0
        if not dry_run:
            for item in to_fix:
                if await asyncio.to_thread(crud.update_by_id, item["id"], owner=target_owner):
                    updated += 1

        logger.info(
            "Record owners checked",
            extra={"model": model, "to_fix": len(to_fix), "updated": updated, "dry_run": dry_run},
        )
        return {
            "model": model,
            "target_owner": target_owner,
            "to_fix": len(to_fix),
            "updated": updated,
            "previous_owners": dict(Counter(item.get("owner") or "<none>" for item in to_fix)),
            "dry_run": dry_run,
        }

    async def remove_provider_attributes(self, names: list[str], dry_run: bool = True) -> dict[str, Any]:
        """Remove stale attributes (e.g. dynamicFields) from every provider that has them."""
        if not names:
            raise ValidationError("No attribute names given", field="names")
        providers = self.registry.providers
        items = await asyncio.to_thread(providers.get_all)
        affected = [item for item in items if any(name in item for name in names)]

        if not dry_run:
            for item in affected:
                await asyncio.to_thread(
                    providers.table.remove_attributes, item["id"], [name for name in names if name in item]
                )

        logger.info(
            "Provider attributes cleaned",
            extra={"names": names, "affected": len(affected), "dry_run": dry_run},
        )
        return {"names": names, "affected": len(affected), "updated": 0 if dry_run else len(affected), "dry_run": dry_run}

    async def fix_contract_status(self, from_status: str, to_status: str) -> dict[str, Any]:
        """Move every generation log from one status to another, noting the fix."""
        for status in (from_status, to_status):
            if status not in CONTRACT_STATUSES:
                raise ValidationError(f"Unknown contract status: {status}", field="status")

        logs = await asyncio.to_thread(self.registry.generation_logs.get_by_status, from_status)
        updated = 0
        for log in logs:
            note = f"[AUTO-FIXED: status updated from {from_status} to {to_status}]"
            notes = f"{log.get('notes') or ''} {note}".strip()
            if await asyncio.to_thread(
                self.registry.generation_logs.update_by_id, log["id"], status=to_status, notes=notes
            ):
                updated += 1

        logger.info(
            "Contract statuses fixed",
            extra={"from_status": from_status, "to_status": to_status, "found": len(logs), "updated": updated},
        )
        return {"from_status": from_status, "to_status": to_status, "found": len(logs), "updated": updated}

    async def check_user_status(self, username: str) -> dict[str, Any]:
        """Cognito status, verification and groups of one user, with hints."""
        user = await asyncio.to_thread(self.cognito.get_user, username)
        attributes = attributes_to_dict(user.get("UserAttributes"))
        groups = await asyncio.to_thread(self.cognito.list_groups_for_user, username)

        hints: list[str] = []
        status = user.get("UserStatus")
        if status == "FORCE_CHANGE_PASSWORD":
            hints.append("User has not signed in yet; run force-password-reset if the invite was lost")
        if status == "RESET_REQUIRED":
            hints.append("User must complete a password reset before signing in")
        if not user.get("Enabled", True):
            hints.append("User is disabled")
        if attributes.get("email_verified") != "true":
            hints.append("Email address is not verified")
        if self.settings.cognito.admin_group not in groups:
            hints.append(f"User is not in the {self.settings.cognito.admin_group} group")

        return {
            "username": user.get("Username", username),
            "status": status,
            "enabled": user.get("Enabled", True),
            "email": attributes.get("email"),
            "email_verified": attributes.get("email_verified") == "true",
            "groups": groups,
            "hints": hints,
        }

    async def provider_field_report(self, fields: list[str] | None = None) -> dict[str, Any]:
        """Count how many providers have each field populated (FTE fields by default)."""
        fields = list(fields or FTE_FIELDS)
        providers = await asyncio.to_thread(self.registry.providers.get_all)
        populated = {
            name: sum(1 for item in providers if item.get(name) not in (None, ""))
            for name in fields
        }
        return {"total": len(providers), "populated": populated}

    async def check_s3(self) -> dict[str, Any]:
        """Bucket connectivity plus object counts under the storage prefixes."""
        result = await asyncio.to_thread(self.storage.test_connection)
        if result["success"]:
            s3_settings = self.settings.s3_storage
            result["object_counts"] = {}
            for prefix in (s3_settings.contracts_prefix, s3_settings.metadata_prefix, s3_settings.templates_prefix):
                result["object_counts"][prefix] = len(await asyncio.to_thread(self.s3.list_keys, prefix))
        return result
