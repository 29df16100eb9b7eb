"""
Operational admin commands.

Usage:
    python -m contract_engine.scripts.admin_cli check-cognito-email
    python -m contract_engine.scripts.admin_cli cleanup-s3 --prefix contracts/immutable/ --dry-run
    python -m contract_engine.scripts.admin_cli orphaned-contracts --delete
    python -m contract_engine.scripts.admin_cli fix-owners --model Provider --owner alice --dry-run
    python -m contract_engine.scripts.admin_cli remove-provider-attributes --names dynamicFields --dry-run
    python -m contract_engine.scripts.admin_cli fix-contract-status --from PARTIAL_SUCCESS --to SUCCESS
    python -m contract_engine.scripts.admin_cli delete-all-providers --year 2025 --yes
    python -m contract_engine.scripts.admin_cli provider-count
    python -m contract_engine.scripts.admin_cli check-user --username alice
    python -m contract_engine.scripts.admin_cli force-password-reset --username alice
    python -m contract_engine.scripts.admin_cli test-email --to someone@example.com
    python -m contract_engine.scripts.admin_cli provider-fields
    python -m contract_engine.scripts.admin_cli check-s3

Each command prints a report. AWS failures print remediation hints and
exit with status 1.

Dependencies: argparse, contract_engine.application.services
System role: Operator entry point for maintenance against AWS
"""

import argparse
import asyncio
import json
import logging
import sys
from dataclasses import dataclass
from typing import Any, Callable

from contract_engine.application.services import (
    AuditService,
    EmailService,
    MaintenanceService,
    ProviderService,
    UserService,
)
from contract_engine.boundary.aws.cognito_client import CognitoAdminClient
from contract_engine.boundary.aws.contract_storage import ImmutableContractStorage
from contract_engine.boundary.aws.s3_client import S3StorageClient
from contract_engine.boundary.aws.ses_client import SesEmailClient
from contract_engine.boundary.db.registry import TableRegistry
from contract_engine.configs import Settings, get_settings
from contract_engine.core.exceptions import AwsServiceError, ContractEngineException
from contract_engine.observability.logger import configure_logging

logger = logging.getLogger(__name__)


@dataclass
class CommandContext:
    """Services a command may use."""

    settings: Settings
    maintenance: MaintenanceService
    providers: ProviderService
    users: UserService
    email: EmailService


def build_context(settings: Settings | None = None) -> CommandContext:
    """Wire every service against the configured AWS environment."""
    settings = settings or get_settings()
    region = settings.aws.region
    registry = TableRegistry(settings.dynamodb, region=region)
    s3 = S3StorageClient(settings.s3_storage.bucket, region=region)
    cognito = CognitoAdminClient(settings.cognito.user_pool_id, region=region)
    email = EmailService(SesEmailClient(settings.email.from_email, region=region), settings.email)
    storage = ImmutableContractStorage(s3, settings.s3_storage)
    return CommandContext(
        settings=settings,
        maintenance=MaintenanceService(registry, s3, cognito, storage, settings),
        providers=ProviderService(registry.providers, AuditService(registry.audit_logs)),
        users=UserService(cognito, email, settings.cognito),
        email=email,
    )


def print_report(title: str, report: Any) -> None:
    print(f"== {title} ==")
    print(json.dumps(report, indent=2, default=str))


def print_hints(hints: list[str]) -> None:
    if not hints:
        return
    print("Possible fixes:")
    for hint in hints:
        print(f"  - {hint}")


async def cmd_check_cognito_email(ctx: CommandContext, args: argparse.Namespace) -> int:
    report = await ctx.maintenance.check_cognito_email_config()
    print_report("Cognito email configuration", report)
    if report["problems"]:
        print("Problems found:")
        for problem in report["problems"]:
            print(f"  - {problem}")
    print_hints(report["hints"])
    return 0


async def cmd_cleanup_s3(ctx: CommandContext, args: argparse.Namespace) -> int:
    report = await ctx.maintenance.cleanup_s3_contracts(args.prefix, dry_run=args.dry_run)
    print_report("S3 cleanup" + (" (dry run)" if args.dry_run else ""), report)
    return 1 if report.get("failed") else 0


async def cmd_orphaned_contracts(ctx: CommandContext, args: argparse.Namespace) -> int:
    report = await ctx.maintenance.find_orphaned_contracts(delete=args.delete)
    print_report("Orphaned contracts", report)
    return 1 if report["failed"] else 0


async def cmd_fix_owners(ctx: CommandContext, args: argparse.Namespace) -> int:
    report = await ctx.maintenance.fix_record_owners(args.model, args.owner, dry_run=args.dry_run)
    print_report(f"{args.model} owners" + (" (dry run)" if args.dry_run else ""), report)
    return 0


async def cmd_remove_provider_attributes(ctx: CommandContext, args: argparse.Namespace) -> int:
    report = await ctx.maintenance.remove_provider_attributes(args.names, dry_run=args.dry_run)
    print_report("Provider attribute cleanup" + (" (dry run)" if args.dry_run else ""), report)
    return 0


async def cmd_fix_contract_status(ctx: CommandContext, args: argparse.Namespace) -> int:
    report = await ctx.maintenance.fix_contract_status(args.from_status, args.to_status)
    print_report("Contract status fix", report)
    return 0


async def cmd_delete_all_providers(ctx: CommandContext, args: argparse.Namespace) -> int:
    count = await ctx.providers.count_providers(args.year)
    if not args.yes:
        print(f"{count} providers would be deleted. Re-run with --yes to delete them.")
        return 0
    deleted = await ctx.providers.delete_all_providers(args.year, audit_user="admin-cli")
    print_report("Providers deleted", {"year": args.year, "found": count, "deleted": deleted})
    return 0 if deleted == count else 1


async def cmd_provider_count(ctx: CommandContext, args: argparse.Namespace) -> int:
    print_report("Provider count", {"year": args.year, "count": await ctx.providers.count_providers(args.year)})
    return 0


async def cmd_check_user(ctx: CommandContext, args: argparse.Namespace) -> int:
    report = await ctx.maintenance.check_user_status(args.username)
    print_report(f"User {args.username}", report)
    print_hints(report["hints"])
    return 0


async def cmd_force_password_reset(ctx: CommandContext, args: argparse.Namespace) -> int:
    report = await ctx.users.force_password_reset(args.username)
    print_report(f"Password reset for {args.username}", report)
    return 0 if report["email_sent"] else 1


async def cmd_test_email(ctx: CommandContext, args: argparse.Namespace) -> int:
    status = await ctx.email.check_sending_status()
    print_report("SES sending status", status)
    message_id = await ctx.email.send_test_email(args.to)
    print(f"Test email sent to {args.to} (message id {message_id})")
    return 0


async def cmd_provider_fields(ctx: CommandContext, args: argparse.Namespace) -> int:
    report = await ctx.maintenance.provider_field_report(args.fields)
    print_report("Provider field population", report)
    return 0


async def cmd_check_s3(ctx: CommandContext, args: argparse.Namespace) -> int:
    report = await ctx.maintenance.check_s3()
    print_report("S3 storage", report)
    if not report["success"]:
        print_hints(report.get("hints", []))
        return 1
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="contract_engine.scripts.admin_cli",
        description="Contract Engine operational commands",
    )
    parser.add_argument("--log-level", default=None, help="Override LOG_LEVEL")
    sub = parser.add_subparsers(dest="command", required=True)

    def add(name: str, handler: Callable, help: str) -> argparse.ArgumentParser:
        command = sub.add_parser(name, help=help)
        command.set_defaults(handler=handler)
        return command

    add("check-cognito-email", cmd_check_cognito_email, "Inspect the user pool email setup")

    cleanup = add("cleanup-s3", cmd_cleanup_s3, "Delete objects under a contracts prefix")
    cleanup.add_argument("--prefix", default=None, help="Key prefix (default: immutable contracts prefix)")
    cleanup.add_argument("--dry-run", action="store_true", help="List without deleting")

    orphaned = add("orphaned-contracts", cmd_orphaned_contracts, "Compare S3 contracts with generation logs")
    orphaned.add_argument("--delete", action="store_true", help="Delete contracts with no generation log")

    owners = add("fix-owners", cmd_fix_owners, "Reassign record owners")
    owners.add_argument("--model", required=True, choices=["Provider", "Clause", "Template", "DynamicBlock"])
    owners.add_argument("--owner", required=True, help="Target owner username")
    owners.add_argument("--dry-run", action="store_true")

    attributes = add("remove-provider-attributes", cmd_remove_provider_attributes, "Remove stale provider attributes")
    attributes.add_argument("--names", nargs="+", default=["dynamicFields"], help="Attribute names")
    attributes.add_argument("--dry-run", action="store_true")

    status = add("fix-contract-status", cmd_fix_contract_status, "Move generation logs between statuses")
    status.add_argument("--from", dest="from_status", default="PARTIAL_SUCCESS")
    status.add_argument("--to", dest="to_status", default="SUCCESS")

    delete_all = add("delete-all-providers", cmd_delete_all_providers, "Delete providers")
    delete_all.add_argument("--year", default=None, help="Only this compensation year")
    delete_all.add_argument("--yes", action="store_true", help="Actually delete")

    count = add("provider-count", cmd_provider_count, "Count providers")
    count.add_argument("--year", default=None)

    check_user = add("check-user", cmd_check_user, "Show a user's Cognito status")
    check_user.add_argument("--username", required=True)

    reset = add("force-password-reset", cmd_force_password_reset, "Set and email a temporary password")
    reset.add_argument("--username", required=True)

    test_email = add("test-email", cmd_test_email, "Send a test email through SES")
    test_email.add_argument("--to", required=True)

    fields = add("provider-fields", cmd_provider_fields, "Count populated provider fields")
    fields.add_argument("--fields", nargs="*", default=None, help="Fields to check (default: FTE fields)")

    add("check-s3", cmd_check_s3, "Test storage bucket access")
    return parser


def main(argv: list[str] | None = None, context: CommandContext | None = None) -> int:
    """
    CLI entry point.

    Returns:
        int: Process exit code
    """
    args = build_parser().parse_args(argv)
    settings = context.settings if context else get_settings()
    configure_logging(args.log_level or settings.log_level)

    try:
        ctx = context or build_context(settings)
        return asyncio.run(args.handler(ctx, args))
    except AwsServiceError as e:
        logger.error("Command failed", extra={"command": args.command, "code": e.code})
        print(f"ERROR: {e.message}")
        if e.code:
            print(f"AWS error code: {e.code}")
        print_hints(e.hints)
        return 1
    except ContractEngineException as e:
        logger.error("Command failed", extra={"command": args.command, "error": e.message})
        print(f"ERROR: {e.message}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
