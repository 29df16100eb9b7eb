"""
Test suite for the operational admin CLI.

Commands run against a CommandContext of mocked services; output is read
from captured stdout.

System role: Verification of operator commands
"""

from unittest.mock import AsyncMock

import pytest

from contract_engine.configs.settings import Settings
from contract_engine.core.exceptions import AwsServiceError, ValidationError
from contract_engine.scripts import admin_cli
from contract_engine.scripts.admin_cli import CommandContext, build_parser, main


@pytest.fixture(autouse=True)
def no_logging_setup(monkeypatch) -> None:
    monkeypatch.setattr(admin_cli, "configure_logging", lambda level: None)


@pytest.fixture
def ctx() -> CommandContext:
    return CommandContext(
        settings=Settings(),
        maintenance=AsyncMock(),
        providers=AsyncMock(),
        users=AsyncMock(),
        email=AsyncMock(),
    )


class TestParser:
    def test_defaults(self) -> None:
        args = build_parser().parse_args(["fix-contract-status"])

        assert args.from_status == "PARTIAL_SUCCESS"
        assert args.to_status == "SUCCESS"

    def test_model_choices(self) -> None:
        with pytest.raises(SystemExit):
            build_parser().parse_args(["fix-owners", "--model", "AuditLog", "--owner", "alice"])

    def test_command_required(self) -> None:
        with pytest.raises(SystemExit):
            build_parser().parse_args([])


class TestCommands:
    """Test command dispatch and exit codes."""

    def test_cleanup_dry_run(self, ctx: CommandContext, capsys) -> None:
        ctx.maintenance.cleanup_s3_contracts.return_value = {"found": 4, "deleted": 0, "failed": []}

        code = main(["cleanup-s3", "--dry-run"], ctx)

        assert code == 0
        ctx.maintenance.cleanup_s3_contracts.assert_awaited_once_with(None, dry_run=True)
        assert "== S3 cleanup (dry run) ==" in capsys.readouterr().out

    def test_cleanup_with_failures(self, ctx: CommandContext) -> None:
        ctx.maintenance.cleanup_s3_contracts.return_value = {"found": 2, "deleted": 1, "failed": ["k"]}

        assert main(["cleanup-s3", "--prefix", "contracts/immutable/old/"], ctx) == 1

    def test_orphaned_contracts(self, ctx: CommandContext, capsys) -> None:
        ctx.maintenance.find_orphaned_contracts.return_value = {"s3_only": ["c2"], "deleted": 2, "failed": []}

        assert main(["orphaned-contracts", "--delete"], ctx) == 0
        ctx.maintenance.find_orphaned_contracts.assert_awaited_once_with(delete=True)
        assert '"s3_only"' in capsys.readouterr().out

    def test_fix_owners(self, ctx: CommandContext) -> None:
        ctx.maintenance.fix_record_owners.return_value = {"to_fix": 1}

        assert main(["fix-owners", "--model", "Template", "--owner", "alice"], ctx) == 0
        ctx.maintenance.fix_record_owners.assert_awaited_once_with("Template", "alice", dry_run=False)

    def test_remove_attributes_default_names(self, ctx: CommandContext) -> None:
        ctx.maintenance.remove_provider_attributes.return_value = {"affected": 0}

        main(["remove-provider-attributes", "--dry-run"], ctx)

        ctx.maintenance.remove_provider_attributes.assert_awaited_once_with(["dynamicFields"], dry_run=True)

    def test_delete_all_without_yes_only_counts(self, ctx: CommandContext, capsys) -> None:
        ctx.providers.count_providers.return_value = 12

        assert main(["delete-all-providers", "--year", "2025"], ctx) == 0

        ctx.providers.delete_all_providers.assert_not_awaited()
        assert "12 providers would be deleted" in capsys.readouterr().out

    def test_delete_all(self, ctx: CommandContext) -> None:
        ctx.providers.count_providers.return_value = 12
        ctx.providers.delete_all_providers.return_value = 11

        assert main(["delete-all-providers", "--yes"], ctx) == 1
        ctx.providers.delete_all_providers.assert_awaited_once_with(None, audit_user="admin-cli")

    def test_check_user_prints_hints(self, ctx: CommandContext, capsys) -> None:
        ctx.maintenance.check_user_status.return_value = {"username": "alice", "hints": ["Email address is not verified"]}

        assert main(["check-user", "--username", "alice"], ctx) == 0
        out = capsys.readouterr().out
        assert "Possible fixes:" in out
        assert "  - Email address is not verified" in out

    def test_force_password_reset_email_failure(self, ctx: CommandContext) -> None:
        ctx.users.force_password_reset.return_value = {"username": "alice", "email_sent": False, "email_error": "x"}

        assert main(["force-password-reset", "--username", "alice"], ctx) == 1

    def test_test_email(self, ctx: CommandContext, capsys) -> None:
        ctx.email.check_sending_status.return_value = {"verified": True}
        ctx.email.send_test_email.return_value = "msg-1"

        assert main(["test-email", "--to", "ops@example.com"], ctx) == 0
        assert "Test email sent to ops@example.com (message id msg-1)" in capsys.readouterr().out

    def test_provider_fields(self, ctx: CommandContext) -> None:
        ctx.maintenance.provider_field_report.return_value = {"total": 0, "populated": {}}

        main(["provider-fields", "--fields", "clinicalFTE", "researchFTE"], ctx)

        ctx.maintenance.provider_field_report.assert_awaited_once_with(["clinicalFTE", "researchFTE"])

    def test_check_s3_failure(self, ctx: CommandContext, capsys) -> None:
        ctx.maintenance.check_s3.return_value = {"success": False, "hints": ["Check S3_STORAGE_BUCKET"]}

        assert main(["check-s3"], ctx) == 1
        assert "Check S3_STORAGE_BUCKET" in capsys.readouterr().out


class TestErrors:
    def test_aws_error_prints_code_and_hints(self, ctx: CommandContext, capsys) -> None:
        ctx.maintenance.check_cognito_email_config.side_effect = AwsServiceError(
            "cognito-idp describe_user_pool failed: not authorized",
            service="cognito-idp",
            operation="describe_user_pool",
            code="NotAuthorizedException",
            hints=["User Pool ID might be incorrect"],
        )

        assert main(["check-cognito-email"], ctx) == 1

        out = capsys.readouterr().out
        assert "ERROR: cognito-idp describe_user_pool failed: not authorized" in out
        assert "AWS error code: NotAuthorizedException" in out
        assert "  - User Pool ID might be incorrect" in out

    def test_domain_error(self, ctx: CommandContext, capsys) -> None:
        ctx.maintenance.fix_contract_status.side_effect = ValidationError("Unknown contract status: DONE")

        assert main(["fix-contract-status", "--from", "DONE"], ctx) == 1
        assert "ERROR: Unknown contract status: DONE" in capsys.readouterr().out
