"""
User administration service.

Wraps Cognito user and group management. New accounts and password resets
get a generated temporary password delivered by our own SES email instead
of the Cognito invitation.

Dependencies: contract_engine.boundary.aws.cognito_client, EmailService
System role: User management use cases
"""

import asyncio
import logging
import secrets
import string
from typing import Any

from contract_engine.application.services.email_service import EmailService
from contract_engine.boundary.aws.cognito_client import CognitoAdminClient, attributes_to_dict
from contract_engine.configs.cognito import CognitoSettings
from contract_engine.core.exceptions import AwsServiceError, ValidationError

logger = logging.getLogger(__name__)

_SYMBOLS = "!@#$%^&*"


def generate_temporary_password(length: int = 14) -> str:
    """
    Generate a password meeting the default Cognito policy.

    Contains at least one upper, lower, digit and symbol.
    """
    if length < 8:
        raise ValueError("Temporary passwords must be at least 8 characters")
    required = [
        secrets.choice(string.ascii_uppercase),
        secrets.choice(string.ascii_lowercase),
        secrets.choice(string.digits),
        secrets.choice(_SYMBOLS),
    ]
    alphabet = string.ascii_letters + string.digits + _SYMBOLS
    chars = required + [secrets.choice(alphabet) for _ in range(length - len(required))]
    secrets.SystemRandom().shuffle(chars)
    return "".join(chars)


def _isoformat(value: Any) -> str | None:
    if value is None:
        return None
    return value.isoformat() if hasattr(value, "isoformat") else str(value)


class UserService:
    """User administration use cases."""

    def __init__(
        self,
        cognito: CognitoAdminClient,
        email_service: EmailService,
        settings: CognitoSettings,
    ) -> None:
        """
        Initialize user service.

        Args:
            cognito: Cognito admin client for the user pool
            email_service: Sender for welcome and reset emails
            settings: Cognito settings (admin group, password length)
        """
        self.cognito = cognito
        self.email_service = email_service
        self.settings = settings

    def _to_user(self, user: dict[str, Any], groups: list[str]) -> dict[str, Any]:
        attributes = attributes_to_dict(user.get("Attributes") or user.get("UserAttributes"))
        return {
            "username": user.get("Username"),
            "email": attributes.get("email"),
            "status": user.get("UserStatus"),
            "enabled": user.get("Enabled", True),
            "groups": groups,
            "created_at": _isoformat(user.get("UserCreateDate")),
            "attributes": attributes,
        }

    async def list_users(self) -> list[dict[str, Any]]:
        """List all users with their groups."""
        users = await asyncio.to_thread(self.cognito.list_users)
        result = []
        for user in users:
            groups = await asyncio.to_thread(self.cognito.list_groups_for_user, user["Username"])
            result.append(self._to_user(user, groups))
        logger.info("Users listed", extra={"count": len(result)})
        return result

    async def create_user(
        self,
        email: str,
        username: str | None = None,
        given_name: str | None = None,
        family_name: str | None = None,
        groups: list[str] | None = None,
        temporary_password: str | None = None,
        send_welcome_email: bool = True,
    ) -> dict[str, Any]:
        """
        Create a user, add groups and send the welcome email.

        Email delivery failures do not undo the account; they are reported
        in the result as email_sent=False with the error.

        Returns:
            dict: User fields plus email_sent and email_error
        """
        username = username or email
        password = temporary_password or generate_temporary_password(self.settings.temporary_password_length)

        user = await asyncio.to_thread(
            self.cognito.create_user,
            username,
            email,
            password,
            attributes={"given_name": given_name or "", "family_name": family_name or ""},
            suppress_invite=True,
        )
        for group in groups or []:
            await asyncio.to_thread(self.cognito.add_user_to_group, username, group)

        logger.info("User created", extra={"username": username, "groups": groups or []})

        result = self._to_user(user, list(groups or []))
        result["email_sent"] = False
        result["email_error"] = None
        if send_welcome_email:
            try:
                await self.email_service.send_welcome_email(email, username, password, given_name)
                result["email_sent"] = True
            except AwsServiceError as e:
                logger.warning(
                    "Welcome email failed",
                    extra={"username": username, "code": e.code},
                )
                result["email_error"] = e.message
        return result

    async def update_user(
        self,
        username: str,
        enabled: bool | None = None,
        add_groups: list[str] | None = None,
        remove_groups: list[str] | None = None,
    ) -> dict[str, Any]:
        """Enable/disable a user and change group membership."""
        if enabled is True:
            await asyncio.to_thread(self.cognito.enable_user, username)
        elif enabled is False:
            await asyncio.to_thread(self.cognito.disable_user, username)
        for group in add_groups or []:
            await asyncio.to_thread(self.cognito.add_user_to_group, username, group)
        for group in remove_groups or []:
            await asyncio.to_thread(self.cognito.remove_user_from_group, username, group)

        logger.info(
            "User updated",
            extra={"username": username, "enabled": enabled, "added": add_groups, "removed": remove_groups},
        )
        return await self.get_user(username)

    async def get_user(self, username: str) -> dict[str, Any]:
        user = await asyncio.to_thread(self.cognito.get_user, username)
        groups = await asyncio.to_thread(self.cognito.list_groups_for_user, username)
        return self._to_user(user, groups)

    async def delete_user(self, username: str) -> None:
        await asyncio.to_thread(self.cognito.delete_user, username)
        logger.info("User deleted", extra={"username": username})

    async def force_password_reset(self, username: str) -> dict[str, Any]:
        """
        Set a new temporary password and email it to the user.

        The user must choose a new password at next sign-in.

        Raises:
            ValidationError: If the user has no email address
        """
        user = await self.get_user(username)
        email = user.get("email")
        if not email:
            raise ValidationError(f"User {username} has no email address", field="email")

        password = generate_temporary_password(self.settings.temporary_password_length)
        await asyncio.to_thread(self.cognito.set_user_password, username, password, permanent=False)
        logger.info("Temporary password set", extra={"username": username})

        result = {"username": username, "email_sent": False, "email_error": None}
        try:
            await self.email_service.send_password_reset_email(
                email, username, password, user["attributes"].get("given_name")
            )
            result["email_sent"] = True
        except AwsServiceError as e:
            logger.warning("Password reset email failed", extra={"username": username, "code": e.code})
            result["email_error"] = e.message
        return result

    async def get_user_status(self, username: str) -> dict[str, Any]:
        """Cognito status, verification and groups of one user."""
        user = await asyncio.to_thread(self.cognito.get_user, username)
        attributes = attributes_to_dict(user.get("UserAttributes"))
        groups = await asyncio.to_thread(self.cognito.list_groups_for_user, username)
        return {
            "username": user.get("Username", username),
            "status": user.get("UserStatus"),
            "enabled": user.get("Enabled", True),
            "email": attributes.get("email"),
            "email_verified": attributes.get("email_verified") == "true",
            "groups": groups,
            "created_at": _isoformat(user.get("UserCreateDate")),
            "last_modified_at": _isoformat(user.get("UserLastModifiedDate")),
        }

    async def list_groups(self) -> list[dict[str, Any]]:
        groups = await asyncio.to_thread(self.cognito.list_groups)
        return [
            {
                "name": group["GroupName"],
                "description": group.get("Description"),
                "precedence": group.get("Precedence"),
            }
            for group in groups
        ]

    async def create_group(self, name: str, description: str | None = None) -> dict[str, Any]:
        group = await asyncio.to_thread(self.cognito.create_group, name, description)
        logger.info("Group created", extra={"group": name})
        return {
            "name": group.get("GroupName", name),
            "description": group.get("Description"),
            "precedence": group.get("Precedence"),
        }
