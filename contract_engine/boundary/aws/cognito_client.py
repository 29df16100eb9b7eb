"""
Cognito user pool admin client.

Wraps the cognito-idp admin APIs used for user management, operational
checks and bearer-token resolution.

Dependencies: boto3
System role: User and group administration against Cognito
"""

import logging
from typing import Any

from contract_engine.boundary.aws.client_errors import translate_client_errors
from contract_engine.boundary.aws.session import get_boto3_session

logger = logging.getLogger(__name__)


def attributes_to_dict(attributes: list[dict[str, str]] | None) -> dict[str, str]:
    """Flatten Cognito [{"Name", "Value"}] attributes into a dict."""
    return {attr["Name"]: attr.get("Value", "") for attr in attributes or []}


class CognitoAdminClient:
    """Admin operations on one Cognito user pool."""

    def __init__(self, user_pool_id: str, region: str | None = None, client: Any = None) -> None:
        """
        Initialize Cognito admin client.

        Args:
            user_pool_id: Target user pool
            region: AWS region of the pool
            client: Pre-built cognito-idp client (tests inject a mock here)
        """
        self.user_pool_id = user_pool_id
        self._client = client or get_boto3_session().client("cognito-idp", region_name=region)

    @translate_client_errors("cognito-idp")
    def describe_user_pool(self) -> dict[str, Any]:
        """Get the user pool description."""
        return self._client.describe_user_pool(UserPoolId=self.user_pool_id)["UserPool"]

    @translate_client_errors("cognito-idp")
    def list_users(self, filter_expression: str | None = None) -> list[dict[str, Any]]:
        """List every user, following PaginationToken."""
        kwargs: dict[str, Any] = {"UserPoolId": self.user_pool_id, "Limit": 60}
        if filter_expression:
            kwargs["Filter"] = filter_expression
        users: list[dict[str, Any]] = []
        while True:
            response = self._client.list_users(**kwargs)
            users.extend(response.get("Users", []))
            token = response.get("PaginationToken")
            if not token:
                return users
            kwargs["PaginationToken"] = token

    @translate_client_errors("cognito-idp")
    def get_user(self, username: str) -> dict[str, Any]:
        """Get one user (AdminGetUser)."""
        return self._client.admin_get_user(UserPoolId=self.user_pool_id, Username=username)

    @translate_client_errors("cognito-idp")
    def create_user(
        self,
        username: str,
        email: str,
        temporary_password: str,
        attributes: dict[str, str] | None = None,
        suppress_invite: bool = True,
    ) -> dict[str, Any]:
        """
        Create a user with a temporary password.

        Args:
            username: Username (usually the email)
            email: Email address, marked verified
            temporary_password: Password the user must change at first sign-in
            attributes: Extra user attributes (given_name, family_name...)
            suppress_invite: Skip the Cognito invitation email

        Returns:
            dict: Created user
        """
        user_attributes = [
            {"Name": "email", "Value": email},
            {"Name": "email_verified", "Value": "true"},
        ]
        user_attributes.extend(
            {"Name": name, "Value": value} for name, value in (attributes or {}).items() if value
        )
        kwargs: dict[str, Any] = {
            "UserPoolId": self.user_pool_id,
            "Username": username,
            "TemporaryPassword": temporary_password,
            "UserAttributes": user_attributes,
            "DesiredDeliveryMediums": ["EMAIL"],
        }
        if suppress_invite:
            kwargs["MessageAction"] = "SUPPRESS"
        return self._client.admin_create_user(**kwargs)["User"]

    @translate_client_errors("cognito-idp")
    def delete_user(self, username: str) -> None:
        self._client.admin_delete_user(UserPoolId=self.user_pool_id, Username=username)

    @translate_client_errors("cognito-idp")
    def enable_user(self, username: str) -> None:
        self._client.admin_enable_user(UserPoolId=self.user_pool_id, Username=username)

    @translate_client_errors("cognito-idp")
    def disable_user(self, username: str) -> None:
        self._client.admin_disable_user(UserPoolId=self.user_pool_id, Username=username)

    @translate_client_errors("cognito-idp")
    def add_user_to_group(self, username: str, group_name: str) -> None:
        self._client.admin_add_user_to_group(
            UserPoolId=self.user_pool_id, Username=username, GroupName=group_name
        )

    @translate_client_errors("cognito-idp")
    def remove_user_from_group(self, username: str, group_name: str) -> None:
        self._client.admin_remove_user_from_group(
            UserPoolId=self.user_pool_id, Username=username, GroupName=group_name
        )

    @translate_client_errors("cognito-idp")
    def list_groups_for_user(self, username: str) -> list[str]:
        """List the group names a user belongs to."""
        response = self._client.admin_list_groups_for_user(
            UserPoolId=self.user_pool_id, Username=username
        )
        return [group["GroupName"] for group in response.get("Groups", [])]

    @translate_client_errors("cognito-idp")
    def list_groups(self) -> list[dict[str, Any]]:
        """List every group in the pool."""
        kwargs: dict[str, Any] = {"UserPoolId": self.user_pool_id}
        groups: list[dict[str, Any]] = []
        while True:
            response = self._client.list_groups(**kwargs)
            groups.extend(response.get("Groups", []))
            token = response.get("NextToken")
            if not token:
                return groups
            kwargs["NextToken"] = token

    @translate_client_errors("cognito-idp")
    def create_group(self, group_name: str, description: str | None = None) -> dict[str, Any]:
        kwargs: dict[str, Any] = {"UserPoolId": self.user_pool_id, "GroupName": group_name}
        if description:
            kwargs["Description"] = description
        return self._client.create_group(**kwargs)["Group"]

    @translate_client_errors("cognito-idp")
    def reset_user_password(self, username: str) -> None:
        """Trigger Cognito's own reset flow (AdminResetUserPassword)."""
        self._client.admin_reset_user_password(UserPoolId=self.user_pool_id, Username=username)

    @translate_client_errors("cognito-idp")
    def set_user_password(self, username: str, password: str, permanent: bool = False) -> None:
        """Set a password directly. Non-permanent passwords force a change at sign-in."""
        self._client.admin_set_user_password(
            UserPoolId=self.user_pool_id,
            Username=username,
            Password=password,
            Permanent=permanent,
        )

    @translate_client_errors("cognito-idp")
    def get_user_from_access_token(self, access_token: str) -> dict[str, Any]:
        """Resolve an access token to its user (GetUser)."""
        return self._client.get_user(AccessToken=access_token)
