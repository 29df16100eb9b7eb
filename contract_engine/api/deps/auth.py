"""
Authentication dependencies.

Resolves the Cognito access token in the Authorization header to the
calling user and guards admin-only routes.

Dependencies: fastapi, contract_engine.boundary.aws.cognito_client
System role: API authentication and authorization
"""

import logging

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from contract_engine.api.deps.dependencies import get_cognito_client, get_settings_dependency
from contract_engine.boundary.aws.cognito_client import CognitoAdminClient, attributes_to_dict
from contract_engine.configs import Settings
from contract_engine.core.exceptions import AwsServiceError
from contract_engine.models.user import CurrentUser

logger = logging.getLogger(__name__)

INVALID_TOKEN_CODES = {"NotAuthorizedException", "UserNotFoundException", "InvalidParameterException"}

bearer_scheme = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    cognito: CognitoAdminClient = Depends(get_cognito_client),
) -> CurrentUser:
    """
    Resolve the bearer token to the calling user.

    Raises:
        HTTPException(401): Missing, expired or revoked token
        HTTPException(502): Cognito unavailable
    """
    if credentials is None or not credentials.credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing bearer token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        user = cognito.get_user_from_access_token(credentials.credentials)
        username = user["Username"]
        groups = cognito.list_groups_for_user(username)
    except AwsServiceError as e:
        if e.code in INVALID_TOKEN_CODES:
            logger.info("Rejected access token", extra={"code": e.code})
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid or expired access token",
                headers={"WWW-Authenticate": "Bearer"},
            )
        logger.error("Token resolution failed", extra={"code": e.code})
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=e.message)

    attributes = attributes_to_dict(user.get("UserAttributes"))
    return CurrentUser(
        username=username,
        user_id=attributes.get("sub"),
        email=attributes.get("email"),
        groups=groups,
    )


def require_admin(
    user: CurrentUser = Depends(get_current_user),
    settings: Settings = Depends(get_settings_dependency),
) -> CurrentUser:
    """
    Require membership of the admin group.

    Raises:
        HTTPException(403): Caller is not an admin
    """
    if settings.cognito.admin_group not in user.groups:
        logger.warning("Admin route denied", extra={"username": user.username})
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin group membership required")
    return user
