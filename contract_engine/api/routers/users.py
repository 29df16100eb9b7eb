"""
User administration API endpoints (admin only).

Routes:
- GET /admin/users - List users
- POST /admin/users - Create user and send welcome email
- GET /admin/users/{username} - Get user
- PATCH /admin/users/{username} - Enable/disable, change groups
- DELETE /admin/users/{username} - Delete user
- POST /admin/users/{username}/reset-password - Force password reset
- GET /admin/groups - List groups
- POST /admin/groups - Create group

Dependencies: contract_engine.application.services.user_service, contract_engine.models
System role: User management HTTP API
"""

import logging

from fastapi import APIRouter, Depends

from contract_engine.api.deps import get_audit_service, get_user_service, require_admin
from contract_engine.api.routers.error_handling import handle_errors
from contract_engine.application.services.audit_service import AuditService
from contract_engine.application.services.user_service import UserService
from contract_engine.models.user import (
    CreateGroupRequest,
    CreateUserRequest,
    CreateUserResponse,
    CurrentUser,
    GroupResponse,
    PasswordResetResponse,
    UpdateUserRequest,
    UserResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/users", response_model=list[UserResponse])
@handle_errors
async def list_users(
    admin: CurrentUser = Depends(require_admin),
    user_service: UserService = Depends(get_user_service),
) -> list[UserResponse]:
    return [UserResponse(**u) for u in await user_service.list_users()]


@router.post("/users", response_model=CreateUserResponse, status_code=201)
@handle_errors
async def create_user(
    request: CreateUserRequest,
    admin: CurrentUser = Depends(require_admin),
    user_service: UserService = Depends(get_user_service),
    audit_service: AuditService = Depends(get_audit_service),
) -> CreateUserResponse:
    """
    Create a user with a temporary password and send the welcome email.

    Email delivery failures are reported in the response, the account is kept.

    Raises:
        HTTPException(502): Cognito rejected the request
    """
    result = await user_service.create_user(
        email=request.email,
        username=request.username,
        given_name=request.given_name,
        family_name=request.family_name,
        groups=request.groups,
        temporary_password=request.temporary_password,
        send_welcome_email=request.send_welcome_email,
    )
    await audit_service.record(
        "USER_CREATED",
        admin.username,
        {"username": result["username"], "groups": request.groups, "email_sent": result["email_sent"]},
    )
    return CreateUserResponse(**result)


@router.get("/users/{username}", response_model=UserResponse)
@handle_errors
async def get_user(
    username: str,
    admin: CurrentUser = Depends(require_admin),
    user_service: UserService = Depends(get_user_service),
) -> UserResponse:
    return UserResponse(**await user_service.get_user(username))


@router.patch("/users/{username}", response_model=UserResponse)
@handle_errors
async def update_user(
    username: str,
    request: UpdateUserRequest,
    admin: CurrentUser = Depends(require_admin),
    user_service: UserService = Depends(get_user_service),
) -> UserResponse:
    user = await user_service.update_user(
        username,
        enabled=request.enabled,
        add_groups=request.add_groups,
        remove_groups=request.remove_groups,
    )
    return UserResponse(**user)


@router.delete("/users/{username}", status_code=204)
@handle_errors
async def delete_user(
    username: str,
    admin: CurrentUser = Depends(require_admin),
    user_service: UserService = Depends(get_user_service),
    audit_service: AuditService = Depends(get_audit_service),
) -> None:
    await user_service.delete_user(username)
    await audit_service.record("USER_DELETED", admin.username, {"username": username})


@router.post("/users/{username}/reset-password", response_model=PasswordResetResponse)
@handle_errors
async def reset_password(
    username: str,
    admin: CurrentUser = Depends(require_admin),
    user_service: UserService = Depends(get_user_service),
) -> PasswordResetResponse:
    """
    Set a new temporary password and email it to the user.

    Raises:
        HTTPException(400): User has no email address
    """
    return PasswordResetResponse(**await user_service.force_password_reset(username))


@router.get("/groups", response_model=list[GroupResponse])
@handle_errors
async def list_groups(
    admin: CurrentUser = Depends(require_admin),
    user_service: UserService = Depends(get_user_service),
) -> list[GroupResponse]:
    return [GroupResponse(**g) for g in await user_service.list_groups()]


@router.post("/groups", response_model=GroupResponse, status_code=201)
@handle_errors
async def create_group(
    request: CreateGroupRequest,
    admin: CurrentUser = Depends(require_admin),
    user_service: UserService = Depends(get_user_service),
) -> GroupResponse:
    return GroupResponse(**await user_service.create_group(request.name, request.description))
