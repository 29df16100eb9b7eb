"""
User administration models.

Users and groups live in Cognito; these schemas describe the admin API.

Dependencies: pydantic
System role: User management API contracts
"""

from pydantic import Field

from contract_engine.models.common import CamelModel


class CurrentUser(CamelModel):
    """Caller resolved from the bearer token."""

    username: str
    user_id: str | None = None
    email: str | None = None
    groups: list[str] = Field(default_factory=list)

    @property
    def owner_ids(self) -> set[str]:
        """Identifiers a record's owner field may hold for this user."""
        return {value for value in (self.username, self.user_id) if value}


class CreateUserRequest(CamelModel):
    email: str = Field(..., pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
    username: str | None = None
    given_name: str | None = None
    family_name: str | None = None
    groups: list[str] = Field(default_factory=list)
    temporary_password: str | None = Field(None, min_length=8)
    send_welcome_email: bool = True


class UpdateUserRequest(CamelModel):
    enabled: bool | None = None
    add_groups: list[str] = Field(default_factory=list)
    remove_groups: list[str] = Field(default_factory=list)


class UserResponse(CamelModel):
    username: str
    email: str | None = None
    status: str | None = None
    enabled: bool = True
    groups: list[str] = Field(default_factory=list)
    created_at: str | None = None
    attributes: dict[str, str] = Field(default_factory=dict)


class CreateUserResponse(UserResponse):
    email_sent: bool = False
    email_error: str | None = None


class PasswordResetResponse(CamelModel):
    username: str
    email_sent: bool
    email_error: str | None = None


class GroupResponse(CamelModel):
    name: str
    description: str | None = None
    precedence: int | None = None


class CreateGroupRequest(CamelModel):
    name: str = Field(..., min_length=1, max_length=128)
    description: str | None = None
