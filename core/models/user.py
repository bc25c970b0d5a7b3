# =============================================================================
# core/models/user.py - User Schemas
# =============================================================================

from typing import Any

from pydantic import BaseModel, Field

from .enums import PlatformRole, UserStatus
from .organization import OrganizationSchema


def default_preferences() -> dict[str, Any]:
    return {"language": "en", "timezone": "UTC"}


class UserSchema(BaseModel):
    """
    Platform user as returned to clients.

    `organization` is the embedded organization row ({} defaults when the
    user has none).
    """

    id: str = ""
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    phones: list[str] = Field(default_factory=list)
    role: str = ""
    platform_role: str = PlatformRole.NO_ORG.value
    status: str = UserStatus.ACTIVE.value
    preferences: dict[str, Any] = Field(default_factory=default_preferences)
    organization_id: str = ""
    organization: OrganizationSchema = Field(default_factory=OrganizationSchema)
    created_at: str = ""
    updated_at: str = ""


class UpdateUserRequest(BaseModel):
    """
    Partial user update.

    Status and platform role have dedicated operations but may also be set
    here by platform staff.
    """

    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    phones: list[str] | None = None
    role: str | None = None
    platform_role: PlatformRole | None = None
    preferences: dict[str, Any] | None = None


class UpdateUserStatusRequest(BaseModel):
    status: UserStatus


class UpdateUserPlatformRoleRequest(BaseModel):
    platform_role: PlatformRole
