# =============================================================================
# core/models/requests.py - Invite and Request Schemas
# =============================================================================
# Organization membership and governance flows:
# - organization_invites: an organization invites an email to join
# - platform_invites: invitations to join the platform
# - platform_admin_invites: invitations to become platform staff
# - organization_join_requests: a user asks to join an organization
# - organization_data_access_requests: one organization asks to see another's data
# - update_organization_type_requests: an organization asks to change its type
# =============================================================================

from pydantic import BaseModel, Field

from .enums import OrganizationType, RequestStatus
from .organization import OrganizationSchema
from .user import UserSchema


class JoinOrganizationInviteSchema(BaseModel):
    id: str = ""
    organization_id: str = ""
    email: str = ""
    role: str = ""
    status: str = RequestStatus.PENDING.value
    created_at: str = ""


class JoinPlatformInviteSchema(BaseModel):
    id: str = ""
    organization_id: str = ""
    email: str = ""
    role: str = ""
    status: str = RequestStatus.PENDING.value
    created_at: str = ""


class JoinOrganizationRequestSchema(BaseModel):
    id: str = ""
    organization_id: str = ""
    user_id: str = ""
    user: UserSchema = Field(default_factory=UserSchema)
    status: str = RequestStatus.PENDING.value
    created_at: str = ""


class OrganizationDataAccessRequestSchema(BaseModel):
    id: str = ""
    requesting_organization_id: str = ""
    requesting_organization: OrganizationSchema = Field(default_factory=OrganizationSchema)
    target_organization_id: str = ""
    requester_id: str = ""
    status: str = RequestStatus.PENDING.value
    created_at: str = ""


class UpdateOrganizationTypeRequestSchema(BaseModel):
    id: str = ""
    organization_id: str = ""
    organization: OrganizationSchema = Field(default_factory=OrganizationSchema)
    requested_by_id: str = ""
    requested_by: UserSchema = Field(default_factory=UserSchema)
    new_type: str = ""
    status: str = RequestStatus.PENDING.value
    created_at: str = ""


class CreateOrganizationInviteRequest(BaseModel):
    """
    Invite an email address to an organization.

    Example:
        {"email": "rui@relif.org", "role": "Social worker"}
    """

    email: str = Field(..., min_length=3, max_length=320)
    role: str = Field(default="", max_length=100)


class CreateAdminInviteRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=320)


class CreateTypeUpdateRequest(BaseModel):
    new_type: OrganizationType
