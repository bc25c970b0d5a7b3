# =============================================================================
# core/models/organization.py - Organization Schemas
# =============================================================================
# - OrganizationSchema: tenant root as returned to clients
# - CreateOrganizationRequest / UpdateOrganizationRequest: write payloads
#
# Every tenant-owned row (users, beneficiaries, housings, cases, products,
# volunteers) points to one organization.
# =============================================================================

from typing import Any

from pydantic import BaseModel, Field

from .enums import OrganizationStatus, OrganizationType


class OrganizationSchema(BaseModel):
    """
    Organization as returned to clients.

    Optional columns are defaulted, so a NULL address arrives as {}.
    """

    id: str = ""
    name: str = ""
    description: str = ""
    logo: str = ""
    areas_of_work: list[str] = Field(default_factory=list)
    address: dict[str, Any] = Field(default_factory=dict)
    type: str = OrganizationType.MANAGER.value
    owner_id: str = ""
    status: str = OrganizationStatus.ACTIVE.value
    access_granted_ids: list[str] = Field(default_factory=list)
    created_at: str = ""
    updated_at: str = ""


class CreateOrganizationRequest(BaseModel):
    """
    Schema for creating an organization.

    The signed-in user becomes the owner.

    Example:
        {"name": "Casa Esperanza", "type": "MANAGER", "address": {"city": "Lisbon"}}
    """

    name: str = Field(..., min_length=1, max_length=255, description="Organization name")
    description: str | None = Field(default=None, description="What the organization does")
    type: OrganizationType | None = Field(default=None, description="MANAGER or COORDINATOR")
    address: dict[str, Any] | None = None
    areas_of_work: list[str] | None = None
    logo: str | None = Field(default=None, description="Public URL of the logo")


class UpdateOrganizationRequest(BaseModel):
    """Partial update; fields left unset are not written."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    type: OrganizationType | None = None
    address: dict[str, Any] | None = None
    areas_of_work: list[str] | None = None
    logo: str | None = None
