# =============================================================================
# core/models/volunteer.py - Volunteer Schemas
# =============================================================================
# Volunteers are stored in the voluntary_people table.
# =============================================================================

from typing import Any

from pydantic import BaseModel, Field

from .enums import VolunteerStatus


class VolunteerSchema(BaseModel):
    id: str = ""
    organization_id: str = ""
    full_name: str = ""
    email: str = ""
    gender: str = ""
    documents: list[Any] = Field(default_factory=list)
    birthdate: str = ""
    phones: list[str] = Field(default_factory=list)
    address: dict[str, Any] = Field(default_factory=dict)
    status: str = VolunteerStatus.ACTIVE.value
    segments: list[str] = Field(default_factory=list)
    medical_information: dict[str, Any] = Field(default_factory=dict)
    emergency_contacts: list[Any] = Field(default_factory=list)
    notes: str = ""
    created_at: str = ""
    updated_at: str = ""


class CreateVolunteerRequest(BaseModel):
    """
    Schema for registering a volunteer.

    Example:
        {"full_name": "Rui Costa", "segments": ["logistics"], "phones": ["+351..."]}
    """

    full_name: str = Field(..., min_length=1, max_length=255)
    email: str | None = None
    gender: str | None = None
    documents: list[Any] | None = None
    birthdate: str | None = None
    phones: list[str] | None = None
    address: dict[str, Any] | None = None
    segments: list[str] | None = None
    medical_information: dict[str, Any] | None = None
    emergency_contacts: list[Any] | None = None
    notes: str | None = None


class UpdateVolunteerRequest(BaseModel):
    full_name: str | None = Field(default=None, min_length=1, max_length=255)
    email: str | None = None
    gender: str | None = None
    documents: list[Any] | None = None
    birthdate: str | None = None
    phones: list[str] | None = None
    address: dict[str, Any] | None = None
    status: VolunteerStatus | None = None
    segments: list[str] | None = None
    medical_information: dict[str, Any] | None = None
    emergency_contacts: list[Any] | None = None
    notes: str | None = None


class VolunteerStats(BaseModel):
    """active + pending + inactive == total_volunteers."""

    total_volunteers: int = 0
    active_volunteers: int = 0
    pending_volunteers: int = 0
    inactive_volunteers: int = 0
