# =============================================================================
# core/models/beneficiary.py - Beneficiary Schemas
# =============================================================================
# - BeneficiarySchema: a person receiving assistance
# - BeneficiaryAllocationSchema: one row of the housing/room history
# - BeneficiaryStats: per-organization status counts
# =============================================================================

from typing import Any

from pydantic import BaseModel, Field

from .enums import AllocationType, BeneficiaryStatus
from .housing import HousingSchema, SpaceSchema


class BeneficiarySchema(BaseModel):
    """
    Beneficiary as returned to clients.

    `current_housing` / `current_room` are the embedded relations ({}
    defaults when the beneficiary is not allocated).
    """

    id: str = ""
    full_name: str = ""
    email: str = ""
    image_url: str = ""
    documents: list[Any] = Field(default_factory=list)
    birthdate: str = ""
    phones: list[str] = Field(default_factory=list)
    civil_status: str = ""
    spoken_languages: list[str] = Field(default_factory=list)
    education: str = ""
    gender: str = ""
    occupation: str = ""
    address: dict[str, Any] = Field(default_factory=dict)
    status: str = BeneficiaryStatus.ACTIVE.value
    current_organization_id: str = ""
    current_housing_id: str = ""
    current_housing: HousingSchema = Field(default_factory=HousingSchema)
    current_room_id: str = ""
    current_room: SpaceSchema = Field(default_factory=SpaceSchema)
    medical_information: dict[str, Any] = Field(default_factory=dict)
    emergency_contacts: list[Any] = Field(default_factory=list)
    notes: str = ""
    created_at: str = ""
    updated_at: str = ""


class CreateBeneficiaryRequest(BaseModel):
    """
    Schema for registering a beneficiary.

    Example:
        {"full_name": "Ana Lima", "phones": ["+351 900 000 000"], "gender": "female"}
    """

    full_name: str = Field(..., min_length=1, max_length=255)
    email: str | None = None
    image_url: str | None = None
    documents: list[Any] | None = None
    birthdate: str | None = None
    phones: list[str] | None = None
    civil_status: str | None = None
    spoken_languages: list[str] | None = None
    education: str | None = None
    gender: str | None = None
    occupation: str | None = None
    address: dict[str, Any] | None = None
    medical_information: dict[str, Any] | None = None
    emergency_contacts: list[Any] | None = None
    notes: str | None = None


class UpdateBeneficiaryRequest(BaseModel):
    """Partial update; allocation fields are changed through allocate/reallocate."""

    full_name: str | None = Field(default=None, min_length=1, max_length=255)
    email: str | None = None
    image_url: str | None = None
    documents: list[Any] | None = None
    birthdate: str | None = None
    phones: list[str] | None = None
    civil_status: str | None = None
    spoken_languages: list[str] | None = None
    education: str | None = None
    gender: str | None = None
    occupation: str | None = None
    address: dict[str, Any] | None = None
    status: BeneficiaryStatus | None = None
    medical_information: dict[str, Any] | None = None
    emergency_contacts: list[Any] | None = None
    notes: str | None = None


class AllocateBeneficiaryRequest(BaseModel):
    housing_id: str = Field(..., min_length=1)
    room_id: str = Field(..., min_length=1)


class BeneficiaryRef(BaseModel):
    id: str = ""
    full_name: str = ""
    image_url: str = ""


class BeneficiaryAllocationSchema(BaseModel):
    """
    One entry of a beneficiary's allocation history.

    ENTRANCE rows have empty old_* fields.
    """

    id: str = ""
    beneficiary_id: str = ""
    beneficiary: BeneficiaryRef = Field(default_factory=BeneficiaryRef)
    type: str = AllocationType.ENTRANCE.value
    housing_id: str = ""
    housing: HousingSchema = Field(default_factory=HousingSchema)
    room_id: str = ""
    room: SpaceSchema = Field(default_factory=SpaceSchema)
    old_housing_id: str = ""
    old_housing: HousingSchema = Field(default_factory=HousingSchema)
    old_room_id: str = ""
    old_room: SpaceSchema = Field(default_factory=SpaceSchema)
    created_by_id: str = ""
    created_at: str = ""


class BeneficiaryStats(BaseModel):
    """active + pending + inactive == total_beneficiaries."""

    total_beneficiaries: int = 0
    active_beneficiaries: int = 0
    pending_beneficiaries: int = 0
    inactive_beneficiaries: int = 0
