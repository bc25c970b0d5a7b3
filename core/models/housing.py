# =============================================================================
# core/models/housing.py - Housing and Room Schemas
# =============================================================================
# - HousingSchema: a shelter/building owned by an organization
# - SpaceSchema: a room inside a housing (stored in housing_rooms)
# - HousingStats: per-organization occupancy summary
#
# Rooms store capacity/occupied; clients see total_vacancies and
# occupied_vacancies for both housings and rooms.
# =============================================================================

from typing import Any

from pydantic import BaseModel, Field

from .enums import OrganizationStatus


class HousingSchema(BaseModel):
    """
    Housing as returned to clients.

    Counters are totals over the housing's rooms.
    """

    id: str = ""
    organization_id: str = ""
    name: str = ""
    status: str = OrganizationStatus.ACTIVE.value
    address: dict[str, Any] = Field(default_factory=dict)
    total_vacancies: int = 0
    occupied_vacancies: int = 0
    total_rooms: int = 0
    created_at: str = ""
    updated_at: str = ""


class SpaceSchema(BaseModel):
    """Room as returned to clients (capacity -> total_vacancies)."""

    id: str = ""
    housing_id: str = ""
    name: str = ""
    total_vacancies: int = 0
    occupied_vacancies: int = 0
    status: str = OrganizationStatus.ACTIVE.value
    created_at: str = ""
    updated_at: str = ""


class CreateHousingRequest(BaseModel):
    """
    Schema for creating a housing.

    The organization is taken from the signed-in user.

    Example:
        {"name": "North Shelter", "address": {"street": "Rua A 1", "city": "Porto"}}
    """

    name: str = Field(..., min_length=1, max_length=255)
    address: dict[str, Any] = Field(default_factory=dict)


class UpdateHousingRequest(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    address: dict[str, Any] | None = None
    status: OrganizationStatus | None = None


class CreateSpaceRequest(BaseModel):
    """A room to create; total_vacancies is stored as the room capacity."""

    name: str = Field(..., min_length=1, max_length=255)
    total_vacancies: int = Field(default=1, ge=1, description="Beds in the room")


class UpdateSpaceRequest(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    total_vacancies: int | None = Field(default=None, ge=0)
    status: OrganizationStatus | None = None


class HousingStats(BaseModel):
    """
    Occupancy summary for an organization.

    available + occupied + maintenance + archived == total_housing.
    """

    total_housing: int = 0
    available_housing: int = 0
    occupied_housing: int = 0
    maintenance_housing: int = 0
    archived_housing: int = 0
    total_capacity: int = 0
    total_occupied: int = 0
