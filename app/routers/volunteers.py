# =============================================================================
# app/routers/volunteers.py - Volunteer Endpoints
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Path, Query
from pydantic import BaseModel

from app.dependencies import VolunteerRepoDep
from app.routers.responses import DEFAULT_LIMIT, MAX_LIMIT, respond
from core.models.enums import VolunteerStatus
from core.models.volunteer import CreateVolunteerRequest, UpdateVolunteerRequest

router = APIRouter()

VolunteerId = Annotated[str, Path(description="Volunteer ID")]


class VolunteerStatusRequest(BaseModel):
    """Request to change a volunteer's status."""
    status: VolunteerStatus


@router.get("/organizations/{org_id}/volunteers")
async def list_volunteers(
    org_id: str,
    repo: VolunteerRepoDep,
    offset: Annotated[int, Query(ge=0)] = 0,
    limit: Annotated[int, Query(ge=1, le=MAX_LIMIT)] = DEFAULT_LIMIT,
    search: str = "",
):
    return respond(await repo.get_volunteers_by_organization_id(org_id, offset, limit, search))


@router.get("/organizations/{org_id}/volunteers/stats")
async def volunteer_stats(org_id: str, repo: VolunteerRepoDep):
    return respond(await repo.get_volunteer_stats(org_id))


@router.post("/organizations/{org_id}/volunteers", status_code=201)
async def create_volunteer(org_id: str, request: CreateVolunteerRequest, repo: VolunteerRepoDep):
    return respond(await repo.create_volunteer(org_id, request))


@router.get("/volunteers/{volunteer_id}")
async def get_volunteer(volunteer_id: VolunteerId, repo: VolunteerRepoDep):
    return respond(await repo.get_volunteer_by_id(volunteer_id))


@router.put("/volunteers/{volunteer_id}")
async def update_volunteer(
    volunteer_id: VolunteerId,
    request: UpdateVolunteerRequest,
    repo: VolunteerRepoDep,
):
    return respond(await repo.update_volunteer(volunteer_id, request))


@router.patch("/volunteers/{volunteer_id}/status")
async def update_volunteer_status(
    volunteer_id: VolunteerId,
    request: VolunteerStatusRequest,
    repo: VolunteerRepoDep,
):
    return respond(await repo.update_volunteer_status(volunteer_id, request.status))


@router.delete("/volunteers/{volunteer_id}", status_code=204)
async def delete_volunteer(volunteer_id: VolunteerId, repo: VolunteerRepoDep):
    return respond(await repo.delete_volunteer(volunteer_id))
