# =============================================================================
# app/routers/housings.py - Housing and Space Endpoints
# =============================================================================
# Housings, their rooms ("spaces"), and who lives where.
# All endpoints require authentication.
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Path, Query

from app.dependencies import HousingRepoDep, SpaceRepoDep
from app.routers.responses import DEFAULT_LIMIT, MAX_LIMIT, respond
from core.models.housing import (
    CreateHousingRequest,
    CreateSpaceRequest,
    UpdateHousingRequest,
    UpdateSpaceRequest,
)

router = APIRouter()

HousingId = Annotated[str, Path(description="Housing ID")]
SpaceId = Annotated[str, Path(description="Space (room) ID")]
Offset = Annotated[int, Query(ge=0)]
Limit = Annotated[int, Query(ge=1, le=MAX_LIMIT)]


# =============================================================================
# Housings
# =============================================================================

@router.get("/organizations/{org_id}/housings")
async def list_housings(
    org_id: str,
    repo: HousingRepoDep,
    offset: Offset = 0,
    limit: Limit = DEFAULT_LIMIT,
    search: str = "",
):
    return respond(await repo.find_housings_by_organization_id(org_id, offset, limit, search))


@router.get("/organizations/{org_id}/housings/stats")
async def housing_stats(org_id: str, repo: HousingRepoDep):
    return respond(await repo.get_housing_stats(org_id))


@router.post("/housings", status_code=201)
async def create_housing(request: CreateHousingRequest, repo: HousingRepoDep):
    """Create a housing in the caller's organization."""
    return respond(await repo.create_housing(request))


@router.get("/housings/{housing_id}")
async def get_housing(housing_id: HousingId, repo: HousingRepoDep):
    return respond(await repo.get_housing_by_id(housing_id))


@router.put("/housings/{housing_id}")
async def update_housing(
    housing_id: HousingId,
    request: UpdateHousingRequest,
    repo: HousingRepoDep,
):
    return respond(await repo.update_housing(housing_id, request))


@router.delete("/housings/{housing_id}", status_code=204)
async def delete_housing(housing_id: HousingId, repo: HousingRepoDep):
    return respond(await repo.delete_housing(housing_id))


@router.post("/housings/{housing_id}/recalculate")
async def recalculate_housing(housing_id: HousingId, repo: HousingRepoDep):
    """Recompute capacity and occupancy totals from the housing's rooms."""
    return respond(await repo.recalculate_housing_totals(housing_id))


@router.get("/housings/{housing_id}/beneficiaries")
async def list_housing_beneficiaries(
    housing_id: HousingId,
    repo: HousingRepoDep,
    offset: Offset = 0,
    limit: Limit = DEFAULT_LIMIT,
    search: str = "",
):
    return respond(await repo.get_beneficiaries_by_housing_id(housing_id, offset, limit, search))


@router.get("/housings/{housing_id}/allocations")
async def list_housing_allocations(
    housing_id: HousingId,
    repo: HousingRepoDep,
    offset: Offset = 0,
    limit: Limit = DEFAULT_LIMIT,
):
    return respond(await repo.get_allocations_by_housing_id(housing_id, offset, limit))


# =============================================================================
# Spaces
# =============================================================================

@router.get("/housings/{housing_id}/spaces")
async def list_spaces(
    housing_id: HousingId,
    repo: HousingRepoDep,
    offset: Offset = 0,
    limit: Limit = DEFAULT_LIMIT,
    search: str = "",
):
    return respond(await repo.get_spaces_by_housing_id(housing_id, offset, limit, search))


@router.post("/housings/{housing_id}/spaces", status_code=201)
async def create_spaces(
    housing_id: HousingId,
    request: list[CreateSpaceRequest],
    repo: HousingRepoDep,
):
    """Create several rooms at once; housing totals are recomputed afterwards."""
    return respond(await repo.create_spaces(housing_id, request))


@router.post("/housings/{housing_id}/space", status_code=201)
async def create_space(
    housing_id: HousingId,
    request: CreateSpaceRequest,
    repo: SpaceRepoDep,
):
    return respond(await repo.create_space(housing_id, request))


@router.get("/spaces/{space_id}")
async def get_space(space_id: SpaceId, repo: SpaceRepoDep):
    return respond(await repo.get_space_by_id(space_id))


@router.put("/spaces/{space_id}")
async def update_space(space_id: SpaceId, request: UpdateSpaceRequest, repo: SpaceRepoDep):
    """
    Update a room.

    Lowering capacity below the current number of occupants fails with 409.
    """
    return respond(await repo.update_space(space_id, request))


@router.delete("/spaces/{space_id}", status_code=204)
async def delete_space(space_id: SpaceId, repo: SpaceRepoDep):
    return respond(await repo.delete_space(space_id))


@router.get("/spaces/{space_id}/beneficiaries")
async def list_space_beneficiaries(
    space_id: SpaceId,
    repo: SpaceRepoDep,
    offset: Offset = 0,
    limit: Limit = DEFAULT_LIMIT,
    search: str = "",
):
    return respond(await repo.get_beneficiaries_by_space_id(space_id, offset, limit, search))


@router.get("/spaces/{space_id}/allocations")
async def list_space_allocations(space_id: SpaceId, repo: SpaceRepoDep):
    """Moves into and out of this room."""
    return respond(await repo.get_allocations_by_space_id(space_id))
