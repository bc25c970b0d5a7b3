# =============================================================================
# app/routers/beneficiaries.py - Beneficiary Endpoints
# =============================================================================
# Beneficiary CRUD, stats, housing allocation and history.
# All endpoints require authentication.
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Path, Query

from app.dependencies import BeneficiaryRepoDep
from app.routers.responses import DEFAULT_LIMIT, MAX_LIMIT, respond
from core.models.beneficiary import (
    AllocateBeneficiaryRequest,
    CreateBeneficiaryRequest,
    UpdateBeneficiaryRequest,
)

router = APIRouter()

BeneficiaryId = Annotated[str, Path(description="Beneficiary ID")]
Offset = Annotated[int, Query(ge=0)]
Limit = Annotated[int, Query(ge=1, le=MAX_LIMIT)]


@router.get("/organizations/{org_id}/beneficiaries")
async def list_beneficiaries(
    org_id: str,
    repo: BeneficiaryRepoDep,
    offset: Offset = 0,
    limit: Limit = DEFAULT_LIMIT,
    search: str = "",
):
    """
    List an organization's beneficiaries, newest first.

    `search` matches full name or email.
    """
    return respond(await repo.get_beneficiaries_by_organization_id(org_id, offset, limit, search))


@router.get("/organizations/{org_id}/beneficiaries/stats")
async def beneficiary_stats(org_id: str, repo: BeneficiaryRepoDep):
    return respond(await repo.get_beneficiary_stats(org_id))


@router.post("/organizations/{org_id}/beneficiaries", status_code=201)
async def create_beneficiary(
    org_id: str,
    request: CreateBeneficiaryRequest,
    repo: BeneficiaryRepoDep,
):
    return respond(await repo.create_beneficiary(org_id, request))


@router.post("/beneficiaries/profile-image-link")
async def profile_image_upload_link(
    repo: BeneficiaryRepoDep,
    file_type: Annotated[str, Query(min_length=1, description="MIME type or extension")],
):
    """Signed link the client uploads a profile picture to."""
    return respond(await repo.generate_profile_image_upload_link(file_type))


@router.get("/beneficiaries/{beneficiary_id}")
async def get_beneficiary(beneficiary_id: BeneficiaryId, repo: BeneficiaryRepoDep):
    return respond(await repo.get_beneficiary_by_id(beneficiary_id))


@router.put("/beneficiaries/{beneficiary_id}")
async def update_beneficiary(
    beneficiary_id: BeneficiaryId,
    request: UpdateBeneficiaryRequest,
    repo: BeneficiaryRepoDep,
):
    return respond(await repo.update_beneficiary(beneficiary_id, request))


@router.delete("/beneficiaries/{beneficiary_id}", status_code=204)
async def delete_beneficiary(beneficiary_id: BeneficiaryId, repo: BeneficiaryRepoDep):
    """Delete a beneficiary, releasing their bed if they had one."""
    return respond(await repo.delete_beneficiary(beneficiary_id))


# =============================================================================
# Allocation
# =============================================================================

@router.post("/beneficiaries/{beneficiary_id}/allocate", status_code=201)
async def allocate_beneficiary(
    beneficiary_id: BeneficiaryId,
    request: AllocateBeneficiaryRequest,
    repo: BeneficiaryRepoDep,
):
    """
    Place a beneficiary in a room.

    Fails with 409 when the room is full.
    """
    return respond(await repo.allocate_beneficiary(beneficiary_id, request))


@router.post("/beneficiaries/{beneficiary_id}/reallocate", status_code=201)
async def reallocate_beneficiary(
    beneficiary_id: BeneficiaryId,
    request: AllocateBeneficiaryRequest,
    repo: BeneficiaryRepoDep,
):
    return respond(await repo.reallocate_beneficiary(beneficiary_id, request))


@router.get("/beneficiaries/{beneficiary_id}/allocations")
async def list_beneficiary_allocations(
    beneficiary_id: BeneficiaryId,
    repo: BeneficiaryRepoDep,
    offset: Offset = 0,
    limit: Limit = DEFAULT_LIMIT,
):
    return respond(await repo.get_allocations_by_beneficiary_id(beneficiary_id, offset, limit))


@router.get("/beneficiaries/{beneficiary_id}/donations")
async def list_beneficiary_donations(
    beneficiary_id: BeneficiaryId,
    repo: BeneficiaryRepoDep,
    offset: Offset = 0,
    limit: Limit = DEFAULT_LIMIT,
):
    return respond(await repo.get_donations_by_beneficiary_id(beneficiary_id, offset, limit))
