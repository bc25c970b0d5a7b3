# =============================================================================
# app/routers/organizations.py - Organization Endpoints
# =============================================================================
# Organizations plus the invites and requests an organization decides on.
# All endpoints require authentication; visibility is enforced by RLS.
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Path, Query

from app.dependencies import InviteRepoDep, OrganizationRepoDep, RequestRepoDep
from app.routers.responses import DEFAULT_LIMIT, MAX_LIMIT, respond
from core.models.organization import CreateOrganizationRequest, UpdateOrganizationRequest
from core.models.requests import (
    CreateAdminInviteRequest,
    CreateOrganizationInviteRequest,
    CreateTypeUpdateRequest,
)

router = APIRouter()

OrgId = Annotated[str, Path(description="Organization ID")]


# =============================================================================
# Organizations
# =============================================================================

@router.get("/organizations")
async def list_organizations(
    repo: OrganizationRepoDep,
    offset: Annotated[int, Query(ge=0)] = 0,
    limit: Annotated[int, Query(ge=1, le=MAX_LIMIT)] = DEFAULT_LIMIT,
    search: str = "",
):
    """List organizations visible to the caller, newest first."""
    return respond(await repo.find_all_organizations(offset, limit, search))


@router.post("/organizations", status_code=201)
async def create_organization(request: CreateOrganizationRequest, repo: OrganizationRepoDep):
    """
    Create an organization owned by the caller.

    The caller becomes the organization's owner and is linked to it.
    """
    return respond(await repo.create_organization(request))


@router.get("/organizations/{org_id}")
async def get_organization(org_id: OrgId, repo: OrganizationRepoDep):
    return respond(await repo.find_organization_by_id(org_id))


@router.put("/organizations/{org_id}")
async def update_organization(
    org_id: OrgId,
    request: UpdateOrganizationRequest,
    repo: OrganizationRepoDep,
):
    return respond(await repo.update_organization(org_id, request))


@router.post("/organizations/{org_id}/deactivate")
async def deactivate_organization(org_id: OrgId, repo: OrganizationRepoDep):
    return respond(await repo.deactivate_organization(org_id))


@router.post("/organizations/{org_id}/reactivate")
async def reactivate_organization(org_id: OrgId, repo: OrganizationRepoDep):
    return respond(await repo.reactivate_organization(org_id))


# =============================================================================
# Invites
# =============================================================================

@router.get("/organizations/{org_id}/invites")
async def list_organization_invites(org_id: OrgId, repo: InviteRepoDep):
    return respond(await repo.find_organization_invites(org_id))


@router.post("/organizations/{org_id}/invites", status_code=201)
async def create_organization_invite(
    org_id: OrgId,
    request: CreateOrganizationInviteRequest,
    repo: InviteRepoDep,
):
    return respond(await repo.create_organization_invite(org_id, request))


@router.post("/invites/{invite_id}/cancel")
async def cancel_organization_invite(invite_id: str, repo: InviteRepoDep):
    return respond(await repo.cancel_organization_invite(invite_id))


@router.get("/organizations/{org_id}/platform-invites")
async def list_platform_invites(org_id: OrgId, repo: InviteRepoDep):
    return respond(await repo.find_platform_invites_by_organization_id(org_id))


@router.post("/platform-invites/{invite_id}/accept")
async def accept_platform_invite(invite_id: str, repo: InviteRepoDep):
    return respond(await repo.accept_platform_invite(invite_id))


@router.post("/admin-invites", status_code=201)
async def create_admin_invite(request: CreateAdminInviteRequest, repo: InviteRepoDep):
    """Invite someone to become platform staff."""
    return respond(await repo.create_admin_invite(request))


# =============================================================================
# Requests
# =============================================================================

@router.get("/organizations/{org_id}/join-requests")
async def list_join_requests(org_id: OrgId, repo: RequestRepoDep):
    return respond(await repo.find_join_requests(org_id))


@router.post("/join-requests/{request_id}/accept")
async def accept_join_request(request_id: str, repo: RequestRepoDep):
    """Accept a join request (the user is added to the organization)."""
    return respond(await repo.accept_join_request(request_id))


@router.post("/join-requests/{request_id}/reject")
async def reject_join_request(request_id: str, repo: RequestRepoDep):
    return respond(await repo.reject_join_request(request_id))


@router.get("/organizations/{org_id}/data-access-requests")
async def list_data_access_requests(org_id: OrgId, repo: RequestRepoDep):
    """Requests from other organizations for access to this one's data."""
    return respond(await repo.find_data_access_requests(org_id))


@router.post("/data-access-requests/{request_id}/accept")
async def accept_data_access_request(request_id: str, repo: RequestRepoDep):
    return respond(await repo.accept_data_access_request(request_id))


@router.post("/data-access-requests/{request_id}/reject")
async def reject_data_access_request(request_id: str, repo: RequestRepoDep):
    return respond(await repo.reject_data_access_request(request_id))


@router.get("/organizations/{org_id}/type-update-requests")
async def list_type_update_requests(org_id: OrgId, repo: RequestRepoDep):
    return respond(await repo.find_type_update_requests(org_id))


@router.post("/organizations/{org_id}/type-update-requests", status_code=201)
async def create_type_update_request(
    org_id: OrgId,
    request: CreateTypeUpdateRequest,
    repo: RequestRepoDep,
):
    return respond(await repo.create_type_update_request(org_id, request))


@router.post("/type-update-requests/{request_id}/accept")
async def accept_type_update_request(request_id: str, repo: RequestRepoDep):
    return respond(await repo.accept_type_update_request(request_id))


@router.post("/type-update-requests/{request_id}/reject")
async def reject_type_update_request(request_id: str, repo: RequestRepoDep):
    return respond(await repo.reject_type_update_request(request_id))
