# =============================================================================
# app/routers/users.py - User Endpoints
# =============================================================================
# Organization members and platform staff.
# All endpoints require authentication.
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Path, Query

from app.dependencies import UserRepoDep
from app.routers.responses import DEFAULT_LIMIT, MAX_LIMIT, respond
from core.models.enums import PlatformRole
from core.models.user import (
    UpdateUserPlatformRoleRequest,
    UpdateUserRequest,
    UpdateUserStatusRequest,
)

router = APIRouter()

UserId = Annotated[str, Path(description="User ID")]
Offset = Annotated[int, Query(ge=0)]
Limit = Annotated[int, Query(ge=1, le=MAX_LIMIT)]


@router.get("/organizations/{org_id}/users")
async def list_organization_users(
    org_id: str,
    repo: UserRepoDep,
    offset: Offset = 0,
    limit: Limit = DEFAULT_LIMIT,
    search: str = "",
):
    return respond(await repo.find_users_by_organization_id(org_id, offset, limit, search))


@router.get("/users/relif")
async def list_relif_users(repo: UserRepoDep, offset: Offset = 0, limit: Limit = DEFAULT_LIMIT):
    """Platform staff (users whose platform role is RELIF_MEMBER)."""
    return respond(await repo.get_relif_users(offset, limit))


@router.get("/users/search")
async def search_users(
    repo: UserRepoDep,
    search: str = "",
    organization_id: str | None = None,
    platform_role: PlatformRole | None = None,
    offset: Offset = 0,
    limit: Limit = DEFAULT_LIMIT,
):
    """Search users by name or email, optionally within one organization or role."""
    return respond(await repo.search_users(search, organization_id, platform_role, offset, limit))


@router.get("/users/{user_id}")
async def get_user(user_id: UserId, repo: UserRepoDep):
    return respond(await repo.find_user(user_id))


@router.put("/users/{user_id}")
async def update_user(user_id: UserId, request: UpdateUserRequest, repo: UserRepoDep):
    return respond(await repo.update_user(user_id, request))


@router.patch("/users/{user_id}/status")
async def update_user_status(user_id: UserId, request: UpdateUserStatusRequest, repo: UserRepoDep):
    return respond(await repo.update_user_status(user_id, request.status))


@router.patch("/users/{user_id}/platform-role")
async def update_user_platform_role(
    user_id: UserId,
    request: UpdateUserPlatformRoleRequest,
    repo: UserRepoDep,
):
    return respond(await repo.update_user_platform_role(user_id, request.platform_role))


@router.post("/users/{user_id}/reactivate")
async def reactivate_user(user_id: UserId, repo: UserRepoDep):
    return respond(await repo.reactivate_user(user_id))


@router.delete("/users/{user_id}", status_code=204)
async def delete_user(user_id: UserId, repo: UserRepoDep):
    return respond(await repo.delete_user(user_id))
