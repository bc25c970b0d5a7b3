# =============================================================================
# core/repositories/invites.py - Invite Repository
# =============================================================================
# Invitations sent by organizations and by platform staff:
# - organization_invites: join an organization (create / find / cancel)
# - platform_invites: join the platform (find / accept)
# - platform_admin_invites: become platform staff (create)
# =============================================================================

import logging

from core.models.common import ApiResponse
from core.models.enums import RequestStatus
from core.models.requests import (
    CreateAdminInviteRequest,
    CreateOrganizationInviteRequest,
    JoinOrganizationInviteSchema,
    JoinPlatformInviteSchema,
)
from core.repositories.base import BaseRepository
from core.transforms import transform_invite, transform_platform_invite
from lib.utils import utc_now_iso

logger = logging.getLogger(__name__)

ORGANIZATION_INVITES = "organization_invites"
PLATFORM_INVITES = "platform_invites"
PLATFORM_ADMIN_INVITES = "platform_admin_invites"


class InviteRepository(BaseRepository):
    """Organization, platform and platform-admin invites."""

    # -------------------------------------------------------------------------
    # Organization invites
    # -------------------------------------------------------------------------

    async def create_organization_invite(
        self,
        org_id: str,
        data: CreateOrganizationInviteRequest,
    ) -> ApiResponse[JoinOrganizationInviteSchema]:
        row = {
            "organization_id": org_id,
            "email": data.email,
            "role": data.role,
            "status": RequestStatus.PENDING.value,
            "created_at": utc_now_iso(),
        }

        try:
            created = await self._insert_one(ORGANIZATION_INVITES, row)
        except Exception as e:
            logger.error(f"Failed to invite {data.email} to organization {org_id}: {e}")
            raise

        logger.info(f"Invited {data.email} to organization {org_id}")
        return ApiResponse(transform_invite(created), status=201, status_text="Created")

    async def find_organization_invites(
        self,
        org_id: str,
    ) -> ApiResponse[list[JoinOrganizationInviteSchema]]:
        rows = await self._rows_for(ORGANIZATION_INVITES, "*", organization_id=org_id)
        return ApiResponse([transform_invite(row) for row in rows])

    async def cancel_organization_invite(
        self,
        invite_id: str,
    ) -> ApiResponse[JoinOrganizationInviteSchema]:
        updated = await self._update_one(
            ORGANIZATION_INVITES,
            invite_id,
            {"status": RequestStatus.CANCELED.value},
            "Invite",
        )
        logger.info(f"Canceled organization invite {invite_id}")
        return ApiResponse(transform_invite(updated))

    # -------------------------------------------------------------------------
    # Platform invites
    # -------------------------------------------------------------------------

    async def find_platform_invites_by_organization_id(
        self,
        org_id: str,
    ) -> ApiResponse[list[JoinPlatformInviteSchema]]:
        rows = await self._rows_for(PLATFORM_INVITES, "*", organization_id=org_id)
        return ApiResponse([transform_platform_invite(row) for row in rows])

    async def accept_platform_invite(self, invite_id: str) -> ApiResponse[JoinPlatformInviteSchema]:
        updated = await self._update_one(
            PLATFORM_INVITES,
            invite_id,
            {"status": RequestStatus.ACCEPTED.value},
            "Platform invite",
        )
        logger.info(f"Accepted platform invite {invite_id}")
        return ApiResponse(transform_platform_invite(updated))

    # -------------------------------------------------------------------------
    # Platform admin invites
    # -------------------------------------------------------------------------

    async def create_admin_invite(self, data: CreateAdminInviteRequest) -> ApiResponse[None]:
        row = {
            "email": data.email,
            "status": RequestStatus.PENDING.value,
            "created_at": utc_now_iso(),
        }

        try:
            await self._insert_one(PLATFORM_ADMIN_INVITES, row)
        except Exception as e:
            logger.error(f"Failed to create admin invite for {data.email}: {e}")
            raise

        logger.info(f"Invited {data.email} as platform staff")
        return ApiResponse(None, status=201, status_text="Created")
