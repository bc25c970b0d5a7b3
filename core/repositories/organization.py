# =============================================================================
# core/repositories/organization.py - Organization Repository
# =============================================================================
# CRUD for tenant organizations. Errors propagate (no legacy fallback).
# =============================================================================

import logging

from core.models.common import ApiResponse, Page
from core.models.enums import OrganizationStatus
from core.models.organization import (
    CreateOrganizationRequest,
    OrganizationSchema,
    UpdateOrganizationRequest,
)
from core.repositories.base import BaseRepository
from core.transforms import transform_organization
from lib.utils import utc_now_iso

logger = logging.getLogger(__name__)

TABLE = "organizations"


class OrganizationRepository(BaseRepository):
    """Organizations: create, read, update, list and (de)activate."""

    async def create_organization(
        self,
        data: CreateOrganizationRequest,
    ) -> ApiResponse[OrganizationSchema]:
        """
        Create an organization owned by the signed-in user.

        Raises:
            NotAuthenticatedError: If nobody is signed in
        """
        owner_id = await self._current_user_id()
        now = utc_now_iso()

        row = {
            **data.model_dump(mode="json", exclude_none=True),
            "owner_id": owner_id,
            "status": OrganizationStatus.ACTIVE.value,
            "created_at": now,
            "updated_at": now,
        }

        try:
            created = await self._insert_one(TABLE, row)
        except Exception as e:
            logger.error(f"Failed to create organization: {e}")
            raise

        logger.info(f"Created organization: {created.get('id')} owned by {owner_id}")
        return ApiResponse(transform_organization(created), status=201, status_text="Created")

    async def find_organization_by_id(self, org_id: str) -> ApiResponse[OrganizationSchema]:
        row = await self._fetch_one(TABLE, org_id, "Organization")
        return ApiResponse(transform_organization(row))

    async def update_organization(
        self,
        org_id: str,
        data: UpdateOrganizationRequest,
    ) -> ApiResponse[OrganizationSchema]:
        """Write the fields that were set and return the updated organization."""
        changes = data.model_dump(mode="json", exclude_none=True)
        changes["updated_at"] = utc_now_iso()

        try:
            updated = await self._update_one(TABLE, org_id, changes, "Organization")
        except Exception as e:
            logger.error(f"Failed to update organization {org_id}: {e}")
            raise

        logger.info(f"Updated organization: {org_id}")
        return ApiResponse(transform_organization(updated))

    async def find_all_organizations(
        self,
        offset: int = 0,
        limit: int = 20,
        search: str = "",
    ) -> ApiResponse[Page[OrganizationSchema]]:
        page = await self._page(
            TABLE,
            transform_organization,
            offset,
            limit,
            search=search,
            search_columns=["name", "description"],
        )
        return ApiResponse(page)

    async def deactivate_organization(self, org_id: str) -> ApiResponse[OrganizationSchema]:
        return await self._set_status(org_id, OrganizationStatus.INACTIVE)

    async def reactivate_organization(self, org_id: str) -> ApiResponse[OrganizationSchema]:
        return await self._set_status(org_id, OrganizationStatus.ACTIVE)

    async def _set_status(
        self,
        org_id: str,
        status: OrganizationStatus,
    ) -> ApiResponse[OrganizationSchema]:
        updated = await self._update_one(
            TABLE,
            org_id,
            {"status": status.value, "updated_at": utc_now_iso()},
            "Organization",
        )
        logger.info(f"Organization {org_id} status set to {status.value}")
        return ApiResponse(transform_organization(updated))
