# =============================================================================
# core/repositories/volunteer.py - Volunteer Repository
# =============================================================================

import logging

from core.models.common import ApiResponse, Page
from core.models.enums import VolunteerStatus
from core.models.volunteer import (
    CreateVolunteerRequest,
    UpdateVolunteerRequest,
    VolunteerSchema,
    VolunteerStats,
)
from core.repositories.base import BaseRepository
from core.stats import volunteer_stats
from core.transforms import transform_volunteer
from lib.fallback import FallbackPolicy, with_fallback
from lib.utils import utc_now_iso

logger = logging.getLogger(__name__)

TABLE = "voluntary_people"


class VolunteerRepository(BaseRepository):
    """Volunteers of an organization."""

    async def get_volunteers_by_organization_id(
        self,
        org_id: str,
        offset: int = 0,
        limit: int = 20,
        search: str = "",
    ) -> ApiResponse[Page[VolunteerSchema]]:
        page = await self._page(
            TABLE,
            transform_volunteer,
            offset,
            limit,
            filters={"organization_id": org_id},
            search=search,
            search_columns=["full_name", "email"],
        )
        logger.info(f"Fetched {len(page.data)} of {page.count} volunteers for organization {org_id}")
        return ApiResponse(page)

    async def get_volunteer_stats(self, org_id: str) -> ApiResponse[VolunteerStats]:
        async def primary() -> VolunteerStats:
            rows = await self._rows_for(TABLE, "id, status", organization_id=org_id)
            return volunteer_stats(rows)

        async def zeroed() -> VolunteerStats:
            return VolunteerStats()

        stats = await with_fallback("get_volunteer_stats", primary, zeroed, FallbackPolicy.always())
        return ApiResponse(stats)

    async def create_volunteer(
        self,
        org_id: str,
        data: CreateVolunteerRequest,
    ) -> ApiResponse[VolunteerSchema]:
        now = utc_now_iso()
        row = {
            **data.model_dump(mode="json", exclude_none=True),
            "organization_id": org_id,
            "status": VolunteerStatus.ACTIVE.value,
            "created_at": now,
            "updated_at": now,
        }

        try:
            created = await self._insert_one(TABLE, row)
        except Exception as e:
            logger.error(f"Failed to create volunteer for organization {org_id}: {e}")
            raise

        logger.info(f"Created volunteer: {created.get('id')} in organization {org_id}")
        return ApiResponse(transform_volunteer(created), status=201, status_text="Created")

    async def get_volunteer_by_id(self, volunteer_id: str) -> ApiResponse[VolunteerSchema]:
        row = await self._fetch_one(TABLE, volunteer_id, "Volunteer")
        return ApiResponse(transform_volunteer(row))

    async def update_volunteer(
        self,
        volunteer_id: str,
        data: UpdateVolunteerRequest,
    ) -> ApiResponse[VolunteerSchema]:
        changes = data.model_dump(mode="json", exclude_none=True)
        changes["updated_at"] = utc_now_iso()

        try:
            updated = await self._update_one(TABLE, volunteer_id, changes, "Volunteer")
        except Exception as e:
            logger.error(f"Failed to update volunteer {volunteer_id}: {e}")
            raise

        logger.info(f"Updated volunteer: {volunteer_id}")
        return ApiResponse(transform_volunteer(updated))

    async def delete_volunteer(self, volunteer_id: str) -> ApiResponse[None]:
        try:
            await self._delete_one(TABLE, volunteer_id)
        except Exception as e:
            logger.error(f"Failed to delete volunteer {volunteer_id}: {e}")
            raise

        logger.info(f"Deleted volunteer: {volunteer_id}")
        return ApiResponse(None, status=204, status_text="No Content")

    async def update_volunteer_status(
        self,
        volunteer_id: str,
        status: VolunteerStatus | str,
    ) -> ApiResponse[VolunteerSchema]:
        status = VolunteerStatus(status)
        updated = await self._update_one(
            TABLE,
            volunteer_id,
            {"status": status.value, "updated_at": utc_now_iso()},
            "Volunteer",
        )
        logger.info(f"Volunteer {volunteer_id} status set to {status.value}")
        return ApiResponse(transform_volunteer(updated))
