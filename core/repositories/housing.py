# =============================================================================
# core/repositories/housing.py - Housing Repository
# =============================================================================
# Housings (shelters) and the rooms inside them.
#
# A housing's total_vacancies / occupied_vacancies / total_rooms are
# denormalized sums over its housing_rooms rows. They are only ever
# recomputed from the rooms (recalculate_housing_totals), never written
# from a value the caller computed.
# =============================================================================

import logging

from core.models.beneficiary import BeneficiaryAllocationSchema, BeneficiarySchema
from core.models.common import ApiResponse, Page
from core.models.enums import OrganizationStatus
from core.models.housing import (
    CreateHousingRequest,
    CreateSpaceRequest,
    HousingSchema,
    HousingStats,
    SpaceSchema,
    UpdateHousingRequest,
)
from core.repositories.base import ALLOCATION_COLUMNS, BENEFICIARY_COLUMNS, BaseRepository
from core.stats import housing_stats
from core.transforms import (
    transform_allocation,
    transform_beneficiary,
    transform_housing,
    transform_space,
)
from lib.fallback import FallbackPolicy, with_fallback
from lib.utils import utc_now_iso

logger = logging.getLogger(__name__)

TABLE = "housing"
ROOMS_TABLE = "housing_rooms"


class HousingRepository(BaseRepository):
    """Housings: CRUD, stats, rooms, residents and allocation history."""

    async def find_housings_by_organization_id(
        self,
        org_id: str,
        offset: int = 0,
        limit: int = 20,
        search: str = "",
    ) -> ApiResponse[Page[HousingSchema]]:
        page = await self._page(
            TABLE,
            transform_housing,
            offset,
            limit,
            filters={"organization_id": org_id},
            search=search,
            search_columns=["name"],
        )
        logger.info(f"Fetched {len(page.data)} of {page.count} housings for organization {org_id}")
        return ApiResponse(page)

    async def get_housing_stats(self, org_id: str) -> ApiResponse[HousingStats]:
        """Occupancy summary; zeroed when the backend fails."""
        async def primary() -> HousingStats:
            rows = await self._rows_for(
                TABLE,
                "id, status, total_vacancies, occupied_vacancies",
                organization_id=org_id,
            )
            return housing_stats(rows)

        async def zeroed() -> HousingStats:
            return HousingStats()

        stats = await with_fallback("get_housing_stats", primary, zeroed, FallbackPolicy.always())
        return ApiResponse(stats)

    async def create_housing(self, data: CreateHousingRequest) -> ApiResponse[HousingSchema]:
        """
        Create a housing in the signed-in user's organization.

        Counters start at zero; add rooms with create_spaces.

        Raises:
            NotAuthenticatedError: If nobody is signed in
            UserOrganizationNotFoundError: If the user has no organization
        """
        org_id = await self._current_organization_id()
        now = utc_now_iso()

        row = {
            **data.model_dump(mode="json"),
            "organization_id": org_id,
            "status": OrganizationStatus.ACTIVE.value,
            "total_vacancies": 0,
            "occupied_vacancies": 0,
            "total_rooms": 0,
            "created_at": now,
            "updated_at": now,
        }

        try:
            created = await self._insert_one(TABLE, row)
        except Exception as e:
            logger.error(f"Failed to create housing for organization {org_id}: {e}")
            raise

        logger.info(f"Created housing: {created.get('id')} in organization {org_id}")
        return ApiResponse(transform_housing(created), status=201, status_text="Created")

    async def get_housing_by_id(self, housing_id: str) -> ApiResponse[HousingSchema]:
        row = await self._fetch_one(TABLE, housing_id, "Housing")
        return ApiResponse(transform_housing(row))

    async def update_housing(
        self,
        housing_id: str,
        data: UpdateHousingRequest,
    ) -> ApiResponse[HousingSchema]:
        changes = data.model_dump(mode="json", exclude_none=True)
        changes["updated_at"] = utc_now_iso()

        try:
            updated = await self._update_one(TABLE, housing_id, changes, "Housing")
        except Exception as e:
            logger.error(f"Failed to update housing {housing_id}: {e}")
            raise

        logger.info(f"Updated housing: {housing_id}")
        return ApiResponse(transform_housing(updated))

    async def delete_housing(self, housing_id: str) -> ApiResponse[None]:
        try:
            await self._delete_one(TABLE, housing_id)
        except Exception as e:
            logger.error(f"Failed to delete housing {housing_id}: {e}")
            raise

        logger.info(f"Deleted housing: {housing_id}")
        return ApiResponse(None, status=204, status_text="No Content")

    # -------------------------------------------------------------------------
    # Rooms, residents, history
    # -------------------------------------------------------------------------

    async def get_spaces_by_housing_id(
        self,
        housing_id: str,
        offset: int = 0,
        limit: int = 20,
        search: str = "",
    ) -> ApiResponse[Page[SpaceSchema]]:
        page = await self._page(
            ROOMS_TABLE,
            transform_space,
            offset,
            limit,
            filters={"housing_id": housing_id},
            search=search,
            search_columns=["name"],
            order_by="name",
            descending=False,
        )
        return ApiResponse(page)

    async def get_beneficiaries_by_housing_id(
        self,
        housing_id: str,
        offset: int = 0,
        limit: int = 20,
        search: str = "",
    ) -> ApiResponse[Page[BeneficiarySchema]]:
        """Beneficiaries currently living in the housing."""
        page = await self._page(
            "beneficiaries",
            transform_beneficiary,
            offset,
            limit,
            columns=BENEFICIARY_COLUMNS,
            filters={"current_housing_id": housing_id},
            search=search,
            search_columns=["full_name", "email"],
        )
        return ApiResponse(page)

    async def get_allocations_by_housing_id(
        self,
        housing_id: str,
        offset: int = 0,
        limit: int = 20,
    ) -> ApiResponse[Page[BeneficiaryAllocationSchema]]:
        """Allocation history rows moving beneficiaries into the housing."""
        page = await self._page(
            "beneficiary_allocations",
            transform_allocation,
            offset,
            limit,
            columns=ALLOCATION_COLUMNS,
            filters={"housing_id": housing_id},
        )
        return ApiResponse(page)

    async def create_spaces(
        self,
        housing_id: str,
        spaces: list[CreateSpaceRequest],
    ) -> ApiResponse[list[SpaceSchema]]:
        """
        Add several rooms to a housing in one insert, then refresh the
        housing totals.
        """
        await self._fetch_one(TABLE, housing_id, "Housing", columns="id")

        now = utc_now_iso()
        rows = [
            {
                "housing_id": housing_id,
                "name": space.name,
                "capacity": space.total_vacancies,
                "occupied": 0,
                "status": OrganizationStatus.ACTIVE.value,
                "created_at": now,
                "updated_at": now,
            }
            for space in spaces
        ]
        if not rows:
            return ApiResponse([], status=201, status_text="Created")

        query = await self.client.query(ROOMS_TABLE)
        try:
            response = await query.insert(rows).execute()
        except Exception as e:
            logger.error(f"Failed to create {len(rows)} rooms in housing {housing_id}: {e}")
            raise

        created = [transform_space(row) for row in response.data or []]
        await self.recalculate_housing_totals(housing_id)

        logger.info(f"Created {len(created)} rooms in housing {housing_id}")
        return ApiResponse(created, status=201, status_text="Created")

    async def recalculate_housing_totals(self, housing_id: str) -> ApiResponse[HousingSchema]:
        """
        Recompute total_vacancies, occupied_vacancies and total_rooms from
        the housing's room rows.
        """
        rooms = await self._rows_for(ROOMS_TABLE, "capacity, occupied", housing_id=housing_id)

        totals = {
            "total_vacancies": sum(int(room.get("capacity") or 0) for room in rooms),
            "occupied_vacancies": sum(int(room.get("occupied") or 0) for room in rooms),
            "total_rooms": len(rooms),
            "updated_at": utc_now_iso(),
        }
        updated = await self._update_one(TABLE, housing_id, totals, "Housing")

        logger.debug(
            f"Housing {housing_id} totals: {totals['occupied_vacancies']}/"
            f"{totals['total_vacancies']} in {totals['total_rooms']} rooms"
        )
        return ApiResponse(transform_housing(updated))
