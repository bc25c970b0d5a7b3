# =============================================================================
# core/repositories/spaces.py - Room Repository
# =============================================================================
# Single rooms of a housing (housing_rooms rows). Any change to a room's
# capacity or occupancy is followed by a recount of the housing totals.
# =============================================================================

import logging

from app.exceptions import CapacityExceededError
from core.models.beneficiary import BeneficiaryAllocationSchema, BeneficiarySchema
from core.models.common import ApiResponse, Page
from core.models.enums import OrganizationStatus
from core.models.housing import CreateSpaceRequest, SpaceSchema, UpdateSpaceRequest
from core.repositories.base import ALLOCATION_COLUMNS, BENEFICIARY_COLUMNS, BaseRepository
from core.repositories.housing import HousingRepository
from core.transforms import transform_allocation, transform_beneficiary, transform_space
from lib.utils import utc_now_iso

logger = logging.getLogger(__name__)

TABLE = "housing_rooms"


class SpaceRepository(BaseRepository):
    """Rooms: CRUD, residents, history and occupancy counter."""

    @property
    def housings(self) -> HousingRepository:
        return HousingRepository(self.client, self._legacy)

    async def get_space_by_id(self, space_id: str) -> ApiResponse[SpaceSchema]:
        row = await self._fetch_one(TABLE, space_id, "Room")
        return ApiResponse(transform_space(row))

    async def create_space(
        self,
        housing_id: str,
        data: CreateSpaceRequest,
    ) -> ApiResponse[SpaceSchema]:
        now = utc_now_iso()
        row = {
            "housing_id": housing_id,
            "name": data.name,
            "capacity": data.total_vacancies,
            "occupied": 0,
            "status": OrganizationStatus.ACTIVE.value,
            "created_at": now,
            "updated_at": now,
        }

        try:
            created = await self._insert_one(TABLE, row)
        except Exception as e:
            logger.error(f"Failed to create room in housing {housing_id}: {e}")
            raise

        await self.housings.recalculate_housing_totals(housing_id)
        logger.info(f"Created room: {created.get('id')} in housing {housing_id}")
        return ApiResponse(transform_space(created), status=201, status_text="Created")

    async def update_space(
        self,
        space_id: str,
        data: UpdateSpaceRequest,
    ) -> ApiResponse[SpaceSchema]:
        """
        Update a room.

        Raises:
            CapacityExceededError: If the new capacity is below the number
                of beneficiaries already in the room
        """
        changes = data.model_dump(mode="json", exclude_none=True)
        if "total_vacancies" in changes:
            changes["capacity"] = changes.pop("total_vacancies")

        current = await self._fetch_one(TABLE, space_id, "Room", columns="id, housing_id, occupied")
        occupied = int(current.get("occupied") or 0)
        if "capacity" in changes and changes["capacity"] < occupied:
            raise CapacityExceededError(space_id, changes["capacity"])

        changes["updated_at"] = utc_now_iso()
        updated = await self._update_one(TABLE, space_id, changes, "Room")

        if "capacity" in changes:
            await self.housings.recalculate_housing_totals(current["housing_id"])

        logger.info(f"Updated room: {space_id}")
        return ApiResponse(transform_space(updated))

    async def delete_space(self, space_id: str) -> ApiResponse[None]:
        current = await self._fetch_one(TABLE, space_id, "Room", columns="id, housing_id")

        try:
            await self._delete_one(TABLE, space_id)
        except Exception as e:
            logger.error(f"Failed to delete room {space_id}: {e}")
            raise

        await self.housings.recalculate_housing_totals(current["housing_id"])
        logger.info(f"Deleted room: {space_id}")
        return ApiResponse(None, status=204, status_text="No Content")

    async def get_beneficiaries_by_space_id(
        self,
        space_id: str,
        offset: int = 0,
        limit: int = 20,
        search: str = "",
    ) -> ApiResponse[Page[BeneficiarySchema]]:
        page = await self._page(
            "beneficiaries",
            transform_beneficiary,
            offset,
            limit,
            columns=BENEFICIARY_COLUMNS,
            filters={"current_room_id": space_id},
            search=search,
            search_columns=["full_name", "email"],
        )
        return ApiResponse(page)

    async def get_allocations_by_space_id(
        self,
        space_id: str,
    ) -> ApiResponse[list[BeneficiaryAllocationSchema]]:
        """History rows moving beneficiaries into or out of the room."""
        query = await self.client.query("beneficiary_allocations")
        response = await (
            query.select(ALLOCATION_COLUMNS)
            .or_(f"room_id.eq.{space_id},old_room_id.eq.{space_id}")
            .order("created_at", desc=True)
            .execute()
        )
        return ApiResponse([transform_allocation(row) for row in response.data or []])

    async def adjust_occupancy(self, space_id: str, delta: int) -> int:
        """
        Add `delta` beds to the room's occupancy (negative releases beds).

        Occupancy never drops below zero.

        Returns:
            The new occupancy

        Raises:
            CapacityExceededError: If the room would be over capacity
            ConcurrentUpdateError: If the counter kept changing underneath
        """
        room = await self._fetch_one(TABLE, space_id, "Room", columns="id, housing_id, capacity")
        capacity = int(room.get("capacity") or 0)

        def compute(current: int) -> int:
            new_value = max(current + delta, 0)
            if delta > 0 and new_value > capacity:
                raise CapacityExceededError(space_id, capacity)
            return new_value

        occupied = await self._compare_and_set(TABLE, space_id, "occupied", compute, "Room")
        await self.housings.recalculate_housing_totals(room["housing_id"])

        logger.info(f"Room {space_id} occupancy now {occupied}/{capacity}")
        return occupied
