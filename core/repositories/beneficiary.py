# =============================================================================
# core/repositories/beneficiary.py - Beneficiary Repository
# =============================================================================
# Beneficiaries, their room allocation and allocation history.
#
# Hosted backend first; every beneficiary read/write except creation falls
# back to the legacy API on any failure (the legacy body is passed through
# unchanged). Allocation refusals (full room, unknown room, wrong housing)
# never reach the legacy API. Allocation goes through the allocate_beneficiary /
# reallocate_beneficiary stored procedures so the history row, the
# beneficiary pointers and the room counters change in one transaction.
# =============================================================================

import logging
from uuid import uuid4

from postgrest.exceptions import APIError

from app.exceptions import AllocationRejectedError, CapacityExceededError, RecordNotFoundError
from core.models.beneficiary import (
    AllocateBeneficiaryRequest,
    BeneficiaryAllocationSchema,
    BeneficiarySchema,
    BeneficiaryStats,
    CreateBeneficiaryRequest,
    UpdateBeneficiaryRequest,
)
from core.models.case import DocumentLink
from core.models.common import ApiResponse, Page
from core.models.enums import AllocationType, BeneficiaryStatus
from core.models.inventory import ProductEntry
from core.repositories.base import ALLOCATION_COLUMNS, BENEFICIARY_COLUMNS, BaseRepository
from core.repositories.spaces import SpaceRepository
from core.stats import beneficiary_stats
from core.transforms import transform_allocation, transform_beneficiary, transform_product_entry
from lib.fallback import FallbackPolicy, with_fallback
from lib.utils import file_extension, utc_now_iso

logger = logging.getLogger(__name__)

TABLE = "beneficiaries"

# Typed refusals from the allocation procedures
ALLOCATION_REFUSALS = (CapacityExceededError, RecordNotFoundError, AllocationRejectedError)
ORGANIZATION_COLUMN = "current_organization_id"
DONATION_COLUMNS = "*, product_types(*), beneficiaries(full_name), organizations(*)"
SEARCH_COLUMNS = ["full_name", "email"]

PROFILE_IMAGES_BUCKET = "profile-images"


class BeneficiaryRepository(BaseRepository):
    """Beneficiaries: CRUD, stats, room allocation and history."""

    # -------------------------------------------------------------------------
    # Lists and stats
    # -------------------------------------------------------------------------

    async def get_beneficiaries_by_organization_id(
        self,
        org_id: str,
        offset: int = 0,
        limit: int = 20,
        search: str = "",
    ) -> ApiResponse[Page[BeneficiarySchema]]:
        """
        One page of an organization's beneficiaries, newest first.

        Searches full name and email. Falls back to the legacy
        organizations/{id}/beneficiaries endpoint.
        """
        async def primary() -> ApiResponse[Page[BeneficiarySchema]]:
            page = await self._page(
                TABLE,
                transform_beneficiary,
                offset,
                limit,
                columns=BENEFICIARY_COLUMNS,
                filters={ORGANIZATION_COLUMN: org_id},
                search=search,
                search_columns=SEARCH_COLUMNS,
            )
            logger.info(
                f"Fetched {len(page.data)} of {page.count} beneficiaries for organization {org_id}"
            )
            return ApiResponse(page)

        return await with_fallback(
            "get_beneficiaries_by_organization_id",
            primary,
            lambda: self.legacy.request(
                f"organizations/{org_id}/beneficiaries",
                params={"offset": offset, "limit": limit, "search": search},
            ),
            FallbackPolicy.always(),
        )

    async def get_beneficiary_stats(self, org_id: str) -> ApiResponse[BeneficiaryStats]:
        """Status counts for an organization; zeroed when the backend fails."""
        async def primary() -> BeneficiaryStats:
            rows = await self._rows_for(TABLE, "id, status", **{ORGANIZATION_COLUMN: org_id})
            return beneficiary_stats(rows)

        async def zeroed() -> BeneficiaryStats:
            return BeneficiaryStats()

        stats = await with_fallback(
            "get_beneficiary_stats", primary, zeroed, FallbackPolicy.always()
        )
        return ApiResponse(stats)

    # -------------------------------------------------------------------------
    # CRUD
    # -------------------------------------------------------------------------

    async def create_beneficiary(
        self,
        org_id: str,
        data: CreateBeneficiaryRequest,
    ) -> ApiResponse[BeneficiarySchema]:
        now = utc_now_iso()
        row = {
            **data.model_dump(mode="json", exclude_none=True),
            ORGANIZATION_COLUMN: org_id,
            "status": BeneficiaryStatus.ACTIVE.value,
            "created_at": now,
            "updated_at": now,
        }

        try:
            created = await self._insert_one(TABLE, row)
        except Exception as e:
            logger.error(f"Failed to create beneficiary for organization {org_id}: {e}")
            raise

        logger.info(f"Created beneficiary: {created.get('id')} in organization {org_id}")
        return ApiResponse(transform_beneficiary(created), status=201, status_text="Created")

    async def get_beneficiary_by_id(self, beneficiary_id: str) -> ApiResponse[BeneficiarySchema]:
        async def primary() -> ApiResponse[BeneficiarySchema]:
            row = await self._fetch_one(
                TABLE, beneficiary_id, "Beneficiary", columns=BENEFICIARY_COLUMNS
            )
            return ApiResponse(transform_beneficiary(row))

        return await with_fallback(
            "get_beneficiary_by_id",
            primary,
            lambda: self.legacy.request(f"beneficiaries/{beneficiary_id}"),
            FallbackPolicy.always(),
        )

    async def update_beneficiary(
        self,
        beneficiary_id: str,
        data: UpdateBeneficiaryRequest,
    ) -> ApiResponse[BeneficiarySchema]:
        """Write the fields that were set; allocation is not changed here."""
        changes = data.model_dump(mode="json", exclude_none=True)

        async def primary() -> ApiResponse[BeneficiarySchema]:
            await self._update_one(
                TABLE, beneficiary_id, {**changes, "updated_at": utc_now_iso()}, "Beneficiary"
            )
            logger.info(f"Updated beneficiary: {beneficiary_id}")
            row = await self._fetch_one(
                TABLE, beneficiary_id, "Beneficiary", columns=BENEFICIARY_COLUMNS
            )
            return ApiResponse(transform_beneficiary(row))

        return await with_fallback(
            "update_beneficiary",
            primary,
            lambda: self.legacy.request(
                f"beneficiaries/{beneficiary_id}", method="PUT", json=changes
            ),
            FallbackPolicy.always(),
        )

    async def delete_beneficiary(self, beneficiary_id: str) -> ApiResponse[None]:
        """
        Delete a beneficiary, releasing the bed they occupy first.

        The bed is taken back if the row cannot be deleted, so the room
        counters keep matching the beneficiaries that point at the room.
        """
        async def primary() -> ApiResponse[None]:
            row = await self._fetch_one(
                TABLE, beneficiary_id, "Beneficiary", columns="id, current_room_id"
            )
            room_id = row.get("current_room_id")
            spaces = SpaceRepository(self.client, self._legacy)
            if room_id:
                await spaces.adjust_occupancy(room_id, -1)

            try:
                await self._delete_one(TABLE, beneficiary_id)
            except Exception as e:
                if room_id:
                    logger.error(
                        f"Failed to delete beneficiary {beneficiary_id}, restoring bed in room {room_id}: {e}"
                    )
                    await spaces.adjust_occupancy(room_id, 1)
                raise
            logger.info(f"Deleted beneficiary: {beneficiary_id}")
            return ApiResponse(None, status=204, status_text="No Content")

        return await with_fallback(
            "delete_beneficiary",
            primary,
            lambda: self.legacy.request(f"beneficiaries/{beneficiary_id}", method="DELETE"),
            FallbackPolicy.always(),
        )

    # -------------------------------------------------------------------------
    # Allocation
    # -------------------------------------------------------------------------

    async def allocate_beneficiary(
        self,
        beneficiary_id: str,
        data: AllocateBeneficiaryRequest,
    ) -> ApiResponse[BeneficiaryAllocationSchema]:
        """First placement of a beneficiary in a room (ENTRANCE)."""
        return await self._move(beneficiary_id, data, AllocationType.ENTRANCE)

    async def reallocate_beneficiary(
        self,
        beneficiary_id: str,
        data: AllocateBeneficiaryRequest,
    ) -> ApiResponse[BeneficiaryAllocationSchema]:
        """Move a beneficiary to another room (REALLOCATION)."""
        return await self._move(beneficiary_id, data, AllocationType.REALLOCATION)

    async def _move(
        self,
        beneficiary_id: str,
        data: AllocateBeneficiaryRequest,
        allocation_type: AllocationType,
    ) -> ApiResponse[BeneficiaryAllocationSchema]:
        is_entrance = allocation_type == AllocationType.ENTRANCE
        function = "allocate_beneficiary" if is_entrance else "reallocate_beneficiary"
        endpoint = "allocate" if is_entrance else "reallocate"
        payload = data.model_dump(mode="json")

        async def primary() -> ApiResponse[BeneficiaryAllocationSchema]:
            created_by = await self._current_user_id()
            try:
                history = await self.client.rpc(function, {
                    "p_beneficiary_id": beneficiary_id,
                    "p_housing_id": data.housing_id,
                    "p_room_id": data.room_id,
                    "p_created_by": created_by,
                })
            except APIError as e:
                raise self._allocation_error(e, beneficiary_id, data.room_id) from e

            if isinstance(history, list):
                history = history[0] if history else {}

            logger.info(
                f"{allocation_type.value}: beneficiary {beneficiary_id} -> "
                f"housing {data.housing_id} room {data.room_id}"
            )
            return ApiResponse(transform_allocation(history), status=201, status_text="Created")

        return await with_fallback(
            function,
            primary,
            lambda: self.legacy.request(
                f"beneficiaries/{beneficiary_id}/{endpoint}", method="POST", json=payload
            ),
            FallbackPolicy.always(passthrough=ALLOCATION_REFUSALS),
        )

    @staticmethod
    def _allocation_error(error: APIError, beneficiary_id: str, room_id: str) -> Exception:
        """Map errors raised by the allocation procedures to typed errors."""
        message = error.message or ""
        if message.startswith("ROOM_FULL"):
            capacity = message.rsplit("capacity", 1)[-1].strip(" )")
            return CapacityExceededError(room_id, int(capacity) if capacity.isdigit() else 0)
        if message.startswith("NOT_FOUND: room"):
            return RecordNotFoundError("Room", room_id)
        if message.startswith("NOT_FOUND"):
            return RecordNotFoundError("Beneficiary", beneficiary_id)
        for reason in ("ROOM_NOT_IN_HOUSING", "ALREADY_IN_ROOM"):
            if message.startswith(reason):
                return AllocationRejectedError(reason, message, beneficiary_id, room_id)
        return error

    async def get_allocations_by_beneficiary_id(
        self,
        beneficiary_id: str,
        offset: int = 0,
        limit: int = 20,
    ) -> ApiResponse[Page[BeneficiaryAllocationSchema]]:
        """Allocation history, newest first."""
        async def primary() -> ApiResponse[Page[BeneficiaryAllocationSchema]]:
            page = await self._page(
                "beneficiary_allocations",
                transform_allocation,
                offset,
                limit,
                columns=ALLOCATION_COLUMNS,
                filters={"beneficiary_id": beneficiary_id},
            )
            return ApiResponse(page)

        return await with_fallback(
            "get_allocations_by_beneficiary_id",
            primary,
            lambda: self.legacy.request(
                f"beneficiaries/{beneficiary_id}/allocations",
                params={"offset": offset, "limit": limit},
            ),
            FallbackPolicy.always(),
        )

    # -------------------------------------------------------------------------
    # Donations and images
    # -------------------------------------------------------------------------

    async def get_donations_by_beneficiary_id(
        self,
        beneficiary_id: str,
        offset: int = 0,
        limit: int = 20,
    ) -> ApiResponse[Page[ProductEntry]]:
        page = await self._page(
            "donations",
            transform_product_entry,
            offset,
            limit,
            columns=DONATION_COLUMNS,
            filters={"beneficiary_id": beneficiary_id},
        )
        return ApiResponse(page)

    async def generate_profile_image_upload_link(self, file_type: str) -> ApiResponse[DocumentLink]:
        """
        Signed upload link for a beneficiary photo.

        Store the returned file_key (or its public URL) as image_url.
        """
        path = f"beneficiaries/{uuid4()}.{file_extension(file_type)}"
        link = await self._upload_link(PROFILE_IMAGES_BUCKET, path)
        logger.info(f"Generated profile image upload link: {link.file_key}")
        return ApiResponse(link)
