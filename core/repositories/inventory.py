# =============================================================================
# core/repositories/inventory.py - Inventory Repository
# =============================================================================
# Product types, their stock counter and donations to beneficiaries.
#
# product_types.total_in_storage is changed only through compare-and-set
# updates and never drops below zero. There is no per-location stock table:
# allocation history and storage records are derived from the current
# counter (one entry held by the owning organization).
# =============================================================================

import logging

from app.config import settings
from app.exceptions import InsufficientStockError, InvalidQuantityError, RelifException
from core.models.common import ApiResponse, Page
from core.models.enums import LocationType, ProductEntryType
from core.models.inventory import (
    AddProductRequest,
    AllocationSchema,
    CreateProductRequest,
    DonateProductRequest,
    EntryEndpoint,
    InventoryStats,
    MoveProductRequest,
    ProductEntry,
    ProductSchema,
    StockChange,
    StorageLocation,
    UpdateProductRequest,
)
from core.repositories.base import BaseRepository
from core.stats import inventory_stats
from core.transforms import transform_product, transform_product_entry
from lib.fallback import FallbackPolicy, with_fallback
from lib.utils import page_bounds, utc_now_iso

logger = logging.getLogger(__name__)

TABLE = "product_types"
DONATIONS_TABLE = "donations"
STOCK_COLUMN = "total_in_storage"

PRODUCT_COLUMNS = "*, organizations:organization_id(*)"
DONATION_COLUMNS = "*, product_types(*), beneficiaries(full_name), organizations(*)"


class InventoryRepository(BaseRepository):
    """Products: CRUD, stats, stock movements and donations."""

    # -------------------------------------------------------------------------
    # Products
    # -------------------------------------------------------------------------

    async def get_products_by_organization_id(
        self,
        org_id: str,
        offset: int = 0,
        limit: int = 20,
        search: str = "",
    ) -> ApiResponse[Page[ProductSchema]]:
        page = await self._page(
            TABLE,
            transform_product,
            offset,
            limit,
            columns=PRODUCT_COLUMNS,
            filters={"organization_id": org_id},
            search=search,
            search_columns=["name", "description", "brand"],
        )
        logger.info(f"Fetched {len(page.data)} of {page.count} products for organization {org_id}")
        return ApiResponse(page)

    async def get_inventory_stats(self, org_id: str) -> ApiResponse[InventoryStats]:
        """Stock summary; zeroed when the backend fails."""
        async def primary() -> InventoryStats:
            rows = await self._rows_for(TABLE, f"id, {STOCK_COLUMN}", organization_id=org_id)
            return inventory_stats(rows, settings.LOW_STOCK_THRESHOLD)

        async def zeroed() -> InventoryStats:
            return InventoryStats()

        stats = await with_fallback("get_inventory_stats", primary, zeroed, FallbackPolicy.always())
        return ApiResponse(stats)

    async def create_product(
        self,
        org_id: str,
        data: CreateProductRequest,
    ) -> ApiResponse[ProductSchema]:
        """Register a product type with zero stock."""
        now = utc_now_iso()
        row = {
            **data.model_dump(mode="json", exclude_none=True),
            "organization_id": org_id,
            "unit_type": data.unit_type or "pcs",
            STOCK_COLUMN: 0,
            "created_at": now,
            "updated_at": now,
        }

        try:
            created = await self._insert_one(TABLE, row)
        except Exception as e:
            logger.error(f"Failed to create product for organization {org_id}: {e}")
            raise

        logger.info(f"Created product: {created.get('id')} in organization {org_id}")
        return await self._product_response(str(created["id"]), status=201, status_text="Created")

    async def get_product_by_id(self, product_id: str) -> ApiResponse[ProductSchema]:
        return await self._product_response(product_id)

    async def update_product(
        self,
        product_id: str,
        data: UpdateProductRequest,
    ) -> ApiResponse[ProductSchema]:
        """Update descriptive fields; stock only moves through the stock operations."""
        changes = data.model_dump(mode="json", exclude_none=True)
        changes["updated_at"] = utc_now_iso()

        try:
            await self._update_one(TABLE, product_id, changes, "Product")
        except Exception as e:
            logger.error(f"Failed to update product {product_id}: {e}")
            raise

        logger.info(f"Updated product: {product_id}")
        return await self._product_response(product_id)

    async def delete_product(self, product_id: str) -> ApiResponse[None]:
        try:
            await self._delete_one(TABLE, product_id)
        except Exception as e:
            logger.error(f"Failed to delete product {product_id}: {e}")
            raise

        logger.info(f"Deleted product: {product_id}")
        return ApiResponse(None, status=204, status_text="No Content")

    async def _product_response(
        self,
        product_id: str,
        status: int = 200,
        status_text: str = "OK",
    ) -> ApiResponse[ProductSchema]:
        row = await self._fetch_one(TABLE, product_id, "Product", columns=PRODUCT_COLUMNS)
        return ApiResponse(transform_product(row), status=status, status_text=status_text)

    # -------------------------------------------------------------------------
    # Stock movements
    # -------------------------------------------------------------------------

    async def _change_stock(self, product_id: str, delta: int) -> int:
        """
        Add `delta` units (negative removes) with a compare-and-set update.

        Raises:
            InsufficientStockError: If removing more than is in storage
        """
        def compute(current: int) -> int:
            new_total = current + delta
            if new_total < 0:
                raise InsufficientStockError(product_id, -delta, current)
            return new_total

        return await self._compare_and_set(TABLE, product_id, STOCK_COLUMN, compute, "Product")

    async def allocate_product(
        self,
        product_id: str,
        data: AddProductRequest,
    ) -> ApiResponse[StockChange]:
        """
        Add units to storage.

        Raises:
            InvalidQuantityError: If quantity is not positive
        """
        if data.quantity <= 0:
            raise InvalidQuantityError(data.quantity)

        new_total = await self._change_stock(product_id, data.quantity)

        logger.info(f"Product {product_id}: +{data.quantity} units, {new_total} in storage")
        return ApiResponse(StockChange(
            product_id=product_id,
            new_total=new_total,
            details={
                "quantity": data.quantity,
                "location": data.location.model_dump(mode="json") if data.location else None,
            },
        ))

    async def reallocate_product(
        self,
        product_id: str,
        data: MoveProductRequest,
    ) -> ApiResponse[StockChange]:
        """
        Move units between two storage locations.

        Stock is tracked per product, not per location, so the total does
        not change; the movement is validated and logged.

        Raises:
            InvalidQuantityError: If quantity is not positive
            InsufficientStockError: If the product holds fewer units
        """
        if data.quantity <= 0:
            raise InvalidQuantityError(data.quantity)
        if data.from_.id == data.to.id and data.from_.type == data.to.type:
            raise RelifException(
                message="Source and destination are the same location",
                code="INVALID_MOVEMENT",
                status_code=400,
                suggestion="Choose a different destination",
            )

        row = await self._fetch_one(TABLE, product_id, "Product", columns=f"id, {STOCK_COLUMN}")
        available = int(row.get(STOCK_COLUMN) or 0)
        if data.quantity > available:
            raise InsufficientStockError(product_id, data.quantity, available)

        logger.info(
            f"Product {product_id}: moved {data.quantity} units "
            f"{data.from_.type.value}:{data.from_.id} -> {data.to.type.value}:{data.to.id}"
        )
        return ApiResponse(StockChange(
            product_id=product_id,
            new_total=available,
            details=data.model_dump(mode="json", by_alias=True),
        ))

    async def donate_product(
        self,
        product_id: str,
        data: DonateProductRequest,
    ) -> ApiResponse[ProductEntry]:
        """
        Hand units to a beneficiary: decrement stock, then record the donation.

        If the donation row cannot be written the units are put back.

        Raises:
            InvalidQuantityError: If quantity is not positive
            InsufficientStockError: If the product holds fewer units
        """
        if data.quantity <= 0:
            raise InvalidQuantityError(data.quantity)

        product = await self._fetch_one(TABLE, product_id, "Product", columns="id, organization_id")
        new_total = await self._change_stock(product_id, -data.quantity)

        row = {
            "product_type_id": product_id,
            "beneficiary_id": data.beneficiary_id,
            "organization_id": product.get("organization_id"),
            "quantity": data.quantity,
            "from_id": data.from_.id,
            "from_type": data.from_.type.value,
            "from_name": data.from_name,
            "created_at": utc_now_iso(),
        }

        try:
            created = await self._insert_one(DONATIONS_TABLE, row)
        except Exception as e:
            logger.error(f"Failed to record donation of product {product_id}, restoring stock: {e}")
            await self._change_stock(product_id, data.quantity)
            raise

        logger.info(
            f"Donated {data.quantity} of product {product_id} to beneficiary "
            f"{data.beneficiary_id}, {new_total} left"
        )
        donation = await self._fetch_one(
            DONATIONS_TABLE, str(created["id"]), "Donation", columns=DONATION_COLUMNS
        )
        return ApiResponse(transform_product_entry(donation), status=201, status_text="Created")

    # -------------------------------------------------------------------------
    # History
    # -------------------------------------------------------------------------

    async def get_allocations(
        self,
        product_id: str,
        offset: int = 0,
        limit: int = 20,
    ) -> ApiResponse[Page[ProductEntry]]:
        """
        Stock entries of a product.

        Derived from the current counter: one ENTRANCE entry into the owning
        organization while any stock is held.
        """
        row = await self._fetch_one(TABLE, product_id, "Product", columns=PRODUCT_COLUMNS)
        product = transform_product(row)

        entries: list[ProductEntry] = []
        if product.total_in_storage > 0:
            entries.append(ProductEntry(
                id=f"{product_id}-current",
                product_type_id=product_id,
                product_type=product,
                brand=product.brand,
                category=product.category,
                description=product.description,
                quantity=product.total_in_storage,
                from_=self._organization_endpoint(product),
                to=self._organization_endpoint(product),
                type=ProductEntryType.ENTRANCE.value,
                organization_id=product.organization_id,
                organization=product.organization,
                created_at=product.created_at,
                updated_at=product.updated_at,
            ))

        start, end = page_bounds(offset, limit)
        return ApiResponse(Page(count=len(entries), data=entries[start:end + 1]))

    async def get_donations(
        self,
        product_id: str,
        offset: int = 0,
        limit: int = 20,
    ) -> ApiResponse[Page[ProductEntry]]:
        page = await self._page(
            DONATIONS_TABLE,
            transform_product_entry,
            offset,
            limit,
            columns=DONATION_COLUMNS,
            filters={"product_type_id": product_id},
        )
        return ApiResponse(page)

    async def get_storage_records(self, product_id: str) -> ApiResponse[list[AllocationSchema]]:
        """Where the product's stock is held (the owning organization)."""
        row = await self._fetch_one(TABLE, product_id, "Product", columns=PRODUCT_COLUMNS)
        product = transform_product(row)

        records: list[AllocationSchema] = []
        if product.total_in_storage > 0:
            records.append(AllocationSchema(
                id=f"{product_id}-org-storage",
                location=StorageLocation(
                    id=product.organization_id,
                    name=product.organization.name,
                    type=LocationType.ORGANIZATION.value,
                ),
                quantity=product.total_in_storage,
            ))

        logger.debug(f"Product {product_id}: {len(records)} storage records")
        return ApiResponse(records)

    @staticmethod
    def _organization_endpoint(product: ProductSchema) -> EntryEndpoint:
        return EntryEndpoint(
            id=product.organization_id,
            type=LocationType.ORGANIZATION.value,
            name=product.organization.name,
        )
