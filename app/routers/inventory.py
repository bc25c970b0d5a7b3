# =============================================================================
# app/routers/inventory.py - Inventory Endpoints
# =============================================================================
# Product types, stock movements, donations and history.
# All endpoints require authentication.
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Path, Query

from app.dependencies import InventoryRepoDep
from app.routers.responses import DEFAULT_LIMIT, MAX_LIMIT, respond
from core.models.inventory import (
    AddProductRequest,
    CreateProductRequest,
    DonateProductRequest,
    MoveProductRequest,
    UpdateProductRequest,
)

router = APIRouter()

ProductId = Annotated[str, Path(description="Product type ID")]
Offset = Annotated[int, Query(ge=0)]
Limit = Annotated[int, Query(ge=1, le=MAX_LIMIT)]


# =============================================================================
# Products
# =============================================================================

@router.get("/organizations/{org_id}/products")
async def list_products(
    org_id: str,
    repo: InventoryRepoDep,
    offset: Offset = 0,
    limit: Limit = DEFAULT_LIMIT,
    search: str = "",
):
    return respond(await repo.get_products_by_organization_id(org_id, offset, limit, search))


@router.get("/organizations/{org_id}/products/stats")
async def inventory_stats(org_id: str, repo: InventoryRepoDep):
    return respond(await repo.get_inventory_stats(org_id))


@router.post("/organizations/{org_id}/products", status_code=201)
async def create_product(org_id: str, request: CreateProductRequest, repo: InventoryRepoDep):
    return respond(await repo.create_product(org_id, request))


@router.get("/products/{product_id}")
async def get_product(product_id: ProductId, repo: InventoryRepoDep):
    return respond(await repo.get_product_by_id(product_id))


@router.put("/products/{product_id}")
async def update_product(product_id: ProductId, request: UpdateProductRequest, repo: InventoryRepoDep):
    return respond(await repo.update_product(product_id, request))


@router.delete("/products/{product_id}", status_code=204)
async def delete_product(product_id: ProductId, repo: InventoryRepoDep):
    return respond(await repo.delete_product(product_id))


# =============================================================================
# Stock movements
# =============================================================================

@router.post("/products/{product_id}/allocate")
async def allocate_product(product_id: ProductId, request: AddProductRequest, repo: InventoryRepoDep):
    """Add units to storage (an entrance)."""
    return respond(await repo.allocate_product(product_id, request))


@router.post("/products/{product_id}/reallocate")
async def reallocate_product(product_id: ProductId, request: MoveProductRequest, repo: InventoryRepoDep):
    """
    Move units between storage locations.

    Fails with 400 when source and destination are the same and with 409
    when the source holds fewer units than requested.
    """
    return respond(await repo.reallocate_product(product_id, request))


@router.post("/products/{product_id}/donate", status_code=201)
async def donate_product(product_id: ProductId, request: DonateProductRequest, repo: InventoryRepoDep):
    """Give units to a beneficiary; stock is decremented."""
    return respond(await repo.donate_product(product_id, request))


# =============================================================================
# History
# =============================================================================

@router.get("/products/{product_id}/allocations")
async def list_product_allocations(
    product_id: ProductId,
    repo: InventoryRepoDep,
    offset: Offset = 0,
    limit: Limit = DEFAULT_LIMIT,
):
    return respond(await repo.get_allocations(product_id, offset, limit))


@router.get("/products/{product_id}/donations")
async def list_product_donations(
    product_id: ProductId,
    repo: InventoryRepoDep,
    offset: Offset = 0,
    limit: Limit = DEFAULT_LIMIT,
):
    return respond(await repo.get_donations(product_id, offset, limit))


@router.get("/products/{product_id}/storage-records")
async def list_storage_records(product_id: ProductId, repo: InventoryRepoDep):
    return respond(await repo.get_storage_records(product_id))
