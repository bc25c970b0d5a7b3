# =============================================================================
# core/models/inventory.py - Product and Stock Schemas
# =============================================================================
# - ProductSchema: a product type with its denormalized stock counter
# - ProductEntry: one stock movement (entrance, reallocation or donation)
# - AllocationSchema: where a product's stock is currently held
# - InventoryStats: per-organization stock summary
# =============================================================================

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .enums import LocationType, ProductEntryType
from .organization import OrganizationSchema


class ProductSchema(BaseModel):
    id: str = ""
    name: str = ""
    description: str = ""
    brand: str = ""
    category: str = ""
    organization_id: str = ""
    organization: OrganizationSchema = Field(default_factory=OrganizationSchema)
    unit_type: str = "pcs"
    total_in_storage: int = 0
    created_at: str = ""
    updated_at: str = ""


class EntryEndpoint(BaseModel):
    """Source or destination of a stock movement."""

    id: str = ""
    type: str = LocationType.ORGANIZATION.value
    name: str = ""


class ProductEntry(BaseModel):
    """
    One stock movement.

    `from` is a Python keyword, so the field is named from_ and serialized
    with its alias.

    Example:
        {
            "type": "DONATION",
            "quantity": 2,
            "from": {"id": "<housing id>", "type": "HOUSING"},
            "to": {"id": "<beneficiary id>", "type": "BENEFICIARY"}
        }
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str = ""
    product_type_id: str = ""
    product_type: ProductSchema = Field(default_factory=ProductSchema)
    brand: str = ""
    category: str = ""
    description: str = ""
    quantity: int = 0
    from_: EntryEndpoint = Field(default_factory=EntryEndpoint, alias="from")
    to: EntryEndpoint = Field(default_factory=EntryEndpoint)
    type: str = ProductEntryType.ENTRANCE.value
    organization_id: str = ""
    organization: OrganizationSchema = Field(default_factory=OrganizationSchema)
    created_at: str = ""
    updated_at: str = ""


class StorageLocation(BaseModel):
    id: str = ""
    name: str = ""
    type: str = LocationType.ORGANIZATION.value


class AllocationSchema(BaseModel):
    """Stock held at one location."""

    id: str = ""
    location: StorageLocation = Field(default_factory=StorageLocation)
    quantity: int = 0


class CreateProductRequest(BaseModel):
    """
    Schema for registering a product type.

    Stock starts at zero; use allocate_product to add units.
    """

    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    brand: str | None = None
    category: str | None = None
    unit_type: str | None = Field(default=None, description="Unit of measure, defaults to pcs")


class UpdateProductRequest(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    brand: str | None = None
    category: str | None = None
    unit_type: str | None = None


class Location(BaseModel):
    id: str = Field(..., min_length=1)
    type: LocationType = LocationType.ORGANIZATION


class AddProductRequest(BaseModel):
    """Units entering storage."""

    quantity: int = Field(..., gt=0)
    location: Location | None = None


class MoveProductRequest(BaseModel):
    """Units moving between two storage locations."""

    model_config = ConfigDict(populate_by_name=True)

    from_: Location = Field(..., alias="from")
    to: Location
    quantity: int = Field(..., gt=0)


class DonateProductRequest(BaseModel):
    """
    Units handed to a beneficiary.

    Example:
        {"beneficiary_id": "...", "quantity": 2, "from": {"id": "...", "type": "HOUSING"}}
    """

    model_config = ConfigDict(populate_by_name=True)

    beneficiary_id: str = Field(..., min_length=1)
    quantity: int = Field(..., gt=0)
    from_: Location = Field(..., alias="from")
    from_name: str | None = None


class StockChange(BaseModel):
    """Result of a stock-changing operation."""

    success: bool = True
    product_id: str = ""
    new_total: int = 0
    details: dict[str, Any] = Field(default_factory=dict)


class InventoryStats(BaseModel):
    """in_stock + low_stock + out_of_stock == total_products."""

    total_products: int = 0
    in_stock_products: int = 0
    low_stock_products: int = 0
    out_of_stock_products: int = 0
    total_quantity: int = 0
