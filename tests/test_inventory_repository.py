# =============================================================================
# tests/test_inventory_repository.py - Inventory Repository Tests
# =============================================================================
# This module contains tests for:
# - product CRUD and low-stock stats
# - compare-and-set stock changes that never go below zero
# - donations (stock restored when the donation row cannot be written)
# - history and storage records derived from the stock counter
# =============================================================================

import pytest

from app.exceptions import (
    ConcurrentUpdateError,
    InsufficientStockError,
    InvalidQuantityError,
    RecordNotFoundError,
    RelifException,
)
from core.models.inventory import (
    AddProductRequest,
    CreateProductRequest,
    DonateProductRequest,
    MoveProductRequest,
    UpdateProductRequest,
)
from core.repositories.inventory import InventoryRepository
from tests.conftest import ORG_ID


@pytest.fixture
def repo(backend, legacy):
    return InventoryRepository(backend, legacy)


@pytest.fixture
def product(backend):
    backend.seed("product_types", {
        "id": "p1",
        "name": "Rice 1kg",
        "brand": "Acme",
        "organization_id": ORG_ID,
        "organizations": {"id": ORG_ID, "name": "Relif Porto"},
        "unit_type": "kg",
        "total_in_storage": 10,
    })
    return backend.row("product_types", "p1")


def _donation(quantity: int) -> DonateProductRequest:
    return DonateProductRequest.model_validate({
        "beneficiary_id": "b1",
        "quantity": quantity,
        "from": {"id": ORG_ID, "type": "ORGANIZATION"},
        "from_name": "Relif Porto",
    })


# =============================================================================
# Products
# =============================================================================

class TestProducts:
    @pytest.mark.asyncio
    async def test_create_starts_empty(self, repo, backend):
        response = await repo.create_product(ORG_ID, CreateProductRequest(name="Blanket"))

        assert response.status == 201
        assert response.data.total_in_storage == 0
        assert response.data.unit_type == "pcs"
        assert response.data.organization_id == ORG_ID

    @pytest.mark.asyncio
    async def test_update_does_not_touch_stock(self, repo, product):
        response = await repo.update_product("p1", UpdateProductRequest(name="Rice 2kg"))

        assert response.data.name == "Rice 2kg"
        assert response.data.total_in_storage == 10

    @pytest.mark.asyncio
    async def test_get_missing(self, repo):
        with pytest.raises(RecordNotFoundError):
            await repo.get_product_by_id("missing")

    @pytest.mark.asyncio
    async def test_delete(self, repo, backend, product):
        response = await repo.delete_product("p1")

        assert response.status == 204
        assert backend.tables["product_types"] == []

    @pytest.mark.asyncio
    async def test_list_and_search(self, repo, backend, product):
        backend.seed("product_types", {"id": "p2", "name": "Soap", "organization_id": ORG_ID})

        response = await repo.get_products_by_organization_id(ORG_ID, search="acme")

        assert response.data.count == 1
        assert response.data.data[0].id == "p1"

    @pytest.mark.asyncio
    async def test_stats_use_low_stock_threshold(self, repo, backend):
        for i, quantity in enumerate([0, 5, 10, 50]):
            backend.seed("product_types", {
                "id": f"p{i}", "organization_id": ORG_ID, "total_in_storage": quantity,
            })

        stats = (await repo.get_inventory_stats(ORG_ID)).data

        assert stats.total_products == 4
        assert stats.out_of_stock_products == 1
        assert stats.low_stock_products == 2
        assert stats.in_stock_products == 1
        assert stats.total_quantity == 65


# =============================================================================
# Stock movements
# =============================================================================

class TestStock:
    @pytest.mark.asyncio
    async def test_allocate_adds_units(self, repo, product):
        response = await repo.allocate_product(
            "p1", AddProductRequest.model_validate({"quantity": 5, "location": {"id": "h1", "type": "HOUSING"}})
        )

        assert response.data.new_total == 15
        assert response.data.details["location"] == {"id": "h1", "type": "HOUSING"}
        assert product["total_in_storage"] == 15

    @pytest.mark.asyncio
    async def test_non_positive_quantity_rejected(self, repo, product):
        request = AddProductRequest.model_construct(quantity=0, location=None)

        with pytest.raises(InvalidQuantityError):
            await repo.allocate_product("p1", request)

        assert product["total_in_storage"] == 10

    @pytest.mark.asyncio
    async def test_reallocate_keeps_total(self, repo, product):
        request = MoveProductRequest.model_validate({
            "from": {"id": ORG_ID, "type": "ORGANIZATION"},
            "to": {"id": "h1", "type": "HOUSING"},
            "quantity": 4,
        })

        response = await repo.reallocate_product("p1", request)

        assert response.data.new_total == 10
        assert response.data.details["from"]["id"] == ORG_ID
        assert product["total_in_storage"] == 10

    @pytest.mark.asyncio
    async def test_reallocate_more_than_available(self, repo, product):
        request = MoveProductRequest.model_validate({
            "from": {"id": ORG_ID, "type": "ORGANIZATION"},
            "to": {"id": "h1", "type": "HOUSING"},
            "quantity": 11,
        })

        with pytest.raises(InsufficientStockError):
            await repo.reallocate_product("p1", request)

    @pytest.mark.asyncio
    async def test_reallocate_same_location(self, repo, product):
        request = MoveProductRequest.model_validate({
            "from": {"id": "h1", "type": "HOUSING"},
            "to": {"id": "h1", "type": "HOUSING"},
            "quantity": 1,
        })

        with pytest.raises(RelifException) as exc_info:
            await repo.reallocate_product("p1", request)

        assert exc_info.value.code == "INVALID_MOVEMENT"
        assert exc_info.value.status_code == 400

    @pytest.mark.asyncio
    async def test_stock_retries_then_gives_up(self, repo, backend, product):
        def concurrent_writer(table, values):
            product["total_in_storage"] += 1

        backend.before_update = concurrent_writer

        with pytest.raises(ConcurrentUpdateError) as exc_info:
            await repo.allocate_product("p1", AddProductRequest(quantity=1))

        assert exc_info.value.details["attempts"] == 3

    @pytest.mark.asyncio
    async def test_stock_survives_one_lost_race(self, repo, backend, product):
        calls = []

        def concurrent_writer(table, values):
            calls.append(values)
            if len(calls) == 1:
                product["total_in_storage"] = 12

        backend.before_update = concurrent_writer

        response = await repo.allocate_product("p1", AddProductRequest(quantity=3))

        assert response.data.new_total == 15
        assert product["total_in_storage"] == 15
        assert len(calls) == 2


# =============================================================================
# Donations
# =============================================================================

class TestDonations:
    @pytest.mark.asyncio
    async def test_donate(self, repo, backend, product):
        response = await repo.donate_product("p1", _donation(3))

        donation = backend.tables["donations"][0]
        assert response.status == 201
        assert response.data.type == "DONATION"
        assert response.data.quantity == 3
        assert product["total_in_storage"] == 7
        assert donation["from_type"] == "ORGANIZATION"
        assert donation["organization_id"] == ORG_ID

    @pytest.mark.asyncio
    async def test_donate_more_than_stock(self, repo, backend, product):
        with pytest.raises(InsufficientStockError) as exc_info:
            await repo.donate_product("p1", _donation(11))

        assert exc_info.value.details == {"product_id": "p1", "requested": 11, "available": 10}
        assert product["total_in_storage"] == 10
        assert backend.tables["donations"] == []

    @pytest.mark.asyncio
    async def test_failed_donation_restores_stock(self, repo, backend, product):
        backend.errors["donations"] = RuntimeError("insert failed")

        with pytest.raises(RuntimeError):
            await repo.donate_product("p1", _donation(4))

        assert product["total_in_storage"] == 10

    @pytest.mark.asyncio
    async def test_donation_history(self, repo, backend, product):
        await repo.donate_product("p1", _donation(1))
        await repo.donate_product("p1", _donation(2))

        response = await repo.get_donations("p1")

        assert response.data.count == 2
        assert sorted(entry.quantity for entry in response.data.data) == [1, 2]


# =============================================================================
# Derived history
# =============================================================================

class TestDerivedHistory:
    @pytest.mark.asyncio
    async def test_allocations_single_current_entry(self, repo, product):
        response = await repo.get_allocations("p1")

        entry = response.data.data[0]
        assert response.data.count == 1
        assert entry.id == "p1-current"
        assert entry.quantity == 10
        assert entry.type == "ENTRANCE"
        assert entry.to.name == "Relif Porto"

    @pytest.mark.asyncio
    async def test_allocations_empty_without_stock(self, repo, product):
        product["total_in_storage"] = 0

        response = await repo.get_allocations("p1")

        assert response.data.count == 0
        assert response.data.data == []

    @pytest.mark.asyncio
    async def test_allocations_past_last_page(self, repo, product):
        response = await repo.get_allocations("p1", offset=20, limit=20)

        assert response.data.count == 1
        assert response.data.data == []

    @pytest.mark.asyncio
    async def test_storage_records(self, repo, product):
        records = (await repo.get_storage_records("p1")).data

        assert len(records) == 1
        assert records[0].id == "p1-org-storage"
        assert records[0].location.type == "ORGANIZATION"
        assert records[0].location.name == "Relif Porto"
        assert records[0].quantity == 10
