# =============================================================================
# tests/test_models.py - Pydantic Model Tests
# =============================================================================
# Unit tests for the request/response models to ensure:
# - Valid payloads are accepted and parsed correctly
# - Invalid payloads raise ValidationError
# - Aliased fields ("from") serialize back under their wire name
# - Default values work as expected
#
# Run with: poetry run pytest tests/test_models.py -v
# =============================================================================

import pytest
from pydantic import ValidationError

from core.models import (
    AddProductRequest,
    ApiResponse,
    CreateHousingRequest,
    CreateOrganizationRequest,
    CreateSpaceRequest,
    DonateProductRequest,
    LocationType,
    MoveProductRequest,
    OrganizationSchema,
    Page,
    SignUpRequest,
    UpdateSpaceRequest,
    UserSchema,
)


# =============================================================================
# Envelope Tests
# =============================================================================

class TestEnvelopes:
    """Tests for ApiResponse and Page."""

    def test_api_response_defaults(self):
        """A bare envelope is a 200 OK."""
        response = ApiResponse({"id": "x"})

        assert response.status == 200
        assert response.status_text == "OK"

    def test_page_defaults(self):
        page = Page[str]()

        assert page.count == 0
        assert page.data == []

    def test_page_negative_count_rejected(self):
        with pytest.raises(ValidationError):
            Page[str](count=-1)

    def test_page_serializes(self):
        page = Page[OrganizationSchema](count=3, data=[OrganizationSchema(id="org-1")])

        dumped = page.model_dump()

        assert dumped["count"] == 3
        assert dumped["data"][0]["id"] == "org-1"


# =============================================================================
# Entity Defaults
# =============================================================================

class TestDefaults:
    def test_user_defaults(self):
        """Users without stored preferences get language/timezone defaults."""
        user = UserSchema()

        assert user.preferences == {"language": "en", "timezone": "UTC"}
        assert user.platform_role == "NO_ORG"
        assert user.organization.id == ""

    def test_user_preferences_not_shared(self):
        first = UserSchema()
        second = UserSchema()

        first.preferences["language"] = "pt"

        assert second.preferences["language"] == "en"

    def test_organization_defaults(self):
        org = OrganizationSchema()

        assert org.type == "MANAGER"
        assert org.address == {}


# =============================================================================
# Request Validation
# =============================================================================

class TestRequests:
    def test_organization_requires_name(self):
        with pytest.raises(ValidationError):
            CreateOrganizationRequest(name="")

    def test_organization_type_enum(self):
        with pytest.raises(ValidationError):
            CreateOrganizationRequest(name="Relif", type="CHARITY")

    def test_housing_address_defaults(self):
        assert CreateHousingRequest(name="North Shelter").address == {}

    def test_space_needs_a_bed(self):
        """New rooms hold at least one bed; updates may go down to zero."""
        with pytest.raises(ValidationError):
            CreateSpaceRequest(name="Room", total_vacancies=0)

        assert UpdateSpaceRequest(total_vacancies=0).total_vacancies == 0

    def test_sign_up_password_length(self):
        with pytest.raises(ValidationError):
            SignUpRequest(email="ana@relif.org", password="123", first_name="Ana", last_name="Silva")


class TestStockRequests:
    def test_quantity_must_be_positive(self):
        with pytest.raises(ValidationError):
            AddProductRequest(quantity=0)

    def test_location_defaults_to_organization(self):
        request = AddProductRequest.model_validate({"quantity": 1, "location": {"id": "org-1"}})

        assert request.location.type == LocationType.ORGANIZATION

    def test_move_reads_from_alias(self):
        request = MoveProductRequest.model_validate({
            "from": {"id": "h1", "type": "HOUSING"},
            "to": {"id": "org-1"},
            "quantity": 2,
        })

        assert request.from_.id == "h1"
        assert request.model_dump(mode="json", by_alias=True)["from"] == {"id": "h1", "type": "HOUSING"}

    def test_move_by_field_name(self):
        request = MoveProductRequest(from_={"id": "h1"}, to={"id": "h2"}, quantity=1)

        assert request.from_.type == LocationType.ORGANIZATION

    def test_donation_requires_source(self):
        with pytest.raises(ValidationError):
            DonateProductRequest.model_validate({"beneficiary_id": "b1", "quantity": 1})
