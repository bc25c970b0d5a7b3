# =============================================================================
# tests/test_user_repository.py - User, Organization and Volunteer Tests
# =============================================================================
# This module contains tests for:
# - user listing, search, status and platform role changes
# - organization create / update / (de)activation
# - volunteer CRUD and stats
# =============================================================================

import pytest

from app.exceptions import NotAuthenticatedError, RecordNotFoundError
from core.models.enums import PlatformRole, UserStatus
from core.models.organization import CreateOrganizationRequest, UpdateOrganizationRequest
from core.models.user import UpdateUserRequest
from core.models.volunteer import CreateVolunteerRequest, UpdateVolunteerRequest
from core.repositories.organization import OrganizationRepository
from core.repositories.user import UserRepository
from core.repositories.volunteer import VolunteerRepository
from tests.conftest import ORG_ID, USER_ID
from tests.fakes import FakeApiClient


@pytest.fixture
def users(backend, legacy):
    return UserRepository(backend, legacy)


@pytest.fixture
def organizations(backend, legacy):
    return OrganizationRepository(backend, legacy)


@pytest.fixture
def volunteers(backend, legacy):
    return VolunteerRepository(backend, legacy)


# =============================================================================
# Users
# =============================================================================

class TestUsers:
    @pytest.mark.asyncio
    async def test_find_user_with_organization(self, users, backend):
        backend.row("users", USER_ID)["organizations"] = {"id": ORG_ID, "name": "Relif Porto"}

        user = (await users.find_user(USER_ID)).data

        assert user.first_name == "Ana"
        assert user.organization.name == "Relif Porto"
        assert user.preferences == {"language": "en", "timezone": "UTC"}

    @pytest.mark.asyncio
    async def test_find_missing_user(self, users):
        with pytest.raises(RecordNotFoundError) as exc_info:
            await users.find_user("missing")

        assert exc_info.value.code == "USER_NOT_FOUND"
        assert exc_info.value.status_code == 404

    @pytest.mark.asyncio
    async def test_status_visible_after_update(self, users):
        await users.update_user_status(USER_ID, UserStatus.INACTIVE)

        assert (await users.find_user(USER_ID)).data.status == "INACTIVE"

        reactivated = await users.reactivate_user(USER_ID)
        assert reactivated.data.status == "ACTIVE"

    @pytest.mark.asyncio
    async def test_unknown_status_rejected(self, users, backend):
        with pytest.raises(ValueError):
            await users.update_user_status(USER_ID, "SUSPENDED")

        assert backend.row("users", USER_ID)["status"] == "ACTIVE"

    @pytest.mark.asyncio
    async def test_platform_role(self, users):
        response = await users.update_user_platform_role(USER_ID, "RELIF_MEMBER")

        assert response.data.platform_role == "RELIF_MEMBER"

    @pytest.mark.asyncio
    async def test_update_only_set_fields(self, users, backend):
        response = await users.update_user(USER_ID, UpdateUserRequest(phones=["+351 900 000 000"]))

        assert response.data.phones == ["+351 900 000 000"]
        assert response.data.last_name == "Silva"

    @pytest.mark.asyncio
    async def test_relif_users(self, users, backend):
        backend.seed("users", {"id": "staff-1", "platform_role": "RELIF_MEMBER"})

        response = await users.get_relif_users()

        assert [user.id for user in response.data.data] == ["staff-1"]

    @pytest.mark.asyncio
    async def test_search_by_name_within_organization(self, users, backend):
        backend.seed(
            "users",
            {"id": "u2", "first_name": "Joana", "organization_id": ORG_ID, "platform_role": "ORG_MEMBER"},
            {"id": "u3", "first_name": "Joana", "organization_id": "org-2", "platform_role": "ORG_MEMBER"},
        )

        response = await users.search_users("joa", organization_id=ORG_ID)

        assert [user.id for user in response.data.data] == ["u2"]

    @pytest.mark.asyncio
    async def test_search_by_email_and_role(self, users, backend):
        backend.seed("users", {"id": "u2", "email": "rui@relif.org", "platform_role": "ORG_MEMBER"})

        response = await users.search_users("relif.org", platform_role=PlatformRole.ORG_ADMIN)

        assert [user.id for user in response.data.data] == [USER_ID]

    @pytest.mark.asyncio
    async def test_organization_members(self, users, backend):
        backend.seed("users", {"id": "u2", "organization_id": "org-2"})

        response = await users.find_users_by_organization_id(ORG_ID)

        assert response.data.count == 1

    @pytest.mark.asyncio
    async def test_delete(self, users, backend):
        response = await users.delete_user(USER_ID)

        assert response.status == 204
        assert backend.row("users", USER_ID) is None


# =============================================================================
# Organizations
# =============================================================================

class TestOrganizations:
    @pytest.mark.asyncio
    async def test_create_owned_by_signed_in_user(self, organizations):
        response = await organizations.create_organization(
            CreateOrganizationRequest(name="Casa Esperanza", type="COORDINATOR")
        )

        assert response.status == 201
        assert response.data.owner_id == USER_ID
        assert response.data.status == "ACTIVE"
        assert response.data.type == "COORDINATOR"

    @pytest.mark.asyncio
    async def test_create_requires_session(self, legacy):
        repo = OrganizationRepository(FakeApiClient(user_id=None), legacy)

        with pytest.raises(NotAuthenticatedError):
            await repo.create_organization(CreateOrganizationRequest(name="Nobody's"))

    @pytest.mark.asyncio
    async def test_update(self, organizations):
        response = await organizations.update_organization(
            ORG_ID, UpdateOrganizationRequest(description="Shelters in Porto")
        )

        assert response.data.description == "Shelters in Porto"
        assert response.data.name == "Relif Porto"

    @pytest.mark.asyncio
    async def test_update_missing(self, organizations):
        with pytest.raises(RecordNotFoundError):
            await organizations.update_organization("missing", UpdateOrganizationRequest(name="X"))

    @pytest.mark.asyncio
    async def test_deactivate_and_reactivate(self, organizations, backend):
        await organizations.deactivate_organization(ORG_ID)
        assert backend.row("organizations", ORG_ID)["status"] == "INACTIVE"

        response = await organizations.reactivate_organization(ORG_ID)
        assert response.data.status == "ACTIVE"

    @pytest.mark.asyncio
    async def test_search_description(self, organizations, backend):
        backend.seed("organizations", {"id": "org-2", "name": "Other", "description": "Food bank"})

        response = await organizations.find_all_organizations(search="food")

        assert [org.id for org in response.data.data] == ["org-2"]

    @pytest.mark.asyncio
    async def test_null_columns_defaulted(self, organizations, backend):
        backend.seed("organizations", {"id": "org-3", "name": "Sparse", "address": None, "areas_of_work": None})

        org = (await organizations.find_organization_by_id("org-3")).data

        assert org.address == {}
        assert org.areas_of_work == []


# =============================================================================
# Volunteers
# =============================================================================

class TestVolunteers:
    @pytest.mark.asyncio
    async def test_create(self, volunteers):
        response = await volunteers.create_volunteer(
            ORG_ID, CreateVolunteerRequest(full_name="Rui Costa", segments=["logistics"])
        )

        assert response.status == 201
        assert response.data.organization_id == ORG_ID
        assert response.data.status == "ACTIVE"
        assert response.data.segments == ["logistics"]

    @pytest.mark.asyncio
    async def test_update_and_status(self, volunteers, backend):
        backend.seed("voluntary_people", {"id": "v1", "organization_id": ORG_ID, "full_name": "Rui"})

        updated = await volunteers.update_volunteer("v1", UpdateVolunteerRequest(notes="Weekends"))
        assert updated.data.notes == "Weekends"

        paused = await volunteers.update_volunteer_status("v1", "INACTIVE")
        assert paused.data.status == "INACTIVE"

    @pytest.mark.asyncio
    async def test_get_missing(self, volunteers):
        with pytest.raises(RecordNotFoundError) as exc_info:
            await volunteers.get_volunteer_by_id("missing")

        assert exc_info.value.code == "VOLUNTEER_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_delete(self, volunteers, backend):
        backend.seed("voluntary_people", {"id": "v1", "organization_id": ORG_ID})

        response = await volunteers.delete_volunteer("v1")

        assert response.status == 204
        assert backend.tables["voluntary_people"] == []

    @pytest.mark.asyncio
    async def test_stats(self, volunteers, backend):
        backend.seed(
            "voluntary_people",
            {"id": "v1", "organization_id": ORG_ID, "status": "ACTIVE"},
            {"id": "v2", "organization_id": ORG_ID, "status": "pending"},
            {"id": "v3", "organization_id": ORG_ID, "status": None},
            {"id": "v4", "organization_id": "org-2", "status": "ACTIVE"},
        )

        stats = (await volunteers.get_volunteer_stats(ORG_ID)).data

        assert stats.total_volunteers == 3
        assert stats.active_volunteers == 1
        assert stats.pending_volunteers == 1
        assert stats.inactive_volunteers == 1

    @pytest.mark.asyncio
    async def test_stats_zeroed_on_failure(self, volunteers, backend):
        backend.errors["voluntary_people"] = RuntimeError("connection reset")

        stats = (await volunteers.get_volunteer_stats(ORG_ID)).data

        assert stats.total_volunteers == 0

    @pytest.mark.asyncio
    async def test_list_search(self, volunteers, backend):
        backend.seed(
            "voluntary_people",
            {"id": "v1", "organization_id": ORG_ID, "full_name": "Rui Costa"},
            {"id": "v2", "organization_id": ORG_ID, "full_name": "Ines Sousa"},
        )

        response = await volunteers.get_volunteers_by_organization_id(ORG_ID, search="costa")

        assert [v.id for v in response.data.data] == ["v1"]
