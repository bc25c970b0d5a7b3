# =============================================================================
# app/dependencies.py - Shared Dependencies
# =============================================================================
# FastAPI dependency injection for shared resources.
# These are injected into route handlers using Depends().
#
# Every request gets its own ApiClient built from the caller's access token,
# so the hosted backend applies Row Level Security as that user. The legacy
# client gets a private token store holding the same token.
# =============================================================================

from typing import Annotated

from fastapi import Depends

from app.auth import AuthUser, get_current_user
from core.repositories import (
    BeneficiaryRepository,
    CaseRepository,
    HousingRepository,
    InventoryRepository,
    InviteRepository,
    OrganizationRepository,
    RequestRepository,
    SpaceRepository,
    UserRepository,
    VolunteerRepository,
)
from lib.api_client import ApiClient
from lib.legacy_client import LegacyApiClient
from lib.token_store import TokenStore

CurrentUser = Annotated[AuthUser, Depends(get_current_user)]


def get_api_client(user: CurrentUser) -> ApiClient:
    """Hosted backend client acting as the caller."""
    return ApiClient(access_token=user.access_token)


def get_legacy_client(user: CurrentUser) -> LegacyApiClient:
    """Legacy API client authenticated with the caller's token."""
    store = TokenStore()
    store.set_token(user.access_token)
    return LegacyApiClient(token_store=store)


ApiClientDep = Annotated[ApiClient, Depends(get_api_client)]
LegacyClientDep = Annotated[LegacyApiClient, Depends(get_legacy_client)]


def get_organization_repository(client: ApiClientDep, legacy: LegacyClientDep) -> OrganizationRepository:
    return OrganizationRepository(client, legacy)


def get_user_repository(client: ApiClientDep, legacy: LegacyClientDep) -> UserRepository:
    return UserRepository(client, legacy)


def get_beneficiary_repository(client: ApiClientDep, legacy: LegacyClientDep) -> BeneficiaryRepository:
    return BeneficiaryRepository(client, legacy)


def get_housing_repository(client: ApiClientDep, legacy: LegacyClientDep) -> HousingRepository:
    return HousingRepository(client, legacy)


def get_space_repository(client: ApiClientDep, legacy: LegacyClientDep) -> SpaceRepository:
    return SpaceRepository(client, legacy)


def get_case_repository(client: ApiClientDep, legacy: LegacyClientDep) -> CaseRepository:
    return CaseRepository(client, legacy)


def get_inventory_repository(client: ApiClientDep, legacy: LegacyClientDep) -> InventoryRepository:
    return InventoryRepository(client, legacy)


def get_volunteer_repository(client: ApiClientDep, legacy: LegacyClientDep) -> VolunteerRepository:
    return VolunteerRepository(client, legacy)


def get_invite_repository(client: ApiClientDep, legacy: LegacyClientDep) -> InviteRepository:
    return InviteRepository(client, legacy)


def get_request_repository(client: ApiClientDep, legacy: LegacyClientDep) -> RequestRepository:
    return RequestRepository(client, legacy)


# Type aliases for dependency injection
OrganizationRepoDep = Annotated[OrganizationRepository, Depends(get_organization_repository)]
UserRepoDep = Annotated[UserRepository, Depends(get_user_repository)]
BeneficiaryRepoDep = Annotated[BeneficiaryRepository, Depends(get_beneficiary_repository)]
HousingRepoDep = Annotated[HousingRepository, Depends(get_housing_repository)]
SpaceRepoDep = Annotated[SpaceRepository, Depends(get_space_repository)]
CaseRepoDep = Annotated[CaseRepository, Depends(get_case_repository)]
InventoryRepoDep = Annotated[InventoryRepository, Depends(get_inventory_repository)]
VolunteerRepoDep = Annotated[VolunteerRepository, Depends(get_volunteer_repository)]
InviteRepoDep = Annotated[InviteRepository, Depends(get_invite_repository)]
RequestRepoDep = Annotated[RequestRepository, Depends(get_request_repository)]
