# =============================================================================
# core/repositories/ - Entity Repositories
# =============================================================================
# One async repository class per entity. Each wraps an ApiClient (hosted
# backend) and a LegacyApiClient (fallback target) and returns ApiResponse
# envelopes with transformed schemas.
#
# Usage:
#   from core.repositories import BeneficiaryRepository
#   repo = BeneficiaryRepository(ApiClient(access_token=token))
#   response = await repo.get_beneficiaries_by_organization_id(org_id, 0, 20, "")
# =============================================================================

from .auth import AuthRepository
from .base import BaseRepository
from .beneficiary import BeneficiaryRepository
from .case import CaseRepository
from .housing import HousingRepository
from .inventory import InventoryRepository
from .invites import InviteRepository
from .organization import OrganizationRepository
from .password import PasswordRepository
from .requests import RequestRepository
from .spaces import SpaceRepository
from .user import UserRepository
from .volunteer import VolunteerRepository

__all__ = [
    "AuthRepository",
    "BaseRepository",
    "BeneficiaryRepository",
    "CaseRepository",
    "HousingRepository",
    "InventoryRepository",
    "InviteRepository",
    "OrganizationRepository",
    "PasswordRepository",
    "RequestRepository",
    "SpaceRepository",
    "UserRepository",
    "VolunteerRepository",
]
