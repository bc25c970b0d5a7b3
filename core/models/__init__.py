# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# This package contains Pydantic schemas for data validation:
# - common.py: ApiResponse envelope and Page list result
# - enums.py: String enums mirroring the database enum types
# - organization.py, user.py, beneficiary.py, housing.py, case.py,
#   inventory.py, volunteer.py, requests.py, auth.py: per-entity schemas
#
# These models define the "contract" between repositories and clients.
# =============================================================================

# -----------------------------------------------------------------------------
# Envelopes and enums
# -----------------------------------------------------------------------------
from .common import ApiResponse, Page
from .enums import (
    AllocationType,
    BeneficiaryStatus,
    CasePriority,
    CaseStatus,
    CaseUrgency,
    LocationType,
    OrganizationStatus,
    OrganizationType,
    PlatformRole,
    ProductEntryType,
    RequestStatus,
    UserStatus,
    VolunteerStatus,
)

# -----------------------------------------------------------------------------
# Entity schemas
# -----------------------------------------------------------------------------
from .organization import (
    CreateOrganizationRequest,
    OrganizationSchema,
    UpdateOrganizationRequest,
)
from .user import (
    UpdateUserPlatformRoleRequest,
    UpdateUserRequest,
    UpdateUserStatusRequest,
    UserSchema,
)
from .housing import (
    CreateHousingRequest,
    CreateSpaceRequest,
    HousingSchema,
    HousingStats,
    SpaceSchema,
    UpdateHousingRequest,
    UpdateSpaceRequest,
)
from .beneficiary import (
    AllocateBeneficiaryRequest,
    BeneficiaryAllocationSchema,
    BeneficiarySchema,
    BeneficiaryStats,
    CreateBeneficiaryRequest,
    UpdateBeneficiaryRequest,
)
from .case import (
    AuthorRef,
    CaseDocumentSchema,
    CaseNoteSchema,
    CaseSchema,
    CaseStats,
    CreateCaseDocumentPayload,
    CreateCaseNotePayload,
    CreateCasePayload,
    DocumentLink,
    UpdateCaseDocumentPayload,
    UpdateCaseNotePayload,
    UpdateCasePayload,
)
from .inventory import (
    AddProductRequest,
    AllocationSchema,
    CreateProductRequest,
    DonateProductRequest,
    InventoryStats,
    MoveProductRequest,
    ProductEntry,
    ProductSchema,
    StockChange,
    UpdateProductRequest,
)
from .volunteer import (
    CreateVolunteerRequest,
    UpdateVolunteerRequest,
    VolunteerSchema,
    VolunteerStats,
)
from .requests import (
    CreateAdminInviteRequest,
    CreateOrganizationInviteRequest,
    CreateTypeUpdateRequest,
    JoinOrganizationInviteSchema,
    JoinOrganizationRequestSchema,
    JoinPlatformInviteSchema,
    OrganizationDataAccessRequestSchema,
    UpdateOrganizationTypeRequestSchema,
)
from .auth import (
    AuthSession,
    SignInRequest,
    SignUpAdminByInviteRequest,
    SignUpByInviteRequest,
    SignUpRequest,
)

__all__ = [
    # Envelopes
    "ApiResponse",
    "Page",
    # Enums
    "AllocationType",
    "BeneficiaryStatus",
    "CasePriority",
    "CaseStatus",
    "CaseUrgency",
    "LocationType",
    "OrganizationStatus",
    "OrganizationType",
    "PlatformRole",
    "ProductEntryType",
    "RequestStatus",
    "UserStatus",
    "VolunteerStatus",
    # Organizations
    "CreateOrganizationRequest",
    "OrganizationSchema",
    "UpdateOrganizationRequest",
    # Users
    "UpdateUserPlatformRoleRequest",
    "UpdateUserRequest",
    "UpdateUserStatusRequest",
    "UserSchema",
    # Housing
    "CreateHousingRequest",
    "CreateSpaceRequest",
    "HousingSchema",
    "HousingStats",
    "SpaceSchema",
    "UpdateHousingRequest",
    "UpdateSpaceRequest",
    # Beneficiaries
    "AllocateBeneficiaryRequest",
    "BeneficiaryAllocationSchema",
    "BeneficiarySchema",
    "BeneficiaryStats",
    "CreateBeneficiaryRequest",
    "UpdateBeneficiaryRequest",
    # Cases
    "AuthorRef",
    "CaseDocumentSchema",
    "CaseNoteSchema",
    "CaseSchema",
    "CaseStats",
    "CreateCaseDocumentPayload",
    "CreateCaseNotePayload",
    "CreateCasePayload",
    "DocumentLink",
    "UpdateCaseDocumentPayload",
    "UpdateCaseNotePayload",
    "UpdateCasePayload",
    # Inventory
    "AddProductRequest",
    "AllocationSchema",
    "CreateProductRequest",
    "DonateProductRequest",
    "InventoryStats",
    "MoveProductRequest",
    "ProductEntry",
    "ProductSchema",
    "StockChange",
    "UpdateProductRequest",
    # Volunteers
    "CreateVolunteerRequest",
    "UpdateVolunteerRequest",
    "VolunteerSchema",
    "VolunteerStats",
    # Invites / requests
    "CreateAdminInviteRequest",
    "CreateOrganizationInviteRequest",
    "CreateTypeUpdateRequest",
    "JoinOrganizationInviteSchema",
    "JoinOrganizationRequestSchema",
    "JoinPlatformInviteSchema",
    "OrganizationDataAccessRequestSchema",
    "UpdateOrganizationTypeRequestSchema",
    # Auth
    "AuthSession",
    "SignInRequest",
    "SignUpAdminByInviteRequest",
    "SignUpByInviteRequest",
    "SignUpRequest",
]
