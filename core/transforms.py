# =============================================================================
# core/transforms.py - Row -> Schema Transformations
# =============================================================================
# One pure function per entity reshaping a raw PostgREST row (snake_case,
# nullable JSON columns, embedded relations) into the schema clients expect.
#
# Rules shared by every transform:
# - no I/O and no exceptions: malformed input yields defaulted output
# - optional fields default to "" / [] / {} / 0 / False, never None
# - embedded relations are transformed recursively
#
# Usage:
#   from core.transforms import transform_case
#   cases = [transform_case(row) for row in response.data]
# =============================================================================

from datetime import datetime
from typing import Any

from core.models.beneficiary import BeneficiaryAllocationSchema, BeneficiaryRef, BeneficiarySchema
from core.models.case import (
    AuthorRef,
    CaseAssignee,
    CaseBeneficiary,
    CaseDocumentSchema,
    CaseNoteSchema,
    CaseSchema,
)
from core.models.enums import LocationType, PlatformRole, ProductEntryType, UserStatus
from core.models.housing import HousingSchema, SpaceSchema
from core.models.inventory import EntryEndpoint, ProductEntry, ProductSchema
from core.models.organization import OrganizationSchema
from core.models.requests import (
    JoinOrganizationInviteSchema,
    JoinOrganizationRequestSchema,
    JoinPlatformInviteSchema,
    OrganizationDataAccessRequestSchema,
    UpdateOrganizationTypeRequestSchema,
)
from core.models.user import UserSchema, default_preferences
from core.models.volunteer import VolunteerSchema


# =============================================================================
# Coercion helpers
# =============================================================================

def _row(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _str(value: Any, default: str = "") -> str:
    if value is None:
        return default
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value)


def _int(value: Any) -> int:
    if isinstance(value, bool):
        return int(value)
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        try:
            return int(float(value))
        except (TypeError, ValueError, OverflowError):
            return 0


def _bool(value: Any) -> bool:
    return bool(value) if value is not None else False


def _list(value: Any) -> list[Any]:
    """Lists pass through; a single JSON object becomes a one-item list."""
    if isinstance(value, list):
        return value
    if isinstance(value, dict) and value:
        return [value]
    return []


def _str_list(value: Any) -> list[str]:
    return [_str(item) for item in _list(value) if item is not None]


def _dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _amount(value: Any) -> str:
    """Render a numeric column as text (1500.0 -> "1500")."""
    if value is None or value == "":
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _author(relation: Any, fallback_id: Any) -> AuthorRef:
    user = _row(relation)
    if not user:
        return AuthorRef(id=_str(fallback_id), name="Unknown User")
    name = f"{_str(user.get('first_name'))} {_str(user.get('last_name'))}".strip()
    return AuthorRef(id=_str(user.get("id"), _str(fallback_id)), name=name or "Unknown User")


def _embedded(row: dict[str, Any], *keys: str) -> dict[str, Any]:
    """First non-empty embedded relation among `keys`."""
    for key in keys:
        relation = _row(row.get(key))
        if relation:
            return relation
    return {}


# =============================================================================
# Organizations and users
# =============================================================================

def transform_organization(row: Any) -> OrganizationSchema:
    row = _row(row)
    return OrganizationSchema(
        id=_str(row.get("id")),
        name=_str(row.get("name")),
        description=_str(row.get("description")),
        logo=_str(row.get("logo")),
        areas_of_work=_str_list(row.get("areas_of_work")),
        address=_dict(row.get("address")),
        type=_str(row.get("type"), "MANAGER"),
        owner_id=_str(row.get("owner_id")),
        status=_str(row.get("status"), "ACTIVE"),
        access_granted_ids=_str_list(row.get("access_granted_ids")),
        created_at=_str(row.get("created_at")),
        updated_at=_str(row.get("updated_at")),
    )


def transform_user(row: Any) -> UserSchema:
    """Users embed their organization as `organizations` (or `organization`)."""
    row = _row(row)
    return UserSchema(
        id=_str(row.get("id")),
        first_name=_str(row.get("first_name")),
        last_name=_str(row.get("last_name")),
        email=_str(row.get("email")),
        phones=_str_list(row.get("phones")),
        role=_str(row.get("role")),
        platform_role=_str(row.get("platform_role"), PlatformRole.NO_ORG.value),
        status=_str(row.get("status"), UserStatus.ACTIVE.value),
        preferences=_dict(row.get("preferences")) or default_preferences(),
        organization_id=_str(row.get("organization_id")),
        organization=transform_organization(_embedded(row, "organizations", "organization")),
        created_at=_str(row.get("created_at")),
        updated_at=_str(row.get("updated_at")),
    )


def transform_auth_user(user: Any) -> UserSchema:
    """
    Build a UserSchema from a hosted-auth user.

    Accepts the auth library's User object or a plain dict. Profile fields
    come from user_metadata.
    """
    if isinstance(user, dict):
        data = user
    else:
        data = {
            "id": getattr(user, "id", None),
            "email": getattr(user, "email", None),
            "user_metadata": getattr(user, "user_metadata", None),
            "created_at": getattr(user, "created_at", None),
            "updated_at": getattr(user, "updated_at", None),
        }
    metadata = _dict(data.get("user_metadata"))

    return UserSchema(
        id=_str(data.get("id")),
        email=_str(data.get("email")),
        first_name=_str(metadata.get("first_name")),
        last_name=_str(metadata.get("last_name")),
        phones=_str_list(metadata.get("phones")),
        role=_str(metadata.get("role")),
        platform_role=_str(metadata.get("platform_role"), PlatformRole.ORG_MEMBER.value),
        status=UserStatus.ACTIVE.value,
        preferences=_dict(metadata.get("preferences")) or default_preferences(),
        organization_id=_str(metadata.get("organization_id")),
        organization=transform_organization(metadata.get("organization")),
        created_at=_str(data.get("created_at")),
        updated_at=_str(data.get("updated_at")),
    )


# =============================================================================
# Housing and rooms
# =============================================================================

def transform_housing(row: Any) -> HousingSchema:
    row = _row(row)
    return HousingSchema(
        id=_str(row.get("id")),
        organization_id=_str(row.get("organization_id")),
        name=_str(row.get("name")),
        status=_str(row.get("status"), "ACTIVE"),
        address=_dict(row.get("address")),
        total_vacancies=_int(row.get("total_vacancies")),
        occupied_vacancies=_int(row.get("occupied_vacancies")),
        total_rooms=_int(row.get("total_rooms")),
        created_at=_str(row.get("created_at")),
        updated_at=_str(row.get("updated_at")),
    )


def transform_space(row: Any) -> SpaceSchema:
    """Rooms store capacity/occupied; clients see total/occupied vacancies."""
    row = _row(row)
    return SpaceSchema(
        id=_str(row.get("id")),
        housing_id=_str(row.get("housing_id")),
        name=_str(row.get("name")),
        total_vacancies=_int(row.get("capacity")),
        occupied_vacancies=_int(row.get("occupied")),
        status=_str(row.get("status"), "ACTIVE"),
        created_at=_str(row.get("created_at")),
        updated_at=_str(row.get("updated_at")),
    )


# =============================================================================
# Beneficiaries
# =============================================================================

def transform_beneficiary(row: Any) -> BeneficiarySchema:
    row = _row(row)
    return BeneficiarySchema(
        id=_str(row.get("id")),
        full_name=_str(row.get("full_name")),
        email=_str(row.get("email")),
        image_url=_str(row.get("image_url")),
        documents=_list(row.get("documents")),
        birthdate=_str(row.get("birthdate")),
        phones=_str_list(row.get("phones")),
        civil_status=_str(row.get("civil_status")),
        spoken_languages=_str_list(row.get("spoken_languages")),
        education=_str(row.get("education")),
        gender=_str(row.get("gender")),
        occupation=_str(row.get("occupation")),
        address=_dict(row.get("address")),
        status=_str(row.get("status"), "ACTIVE"),
        current_organization_id=_str(row.get("current_organization_id")),
        current_housing_id=_str(row.get("current_housing_id")),
        current_housing=transform_housing(row.get("current_housing")),
        current_room_id=_str(row.get("current_room_id")),
        current_room=transform_space(row.get("current_room")),
        medical_information=_dict(row.get("medical_information")),
        emergency_contacts=_list(row.get("emergency_contacts")),
        notes=_str(row.get("notes")),
        created_at=_str(row.get("created_at")),
        updated_at=_str(row.get("updated_at")),
    )


def transform_allocation(row: Any) -> BeneficiaryAllocationSchema:
    """One beneficiary_allocations row with its embedded housings/rooms."""
    row = _row(row)
    beneficiary = _row(row.get("beneficiary"))
    return BeneficiaryAllocationSchema(
        id=_str(row.get("id")),
        beneficiary_id=_str(row.get("beneficiary_id")),
        beneficiary=BeneficiaryRef(
            id=_str(beneficiary.get("id"), _str(row.get("beneficiary_id"))),
            full_name=_str(beneficiary.get("full_name")),
            image_url=_str(beneficiary.get("image_url")),
        ),
        type=_str(row.get("type"), "ENTRANCE"),
        housing_id=_str(row.get("housing_id")),
        housing=transform_housing(row.get("housing")),
        room_id=_str(row.get("room_id")),
        room=transform_space(row.get("room")),
        old_housing_id=_str(row.get("old_housing_id")),
        old_housing=transform_housing(row.get("old_housing")),
        old_room_id=_str(row.get("old_room_id")),
        old_room=transform_space(row.get("old_room")),
        created_by_id=_str(row.get("created_by_id")),
        created_at=_str(row.get("created_at")),
    )


# =============================================================================
# Cases, notes and documents
# =============================================================================

def transform_case(row: Any) -> CaseSchema:
    """
    Cases embed `beneficiaries` (the beneficiary row) and `assigned_to`.

    The beneficiary's full_name is split into first/last name at the first
    whitespace.
    """
    row = _row(row)

    beneficiary = _embedded(row, "beneficiaries", "beneficiary")
    if beneficiary:
        full_name = _str(beneficiary.get("full_name"))
        parts = full_name.split()
        phones = _str_list(beneficiary.get("phones"))
        case_beneficiary = CaseBeneficiary(
            id=_str(beneficiary.get("id"), _str(row.get("beneficiary_id"))),
            first_name=parts[0] if parts else "",
            last_name=" ".join(parts[1:]),
            full_name=full_name,
            phone=phones[0] if phones else "",
            email=_str(beneficiary.get("email")),
            current_address=_str(_dict(beneficiary.get("address")).get("street")),
            image_url=_str(beneficiary.get("image_url")),
        )
    else:
        case_beneficiary = CaseBeneficiary(id=_str(row.get("beneficiary_id")))

    assignee = _row(row.get("assigned_to"))
    if assignee:
        case_assignee = CaseAssignee(
            id=_str(assignee.get("id")),
            first_name=_str(assignee.get("first_name")),
            last_name=_str(assignee.get("last_name")),
            email=_str(assignee.get("email")),
        )
    else:
        case_assignee = CaseAssignee(id=_str(row.get("assigned_to_id")))

    return CaseSchema(
        id=_str(row.get("id")),
        case_number=_str(row.get("case_number")),
        title=_str(row.get("title")),
        description=_str(row.get("description")),
        status=_str(row.get("status"), "PENDING"),
        priority=_str(row.get("priority"), "MEDIUM"),
        urgency_level=_str(row.get("urgency_level"), "FLEXIBLE"),
        service_types=_str_list(row.get("service_types")),
        beneficiary_id=_str(row.get("beneficiary_id")),
        beneficiary=case_beneficiary,
        assigned_to_id=_str(row.get("assigned_to_id")),
        assigned_to=case_assignee,
        due_date=_str(row.get("due_date")),
        estimated_duration=_str(row.get("estimated_duration")),
        budget_allocated=_amount(row.get("budget_allocated")),
        tags=_str_list(row.get("tags")),
        notes_count=_int(row.get("notes_count")),
        documents_count=_int(row.get("documents_count")),
        last_activity=_str(row.get("last_activity")) or _str(row.get("updated_at")),
        organization_id=_str(row.get("organization_id")),
        created_at=_str(row.get("created_at")),
        updated_at=_str(row.get("updated_at")),
    )


def transform_case_note(row: Any) -> CaseNoteSchema:
    """Notes embed their author as `users`."""
    row = _row(row)
    return CaseNoteSchema(
        id=_str(row.get("id")),
        case_id=_str(row.get("case_id")),
        title=_str(row.get("title")) or "Note",
        content=_str(row.get("content")),
        tags=_str_list(row.get("tags")),
        note_type=_str(row.get("note_type")) or "UPDATE",
        is_important=_bool(row.get("is_important")),
        created_by=_author(row.get("users"), row.get("author_id")),
        created_at=_str(row.get("created_at")),
        updated_at=_str(row.get("updated_at")),
    )


def transform_case_document(row: Any) -> CaseDocumentSchema:
    """Documents embed their uploader as `users`; file_type/file_url are renamed."""
    row = _row(row)
    file_name = _str(row.get("file_name"))
    return CaseDocumentSchema(
        id=_str(row.get("id")),
        case_id=_str(row.get("case_id")),
        document_name=_str(row.get("document_name")) or file_name,
        file_name=file_name,
        document_type=_str(row.get("document_type")) or "OTHER",
        file_size=_int(row.get("file_size")),
        mime_type=_str(row.get("file_type")) or "application/octet-stream",
        description=_str(row.get("description")),
        tags=_str_list(row.get("tags")),
        is_finalized=_bool(row.get("is_finalized")),
        uploaded_by=_author(row.get("users"), row.get("uploaded_by_id")),
        created_at=_str(row.get("created_at")),
        download_url=_str(row.get("file_url")),
    )


# =============================================================================
# Inventory
# =============================================================================

def transform_product(row: Any) -> ProductSchema:
    """Products embed their organization as `organizations`."""
    row = _row(row)
    return ProductSchema(
        id=_str(row.get("id")),
        name=_str(row.get("name")),
        description=_str(row.get("description")),
        brand=_str(row.get("brand")),
        category=_str(row.get("category")),
        organization_id=_str(row.get("organization_id")),
        organization=transform_organization(_embedded(row, "organizations", "organization")),
        unit_type=_str(row.get("unit_type")) or "pcs",
        total_in_storage=_int(row.get("total_in_storage")),
        created_at=_str(row.get("created_at")),
        updated_at=_str(row.get("updated_at")),
    )


def transform_product_entry(row: Any) -> ProductEntry:
    """
    Turn a donations row into a DONATION ProductEntry.

    Donations flow from an organization or housing to a beneficiary and have
    no updated_at of their own.
    """
    row = _row(row)
    product = _row(row.get("product_types"))
    beneficiary = _row(row.get("beneficiaries"))
    created_at = _str(row.get("created_at"))

    return ProductEntry(
        id=_str(row.get("id")),
        product_type_id=_str(row.get("product_type_id")),
        product_type=transform_product(product),
        brand=_str(product.get("brand")),
        category=_str(product.get("category")),
        description=_str(product.get("description")),
        quantity=_int(row.get("quantity")),
        from_=EntryEndpoint(
            id=_str(row.get("from_id")),
            type=_str(row.get("from_type")) or LocationType.ORGANIZATION.value,
            name=_str(row.get("from_name")),
        ),
        to=EntryEndpoint(
            id=_str(row.get("beneficiary_id")),
            type="BENEFICIARY",
            name=_str(beneficiary.get("full_name")),
        ),
        type=ProductEntryType.DONATION.value,
        organization_id=_str(row.get("organization_id")),
        organization=transform_organization(row.get("organizations")),
        created_at=created_at,
        updated_at=created_at,
    )


# =============================================================================
# Volunteers
# =============================================================================

def transform_volunteer(row: Any) -> VolunteerSchema:
    row = _row(row)
    return VolunteerSchema(
        id=_str(row.get("id")),
        organization_id=_str(row.get("organization_id")),
        full_name=_str(row.get("full_name")),
        email=_str(row.get("email")),
        gender=_str(row.get("gender")),
        documents=_list(row.get("documents")),
        birthdate=_str(row.get("birthdate")),
        phones=_str_list(row.get("phones")),
        address=_dict(row.get("address")),
        status=_str(row.get("status"), "ACTIVE"),
        segments=_str_list(row.get("segments")),
        medical_information=_dict(row.get("medical_information")),
        emergency_contacts=_list(row.get("emergency_contacts")),
        notes=_str(row.get("notes")),
        created_at=_str(row.get("created_at")),
        updated_at=_str(row.get("updated_at")),
    )


# =============================================================================
# Invites and requests
# =============================================================================

def transform_invite(row: Any) -> JoinOrganizationInviteSchema:
    row = _row(row)
    return JoinOrganizationInviteSchema(
        id=_str(row.get("id")),
        organization_id=_str(row.get("organization_id")),
        email=_str(row.get("email")),
        role=_str(row.get("role")),
        status=_str(row.get("status"), "PENDING"),
        created_at=_str(row.get("created_at")),
    )


def transform_platform_invite(row: Any) -> JoinPlatformInviteSchema:
    row = _row(row)
    return JoinPlatformInviteSchema(
        id=_str(row.get("id")),
        organization_id=_str(row.get("organization_id")),
        email=_str(row.get("email")),
        role=_str(row.get("role")),
        status=_str(row.get("status"), "PENDING"),
        created_at=_str(row.get("created_at")),
    )


def transform_join_request(row: Any) -> JoinOrganizationRequestSchema:
    row = _row(row)
    user = _row(row.get("user"))
    return JoinOrganizationRequestSchema(
        id=_str(row.get("id")),
        organization_id=_str(row.get("organization_id")),
        user_id=_str(row.get("user_id")) or _str(user.get("id")),
        user=transform_user(user),
        status=_str(row.get("status"), "PENDING"),
        created_at=_str(row.get("created_at")),
    )


def transform_data_access_request(row: Any) -> OrganizationDataAccessRequestSchema:
    row = _row(row)
    return OrganizationDataAccessRequestSchema(
        id=_str(row.get("id")),
        requesting_organization_id=_str(row.get("requesting_organization_id")),
        requesting_organization=transform_organization(row.get("requesting_organization")),
        target_organization_id=_str(row.get("target_organization_id")),
        requester_id=_str(row.get("requester_id")),
        status=_str(row.get("status"), "PENDING"),
        created_at=_str(row.get("created_at")),
    )


def transform_type_update_request(row: Any) -> UpdateOrganizationTypeRequestSchema:
    row = _row(row)
    return UpdateOrganizationTypeRequestSchema(
        id=_str(row.get("id")),
        organization_id=_str(row.get("organization_id")),
        organization=transform_organization(row.get("organization")),
        requested_by_id=_str(row.get("requested_by_id")),
        requested_by=transform_user(row.get("requested_by")),
        new_type=_str(row.get("new_type")),
        status=_str(row.get("status"), "PENDING"),
        created_at=_str(row.get("created_at")),
    )
