# =============================================================================
# core/models/enums.py - Shared Enumerations
# =============================================================================
# String enums mirroring the Postgres enum types of the hosted database.
# Values are the exact strings stored in the database.
# =============================================================================

from enum import Enum


class PlatformRole(str, Enum):
    """
    Coarse authorization tier of a user.

    - NO_ORG: signed up but not part of any organization
    - ORG_MEMBER / ORG_ADMIN: member or admin of one organization
    - RELIF_MEMBER: platform staff
    """
    NO_ORG = "NO_ORG"
    ORG_MEMBER = "ORG_MEMBER"
    ORG_ADMIN = "ORG_ADMIN"
    RELIF_MEMBER = "RELIF_MEMBER"


class UserStatus(str, Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    UNVERIFIED = "UNVERIFIED"


class OrganizationType(str, Enum):
    MANAGER = "MANAGER"
    COORDINATOR = "COORDINATOR"


class OrganizationStatus(str, Enum):
    """Also used for housing and room status."""
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"
    ARCHIVED = "ARCHIVED"


class BeneficiaryStatus(str, Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    PENDING = "PENDING"


class VolunteerStatus(str, Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    PENDING = "PENDING"


class CaseStatus(str, Enum):
    """
    Lifecycle of a case.

    Transitions are plain field writes; any status may follow any other.
    """
    IN_PROGRESS = "IN_PROGRESS"
    PENDING = "PENDING"
    ON_HOLD = "ON_HOLD"
    CLOSED = "CLOSED"
    CANCELLED = "CANCELLED"


class CasePriority(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    URGENT = "URGENT"


class CaseUrgency(str, Enum):
    IMMEDIATE = "IMMEDIATE"
    WITHIN_WEEK = "WITHIN_WEEK"
    WITHIN_MONTH = "WITHIN_MONTH"
    FLEXIBLE = "FLEXIBLE"


class AllocationType(str, Enum):
    """How a beneficiary arrived in a room."""
    ENTRANCE = "ENTRANCE"
    REALLOCATION = "REALLOCATION"


class LocationType(str, Enum):
    """Where stock is held or donated from."""
    HOUSING = "HOUSING"
    ORGANIZATION = "ORGANIZATION"


class RequestStatus(str, Enum):
    """
    Status of invites and requests.

    Data-access requests are accepted as GRANTED, type-update requests as
    APPROVED, and organization invites are withdrawn as CANCELED.
    """
    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"
    GRANTED = "GRANTED"
    APPROVED = "APPROVED"
    CANCELED = "CANCELED"


class ProductEntryType(str, Enum):
    ENTRANCE = "ENTRANCE"
    REALLOCATION = "REALLOCATION"
    DONATION = "DONATION"
