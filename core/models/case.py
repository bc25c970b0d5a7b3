# =============================================================================
# core/models/case.py - Case, Note and Document Schemas
# =============================================================================
# These models define the API contract for case management:
# - CaseSchema: a case opened for one beneficiary
# - CaseNoteSchema / CaseDocumentSchema: child collections of a case
# - CaseStats: per-organization case counters
# - Create/Update payloads for each of the above
#
# Case numbers are generated on creation: CASE-YYYYMMDD-NNNNNN.
# =============================================================================

from pydantic import BaseModel, Field

from .enums import CasePriority, CaseStatus, CaseUrgency


# =============================================================================
# Embedded relations
# =============================================================================

class CaseBeneficiary(BaseModel):
    """Beneficiary summary embedded in a case (full_name split in two)."""

    id: str = ""
    first_name: str = ""
    last_name: str = ""
    full_name: str = ""
    phone: str = ""
    email: str = ""
    current_address: str = ""
    image_url: str = ""


class CaseAssignee(BaseModel):
    id: str = ""
    first_name: str = ""
    last_name: str = ""
    email: str = ""


class AuthorRef(BaseModel):
    """Author of a note or uploader of a document."""

    id: str = ""
    name: str = "Unknown User"


# =============================================================================
# Cases
# =============================================================================

class CaseSchema(BaseModel):
    """
    Case as returned to clients.

    Example:
        {
            "id": "6f1c...",
            "case_number": "CASE-20240115-482913",
            "title": "Shelter for family of four",
            "status": "PENDING",
            "priority": "HIGH",
            "beneficiary": {"id": "...", "first_name": "Ana", "last_name": "Lima", ...},
            "notes_count": 3
        }
    """

    id: str = ""
    case_number: str = ""
    title: str = ""
    description: str = ""
    status: str = CaseStatus.PENDING.value
    priority: str = CasePriority.MEDIUM.value
    urgency_level: str = CaseUrgency.FLEXIBLE.value
    service_types: list[str] = Field(default_factory=list)
    beneficiary_id: str = ""
    beneficiary: CaseBeneficiary = Field(default_factory=CaseBeneficiary)
    assigned_to_id: str = ""
    assigned_to: CaseAssignee = Field(default_factory=CaseAssignee)
    due_date: str = ""
    estimated_duration: str = ""
    budget_allocated: str = ""
    tags: list[str] = Field(default_factory=list)
    notes_count: int = 0
    documents_count: int = 0
    last_activity: str = ""
    organization_id: str = ""
    created_at: str = ""
    updated_at: str = ""


class CreateCaseNotePayload(BaseModel):
    title: str | None = Field(default=None, max_length=255)
    content: str = Field(..., min_length=1)
    tags: list[str] | None = None
    note_type: str | None = Field(default=None, description="e.g. UPDATE, CALL, MEETING")
    is_important: bool | None = None


class UpdateCaseNotePayload(BaseModel):
    title: str | None = Field(default=None, max_length=255)
    content: str | None = Field(default=None, min_length=1)
    tags: list[str] | None = None
    note_type: str | None = None
    is_important: bool | None = None


class CreateCasePayload(BaseModel):
    """
    Schema for opening a case.

    Status always starts as PENDING; the organization comes from the
    signed-in user. `initial_note`, when given, is stored as the first note.
    """

    title: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    priority: CasePriority = CasePriority.MEDIUM
    urgency_level: CaseUrgency = CaseUrgency.FLEXIBLE
    service_types: list[str] = Field(default_factory=list)
    beneficiary_id: str = Field(..., min_length=1)
    assigned_to_id: str | None = None
    due_date: str | None = None
    estimated_duration: str | None = None
    budget_allocated: str | None = Field(default=None, description="Decimal amount as text")
    tags: list[str] = Field(default_factory=list)
    initial_note: CreateCaseNotePayload | None = None


class UpdateCasePayload(BaseModel):
    """Partial update; unset fields are dropped before writing."""

    title: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    status: CaseStatus | None = None
    priority: CasePriority | None = None
    urgency_level: CaseUrgency | None = None
    service_types: list[str] | None = None
    assigned_to_id: str | None = None
    due_date: str | None = None
    estimated_duration: str | None = None
    budget_allocated: str | None = None
    tags: list[str] | None = None


# =============================================================================
# Notes and Documents
# =============================================================================

class CaseNoteSchema(BaseModel):
    id: str = ""
    case_id: str = ""
    title: str = "Note"
    content: str = ""
    tags: list[str] = Field(default_factory=list)
    note_type: str = "UPDATE"
    is_important: bool = False
    created_by: AuthorRef = Field(default_factory=AuthorRef)
    created_at: str = ""
    updated_at: str = ""


class CaseDocumentSchema(BaseModel):
    """
    Document attached to a case.

    `download_url` is the stored file URL; private files need a signed link
    from generate_case_document_download_link.
    """

    id: str = ""
    case_id: str = ""
    document_name: str = ""
    file_name: str = ""
    document_type: str = "OTHER"
    file_size: int = 0
    mime_type: str = "application/octet-stream"
    description: str = ""
    tags: list[str] = Field(default_factory=list)
    is_finalized: bool = False
    uploaded_by: AuthorRef = Field(default_factory=AuthorRef)
    created_at: str = ""
    download_url: str = ""


class CreateCaseDocumentPayload(BaseModel):
    """Metadata saved after the file was uploaded to the signed upload link."""

    document_name: str = Field(..., min_length=1, max_length=255)
    document_type: str = "OTHER"
    description: str = ""
    tags: list[str] = Field(default_factory=list)
    file_name: str = Field(..., min_length=1)
    file_size: int = Field(default=0, ge=0)
    mime_type: str = "application/octet-stream"
    file_key: str = Field(..., min_length=1, description="Storage path returned with the upload link")


class UpdateCaseDocumentPayload(BaseModel):
    document_name: str | None = Field(default=None, min_length=1, max_length=255)
    document_type: str | None = None
    description: str | None = None
    tags: list[str] | None = None
    is_finalized: bool | None = None


class DocumentLink(BaseModel):
    """Signed storage link for uploading or downloading a document."""

    link: str
    file_key: str = ""
    token: str = ""


# =============================================================================
# Stats
# =============================================================================

class CaseStats(BaseModel):
    """
    Case counters for an organization.

    sum(status_counts.values()) == total_cases.
    """

    total_cases: int = 0
    open_cases: int = 0
    in_progress_cases: int = 0
    overdue_cases: int = 0
    closed_this_month: int = 0
    avg_resolution_days: float = 0.0
    status_counts: dict[str, int] = Field(
        default_factory=lambda: {status.value: 0 for status in CaseStatus}
    )
