# =============================================================================
# app/routers/cases.py - Case Endpoints
# =============================================================================
# Cases plus their notes and documents.
# All endpoints require authentication.
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Path, Query

from app.dependencies import CaseRepoDep
from app.routers.responses import DEFAULT_LIMIT, MAX_LIMIT, respond
from core.models.case import (
    CreateCaseDocumentPayload,
    CreateCaseNotePayload,
    CreateCasePayload,
    UpdateCaseDocumentPayload,
    UpdateCaseNotePayload,
    UpdateCasePayload,
)

router = APIRouter()

CaseId = Annotated[str, Path(description="Case ID")]


# =============================================================================
# Cases
# =============================================================================

@router.get("/organizations/{org_id}/cases")
async def list_cases(
    org_id: str,
    repo: CaseRepoDep,
    offset: Annotated[int, Query(ge=0)] = 0,
    limit: Annotated[int, Query(ge=1, le=MAX_LIMIT)] = DEFAULT_LIMIT,
    search: str = "",
):
    """List an organization's cases; `search` matches title and description."""
    return respond(await repo.get_cases_by_organization_id(org_id, offset, limit, search))


@router.get("/organizations/{org_id}/cases/stats")
async def case_stats(org_id: str, repo: CaseRepoDep):
    return respond(await repo.get_case_stats(org_id))


@router.post("/cases", status_code=201)
async def create_case(request: CreateCasePayload, repo: CaseRepoDep):
    """
    Open a case in the caller's organization.

    The case starts PENDING with a generated CASE-YYYYMMDD-NNNNNN number.
    An `initial_note` becomes the case's first note.
    """
    return respond(await repo.create_case(request))


@router.get("/cases/{case_id}")
async def get_case(case_id: CaseId, repo: CaseRepoDep):
    return respond(await repo.get_case_by_id(case_id))


@router.put("/cases/{case_id}")
async def update_case(case_id: CaseId, request: UpdateCasePayload, repo: CaseRepoDep):
    return respond(await repo.update_case(case_id, request))


@router.delete("/cases/{case_id}", status_code=204)
async def delete_case(case_id: CaseId, repo: CaseRepoDep):
    return respond(await repo.delete_case(case_id))


# =============================================================================
# Notes
# =============================================================================

@router.get("/cases/{case_id}/notes")
async def list_case_notes(case_id: CaseId, repo: CaseRepoDep):
    return respond(await repo.get_case_notes(case_id))


@router.post("/cases/{case_id}/notes", status_code=201)
async def create_case_note(case_id: CaseId, request: CreateCaseNotePayload, repo: CaseRepoDep):
    return respond(await repo.create_case_note(case_id, request))


@router.put("/cases/{case_id}/notes/{note_id}")
async def update_case_note(
    case_id: CaseId,
    note_id: str,
    request: UpdateCaseNotePayload,
    repo: CaseRepoDep,
):
    return respond(await repo.update_case_note(case_id, note_id, request))


@router.delete("/cases/{case_id}/notes/{note_id}", status_code=204)
async def delete_case_note(case_id: CaseId, note_id: str, repo: CaseRepoDep):
    return respond(await repo.delete_case_note(case_id, note_id))


# =============================================================================
# Documents
# =============================================================================

@router.get("/cases/{case_id}/documents")
async def list_case_documents(case_id: CaseId, repo: CaseRepoDep):
    return respond(await repo.get_case_documents(case_id))


@router.post("/cases/{case_id}/documents/upload-link")
async def case_document_upload_link(
    case_id: CaseId,
    repo: CaseRepoDep,
    file_type: Annotated[str, Query(min_length=1, description="MIME type or extension")],
):
    """
    Signed link to upload a document to.

    Upload the file to `link`, then register it with POST
    /cases/{case_id}/documents using the returned `file_key`.
    """
    return respond(await repo.generate_case_document_upload_link(case_id, file_type))


@router.get("/cases/{case_id}/documents/{document_id}/download-link")
async def case_document_download_link(case_id: CaseId, document_id: str, repo: CaseRepoDep):
    return respond(await repo.generate_case_document_download_link(case_id, document_id))


@router.post("/cases/{case_id}/documents", status_code=201)
async def create_case_document(
    case_id: CaseId,
    request: CreateCaseDocumentPayload,
    repo: CaseRepoDep,
):
    return respond(await repo.create_case_document(case_id, request))


@router.put("/cases/{case_id}/documents/{document_id}")
async def update_case_document(
    case_id: CaseId,
    document_id: str,
    request: UpdateCaseDocumentPayload,
    repo: CaseRepoDep,
):
    return respond(await repo.update_case_document(case_id, document_id, request))


@router.delete("/cases/{case_id}/documents/{document_id}", status_code=204)
async def delete_case_document(case_id: CaseId, document_id: str, repo: CaseRepoDep):
    """Delete the document row and its stored file."""
    return respond(await repo.delete_case_document(case_id, document_id))
