# =============================================================================
# core/repositories/case.py - Case Repository
# =============================================================================
# Cases plus their notes and documents.
#
# - Case notes and documents fall back to the legacy API only when the
#   hosted backend reports the case as missing (404); cases opened before
#   the migration still live there.
# - notes_count / documents_count on the case row are compare-and-set
#   counters; every note or document write also touches last_activity.
# - Document files live in the case-documents bucket under
#   cases/<case id>/<uuid>.<ext>; the row keeps that path as file_key.
# =============================================================================

import logging
from datetime import datetime, timezone
from typing import Any
from urllib.parse import unquote, urlparse
from uuid import uuid4

from app.exceptions import RecordNotFoundError, StorageLinkError
from core.models.case import (
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
from core.models.common import ApiResponse, Page
from core.models.enums import CaseStatus
from core.repositories.base import BaseRepository
from core.stats import case_stats
from core.transforms import transform_case, transform_case_document, transform_case_note
from lib.fallback import FallbackPolicy, with_fallback
from lib.utils import drop_none, file_extension, utc_now_iso

logger = logging.getLogger(__name__)

TABLE = "cases"
NOTES_TABLE = "case_notes"
DOCUMENTS_TABLE = "case_documents"
CASE_DOCUMENTS_BUCKET = "case-documents"

CASE_COLUMNS = (
    "*, "
    "beneficiaries:beneficiary_id(id, full_name, email, phones, image_url, address), "
    "assigned_to:assigned_to_id(id, first_name, last_name, email)"
)
NOTE_COLUMNS = "*, users:author_id(id, first_name, last_name)"
DOCUMENT_COLUMNS = "*, users:uploaded_by_id(id, first_name, last_name)"

# Storage object URLs: /storage/v1/object/<public|sign|authenticated>/<bucket>/<key>
STORAGE_OBJECT_PREFIX = "/storage/v1/object/"


def generate_case_number(now: datetime | None = None) -> str:
    """
    Human-readable case number: CASE-YYYYMMDD-NNNNNN.

    NNNNNN is the last six digits of the millisecond timestamp.
    """
    now = now or datetime.now(timezone.utc)
    millis = int(now.timestamp() * 1000)
    return f"CASE-{now:%Y%m%d}-{millis % 1_000_000:06d}"


class CaseRepository(BaseRepository):
    """Cases, case notes and case documents."""

    # -------------------------------------------------------------------------
    # Cases
    # -------------------------------------------------------------------------

    async def get_cases_by_organization_id(
        self,
        org_id: str,
        offset: int = 0,
        limit: int = 20,
        search: str = "",
    ) -> ApiResponse[Page[CaseSchema]]:
        page = await self._page(
            TABLE,
            transform_case,
            offset,
            limit,
            columns=CASE_COLUMNS,
            filters={"organization_id": org_id},
            search=search,
            search_columns=["title", "description"],
        )
        logger.info(f"Fetched {len(page.data)} of {page.count} cases for organization {org_id}")
        return ApiResponse(page)

    async def get_case_by_id(self, case_id: str) -> ApiResponse[CaseSchema]:
        row = await self._fetch_one(TABLE, case_id, "Case", columns=CASE_COLUMNS)
        return ApiResponse(transform_case(row))

    async def create_case(self, data: CreateCasePayload) -> ApiResponse[CaseSchema]:
        """
        Open a case in the signed-in user's organization.

        The case starts PENDING with a generated case number. An
        `initial_note` is stored as the first note.
        """
        org_id = await self._current_organization_id()
        now = utc_now_iso()

        row = {
            **data.model_dump(mode="json", exclude_none=True, exclude={"initial_note"}),
            "case_number": generate_case_number(),
            "status": CaseStatus.PENDING.value,
            "organization_id": org_id,
            "notes_count": 0,
            "documents_count": 0,
            "last_activity": now,
            "created_at": now,
            "updated_at": now,
        }

        try:
            created = await self._insert_one(TABLE, row)
        except Exception as e:
            logger.error(f"Failed to create case for organization {org_id}: {e}")
            raise

        case_id = str(created["id"])
        logger.info(f"Created case: {case_id} ({row['case_number']})")

        if data.initial_note:
            await self.create_case_note(case_id, data.initial_note)

        response = await self.get_case_by_id(case_id)
        return ApiResponse(response.data, status=201, status_text="Created")

    async def update_case(self, case_id: str, data: UpdateCasePayload) -> ApiResponse[CaseSchema]:
        """Write the fields that were set and touch last_activity."""
        now = utc_now_iso()
        changes = drop_none(data.model_dump(mode="json"))
        changes.update({"last_activity": now, "updated_at": now})

        try:
            await self._update_one(TABLE, case_id, changes, "Case")
        except Exception as e:
            logger.error(f"Failed to update case {case_id}: {e}")
            raise

        logger.info(f"Updated case: {case_id}")
        return await self.get_case_by_id(case_id)

    async def delete_case(self, case_id: str) -> ApiResponse[None]:
        try:
            await self._delete_one(TABLE, case_id)
        except Exception as e:
            logger.error(f"Failed to delete case {case_id}: {e}")
            raise

        logger.info(f"Deleted case: {case_id}")
        return ApiResponse(None, status=204, status_text="No Content")

    async def get_case_stats(self, org_id: str) -> ApiResponse[CaseStats]:
        """Case counters; zeroed when the backend fails."""
        async def primary() -> CaseStats:
            rows = await self._rows_for(
                TABLE,
                "id, status, created_at, updated_at, due_date",
                organization_id=org_id,
            )
            return case_stats(rows)

        async def zeroed() -> CaseStats:
            return CaseStats()

        stats = await with_fallback("get_case_stats", primary, zeroed, FallbackPolicy.always())
        return ApiResponse(stats)

    async def _touch(self, case_id: str, counter: str | None = None, delta: int = 0) -> None:
        """Bump last_activity and optionally a child counter on the case."""
        if counter and delta:
            await self._compare_and_set(
                TABLE, case_id, counter, lambda current: max(current + delta, 0), "Case"
            )
        query = await self.client.query(TABLE)
        await query.update({"last_activity": utc_now_iso()}).eq("id", case_id).execute()

    # -------------------------------------------------------------------------
    # Notes
    # -------------------------------------------------------------------------

    async def get_case_notes(self, case_id: str) -> ApiResponse[list[CaseNoteSchema]]:
        """
        Notes of a case, newest first.

        Falls back to the legacy cases/{id}/notes endpoint when the case is
        not found on the hosted backend.

        Returns:
            From the hosted backend, ApiResponse whose data is the list of
            CaseNoteSchema. From the legacy API, the legacy body unchanged
            (there the notes are wrapped, e.g. {"data": [...]}), so callers
            must handle both shapes.
        """
        async def primary() -> ApiResponse[list[CaseNoteSchema]]:
            await self._fetch_one(TABLE, case_id, "Case", columns="id")
            query = await self.client.query(NOTES_TABLE)
            response = await (
                query.select(NOTE_COLUMNS)
                .eq("case_id", case_id)
                .order("created_at", desc=True)
                .execute()
            )
            notes = [transform_case_note(row) for row in response.data or []]
            logger.info(f"Fetched {len(notes)} notes for case {case_id}")
            return ApiResponse(notes)

        return await with_fallback(
            "get_case_notes",
            primary,
            lambda: self.legacy.request(f"cases/{case_id}/notes"),
            FallbackPolicy.on_status(404),
        )

    async def create_case_note(
        self,
        case_id: str,
        data: CreateCaseNotePayload,
    ) -> ApiResponse[CaseNoteSchema]:
        author_id = await self._current_user_id()
        now = utc_now_iso()

        row = {
            **data.model_dump(mode="json", exclude_none=True),
            "case_id": case_id,
            "author_id": author_id,
            "is_private": False,
            "created_at": now,
            "updated_at": now,
        }

        try:
            created = await self._insert_one(NOTES_TABLE, row)
        except Exception as e:
            logger.error(f"Failed to create note for case {case_id}: {e}")
            raise

        await self._touch(case_id, "notes_count", 1)

        note = await self._fetch_one(NOTES_TABLE, str(created["id"]), "Case note", columns=NOTE_COLUMNS)
        logger.info(f"Created note {created['id']} on case {case_id}")
        return ApiResponse(transform_case_note(note), status=201, status_text="Created")

    async def update_case_note(
        self,
        case_id: str,
        note_id: str,
        data: UpdateCaseNotePayload,
    ) -> ApiResponse[CaseNoteSchema]:
        changes = data.model_dump(mode="json", exclude_none=True)
        changes["updated_at"] = utc_now_iso()

        query = await self.client.query(NOTES_TABLE)
        response = await query.update(changes).eq("id", note_id).eq("case_id", case_id).execute()
        if not response.data:
            raise RecordNotFoundError("Case note", note_id)

        await self._touch(case_id)

        note = await self._fetch_one(NOTES_TABLE, note_id, "Case note", columns=NOTE_COLUMNS)
        logger.info(f"Updated note {note_id} on case {case_id}")
        return ApiResponse(transform_case_note(note))

    async def delete_case_note(self, case_id: str, note_id: str) -> ApiResponse[None]:
        query = await self.client.query(NOTES_TABLE)
        response = await query.delete().eq("id", note_id).eq("case_id", case_id).execute()
        if not response.data:
            raise RecordNotFoundError("Case note", note_id)

        await self._touch(case_id, "notes_count", -1)
        logger.info(f"Deleted note {note_id} from case {case_id}")
        return ApiResponse(None, status=204, status_text="No Content")

    # -------------------------------------------------------------------------
    # Documents
    # -------------------------------------------------------------------------

    async def get_case_documents(self, case_id: str) -> ApiResponse[list[CaseDocumentSchema]]:
        """
        Documents of a case, newest first.

        Falls back to the legacy cases/{id}/documents endpoint when the case
        is not found on the hosted backend.
        """
        async def primary() -> ApiResponse[list[CaseDocumentSchema]]:
            await self._fetch_one(TABLE, case_id, "Case", columns="id")
            query = await self.client.query(DOCUMENTS_TABLE)
            response = await (
                query.select(DOCUMENT_COLUMNS)
                .eq("case_id", case_id)
                .order("created_at", desc=True)
                .execute()
            )
            documents = [transform_case_document(row) for row in response.data or []]
            logger.info(f"Fetched {len(documents)} documents for case {case_id}")
            return ApiResponse(documents)

        return await with_fallback(
            "get_case_documents",
            primary,
            lambda: self.legacy.request(f"cases/{case_id}/documents"),
            FallbackPolicy.on_status(404),
        )

    async def generate_case_document_upload_link(
        self,
        case_id: str,
        file_type: str,
    ) -> ApiResponse[DocumentLink]:
        """
        Signed upload link for a new case document.

        Upload the file to `link`, then call create_case_document with the
        returned `file_key`.
        """
        path = f"cases/{case_id}/{uuid4()}.{file_extension(file_type)}"
        link = await self._upload_link(CASE_DOCUMENTS_BUCKET, path)
        logger.info(f"Generated upload link for case {case_id}: {link.file_key}")
        return ApiResponse(link)

    async def generate_case_document_download_link(
        self,
        case_id: str,
        document_id: str,
    ) -> ApiResponse[DocumentLink]:
        """Time-limited download link for a stored document."""
        row = await self._document_row(case_id, document_id)
        file_key = self._file_key(row)
        if not file_key:
            raise StorageLinkError(document_id, "document has no stored file")

        try:
            url = await self.client.create_signed_url(CASE_DOCUMENTS_BUCKET, file_key)
        except Exception as e:
            logger.error(f"Failed to sign download for {file_key}: {e}")
            raise StorageLinkError(file_key, str(e)) from e

        if not url:
            raise StorageLinkError(file_key, "storage returned no signed URL")
        return ApiResponse(DocumentLink(link=url, file_key=file_key))

    async def create_case_document(
        self,
        case_id: str,
        data: CreateCaseDocumentPayload,
    ) -> ApiResponse[CaseDocumentSchema]:
        """Save metadata for a file already uploaded to `data.file_key`."""
        uploaded_by = await self._current_user_id()
        file_url = await self.client.get_public_url(CASE_DOCUMENTS_BUCKET, data.file_key)

        row = {
            "case_id": case_id,
            "document_name": data.document_name,
            "document_type": data.document_type,
            "description": data.description,
            "tags": data.tags,
            "file_name": data.file_name,
            "file_size": data.file_size,
            "file_type": data.mime_type,
            "file_key": data.file_key,
            "file_url": file_url,
            "is_finalized": False,
            "uploaded_by_id": uploaded_by,
            "created_at": utc_now_iso(),
        }

        try:
            created = await self._insert_one(DOCUMENTS_TABLE, row)
        except Exception as e:
            logger.error(f"Failed to create document for case {case_id}: {e}")
            raise

        await self._touch(case_id, "documents_count", 1)

        document = await self._fetch_one(
            DOCUMENTS_TABLE, str(created["id"]), "Case document", columns=DOCUMENT_COLUMNS
        )
        logger.info(f"Created document {created['id']} on case {case_id}")
        return ApiResponse(transform_case_document(document), status=201, status_text="Created")

    async def update_case_document(
        self,
        case_id: str,
        document_id: str,
        data: UpdateCaseDocumentPayload,
    ) -> ApiResponse[CaseDocumentSchema]:
        changes = data.model_dump(mode="json", exclude_none=True)
        if not changes:
            row = await self._document_row(case_id, document_id)
            return ApiResponse(transform_case_document(row))

        query = await self.client.query(DOCUMENTS_TABLE)
        response = await query.update(changes).eq("id", document_id).eq("case_id", case_id).execute()
        if not response.data:
            raise RecordNotFoundError("Case document", document_id)

        await self._touch(case_id)
        row = await self._document_row(case_id, document_id)
        logger.info(f"Updated document {document_id} on case {case_id}")
        return ApiResponse(transform_case_document(row))

    async def delete_case_document(self, case_id: str, document_id: str) -> ApiResponse[None]:
        """Delete the document row and its stored file."""
        row = await self._document_row(case_id, document_id)
        file_key = self._file_key(row)

        if file_key:
            await self.client.remove_files(CASE_DOCUMENTS_BUCKET, [file_key])

        query = await self.client.query(DOCUMENTS_TABLE)
        await query.delete().eq("id", document_id).eq("case_id", case_id).execute()

        await self._touch(case_id, "documents_count", -1)
        logger.info(f"Deleted document {document_id} from case {case_id}")
        return ApiResponse(None, status=204, status_text="No Content")

    async def _document_row(self, case_id: str, document_id: str) -> dict[str, Any]:
        row = await self._fetch_one(DOCUMENTS_TABLE, document_id, "Case document", columns=DOCUMENT_COLUMNS)
        if str(row.get("case_id")) != str(case_id):
            raise RecordNotFoundError("Case document", document_id)
        return row

    def _file_key(self, row: dict[str, Any]) -> str:
        file_key = row.get("file_key") or ""
        if not file_key and row.get("file_url"):
            file_key = self.extract_file_key_from_url(row["file_url"])
        return file_key

    @staticmethod
    def extract_file_key_from_url(url: str) -> str:
        """
        Storage path of an object from its URL.

        Supabase storage URLs drop the /storage/v1/object/<kind>/<bucket>/
        prefix; any other URL yields its path without the leading slash.
        Query strings (signatures) are ignored.

        Example:
            extract_file_key_from_url(
                "https://x.supabase.co/storage/v1/object/sign/case-documents/cases/1/a.pdf?token=..."
            )
            # "cases/1/a.pdf"
        """
        path = unquote(urlparse(url).path)
        if path.startswith(STORAGE_OBJECT_PREFIX):
            parts = path[len(STORAGE_OBJECT_PREFIX):].split("/", 2)
            return parts[2] if len(parts) == 3 else ""
        return path.lstrip("/")
