# =============================================================================
# tests/test_case_repository.py - Case Repository Tests
# =============================================================================
# This module contains tests for:
# - case creation (number format, PENDING status, initial note)
# - note/document counters kept on the case row
# - legacy fallback only when the case is missing (404)
# - document storage paths, links and file cleanup
# - storage URL -> file key extraction
# =============================================================================

import re
from datetime import datetime, timezone

import pytest
from postgrest.exceptions import APIError

from app.exceptions import (
    ConcurrentUpdateError,
    RecordNotFoundError,
    StorageLinkError,
    UserOrganizationNotFoundError,
)
from core.models.case import (
    CreateCaseDocumentPayload,
    CreateCaseNotePayload,
    CreateCasePayload,
    UpdateCaseDocumentPayload,
    UpdateCaseNotePayload,
    UpdateCasePayload,
)
from core.repositories.case import CaseRepository, generate_case_number
from tests.conftest import ORG_ID, USER_ID

CASE_NUMBER = re.compile(r"^CASE-\d{8}-\d{6}$")


@pytest.fixture
def repo(backend, legacy):
    return CaseRepository(backend, legacy)


@pytest.fixture
def case_row(backend):
    backend.seed("cases", {
        "id": "c1",
        "case_number": "CASE-20240101-000001",
        "title": "Shelter for family",
        "status": "PENDING",
        "organization_id": ORG_ID,
        "beneficiary_id": "b1",
        "notes_count": 0,
        "documents_count": 0,
    })
    return backend.row("cases", "c1")


# =============================================================================
# Case numbers and file keys
# =============================================================================

class TestHelpers:
    def test_case_number_format(self):
        now = datetime(2024, 1, 15, 10, 30, 0, 123000, tzinfo=timezone.utc)

        number = generate_case_number(now)

        assert number.startswith("CASE-20240115-")
        assert CASE_NUMBER.match(number)
        millis = int(now.timestamp() * 1000)
        assert number.endswith(f"{millis % 1_000_000:06d}")

    def test_case_number_default_now(self):
        assert CASE_NUMBER.match(generate_case_number())

    def test_file_key_from_public_url(self):
        url = "https://x.supabase.co/storage/v1/object/public/case-documents/cases/c1/a.pdf"

        assert CaseRepository.extract_file_key_from_url(url) == "cases/c1/a.pdf"

    def test_file_key_from_signed_url(self):
        url = (
            "https://x.supabase.co/storage/v1/object/sign/case-documents/"
            "cases/c1/my%20file.pdf?token=abc"
        )

        assert CaseRepository.extract_file_key_from_url(url) == "cases/c1/my file.pdf"

    def test_file_key_from_other_url(self):
        assert CaseRepository.extract_file_key_from_url("https://cdn.example.org/docs/a.pdf") == "docs/a.pdf"

    def test_file_key_from_truncated_storage_url(self):
        assert CaseRepository.extract_file_key_from_url("https://x/storage/v1/object/public/bucket") == ""


# =============================================================================
# Cases
# =============================================================================

class TestCases:
    @pytest.mark.asyncio
    async def test_create_case(self, repo, backend):
        response = await repo.create_case(CreateCasePayload(
            title="Shelter for family of four",
            beneficiary_id="b1",
            priority="HIGH",
        ))

        case = response.data
        assert response.status == 201
        assert CASE_NUMBER.match(case.case_number)
        assert case.status == "PENDING"
        assert case.priority == "HIGH"
        assert case.organization_id == ORG_ID
        assert case.notes_count == 0
        assert case.documents_count == 0

    @pytest.mark.asyncio
    async def test_create_case_with_initial_note(self, repo, backend):
        response = await repo.create_case(CreateCasePayload(
            title="Medical follow-up",
            beneficiary_id="b1",
            initial_note=CreateCaseNotePayload(content="First visit done"),
        ))

        assert response.data.notes_count == 1
        notes = backend.tables["case_notes"]
        assert len(notes) == 1
        assert notes[0]["author_id"] == USER_ID
        assert notes[0]["case_id"] == response.data.id

    @pytest.mark.asyncio
    async def test_create_case_without_organization(self, repo, backend):
        backend.row("users", USER_ID)["organization_id"] = None

        with pytest.raises(UserOrganizationNotFoundError):
            await repo.create_case(CreateCasePayload(title="x", beneficiary_id="b1"))

    @pytest.mark.asyncio
    async def test_update_case(self, repo, case_row):
        response = await repo.update_case("c1", UpdateCasePayload(status="IN_PROGRESS"))

        assert response.data.status == "IN_PROGRESS"
        assert response.data.title == "Shelter for family"
        assert case_row["last_activity"]

    @pytest.mark.asyncio
    async def test_update_missing_case(self, repo):
        with pytest.raises(RecordNotFoundError):
            await repo.update_case("missing", UpdateCasePayload(title="x"))

    @pytest.mark.asyncio
    async def test_delete_case(self, repo, backend, case_row):
        response = await repo.delete_case("c1")

        assert response.status == 204
        assert backend.tables["cases"] == []

    @pytest.mark.asyncio
    async def test_list_and_search(self, repo, backend, case_row):
        backend.seed("cases", {"id": "c2", "title": "Food support", "organization_id": ORG_ID})

        everything = await repo.get_cases_by_organization_id(ORG_ID)
        food = await repo.get_cases_by_organization_id(ORG_ID, search="food")

        assert everything.data.count == 2
        assert [c.id for c in food.data.data] == ["c2"]

    @pytest.mark.asyncio
    async def test_stats_sum_to_total(self, repo, backend):
        for i, status in enumerate(["PENDING", "IN_PROGRESS", "CLOSED", "ON_HOLD"]):
            backend.seed("cases", {"id": f"c{i}", "status": status, "organization_id": ORG_ID})

        stats = (await repo.get_case_stats(ORG_ID)).data

        assert stats.total_cases == 4
        assert sum(stats.status_counts.values()) == 4
        assert stats.open_cases == 3

    @pytest.mark.asyncio
    async def test_stats_zeroed_on_failure(self, repo, backend):
        backend.errors["cases"] = APIError({"code": "42501", "message": "denied"})

        stats = (await repo.get_case_stats(ORG_ID)).data

        assert stats.total_cases == 0


# =============================================================================
# Notes
# =============================================================================

class TestNotes:
    @pytest.mark.asyncio
    async def test_create_note_increments_counter(self, repo, backend, case_row):
        response = await repo.create_case_note("c1", CreateCaseNotePayload(content="Called family"))

        assert response.status == 201
        assert response.data.content == "Called family"
        assert response.data.created_by.id == USER_ID
        assert case_row["notes_count"] == 1
        assert case_row["last_activity"]

    @pytest.mark.asyncio
    async def test_delete_note_decrements_counter(self, repo, backend, case_row):
        await repo.create_case_note("c1", CreateCaseNotePayload(content="One"))
        note_id = backend.tables["case_notes"][0]["id"]

        response = await repo.delete_case_note("c1", note_id)

        assert response.status == 204
        assert case_row["notes_count"] == 0

    @pytest.mark.asyncio
    async def test_delete_missing_note(self, repo, case_row):
        with pytest.raises(RecordNotFoundError):
            await repo.delete_case_note("c1", "missing")

        assert case_row["notes_count"] == 0

    @pytest.mark.asyncio
    async def test_update_note_of_other_case(self, repo, backend, case_row):
        backend.seed("case_notes", {"id": "n1", "case_id": "c2", "content": "x"})

        with pytest.raises(RecordNotFoundError):
            await repo.update_case_note("c1", "n1", UpdateCaseNotePayload(content="y"))

    @pytest.mark.asyncio
    async def test_update_note(self, repo, backend, case_row):
        backend.seed("case_notes", {"id": "n1", "case_id": "c1", "content": "x"})

        response = await repo.update_case_note("c1", "n1", UpdateCaseNotePayload(is_important=True))

        assert response.data.is_important is True
        assert response.data.content == "x"

    @pytest.mark.asyncio
    async def test_get_notes_newest_first(self, repo, backend, case_row):
        backend.seed(
            "case_notes",
            {"id": "n1", "case_id": "c1", "content": "old", "created_at": "2024-01-01"},
            {"id": "n2", "case_id": "c1", "content": "new", "created_at": "2024-02-01"},
        )

        response = await repo.get_case_notes("c1")

        assert [n.id for n in response.data] == ["n2", "n1"]

    @pytest.mark.asyncio
    async def test_missing_case_falls_back_to_legacy(self, repo, legacy):
        response = await repo.get_case_notes("old-case")

        assert response.data == {"source": "legacy"}
        legacy.request.assert_awaited_once_with("cases/old-case/notes")

    @pytest.mark.asyncio
    async def test_other_errors_do_not_fall_back(self, repo, backend, legacy, case_row):
        backend.errors["case_notes"] = APIError({"code": "42501", "message": "denied"})

        with pytest.raises(APIError):
            await repo.get_case_notes("c1")

        legacy.request.assert_not_called()

    @pytest.mark.asyncio
    async def test_counter_race_gives_up(self, repo, backend, case_row):
        def concurrent_writer(table, values):
            # Another request bumps the counter before every write lands
            if table == "cases" and "notes_count" in values:
                case_row["notes_count"] += 1

        backend.before_update = concurrent_writer

        with pytest.raises(ConcurrentUpdateError):
            await repo.create_case_note("c1", CreateCaseNotePayload(content="x"))


# =============================================================================
# Documents
# =============================================================================

class TestDocuments:
    @pytest.mark.asyncio
    async def test_upload_link_path(self, repo):
        response = await repo.generate_case_document_upload_link("c1", "application/pdf")

        assert re.match(r"^cases/c1/[0-9a-f-]{36}\.pdf$", response.data.file_key)
        assert "/case-documents/" in response.data.link

    @pytest.mark.asyncio
    async def test_upload_link_failure(self, repo, backend):
        async def refuse(bucket, path):
            raise RuntimeError("bucket missing")

        backend.create_signed_upload_url = refuse

        with pytest.raises(StorageLinkError):
            await repo.generate_case_document_upload_link("c1", "pdf")

    @pytest.mark.asyncio
    async def test_create_document(self, repo, backend, case_row):
        response = await repo.create_case_document("c1", CreateCaseDocumentPayload(
            document_name="ID card",
            file_name="id.png",
            mime_type="image/png",
            file_size=2048,
            file_key="cases/c1/abc.png",
        ))

        document = response.data
        stored = backend.tables["case_documents"][0]
        assert response.status == 201
        assert document.mime_type == "image/png"
        assert document.download_url.endswith("/public/case-documents/cases/c1/abc.png")
        assert document.uploaded_by.id == USER_ID
        assert stored["file_type"] == "image/png"
        assert stored["file_key"] == "cases/c1/abc.png"
        assert case_row["documents_count"] == 1

    @pytest.mark.asyncio
    async def test_download_link(self, repo, backend, case_row):
        backend.seed("case_documents", {"id": "d1", "case_id": "c1", "file_key": "cases/c1/abc.pdf"})

        response = await repo.generate_case_document_download_link("c1", "d1")

        assert response.data.file_key == "cases/c1/abc.pdf"
        assert "token=download-token" in response.data.link

    @pytest.mark.asyncio
    async def test_download_link_without_file(self, repo, backend, case_row):
        backend.seed("case_documents", {"id": "d1", "case_id": "c1"})

        with pytest.raises(StorageLinkError):
            await repo.generate_case_document_download_link("c1", "d1")

    @pytest.mark.asyncio
    async def test_document_of_other_case(self, repo, backend, case_row):
        backend.seed("case_documents", {"id": "d1", "case_id": "c2", "file_key": "k"})

        with pytest.raises(RecordNotFoundError):
            await repo.generate_case_document_download_link("c1", "d1")

    @pytest.mark.asyncio
    async def test_update_document(self, repo, backend, case_row):
        backend.seed("case_documents", {"id": "d1", "case_id": "c1", "document_name": "Old"})

        response = await repo.update_case_document(
            "c1", "d1", UpdateCaseDocumentPayload(document_name="New", is_finalized=True)
        )

        assert response.data.document_name == "New"
        assert response.data.is_finalized is True

    @pytest.mark.asyncio
    async def test_delete_document_removes_file(self, repo, backend, case_row):
        case_row["documents_count"] = 1
        backend.seed("case_documents", {
            "id": "d1",
            "case_id": "c1",
            "file_url": "https://test-project.supabase.co/storage/v1/object/public/case-documents/cases/c1/a.pdf",
        })

        response = await repo.delete_case_document("c1", "d1")

        assert response.status == 204
        assert backend.removed_files == [("case-documents", ["cases/c1/a.pdf"])]
        assert backend.tables["case_documents"] == []
        assert case_row["documents_count"] == 0

    @pytest.mark.asyncio
    async def test_documents_fall_back_when_case_missing(self, repo, legacy):
        await repo.get_case_documents("old-case")

        legacy.request.assert_awaited_once_with("cases/old-case/documents")
