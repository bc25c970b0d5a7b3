# =============================================================================
# core/repositories/base.py - Repository Base Class
# =============================================================================
# Shared plumbing for the per-entity repositories:
# - access to the hosted backend (ApiClient) and legacy API (LegacyApiClient)
# - single-row fetches that map "no rows" to RecordNotFoundError
# - current user / current organization lookups
# - paginated list queries returning Page(count, data)
# - compare-and-set updates for denormalized counters
# =============================================================================

import logging
from typing import Any, Callable

from postgrest.exceptions import APIError

from app.config import settings
from app.exceptions import (
    ConcurrentUpdateError,
    NotAuthenticatedError,
    RecordNotFoundError,
    StorageLinkError,
    UserOrganizationNotFoundError,
)
from core.models.case import DocumentLink
from core.models.common import Page
from lib.api_client import ApiClient
from lib.legacy_client import LegacyApiClient
from lib.utils import page_bounds, search_filter

logger = logging.getLogger(__name__)

# PostgREST code returned by .single() when no row matches
NO_ROWS = "PGRST116"

# Select lists shared by several repositories
BENEFICIARY_COLUMNS = (
    "*, current_housing:current_housing_id(*), current_room:current_room_id(*)"
)
ALLOCATION_COLUMNS = (
    "*, beneficiary:beneficiary_id(id, full_name, image_url), "
    "housing:housing_id(*), room:room_id(*), "
    "old_housing:old_housing_id(*), old_room:old_room_id(*)"
)


class BaseRepository:
    """
    Base class for repositories.

    Repositories are cheap to construct: the API builds one per request
    around a request-scoped ApiClient. Without arguments the process-wide
    clients are used.
    """

    def __init__(
        self,
        client: ApiClient | None = None,
        legacy: LegacyApiClient | None = None,
    ):
        self.client = client or ApiClient.get_instance()
        self._legacy = legacy

    @property
    def legacy(self) -> LegacyApiClient:
        if self._legacy is None:
            self._legacy = LegacyApiClient.get_instance()
        return self._legacy

    # -------------------------------------------------------------------------
    # Single rows
    # -------------------------------------------------------------------------

    async def _fetch_one(
        self,
        table: str,
        record_id: str,
        entity: str,
        columns: str = "*",
    ) -> dict[str, Any]:
        """
        Fetch one row by id.

        Raises:
            RecordNotFoundError: If no visible row has this id
        """
        query = await self.client.query(table)
        try:
            response = await query.select(columns).eq("id", record_id).single().execute()
        except APIError as e:
            if e.code == NO_ROWS:
                raise RecordNotFoundError(entity, record_id) from e
            raise

        if not response.data:
            raise RecordNotFoundError(entity, record_id)
        return response.data

    async def _update_one(
        self,
        table: str,
        record_id: str,
        data: dict[str, Any],
        entity: str,
    ) -> dict[str, Any]:
        """
        Update one row by id and return it.

        Raises:
            RecordNotFoundError: If the update matched no row
        """
        query = await self.client.query(table)
        response = await query.update(data).eq("id", record_id).execute()
        if not response.data:
            raise RecordNotFoundError(entity, record_id)
        return response.data[0]

    async def _insert_one(self, table: str, data: dict[str, Any]) -> dict[str, Any]:
        query = await self.client.query(table)
        response = await query.insert(data).execute()
        if not response.data:
            raise Exception(f"Insert into {table} returned no data")
        return response.data[0]

    async def _delete_one(self, table: str, record_id: str) -> None:
        query = await self.client.query(table)
        await query.delete().eq("id", record_id).execute()

    # -------------------------------------------------------------------------
    # Current user
    # -------------------------------------------------------------------------

    async def _current_user_id(self) -> str:
        """
        ID of the signed-in user.

        Raises:
            NotAuthenticatedError: If nobody is signed in
        """
        user = await self.client.get_user()
        if not user:
            raise NotAuthenticatedError()
        return str(user.id)

    async def _current_organization_id(self) -> str:
        """
        Organization of the signed-in user (from the users table).

        Raises:
            NotAuthenticatedError: If nobody is signed in
            UserOrganizationNotFoundError: If the user has no organization
        """
        user_id = await self._current_user_id()
        query = await self.client.query("users")
        try:
            response = await query.select("organization_id").eq("id", user_id).single().execute()
        except APIError as e:
            if e.code == NO_ROWS:
                raise UserOrganizationNotFoundError(user_id) from e
            raise

        organization_id = (response.data or {}).get("organization_id")
        if not organization_id:
            raise UserOrganizationNotFoundError(user_id)
        return organization_id

    # -------------------------------------------------------------------------
    # Lists
    # -------------------------------------------------------------------------

    async def _page(
        self,
        table: str,
        transform: Callable[[Any], Any],
        offset: int,
        limit: int,
        columns: str = "*",
        filters: dict[str, Any] | None = None,
        search: str = "",
        search_columns: list[str] | None = None,
        order_by: str = "created_at",
        descending: bool = True,
    ) -> Page:
        """
        Run a paginated list query.

        `count` is the exact number of rows matching the filters and search,
        independent of offset/limit.
        """
        query = await self.client.query(table)
        builder = query.select(columns, count="exact")

        for column, value in (filters or {}).items():
            builder = builder.eq(column, value)

        if search and search_columns:
            condition = search_filter(search_columns, search)
            if condition:
                builder = builder.or_(condition)

        start, end = page_bounds(offset, limit)
        builder = builder.order(order_by, desc=descending).range(start, end)

        response = await builder.execute()
        rows = response.data or []
        return Page(count=response.count or 0, data=[transform(row) for row in rows])

    async def _rows_for(self, table: str, columns: str, **filters: Any) -> list[dict[str, Any]]:
        """All rows matching equality filters (used by stats)."""
        query = await self.client.query(table)
        builder = query.select(columns)
        for column, value in filters.items():
            builder = builder.eq(column, value)
        response = await builder.execute()
        return response.data or []

    # -------------------------------------------------------------------------
    # Counters
    # -------------------------------------------------------------------------

    async def _compare_and_set(
        self,
        table: str,
        record_id: str,
        column: str,
        compute: Callable[[int], int],
        entity: str,
    ) -> int:
        """
        Change an integer counter without losing concurrent updates.

        Reads the counter, computes the new value and writes it only if the
        counter still holds the value that was read. Retries up to
        COUNTER_UPDATE_MAX_RETRIES times.

        Args:
            compute: Maps the current value to the new one; may raise to
                reject the change (e.g. insufficient stock)

        Returns:
            The value written

        Raises:
            RecordNotFoundError: If the row doesn't exist
            ConcurrentUpdateError: If every attempt lost the race
        """
        attempts = settings.COUNTER_UPDATE_MAX_RETRIES

        for attempt in range(1, attempts + 1):
            row = await self._fetch_one(table, record_id, entity, columns=f"id, {column}")
            raw = row.get(column)
            current = int(raw or 0)
            new_value = compute(current)

            query = await self.client.query(table)
            builder = query.update({column: new_value}).eq("id", record_id)
            builder = builder.is_(column, "null") if raw is None else builder.eq(column, raw)
            response = await builder.execute()

            if response.data:
                return new_value

            logger.warning(
                f"{entity} {record_id}.{column} changed during update "
                f"(attempt {attempt}/{attempts}), retrying"
            )

        raise ConcurrentUpdateError(entity, record_id, attempts)

    # -------------------------------------------------------------------------
    # Storage
    # -------------------------------------------------------------------------

    async def _upload_link(self, bucket: str, path: str) -> DocumentLink:
        """
        Signed upload link for `path` in `bucket`.

        Raises:
            StorageLinkError: If storage refuses to sign the path
        """
        try:
            signed = await self.client.create_signed_upload_url(bucket, path)
        except Exception as e:
            logger.error(f"Failed to sign upload for {bucket}/{path}: {e}")
            raise StorageLinkError(path, str(e)) from e

        if not signed.get("signed_url"):
            raise StorageLinkError(path, "storage returned no signed URL")

        return DocumentLink(
            link=signed["signed_url"],
            file_key=signed.get("path") or path,
            token=signed.get("token") or "",
        )
