# =============================================================================
# tests/fakes.py - In-Memory Hosted Backend
# =============================================================================
# A stand-in for lib.api_client.ApiClient backed by Python dicts, so
# repositories can be exercised without a Supabase project.
#
# Supported query surface (what the repositories use):
#   select(columns, count="exact"), insert(row | rows), update(values), delete()
#   eq, neq, is_, in_, ilike, or_ ("col.eq.x,col.ilike.%y%")
#   order(col, desc=...), range(start, end), limit(n), single()
#
# Embedded relations in select lists are ignored: rows come back whole.
#
# Usage:
#   backend = FakeApiClient()
#   backend.seed("beneficiaries", {"id": "b1", "full_name": "Ana"})
#   repo = BeneficiaryRepository(backend, legacy)
# =============================================================================

import copy
import re
from collections import defaultdict
from datetime import datetime, timezone
from types import SimpleNamespace
from typing import Any, Callable
from uuid import uuid4

from postgrest.exceptions import APIError

STORAGE_BASE = "https://test-project.supabase.co/storage/v1/object"


def _same(left: Any, right: Any) -> bool:
    if left == right:
        return True
    if left is None or right is None:
        return False
    return str(left) == str(right)


def _like(value: Any, pattern: str) -> bool:
    if value is None:
        return False
    regex = ".*".join(re.escape(part) for part in pattern.split("%"))
    return re.fullmatch(regex, str(value), flags=re.IGNORECASE) is not None


class FakeResponse:
    def __init__(self, data: Any, count: int | None = None):
        self.data = data
        self.count = count


class FakeQuery:
    """One PostgREST request against a FakeApiClient table."""

    def __init__(self, backend: "FakeApiClient", table: str):
        self.backend = backend
        self.table = table
        self.action = "select"
        self.payload: Any = None
        self.count_mode: str | None = None
        self.filters: list[Callable[[dict[str, Any]], bool]] = []
        self.ordering: list[tuple[str, bool]] = []
        self.bounds: tuple[int, int] | None = None
        self.max_rows: int | None = None
        self.single_row = False

    # --- actions -------------------------------------------------------------

    def select(self, columns: str = "*", count: str | None = None) -> "FakeQuery":
        self.action = "select"
        self.count_mode = count
        return self

    def insert(self, rows: Any) -> "FakeQuery":
        self.action = "insert"
        self.payload = rows
        return self

    def update(self, values: dict[str, Any]) -> "FakeQuery":
        self.action = "update"
        self.payload = values
        return self

    def delete(self) -> "FakeQuery":
        self.action = "delete"
        return self

    # --- filters -------------------------------------------------------------

    def eq(self, column: str, value: Any) -> "FakeQuery":
        self.filters.append(lambda row: _same(row.get(column), value))
        return self

    def neq(self, column: str, value: Any) -> "FakeQuery":
        self.filters.append(lambda row: not _same(row.get(column), value))
        return self

    def is_(self, column: str, value: Any) -> "FakeQuery":
        if value in (None, "null"):
            self.filters.append(lambda row: row.get(column) is None)
        else:
            self.filters.append(lambda row: _same(row.get(column), value))
        return self

    def in_(self, column: str, values: list[Any]) -> "FakeQuery":
        self.filters.append(lambda row: any(_same(row.get(column), v) for v in values))
        return self

    def ilike(self, column: str, pattern: str) -> "FakeQuery":
        self.filters.append(lambda row: _like(row.get(column), pattern))
        return self

    def or_(self, expression: str) -> "FakeQuery":
        conditions = []
        for part in expression.split(","):
            column, op, value = part.split(".", 2)
            conditions.append((column, op, value))

        def matches(row: dict[str, Any]) -> bool:
            for column, op, value in conditions:
                if op == "eq" and _same(row.get(column), value):
                    return True
                if op == "ilike" and _like(row.get(column), value):
                    return True
            return False

        self.filters.append(matches)
        return self

    # --- shaping -------------------------------------------------------------

    def order(self, column: str, desc: bool = False) -> "FakeQuery":
        self.ordering.append((column, desc))
        return self

    def range(self, start: int, end: int) -> "FakeQuery":
        self.bounds = (start, end)
        return self

    def limit(self, size: int) -> "FakeQuery":
        self.max_rows = size
        return self

    def single(self) -> "FakeQuery":
        self.single_row = True
        return self

    # --- execution -----------------------------------------------------------

    def _matching(self) -> list[dict[str, Any]]:
        return [row for row in self.backend.tables[self.table] if all(f(row) for f in self.filters)]

    async def execute(self) -> FakeResponse:
        self.backend.executed.append((self.table, self.action))
        error = self.backend.errors.get(self.table) or self.backend.action_errors.get(
            (self.table, self.action)
        )
        if error is not None:
            raise error

        if self.action == "insert":
            return FakeResponse(self._insert())
        if self.action == "update":
            if self.backend.before_update:
                self.backend.before_update(self.table, self.payload)
            rows = self._matching()
            for row in rows:
                row.update(copy.deepcopy(self.payload))
            return FakeResponse(copy.deepcopy(rows))
        if self.action == "delete":
            rows = self._matching()
            self.backend.tables[self.table] = [
                row for row in self.backend.tables[self.table] if row not in rows
            ]
            return FakeResponse(copy.deepcopy(rows))
        return self._select()

    def _insert(self) -> list[dict[str, Any]]:
        rows = self.payload if isinstance(self.payload, list) else [self.payload]
        created = []
        for row in rows:
            stored = {"id": str(uuid4()), "created_at": datetime.now(timezone.utc).isoformat()}
            stored.update(copy.deepcopy(row))
            self.backend.tables[self.table].append(stored)
            created.append(copy.deepcopy(stored))
        return created

    def _select(self) -> FakeResponse:
        rows = self._matching()
        for column, desc in reversed(self.ordering):
            rows = sorted(
                rows,
                key=lambda row: (row.get(column) is None, str(row.get(column) or "")),
                reverse=desc,
            )

        count = len(rows) if self.count_mode == "exact" else None
        if self.bounds is not None:
            start, end = self.bounds
            rows = rows[start:end + 1]
        if self.max_rows is not None:
            rows = rows[:self.max_rows]

        if self.single_row:
            if len(rows) != 1:
                raise APIError({
                    "code": "PGRST116",
                    "message": "JSON object requested, multiple (or no) rows returned",
                    "details": f"The result contains {len(rows)} rows",
                    "hint": None,
                })
            return FakeResponse(copy.deepcopy(rows[0]), count)

        return FakeResponse(copy.deepcopy(rows), count)


class FakeApiClient:
    """
    Duck-typed ApiClient keeping tables, storage and auth in memory.

    Attributes:
        tables: table name -> list of row dicts
        errors: table name -> exception raised by every request to it
        action_errors: (table, action) -> exception raised by that action only
        before_update: hook called with (table, values) before updates apply
        rpc_handlers: procedure name -> callable(params) returning data
        edge_responses: Edge Function name -> JSON body to return
    """

    def __init__(self, user_id: str | None = "user-1", email: str = "ana@relif.org"):
        self.url = "https://test-project.supabase.co"
        self.key = "test-anon-key"
        self.access_token = "test-token" if user_id else None
        self.tables: dict[str, list[dict[str, Any]]] = defaultdict(list)
        self.errors: dict[str, Exception] = {}
        self.action_errors: dict[tuple[str, str], Exception] = {}
        self.before_update: Callable[[str, dict[str, Any]], None] | None = None
        self.executed: list[tuple[str, str]] = []
        self.rpc_handlers: dict[str, Callable[[dict[str, Any]], Any]] = {}
        self.rpc_calls: list[tuple[str, dict[str, Any]]] = []
        self.edge_responses: dict[str, Any] = {}
        self.edge_calls: list[dict[str, Any]] = []
        self.removed_files: list[tuple[str, list[str]]] = []
        self.auth_calls: list[tuple[str, Any]] = []
        self.buckets = ["profile-images", "case-documents"]
        self.user = (
            SimpleNamespace(
                id=user_id,
                email=email,
                user_metadata={"first_name": "Ana", "last_name": "Silva"},
                created_at="2024-01-01T00:00:00+00:00",
                updated_at="2024-01-01T00:00:00+00:00",
            )
            if user_id
            else None
        )

    def seed(self, table: str, *rows: dict[str, Any]) -> None:
        for row in rows:
            self.tables[table].append(copy.deepcopy(row))

    def row(self, table: str, row_id: str) -> dict[str, Any] | None:
        for row in self.tables[table]:
            if _same(row.get("id"), row_id):
                return row
        return None

    # --- database ------------------------------------------------------------

    async def query(self, table: str) -> FakeQuery:
        return FakeQuery(self, table)

    async def rpc(self, function: str, params: dict[str, Any] | None = None) -> Any:
        params = params or {}
        self.rpc_calls.append((function, params))
        handler = self.rpc_handlers.get(function)
        if handler is None:
            raise APIError({"code": "PGRST202", "message": f"function {function} not found"})
        return handler(params)

    # --- auth ----------------------------------------------------------------

    async def get_session(self):
        if not self.access_token:
            return None
        return SimpleNamespace(access_token=self.access_token)

    async def get_user(self):
        return self.user

    async def get_access_token(self) -> str | None:
        return self.access_token

    async def sign_in(self, email: str, password: str):
        self.auth_calls.append(("sign_in", email))
        session = SimpleNamespace(access_token="signed-in-token", refresh_token="refresh", expires_in=3600)
        return SimpleNamespace(user=SimpleNamespace(id="user-1", email=email), session=session)

    async def sign_up(self, email: str, password: str, metadata: dict[str, Any] | None = None):
        self.auth_calls.append(("sign_up", metadata))
        session = SimpleNamespace(access_token="signed-up-token")
        return SimpleNamespace(user=SimpleNamespace(id="user-2", email=email), session=session)

    async def sign_out(self) -> None:
        self.auth_calls.append(("sign_out", None))

    async def reset_password(self, email: str) -> None:
        self.auth_calls.append(("reset_password", email))

    async def update_password(self, password: str):
        self.auth_calls.append(("update_password", password))

    # --- storage -------------------------------------------------------------

    async def create_signed_upload_url(self, bucket: str, path: str) -> dict[str, str]:
        return {
            "signed_url": f"{STORAGE_BASE}/upload/sign/{bucket}/{path}?token=upload-token",
            "token": "upload-token",
            "path": path,
        }

    async def create_signed_url(self, bucket: str, path: str, expires_in: int | None = None) -> str:
        return f"{STORAGE_BASE}/sign/{bucket}/{path}?token=download-token"

    async def get_public_url(self, bucket: str, path: str) -> str:
        return f"{STORAGE_BASE}/public/{bucket}/{path}"

    async def remove_files(self, bucket: str, paths: list[str]) -> Any:
        self.removed_files.append((bucket, paths))
        return [{"name": path} for path in paths]

    async def list_buckets(self) -> list[Any]:
        return [SimpleNamespace(id=name, name=name) for name in self.buckets]

    # --- edge functions ------------------------------------------------------

    async def call_edge_function(
        self,
        name: str,
        method: str = "GET",
        body: Any = None,
        headers: dict[str, str] | None = None,
        anonymous: bool = False,
    ) -> Any:
        self.edge_calls.append({"name": name, "method": method, "body": body, "anonymous": anonymous})
        return copy.deepcopy(self.edge_responses.get(name))
