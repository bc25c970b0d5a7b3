# =============================================================================
# tests/test_clients.py - Client Layer Tests
# =============================================================================
# This module contains tests for:
# - TokenStore (memory and JSON file persistence)
# - LegacyApiClient against an httpx MockTransport
# - ApiClient Edge Function calls against an httpx MockTransport
#
# No network access: every HTTP exchange is answered by a local handler.
# =============================================================================

import json

import httpx
import pytest

from app.exceptions import NotAuthenticatedError
from lib.api_client import ApiClient, EdgeFunctionError
from lib.legacy_client import LegacyApiClient, LegacyApiError
from lib.token_store import TokenStore


# =============================================================================
# TokenStore Tests
# =============================================================================

class TestTokenStore:
    def test_memory_round_trip(self, token_store):
        token_store.set_token("abc")
        assert token_store.get_token() == "abc"

        token_store.clear_token()
        assert token_store.get_token() is None

    def test_default_key(self, token_store):
        token_store.set_token("abc")

        assert token_store.get("r_to") == "abc"

    def test_persists_to_file(self, tmp_path):
        path = tmp_path / "tokens.json"

        TokenStore(path=path).set_token("persisted")

        assert json.loads(path.read_text()) == {"r_to": "persisted"}
        assert TokenStore(path=path).get_token() == "persisted"

    def test_unreadable_file_ignored(self, tmp_path):
        path = tmp_path / "tokens.json"
        path.write_text("{not json")

        assert TokenStore(path=path).get_token() is None

    def test_singleton(self):
        assert TokenStore.get_instance() is TokenStore.get_instance()


# =============================================================================
# LegacyApiClient Tests
# =============================================================================

class TestLegacyApiClient:
    @pytest.mark.asyncio
    async def test_request_sends_token_and_returns_body(self, token_store):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["auth"] = request.headers.get("Authorization")
            return httpx.Response(200, json={"count": 1, "data": [{"id": "b1"}]})

        token_store.set_token("caller-token")
        legacy = LegacyApiClient(
            base_url="http://legacy.test/api/v1/",
            token_store=token_store,
            transport=httpx.MockTransport(handler),
        )

        response = await legacy.request(
            "organizations/org-1/beneficiaries", params={"offset": 0, "limit": 20}
        )

        assert response.status == 200
        assert response.data == {"count": 1, "data": [{"id": "b1"}]}
        assert seen["url"] == "http://legacy.test/api/v1/organizations/org-1/beneficiaries?offset=0&limit=20"
        assert seen["auth"] == "Bearer caller-token"

    @pytest.mark.asyncio
    async def test_no_token_no_header(self, token_store):
        def handler(request: httpx.Request) -> httpx.Response:
            assert "Authorization" not in request.headers
            return httpx.Response(204)

        legacy = LegacyApiClient(
            base_url="http://legacy.test",
            token_store=token_store,
            transport=httpx.MockTransport(handler),
        )

        response = await legacy.request("beneficiaries/b1", method="delete")

        assert response.status == 204
        assert response.data is None

    @pytest.mark.asyncio
    async def test_error_status_raises(self, token_store):
        legacy = LegacyApiClient(
            base_url="http://legacy.test",
            token_store=token_store,
            transport=httpx.MockTransport(lambda request: httpx.Response(404, text="missing")),
        )

        with pytest.raises(LegacyApiError) as exc_info:
            await legacy.request("beneficiaries/b1")

        assert exc_info.value.status_code == 404
        assert exc_info.value.code == "LEGACY_API_ERROR"

    @pytest.mark.asyncio
    async def test_transport_failure_raises(self, token_store):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        legacy = LegacyApiClient(
            base_url="http://legacy.test",
            token_store=token_store,
            transport=httpx.MockTransport(handler),
        )

        with pytest.raises(LegacyApiError) as exc_info:
            await legacy.request("health")

        assert exc_info.value.status_code is None
        assert exc_info.value.code == "LEGACY_API_UNREACHABLE"


# =============================================================================
# ApiClient Edge Function Tests
# =============================================================================

class TestEdgeFunctions:
    @pytest.mark.asyncio
    async def test_call_as_caller(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["auth"] = request.headers["Authorization"]
            seen["apikey"] = request.headers["apikey"]
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"ok": True})

        client = ApiClient(
            url="https://test-project.supabase.co",
            key="anon",
            access_token="caller-token",
            http_transport=httpx.MockTransport(handler),
        )

        result = await client.call_edge_function(
            "accept-join-request", method="POST", body={"requestId": "r1"}
        )

        assert result == {"ok": True}
        assert seen["url"] == "https://test-project.supabase.co/functions/v1/accept-join-request"
        assert seen["auth"] == "Bearer caller-token"
        assert seen["apikey"] == "anon"
        assert seen["body"] == {"requestId": "r1"}

    @pytest.mark.asyncio
    async def test_anonymous_uses_anon_key(self, monkeypatch):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["auth"] = request.headers["Authorization"]
            return httpx.Response(200, json={"session": {"access_token": "t"}})

        client = ApiClient(key="anon", http_transport=httpx.MockTransport(handler))

        async def no_token():
            return None

        monkeypatch.setattr(client, "get_access_token", no_token)

        await client.call_edge_function("auth", method="POST", body={}, anonymous=True)

        assert seen["auth"] == "Bearer anon"

    @pytest.mark.asyncio
    async def test_requires_session_unless_anonymous(self, monkeypatch):
        client = ApiClient(key="anon")

        async def no_token():
            return None

        monkeypatch.setattr(client, "get_access_token", no_token)

        with pytest.raises(NotAuthenticatedError):
            await client.call_edge_function("auth")

    @pytest.mark.asyncio
    async def test_error_status_raises(self):
        client = ApiClient(
            access_token="caller-token",
            http_transport=httpx.MockTransport(lambda request: httpx.Response(500, text="boom")),
        )

        with pytest.raises(EdgeFunctionError) as exc_info:
            await client.call_edge_function("auth")

        assert exc_info.value.status_code == 500
