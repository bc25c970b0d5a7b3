# =============================================================================
# lib/api_client.py - Hosted Backend Client Wrapper
# =============================================================================
# This module wraps the async Supabase client behind the small surface the
# repositories need:
# - query(table) / rpc(fn, params) for PostgREST tables and procedures
# - session/user lookup and the password auth flows
# - object storage (uploads, public and signed URLs)
# - authenticated Edge Function calls
#
# A process-wide instance (anon key) is available via get_instance(). The API
# creates one client per request with the caller's access token so Row Level
# Security applies as that user.
#
# Usage:
#   from lib.api_client import ApiClient
#   client = ApiClient.get_instance()
#   builder = await client.query("beneficiaries")
#   response = await builder.select("*").eq("id", beneficiary_id).execute()
# =============================================================================

from __future__ import annotations

import logging
from typing import Any

import httpx
from supabase import AsyncClient, acreate_client

from app.config import settings
from app.exceptions import NotAuthenticatedError
from lib.fallback import status_code_of
from lib.utils import ApplicationError

logger = logging.getLogger(__name__)


class ApiClientError(ApplicationError):
    """
    Error during hosted backend operations.

    Carries an HTTP-like status_code when one could be derived from the
    underlying error.
    """

    def __init__(
        self,
        message: str,
        code: str = "SUPABASE_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
        status_code: int | None = None,
    ):
        super().__init__(message=message, code=code, suggestion=suggestion, details=details)
        self.status_code = status_code


class EdgeFunctionError(ApiClientError):
    """Non-2xx response from an Edge Function."""

    def __init__(self, function_name: str, status_code: int | None, body: Any = None):
        super().__init__(
            message=f"Edge function '{function_name}' failed with status {status_code}",
            code="EDGE_FUNCTION_FAILED",
            suggestion="Check the function logs in the Supabase dashboard",
            details={"function": function_name, "body": body},
            status_code=status_code,
        )


class ApiClient:
    """
    Async wrapper around the Supabase client.

    Example:
        # Request-scoped client acting as the signed-in user
        client = ApiClient(access_token=token)
        user = await client.get_user()

        # Process-wide anon client
        client = ApiClient.get_instance()
        await client.sign_in("ana@relif.org", "secret")
    """

    _instance: ApiClient | None = None

    def __init__(
        self,
        url: str | None = None,
        key: str | None = None,
        access_token: str | None = None,
        supabase: AsyncClient | None = None,
        http_transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.url = url or settings.SUPABASE_URL
        self.key = key or settings.SUPABASE_ANON_KEY
        self.access_token = access_token
        self._supabase = supabase
        self._http_transport = http_transport

    @classmethod
    def get_instance(cls) -> ApiClient:
        """Get or create the process-wide client (anon key, no caller token)."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        cls._instance = None

    async def get_supabase(self) -> AsyncClient:
        """
        Get or lazily create the underlying Supabase client.

        Raises:
            ApiClientError: If client creation fails
        """
        if self._supabase is None:
            try:
                self._supabase = await acreate_client(self.url, self.key)
            except Exception as e:
                raise ApiClientError(
                    message=f"Failed to create Supabase client: {e}",
                    code="CLIENT_INIT_FAILED",
                    suggestion="Check SUPABASE_URL and SUPABASE_ANON_KEY in your .env file",
                ) from e
            if self.access_token:
                self._supabase.postgrest.auth(self.access_token)
                self._supabase.options.headers["Authorization"] = f"Bearer {self.access_token}"
            logger.info("Supabase client initialized successfully")
        return self._supabase

    # -------------------------------------------------------------------------
    # Database
    # -------------------------------------------------------------------------

    async def query(self, table: str):
        """Return a PostgREST request builder scoped to `table`."""
        supabase = await self.get_supabase()
        return supabase.table(table)

    async def rpc(self, function: str, params: dict[str, Any] | None = None) -> Any:
        """
        Call a stored procedure and return its result data.

        Backend errors propagate unchanged so callers can map their codes.
        """
        supabase = await self.get_supabase()
        response = await supabase.rpc(function, params or {}).execute()
        return response.data

    # -------------------------------------------------------------------------
    # Auth
    # -------------------------------------------------------------------------

    async def get_session(self):
        """
        Current auth session, or None when nobody is signed in.

        Raises:
            NotAuthenticatedError: If the backend fails to answer
        """
        supabase = await self.get_supabase()
        try:
            return await supabase.auth.get_session()
        except Exception as e:
            logger.error(f"Failed to read auth session: {e}")
            raise NotAuthenticatedError(f"Could not read auth session: {e}") from e

    async def get_user(self):
        """
        Signed-in user (from the access token when one was given), or None.

        Raises:
            NotAuthenticatedError: If the backend rejects the lookup
        """
        supabase = await self.get_supabase()
        try:
            if self.access_token:
                response = await supabase.auth.get_user(self.access_token)
            else:
                response = await supabase.auth.get_user()
        except Exception as e:
            logger.error(f"Failed to resolve auth user: {e}")
            raise NotAuthenticatedError(f"Could not resolve user: {e}") from e
        return response.user if response else None

    async def get_access_token(self) -> str | None:
        """Caller's token if given, else the active session's token."""
        if self.access_token:
            return self.access_token
        session = await self.get_session()
        return session.access_token if session else None

    async def sign_in(self, email: str, password: str):
        supabase = await self.get_supabase()
        try:
            return await supabase.auth.sign_in_with_password({"email": email, "password": password})
        except Exception as e:
            raise self._auth_error("sign in", e) from e

    async def sign_up(self, email: str, password: str, metadata: dict[str, Any] | None = None):
        supabase = await self.get_supabase()
        try:
            return await supabase.auth.sign_up({
                "email": email,
                "password": password,
                "options": {"data": metadata or {}},
            })
        except Exception as e:
            raise self._auth_error("sign up", e) from e

    async def sign_out(self) -> None:
        supabase = await self.get_supabase()
        try:
            await supabase.auth.sign_out()
        except Exception as e:
            raise self._auth_error("sign out", e) from e

    async def reset_password(self, email: str) -> None:
        """Send a password recovery email that redirects to the front end."""
        supabase = await self.get_supabase()
        try:
            await supabase.auth.reset_password_for_email(
                email, {"redirect_to": settings.password_recovery_url}
            )
        except Exception as e:
            raise self._auth_error("request password reset", e) from e

    async def update_password(self, password: str):
        supabase = await self.get_supabase()
        try:
            return await supabase.auth.update_user({"password": password})
        except Exception as e:
            raise self._auth_error("update password", e) from e

    @staticmethod
    def _auth_error(action: str, error: Exception) -> ApiClientError:
        logger.error(f"Failed to {action}: {error}")
        return ApiClientError(
            message=f"Failed to {action}: {error}",
            code="AUTH_FAILED",
            suggestion="Check the credentials and that the auth service is reachable",
            status_code=status_code_of(error),
        )

    # -------------------------------------------------------------------------
    # Storage
    # -------------------------------------------------------------------------

    async def upload_file(
        self,
        bucket: str,
        path: str,
        content: bytes,
        content_type: str = "application/octet-stream",
    ) -> Any:
        supabase = await self.get_supabase()
        return await supabase.storage.from_(bucket).upload(
            path, content, {"content-type": content_type}
        )

    async def get_public_url(self, bucket: str, path: str) -> str:
        supabase = await self.get_supabase()
        return await supabase.storage.from_(bucket).get_public_url(path)

    async def create_signed_upload_url(self, bucket: str, path: str) -> dict[str, str]:
        """
        Signed URL the client can PUT the file to.

        Returns:
            {"signed_url": ..., "token": ..., "path": ...}
        """
        supabase = await self.get_supabase()
        result = await supabase.storage.from_(bucket).create_signed_upload_url(path)
        return {
            "signed_url": result.get("signed_url") or result.get("signedUrl") or "",
            "token": result.get("token") or "",
            "path": result.get("path") or path,
        }

    async def create_signed_url(self, bucket: str, path: str, expires_in: int | None = None) -> str:
        """Time-limited download URL for a private object."""
        supabase = await self.get_supabase()
        result = await supabase.storage.from_(bucket).create_signed_url(
            path, expires_in or settings.SIGNED_URL_EXPIRES_IN
        )
        return result.get("signedURL") or result.get("signedUrl") or result.get("signed_url") or ""

    async def remove_files(self, bucket: str, paths: list[str]) -> Any:
        supabase = await self.get_supabase()
        return await supabase.storage.from_(bucket).remove(paths)

    async def list_buckets(self) -> list[Any]:
        supabase = await self.get_supabase()
        return await supabase.storage.list_buckets()

    # -------------------------------------------------------------------------
    # Edge Functions
    # -------------------------------------------------------------------------

    async def call_edge_function(
        self,
        name: str,
        method: str = "GET",
        body: Any = None,
        headers: dict[str, str] | None = None,
        anonymous: bool = False,
    ) -> Any:
        """
        Call an Edge Function as the signed-in user.

        With anonymous=True a missing session is allowed and the anon key
        is sent as the bearer token (sign-up flows).

        Returns:
            Decoded JSON body (None when the body is empty)

        Raises:
            NotAuthenticatedError: If there is no access token and the call
                is not anonymous
            EdgeFunctionError: On any non-2xx response or transport failure
        """
        token = await self.get_access_token()
        if not token:
            if not anonymous:
                raise NotAuthenticatedError()
            token = self.key

        request_headers = {
            "Authorization": f"Bearer {token}",
            "apikey": self.key,
            "Content-Type": "application/json",
            **(headers or {}),
        }
        url = f"{self.url.rstrip('/')}/functions/v1/{name}"

        try:
            async with httpx.AsyncClient(
                timeout=settings.EDGE_FUNCTION_TIMEOUT,
                transport=self._http_transport,
            ) as client:
                response = await client.request(
                    method.upper(), url, json=body, headers=request_headers
                )
        except httpx.HTTPError as e:
            logger.error(f"Edge function {name} unreachable: {e}")
            raise EdgeFunctionError(name, None, str(e)) from e

        if not response.is_success:
            logger.error(f"Edge function {name} returned {response.status_code}")
            raise EdgeFunctionError(name, response.status_code, response.text[:500])

        logger.debug(f"Edge function {name} returned {response.status_code}")
        return response.json() if response.content else None
