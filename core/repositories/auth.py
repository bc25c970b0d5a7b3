# =============================================================================
# core/repositories/auth.py - Auth Repository
# =============================================================================
# Sign in / sign up / sign out against hosted auth (no legacy fallback).
#
# The access token of a successful sign in or sign up is kept in the token
# store under TOKEN_STORAGE_KEY so the legacy client can authenticate with it.
# Invite-based sign ups go through the `auth` Edge Function.
# =============================================================================

import logging
from typing import Any

from app.exceptions import AuthenticationFailedError, NotAuthenticatedError
from core.models.auth import (
    AuthSession,
    SignInRequest,
    SignUpAdminByInviteRequest,
    SignUpByInviteRequest,
    SignUpRequest,
)
from core.models.common import ApiResponse
from core.models.user import UserSchema
from core.repositories.base import BaseRepository
from core.transforms import transform_auth_user
from lib.api_client import ApiClient
from lib.legacy_client import LegacyApiClient
from lib.token_store import TokenStore

logger = logging.getLogger(__name__)

AUTH_FUNCTION = "auth"
METADATA_FIELDS = {"first_name", "last_name", "phones", "role", "preferences"}


def _session_token(session: Any) -> str | None:
    """access_token of a GoTrue Session object or a session dict."""
    if session is None:
        return None
    if isinstance(session, dict):
        return session.get("access_token")
    return getattr(session, "access_token", None)


class AuthRepository(BaseRepository):
    """Authentication flows and the signed-in user's profile."""

    def __init__(
        self,
        client: ApiClient | None = None,
        legacy: LegacyApiClient | None = None,
        token_store: TokenStore | None = None,
    ):
        super().__init__(client, legacy)
        self.token_store = token_store or TokenStore.get_instance()

    async def sign_in(self, data: SignInRequest) -> AuthSession:
        """
        Sign in with email and password and remember the access token.

        Raises:
            ApiClientError: If hosted auth rejects the credentials
            AuthenticationFailedError: If no user or session came back
        """
        response = await self.client.sign_in(data.email, data.password)
        user = getattr(response, "user", None)
        session = getattr(response, "session", None)

        if not user or not session:
            raise AuthenticationFailedError("Authentication failed - no user or session received")

        self.token_store.set_token(session.access_token)
        logger.info(f"User signed in: {user.id}")

        return AuthSession(
            access_token=session.access_token,
            refresh_token=session.refresh_token or "",
            expires_in=session.expires_in or 0,
            user_id=str(user.id),
            email=user.email or "",
        )

    async def sign_out(self) -> None:
        await self.client.sign_out()
        self.token_store.clear_token()
        logger.info("User signed out")

    async def sign_up(self, data: SignUpRequest) -> str:
        """
        Self-service sign up.

        Returns:
            The new session's access token

        Raises:
            AuthenticationFailedError: If sign up did not open a session
                (e.g. email confirmation is required)
        """
        metadata = data.model_dump(mode="json", include=METADATA_FIELDS)
        response = await self.client.sign_up(data.email, data.password, metadata)

        token = _session_token(getattr(response, "session", None))
        if not token:
            raise AuthenticationFailedError("Sign up failed - no session token received")

        self.token_store.set_token(token)
        logger.info(f"User signed up: {data.email}")
        return token

    async def org_sign_up(self, data: SignUpByInviteRequest) -> str:
        """Sign up through an organization invite."""
        return await self._sign_up_by_invite("org-sign-up", data.model_dump(mode="json"))

    async def admin_sign_up(self, data: SignUpAdminByInviteRequest) -> str:
        """Sign up as platform staff through an admin invite."""
        return await self._sign_up_by_invite("admin-sign-up", data.model_dump(mode="json"))

    async def _sign_up_by_invite(self, action: str, payload: dict[str, Any]) -> str:
        result = await self.client.call_edge_function(
            AUTH_FUNCTION,
            method="POST",
            body={"action": action, **payload},
            anonymous=True,
        )

        token = _session_token((result or {}).get("session"))
        if not token:
            raise AuthenticationFailedError(f"{action} failed - no session token received")

        self.token_store.set_token(token)
        logger.info(f"{action} completed for {payload.get('email')}")
        return token

    async def get_me(self) -> ApiResponse[UserSchema]:
        """
        The signed-in user, built from the auth user and its metadata.

        Raises:
            NotAuthenticatedError: If nobody is signed in
        """
        user = await self.client.get_user()
        if not user:
            raise NotAuthenticatedError("No user found")
        return ApiResponse(transform_auth_user(user))
