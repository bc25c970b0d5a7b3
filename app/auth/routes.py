# =============================================================================
# app/auth/routes.py - Authentication Routes
# =============================================================================
# API endpoints for authentication-related operations.
#
# Sign in / sign up run against hosted auth with a fresh anonymous client per
# request; the resulting access token is returned to the caller, who sends it
# back as "Authorization: Bearer <token>" on every other endpoint.
# =============================================================================

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from app.auth.dependencies import get_current_user
from app.auth.models import AuthUser, TokenVerification
from app.routers.responses import respond
from core.models.auth import (
    AuthSession,
    SignInRequest,
    SignUpAdminByInviteRequest,
    SignUpByInviteRequest,
    SignUpRequest,
)
from core.repositories.auth import AuthRepository
from core.repositories.password import PasswordRepository
from lib.api_client import ApiClient
from lib.token_store import TokenStore

router = APIRouter()


class TokenResponse(BaseModel):
    """Access token issued by a sign up."""
    access_token: str


class PasswordResetRequest(BaseModel):
    email: str = Field(..., min_length=3)


def _anonymous_auth() -> AuthRepository:
    return AuthRepository(ApiClient(), token_store=TokenStore())


def _caller_auth(user: AuthUser = Depends(get_current_user)) -> AuthRepository:
    store = TokenStore()
    store.set_token(user.access_token)
    return AuthRepository(ApiClient(access_token=user.access_token), token_store=store)


# =============================================================================
# Sign in / sign up
# =============================================================================

@router.post("/sign-in", response_model=AuthSession)
async def sign_in(request: SignInRequest) -> AuthSession:
    """Sign in with email and password."""
    return await _anonymous_auth().sign_in(request)


@router.post("/sign-up", response_model=TokenResponse, status_code=201)
async def sign_up(request: SignUpRequest) -> TokenResponse:
    token = await _anonymous_auth().sign_up(request)
    return TokenResponse(access_token=token)


@router.post("/org-sign-up", response_model=TokenResponse, status_code=201)
async def org_sign_up(request: SignUpByInviteRequest) -> TokenResponse:
    """Sign up through an organization invite."""
    token = await _anonymous_auth().org_sign_up(request)
    return TokenResponse(access_token=token)


@router.post("/admin-sign-up", response_model=TokenResponse, status_code=201)
async def admin_sign_up(request: SignUpAdminByInviteRequest) -> TokenResponse:
    """Sign up as platform staff through an admin invite."""
    token = await _anonymous_auth().admin_sign_up(request)
    return TokenResponse(access_token=token)


@router.post("/password-reset", status_code=202)
async def request_password_reset(request: PasswordResetRequest) -> dict:
    """Email a password recovery link."""
    await PasswordRepository(ApiClient()).request_password_change(request.email)
    return {"message": "If the address is registered, a recovery email was sent"}


# =============================================================================
# Current user
# =============================================================================

@router.get("/me")
async def get_current_user_info(repo: AuthRepository = Depends(_caller_auth)):
    """
    Get the current authenticated user's profile.

    Built from the auth user and its metadata.

    Raises:
        401: If not authenticated
    """
    return respond(await repo.get_me())


@router.get("/verify", response_model=TokenVerification)
async def verify_token(user: AuthUser = Depends(get_current_user)) -> TokenVerification:
    """
    Verify that the current token is valid.

    Useful for checking if a stored token is still valid.

    Raises:
        401: If token is invalid or expired
    """
    return TokenVerification(valid=True, user_id=str(user.id), email=user.email)
