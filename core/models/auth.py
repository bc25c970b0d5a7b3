# =============================================================================
# core/models/auth.py - Sign-in / Sign-up Payloads
# =============================================================================

from typing import Any

from pydantic import BaseModel, Field


class SignInRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=320)
    password: str = Field(..., min_length=1)


class SignUpRequest(BaseModel):
    """
    Self-service sign up.

    Names, phones, role and preferences are saved as user metadata.
    """

    email: str = Field(..., min_length=3, max_length=320)
    password: str = Field(..., min_length=6)
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    phones: list[str] = Field(default_factory=list)
    role: str = ""
    preferences: dict[str, Any] = Field(default_factory=dict)


class SignUpByInviteRequest(SignUpRequest):
    """Sign up through an organization invite (handled by the auth edge function)."""

    code: str = Field(..., min_length=1, description="Invite code from the email")


class SignUpAdminByInviteRequest(SignUpRequest):
    """Sign up as platform staff through an admin invite."""

    code: str = Field(..., min_length=1, description="Invite code from the email")


class AuthSession(BaseModel):
    """Tokens returned by a successful sign in."""

    access_token: str
    refresh_token: str = ""
    expires_in: int = 0
    user_id: str = ""
    email: str = ""
