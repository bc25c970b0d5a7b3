# =============================================================================
# app/auth/models.py - Authentication Models
# =============================================================================
# Pydantic models for the bearer token presented to the API.
# =============================================================================

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class AuthUser(BaseModel):
    """
    Authenticated caller extracted from a Supabase JWT.

    The raw token is kept so the request-scoped backend client can act as
    this user (Row Level Security applies to every query).
    """
    model_config = ConfigDict(frozen=True)

    id: UUID
    email: Optional[str] = None
    role: Optional[str] = None
    access_token: str


class TokenVerification(BaseModel):
    """Response of GET /auth/verify."""
    valid: bool
    user_id: str
    email: Optional[str] = None


class TokenPayload(BaseModel):
    """
    Decoded JWT token payload from Supabase.

    Supabase tokens include standard JWT claims plus custom claims.
    """
    sub: str  # User ID
    email: Optional[str] = None
    aud: str  # Audience (should be "authenticated")
    exp: int  # Expiration timestamp
    iat: int  # Issued at timestamp
    role: Optional[str] = None
