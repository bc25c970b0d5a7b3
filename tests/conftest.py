# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up mock environment variables before any imports
# - Provides an in-memory hosted backend and a mocked legacy API
# - Resets process-wide singletons between tests
# =============================================================================

import os

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_ANON_KEY", "test-anon-key")
os.environ.setdefault("SUPABASE_SERVICE_KEY", "test-service-key")
os.environ.setdefault("SUPABASE_JWT_SECRET", "test-jwt-secret-with-at-least-32-chars")
os.environ.setdefault("LEGACY_API_URL", "http://legacy.test/api/v1")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")

from unittest.mock import AsyncMock, MagicMock

import pytest

from core.models.common import ApiResponse
from lib.api_client import ApiClient
from lib.legacy_client import LegacyApiClient
from lib.token_store import TokenStore
from tests.fakes import FakeApiClient

ORG_ID = "org-1"
USER_ID = "user-1"


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture(autouse=True)
def reset_singletons():
    """Forget process-wide clients so tests never share state."""
    ApiClient.reset_instance()
    LegacyApiClient.reset_instance()
    TokenStore.reset_instance()
    yield
    ApiClient.reset_instance()
    LegacyApiClient.reset_instance()
    TokenStore.reset_instance()


@pytest.fixture
def backend():
    """In-memory hosted backend with a signed-in user in organization org-1."""
    fake = FakeApiClient(user_id=USER_ID)
    fake.seed("organizations", {"id": ORG_ID, "name": "Relif Porto", "status": "ACTIVE"})
    fake.seed("users", {
        "id": USER_ID,
        "first_name": "Ana",
        "last_name": "Silva",
        "email": "ana@relif.org",
        "organization_id": ORG_ID,
        "platform_role": "ORG_ADMIN",
        "status": "ACTIVE",
    })
    return fake


@pytest.fixture
def legacy():
    """Legacy API double answering every request with a marker body."""
    client = MagicMock(spec=LegacyApiClient)
    client.request = AsyncMock(return_value=ApiResponse({"source": "legacy"}))
    return client


@pytest.fixture
def token_store():
    """Memory-only token store."""
    return TokenStore()
