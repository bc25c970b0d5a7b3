# =============================================================================
# lib/ - Infrastructure Modules
# =============================================================================
# This package contains the client-side plumbing shared by all repositories:
# - api_client.py: Async wrapper for the hosted Supabase backend
# - legacy_client.py: httpx client for the legacy REST API
# - token_store.py: Storage for the signed-in user's access token
# - fallback.py: Policy-driven fallback from hosted backend to legacy API
# - utils.py: Shared utilities (error base class, query helpers)
#
# These modules are self-contained and can be tested in isolation.
# =============================================================================

from lib.api_client import ApiClient, ApiClientError, EdgeFunctionError
from lib.fallback import FallbackPolicy, status_code_of, with_fallback
from lib.legacy_client import LegacyApiClient, LegacyApiError
from lib.token_store import TokenStore
from lib.utils import ApplicationError, normalize_uuid

__all__ = [
    # Hosted backend
    "ApiClient",
    "ApiClientError",
    "EdgeFunctionError",
    # Legacy API
    "LegacyApiClient",
    "LegacyApiError",
    "TokenStore",
    # Fallback
    "FallbackPolicy",
    "status_code_of",
    "with_fallback",
    # Utils
    "ApplicationError",
    "normalize_uuid",
]
