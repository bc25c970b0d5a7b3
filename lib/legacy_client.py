# =============================================================================
# lib/legacy_client.py - Legacy REST API Client
# =============================================================================
# Thin httpx wrapper around the legacy REST API that repositories fall back
# to when the hosted backend fails.
#
# Requests carry "Authorization: Bearer <token>" when the token store holds
# the signed-in user's token. Response bodies are returned unchanged so
# callers see exactly what the legacy API produced.
#
# Usage:
#   from lib.legacy_client import LegacyApiClient
#   legacy = LegacyApiClient.get_instance()
#   response = await legacy.request(f"beneficiaries/{beneficiary_id}")
#   response.data  # raw JSON body
# =============================================================================

from __future__ import annotations

import logging
from typing import Any

import httpx

from app.config import settings
from core.models.common import ApiResponse
from lib.token_store import TokenStore
from lib.utils import ApplicationError

logger = logging.getLogger(__name__)


class LegacyApiError(ApplicationError):
    """
    Error returned by (or while reaching) the legacy API.

    `status_code` is the HTTP status, or None when no response arrived.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(
            message=message,
            code="LEGACY_API_ERROR" if status_code else "LEGACY_API_UNREACHABLE",
            suggestion=suggestion,
            details=details,
        )
        self.status_code = status_code


class LegacyApiClient:
    """
    Async client for the legacy REST API.

    Example:
        legacy = LegacyApiClient(base_url="http://localhost:8080/api/v1")
        response = await legacy.request("beneficiaries/42/allocate", method="POST", json={...})
    """

    _instance: LegacyApiClient | None = None

    def __init__(
        self,
        base_url: str | None = None,
        token_store: TokenStore | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = (base_url or settings.LEGACY_API_URL).rstrip("/")
        self.token_store = token_store or TokenStore.get_instance()
        self.timeout = timeout or settings.LEGACY_API_TIMEOUT
        self._transport = transport

    @classmethod
    def get_instance(cls) -> LegacyApiClient:
        """Get or create the process-wide legacy client."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        cls._instance = None

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        token = self.token_store.get_token()
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    async def request(
        self,
        url: str,
        method: str = "GET",
        params: dict[str, Any] | None = None,
        json: Any = None,
    ) -> ApiResponse[Any]:
        """
        Send one request to the legacy API.

        Args:
            url: Path relative to LEGACY_API_URL (e.g. "beneficiaries/42")
            method: HTTP method
            params: Query string parameters
            json: JSON body

        Returns:
            ApiResponse whose data is the decoded body (None for empty bodies)

        Raises:
            LegacyApiError: On non-2xx responses or transport failures
        """
        full_url = f"{self.base_url}/{url.lstrip('/')}"

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.request(
                    method.upper(),
                    full_url,
                    params=params,
                    json=json,
                    headers=self._headers(),
                )
        except httpx.HTTPError as e:
            logger.error(f"Legacy API {method.upper()} {url} failed: {e}")
            raise LegacyApiError(
                message=f"Could not reach legacy API: {e}",
                suggestion="Check LEGACY_API_URL and that the legacy service is running",
                details={"url": full_url, "method": method.upper()},
            ) from e

        if not response.is_success:
            logger.error(f"Legacy API {method.upper()} {url} returned {response.status_code}")
            raise LegacyApiError(
                message=f"Legacy API returned {response.status_code} for {method.upper()} {url}",
                status_code=response.status_code,
                details={"url": full_url, "body": response.text[:500]},
            )

        data = response.json() if response.content else None
        return ApiResponse(
            data=data,
            status=response.status_code,
            status_text=response.reason_phrase,
        )
