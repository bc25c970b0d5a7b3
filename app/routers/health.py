# =============================================================================
# app/routers/health.py - Health Check Endpoints
# =============================================================================
# Liveness / readiness for monitoring and load balancers.
#
# Readiness probes the hosted backend (database + storage) and the legacy
# API. The legacy API is only a fallback target, so it being down degrades
# nothing: it is reported but not required.
# =============================================================================

import logging
from datetime import datetime, timezone
from typing import Awaitable, Callable

from fastapi import APIRouter
from pydantic import BaseModel

from app.config import settings
from lib.api_client import ApiClient
from lib.legacy_client import LegacyApiClient, LegacyApiError

logger = logging.getLogger(__name__)

router = APIRouter()

API_VERSION = "1.0.0"


class HealthResponse(BaseModel):
    status: str
    timestamp: str
    environment: str
    version: str


class ChecksResponse(BaseModel):
    database: str
    storage: str
    legacy_api: str


class ReadinessResponse(BaseModel):
    status: str
    checks: ChecksResponse
    timestamp: str


class LivenessResponse(BaseModel):
    status: str
    timestamp: str


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


async def _probe(name: str, check: Callable[[], Awaitable[object]]) -> str:
    """Run one readiness check; "healthy" or "unhealthy: <reason>"."""
    try:
        await check()
        return "healthy"
    except Exception as e:
        logger.warning(f"Readiness check '{name}' failed: {e}")
        return f"unhealthy: {str(e)[:50]}"


async def _legacy_status(legacy: LegacyApiClient) -> str:
    """Any HTTP answer counts as reachable; only transport failures don't."""
    try:
        await legacy.request("")
    except LegacyApiError as e:
        if e.status_code is None:
            return "unreachable"
    return "reachable"


@router.get("/health", response_model=HealthResponse)
async def health_check():
    return HealthResponse(
        status="healthy",
        timestamp=_now(),
        environment=settings.ENVIRONMENT,
        version=API_VERSION,
    )


@router.get("/health/ready", response_model=ReadinessResponse)
async def readiness_check():
    """
    Readiness check.

    "ready" when the database and storage answer, "degraded" otherwise.
    The legacy API state is informational.
    """
    client = ApiClient.get_instance()

    async def database() -> None:
        query = await client.query("organizations")
        await query.select("id").limit(1).execute()

    checks = ChecksResponse(
        database=await _probe("database", database),
        storage=await _probe("storage", client.list_buckets),
        legacy_api=await _legacy_status(LegacyApiClient.get_instance()),
    )
    ready = checks.database == "healthy" and checks.storage == "healthy"

    return ReadinessResponse(
        status="ready" if ready else "degraded",
        checks=checks,
        timestamp=_now(),
    )


@router.get("/health/live", response_model=LivenessResponse)
async def liveness_check():
    """Process is up (used for container restart decisions)."""
    return LivenessResponse(status="alive", timestamp=_now())
