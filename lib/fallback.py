# =============================================================================
# lib/fallback.py - Fallback Policy Wrapper
# =============================================================================
# One place that decides what happens when a hosted-backend call fails:
#
#   NONE       - the original error propagates (default)
#   ALWAYS     - any error triggers the fallback
#   ON_STATUS  - only errors mapping to the listed HTTP-like statuses do
#
# Any mode can name `passthrough` error types (business-rule refusals); those
# always propagate and the fallback is never called.
#
# The fallback runs exactly once and its result is returned unchanged, so a
# legacy response keeps its legacy shape.
#
# Usage:
#   from lib.fallback import FallbackPolicy, with_fallback
#   response = await with_fallback(
#       "get_case_notes",
#       primary=lambda: self._notes_from_backend(case_id),
#       fallback=lambda: self.legacy.request(f"cases/{case_id}/notes"),
#       policy=FallbackPolicy.on_status(404),
#   )
# =============================================================================

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable, TypeVar

import httpx

logger = logging.getLogger(__name__)

T = TypeVar("T")

# PostgREST / Postgres error codes that have an obvious HTTP meaning
POSTGREST_STATUS_CODES: dict[str, int] = {
    "PGRST116": 404,  # .single() matched no rows
    "PGRST301": 401,  # JWT expired / invalid
    "42501": 403,     # insufficient privilege (RLS)
    "23505": 409,     # unique violation
    "23503": 409,     # foreign key violation
    "23514": 400,     # check violation
    "22P02": 400,     # invalid text representation (bad uuid)
}


class FallbackMode(str, Enum):
    NONE = "none"
    ALWAYS = "always"
    ON_STATUS = "on_status"


@dataclass(frozen=True)
class FallbackPolicy:
    """
    When a failed primary call may be retried against the fallback.

    Example:
        FallbackPolicy.always()
        FallbackPolicy.on_status(404, 503)
        FallbackPolicy.always(passthrough=(CapacityExceededError,))
    """
    mode: FallbackMode = FallbackMode.NONE
    statuses: frozenset[int] = field(default_factory=frozenset)
    passthrough: tuple[type[BaseException], ...] = ()

    @classmethod
    def none(cls) -> FallbackPolicy:
        return cls(FallbackMode.NONE)

    @classmethod
    def always(cls, passthrough: tuple[type[BaseException], ...] = ()) -> FallbackPolicy:
        return cls(FallbackMode.ALWAYS, passthrough=passthrough)

    @classmethod
    def on_status(
        cls, *codes: int, passthrough: tuple[type[BaseException], ...] = ()
    ) -> FallbackPolicy:
        return cls(FallbackMode.ON_STATUS, frozenset(codes), passthrough)

    def applies_to(self, exc: BaseException) -> bool:
        """Whether `exc` should be answered with the fallback."""
        if self.passthrough and isinstance(exc, self.passthrough):
            return False
        if self.mode == FallbackMode.ALWAYS:
            return True
        if self.mode == FallbackMode.ON_STATUS:
            return status_code_of(exc) in self.statuses
        return False


def status_code_of(exc: BaseException) -> int | None:
    """
    Best-effort HTTP-like status for an error from any client layer.

    Understands errors exposing `status_code` (our own errors), GoTrue
    errors (`status`), httpx status errors, and PostgREST APIError codes.

    Example:
        status_code_of(APIError({"code": "PGRST116", ...}))  # 404
    """
    status_code = getattr(exc, "status_code", None)
    if isinstance(status_code, int):
        return status_code

    status = getattr(exc, "status", None)
    if isinstance(status, int):
        return status

    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.status_code

    code = getattr(exc, "code", None)
    if code is not None:
        code = str(code)
        if code in POSTGREST_STATUS_CODES:
            return POSTGREST_STATUS_CODES[code]
        if code.isdigit() and 100 <= int(code) < 600:
            return int(code)

    return None


async def with_fallback(
    operation: str,
    primary: Callable[[], Awaitable[T]],
    fallback: Callable[[], Awaitable[Any]] | None = None,
    policy: FallbackPolicy | None = None,
) -> T | Any:
    """
    Run `primary`; on failure, consult `policy` before calling `fallback`.

    Args:
        operation: Name used in log messages
        primary: Zero-argument coroutine factory for the hosted backend call
        fallback: Zero-argument coroutine factory for the fallback call
        policy: FallbackPolicy (defaults to NONE)

    Returns:
        The primary result, or the fallback result unchanged

    Raises:
        The primary's exception when the policy does not allow a fallback,
        or the fallback's own exception if the fallback also fails
    """
    policy = policy or FallbackPolicy.none()

    try:
        return await primary()
    except Exception as e:
        if fallback is None or not policy.applies_to(e):
            raise
        logger.warning(
            f"{operation} failed on hosted backend ({type(e).__name__}: {e}); using fallback"
        )

    return await fallback()
