# =============================================================================
# lib/utils.py - Shared Utilities
# =============================================================================
# Common utilities used across the application.
# =============================================================================

import mimetypes
import re
from datetime import datetime, timezone
from typing import Any
from uuid import UUID


# =============================================================================
# UUID Utilities
# =============================================================================

def normalize_uuid(value: str | UUID) -> str:
    """
    Normalize a UUID to string format.

    Handles both string and UUID objects, ensuring consistent string output.

    Example:
        org_id = normalize_uuid(uuid_obj)  # "550e8400-..."
        org_id = normalize_uuid("550e8400-...")  # "550e8400-..."
    """
    return str(value) if isinstance(value, UUID) else value


def utc_now_iso() -> str:
    """Current UTC time as an ISO-8601 string (what PostgREST expects)."""
    return datetime.now(timezone.utc).isoformat()


def parse_timestamp(value: Any) -> datetime | None:
    """
    Parse a PostgREST timestamp into an aware datetime.

    Returns None for empty or unparseable values.
    """
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    if not value or not isinstance(value, str):
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)


# =============================================================================
# Query Helpers
# =============================================================================

# Characters with meaning inside a PostgREST or=(...) filter
_FILTER_RESERVED = re.compile(r"[,()*%]")


def page_bounds(offset: int, limit: int) -> tuple[int, int]:
    """
    Convert offset/limit into PostgREST's inclusive range bounds.

    Example:
        page_bounds(20, 20)  # (20, 39)
    """
    offset = max(offset, 0)
    limit = max(limit, 1)
    return offset, offset + limit - 1


def search_filter(columns: list[str], search: str) -> str | None:
    """
    Build an or-filter matching `search` case-insensitively in any column.

    Returns None when the search term is empty after sanitizing.

    Example:
        search_filter(["full_name", "email"], "ana")
        # "full_name.ilike.%ana%,email.ilike.%ana%"
    """
    term = _FILTER_RESERVED.sub(" ", search or "").strip()
    if not term:
        return None
    return ",".join(f"{column}.ilike.%{term}%" for column in columns)


def file_extension(file_type: str) -> str:
    """
    Extension (without dot) for a MIME type or a bare extension.

    Example:
        file_extension("image/png")  # "png"
        file_extension(".PDF")  # "pdf"
    """
    file_type = (file_type or "").strip().lower()
    if "/" in file_type:
        guessed = mimetypes.guess_extension(file_type) or ""
        return guessed.lstrip(".") or file_type.rsplit("/", 1)[-1]
    return file_type.lstrip(".") or "bin"


def drop_none(data: dict[str, Any]) -> dict[str, Any]:
    """Remove keys whose value is None (unset fields must not overwrite columns)."""
    return {key: value for key, value in data.items() if value is not None}


# =============================================================================
# Base Error Class
# =============================================================================

class ApplicationError(Exception):
    """
    Base error class for application-specific errors.

    Provides actionable error messages following the principle:
    "Errors should tell HOW to fix, not just WHAT failed."

    Attributes:
        code: Error code for categorization
        message: Human-readable error message
        suggestion: Actionable suggestion for fixing the error
        details: Additional context for debugging
    """

    def __init__(
        self,
        message: str,
        code: str = "APPLICATION_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.details = details or {}

    def __str__(self) -> str:
        result = f"[{self.code}] {self.message}"
        if self.suggestion:
            result += f"\n  Suggestion: {self.suggestion}"
        return result

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for API responses."""
        return {
            "code": self.code,
            "message": self.message,
            "suggestion": self.suggestion,
            "details": self.details,
        }
