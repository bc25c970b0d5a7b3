# =============================================================================
# core/models/common.py - Response Envelopes
# =============================================================================
# Shapes shared by every repository:
# - ApiResponse: uniform envelope around a single result
# - Page: one page of a list query plus the exact total for the filter
# =============================================================================

from dataclasses import dataclass
from typing import Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


@dataclass
class ApiResponse(Generic[T]):
    """
    Uniform envelope returned by repository operations.

    `data` is the transformed entity (or a Page of them). When an operation
    was served by the legacy API the body is passed through unchanged.
    """
    data: T
    status: int = 200
    status_text: str = "OK"


class Page(BaseModel, Generic[T]):
    """
    One page of a list query.

    `count` is the number of rows matching the filter on the server,
    independent of offset/limit.

    Example:
        {"count": 25, "data": [...20 items...]}
    """
    count: int = Field(default=0, ge=0, description="Total rows matching the filter")
    data: list[T] = Field(default_factory=list, description="Rows in this page")
