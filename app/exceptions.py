# =============================================================================
# app/exceptions.py - Custom Exceptions and Handlers
# =============================================================================
# Centralized exception types raised by repositories and mapped to HTTP
# responses by the API.
# Errors should tell HOW to fix, not just WHAT failed.
# =============================================================================

from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse


class RelifException(Exception):
    """
    Base exception for the Relif API.

    All custom exceptions inherit from this class.
    Provides structured error responses with actionable suggestions.
    """

    def __init__(
        self,
        message: str,
        code: str = "RELIF_ERROR",
        status_code: int = 500,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.suggestion = suggestion
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response dict."""
        result = {
            "detail": self.message,
            "code": self.code,
        }
        if self.suggestion:
            result["suggestion"] = self.suggestion
        if self.details:
            result["details"] = self.details
        return result


# =============================================================================
# Authentication Exceptions
# =============================================================================

class NotAuthenticatedError(RelifException):
    """Raised when an operation needs a signed-in user and there is none."""

    def __init__(self, reason: str = "User not authenticated"):
        super().__init__(
            message=reason,
            code="NOT_AUTHENTICATED",
            status_code=401,
            suggestion="Sign in again to obtain a fresh session",
        )


class AuthenticationFailedError(RelifException):
    """Raised when sign-in/sign-up returns without a usable session."""

    def __init__(self, message: str):
        super().__init__(
            message=message,
            code="AUTHENTICATION_FAILED",
            status_code=401,
            suggestion="Check the credentials or confirm the email address first",
        )


class UserOrganizationNotFoundError(RelifException):
    """Raised when the current user does not belong to an organization."""

    def __init__(self, user_id: str):
        super().__init__(
            message="User organization not found",
            code="USER_ORGANIZATION_NOT_FOUND",
            status_code=403,
            suggestion="Join or create an organization before creating records",
            details={"user_id": user_id},
        )


# =============================================================================
# Record Exceptions
# =============================================================================

class RecordNotFoundError(RelifException):
    """Raised when a row with the given ID doesn't exist (or RLS hides it)."""

    def __init__(self, entity: str, record_id: str):
        super().__init__(
            message=f"{entity} not found: {record_id}",
            code=f"{entity.upper().replace(' ', '_')}_NOT_FOUND",
            status_code=404,
            suggestion=f"Check that the {entity.lower()} ID is correct and visible to your organization",
            details={"id": record_id},
        )


class ConcurrentUpdateError(RelifException):
    """Raised when a compare-and-set counter update keeps losing the race."""

    def __init__(self, entity: str, record_id: str, attempts: int):
        super().__init__(
            message=f"{entity} {record_id} changed concurrently; gave up after {attempts} attempts",
            code="CONCURRENT_UPDATE",
            status_code=409,
            suggestion="Retry the operation",
            details={"id": record_id, "attempts": attempts},
        )


# =============================================================================
# Housing / Inventory Exceptions
# =============================================================================

class CapacityExceededError(RelifException):
    """Raised when allocating into a room that is already full."""

    def __init__(self, room_id: str, capacity: int):
        super().__init__(
            message=f"Room {room_id} is full (capacity {capacity})",
            code="CAPACITY_EXCEEDED",
            status_code=409,
            suggestion="Pick another room or increase the room capacity",
            details={"room_id": room_id, "capacity": capacity},
        )


class AllocationRejectedError(RelifException):
    """Raised when the allocation procedure refuses a move (wrong housing, same room)."""

    def __init__(self, reason: str, message: str, beneficiary_id: str, room_id: str):
        super().__init__(
            message=message,
            code=reason,
            status_code=409,
            suggestion="Check the housing and room of the allocation",
            details={"beneficiary_id": beneficiary_id, "room_id": room_id},
        )


class InsufficientStockError(RelifException):
    """Raised when removing more units than a product has in storage."""

    def __init__(self, product_id: str, requested: int, available: int):
        super().__init__(
            message=f"Not enough stock for product {product_id}: requested {requested}, available {available}",
            code="INSUFFICIENT_STOCK",
            status_code=409,
            suggestion="Lower the quantity or register an entrance first",
            details={"product_id": product_id, "requested": requested, "available": available},
        )


class InvalidQuantityError(RelifException):
    """Raised when a stock movement quantity is not positive."""

    def __init__(self, quantity: int):
        super().__init__(
            message=f"Quantity must be greater than zero, got {quantity}",
            code="INVALID_QUANTITY",
            status_code=400,
            details={"quantity": quantity},
        )


# =============================================================================
# Storage Exceptions
# =============================================================================

class StorageLinkError(RelifException):
    """Raised when a signed upload/download link cannot be generated."""

    def __init__(self, path: str, error: str):
        super().__init__(
            message=f"Failed to create storage link: {error}",
            code="STORAGE_LINK_ERROR",
            status_code=500,
            suggestion="Check that the storage bucket exists and the user may write to it",
            details={"path": path, "error": error},
        )


# =============================================================================
# Exception Handlers
# =============================================================================

async def relif_exception_handler(
    request: Request,
    exc: RelifException
) -> JSONResponse:
    """
    Convert RelifException to JSON response.

    Returns structured error with:
    - detail: Human-readable message
    - code: Machine-readable error code
    - suggestion: How to fix (if available)
    - details: Additional context
    """
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )
