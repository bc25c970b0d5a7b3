# =============================================================================
# app/routers/responses.py - Repository Result to HTTP Response
# =============================================================================
# Repositories return ApiResponse(data, status, status_text). Routes hand that
# envelope to `respond`, which keeps the repository's status code (201 for
# creates, 204 for deletes) and encodes the payload.
# =============================================================================

from typing import Any

from fastapi import Response, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from core.models.common import ApiResponse

# Shared query parameter bounds for list endpoints
DEFAULT_LIMIT = 20
MAX_LIMIT = 100


def respond(result: ApiResponse[Any]) -> Response:
    """Turn a repository envelope into a JSON (or empty 204) response."""
    if result.status == status.HTTP_204_NO_CONTENT:
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    return JSONResponse(status_code=result.status, content=jsonable_encoder(result.data))
