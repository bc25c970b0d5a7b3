# =============================================================================
# core/repositories/requests.py - Request Repository
# =============================================================================
# Requests that an organization (or its admins) must decide on:
# - organization_join_requests: a user asks to join (accept via Edge Function)
# - organization_data_access_requests: another organization asks for data
#   access (accepted as GRANTED)
# - update_organization_type_requests: an organization asks to change its
#   type (accepted as APPROVED)
# =============================================================================

import logging
from typing import Any, Callable

from core.models.common import ApiResponse
from core.models.enums import RequestStatus
from core.models.requests import (
    CreateTypeUpdateRequest,
    JoinOrganizationRequestSchema,
    OrganizationDataAccessRequestSchema,
    UpdateOrganizationTypeRequestSchema,
)
from core.repositories.base import BaseRepository
from core.transforms import (
    transform_data_access_request,
    transform_join_request,
    transform_type_update_request,
)
from lib.utils import utc_now_iso

logger = logging.getLogger(__name__)

JOIN_REQUESTS = "organization_join_requests"
DATA_ACCESS_REQUESTS = "organization_data_access_requests"
TYPE_UPDATE_REQUESTS = "update_organization_type_requests"

JOIN_REQUEST_COLUMNS = "*, user:user_id(*)"
DATA_ACCESS_COLUMNS = "*, requesting_organization:requesting_organization_id(*)"
TYPE_UPDATE_COLUMNS = "*, organization:organization_id(*), requested_by:requested_by_id(*)"

ACCEPT_JOIN_REQUEST_FUNCTION = "accept-join-request"


class RequestRepository(BaseRepository):
    """Join, data-access and organization-type requests."""

    async def _set_request_status(
        self,
        table: str,
        request_id: str,
        status: RequestStatus,
        columns: str,
        transform: Callable[[Any], Any],
    ) -> ApiResponse:
        await self._update_one(table, request_id, {"status": status.value}, "Request")
        row = await self._fetch_one(table, request_id, "Request", columns=columns)
        logger.info(f"{table} {request_id} set to {status.value}")
        return ApiResponse(transform(row))

    # -------------------------------------------------------------------------
    # Join requests
    # -------------------------------------------------------------------------

    async def find_join_requests(
        self,
        org_id: str,
    ) -> ApiResponse[list[JoinOrganizationRequestSchema]]:
        rows = await self._rows_for(JOIN_REQUESTS, JOIN_REQUEST_COLUMNS, organization_id=org_id)
        return ApiResponse([transform_join_request(row) for row in rows])

    async def accept_join_request(self, request_id: str) -> ApiResponse[Any]:
        """
        Accept a join request.

        The Edge Function adds the user to the organization, sets their role
        and closes the request in one place.
        """
        result = await self.client.call_edge_function(
            ACCEPT_JOIN_REQUEST_FUNCTION,
            method="POST",
            body={"requestId": request_id},
        )
        logger.info(f"Accepted join request {request_id}")
        return ApiResponse(result)

    async def reject_join_request(
        self,
        request_id: str,
    ) -> ApiResponse[JoinOrganizationRequestSchema]:
        return await self._set_request_status(
            JOIN_REQUESTS, request_id, RequestStatus.REJECTED,
            JOIN_REQUEST_COLUMNS, transform_join_request,
        )

    # -------------------------------------------------------------------------
    # Data access requests
    # -------------------------------------------------------------------------

    async def find_data_access_requests(
        self,
        target_org_id: str,
    ) -> ApiResponse[list[OrganizationDataAccessRequestSchema]]:
        rows = await self._rows_for(
            DATA_ACCESS_REQUESTS, DATA_ACCESS_COLUMNS, target_organization_id=target_org_id
        )
        return ApiResponse([transform_data_access_request(row) for row in rows])

    async def accept_data_access_request(
        self,
        request_id: str,
    ) -> ApiResponse[OrganizationDataAccessRequestSchema]:
        return await self._set_request_status(
            DATA_ACCESS_REQUESTS, request_id, RequestStatus.GRANTED,
            DATA_ACCESS_COLUMNS, transform_data_access_request,
        )

    async def reject_data_access_request(
        self,
        request_id: str,
    ) -> ApiResponse[OrganizationDataAccessRequestSchema]:
        return await self._set_request_status(
            DATA_ACCESS_REQUESTS, request_id, RequestStatus.REJECTED,
            DATA_ACCESS_COLUMNS, transform_data_access_request,
        )

    # -------------------------------------------------------------------------
    # Organization type update requests
    # -------------------------------------------------------------------------

    async def find_type_update_requests(
        self,
        org_id: str,
    ) -> ApiResponse[list[UpdateOrganizationTypeRequestSchema]]:
        rows = await self._rows_for(TYPE_UPDATE_REQUESTS, TYPE_UPDATE_COLUMNS, organization_id=org_id)
        return ApiResponse([transform_type_update_request(row) for row in rows])

    async def accept_type_update_request(
        self,
        request_id: str,
    ) -> ApiResponse[UpdateOrganizationTypeRequestSchema]:
        return await self._set_request_status(
            TYPE_UPDATE_REQUESTS, request_id, RequestStatus.APPROVED,
            TYPE_UPDATE_COLUMNS, transform_type_update_request,
        )

    async def reject_type_update_request(
        self,
        request_id: str,
    ) -> ApiResponse[UpdateOrganizationTypeRequestSchema]:
        return await self._set_request_status(
            TYPE_UPDATE_REQUESTS, request_id, RequestStatus.REJECTED,
            TYPE_UPDATE_COLUMNS, transform_type_update_request,
        )

    async def create_type_update_request(
        self,
        org_id: str,
        data: CreateTypeUpdateRequest,
    ) -> ApiResponse[UpdateOrganizationTypeRequestSchema]:
        """Ask for the organization's type to change, as the signed-in user."""
        requested_by = await self._current_user_id()
        row = {
            "organization_id": org_id,
            "requested_by_id": requested_by,
            "new_type": data.new_type.value,
            "status": RequestStatus.PENDING.value,
            "created_at": utc_now_iso(),
        }

        try:
            created = await self._insert_one(TYPE_UPDATE_REQUESTS, row)
        except Exception as e:
            logger.error(f"Failed to create type update request for organization {org_id}: {e}")
            raise

        logger.info(f"Organization {org_id} requested type {data.new_type.value}")
        return ApiResponse(transform_type_update_request(created), status=201, status_text="Created")
