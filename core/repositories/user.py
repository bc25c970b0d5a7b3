# =============================================================================
# core/repositories/user.py - User Repository
# =============================================================================
# Platform users (rows of the users table, one per auth user).
# Every read embeds the user's organization.
# =============================================================================

import logging

from core.models.common import ApiResponse, Page
from core.models.enums import PlatformRole, UserStatus
from core.models.user import UpdateUserRequest, UserSchema
from core.repositories.base import BaseRepository
from core.transforms import transform_user

logger = logging.getLogger(__name__)

TABLE = "users"
USER_COLUMNS = "*, organizations:organization_id(*)"
SEARCH_COLUMNS = ["first_name", "last_name", "email"]


class UserRepository(BaseRepository):
    """Users: listing, lookup, profile updates, status and role changes."""

    async def find_users_by_organization_id(
        self,
        org_id: str,
        offset: int = 0,
        limit: int = 20,
        search: str = "",
    ) -> ApiResponse[Page[UserSchema]]:
        page = await self._page(
            TABLE,
            transform_user,
            offset,
            limit,
            columns=USER_COLUMNS,
            filters={"organization_id": org_id},
            search=search,
            search_columns=SEARCH_COLUMNS,
        )
        logger.info(f"Fetched {len(page.data)} of {page.count} users for organization {org_id}")
        return ApiResponse(page)

    async def get_relif_users(
        self,
        offset: int = 0,
        limit: int = 20,
    ) -> ApiResponse[Page[UserSchema]]:
        """Platform staff (platform_role RELIF_MEMBER)."""
        page = await self._page(
            TABLE,
            transform_user,
            offset,
            limit,
            columns=USER_COLUMNS,
            filters={"platform_role": PlatformRole.RELIF_MEMBER.value},
        )
        return ApiResponse(page)

    async def find_user(self, user_id: str) -> ApiResponse[UserSchema]:
        row = await self._fetch_one(TABLE, user_id, "User", columns=USER_COLUMNS)
        return ApiResponse(transform_user(row))

    async def update_user(self, user_id: str, data: UpdateUserRequest) -> ApiResponse[UserSchema]:
        changes = data.model_dump(mode="json", exclude_none=True)
        if changes:
            try:
                await self._update_one(TABLE, user_id, changes, "User")
            except Exception as e:
                logger.error(f"Failed to update user {user_id}: {e}")
                raise
            logger.info(f"Updated user: {user_id} ({', '.join(changes)})")
        return await self.find_user(user_id)

    async def reactivate_user(self, user_id: str) -> ApiResponse[UserSchema]:
        return await self.update_user_status(user_id, UserStatus.ACTIVE)

    async def delete_user(self, user_id: str) -> ApiResponse[None]:
        try:
            await self._delete_one(TABLE, user_id)
        except Exception as e:
            logger.error(f"Failed to delete user {user_id}: {e}")
            raise
        logger.info(f"Deleted user: {user_id}")
        return ApiResponse(None, status=204, status_text="No Content")

    async def update_user_status(
        self,
        user_id: str,
        status: UserStatus | str,
    ) -> ApiResponse[UserSchema]:
        """
        Set a user's status.

        A following find_user reports the new status.
        """
        status = UserStatus(status)
        await self._update_one(TABLE, user_id, {"status": status.value}, "User")
        logger.info(f"User {user_id} status set to {status.value}")
        return await self.find_user(user_id)

    async def update_user_platform_role(
        self,
        user_id: str,
        platform_role: PlatformRole | str,
    ) -> ApiResponse[UserSchema]:
        platform_role = PlatformRole(platform_role)
        await self._update_one(TABLE, user_id, {"platform_role": platform_role.value}, "User")
        logger.info(f"User {user_id} platform role set to {platform_role.value}")
        return await self.find_user(user_id)

    async def search_users(
        self,
        search: str = "",
        organization_id: str | None = None,
        platform_role: PlatformRole | str | None = None,
        offset: int = 0,
        limit: int = 20,
    ) -> ApiResponse[Page[UserSchema]]:
        """Search by first name, last name or email, optionally narrowed."""
        filters = {}
        if organization_id:
            filters["organization_id"] = organization_id
        if platform_role:
            filters["platform_role"] = PlatformRole(platform_role).value

        page = await self._page(
            TABLE,
            transform_user,
            offset,
            limit,
            columns=USER_COLUMNS,
            filters=filters,
            search=search,
            search_columns=SEARCH_COLUMNS,
        )
        return ApiResponse(page)
