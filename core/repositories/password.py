# =============================================================================
# core/repositories/password.py - Password Repository
# =============================================================================

import logging

from core.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


class PasswordRepository(BaseRepository):
    """Password reset emails and password changes (hosted auth only)."""

    async def request_password_change(self, email: str) -> None:
        """Send a reset email linking to the app's recover-password page."""
        await self.client.reset_password(email)
        logger.info(f"Password reset email sent to {email}")

    async def update_user_password(self, password: str) -> None:
        """Set a new password for the signed-in (or recovering) user."""
        await self.client.update_password(password)
        logger.info("Password updated")
