"""Bootstrap helpers for default data."""

from __future__ import annotations

import logging

from intranet.core.config import get_settings
from intranet.db.session import get_sessionmaker
from intranet.models import UserRole, UserStatus
from intranet.schemas.user import UserCreate
from intranet.services.user_service import create_user, get_user_by_email

logger = logging.getLogger(__name__)


async def ensure_default_admin() -> None:
    """Create the configured board administrator if it does not yet exist."""

    settings = get_settings()
    if not settings.default_admin_email or not settings.default_admin_password:
        logger.debug("No default admin configured, skipping bootstrap")
        return

    sessionmaker = get_sessionmaker(settings.database_url)
    async with sessionmaker() as session:
        existing = await get_user_by_email(session, settings.default_admin_email)
        if existing is not None:
            return

        payload = UserCreate(
            email=settings.default_admin_email,
            password=settings.default_admin_password,
            full_name=settings.default_admin_name,
            role=UserRole.ADMIN,
            status=UserStatus.ACTIVE,
        )
        await create_user(session, payload)
        logger.info("Created default admin %s", settings.default_admin_email)
