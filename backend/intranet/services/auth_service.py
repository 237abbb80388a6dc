"""Member sign-in and token issuance."""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from intranet.core.security import create_access_token, verify_password
from intranet.models.user import User, UserStatus
from intranet.services import user_service
from intranet.services.errors import AccountSuspendedError, InvalidCredentialsError


async def authenticate_user(session: AsyncSession, *, email: str, password: str) -> User:
    """Return the member matching the credentials.

    The password is checked before the account status, so only a caller who
    knows the password learns that the account is suspended.
    """
    user = await user_service.get_user_by_email(session, email=email.strip())
    if user is None or not verify_password(password, user.hashed_password):
        raise InvalidCredentialsError("Incorrect email or password")
    if user.status == UserStatus.SUSPENDED:
        raise AccountSuspendedError(user.id)
    return user


def create_access_token_for_user(user: User) -> str:
    return create_access_token(user.id, user.role)
