"""Password hashing and the bearer tokens issued to members."""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

import bcrypt
from jose import JWTError, jwt

from intranet.core.config import get_settings
from intranet.models.user import UserRole


@dataclass(frozen=True, slots=True)
class AccessClaims:
    """Identity carried by an intranet access token."""

    user_id: uuid.UUID
    role: UserRole
    expires_at: datetime


def verify_password(plain_password: str, hashed_password: str) -> bool:
    try:
        return bcrypt.checkpw(plain_password.encode(), hashed_password.encode())
    except (ValueError, TypeError):  # malformed stored hash
        return False


def get_password_hash(password: str) -> str:
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt()).decode()


def create_access_token(
    user_id: uuid.UUID,
    role: UserRole,
    *,
    expires_delta: timedelta | None = None,
) -> str:
    """Sign a token naming the member and the role they held at login."""
    settings = get_settings()
    lifetime = expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    claims = {
        "sub": str(user_id),
        "role": role.value,
        "exp": datetime.now(UTC) + lifetime,
    }
    return jwt.encode(claims, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> AccessClaims:
    """Verify a token and return its claims.

    Raises ``JWTError`` for a bad signature, an expired token or claims that do
    not name a member and a known role.
    """
    settings = get_settings()
    payload = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    try:
        return AccessClaims(
            user_id=uuid.UUID(payload["sub"]),
            role=UserRole(payload["role"]),
            expires_at=datetime.fromtimestamp(payload["exp"], UTC),
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise JWTError("Token does not identify an intranet member") from exc
