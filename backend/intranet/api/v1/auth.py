"""Authentication endpoints."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from fastapi.security import OAuth2PasswordRequestForm
from fastapi_limiter import FastAPILimiter
from fastapi_limiter.depends import RateLimiter
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from intranet.api.deps import get_db_session
from intranet.core.config import get_settings
from intranet.models.audit_event import AuditEventType
from intranet.models.user import User, UserRole
from intranet.schemas.auth import RegistrationRequest, RegistrationResponse, Token
from intranet.schemas.user import UserCreate, UserRead
from intranet.services import audit_service, user_service
from intranet.services.auth_service import authenticate_user, create_access_token_for_user
from intranet.services.errors import AccountSuspendedError, InvalidCredentialsError

router = APIRouter()

_settings = get_settings()

_SECONDS_PER_UNIT = {
    "second": 1,
    "seconds": 1,
    "minute": 60,
    "minutes": 60,
    "hour": 3600,
    "hours": 3600,
    "day": 86400,
    "days": 86400,
}


def parse_rate(value: str, *, fallback: tuple[int, int]) -> tuple[int, int]:
    """Parse ``"10/minute"`` style limits into ``(times, seconds)``."""
    try:
        count_str, window_str = value.split("/", 1)
        count = int(count_str.strip())
    except ValueError:
        return fallback
    seconds = _SECONDS_PER_UNIT.get(window_str.strip().lower(), fallback[1])
    return count, seconds


_LOGIN_LIMIT = parse_rate(_settings.rate_limit_login, fallback=(10, 60))
_DEFAULT_LIMIT = parse_rate(_settings.rate_limit_default, fallback=(100, 60))


def _rate_dependency(limit: tuple[int, int]):
    async def _dependency(request: Request, response: Response) -> None:
        if FastAPILimiter.redis is None:
            return None
        limiter = RateLimiter(times=limit[0], seconds=limit[1])
        await limiter(request, response)

    return Depends(_dependency)


_LOGIN_RATE_DEP = _rate_dependency(_LOGIN_LIMIT)
_DEFAULT_RATE_DEP = _rate_dependency(_DEFAULT_LIMIT)


def _client_ip(request: Request) -> str | None:
    return request.client.host if request.client else None


def _event_payload_for_user(user: User) -> dict[str, str]:
    return {"user_id": str(user.id), "email": user.email}


@router.post(
    "/token",
    response_model=Token,
    summary="Obtain access token",
    dependencies=[_LOGIN_RATE_DEP],
)
async def login_for_access_token(
    form_data: Annotated[OAuth2PasswordRequestForm, Depends()],
    session: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> Token:
    """Validate credentials and issue a bearer token."""
    try:
        user = await authenticate_user(
            session, email=form_data.username, password=form_data.password
        )
    except InvalidCredentialsError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(exc),
            headers={"WWW-Authenticate": "Bearer"},
        ) from exc
    except AccountSuspendedError as exc:
        await audit_service.record_event(
            session,
            user_id=exc.user_id,
            event_type=AuditEventType.LOGIN_BLOCKED,
            description="Sign-in attempt on a suspended account",
            ip_address=_client_ip(request),
        )
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN, detail=str(exc)
        ) from exc
    access_token = create_access_token_for_user(user)
    await audit_service.record_event(
        session,
        user_id=user.id,
        event_type=AuditEventType.LOGIN,
        description="Successful login",
        payload=_event_payload_for_user(user),
        ip_address=_client_ip(request),
    )
    return Token(access_token=access_token)


@router.post(
    "/register",
    response_model=RegistrationResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register association member",
    dependencies=[_DEFAULT_RATE_DEP],
)
async def register_member(
    payload: RegistrationRequest,
    session: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> RegistrationResponse:
    """Create a member account and sign it in."""
    existing = await user_service.get_user_by_email(session, email=payload.email)
    if existing is not None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Email already registered"
        )

    try:
        user = await user_service.create_user(
            session,
            UserCreate(
                email=payload.email,
                password=payload.password,
                full_name=payload.full_name,
                apartment=payload.apartment,
                role=UserRole.MEMBER,
            ),
        )
    except IntegrityError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Email already registered"
        ) from exc

    token_value = create_access_token_for_user(user)
    await audit_service.record_event(
        session,
        user_id=user.id,
        event_type=AuditEventType.REGISTER,
        description="Member self-registration",
        payload=_event_payload_for_user(user),
        ip_address=_client_ip(request),
    )
    return RegistrationResponse(
        token=Token(access_token=token_value), user=UserRead.model_validate(user)
    )
