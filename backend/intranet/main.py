"""FastAPI application entrypoint."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from secure import Secure
from asgi_correlation_id import CorrelationIdMiddleware
from fastapi_limiter import FastAPILimiter
import redis.asyncio as redis  # type: ignore[import-untyped]
from redis.exceptions import RedisError

from intranet.api import api_router
from intranet.core.config import get_settings
from intranet.db.session import dispose_engine
from intranet.security.logging_filters import install_sensitive_filter
from intranet.services.bootstrap_service import ensure_default_admin

logger = logging.getLogger(__name__)

settings = get_settings()

_ALLOWED_ORIGINS = [origin for origin in settings.cors_allowlist if origin]


async def _init_rate_limiter():
    """Connect the limiter to Redis; without Redis, limits are not enforced."""
    if not settings.redis_url:
        logger.info("REDIS_URL not set, rate limiting disabled")
        return None
    redis_pool = redis.from_url(
        settings.redis_url, encoding="utf-8", decode_responses=True
    )
    try:
        await FastAPILimiter.init(redis_pool)
    except (RedisError, OSError):
        logger.exception("Failed to initialize rate limiter")
        await redis_pool.aclose()
        return None
    return redis_pool


@asynccontextmanager
async def lifespan(_: FastAPI):
    redis_pool = await _init_rate_limiter()
    await ensure_default_admin()
    try:
        yield
    finally:
        if redis_pool is not None:
            await FastAPILimiter.close()
        await dispose_engine()


app = FastAPI(title=settings.app_name, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_ALLOWED_ORIGINS,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type", "X-Request-ID"],
    expose_headers=["X-Request-ID"],
)
app.add_middleware(CorrelationIdMiddleware, header_name="X-Request-ID")

_secure_headers = Secure.with_default_headers()


@app.middleware("http")
async def _apply_security_headers(request, call_next):
    response = await call_next(request)
    _secure_headers.set_headers(response)
    return response


install_sensitive_filter("uvicorn", "uvicorn.access", "uvicorn.error", "")

app.include_router(api_router)


@app.get("/", include_in_schema=False)
async def root() -> dict[str, str]:
    return {"message": settings.app_name}
