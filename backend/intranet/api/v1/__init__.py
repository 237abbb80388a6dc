"""Versioned API router."""

from fastapi import APIRouter

from . import apartments, auth, bookings, health, pages, seasons, users

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(users.router, prefix="/users", tags=["users"])
router.include_router(apartments.router, prefix="/apartments", tags=["apartments"])
router.include_router(bookings.router, prefix="/bookings", tags=["bookings"])
router.include_router(seasons.router, prefix="/seasons", tags=["seasons"])
router.include_router(pages.router, prefix="/pages", tags=["pages"])
