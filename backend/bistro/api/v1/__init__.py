"""Versioned API router."""

from fastapi import APIRouter

from . import auth, availability, health, reservations, tables

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(availability.router, tags=["availability"])
router.include_router(tables.router, prefix="/tables", tags=["tables"])
router.include_router(
    reservations.router, prefix="/reservations", tags=["reservations"]
)
