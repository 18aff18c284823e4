"""
Top-level router for version 1 of the API.

This router aggregates the domain routers under a unified prefix.  The
public link-token routes are included before the owner event routes
so that ``/events/public/...`` is never read as an event id.
"""

from fastapi import APIRouter

from .endpoints import auth, events, guests, health, profile, public

router = APIRouter()

router.include_router(health.router, tags=["health"])
router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(profile.router, tags=["profile"])
router.include_router(public.router, prefix="/events", tags=["public"])
router.include_router(events.router, prefix="/events", tags=["events"])
router.include_router(guests.router, prefix="/events", tags=["guests"])
