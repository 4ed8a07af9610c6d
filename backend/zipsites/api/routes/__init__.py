"""API route registration."""

from fastapi import APIRouter

from zipsites.api.routes import health, sites, system

api_router = APIRouter()

api_router.include_router(health.router, tags=["health"])
api_router.include_router(system.router, prefix="/system", tags=["system"])
api_router.include_router(sites.router, tags=["sites"])
