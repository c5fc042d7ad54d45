"""
API routers module.

This module contains all API route definitions organized by domain.
"""
from medpanel.api.routers.health import router as health_router
from medpanel.api.routers.pages import router as pages_router
from medpanel.api.routers.sessions import router as sessions_router

__all__ = ["health_router", "pages_router", "sessions_router"]
