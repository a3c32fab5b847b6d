"""
API module - FastAPI routers and endpoint definitions.

Usage:
    from careerhub.api import api_router
    app.include_router(api_router, prefix="/api")
"""

from careerhub.api.routes import api_router, public_router

__all__ = ["api_router", "public_router"]
