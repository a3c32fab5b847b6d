"""
Schemas module - Request/Response schemas for API endpoints.

Everything lives in careerhub.schemas.schemas; import from there.
"""
