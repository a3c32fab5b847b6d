"""
API Routes - Combines all route modules into single router.

`api_router` is mounted under /api; `public_router` serves the shared
resume pages at the site root.
"""

from fastapi import APIRouter

from careerhub.api.routes.auth_routes import router as auth_router
from careerhub.api.routes.people_routes import router as people_router
from careerhub.api.routes.job_routes import router as job_router
from careerhub.api.routes.institution_routes import router as institution_router
from careerhub.api.routes.event_routes import router as event_router
from careerhub.api.routes.project_routes import router as project_router
from careerhub.api.routes.skill_routes import router as skill_router
from careerhub.api.routes.interaction_routes import router as interaction_router
from careerhub.api.routes.relationship_routes import router as relationship_router
from careerhub.api.routes.achievement_routes import router as achievement_router
from careerhub.api.routes.feedback_routes import router as feedback_router
from careerhub.api.routes.goal_routes import router as goal_router
from careerhub.api.routes.compensation_routes import router as compensation_router
from careerhub.api.routes.learning_routes import router as learning_router
from careerhub.api.routes.content_routes import router as content_router
from careerhub.api.routes.search_routes import router as search_router
from careerhub.api.routes.timeline_routes import router as timeline_router
from careerhub.api.routes.dashboard_routes import router as dashboard_router
from careerhub.api.routes.import_routes import router as import_router
from careerhub.api.routes.profile_routes import router as profile_router
from careerhub.api.routes.view_definition_routes import router as view_definition_router
from careerhub.api.routes.variant_routes import router as variant_router
from careerhub.api.routes.snapshot_routes import router as snapshot_router
from careerhub.api.routes.export_routes import router as export_router
from careerhub.api.routes.share_routes import router as share_router, public_router
from careerhub.api.routes.ai_routes import router as ai_router

# Main API router
api_router = APIRouter()

# Include all sub-routers
api_router.include_router(auth_router)
api_router.include_router(people_router)
api_router.include_router(job_router)
api_router.include_router(institution_router)
api_router.include_router(event_router)
api_router.include_router(project_router)
api_router.include_router(skill_router)
api_router.include_router(interaction_router)
api_router.include_router(relationship_router)
api_router.include_router(achievement_router)
api_router.include_router(feedback_router)
api_router.include_router(goal_router)
api_router.include_router(compensation_router)
api_router.include_router(learning_router)
api_router.include_router(content_router)
api_router.include_router(search_router)
api_router.include_router(timeline_router)
api_router.include_router(dashboard_router)
api_router.include_router(import_router)
api_router.include_router(profile_router)
api_router.include_router(view_definition_router)
api_router.include_router(variant_router)
api_router.include_router(snapshot_router)
api_router.include_router(export_router)
api_router.include_router(share_router)
api_router.include_router(ai_router)

__all__ = ["api_router", "public_router"]
