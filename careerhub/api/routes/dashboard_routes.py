"""
Dashboard Routes

GET /dashboard/stats - Stale contacts, top connectors, goal progress,
                       skills growth, feedback themes and content activity
"""

from fastapi import APIRouter, Depends

from careerhub.db.postgres import get_db_session
from careerhub.core.auth import get_current_user
from careerhub.services.dashboard_service import DashboardService
from careerhub.schemas.schemas import DashboardStatsResponse

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


@router.get("/stats", response_model=DashboardStatsResponse)
async def get_dashboard_stats(user: dict = Depends(get_current_user)):
    with get_db_session() as db:
        stats = DashboardService(db, user["workspace_id"]).stats()
    return DashboardStatsResponse(**stats)
