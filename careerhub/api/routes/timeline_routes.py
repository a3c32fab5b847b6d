"""
Timeline Routes

GET /timeline - Every dated career record grouped by year, newest first,
                with the people linked to each item
"""

from fastapi import APIRouter, Depends

from careerhub.db.postgres import get_db_session
from careerhub.core.auth import get_current_user
from careerhub.services.timeline_service import load_timeline_data, build_timeline
from careerhub.schemas.schemas import TimelineResponse

router = APIRouter(prefix="/timeline", tags=["Timeline"])


@router.get("", response_model=TimelineResponse)
async def get_timeline(user: dict = Depends(get_current_user)):
    with get_db_session() as db:
        data = load_timeline_data(db, user["workspace_id"])
    return TimelineResponse(**build_timeline(data))
