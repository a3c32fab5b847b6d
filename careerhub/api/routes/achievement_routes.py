"""
Achievement Routes

POST /achievements
GET /achievements - optional category filter, newest first
GET /achievements/{achievement_id}
PUT /achievements/{achievement_id}
DELETE /achievements/{achievement_id}
"""

from fastapi import APIRouter, HTTPException, Depends, Query
from sqlalchemy import select
from typing import List, Optional

from careerhub.db.postgres import get_db_session, fetch_all
from careerhub.db.tables import achievements
from careerhub.core.auth import get_current_user
from careerhub.services.crud import (
    insert_row, require_row, update_row, delete_row, update_values, delete_entity_links
)
from careerhub.schemas.schemas import (
    AchievementCreate, AchievementUpdate, AchievementResponse, AchievementCategory, MessageResponse
)

router = APIRouter(prefix="/achievements", tags=["Achievements"])


@router.post("", response_model=AchievementResponse, status_code=201)
async def create_achievement(achievement: AchievementCreate, user: dict = Depends(get_current_user)):
    with get_db_session() as db:
        row = insert_row(db, achievements, user["workspace_id"], achievement.model_dump())
    return AchievementResponse(**row)


@router.get("", response_model=List[AchievementResponse])
async def list_achievements(
    category: Optional[AchievementCategory] = Query(None),
    user: dict = Depends(get_current_user)
):
    stmt = select(achievements).where(achievements.c.workspace_id == user["workspace_id"])
    if category:
        stmt = stmt.where(achievements.c.category == category.value)
    with get_db_session() as db:
        rows = fetch_all(db, stmt.order_by(achievements.c.achieved_date.desc()))
    return [AchievementResponse(**r) for r in rows]


@router.get("/{achievement_id}", response_model=AchievementResponse)
async def get_achievement(achievement_id: int, user: dict = Depends(get_current_user)):
    with get_db_session() as db:
        row = require_row(db, achievements, achievement_id, user["workspace_id"], "Achievement")
    return AchievementResponse(**row)


@router.put("/{achievement_id}", response_model=AchievementResponse)
async def update_achievement(achievement_id: int, update: AchievementUpdate, user: dict = Depends(get_current_user)):
    values = update_values(update, required=("title", "achieved_date"))
    with get_db_session() as db:
        row = update_row(db, achievements, achievement_id, user["workspace_id"], values)
    if row is None:
        raise HTTPException(status_code=404, detail="Achievement not found")
    return AchievementResponse(**row)


@router.delete("/{achievement_id}", response_model=MessageResponse)
async def delete_achievement(achievement_id: int, user: dict = Depends(get_current_user)):
    with get_db_session() as db:
        if not delete_row(db, achievements, achievement_id, user["workspace_id"]):
            raise HTTPException(status_code=404, detail="Achievement not found")
        delete_entity_links(db, "achievement", achievement_id, user["workspace_id"])
    return MessageResponse(message="Achievement deleted successfully")
