"""
Skill Routes

POST /skills
GET /skills - search on name, filter by category
GET /skills/{skill_id}
PUT /skills/{skill_id}
DELETE /skills/{skill_id}
"""

from fastapi import APIRouter, HTTPException, Depends, Query
from sqlalchemy import func, select
from typing import List, Optional

from careerhub.db.postgres import get_db_session, fetch_all
from careerhub.db.tables import skills
from careerhub.core.auth import get_current_user
from careerhub.services.crud import (
    insert_row, require_row, update_row, delete_row, update_values, like_pattern, delete_entity_links,
    LIKE_ESCAPE,
)
from careerhub.schemas.schemas import SkillCreate, SkillUpdate, SkillResponse, MessageResponse

router = APIRouter(prefix="/skills", tags=["Skills"])


@router.post("", response_model=SkillResponse, status_code=201)
async def create_skill(skill: SkillCreate, user: dict = Depends(get_current_user)):
    with get_db_session() as db:
        row = insert_row(db, skills, user["workspace_id"], skill.model_dump())
    return SkillResponse(**row)


@router.get("", response_model=List[SkillResponse])
async def list_skills(
    search: Optional[str] = Query(None, description="Search in skill name"),
    category: Optional[str] = Query(None),
    user: dict = Depends(get_current_user)
):
    stmt = select(skills).where(skills.c.workspace_id == user["workspace_id"])
    if search:
        stmt = stmt.where(func.lower(skills.c.name).like(like_pattern(search), escape=LIKE_ESCAPE))
    if category:
        stmt = stmt.where(func.lower(skills.c.category) == category.strip().lower())
    with get_db_session() as db:
        rows = fetch_all(db, stmt.order_by(skills.c.category, skills.c.name))
    return [SkillResponse(**r) for r in rows]


@router.get("/{skill_id}", response_model=SkillResponse)
async def get_skill(skill_id: int, user: dict = Depends(get_current_user)):
    with get_db_session() as db:
        row = require_row(db, skills, skill_id, user["workspace_id"], "Skill")
    return SkillResponse(**row)


@router.put("/{skill_id}", response_model=SkillResponse)
async def update_skill(skill_id: int, update: SkillUpdate, user: dict = Depends(get_current_user)):
    values = update_values(update, required=("name", "proficiency"))
    with get_db_session() as db:
        row = update_row(db, skills, skill_id, user["workspace_id"], values)
    if row is None:
        raise HTTPException(status_code=404, detail="Skill not found")
    return SkillResponse(**row)


@router.delete("/{skill_id}", response_model=MessageResponse)
async def delete_skill(skill_id: int, user: dict = Depends(get_current_user)):
    with get_db_session() as db:
        if not delete_row(db, skills, skill_id, user["workspace_id"]):
            raise HTTPException(status_code=404, detail="Skill not found")
        delete_entity_links(db, "skill", skill_id, user["workspace_id"])
    return MessageResponse(message="Skill deleted successfully")
