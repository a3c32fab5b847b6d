"""
Goal Routes

POST /goals
GET /goals - goal_type / status filters, ordered by target date
GET /goals/{goal_id}
PUT /goals/{goal_id}
DELETE /goals/{goal_id}
"""

from fastapi import APIRouter, HTTPException, Depends, Query
from sqlalchemy import select
from typing import List, Optional

from careerhub.db.postgres import get_db_session, fetch_all
from careerhub.db.tables import goals
from careerhub.core.auth import get_current_user
from careerhub.services.crud import (
    insert_row, require_row, update_row, delete_row, update_values, delete_entity_links
)
from careerhub.schemas.schemas import (
    GoalCreate, GoalUpdate, GoalResponse, GoalType, GoalStatus, MessageResponse
)

router = APIRouter(prefix="/goals", tags=["Goals"])


@router.post("", response_model=GoalResponse, status_code=201)
async def create_goal(goal: GoalCreate, user: dict = Depends(get_current_user)):
    with get_db_session() as db:
        row = insert_row(db, goals, user["workspace_id"], goal.model_dump())
    return GoalResponse(**row)


@router.get("", response_model=List[GoalResponse])
async def list_goals(
    goal_type: Optional[GoalType] = Query(None),
    status: Optional[GoalStatus] = Query(None),
    user: dict = Depends(get_current_user)
):
    stmt = select(goals).where(goals.c.workspace_id == user["workspace_id"])
    if goal_type:
        stmt = stmt.where(goals.c.goal_type == goal_type.value)
    if status:
        stmt = stmt.where(goals.c.status == status.value)
    with get_db_session() as db:
        rows = fetch_all(db, stmt.order_by(goals.c.target_date, goals.c.id))
    return [GoalResponse(**r) for r in rows]


@router.get("/{goal_id}", response_model=GoalResponse)
async def get_goal(goal_id: int, user: dict = Depends(get_current_user)):
    with get_db_session() as db:
        row = require_row(db, goals, goal_id, user["workspace_id"], "Goal")
    return GoalResponse(**row)


@router.put("/{goal_id}", response_model=GoalResponse)
async def update_goal(goal_id: int, update: GoalUpdate, user: dict = Depends(get_current_user)):
    values = update_values(update, required=("title", "description", "status"))
    with get_db_session() as db:
        row = update_row(db, goals, goal_id, user["workspace_id"], values)
    if row is None:
        raise HTTPException(status_code=404, detail="Goal not found")
    return GoalResponse(**row)


@router.delete("/{goal_id}", response_model=MessageResponse)
async def delete_goal(goal_id: int, user: dict = Depends(get_current_user)):
    with get_db_session() as db:
        if not delete_row(db, goals, goal_id, user["workspace_id"]):
            raise HTTPException(status_code=404, detail="Goal not found")
        delete_entity_links(db, "goal", goal_id, user["workspace_id"])
    return MessageResponse(message="Goal deleted successfully")
