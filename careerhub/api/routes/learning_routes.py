"""
Learning Routes

POST /learning - Courses, certifications, books...
GET /learning - learning_type / status filters
GET /learning/{learning_id}
PUT /learning/{learning_id}
DELETE /learning/{learning_id}
"""

from fastapi import APIRouter, HTTPException, Depends, Query
from sqlalchemy import select
from typing import List, Optional

from careerhub.db.postgres import get_db_session, fetch_all
from careerhub.db.tables import learning
from careerhub.core.auth import get_current_user
from careerhub.services.crud import (
    insert_row, require_row, update_row, delete_row, update_values, delete_entity_links
)
from careerhub.schemas.schemas import (
    LearningCreate, LearningUpdate, LearningResponse, LearningType, LearningStatus, MessageResponse
)

router = APIRouter(prefix="/learning", tags=["Learning"])


@router.post("", response_model=LearningResponse, status_code=201)
async def create_learning(item: LearningCreate, user: dict = Depends(get_current_user)):
    with get_db_session() as db:
        row = insert_row(db, learning, user["workspace_id"], item.model_dump())
    return LearningResponse(**row)


@router.get("", response_model=List[LearningResponse])
async def list_learning(
    learning_type: Optional[LearningType] = Query(None),
    status: Optional[LearningStatus] = Query(None),
    user: dict = Depends(get_current_user)
):
    stmt = select(learning).where(learning.c.workspace_id == user["workspace_id"])
    if learning_type:
        stmt = stmt.where(learning.c.learning_type == learning_type.value)
    if status:
        stmt = stmt.where(learning.c.status == status.value)
    with get_db_session() as db:
        rows = fetch_all(db, stmt.order_by(learning.c.start_date.desc(), learning.c.id.desc()))
    return [LearningResponse(**r) for r in rows]


@router.get("/{learning_id}", response_model=LearningResponse)
async def get_learning(learning_id: int, user: dict = Depends(get_current_user)):
    with get_db_session() as db:
        row = require_row(db, learning, learning_id, user["workspace_id"], "Learning")
    return LearningResponse(**row)


@router.put("/{learning_id}", response_model=LearningResponse)
async def update_learning(learning_id: int, update: LearningUpdate, user: dict = Depends(get_current_user)):
    values = update_values(update, required=("title", "learning_type", "status"))
    with get_db_session() as db:
        row = update_row(db, learning, learning_id, user["workspace_id"], values)
    if row is None:
        raise HTTPException(status_code=404, detail="Learning not found")
    return LearningResponse(**row)


@router.delete("/{learning_id}", response_model=MessageResponse)
async def delete_learning(learning_id: int, user: dict = Depends(get_current_user)):
    with get_db_session() as db:
        if not delete_row(db, learning, learning_id, user["workspace_id"]):
            raise HTTPException(status_code=404, detail="Learning not found")
        delete_entity_links(db, "learning", learning_id, user["workspace_id"])
    return MessageResponse(message="Learning deleted successfully")
