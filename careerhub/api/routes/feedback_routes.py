"""
Feedback Routes

POST /feedback - Record feedback received (optionally from a person)
GET /feedback - feedback_type / person_id filters, includes person_name
GET /feedback/{feedback_id}
PUT /feedback/{feedback_id}
DELETE /feedback/{feedback_id}
"""

from fastapi import APIRouter, HTTPException, Depends, Query
from sqlalchemy import select
from typing import List, Optional

from careerhub.db.postgres import get_db_session, fetch_all, fetch_one
from careerhub.db.tables import feedback, people
from careerhub.core.auth import get_current_user
from careerhub.services.crud import (
    insert_row, require_row, update_row, delete_row, update_values, delete_entity_links
)
from careerhub.schemas.schemas import (
    FeedbackCreate, FeedbackUpdate, FeedbackResponse, FeedbackType, MessageResponse
)

router = APIRouter(prefix="/feedback", tags=["Feedback"])


def _with_person(workspace_id: int):
    return (
        select(feedback, people.c.name.label("person_name"))
        .select_from(feedback.outerjoin(people, feedback.c.person_id == people.c.id))
        .where(feedback.c.workspace_id == workspace_id)
    )


@router.post("", response_model=FeedbackResponse, status_code=201)
async def create_feedback(item: FeedbackCreate, user: dict = Depends(get_current_user)):
    with get_db_session() as db:
        if item.person_id is not None:
            require_row(db, people, item.person_id, user["workspace_id"], "Person", status_code=400)
        row = insert_row(db, feedback, user["workspace_id"], item.model_dump())
        row = fetch_one(db, _with_person(user["workspace_id"]).where(feedback.c.id == row["id"]))
    return FeedbackResponse(**row)


@router.get("", response_model=List[FeedbackResponse])
async def list_feedback(
    feedback_type: Optional[FeedbackType] = Query(None),
    person_id: Optional[int] = Query(None),
    user: dict = Depends(get_current_user)
):
    stmt = _with_person(user["workspace_id"])
    if feedback_type:
        stmt = stmt.where(feedback.c.feedback_type == feedback_type.value)
    if person_id is not None:
        stmt = stmt.where(feedback.c.person_id == person_id)
    with get_db_session() as db:
        rows = fetch_all(db, stmt.order_by(feedback.c.feedback_date.desc(), feedback.c.id.desc()))
    return [FeedbackResponse(**r) for r in rows]


@router.get("/{feedback_id}", response_model=FeedbackResponse)
async def get_feedback(feedback_id: int, user: dict = Depends(get_current_user)):
    with get_db_session() as db:
        row = fetch_one(db, _with_person(user["workspace_id"]).where(feedback.c.id == feedback_id))
    if row is None:
        raise HTTPException(status_code=404, detail="Feedback not found")
    return FeedbackResponse(**row)


@router.put("/{feedback_id}", response_model=FeedbackResponse)
async def update_feedback(feedback_id: int, update: FeedbackUpdate, user: dict = Depends(get_current_user)):
    values = update_values(update, required=("feedback_date", "notes"))
    with get_db_session() as db:
        if values.get("person_id") is not None:
            require_row(db, people, values["person_id"], user["workspace_id"], "Person", status_code=400)
        if update_row(db, feedback, feedback_id, user["workspace_id"], values) is None:
            raise HTTPException(status_code=404, detail="Feedback not found")
        row = fetch_one(db, _with_person(user["workspace_id"]).where(feedback.c.id == feedback_id))
    return FeedbackResponse(**row)


@router.delete("/{feedback_id}", response_model=MessageResponse)
async def delete_feedback(feedback_id: int, user: dict = Depends(get_current_user)):
    with get_db_session() as db:
        if not delete_row(db, feedback, feedback_id, user["workspace_id"]):
            raise HTTPException(status_code=404, detail="Feedback not found")
        delete_entity_links(db, "feedback", feedback_id, user["workspace_id"])
    return MessageResponse(message="Feedback deleted successfully")
