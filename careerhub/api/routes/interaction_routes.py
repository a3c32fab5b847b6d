"""
Interaction Routes

POST /interactions - Log a meeting, call, email... with a person
GET /interactions - List interactions (person_id, project_id, interaction_type filters)
GET /interactions/{interaction_id}
PUT /interactions/{interaction_id}
DELETE /interactions/{interaction_id}

Logging an interaction moves the person's last_contacted_at forward.
"""

from fastapi import APIRouter, HTTPException, Depends, Query
from sqlalchemy import select, update as sql_update
from typing import List, Optional

from careerhub.db.postgres import get_db_session, fetch_all, fetch_one
from careerhub.db.tables import interactions, people, projects
from careerhub.core.auth import get_current_user
from careerhub.services.crud import insert_row, require_row, update_row, delete_row, update_values
from careerhub.schemas.schemas import (
    InteractionCreate, InteractionUpdate, InteractionResponse, InteractionType, MessageResponse
)

router = APIRouter(prefix="/interactions", tags=["Interactions"])


def _with_names(workspace_id: int):
    return (
        select(
            interactions,
            people.c.name.label("person_name"),
            projects.c.name.label("project_name"),
        )
        .select_from(
            interactions
            .outerjoin(people, interactions.c.person_id == people.c.id)
            .outerjoin(projects, interactions.c.project_id == projects.c.id)
        )
        .where(interactions.c.workspace_id == workspace_id)
    )


def _check_references(db, values: dict, workspace_id: int) -> None:
    if values.get("person_id") is not None:
        require_row(db, people, values["person_id"], workspace_id, "Person", status_code=400)
    if values.get("project_id") is not None:
        require_row(db, projects, values["project_id"], workspace_id, "Project", status_code=400)


def _touch_last_contacted(db, person_id: int, interaction_date) -> None:
    if interaction_date is None:
        return
    person = fetch_one(db, select(people.c.last_contacted_at).where(people.c.id == person_id))
    if person and (person["last_contacted_at"] is None or person["last_contacted_at"] < interaction_date):
        db.execute(
            sql_update(people)
            .where(people.c.id == person_id)
            .values(last_contacted_at=interaction_date)
        )


def _load(db, interaction_id: int, workspace_id: int) -> Optional[dict]:
    return fetch_one(db, _with_names(workspace_id).where(interactions.c.id == interaction_id))


@router.post("", response_model=InteractionResponse, status_code=201)
async def create_interaction(interaction: InteractionCreate, user: dict = Depends(get_current_user)):
    values = interaction.model_dump()
    with get_db_session() as db:
        _check_references(db, values, user["workspace_id"])
        row = insert_row(db, interactions, user["workspace_id"], values)
        _touch_last_contacted(db, row["person_id"], row["interaction_date"])
        row = _load(db, row["id"], user["workspace_id"])
    return InteractionResponse(**row)


@router.get("", response_model=List[InteractionResponse])
async def list_interactions(
    person_id: Optional[int] = Query(None),
    project_id: Optional[int] = Query(None),
    interaction_type: Optional[InteractionType] = Query(None),
    user: dict = Depends(get_current_user)
):
    """List interactions, most recent first, with person and project names."""
    stmt = _with_names(user["workspace_id"])
    if person_id is not None:
        stmt = stmt.where(interactions.c.person_id == person_id)
    if project_id is not None:
        stmt = stmt.where(interactions.c.project_id == project_id)
    if interaction_type:
        stmt = stmt.where(interactions.c.interaction_type == interaction_type.value)
    with get_db_session() as db:
        rows = fetch_all(db, stmt.order_by(interactions.c.interaction_date.desc(), interactions.c.id.desc()))
    return [InteractionResponse(**r) for r in rows]


@router.get("/{interaction_id}", response_model=InteractionResponse)
async def get_interaction(interaction_id: int, user: dict = Depends(get_current_user)):
    with get_db_session() as db:
        row = _load(db, interaction_id, user["workspace_id"])
    if row is None:
        raise HTTPException(status_code=404, detail="Interaction not found")
    return InteractionResponse(**row)


@router.put("/{interaction_id}", response_model=InteractionResponse)
async def update_interaction(interaction_id: int, update: InteractionUpdate, user: dict = Depends(get_current_user)):
    values = update_values(update, required=("person_id",))
    with get_db_session() as db:
        _check_references(db, values, user["workspace_id"])
        row = update_row(db, interactions, interaction_id, user["workspace_id"], values)
        if row is None:
            raise HTTPException(status_code=404, detail="Interaction not found")
        _touch_last_contacted(db, row["person_id"], row["interaction_date"])
        row = _load(db, interaction_id, user["workspace_id"])
    return InteractionResponse(**row)


@router.delete("/{interaction_id}", response_model=MessageResponse)
async def delete_interaction(interaction_id: int, user: dict = Depends(get_current_user)):
    with get_db_session() as db:
        if not delete_row(db, interactions, interaction_id, user["workspace_id"]):
            raise HTTPException(status_code=404, detail="Interaction not found")
    return MessageResponse(message="Interaction deleted successfully")
