"""
People Routes

POST /people - Add a contact
GET /people - List contacts (search on name, company, role, email)
GET /people/{person_id} - Get a contact
PUT /people/{person_id} - Update a contact
DELETE /people/{person_id} - Delete a contact
"""

from fastapi import APIRouter, HTTPException, Depends, Query
from sqlalchemy import delete, func, or_, select, update
from typing import List, Optional

from careerhub.db.postgres import get_db_session, fetch_all
from careerhub.db.tables import people, interactions, feedback
from careerhub.core.auth import get_current_user
from careerhub.services.crud import (
    insert_row, require_row, update_row, delete_row, update_values, like_pattern,
    LIKE_ESCAPE,
    delete_entity_links,
)
from careerhub.schemas.schemas import PersonCreate, PersonUpdate, PersonResponse, MessageResponse

router = APIRouter(prefix="/people", tags=["People"])


@router.post("", response_model=PersonResponse, status_code=201)
async def create_person(person: PersonCreate, user: dict = Depends(get_current_user)):
    with get_db_session() as db:
        row = insert_row(db, people, user["workspace_id"], person.model_dump())
    return PersonResponse(**row)


@router.get("", response_model=List[PersonResponse])
async def list_people(
    search: Optional[str] = Query(None, description="Match name, company, role or email"),
    user: dict = Depends(get_current_user)
):
    """List contacts alphabetically."""
    stmt = select(people).where(people.c.workspace_id == user["workspace_id"])
    if search:
        pattern = like_pattern(search)
        stmt = stmt.where(or_(
            func.lower(people.c.name).like(pattern, escape=LIKE_ESCAPE),
            func.lower(people.c.company).like(pattern, escape=LIKE_ESCAPE),
            func.lower(people.c.role).like(pattern, escape=LIKE_ESCAPE),
            func.lower(people.c.email).like(pattern, escape=LIKE_ESCAPE),
        ))
    with get_db_session() as db:
        rows = fetch_all(db, stmt.order_by(people.c.name))
    return [PersonResponse(**r) for r in rows]


@router.get("/{person_id}", response_model=PersonResponse)
async def get_person(person_id: int, user: dict = Depends(get_current_user)):
    with get_db_session() as db:
        row = require_row(db, people, person_id, user["workspace_id"], "Person")
    return PersonResponse(**row)


@router.put("/{person_id}", response_model=PersonResponse)
async def update_person(person_id: int, update: PersonUpdate, user: dict = Depends(get_current_user)):
    values = update_values(update, required=("name",))
    with get_db_session() as db:
        row = update_row(db, people, person_id, user["workspace_id"], values)
    if row is None:
        raise HTTPException(status_code=404, detail="Person not found")
    return PersonResponse(**row)


@router.delete("/{person_id}", response_model=MessageResponse)
async def delete_person(person_id: int, user: dict = Depends(get_current_user)):
    """Delete a contact with their interactions; feedback they gave is kept unattributed."""
    with get_db_session() as db:
        require_row(db, people, person_id, user["workspace_id"], "Person")
        db.execute(delete(interactions).where(interactions.c.person_id == person_id))
        db.execute(update(feedback).where(feedback.c.person_id == person_id).values(person_id=None))
        delete_row(db, people, person_id, user["workspace_id"])
        delete_entity_links(db, "person", person_id, user["workspace_id"])
    return MessageResponse(message="Person deleted successfully")
