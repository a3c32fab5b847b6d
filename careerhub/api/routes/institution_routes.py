"""
Institution Routes

POST /institutions - Add a school, employer or certifying body
GET /institutions - List institutions (optional type filter)
GET /institutions/{institution_id}
PUT /institutions/{institution_id}
DELETE /institutions/{institution_id}
"""

from fastapi import APIRouter, HTTPException, Depends, Query
from sqlalchemy import select
from typing import List, Optional

from careerhub.db.postgres import get_db_session, fetch_all
from careerhub.db.tables import institutions
from careerhub.core.auth import get_current_user
from careerhub.services.crud import (
    insert_row, require_row, update_row, delete_row, update_values, delete_entity_links
)
from careerhub.schemas.schemas import (
    InstitutionCreate, InstitutionUpdate, InstitutionResponse, InstitutionType, MessageResponse
)

router = APIRouter(prefix="/institutions", tags=["Institutions"])


@router.post("", response_model=InstitutionResponse, status_code=201)
async def create_institution(institution: InstitutionCreate, user: dict = Depends(get_current_user)):
    with get_db_session() as db:
        row = insert_row(db, institutions, user["workspace_id"], institution.model_dump())
    return InstitutionResponse(**row)


@router.get("", response_model=List[InstitutionResponse])
async def list_institutions(
    type: Optional[InstitutionType] = Query(None),
    user: dict = Depends(get_current_user)
):
    stmt = select(institutions).where(institutions.c.workspace_id == user["workspace_id"])
    if type:
        stmt = stmt.where(institutions.c.type == type.value)
    with get_db_session() as db:
        rows = fetch_all(db, stmt.order_by(institutions.c.start_date.desc(), institutions.c.name))
    return [InstitutionResponse(**r) for r in rows]


@router.get("/{institution_id}", response_model=InstitutionResponse)
async def get_institution(institution_id: int, user: dict = Depends(get_current_user)):
    with get_db_session() as db:
        row = require_row(db, institutions, institution_id, user["workspace_id"], "Institution")
    return InstitutionResponse(**row)


@router.put("/{institution_id}", response_model=InstitutionResponse)
async def update_institution(institution_id: int, update: InstitutionUpdate, user: dict = Depends(get_current_user)):
    values = update_values(update, required=("name", "type"))
    with get_db_session() as db:
        row = update_row(db, institutions, institution_id, user["workspace_id"], values)
    if row is None:
        raise HTTPException(status_code=404, detail="Institution not found")
    return InstitutionResponse(**row)


@router.delete("/{institution_id}", response_model=MessageResponse)
async def delete_institution(institution_id: int, user: dict = Depends(get_current_user)):
    with get_db_session() as db:
        if not delete_row(db, institutions, institution_id, user["workspace_id"]):
            raise HTTPException(status_code=404, detail="Institution not found")
        delete_entity_links(db, "institution", institution_id, user["workspace_id"])
    return MessageResponse(message="Institution deleted successfully")
