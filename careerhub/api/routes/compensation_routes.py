"""
Compensation Routes

POST /compensation - Record pay for a job
GET /compensation - optional job_id filter, includes job title and company
GET /compensation/{compensation_id}
PUT /compensation/{compensation_id}
DELETE /compensation/{compensation_id}
"""

from fastapi import APIRouter, HTTPException, Depends, Query
from sqlalchemy import select
from typing import List, Optional

from careerhub.db.postgres import get_db_session, fetch_all, fetch_one
from careerhub.db.tables import compensation, jobs
from careerhub.core.auth import get_current_user
from careerhub.services.crud import insert_row, require_row, update_row, delete_row, update_values
from careerhub.schemas.schemas import (
    CompensationCreate, CompensationUpdate, CompensationResponse, MessageResponse
)

router = APIRouter(prefix="/compensation", tags=["Compensation"])


def _with_job(workspace_id: int):
    return (
        select(
            compensation,
            jobs.c.title.label("job_title"),
            jobs.c.company.label("job_company"),
        )
        .select_from(compensation.outerjoin(jobs, compensation.c.job_id == jobs.c.id))
        .where(compensation.c.workspace_id == workspace_id)
    )


@router.post("", response_model=CompensationResponse, status_code=201)
async def create_compensation(item: CompensationCreate, user: dict = Depends(get_current_user)):
    values = item.model_dump()
    values["currency"] = values["currency"].upper()
    with get_db_session() as db:
        require_row(db, jobs, item.job_id, user["workspace_id"], "Job", status_code=400)
        row = insert_row(db, compensation, user["workspace_id"], values)
        row = fetch_one(db, _with_job(user["workspace_id"]).where(compensation.c.id == row["id"]))
    return CompensationResponse(**row)


@router.get("", response_model=List[CompensationResponse])
async def list_compensation(
    job_id: Optional[int] = Query(None),
    user: dict = Depends(get_current_user)
):
    stmt = _with_job(user["workspace_id"])
    if job_id is not None:
        stmt = stmt.where(compensation.c.job_id == job_id)
    with get_db_session() as db:
        rows = fetch_all(db, stmt.order_by(compensation.c.effective_date.desc()))
    return [CompensationResponse(**r) for r in rows]


@router.get("/{compensation_id}", response_model=CompensationResponse)
async def get_compensation(compensation_id: int, user: dict = Depends(get_current_user)):
    with get_db_session() as db:
        row = fetch_one(db, _with_job(user["workspace_id"]).where(compensation.c.id == compensation_id))
    if row is None:
        raise HTTPException(status_code=404, detail="Compensation not found")
    return CompensationResponse(**row)


@router.put("/{compensation_id}", response_model=CompensationResponse)
async def update_compensation(compensation_id: int, update: CompensationUpdate, user: dict = Depends(get_current_user)):
    values = update_values(update, required=("job_id", "base_salary", "currency", "effective_date"))
    if values.get("currency"):
        values["currency"] = values["currency"].upper()
    with get_db_session() as db:
        if "job_id" in values:
            require_row(db, jobs, values["job_id"], user["workspace_id"], "Job", status_code=400)
        if update_row(db, compensation, compensation_id, user["workspace_id"], values) is None:
            raise HTTPException(status_code=404, detail="Compensation not found")
        row = fetch_one(db, _with_job(user["workspace_id"]).where(compensation.c.id == compensation_id))
    return CompensationResponse(**row)


@router.delete("/{compensation_id}", response_model=MessageResponse)
async def delete_compensation(compensation_id: int, user: dict = Depends(get_current_user)):
    with get_db_session() as db:
        if not delete_row(db, compensation, compensation_id, user["workspace_id"]):
            raise HTTPException(status_code=404, detail="Compensation not found")
    return MessageResponse(message="Compensation deleted successfully")
