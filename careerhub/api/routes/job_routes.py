"""
Job Routes

POST /jobs - Record a position held
GET /jobs - List positions, newest first (optional is_current filter)
GET /jobs/{job_id} - Get a position
PUT /jobs/{job_id} - Update a position
DELETE /jobs/{job_id} - Delete a position
"""

from fastapi import APIRouter, HTTPException, Depends, Query
from sqlalchemy import delete, select
from typing import List, Optional

from careerhub.db.postgres import get_db_session, fetch_all
from careerhub.db.tables import jobs, compensation
from careerhub.core.auth import get_current_user
from careerhub.services.crud import (
    insert_row, require_row, update_row, delete_row, update_values, delete_entity_links
)
from careerhub.schemas.schemas import JobCreate, JobUpdate, JobResponse, MessageResponse

router = APIRouter(prefix="/jobs", tags=["Jobs"])


@router.post("", response_model=JobResponse, status_code=201)
async def create_job(job: JobCreate, user: dict = Depends(get_current_user)):
    if job.start_date and job.end_date and job.end_date < job.start_date:
        raise HTTPException(status_code=400, detail="end_date must not be before start_date")
    with get_db_session() as db:
        row = insert_row(db, jobs, user["workspace_id"], job.model_dump())
    return JobResponse(**row)


@router.get("", response_model=List[JobResponse])
async def list_jobs(
    is_current: Optional[bool] = Query(None),
    user: dict = Depends(get_current_user)
):
    stmt = select(jobs).where(jobs.c.workspace_id == user["workspace_id"])
    if is_current is not None:
        stmt = stmt.where(jobs.c.is_current == is_current)
    with get_db_session() as db:
        rows = fetch_all(db, stmt.order_by(jobs.c.start_date.desc(), jobs.c.id.desc()))
    return [JobResponse(**r) for r in rows]


@router.get("/{job_id}", response_model=JobResponse)
async def get_job(job_id: int, user: dict = Depends(get_current_user)):
    with get_db_session() as db:
        row = require_row(db, jobs, job_id, user["workspace_id"], "Job")
    return JobResponse(**row)


@router.put("/{job_id}", response_model=JobResponse)
async def update_job(job_id: int, update: JobUpdate, user: dict = Depends(get_current_user)):
    values = update_values(update, required=("title", "company", "is_current"))
    with get_db_session() as db:
        row = update_row(db, jobs, job_id, user["workspace_id"], values)
    if row is None:
        raise HTTPException(status_code=404, detail="Job not found")
    return JobResponse(**row)


@router.delete("/{job_id}", response_model=MessageResponse)
async def delete_job(job_id: int, user: dict = Depends(get_current_user)):
    """Delete a position. Its compensation records go with it."""
    with get_db_session() as db:
        require_row(db, jobs, job_id, user["workspace_id"], "Job")
        db.execute(delete(compensation).where(compensation.c.job_id == job_id))
        delete_row(db, jobs, job_id, user["workspace_id"])
        delete_entity_links(db, "job", job_id, user["workspace_id"])
    return MessageResponse(message="Job deleted successfully")
