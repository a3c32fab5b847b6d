"""
Project Routes

POST /projects
GET /projects - optional status filter
GET /projects/{project_id}
PUT /projects/{project_id}
DELETE /projects/{project_id} - interactions keep their person, lose the project
"""

from fastapi import APIRouter, HTTPException, Depends, Query
from sqlalchemy import select, update as sql_update
from typing import List, Optional

from careerhub.db.postgres import get_db_session, fetch_all
from careerhub.db.tables import projects, interactions
from careerhub.core.auth import get_current_user
from careerhub.services.crud import (
    insert_row, require_row, update_row, delete_row, update_values, delete_entity_links
)
from careerhub.schemas.schemas import (
    ProjectCreate, ProjectUpdate, ProjectResponse, ProjectStatus, MessageResponse
)

router = APIRouter(prefix="/projects", tags=["Projects"])


@router.post("", response_model=ProjectResponse, status_code=201)
async def create_project(project: ProjectCreate, user: dict = Depends(get_current_user)):
    with get_db_session() as db:
        row = insert_row(db, projects, user["workspace_id"], project.model_dump())
    return ProjectResponse(**row)


@router.get("", response_model=List[ProjectResponse])
async def list_projects(
    status: Optional[ProjectStatus] = Query(None),
    user: dict = Depends(get_current_user)
):
    stmt = select(projects).where(projects.c.workspace_id == user["workspace_id"])
    if status:
        stmt = stmt.where(projects.c.status == status.value)
    with get_db_session() as db:
        rows = fetch_all(db, stmt.order_by(projects.c.start_date.desc(), projects.c.name))
    return [ProjectResponse(**r) for r in rows]


@router.get("/{project_id}", response_model=ProjectResponse)
async def get_project(project_id: int, user: dict = Depends(get_current_user)):
    with get_db_session() as db:
        row = require_row(db, projects, project_id, user["workspace_id"], "Project")
    return ProjectResponse(**row)


@router.put("/{project_id}", response_model=ProjectResponse)
async def update_project(project_id: int, update: ProjectUpdate, user: dict = Depends(get_current_user)):
    values = update_values(update, required=("name", "status"))
    with get_db_session() as db:
        row = update_row(db, projects, project_id, user["workspace_id"], values)
    if row is None:
        raise HTTPException(status_code=404, detail="Project not found")
    return ProjectResponse(**row)


@router.delete("/{project_id}", response_model=MessageResponse)
async def delete_project(project_id: int, user: dict = Depends(get_current_user)):
    with get_db_session() as db:
        require_row(db, projects, project_id, user["workspace_id"], "Project")
        db.execute(
            sql_update(interactions)
            .where(interactions.c.project_id == project_id)
            .values(project_id=None)
        )
        delete_row(db, projects, project_id, user["workspace_id"])
        delete_entity_links(db, "project", project_id, user["workspace_id"])
    return MessageResponse(message="Project deleted successfully")
