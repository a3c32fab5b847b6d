"""
View Definition Routes

GET /view-definitions - Presets and custom views for the workspace
POST /view-definitions - Create a custom view
GET /view-definitions/{view_id} - Get one view
DELETE /view-definitions/{view_id} - Delete a custom view (presets are fixed)
"""

import re
from fastapi import APIRouter, HTTPException, Depends
from sqlalchemy import select, update
from typing import List

from careerhub.db.postgres import get_db_session, fetch_all
from careerhub.db.tables import view_definitions, resume_variants
from careerhub.core.auth import get_current_user
from careerhub.services.crud import insert_row, require_row, delete_row
from careerhub.services.view_presets import SECTIONS
from careerhub.schemas.schemas import ViewDefinitionCreate, ViewDefinitionResponse, MessageResponse

router = APIRouter(prefix="/view-definitions", tags=["View Definitions"])


def slugify(name: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-") or "view"


def _unique_slug(db, workspace_id: int, name: str) -> str:
    taken = {
        r["slug"] for r in fetch_all(
            db, select(view_definitions.c.slug).where(view_definitions.c.workspace_id == workspace_id)
        )
    }
    base = slugify(name)
    slug, n = base, 2
    while slug in taken:
        slug = f"{base}-{n}"
        n += 1
    return slug


@router.get("", response_model=List[ViewDefinitionResponse])
async def list_view_definitions(user: dict = Depends(get_current_user)):
    stmt = (
        select(view_definitions)
        .where(view_definitions.c.workspace_id == user["workspace_id"])
        .order_by(view_definitions.c.is_preset.desc(), view_definitions.c.id)
    )
    with get_db_session() as db:
        rows = fetch_all(db, stmt)
    return [ViewDefinitionResponse(**r) for r in rows]


@router.post("", response_model=ViewDefinitionResponse, status_code=201)
async def create_view_definition(view: ViewDefinitionCreate, user: dict = Depends(get_current_user)):
    unknown = sorted(set(view.sections) - set(SECTIONS))
    if unknown:
        raise HTTPException(status_code=400, detail=f"Unknown sections: {', '.join(unknown)}")
    values = view.model_dump()
    with get_db_session() as db:
        values["slug"] = _unique_slug(db, user["workspace_id"], view.name)
        row = insert_row(db, view_definitions, user["workspace_id"], {**values, "is_preset": False})
    return ViewDefinitionResponse(**row)


@router.get("/{view_id}", response_model=ViewDefinitionResponse)
async def get_view_definition(view_id: int, user: dict = Depends(get_current_user)):
    with get_db_session() as db:
        row = require_row(db, view_definitions, view_id, user["workspace_id"], "View definition")
    return ViewDefinitionResponse(**row)


@router.delete("/{view_id}", response_model=MessageResponse)
async def delete_view_definition(view_id: int, user: dict = Depends(get_current_user)):
    """Delete a custom view. Variants using it fall back to showing every section."""
    with get_db_session() as db:
        row = require_row(db, view_definitions, view_id, user["workspace_id"], "View definition")
        if row["is_preset"]:
            raise HTTPException(status_code=400, detail="Preset view definitions cannot be deleted")
        db.execute(
            update(resume_variants)
            .where(resume_variants.c.view_definition_id == view_id)
            .values(view_definition_id=None)
        )
        delete_row(db, view_definitions, view_id, user["workspace_id"])
    return MessageResponse(message="View definition deleted successfully")
