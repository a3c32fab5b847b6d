"""
Content Routes - articles, posts, talks and other published work.

POST /content
GET /content - content_type / platform filters, newest first
GET /content/{content_id}
PUT /content/{content_id}
DELETE /content/{content_id}
"""

from fastapi import APIRouter, HTTPException, Depends, Query
from sqlalchemy import func, select
from typing import List, Optional

from careerhub.db.postgres import get_db_session, fetch_all
from careerhub.db.tables import content
from careerhub.core.auth import get_current_user
from careerhub.services.crud import (
    insert_row, require_row, update_row, delete_row, update_values, delete_entity_links
)
from careerhub.schemas.schemas import (
    ContentCreate, ContentUpdate, ContentResponse, ContentType, MessageResponse
)

router = APIRouter(prefix="/content", tags=["Content"])


@router.post("", response_model=ContentResponse, status_code=201)
async def create_content(item: ContentCreate, user: dict = Depends(get_current_user)):
    with get_db_session() as db:
        row = insert_row(db, content, user["workspace_id"], item.model_dump())
    return ContentResponse(**row)


@router.get("", response_model=List[ContentResponse])
async def list_content(
    content_type: Optional[ContentType] = Query(None),
    platform: Optional[str] = Query(None),
    user: dict = Depends(get_current_user)
):
    stmt = select(content).where(content.c.workspace_id == user["workspace_id"])
    if content_type:
        stmt = stmt.where(content.c.content_type == content_type.value)
    if platform:
        stmt = stmt.where(func.lower(content.c.platform) == platform.strip().lower())
    with get_db_session() as db:
        rows = fetch_all(db, stmt.order_by(content.c.publication_date.desc(), content.c.id.desc()))
    return [ContentResponse(**r) for r in rows]


@router.get("/{content_id}", response_model=ContentResponse)
async def get_content(content_id: int, user: dict = Depends(get_current_user)):
    with get_db_session() as db:
        row = require_row(db, content, content_id, user["workspace_id"], "Content")
    return ContentResponse(**row)


@router.put("/{content_id}", response_model=ContentResponse)
async def update_content(content_id: int, update: ContentUpdate, user: dict = Depends(get_current_user)):
    values = update_values(update, required=("title", "content_type", "publication_date"))
    with get_db_session() as db:
        row = update_row(db, content, content_id, user["workspace_id"], values)
    if row is None:
        raise HTTPException(status_code=404, detail="Content not found")
    return ContentResponse(**row)


@router.delete("/{content_id}", response_model=MessageResponse)
async def delete_content(content_id: int, user: dict = Depends(get_current_user)):
    with get_db_session() as db:
        if not delete_row(db, content, content_id, user["workspace_id"]):
            raise HTTPException(status_code=404, detail="Content not found")
        delete_entity_links(db, "content", content_id, user["workspace_id"])
    return MessageResponse(message="Content deleted successfully")
