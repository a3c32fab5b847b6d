"""
Relationship Routes - typed edges between any two entities.

POST /relationships - Link two entities (both ends must exist in the workspace)
GET /relationships - Filter by source_type/source_id/target_type/target_id
GET /relationships/{relationship_id}
PUT /relationships/{relationship_id} - Only label and notes are editable
DELETE /relationships/{relationship_id}
"""

from fastapi import APIRouter, HTTPException, Depends, Query
from sqlalchemy import select
from typing import List, Optional

from careerhub.db.postgres import get_db_session, fetch_all
from careerhub.db.tables import relationships, ENTITY_TABLES
from careerhub.core.auth import get_current_user
from careerhub.services.crud import insert_row, require_row, update_row, delete_row, update_values
from careerhub.schemas.schemas import (
    RelationshipCreate, RelationshipUpdate, RelationshipResponse, EntityType, MessageResponse
)

router = APIRouter(prefix="/relationships", tags=["Relationships"])


def _check_endpoint(db, entity_type: str, entity_id: int, workspace_id: int) -> None:
    label = entity_type.capitalize()
    require_row(db, ENTITY_TABLES[entity_type], entity_id, workspace_id, label, status_code=400)


@router.post("", response_model=RelationshipResponse, status_code=201)
async def create_relationship(relationship: RelationshipCreate, user: dict = Depends(get_current_user)):
    if (relationship.source_type, relationship.source_id) == (relationship.target_type, relationship.target_id):
        raise HTTPException(status_code=400, detail="An entity cannot be related to itself")
    with get_db_session() as db:
        _check_endpoint(db, relationship.source_type, relationship.source_id, user["workspace_id"])
        _check_endpoint(db, relationship.target_type, relationship.target_id, user["workspace_id"])
        row = insert_row(db, relationships, user["workspace_id"], relationship.model_dump())
    return RelationshipResponse(**row)


@router.get("", response_model=List[RelationshipResponse])
async def list_relationships(
    source_type: Optional[EntityType] = Query(None),
    source_id: Optional[int] = Query(None),
    target_type: Optional[EntityType] = Query(None),
    target_id: Optional[int] = Query(None),
    user: dict = Depends(get_current_user)
):
    stmt = select(relationships).where(relationships.c.workspace_id == user["workspace_id"])
    if source_type:
        stmt = stmt.where(relationships.c.source_type == source_type.value)
    if source_id is not None:
        stmt = stmt.where(relationships.c.source_id == source_id)
    if target_type:
        stmt = stmt.where(relationships.c.target_type == target_type.value)
    if target_id is not None:
        stmt = stmt.where(relationships.c.target_id == target_id)
    with get_db_session() as db:
        rows = fetch_all(db, stmt.order_by(relationships.c.created_at.desc(), relationships.c.id.desc()))
    return [RelationshipResponse(**r) for r in rows]


@router.get("/{relationship_id}", response_model=RelationshipResponse)
async def get_relationship(relationship_id: int, user: dict = Depends(get_current_user)):
    with get_db_session() as db:
        row = require_row(db, relationships, relationship_id, user["workspace_id"], "Relationship")
    return RelationshipResponse(**row)


@router.put("/{relationship_id}", response_model=RelationshipResponse)
async def update_relationship(relationship_id: int, update: RelationshipUpdate, user: dict = Depends(get_current_user)):
    with get_db_session() as db:
        row = update_row(db, relationships, relationship_id, user["workspace_id"], update_values(update))
    if row is None:
        raise HTTPException(status_code=404, detail="Relationship not found")
    return RelationshipResponse(**row)


@router.delete("/{relationship_id}", response_model=MessageResponse)
async def delete_relationship(relationship_id: int, user: dict = Depends(get_current_user)):
    with get_db_session() as db:
        if not delete_row(db, relationships, relationship_id, user["workspace_id"]):
            raise HTTPException(status_code=404, detail="Relationship not found")
    return MessageResponse(message="Relationship deleted successfully")
