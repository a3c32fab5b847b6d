"""
Resume Variant Routes

POST /variants - Create a variant of the profile
GET /variants - List variants (primary first)
GET /variants/{variant_id} - Variant with its snapshots and view definition
PUT /variants/{variant_id} - Update a variant
DELETE /variants/{variant_id} - Delete a variant with its snapshots and share links
POST /variants/{variant_id}/duplicate - Copy a variant under a new name
POST /variants/{variant_id}/set-primary - Make a variant the profile's primary

A profile has at most one primary variant.
"""

import logging
from fastapi import APIRouter, HTTPException, Depends, Query
from sqlalchemy import delete, select, update
from typing import List, Optional

from careerhub.db.postgres import get_db_session, fetch_all, fetch_one
from careerhub.db.tables import (
    profiles, resume_variants, view_definitions, version_snapshots, public_share_links
)
from careerhub.core.auth import get_current_user
from careerhub.services.crud import insert_row, require_row, get_row, update_row, delete_row, update_values
from careerhub.services.resume_service import get_default_profile
from careerhub.schemas.schemas import (
    VariantCreate, VariantUpdate, VariantDuplicate, VariantResponse, VariantDetailResponse,
    SnapshotSummary, ViewDefinitionResponse, SetPrimaryResponse, MessageResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/variants", tags=["Resume Variants"])

VARIANT_FIELDS = ("profile_id", "name", "description", "target_role", "view_definition_id", "is_primary")


def require_variant(db, variant_id: int, workspace_id: int) -> dict:
    return require_row(db, resume_variants, variant_id, workspace_id, "Variant")


def _check_view_definition(db, view_definition_id: Optional[int], workspace_id: int) -> None:
    if view_definition_id is not None:
        require_row(db, view_definitions, view_definition_id, workspace_id, "View definition", status_code=400)


def _current_primary(db, profile_id: int, exclude_id: Optional[int] = None) -> Optional[dict]:
    stmt = select(resume_variants).where(
        resume_variants.c.profile_id == profile_id,
        resume_variants.c.is_primary.is_(True),
    )
    if exclude_id is not None:
        stmt = stmt.where(resume_variants.c.id != exclude_id)
    return fetch_one(db, stmt.limit(1))


def _clear_primary(db, profile_id: int, keep_id: Optional[int] = None) -> None:
    stmt = update(resume_variants).where(
        resume_variants.c.profile_id == profile_id,
        resume_variants.c.is_primary.is_(True),
    )
    if keep_id is not None:
        stmt = stmt.where(resume_variants.c.id != keep_id)
    db.execute(stmt.values(is_primary=False))


@router.post("", response_model=VariantResponse, status_code=201)
async def create_variant(variant: VariantCreate, user: dict = Depends(get_current_user)):
    ws = user["workspace_id"]
    values = variant.model_dump()
    with get_db_session() as db:
        if values["profile_id"] is None:
            profile = get_default_profile(db, ws)
            if profile is None:
                raise HTTPException(status_code=400, detail="No profile found")
            values["profile_id"] = profile["id"]
        else:
            require_row(db, profiles, values["profile_id"], ws, "Profile", status_code=400)
        _check_view_definition(db, values["view_definition_id"], ws)

        if values["is_primary"]:
            _clear_primary(db, values["profile_id"])
        row = insert_row(db, resume_variants, ws, values)

    logger.info("Created resume variant %s (%s)", row["id"], row["name"])
    return VariantResponse(**row)


@router.get("", response_model=List[VariantResponse])
async def list_variants(
    profile_id: Optional[int] = Query(None),
    user: dict = Depends(get_current_user)
):
    stmt = select(resume_variants).where(resume_variants.c.workspace_id == user["workspace_id"])
    if profile_id is not None:
        stmt = stmt.where(resume_variants.c.profile_id == profile_id)
    stmt = stmt.order_by(resume_variants.c.is_primary.desc(), resume_variants.c.updated_at.desc(),
                         resume_variants.c.id.desc())
    with get_db_session() as db:
        rows = fetch_all(db, stmt)
    return [VariantResponse(**r) for r in rows]


@router.get("/{variant_id}", response_model=VariantDetailResponse)
async def get_variant(variant_id: int, user: dict = Depends(get_current_user)):
    ws = user["workspace_id"]
    with get_db_session() as db:
        variant = require_variant(db, variant_id, ws)
        snapshots = fetch_all(db, (
            select(version_snapshots)
            .where(version_snapshots.c.resume_variant_id == variant_id)
            .order_by(version_snapshots.c.version_number.desc())
        ))
        view = None
        if variant["view_definition_id"]:
            view = get_row(db, view_definitions, variant["view_definition_id"], ws)
    return VariantDetailResponse(
        variant=VariantResponse(**variant),
        snapshots=[SnapshotSummary(**s) for s in snapshots],
        view_definition=ViewDefinitionResponse(**view) if view else None,
    )


@router.put("/{variant_id}", response_model=VariantResponse)
async def update_variant(variant_id: int, update: VariantUpdate, user: dict = Depends(get_current_user)):
    ws = user["workspace_id"]
    values = update_values(update, required=("name", "is_primary"))
    with get_db_session() as db:
        variant = require_variant(db, variant_id, ws)
        _check_view_definition(db, values.get("view_definition_id"), ws)
        if values.get("is_primary"):
            _clear_primary(db, variant["profile_id"], keep_id=variant_id)
        row = update_row(db, resume_variants, variant_id, ws, values)
    return VariantResponse(**row)


@router.delete("/{variant_id}", response_model=MessageResponse)
async def delete_variant(variant_id: int, user: dict = Depends(get_current_user)):
    ws = user["workspace_id"]
    with get_db_session() as db:
        require_variant(db, variant_id, ws)
        db.execute(delete(public_share_links).where(public_share_links.c.resume_variant_id == variant_id))
        db.execute(delete(version_snapshots).where(version_snapshots.c.resume_variant_id == variant_id))
        delete_row(db, resume_variants, variant_id, ws)
    logger.info("Deleted resume variant %s", variant_id)
    return MessageResponse(message="Variant deleted successfully")


@router.post("/{variant_id}/duplicate", response_model=VariantResponse, status_code=201)
async def duplicate_variant(variant_id: int, request: VariantDuplicate, user: dict = Depends(get_current_user)):
    """Copy a variant. The copy is never primary."""
    ws = user["workspace_id"]
    with get_db_session() as db:
        source = require_variant(db, variant_id, ws)
        values = {field: source[field] for field in VARIANT_FIELDS}
        values.update(name=request.new_name, is_primary=False)
        row = insert_row(db, resume_variants, ws, values)
    return VariantResponse(**row)


@router.post("/{variant_id}/set-primary", response_model=SetPrimaryResponse)
async def set_primary(variant_id: int, user: dict = Depends(get_current_user)):
    ws = user["workspace_id"]
    with get_db_session() as db:
        variant = require_variant(db, variant_id, ws)
        previous = _current_primary(db, variant["profile_id"], exclude_id=variant_id)
        _clear_primary(db, variant["profile_id"], keep_id=variant_id)
        row = update_row(db, resume_variants, variant_id, ws, {"is_primary": True})
        if previous:
            previous = get_row(db, resume_variants, previous["id"], ws)
    return SetPrimaryResponse(
        variant=VariantResponse(**row),
        previous_primary=VariantResponse(**previous) if previous else None,
    )
