"""
Version Snapshot Routes

POST /snapshots - Freeze a variant's resume data as the next version
GET /snapshots - List snapshots (optional variant_id filter)
GET /snapshots/{snapshot_id} - Get a snapshot with its data
DELETE /snapshots/{snapshot_id} - Delete a snapshot
POST /snapshots/{snapshot_id}/restore - Save an old version as the newest one
"""

import logging
from fastapi import APIRouter, HTTPException, Depends, Query
from sqlalchemy import func, select, update
from typing import List, Optional

from careerhub.db.postgres import get_db_session, fetch_all
from careerhub.db.tables import version_snapshots, resume_variants, public_share_links
from careerhub.core.auth import get_current_user
from careerhub.services.crud import insert_row, require_row, delete_row
from careerhub.services.resume_service import build_resume_data
from careerhub.schemas.schemas import SnapshotCreate, SnapshotSummary, SnapshotResponse, MessageResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/snapshots", tags=["Snapshots"])


def _next_version(db, variant_id: int) -> int:
    current = db.execute(
        select(func.max(version_snapshots.c.version_number))
        .where(version_snapshots.c.resume_variant_id == variant_id)
    ).scalar()
    return (current or 0) + 1


def save_snapshot(db, workspace_id: int, variant_id: int, data: dict,
                  label: Optional[str] = None, notes: Optional[str] = None) -> dict:
    row = insert_row(db, version_snapshots, workspace_id, {
        "resume_variant_id": variant_id,
        "version_number": _next_version(db, variant_id),
        "label": label,
        "notes": notes,
        "snapshot_data": data,
    })
    logger.info("Saved snapshot v%s for variant %s", row["version_number"], variant_id)
    return row


@router.post("", response_model=SnapshotResponse, status_code=201)
async def create_snapshot(snapshot: SnapshotCreate, user: dict = Depends(get_current_user)):
    """
    Create the next version of a variant.

    Without snapshot_data the variant's current resume data is captured.
    """
    ws = user["workspace_id"]
    with get_db_session() as db:
        variant = require_row(db, resume_variants, snapshot.resume_variant_id, ws, "Variant")
        if snapshot.snapshot_data is None:
            data = build_resume_data(db, ws, variant)
        else:
            data = snapshot.snapshot_data.model_dump(exclude_unset=True)
        row = save_snapshot(db, ws, variant["id"], data, snapshot.label, snapshot.notes)
    return SnapshotResponse(**row)


@router.get("", response_model=List[SnapshotSummary])
async def list_snapshots(
    variant_id: Optional[int] = Query(None),
    user: dict = Depends(get_current_user)
):
    stmt = select(version_snapshots).where(version_snapshots.c.workspace_id == user["workspace_id"])
    if variant_id is not None:
        stmt = stmt.where(version_snapshots.c.resume_variant_id == variant_id)
    stmt = stmt.order_by(version_snapshots.c.resume_variant_id, version_snapshots.c.version_number.desc())
    with get_db_session() as db:
        rows = fetch_all(db, stmt)
    return [SnapshotSummary(**r) for r in rows]


@router.get("/{snapshot_id}", response_model=SnapshotResponse)
async def get_snapshot(snapshot_id: int, user: dict = Depends(get_current_user)):
    with get_db_session() as db:
        row = require_row(db, version_snapshots, snapshot_id, user["workspace_id"], "Snapshot")
    return SnapshotResponse(**row)


@router.delete("/{snapshot_id}", response_model=MessageResponse)
async def delete_snapshot(snapshot_id: int, user: dict = Depends(get_current_user)):
    """Delete a snapshot. Share links pinned to it fall back to live data."""
    with get_db_session() as db:
        require_row(db, version_snapshots, snapshot_id, user["workspace_id"], "Snapshot")
        db.execute(
            update(public_share_links)
            .where(public_share_links.c.snapshot_id == snapshot_id)
            .values(snapshot_id=None)
        )
        delete_row(db, version_snapshots, snapshot_id, user["workspace_id"])
    return MessageResponse(message="Snapshot deleted successfully")


@router.post("/{snapshot_id}/restore", response_model=SnapshotResponse, status_code=201)
async def restore_snapshot(snapshot_id: int, user: dict = Depends(get_current_user)):
    ws = user["workspace_id"]
    with get_db_session() as db:
        old = require_row(db, version_snapshots, snapshot_id, ws, "Snapshot")
        version = old["version_number"]
        notes = f"Restored from version {version}"
        if old["label"]:
            notes += f" ({old['label']})"
        row = save_snapshot(db, ws, old["resume_variant_id"], old["snapshot_data"],
                            label=f"Restored from v{version}", notes=notes)
    return SnapshotResponse(**row)
