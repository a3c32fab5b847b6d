"""
Share Link Routes

POST /share - Create a public link for a variant (optionally pinned to a snapshot)
GET /share - List links (optional variant_id filter)
PUT /share/{link_id} - Update label, expiry, password or live flag
POST /share/{link_id}/revoke - Revoke a link permanently
GET /share/view/{token} - Public: the shared resume as JSON

Public HTML page (mounted at the site root, outside /api):
GET /r/{token} - The shared resume as an HTML page
"""

import logging
from fastapi import APIRouter, HTTPException, Depends, Query
from fastapi.responses import HTMLResponse
from sqlalchemy import select
from typing import List, Optional

from careerhub.db.postgres import get_db_session, fetch_all
from careerhub.db.tables import public_share_links, resume_variants, version_snapshots
from careerhub.core.auth import get_current_user
from careerhub.services.crud import insert_row, require_row, update_row, update_values
from careerhub.services.export_service import render_template
from careerhub.services.share_service import (
    unique_token, password_hash_for, to_response, open_shared_resume
)
from careerhub.utils.dates import to_naive_utc
from careerhub.schemas.schemas import (
    ShareLinkCreate, ShareLinkUpdate, ShareLinkResponse, SharedResumeResponse
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/share", tags=["Share Links"])
public_router = APIRouter(tags=["Public"])


def _check_snapshot(db, snapshot_id: Optional[int], variant_id: int, workspace_id: int) -> None:
    if snapshot_id is None:
        return
    snapshot = require_row(db, version_snapshots, snapshot_id, workspace_id, "Snapshot", status_code=400)
    if snapshot["resume_variant_id"] != variant_id:
        raise HTTPException(status_code=400, detail="Snapshot does not belong to this variant")


def _require_link(db, link_id: int, workspace_id: int) -> dict:
    """Links are owned through their variant's workspace."""
    link = require_row(db, public_share_links, link_id, workspace_id, "Share link")
    require_row(db, resume_variants, link["resume_variant_id"], workspace_id, "Share link")
    return link


@router.post("", response_model=ShareLinkResponse, status_code=201)
async def create_share_link(link: ShareLinkCreate, user: dict = Depends(get_current_user)):
    ws = user["workspace_id"]
    with get_db_session() as db:
        require_row(db, resume_variants, link.resume_variant_id, ws, "Variant")
        _check_snapshot(db, link.snapshot_id, link.resume_variant_id, ws)
        row = insert_row(db, public_share_links, ws, {
            "resume_variant_id": link.resume_variant_id,
            "snapshot_id": link.snapshot_id,
            "token": unique_token(db),
            "label": link.label,
            "expires_at": to_naive_utc(link.expires_at),
            "password_hash": password_hash_for(link.password),
            "is_live": True,
            "is_revoked": False,
            "view_count": 0,
        })
    logger.info("Created share link %s for variant %s", row["id"], row["resume_variant_id"])
    return ShareLinkResponse(**to_response(row))


@router.get("", response_model=List[ShareLinkResponse])
async def list_share_links(
    variant_id: Optional[int] = Query(None),
    user: dict = Depends(get_current_user)
):
    stmt = (
        select(public_share_links)
        .select_from(public_share_links.join(
            resume_variants, public_share_links.c.resume_variant_id == resume_variants.c.id
        ))
        .where(resume_variants.c.workspace_id == user["workspace_id"])
    )
    if variant_id is not None:
        stmt = stmt.where(public_share_links.c.resume_variant_id == variant_id)
    with get_db_session() as db:
        rows = fetch_all(db, stmt.order_by(public_share_links.c.created_at.desc(), public_share_links.c.id.desc()))
    return [ShareLinkResponse(**to_response(r)) for r in rows]


@router.put("/{link_id}", response_model=ShareLinkResponse)
async def update_share_link(link_id: int, update: ShareLinkUpdate, user: dict = Depends(get_current_user)):
    """Update a link. An empty password removes password protection."""
    values = update_values(update, required=("is_live",))
    if "password" in values:
        values["password_hash"] = password_hash_for(values.pop("password"))
    if "expires_at" in values:
        values["expires_at"] = to_naive_utc(values["expires_at"])
    with get_db_session() as db:
        _require_link(db, link_id, user["workspace_id"])
        row = update_row(db, public_share_links, link_id, user["workspace_id"], values)
    return ShareLinkResponse(**to_response(row))


@router.post("/{link_id}/revoke", response_model=ShareLinkResponse)
async def revoke_share_link(link_id: int, user: dict = Depends(get_current_user)):
    with get_db_session() as db:
        _require_link(db, link_id, user["workspace_id"])
        row = update_row(db, public_share_links, link_id, user["workspace_id"], {"is_revoked": True})
    logger.info("Revoked share link %s", link_id)
    return ShareLinkResponse(**to_response(row))


@router.get("/view/{token}", response_model=SharedResumeResponse)
async def view_shared_resume(token: str, password: Optional[str] = Query(None)):
    with get_db_session() as db:
        shared = open_shared_resume(db, token, password)
    return SharedResumeResponse(**shared)


@public_router.get("/r/{token}", response_class=HTMLResponse)
async def public_resume_page(token: str, password: Optional[str] = Query(None)):
    try:
        with get_db_session() as db:
            shared = open_shared_resume(db, token, password)
    except HTTPException as e:
        page = render_template("share_error.html", status_code=e.status_code, message=e.detail)
        return HTMLResponse(content=page, status_code=e.status_code)
    return HTMLResponse(content=shared["resume_html"])
