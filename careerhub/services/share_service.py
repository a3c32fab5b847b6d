"""
Share Links - public, revocable URLs for a resume variant.

A link is viewable while it is live, not revoked and not expired. An
optional password is stored as a bcrypt hash. Every successful view bumps
view_count and last_viewed_at.
"""

import logging
import secrets
import string
from typing import Optional

from fastapi import HTTPException
from sqlalchemy import select, update

from careerhub.core.auth import hash_password, verify_password
from careerhub.core.config import get_settings
from careerhub.db.postgres import fetch_one
from careerhub.db.tables import public_share_links, resume_variants
from careerhub.services.export_service import to_html
from careerhub.services.resume_service import resolve_resume_data
from careerhub.utils.dates import utcnow

logger = logging.getLogger(__name__)

settings = get_settings()

TOKEN_LENGTH = 16
TOKEN_ALPHABET = string.ascii_letters + string.digits


def generate_token() -> str:
    return "".join(secrets.choice(TOKEN_ALPHABET) for _ in range(TOKEN_LENGTH))


def unique_token(db) -> str:
    while True:
        token = generate_token()
        if fetch_one(db, select(public_share_links.c.id).where(public_share_links.c.token == token)) is None:
            return token


def share_url(token: str) -> str:
    return f"{settings.public_base_url.rstrip('/')}/r/{token}"


def password_hash_for(password: Optional[str]) -> Optional[str]:
    return hash_password(password) if password else None


def to_response(link: dict) -> dict:
    """Row -> API shape: hides the hash, adds share_url and has_password."""
    data = {k: v for k, v in link.items() if k not in ("password_hash", "workspace_id")}
    data["share_url"] = share_url(link["token"])
    data["has_password"] = bool(link["password_hash"])
    return data


def open_shared_resume(db, token: str, password: Optional[str] = None) -> dict:
    """
    Validate a public view and render the resume.

    404 unknown token, 410 revoked/not live/expired, 401 password required or
    wrong. Returns {label, variant_name, resume_html}.
    """
    link = fetch_one(db, select(public_share_links).where(public_share_links.c.token == token))
    if link is None:
        raise HTTPException(status_code=404, detail="Share link not found")
    if link["is_revoked"] or not link["is_live"]:
        raise HTTPException(status_code=410, detail="Share link is no longer available")
    if link["expires_at"] and link["expires_at"] <= utcnow():
        raise HTTPException(status_code=410, detail="Share link has expired")
    if link["password_hash"]:
        if not password:
            raise HTTPException(status_code=401, detail="Password required")
        if not verify_password(password, link["password_hash"]):
            raise HTTPException(status_code=401, detail="Invalid password")

    variant = fetch_one(db, select(resume_variants).where(resume_variants.c.id == link["resume_variant_id"]))
    if variant is None:
        raise HTTPException(status_code=404, detail="Share link not found")

    data = resolve_resume_data(db, variant["workspace_id"], variant, link["snapshot_id"])
    db.execute(
        update(public_share_links)
        .where(public_share_links.c.id == link["id"])
        .values(view_count=public_share_links.c.view_count + 1, last_viewed_at=utcnow())
    )
    logger.info("Share link %s viewed", link["id"])
    return {"label": link["label"], "variant_name": variant["name"], "resume_html": to_html(data)}
