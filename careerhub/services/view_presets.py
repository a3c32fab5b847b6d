"""
View definition presets - which resume sections a variant renders.

Seeded into every new workspace. Each preset maps a section name to
{"visible": bool, "max_items": int | None}; sections missing from a
definition are treated as visible.
"""

from typing import Optional

from sqlalchemy import insert, select

from careerhub.db.postgres import fetch_all
from careerhub.db.tables import view_definitions

SECTIONS = [
    "basics", "summary", "work", "education", "skills", "projects",
    "certifications", "publications", "awards", "volunteer", "languages", "interests",
]

_HIDDEN_BY_DEFAULT = {"publications", "volunteer", "interests"}


def _sections(**overrides) -> dict:
    sections = {name: {"visible": name not in _HIDDEN_BY_DEFAULT, "max_items": None} for name in SECTIONS}
    for name, config in overrides.items():
        sections[name] = {"visible": True, "max_items": None, **config}
    return sections


PRESETS = [
    {
        "slug": "linkedin-style",
        "name": "LinkedIn Style",
        "description": "Comprehensive professional resume similar to LinkedIn profile format",
        "category": "professional",
        "sections": _sections(volunteer={}, interests={}),
        "formatting": {"date_format": "monthYear", "include_urls": True, "include_location": True},
    },
    {
        "slug": "long-form-cv",
        "name": "Long-Form CV",
        "description": "Comprehensive curriculum vitae with complete history",
        "category": "academic",
        "sections": _sections(publications={}, volunteer={}, interests={}),
        "formatting": {"date_format": "monthYear", "include_urls": True, "include_location": True},
    },
    {
        "slug": "one-page-executive",
        "name": "One-Page Executive",
        "description": "Condensed summary of recent roles for senior positions",
        "category": "executive",
        "sections": _sections(
            work={"max_items": 4},
            education={"max_items": 2},
            skills={"max_items": 12},
            projects={"visible": False},
            certifications={"max_items": 3},
            languages={"visible": False},
        ),
        "formatting": {"date_format": "yearOnly", "include_urls": False, "include_location": True},
    },
    {
        "slug": "media-kit",
        "name": "Media Kit",
        "description": "Speaker and press profile emphasising publications and awards",
        "category": "media",
        "sections": _sections(
            work={"max_items": 3},
            education={"visible": False},
            skills={"max_items": 8},
            publications={},
        ),
        "formatting": {"date_format": "yearOnly", "include_urls": True, "include_location": False},
    },
]


def seed_view_presets(db, workspace_id: int) -> int:
    """Insert any preset missing from the workspace. Returns how many were added."""
    existing = {
        r["slug"] for r in fetch_all(
            db, select(view_definitions.c.slug).where(view_definitions.c.workspace_id == workspace_id)
        )
    }
    added = 0
    for preset in PRESETS:
        if preset["slug"] in existing:
            continue
        db.execute(insert(view_definitions).values(workspace_id=workspace_id, is_preset=True, **preset))
        added += 1
    return added


def visible_sections(definition: Optional[dict]) -> dict:
    """Section name -> max_items (None for unlimited), for visible sections only."""
    configured = (definition or {}).get("sections") or {}
    result = {}
    for name in SECTIONS:
        config = configured.get(name, {"visible": True})
        if config.get("visible", True):
            result[name] = config.get("max_items")
    return result
