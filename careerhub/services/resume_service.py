"""
Resume Service - assembles resume data from the profile and career records.

Resume data is JSON-Resume shaped:
{
  "basics": {name, label, email, phone, url, summary, location, profiles},
  "work": [...], "education": [...], "skills": [...], "projects": [...],
  "certifications": [...], "publications": [...], "awards": [...],
  "variant": {name, target_role},
  "meta": {view_definition, formatting}
}
Dates are ISO strings so the same dict can be stored as a snapshot.
"""

import logging
from typing import Dict, List, Optional

from fastapi import HTTPException
from sqlalchemy import delete, select

from careerhub.db.postgres import fetch_all, fetch_one
from careerhub.db.tables import (
    profiles, work_experiences, education_entries, skills, projects,
    learning, content, achievements, jobs, view_definitions, version_snapshots,
)
from careerhub.services.crud import insert_row
from careerhub.services.view_presets import visible_sections

logger = logging.getLogger(__name__)

DEFAULT_FORMATTING = {"date_format": "monthYear", "include_urls": True, "include_location": True}

STUDY_TYPES = {
    "degree": "Bachelor",
    "certification": "Certification",
    "course": "Course",
    "workshop": "Workshop",
    "conference": "Conference",
}


def _iso(value) -> Optional[str]:
    return value.isoformat() if value else None


def normalize(value: Optional[str]) -> str:
    """Case and whitespace-insensitive comparison key."""
    return " ".join((value or "").lower().split())


# ============================================================
# PROFILE
# ============================================================

def get_default_profile(db, workspace_id: int) -> Optional[dict]:
    """The workspace's first profile."""
    return fetch_one(
        db,
        select(profiles).where(profiles.c.workspace_id == workspace_id).order_by(profiles.c.id).limit(1)
    )


def require_default_profile(db, workspace_id: int) -> dict:
    profile = get_default_profile(db, workspace_id)
    if profile is None:
        raise HTTPException(status_code=400, detail="No profile found")
    return profile


def list_work(db, profile_id: int) -> List[dict]:
    return fetch_all(db, select(work_experiences).where(work_experiences.c.profile_id == profile_id)
                     .order_by(work_experiences.c.sort_order, work_experiences.c.start_date.desc(),
                               work_experiences.c.id))


def list_education(db, profile_id: int) -> List[dict]:
    return fetch_all(db, select(education_entries).where(education_entries.c.profile_id == profile_id)
                     .order_by(education_entries.c.sort_order, education_entries.c.start_date.desc(),
                               education_entries.c.id))


def _workspace_rows(db, table, workspace_id: int, *order_by) -> List[dict]:
    return fetch_all(db, select(table).where(table.c.workspace_id == workspace_id).order_by(*order_by))


# ============================================================
# RESUME DATA
# ============================================================

def _basics(profile: dict) -> dict:
    location = profile.get("location") or {}
    return {
        "name": profile.get("full_name") or " ".join(
            p for p in (profile.get("first_name"), profile.get("last_name")) if p
        ),
        "label": profile.get("label"),
        "email": profile.get("email"),
        "phone": profile.get("phone"),
        "url": profile.get("url"),
        "summary": profile.get("summary"),
        "location": {k: location.get(k) for k in ("city", "region", "country")},
        "profiles": list(profile.get("social_profiles") or []),
    }


def collect_resume_data(db, workspace_id: int, profile: dict) -> Dict[str, list]:
    """Every section, untruncated."""
    data = {
        "basics": _basics(profile),
        "work": [
            {
                "name": w["company"],
                "position": w["position"],
                "url": w["url"],
                "startDate": _iso(w["start_date"]),
                "endDate": _iso(w["end_date"]),
                "summary": w["summary"],
                "highlights": w["highlights"] or [],
            }
            for w in list_work(db, profile["id"])
        ],
        "education": [
            {
                "institution": e["institution"],
                "area": e["area"],
                "studyType": e["study_type"],
                "startDate": _iso(e["start_date"]),
                "endDate": _iso(e["end_date"]),
                "score": e["score"],
                "courses": e["courses"] or [],
                "url": e["url"],
            }
            for e in list_education(db, profile["id"])
        ],
        "skills": [
            {"name": s["name"], "level": s["proficiency"], "keywords": [s["category"]] if s["category"] else []}
            for s in _workspace_rows(db, skills, workspace_id, skills.c.name)
        ],
        "projects": [
            {
                "name": p["name"],
                "description": p["description"],
                "startDate": _iso(p["start_date"]),
                "endDate": _iso(p["end_date"]),
                "url": p["url"],
            }
            for p in _workspace_rows(db, projects, workspace_id, projects.c.start_date.desc(), projects.c.id)
        ],
        "certifications": [
            {"name": c["title"], "issuer": c["provider"], "date": _iso(c["completion_date"] or c["start_date"])}
            for c in _workspace_rows(db, learning, workspace_id, learning.c.completion_date.desc(), learning.c.id)
            if c["learning_type"] == "certification" and c["status"] == "completed"
        ],
        "publications": [
            {
                "name": c["title"],
                "publisher": c["platform"],
                "releaseDate": _iso(c["publication_date"]),
                "url": c["url"],
                "summary": c["description"],
            }
            for c in _workspace_rows(db, content, workspace_id, content.c.publication_date.desc(), content.c.id)
        ],
        "awards": [
            {"title": a["title"], "date": _iso(a["achieved_date"]), "summary": a["description"]}
            for a in _workspace_rows(db, achievements, workspace_id, achievements.c.achieved_date.desc(),
                                     achievements.c.id)
        ],
        "volunteer": [],
        "languages": [],
        "interests": [],
    }
    return data


def apply_view_definition(data: dict, definition: Optional[dict]) -> dict:
    """Drop hidden sections and truncate to max_items."""
    sections = visible_sections(definition)
    formatting = {**DEFAULT_FORMATTING, **((definition or {}).get("formatting") or {})}

    result = {}
    for name, value in data.items():
        if name == "basics":
            basics = dict(value)
            if "summary" not in sections:
                basics["summary"] = None
            if not formatting["include_location"]:
                basics["location"] = {}
            result["basics"] = basics
        elif name in sections:
            limit = sections[name]
            result[name] = value[:limit] if limit else list(value)

    if not formatting["include_urls"]:
        for name, value in result.items():
            if isinstance(value, list):
                result[name] = [{k: v for k, v in item.items() if k != "url"} for item in value]
        result["basics"]["url"] = None
        result["basics"]["profiles"] = []

    result["meta"] = {
        "view_definition": (definition or {}).get("slug"),
        "formatting": formatting,
    }
    return result


def build_resume_data(db, workspace_id: int, variant: dict) -> dict:
    """Live resume data for a variant, filtered by its view definition."""
    profile = fetch_one(db, select(profiles).where(profiles.c.id == variant["profile_id"]))
    if profile is None:
        raise HTTPException(status_code=400, detail="No profile found")
    definition = None
    if variant.get("view_definition_id"):
        definition = fetch_one(db, select(view_definitions).where(
            view_definitions.c.id == variant["view_definition_id"],
            view_definitions.c.workspace_id == workspace_id,
        ))
    data = apply_view_definition(collect_resume_data(db, workspace_id, profile), definition)
    data["variant"] = {"name": variant["name"], "target_role": variant.get("target_role")}
    return data


def resolve_resume_data(db, workspace_id: int, variant: dict, snapshot_id: Optional[int] = None) -> dict:
    """Snapshot data when a snapshot is given, otherwise the live data."""
    if snapshot_id is None:
        return build_resume_data(db, workspace_id, variant)
    snapshot = fetch_one(db, select(version_snapshots).where(
        version_snapshots.c.id == snapshot_id,
        version_snapshots.c.resume_variant_id == variant["id"],
    ))
    if snapshot is None:
        raise HTTPException(status_code=404, detail="Snapshot not found")
    return snapshot["snapshot_data"]


# ============================================================
# POPULATE FROM CAREER DATA
# ============================================================

def _work_from_job(job: dict) -> dict:
    return {
        "company": job["company"],
        "position": job["title"],
        "start_date": job["start_date"],
        "end_date": job["end_date"],
        "summary": job["description"],
        "highlights": [],
    }


def _education_from_learning(item: dict) -> dict:
    return {
        "institution": item["provider"] or "Self-directed",
        "area": item["title"],
        "study_type": STUDY_TYPES.get(item["learning_type"], item["learning_type"]),
        "start_date": item["start_date"],
        "end_date": item["completion_date"],
        "courses": [],
    }


def populate_profile(db, workspace_id: int, profile: dict, dry_run: bool = False, mode: str = "merge",
                     include_jobs: bool = True, include_learning: bool = True) -> dict:
    """
    Map jobs onto work experiences and learning onto education entries.

    merge skips entries already on the profile (company + position,
    institution + area, compared case and whitespace insensitively);
    replace clears the included sections first. dry_run writes nothing.
    """
    replace = mode == "replace"
    result = {
        "dry_run": dry_run,
        "work_created": 0, "work_skipped": 0,
        "education_created": 0, "education_skipped": 0,
        "preview": {"work": [], "education": []} if dry_run else None,
    }

    if include_jobs:
        seen = set()
        if not replace:
            seen = {(normalize(w["company"]), normalize(w["position"])) for w in list_work(db, profile["id"])}
        elif not dry_run:
            db.execute(delete(work_experiences).where(work_experiences.c.profile_id == profile["id"]))
        for job in _workspace_rows(db, jobs, workspace_id, jobs.c.start_date.desc(), jobs.c.id):
            entry = _work_from_job(job)
            key = (normalize(entry["company"]), normalize(entry["position"]))
            if key in seen:
                result["work_skipped"] += 1
                continue
            seen.add(key)
            result["work_created"] += 1
            if dry_run:
                result["preview"]["work"].append({"company": entry["company"], "position": entry["position"]})
            else:
                insert_row(db, work_experiences, workspace_id, {"profile_id": profile["id"], **entry})

    if include_learning:
        seen = set()
        if not replace:
            seen = {(normalize(e["institution"]), normalize(e["area"])) for e in list_education(db, profile["id"])}
        elif not dry_run:
            db.execute(delete(education_entries).where(education_entries.c.profile_id == profile["id"]))
        for item in _workspace_rows(db, learning, workspace_id, learning.c.start_date.desc(), learning.c.id):
            entry = _education_from_learning(item)
            key = (normalize(entry["institution"]), normalize(entry["area"]))
            if key in seen:
                result["education_skipped"] += 1
                continue
            seen.add(key)
            result["education_created"] += 1
            if dry_run:
                result["preview"]["education"].append({
                    "institution": entry["institution"], "area": entry["area"], "study_type": entry["study_type"],
                })
            else:
                insert_row(db, education_entries, workspace_id, {"profile_id": profile["id"], **entry})

    logger.info(
        "Populate %s (%s) for profile %s: work +%d/%d skipped, education +%d/%d skipped",
        mode, "dry run" if dry_run else "applied", profile["id"],
        result["work_created"], result["work_skipped"],
        result["education_created"], result["education_skipped"],
    )
    return result
