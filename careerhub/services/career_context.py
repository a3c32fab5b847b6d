"""
Career Context - a plain-text summary of a workspace for the AI assistant.

Two blocks:
1. PROFILE  - basics, work experience, education, resume variants
2. CAREER   - jobs, skills, recent projects, active goals, network size,
              recent achievements, learning

Lists that can grow without bound are capped so the prompt stays small.
"""

from typing import List

from sqlalchemy import func, select

from careerhub.db.postgres import fetch_all
from careerhub.db.tables import (
    resume_variants, jobs, skills, projects, goals, people, achievements, learning,
)
from careerhub.services.resume_service import get_default_profile, list_work, list_education, _basics

RECENT_LIMIT = 10
SHORT_LIMIT = 5
ACTIVE_GOAL_STATUSES = ("not_started", "in_progress")


def _day(value) -> str:
    return value.isoformat() if value else "?"


def _span(start, end) -> str:
    return f"{_day(start)} - {_day(end) if end else 'Present'}"


def _recent(db, table, workspace_id: int, order_column, limit: int = RECENT_LIMIT) -> List[dict]:
    return fetch_all(db, (
        select(table)
        .where(table.c.workspace_id == workspace_id)
        .order_by(order_column.desc(), table.c.id.desc())
        .limit(limit)
    ))


def _profile_lines(db, workspace_id: int) -> List[str]:
    profile = get_default_profile(db, workspace_id)
    if profile is None:
        return ["PROFILE:", "No profile has been created yet.", ""]

    basics = _basics(profile)
    location = ", ".join(v for v in basics["location"].values() if v)
    lines = [
        "PROFILE:",
        f"Name: {basics['name'] or 'Not set'}",
        f"Headline: {basics['label'] or 'Not set'}",
        f"Summary: {basics['summary'] or 'Not set'}",
        f"Location: {location or 'Not set'}",
        "",
    ]

    work = list_work(db, profile["id"])
    if work:
        lines.append(f"WORK EXPERIENCE ({len(work)}):")
        for w in work:
            lines.append(f"- {w['position']} at {w['company']} ({_span(w['start_date'], w['end_date'])})")
            if w.get("summary"):
                lines.append(f"  Summary: {w['summary']}")
            if w.get("highlights"):
                lines.append("  Highlights: " + "; ".join(w["highlights"]))
        lines.append("")

    education = list_education(db, profile["id"])
    if education:
        lines.append(f"EDUCATION ({len(education)}):")
        for e in education:
            lines.append(f"- {e.get('study_type') or 'Degree'} in {e.get('area') or 'General'} "
                         f"at {e['institution']} ({_span(e['start_date'], e['end_date'])})")
        lines.append("")

    variants = fetch_all(db, select(resume_variants)
                         .where(resume_variants.c.profile_id == profile["id"])
                         .order_by(resume_variants.c.id))
    if variants:
        lines.append(f"RESUME VARIANTS ({len(variants)}):")
        for v in variants:
            primary = " [PRIMARY]" if v["is_primary"] else ""
            target = f", targeting {v['target_role']}" if v.get("target_role") else ""
            lines.append(f"- {v['name']}{primary}{target}")
        lines.append("")
    return lines


def _career_lines(db, workspace_id: int) -> List[str]:
    lines = []

    all_jobs = _recent(db, jobs, workspace_id, jobs.c.start_date, limit=None)
    lines.append(f"JOBS ({len(all_jobs)}):")
    for j in all_jobs:
        current = " [CURRENT]" if j["is_current"] else ""
        lines.append(f"- {j['title']} at {j['company']} ({_span(j['start_date'], j['end_date'])}){current}")
    lines.append("")

    all_skills = fetch_all(db, select(skills).where(skills.c.workspace_id == workspace_id).order_by(skills.c.name))
    lines.append(f"SKILLS ({len(all_skills)}):")
    lines.extend(f"- {s['name']} ({s['proficiency']})" for s in all_skills)
    lines.append("")

    lines.append("RECENT PROJECTS:")
    for p in _recent(db, projects, workspace_id, projects.c.start_date):
        lines.append(f"- {p['name']} ({p['status']}): {p.get('description') or 'No description'}")
    lines.append("")

    active = fetch_all(db, select(goals).where(
        goals.c.workspace_id == workspace_id, goals.c.status.in_(ACTIVE_GOAL_STATUSES)
    ).order_by(goals.c.id))
    lines.append("ACTIVE GOALS:")
    lines.extend(f"- {g['title']} ({g.get('goal_type') or 'general'}): {g['status']}" for g in active)
    lines.append("")

    total = db.execute(select(func.count()).select_from(people).where(people.c.workspace_id == workspace_id)).scalar()
    newest = _recent(db, people, workspace_id, people.c.created_at, limit=SHORT_LIMIT)
    lines.append(f"NETWORK: {total} contacts")
    if newest:
        lines.append("Recently added: " + ", ".join(p["name"] for p in newest))
    lines.append("")

    lines.append("RECENT ACHIEVEMENTS:")
    for a in _recent(db, achievements, workspace_id, achievements.c.achieved_date, limit=SHORT_LIMIT):
        lines.append(f"- {a['title']} ({a.get('category') or 'general'}, {_day(a['achieved_date'])})")
    lines.append("")

    studies = _recent(db, learning, workspace_id, learning.c.start_date)
    if studies:
        lines.append("LEARNING:")
        for item in studies:
            provider = f" from {item['provider']}" if item.get("provider") else ""
            lines.append(f"- {item['title']} ({item['learning_type']}{provider}): {item['status']}")
        lines.append("")
    return lines


def assemble_career_context(db, workspace_id: int) -> str:
    """The workspace's profile and career records as prompt text."""
    return "\n".join(_profile_lines(db, workspace_id) + _career_lines(db, workspace_id)).strip()
