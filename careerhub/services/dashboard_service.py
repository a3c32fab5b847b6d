"""
Dashboard Service - summary statistics for the home screen.

Counts are grouped in SQL; ordering that depends on NULL placement
(stale contacts, goal targets) is done in Python so it behaves the same
on PostgreSQL and SQLite.
"""

from collections import defaultdict
from datetime import date, timedelta
from typing import List, Optional

from sqlalchemy import func, select

from careerhub.db.postgres import fetch_all
from careerhub.db.tables import (
    people, interactions, projects, relationships, events, goals, skills, feedback, content,
)
from careerhub.utils.dates import as_date, utcnow

STALE_AFTER_DAYS = 90
FEEDBACK_WINDOW_DAYS = 90
GOAL_STATUS_ORDER = {"in_progress": 0, "not_started": 1, "completed": 2, "abandoned": 3}


def _type_counts(db, column, *conditions) -> List[dict]:
    stmt = (
        select(column.label("type"), func.count().label("count"))
        .where(*conditions)
        .group_by(column)
        .order_by(func.count().desc(), column)
    )
    return [r for r in fetch_all(db, stmt) if r["type"] is not None]


class DashboardService:

    def __init__(self, db, workspace_id: int, today: Optional[date] = None):
        self.db = db
        self.workspace_id = workspace_id
        self.today = today or utcnow().date()

    def stale_contacts(self, limit: int = 20) -> List[dict]:
        last_seen = (
            select(
                people.c.id, people.c.name, people.c.company,
                func.max(interactions.c.interaction_date).label("last_interaction_date"),
            )
            .select_from(people.outerjoin(interactions, interactions.c.person_id == people.c.id))
            .where(people.c.workspace_id == self.workspace_id)
            .group_by(people.c.id, people.c.name, people.c.company)
        )
        cutoff = self.today - timedelta(days=STALE_AFTER_DAYS)
        stale = []
        for row in fetch_all(self.db, last_seen):
            last = as_date(row["last_interaction_date"])
            if last is not None and last >= cutoff:
                continue
            row["last_interaction_date"] = last
            row["days_since"] = (self.today - last).days if last else None
            stale.append(row)
        # never contacted first, then oldest contact first
        stale.sort(key=lambda r: (r["last_interaction_date"] is not None, r["last_interaction_date"] or date.min, r["name"]))
        return stale[:limit]

    def productive_interaction_types(self) -> List[dict]:
        return _type_counts(
            self.db, interactions.c.interaction_type,
            interactions.c.workspace_id == self.workspace_id,
            interactions.c.project_id.isnot(None),
        )

    def top_connectors(self, limit: int = 10) -> List[dict]:
        project_links = defaultdict(set)
        event_links = defaultdict(set)

        for row in fetch_all(self.db, select(interactions.c.person_id, interactions.c.project_id).where(
            interactions.c.workspace_id == self.workspace_id,
            interactions.c.project_id.isnot(None),
        )):
            project_links[row["person_id"]].add(row["project_id"])

        for rel in fetch_all(self.db, select(relationships).where(relationships.c.workspace_id == self.workspace_id)):
            pairs = []
            if rel["source_type"] == "person":
                pairs.append((rel["source_id"], rel["target_type"], rel["target_id"]))
            if rel["target_type"] == "person":
                pairs.append((rel["target_id"], rel["source_type"], rel["source_id"]))
            for person_id, other_type, other_id in pairs:
                if other_type == "project":
                    project_links[person_id].add(other_id)
                elif other_type == "event":
                    event_links[person_id].add(other_id)

        names = {
            r["id"]: r["name"] for r in fetch_all(
                self.db, select(people.c.id, people.c.name).where(people.c.workspace_id == self.workspace_id)
            )
        }
        connectors = []
        for person_id, name in names.items():
            project_count = len(project_links.get(person_id, ()))
            event_count = len(event_links.get(person_id, ()))
            if project_count + event_count == 0:
                continue
            connectors.append({
                "id": person_id,
                "name": name,
                "project_count": project_count,
                "event_count": event_count,
                "total_connections": project_count + event_count,
            })
        connectors.sort(key=lambda c: (-c["total_connections"], c["name"]))
        return connectors[:limit]

    def recent_interactions(self, limit: int = 10) -> List[dict]:
        stmt = (
            select(
                interactions.c.id, interactions.c.person_id, interactions.c.interaction_date,
                interactions.c.interaction_type, interactions.c.notes,
                people.c.name.label("person_name"), projects.c.name.label("project_name"),
            )
            .select_from(
                interactions
                .outerjoin(people, interactions.c.person_id == people.c.id)
                .outerjoin(projects, interactions.c.project_id == projects.c.id)
            )
            .where(interactions.c.workspace_id == self.workspace_id)
            .order_by(interactions.c.interaction_date.desc(), interactions.c.id.desc())
            .limit(limit)
        )
        return fetch_all(self.db, stmt)

    def upcoming_events(self, limit: int = 5) -> List[dict]:
        stmt = (
            select(events.c.id, events.c.title, events.c.event_type, events.c.event_date, events.c.location)
            .where(events.c.workspace_id == self.workspace_id, events.c.event_date >= self.today)
            .order_by(events.c.event_date)
            .limit(limit)
        )
        return fetch_all(self.db, stmt)

    def goals_progress(self) -> List[dict]:
        rows = fetch_all(self.db, select(
            goals.c.id, goals.c.title, goals.c.goal_type, goals.c.status, goals.c.target_date
        ).where(goals.c.workspace_id == self.workspace_id))
        for goal in rows:
            target = as_date(goal["target_date"])
            open_goal = goal["status"] not in ("completed", "abandoned")
            goal["is_overdue"] = bool(target and open_goal and target < self.today)
            goal["days_until_target"] = (target - self.today).days if target and target >= self.today else None
        rows.sort(key=lambda g: (
            GOAL_STATUS_ORDER.get(g["status"], len(GOAL_STATUS_ORDER)),
            g["target_date"] is None,
            g["target_date"] or date.max,
        ))
        return rows

    def skills_growth(self) -> dict:
        rows = fetch_all(self.db, select(skills).where(skills.c.workspace_id == self.workspace_id)
                         .order_by(skills.c.created_at.desc(), skills.c.id.desc()))
        year_ago = utcnow() - timedelta(days=365)
        return {
            "total": len(rows),
            "added_last_12_months": sum(1 for s in rows if s["created_at"] >= year_ago),
            "by_proficiency": _type_counts(self.db, skills.c.proficiency, skills.c.workspace_id == self.workspace_id),
            "recent": rows[:5],
        }

    def feedback_themes(self) -> dict:
        since = self.today - timedelta(days=FEEDBACK_WINDOW_DAYS)
        recent = fetch_all(self.db, (
            select(feedback.c.id, feedback.c.feedback_type, feedback.c.feedback_date, feedback.c.notes,
                   people.c.name.label("person_name"))
            .select_from(feedback.outerjoin(people, feedback.c.person_id == people.c.id))
            .where(feedback.c.workspace_id == self.workspace_id, feedback.c.feedback_date >= since)
            .order_by(feedback.c.feedback_date.desc(), feedback.c.id.desc())
        ))
        counts = defaultdict(int)
        for fb in recent:
            if fb["feedback_type"]:
                counts[fb["feedback_type"]] += 1
        previews = []
        for fb in recent[:5]:
            notes = fb.pop("notes") or ""
            fb["notes_preview"] = notes[:100] + "..." if len(notes) > 100 else notes
            previews.append(fb)
        by_type = [{"type": t, "count": c} for t, c in sorted(counts.items(), key=lambda kv: (-kv[1], kv[0]))]
        return {"by_type": by_type, "recent": previews}

    def content_activity(self) -> dict:
        rows = fetch_all(self.db, select(content).where(content.c.workspace_id == self.workspace_id)
                         .order_by(content.c.publication_date.desc(), content.c.id.desc()))
        return {
            "total": len(rows),
            "this_year": sum(1 for c in rows if as_date(c["publication_date"]).year == self.today.year),
            "by_type": _type_counts(self.db, content.c.content_type, content.c.workspace_id == self.workspace_id),
            "recent": rows[:5],
        }

    def stats(self) -> dict:
        return {
            "stale_contacts": self.stale_contacts(),
            "productive_interaction_types": self.productive_interaction_types(),
            "top_connectors": self.top_connectors(),
            "recent_interactions": self.recent_interactions(),
            "upcoming_events": self.upcoming_events(),
            "goals_progress": self.goals_progress(),
            "skills_growth": self.skills_growth(),
            "feedback_themes": self.feedback_themes(),
            "content_activity": self.content_activity(),
        }
