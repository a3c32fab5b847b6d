"""
Timeline Service - one chronological feed over the whole career record.

`build_timeline` is a pure function over rows already fetched into memory:
it turns jobs, institutions, projects, events, achievements, feedback,
goals, compensation, learning and content into dated items, attaches the
people linked to each item, and groups the result by year.

Linked people come from three heuristics:
- company match: a job links every person whose company equals the job's
  company (trimmed, case-insensitive)
- relationships: edges between the entity and a person, in either direction
- interactions: a project links people who had an interaction tagged with
  it; an event links people with an interaction dated inside the event
"""

from collections import defaultdict
from datetime import date
from typing import Dict, Iterable, List, Optional

from sqlalchemy import select

from careerhub.db.postgres import fetch_all
from careerhub.db.tables import (
    people, jobs, institutions, events, projects, interactions, relationships,
    achievements, feedback, goals, compensation, learning, content,
)
from careerhub.utils.dates import as_date

TIMELINE_TABLES = {
    "people": people,
    "jobs": jobs,
    "institutions": institutions,
    "events": events,
    "projects": projects,
    "interactions": interactions,
    "relationships": relationships,
    "achievements": achievements,
    "feedback": feedback,
    "goals": goals,
    "compensation": compensation,
    "learning": learning,
    "content": content,
}


def load_timeline_data(db, workspace_id: int) -> Dict[str, List[dict]]:
    """Fetch every table the timeline needs, scoped to one workspace."""
    return {
        name: fetch_all(db, select(table).where(table.c.workspace_id == workspace_id))
        for name, table in TIMELINE_TABLES.items()
    }


def format_label(value: Optional[str]) -> str:
    """snake_case enum value -> Title Case label."""
    if not value:
        return ""
    return " ".join(word.capitalize() for word in value.replace("_", " ").split())


def format_amount(value) -> str:
    """Thousands separators, no trailing zero decimals: 120000.0 -> '120,000'."""
    amount = float(value)
    if amount.is_integer():
        return f"{int(amount):,}"
    return f"{amount:,.2f}".rstrip("0").rstrip(".")


def _truncate(text: str, limit: int) -> str:
    return text[:limit] + "..." if len(text) > limit else text


class _PeopleIndex:
    """Lookups from entities to the people linked to them."""

    def __init__(self, data: Dict[str, List[dict]]):
        self.by_id = {p["id"]: p for p in data.get("people", [])}
        self.interactions = data.get("interactions", [])

        self.by_company = defaultdict(set)
        for person in self.by_id.values():
            if person.get("company"):
                self.by_company[person["company"].strip().lower()].add(person["id"])

        self.by_entity = defaultdict(set)
        for rel in data.get("relationships", []):
            if rel["source_type"] == "person":
                self.by_entity[(rel["target_type"], rel["target_id"])].add(rel["source_id"])
            if rel["target_type"] == "person":
                self.by_entity[(rel["source_type"], rel["source_id"])].add(rel["target_id"])

    def for_company(self, company: Optional[str]) -> set:
        if not company:
            return set()
        return set(self.by_company.get(company.strip().lower(), set()))

    def for_entity(self, entity_type: str, entity_id: int) -> set:
        return set(self.by_entity.get((entity_type, entity_id), set()))

    def for_project(self, project_id: int) -> set:
        linked = self.for_entity("project", project_id)
        linked.update(i["person_id"] for i in self.interactions if i.get("project_id") == project_id)
        return linked

    def for_event(self, event: dict) -> set:
        linked = self.for_entity("event", event["id"])
        start = as_date(event["event_date"])
        end = as_date(event.get("event_end_date")) or start
        for interaction in self.interactions:
            when = as_date(interaction.get("interaction_date"))
            if when and start <= when <= end:
                linked.add(interaction["person_id"])
        return linked

    def resolve(self, ids: Iterable[int]) -> List[dict]:
        found = [self.by_id[i] for i in ids if i in self.by_id]
        return [{"id": p["id"], "name": p["name"]} for p in sorted(found, key=lambda p: p["name"].lower())]


def _item(kind: str, row_id: int, title: str, subtitle: Optional[str], start: date,
          end: Optional[date], people_ids: Iterable[int], index: _PeopleIndex) -> dict:
    linked = index.resolve(people_ids)
    return {
        "id": row_id,
        "type": kind,
        "title": title,
        "subtitle": subtitle or None,
        "start_date": as_date(start),
        "end_date": as_date(end),
        "linked_people": linked,
        "linked_people_count": len(linked),
    }


def build_timeline(data: Dict[str, List[dict]]) -> dict:
    """
    Build the grouped timeline from pre-fetched rows.

    `data` maps table names (see TIMELINE_TABLES) to lists of row dicts.
    Returns {"years": [{"year", "items"}], "all_people": [{id, name}]} with
    years newest first and items inside a year newest first.
    """
    index = _PeopleIndex(data)
    items = []

    for job in data.get("jobs", []):
        if not job.get("start_date"):
            continue
        items.append(_item("job", job["id"], job["title"], job["company"], job["start_date"],
                           job.get("end_date"), index.for_company(job["company"]), index))

    for inst in data.get("institutions", []):
        if not inst.get("start_date"):
            continue
        items.append(_item("institution", inst["id"], inst["name"],
                           inst.get("degree") or format_label(inst.get("type")),
                           inst["start_date"], inst.get("end_date"),
                           index.for_entity("institution", inst["id"]), index))

    for project in data.get("projects", []):
        if not project.get("start_date"):
            continue
        items.append(_item("project", project["id"], project["name"], format_label(project.get("status")),
                           project["start_date"], project.get("end_date"),
                           index.for_project(project["id"]), index))

    for event in data.get("events", []):
        if not event.get("event_date"):
            continue
        items.append(_item("event", event["id"], event["title"], format_label(event.get("event_type")),
                           event["event_date"], event.get("event_end_date"),
                           index.for_event(event), index))

    for achievement in data.get("achievements", []):
        if not achievement.get("achieved_date"):
            continue
        items.append(_item("achievement", achievement["id"], achievement["title"],
                           format_label(achievement.get("category")), achievement["achieved_date"], None,
                           index.for_entity("achievement", achievement["id"]), index))

    for fb in data.get("feedback", []):
        if not fb.get("feedback_date"):
            continue
        subtitle = fb.get("context") or _truncate(fb.get("notes") or "", 50)
        linked = index.for_entity("feedback", fb["id"])
        if fb.get("person_id"):
            linked.add(fb["person_id"])
        items.append(_item("feedback", fb["id"], format_label(fb.get("feedback_type")) or "Feedback",
                           subtitle, fb["feedback_date"], None, linked, index))

    for goal in data.get("goals", []):
        if not goal.get("target_date"):
            continue
        parts = [p for p in (goal.get("goal_type"), format_label(goal.get("status"))) if p]
        items.append(_item("goal", goal["id"], goal["title"], " - ".join(parts), goal["target_date"], None,
                           index.for_entity("goal", goal["id"]), index))

    jobs_by_id = {j["id"]: j for j in data.get("jobs", [])}
    for comp in data.get("compensation", []):
        job = jobs_by_id.get(comp["job_id"])
        if job is None or not comp.get("effective_date"):
            continue
        items.append(_item("compensation", comp["id"], f"Compensation at {job['title']}",
                           f"{comp['currency']} {format_amount(comp['base_salary'])}",
                           comp["effective_date"], None, index.for_company(job["company"]), index))

    for item in data.get("learning", []):
        if not item.get("start_date"):
            continue
        kind = format_label(item.get("learning_type"))
        subtitle = f"{item['provider']} - {kind}" if item.get("provider") else kind
        items.append(_item("learning", item["id"], item["title"], subtitle, item["start_date"],
                           item.get("completion_date"), index.for_entity("learning", item["id"]), index))

    for piece in data.get("content", []):
        if not piece.get("publication_date"):
            continue
        parts = [p for p in (format_label(piece.get("content_type")), piece.get("platform")) if p]
        items.append(_item("content", piece["id"], piece["title"], " - ".join(parts),
                           piece["publication_date"], None, index.for_entity("content", piece["id"]), index))

    by_year = defaultdict(list)
    for item in items:
        by_year[item["start_date"].year].append(item)

    years = []
    for year in sorted(by_year, reverse=True):
        year_items = sorted(by_year[year], key=lambda i: (i["start_date"], i["type"], i["id"]), reverse=True)
        years.append({"year": year, "items": year_items})

    all_people = index.resolve(index.by_id.keys())
    return {"years": years, "all_people": all_people}
