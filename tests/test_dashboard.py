from datetime import date, timedelta

from careerhub.services.dashboard_service import DashboardService
from careerhub.utils.dates import utcnow
from tests.conftest import create


def _days(n: int) -> str:
    return (utcnow().date() + timedelta(days=n)).isoformat()


def test_dashboard_empty_workspace(client):
    body = client.get("/api/dashboard/stats").json()
    assert body["stale_contacts"] == []
    assert body["skills_growth"]["total"] == 0
    assert body["content_activity"] == {"total": 0, "this_year": 0, "by_type": [], "recent": []}


def test_stale_contacts_order(client):
    never = create(client, "people", {"name": "Never"})
    old = create(client, "people", {"name": "Old"})
    recent = create(client, "people", {"name": "Recent"})
    create(client, "interactions", {"person_id": old["id"], "interaction_date": _days(-200)})
    create(client, "interactions", {"person_id": recent["id"], "interaction_date": _days(-10)})

    stale = client.get("/api/dashboard/stats").json()["stale_contacts"]
    assert [s["id"] for s in stale] == [never["id"], old["id"]]
    assert stale[0]["days_since"] is None
    assert stale[1]["days_since"] == 200


def test_top_connectors_and_productive_types(client):
    ada = create(client, "people", {"name": "Ada"})
    bob = create(client, "people", {"name": "Bob"})
    p1 = create(client, "projects", {"name": "One"})
    p2 = create(client, "projects", {"name": "Two"})
    event = create(client, "events", {"title": "Meetup", "event_date": _days(3)})

    create(client, "interactions", {"person_id": ada["id"], "project_id": p1["id"], "interaction_type": "meeting"})
    create(client, "interactions", {"person_id": ada["id"], "project_id": p1["id"], "interaction_type": "meeting"})
    create(client, "interactions", {"person_id": bob["id"], "project_id": p2["id"], "interaction_type": "call"})
    create(client, "interactions", {"person_id": bob["id"], "interaction_type": "email"})
    create(client, "relationships", {"source_type": "person", "source_id": ada["id"],
                                     "target_type": "project", "target_id": p2["id"]})
    create(client, "relationships", {"source_type": "event", "source_id": event["id"],
                                     "target_type": "person", "target_id": ada["id"]})

    body = client.get("/api/dashboard/stats").json()
    top = body["top_connectors"]
    assert top[0] == {"id": ada["id"], "name": "Ada", "project_count": 2, "event_count": 1, "total_connections": 3}
    assert top[1]["name"] == "Bob"
    assert body["productive_interaction_types"] == [{"type": "meeting", "count": 2}, {"type": "call", "count": 1}]
    assert [e["title"] for e in body["upcoming_events"]] == ["Meetup"]
    assert body["recent_interactions"][0]["person_name"] in ("Ada", "Bob")


def test_goals_progress(client):
    create(client, "goals", {"title": "Done", "description": "d", "status": "completed", "target_date": _days(-5)})
    create(client, "goals", {"title": "Late", "description": "d", "status": "in_progress", "target_date": _days(-5)})
    create(client, "goals", {"title": "Soon", "description": "d", "status": "in_progress", "target_date": _days(10)})
    create(client, "goals", {"title": "Someday", "description": "d", "status": "not_started"})

    goals = client.get("/api/dashboard/stats").json()["goals_progress"]
    assert [g["title"] for g in goals] == ["Late", "Soon", "Someday", "Done"]
    by_title = {g["title"]: g for g in goals}
    assert by_title["Late"]["is_overdue"] is True
    assert by_title["Late"]["days_until_target"] is None
    assert by_title["Soon"]["days_until_target"] == 10
    assert by_title["Done"]["is_overdue"] is False
    assert by_title["Someday"]["days_until_target"] is None


def test_feedback_skills_and_content(client):
    create(client, "feedback", {"feedback_date": _days(-1), "feedback_type": "praise", "notes": "y" * 150})
    create(client, "feedback", {"feedback_date": _days(-2), "feedback_type": "praise", "notes": "short"})
    create(client, "feedback", {"feedback_date": _days(-400), "feedback_type": "constructive", "notes": "old"})
    create(client, "skills", {"name": "Python", "proficiency": "expert"})
    create(client, "skills", {"name": "SQL", "proficiency": "expert"})
    create(client, "content", {"title": "Post", "content_type": "linkedin_post", "publication_date": _days(0)})

    body = client.get("/api/dashboard/stats").json()
    themes = body["feedback_themes"]
    assert themes["by_type"] == [{"type": "praise", "count": 2}]
    assert themes["recent"][0]["notes_preview"] == "y" * 100 + "..."
    assert themes["recent"][1]["notes_preview"] == "short"

    skills = body["skills_growth"]
    assert skills["total"] == 2
    assert skills["added_last_12_months"] == 2
    assert skills["by_proficiency"] == [{"type": "expert", "count": 2}]

    content = body["content_activity"]
    assert content["total"] == 1
    assert content["this_year"] == 1
    assert content["by_type"] == [{"type": "linkedin_post", "count": 1}]


def test_service_accepts_fixed_today(client, db):
    ws = client.session["user"]["workspace_id"]
    create(client, "events", {"title": "Past", "event_date": "2020-01-01"})
    service = DashboardService(db, ws, today=date(2019, 6, 1))
    assert [e["title"] for e in service.upcoming_events()] == ["Past"]
