from datetime import date

from careerhub.services.timeline_service import build_timeline, format_amount, format_label
from tests.conftest import create


def _people():
    return [
        {"id": 1, "name": "Zoe", "company": "Acme "},
        {"id": 2, "name": "adam", "company": "acme"},
        {"id": 3, "name": "Mia", "company": "Globex"},
    ]


def test_job_links_people_by_company():
    data = {
        "people": _people(),
        "jobs": [{"id": 10, "title": "Engineer", "company": "ACME", "start_date": date(2021, 3, 1), "end_date": None}],
    }
    timeline = build_timeline(data)
    item = timeline["years"][0]["items"][0]
    assert item["type"] == "job"
    assert item["subtitle"] == "ACME"
    assert [p["name"] for p in item["linked_people"]] == ["adam", "Zoe"]
    assert item["linked_people_count"] == 2


def test_years_and_items_newest_first():
    data = {
        "jobs": [
            {"id": 1, "title": "Junior", "company": "A", "start_date": date(2019, 1, 1), "end_date": date(2020, 6, 1)},
            {"id": 2, "title": "Senior", "company": "B", "start_date": date(2021, 2, 1), "end_date": None},
        ],
        "achievements": [{"id": 5, "title": "Award", "category": "award", "achieved_date": date(2021, 9, 1)}],
        "goals": [{"id": 6, "title": "No date", "goal_type": "career", "status": "in_progress", "target_date": None}],
    }
    timeline = build_timeline(data)
    assert [y["year"] for y in timeline["years"]] == [2021, 2019]
    assert [i["title"] for i in timeline["years"][0]["items"]] == ["Award", "Senior"]
    assert timeline["years"][0]["items"][0]["subtitle"] == "Award"


def test_project_and_event_links_from_interactions_and_relationships():
    data = {
        "people": _people(),
        "projects": [{"id": 7, "name": "Apollo", "status": "on_hold", "start_date": date(2022, 1, 1), "end_date": None}],
        "events": [{"id": 8, "title": "Summit", "event_type": "conference",
                    "event_date": date(2022, 5, 10), "event_end_date": date(2022, 5, 12)}],
        "interactions": [
            {"id": 1, "person_id": 1, "project_id": 7, "interaction_date": date(2022, 2, 1)},
            {"id": 2, "person_id": 3, "project_id": None, "interaction_date": date(2022, 5, 11)},
        ],
        "relationships": [
            {"id": 1, "source_type": "project", "source_id": 7, "target_type": "person", "target_id": 2},
        ],
    }
    items = {i["type"]: i for i in build_timeline(data)["years"][0]["items"]}
    assert items["project"]["subtitle"] == "On Hold"
    assert {p["id"] for p in items["project"]["linked_people"]} == {1, 2}
    assert items["event"]["subtitle"] == "Conference"
    assert [p["id"] for p in items["event"]["linked_people"]] == [3]


def test_compensation_and_feedback_items():
    data = {
        "people": _people(),
        "jobs": [{"id": 1, "title": "Engineer", "company": "Globex", "start_date": None, "end_date": None}],
        "compensation": [{"id": 4, "job_id": 1, "currency": "EUR", "base_salary": 120000.0,
                          "effective_date": date(2023, 1, 1)}],
        "feedback": [{"id": 9, "person_id": 1, "feedback_type": "praise", "context": None,
                      "notes": "x" * 80, "feedback_date": date(2023, 2, 1)}],
    }
    items = {i["type"]: i for i in build_timeline(data)["years"][0]["items"]}
    assert "job" not in items
    assert items["compensation"]["title"] == "Compensation at Engineer"
    assert items["compensation"]["subtitle"] == "EUR 120,000"
    assert [p["id"] for p in items["compensation"]["linked_people"]] == [3]
    assert items["feedback"]["title"] == "Praise"
    assert items["feedback"]["subtitle"] == "x" * 50 + "..."
    assert [p["id"] for p in items["feedback"]["linked_people"]] == [1]


def test_all_people_sorted_by_name():
    names = [p["name"] for p in build_timeline({"people": _people()})["all_people"]]
    assert names == ["adam", "Mia", "Zoe"]


def test_format_helpers():
    assert format_label("in_progress") == "In Progress"
    assert format_label(None) == ""
    assert format_amount(120000) == "120,000"
    assert format_amount(1234.5) == "1,234.5"


def test_timeline_endpoint(client):
    create(client, "people", {"name": "Ada", "company": "Acme"})
    create(client, "jobs", {"title": "Engineer", "company": "Acme", "start_date": "2020-04-01"})
    create(client, "learning", {"title": "Rust", "provider": "Online", "learning_type": "course",
                                "start_date": "2021-01-01"})
    body = client.get("/api/timeline").json()
    assert [y["year"] for y in body["years"]] == [2021, 2020]
    assert body["years"][0]["items"][0]["subtitle"] == "Online - Course"
    assert body["years"][1]["items"][0]["linked_people"][0]["name"] == "Ada"
    assert [p["name"] for p in body["all_people"]] == ["Ada"]
