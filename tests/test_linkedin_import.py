import pytest
from sqlalchemy import text

from careerhub.services.linkedin_import import parse_csv, detect_csv_type

CONNECTIONS_CSV = """Notes:
"When exporting your connection data, you may notice that some of the email addresses are missing."

First Name,Last Name,URL,Email Address,Company,Position,Connected On
Ada,Lovelace,https://www.linkedin.com/in/ada,ada@example.com,Analytical Engines,Engineer,12 Jan 2023
Grace,Hopper,https://www.linkedin.com/in/grace,,"Navy, Inc.",Rear Admiral,03 Feb 2022
,,https://www.linkedin.com/in/nobody,,,,01 Jan 2020
"""

POSITIONS_CSV = '''Company Name,Title,Description,Location,Started On,Finished On
Acme,Engineer,"Built ""things""",Remote,Jan 2019,Dec 2020
Globex,Staff Engineer,,Berlin,Jan 2021,
'''


def test_parse_csv_skips_preamble_and_handles_quotes():
    headers, rows = parse_csv(CONNECTIONS_CSV)
    assert headers[0] == "First Name"
    assert len(rows) == 3
    assert rows[1]["Company"] == "Navy, Inc."

    _, rows = parse_csv(POSITIONS_CSV)
    assert rows[0]["Description"] == 'Built "things"'


def test_parse_csv_strips_bom_and_blank_lines():
    headers, rows = parse_csv("\ufeffName\n\nPython\n  \nSQL\n")
    assert headers == ["Name"]
    assert [r["Name"] for r in rows] == ["Python", "SQL"]


@pytest.mark.parametrize("headers,expected", [
    (["First Name", "Last Name", "Connected On"], "Connections"),
    (["Endorsement Date", "Skill Name", "Endorser First Name", "Endorser Last Name"], "Endorsements"),
    (["School Name", "Start Date", "End Date", "Notes", "Degree Name", "Activities"], "Education"),
    (["Name", "Url", "Authority", "Started On", "Finished On", "License Number"], "Certifications"),
    (["Company Name", "Title", "Description", "Location", "Started On", "Finished On"], "Positions"),
    (["Name"], "Skills"),
    (["Foo", "Bar"], "Unknown"),
])
def test_detect_csv_type(headers, expected):
    assert detect_csv_type(headers) == expected


def _import(client, csv_data, file_name="export.csv"):
    response = client.post("/api/import/linkedin", json={"csv_data": csv_data, "file_name": file_name})
    assert response.status_code == 200, response.text
    return response.json()


def test_import_connections_deduplicates(client):
    client.post("/api/people", json={"name": "grace hopper"})
    result = _import(client, CONNECTIONS_CSV, "Connections.csv")
    assert result["detected_type"] == "Connections"
    assert result["imported"] == [{"entity": "People", "count": 1}]
    # existing Grace plus the nameless row
    assert result["skipped"] == 2
    assert result["errors"] == []

    people = {p["name"]: p for p in client.get("/api/people").json()}
    assert people["Ada Lovelace"]["relationship_type"] == "LinkedIn Connection"
    assert people["Ada Lovelace"]["last_contacted_at"] == "2023-01-12"

    again = _import(client, CONNECTIONS_CSV)
    assert again["imported"] == []
    assert again["skipped"] == 3


def test_import_endorsements(client):
    csv_data = (
        "Endorsement Date,Skill Name,Endorser First Name,Endorser Last Name\n"
        "2023/01/05,Python,Linus,Torvalds\n"
        "2023/02/05,Python,Linus,Torvalds\n"
    )
    result = _import(client, csv_data)
    counts = {c["entity"]: c["count"] for c in result["imported"]}
    assert counts == {"People": 1, "Skills": 1, "Interactions": 1}
    assert result["skipped"] == 1

    interaction = client.get("/api/interactions").json()[0]
    assert interaction["notes"] == "LinkedIn endorsement for Python"
    assert interaction["tags"] == "linkedin,endorsement"
    assert client.get("/api/people").json()[0]["relationship_type"] == "LinkedIn Endorser"
    assert client.get("/api/skills").json()[0]["proficiency"] == "intermediate"


def test_import_education_and_certifications(client):
    education = (
        "School Name,Start Date,End Date,Notes,Degree Name,Activities\n"
        "MIT,2010,2014,Dean's list,BSc,Chess club\n"
        "MIT,2010,2014,,BSc,\n"
    )
    result = _import(client, education)
    assert result["imported"] == [{"entity": "Institutions", "count": 1}]
    institution = client.get("/api/institutions").json()[0]
    assert institution["type"] == "university"
    assert institution["notes"] == "Dean's list\nActivities: Chess club"
    assert institution["start_date"] == "2010-01-01"

    certifications = (
        "Name,Url,Authority,Started On,Finished On,License Number\n"
        "CKA,https://cncf.io/cka,CNCF,Mar 2022,,ABC-123\n"
    )
    result = _import(client, certifications)
    assert result["imported"] == [{"entity": "Learning", "count": 1}]
    item = client.get("/api/learning").json()[0]
    assert item["learning_type"] == "certification"
    assert item["status"] == "completed"
    assert item["notes"] == "License: ABC-123\nURL: https://cncf.io/cka"


def test_import_positions(client):
    result = _import(client, POSITIONS_CSV)
    assert result["imported"] == [{"entity": "Jobs", "count": 2}]
    jobs = {j["company"]: j for j in client.get("/api/jobs").json()}
    assert jobs["Acme"]["is_current"] is False
    assert jobs["Acme"]["end_date"] == "2020-12-01"
    assert jobs["Globex"]["is_current"] is True


def test_import_skills(client):
    client.post("/api/skills", json={"name": "python"})
    result = _import(client, "Name\nPython\nSQL\n")
    assert result["imported"] == [{"entity": "Skills", "count": 1}]
    assert result["skipped"] == 1


def test_import_unknown_type(client):
    result = _import(client, "Foo,Bar\n1,2\n3,4\n")
    assert result["detected_type"] == "Unknown"
    assert result["imported"] == []
    assert result["skipped"] == 2
    assert len(result["errors"]) == 1


def test_import_empty_csv_rejected(client):
    response = client.post("/api/import/linkedin", json={"csv_data": "   "})
    assert response.status_code == 400


def test_import_history_records_audit(client):
    _import(client, "Name\nGo\n", "Skills.csv")
    history = client.get("/api/import/history").json()
    assert len(history) == 1
    assert history[0]["file_name"] == "Skills.csv"
    assert history[0]["detected_type"] == "Skills"
    assert history[0]["row_count"] == 1
    assert history[0]["imported"] == [{"entity": "Skills", "count": 1}]


def test_import_failure_rolls_back(client, monkeypatch):
    from careerhub.services import linkedin_import

    original = linkedin_import.LinkedInImporter.skill
    calls = []

    def flaky(self, row):
        calls.append(row)
        if len(calls) == 2:
            raise RuntimeError("database went away")
        return original(self, row)

    monkeypatch.setattr(linkedin_import.LinkedInImporter, "skill", flaky)
    response = client.post("/api/import/linkedin", json={"csv_data": "Name\nGo\nRust\n"})
    assert response.status_code == 400
    assert response.json()["detected_type"] == "Error"
    assert client.get("/api/skills").json() == []
    assert client.get("/api/import/history").json() == []


def test_row_error_is_recorded_and_skipped(client, monkeypatch):
    from careerhub.services import linkedin_import

    original = linkedin_import.LinkedInImporter.skill

    def picky(self, row):
        if row["Name"] == "Bad":
            raise ValueError("unreadable skill")
        return original(self, row)

    monkeypatch.setattr(linkedin_import.LinkedInImporter, "skill", picky)
    result = _import(client, "Name\nGo\nBad\nRust\n")
    assert result["imported"] == [{"entity": "Skills", "count": 2}]
    assert result["errors"] == ["Row 2: unreadable skill"]
    assert result["skipped"] == 1


def test_oversized_value_skips_only_that_row(client):
    csv_data = (
        "Company Name,Title,Started On\n"
        "Acme,Engineer,Jan 2019\n"
        f"{'X' * 201},Engineer,Jan 2020\n"
        "Globex,Lead,Jan 2021\n"
    )
    result = _import(client, csv_data)
    assert result["imported"] == [{"entity": "Jobs", "count": 2}]
    assert result["errors"] == ["Row 2: company is longer than 200 characters"]
    assert result["skipped"] == 1
    assert sorted(j["company"] for j in client.get("/api/jobs").json()) == ["Acme", "Globex"]


def test_database_error_undoes_only_that_row(client, monkeypatch):
    from careerhub.services import linkedin_import

    original = linkedin_import.insert_row

    def insert_then_fail(db, table, workspace_id, values):
        row = original(db, table, workspace_id, values)
        if values.get("name") == "Broken":
            db.execute(text("INSERT INTO missing_table VALUES (1)"))
        return row

    monkeypatch.setattr(linkedin_import, "insert_row", insert_then_fail)
    result = _import(client, "Name\nGo\nBroken\nRust\n")
    assert result["imported"] == [{"entity": "Skills", "count": 2}]
    assert result["skipped"] == 1
    assert len(result["errors"]) == 1
    assert result["errors"][0].startswith("Row 2: ")
    assert "missing_table" in result["errors"][0]
    assert sorted(s["name"] for s in client.get("/api/skills").json()) == ["Go", "Rust"]


def test_endorsement_dedup_matches_underscore_literally(client):
    header = "Endorsement Date,Skill Name,Endorser First Name,Endorser Last Name\n"
    _import(client, header + "2023/01/05 10:00:00 UTC,CX,Ada,Park\n")
    result = _import(client, header + "2023/02/05 10:00:00 UTC,C_,Ada,Park\n")
    counts = {i["entity"]: i["count"] for i in result["imported"]}
    assert counts == {"Skills": 1, "Interactions": 1}
