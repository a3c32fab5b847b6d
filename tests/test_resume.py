"""Variants, snapshots, view definitions and export."""
import base64
import io
import sys
import types

from docx import Document

from careerhub.services.export_service import export_filename, format_resume_date, to_markdown, to_text
from careerhub.services.resume_service import apply_view_definition
from tests.conftest import create


def _view_id(client, slug):
    return next(v["id"] for v in client.get("/api/view-definitions").json() if v["slug"] == slug)


def _seed_profile(client):
    client.put("/api/profile/basics", json={
        "label": "Engineer", "summary": "Ships things.", "url": "https://jordan.dev",
        "location": {"city": "Lisbon", "country": "Portugal"},
    })
    for year in range(2015, 2021):
        create(client, "profile/work", {
            "company": f"Company {year}", "position": "Engineer",
            "start_date": f"{year}-01-01", "end_date": f"{year}-12-31",
            "highlights": [f"Shipped {year}"],
        })
    create(client, "profile/education", {"institution": "MIT", "area": "Physics", "study_type": "Bachelor"})
    create(client, "skills", {"name": "Python", "proficiency": "expert", "category": "Languages"})
    create(client, "projects", {"name": "Apollo", "url": "https://apollo.dev"})


# ============================================================
# VARIANTS
# ============================================================

def test_variant_crud_and_primary_flag(client):
    first = create(client, "variants", {"name": "Backend", "is_primary": True})
    second = create(client, "variants", {"name": "Data", "is_primary": True})
    variants = {v["name"]: v for v in client.get("/api/variants").json()}
    assert variants["Data"]["is_primary"] is True
    assert variants["Backend"]["is_primary"] is False

    result = client.post(f"/api/variants/{first['id']}/set-primary").json()
    assert result["variant"]["is_primary"] is True
    assert result["previous_primary"]["id"] == second["id"]
    assert result["previous_primary"]["is_primary"] is False

    updated = client.put(f"/api/variants/{first['id']}", json={"target_role": "Staff Engineer"}).json()
    assert updated["target_role"] == "Staff Engineer"
    assert updated["is_primary"] is True


def test_variant_defaults_to_profile(client):
    variant = create(client, "variants", {"name": "General"})
    profile_id = client.get("/api/profile").json()["profile"]["id"]
    assert variant["profile_id"] == profile_id


def test_variant_not_found(client, other_client):
    variant = create(client, "variants", {"name": "Mine"})
    response = other_client.get(f"/api/variants/{variant['id']}")
    assert response.status_code == 404
    assert response.json() == {"error": "Variant not found"}


def test_variant_unknown_view_definition(client):
    response = client.post("/api/variants", json={"name": "X", "view_definition_id": 999})
    assert response.status_code == 400


def test_duplicate_is_never_primary(client):
    original = create(client, "variants", {"name": "Main", "is_primary": True,
                                           "view_definition_id": _view_id(client, "media-kit")})
    copy = create(client, f"variants/{original['id']}/duplicate", {"new_name": "Main copy"})
    assert copy["name"] == "Main copy"
    assert copy["is_primary"] is False
    assert copy["view_definition_id"] == original["view_definition_id"]


def test_delete_variant_removes_snapshots_and_links(client):
    variant = create(client, "variants", {"name": "Temp"})
    snapshot = create(client, "snapshots", {"resume_variant_id": variant["id"]})
    create(client, "share", {"resume_variant_id": variant["id"]})
    assert client.delete(f"/api/variants/{variant['id']}").status_code == 200
    assert client.get(f"/api/snapshots/{snapshot['id']}").status_code == 404
    assert client.get("/api/share").json() == []


def test_variant_detail(client):
    view_id = _view_id(client, "one-page-executive")
    variant = create(client, "variants", {"name": "Exec", "view_definition_id": view_id})
    create(client, "snapshots", {"resume_variant_id": variant["id"], "label": "first"})
    create(client, "snapshots", {"resume_variant_id": variant["id"], "label": "second"})
    detail = client.get(f"/api/variants/{variant['id']}").json()
    assert detail["variant"]["name"] == "Exec"
    assert [s["version_number"] for s in detail["snapshots"]] == [2, 1]
    assert detail["view_definition"]["slug"] == "one-page-executive"


# ============================================================
# VIEW DEFINITIONS
# ============================================================

def test_create_custom_view_definition(client):
    view = create(client, "view-definitions", {
        "name": "Tech Lead",
        "sections": {"work": {"visible": True, "max_items": 2}, "projects": {"visible": False}},
        "formatting": {"date_format": "yearOnly"},
    })
    assert view["slug"] == "tech-lead"
    assert view["is_preset"] is False
    again = create(client, "view-definitions", {"name": "Tech Lead", "sections": {}})
    assert again["slug"] == "tech-lead-2"


def test_view_definition_rejects_unknown_section(client):
    response = client.post("/api/view-definitions", json={"name": "X", "sections": {"hobbies": {}}})
    assert response.status_code == 400


def test_preset_cannot_be_deleted(client):
    response = client.delete(f"/api/view-definitions/{_view_id(client, 'media-kit')}")
    assert response.status_code == 400


def test_apply_view_definition_filters_sections():
    data = {
        "basics": {"name": "A", "summary": "S", "url": "https://a.dev", "location": {"city": "X"}, "profiles": []},
        "work": [{"name": str(i), "url": "https://w.dev"} for i in range(5)],
        "projects": [{"name": "P"}],
        "skills": [],
    }
    definition = {
        "slug": "custom",
        "sections": {"work": {"visible": True, "max_items": 2}, "projects": {"visible": False}},
        "formatting": {"include_urls": False, "include_location": False},
    }
    result = apply_view_definition(data, definition)
    assert [w["name"] for w in result["work"]] == ["0", "1"]
    assert "url" not in result["work"][0]
    assert "projects" not in result
    assert result["basics"]["url"] is None
    assert result["basics"]["location"] == {}
    assert result["meta"]["view_definition"] == "custom"


# ============================================================
# SNAPSHOTS
# ============================================================

def test_snapshot_captures_live_data(client):
    _seed_profile(client)
    variant = create(client, "variants", {"name": "Backend", "target_role": "Backend Engineer"})
    snapshot = create(client, "snapshots", {"resume_variant_id": variant["id"], "label": "v1"})
    data = snapshot["snapshot_data"]
    assert snapshot["version_number"] == 1
    assert data["basics"]["label"] == "Engineer"
    assert data["work"][0]["highlights"]
    assert data["skills"] == [{"name": "Python", "level": "expert", "keywords": ["Languages"]}]
    assert data["variant"] == {"name": "Backend", "target_role": "Backend Engineer"}


def test_snapshot_with_explicit_data_and_restore(client):
    variant = create(client, "variants", {"name": "Backend"})
    first = create(client, "snapshots", {"resume_variant_id": variant["id"], "label": "Launch",
                                         "snapshot_data": {"basics": {"name": "Frozen"}}})
    create(client, "snapshots", {"resume_variant_id": variant["id"]})

    restored = create(client, f"snapshots/{first['id']}/restore", {})
    assert restored["version_number"] == 3
    assert restored["label"] == "Restored from v1"
    assert restored["notes"] == "Restored from version 1 (Launch)"
    assert restored["snapshot_data"] == {"basics": {"name": "Frozen"}}

    listed = client.get("/api/snapshots", params={"variant_id": variant["id"]}).json()
    assert [s["version_number"] for s in listed] == [3, 2, 1]


def test_snapshot_label_length(client):
    variant = create(client, "variants", {"name": "Backend"})
    response = client.post("/api/snapshots", json={"resume_variant_id": variant["id"], "label": "x" * 101})
    assert response.status_code == 400


def test_snapshot_for_missing_variant(client):
    response = client.post("/api/snapshots", json={"resume_variant_id": 999})
    assert response.status_code == 404


# ============================================================
# EXPORT
# ============================================================

def test_export_json_applies_view_definition(client):
    _seed_profile(client)
    variant = create(client, "variants", {"name": "Exec", "view_definition_id": _view_id(client, "one-page-executive")})
    response = client.post("/api/export", json={"variant_id": variant["id"], "format": "json"})
    body = response.json()
    assert body["filename"] == "Exec_resume.json"
    assert body["content_type"] == "application/json"
    assert '"Company 2020"' in body["content"]
    # one-page executive keeps four roles and hides projects
    assert body["content"].count('"position": "Engineer"') == 4
    assert '"Apollo"' not in body["content"]


def test_export_markdown_and_txt(client):
    _seed_profile(client)
    variant = create(client, "variants", {"name": "Senior Backend"})
    md = client.post("/api/export", json={"variant_id": variant["id"], "format": "markdown"}).json()
    assert md["filename"] == "Senior_Backend_resume.md"
    assert md["content"].startswith("# Jordan Lee")
    assert "## Experience" in md["content"]
    assert "- Shipped 2019" in md["content"]

    txt = client.post("/api/export", json={"variant_id": variant["id"], "format": "txt"}).json()
    assert txt["content"].startswith("JORDAN LEE")
    assert txt["content_type"] == "text/plain"


def test_export_html_and_preview(client):
    _seed_profile(client)
    variant = create(client, "variants", {"name": "Web"})
    html = client.post("/api/export", json={
        "variant_id": variant["id"], "format": "html",
        "options": {"paper_size": "a4", "color_scheme": "bw", "include_links": False},
    }).json()
    assert "size: A4" in html["content"]
    assert "https://apollo.dev" not in html["content"]
    assert "Company 2018" in html["content"]

    preview = client.post("/api/export/preview", json={"variant_id": variant["id"]})
    assert preview.status_code == 200
    assert preview.headers["content-type"].startswith("text/html")
    assert "<h1>Jordan Lee</h1>" in preview.text


def test_export_docx_is_base64(client):
    _seed_profile(client)
    variant = create(client, "variants", {"name": "Docx"})
    body = client.post("/api/export", json={"variant_id": variant["id"], "format": "docx"}).json()
    assert body["content"] is None
    document = Document(io.BytesIO(base64.b64decode(body["content_base64"])))
    text = "\n".join(p.text for p in document.paragraphs)
    assert "Jordan Lee" in text
    assert "Company 2017" in text


def test_export_from_snapshot(client):
    variant = create(client, "variants", {"name": "Pinned"})
    snapshot = create(client, "snapshots", {"resume_variant_id": variant["id"],
                                            "snapshot_data": {"basics": {"name": "Snapshot Name"}}})
    body = client.post("/api/export", json={
        "variant_id": variant["id"], "snapshot_id": snapshot["id"], "format": "markdown",
    }).json()
    assert body["content"].startswith("# Snapshot Name")


def test_export_sparse_snapshot(client):
    variant = create(client, "variants", {"name": "Sparse"})
    snapshot = create(client, "snapshots", {"resume_variant_id": variant["id"], "snapshot_data": {
        "work": [{"name": "Acme"}],
        "education": [{"area": "Physics"}],
        "projects": [{"description": "Unnamed"}],
        "awards": [{}],
        "source": "manual",
    }})
    assert snapshot["snapshot_data"]["source"] == "manual"
    assert "skills" not in snapshot["snapshot_data"]

    for fmt in ("markdown", "txt", "html", "docx"):
        response = client.post("/api/export", json={
            "variant_id": variant["id"], "snapshot_id": snapshot["id"], "format": fmt,
        })
        assert response.status_code == 200, fmt

    md = client.post("/api/export", json={
        "variant_id": variant["id"], "snapshot_id": snapshot["id"], "format": "markdown",
    }).json()["content"]
    assert "### Acme" in md
    assert "Physics" in md


def test_snapshot_data_sections_must_be_lists(client):
    variant = create(client, "variants", {"name": "Bad"})
    response = client.post("/api/snapshots", json={
        "resume_variant_id": variant["id"], "snapshot_data": {"work": "Acme, 2020"},
    })
    assert response.status_code == 400
    assert "work" in response.json()["error"]


def test_export_pdf_renders_html(client, monkeypatch):
    rendered = {}

    class FakeHTML:
        def __init__(self, string, base_url=None):
            rendered["html"] = string

        def write_pdf(self):
            return b"%PDF-1.7 test"

    monkeypatch.setitem(sys.modules, "weasyprint", types.SimpleNamespace(HTML=FakeHTML))
    _seed_profile(client)
    variant = create(client, "variants", {"name": "Print Copy"})
    body = client.post("/api/export", json={
        "variant_id": variant["id"], "format": "pdf", "options": {"paper_size": "a4"},
    }).json()
    assert body["filename"] == "Print_Copy_resume.pdf"
    assert body["content_type"] == "application/pdf"
    assert body["content"] is None
    assert base64.b64decode(body["content_base64"]) == b"%PDF-1.7 test"
    assert "size: A4" in rendered["html"]
    assert "<h1>Jordan Lee</h1>" in rendered["html"]


def test_export_snapshot_of_other_variant(client):
    a = create(client, "variants", {"name": "A"})
    b = create(client, "variants", {"name": "B"})
    snapshot = create(client, "snapshots", {"resume_variant_id": a["id"]})
    response = client.post("/api/export", json={"variant_id": b["id"], "snapshot_id": snapshot["id"], "format": "json"})
    assert response.status_code == 404


def test_export_unknown_format(client):
    variant = create(client, "variants", {"name": "A"})
    response = client.post("/api/export", json={"variant_id": variant["id"], "format": "rtf"})
    assert response.status_code == 400


def test_export_helpers():
    assert export_filename("My  Resume\tv2", "pdf") == "My_Resume_v2_resume.pdf"
    assert format_resume_date("2023-04-09", "full") == "Apr 09, 2023"
    assert format_resume_date("2023-04-09", "yearOnly") == "2023"
    assert format_resume_date(None, "monthYear", "Present") == "Present"

    data = {"basics": {"name": "A"}, "work": [{"name": "Acme", "position": "Dev", "startDate": "2020-01-01"}]}
    assert "*Jan 2020 - Present*" in to_markdown(data)
    assert "Dev, Acme" in to_text(data)
