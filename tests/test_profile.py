from tests.conftest import create


def test_profile_created_at_registration(client):
    body = client.get("/api/profile").json()
    assert body["profile"]["full_name"] == "Jordan Lee"
    assert body["profile"]["email"] == "jordan@example.com"
    assert body["work"] == [] and body["education"] == []


def test_update_basics(client):
    response = client.put("/api/profile/basics", json={
        "label": "Platform Engineer",
        "summary": "Builds reliable systems.",
        "location": {"city": "Lisbon", "country": "Portugal"},
        "social_profiles": [{"network": "GitHub", "username": "jlee", "url": "https://github.com/jlee"}],
    })
    assert response.status_code == 200
    profile = response.json()
    assert profile["label"] == "Platform Engineer"
    assert profile["location"]["city"] == "Lisbon"
    assert profile["social_profiles"][0]["network"] == "GitHub"
    # untouched
    assert profile["full_name"] == "Jordan Lee"


def test_update_basics_rejects_bad_url(client):
    response = client.put("/api/profile/basics", json={"url": "ftp://example.com"})
    assert response.status_code == 400


def test_profile_includes_career_skills_and_projects(client):
    create(client, "skills", {"name": "Python"})
    create(client, "projects", {"name": "Apollo"})
    body = client.get("/api/profile").json()
    assert [s["name"] for s in body["skills"]] == ["Python"]
    assert [p["name"] for p in body["projects"]] == ["Apollo"]


def test_work_crud(client):
    work = create(client, "profile/work", {
        "company": "Acme", "position": "Engineer", "start_date": "2020-01-01",
        "highlights": ["Cut costs 30%"],
    })
    assert work["highlights"] == ["Cut costs 30%"]

    updated = client.put(f"/api/profile/work/{work['id']}", json={"position": "Senior Engineer"}).json()
    assert updated["position"] == "Senior Engineer"
    assert updated["company"] == "Acme"

    assert [w["id"] for w in client.get("/api/profile/work").json()] == [work["id"]]
    assert client.delete(f"/api/profile/work/{work['id']}").status_code == 200
    assert client.put(f"/api/profile/work/{work['id']}", json={"position": "x"}).status_code == 404


def test_education_crud(client):
    entry = create(client, "profile/education", {
        "institution": "MIT", "area": "Physics", "study_type": "Bachelor", "courses": ["Mechanics"],
    })
    updated = client.put(f"/api/profile/education/{entry['id']}", json={"score": "3.9"}).json()
    assert updated["score"] == "3.9"
    assert updated["courses"] == ["Mechanics"]
    assert client.delete(f"/api/profile/education/{entry['id']}").status_code == 200
    assert client.get("/api/profile/education").json() == []


def _seed_career(client):
    create(client, "jobs", {"title": "Engineer", "company": "Acme", "description": "Built things",
                            "start_date": "2019-01-01"})
    create(client, "jobs", {"title": "Lead", "company": "Globex", "start_date": "2021-01-01"})
    create(client, "learning", {"title": "Kubernetes", "provider": "CNCF", "learning_type": "certification"})
    create(client, "learning", {"title": "Stoicism", "learning_type": "book"})
    create(client, "learning", {"title": "Physics", "provider": "MIT", "learning_type": "degree"})


def test_populate_dry_run_writes_nothing(client):
    _seed_career(client)
    body = client.post("/api/profile/populate", json={"dry_run": True}).json()
    assert body["dry_run"] is True
    assert body["work_created"] == 2
    assert body["education_created"] == 3
    assert {"company": "Acme", "position": "Engineer"} in body["preview"]["work"]
    assert client.get("/api/profile/work").json() == []


def test_populate_merge_maps_and_skips_duplicates(client):
    _seed_career(client)
    create(client, "profile/work", {"company": "  ACME ", "position": "engineer"})

    body = client.post("/api/profile/populate", json={"mode": "merge"}).json()
    assert body["work_created"] == 1
    assert body["work_skipped"] == 1
    assert body["education_created"] == 3

    education = {e["area"]: e for e in client.get("/api/profile/education").json()}
    assert education["Kubernetes"]["study_type"] == "Certification"
    assert education["Kubernetes"]["institution"] == "CNCF"
    assert education["Stoicism"]["institution"] == "Self-directed"
    assert education["Stoicism"]["study_type"] == "book"
    assert education["Physics"]["study_type"] == "Bachelor"

    work = {w["company"]: w for w in client.get("/api/profile/work").json()}
    assert work["Globex"]["position"] == "Lead"

    again = client.post("/api/profile/populate", json={"mode": "merge"}).json()
    assert again["work_created"] == 0 and again["education_created"] == 0


def test_populate_replace_clears_first(client):
    _seed_career(client)
    create(client, "profile/work", {"company": "Old Co", "position": "Intern"})
    body = client.post("/api/profile/populate", json={"mode": "replace", "include_learning": False}).json()
    assert body["work_created"] == 2
    assert body["education_created"] == 0
    companies = sorted(w["company"] for w in client.get("/api/profile/work").json())
    assert companies == ["Acme", "Globex"]
    acme = [w for w in client.get("/api/profile/work").json() if w["company"] == "Acme"][0]
    assert acme["summary"] == "Built things"


def test_work_update_rejects_end_before_existing_start(client):
    work = create(client, "profile/work", {"company": "Acme", "position": "Engineer", "start_date": "2020-01-01"})
    response = client.put(f"/api/profile/work/{work['id']}", json={"end_date": "2019-06-01"})
    assert response.status_code == 400
    assert "end_date" in response.json()["error"]

    ok = client.put(f"/api/profile/work/{work['id']}", json={"start_date": "2019-01-01", "end_date": "2019-06-01"})
    assert ok.status_code == 200
    assert ok.json()["end_date"] == "2019-06-01"


def test_education_update_rejects_start_after_existing_end(client):
    entry = create(client, "profile/education", {
        "institution": "MIT", "start_date": "2015-09-01", "end_date": "2019-06-01",
    })
    response = client.put(f"/api/profile/education/{entry['id']}", json={"start_date": "2020-01-01"})
    assert response.status_code == 400
    assert client.get("/api/profile/education").json()[0]["start_date"] == "2015-09-01"
