"""Public share links."""
from datetime import datetime, timedelta, timezone

from careerhub.services.share_service import TOKEN_LENGTH
from tests.conftest import create


def _variant(client, name="Backend"):
    return create(client, "variants", {"name": name})


def test_create_link(client):
    variant = _variant(client)
    link = create(client, "share", {"resume_variant_id": variant["id"], "label": "Recruiters"})
    assert len(link["token"]) == TOKEN_LENGTH
    assert link["token"].isalnum()
    assert link["share_url"] == f"http://testserver/r/{link['token']}"
    assert link["has_password"] is False
    assert link["view_count"] == 0
    assert "password_hash" not in link


def test_tokens_are_unique(client):
    variant = _variant(client)
    tokens = {create(client, "share", {"resume_variant_id": variant["id"]})["token"] for _ in range(5)}
    assert len(tokens) == 5


def test_view_counts_and_renders(client, anon_client):
    variant = _variant(client)
    link = create(client, "share", {"resume_variant_id": variant["id"], "label": "Public"})

    response = anon_client.get(f"/api/share/view/{link['token']}")
    assert response.status_code == 200
    body = response.json()
    assert body["variant_name"] == "Backend"
    assert body["label"] == "Public"
    assert "Jordan Lee" in body["resume_html"]

    page = anon_client.get(f"/r/{link['token']}")
    assert page.status_code == 200
    assert "<h1>Jordan Lee</h1>" in page.text

    listed = client.get("/api/share").json()[0]
    assert listed["view_count"] == 2
    assert listed["last_viewed_at"] is not None


def test_password_protection(client, anon_client):
    variant = _variant(client)
    link = create(client, "share", {"resume_variant_id": variant["id"], "password": "open-sesame"})
    assert link["has_password"] is True

    url = f"/api/share/view/{link['token']}"
    missing = anon_client.get(url)
    assert missing.status_code == 401
    assert missing.json() == {"error": "Password required"}
    wrong = anon_client.get(url, params={"password": "nope"})
    assert wrong.json() == {"error": "Invalid password"}
    assert anon_client.get(url, params={"password": "open-sesame"}).status_code == 200

    cleared = client.put(f"/api/share/{link['id']}", json={"password": ""}).json()
    assert cleared["has_password"] is False
    assert anon_client.get(url).status_code == 200


def test_revoked_link_is_gone(client, anon_client):
    variant = _variant(client)
    link = create(client, "share", {"resume_variant_id": variant["id"]})
    revoked = client.post(f"/api/share/{link['id']}/revoke").json()
    assert revoked["is_revoked"] is True

    response = anon_client.get(f"/api/share/view/{link['token']}")
    assert response.status_code == 410
    page = anon_client.get(f"/r/{link['token']}")
    assert page.status_code == 410
    assert "no longer available" in page.text


def test_paused_link(client, anon_client):
    variant = _variant(client)
    link = create(client, "share", {"resume_variant_id": variant["id"]})
    client.put(f"/api/share/{link['id']}", json={"is_live": False})
    assert anon_client.get(f"/api/share/view/{link['token']}").status_code == 410
    client.put(f"/api/share/{link['id']}", json={"is_live": True})
    assert anon_client.get(f"/api/share/view/{link['token']}").status_code == 200


def test_expired_link(client, anon_client):
    variant = _variant(client)
    past = (datetime.now(timezone.utc) - timedelta(days=1)).isoformat()
    link = create(client, "share", {"resume_variant_id": variant["id"], "expires_at": past})
    response = anon_client.get(f"/api/share/view/{link['token']}")
    assert response.status_code == 410
    assert response.json() == {"error": "Share link has expired"}

    future = (datetime.now(timezone.utc) + timedelta(days=7)).isoformat()
    client.put(f"/api/share/{link['id']}", json={"expires_at": future})
    assert anon_client.get(f"/api/share/view/{link['token']}").status_code == 200


def test_unknown_token(anon_client):
    response = anon_client.get("/api/share/view/doesnotexist0000")
    assert response.status_code == 404
    page = anon_client.get("/r/doesnotexist0000")
    assert page.status_code == 404
    assert page.headers["content-type"].startswith("text/html")
    assert "<h1>404</h1>" in page.text
    assert "Share link not found" in page.text


def test_link_pinned_to_snapshot(client, anon_client):
    variant = _variant(client)
    snapshot = create(client, "snapshots", {"resume_variant_id": variant["id"],
                                            "snapshot_data": {"basics": {"name": "Frozen Jordan"}}})
    link = create(client, "share", {"resume_variant_id": variant["id"], "snapshot_id": snapshot["id"]})
    assert "Frozen Jordan" in anon_client.get(f"/r/{link['token']}").text

    # deleting the snapshot falls back to live data
    client.delete(f"/api/snapshots/{snapshot['id']}")
    page = anon_client.get(f"/r/{link['token']}").text
    assert "Frozen Jordan" not in page
    assert "Jordan Lee" in page


def test_snapshot_must_belong_to_variant(client):
    a = _variant(client, "A")
    b = _variant(client, "B")
    snapshot = create(client, "snapshots", {"resume_variant_id": a["id"]})
    response = client.post("/api/share", json={"resume_variant_id": b["id"], "snapshot_id": snapshot["id"]})
    assert response.status_code == 400


def test_links_are_workspace_scoped(client, other_client):
    variant = _variant(client)
    link = create(client, "share", {"resume_variant_id": variant["id"]})
    assert other_client.get("/api/share").json() == []
    assert other_client.post(f"/api/share/{link['id']}/revoke").status_code == 404
    assert other_client.post("/api/share", json={"resume_variant_id": variant["id"]}).status_code == 404


def test_short_password_rejected(client):
    variant = _variant(client)
    response = client.post("/api/share", json={"resume_variant_id": variant["id"], "password": "abc"})
    assert response.status_code == 400
