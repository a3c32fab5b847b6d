from tests.conftest import PASSWORD, register


def test_register_starts_session(anon_client):
    body = register(anon_client)
    assert body["user"]["email"] == "jordan@example.com"
    assert body["user"]["workspace_id"] > 0
    assert body["token_type"] == "bearer"
    assert "careerhub_session" in anon_client.cookies

    me = anon_client.get("/api/auth/me")
    assert me.status_code == 200
    assert me.json()["display_name"] == "Jordan Lee"


def test_register_duplicate_email(anon_client):
    register(anon_client)
    response = anon_client.post("/api/auth/register", json={"email": "JORDAN@example.com", "password": PASSWORD})
    assert response.status_code == 400
    assert response.json() == {"error": "Email already registered"}


def test_register_validation_error_shape(anon_client):
    response = anon_client.post("/api/auth/register", json={"email": "not-an-email", "password": "short"})
    assert response.status_code == 400
    assert "email" in response.json()["error"]
    assert "password" in response.json()["error"]


def test_protected_route_requires_session(anon_client):
    response = anon_client.get("/api/people")
    assert response.status_code == 401
    assert response.json() == {"error": "Not authenticated"}


def test_bearer_token_works_without_cookie(anon_client):
    token = register(anon_client)["access_token"]
    anon_client.cookies.clear()
    response = anon_client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 200


def test_login_and_logout(anon_client):
    register(anon_client)
    anon_client.post("/api/auth/logout")
    anon_client.cookies.clear()
    assert anon_client.get("/api/auth/me").status_code == 401

    response = anon_client.post("/api/auth/login", json={"email": "jordan@example.com", "password": PASSWORD})
    assert response.status_code == 200
    assert anon_client.get("/api/auth/me").status_code == 200


def test_login_wrong_password(anon_client):
    register(anon_client)
    response = anon_client.post("/api/auth/login", json={"email": "jordan@example.com", "password": "nope-nope"})
    assert response.status_code == 401
    assert response.json() == {"error": "Invalid email or password"}


def test_login_throttled_after_repeated_failures(anon_client):
    register(anon_client)
    for _ in range(5):
        anon_client.post("/api/auth/login", json={"email": "jordan@example.com", "password": "wrong-pass"})
    response = anon_client.post("/api/auth/login", json={"email": "jordan@example.com", "password": PASSWORD})
    assert response.status_code == 429


def test_register_seeds_view_presets(client):
    slugs = {v["slug"] for v in client.get("/api/view-definitions").json()}
    assert {"linkedin-style", "long-form-cv", "one-page-executive", "media-kit"} <= slugs
