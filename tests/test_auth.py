from schoolhub.core.security import verify_token


def test_login_returns_token_with_claims(client, school):
    response = client.post("/api/auth/login", json={"email": "admin@alpha.ac.tz", "password": "AdminPass123"})
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    data = body["data"]
    assert data["token_type"] == "bearer"
    assert data["roles"] == ["Tenant Admin"]
    assert data["user"]["last_login"] is not None

    claims = verify_token(data["access_token"])
    assert claims["id"] == str(school["admin"].id)
    assert claims["tenant_id"] == school["tenant"].id
    assert claims["email"] == "admin@alpha.ac.tz"

    me = client.get("/api/auth/me", headers={"Authorization": f"Bearer {data['access_token']}"})
    assert me.status_code == 200
    assert me.json()["data"]["user"]["id"] == school["admin"].id


def test_wrong_password_and_unknown_email_look_the_same(client, school):
    wrong = client.post("/api/auth/login", json={"email": "admin@alpha.ac.tz", "password": "nope-nope"})
    unknown = client.post("/api/auth/login", json={"email": "nobody@alpha.ac.tz", "password": "nope-nope"})
    assert wrong.status_code == unknown.status_code == 401
    assert wrong.json() == unknown.json() == {"success": False, "message": "Incorrect email or password"}


def test_shared_email_needs_tenant_domain(client, db, school, other_school, make_user):
    make_user(school["tenant"].id, email="shared@example.org")
    make_user(other_school["tenant"].id, email="shared@example.org")

    response = client.post("/api/auth/login", json={"email": "shared@example.org", "password": "UserPass123"})
    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "tenant_domain"

    response = client.post("/api/auth/login", json={
        "email": "shared@example.org", "password": "UserPass123", "tenant_domain": "beta.ac.tz",
    })
    assert response.status_code == 200
    assert verify_token(response.json()["data"]["access_token"])["tenant_id"] == other_school["tenant"].id


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "database": "connected"}
    assert "x-process-time" in response.headers
