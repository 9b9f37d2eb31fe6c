from conftest import auth_headers


def test_default_roles_are_listed(client, school):
    roles = client.get("/api/roles", headers=school["headers"]).json()["data"]
    assert [r["name"] for r in roles] == ["Parent", "Teacher", "Tenant Admin"]
    assert all(r["is_system"] for r in roles)
    teacher = next(r for r in roles if r["name"] == "Teacher")
    assert "schedules:create" in {p["name"] for p in teacher["permissions"]}


def test_permission_catalogue(client, school):
    permissions = client.get("/api/roles/permissions", headers=school["headers"]).json()["data"]
    names = {p["name"] for p in permissions}
    assert "schedules:read" in names
    assert all(p["name"] == f"{p['resource']}:{p['action']}" for p in permissions)


def test_custom_role_lifecycle(client, school, make_user):
    headers = school["headers"]
    response = client.post("/api/roles", headers=headers, json={
        "name": "Timetabler", "permissions": ["schedules:read", "schedules:create"],
    })
    assert response.status_code == 201
    role = response.json()["data"]
    assert sorted(p["name"] for p in role["permissions"]) == ["schedules:create", "schedules:read"]

    assert client.post("/api/roles", headers=headers, json={"name": "Timetabler"}).status_code == 409

    user = make_user(school["tenant"].id)
    url = f"/api/roles/{role['id']}/users"
    assert client.post(url, headers=headers, json={"user_id": user.id}).status_code == 201
    assert client.post(url, headers=headers, json={"user_id": user.id}).status_code == 409
    assert client.get("/api/schedules", headers=auth_headers(user)).status_code == 200

    # Grants are re-read on every request, so narrowing the role takes effect immediately
    response = client.put(f"/api/roles/{role['id']}", headers=headers, json={"permissions": ["subjects:read"]})
    assert response.status_code == 200
    assert client.get("/api/schedules", headers=auth_headers(user)).status_code == 403

    assert client.delete(f"{url}/{user.id}", headers=headers).status_code == 200
    assert client.delete(f"{url}/{user.id}", headers=headers).status_code == 404

    assert client.delete(f"/api/roles/{role['id']}", headers=headers).status_code == 200


def test_unknown_and_malformed_permissions_are_400(client, school):
    response = client.post("/api/roles", headers=school["headers"], json={
        "name": "Bad", "permissions": ["schedules:teleport"],
    })
    assert response.status_code == 400
    assert response.json()["errors"] == [{"field": "permissions", "message": "schedules:teleport"}]

    response = client.post("/api/roles", headers=school["headers"], json={
        "name": "Worse", "permissions": ["everything"],
    })
    assert response.status_code == 400


def test_platform_permissions_cannot_be_granted(client, school, other_school):
    headers = school["headers"]
    response = client.post("/api/roles", headers=headers, json={
        "name": "Registrar", "permissions": ["tenants:read", "tenants:update", "users:read"],
    })
    assert response.status_code == 400
    assert response.json()["errors"] == [
        {"field": "permissions", "message": "tenants:read"},
        {"field": "permissions", "message": "tenants:update"},
    ]

    role = client.post("/api/roles", headers=headers, json={
        "name": "Registrar", "permissions": ["users:read"],
    }).json()["data"]
    response = client.put(f"/api/roles/{role['id']}", headers=headers, json={"permissions": ["tenants:update"]})
    assert response.status_code == 400

    assert client.get("/api/tenants", headers=headers).status_code == 403
    response = client.put(f"/api/tenants/{other_school['tenant'].id}", headers=headers, json={"name": "Owned"})
    assert response.status_code == 403


def test_system_roles_are_read_only(client, school):
    admin_role = school["roles"]["Tenant Admin"]
    response = client.put(f"/api/roles/{admin_role.id}", headers=school["headers"], json={"permissions": []})
    assert response.status_code == 400
    assert client.delete(f"/api/roles/{admin_role.id}", headers=school["headers"]).status_code == 400


def test_create_user_with_roles(client, school):
    response = client.post("/api/users", headers=school["headers"], json={
        "email": "Clerk@Example.org", "first_name": "Halima", "last_name": "Juma",
        "password": "ClerkPass123", "role_ids": [school["roles"]["Teacher"].id],
    })
    assert response.status_code == 201
    assert response.json()["data"]["email"] == "clerk@example.org"

    login = client.post("/api/auth/login", json={"email": "clerk@example.org", "password": "ClerkPass123"})
    assert login.json()["data"]["roles"] == ["Teacher"]


def test_create_user_rejects_foreign_role(client, school, other_school):
    response = client.post("/api/users", headers=school["headers"], json={
        "email": "clerk@example.org", "first_name": "Halima", "last_name": "Juma",
        "password": "ClerkPass123", "role_ids": [other_school["roles"]["Tenant Admin"].id],
    })
    assert response.status_code == 404


def test_deactivated_user_loses_access(client, school, make_user):
    user = make_user(school["tenant"].id, roles=[school["roles"]["Teacher"]])
    headers = auth_headers(user)
    assert client.get("/api/schedules", headers=headers).status_code == 200

    response = client.post(f"/api/users/{user.id}/deactivate", headers=school["headers"])
    assert response.json()["data"]["status"] == "INACTIVE"
    assert client.get("/api/schedules", headers=headers).status_code == 401
