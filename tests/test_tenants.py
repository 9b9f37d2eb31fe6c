import pytest
from sqlalchemy import select, func

from schoolhub.crud import role as role_crud
from schoolhub.models.role import Role, UserRole
from schoolhub.models.tenant import Tenant
from schoolhub.models.user import User


def _tenant_body(domain="gamma.ac.tz", **fields):
    body = {
        "name": "Gamma Secondary",
        "email": f"office@{domain}",
        "domain": domain,
        "admin_first_name": "Rehema",
        "admin_last_name": "Said",
        "admin_email": f"head@{domain}",
        "admin_password": "HeadPass123",
    }
    body.update(fields)
    return body


def _count(db, model):
    return db.execute(select(func.count()).select_from(model)).scalar_one()


def test_bootstrap_creates_tenant_roles_and_admin(client, db, super_admin):
    response = client.post("/api/tenants", headers=super_admin["headers"], json=_tenant_body())
    assert response.status_code == 201
    data = response.json()["data"]
    assert data["tenant"]["domain"] == "gamma.ac.tz"
    assert data["tenant"]["status"] == "TRIAL"
    assert data["admin_email"] == "head@gamma.ac.tz"
    assert sorted(data["roles"]) == ["Parent", "Teacher", "Tenant Admin"]

    tenant_id = data["tenant"]["id"]
    assert role_crud.get_role_names(db, user_id=data["admin_user_id"], tenant_id=tenant_id) == ["Tenant Admin"]

    login = client.post("/api/auth/login", json={"email": "head@gamma.ac.tz", "password": "HeadPass123"})
    assert login.status_code == 200
    assert "teachers:create" in login.json()["data"]["permissions"]


def test_duplicate_domain_is_409(client, super_admin, school):
    response = client.post("/api/tenants", headers=super_admin["headers"], json=_tenant_body("alpha.ac.tz"))
    assert response.status_code == 409


def test_bootstrap_rolls_back_completely(client, db, super_admin, monkeypatch):
    tenants_before = _count(db, Tenant)
    users_before = _count(db, User)
    roles_before = _count(db, Role)
    assignments_before = _count(db, UserRole)

    def broken_assign(*args, **kwargs):
        raise RuntimeError("assignment failed")

    monkeypatch.setattr(role_crud, "assign_user", broken_assign)
    with pytest.raises(RuntimeError):
        client.post("/api/tenants", headers=super_admin["headers"], json=_tenant_body())

    assert _count(db, Tenant) == tenants_before
    assert _count(db, User) == users_before
    assert _count(db, Role) == roles_before
    assert _count(db, UserRole) == assignments_before


def test_invalid_body_is_400(client, super_admin):
    response = client.post(
        "/api/tenants", headers=super_admin["headers"],
        json=_tenant_body(domain="Not A Domain", admin_password="short"),
    )
    assert response.status_code == 400
    fields = {e["field"] for e in response.json()["errors"]}
    assert {"domain", "admin_password"} <= fields


def test_tenant_admin_cannot_create_tenants(client, school):
    response = client.post("/api/tenants", headers=school["headers"], json=_tenant_body())
    assert response.status_code == 403


def test_list_and_update_tenants(client, super_admin, school, other_school):
    body = client.get("/api/tenants?search=alpha", headers=super_admin["headers"]).json()
    assert [t["domain"] for t in body["data"]] == ["alpha.ac.tz"]

    tenant_id = school["tenant"].id
    response = client.put(f"/api/tenants/{tenant_id}", headers=super_admin["headers"], json={"status": "SUSPENDED"})
    assert response.status_code == 200
    assert response.json()["data"]["status"] == "SUSPENDED"

    # Suspension locks the school out
    assert client.get("/api/schedules", headers=school["headers"]).status_code == 403
    login = client.post("/api/auth/login", json={"email": "admin@alpha.ac.tz", "password": "AdminPass123"})
    assert login.status_code == 403


def test_unknown_tenant_is_404(client, super_admin):
    assert client.get("/api/tenants/9999", headers=super_admin["headers"]).status_code == 404
