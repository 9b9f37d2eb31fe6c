from datetime import timedelta

import pytest

from conftest import auth_headers
from schoolhub.core.security import create_access_token
from schoolhub.core.permissions import split_permission
from schoolhub.crud import role as role_crud, permission as permission_crud
from schoolhub.dependencies import require_permissions
from schoolhub.models.tenant import TenantStatus
from schoolhub.models.user import UserStatus
from schoolhub.services.authorization import AuthorizationService


def test_missing_token_is_401(client, school):
    response = client.get("/api/schedules")
    assert response.status_code == 401
    assert response.json() == {"success": False, "message": "Could not validate credentials"}


def test_malformed_and_expired_tokens_are_401(client, school):
    response = client.get("/api/schedules", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401

    admin = school["admin"]
    expired = create_access_token(
        data={"id": str(admin.id), "email": admin.email, "tenant_id": admin.tenant_id},
        expires_delta=timedelta(minutes=-5),
    )
    response = client.get("/api/schedules", headers={"Authorization": f"Bearer {expired}"})
    assert response.status_code == 401

    response = client.get("/api/schedules", headers={"Authorization": "Token abc"})
    assert response.status_code == 401


def test_unknown_user_in_token_is_401(client, school):
    token = create_access_token(data={"id": "9999", "email": "ghost@example.org", "tenant_id": 1})
    response = client.get("/api/schedules", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401


def test_inactive_user_is_401(client, db, school):
    admin = school["admin"]
    admin.status = UserStatus.INACTIVE
    db.commit()

    response = client.get("/api/schedules", headers=school["headers"])
    assert response.status_code == 401


def test_suspended_tenant_is_403(client, db, school):
    school["tenant"].status = TenantStatus.SUSPENDED
    db.commit()

    response = client.get("/api/schedules", headers=school["headers"])
    assert response.status_code == 403
    assert response.json()["message"] == "School account is not active"


def test_user_without_roles_is_403(client, school, make_user):
    user = make_user(school["tenant"].id)
    response = client.get("/api/schedules", headers=auth_headers(user))
    assert response.status_code == 403
    assert response.json()["success"] is False


def test_permissions_are_union_of_roles(client, db, school, make_user):
    tenant_id = school["tenant"].id
    perms = {p.name: p for p in permission_crud.get_all(db)}
    reader = role_crud.create_with_permissions(
        db, tenant_id=tenant_id, name="Timetable Reader", description=None,
        permissions=[perms["schedules:read"]],
    )
    writer = role_crud.create_with_permissions(
        db, tenant_id=tenant_id, name="Subject Writer", description=None,
        permissions=[perms["subjects:create"]],
    )

    only_reader = make_user(tenant_id, roles=[reader])
    both = make_user(tenant_id, roles=[reader, writer])

    assert client.get("/api/schedules", headers=auth_headers(only_reader)).status_code == 200
    response = client.post(
        "/api/subjects", json={"subject_name": "Biology", "subject_code": "BIO"},
        headers=auth_headers(only_reader),
    )
    assert response.status_code == 403

    response = client.post(
        "/api/subjects", json={"subject_name": "Biology", "subject_code": "BIO"},
        headers=auth_headers(both),
    )
    assert response.status_code == 201
    assert client.get("/api/schedules", headers=auth_headers(both)).status_code == 200


def test_has_permission_checks_every_role(db, school, make_user):
    tenant_id = school["tenant"].id
    teacher = make_user(tenant_id, roles=[school["roles"]["Teacher"]])
    both = make_user(tenant_id, roles=[school["roles"]["Teacher"], school["roles"]["Parent"]])
    service = AuthorizationService()

    assert service.has_permission(db, teacher.id, tenant_id, "schedules:create")
    assert not service.has_permission(db, teacher.id, tenant_id, "parents:read")
    assert service.has_permission(db, both.id, tenant_id, "parents:read")
    # Grants never leak across schools
    assert not service.has_permission(db, teacher.id, school["tenant"].id + 1000, "schedules:create")


def test_role_name_grants_nothing_by_itself(client, db, school, make_user):
    tenant_id = school["tenant"].id
    empty_super = role_crud.create_with_permissions(
        db, tenant_id=tenant_id, name="Super Admin", description=None, permissions=[],
    )
    user = make_user(tenant_id, roles=[empty_super])

    assert client.get("/api/schedules", headers=auth_headers(user)).status_code == 403


def test_super_admin_passes_through_grants(client, super_admin):
    response = client.get("/api/tenants", headers=super_admin["headers"])
    assert response.status_code == 200


def test_tenant_admin_cannot_list_tenants(client, school):
    response = client.get("/api/tenants", headers=school["headers"])
    assert response.status_code == 403


def test_missing_permissions_keeps_request_order():
    granted = {"schedules:read"}
    required = ["schedules:update", "schedules:read", "schedules:create"]
    assert AuthorizationService.missing_permissions(granted, required) == [
        "schedules:update", "schedules:create",
    ]


def test_require_permissions_rejects_bad_names():
    with pytest.raises(ValueError):
        require_permissions("schedules")
    with pytest.raises(ValueError):
        split_permission("Schedules:Read")


def test_me_lists_roles_and_permissions(client, school):
    response = client.get("/api/auth/me", headers=school["headers"])
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["roles"] == ["Tenant Admin"]
    assert "schedules:create" in data["permissions"]
    assert not any(p.startswith("tenants:") for p in data["permissions"])
