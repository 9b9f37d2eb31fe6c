from datetime import date, timedelta

import pytest

from conftest import auth_headers, enroll, link
from schoolhub.models.student import EnrollmentStatus
from schoolhub.models.student_record import AttendanceRecord, AttendanceStatus, Grade, HealthRecord
from schoolhub.crud import role as role_crud

CHILD_ENDPOINTS = ("academic-records", "attendance", "grades", "schedule", "health-records")


def test_create_parent_grants_parent_role(client, db, school, make_user):
    user = make_user(school["tenant"].id)
    response = client.post("/api/parents", headers=school["headers"], json={
        "user_id": user.id, "relationship": "FATHER", "occupation": "Engineer",
    })
    assert response.status_code == 201
    data = response.json()["data"]
    assert data["relationship"] == "FATHER"
    assert data["user"]["id"] == user.id
    assert role_crud.get_role_names(db, user_id=user.id, tenant_id=school["tenant"].id) == ["Parent"]

    again = client.post("/api/parents", headers=school["headers"], json={
        "user_id": user.id, "relationship": "FATHER",
    })
    assert again.status_code == 409


def test_duplicate_relation_is_409(client, school, make_parent, make_student):
    parent = make_parent(school["tenant"].id)
    student = make_student(school["tenant"].id)
    url = f"/api/parents/{parent.id}/students"
    body = {"student_id": student.id, "relationship": "MOTHER", "is_primary": True}

    first = client.post(url, headers=school["headers"], json=body)
    assert first.status_code == 201
    data = first.json()["data"]
    assert data["relationship"] == "MOTHER"
    assert data["student"]["admission_number"] == student.admission_number

    second = client.post(url, headers=school["headers"], json=body)
    assert second.status_code == 409
    assert second.json()["success"] is False


def test_relation_requires_existing_parent_and_student(client, school, make_parent, make_student):
    parent = make_parent(school["tenant"].id)
    student = make_student(school["tenant"].id)

    response = client.post("/api/parents/9999/students", headers=school["headers"],
                           json={"student_id": student.id, "relationship": "MOTHER"})
    assert response.status_code == 404
    response = client.post(f"/api/parents/{parent.id}/students", headers=school["headers"],
                           json={"student_id": 9999, "relationship": "MOTHER"})
    assert response.status_code == 404


def test_relation_update_and_delete(client, db, school, make_parent, make_student):
    parent = make_parent(school["tenant"].id)
    student = make_student(school["tenant"].id)
    relation = link(db, parent, student)
    url = f"/api/parents/{parent.id}/students/{relation.id}"

    response = client.put(url, headers=school["headers"], json={"can_pickup": True, "relationship": "GUARDIAN"})
    assert response.status_code == 200
    assert response.json()["data"]["can_pickup"] is True
    assert response.json()["data"]["relationship"] == "GUARDIAN"

    assert client.delete(url, headers=school["headers"]).status_code == 200
    listing = client.get(f"/api/parents/{parent.id}/students", headers=school["headers"])
    assert listing.json()["data"] == []


def test_statistics(client, db, school, make_parent, make_student):
    parent = make_parent(school["tenant"].id)
    link(db, parent, make_student(school["tenant"].id), is_primary=True, can_pickup=True)
    link(db, parent, make_student(school["tenant"].id), is_emergency=True)

    stats = client.get(f"/api/parents/{parent.id}/statistics", headers=school["headers"]).json()["data"]
    assert stats == {"total_children": 2, "primary_for": 1, "emergency_contact_for": 1, "can_pickup": 1}


@pytest.mark.parametrize("endpoint", CHILD_ENDPOINTS)
def test_child_data_requires_relation(client, school, make_parent, make_student, endpoint):
    parent = make_parent(school["tenant"].id)
    unrelated = make_student(school["tenant"].id)

    response = client.get(f"/api/parents/{parent.id}/children/{unrelated.id}/{endpoint}", headers=school["headers"])
    assert response.status_code == 403
    assert response.json()["message"] == "Access denied to this student's records"


@pytest.mark.parametrize("endpoint", CHILD_ENDPOINTS)
def test_nonexistent_student_is_403_not_404(client, school, make_parent, endpoint):
    parent = make_parent(school["tenant"].id)
    response = client.get(f"/api/parents/{parent.id}/children/424242/{endpoint}", headers=school["headers"])
    assert response.status_code == 403


def test_relation_removal_revokes_access(client, db, school, make_parent, make_student):
    parent = make_parent(school["tenant"].id)
    student = make_student(school["tenant"].id)
    relation = link(db, parent, student)
    url = f"/api/parents/{parent.id}/children/{student.id}/grades"

    assert client.get(url, headers=school["headers"]).status_code == 200
    client.delete(f"/api/parents/{parent.id}/students/{relation.id}", headers=school["headers"])
    assert client.get(url, headers=school["headers"]).status_code == 403


def test_child_records(client, db, school, make_parent, make_student):
    tenant_id = school["tenant"].id
    parent = make_parent(tenant_id)
    student = make_student(tenant_id)
    link(db, parent, student)

    start = date(2025, 1, 1)
    db.add_all([
        AttendanceRecord(tenant_id=tenant_id, student_id=student.id, date=start + timedelta(days=i),
                         status=AttendanceStatus.PRESENT)
        for i in range(35)
    ])
    db.add(Grade(tenant_id=tenant_id, student_id=student.id, assessment="Midterm", score=78, max_score=100,
                 grade="B", recorded_on=start))
    db.add(HealthRecord(tenant_id=tenant_id, student_id=student.id, record_type="ALLERGY",
                        description="Peanuts", recorded_on=start))
    db.commit()

    base = f"/api/parents/{parent.id}/children/{student.id}"
    attendance = client.get(f"{base}/attendance", headers=school["headers"]).json()["data"]
    assert len(attendance) == 30
    assert attendance[0]["date"] == "2025-02-04"

    grades = client.get(f"{base}/grades", headers=school["headers"]).json()["data"]
    assert grades[0]["assessment"] == "Midterm"

    health = client.get(f"{base}/health-records", headers=school["headers"]).json()["data"]
    assert health[0]["description"] == "Peanuts"


def test_child_schedule_uses_active_enrollments(client, db, school, make_parent, make_student, make_class,
                                                make_schedule):
    tenant_id = school["tenant"].id
    parent = make_parent(tenant_id)
    student = make_student(tenant_id)
    link(db, parent, student)

    current = make_class(tenant_id, "Form 2A")
    previous = make_class(tenant_id, "Form 1A")
    unrelated = make_class(tenant_id, "Form 3B")
    enroll(db, student, current)
    enroll(db, student, previous, status=EnrollmentStatus.COMPLETED)

    make_schedule(tenant_id, "09:00", "10:00", title="Form 2A maths", class_id=current.id)
    make_schedule(tenant_id, "09:00", "10:00", title="Form 2A art", class_id=current.id,
                  on_date=date(2025, 3, 1))
    make_schedule(tenant_id, "09:00", "10:00", title="Form 1A maths", class_id=previous.id)
    make_schedule(tenant_id, "09:00", "10:00", title="Form 3B maths", class_id=unrelated.id)

    url = f"/api/parents/{parent.id}/children/{student.id}/schedule"
    titles = [s["title"] for s in client.get(url, headers=school["headers"]).json()["data"]]
    assert titles == ["Form 2A maths", "Form 2A art"]

    ranged = client.get(f"{url}?start_date=2025-02-01", headers=school["headers"]).json()["data"]
    assert [s["title"] for s in ranged] == ["Form 2A art"]


def test_child_schedule_empty_without_enrollment(client, db, school, make_parent, make_student, make_schedule):
    tenant_id = school["tenant"].id
    parent = make_parent(tenant_id)
    student = make_student(tenant_id)
    link(db, parent, student)
    make_schedule(tenant_id, "09:00", "10:00")

    response = client.get(f"/api/parents/{parent.id}/children/{student.id}/schedule", headers=school["headers"])
    assert response.status_code == 200
    assert response.json()["data"] == []


def test_parent_role_user_can_read_own_child(client, db, school, make_parent, make_student):
    parent = make_parent(school["tenant"].id, parent_role=school["roles"]["Parent"])
    student = make_student(school["tenant"].id)
    link(db, parent, student)

    headers = auth_headers(parent.user)
    assert client.get(f"/api/parents/{parent.id}/children/{student.id}/grades", headers=headers).status_code == 200
    # Parent role can read but not create links
    response = client.post(f"/api/parents/{parent.id}/students", headers=headers,
                           json={"student_id": student.id, "relationship": "MOTHER"})
    assert response.status_code == 403


@pytest.mark.parametrize("endpoint", CHILD_ENDPOINTS)
def test_parent_cannot_read_another_familys_child(client, db, school, make_parent, make_student, endpoint):
    parent_role = school["roles"]["Parent"]
    mine = make_parent(school["tenant"].id, parent_role=parent_role)
    theirs = make_parent(school["tenant"].id, parent_role=parent_role)
    student = make_student(school["tenant"].id)
    link(db, theirs, student)

    response = client.get(f"/api/parents/{theirs.id}/children/{student.id}/{endpoint}",
                          headers=auth_headers(mine.user))
    assert response.status_code == 403
    assert response.json()["message"] == "Access denied to this student's records"

    # The school admin still sees every family
    admin_view = client.get(f"/api/parents/{theirs.id}/children/{student.id}/{endpoint}", headers=school["headers"])
    assert admin_view.status_code == 200


def test_parent_sees_only_own_profile(client, db, school, make_parent, make_student):
    parent_role = school["roles"]["Parent"]
    mine = make_parent(school["tenant"].id, parent_role=parent_role)
    theirs = make_parent(school["tenant"].id, parent_role=parent_role)
    link(db, theirs, make_student(school["tenant"].id))
    headers = auth_headers(mine.user)

    listing = client.get("/api/parents", headers=headers).json()
    assert [p["id"] for p in listing["data"]] == [mine.id]
    assert listing["pagination"]["total"] == 1

    assert client.get(f"/api/parents/{mine.id}", headers=headers).status_code == 200
    for path in ("", "/students", "/statistics"):
        assert client.get(f"/api/parents/{theirs.id}{path}", headers=headers).status_code == 403

    assert client.get("/api/parents", headers=school["headers"]).json()["pagination"]["total"] == 2
