import re

from conftest import auth_headers

from schoolhub.crud import role as role_crud, teacher as teacher_crud
from schoolhub.models.user import UserStatus
from schoolhub.services import teacher as teacher_module
from schoolhub.services.teacher import generate_teacher_code


def _teacher_body(email="j.mrema@example.org", **fields):
    body = {
        "first_name": "Juma",
        "last_name": "Mrema",
        "email": email,
        "date_of_birth": "1988-07-02",
        "gender": "MALE",
        "specialization": "Mathematics",
    }
    body.update(fields)
    return body


def test_generated_code_format():
    assert re.fullmatch(r"TCH\d{13,}\d{3}", generate_teacher_code())


def test_create_teacher_with_generated_code(client, db, school):
    response = client.post("/api/teachers", headers=school["headers"], json=_teacher_body())
    assert response.status_code == 201
    data = response.json()["data"]
    assert data["teacher_code"].startswith("TCH")
    assert data["user"]["email"] == "j.mrema@example.org"
    assert data["experience"] == 0
    assert role_crud.get_role_names(db, user_id=data["user"]["id"], tenant_id=school["tenant"].id) == ["Teacher"]


def test_explicit_duplicate_code_is_409(client, school, make_teacher):
    make_teacher(school["tenant"].id, code="T-100")
    response = client.post(
        "/api/teachers", headers=school["headers"], json=_teacher_body(teacher_code="T-100")
    )
    assert response.status_code == 409
    assert response.json()["message"] == "Teacher ID 'T-100' already exists"


def test_same_code_allowed_in_another_tenant(client, school, other_school, make_teacher):
    make_teacher(other_school["tenant"].id, code="T-100")
    response = client.post(
        "/api/teachers", headers=school["headers"], json=_teacher_body(teacher_code="T-100")
    )
    assert response.status_code == 201


def test_generated_code_retries_then_gives_up(client, db, school, make_teacher, monkeypatch):
    make_teacher(school["tenant"].id, code="TCH-TAKEN")
    calls = []

    def always_taken():
        calls.append(1)
        return "TCH-TAKEN"

    monkeypatch.setattr(teacher_module, "generate_teacher_code", always_taken)
    response = client.post("/api/teachers", headers=school["headers"], json=_teacher_body())

    assert response.status_code == 409
    assert response.json()["message"] == "Failed to generate a unique teacher ID, please retry"
    assert len(calls) == 5
    # Nothing from the failed attempt was kept
    listing = client.get("/api/users?search=mrema", headers=school["headers"]).json()
    assert listing["data"] == []


def test_generated_code_retry_recovers(client, school, make_teacher, monkeypatch):
    make_teacher(school["tenant"].id, code="TCH-TAKEN")
    codes = iter(["TCH-TAKEN", "TCH-TAKEN", "TCH-FREE"])
    monkeypatch.setattr(teacher_module, "generate_teacher_code", lambda: next(codes))

    response = client.post("/api/teachers", headers=school["headers"], json=_teacher_body())
    assert response.status_code == 201
    assert response.json()["data"]["teacher_code"] == "TCH-FREE"


def test_generated_code_insert_collision_retries(client, db, school, make_teacher, monkeypatch):
    # Another request took the code between the lookup and the insert
    make_teacher(school["tenant"].id, code="TCH-TAKEN")
    monkeypatch.setattr(teacher_crud, "get_by_code", lambda db, **kwargs: None)
    codes = iter(["TCH-TAKEN", "TCH-FREE"])
    monkeypatch.setattr(teacher_module, "generate_teacher_code", lambda: next(codes))

    response = client.post("/api/teachers", headers=school["headers"], json=_teacher_body())
    assert response.status_code == 201
    data = response.json()["data"]
    assert data["teacher_code"] == "TCH-FREE"
    assert data["user"]["email"] == "j.mrema@example.org"


def test_duplicate_email_is_409(client, school):
    assert client.post("/api/teachers", headers=school["headers"], json=_teacher_body()).status_code == 201
    response = client.post("/api/teachers", headers=school["headers"], json=_teacher_body())
    assert response.status_code == 409


def test_update_and_delete_teacher(client, db, school):
    created = client.post("/api/teachers", headers=school["headers"], json=_teacher_body()).json()["data"]
    url = f"/api/teachers/{created['id']}"

    response = client.put(url, headers=school["headers"], json={"first_name": "Yusuf", "experience": 6})
    assert response.status_code == 200
    assert response.json()["data"]["user"]["first_name"] == "Yusuf"
    assert response.json()["data"]["experience"] == 6

    assert client.delete(url, headers=school["headers"]).status_code == 200
    assert client.get(url, headers=school["headers"]).status_code == 404
    user = client.get(f"/api/users/{created['user']['id']}", headers=school["headers"]).json()["data"]
    assert user["status"] == UserStatus.INACTIVE.value


def test_subject_assignment(client, school, make_teacher, make_subject):
    teacher = make_teacher(school["tenant"].id)
    subject = make_subject(school["tenant"].id, "CHEM", "Chemistry")
    url = f"/api/teachers/{teacher.id}/subjects"

    response = client.post(url, headers=school["headers"], json={"subject_id": subject.id})
    assert response.status_code == 201
    assert client.post(url, headers=school["headers"], json={"subject_id": subject.id}).status_code == 409

    detail = client.get(f"/api/teachers/{teacher.id}", headers=school["headers"]).json()["data"]
    assert [s["subject_code"] for s in detail["subjects"]] == ["CHEM"]

    filtered = client.get(f"/api/teachers?subject_id={subject.id}", headers=school["headers"]).json()
    assert filtered["pagination"]["total"] == 1

    assert client.delete(f"{url}/{subject.id}", headers=school["headers"]).status_code == 200
    assert client.delete(f"{url}/{subject.id}", headers=school["headers"]).status_code == 404


def test_qualifications(client, school, make_teacher):
    teacher = make_teacher(school["tenant"].id)
    url = f"/api/teachers/{teacher.id}/qualifications"

    response = client.post(url, headers=school["headers"], json={
        "title": "BSc Education", "institution": "University of Dar es Salaam", "date_obtained": "2010-11-20",
    })
    assert response.status_code == 201
    qualification_id = response.json()["data"]["id"]

    response = client.put(f"{url}/{qualification_id}", headers=school["headers"], json={"certificate_number": "C-77"})
    assert response.json()["data"]["certificate_number"] == "C-77"

    assert len(client.get(url, headers=school["headers"]).json()["data"]) == 1
    assert client.delete(f"{url}/{qualification_id}", headers=school["headers"]).status_code == 200
    assert client.get(url, headers=school["headers"]).json()["data"] == []


def test_teacher_role_cannot_create_teachers(client, school, make_user):
    teacher_user = make_user(school["tenant"].id, roles=[school["roles"]["Teacher"]])
    headers = auth_headers(teacher_user)
    assert client.get("/api/teachers", headers=headers).status_code == 200
    assert client.post("/api/teachers", headers=headers, json=_teacher_body()).status_code == 403
