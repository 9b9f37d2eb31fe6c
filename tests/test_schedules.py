import csv
import io
from datetime import date, timedelta

import pytest

from schoolhub.models.schedule import ScheduleStatus, ScheduleType
from schoolhub.services.schedule import EXPORT_COLUMNS


def _payload(teacher_id=None, start="09:00", end="10:00", on_date="2025-01-15", **fields):
    body = {
        "title": "Mathematics",
        "type": "CLASS",
        "date": on_date,
        "start_time": start,
        "end_time": end,
        "teacher_id": teacher_id,
    }
    body.update(fields)
    return body


@pytest.mark.parametrize("start,end,expected", [
    ("09:30", "10:30", 409),  # partial overlap
    ("10:00", "11:00", 201),  # touches the end boundary
    ("08:00", "09:00", 201),  # touches the start boundary
    ("09:00", "10:00", 409),  # exact duplicate
    ("08:00", "11:00", 409),  # contains the existing slot
    ("09:15", "09:45", 409),  # inside the existing slot
])
def test_overlap_rules(client, school, make_teacher, start, end, expected):
    teacher = make_teacher(school["tenant"].id)
    first = client.post("/api/schedules", headers=school["headers"], json=_payload(teacher.id))
    assert first.status_code == 201

    response = client.post(
        "/api/schedules", headers=school["headers"], json=_payload(teacher.id, start, end)
    )
    assert response.status_code == expected
    if expected == 409:
        body = response.json()
        assert body["success"] is False
        assert "Mathematics" in body["message"]
        assert body["errors"][0]["schedule_id"] == first.json()["data"]["id"]


def test_conflict_only_for_same_teacher_and_date(client, school, make_teacher):
    first_teacher = make_teacher(school["tenant"].id)
    second_teacher = make_teacher(school["tenant"].id)
    headers = school["headers"]

    assert client.post("/api/schedules", headers=headers, json=_payload(first_teacher.id)).status_code == 201
    assert client.post("/api/schedules", headers=headers, json=_payload(second_teacher.id)).status_code == 201
    response = client.post(
        "/api/schedules", headers=headers, json=_payload(first_teacher.id, on_date="2025-01-16")
    )
    assert response.status_code == 201


def test_cancelled_and_completed_do_not_block(client, school, make_teacher, make_schedule):
    teacher = make_teacher(school["tenant"].id)
    make_schedule(school["tenant"].id, "09:00", "10:00", teacher_id=teacher.id, status=ScheduleStatus.CANCELLED)
    make_schedule(school["tenant"].id, "09:00", "10:00", teacher_id=teacher.id, status=ScheduleStatus.COMPLETED)

    response = client.post("/api/schedules", headers=school["headers"], json=_payload(teacher.id))
    assert response.status_code == 201


def test_draft_blocks(client, school, make_teacher, make_schedule):
    teacher = make_teacher(school["tenant"].id)
    make_schedule(school["tenant"].id, "09:00", "10:00", teacher_id=teacher.id, status=ScheduleStatus.DRAFT)

    response = client.post("/api/schedules", headers=school["headers"], json=_payload(teacher.id, "09:30", "09:45"))
    assert response.status_code == 409


def test_entries_without_teacher_never_conflict(client, school):
    headers = school["headers"]
    assert client.post("/api/schedules", headers=headers, json=_payload()).status_code == 201
    assert client.post("/api/schedules", headers=headers, json=_payload()).status_code == 201


@pytest.mark.parametrize("start,end", [("10:00", "09:00"), ("09:00", "09:00")])
def test_end_must_follow_start(client, school, start, end):
    response = client.post("/api/schedules", headers=school["headers"], json=_payload(start=start, end=end))
    assert response.status_code == 400
    assert response.json()["message"] == "End time must be after start time"


def test_missing_fields_are_400(client, school):
    response = client.post("/api/schedules", headers=school["headers"], json={"title": "No times"})
    assert response.status_code == 400
    fields = {e["field"] for e in response.json()["errors"]}
    assert {"type", "date", "start_time", "end_time"} <= fields


def test_creator_is_recorded(client, school):
    response = client.post("/api/schedules", headers=school["headers"], json=_payload())
    data = response.json()["data"]
    assert data["created_by_user"]["id"] == school["admin"].id
    assert data["updated_by_user"]["id"] == school["admin"].id


def test_update_rechecks_conflicts_excluding_itself(client, school, make_teacher, make_schedule):
    teacher = make_teacher(school["tenant"].id)
    tenant_id = school["tenant"].id
    morning = make_schedule(tenant_id, "09:00", "10:00", teacher_id=teacher.id)
    make_schedule(tenant_id, "11:00", "12:00", teacher_id=teacher.id)
    headers = school["headers"]

    # Shrinking within its own slot does not clash with itself
    response = client.put(f"/api/schedules/{morning.id}", headers=headers, json={"end_time": "09:45"})
    assert response.status_code == 200
    assert response.json()["data"]["end_time"] == "09:45:00"

    response = client.put(f"/api/schedules/{morning.id}", headers=headers, json={"end_time": "11:30"})
    assert response.status_code == 409

    response = client.put(
        f"/api/schedules/{morning.id}", headers=headers, json={"start_time": "10:00", "end_time": "11:00"}
    )
    assert response.status_code == 200


def test_update_to_cancelled_skips_check(client, school, make_teacher, make_schedule):
    teacher = make_teacher(school["tenant"].id)
    tenant_id = school["tenant"].id
    make_schedule(tenant_id, "09:00", "10:00", teacher_id=teacher.id)
    other = make_schedule(tenant_id, "10:00", "11:00", teacher_id=teacher.id)

    response = client.put(
        f"/api/schedules/{other.id}", headers=school["headers"],
        json={"start_time": "09:30", "status": "CANCELLED"},
    )
    assert response.status_code == 200
    assert response.json()["data"]["status"] == "CANCELLED"


def test_update_validates_merged_times(client, school, make_schedule):
    schedule = make_schedule(school["tenant"].id, "09:00", "10:00")
    response = client.put(f"/api/schedules/{schedule.id}", headers=school["headers"], json={"start_time": "10:30"})
    assert response.status_code == 400


def test_update_title_only_skips_conflict_scan(client, db, school, make_teacher, make_schedule):
    teacher = make_teacher(school["tenant"].id)
    tenant_id = school["tenant"].id
    # Overlapping rows can pre-exist (e.g. imported data); editing a title must still work
    first = make_schedule(tenant_id, "09:00", "10:00", teacher_id=teacher.id)
    make_schedule(tenant_id, "09:30", "10:30", teacher_id=teacher.id)

    response = client.put(f"/api/schedules/{first.id}", headers=school["headers"], json={"title": "Renamed"})
    assert response.status_code == 200
    assert response.json()["data"]["title"] == "Renamed"


def test_delete(client, school, make_schedule):
    schedule = make_schedule(school["tenant"].id, "09:00", "10:00")
    response = client.delete(f"/api/schedules/{schedule.id}", headers=school["headers"])
    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Schedule deleted successfully"}
    assert client.get(f"/api/schedules/{schedule.id}", headers=school["headers"]).status_code == 404


def test_list_filters_and_pagination(client, school, make_teacher, make_schedule):
    tenant_id = school["tenant"].id
    teacher = make_teacher(tenant_id)
    make_schedule(tenant_id, "09:00", "10:00", on_date=date(2025, 1, 13), title="Algebra", teacher_id=teacher.id)
    make_schedule(tenant_id, "09:00", "10:00", on_date=date(2025, 1, 14), title="Chemistry lab",
                  location="Lab 2", type=ScheduleType.EXAM)
    make_schedule(tenant_id, "09:00", "10:00", on_date=date(2025, 1, 15), title="Assembly",
                  type=ScheduleType.EVENT, status=ScheduleStatus.CANCELLED)
    headers = school["headers"]

    body = client.get("/api/schedules?limit=2", headers=headers).json()
    assert [s["title"] for s in body["data"]] == ["Algebra", "Chemistry lab"]
    assert body["pagination"] == {"page": 1, "limit": 2, "total": 3, "pages": 2}

    body = client.get("/api/schedules?limit=2&page=2", headers=headers).json()
    assert [s["title"] for s in body["data"]] == ["Assembly"]

    body = client.get("/api/schedules?sort_order=desc", headers=headers).json()
    assert body["data"][0]["title"] == "Assembly"

    assert len(client.get("/api/schedules?type=EXAM", headers=headers).json()["data"]) == 1
    assert len(client.get("/api/schedules?status=CANCELLED", headers=headers).json()["data"]) == 1
    assert len(client.get(f"/api/schedules?teacher_id={teacher.id}", headers=headers).json()["data"]) == 1
    assert len(client.get("/api/schedules?search=lab", headers=headers).json()["data"]) == 1
    assert len(client.get("/api/schedules?date=2025-01-14", headers=headers).json()["data"]) == 1

    body = client.get("/api/schedules?start_date=2025-01-14&end_date=2025-01-15", headers=headers).json()
    assert body["pagination"]["total"] == 2


def test_list_rejects_unknown_sort_key(client, school):
    response = client.get("/api/schedules?sort_by=password", headers=school["headers"])
    assert response.status_code == 400


def test_stats(client, school, make_schedule):
    tenant_id = school["tenant"].id
    today = date.today()
    make_schedule(tenant_id, "09:00", "10:00", on_date=today)
    make_schedule(tenant_id, "09:00", "10:00", on_date=today + timedelta(days=3), type=ScheduleType.EXAM)
    make_schedule(tenant_id, "09:00", "10:00", on_date=today + timedelta(days=2), status=ScheduleStatus.CANCELLED)
    make_schedule(tenant_id, "09:00", "10:00", on_date=today + timedelta(days=30))

    stats = client.get("/api/schedules/stats", headers=school["headers"]).json()["data"]
    assert stats["total"] == 4
    assert stats["active"] == 3
    assert stats["today"] == 1
    assert stats["upcoming"] == 1
    assert stats["by_type"] == {"CLASS": 3, "EXAM": 1, "EVENT": 0, "MEETING": 0}
    assert stats["by_status"]["CANCELLED"] == 1
    assert stats["by_status"]["DRAFT"] == 0


def test_export_csv(client, school, make_teacher, make_subject, make_schedule):
    tenant_id = school["tenant"].id
    teacher = make_teacher(tenant_id)
    subject = make_subject(tenant_id, "PHY", "Physics")
    make_schedule(tenant_id, "11:00", "12:00", title="Later", teacher_id=teacher.id)
    make_schedule(tenant_id, "08:00", "09:00", title='Says "hi", twice', subject_id=subject.id,
                  location="Room 4")

    response = client.get("/api/schedules/export?format=csv", headers=school["headers"])
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert "attachment" in response.headers["content-disposition"]

    lines = response.text.splitlines()
    assert lines[0] == ",".join(f'"{c}"' for c in EXPORT_COLUMNS)
    assert lines[1].startswith('"Says ""hi"", twice","CLASS","2025-01-15","08:00","09:00","Physics","","Room 4"')

    rows = list(csv.reader(io.StringIO(response.text)))
    assert rows[0] == EXPORT_COLUMNS
    assert rows[2][0] == "Later"
    assert rows[2][6] == teacher.user.full_name
    assert rows[2][9] == ""


def test_export_json(client, school, make_schedule):
    make_schedule(school["tenant"].id, "09:00", "10:00", title="Only")
    body = client.get("/api/schedules/export?format=json", headers=school["headers"]).json()
    assert body["success"] is True
    assert [s["title"] for s in body["data"]] == ["Only"]


def test_export_rejects_unknown_format(client, school):
    response = client.get("/api/schedules/export?format=xml", headers=school["headers"])
    assert response.status_code == 400
