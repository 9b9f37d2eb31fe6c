import inspect
import io

from fastapi import UploadFile
from starlette.datastructures import Headers

from main import app
from schoolhub.core.config import settings
from schoolhub.services.content import content_service, parse_tags


def test_parse_tags():
    assert parse_tags(" algebra, ,form 2 ,revision ") == ["algebra", "form 2", "revision"]
    assert parse_tags(None) == []


def test_upload_pdf(client, school, upload_dir, make_subject):
    subject = make_subject(school["tenant"].id, "MATH", "Mathematics")
    response = client.post(
        "/api/content",
        headers=school["headers"],
        data={"title": "Algebra notes", "content_type": "DOCUMENT", "subject_id": str(subject.id),
              "tags": "algebra, form 2"},
        files={"file": ("notes.pdf", b"%PDF-1.4 test", "application/pdf")},
    )
    assert response.status_code == 201
    data = response.json()["data"]
    assert data["status"] == "DRAFT"
    assert data["file_name"] == "notes.pdf"
    assert data["file_size"] == len(b"%PDF-1.4 test")
    assert data["tags"] == ["algebra", "form 2"]
    assert data["subject"]["subject_code"] == "MATH"

    stored = list((upload_dir / "content").iterdir())
    assert len(stored) == 1
    assert stored[0].suffix == ".pdf"

    assert client.delete(f"/api/content/{data['id']}", headers=school["headers"]).status_code == 200
    assert list((upload_dir / "content").iterdir()) == []


def test_disallowed_mime_type_is_400(client, school, upload_dir):
    response = client.post(
        "/api/content",
        headers=school["headers"],
        data={"title": "Script"},
        files={"file": ("run.sh", b"#!/bin/sh", "application/x-sh")},
    )
    assert response.status_code == 400
    assert response.json()["message"] == "File type application/x-sh not allowed"
    assert not (upload_dir / "content").exists()


def test_oversized_file_is_400(client, school, upload_dir, monkeypatch):
    monkeypatch.setattr(settings, "MAX_UPLOAD_SIZE", 10)
    response = client.post(
        "/api/content",
        headers=school["headers"],
        data={"title": "Too big"},
        files={"file": ("big.txt", b"x" * 11, "text/plain")},
    )
    assert response.status_code == 400
    assert list((upload_dir / "content").iterdir()) == []


def test_unknown_subject_removes_file(client, school, upload_dir):
    response = client.post(
        "/api/content",
        headers=school["headers"],
        data={"title": "Orphan", "subject_id": "9999"},
        files={"file": ("a.txt", b"hello", "text/plain")},
    )
    assert response.status_code == 404
    assert list((upload_dir / "content").iterdir()) == []


def test_metadata_only_and_update(client, school, upload_dir):
    response = client.post("/api/content", headers=school["headers"], data={"title": "Reading list"})
    assert response.status_code == 201
    content_id = response.json()["data"]["id"]
    assert response.json()["data"]["file_name"] is None

    response = client.put(f"/api/content/{content_id}", headers=school["headers"],
                          json={"status": "PUBLISHED", "tags": ["literature"]})
    assert response.json()["data"]["status"] == "PUBLISHED"
    assert response.json()["data"]["tags"] == ["literature"]

    listing = client.get("/api/content?status=PUBLISHED", headers=school["headers"]).json()
    assert listing["pagination"]["total"] == 1


def test_upload_route_is_a_threadpool_handler():
    route = next(
        r for r in app.routes
        if getattr(r, "path", None) == "/api/content" and "POST" in getattr(r, "methods", ())
    )
    assert not inspect.iscoroutinefunction(route.endpoint)
    assert not inspect.iscoroutinefunction(content_service.store_upload)


def test_store_upload_copies_in_chunks(upload_dir, monkeypatch):
    monkeypatch.setattr("schoolhub.services.content.CHUNK_SIZE", 4)
    upload = UploadFile(
        file=io.BytesIO(b"line one\nline two\n"),
        filename="notes.txt",
        headers=Headers({"content-type": "text/plain"}),
    )
    info = content_service.store_upload(upload)
    assert info["file_size"] == 18
    assert info["mime_type"] == "text/plain"
    assert (upload_dir / "content" / info["file_path"]).read_bytes() == b"line one\nline two\n"
