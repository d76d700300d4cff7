import os

from fastapi.testclient import TestClient
from sqlalchemy import insert

from campus_recruit.api.routes import student_routes
from campus_recruit.core.config import get_settings
from campus_recruit.db.database import engine
from campus_recruit.db.tables import applications, utcnow
from campus_recruit.main import app

PDF = b"%PDF-1.4 fake resume"
PNG = b"\x89PNG\r\n\x1a\n fake image"


def test_new_profile_comes_back_with_empty_strings(client, student):
    resp = client.get("/api/student/profile", headers=student["headers"])

    assert resp.status_code == 200
    body = resp.json()
    assert body["email"] == "ada@example.com"
    assert body["phone"] == ""
    assert body["resumeUrl"] == ""
    assert body["skills"] == []
    assert body["stats"] == {"applications": 0, "interviews": 0, "offers": 0}


def test_profile_requires_student(client, company):
    assert client.get("/api/student/profile", headers=company["headers"]).status_code == 403


def test_update_profile_fields(client, student):
    resp = client.put(
        "/api/student/profile",
        data={"name": "Ada King", "location": "London", "skills": "python, sql , ,fastapi", "bio": "Analyst"},
        headers=student["headers"],
    )
    assert resp.status_code == 200

    body = client.get("/api/student/profile", headers=student["headers"]).json()
    assert body["name"] == "Ada King"
    assert body["location"] == "London"
    assert body["bio"] == "Analyst"
    assert body["skills"] == ["python", "sql", "fastapi"]
    assert body["phone"] == ""


def test_update_profile_with_resume_and_image(client, student):
    resp = client.put(
        "/api/student/profile",
        files={
            "resume": ("ada.pdf", PDF, "application/pdf"),
            "profileImage": ("me.png", PNG, "image/png"),
        },
        headers=student["headers"],
    )
    assert resp.status_code == 200

    body = client.get("/api/student/profile", headers=student["headers"]).json()
    assert body["resumeUrl"].startswith("/uploads/campus_resumes/")
    assert body["resumeUrl"].endswith(".pdf")
    assert body["profileImageUrl"].startswith("/uploads/campus_profile_images/")

    stored = os.path.join(get_settings().upload_dir, body["resumeUrl"][len("/uploads/"):])
    with open(stored, "rb") as f:
        assert f.read() == PDF

    served = client.get(body["resumeUrl"])
    assert served.status_code == 200
    assert served.content == PDF


def test_profile_image_must_be_an_image(client, student):
    resp = client.put(
        "/api/student/profile",
        files={"profileImage": ("cv.pdf", PDF, "application/pdf")},
        headers=student["headers"],
    )
    assert resp.status_code == 400


def test_uploaded_resume_is_absolute_for_companies(api, client, company, student, job):
    client.put(
        "/api/student/profile",
        files={"resume": ("ada.pdf", PDF, "application/pdf")},
        headers=student["headers"],
    )
    api.apply(student, job["id"])

    [item] = client.get("/api/applications/company", headers=company["headers"]).json()
    assert item["student"]["resumeUrl"].startswith("https://api.campus.example.com/uploads/campus_resumes/")


def test_profile_stats_count_statuses(api, client, company, student):
    jobs = [api.create_job(company, title=f"Role {i}") for i in range(3)]
    apps = [api.apply(student, j["id"]).json() for j in jobs]
    api.set_status(company, apps[0]["id"], "INTERVIEW")
    api.set_status(company, apps[1]["id"], "ACCEPTED")

    # Legacy spelling still counts as an offer
    legacy_job = api.create_job(company, title="Legacy")
    with engine.begin() as conn:
        conn.execute(insert(applications).values(
            student_id=apps[0]["studentId"], job_id=legacy_job["id"], status="APPROVED",
            created_at=utcnow(), updated_at=utcnow(),
        ))

    stats = client.get("/api/student/profile", headers=student["headers"]).json()["stats"]
    assert stats == {"applications": 4, "interviews": 1, "offers": 2}


def test_failed_update_removes_uploaded_files(client, student, monkeypatch):
    resume_dir = os.path.join(get_settings().upload_dir, "campus_resumes")
    before = set(os.listdir(resume_dir)) if os.path.isdir(resume_dir) else set()

    def broken_fetch_one(db, stmt):
        raise RuntimeError("database went away")

    monkeypatch.setattr(student_routes, "fetch_one", broken_fetch_one)

    with TestClient(app, raise_server_exceptions=False) as failing_client:
        resp = failing_client.put(
            "/api/student/profile",
            files={"resume": ("ada.pdf", PDF, "application/pdf")},
            headers=student["headers"],
        )

    assert resp.status_code == 500
    after = set(os.listdir(resume_dir)) if os.path.isdir(resume_dir) else set()
    assert after == before


def test_invalid_file_stores_nothing(client, student):
    image_dir = os.path.join(get_settings().upload_dir, "campus_profile_images")
    before = set(os.listdir(image_dir)) if os.path.isdir(image_dir) else set()

    resp = client.put(
        "/api/student/profile",
        files={
            "profileImage": ("me.png", PNG, "image/png"),
            "resume": ("notes.txt", b"hello", "text/plain"),
        },
        headers=student["headers"],
    )

    assert resp.status_code == 400
    after = set(os.listdir(image_dir)) if os.path.isdir(image_dir) else set()
    assert after == before
