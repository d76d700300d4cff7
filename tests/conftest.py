import os
import tempfile

# Must be set before campus_recruit is imported (settings + engine are module level)
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="campus-uploads-")
os.environ["STORAGE_TYPE"] = "local"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["SMTP_HOST"] = ""
os.environ["PUBLIC_BASE_URL"] = "https://api.campus.example.com"
os.environ["JWT_SECRET_KEY"] = "test-secret"

import pytest
from fastapi.testclient import TestClient

from campus_recruit.db.database import engine
from campus_recruit.db.tables import metadata
from campus_recruit.main import app
from campus_recruit.services import mailer


class RecordingMailer:
    """Stands in for SmtpMailer; keeps every message instead of sending it."""

    def __init__(self):
        self.sent = []
        self.fail_with = None

    def send(self, to, email):
        if self.fail_with is not None:
            raise self.fail_with
        self.sent.append((to, email))


class Api:
    """Small helper around the TestClient for the common flows."""

    def __init__(self, client):
        self.client = client
        self._counter = 0

    def register(self, role, email=None, name=None, company_name=None):
        self._counter += 1
        email = email or f"{role.lower()}{self._counter}@example.com"
        body = {
            "name": name or f"{role.title()} {self._counter}",
            "email": email,
            "password": "secret123",
            "role": role,
        }
        if company_name:
            body["companyName"] = company_name
        resp = self.client.post("/api/auth/register", json=body)
        assert resp.status_code == 201, resp.text
        data = resp.json()
        user = dict(data["user"])
        user["token"] = data["token"]
        user["headers"] = {"Authorization": f"Bearer {data['token']}"}
        return user

    def create_job(self, company, title="Backend Engineer", description="Build APIs", location=None):
        resp = self.client.post(
            "/api/jobs",
            json={"title": title, "description": description, "location": location},
            headers=company["headers"],
        )
        assert resp.status_code == 201, resp.text
        return resp.json()

    def apply(self, student, job_id, **body):
        return self.client.post(f"/api/jobs/{job_id}/apply", json=body, headers=student["headers"])

    def set_status(self, company, application_id, status=None, message=None):
        body = {}
        if status is not None:
            body["status"] = status
        if message is not None:
            body["message"] = message
        return self.client.patch(
            f"/api/applications/{application_id}", json=body, headers=company["headers"]
        )


@pytest.fixture(autouse=True)
def fresh_database():
    metadata.drop_all(bind=engine)
    metadata.create_all(bind=engine)
    yield


@pytest.fixture
def outbox():
    fake = RecordingMailer()
    mailer.set_mailer(fake)
    yield fake
    mailer.set_mailer(None)


@pytest.fixture
def client(outbox):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def api(client):
    return Api(client)


@pytest.fixture
def company(api):
    return api.register("COMPANY", email="hr@acme.example.com", name="Acme HR", company_name="Acme")


@pytest.fixture
def other_company(api):
    return api.register("COMPANY", email="jobs@globex.example.com", name="Globex HR", company_name="Globex")


@pytest.fixture
def student(api):
    return api.register("STUDENT", email="ada@example.com", name="Ada Lovelace")


@pytest.fixture
def admin(api):
    return api.register("ADMIN", email="admin@example.com", name="Admin")


@pytest.fixture
def job(api, company):
    return api.create_job(company, title="Backend Engineer", description="Python and SQL", location="Pune")
