from campus_recruit.core.auth import create_access_token


def test_register_student_creates_profile(api, client):
    student = api.register("STUDENT", email="grace@example.com", name="Grace Hopper")

    assert student["role"] == "STUDENT"
    assert student["email"] == "grace@example.com"

    resp = client.get("/api/student/profile", headers=student["headers"])
    assert resp.status_code == 200
    assert resp.json()["name"] == "Grace Hopper"


def test_register_company_uses_company_name(api, company):
    job = api.create_job(company)
    assert job["company"]["name"] == "Acme"


def test_register_company_falls_back_to_user_name(api, client):
    company = api.register("COMPANY", email="solo@example.com", name="Solo Ltd")
    job = api.create_job(company)
    assert job["company"]["name"] == "Solo Ltd"


def test_register_duplicate_email_conflicts(client, student):
    resp = client.post("/api/auth/register", json={
        "name": "Someone", "email": "ada@example.com", "password": "secret123", "role": "STUDENT",
    })
    assert resp.status_code == 409
    assert resp.json() == {"detail": "Email already in use"}


def test_register_validates_input(client):
    resp = client.post("/api/auth/register", json={
        "name": "Bob", "email": "bob@example.com", "password": "123", "role": "STUDENT",
    })
    assert resp.status_code == 422

    resp = client.post("/api/auth/register", json={
        "name": "Bob", "email": "bob@example.com", "password": "secret123", "role": "JANITOR",
    })
    assert resp.status_code == 422


def test_login_returns_token(client, student):
    resp = client.post("/api/auth/login", json={"email": "ada@example.com", "password": "secret123"})

    assert resp.status_code == 200
    body = resp.json()
    assert body["tokenType"] == "bearer"
    assert body["user"]["name"] == "Ada Lovelace"

    me = client.get("/api/auth/me", headers={"Authorization": f"Bearer {body['token']}"})
    assert me.status_code == 200
    assert me.json()["email"] == "ada@example.com"


def test_login_with_wrong_password(client, student):
    resp = client.post("/api/auth/login", json={"email": "ada@example.com", "password": "nope-nope"})
    assert resp.status_code == 401
    assert resp.json() == {"detail": "Invalid credentials"}


def test_login_unknown_email(client):
    resp = client.post("/api/auth/login", json={"email": "ghost@example.com", "password": "secret123"})
    assert resp.status_code == 401


def test_me_requires_token(client):
    resp = client.get("/api/auth/me")
    assert resp.status_code == 401
    assert resp.headers["WWW-Authenticate"] == "Bearer"


def test_me_rejects_garbage_token(client):
    resp = client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert resp.status_code == 401
    assert resp.json() == {"detail": "Invalid or expired token"}


def test_token_for_deleted_user_is_rejected(client):
    token = create_access_token({"sub": "999", "role": "ADMIN", "name": "Ghost"})
    resp = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 401


def test_role_comes_from_database_not_token(client, student):
    # Forged role claim for a real student account
    token = create_access_token({"sub": str(student["id"]), "role": "ADMIN", "name": "Ada"})
    resp = client.get("/api/admin/stats", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 403


def test_user_updates_own_account(client, student):
    resp = client.put(
        f"/api/auth/users/{student['id']}",
        json={"name": "Ada King", "password": "newsecret"},
        headers=student["headers"],
    )
    assert resp.status_code == 200
    assert resp.json()["name"] == "Ada King"

    login = client.post("/api/auth/login", json={"email": "ada@example.com", "password": "newsecret"})
    assert login.status_code == 200


def test_user_cannot_update_someone_else(client, student, company):
    resp = client.put(f"/api/auth/users/{company['id']}", json={"name": "Hacked"}, headers=student["headers"])
    assert resp.status_code == 403

    me = client.get("/api/auth/me", headers=company["headers"])
    assert me.json()["name"] == "Acme HR"


def test_admin_updates_any_account(client, admin, student):
    resp = client.put(
        f"/api/auth/users/{student['id']}", json={"email": "ada.k@example.com"}, headers=admin["headers"]
    )
    assert resp.status_code == 200
    assert resp.json()["email"] == "ada.k@example.com"


def test_admin_update_of_missing_user(client, admin):
    resp = client.put("/api/auth/users/999", json={"name": "Nobody"}, headers=admin["headers"])
    assert resp.status_code == 404


def test_account_email_must_stay_unique(client, student, company):
    resp = client.put(
        f"/api/auth/users/{student['id']}", json={"email": "hr@acme.example.com"}, headers=student["headers"]
    )
    assert resp.status_code == 409
