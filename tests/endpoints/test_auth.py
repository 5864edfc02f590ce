from datetime import timedelta

from app.core.config import settings
from app.core.constants import RoleEnum
from app.models.token_denylist import TokenDenylist
from app.utils.time import utcnow
from tests.helpers.asserts import api_call, assert_error


def test_signup_creates_employee(client):
    payload = {
        "email": "new.hire@test.com",
        "first_name": "New",
        "last_name": "Hire",
        "password": "supersecret",
        "role": "admin",
    }
    response = api_call(client, "POST", "/api/auth/signup", json=payload)
    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert body["data"]["email"] == "new.hire@test.com"
    assert body["data"]["role"] == "employee"
    assert "hashed_password" not in body["data"]


def test_signup_duplicate_email_rejected(client, user_factory):
    user_factory(email="taken@test.com")
    response = client.post("/api/auth/signup", json={
        "email": "taken@test.com",
        "first_name": "Second",
        "last_name": "User",
        "password": "supersecret",
    })
    assert_error(response, 400, "BAD_REQUEST", "already exists")


def test_signup_invalid_email_is_bad_request(client):
    response = client.post("/api/auth/signup", json={
        "email": "not-an-email",
        "first_name": "Bad",
        "last_name": "Email",
        "password": "supersecret",
    })
    body = assert_error(response, 400, "VALIDATION_ERROR")
    assert body["details"]["validation_errors"]


def test_signup_missing_fields_is_bad_request(client):
    response = client.post("/api/auth/signup", json={"email": "x@test.com"})
    assert_error(response, 400, "VALIDATION_ERROR")


def test_login_returns_token_and_user(client, user_factory):
    user = user_factory(role=RoleEnum.TRAINER, email="trainer@test.com")
    response = api_call(client, "POST", "/api/auth/login", json={"email": "trainer@test.com", "password": "testpass123"})
    data = response.json()["data"]
    assert data["token"]["token_type"] == "bearer"
    assert data["token"]["access_token"]
    assert data["token"]["expires_in"] == settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60
    assert data["user"]["id"] == user.id
    assert data["user"]["role"] == "trainer"


def test_login_wrong_password(client, user_factory):
    user_factory(email="someone@test.com")
    response = client.post("/api/auth/login", json={"email": "someone@test.com", "password": "wrong-password"})
    assert_error(response, 401, "UNAUTHORIZED", "Incorrect email or password")


def test_login_inactive_user_forbidden(client, user_factory):
    user_factory(email="gone@test.com", is_active=False)
    response = client.post("/api/auth/login", json={"email": "gone@test.com", "password": "testpass123"})
    assert_error(response, 403, "FORBIDDEN", "inactive")


def test_me_requires_token(client):
    response = client.get("/api/auth/me")
    assert_error(response, 401, "UNAUTHORIZED", "Could not validate credentials")


def test_me_with_garbage_token(client):
    response = client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert_error(response, 401, "UNAUTHORIZED")


def test_me_returns_current_user(client, user_factory, auth_headers):
    user = user_factory(role=RoleEnum.MANAGER)
    response = api_call(client, "GET", "/api/auth/me", headers=auth_headers(user))
    assert response.json()["data"]["id"] == user.id
    assert response.json()["data"]["role"] == "manager"


def test_role_is_read_from_database_not_token(client, db_session, user_factory, auth_headers):
    user = user_factory(role=RoleEnum.ADMIN)
    headers = auth_headers(user)
    api_call(client, "GET", "/api/admin/dashboard-stats", headers=headers)

    user.role = RoleEnum.EMPLOYEE
    db_session.commit()

    response = client.get("/api/admin/dashboard-stats", headers=headers)
    assert_error(response, 403, "FORBIDDEN", "You do not have permission to access this resource.")


def test_deactivated_user_token_rejected(client, db_session, user_factory, auth_headers):
    user = user_factory()
    headers = auth_headers(user)
    user.is_active = False
    db_session.commit()

    response = client.get("/api/auth/me", headers=headers)
    assert_error(response, 403, "FORBIDDEN", "Your account is inactive.")


def test_logout_revokes_token(client, user_factory, auth_headers):
    user = user_factory()
    headers = auth_headers(user)
    api_call(client, "POST", "/api/auth/logout", headers=headers)

    response = client.get("/api/auth/me", headers=headers)
    assert_error(response, 401, "UNAUTHORIZED")


def test_logout_records_owner_and_purges_expired_entries(client, db_session, user_factory, auth_headers):
    user = user_factory()
    db_session.add(TokenDenylist(jti="stale", exp=utcnow() - timedelta(hours=1)))
    db_session.commit()

    api_call(client, "POST", "/api/auth/logout", headers=auth_headers(user))

    db_session.expire_all()
    entries = db_session.query(TokenDenylist).all()
    assert len(entries) == 1
    assert entries[0].jti != "stale"
    assert entries[0].user_id == user.id
    assert entries[0].exp > utcnow()


def test_error_envelope_carries_request_id(client):
    response = client.get("/api/auth/me", headers={"X-Request-ID": "req-123"})
    body = assert_error(response, 401)
    assert body["request_id"] == "req-123"
    assert response.headers["X-Request-ID"] == "req-123"
    assert body["path"] == "/api/auth/me"


def test_health(client):
    response = api_call(client, "GET", "/health")
    assert response.json()["status"] == "ok"
