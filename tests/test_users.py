import pytest

from blog_api.api.deps import get_api_key, get_token_service
from blog_api.core.security import TokenService
from blog_api.main import app
from blog_api.repositories.user_repo import UserRepository
from blog_api.services.user_service import UserService


# ============================================================
# Access gate
# ============================================================

def test_test_api(client, auth_headers):
    response = client.get("/v1/user/test-api", headers=auth_headers())
    assert response.status_code == 200
    assert response.json() == {"code": 200, "message": "Server is running"}


def test_missing_api_key(client):
    response = client.get("/v1/user/test-api")
    assert response.status_code == 401
    assert response.json() == {"code": 401, "message": "Invalid API key"}


def test_wrong_api_key(client):
    response = client.get("/v1/user/test-api", headers={"x-api-key": "nope"})
    assert response.status_code == 401


def test_api_key_checked_before_body(client):
    response = client.post("/v1/user/register", json={}, headers={"x-api-key": "nope"})
    assert response.status_code == 401
    assert response.json()["message"] == "Invalid API key"


def test_api_key_is_injected(client):
    app.dependency_overrides[get_api_key] = lambda: "rotated-key"
    assert client.get("/v1/user/test-api", headers={"x-api-key": "rotated-key"}).status_code == 200
    assert client.get("/v1/user/test-api", headers={"x-api-key": "test-api-key"}).status_code == 401


def test_api_key_checked_before_json_parsing(client):
    response = client.post(
        "/v1/user/register",
        content="{not json",
        headers={"Content-Type": "application/json"},
    )
    assert response.status_code == 401
    assert response.json() == {"code": 401, "message": "Invalid API key"}


def test_unknown_route_without_api_key_is_unauthorized(client):
    response = client.get("/v1/nothing-here")
    assert response.status_code == 401


def test_openapi_and_health_need_no_api_key(client):
    assert client.get("/v1/openapi.json").status_code == 200
    assert client.get("/health").status_code == 200



def test_token_missing(client, auth_headers):
    response = client.post("/v1/user/logout", headers=auth_headers())
    assert response.status_code == 401
    assert response.json() == {"code": 405, "message": "Authorization token missing"}


def test_token_invalid(client, auth_headers):
    response = client.post("/v1/user/logout", headers=auth_headers("garbage"))
    assert response.status_code == 401
    assert response.json() == {"code": 406, "message": "Invalid or expired token"}


def test_bearer_prefix_is_not_stripped(client, auth_headers, user_token):
    token = user_token()
    response = client.post("/v1/user/logout", headers=auth_headers(f"Bearer {token}"))
    assert response.status_code == 401
    assert response.json()["code"] == 406


def test_token_signed_with_other_secret(client, auth_headers, user_token):
    token = user_token()
    app.dependency_overrides[get_token_service] = lambda: TokenService("another-secret")
    response = client.post("/v1/user/logout", headers=auth_headers(token))
    assert response.status_code == 401
    assert response.json()["code"] == 406


# ============================================================
# Registration
# ============================================================

def test_register(register_user):
    response = register_user("alice")
    assert response.status_code == 201
    body = response.json()
    assert body["code"] == 200
    assert body["message"] == "Signup successful"
    assert body["data"]["username"] == "alice"
    assert body["data"]["email"] == "alice@mail.com"
    assert "password" not in body["data"]


def test_register_missing_email(client, auth_headers):
    response = client.post(
        "/v1/user/register",
        json={"fullname": "A", "username": "a", "password": "secret123"},
        headers=auth_headers(),
    )
    assert response.status_code == 400
    assert response.json() == {"code": 400, "message": '"email" is required'}


def test_register_missing_password(client, auth_headers):
    response = client.post(
        "/v1/user/register",
        json={"fullname": "A", "username": "a", "email": "a@mail.com"},
        headers=auth_headers(),
    )
    assert response.status_code == 400
    assert "password" in response.json()["message"]


def test_register_duplicate_email(register_user):
    assert register_user("alice", email="same@mail.com").status_code == 201
    response = register_user("bob", email="same@mail.com")
    assert response.status_code == 409
    assert response.json() == {"code": 409, "message": "Email same@mail.com already exists."}


def test_register_duplicate_username(register_user):
    register_user("alice")
    response = register_user("alice", email="other@mail.com")
    assert response.status_code == 409
    assert response.json()["message"] == "Username alice already exists."


def test_register_duplicate_phone(register_user):
    register_user("alice", phone="5550001")
    response = register_user("bob", phone="5550001")
    assert response.status_code == 409
    assert response.json()["message"] == "Phone 5550001 already exists."


def test_register_race_on_unique_columns(register_user, monkeypatch):
    # Both requests pass the lookups; the unique index rejects the second insert
    async def _never_taken(self, lookup):
        return False

    monkeypatch.setattr(UserService, "_is_taken", _never_taken)
    assert register_user("alice").status_code == 201
    response = register_user("alice")
    assert response.status_code == 409
    assert response.json() == {"code": 409, "message": "User already exists."}


def test_register_keeps_email_local_part_case(register_user, login_user):
    response = register_user("bob", email="Bob@Example.COM")
    assert response.status_code == 201
    assert response.json()["data"]["email"] == "Bob@example.com"
    assert login_user("Bob@Example.COM")
    assert login_user("Bob@example.com")



def test_register_invalid_json(client, auth_headers):
    response = client.post(
        "/v1/user/register",
        content="{not json",
        headers={**auth_headers(), "Content-Type": "application/json"},
    )
    assert response.status_code == 400
    assert response.json()["code"] == 400


# ============================================================
# Login
# ============================================================

def test_login(register_user, client, auth_headers):
    register_user("alice")
    response = client.post(
        "/v1/user/login",
        json={"login_email_phone": "alice@mail.com", "password": "secret123"},
        headers=auth_headers(),
    )
    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Login successful"
    user = body["data"]["user"]
    assert user["username"] == "alice"
    assert user["token"]


def test_login_with_phone(register_user, login_user):
    register_user("alice", phone="5550001")
    assert login_user("5550001")


def test_login_wrong_password_and_unknown_user_look_the_same(register_user, client, auth_headers):
    register_user("alice")
    wrong_password = client.post(
        "/v1/user/login",
        json={"login_email_phone": "alice@mail.com", "password": "wrong-pass"},
        headers=auth_headers(),
    )
    unknown_user = client.post(
        "/v1/user/login",
        json={"login_email_phone": "nobody@mail.com", "password": "secret123"},
        headers=auth_headers(),
    )
    assert wrong_password.status_code == unknown_user.status_code == 401
    assert wrong_password.json() == unknown_user.json() == {
        "code": 402,
        "message": "Invalid credentials",
    }


def test_social_login(register_user, client, auth_headers):
    response = register_user("gina", password=None, social_id="google-42")
    assert response.status_code == 201

    response = client.post(
        "/v1/user/login",
        json={"login_email_phone": "gina@mail.com", "social_id": "google-42"},
        headers=auth_headers(),
    )
    assert response.status_code == 200
    assert response.json()["data"]["user"]["username"] == "gina"


def test_social_account_cannot_log_in_with_password(register_user, client, auth_headers):
    register_user("gina", password=None, social_id="google-42")
    response = client.post(
        "/v1/user/login",
        json={"login_email_phone": "gina@mail.com", "password": "secret123"},
        headers=auth_headers(),
    )
    assert response.status_code == 401


def test_social_login_with_mixed_case_email(register_user, client, auth_headers):
    register_user("gina", email="Gina@Mail.COM", password=None, social_id="google-42")
    response = client.post(
        "/v1/user/login",
        json={"login_email_phone": "Gina@Mail.COM", "social_id": "google-42"},
        headers=auth_headers(),
    )
    assert response.status_code == 200
    assert response.json()["data"]["user"]["email"] == "Gina@mail.com"


@pytest.mark.parametrize("fields, status_code, expected", [
    ({"is_deleted": True}, 404, {"code": 408, "message": "User account not found"}),
    ({"is_active": False}, 403, {"code": 403, "message": "Unauthorized access"}),
    ({"is_verified": False}, 403, {"code": 407, "message": "User not verified"}),
])
def test_login_account_state(register_user, update_user, client, auth_headers, fields, status_code, expected):
    register_user("alice")
    update_user("alice", **fields)
    response = client.post(
        "/v1/user/login",
        json={"login_email_phone": "alice@mail.com", "password": "secret123"},
        headers=auth_headers(),
    )
    assert response.status_code == status_code
    assert response.json() == expected



# ============================================================
# Session and password management
# ============================================================

def test_logout_then_reset_password_requires_login(client, auth_headers, user_token):
    token = user_token()
    response = client.post("/v1/user/logout", headers=auth_headers(token))
    assert response.status_code == 200
    assert response.json()["message"] == "Logout successful"

    # The token is still valid, but the session flag is off
    response = client.post(
        "/v1/user/reset-password",
        json={"new_password": "newsecret"},
        headers=auth_headers(token),
    )
    assert response.status_code == 401
    assert response.json() == {"code": 401, "message": "You must be logged in to reset password"}


def test_reset_password(client, auth_headers, user_token, login_user):
    token = user_token()
    response = client.post(
        "/v1/user/reset-password",
        json={"new_password": "newsecret"},
        headers=auth_headers(token),
    )
    assert response.status_code == 200
    assert response.json()["message"] == "Password reset successful"
    assert login_user("alice@mail.com", password="newsecret")


def test_reset_password_not_allowed_for_social(client, auth_headers, register_user):
    register_user("gina", password=None, social_id="google-42")
    token = client.post(
        "/v1/user/login",
        json={"login_email_phone": "gina@mail.com", "social_id": "google-42"},
        headers=auth_headers(),
    ).json()["data"]["user"]["token"]

    response = client.post(
        "/v1/user/reset-password",
        json={"new_password": "newsecret"},
        headers=auth_headers(token),
    )
    assert response.status_code == 403
    assert response.json()["code"] == 412


def test_forgot_password(client, auth_headers, user_token, login_user):
    token = user_token()
    response = client.post(
        "/v1/user/forgot-password",
        json={"old_password": "secret123", "new_password": "newsecret"},
        headers=auth_headers(token),
    )
    assert response.status_code == 200
    assert response.json()["message"] == "Password changed successfully"
    assert login_user("alice@mail.com", password="newsecret")


def test_forgot_password_wrong_old_password(client, auth_headers, user_token):
    token = user_token()
    response = client.post(
        "/v1/user/forgot-password",
        json={"old_password": "not-it", "new_password": "newsecret"},
        headers=auth_headers(token),
    )
    assert response.status_code == 401
    assert response.json() == {"code": 402, "message": "Old password does not match"}


def test_forgot_password_validates_body(client, auth_headers, user_token):
    token = user_token()
    response = client.post(
        "/v1/user/forgot-password",
        json={"old_password": "secret123", "new_password": "abc"},
        headers=auth_headers(token),
    )
    assert response.status_code == 400
    assert response.json()["message"] == '"new_password" length must be at least 6 characters long'


def test_forgot_password_not_allowed_for_social(client, auth_headers, register_user):
    register_user("gina", password=None, social_id="google-42")
    token = client.post(
        "/v1/user/login",
        json={"login_email_phone": "gina@mail.com", "social_id": "google-42"},
        headers=auth_headers(),
    ).json()["data"]["user"]["token"]

    response = client.post(
        "/v1/user/forgot-password",
        json={"old_password": "secret123", "new_password": "newsecret"},
        headers=auth_headers(token),
    )
    assert response.status_code == 404
    assert response.json() == {
        "code": 408,
        "message": "User not found or not eligible for password change",
    }



# ============================================================
# Profile
# ============================================================

def test_edit_profile(client, auth_headers, user_token):
    token = user_token()
    response = client.post(
        "/v1/user/edit-profile",
        json={"username": "alice_2", "fullname": "Alice Two"},
        headers=auth_headers(token),
    )
    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Profile updated successfully"
    assert body["data"]["username"] == "alice_2"
    assert body["data"]["email"] == "alice@mail.com"


def test_edit_profile_taken_email(client, auth_headers, user_token, register_user):
    register_user("bob")
    token = user_token("alice")
    response = client.post(
        "/v1/user/edit-profile",
        json={"email": "bob@mail.com"},
        headers=auth_headers(token),
    )
    assert response.status_code == 409
    assert response.json()["message"] == "Email 'bob@mail.com' already exists."


def test_edit_profile_race_on_unique_username(client, auth_headers, user_token, register_user, monkeypatch):
    register_user("bob")
    token = user_token("alice")

    # bob registers between the lookup and the commit
    async def _not_found(self, username):
        return None

    monkeypatch.setattr(UserRepository, "get_by_username", _not_found)
    response = client.post(
        "/v1/user/edit-profile",
        json={"username": "bob"},
        headers=auth_headers(token),
    )
    assert response.status_code == 409
    assert response.json() == {"code": 409, "message": "User already exists."}



def test_edit_profile_same_values_are_not_conflicts(client, auth_headers, user_token):
    token = user_token("alice")
    response = client.post(
        "/v1/user/edit-profile",
        json={"email": "alice@mail.com", "username": "alice"},
        headers=auth_headers(token),
    )
    assert response.status_code == 200


def test_edit_profile_requires_login(client, auth_headers, user_token):
    token = user_token()
    client.post("/v1/user/logout", headers=auth_headers(token))
    response = client.post(
        "/v1/user/edit-profile",
        json={"fullname": "New"},
        headers=auth_headers(token),
    )
    assert response.status_code == 401
    assert response.json()["message"] == "You must be logged in to edit profile"


# ============================================================
# Application
# ============================================================

def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_unknown_route_uses_envelope(client):
    response = client.get("/v1/nothing-here", headers={"x-api-key": "test-api-key"})
    assert response.status_code == 404
    assert response.json()["code"] == 404
