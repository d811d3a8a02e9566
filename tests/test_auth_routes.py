"""Integration tests for the /auth routes."""

from datetime import timedelta

from employee_manager.application.services.auth_service import create_access_token

ALICE = {"username": "alice123", "email": "alice@x.com", "password": "secret1"}


def test_signup_returns_token_and_user(client):
    response = client.post("/auth/signup", json=ALICE)

    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "User created successfully"
    assert body["token"]
    assert body["user"]["username"] == "alice123"
    assert body["user"]["email"] == "alice@x.com"
    assert set(body["user"]) == {"id", "username", "email"}


def test_signup_never_stores_the_plain_password(client, store):
    client.post("/auth/signup", json=ALICE)

    (user,) = store.user_repo.records.values()
    assert user.password_hash != "secret1"
    assert user.password_hash.startswith("$2")


def test_signup_with_taken_email_is_rejected(client):
    client.post("/auth/signup", json=ALICE)

    response = client.post("/auth/signup", json={**ALICE, "username": "someone_else"})

    assert response.status_code == 400
    assert response.json()["message"] == "User already exists with this email or username"


def test_signup_with_taken_username_is_rejected(client):
    client.post("/auth/signup", json=ALICE)

    response = client.post("/auth/signup", json={**ALICE, "email": "other@x.com"})

    assert response.status_code == 400


def test_signup_lists_every_invalid_field(client, store):
    response = client.post("/auth/signup", json={"username": "al", "email": "nope", "password": "123"})

    assert response.status_code == 400
    fields = [e["field"] for e in response.json()["errors"]]
    assert sorted(fields) == ["email", "password", "username"]
    assert store.user_repo.records == {}


def test_signup_without_a_body(client):
    response = client.post("/auth/signup")

    assert response.status_code == 400
    assert len(response.json()["errors"]) == 3


def test_login_after_signup(client):
    client.post("/auth/signup", json=ALICE)

    response = client.post("/auth/login", json={"email": "ALICE@x.com", "password": "secret1"})

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Login successful"
    assert body["user"]["username"] == "alice123"


def test_login_with_wrong_password(client):
    client.post("/auth/signup", json=ALICE)

    response = client.post("/auth/login", json={"email": "alice@x.com", "password": "wrong-password"})

    assert response.status_code == 401
    assert response.json()["message"] == "Invalid credentials"


def test_login_with_unknown_email_looks_the_same(client):
    response = client.post("/auth/login", json={"email": "ghost@x.com", "password": "secret1"})

    assert response.status_code == 401
    assert response.json()["message"] == "Invalid credentials"


def test_login_validation(client):
    response = client.post("/auth/login", json={"email": "alice@x.com", "password": ""})

    assert response.status_code == 400
    assert response.json()["errors"] == [{"field": "password", "message": "Password is required"}]


def test_me_returns_the_token_owner(client, auth_headers):
    response = client.get("/auth/me", headers=auth_headers)

    assert response.status_code == 200
    assert response.json()["username"] == "hradmin"


def test_me_requires_a_token(client):
    response = client.get("/auth/me")

    assert response.status_code == 401
    assert response.json()["message"] == "No token, authorization denied"
    assert response.headers["www-authenticate"] == "Bearer"


def test_me_rejects_a_tampered_token(client, auth_headers):
    headers = {"Authorization": auth_headers["Authorization"] + "x"}

    response = client.get("/auth/me", headers=headers)

    assert response.status_code == 401
    assert response.json()["message"] == "Token is not valid"


def test_me_rejects_an_expired_token(client, store, settings, auth_headers):
    user_id = next(iter(store.user_repo.records))
    token = create_access_token(user_id, settings.SECRET_KEY, expires_delta=timedelta(seconds=-1))

    response = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401


def test_me_for_a_deleted_user(client, store, auth_headers):
    store.user_repo.records.clear()

    response = client.get("/auth/me", headers=auth_headers)

    assert response.status_code == 401


def test_signup_when_the_store_is_down(client, store):
    store.unreachable = True

    response = client.post("/auth/signup", json=ALICE)

    assert response.status_code == 503
    assert "MongoDB" in response.json()["message"]
