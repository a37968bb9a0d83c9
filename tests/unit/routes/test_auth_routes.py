from datetime import timedelta

import pytest

from fittrack import db
from fittrack.models.user import User
from fittrack.utils.time_utils import time_utils

PASSWORD = "secret123"


def _register(client, email: str = "runner@example.com", **extra: object):
    payload = {"username": "runner", "email": email, "password": PASSWORD, **extra}
    return client.post("/api/register", json=payload)


@pytest.mark.unit
def test_register_returns_token(client) -> None:
    response = _register(client, profile={"firstName": "Ada", "unknown": "dropped"})

    body = response.get_json()
    assert response.status_code == 201
    assert set(body["data"]) == {"token"}

    user = User.query.filter_by(email="runner@example.com").one()
    assert user.profile == {"firstName": "Ada"}
    assert user.password_hash != PASSWORD


@pytest.mark.unit
def test_register_duplicate_email_is_rejected(client) -> None:
    _register(client)

    response = _register(client, email="Runner@Example.com")

    assert response.status_code == 400
    assert response.get_json()["message"] == "Email already exists"


@pytest.mark.unit
def test_register_requires_fields(client) -> None:
    response = client.post("/api/register", json={"email": "runner@example.com"})

    assert response.status_code == 400
    assert response.get_json()["message"] == "Username, email and password are required"


@pytest.mark.unit
def test_login_returns_tokens_and_user(client) -> None:
    _register(client)

    response = client.post("/api/login", json={"email": "runner@example.com", "password": PASSWORD})

    data = response.get_json()["data"]
    assert response.status_code == 200
    assert data["token"]
    assert data["refreshToken"]
    assert data["user"]["email"] == "runner@example.com"
    assert "password_hash" not in data["user"]


@pytest.mark.unit
def test_login_with_wrong_password_is_bad_request(client) -> None:
    _register(client)

    response = client.post("/api/login", json={"email": "runner@example.com", "password": "wrong-pass"})

    assert response.status_code == 400
    assert response.get_json()["message"] == "Invalid email or password"


@pytest.mark.unit
def test_refresh_issues_new_access_token(client) -> None:
    _register(client)
    tokens = client.post("/api/login", json={"email": "runner@example.com", "password": PASSWORD}).get_json()["data"]

    refreshed = client.post("/api/auth/refresh", headers={"Authorization": f"Bearer {tokens['refreshToken']}"})
    with_access = client.post("/api/auth/refresh", headers={"Authorization": f"Bearer {tokens['token']}"})

    assert refreshed.status_code == 200
    assert refreshed.get_json()["data"]["token"]
    assert with_access.status_code == 401


@pytest.mark.unit
def test_password_reset_flow(client) -> None:
    _register(client)

    sent = client.post("/api/forget-password", json={"email": "runner@example.com"})
    token = User.query.filter_by(email="runner@example.com").one().reset_password_token
    reset = client.post(f"/api/reset-password/{token}", json={"password": "another1"})
    reused = client.post(f"/api/reset-password/{token}", json={"password": "another2"})
    login = client.post("/api/login", json={"email": "runner@example.com", "password": "another1"})

    assert sent.status_code == 200
    assert token
    assert reset.status_code == 200
    assert reused.status_code == 400
    assert reused.get_json()["message"] == "Invalid or expired token"
    assert login.status_code == 200


@pytest.mark.unit
def test_expired_reset_token_is_rejected(client) -> None:
    _register(client)
    client.post("/api/forget-password", json={"email": "runner@example.com"})
    user = User.query.filter_by(email="runner@example.com").one()
    user.reset_password_expires = time_utils.now() - timedelta(minutes=1)
    db.session.commit()

    response = client.post(f"/api/reset-password/{user.reset_password_token}", json={"password": "another1"})

    assert response.status_code == 400


@pytest.mark.unit
def test_forget_password_for_unknown_email(client) -> None:
    response = client.post("/api/forget-password", json={"email": "ghost@example.com"})

    assert response.status_code == 400
    assert response.get_json()["message"] == "User with this email does not exist"
