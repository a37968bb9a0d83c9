import os

import pytest

os.environ.setdefault("FLASK_ENV", "testing")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("JWT_SECRET_KEY", "test-jwt-key-with-enough-length-for-hs256")
os.environ.setdefault("BCRYPT_LOG_ROUNDS", "4")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from fittrack import create_app, db  # noqa: E402
from fittrack.settings import Settings  # noqa: E402

TEST_PASSWORD = "secret123"


@pytest.fixture()
def app():
    """每个测试独立的应用与内存数据库."""
    app = create_app(Settings.load())
    app.config["TESTING"] = True
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def login_as(client):
    """注册并登录指定邮箱,返回带 Bearer 令牌的请求头."""

    def _login(email: str) -> dict[str, str]:
        client.post(
            "/api/register",
            json={"username": email.split("@")[0], "email": email, "password": TEST_PASSWORD},
        )
        response = client.post("/api/login", json={"email": email, "password": TEST_PASSWORD})
        token = response.get_json()["data"]["token"]
        return {"Authorization": f"Bearer {token}"}

    return _login


@pytest.fixture()
def auth_headers(login_as) -> dict[str, str]:
    return login_as("runner@example.com")
