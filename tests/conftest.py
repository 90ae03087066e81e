# tests/conftest.py

import fakeredis
import pytest
from fastapi.testclient import TestClient

from taskify.config import Settings
from taskify.main import create_app

from .helpers import auth_headers

SECRET = "test-secret-that-is-long-enough-for-hs256"


@pytest.fixture()
def settings() -> Settings:
    # low bcrypt cost keeps signup/login fast
    return Settings(jwt_secret=SECRET, bcrypt_rounds=4, environment="test")


@pytest.fixture()
def redis_client():
    return fakeredis.FakeRedis(server=fakeredis.FakeServer(), decode_responses=True)


@pytest.fixture()
def app(settings, redis_client):
    return create_app(settings, redis_client)


@pytest.fixture()
def client(app) -> TestClient:
    return TestClient(app)


@pytest.fixture()
def make_user(client):
    """Sign up a user and return ``(headers, user)``."""

    def _make(username="alice", email="alice@x.com", password="secret123"):
        r = client.post(
            "/auth/signup",
            json={"username": username, "email": email, "password": password},
        )
        assert r.status_code == 201, r.text
        body = r.json()
        return auth_headers(body["token"]), body["user"]

    return _make


@pytest.fixture()
def alice(make_user):
    return make_user()


@pytest.fixture()
def bob(make_user):
    return make_user(username="bob", email="bob@x.com", password="hunter22")
