# tests/test_auth.py

import jwt
import pytest

from taskify.auth import create_token, decode_token, hash_password, verify_password
from taskify.errors import Unauthorized
from taskify.store import UserStore

from .helpers import auth_headers


def test_signup_returns_token_and_public_user(client):
    r = client.post(
        "/auth/signup",
        json={"username": "  alice  ", "email": "Alice@X.com", "password": "secret123"},
    )
    assert r.status_code == 201
    body = r.json()
    assert body["message"] == "User created successfully"
    assert body["token"]
    assert body["user"]["username"] == "alice"
    assert body["user"]["email"] == "alice@x.com"
    assert "password" not in body["user"]


def test_signup_then_login_token_passes_gate(client, alice):
    r = client.post("/auth/login", json={"email": "alice@x.com", "password": "secret123"})
    assert r.status_code == 200
    token = r.json()["token"]

    me = client.get("/auth/me", headers=auth_headers(token))
    assert me.status_code == 200
    assert me.json()["user"]["id"] == alice[1]["id"]
    assert "password" not in me.json()["user"]


def test_login_email_is_case_insensitive(client, alice):
    r = client.post("/auth/login", json={"email": " ALICE@x.com ", "password": "secret123"})
    assert r.status_code == 200


def test_signup_duplicate_email_conflicts(client, alice):
    r = client.post(
        "/auth/signup",
        json={"username": "alice2", "email": "alice@x.com", "password": "secret123"},
    )
    assert r.status_code == 409
    assert r.json() == {"message": "User with this email already exists"}


def test_signup_duplicate_username_conflicts(client, alice):
    r = client.post(
        "/auth/signup",
        json={"username": "ALICE", "email": "other@x.com", "password": "secret123"},
    )
    assert r.status_code == 409
    assert r.json() == {"message": "Username is already taken"}


@pytest.mark.parametrize(
    "payload, message",
    [
        ({"username": "alice", "email": "alice@x.com"}, "Password is required"),
        ({"username": "al", "email": "alice@x.com", "password": "secret123"},
         "Username must be between 3 and 30 characters"),
        ({"username": "alice", "email": "alice@x.com", "password": "123"},
         "Password must be at least 6 characters"),
    ],
)
def test_signup_validation(client, payload, message):
    r = client.post("/auth/signup", json=payload)
    assert r.status_code == 400
    assert r.json() == {"message": message}


def test_signup_rejects_bad_email(client):
    r = client.post(
        "/auth/signup",
        json={"username": "alice", "email": "not-an-email", "password": "secret123"},
    )
    assert r.status_code == 400
    assert r.json()["message"].startswith("Invalid email")


def test_login_failures_are_indistinguishable(client, alice):
    wrong_password = client.post("/auth/login", json={"email": "alice@x.com", "password": "nope-nope"})
    unknown_email = client.post("/auth/login", json={"email": "ghost@x.com", "password": "secret123"})

    assert wrong_password.status_code == unknown_email.status_code == 401
    assert wrong_password.json() == unknown_email.json() == {"message": "Invalid email or password"}


def test_login_requires_fields(client):
    r = client.post("/auth/login", json={"email": "alice@x.com"})
    assert r.status_code == 400
    assert r.json() == {"message": "Password is required"}


def test_gate_missing_header(client):
    r = client.get("/auth/me")
    assert r.status_code == 401
    assert r.json() == {"message": "No token provided, authorization denied"}
    assert r.headers["www-authenticate"] == "Bearer"


def test_gate_malformed_header(client, alice):
    token = alice[0]["Authorization"].split(" ", 1)[1]
    r = client.get("/auth/me", headers={"Authorization": f"Token {token}"})
    assert r.status_code == 401
    assert r.json() == {"message": "Invalid token format"}


def test_gate_bad_signature(client, alice):
    forged = create_token(alice[1]["id"], "some-other-secret-that-is-long-enough", 3600)
    r = client.get("/auth/me", headers=auth_headers(forged))
    assert r.status_code == 401
    assert r.json() == {"message": "Token is not valid"}


def test_gate_garbage_token(client):
    r = client.get("/auth/me", headers=auth_headers("not.a.jwt"))
    assert r.status_code == 401
    assert r.json() == {"message": "Token is not valid"}


def test_gate_expired_token(client, settings, alice):
    expired = create_token(alice[1]["id"], settings.jwt_secret, -60)
    r = client.get("/auth/me", headers=auth_headers(expired))
    assert r.status_code == 401
    assert r.json() == {"message": "Token has expired"}


def test_gate_rejects_token_of_deleted_user(client, redis_client, alice):
    headers, user = alice
    assert UserStore(redis_client).delete(user["id"])

    r = client.get("/auth/me", headers=headers)
    assert r.status_code == 401
    assert r.json() == {"message": "Token is not valid"}


def test_decode_token_reasons(settings):
    good = create_token("user-1", settings.jwt_secret, 60)
    assert decode_token(good, settings.jwt_secret)["userId"] == "user-1"

    with pytest.raises(Unauthorized) as exc:
        decode_token(create_token("user-1", settings.jwt_secret, -1), settings.jwt_secret)
    assert exc.value.reason == "expired"

    with pytest.raises(Unauthorized) as exc:
        decode_token(good, "wrong-secret-wrong-secret-wrong-secret")
    assert exc.value.reason == "invalid"


def test_decode_token_requires_user_id(settings):
    token = jwt.encode({"iat": 1, "exp": 32503680000}, settings.jwt_secret, algorithm="HS256")
    with pytest.raises(Unauthorized) as exc:
        decode_token(token, settings.jwt_secret)
    assert exc.value.reason == "invalid"


def test_password_hashing():
    hashed = hash_password("secret123", rounds=4)
    assert hashed != "secret123"
    assert verify_password("secret123", hashed)
    assert not verify_password("secret124", hashed)
    assert not verify_password("secret123", "not-a-bcrypt-hash")


def test_long_passwords_hash_in_full():
    base = "x" * 100
    hashed = hash_password(base + "a", rounds=4)
    assert verify_password(base + "a", hashed)
    assert not verify_password(base + "b", hashed)
