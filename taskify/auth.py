"""
Credentials and bearer tokens.

Passwords are hashed with bcrypt over a base64 SHA-256 pre-hash, so any
password length fits bcrypt's 72-byte input. Tokens are stateless HS256 JWTs
carrying ``userId``, ``iat`` and ``exp``.
"""

import base64
import hashlib
import logging
from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Tuple

import bcrypt
import jwt

from taskify.config import Settings
from taskify.errors import Unauthorized
from taskify.models import UserCreate, UserLogin
from taskify.store import UserStore

logger = logging.getLogger(__name__)

JWT_ALG = "HS256"


def _pw_prehash(password: str) -> bytes:
    return base64.b64encode(hashlib.sha256(password.encode("utf-8")).digest())


def hash_password(password: str, rounds: int = 12) -> str:
    return bcrypt.hashpw(_pw_prehash(password), bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(_pw_prehash(password), password_hash.encode("utf-8"))
    except ValueError:
        # stored value is not a bcrypt hash
        return False


@lru_cache(maxsize=None)
def _dummy_hash(rounds: int) -> str:
    # checked when the email is unknown so both login failures cost the same
    return hash_password("taskify-dummy-password", rounds)


def create_token(user_id: str, secret: str, expires_in: int) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        "userId": user_id,
        "iat": now,
        "exp": now + timedelta(seconds=expires_in),
    }
    return jwt.encode(payload, secret, algorithm=JWT_ALG)


def decode_token(token: str, secret: str) -> dict:
    try:
        claims = jwt.decode(token, secret, algorithms=[JWT_ALG], options={"require": ["exp", "iat"]})
    except jwt.ExpiredSignatureError:
        raise Unauthorized("expired") from None
    except jwt.InvalidTokenError:
        raise Unauthorized("invalid") from None
    if not isinstance(claims.get("userId"), str):
        raise Unauthorized("invalid")
    return claims


def issue_token(user: dict, settings: Settings) -> str:
    return create_token(user["id"], settings.jwt_secret, settings.jwt_expires_in)


def signup(users: UserStore, settings: Settings, data: UserCreate) -> Tuple[dict, str]:
    password_hash = hash_password(data.password, settings.bcrypt_rounds)
    user = users.create(data.username, data.email, password_hash)
    return user, issue_token(user, settings)


def login(users: UserStore, settings: Settings, data: UserLogin) -> Tuple[dict, str]:
    user = users.get_by_email(data.email)
    if user is None:
        verify_password(data.password, _dummy_hash(settings.bcrypt_rounds))
        logger.info("Login failed: unknown email")
        raise Unauthorized("bad_credentials")
    if not verify_password(data.password, user["password"]):
        logger.info("Login failed for user %s: wrong password", user["id"])
        raise Unauthorized("bad_credentials")
    return user, issue_token(user, settings)
