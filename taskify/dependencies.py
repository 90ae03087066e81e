import logging
from typing import Optional

from fastapi import Depends, Request

from taskify.auth import decode_token
from taskify.config import Settings
from taskify.errors import Unauthorized
from taskify.models import UserResponse
from taskify.store import TaskStore, UserStore, public_user

logger = logging.getLogger(__name__)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_user_store(request: Request) -> UserStore:
    return UserStore(request.app.state.redis)


def get_task_store(request: Request) -> TaskStore:
    return TaskStore(request.app.state.redis)


def bearer_token(authorization: Optional[str]) -> str:
    if not authorization:
        raise Unauthorized("missing")
    if not authorization.startswith("Bearer "):
        raise Unauthorized("malformed")
    token = authorization[len("Bearer "):].strip()
    if not token:
        raise Unauthorized("missing")
    return token


def get_current_user(
    request: Request,
    settings: Settings = Depends(get_settings),
    users: UserStore = Depends(get_user_store),
) -> UserResponse:
    """
    Resolve the caller from ``Authorization: Bearer <token>``.

    Rejects missing, malformed, forged and expired tokens, and tokens whose
    user has since been deleted. The resolved user is also left on
    ``request.state.user``.
    """
    try:
        token = bearer_token(request.headers.get("Authorization"))
        claims = decode_token(token, settings.jwt_secret)
        user = users.get(claims["userId"])
        if user is None:
            raise Unauthorized("user_not_found")
    except Unauthorized as exc:
        logger.info("Rejected %s %s: %s", request.method, request.url.path, exc.reason)
        raise

    request.state.user = public_user(user)
    return request.state.user
