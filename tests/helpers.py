# tests/helpers.py

from datetime import datetime


def auth_headers(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def parse_dt(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))
