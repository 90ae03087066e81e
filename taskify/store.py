"""
Redis document store for users and tasks.

Every record is a JSON document under ``user:{id}`` or ``task:{id}``. A set
under ``user:{<id>}:tasks`` indexes each user's tasks, and unique usernames
and emails are claimed with ``SET NX`` on ``user:username:*`` / ``user:email:*``.
"""

import json
import logging
import uuid
from datetime import datetime, timezone
from typing import List, Optional, get_args

import redis

from taskify.errors import Conflict, NotFound, ValidationError
from taskify.models import Status, TaskCreate, TaskOwner, TaskResponse, TaskUpdate, UserResponse

logger = logging.getLogger(__name__)

STATUSES = get_args(Status)


def to_iso(value: datetime) -> str:
    return value.astimezone(timezone.utc).isoformat(timespec="milliseconds")


def now_iso() -> str:
    return to_iso(datetime.now(timezone.utc))


def user_key(user_id: str) -> str:
    return f"user:{user_id}"


def user_tasks_key(user_id: str) -> str:
    return f"user:{{{user_id}}}:tasks"


def email_key(email: str) -> str:
    return f"user:email:{email.lower()}"


def username_key(username: str) -> str:
    return f"user:username:{username.lower()}"


def task_key(task_id: str) -> str:
    return f"task:{task_id}"


def check_task_id(task_id: str) -> str:
    try:
        return str(uuid.UUID(task_id))
    except ValueError:
        raise ValidationError("Invalid task ID") from None


def public_user(doc: dict) -> UserResponse:
    return UserResponse(
        id=doc["id"],
        username=doc["username"],
        email=doc["email"],
        createdAt=doc["createdAt"],
    )


def sort_tasks(docs: List[dict], sort_by: str, order: str) -> List[dict]:
    """Sort by any document field. Documents lacking the field sort as lowest."""
    descending = order == "desc"
    present = [d for d in docs if d.get(sort_by) is not None]
    missing = [d for d in docs if d.get(sort_by) is None]
    present.sort(key=lambda d: d[sort_by], reverse=descending)
    if descending:
        return present + missing
    return missing + present


class UserStore:
    def __init__(self, r: redis.Redis):
        self.r = r

    def get(self, user_id: str) -> Optional[dict]:
        raw = self.r.get(user_key(user_id))
        if raw is None:
            return None
        return json.loads(raw)

    def get_by_email(self, email: str) -> Optional[dict]:
        user_id = self.r.get(email_key(email))
        if user_id is None:
            return None
        return self.get(user_id)

    def create(self, username: str, email: str, password_hash: str) -> dict:
        user_id = str(uuid.uuid4())
        if not self.r.set(email_key(email), user_id, nx=True):
            raise Conflict("User with this email already exists")
        if not self.r.set(username_key(username), user_id, nx=True):
            self.r.delete(email_key(email))
            raise Conflict("Username is already taken")

        time = now_iso()
        doc = {
            "id": user_id,
            "username": username,
            "email": email.lower(),
            "password": password_hash,
            "createdAt": time,
            "updatedAt": time,
        }
        try:
            self.r.set(user_key(user_id), json.dumps(doc))
        except redis.RedisError:
            self.r.delete(email_key(email), username_key(username))
            raise
        logger.info("Created user %s", user_id)
        return doc

    def delete(self, user_id: str) -> bool:
        """Remove a user with their unique-field claims and all their tasks."""
        user = self.get(user_id)
        if user is None:
            return False
        task_ids = self.r.smembers(user_tasks_key(user_id))
        with self.r.pipeline(transaction=True) as p:
            p.delete(user_key(user_id))
            p.delete(email_key(user["email"]))
            p.delete(username_key(user["username"]))
            for task_id in task_ids:
                p.delete(task_key(task_id))
            p.delete(user_tasks_key(user_id))
            p.execute()
        logger.info("Deleted user %s and %d task(s)", user_id, len(task_ids))
        return True


class TaskStore:
    """Task CRUD, always filtered by the owning user's id."""

    def __init__(self, r: redis.Redis):
        self.r = r

    def _owner(self, user_id: str) -> Optional[TaskOwner]:
        raw = self.r.get(user_key(user_id))
        if raw is None:
            return None
        user = json.loads(raw)
        return TaskOwner(id=user["id"], username=user["username"], email=user["email"])

    def _view(self, doc: dict, owner: Optional[TaskOwner] = None) -> TaskResponse:
        if owner is None:
            owner = self._owner(doc["userId"])
        return TaskResponse(owner=owner, **doc)

    def _load(self, owner_id: str, task_id: str) -> dict:
        raw = self.r.get(task_key(check_task_id(task_id)))
        if raw is None:
            raise NotFound("Task not found")
        doc = json.loads(raw)
        # someone else's task reads exactly like a missing one
        if doc["userId"] != owner_id:
            raise NotFound("Task not found")
        return doc

    def _save(self, doc: dict, changes: dict) -> TaskResponse:
        for key, value in changes.items():
            doc[key] = to_iso(value) if isinstance(value, datetime) else value
        doc["updatedAt"] = now_iso()
        if not self.r.set(task_key(doc["id"]), json.dumps(doc), xx=True):
            raise NotFound("Task not found")
        return self._view(doc)

    def list(
        self,
        owner_id: str,
        status: Optional[str] = None,
        sort_by: str = "dueDate",
        order: str = "asc",
    ) -> List[TaskResponse]:
        ids = self.r.smembers(user_tasks_key(owner_id))
        if not ids:
            return []
        raw = self.r.mget([task_key(task_id) for task_id in ids])
        docs = [json.loads(i) for i in raw if i is not None]
        docs = [d for d in docs if d["userId"] == owner_id]
        if status is not None:
            docs = [d for d in docs if d["status"] == status]
        docs.sort(key=lambda d: d["createdAt"])
        docs = sort_tasks(docs, sort_by, order)
        owner = self._owner(owner_id)
        return [self._view(d, owner) for d in docs]

    def get(self, owner_id: str, task_id: str) -> TaskResponse:
        return self._view(self._load(owner_id, task_id))

    def create(self, owner_id: str, task: TaskCreate) -> TaskResponse:
        task_id = str(uuid.uuid4())
        time = now_iso()
        doc = task.model_dump()
        doc["dueDate"] = to_iso(task.dueDate)
        doc.update(id=task_id, userId=owner_id, createdAt=time, updatedAt=time)
        with self.r.pipeline(transaction=True) as p:
            p.set(task_key(task_id), json.dumps(doc))
            p.sadd(user_tasks_key(owner_id), task_id)
            p.execute()
        logger.info("User %s created task %s", owner_id, task_id)
        return self._view(doc)

    def update(self, owner_id: str, task_id: str, updates: TaskUpdate) -> TaskResponse:
        doc = self._load(owner_id, task_id)
        return self._save(doc, updates.changes())

    def update_status(self, owner_id: str, task_id: str, status: Optional[str]) -> TaskResponse:
        if not status:
            raise ValidationError("Status is required")
        if status not in STATUSES:
            raise ValidationError(f"Invalid status: {status}")
        doc = self._load(owner_id, task_id)
        return self._save(doc, {"status": status})

    def delete(self, owner_id: str, task_id: str) -> TaskResponse:
        doc = self._load(owner_id, task_id)
        with self.r.pipeline(transaction=True) as p:
            p.delete(task_key(doc["id"]))
            p.srem(user_tasks_key(owner_id), doc["id"])
            deleted_task, _ = p.execute()
        if not deleted_task:
            raise NotFound("Task not found")
        logger.info("User %s deleted task %s", owner_id, doc["id"])
        return self._view(doc)
