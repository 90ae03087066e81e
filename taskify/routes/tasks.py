from typing import Optional

from fastapi import APIRouter, Depends, Query

from taskify.dependencies import get_current_user, get_task_store
from taskify.errors import ValidationError
from taskify.models import (
    StatusUpdate,
    TaskCreate,
    TaskEnvelope,
    TaskListResponse,
    TaskUpdate,
    UserResponse,
)
from taskify.store import STATUSES, TaskStore

router = APIRouter(prefix="/tasks", tags=["tasks"])


@router.get("", response_model=TaskListResponse)
def list_tasks(
    status: Optional[str] = Query(default=None),
    sortBy: Optional[str] = Query(default=None),
    order: Optional[str] = Query(default=None),
    user: UserResponse = Depends(get_current_user),
    tasks: TaskStore = Depends(get_task_store),
):
    # unknown filter values are rejected rather than matching nothing
    if status and status not in STATUSES:
        raise ValidationError(f"Invalid status: {status}")
    found = tasks.list(
        user.id,
        status=status or None,
        sort_by=sortBy or "dueDate",
        order=order or "asc",
    )
    return TaskListResponse(message="Tasks retrieved successfully", tasks=found, count=len(found))


@router.get("/{task_id}", response_model=TaskEnvelope)
def get_task(
    task_id: str,
    user: UserResponse = Depends(get_current_user),
    tasks: TaskStore = Depends(get_task_store),
):
    return TaskEnvelope(message="Task retrieved successfully", task=tasks.get(user.id, task_id))


@router.post("", status_code=201, response_model=TaskEnvelope)
def create_task(
    task: TaskCreate,
    user: UserResponse = Depends(get_current_user),
    tasks: TaskStore = Depends(get_task_store),
):
    return TaskEnvelope(message="Task created successfully", task=tasks.create(user.id, task))


@router.put("/{task_id}", response_model=TaskEnvelope)
def update_task(
    task_id: str,
    updates: TaskUpdate,
    user: UserResponse = Depends(get_current_user),
    tasks: TaskStore = Depends(get_task_store),
):
    return TaskEnvelope(message="Task updated successfully", task=tasks.update(user.id, task_id, updates))


@router.delete("/{task_id}", response_model=TaskEnvelope)
def delete_task(
    task_id: str,
    user: UserResponse = Depends(get_current_user),
    tasks: TaskStore = Depends(get_task_store),
):
    return TaskEnvelope(message="Task deleted successfully", task=tasks.delete(user.id, task_id))


@router.patch("/{task_id}/status", response_model=TaskEnvelope)
def update_task_status(
    task_id: str,
    body: StatusUpdate,
    user: UserResponse = Depends(get_current_user),
    tasks: TaskStore = Depends(get_task_store),
):
    task = tasks.update_status(user.id, task_id, body.status)
    return TaskEnvelope(message="Task status updated successfully", task=task)
