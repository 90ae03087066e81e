from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel

from taskify.models.TaskEnums import Priority, Status


class TaskOwner(BaseModel):
    id: str
    username: str
    email: str


class TaskResponse(BaseModel):
    id: str
    userId: str
    owner: Optional[TaskOwner] = None
    title: str
    description: str = ""
    dueDate: datetime
    status: Status
    priority: Priority
    createdAt: datetime
    updatedAt: datetime


class TaskEnvelope(BaseModel):
    message: str
    task: TaskResponse


class TaskListResponse(BaseModel):
    message: str
    tasks: List[TaskResponse]
    count: int
