from taskify.models.StatusUpdate import StatusUpdate
from taskify.models.TaskCreate import TaskCreate
from taskify.models.TaskEnums import Priority, Status
from taskify.models.TaskResponse import TaskEnvelope, TaskListResponse, TaskOwner, TaskResponse
from taskify.models.TaskUpdate import TaskUpdate
from taskify.models.UserCreate import UserCreate, UserLogin
from taskify.models.UserResponse import AuthResponse, UserEnvelope, UserResponse

__all__ = [
    "AuthResponse",
    "Priority",
    "Status",
    "StatusUpdate",
    "TaskCreate",
    "TaskEnvelope",
    "TaskListResponse",
    "TaskOwner",
    "TaskResponse",
    "TaskUpdate",
    "UserCreate",
    "UserEnvelope",
    "UserLogin",
    "UserResponse",
]
