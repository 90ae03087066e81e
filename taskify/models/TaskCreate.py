from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from taskify.models.TaskEnums import Priority, Status


def as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    try:
        return value.astimezone(timezone.utc)
    except OverflowError:
        # offsets can push years 1 and 9999 outside the calendar
        raise ValueError("Invalid due date format") from None


class TaskCreate(BaseModel):
    title: str = Field(max_length=200)
    description: Optional[str] = Field(default="", max_length=1000)
    dueDate: datetime
    status: Status = "pending"
    priority: Priority = "medium"

    @field_validator("title", "description", mode="before")
    @classmethod
    def strip_text(cls, value):
        if value is None:
            return ""
        if isinstance(value, str):
            return value.strip()
        return value

    @field_validator("title")
    @classmethod
    def title_present(cls, value: str) -> str:
        if not value:
            raise ValueError("Title is required")
        return value

    @field_validator("dueDate")
    @classmethod
    def due_date_utc(cls, value: datetime) -> datetime:
        return as_utc(value)
