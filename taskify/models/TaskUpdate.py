from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, ValidationInfo, field_validator

from taskify.models.TaskCreate import as_utc
from taskify.models.TaskEnums import Priority, Status


class TaskUpdate(BaseModel):
    """Partial update. Only keys present in the request body are applied."""

    title: Optional[str] = Field(default=None, max_length=200)
    description: Optional[str] = Field(default=None, max_length=1000)
    dueDate: Optional[datetime] = None
    status: Optional[Status] = None
    priority: Optional[Priority] = None

    @field_validator("title", "description", "dueDate", "status", "priority", mode="before")
    @classmethod
    def normalize(cls, value, info: ValidationInfo):
        if value is None:
            # null description clears it, any other null is a client error
            if info.field_name == "description":
                return ""
            raise ValueError(f"{info.field_name} cannot be null")
        if isinstance(value, str) and info.field_name in ("title", "description"):
            return value.strip()
        return value

    @field_validator("title")
    @classmethod
    def title_present(cls, value: str) -> str:
        if not value:
            raise ValueError("Title cannot be empty")
        return value

    @field_validator("dueDate")
    @classmethod
    def due_date_utc(cls, value: datetime) -> datetime:
        return as_utc(value)

    def changes(self) -> dict:
        return {name: getattr(self, name) for name in self.model_fields_set}
