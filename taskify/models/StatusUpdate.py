from pydantic import BaseModel

from taskify.models.TaskEnums import Status


class StatusUpdate(BaseModel):
    status: Status
