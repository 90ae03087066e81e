from typing import Literal

Status = Literal["pending", "in-progress", "completed"]
Priority = Literal["low", "medium", "high"]
