from datetime import datetime

from pydantic import BaseModel


class UserResponse(BaseModel):
    id: str
    username: str
    email: str
    createdAt: datetime


class UserEnvelope(BaseModel):
    message: str
    user: UserResponse


class AuthResponse(BaseModel):
    message: str
    token: str
    user: UserResponse
