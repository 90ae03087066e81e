from fastapi import APIRouter, Depends

from taskify import auth
from taskify.config import Settings
from taskify.dependencies import get_current_user, get_settings, get_user_store
from taskify.models import AuthResponse, UserCreate, UserEnvelope, UserLogin, UserResponse
from taskify.store import UserStore, public_user

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/signup", status_code=201, response_model=AuthResponse)
def signup(
    data: UserCreate,
    users: UserStore = Depends(get_user_store),
    settings: Settings = Depends(get_settings),
):
    user, token = auth.signup(users, settings, data)
    return AuthResponse(message="User created successfully", token=token, user=public_user(user))


@router.post("/login", response_model=AuthResponse)
def login(
    data: UserLogin,
    users: UserStore = Depends(get_user_store),
    settings: Settings = Depends(get_settings),
):
    user, token = auth.login(users, settings, data)
    return AuthResponse(message="Login successful", token=token, user=public_user(user))


@router.get("/me", response_model=UserEnvelope)
def me(user: UserResponse = Depends(get_current_user)):
    return UserEnvelope(message="User retrieved successfully", user=user)
