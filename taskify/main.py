import logging
import traceback
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

import redis
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from taskify.config import Settings
from taskify.routes import auth as auth_routes
from taskify.routes import tasks as task_routes

logger = logging.getLogger(__name__)

FIELD_LABELS = {
    "title": "Title",
    "description": "Description",
    "dueDate": "Due date",
    "status": "Status",
    "priority": "Priority",
    "username": "Username",
    "email": "Email",
    "password": "Password",
}


def validation_message(errors) -> str:
    """Collapse pydantic's error list into the single message clients show."""
    if not errors:
        return "Invalid request"
    err = errors[0]
    kind = err.get("type", "")
    if kind == "json_invalid":
        return "Invalid JSON body"
    loc = [p for p in err.get("loc", ()) if p not in ("body", "query", "path")]
    field = loc[-1] if loc and isinstance(loc[-1], str) else None
    if field is None:
        return "Request body is required" if kind == "missing" else "Invalid request body"
    if kind == "missing":
        return f"{FIELD_LABELS.get(field, field)} is required"
    ctx = err.get("ctx") or {}
    if kind == "value_error" and isinstance(ctx.get("error"), Exception):
        return str(ctx["error"])
    if field == "dueDate":
        return "Invalid due date format"
    return f"Invalid {field}: {err.get('msg', 'invalid value')}"


async def http_error(request: Request, exc: StarletteHTTPException):
    body = {"message": exc.detail}
    if exc.status_code == 404 and exc.detail == "Not Found":
        body = {"message": "Route not found", "path": request.url.path}
    return JSONResponse(body, status_code=exc.status_code, headers=getattr(exc, "headers", None))


async def request_validation_error(request: Request, exc: RequestValidationError):
    return JSONResponse({"message": validation_message(exc.errors())}, status_code=400)


async def store_error(request: Request, exc: redis.RedisError):
    logger.exception("Store failure on %s %s", request.method, request.url.path)
    return JSONResponse({"message": "Database error"}, status_code=500)


def create_app(settings: Optional[Settings] = None, redis_client: Optional[redis.Redis] = None) -> FastAPI:
    """
    Build the API around an explicit store handle.

    The Redis client is created here (or passed in) and shared with every
    request through ``app.state``; the lifespan checks it on startup and closes
    it on shutdown.
    """
    settings = settings or Settings.from_env()
    if redis_client is None:
        redis_client = redis.Redis.from_url(settings.redis_url, decode_responses=True)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        try:
            app.state.redis.ping()
        except redis.RedisError:
            logger.exception("Cannot reach document store")
            raise
        logger.info("Document store connected (%s mode)", settings.environment)
        yield
        app.state.redis.close()

    app = FastAPI(title="Taskify", lifespan=lifespan)
    app.state.settings = settings
    app.state.redis = redis_client

    def unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        body = {"message": "Internal server error"}
        if settings.is_development:
            body["error"] = str(exc)
            body["stack"] = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
        return JSONResponse(body, status_code=500)

    # runs inside CORSMiddleware, so 500 bodies still carry CORS headers
    async def log_requests(request: Request, call_next):
        try:
            response = await call_next(request)
        except Exception as exc:
            response = unexpected_error(request, exc)
        logger.info("%s %s -> %d", request.method, request.url.path, response.status_code)
        return response

    app.add_exception_handler(StarletteHTTPException, http_error)
    app.add_exception_handler(RequestValidationError, request_validation_error)
    app.add_exception_handler(redis.RedisError, store_error)

    app.middleware("http")(log_requests)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    async def health():
        return {
            "status": "healthy",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "environment": settings.environment,
        }

    app.include_router(auth_routes.router)
    app.include_router(task_routes.router)
    return app
