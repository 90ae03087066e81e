import os
from typing import List

from pydantic import BaseModel

from taskify.errors import ConfigError

DEV_JWT_SECRET = "taskify-development-secret-change-me"


class Settings(BaseModel):
    redis_url: str = "redis://redis:6379/0"
    jwt_secret: str
    jwt_expires_in: int = 7 * 24 * 60 * 60
    bcrypt_rounds: int = 12
    cors_origins: List[str] = ["http://localhost:5173"]
    environment: str = "production"
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 5000

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    @classmethod
    def from_env(cls) -> "Settings":
        environment = os.getenv("APP_ENV", "production")
        jwt_secret = os.getenv("JWT_SECRET")
        if not jwt_secret:
            if environment != "development":
                raise ConfigError("JWT_SECRET environment variable is not defined")
            jwt_secret = DEV_JWT_SECRET
        origins = os.getenv("CORS_ORIGIN", "http://localhost:5173")
        return cls(
            redis_url=os.getenv("REDIS_URL", "redis://redis:6379/0"),
            jwt_secret=jwt_secret,
            jwt_expires_in=int(os.getenv("JWT_EXPIRES_IN", 7 * 24 * 60 * 60)),
            bcrypt_rounds=int(os.getenv("BCRYPT_ROUNDS", 12)),
            cors_origins=[o.strip() for o in origins.split(",") if o.strip()],
            environment=environment,
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", 5000)),
        )
