from typing import Optional

from fastapi import HTTPException, status


class ConfigError(RuntimeError):
    pass


class ValidationError(HTTPException):
    def __init__(self, detail: str = "Invalid request"):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class NotFound(HTTPException):
    def __init__(self, detail: str = "Not found"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class Conflict(HTTPException):
    def __init__(self, detail: str = "Already exists"):
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


UNAUTHORIZED_MESSAGES = {
    "missing": "No token provided, authorization denied",
    "malformed": "Invalid token format",
    "invalid": "Token is not valid",
    "expired": "Token has expired",
    "user_not_found": "Token is not valid",
    "bad_credentials": "Invalid email or password",
}


class Unauthorized(HTTPException):
    """401 with a machine-readable ``reason``.

    The reason is kept on the exception for logging and tests; clients only
    see the message, so ``user_not_found`` reads the same as ``invalid``.
    """

    def __init__(self, reason: str, detail: Optional[str] = None):
        self.reason = reason
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail or UNAUTHORIZED_MESSAGES[reason],
            headers={"WWW-Authenticate": "Bearer"},
        )
