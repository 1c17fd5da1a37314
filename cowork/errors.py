"""Domain errors and their translation into JSON error responses."""
import logging
from typing import Any, Optional

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class CoworkError(Exception):
    """Base class for business-rule failures that map onto an HTTP status."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Bad request"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def payload(self) -> dict:
        return {"message": self.message}


class Unauthenticated(CoworkError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Authentication required"


class Forbidden(CoworkError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Access denied"


class NotFound(CoworkError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class Conflict(CoworkError):
    # Conflicts are reported to clients as plain bad requests.
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Conflict"


class RequiresInvite(CoworkError):
    """The target user has no membership row and auto-invite was not requested."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "User is not a project member"

    def __init__(self, user: Any, message: Optional[str] = None):
        super().__init__(message)
        self.user = user

    def payload(self) -> dict:
        return {"message": self.message, "requires_invite": True, "user": jsonable_encoder(self.user)}


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(CoworkError)
    async def cowork_error_handler(request: Request, exc: CoworkError):
        logger.info(
            "request rejected",
            extra={"path": request.url.path, "error": type(exc).__name__, "detail": exc.message},
        )
        return JSONResponse(status_code=exc.status_code, content=exc.payload())

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(status_code=exc.status_code, content={"message": exc.detail})

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"message": "Validation failed", "errors": jsonable_encoder(exc.errors())},
        )

    @app.exception_handler(Exception)
    async def unexpected_exception_handler(request: Request, exc: Exception):
        logger.exception("unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"message": "Server error"},
        )
