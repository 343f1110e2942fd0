# course_service/errors.py
import logging
from typing import Any, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger("course_service.errors")


class CourseServiceError(Exception):
    """Base error rendered as ``{message, error?}`` with ``status_code``."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Server error"

    def __init__(self, message: Optional[str] = None, error: Any = None):
        self.message = message or self.default_message
        self.error = error
        super().__init__(self.message)

    def to_content(self) -> dict:
        content = {"message": self.message}
        if self.error is not None:
            content["error"] = self.error
        return content


class ValidationError(CourseServiceError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Missing required fields"


class AuthError(CourseServiceError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Access token required"


class InvalidTokenError(AuthError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Invalid or expired token"


class NotFoundError(CourseServiceError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Course not found"


class StoreError(CourseServiceError):
    """Unexpected failure raised by the document store."""


# ─────────────────────────────────────────────
# Exception handlers
# ─────────────────────────────────────────────
async def course_service_error_handler(request: Request, exc: CourseServiceError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} | {exc.message}: {exc.error}")
    else:
        logger.warning(f"{request.method} {request.url.path} | {exc.status_code} {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_content())


async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    missing = any(err.get("type") == "missing" for err in errors)
    error = ValidationError(
        "Missing required fields" if missing else "Invalid request",
        error=[
            {"field": ".".join(str(part) for part in err.get("loc", ())), "message": err.get("msg")}
            for err in errors
        ],
    )
    return await course_service_error_handler(request, error)


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"{request.method} {request.url.path} | Unhandled error")
    error = CourseServiceError(error=str(exc))
    return JSONResponse(status_code=error.status_code, content=error.to_content())


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(CourseServiceError, course_service_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
