"""Error taxonomy and the JSON error handlers installed on every app."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class DockmasterError(Exception):
    """Base error; carries the HTTP status the gateway answers with."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class UnauthorizedError(DockmasterError):
    """Missing, malformed, invalid or expired credentials."""

    status_code = status.HTTP_401_UNAUTHORIZED


class InvalidCredentialsError(UnauthorizedError):
    """Login or password check failed. Never says which field was wrong."""

    def __init__(self, message: str = "Invalid credentials") -> None:
        super().__init__(message)


class TokenExpiredError(UnauthorizedError):
    def __init__(self, message: str = "Token has expired") -> None:
        super().__init__(message)


class ForbiddenError(DockmasterError):
    status_code = status.HTTP_403_FORBIDDEN


class BadRequestError(DockmasterError):
    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(DockmasterError):
    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(DockmasterError):
    status_code = status.HTTP_409_CONFLICT


class InternalError(DockmasterError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class ServiceUnavailableError(DockmasterError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE


def _error_response(status_code: int, message: str, headers: dict | None = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"message": message}, headers=headers)


async def _dockmaster_error_handler(request: Request, exc: DockmasterError) -> JSONResponse:
    headers = None
    if isinstance(exc, UnauthorizedError):
        headers = {"WWW-Authenticate": "Bearer"}
    return _error_response(exc.status_code, exc.message, headers)


async def _http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    message = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    return _error_response(exc.status_code, message, getattr(exc, "headers", None))


async def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"Invalid request: {location}: {first.get('msg')}" if location else f"Invalid request: {first.get('msg')}"
    else:
        message = "Invalid request body"
    logger.info("Rejected malformed request", extra={"path": request.url.path, "reason": message})
    return _error_response(status.HTTP_400_BAD_REQUEST, message)


def register_exception_handlers(app: FastAPI) -> None:
    """Serialize every failure as {"message": ...} with the right status code."""
    app.add_exception_handler(DockmasterError, _dockmaster_error_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
