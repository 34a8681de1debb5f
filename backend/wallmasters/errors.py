"""Error taxonomy and the handlers that render it as JSON."""
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class WallMastersError(Exception):
    """Base error carrying the HTTP status it maps to."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"

    def __init__(self, message: str | None = None, status_code: int | None = None):
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


class BadRequestError(WallMastersError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Bad request"


class InvalidCredentialsError(WallMastersError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Invalid credentials"


class NotFoundError(WallMastersError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class ConflictError(WallMastersError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Conflict"


class TokenInvalidError(WallMastersError):
    """Signature, structure or token type is wrong."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Invalid token"


class TokenExpiredError(TokenInvalidError):
    default_message = "Token expired"


class ServerFaultError(WallMastersError):
    """Raised with a client-safe message; unexpected exceptions never reach the body."""


def error_response(message: str, status_code: int, headers: dict | None = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"message": message}, headers=headers)


def _validation_message(exc: RequestValidationError) -> str:
    for error in exc.errors():
        if error.get("type") == "missing":
            return "Missing required fields."
    first = exc.errors()[0] if exc.errors() else {}
    field = ".".join(str(part) for part in first.get("loc", ())[1:])
    detail = first.get("msg", "Invalid request")
    return f"{field}: {detail}" if field else detail


def register_error_handlers(app: FastAPI) -> None:
    """Render every error as a ``{"message": ...}`` body."""

    @app.exception_handler(WallMastersError)
    async def handle_domain_error(request: Request, exc: WallMastersError):
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == status.HTTP_401_UNAUTHORIZED else None
        return error_response(exc.message, exc.status_code, headers)

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError):
        return error_response(_validation_message(exc), status.HTTP_400_BAD_REQUEST)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        return error_response(str(exc.detail), exc.status_code, getattr(exc, "headers", None))

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return error_response(WallMastersError.default_message, status.HTTP_500_INTERNAL_SERVER_ERROR)
