"""Exception handlers for the FastAPI application."""

import logging

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from api.schemas import ChatErrorResponse
from auth.exceptions import AuthException
from config import Config

logger = logging.getLogger(__name__)


def create_error_response(status_code: int, message: str, data: dict | None = None) -> JSONResponse:
    """Create an ``{"error": message, ...}`` response."""
    content = {"error": message}
    if data:
        content.update(data)
    return JSONResponse(status_code=status_code, content=content)


async def auth_exception_handler(request: Request, exc: AuthException) -> JSONResponse:
    """Map the auth error taxonomy to its status codes."""
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return create_error_response(exc.status_code, exc.message, exc.data)


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    return create_error_response(exc.status_code, str(exc.detail))


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed request bodies as 400 with per-field messages."""
    error_details = []
    for error in exc.errors():
        field = error["loc"][-1] if error.get("loc") else "unknown"
        message = error.get("msg", "")

        # Remove "Value error, " prefix if present
        if message.startswith("Value error, "):
            message = message[13:]

        error_details.append({"field": str(field), "message": message})

    summary = "; ".join(f"{item['field']}: {item['message']}" for item in error_details)

    # The chat widget only reads {error: true, message}
    if request.url.path.startswith("/chat"):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=ChatErrorResponse(message=summary or "Invalid request").model_dump(exclude_none=True),
        )

    return create_error_response(
        status_code=status.HTTP_400_BAD_REQUEST,
        message=summary or "Invalid request",
        data={"fields": error_details},
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle all other unhandled exceptions with error logging."""
    logger.exception(
        "Unhandled exception occurred",
        extra={"path": request.url.path, "method": request.method},
    )
    data = {"message": "An unexpected error occurred. Please try again."}
    if Config.DEBUG:
        data["details"] = str(exc)
    return create_error_response(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        message="Internal server error",
        data=data,
    )
