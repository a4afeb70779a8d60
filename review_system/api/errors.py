"""
Exception handlers turning service errors into HTTP responses.

Two body styles exist. "structured" (default) answers with a JSON object and
the matching status code. "legacy" answers with a plain "Error: <message>"
string and reports every client error except 401/403 as 400.
"""
import logging
from datetime import datetime, timezone

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, PlainTextResponse

from review_system.core.config import settings
from review_system.core.errors import AccessDenied, AuthenticationFailure, ServiceError

logger = logging.getLogger(__name__)


def _legacy_status(exc: ServiceError) -> int:
    if isinstance(exc, (AccessDenied, AuthenticationFailure)):
        return exc.status_code
    return status.HTTP_400_BAD_REQUEST


def _body(title: str, message: str, code: int, **extra) -> dict:
    return {
        "error": title,
        "message": message,
        "status": code,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        **extra,
    }


async def service_error_handler(request: Request, exc: ServiceError):
    logger.warning("%s %s -> %s: %s", request.method, request.url.path, exc.title, exc.message)
    if settings.ERROR_RESPONSE_STYLE == "legacy":
        return PlainTextResponse(f"Error: {exc.message}", status_code=_legacy_status(exc))
    return JSONResponse(
        status_code=exc.status_code,
        content=_body(exc.title, exc.message, exc.status_code),
    )


def _field_name(loc: tuple) -> str:
    # ("body", "firstName") -> "firstName"; ("query", "size") -> "size"
    parts = [str(p) for p in loc if p not in ("body", "query", "path", "header")]
    return ".".join(parts) or "request"


async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = {_field_name(tuple(e["loc"])): e["msg"] for e in exc.errors()}
    if settings.ERROR_RESPONSE_STYLE == "legacy":
        summary = "; ".join(f"{k}: {v}" for k, v in errors.items())
        return PlainTextResponse(f"Error: {summary}", status_code=status.HTTP_400_BAD_REQUEST)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_body(
            "Validation Failed",
            "Request validation failed",
            status.HTTP_400_BAD_REQUEST,
            validationErrors=errors,
        ),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ServiceError, service_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
