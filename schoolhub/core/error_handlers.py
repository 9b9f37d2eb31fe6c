from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

from schoolhub.core.config import settings
from schoolhub.core.logging_config import logger


def _error_body(message: str, errors=None, error=None) -> dict:
    body = {"success": False, "message": message}
    if errors:
        body["errors"] = errors
    if error is not None:
        body["error"] = error
    return body


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Render HTTPException (and every SchoolHubError) in the API envelope."""
    message = getattr(exc, "message", None) or str(exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(message, errors=getattr(exc, "errors", None)),
        headers=getattr(exc, "headers", None)
    )


async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Pydantic validation failures become 400 with field-level messages."""
    errors = []
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
        errors.append({
            "field": ".".join(loc) or None,
            "message": err.get("msg", "Invalid value")
        })
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_error_body("Validation failed", errors=errors)
    )


async def integrity_error_handler(request: Request, exc: IntegrityError):
    logger.warning(f"Integrity error on {request.method} {request.url.path}: {exc.orig}")
    return JSONResponse(
        status_code=status.HTTP_409_CONFLICT,
        content=_error_body("Duplicate or conflicting record")
    )


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unexpected error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body(
            "Internal server error",
            error=str(exc) if settings.is_development else None
        )
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(IntegrityError, integrity_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
