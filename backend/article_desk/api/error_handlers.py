"""Error Handlers — global exception handlers mapping every failure to the envelope.

Invariants:
    - ArticleDeskError → its own http_status + {"success": false, "error": message}
    - ArticleDeskError logged at the level its severity names, with code and category
    - RequestValidationError (bad JSON, missing/non-string field) → 400, error names the field
    - Starlette HTTPException (unknown route, wrong method) → its status, same envelope
    - Exception (catch-all) → 500, never leaks internal details
    - Every failure body is built through schemas.article.Envelope

Design Decisions:
    - Four-layer handler: domain, validation, HTTP, catch-all
    - Extracted from main.py to keep the entry point import fan-out small
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from article_desk.core.errors import ArticleDeskError, ErrorSeverity
from article_desk.schemas.article import Envelope

logger = logging.getLogger(__name__)

_LOG_LEVELS = {
    ErrorSeverity.WARNING: logging.WARNING,
    ErrorSeverity.ERROR: logging.ERROR,
    ErrorSeverity.CRITICAL: logging.CRITICAL,
}


def failure_envelope(message: str) -> dict:
    """Serialized {"success": false, "error": message}."""
    return Envelope(success=False, error=message).model_dump(exclude_none=True)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_domain_error_handler(app)
    _register_validation_error_handler(app)
    _register_http_error_handler(app)
    _register_generic_error_handler(app)


def _register_domain_error_handler(app: FastAPI) -> None:

    @app.exception_handler(ArticleDeskError)
    async def domain_error_handler(request: Request, exc: ArticleDeskError):
        """Handle all Article Desk domain/infrastructure errors."""
        logger.log(
            _LOG_LEVELS.get(exc.severity, logging.ERROR),
            f"{type(exc).__name__}: {exc.message}",
            extra={
                "error_code": exc.code,
                "category": exc.category.value,
                "path": request.url.path,
            },
        )
        return JSONResponse(
            status_code=exc.http_status, content=failure_envelope(exc.message),
        )


def _register_validation_error_handler(app: FastAPI) -> None:

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        """Handle Pydantic validation errors."""
        logger.warning(
            f"Validation error on {request.url.path}: {exc.errors()}",
            extra={"error_code": "VALIDATION_ERROR", "path": request.url.path},
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=failure_envelope(_describe_validation_error(exc)),
        )


def _register_http_error_handler(app: FastAPI) -> None:

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content=failure_envelope(str(exc.detail)),
            headers=getattr(exc, "headers", None),
        )


def _register_generic_error_handler(app: FastAPI) -> None:

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all — never leaks internal details."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
            extra={"path": request.url.path},
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=failure_envelope("An unexpected error occurred"),
        )


def _describe_validation_error(exc: RequestValidationError) -> str:
    """Flatten Pydantic errors to one readable line, e.g. "title: Field required"."""
    parts = []
    for e in exc.errors():
        # loc starts with "body"/"path"/"query"; drop it for readability
        loc = [str(p) for p in e["loc"][1:]]
        if e["type"] == "json_invalid":
            parts.append("Request body is not valid JSON")
        elif loc:
            parts.append(f"{'.'.join(loc)}: {e['msg']}")
        else:
            parts.append(e["msg"])
    return "; ".join(parts) or "Invalid request data"
