"""Exception handlers that render every API error as ``{"error": message}``."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from packages.core.customer_import.errors import ImportPipelineError

logger = logging.getLogger(__name__)


def error_response(
    status_code: int,
    message: str,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    """Build the JSON error body used across the API."""
    return JSONResponse(
        status_code=status_code,
        content={"error": message},
        headers=headers,
    )


def _format_validation_error(exc: RequestValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(item) for item in error.get("loc", ()) if item != "body")
        message = error.get("msg", "Invalid value")
        parts.append(f"{location}: {message}" if location else message)
    return "; ".join(parts) or "Invalid request"


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the API's exception handlers to ``app``."""

    @app.exception_handler(StarletteHTTPException)
    async def _http_exception_handler(request: Request, exc: StarletteHTTPException):
        return error_response(
            exc.status_code,
            str(exc.detail),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def _validation_exception_handler(request: Request, exc: RequestValidationError):
        return error_response(
            status.HTTP_400_BAD_REQUEST,
            _format_validation_error(exc),
        )

    @app.exception_handler(ImportPipelineError)
    async def _import_exception_handler(request: Request, exc: ImportPipelineError):
        if exc.status_code >= 500:
            logger.error(f"Import failed on {request.url.path}: {exc.message}")
        else:
            logger.info(f"Import rejected on {request.url.path}: {exc.message}")
        return error_response(exc.status_code, exc.message)
