"""
Error handling middleware for FastAPI.

Mappa la tassonomia AppError sulle risposte HTTP:
NotFoundError → 404, InvalidInputError → 400 (details.errors con tutte le
violazioni), ForbiddenOperationError → 403, ConflictError → 409.
"""
from typing import Any, Dict, Optional
import logging

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from fatturazione.exceptions import AppError

logger = logging.getLogger(__name__)


def _request_context(request: Request) -> Dict[str, Any]:
    return {
        "path": request.url.path,
        "method": request.method,
        "actor_id": request.headers.get("X-User-Id", "system")
    }


def _error_response(status_code: int, error: str, message: Any, details: Optional[Any] = None) -> JSONResponse:
    content = {"error": error, "message": message}
    if details is not None:
        content["details"] = jsonable_encoder(details)
    return JSONResponse(status_code=status_code, content=content)


def add_exception_handlers(app: FastAPI) -> None:
    """Register the exception handlers on the application."""

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        log = logger.error if exc.status_code >= 500 else logger.warning
        log(f"{exc.__class__.__name__}: {exc.message}", extra=_request_context(request))
        return _error_response(exc.status_code, exc.__class__.__name__, exc.message, exc.details)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        # Payload malformato (tipi, aliquota non ammessa): rifiutato prima del motore
        logger.warning(f"Richiesta non valida: {exc.errors()}", extra=_request_context(request))
        return _error_response(
            status.HTTP_422_UNPROCESSABLE_ENTITY,
            "ValidationError",
            "Request validation failed",
            exc.errors()
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        logger.warning(f"HTTP {exc.status_code}: {exc.detail}", extra=_request_context(request))
        return _error_response(exc.status_code, "HTTPException", exc.detail)

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled exception: {exc}", exc_info=True, extra=_request_context(request))
        return _error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "InternalServerError",
            "An unexpected error occurred"
        )
