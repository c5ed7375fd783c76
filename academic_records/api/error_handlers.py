"""Global exception handlers. Every failure leaves the API in the response envelope.

- ServiceError (and subclasses) -> its own status, message, result and errors
- RequestValidationError -> 400 with every field message joined
- Starlette HTTPException (unknown route, wrong method) -> its status
- Exception (catch-all) -> 500, logged with traceback
"""

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from academic_records.core.exceptions import ServiceError
from academic_records.core.logging import get_logger
from academic_records.core.schemas import envelope
from academic_records.core.validation import format_errors

logger = get_logger(__name__)

_HTTP_MESSAGES = {
    status.HTTP_404_NOT_FOUND: "Endpoint not found.",
    status.HTTP_405_METHOD_NOT_ALLOWED: "Method not allowed.",
}


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_service_error_handler(app)
    _register_validation_error_handler(app)
    _register_http_error_handler(app)
    _register_generic_error_handler(app)


def _register_service_error_handler(app: FastAPI) -> None:
    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError):
        log = logger.error if exc.status_code >= 500 else logger.warning
        log("Service error", path=request.url.path, status_code=exc.status_code, message=exc.message)
        return JSONResponse(
            status_code=exc.status_code,
            content=envelope(exc.message, jsonable_encoder(exc.result, by_alias=True), exc.errors),
        )


def _register_validation_error_handler(app: FastAPI) -> None:
    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        errors = format_errors(exc.errors())
        logger.warning("Validation error", path=request.url.path, errors=errors)
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=envelope("Invalid input data.", errors=errors),
        )


def _register_http_error_handler(app: FastAPI) -> None:
    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        message = _HTTP_MESSAGES.get(exc.status_code, str(exc.detail))
        return JSONResponse(
            status_code=exc.status_code,
            content=envelope(message),
            headers=getattr(exc, "headers", None),
        )


def _register_generic_error_handler(app: FastAPI) -> None:
    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        logger.error("Unhandled exception", path=request.url.path, exc_info=exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=envelope("Internal server error.", errors=str(exc)),
        )
