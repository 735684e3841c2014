import logging
from fastapi import FastAPI, Request, HTTPException
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder

from app.schemas.response import ErrorBody, ErrorResponse
from app.services.errors import OrderError

log = logging.getLogger("uvicorn")


def _error_response(status_code: int, code: str, message, details=None) -> JSONResponse:
    body = ErrorResponse(error=ErrorBody(code=code, message=message, details=details))
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body))


# ----------- Exception Handlers (called by FastAPI) -----------

def http_exception_handler(request: Request, exc: HTTPException):
    """Handles exceptions raised by HTTPException (e.g., 404, 401)."""
    return _error_response(exc.status_code, "http_error", exc.detail)


def order_error_handler(request: Request, exc: OrderError):
    """Handles client-fixable order errors (400 Bad Request)."""
    log.warning(f"Rejected order request on {request.url.path}: {exc}")
    details = {"index": exc.index, "modifier_index": exc.modifier_index}
    return _error_response(400, exc.code, str(exc), details)


def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handles Pydantic validation errors (422 Unprocessable Entity)."""
    return _error_response(422, "validation_error", "Invalid input data", exc.errors())


def generic_exception_handler(request: Request, exc: Exception):
    """Handles all unhandled exceptions (500 Internal Server Error)."""
    # Full traceback goes to the log; the client only gets an opaque error.
    log.error(f"Unhandled exception on path: {request.url.path}", exc_info=exc)
    return _error_response(500, "server_error", "Internal Server Error")


# ----------- Registration Function -----------

def setup_exception_handlers(app: FastAPI):
    """Registers all custom exception handlers with the FastAPI application."""

    # Register handlers
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(OrderError, order_error_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)

    return app
