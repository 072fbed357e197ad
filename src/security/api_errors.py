"""
Unified API Error Response System.

Every failure leaves the API as the same JSON shape so the client can
surface it as a short notification:

    {"error": true, "code": "...", "message": "...", "status_code": 404, ...}

Usage:
    from security.api_errors import APIError, ErrorCode

    raise APIError(ErrorCode.RESOURCE_NOT_FOUND, "Task not found")
"""

from __future__ import annotations

import logging
import traceback
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from middleware.correlation import REQUEST_ID_HEADER, get_correlation_id

logger = logging.getLogger(__name__)


# =============================================================================
# ERROR CODES
# =============================================================================


class ErrorCode(str, Enum):
    """Error codes returned in the ``code`` field of error responses."""

    # Authentication
    AUTH_REQUIRED = "AUTH_REQUIRED"
    AUTH_INVALID_TOKEN = "AUTH_INVALID_TOKEN"
    AUTH_TOKEN_EXPIRED = "AUTH_TOKEN_EXPIRED"
    AUTH_INVALID_CREDENTIALS = "AUTH_INVALID_CREDENTIALS"

    # Validation
    VALIDATION_ERROR = "VALIDATION_ERROR"

    # Resources
    RESOURCE_NOT_FOUND = "RESOURCE_NOT_FOUND"
    RESOURCE_ALREADY_EXISTS = "RESOURCE_ALREADY_EXISTS"
    METHOD_NOT_ALLOWED = "METHOD_NOT_ALLOWED"

    # Server
    SERVER_INTERNAL_ERROR = "SERVER_INTERNAL_ERROR"
    SERVER_DATABASE_ERROR = "SERVER_DATABASE_ERROR"


# Missing credentials are 401; a credential that is present but unusable is
# reported as a bad request, as are duplicate registrations.
ERROR_CODE_STATUS_MAP: Dict[ErrorCode, int] = {
    ErrorCode.AUTH_REQUIRED: status.HTTP_401_UNAUTHORIZED,
    ErrorCode.AUTH_INVALID_TOKEN: status.HTTP_400_BAD_REQUEST,
    ErrorCode.AUTH_TOKEN_EXPIRED: status.HTTP_400_BAD_REQUEST,
    ErrorCode.AUTH_INVALID_CREDENTIALS: status.HTTP_400_BAD_REQUEST,
    ErrorCode.VALIDATION_ERROR: status.HTTP_400_BAD_REQUEST,
    ErrorCode.RESOURCE_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.RESOURCE_ALREADY_EXISTS: status.HTTP_400_BAD_REQUEST,
    ErrorCode.METHOD_NOT_ALLOWED: status.HTTP_405_METHOD_NOT_ALLOWED,
    ErrorCode.SERVER_INTERNAL_ERROR: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ErrorCode.SERVER_DATABASE_ERROR: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


# =============================================================================
# ERROR RESPONSE MODELS
# =============================================================================


class FieldError(BaseModel):
    """Individual field validation error."""
    field: str = Field(..., description="Field name that caused the error")
    message: str = Field(..., description="Error message for this field")
    code: str = Field(default="invalid", description="Error code for this field")


class ErrorResponse(BaseModel):
    """Standardized API error response."""
    error: bool = Field(default=True, description="Always true for errors")
    code: str = Field(..., description="Error code from ErrorCode enum")
    message: str = Field(..., description="Human-readable error message")
    status_code: int = Field(..., description="HTTP status code")
    timestamp: str = Field(..., description="ISO 8601 timestamp")
    request_id: str = Field(..., description="Correlation ID of the failing request")
    path: Optional[str] = Field(None, description="Request path that caused the error")
    details: Optional[Dict[str, Any]] = Field(None, description="Additional error context")
    field_errors: Optional[List[FieldError]] = Field(None, description="Field-specific validation errors")


# =============================================================================
# API ERROR EXCEPTION
# =============================================================================


class APIError(Exception):
    """
    Raise anywhere below a route to return a standardized error response.

    Usage:
        raise APIError(
            code=ErrorCode.VALIDATION_ERROR,
            message="Title is required",
            details={"field": "title"}
        )
    """

    def __init__(
        self,
        code: Union[ErrorCode, str],
        message: str,
        status_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
        field_errors: Optional[List[Dict[str, str]]] = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        self.code = code if isinstance(code, ErrorCode) else ErrorCode(code)
        self.message = message
        self.status_code = status_code or ERROR_CODE_STATUS_MAP.get(
            self.code, status.HTTP_500_INTERNAL_SERVER_ERROR
        )
        self.details = details
        self.field_errors = field_errors
        self.headers = headers
        super().__init__(message)

    def to_response(self, request_id: str, path: Optional[str] = None) -> ErrorResponse:
        field_error_models = None
        if self.field_errors:
            field_error_models = [
                FieldError(
                    field=fe.get("field", "unknown"),
                    message=fe.get("message", "Invalid value"),
                    code=fe.get("code", "invalid"),
                )
                for fe in self.field_errors
            ]

        return _build_response(
            self.code, self.message, self.status_code, request_id, path,
            details=self.details, field_errors=field_error_models,
        )


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================


def get_request_id(request: Request) -> str:
    """Correlation ID assigned by the middleware, falling back to the header."""
    request_id = getattr(request.state, "correlation_id", None) or get_correlation_id()
    if not request_id:
        request_id = request.headers.get(REQUEST_ID_HEADER, "-")
    return request_id


def _build_response(
    code: ErrorCode,
    message: str,
    status_code: int,
    request_id: str,
    path: Optional[str],
    details: Optional[Dict[str, Any]] = None,
    field_errors: Optional[List[FieldError]] = None,
) -> ErrorResponse:
    return ErrorResponse(
        error=True,
        code=code.value,
        message=message,
        status_code=status_code,
        timestamp=datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        request_id=request_id,
        path=path,
        details=details,
        field_errors=field_errors,
    )


def _json(response: ErrorResponse, request_id: str, headers: Optional[Dict[str, str]] = None) -> JSONResponse:
    all_headers = {REQUEST_ID_HEADER: request_id}
    if headers:
        all_headers.update(headers)
    return JSONResponse(
        status_code=response.status_code,
        content=response.model_dump(exclude_none=True),
        headers=all_headers,
    )


def _summarize_field_errors(field_errors: List[Dict[str, str]]) -> str:
    """Short message naming the first failing field."""
    first = field_errors[0]
    message = first["message"]
    if message.startswith("Value error, "):
        message = message[len("Value error, "):]
    if first["field"] == "body":
        return message
    return f"{first['field']}: {message}"


# =============================================================================
# GLOBAL EXCEPTION HANDLERS
# =============================================================================


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register all exception handlers with the FastAPI app.

    Call this in your app initialization:
        from security.api_errors import register_exception_handlers
        register_exception_handlers(app)
    """

    @app.exception_handler(APIError)
    async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
        request_id = get_request_id(request)

        log_level = logging.WARNING if exc.status_code < 500 else logging.ERROR
        logger.log(
            log_level,
            f"[{request_id}] APIError: {exc.code.value} - {exc.message}",
            extra={
                "request_id": request_id,
                "error_code": exc.code.value,
                "status_code": exc.status_code,
                "path": request.url.path,
                "method": request.method,
            }
        )

        return _json(exc.to_response(request_id, request.url.path), request_id, exc.headers)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        """Pydantic validation failures are reported as 400, not 422."""
        request_id = get_request_id(request)

        field_errors = []
        for error in exc.errors():
            field_path = ".".join(str(loc) for loc in error["loc"] if loc != "body")
            field_errors.append({
                "field": field_path or "body",
                "message": error["msg"],
                "code": error["type"],
            })

        logger.warning(
            f"[{request_id}] Validation error: {len(field_errors)} field(s)",
            extra={
                "request_id": request_id,
                "path": request.url.path,
                "method": request.method,
                "fields": [fe["field"] for fe in field_errors],
            }
        )

        message = _summarize_field_errors(field_errors) if field_errors else "Request validation failed"
        response = _build_response(
            ErrorCode.VALIDATION_ERROR,
            message,
            status.HTTP_400_BAD_REQUEST,
            request_id,
            request.url.path,
            field_errors=[
                FieldError(field=fe["field"], message=fe["message"], code=fe["code"])
                for fe in field_errors
            ],
        )
        return _json(response, request_id)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        """Routing-level errors (unknown path, wrong method)."""
        request_id = get_request_id(request)

        status_to_code = {
            400: ErrorCode.VALIDATION_ERROR,
            401: ErrorCode.AUTH_REQUIRED,
            404: ErrorCode.RESOURCE_NOT_FOUND,
            405: ErrorCode.METHOD_NOT_ALLOWED,
        }
        error_code = status_to_code.get(exc.status_code, ErrorCode.SERVER_INTERNAL_ERROR)

        logger.warning(
            f"[{request_id}] HTTP {exc.status_code}: {exc.detail}",
            extra={
                "request_id": request_id,
                "status_code": exc.status_code,
                "path": request.url.path,
                "method": request.method,
            }
        )

        response = _build_response(
            error_code,
            str(exc.detail) if exc.detail else "An error occurred",
            exc.status_code,
            request_id,
            request.url.path,
        )
        return _json(response, request_id, getattr(exc, "headers", None))

    @app.exception_handler(SQLAlchemyError)
    async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
        """Store failures are surfaced generically."""
        request_id = get_request_id(request)

        logger.error(
            f"[{request_id}] Database error: {type(exc).__name__}",
            extra={
                "request_id": request_id,
                "path": request.url.path,
                "method": request.method,
            },
            exc_info=True,
        )

        response = _build_response(
            ErrorCode.SERVER_DATABASE_ERROR,
            "A storage error occurred. Please try again later.",
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            request_id,
            request.url.path,
        )
        return _json(response, request_id)

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """
        Catch-all handler.

        SECURITY: Never expose internal error details to clients.
        """
        request_id = get_request_id(request)

        logger.error(
            f"[{request_id}] Unhandled exception: {type(exc).__name__}: {str(exc)}",
            extra={
                "request_id": request_id,
                "path": request.url.path,
                "method": request.method,
                "exception_type": type(exc).__name__,
                "traceback": traceback.format_exc(),
            },
            exc_info=True
        )

        response = _build_response(
            ErrorCode.SERVER_INTERNAL_ERROR,
            "An unexpected error occurred. Please try again later.",
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            request_id,
            request.url.path,
            details={"support": f"Reference ID: {request_id}"},
        )
        return _json(response, request_id)
