"""
Custom exceptions and error handlers for consistent error responses.

Provides standardized error codes and global exception handlers.
"""

import logging

from fastapi import HTTPException, Request, status
from fastapi.responses import JSONResponse
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from typing import Any, Dict, List, Optional

logger = logging.getLogger("trippacks")


class AppException(Exception):
    """Base application exception."""

    def __init__(self, message: str, error_code: str, status_code: int = 500, details: Dict[str, Any] = None):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)


class UnsupportedTargetError(AppException):
    """Raised when a path names no target, or a target the operation does not support."""

    def __init__(self, operation: str, path: str):
        super().__init__(
            message=f"{operation} is not supported for {path}",
            error_code="ERR_TARGET_001",
            status_code=status.HTTP_400_BAD_REQUEST,
            details={"operation": operation, "path": path}
        )


class UnresolvableTypeError(AppException):
    """Raised when a type tag is requested for a path no target matches."""

    def __init__(self, path: str):
        super().__init__(
            message=f"Unknown path {path}",
            error_code="ERR_TYPE_001",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            details={"path": path}
        )


class UnknownColumnError(AppException):
    """Raised when a projection, selection or sort order names a column the table lacks."""

    def __init__(self, table: str, column: str):
        super().__init__(
            message=f"Unknown column '{column}' for table {table}",
            error_code="ERR_COLUMN_001",
            status_code=status.HTTP_400_BAD_REQUEST,
            details={"table": table, "column": column}
        )


class WriteRejectedError(AppException):
    """Raised by the HTTP layer when the repository refused a write."""

    def __init__(self, path: str, messages: Optional[List[str]] = None):
        super().__init__(
            message=f"Write rejected for {path}",
            error_code="ERR_WRITE_001",
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            details={"path": path, "messages": messages or []}
        )


# Global Exception Handlers

async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Handler for custom application exceptions."""
    if exc.status_code >= 500:
        logger.error("%s: %s", exc.error_code, exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error_code": exc.error_code,
            "message": exc.message,
            "details": exc.details
        }
    )


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Handler for FastAPI HTTPException with standardized format."""
    # Map status code to error code
    error_code_map = {
        400: "ERR_BAD_REQUEST",
        404: "ERR_NOT_FOUND",
        405: "ERR_METHOD_NOT_ALLOWED",
        500: "ERR_INTERNAL_SERVER"
    }

    error_code = error_code_map.get(exc.status_code, "ERR_UNKNOWN")

    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error_code": error_code,
            "message": exc.detail,
            "details": {}
        }
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Handler for Pydantic validation errors."""
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error_code": "ERR_VALIDATION",
            "message": "Validation error",
            "details": {
                "errors": jsonable_encoder(exc.errors())
            }
        }
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handler for unhandled exceptions."""
    logger.exception("Unhandled exception: %s: %s", type(exc).__name__, exc)

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error_code": "ERR_INTERNAL_SERVER",
            "message": "An internal server error occurred",
            "details": {}
        }
    )
