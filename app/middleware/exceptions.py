from fastapi import Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException
from app.core.exceptions import AppError
from app.schemas.response import ErrorResponse
from datetime import datetime, timezone
import logging
import uuid

logger = logging.getLogger(__name__)

def _get_error_code(status_code: int) -> str:
    code_map = {
        400: "BAD_REQUEST",
        401: "UNAUTHORIZED",
        403: "FORBIDDEN",
        404: "NOT_FOUND",
        409: "CONFLICT",
        429: "TOO_MANY_REQUESTS",
        500: "INTERNAL_SERVER_ERROR",
    }
    return code_map.get(status_code, f"HTTP_{status_code}")

def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", None) or str(uuid.uuid4())

def _error_response(request: Request, status_code: int, message: str, code: str, errors=None, headers=None) -> JSONResponse:
    error_response = ErrorResponse(
        message=message,
        code=code,
        errors=errors,
        timestamp=datetime.now(timezone.utc).isoformat(),
        path=str(request.url.path),
        request_id=_request_id(request)
    )
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder(error_response.model_dump(by_alias=True, exclude_none=True)),
        headers=headers
    )

async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    message = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    errors = exc.errors if isinstance(exc, AppError) else None
    logger.warning(f"[{_request_id(request)}] HTTP {exc.status_code}: {message}")
    return _error_response(
        request, exc.status_code, message, _get_error_code(exc.status_code),
        errors=errors, headers=getattr(exc, "headers", None)
    )

async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.warning(f"[{_request_id(request)}] Validation error: {exc.errors()}")
    return _error_response(request, 400, "Validation failed", "VALIDATION_ERROR", errors=exc.errors())

async def global_exception_handler(request: Request, exc: Exception):
    request_id = _request_id(request)
    if isinstance(exc, SQLAlchemyError):
        logger.error(f"[{request_id}] Data store error: {exc}", exc_info=True)
        return _error_response(request, 500, "Data store unavailable", "INTERNAL_SERVER_ERROR")

    logger.error(f"[{request_id}] Unhandled exception: {exc}", exc_info=True)
    return _error_response(
        request, 500, "An unexpected error occurred", "INTERNAL_SERVER_ERROR",
        errors={"error_type": type(exc).__name__}
    )
