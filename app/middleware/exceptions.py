from fastapi import HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException
from app.schemas.response import ErrorResponse, FieldError
from app.utils.time import utcnow
import logging
import uuid

logger = logging.getLogger(__name__)

def _get_error_code(status_code: int) -> str:
    code_map = {
        400: "BAD_REQUEST",
        401: "UNAUTHORIZED",
        403: "FORBIDDEN",
        404: "NOT_FOUND",
        405: "METHOD_NOT_ALLOWED",
        409: "CONFLICT",
        422: "VALIDATION_ERROR",
        500: "INTERNAL_SERVER_ERROR",
    }
    return code_map.get(status_code, f"HTTP_{status_code}")

def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", None) or str(uuid.uuid4())

def _error_response(request: Request, *, status_code: int, message: str, error: str, details=None) -> JSONResponse:
    error_response = ErrorResponse(
        message=message,
        error=error,
        details=details,
        timestamp=utcnow().isoformat(),
        path=request.url.path,
        request_id=_request_id(request),
    )
    return JSONResponse(status_code=status_code, content=jsonable_encoder(error_response))

async def validation_exception_handler(request: Request, exc: RequestValidationError):
    # Missing or malformed fields are a bad request, not an unprocessable entity.
    errors = [
        FieldError(
            field=".".join(str(part) for part in err.get("loc", ()) if part != "body"),
            message=err.get("msg", ""),
            type=err.get("type", ""),
        )
        for err in exc.errors()
    ]
    first = errors[0] if errors else None
    if first is None:
        message = "Request validation failed"
    else:
        message = f"{first.field}: {first.message}" if first.field else first.message
    logger.warning(f"[{_request_id(request)}] Validation error: {errors}")
    return _error_response(
        request,
        status_code=400,
        message=message,
        error="VALIDATION_ERROR",
        details=ErrorResponse.validation_details(errors),
    )

async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    message = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    logger.warning(f"[{_request_id(request)}] HTTP {exc.status_code}: {message}")
    response = _error_response(
        request,
        status_code=exc.status_code,
        message=message,
        error=_get_error_code(exc.status_code),
    )
    if getattr(exc, "headers", None):
        response.headers.update(exc.headers)
    return response

async def database_exception_handler(request: Request, exc: SQLAlchemyError):
    # The driver message is surfaced as-is for diagnostics.
    logger.error(f"[{_request_id(request)}] Database error: {exc}", exc_info=True)
    return _error_response(
        request,
        status_code=500,
        message=str(exc.orig) if getattr(exc, "orig", None) is not None else str(exc),
        error="INTERNAL_SERVER_ERROR",
        details={"error_type": type(exc).__name__},
    )

async def global_exception_handler(request: Request, exc: Exception):
    if isinstance(exc, (HTTPException, StarletteHTTPException)):
        return await http_exception_handler(request, exc)
    if isinstance(exc, SQLAlchemyError):
        return await database_exception_handler(request, exc)

    logger.error(f"[{_request_id(request)}] Unhandled exception: {exc}", exc_info=True)
    return _error_response(
        request,
        status_code=500,
        message="An unexpected error occurred",
        error="INTERNAL_SERVER_ERROR",
        details={"error_type": type(exc).__name__},
    )
