"""Error Handlers — map failures to the JSON error envelope.

Invariants:
    - Every error body has the shape {"error": {code, message, category, severity, ...}}
    - LangPolicyError logs carry the language-policy context (language_code,
      attempt, retry_after_ms) and the request path as structured extras
    - Request validation failures are 400 with one detail per invalid field
    - Unhandled exceptions are 500 with a fixed message; details go to logs only

Design Decisions:
    - Module-level handlers registered with add_exception_handler; all three
      share one envelope builder
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from langpolicy.core.errors import ErrorCategory, ErrorSeverity, LangPolicyError

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "An unexpected error occurred"


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(LangPolicyError, handle_langpolicy_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)


async def handle_langpolicy_error(request: Request, exc: LangPolicyError) -> JSONResponse:
    """Render a service error and log it with its policy context."""
    log = logger.critical if exc.severity == ErrorSeverity.CRITICAL else logger.error
    log(
        f"{exc.code} on {request.url.path}: {exc.message}",
        extra={
            "error_code": exc.code,
            "path": request.url.path,
            **exc.context.public_fields(),
        },
    )
    return JSONResponse(status_code=exc.http_status, content=exc.to_response())


async def handle_request_validation_error(
    request: Request, exc: RequestValidationError,
) -> JSONResponse:
    details = [_field_detail(e) for e in exc.errors()]
    logger.warning(
        f"Rejected request on {request.url.path}: "
        + ", ".join(d["field"] for d in details),
        extra={"error_code": "VALIDATION_ERROR", "path": request.url.path},
    )
    body = _error_body(
        "VALIDATION_ERROR", "Invalid request data",
        ErrorCategory.VALIDATION, ErrorSeverity.WARNING,
    )
    body["error"]["details"] = details
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=body)


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        f"Unhandled {type(exc).__name__} on {request.url.path}: {exc}",
        exc_info=True,
        extra={"error_code": "INTERNAL_ERROR", "path": request.url.path},
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body(
            "INTERNAL_ERROR", INTERNAL_ERROR_MESSAGE,
            ErrorCategory.INTERNAL, ErrorSeverity.CRITICAL,
        ),
    )


def _error_body(
    code: str, message: str, category: ErrorCategory, severity: ErrorSeverity,
) -> dict:
    return {
        "error": {
            "code": code,
            "message": message,
            "category": category.value,
            "severity": severity.value,
        },
    }


def _field_detail(error: dict) -> dict:
    # loc is ("body", "target", "confidence") style; joined for clients
    return {
        "field": ".".join(str(part) for part in error["loc"]),
        "message": error["msg"],
        "type": error["type"],
    }
