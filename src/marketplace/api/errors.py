"""Convert domain errors into HTTP responses.

Failures are answered as ``{"success": false, "error": ..., "code": ...}``.
Business errors keep their message; anything unexpected is logged in full
and answered with a generic 500.
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.integrations.fastapi import register_exception_handlers

from marketplace.errors import MarketplaceError

logger = structlog.get_logger(__name__)


def error_response(status_code: int, error: str, code: str, details=None) -> JSONResponse:
    content = {"success": False, "error": error, "code": code}
    if details:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content)


def _first_message(messages) -> str:
    if isinstance(messages, dict):
        for field, errors in messages.items():
            if isinstance(errors, (list, tuple)) and errors:
                return f"{field}: {errors[0]}" if field != "_entity" else str(errors[0])
            return f"{field}: {errors}"
    return str(messages) or "Invalid request"


async def marketplace_error_handler(request: Request, exc: MarketplaceError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("Request failed", path=request.url.path, code=exc.code, error=exc.message)
    return error_response(exc.status_code, exc.message, exc.code, exc.details or None)


async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    return error_response(400, _first_message(exc.messages), "validation_error", exc.messages)


async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        {"field": ".".join(str(part) for part in error["loc"][1:]), "message": error["msg"]}
        for error in exc.errors()
    ]
    message = f"{errors[0]['field']}: {errors[0]['message']}" if errors else "Invalid request"
    return error_response(400, message, "validation_error", errors)


async def not_found_handler(request: Request, exc: ObjectNotFoundError) -> JSONResponse:
    return error_response(404, "Not found", "not_found")


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error", path=request.url.path, method=request.method)
    return error_response(500, "Internal server error", "internal_error")


def register_error_handlers(app: FastAPI) -> None:
    # Protean's defaults first, then the marketplace envelope on top
    register_exception_handlers(app)
    app.add_exception_handler(MarketplaceError, marketplace_error_handler)
    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(ObjectNotFoundError, not_found_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
