"""HTTP error mapping for the review API.

Every failure leaves the service as ``{"success": false, ...}``. Store
failures only say that the store is unavailable; the details are in the logs.
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.integrations.fastapi import register_exception_handlers

from vehicle_reviews.errors import AuthorizationError, PersistenceError

logger = structlog.get_logger(__name__)


def _request_errors(exc: RequestValidationError) -> dict[str, list[str]]:
    errors: dict[str, list[str]] = {}
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        field = ".".join(location) or "_entity"
        errors.setdefault(field, []).append(error.get("msg", "Invalid value"))
    return errors


async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"success": False, "errors": exc.messages})


async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"success": False, "errors": _request_errors(exc)})


async def not_found_handler(request: Request, exc: ObjectNotFoundError) -> JSONResponse:
    return JSONResponse(status_code=404, content={"success": False, "error": "not_found"})


async def authorization_error_handler(request: Request, exc: AuthorizationError) -> JSONResponse:
    return JSONResponse(status_code=403, content={"success": False, "error": "not_authorized"})


async def persistence_error_handler(request: Request, exc: PersistenceError) -> JSONResponse:
    logger.error("Request failed on review store", path=request.url.path, operation=exc.operation)
    return JSONResponse(
        status_code=503,
        content={"success": False, "error": "Reviews are temporarily unavailable, please try again"},
    )


def register_error_handlers(app: FastAPI) -> None:
    """Install Protean's default handlers, then the review envelopes on top."""
    register_exception_handlers(app)
    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(ObjectNotFoundError, not_found_handler)
    app.add_exception_handler(AuthorizationError, authorization_error_handler)
    app.add_exception_handler(PersistenceError, persistence_error_handler)
