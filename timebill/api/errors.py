"""Exception handlers producing the uniform JSON error body.

Every error answer looks like ``{"success": false, "message": ...}``;
validation failures add an ``errors`` list of ``{field, message, value}``.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from timebill.errors import TimebillError

logger = logging.getLogger(__name__)

# Location prefixes FastAPI puts in front of the field name
_LOCATIONS = {"body", "query", "path", "header", "cookie"}


def _field_name(loc) -> str:
    parts = [str(part) for part in loc if part not in _LOCATIONS]
    return ".".join(parts) or "request"


def _error_response(status_code: int, body: dict) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body))


async def handle_timebill_error(request: Request, exc: TimebillError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    else:
        logger.info(
            f"{request.method} {request.url.path} answered {exc.status_code}: {exc.message}"
        )
    return _error_response(exc.status_code, exc.to_dict())


async def handle_request_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = [
        {
            "field": _field_name(error.get("loc", ())),
            "message": error.get("msg", "Invalid value"),
            "value": error.get("input"),
        }
        for error in exc.errors()
    ]
    logger.info(f"{request.method} {request.url.path} rejected: {len(errors)} invalid field(s)")
    return _error_response(
        400, {"success": False, "message": "Validation failed", "errors": errors}
    )


async def handle_http_exception(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    if exc.status_code == 404 and exc.detail == "Not Found":
        return _error_response(
            404,
            {"success": False, "message": "Route not found", "path": request.url.path},
        )
    return _error_response(exc.status_code, {"success": False, "message": exc.detail})


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        f"Unhandled error on {request.method} {request.url.path}: {type(exc).__name__}: {exc}",
        exc_info=exc,
    )
    body = {"success": False, "message": "Internal Server Error"}
    if request.app.state.config.debug:
        body["error"] = str(exc)
    return _error_response(500, body)


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(TimebillError, handle_timebill_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(Exception, handle_unexpected_error)
