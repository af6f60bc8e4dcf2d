"""Translate exceptions into ``{"error": message}`` JSON responses."""

import traceback

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from protean.exceptions import ObjectNotFoundError, ValidationError

from storefront.config import get_settings
from storefront.exceptions import StorefrontError
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def _first_message(messages: dict) -> str:
    for field, errors in messages.items():
        if isinstance(errors, list | tuple) and errors:
            return str(errors[0])
        if errors:
            return f"{field}: {errors}"
    return "Validation failed"


async def storefront_error_handler(request: Request, exc: StorefrontError) -> JSONResponse:
    log = logger.error if exc.status_code >= 500 else logger.warning
    log("request_failed", path=request.url.path, status_code=exc.status_code, error=exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    messages = exc.messages if isinstance(exc.messages, dict) else {"error": [str(exc.messages)]}
    logger.warning("request_invalid", path=request.url.path, errors=messages)
    return JSONResponse(status_code=400, content={"error": _first_message(messages), "errors": messages})


async def not_found_handler(request: Request, exc: ObjectNotFoundError) -> JSONResponse:
    logger.warning("record_not_found", path=request.url.path, error=str(exc))
    return JSONResponse(status_code=404, content={"error": "Not found"})


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.warning("request_schema_invalid", path=request.url.path, errors=exc.errors())
    return JSONResponse(
        status_code=400,
        content={"error": "Invalid request", "detail": jsonable_errors(exc)},
    )


def jsonable_errors(exc: RequestValidationError) -> list[dict]:
    return [
        {"loc": list(error.get("loc", ())), "msg": error.get("msg", ""), "type": error.get("type", "")}
        for error in exc.errors()
    ]


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("request_crashed", path=request.url.path, exc_info=exc)
    content = {"error": "Internal server error"}
    if not get_settings().is_production:
        content["details"] = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    return JSONResponse(status_code=500, content=content)


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StorefrontError, storefront_error_handler)
    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(ObjectNotFoundError, not_found_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
