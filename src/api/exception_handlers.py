"""Exception handlers rendering every failure as ``{error_code, message, details}``."""

from typing import Any

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import ORJSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from core.config import settings
from core.exceptions import AppException, ErrorCode

logger = structlog.get_logger()

# Request parts FastAPI prefixes onto validation error locations.
_LOCATIONS = {"body", "query", "path", "header", "cookie"}


def error_response(
    status_code: int,
    error_code: ErrorCode,
    message: str,
    details: Any | None = None,
    headers: dict[str, str] | None = None,
) -> ORJSONResponse:
    return ORJSONResponse(
        status_code=status_code,
        content={"error_code": error_code.value, "message": message, "details": details},
        headers=headers,
    )


def validation_details(errors: list[dict[str, Any]]) -> dict[str, dict[str, str]]:
    """Collapse pydantic errors into ``{"fields": {name: message}}``.

    Field names drop the request-part prefix, so ``body.title`` becomes
    ``title``, matching the ``field`` detail of domain validation errors.
    The first message per field wins.
    """
    fields: dict[str, str] = {}
    for error in errors:
        loc = [str(part) for part in error["loc"]]
        if len(loc) > 1 and loc[0] in _LOCATIONS:
            loc = loc[1:]
        fields.setdefault(".".join(loc), error["msg"])
    return {"fields": fields}


def setup_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers on the FastAPI app."""

    @app.exception_handler(AppException)
    async def app_exception_handler(request: Request, exc: AppException) -> ORJSONResponse:
        logger.warning(
            "app_exception",
            error_code=exc.error_code.value,
            status_code=exc.status_code,
        )
        return error_response(exc.status_code, exc.error_code, exc.message, exc.details)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> ORJSONResponse:
        """Routing and method errors raised by Starlette itself."""
        error_code = ErrorCode.NOT_FOUND if exc.status_code == 404 else ErrorCode.HTTP_ERROR
        return error_response(
            exc.status_code,
            error_code,
            str(exc.detail),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> ORJSONResponse:
        details = validation_details(list(exc.errors()))
        logger.info("request_validation_failed", fields=sorted(details["fields"]))
        return error_response(
            422, ErrorCode.VALIDATION_ERROR, "Request validation failed", details
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> ORJSONResponse:
        # Bound by RequestContextMiddleware; absent when the app runs without it.
        request_id = structlog.contextvars.get_contextvars().get("request_id")
        logger.error("unhandled_exception", error_type=type(exc).__name__, exc_info=exc)

        details: dict[str, Any] = {"request_id": request_id}
        if not settings.is_production:
            details["error_type"] = type(exc).__name__
        return error_response(
            500,
            ErrorCode.INTERNAL_ERROR,
            "An unexpected error occurred" if settings.is_production else str(exc),
            details,
        )
