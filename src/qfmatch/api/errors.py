"""Map qfmatch exceptions to HTTP responses."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from qfmatch.core.exceptions import (
    CalculationError,
    DataFileNotFoundError,
    MatchingError,
    OverridesColumnNotFoundError,
    OverridesFormatError,
    ResourceNotFoundError,
)

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "something went wrong"

STATUS_BY_ERROR: dict[type[MatchingError], int] = {
    DataFileNotFoundError: 404,
    ResourceNotFoundError: 404,
    OverridesColumnNotFoundError: 400,
    OverridesFormatError: 400,
    CalculationError: 400,
}


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


async def matching_error_handler(request: Request, exc: MatchingError) -> JSONResponse:
    for error_type, status_code in STATUS_BY_ERROR.items():
        if isinstance(exc, error_type):
            return error_response(status_code, str(exc))
    return await unhandled_error_handler(request, exc)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Name the offending parameters without echoing their values."""
    names: list[str] = []
    for error in exc.errors():
        name = str(error.get("loc", ("",))[-1])
        if name not in names:
            names.append(name)
    return error_response(400, f"invalid value for {', '.join(names)}")


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return error_response(500, INTERNAL_ERROR_MESSAGE)


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(MatchingError, matching_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
