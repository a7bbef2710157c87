import logging
from typing import Iterable, Type

from fastapi import FastAPI, Request, HTTPException
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder

from shared.helpers.json_response_helper import failure_result
from shared.utils.app_status_code import AppStatusCode

logger = logging.getLogger(__name__)


def setup_exception_handlers(app: FastAPI, service_errors: Iterable[Type[Exception]] = ()):
    """
    Wrap every failure in the JsonOutResult envelope.

    `service_errors` are domain exception classes exposing `message`,
    `http_status`, `status_code` and `details`.
    """

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        # error_response() already packs a JsonOutResult into detail
        if isinstance(exc.detail, dict) and "status_code" in exc.detail:
            wrapped = exc.detail
        else:
            wrapped = failure_result(str(exc.detail), str(exc.status_code or AppStatusCode.OPERATION_FAILED))
        return JSONResponse(content=jsonable_encoder(wrapped), status_code=exc.status_code or 400,
                            headers=getattr(exc, "headers", None))

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        wrapped = failure_result("Request validation failed", AppStatusCode.INVALID_INPUT,
                                 data=jsonable_encoder(exc.errors()))
        return JSONResponse(content=jsonable_encoder(wrapped), status_code=422)

    for error_type in service_errors:
        @app.exception_handler(error_type)
        async def service_exception_handler(request: Request, exc):
            logger.warning(f"{request.method} {request.url.path} rejected: {exc.message}")
            wrapped = failure_result(exc.message, exc.status_code, data=exc.details or None)
            return JSONResponse(content=jsonable_encoder(wrapped), status_code=exc.http_status)

    # Catch all unhandled exceptions
    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled exception on {request.method} {request.url.path}")
        return JSONResponse(content=failure_result("Internal server error"), status_code=500)
