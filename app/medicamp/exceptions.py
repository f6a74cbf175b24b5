"""
Exception handlers installed by the app factory.

Every error leaves the API as ``ErrorResponseModel(error, code, message)``.
Store and unexpected failures are logged in full and answered with a generic
message.
"""
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError
from starlette.exceptions import HTTPException

from medicamp.response_model import ErrorResponseModel
from medicamp.upstream import UpstreamError, UpstreamTimeout

logger = logging.getLogger(__name__)

ERROR_NAMES = {
    400: "Bad Request",
    401: "Unauthorized",
    403: "Forbidden",
    404: "Not Found",
    500: "Internal Server Error",
    502: "Bad Gateway",
    504: "Gateway Timeout",
}


def _error(code: int, message) -> JSONResponse:
    return JSONResponse(
        status_code=code,
        content=ErrorResponseModel(ERROR_NAMES.get(code, "Error"), code, message),
    )


async def http_exception_handler(request: Request, exc: HTTPException):
    return _error(exc.status_code, exc.detail)


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    problems = [
        f"{'.'.join(str(p) for p in err['loc'] if p != 'body')}: {err['msg']}"
        for err in exc.errors()
    ]
    return _error(status.HTTP_400_BAD_REQUEST, "; ".join(problems))


async def upstream_exception_handler(request: Request, exc: UpstreamError):
    logger.error("Upstream failure on %s %s: %s", request.method, request.url.path, exc)
    if isinstance(exc, UpstreamTimeout):
        return _error(status.HTTP_504_GATEWAY_TIMEOUT, f"{exc.service} timed out")
    return _error(status.HTTP_502_BAD_GATEWAY, f"{exc.service} request failed")


async def store_exception_handler(request: Request, exc: PyMongoError):
    logger.exception("Datastore failure on %s %s", request.method, request.url.path, exc_info=exc)
    return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


def register_exception_handlers(app: FastAPI):
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(UpstreamError, upstream_exception_handler)
    app.add_exception_handler(PyMongoError, store_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
