"""
Last-resort exception handler registration.

The dispatcher already turns every failure into an envelope; these handlers
cover errors raised outside it (middleware, framework internals) so those
responses keep the envelope shape too.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from jsonrelay.common.core.identity import SERVER_IDENTITY
from jsonrelay.common.exceptions import HTTPError, InternalServerError, error_for_status

logger = logging.getLogger("jsonrelay.server.exceptions")


def envelope_response(error: HTTPError) -> JSONResponse:
    return JSONResponse(
        status_code=error.status,
        content=error.to_envelope().model_dump(),
        headers={"Server": SERVER_IDENTITY},
    )


async def global_exception_handler(request: Request, exc: Exception):
    """
    Catch-all handler for unhandled exceptions.
    """
    logger.error(
        f"Global exception handler caught: {exc}",
        exc_info=True,
        extra={
            "path": request.url.path,
            "method": request.method,
        },
    )
    return envelope_response(InternalServerError())


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """
    Handler for framework-level HTTPException (e.g. an unsupported method).
    """
    logger.info(f"{request.method} {request.url.path}: {exc.status_code} {exc.detail}")
    return envelope_response(error_for_status(exc.status_code))


async def taxonomy_exception_handler(request: Request, exc: HTTPError):
    logger.info(str(exc))
    return envelope_response(exc)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(Exception, global_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(HTTPError, taxonomy_exception_handler)
