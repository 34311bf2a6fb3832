"""
HTTP middleware for request ID propagation.
"""

import logging

from fastapi import Request

from jsonrelay.common.core.request_context import (
    clear_request_id,
    generate_request_id,
    set_request_id,
)

logger = logging.getLogger("jsonrelay.server.middleware")

REQUEST_ID_HEADER = "X-Request-Id"


async def request_id_middleware(request: Request, call_next):
    """Adopt or generate a request ID and echo it on the response."""
    incoming = request.headers.get(REQUEST_ID_HEADER)
    if incoming:
        try:
            request_id = set_request_id(incoming)
        except ValueError:
            logger.warning("Ignoring malformed %s: '%s'", REQUEST_ID_HEADER, incoming)
            request_id = generate_request_id()
    else:
        request_id = generate_request_id()

    try:
        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request_id
        return response
    finally:
        clear_request_id()
