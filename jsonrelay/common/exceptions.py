"""
HTTP exception taxonomy.

One exception class per standard client/server error status, plus
``UnknownServerError`` for anything outside the table. The server raises
(or returns) these to produce error envelopes; the client rebuilds them
from the status found in a received envelope.
"""

from typing import Any, Dict, Optional, Type

from .models.envelope import ResultEnvelope

HTTP_STATUS_CODES: Dict[int, str] = {
    400: "Bad Request",
    401: "Unauthorized",
    402: "Payment Required",
    403: "Forbidden",
    404: "Not Found",
    405: "Method Not Allowed",
    406: "Not Acceptable",
    407: "Proxy Authentication Required",
    408: "Request Timeout",
    409: "Conflict",
    410: "Gone",
    411: "Length Required",
    412: "Precondition Failed",
    413: "Request Entity Too Large",
    414: "Request URI Too Long",
    415: "Unsupported Media Type",
    416: "Requested Range Not Satisfiable",
    417: "Expectation Failed",
    418: "I'm a Teapot",
    422: "Unprocessable Entity",
    423: "Locked",
    424: "Failed Dependency",
    426: "Upgrade Required",
    428: "Precondition Required",
    429: "Too Many Requests",
    431: "Request Header Fields Too Large",
    451: "Unavailable For Legal Reasons",
    500: "Internal Server Error",
    501: "Not Implemented",
    502: "Bad Gateway",
    503: "Service Unavailable",
    504: "Gateway Timeout",
    505: "HTTP Version Not Supported",
    507: "Insufficient Storage",
    511: "Network Authentication Required",
}


class HTTPError(Exception):
    """Base class of the taxonomy. Carries the response status and body."""

    _status: int = 500

    def __init__(self, body: Any = None):
        if body is None:
            body = HTTP_STATUS_CODES.get(self.status, "Unknown Error")
        self._body = body
        super().__init__(f"[{self.status}] {body}")

    @property
    def status(self) -> int:
        return self._status

    @property
    def body(self) -> Any:
        return self._body

    def to_envelope(self) -> ResultEnvelope:
        return ResultEnvelope(status=self.status, body=self.body)


class BadRequest(HTTPError):
    _status = 400


class Unauthorized(HTTPError):
    _status = 401


class PaymentRequired(HTTPError):
    _status = 402


class Forbidden(HTTPError):
    _status = 403


class NotFound(HTTPError):
    _status = 404


class MethodNotAllowed(HTTPError):
    _status = 405


class NotAcceptable(HTTPError):
    _status = 406


class ProxyAuthenticationRequired(HTTPError):
    _status = 407


class RequestTimeout(HTTPError):
    _status = 408


class Conflict(HTTPError):
    _status = 409


class Gone(HTTPError):
    _status = 410


class LengthRequired(HTTPError):
    _status = 411


class PreconditionFailed(HTTPError):
    _status = 412


class RequestEntityTooLarge(HTTPError):
    _status = 413


class RequestURITooLong(HTTPError):
    _status = 414


class UnsupportedMediaType(HTTPError):
    _status = 415


class RequestedRangeNotSatisfiable(HTTPError):
    _status = 416


class ExpectationFailed(HTTPError):
    _status = 417


class ImATeapot(HTTPError):
    _status = 418


class UnprocessableEntity(HTTPError):
    _status = 422


class Locked(HTTPError):
    _status = 423


class FailedDependency(HTTPError):
    _status = 424


class UpgradeRequired(HTTPError):
    _status = 426


class PreconditionRequired(HTTPError):
    _status = 428


class TooManyRequests(HTTPError):
    _status = 429


class RequestHeaderFieldsTooLarge(HTTPError):
    _status = 431


class UnavailableForLegalReasons(HTTPError):
    _status = 451


class InternalServerError(HTTPError):
    _status = 500


# Named to avoid shadowing the NotImplemented builtin.
class NotImplementedByServer(HTTPError):
    _status = 501


class BadGateway(HTTPError):
    _status = 502


class ServiceUnavailable(HTTPError):
    _status = 503


class GatewayTimeout(HTTPError):
    _status = 504


class HTTPVersionNotSupported(HTTPError):
    _status = 505


class InsufficientStorage(HTTPError):
    _status = 507


class NetworkAuthenticationRequired(HTTPError):
    _status = 511


class UnknownServerError(HTTPError):
    """
    Raised for a status the table does not know.

    ``raw_status`` keeps the value the server sent, even when it was not a number
    (``status`` is 0 in that case).
    """

    def __init__(self, status: int, body: Any = None, raw_status: Any = None):
        self._status = status
        self._raw_status = status if raw_status is None else raw_status
        if body is None:
            body = f"Unknown Error ({self._raw_status})"
        super().__init__(body)

    @property
    def raw_status(self) -> Any:
        return self._raw_status


ERRORS_BY_STATUS: Dict[int, Type[HTTPError]] = {
    cls._status: cls
    for cls in HTTPError.__subclasses__()
    if cls is not UnknownServerError
}


def error_class_for_status(status: int) -> Optional[Type[HTTPError]]:
    """Taxonomy class for a status, or None when the status is not in the table."""
    return ERRORS_BY_STATUS.get(status)


def status_for_error(error_class: Type[HTTPError]) -> int:
    return error_class._status


def error_for_status(status: Any, body: Any = None) -> HTTPError:
    """
    Build the taxonomy error for a status.

    Statuses outside the table (including non-integer values) degrade to
    ``UnknownServerError`` instead of failing.
    """
    try:
        code = int(status)
    except (TypeError, ValueError):
        return UnknownServerError(0, body, raw_status=status)

    error_class = error_class_for_status(code)
    if error_class is None:
        return UnknownServerError(code, body)
    return error_class(body)
