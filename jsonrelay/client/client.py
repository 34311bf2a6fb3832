"""
jsonrelay client.

Speaks to a jsonrelay server and returns its ``{"status", "body"}``
envelopes. With ``raise_on_error`` enabled, non-success responses are raised
as the same taxonomy errors the server used to produce them.

Building a client for an application is a matter of subclassing::

    class Greeter(Client):
        def greet(self, name):
            return self.get(f"/hello/{name}")

    with Greeter("http://localhost:4647") as greeter:
        greeter.greet("Johnny")  # ResultEnvelope(status=200, body='Hello Johnny')

No connection is kept between calls: every request opens a new connection
and closes it once the response has been read.
"""

import json
import logging
from typing import Any, Dict, List, Mapping, Optional, Tuple
from urllib.parse import urlencode, urljoin

import httpx

from jsonrelay.common.core.http_client import HttpClientFactory
from jsonrelay.common.core.identity import CLIENT_IDENTITY
from jsonrelay.common.exceptions import error_for_status
from jsonrelay.common.models.envelope import ResultEnvelope

from .config import ClientConfig

logger = logging.getLogger("jsonrelay.client")

CONTENT_TYPE = "application/json"
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"
BODY_METHODS = frozenset({"POST", "PUT"})


class ClientTransportError(Exception):
    """
    The server could not be reached or did not answer with an envelope.

    Deliberately outside the HTTPError taxonomy: no remote status exists.
    """

    def __init__(self, message: str, cause: Optional[Exception] = None):
        self.cause = cause
        super().__init__(message)


class Client:
    def __init__(
        self,
        uri: str,
        raise_on_error: Optional[bool] = None,
        config: Optional[ClientConfig] = None,
    ):
        """
        Args:
            uri: server base URI, e.g. "http://localhost:4647"
            raise_on_error: raise taxonomy errors instead of returning failure envelopes
            config: client configuration; read from the environment when omitted
        """
        self.config = config or ClientConfig()
        self.uri = uri if uri.endswith("/") else f"{uri}/"
        self.raise_on_error = (
            self.config.RAISE_ON_ERROR if raise_on_error is None else raise_on_error
        )
        self.http_client_factory = HttpClientFactory(self.config)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        return False

    def raise_exceptions(self, setting: bool = True) -> None:
        self.raise_on_error = setting

    def get(self, path: str, headers: Optional[Dict[str, str]] = None) -> ResultEnvelope:
        return self.request("GET", path, headers)

    def delete(self, path: str, headers: Optional[Dict[str, str]] = None) -> ResultEnvelope:
        return self.request("DELETE", path, headers)

    def post(
        self, path: str, data: Any = None, headers: Optional[Dict[str, str]] = None
    ) -> ResultEnvelope:
        return self.request("POST", path, headers, {} if data is None else data)

    def put(
        self, path: str, data: Any = None, headers: Optional[Dict[str, str]] = None
    ) -> ResultEnvelope:
        return self.request("PUT", path, headers, {} if data is None else data)

    def prepare_headers(self, headers: Dict[str, str]) -> Dict[str, str]:
        """Hook for subclasses to adjust outgoing headers (auth tokens, etc.)."""
        return headers

    def request(
        self,
        method: str,
        path: str,
        headers: Optional[Dict[str, str]] = None,
        data: Any = None,
    ) -> ResultEnvelope:
        """
        Perform a request and return the parsed envelope.

        Raises:
            HTTPError: a non-success response while raise_on_error is enabled
            ClientTransportError: connection failure or a reply that is not an envelope
        """
        method = method.upper()
        request_headers = {
            "Content-Type": CONTENT_TYPE,
            "User-Agent": self.config.USER_AGENT or CLIENT_IDENTITY,
        }

        content = None
        if method in BODY_METHODS:
            content = format_body(data)
            request_headers["Content-Type"] = FORM_CONTENT_TYPE

        # Caller headers win over defaults, case-insensitively.
        for name, value in (headers or {}).items():
            for existing in [k for k in request_headers if k.lower() == name.lower()]:
                del request_headers[existing]
            request_headers[name] = value
        request_headers = self.prepare_headers(request_headers)

        url = urljoin(self.uri, path.lstrip("/"))
        try:
            with self.http_client_factory.create_sync_client() as http:
                response = http.request(method, url, headers=request_headers, content=content)
        except httpx.HTTPError as exc:
            logger.warning("%s %s failed: %s", method, url, exc)
            raise ClientTransportError(f"{method} {url} failed: {exc}", exc) from exc

        envelope = parse_envelope(response)

        if self.raise_on_error and not response.is_success:
            error = error_for_status(envelope.status, envelope.body)
            logger.debug("%s %s answered %s", method, url, error)
            raise error

        return envelope


def parse_envelope(response: httpx.Response) -> ResultEnvelope:
    """
    Raises:
        ClientTransportError: the body is not a JSON envelope
    """
    try:
        data = response.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise ClientTransportError(
            f"Response from {response.url} is not JSON (HTTP {response.status_code})", exc
        ) from exc

    if not isinstance(data, dict) or "status" not in data:
        raise ClientTransportError(
            f"Response from {response.url} is not an envelope (HTTP {response.status_code})"
        )

    status = data.get("status")
    if not isinstance(status, int) or isinstance(status, bool):
        status = response.status_code
    return ResultEnvelope(status=status, body=data.get("body"))


def format_body(data: Any) -> str:
    """Encode request data as a flat form body; non-mappings are sent as ``body``."""
    if not isinstance(data, Mapping):
        data = {"body": data}
    return urlencode(flatten_params(data))


def flatten_params(data: Mapping, prefix: str = "") -> List[Tuple[str, str]]:
    pairs: List[Tuple[str, str]] = []
    for key, value in data.items():
        name = f"{prefix}[{key}]" if prefix else str(key)
        if isinstance(value, Mapping):
            pairs.extend(flatten_params(value, name))
        elif isinstance(value, (list, tuple)):
            for item in value:
                pairs.append((f"{name}[]", _param_value(item)))
        else:
            pairs.append((name, _param_value(value)))
    return pairs


def _param_value(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)
