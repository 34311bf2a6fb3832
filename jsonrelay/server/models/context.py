"""
Input context models.

Encapsulates all data required to process a request.
"""

import json
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import parse_qsl

from fastapi import Request
from pydantic import BaseModel, ConfigDict, Field

from jsonrelay.common.exceptions import BadRequest

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"
JSON_CONTENT_TYPE = "application/json"


class RequestContext(BaseModel):
    """
    Immutable view of an incoming request.

    This model decouples dispatching and controllers from FastAPI's Request
    object. Header names are stored lower-cased.
    """

    model_config = ConfigDict(frozen=True)

    method: str
    path: str
    headers: Dict[str, str] = Field(default_factory=dict)
    params: Dict[str, Any] = Field(default_factory=dict)
    remote_addr: Optional[str] = None
    user_agent: Optional[str] = None

    @classmethod
    def build(
        cls,
        method: str,
        path: str,
        headers: Optional[Dict[str, str]] = None,
        params: Optional[Dict[str, Any]] = None,
        remote_addr: Optional[str] = None,
    ) -> "RequestContext":
        normalized = {k.lower(): v for k, v in (headers or {}).items()}
        return cls(
            method=method.upper(),
            path=path or "/",
            headers=normalized,
            params=dict(params or {}),
            remote_addr=remote_addr,
            user_agent=normalized.get("user-agent"),
        )

    @classmethod
    async def from_request(cls, request: Request) -> "RequestContext":
        """
        Build the context from a FastAPI request.

        Raises:
            BadRequest: when the body cannot be decoded
        """
        params: Dict[str, Any] = dict(request.query_params)
        params.update(parse_body(request.headers.get("content-type"), await request.body()))

        return cls.build(
            method=request.method,
            path=request.url.path,
            headers=dict(request.headers),
            params=params,
            remote_addr=request.client.host if request.client else None,
        )

    def header(self, name: str, default: Optional[str] = None) -> Optional[str]:
        return self.headers.get(name.lower(), default)


def parse_body(content_type: Optional[str], body: bytes) -> Dict[str, Any]:
    """
    Decode body parameters.

    Form bodies are unflattened (``a[b]=c`` -> ``{"a": {"b": "c"}}``). JSON
    objects are used as-is; any other JSON value is wrapped as ``{"body": value}``.
    Other content types carry no parameters.
    """
    if not body:
        return {}

    media_type = (content_type or "").split(";")[0].strip().lower()
    try:
        text = body.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise BadRequest("Request body is not valid UTF-8") from exc

    if media_type == FORM_CONTENT_TYPE:
        return unflatten_params(parse_qsl(text, keep_blank_values=True))

    if media_type == JSON_CONTENT_TYPE:
        try:
            value = json.loads(text)
        except json.JSONDecodeError as exc:
            raise BadRequest("Request body is not valid JSON") from exc
        return value if isinstance(value, dict) else {"body": value}

    return {}


def unflatten_params(pairs: List[Tuple[str, str]]) -> Dict[str, Any]:
    """Rebuild nested params from ``key[sub]`` / ``key[]`` form keys."""
    result: Dict[str, Any] = {}
    for key, value in pairs:
        head, _, rest = key.partition("[")
        if not rest:
            result[head] = value
            continue

        parts = [head] + [part.rstrip("]") for part in rest.split("[")]
        target = result
        for index, part in enumerate(parts[:-1]):
            following = parts[index + 1]
            default: Any = [] if following == "" else {}
            existing = target.get(part) if isinstance(target, dict) else None
            if not isinstance(existing, type(default)):
                existing = default
                target[part] = existing
            target = existing
            if isinstance(target, list):
                break

        if isinstance(target, list):
            target.append(value)
        else:
            target[parts[-1]] = value
    return result
