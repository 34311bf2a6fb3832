"""
Response envelope model.

Every jsonrelay response body, success or failure, is this shape.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict


class ResultEnvelope(BaseModel):
    """
    ``{"status": <int>, "body": <any JSON value>}``

    The status is duplicated in the HTTP status line so clients can read the
    outcome from either place.
    """

    model_config = ConfigDict(frozen=True)

    status: int = 200
    body: Any = None

    @property
    def is_success(self) -> bool:
        return 200 <= self.status < 300

    @classmethod
    def coerce(cls, value: Any) -> "ResultEnvelope":
        """Wrap a handler return value; bare bodies are sent with status 200."""
        if isinstance(value, cls):
            return value
        return cls(status=200, body=value)
