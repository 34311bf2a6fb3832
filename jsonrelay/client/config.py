"""
Client configuration definition.
"""

from pydantic import Field

from jsonrelay.common.core.config import BaseAppConfig


class ClientConfig(BaseAppConfig):
    """
    Configuration management for jsonrelay clients.
    """

    RAISE_ON_ERROR: bool = Field(
        default=False, description="Raise taxonomy errors for non-success responses"
    )
    USER_AGENT: str = Field(
        default="", description="User-Agent override (empty: jsonrelay client identity)"
    )
