"""
Server configuration definition.

Loads configuration from environment variables and provides a Pydantic model.
Uses pydantic-settings for type safety and defaults.
"""

import os

from pydantic import Field

from jsonrelay.common.core.config import BaseAppConfig
from jsonrelay.common.core.identity import DEFAULT_CLIENT_PATTERN


class ServerConfig(BaseAppConfig):
    """
    Configuration management for the server.
    """

    # Server settings
    BIND_ADDR: str = Field(default="0.0.0.0:4647", description="Listen address")

    # Application settings
    ROOT: str = Field(default_factory=os.getcwd, description="Application base directory")
    ROUTING_CONFIG_PATH: str = Field(
        default="config/routes.yml", description="Routing definition file path"
    )
    LOG_CONFIG_PATH: str = Field(
        default="config/server_log.yml", description="Logging dictConfig file path"
    )
    DEFAULT_CONTROLLER: str = Field(
        default="application", description="Controller used when a route names none"
    )

    # Access policy
    ALLOW_FROM: str = Field(
        default="all", description="Admission policy: all, local or known_clients"
    )
    KNOWN_CLIENT_PATTERN: str = Field(
        default=DEFAULT_CLIENT_PATTERN,
        description="User-Agent pattern admitted by the known_clients policy",
    )

    @property
    def host(self) -> str:
        return self.BIND_ADDR.rpartition(":")[0] or "0.0.0.0"

    @property
    def port(self) -> int:
        return int(self.BIND_ADDR.rpartition(":")[2])
