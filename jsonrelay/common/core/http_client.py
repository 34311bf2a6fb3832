import logging

import httpx

from .config import BaseAppConfig

logger = logging.getLogger(__name__)


class HttpClientFactory:
    """
    HTTP Client Factory for centralized SSL verification handling.
    """

    def __init__(self, config: BaseAppConfig):
        self.config = config

    def create_sync_client(self, **kwargs) -> httpx.Client:
        """
        Create an httpx.Client with configured SSL verification.

        The client is meant to serve a single request: keep-alive is
        disabled so closing it always closes the connection.

        Args:
            **kwargs: Additional arguments for httpx.Client
        """
        verify = kwargs.pop("verify", None)

        # If verify is not explicitly provided, use config default
        if verify is None:
            verify = self.config.VERIFY_SSL

        if "limits" not in kwargs:
            kwargs["limits"] = httpx.Limits(max_keepalive_connections=0, max_connections=1)
        # Avoid leaking host HTTP(S)_PROXY/NO_PROXY into calls unless explicitly requested.
        kwargs.setdefault("trust_env", False)

        logger.debug("Creating HTTP client (verify=%s)", verify)
        return httpx.Client(verify=verify, **kwargs)
