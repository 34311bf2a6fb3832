"""
Request admission policy.

Runs before routing and rejects requests from clients the server is not
configured to talk to.
"""

import logging
import re
from typing import Optional, Union

from jsonrelay.common.core.identity import DEFAULT_CLIENT_PATTERN
from jsonrelay.common.exceptions import Forbidden

from ..models.context import RequestContext

logger = logging.getLogger("jsonrelay.server.access_policy")

ALLOW_ALL = "all"
ALLOW_LOCAL = "local"
ALLOW_KNOWN_CLIENTS = "known_clients"

LOCAL_ADDRESSES = frozenset({"localhost", "127.0.0.1", "0.0.0.0"})

_ALIASES = {
    "all": ALLOW_ALL,
    "local": ALLOW_LOCAL,
    "known_clients": ALLOW_KNOWN_CLIENTS,
    "knownclients": ALLOW_KNOWN_CLIENTS,
}


class AccessPolicy:
    """
    Decide whether a request may be served.

    Modes:
      all            admit every request
      local          admit only requests from localhost, 127.0.0.1 or 0.0.0.0
      known_clients  admit only requests whose User-Agent matches ``client_pattern``

    An unrecognized mode falls back to ``all`` with a warning.
    """

    def __init__(
        self,
        allow_from: str = ALLOW_ALL,
        client_pattern: Union[str, "re.Pattern[str]"] = DEFAULT_CLIENT_PATTERN,
    ):
        mode = _ALIASES.get(str(allow_from).strip().lower())
        if mode is None:
            logger.warning(
                "Unrecognized allow_from configuration value (%s); "
                "use all, local, or known_clients. Allowing all requests.",
                allow_from,
            )
            mode = ALLOW_ALL
        self.mode = mode
        self.client_pattern = (
            client_pattern if isinstance(client_pattern, re.Pattern) else re.compile(client_pattern)
        )

    def admit(self, context: RequestContext) -> Optional[Forbidden]:
        """
        Returns:
            None when the request is admitted, otherwise the Forbidden error to send
        """
        if self.mode == ALLOW_LOCAL:
            if context.remote_addr not in LOCAL_ADDRESSES:
                return Forbidden()
        elif self.mode == ALLOW_KNOWN_CLIENTS:
            if not context.user_agent or not self.client_pattern.search(context.user_agent):
                return Forbidden()
        return None
