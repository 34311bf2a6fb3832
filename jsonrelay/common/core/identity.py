"""
Identity strings exchanged between jsonrelay peers.

Both sides announce themselves as
``JSON/<json version> Compatible (en-US) <component>/<jsonrelay version>``.
The ``known_clients`` access policy recognizes clients by this string.
"""

import json

from jsonrelay import __version__

JSON_VERSION = json.__version__

SERVER_COMPONENT = "jsonrelay.Server"
CLIENT_COMPONENT = "jsonrelay.Client"

# Version segments are matched as \d+ so multi-digit releases are accepted.
DEFAULT_CLIENT_PATTERN = (
    r"^JSON/\d+(?:\.\d+)* Compatible \(en-US\) jsonrelay\.Client/\d+\.\d+\.\d+$"
)


def identity(component: str) -> str:
    return f"JSON/{JSON_VERSION} Compatible (en-US) {component}/{__version__}"


SERVER_IDENTITY = identity(SERVER_COMPONENT)
CLIENT_IDENTITY = identity(CLIENT_COMPONENT)
