"""
jsonrelay - JSON-over-HTTP request/response core.

Server side dispatches routed requests to controllers and always answers
with a ``{"status": ..., "body": ...}`` envelope; the client side speaks
the same envelope and rebuilds the server's exception taxonomy locally.
"""

VERSION = (0, 5, 0)

__version__ = ".".join(str(part) for part in VERSION)
