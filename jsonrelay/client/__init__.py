"""
jsonrelay client package.
"""

from .client import Client, ClientTransportError
from .config import ClientConfig

__all__ = ["Client", "ClientConfig", "ClientTransportError"]
