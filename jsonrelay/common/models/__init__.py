"""
Data models shared by server and client.
"""

from .envelope import ResultEnvelope

__all__ = ["ResultEnvelope"]
