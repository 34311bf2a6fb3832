"""
Data model definitions package.

Aggregates Pydantic models for use in other modules.
"""

from .context import RequestContext
from .route import RouteDescriptor

__all__ = [
    "RequestContext",
    "RouteDescriptor",
]
