"""
Server services package.

Exports the routing, handler lookup and dispatching services.
"""

from .dispatcher import Dispatcher
from .handler_registry import Controller, ControllerNotFoundError, HandlerRegistry, action
from .route_matcher import RouteMatcher, RouteResolver

__all__ = [
    "Controller",
    "ControllerNotFoundError",
    "Dispatcher",
    "HandlerRegistry",
    "RouteMatcher",
    "RouteResolver",
    "action",
]
