"""
jsonrelay server package.
"""

from .config import ServerConfig
from .main import create_app, run
from .services.handler_registry import Controller, HandlerRegistry, action

__all__ = [
    "Controller",
    "HandlerRegistry",
    "ServerConfig",
    "action",
    "create_app",
    "run",
]
