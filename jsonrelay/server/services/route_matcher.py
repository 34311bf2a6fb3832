"""
Route matching service.

Loads routes.yml and resolves a controller/action pair from request
paths/methods.

Note:
    Provides functionality different from FastAPI's APIRouter. FastAPI only
    sees a single catch-all route; this module implements config-based
    route matching behind it.
"""

import logging
import re
from typing import Any, Dict, List, Optional, Protocol

import yaml

from ..models.route import RouteDescriptor

logger = logging.getLogger(__name__)

ANY_METHOD = "ANY"


class RouteResolver(Protocol):
    """What the dispatcher needs from a router. ``None`` means unroutable."""

    def resolve(self, method: str, path: str) -> Optional[RouteDescriptor]: ...


class RouteMatcher:
    def __init__(self, routes: Optional[List[Dict[str, Any]]] = None, config_path: str = ""):
        """
        Args:
            routes: route definitions given in code (skips loading the file)
            config_path: routes.yml path
        """
        self.config_path = config_path
        self._routing_config: List[Dict[str, Any]] = []
        self._compiled: List[re.Pattern] = []
        self._loaded = False
        if routes is not None:
            self._set_routes(routes)

    def _set_routes(self, routes: List[Dict[str, Any]]) -> None:
        self._routing_config = list(routes)
        self._compiled = [
            re.compile(self._path_to_regex(route.get("path", ""))) for route in self._routing_config
        ]
        self._loaded = True

    def load_routing_config(self, force: bool = False) -> List[Dict[str, Any]]:
        """
        Load routes.yml and cache it.

        A missing file leaves no routes; a file that fails to parse keeps the
        previously loaded routes.
        """
        if self._loaded and not force:
            return self._routing_config

        try:
            with open(self.config_path, "r", encoding="utf-8") as f:
                cfg = yaml.safe_load(f) or {}
        except FileNotFoundError:
            logger.warning(f"Routing config not found at {self.config_path}")
            self._set_routes([])
            return self._routing_config
        except yaml.YAMLError as e:
            logger.error(f"Error parsing routing config: {e}")
            self._loaded = True
            return self._routing_config

        self._set_routes(cfg.get("routes") or [])
        logger.info(f"Loaded {len(self._routing_config)} routes from {self.config_path}")
        return self._routing_config

    def _path_to_regex(self, path_pattern: str) -> str:
        """
        Convert a path pattern to a regular expression.

        Example: "/users/{user_id}/posts/{post_id}"
            → "^/users/(?P<user_id>[^/]+)/posts/(?P<post_id>[^/]+)/?$"
        """
        regex_pattern = re.sub(r"\{(\w+)\}", r"(?P<\1>[^/]+)", path_pattern.rstrip("/"))
        return f"^{regex_pattern}/?$"

    def resolve(self, method: str, path: str) -> Optional[RouteDescriptor]:
        """
        Resolve the controller and action for a request.

        Args:
            method: HTTP method (e.g., "POST")
            path: request path (e.g., "/users/123")

        Returns:
            RouteDescriptor, or None when no route matches
        """
        if not self._loaded:
            self.load_routing_config()

        for route, pattern in zip(self._routing_config, self._compiled):
            route_method = str(route.get("method") or ANY_METHOD).upper()
            if route_method != ANY_METHOD and route_method != method.upper():
                continue

            match = pattern.match(path)
            if match:
                params = dict(route.get("params") or {})
                params.update(match.groupdict())
                return RouteDescriptor(
                    controller=route.get("controller"),
                    action=route.get("action"),
                    params=params,
                )

        return None
