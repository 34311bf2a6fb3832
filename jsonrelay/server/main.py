"""
jsonrelay server - application assembly

Builds the FastAPI application: one catch-all route hands every request to
the Dispatcher, which owns admission, routing, dispatch and serialization.
"""

import logging
import os
from typing import Optional

from fastapi import FastAPI, Request

from jsonrelay import __version__

from .config import ServerConfig
from .core.access_policy import AccessPolicy
from .core.logging_config import setup_logging
from .exceptions import register_exception_handlers
from .lifecycle import Hook, Lifecycle, manage_lifespan
from .middleware import request_id_middleware
from .services.dispatcher import Dispatcher
from .services.handler_registry import HandlerRegistry
from .services.route_matcher import RouteMatcher, RouteResolver

HTTP_METHODS = ["GET", "POST", "PUT", "DELETE", "PATCH", "HEAD", "OPTIONS"]


def create_app(
    registry: HandlerRegistry,
    resolver: Optional[RouteResolver] = None,
    config: Optional[ServerConfig] = None,
    startup: Optional[Hook] = None,
    shutdown: Optional[Hook] = None,
    logger: Optional[logging.Logger] = None,
) -> FastAPI:
    """
    Assemble the ASGI application.

    Args:
        registry: controllers the routes dispatch to
        resolver: route resolver; defaults to a RouteMatcher reading ROUTING_CONFIG_PATH
        config: server configuration; read from the environment when omitted
        startup: called once with (config, logger) before serving requests
        shutdown: called once with (config, logger) when the server stops
        logger: logger handed to the dispatcher and the lifecycle hooks
    """
    config = config or ServerConfig()
    logger = logger or logging.getLogger("jsonrelay.server")

    if resolver is None:
        routes_path = config.ROUTING_CONFIG_PATH
        if not os.path.isabs(routes_path):
            routes_path = os.path.join(config.ROOT, routes_path)
        resolver = RouteMatcher(config_path=routes_path)

    dispatcher = Dispatcher(
        config=config,
        registry=registry,
        resolver=resolver,
        policy=AccessPolicy(config.ALLOW_FROM, config.KNOWN_CLIENT_PATTERN),
        logger=logger,
    )
    lifecycle = Lifecycle(config, logger, startup=startup, shutdown=shutdown)

    app = FastAPI(
        title="jsonrelay",
        version=__version__,
        lifespan=lambda app: manage_lifespan(app, lifecycle),
        openapi_url=None,
        docs_url=None,
        redoc_url=None,
    )
    app.state.config = config
    app.state.dispatcher = dispatcher
    app.state.lifecycle = lifecycle

    app.middleware("http")(request_id_middleware)
    register_exception_handlers(app)

    @app.api_route("/{path:path}", methods=HTTP_METHODS, include_in_schema=False)
    async def dispatch_request(request: Request):
        return await dispatcher.handle(request)

    return app


def run(app: FastAPI, config: Optional[ServerConfig] = None) -> None:
    """Serve the application with uvicorn."""
    import uvicorn

    config = config or app.state.config
    setup_logging(config)
    uvicorn.run(
        app,
        host=config.host,
        port=config.port,
        log_level=config.LOG_LEVEL.lower(),
        log_config=None,
        server_header=False,
    )
