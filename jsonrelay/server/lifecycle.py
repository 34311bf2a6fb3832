"""
Process startup/shutdown orchestration.

Hooks are passed in explicitly and each runs at most once, called with
``(config, logger)``. A missing hook is a no-op.
"""

import logging
import os
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Callable, Optional

from fastapi import FastAPI

from .config import ServerConfig

Hook = Callable[[ServerConfig, logging.Logger], Any]


class Lifecycle:
    def __init__(
        self,
        config: ServerConfig,
        logger: Optional[logging.Logger] = None,
        startup: Optional[Hook] = None,
        shutdown: Optional[Hook] = None,
    ):
        self.config = config
        self.logger = logger or logging.getLogger("jsonrelay.server.lifecycle")
        self.startup = startup
        self.shutdown = shutdown
        self.started = False
        self.stopped = False

    def start(self) -> None:
        if self.started:
            return
        self.started = True
        self.logger.info("Starting up...")
        if self.startup:
            self.startup(self.config, self.logger)
        self.logger.info("Started. PID is %s", os.getpid())

    def stop(self) -> None:
        if self.stopped or not self.started:
            return
        self.stopped = True
        self.logger.info("Shutting down %s.", os.getpid())
        if self.shutdown:
            self.shutdown(self.config, self.logger)
        self.logger.info("Done.")


@asynccontextmanager
async def manage_lifespan(app: FastAPI, lifecycle: Lifecycle) -> AsyncIterator[None]:
    """Manage application lifecycle."""
    lifecycle.start()
    try:
        yield
    finally:
        lifecycle.stop()
