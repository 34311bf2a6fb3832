"""
Request dispatcher - Service Layer

Standardizes the flow: Request -> RequestContext -> admission -> route ->
controller action -> ResultEnvelope -> JSON response. Every path through
``handle`` ends in an envelope; nothing raised by routing or controllers
reaches the ASGI server.
"""

import asyncio
import json
import logging
from typing import Any, Dict, Optional, Tuple

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import Response
from starlette.background import BackgroundTask

from jsonrelay.common.core.identity import SERVER_IDENTITY
from jsonrelay.common.exceptions import HTTPError, InternalServerError
from jsonrelay.common.models.envelope import ResultEnvelope

from ..config import ServerConfig
from ..core.access_policy import AccessPolicy
from ..core.timing import TimingRecord
from ..models.context import RequestContext
from ..models.route import RouteDescriptor
from .handler_registry import HandlerRegistry
from .route_matcher import RouteResolver

MEDIA_TYPE = "application/json"


class Dispatcher:
    """
    Orchestrates the request processing lifecycle.

    Configuration, collaborators and the logger are injected; the dispatcher
    keeps no per-request state on itself.
    """

    def __init__(
        self,
        config: ServerConfig,
        registry: HandlerRegistry,
        resolver: RouteResolver,
        policy: Optional[AccessPolicy] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.config = config
        self.registry = registry
        self.resolver = resolver
        self.logger = logger or logging.getLogger("jsonrelay.server.dispatcher")
        self.policy = policy or AccessPolicy(config.ALLOW_FROM, config.KNOWN_CLIENT_PATTERN)

    async def handle(self, request: Request) -> Response:
        """Turn an inbound FastAPI request into a JSON envelope response."""
        timing = TimingRecord.begin()
        try:
            context = await RequestContext.from_request(request)
        except asyncio.CancelledError:
            raise
        except BaseException as exc:
            envelope = self._envelope_for_error(exc)
            return self._finish(envelope, request.url.path, dict(request.query_params), timing)
        return await self.respond(context, timing)

    async def respond(
        self, context: RequestContext, timing: Optional[TimingRecord] = None
    ) -> Response:
        """Run admission, routing and dispatch for an already built context."""
        timing = timing or TimingRecord.begin()
        route: Optional[RouteDescriptor] = None
        try:
            envelope, route = await self._process(context)
        except asyncio.CancelledError:
            raise
        except BaseException as exc:
            envelope = self._envelope_for_error(exc)

        params = dict(context.params)
        if route is not None:
            params.update(route.params)
        return self._finish(envelope, context.path, params, timing)

    async def _process(self, context: RequestContext) -> Tuple[ResultEnvelope, RouteDescriptor]:
        rejection = self.policy.admit(context)
        if rejection is not None:
            self.logger.info(
                "Rejected request from %s (%s): %s",
                context.remote_addr,
                context.user_agent,
                rejection,
            )
            return rejection.to_envelope(), RouteDescriptor.unresolved()

        route = self.resolver.resolve(context.method, context.path)
        if route is None:
            route = RouteDescriptor.unresolved()

        outcome = await self.registry.dispatch(route, context)
        if isinstance(outcome, HTTPError):
            self.logger.info(str(outcome))
            return outcome.to_envelope(), route
        return outcome, route

    def _envelope_for_error(self, exc: BaseException) -> ResultEnvelope:
        if isinstance(exc, HTTPError):
            self.logger.info(str(exc))
            return exc.to_envelope()

        self.logger.error(f"Unhandled error while dispatching: {exc}", exc_info=exc)
        return InternalServerError().to_envelope()

    def _render(self, envelope: ResultEnvelope) -> Tuple[int, bytes]:
        try:
            content = json.dumps(
                jsonable_encoder(envelope.model_dump()),
                ensure_ascii=False,
                allow_nan=False,
                separators=(",", ":"),
            )
        except Exception as exc:
            self.logger.error(f"Response body is not JSON serializable: {exc}", exc_info=exc)
            envelope = InternalServerError().to_envelope()
            content = json.dumps(envelope.model_dump(), separators=(",", ":"))
        return envelope.status, content.encode("utf-8")

    def _finish(
        self,
        envelope: ResultEnvelope,
        path: str,
        params: Dict[str, Any],
        timing: TimingRecord,
    ) -> Response:
        status, content = self._render(envelope)
        timing.finish()

        # Runs after the response has been sent.
        log_task = BackgroundTask(self._log_request, status, path, params, timing)
        return Response(
            content=content,
            status_code=status,
            media_type=MEDIA_TYPE,
            headers={"Server": SERVER_IDENTITY},
            background=log_task,
        )

    def _log_request(
        self, status: int, path: str, params: Dict[str, Any], timing: TimingRecord
    ) -> None:
        self.logger.info(
            f"[{status}] {path} ({timing.duration}s;{timing.per_second}req/s)",
            extra={
                "status": status,
                "path": path,
                "duration": timing.duration,
                "per_second": timing.per_second,
                "params": params,
            },
        )
