"""
Controller registry.

Maps controller names to factories and actions to explicitly declared
controller methods. Lookup never falls back to arbitrary attribute access:
only methods marked with ``@action`` can be dispatched to.
"""

import inspect
import logging
from typing import Any, Callable, Dict, Optional, Union

from jsonrelay.common.exceptions import HTTPError, NotFound
from jsonrelay.common.models.envelope import ResultEnvelope

from ..models.context import RequestContext
from ..models.route import RouteDescriptor

logger = logging.getLogger("jsonrelay.server.handler_registry")

Outcome = Union[ResultEnvelope, HTTPError]


class ControllerNotFoundError(LookupError):
    """A route named a controller nobody registered."""

    def __init__(self, controller_name: str):
        self.controller_name = controller_name
        super().__init__(f"Controller not registered: {controller_name}")


def action(name: Union[str, Callable, None] = None):
    """
    Mark a controller method as a dispatchable action.

    Usable bare (``@action``) or with an explicit action name
    (``@action("not_found")``).
    """

    def mark(func: Callable, action_name: Optional[str] = None) -> Callable:
        func.__action_name__ = action_name or func.__name__
        return func

    if callable(name):
        return mark(name)
    return lambda func: mark(func, name)


class Controller:
    """
    Base class for request handlers.

    One instance is created per request with the request context. Actions
    return a bare body (sent with status 200), a ResultEnvelope, or raise /
    return an HTTPError.
    """

    actions: Dict[str, str] = {}

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        table = {}
        for klass in reversed(cls.__mro__):
            for attr, value in vars(klass).items():
                action_name = getattr(value, "__action_name__", None)
                if action_name:
                    table[action_name] = attr
        cls.actions = table

    def __init__(self, context: RequestContext, route_params: Optional[Dict[str, Any]] = None):
        self.context = context
        self.route_params = dict(route_params or {})

    @property
    def params(self) -> Dict[str, Any]:
        """Request params with route params layered on top."""
        merged = dict(self.context.params)
        merged.update(self.route_params)
        return merged

    def get_action(self, name: str) -> Optional[Callable[[], Any]]:
        attr = self.actions.get(name)
        if attr is None:
            return None
        return getattr(self, attr)

    def ok(self, body: Any = None, status: int = 200) -> ResultEnvelope:
        return ResultEnvelope(status=status, body=body)


class HandlerRegistry:
    def __init__(self, default_controller: str = "application"):
        self.default_controller = default_controller
        self._factories: Dict[str, Callable[..., Controller]] = {}

    def register(self, name: str, factory: Callable[..., Controller]) -> None:
        """
        Args:
            name: controller name used by routes
            factory: called with (context, route_params); a Controller subclass works
        """
        if name in self._factories:
            logger.warning("Replacing controller registered as %s", name)
        self._factories[name] = factory

    def controller(self, name: str):
        """Class decorator form of ``register``."""

        def decorator(cls):
            self.register(name, cls)
            return cls

        return decorator

    def __contains__(self, name: str) -> bool:
        return name in self._factories

    def lookup(self, name: Optional[str]) -> Callable[..., Controller]:
        """
        Raises:
            ControllerNotFoundError: the name (or the default) is not registered
        """
        controller_name = name or self.default_controller
        factory = self._factories.get(controller_name)
        if factory is None:
            raise ControllerNotFoundError(controller_name)
        return factory

    async def dispatch(self, route: RouteDescriptor, context: RequestContext) -> Outcome:
        """
        Run the action a route points at.

        Returns:
            ResultEnvelope on success, or the HTTPError the request ends with.
            An unresolved route or an undeclared action gives NotFound.

        Raises:
            ControllerNotFoundError: the route names an unknown controller
            Exception: anything else raised by the action
        """
        if not route.matched:
            return NotFound()

        factory = self.lookup(route.controller)
        controller = factory(context, route.params)

        handler = controller.get_action(route.action_name)
        if handler is None:
            logger.debug(
                "Action %s not defined on %s",
                route.action_name,
                route.controller or self.default_controller,
            )
            return NotFound()

        try:
            result = handler()
            if inspect.isawaitable(result):
                result = await result
        except HTTPError as exc:
            return exc

        if isinstance(result, HTTPError):
            return result
        return ResultEnvelope.coerce(result)
