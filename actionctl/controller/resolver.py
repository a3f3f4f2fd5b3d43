"""
Action controller resolver.

Maps the controller identifier of a request to a bound handler:

- ``"service:method"``  -> (registry[service], "method")
- ``"service"``         -> (registry[service], request.attributes["action"])

Registry values that are class names (or classes) are instantiated per
request. When the exact method is missing but ``method + "Action"``
exists, the suffixed name is used. Identifiers of any other shape are
handed to the wrapped resolver untouched.
"""

from typing import TYPE_CHECKING, Any, List, Optional, Protocol, Tuple, runtime_checkable
import logging
import re

from actionctl.faults import (
    InvalidServiceValue,
    MissingActionParameter,
    UnknownService,
)
from actionctl.request import Request

from .aware import ApplicationAware
from .loader import ClassLoader

if TYPE_CHECKING:
    from actionctl.app import Application


logger = logging.getLogger("actionctl.resolver")

Handler = Tuple[Any, str]

# Scalars are never controllers
_SCALAR_TYPES = (bool, int, float, complex, bytes, type(None))


@runtime_checkable
class ControllerResolver(Protocol):
    """Protocol shared by the default and the action resolvers."""

    def get_controller(self, request: Request) -> Any:
        ...

    def get_arguments(self, request: Request, controller: Any) -> List[Any]:
        ...


class ActionControllerResolver:
    """
    Resolver decorating another ``ControllerResolver``.

    Args:
        resolver: Resolver to delegate to for identifiers this one does not own
        app: Application used as the service registry
        class_loader: Resolves class-name service values (defaults to the
            application's ``class_loader`` service)

    Example:
        app["blog"] = "myapp.controllers.BlogController"
        resolver = ActionControllerResolver(app["resolver"], app)

        request.attributes.set("_controller", "blog:show")
        instance, method = resolver.get_controller(request)
    """

    SERVICE_PATTERN = re.compile(
        r"^([\w.\-]+)(:[a-z_\x7f-\xff][\w\x7f-\xff]*)?\Z",
        re.IGNORECASE,
    )

    def __init__(
        self,
        resolver: ControllerResolver,
        app: "Application",
        class_loader: Optional[ClassLoader] = None,
    ):
        self.resolver = resolver
        self.app = app
        self.class_loader = class_loader

    @property
    def _config(self):
        return self.app["config"]

    def get_controller(self, request: Request) -> Any:
        config = self._config
        controller = request.attributes.get(config.controller_attribute)

        match = None
        if isinstance(controller, str):
            match = self.SERVICE_PATTERN.match(controller)

        if match is None:
            logger.debug("Delegating controller %r to %s", controller, type(self.resolver).__name__)
            return self.resolver.get_controller(request)

        if match.group(2):
            # service controller: "service:method"
            service, method = controller.split(":", 1)
        else:
            # action controller: method comes from the route
            service = controller
            if not request.attributes.has(config.action_attribute):
                raise MissingActionParameter(config.action_attribute)
            method = request.attributes.get(config.action_attribute)

        instance = self._instantiate(service)
        method = self._normalize_method(instance, method, config.action_suffix)

        if isinstance(instance, ApplicationAware):
            instance.set_application(self.app)

        logger.debug("Resolved %r to %s.%s", controller, type(instance).__name__, method)
        return instance, method

    def get_arguments(self, request: Request, controller: Any) -> List[Any]:
        return self.resolver.get_arguments(request, controller)

    def _instantiate(self, service: str) -> Any:
        if not self.app.has(service):
            raise UnknownService(service)

        value = self.app[service]

        if isinstance(value, str):
            loader = self.class_loader or self.app.get("class_loader") or ClassLoader()
            value = loader.load(value)
        elif isinstance(value, _SCALAR_TYPES):
            raise InvalidServiceValue(service, value)

        if isinstance(value, type):
            logger.debug("Instantiating %s for service %r", value.__qualname__, service)
            return value()

        return value

    @staticmethod
    def _normalize_method(instance: Any, method: str, suffix: str) -> str:
        if not isinstance(method, str):
            return method
        if not _has_method(instance, method) and _has_method(instance, method + suffix):
            logger.debug("Using %s%s on %s", method, suffix, type(instance).__name__)
            return method + suffix
        return method


def _has_method(instance: Any, name: str) -> bool:
    return callable(getattr(instance, name, None))
