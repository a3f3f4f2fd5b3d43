"""
Application - service registry and request dispatcher.

The application is a string-keyed container. Stored values are returned
as-is, except for definitions:

    app["mailer"] = app.factory(lambda app: Mailer())   # new object per lookup
    app["db"] = app.share(lambda app: Database())       # one object per application
    app["hasher"] = app.protect(hash_password)          # callable stored as a value

A bare function stored directly behaves like ``app.factory``.
"""

from types import FunctionType
from typing import Any, Callable, Dict, Iterable, List, Optional
import logging

from .config import ResolverConfig
from .controller.default import DefaultControllerResolver
from .controller.loader import ClassLoader
from .faults import Fault, FrozenService, HTTPException, ServiceNotFound, Severity
from .request import Request
from .response import JsonResponse, Response


logger = logging.getLogger("actionctl.app")


# ============================================================================
# Definitions
# ============================================================================

class Factory:
    """Definition invoked with the application on every lookup."""

    __slots__ = ("fn",)

    def __init__(self, fn: Callable[["Application"], Any]):
        self.fn = fn

    def __call__(self, app: "Application") -> Any:
        return self.fn(app)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.fn!r})"


class Shared(Factory):
    """Definition invoked once; later lookups return the same object."""

    __slots__ = ("_instance", "resolved")

    def __init__(self, fn: Callable[["Application"], Any]):
        super().__init__(fn)
        self._instance: Any = None
        self.resolved = False

    def __call__(self, app: "Application") -> Any:
        if not self.resolved:
            self._instance = self.fn(app)
            self.resolved = True
        return self._instance


class Protected:
    """Wrapper storing a callable as a plain value."""

    __slots__ = ("value",)

    def __init__(self, value: Callable[..., Any]):
        self.value = value


# ============================================================================
# Application
# ============================================================================

class Application:
    """
    Service registry with a synchronous request dispatcher.

    Args:
        config: Resolver configuration (loaded from the environment by default)
        **values: Initial services

    Default services:
        config, charset, logger, class_loader, resolver
    """

    def __init__(self, config: Optional[ResolverConfig] = None, **values: Any):
        self._values: Dict[str, Any] = {}
        self._providers: List[Any] = []
        self._booted = False

        config = config or ResolverConfig.load()
        self["config"] = config
        self["charset"] = config.charset
        self["logger"] = logger
        self["class_loader"] = ClassLoader()
        self["resolver"] = self.share(
            lambda app: DefaultControllerResolver(
                logger=logging.getLogger("actionctl.resolver.default"),
                controller_attribute=app["config"].controller_attribute,
            )
        )

        for key, value in values.items():
            self[key] = value

    # ------------------------------------------------------------------ definitions

    @staticmethod
    def factory(fn: Callable[["Application"], Any]) -> Factory:
        return Factory(fn)

    @staticmethod
    def share(fn: Callable[["Application"], Any]) -> Shared:
        """Wrap ``fn`` so it runs once per application."""
        if isinstance(fn, Shared):
            return fn
        return Shared(fn)

    @staticmethod
    def protect(fn: Callable[..., Any]) -> Protected:
        return Protected(fn)

    def extend(self, key: str, fn: Callable[[Any, "Application"], Any]) -> Factory:
        """
        Wrap the definition of ``key``.

        ``fn`` receives the previous service and the application. The
        new definition is stored and returned; extending a shared definition
        yields a shared one.

        Raises:
            ServiceNotFound: If ``key`` is not defined
            FrozenService: If ``key`` is a shared service already in use
        """
        if key not in self._values:
            raise ServiceNotFound(key)

        previous = self._values[key]
        if isinstance(previous, Shared) and previous.resolved:
            raise FrozenService(key)

        if isinstance(previous, Factory):
            def extended(app):
                return fn(previous(app), app)
        else:
            def extended(app):
                return fn(self._unwrap(previous), app)

        definition = Shared(extended) if isinstance(previous, Shared) else Factory(extended)
        self._values[key] = definition
        logger.debug("Extended service %r", key)
        return definition

    def raw(self, key: str) -> Any:
        """Return the stored definition of ``key`` without invoking it."""
        if key not in self._values:
            raise ServiceNotFound(key)
        return self._values[key]

    # ------------------------------------------------------------------ registry interface

    def has(self, key: str) -> bool:
        return key in self._values

    def get(self, key: str, default: Any = None) -> Any:
        if key not in self._values:
            return default
        return self[key]

    def keys(self) -> Iterable[str]:
        return self._values.keys()

    def __contains__(self, key: object) -> bool:
        return key in self._values

    def __getitem__(self, key: str) -> Any:
        try:
            value = self._values[key]
        except KeyError:
            raise ServiceNotFound(key) from None

        if isinstance(value, Factory):
            return value(self)
        return self._unwrap(value)

    def __setitem__(self, key: str, value: Any) -> None:
        current = self._values.get(key)
        if isinstance(current, Shared) and current.resolved and current is not value:
            raise FrozenService(key)

        if isinstance(value, FunctionType):
            value = Factory(value)
        self._values[key] = value

    def __delitem__(self, key: str) -> None:
        if key not in self._values:
            raise ServiceNotFound(key)
        del self._values[key]

    @staticmethod
    def _unwrap(value: Any) -> Any:
        if isinstance(value, Protected):
            return value.value
        return value

    # ------------------------------------------------------------------ providers

    def register(self, provider: Any, **values: Any) -> "Application":
        """
        Register a service provider.

        Args:
            provider: Object with ``register(app)`` and ``boot(app)``
            **values: Services set after the provider registered its own
        """
        self._providers.append(provider)
        provider.register(self)
        for key, value in values.items():
            self[key] = value
        logger.debug("Registered provider %s", type(provider).__name__)
        return self

    def boot(self) -> None:
        """Boot every registered provider, once."""
        if self._booted:
            return
        self._booted = True
        for provider in self._providers:
            provider.boot(self)

    # ------------------------------------------------------------------ dispatch

    @property
    def debug(self) -> bool:
        return bool(self["config"].debug)

    def handle(self, request: Request) -> Response:
        """
        Dispatch ``request`` to its controller and return the response.

        ``HTTPException`` becomes a response with its status; any other
        fault (e.g. a misconfigured route) becomes a 500 response.
        """
        self.boot()
        resolver = self["resolver"]

        try:
            controller = resolver.get_controller(request)
            if controller is None:
                raise HTTPException(
                    404, f'Unable to find the controller for path "{request.path}".'
                )

            arguments = resolver.get_arguments(request, controller)
            result = self._call(controller, arguments)
            return self._to_response(result)

        except HTTPException as exc:
            logger.info("HTTP %s for %r: %s", exc.status, request, exc.message)
            return Response(exc.message, status=exc.status, headers=exc.headers, charset=self["charset"])

        except Fault as fault:
            log_level = logging.CRITICAL if fault.severity == Severity.FATAL else logging.ERROR
            logger.log(log_level, "%s while handling %r", fault, request, extra={"fault": fault.to_dict()})
            message = fault.message if self.debug else "Internal Server Error"
            return Response(message, status=500, charset=self["charset"])

    @staticmethod
    def _call(controller: Any, arguments: List[Any]) -> Any:
        if isinstance(controller, tuple):
            instance, method = controller
            return getattr(instance, method)(*arguments)
        return controller(*arguments)

    def _to_response(self, result: Any) -> Response:
        if isinstance(result, Response):
            return result
        if isinstance(result, (dict, list)):
            return JsonResponse(result)
        if result is None:
            return Response("", status=204, charset=self["charset"])
        return Response(str(result), charset=self["charset"])
