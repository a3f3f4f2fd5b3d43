"""
Default controller resolver.

Handles the controller values the action resolver does not own:

- callables stored directly in the ``_controller`` attribute
- ``"package.module.Class::method"`` strings (the class is instantiated)
- ``"package.module:function"`` and ``"package.module.function"`` import
  strings, only when no action resolver decorates this one: both shapes
  are ``service[:method]`` identifiers to the action resolver

Arguments are matched to the handler signature by name from the request
attributes; a parameter called ``request`` (or annotated as ``Request``)
receives the request itself.
"""

from typing import Any, Callable, List, Optional
import importlib
import inspect
import logging

from actionctl.faults import ControllerNotCallable, MissingControllerArgument
from actionctl.request import Request


class DefaultControllerResolver:
    """
    Fallback resolver for callables and import strings.

    Args:
        logger: Logger used to report requests without a controller
        controller_attribute: Request attribute holding the controller
    """

    def __init__(
        self,
        logger: Optional[logging.Logger] = None,
        controller_attribute: str = "_controller",
    ):
        self.logger = logger or logging.getLogger("actionctl.resolver.default")
        self.controller_attribute = controller_attribute

    def get_controller(self, request: Request) -> Any:
        controller = request.attributes.get(self.controller_attribute)

        if not controller:
            self.logger.warning(
                'Unable to look for the controller as the "%s" parameter is missing.',
                self.controller_attribute,
            )
            return None

        if isinstance(controller, (tuple, list)) and len(controller) == 2:
            return tuple(controller)

        if callable(controller):
            return controller

        if not isinstance(controller, str):
            raise ControllerNotCallable(repr(controller), "Expected a callable or an import string.")

        return self._create_controller(controller)

    def get_arguments(self, request: Request, controller: Any) -> List[Any]:
        func = _as_callable(controller)

        try:
            sig = inspect.signature(func)
        except (TypeError, ValueError):
            return []

        attributes = request.attributes
        arguments = []
        for name, param in sig.parameters.items():
            if param.kind in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD):
                continue

            if name == "request" or param.annotation in (Request, "Request"):
                arguments.append(request)
            elif attributes.has(name):
                arguments.append(attributes.get(name))
            elif param.default is not inspect.Parameter.empty:
                arguments.append(param.default)
            else:
                raise MissingControllerArgument(_describe(controller), name)

        return arguments

    def _create_controller(self, controller: str) -> Any:
        if "::" in controller:
            class_path, method = controller.split("::", 1)
            cls = _import_attribute(class_path, controller)
            if not isinstance(cls, type):
                raise ControllerNotCallable(controller, f'"{class_path}" is not a class.')
            return cls(), method

        func = _import_attribute(controller, controller)
        if not callable(func):
            raise ControllerNotCallable(controller)
        return func


def _import_attribute(path: str, controller: str) -> Any:
    if ":" in path:
        module_name, _, attr = path.partition(":")
    else:
        module_name, _, attr = path.rpartition(".")

    if not module_name or not attr:
        raise ControllerNotCallable(controller, "Expected a dotted import path.")

    try:
        target: Any = importlib.import_module(module_name)
    except ImportError as e:
        raise ControllerNotCallable(controller, f'Module "{module_name}" cannot be imported.') from e

    for part in attr.split("."):
        if not hasattr(target, part):
            raise ControllerNotCallable(controller, f'"{part}" not found in "{module_name}".')
        target = getattr(target, part)
    return target


def _as_callable(controller: Any) -> Callable[..., Any]:
    if isinstance(controller, tuple):
        instance, method = controller
        if not isinstance(method, str):
            raise ControllerNotCallable(_describe(controller), "The method name must be a string.")
        func = getattr(instance, method, None)
        if not callable(func):
            raise ControllerNotCallable(
                _describe(controller),
                f'Expected method "{method}" on class "{type(instance).__name__}".',
            )
        return func
    if not callable(controller):
        raise ControllerNotCallable(_describe(controller))
    return controller


def _describe(controller: Any) -> str:
    if isinstance(controller, tuple):
        instance, method = controller
        return f"{type(instance).__qualname__}::{method}"
    return getattr(controller, "__qualname__", repr(controller))
