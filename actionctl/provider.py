"""
Service providers.

A provider groups service definitions: ``register(app)`` defines them,
``boot(app)`` runs once before the first request is handled.
"""

from typing import TYPE_CHECKING, Protocol, runtime_checkable
import logging

from .controller.resolver import ActionControllerResolver

if TYPE_CHECKING:
    from .app import Application


logger = logging.getLogger("actionctl.provider")


@runtime_checkable
class ServiceProvider(Protocol):

    def register(self, app: "Application") -> None:
        ...

    def boot(self, app: "Application") -> None:
        ...


class ActionControllerServiceProvider:
    """
    Installs ActionControllerResolver in front of the current ``resolver``.

    The wrapped definition is shared, so every lookup of ``app["resolver"]``
    returns the same resolver for the application's lifetime. Registering
    the provider again keeps the existing wrapper.
    """

    def register(self, app: "Application") -> None:
        def wrap(resolver, app):
            if isinstance(resolver, ActionControllerResolver):
                return resolver
            logger.debug("Decorating %s with ActionControllerResolver", type(resolver).__name__)
            return ActionControllerResolver(resolver, app)

        app["resolver"] = app.share(app.extend("resolver", wrap))

    def boot(self, app: "Application") -> None:
        pass
