"""
actionctl Controller System

Resolves controller identifiers to bound handlers and provides the base
class for action controllers.

Identifiers understood by ActionControllerResolver:
    "service:method"   explicit method on a registered service
    "service"          method taken from the route's "action" attribute

Example:
    from actionctl import Application, AbstractController
    from actionctl.provider import ActionControllerServiceProvider

    class BlogController(AbstractController):
        def list_action(self, request):
            return self.render("blog/list.html")

    app = Application()
    app.register(ActionControllerServiceProvider())
    app["blog"] = BlogController
"""

from .aware import ApplicationAware
from .base import AbstractController
from .default import DefaultControllerResolver
from .loader import ClassLoader
from .resolver import ActionControllerResolver, ControllerResolver, Handler

__all__ = [
    "ApplicationAware",
    "AbstractController",
    "ActionControllerResolver",
    "ControllerResolver",
    "DefaultControllerResolver",
    "ClassLoader",
    "Handler",
]
