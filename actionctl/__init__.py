"""
actionctl - action controllers for service-registry applications.

Resolves route controller identifiers such as ``"blog:show"`` or ``"blog"``
(with an ``action`` route parameter) to controller instances registered on
the application, and gives controllers helper methods for rendering,
redirects and responses.

Example:
    from actionctl import AbstractController, Application, Request
    from actionctl.provider import ActionControllerServiceProvider

    class BlogController(AbstractController):
        def showAction(self, request, slug):
            return self.json({"slug": slug})

    app = Application()
    app.register(ActionControllerServiceProvider())
    app["blog"] = BlogController

    request = Request.create("/blog/hello", attributes={
        "_controller": "blog:show",
        "slug": "hello",
    })
    response = app.handle(request)
"""

__version__ = "0.3.0"

from .app import Application, Factory, Shared, Protected
from .config import ResolverConfig
from .controller import (
    AbstractController,
    ActionControllerResolver,
    ApplicationAware,
    ClassLoader,
    ControllerResolver,
    DefaultControllerResolver,
    Handler,
)
from .faults import (
    Fault,
    FaultDomain,
    Severity,
    ControllerResolutionFault,
    MissingActionParameter,
    UnknownService,
    UnknownClass,
    InvalidServiceValue,
    ControllerNotCallable,
    MissingControllerArgument,
    RegistryFault,
    ServiceNotFound,
    FrozenService,
    HTTPException,
    ConfigError,
)
from .provider import ActionControllerServiceProvider, ServiceProvider
from .request import ParameterBag, Request
from .response import (
    BinaryFileResponse,
    JsonResponse,
    RedirectResponse,
    Response,
    StreamedResponse,
)

__all__ = [
    "__version__",
    # Application
    "Application",
    "Factory",
    "Shared",
    "Protected",
    "ResolverConfig",
    # Controllers
    "AbstractController",
    "ActionControllerResolver",
    "ApplicationAware",
    "ClassLoader",
    "ControllerResolver",
    "DefaultControllerResolver",
    "Handler",
    # Providers
    "ActionControllerServiceProvider",
    "ServiceProvider",
    # HTTP
    "ParameterBag",
    "Request",
    "Response",
    "RedirectResponse",
    "JsonResponse",
    "StreamedResponse",
    "BinaryFileResponse",
    # Faults
    "Fault",
    "FaultDomain",
    "Severity",
    "ControllerResolutionFault",
    "MissingActionParameter",
    "UnknownService",
    "UnknownClass",
    "InvalidServiceValue",
    "ControllerNotCallable",
    "MissingControllerArgument",
    "RegistryFault",
    "ServiceNotFound",
    "FrozenService",
    "HTTPException",
    "ConfigError",
]
