"""
Templating provider - registers a Jinja2 environment as ``templates``.

``AbstractController.render`` and ``render_view`` look templates up in this
environment.
"""

from typing import TYPE_CHECKING, List, Optional
import logging

from jinja2 import BaseLoader, Environment, FileSystemLoader, select_autoescape

if TYPE_CHECKING:
    from .app import Application


logger = logging.getLogger("actionctl.templates")


class TemplatingServiceProvider:
    """
    Registers a shared Jinja2 ``Environment`` under ``templates``.

    Args:
        paths: Template search paths (defaults to ``config.template_paths``)
        loader: Explicit Jinja2 loader, e.g. a ``DictLoader`` in tests
        autoescape: Autoescape html/xml templates

    Services defined:
        templates.loader, templates
    """

    def __init__(
        self,
        paths: Optional[List[str]] = None,
        loader: Optional[BaseLoader] = None,
        autoescape: bool = True,
    ):
        self.paths = paths
        self.loader = loader
        self.autoescape = autoescape

    def register(self, app: "Application") -> None:
        def make_loader(app: "Application") -> BaseLoader:
            if self.loader is not None:
                return self.loader
            paths = self.paths or app["config"].template_paths
            logger.info("Template loader initialized with %d search paths", len(paths))
            return FileSystemLoader(paths)

        def make_environment(app: "Application") -> Environment:
            env = Environment(
                loader=app["templates.loader"],
                autoescape=select_autoescape(
                    enabled_extensions=("html", "htm", "xml"),
                    default_for_string=self.autoescape,
                    default=False,
                ) if self.autoescape else False,
            )
            env.globals["app"] = app
            return env

        app["templates.loader"] = app.share(make_loader)
        app["templates"] = app.share(make_environment)

    def boot(self, app: "Application") -> None:
        pass
