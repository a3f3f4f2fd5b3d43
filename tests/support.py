"""
Controllers used by the resolver and dispatcher tests.
"""

from actionctl.controller.base import AbstractController


class ServiceController:

    def example(self):
        return "example"


class SuffixedController:

    def indexAction(self):
        return "index"

    def show(self):
        return "show"

    def showAction(self):
        return "showAction"


class ApplicationAwareController:

    def __init__(self):
        self.app = None

    def set_application(self, app):
        self.app = app

    def example(self):
        return "aware"


class BlogController(AbstractController):

    def listAction(self, request):
        return self.json({"posts": ["first", "second"]})

    def showAction(self, slug):
        if slug == "missing":
            self.abort(404, "Post not found")
        return f"<h1>{self.escape(slug)}</h1>"

    def archive(self, year=2024):
        return {"year": year}


def hello(request, name="world"):
    return f"Hello {name}"


def dotted(cls):
    """Import path of ``cls`` as understood by ClassLoader."""
    return f"{cls.__module__}.{cls.__qualname__}"
