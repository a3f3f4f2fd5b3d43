"""
Controller Base Class

AbstractController gives action controllers shortcuts to the services
registered on the application. Every helper is a thin delegation; the
services themselves (form factory, translator, mailer, url generator,
security) are provided by the host application.

Service keys consumed:
    form.factory, logger, security, security.encoder_factory, mailer,
    translator, templates, url_generator, charset
"""

from typing import Any, Callable, Dict, Iterable, List, Optional, TYPE_CHECKING
import logging

from markupsafe import escape as _escape

from actionctl.faults import HTTPException
from actionctl.response import (
    BinaryFileResponse,
    JsonResponse,
    RedirectResponse,
    Response,
    StreamedResponse,
)

if TYPE_CHECKING:
    from actionctl.app import Application


class AbstractController:
    """
    Base class for action controllers.

    The action resolver calls ``set_application`` after instantiating the
    controller, so helpers are available inside every action.

    Example:
        class BlogController(AbstractController):
            def show_action(self, request, slug):
                post = self.app["posts"].find(slug)
                if post is None:
                    self.abort(404, "Post not found")
                return self.render("blog/show.html", {"post": post})
    """

    app: Optional["Application"] = None

    def set_application(self, app: "Application") -> None:
        self.app = app

    # ------------------------------------------------------------------ form

    def form(self, data: Any = None, options: Optional[Dict[str, Any]] = None) -> Any:
        """Create a form builder from the ``form.factory`` service."""
        return self.app["form.factory"].create_builder("form", data, options or {})

    # ------------------------------------------------------------------ logging

    def log(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        level: int = logging.INFO,
    ) -> bool:
        """
        Add a record to the application logger.

        Args:
            message: The log message
            context: Extra fields attached to the record
            level: Logging level

        Returns:
            True once the record has been handed to the logger
        """
        self.app["logger"].log(level, message, extra=context or {})
        return True

    # ------------------------------------------------------------------ security

    def user(self) -> Any:
        """
        Return the user of the current security token.

        None when there is no token or when the token user is not an
        object (anonymous tokens carry a plain string).
        """
        token = self.app["security"].get_token()
        if token is None:
            return None

        user = token.get_user()
        if user is None or isinstance(user, (str, bytes, int, float, bool)):
            return None

        return user

    def encode_password(self, user: Any, password: str) -> str:
        """
        Encode ``password`` with the encoder configured for the user's type.

        Raises:
            RuntimeError: If no encoder is configured for the user
        """
        encoder = self.app["security.encoder_factory"].get_encoder(user)
        return encoder.encode_password(password, user.get_salt())

    # ------------------------------------------------------------------ mail

    def mail(self, message: Any, failed_recipients: Optional[List[str]] = None) -> int:
        """Send ``message`` through the ``mailer`` service, returning the sent count."""
        return self.app["mailer"].send(message, failed_recipients)

    # ------------------------------------------------------------------ translation

    def trans(
        self,
        id: str,
        parameters: Optional[Dict[str, Any]] = None,
        domain: str = "messages",
        locale: Optional[str] = None,
    ) -> str:
        return self.app["translator"].trans(id, parameters or {}, domain, locale)

    def trans_choice(
        self,
        id: str,
        number: int,
        parameters: Optional[Dict[str, Any]] = None,
        domain: str = "messages",
        locale: Optional[str] = None,
    ) -> str:
        """Translate a pluralized message, choosing the variant for ``number``."""
        return self.app["translator"].trans_choice(id, number, parameters or {}, domain, locale)

    # ------------------------------------------------------------------ templates

    def render(
        self,
        view: str,
        parameters: Optional[Dict[str, Any]] = None,
        response: Optional[Response] = None,
    ) -> Response:
        """
        Render a template into a response.

        To stream the template, pass a ``StreamedResponse`` as ``response``;
        the template is then rendered chunk by chunk when the body is read.

        Args:
            view: Template name
            parameters: Template variables
            response: Response to fill (a new Response by default)

        Returns:
            The filled response
        """
        if response is None:
            response = Response(charset=self._charset())

        templates = self.app["templates"]
        parameters = parameters or {}

        if isinstance(response, StreamedResponse):
            response.set_callback(lambda: templates.get_template(view).generate(**parameters))
        else:
            response.set_content(templates.get_template(view).render(**parameters))

        return response

    def render_view(self, view: str, parameters: Optional[Dict[str, Any]] = None) -> str:
        return self.app["templates"].get_template(view).render(**(parameters or {}))

    # ------------------------------------------------------------------ urls

    def path(self, route: str, parameters: Optional[Dict[str, Any]] = None) -> str:
        """Generate a relative path for ``route``."""
        return self.app["url_generator"].generate(route, parameters or {}, False)

    def url(self, route: str, parameters: Optional[Dict[str, Any]] = None) -> str:
        """Generate an absolute URL for ``route``."""
        return self.app["url_generator"].generate(route, parameters or {}, True)

    # ------------------------------------------------------------------ http

    def abort(self, status: int, message: str = "", headers: Optional[Dict[str, str]] = None) -> None:
        raise HTTPException(status, message, headers)

    def redirect(self, url: str, status: int = 302) -> RedirectResponse:
        return RedirectResponse(url, status)

    def stream(
        self,
        callback: Optional[Callable[[], Iterable[Any]]] = None,
        status: int = 200,
        headers: Optional[Dict[str, str]] = None,
    ) -> StreamedResponse:
        return StreamedResponse(callback, status, headers)

    def escape(self, text: Any) -> str:
        """Escape ``text`` for HTML."""
        return str(_escape(text))

    def json(self, data: Any = None, status: int = 200, headers: Optional[Dict[str, str]] = None) -> JsonResponse:
        return JsonResponse(data, status, headers)

    def send_file(
        self,
        file: Any,
        status: int = 200,
        headers: Optional[Dict[str, str]] = None,
        content_disposition: Optional[str] = None,
    ) -> BinaryFileResponse:
        return BinaryFileResponse(file, status, headers, content_disposition)

    def _charset(self) -> str:
        if self.app is not None and self.app.has("charset"):
            return self.app["charset"]
        return "UTF-8"
