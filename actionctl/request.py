"""
Request - per-request context handed to the controller resolvers.

The resolvers only read ``Request.attributes``: the routing layer of the
host puts the controller identifier (``_controller``) and route parameters
such as ``action`` there.
"""

from typing import Any, Dict, Iterator, Mapping, Optional
from urllib.parse import parse_qsl, urlsplit


class ParameterBag:
    """String-keyed container for request attributes and query values."""

    __slots__ = ("_params",)

    def __init__(self, params: Optional[Mapping[str, Any]] = None):
        self._params: Dict[str, Any] = dict(params or {})

    def get(self, key: str, default: Any = None) -> Any:
        return self._params.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._params[key] = value

    def has(self, key: str) -> bool:
        return key in self._params

    def remove(self, key: str) -> None:
        self._params.pop(key, None)

    def all(self) -> Dict[str, Any]:
        return dict(self._params)

    def keys(self):
        return self._params.keys()

    def __contains__(self, key: object) -> bool:
        return key in self._params

    def __iter__(self) -> Iterator[str]:
        return iter(self._params)

    def __len__(self) -> int:
        return len(self._params)

    def __repr__(self) -> str:
        return f"ParameterBag({self._params!r})"


class Request:
    """
    Minimal synchronous HTTP request.

    Attributes:
        method: Upper-cased HTTP method
        path: URL path without query string
        query: Parsed query string values
        headers: Lower-cased header names
        attributes: Routing attributes (controller identifier, action, ...)
    """

    def __init__(
        self,
        method: str = "GET",
        path: str = "/",
        query: Optional[Mapping[str, Any]] = None,
        headers: Optional[Mapping[str, str]] = None,
        attributes: Optional[Mapping[str, Any]] = None,
    ):
        self.method = method.upper()
        self.path = path or "/"
        self.query = ParameterBag(query)
        self.headers: Dict[str, str] = {k.lower(): v for k, v in (headers or {}).items()}
        self.attributes = ParameterBag(attributes)

    @classmethod
    def create(
        cls,
        uri: str,
        method: str = "GET",
        query: Optional[Mapping[str, Any]] = None,
        attributes: Optional[Mapping[str, Any]] = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> "Request":
        """
        Build a request from a URI.

        A query string on the URI is parsed; explicit ``query`` values win.

        Example:
            >>> req = Request.create("/blog?page=2", attributes={"_controller": "blog:list"})
            >>> req.query.get("page")
            '2'
        """
        parts = urlsplit(uri)
        params = dict(parse_qsl(parts.query, keep_blank_values=True))
        params.update(query or {})
        return cls(
            method=method,
            path=parts.path or "/",
            query=params,
            headers=headers,
            attributes=attributes,
        )

    def header(self, name: str, default: Optional[str] = None) -> Optional[str]:
        return self.headers.get(name.lower(), default)

    def __repr__(self) -> str:
        return f"<Request {self.method} {self.path}>"
