"""
Response - HTTP response builders returned by controllers.

Provides:
- Response (buffered body)
- RedirectResponse
- JsonResponse
- StreamedResponse (callback producing chunks)
- BinaryFileResponse (file download)
"""

from __future__ import annotations

import json
import mimetypes
import os
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, Iterator, Optional, Union
from urllib.parse import quote

from markupsafe import escape


PathLike = Union[str, "os.PathLike[str]"]

REDIRECT_STATUSES = frozenset((301, 302, 303, 307, 308))


class Response:
    """
    Buffered HTTP response.

    Args:
        content: Body as str or bytes
        status: HTTP status code
        headers: Response headers
        charset: Charset used to encode str bodies
    """

    default_media_type = "text/html"

    def __init__(
        self,
        content: Union[str, bytes] = "",
        status: int = 200,
        headers: Optional[Dict[str, str]] = None,
        charset: str = "UTF-8",
    ):
        self.status = status
        self.charset = charset
        self.headers: Dict[str, str] = {}
        for name, value in (headers or {}).items():
            self.headers[name.lower()] = value
        if "content-type" not in self.headers:
            self.headers["content-type"] = f"{self.default_media_type}; charset={charset}"
        self.set_content(content)

    def set_content(self, content: Union[str, bytes, None]) -> "Response":
        self.content = content if content is not None else ""
        return self

    @property
    def body(self) -> bytes:
        if isinstance(self.content, bytes):
            return self.content
        return str(self.content).encode(self.charset)

    def iter_content(self) -> Iterator[bytes]:
        yield self.body

    @property
    def is_redirect(self) -> bool:
        return self.status in REDIRECT_STATUSES and "location" in self.headers

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} [{self.status}]>"


class RedirectResponse(Response):
    """Redirect the client to ``url``."""

    def __init__(
        self,
        url: str,
        status: int = 302,
        headers: Optional[Dict[str, str]] = None,
    ):
        if not url:
            raise ValueError("Cannot redirect to an empty URL.")
        if status not in REDIRECT_STATUSES:
            raise ValueError(f"The HTTP status code is not a redirect ({status} given).")

        super().__init__(
            (
                '<!DOCTYPE html>\n<html><head><meta charset="UTF-8" />'
                f'<meta http-equiv="refresh" content="0;url={escape(url)}" />'
                f"<title>Redirecting to {escape(url)}</title></head>"
                f'<body>Redirecting to <a href="{escape(url)}">{escape(url)}</a>.</body></html>'
            ),
            status=status,
            headers=headers,
        )
        self.target_url = url
        self.headers["location"] = url


class JsonResponse(Response):
    """Serialize ``data`` as JSON."""

    default_media_type = "application/json"

    def __init__(
        self,
        data: Any = None,
        status: int = 200,
        headers: Optional[Dict[str, str]] = None,
    ):
        self.data = {} if data is None else data
        super().__init__(
            json.dumps(self.data, separators=(",", ":"), default=str),
            status=status,
            headers=headers,
        )
        self.headers["content-type"] = self.default_media_type


class StreamedResponse(Response):
    """
    Response whose body is produced lazily by a callback.

    The callback takes no arguments and returns an iterable of str/bytes
    chunks (a generator function works directly).
    """

    def __init__(
        self,
        callback: Optional[Callable[[], Iterable[Any]]] = None,
        status: int = 200,
        headers: Optional[Dict[str, str]] = None,
    ):
        super().__init__("", status=status, headers=headers)
        self.callback = callback

    def set_callback(self, callback: Callable[[], Iterable[Any]]) -> "StreamedResponse":
        self.callback = callback
        return self

    def set_content(self, content: Union[str, bytes, None]) -> "Response":
        if content:
            raise ValueError("The content cannot be set on a StreamedResponse instance.")
        self.content = ""
        return self

    def iter_content(self) -> Iterator[bytes]:
        if self.callback is None:
            raise RuntimeError("The Response callback must not be null.")
        for chunk in self.callback() or ():
            if isinstance(chunk, bytes):
                yield chunk
            else:
                yield str(chunk).encode(self.charset)

    @property
    def body(self) -> bytes:
        return b"".join(self.iter_content())


class BinaryFileResponse(Response):
    """
    Send a file from disk.

    Args:
        file: Path to the file
        status: HTTP status code
        headers: Extra headers
        content_disposition: "attachment" or "inline" (sets the filename)
    """

    chunk_size = 64 * 1024

    def __init__(
        self,
        file: PathLike,
        status: int = 200,
        headers: Optional[Dict[str, str]] = None,
        content_disposition: Optional[str] = None,
    ):
        path = Path(file)
        if not path.is_file():
            raise FileNotFoundError(f'File "{path}" could not be found.')

        media_type, _ = mimetypes.guess_type(path.name)
        merged = {"content-type": media_type or "application/octet-stream"}
        merged.update({k.lower(): v for k, v in (headers or {}).items()})

        super().__init__(b"", status=status, headers=merged)
        self.file = path
        self.headers["content-length"] = str(path.stat().st_size)

        if content_disposition:
            self.set_content_disposition(content_disposition)

    def set_content_disposition(self, disposition: str, filename: Optional[str] = None) -> None:
        if disposition not in ("attachment", "inline"):
            raise ValueError('The disposition must be either "attachment" or "inline".')
        name = filename or self.file.name
        self.headers["content-disposition"] = (
            f"{disposition}; filename*=utf-8''{quote(name)}"
        )

    def set_content(self, content: Union[str, bytes, None]) -> "Response":
        if content:
            raise ValueError("The content cannot be set on a BinaryFileResponse instance.")
        self.content = b""
        return self

    def iter_content(self, chunk_size: Optional[int] = None) -> Iterator[bytes]:
        size = chunk_size or self.chunk_size
        with open(self.file, "rb") as fh:
            while True:
                chunk = fh.read(size)
                if not chunk:
                    break
                yield chunk

    @property
    def body(self) -> bytes:
        return self.file.read_bytes()
