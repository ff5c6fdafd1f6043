"""
Cross-environment fetch: one awaitable request function with consistent
method, header, body, timeout and TLS handling, on top of urllib3.
"""
from __future__ import annotations

# Set default logging handler to avoid "No handler found" warnings.
import logging
import typing
from http.cookiejar import Cookie, CookieJar
from logging import NullHandler

from urllib3 import BaseHTTPResponse, HTTPHeaderDict

from . import exceptions
from ._collections import URLSearchParams
from ._types import BODY_METHODS, HTTPMethod, NormalizedOptions, RequestOptions
from ._version import __version__
from .exceptions import (
    AbortError,
    FetchError,
    InvalidHeaderShapeError,
    InvalidMethodError,
    RedirectError,
    SerializationError,
)
from .filepost import encode, to_url_search_params
from .node import (
    NodeFetch,
    connect,
    delete,
    fetch,
    get,
    head,
    options,
    patch,
    post,
    put,
    request,
    trace,
)
from .util.request import normalize_init
from .util.timeout import AbortController, AbortSignal

__license__ = "MIT"
__version__ = __version__

#: The response type every request resolves to.
Response = BaseHTTPResponse
Headers = HTTPHeaderDict

__all__ = (
    "BODY_METHODS",
    "AbortController",
    "AbortError",
    "AbortSignal",
    "Cookie",
    "CookieJar",
    "FetchError",
    "HTTPHeaderDict",
    "HTTPMethod",
    "Headers",
    "InvalidHeaderShapeError",
    "InvalidMethodError",
    "NodeFetch",
    "NormalizedOptions",
    "RedirectError",
    "RequestOptions",
    "Response",
    "SerializationError",
    "URLSearchParams",
    "add_stderr_logger",
    "connect",
    "delete",
    "encode",
    "exceptions",
    "fetch",
    "get",
    "head",
    "normalize_init",
    "options",
    "patch",
    "post",
    "put",
    "request",
    "to_url_search_params",
    "trace",
)

logging.getLogger(__name__).addHandler(NullHandler())


def add_stderr_logger(
    level: int = logging.DEBUG,
) -> logging.StreamHandler[typing.TextIO]:
    """
    Helper for quickly adding a StreamHandler to the logger. Useful for
    debugging.

    Returns the handler after adding it.
    """
    # This method needs to be in this __init__.py to get the __name__ correct
    # even if gfetch is vendored within another package.
    logger = logging.getLogger(__name__)
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(message)s"))
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.debug("Added a stderr logging handler to logger: %s", __name__)
    return handler


# ... Clean up.
del NullHandler
