from __future__ import annotations

import typing
from enum import Enum

if typing.TYPE_CHECKING:
    from http.cookiejar import CookieJar

    from urllib3 import BaseHTTPResponse, HTTPHeaderDict, PoolManager

    from ._collections import URLSearchParams
    from .util.timeout import AbortSignal


class HTTPMethod(str, Enum):
    GET = "GET"
    HEAD = "HEAD"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    CONNECT = "CONNECT"
    OPTIONS = "OPTIONS"
    TRACE = "TRACE"
    PATCH = "PATCH"

    def __str__(self) -> str:
        return self.value


#: Every method the normalizer accepts, uppercase.
METHODS: typing.Final[frozenset[str]] = frozenset(m.value for m in HTTPMethod)

#: Methods which keep a request body. Any other method has its body dropped.
BODY_METHODS: typing.Final[frozenset[str]] = frozenset(
    [HTTPMethod.PUT.value, HTTPMethod.POST.value, HTTPMethod.PATCH.value, HTTPMethod.DELETE.value]
)

_TYPE_BODY = typing.Union[bytes, typing.IO[typing.Any], typing.Iterable[bytes], str]
_TYPE_HEADER_PAIRS = typing.Sequence[typing.Tuple[str, str]]
_TYPE_HEADERS = typing.Union[
    "HTTPHeaderDict", typing.Mapping[str, str], _TYPE_HEADER_PAIRS
]
_TYPE_FORM_DATA = typing.Union["URLSearchParams", typing.Mapping[str, typing.Any]]
_TYPE_REQUEST_BODY = typing.Union[_TYPE_BODY, "URLSearchParams"]

_TYPE_REDIRECT = typing.Literal["follow", "manual", "error"]


class RequestOptions(typing.TypedDict, total=False):
    """The loosely typed options bag accepted by the dispatchers.

    ``agent`` and ``cookie_jar`` are only honored by :mod:`gfetch.node`.
    """

    method: str
    headers: _TYPE_HEADERS
    body: _TYPE_REQUEST_BODY | None
    form_data: _TYPE_FORM_DATA | None
    json: typing.Any
    timeout: float | None
    reject_unauthorized: bool | None
    signal: AbortSignal | None
    redirect: _TYPE_REDIRECT
    agent: PoolManager | None
    cookie_jar: CookieJar | None


class NormalizedOptions(typing.TypedDict, total=False):
    """Output of :func:`gfetch.util.request.normalize_init`.

    ``method``, ``headers`` and ``reject_unauthorized`` are always present.
    """

    method: str
    headers: HTTPHeaderDict
    body: _TYPE_REQUEST_BODY
    form_data: URLSearchParams
    json: str
    timeout: float | None
    reject_unauthorized: bool
    signal: AbortSignal | None
    redirect: _TYPE_REDIRECT
    agent: PoolManager | None
    cookie_jar: CookieJar | None


#: Signature of the platform fetch primitive and of everything wrapping it.
_TYPE_FETCH = typing.Callable[
    [str, NormalizedOptions], typing.Awaitable["BaseHTTPResponse"]
]
