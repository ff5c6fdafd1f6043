"""
Browser-side request surface. Requests go through one shared,
platform-provided transport: there is no agent selection and no cookie jar.
Under Pyodide urllib3 sends these through the browser's ``fetch``.
"""
from __future__ import annotations

import typing

from urllib3 import BaseHTTPResponse

from ._request_methods import RequestMethods
from ._types import _TYPE_FORM_DATA, _TYPE_HEADERS, _TYPE_REDIRECT, _TYPE_REQUEST_BODY
from .util.request import normalize_init
from .util.timeout import AbortSignal

__all__ = (
    "WebFetch",
    "connect",
    "delete",
    "fetch",
    "get",
    "head",
    "options",
    "patch",
    "post",
    "put",
    "request",
    "trace",
)


class WebFetch(RequestMethods):
    """Dispatcher for browser environments."""

    async def request(
        self,
        url: str,
        *,
        method: str | None = None,
        headers: _TYPE_HEADERS | None = None,
        body: _TYPE_REQUEST_BODY | None = None,
        form_data: _TYPE_FORM_DATA | None = None,
        json: typing.Any = None,
        timeout: float | None = None,
        reject_unauthorized: bool | None = None,
        signal: AbortSignal | None = None,
        redirect: _TYPE_REDIRECT = "follow",
    ) -> BaseHTTPResponse:
        """
        Make a request, returning the urllib3 response as is.

        Takes the same options as :meth:`gfetch.node.NodeFetch.request`
        minus ``agent`` and ``cookie_jar``. ``reject_unauthorized`` is
        resolved but has no effect: the platform owns TLS.
        ``signal`` and ``redirect`` are handed to the transport unchanged; any
        keyword not listed there raises :class:`TypeError`.
        """
        init = normalize_init(
            {
                "method": method,
                "headers": headers,
                "body": body,
                "form_data": form_data,
                "json": json,
                "timeout": timeout,
                "reject_unauthorized": reject_unauthorized,
                "signal": signal,
                "redirect": redirect,
            }
        )
        return await self._send(url, init, self.fetch)


fetch = WebFetch()

request = fetch.request
get = fetch.get
head = fetch.head
post = fetch.post
put = fetch.put
delete = fetch.delete
connect = fetch.connect
options = fetch.options
trace = fetch.trace
patch = fetch.patch
