"""
Server-side request surface: picks a transport agent per URL scheme, can
turn certificate verification off and can keep cookies in a jar.

.. code-block:: python

    from gfetch import node

    response = await node.post("https://example.com/", json={"n": 1}, timeout=5)
"""
from __future__ import annotations

import contextlib
import logging
import typing
from http.cookiejar import CookieJar

from urllib3 import BaseHTTPResponse, PoolManager

from ._request_methods import RequestMethods
from ._types import _TYPE_FETCH, _TYPE_FORM_DATA, _TYPE_HEADERS, _TYPE_REDIRECT, _TYPE_REQUEST_BODY
from .cookies import fetch_cookie
from .util.request import normalize_init
from .util.timeout import AbortSignal

__all__ = (
    "NodeFetch",
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

log = logging.getLogger(__name__)


def agent_for_url(url: str, reject_unauthorized: bool = True) -> PoolManager:
    """
    Build a transport agent for ``url``: certificate verification follows
    ``reject_unauthorized`` for ``https`` URLs, plain HTTP gets a default
    :class:`urllib3.PoolManager`.
    """
    if url.lower().startswith("https"):
        cert_reqs = "CERT_REQUIRED" if reject_unauthorized else "CERT_NONE"
        log.debug("Using a new HTTPS agent for %s (cert_reqs=%s)", url, cert_reqs)
        return PoolManager(cert_reqs=cert_reqs)
    log.debug("Using a new HTTP agent for %s", url)
    return PoolManager()


class NodeFetch(RequestMethods):
    """Dispatcher for server environments."""

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
        agent: PoolManager | None = None,
        cookie_jar: CookieJar | None = None,
    ) -> BaseHTTPResponse:
        """
        Make a request, returning the urllib3 response as is. Error statuses
        are not raised.

        :param method: One of the nine HTTP verbs, any case. Defaults to GET.
        :param headers: An :class:`urllib3.HTTPHeaderDict`, a mapping or a
            list of ``(name, value)`` pairs.
        :param body: Raw request body. Dropped for methods other than PUT,
            POST, PATCH and DELETE.
        :param form_data: Mapping or :class:`~gfetch.URLSearchParams` sent
            ``application/x-www-form-urlencoded``. Wins over ``json``.
        :param json: Sent as ``application/json``. Strings are sent verbatim.
        :param timeout: Seconds after which the request is aborted. Ignored
            when ``signal`` is given.
        :param reject_unauthorized: Verify certificates of ``https`` URLs.
            Defaults to ``True``. Ignored when ``agent`` is given.
        :param signal: An :class:`~gfetch.AbortSignal` to cancel the request.
            Handed to the transport unchanged.
        :param redirect: ``"follow"``, ``"manual"`` or ``"error"``. Handed to
            the transport unchanged.
        :param agent: A :class:`urllib3.PoolManager` to send the request
            through. One is built for the URL's scheme when omitted.
        :param cookie_jar: A :class:`http.cookiejar.CookieJar` cookies are
            sent from and stored into, across redirects.

        Of the transport's own options only ``signal`` and ``redirect`` are
        accepted. Any other keyword raises :class:`TypeError`.
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
                "agent": agent,
                "cookie_jar": cookie_jar,
            }
        )

        fetch: _TYPE_FETCH = self.fetch
        if init.get("cookie_jar") is not None:
            fetch = fetch_cookie(fetch, init["cookie_jar"])

        with contextlib.ExitStack() as stack:
            if init.get("agent") is None:
                init["agent"] = agent_for_url(url, init["reject_unauthorized"])
                stack.callback(init["agent"].clear)

            return await self._send(url, init, fetch)


fetch = NodeFetch()

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
