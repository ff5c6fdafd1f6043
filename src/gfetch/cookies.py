from __future__ import annotations

import logging
import typing
from http.cookiejar import CookieJar
from urllib.parse import urljoin

from urllib3 import BaseHTTPResponse, HTTPHeaderDict, Retry
from urllib3.util.url import parse_url

from ._types import _TYPE_FETCH, NormalizedOptions
from .connection import MAX_REDIRECTS, no_retries
from .exceptions import RedirectError

__all__ = ["CookieRequest", "CookieResponse", "fetch_cookie"]

log = logging.getLogger(__name__)


class CookieRequest:
    """
    Implements the part of the stdlib :class:`urllib.request.Request`
    interface that :class:`http.cookiejar.CookieJar` relies on, for one hop
    of a request.
    """

    def __init__(
        self,
        method: str,
        url: str,
        headers: HTTPHeaderDict | None = None,
        redirected_by: str | None = None,
    ) -> None:
        self.method = method
        self.url = url
        self.headers = headers if headers is not None else HTTPHeaderDict()
        self.redirect_source = redirected_by

    def get_full_url(self) -> str:
        return self.full_url

    @property
    def full_url(self) -> str:
        return self.url

    @property
    def host(self) -> str:
        return parse_url(self.url).netloc or ""

    @property
    def type(self) -> str:
        return parse_url(self.url).scheme or ""

    @property
    def unverifiable(self) -> bool:
        return self.is_unverifiable()

    @property
    def origin_req_host(self) -> str:
        if self.redirect_source:
            return parse_url(self.redirect_source).host or ""
        return parse_url(self.url).host or ""

    def is_unverifiable(self) -> bool:
        """
        A request is "verifiable" for cookie handling purposes when the user
        had an opportunity to approve its URL. Here that is only untrue for
        hops reached through a redirect.
        """
        return bool(self.redirect_source) and self.redirect_source != self.url

    def has_header(self, header: str) -> bool:
        return header in self.headers

    def get_header(self, header: str, default: str | None = None) -> str | None:
        return self.headers.get(header, default)

    def header_items(self) -> list[tuple[str, str]]:
        return list(self.headers.items())

    def add_unredirected_header(self, header: str, value: str) -> None:
        self.headers[header] = value


class CookieResponse:
    """Exposes a urllib3 response's headers the way
    :meth:`http.cookiejar.CookieJar.extract_cookies` reads them."""

    def __init__(self, response: BaseHTTPResponse) -> None:
        self._headers = response.headers

    def info(self) -> CookieResponse:
        return self

    def get_all(
        self, name: str, default: list[str] | None = None
    ) -> list[str] | None:
        values = self._headers.getlist(name)
        return values or default


def _redirect_init(
    init: NormalizedOptions, status: int, url: str, location: str
) -> NormalizedOptions:
    hop = typing.cast(NormalizedOptions, dict(init))
    headers = init["headers"].copy()

    if status == 303 and init["method"] != "HEAD":
        hop["method"] = "GET"
        hop.pop("body", None)
        for name in ("content-type", "content-length", "transfer-encoding"):
            headers.discard(name)

    if parse_url(url).host != parse_url(location).host:
        for name in Retry.DEFAULT_REMOVE_HEADERS_ON_REDIRECT:
            headers.discard(name)

    hop["headers"] = headers
    return hop


def fetch_cookie(fetch: _TYPE_FETCH, jar: CookieJar) -> _TYPE_FETCH:
    """
    Wrap a fetch callable so it sends cookies from ``jar`` and stores the
    cookies set by every response, redirects included, back into it.

    Redirects are followed here rather than by ``fetch`` so each hop goes
    through the jar. The caller's ``redirect`` policy still applies.
    """

    async def fetch_with_cookies(
        url: str, init: NormalizedOptions
    ) -> BaseHTTPResponse:
        policy = init.get("redirect", "follow")
        retries = no_retries(MAX_REDIRECTS)
        redirected_by = None
        hop = init

        while True:
            request = CookieRequest(
                hop["method"], url, hop["headers"].copy(), redirected_by=redirected_by
            )
            jar.add_cookie_header(request)

            response = await fetch(
                url, typing.cast(NormalizedOptions, {**hop, "headers": request.headers, "redirect": "manual"})
            )
            jar.extract_cookies(CookieResponse(response), request)  # type: ignore[arg-type]

            location = response.get_redirect_location()
            if not location or policy == "manual":
                return response
            if policy == "error":
                raise RedirectError(url, location)

            # Raises MaxRetryError once the redirect budget is spent.
            retries = retries.increment(hop["method"], url, response=response)

            location = urljoin(url, location)
            log.info("Redirecting %s -> %s", url, location)
            hop = _redirect_init(hop, response.status, url, location)
            redirected_by, url = url, location

    return fetch_with_cookies
