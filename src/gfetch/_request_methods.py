from __future__ import annotations

import contextlib
import typing

from urllib3 import BaseHTTPResponse

from ._types import _TYPE_FETCH, HTTPMethod, NormalizedOptions
from .connection import urlopen
from .util.timeout import abort_after

__all__ = ["RequestMethods"]


class RequestMethods:
    """
    Base class for the dispatchers in :mod:`gfetch.node` and
    :mod:`gfetch.web`. Subclasses implement :meth:`request`.

    Provides one shorthand per HTTP verb, each of which calls
    :meth:`request` with that method, overriding any ``method`` given in
    ``options``::

        response = await fetch.post(url, json={"n": 1})

    Instances are also callable, which is the same as :meth:`request`.

    :param fetch:
        The fetch primitive requests are delegated to. Defaults to
        :func:`gfetch.connection.urlopen`.
    """

    def __init__(self, fetch: _TYPE_FETCH | None = None) -> None:
        self.fetch: _TYPE_FETCH = fetch if fetch is not None else urlopen

    async def request(self, url: str, **options: typing.Any) -> BaseHTTPResponse:
        raise NotImplementedError(
            "Classes extending RequestMethods must implement "
            "their own ``request`` method."
        )

    async def __call__(self, url: str, **options: typing.Any) -> BaseHTTPResponse:
        return await self.request(url, **options)

    async def _send(
        self, url: str, init: NormalizedOptions, fetch: _TYPE_FETCH
    ) -> BaseHTTPResponse:
        """
        Delegate normalized options to ``fetch``, aborting the request once
        ``init["timeout"]`` seconds have elapsed unless the caller supplied
        their own ``signal``.
        """
        with contextlib.ExitStack() as stack:
            if init.get("timeout") and init.get("signal") is None:
                init["signal"] = stack.enter_context(abort_after(init["timeout"]))

            return await fetch(url, init)

    async def _forward(
        self, method: HTTPMethod, url: str, options: dict[str, typing.Any]
    ) -> BaseHTTPResponse:
        return await self.request(url, **{**options, "method": method.value})

    async def get(self, url: str, **options: typing.Any) -> BaseHTTPResponse:
        return await self._forward(HTTPMethod.GET, url, options)

    async def head(self, url: str, **options: typing.Any) -> BaseHTTPResponse:
        return await self._forward(HTTPMethod.HEAD, url, options)

    async def post(self, url: str, **options: typing.Any) -> BaseHTTPResponse:
        return await self._forward(HTTPMethod.POST, url, options)

    async def put(self, url: str, **options: typing.Any) -> BaseHTTPResponse:
        return await self._forward(HTTPMethod.PUT, url, options)

    async def delete(self, url: str, **options: typing.Any) -> BaseHTTPResponse:
        return await self._forward(HTTPMethod.DELETE, url, options)

    async def connect(self, url: str, **options: typing.Any) -> BaseHTTPResponse:
        return await self._forward(HTTPMethod.CONNECT, url, options)

    async def options(self, url: str, **options: typing.Any) -> BaseHTTPResponse:
        return await self._forward(HTTPMethod.OPTIONS, url, options)

    async def trace(self, url: str, **options: typing.Any) -> BaseHTTPResponse:
        return await self._forward(HTTPMethod.TRACE, url, options)

    async def patch(self, url: str, **options: typing.Any) -> BaseHTTPResponse:
        return await self._forward(HTTPMethod.PATCH, url, options)
