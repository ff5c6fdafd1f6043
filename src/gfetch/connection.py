"""
The platform fetch primitive: one request, over urllib3, without blocking
the event loop.
"""
from __future__ import annotations

import asyncio
import functools
import logging
import typing

from urllib3 import BaseHTTPResponse, PoolManager, Retry, Timeout

from ._collections import URLSearchParams
from ._types import NormalizedOptions
from .exceptions import AbortError, RedirectError
from .util.timeout import _as_error

log = logging.getLogger(__name__)

#: Redirects followed by ``redirect="follow"`` before giving up.
MAX_REDIRECTS = 20

REDIRECT_POLICIES = frozenset(["follow", "manual", "error"])

#: Used when the options carry no ``agent``. Shared by every such request.
_DEFAULT_POOL = PoolManager()

#: Seconds the socket may outlive an abort deadline. The abort timer fires
#: first, then the worker thread gives up its connection.
SOCKET_TIMEOUT_GRACE = 0.5


def no_retries(redirect: int | bool = MAX_REDIRECTS) -> Retry:
    """A :class:`urllib3.Retry` that never retries but may follow redirects."""
    return Retry(
        total=None,
        connect=0,
        read=0,
        other=0,
        status=0,
        redirect=redirect,
        raise_on_redirect=True,
    )


def _request_body(body: typing.Any) -> typing.Any:
    if isinstance(body, URLSearchParams):
        return str(body)
    return body


def socket_timeout(init: NormalizedOptions, now: float) -> Timeout | None:
    """
    The :class:`urllib3.Timeout` bounding the blocking call for ``init``.

    A ``signal`` bounds it by its :attr:`~gfetch.AbortSignal.deadline` and
    leaves it unbounded without one; otherwise ``timeout`` does. Either way
    :data:`SOCKET_TIMEOUT_GRACE` is added. ``now`` is the event loop's time.
    """
    signal = init.get("signal")
    timeout = init.get("timeout")
    if signal is not None:
        if signal.deadline is None:
            return None
        remaining = signal.deadline - now
    elif timeout:
        remaining = float(timeout)
    else:
        return None
    return Timeout(total=max(remaining, 0.0) + SOCKET_TIMEOUT_GRACE)


def _urlopen_sync(
    pool: PoolManager,
    url: str,
    init: NormalizedOptions,
    timeout: Timeout | None = None,
) -> BaseHTTPResponse:
    policy = init.get("redirect", "follow")
    follow = policy == "follow"
    kw: dict[str, typing.Any] = {}
    if timeout is not None:
        kw["timeout"] = timeout

    response = pool.urlopen(
        init["method"],
        url,
        body=_request_body(init.get("body")),
        headers=init["headers"],
        redirect=follow,
        retries=no_retries(MAX_REDIRECTS if follow else False),
        preload_content=True,
        **kw,
    )

    if policy == "error":
        location = response.get_redirect_location()
        if location:
            raise RedirectError(url, location)

    return response


def _discard_result(future: asyncio.Future[BaseHTTPResponse]) -> None:
    # Nobody awaits this future anymore. Retrieve the outcome so it isn't
    # reported as never retrieved.
    if not future.cancelled():
        future.exception()


async def urlopen(url: str, init: NormalizedOptions) -> BaseHTTPResponse:
    """
    Send one request described by normalized options through
    ``init["agent"]``, or through a module-level pool without one.

    The blocking urllib3 call runs in the event loop's default executor.
    When ``init["signal"]`` is aborted before the call settles this rejects
    with :class:`~gfetch.exceptions.AbortError` straight away; whatever the
    worker thread produces afterwards is dropped. The socket is bounded by
    :func:`socket_timeout`, so a worker stuck on a silent server is freed
    shortly after the signal's deadline. A signal without a deadline leaves
    the worker to finish on its own.

    ``init["redirect"]`` selects the redirect policy:

    - ``"follow"`` (default): urllib3 follows up to :data:`MAX_REDIRECTS`.
    - ``"manual"``: the redirect response is returned as is.
    - ``"error"``: a redirect response raises
      :class:`~gfetch.exceptions.RedirectError`.
    """
    policy = init.get("redirect", "follow")
    if policy not in REDIRECT_POLICIES:
        raise ValueError(
            f"redirect must be one of {sorted(REDIRECT_POLICIES)}, not {policy!r}"
        )

    signal = init.get("signal")
    if signal is not None:
        signal.throw_if_aborted()

    pool = init.get("agent")
    if pool is None:
        pool = _DEFAULT_POOL
    log.debug("Starting request: %s %s", init["method"], url)

    loop = asyncio.get_running_loop()
    timeout = socket_timeout(init, loop.time())
    future = loop.run_in_executor(
        None, functools.partial(_urlopen_sync, pool, url, init, timeout)
    )
    if signal is None:
        return await future

    aborted: asyncio.Future[typing.NoReturn] = loop.create_future()

    def on_abort(reason: object) -> None:
        if not aborted.done():
            aborted.set_exception(_as_error(reason))

    signal.add_listener(on_abort)
    try:
        await asyncio.wait([future, aborted], return_when=asyncio.FIRST_COMPLETED)
    finally:
        signal.remove_listener(on_abort)
        if not future.done():
            future.add_done_callback(_discard_result)
        if aborted.done():
            # Marks the abort error as retrieved. When the request settled
            # first it's raised again below through ``future``.
            aborted.exception()
        else:
            aborted.cancel()

    if future.done():
        return future.result()
    raise typing.cast(AbortError, aborted.exception())
