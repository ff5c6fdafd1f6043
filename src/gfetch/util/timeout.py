from __future__ import annotations

import asyncio
import contextlib
import logging
import typing

from ..exceptions import AbortError

log = logging.getLogger(__name__)

_TYPE_LISTENER = typing.Callable[[object], None]


class AbortSignal:
    """
    Cancellation token handed to a request.

    A signal starts out armed and is aborted at most once, by its
    :class:`AbortController`. Listeners registered with :meth:`add_listener`
    are called with the abort reason when that happens.
    """

    def __init__(self) -> None:
        self._aborted = False
        self._reason: object = None
        self._listeners: list[_TYPE_LISTENER] = []
        self._deadline: float | None = None

    @classmethod
    def timeout(cls, seconds: float) -> AbortSignal:
        """
        Returns a signal which aborts itself after ``seconds``.

        Must be called from a running event loop. Unlike the ``timeout``
        request option, nothing disarms this timer.
        """
        controller = AbortController()
        _arm(controller, seconds)
        return controller.signal

    @property
    def aborted(self) -> bool:
        return self._aborted

    @property
    def deadline(self) -> float | None:
        """
        Event loop time (:meth:`asyncio.AbstractEventLoop.time`) at which
        this signal aborts itself, or ``None`` when only an explicit
        :meth:`AbortController.abort` can abort it.
        """
        return self._deadline

    @property
    def reason(self) -> object:
        return self._reason

    def throw_if_aborted(self) -> None:
        if self._aborted:
            raise _as_error(self._reason)

    def add_listener(self, listener: _TYPE_LISTENER) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: _TYPE_LISTENER) -> None:
        try:
            self._listeners.remove(listener)
        except ValueError:
            pass

    def _abort(self, reason: object) -> None:
        if self._aborted:
            return
        self._aborted = True
        self._reason = reason
        listeners, self._listeners = self._listeners, []
        for listener in listeners:
            listener(reason)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(aborted={self._aborted!r})"


class AbortController:
    """Owner of an :class:`AbortSignal`.

    >>> controller = AbortController()
    >>> controller.abort()
    >>> controller.signal.aborted
    True
    """

    def __init__(self) -> None:
        self.signal = AbortSignal()

    def abort(self, reason: object = None) -> None:
        if reason is None:
            reason = AbortError()
        self.signal._abort(reason)


def _timeout_reason(seconds: float) -> TimeoutError:
    return TimeoutError(f"Request timed out after {seconds}s")


def _as_error(reason: object) -> AbortError:
    if isinstance(reason, AbortError):
        return reason
    return AbortError(reason=reason)


def _arm(controller: AbortController, seconds: float) -> asyncio.TimerHandle:
    loop = asyncio.get_running_loop()
    handle = loop.call_later(seconds, controller.abort, _timeout_reason(seconds))
    controller.signal._deadline = handle.when()
    return handle


@contextlib.contextmanager
def abort_after(seconds: float) -> typing.Iterator[AbortSignal]:
    """
    Yields a signal which is aborted once ``seconds`` have elapsed.

    The timer is cancelled when the block exits, whichever way it exits, so
    it never outlives the request it guards. Must be entered from a running
    event loop.
    """
    controller = AbortController()
    handle = _arm(controller, seconds)
    log.debug("Armed request timeout of %ss", seconds)
    try:
        yield controller.signal
    finally:
        handle.cancel()
