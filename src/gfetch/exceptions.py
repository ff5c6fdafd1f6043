from __future__ import annotations

import typing

# Base Exceptions


class FetchError(Exception):
    """Base exception used by this module."""

    pass


_TYPE_REDUCE_RESULT = typing.Tuple[typing.Callable[..., object], typing.Tuple[object, ...]]


# Normalization errors. These are raised before any I/O happens.


class InvalidMethodError(FetchError, ValueError):
    """Raised when a request method is not one of the nine HTTP verbs."""

    def __init__(self, method: object) -> None:
        self.method = method
        super().__init__(f"Invalid HTTP method: {method!r}")

    def __reduce__(self) -> _TYPE_REDUCE_RESULT:
        # For pickling purposes.
        return self.__class__, (self.method,)


class InvalidHeaderShapeError(FetchError, TypeError):
    """Raised when ``headers`` is neither a header collection, a mapping
    nor a sequence of ``(name, value)`` pairs."""

    def __init__(self, headers: object) -> None:
        self.headers = headers
        super().__init__(
            "headers must be an HTTPHeaderDict, a mapping or a sequence of "
            f"(name, value) pairs, not {type(headers).__name__}"
        )

    def __reduce__(self) -> _TYPE_REDUCE_RESULT:
        # For pickling purposes.
        return self.__class__, (self.headers,)


class SerializationError(FetchError, ValueError):
    """Raised when a JSON or form-data payload cannot be stringified.

    The original error is available as ``__cause__``.
    """

    pass


# Dispatch errors


class AbortError(FetchError):
    """Raised when a request is cancelled through its :class:`~gfetch.AbortSignal`,
    either by the caller or because its ``timeout`` elapsed.

    :param reason: The reason passed to :meth:`~gfetch.AbortController.abort`.
    """

    def __init__(
        self, message: str = "The operation was aborted", reason: object = None
    ) -> None:
        self.reason = reason
        super().__init__(message)

    def __reduce__(self) -> _TYPE_REDUCE_RESULT:
        # For pickling purposes.
        return self.__class__, (str(self), None)


class RedirectError(FetchError):
    """Raised for a redirect response when ``redirect="error"`` was requested."""

    def __init__(self, url: str, location: str) -> None:
        self.url = url
        self.location = location
        super().__init__(f"Unexpected redirect from {url} to {location}")

    def __reduce__(self) -> _TYPE_REDUCE_RESULT:
        # For pickling purposes.
        return self.__class__, (self.url, self.location)
