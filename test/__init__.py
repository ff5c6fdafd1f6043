from __future__ import annotations

import platform
import typing

from urllib3 import BaseHTTPResponse, HTTPHeaderDict, HTTPResponse

from gfetch._types import NormalizedOptions

# Deadlines used against servers which never answer.
SHORT_TIMEOUT = 0.05
LONG_TIMEOUT = 0.5
if platform.python_implementation() == "PyPy":
    LONG_TIMEOUT = 2.0


def make_response(
    status: int = 200,
    headers: dict[str, str] | list[tuple[str, str]] | None = None,
    body: bytes = b"",
) -> BaseHTTPResponse:
    """A preloaded urllib3 response, as the fetch primitive returns it."""
    return HTTPResponse(
        body=body,
        headers=HTTPHeaderDict(headers or {}),
        status=status,
        preload_content=True,
    )


class RecordingFetch:
    """
    Stands in for the fetch primitive: records every call and answers with
    queued responses (a plain 200 once the queue is empty).
    """

    def __init__(self, *responses: BaseHTTPResponse) -> None:
        self.responses = list(responses)
        self.calls: list[tuple[str, NormalizedOptions]] = []

    async def __call__(self, url: str, init: NormalizedOptions) -> BaseHTTPResponse:
        self.calls.append((url, typing.cast(NormalizedOptions, dict(init))))
        if self.responses:
            return self.responses.pop(0)
        return make_response()

    @property
    def last(self) -> tuple[str, NormalizedOptions]:
        return self.calls[-1]
