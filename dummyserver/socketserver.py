#!/usr/bin/env python

"""
Socket-level dummy server used for testing the dispatchers end to end.
"""

from __future__ import annotations

import logging
import socket
import ssl
import sys
import threading
import typing

log = logging.getLogger(__name__)

#: A loopback address every test server binds to.
HOST = "127.0.0.1"


class SocketServerThread(threading.Thread):
    """
    :param socket_handler: Callable which receives the listening socket.
    :param ready_event: Event which gets set when the socket handler is
        ready to receive requests.
    """

    def __init__(
        self,
        socket_handler: typing.Callable[[socket.socket], None],
        host: str = HOST,
        ready_event: threading.Event | None = None,
    ) -> None:
        super().__init__()
        self.daemon = True

        self.socket_handler = socket_handler
        self.host = host
        self.ready_event = ready_event

    def _start_server(self) -> None:
        sock = socket.socket(socket.AF_INET)
        if sys.platform != "win32":
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        sock.bind((self.host, 0))
        self.port = sock.getsockname()[1]

        # Once listen() returns, the server socket is ready
        sock.listen(1)

        if self.ready_event:
            self.ready_event.set()

        try:
            self.socket_handler(sock)
        finally:
            sock.close()

    def run(self) -> None:
        self._start_server()


class ReceivedRequest(typing.NamedTuple):
    method: str
    target: str
    headers: dict[str, str]
    body: bytes


def read_request(sock: socket.socket | ssl.SSLSocket) -> ReceivedRequest:
    """Read one HTTP/1.1 request with a ``Content-Length`` framed body."""
    buf = bytearray()
    while b"\r\n\r\n" not in buf:
        chunk = sock.recv(65536)
        if not chunk:
            raise ConnectionError("client closed the connection mid-request")
        buf += chunk

    head, _, body = bytes(buf).partition(b"\r\n\r\n")
    request_line, *header_lines = head.decode("latin-1").split("\r\n")
    method, target, _ = request_line.split(" ", 2)

    headers: dict[str, str] = {}
    for line in header_lines:
        name, _, value = line.partition(":")
        headers[name.strip().lower()] = value.strip()

    length = int(headers.get("content-length", 0))
    while len(body) < length:
        chunk = sock.recv(65536)
        if not chunk:
            break
        body += chunk

    return ReceivedRequest(method, target, headers, body)


def make_response(
    status: str = "200 OK",
    headers: typing.Sequence[tuple[str, str]] = (),
    body: bytes = b"",
) -> bytes:
    lines = [f"HTTP/1.1 {status}"]
    lines += [f"{name}: {value}" for name, value in headers]
    lines += [f"Content-Length: {len(body)}", "Connection: close", "", ""]
    return "\r\n".join(lines).encode("latin-1") + body
