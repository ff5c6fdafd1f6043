from __future__ import annotations

import socket
import ssl
import threading
import typing

from dummyserver.socketserver import (
    HOST,
    ReceivedRequest,
    SocketServerThread,
    make_response,
    read_request,
)

_TYPE_RESPONDER = typing.Callable[[ReceivedRequest], bytes]


class SocketDummyServerTestCase:
    """
    A simple socket-based server is started per test by calling one of the
    ``start_*`` helpers. Every request it answers is recorded in
    ``self.received``.
    """

    scheme = "http"
    host = HOST

    server_thread: SocketServerThread
    port: int
    received: list[ReceivedRequest]

    #: Set to wrap accepted connections in TLS.
    server_context: ssl.SSLContext | None = None

    @property
    def base_url(self) -> str:
        return f"{self.scheme}://{self.host}:{self.port}"

    def _start_server(
        self, socket_handler: typing.Callable[[socket.socket], None]
    ) -> None:
        ready_event = threading.Event()
        self.server_thread = SocketServerThread(
            socket_handler=socket_handler, ready_event=ready_event, host=self.host
        )
        self.server_thread.start()
        ready_event.wait(5)
        if not ready_event.is_set():
            raise Exception("most likely failed to start server")
        self.port = self.server_thread.port

    def _accept(self, listener: socket.socket) -> socket.socket | None:
        sock = listener.accept()[0]
        if self.server_context is None:
            return sock
        try:
            return self.server_context.wrap_socket(sock, server_side=True)
        except (ssl.SSLError, OSError):
            # The client refused our certificate.
            sock.close()
            return None

    def start_responder(self, responder: _TYPE_RESPONDER, num: int = 1) -> None:
        """Answer ``num`` connections, building each response from the request."""
        self.received = []

        def socket_handler(listener: socket.socket) -> None:
            for _ in range(num):
                sock = self._accept(listener)
                if sock is None:
                    continue
                try:
                    request = read_request(sock)
                    self.received.append(request)
                    sock.sendall(responder(request))
                finally:
                    sock.close()

        self._start_server(socket_handler)

    def start_response_handler(self, response: bytes, num: int = 1) -> None:
        self.start_responder(lambda request: response, num)

    def start_basic_handler(self, num: int = 1) -> None:
        self.start_response_handler(make_response(), num)

    def start_silent_handler(self, release: threading.Event) -> None:
        """Accept one request and never answer it until ``release`` is set."""
        self.received = []

        def socket_handler(listener: socket.socket) -> None:
            sock = self._accept(listener)
            if sock is None:
                return
            try:
                self.received.append(read_request(sock))
                release.wait(10)
            finally:
                sock.close()

        self._start_server(socket_handler)

    def teardown_method(self) -> None:
        if hasattr(self, "server_thread"):
            self.server_thread.join(0.1)
