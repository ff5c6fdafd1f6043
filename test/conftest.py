from __future__ import annotations

import ssl
import typing

import pytest
import trustme

from dummyserver.socketserver import HOST


class ServerCerts(typing.NamedTuple):
    ca: trustme.CA
    server_context: ssl.SSLContext
    ca_cert_path: str


@pytest.fixture(scope="session")
def certs(tmp_path_factory: pytest.TempPathFactory) -> ServerCerts:
    """A throwaway CA and a server certificate for the loopback address.

    The CA is not in any trust store, so clients verifying certificates
    reject it.
    """
    tmpdir = tmp_path_factory.mktemp("certs")
    ca = trustme.CA()
    server_cert = ca.issue_cert(HOST, "localhost")

    ca_cert_path = str(tmpdir / "ca.pem")
    ca.cert_pem.write_to_path(ca_cert_path)

    context = ssl.SSLContext(ssl.PROTOCOL_TLS_SERVER)
    server_cert.configure_cert(context)
    return ServerCerts(ca, context, ca_cert_path)
