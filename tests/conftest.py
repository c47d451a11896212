"""
pytest configuration and fixtures.
"""

import socket
from typing import Generator, Tuple

import pytest

from rawhttp import ServerConfig, WebServer


class FakeSocket:
    """Collects everything sent through sendall()."""

    def __init__(self, fail_after: int = None):
        self.sent = bytearray()
        self.fail_after = fail_after
        self.closed = False

    def sendall(self, data: bytes) -> None:
        if self.fail_after is not None and len(self.sent) + len(data) > self.fail_after:
            raise ConnectionResetError("peer went away")
        self.sent.extend(data)

    def close(self) -> None:
        self.closed = True


def split_response(raw: bytes) -> Tuple[str, dict, bytes]:
    """Split a raw response into status line, headers and body."""
    head, _, body = raw.partition(b"\r\n\r\n")
    lines = head.decode("iso-8859-1").split("\r\n")
    headers = {}
    for line in lines[1:]:
        name, _, value = line.partition(": ")
        headers[name] = value
    return lines[0], headers, body


def exchange(port: int, data: bytes, timeout: float = 10.0) -> bytes:
    """Send raw bytes to the server and read until it closes the connection."""
    with socket.create_connection(("127.0.0.1", port), timeout=timeout) as sock:
        if data:
            sock.sendall(data)
        sock.shutdown(socket.SHUT_WR)
        chunks = []
        while True:
            chunk = sock.recv(65536)
            if not chunk:
                break
            chunks.append(chunk)
    return b"".join(chunks)


@pytest.fixture
def fake_socket() -> FakeSocket:
    return FakeSocket()


@pytest.fixture
def files_dir(tmp_path):
    """Root directory for /files/ requests."""
    root = tmp_path / "files"
    root.mkdir()
    return root


@pytest.fixture
def config(files_dir) -> ServerConfig:
    """Test server configuration."""
    return ServerConfig(
        host="127.0.0.1",
        port=0,  # Let OS pick a free port
        directory=str(files_dir),
        max_threads=8,
        request_timeout=10,
    )


@pytest.fixture
def live_server(config: ServerConfig) -> Generator[WebServer, None, None]:
    """A running server bound to a free port."""
    server = WebServer(config)
    assert server.start()

    yield server

    server.shutdown()


@pytest.fixture
def port(live_server: WebServer) -> int:
    return live_server.address[1]


@pytest.fixture
def socket_factory():
    """Builds FakeSocket instances, optionally failing after n bytes."""
    return FakeSocket


@pytest.fixture
def parse_response():
    return split_response


@pytest.fixture
def send_raw(port):
    """Sends raw bytes to the live server and returns the raw response."""
    def _send(data: bytes) -> bytes:
        return exchange(port, data)
    return _send
