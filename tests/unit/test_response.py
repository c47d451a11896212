"""
Unit tests for response assembly.
"""

import pytest

from rawhttp.exceptions import TransportError
from rawhttp.response import ResponseWriter, build_head, text_headers


class TestBuildHead:
    """Tests for status line and header block assembly."""

    @pytest.mark.parametrize("code, line", [
        (200, b"HTTP/1.1 200 OK\r\n"),
        (201, b"HTTP/1.1 201 Created\r\n"),
        (400, b"HTTP/1.1 400 Bad Request\r\n"),
        (404, b"HTTP/1.1 404 Not Found\r\n"),
        (500, b"HTTP/1.1 500 Internal Server Error\r\n"),
    ])
    def test_status_lines(self, code, line):
        assert build_head(code) == line + b"\r\n"

    def test_headers_keep_order(self):
        head = build_head(200, [("Content-Type", "text/plain"), ("Content-Length", "3")])
        assert head == b"HTTP/1.1 200 OK\r\nContent-Type: text/plain\r\nContent-Length: 3\r\n\r\n"

    def test_unknown_status_is_rejected(self):
        with pytest.raises(KeyError):
            build_head(302)


def test_text_headers_with_encoding():
    assert text_headers(b"abc", content_encoding="gzip") == [
        ("Content-Encoding", "gzip"),
        ("Content-Type", "text/plain"),
        ("Content-Length", "3"),
    ]


class TestResponseWriter:
    """Tests for ResponseWriter."""

    def test_send_writes_head_and_body(self, fake_socket):
        writer = ResponseWriter(fake_socket)
        writer.send(200, text_headers(b"hi"), b"hi")

        assert bytes(fake_socket.sent).endswith(b"\r\n\r\nhi")
        assert writer.committed
        assert writer.status_code == 200
        assert writer.bytes_sent == len(fake_socket.sent)

    def test_streaming(self, fake_socket):
        writer = ResponseWriter(fake_socket)
        assert not writer.committed

        writer.start(200, [("Content-Length", "6")])
        writer.write(b"abc")
        writer.write(b"")
        writer.write(b"def")

        assert bytes(fake_socket.sent) == b"HTTP/1.1 200 OK\r\nContent-Length: 6\r\n\r\nabcdef"

    def test_second_head_is_refused(self, fake_socket):
        writer = ResponseWriter(fake_socket)
        writer.send(404)

        with pytest.raises(RuntimeError):
            writer.send(500)

    def test_write_before_start_is_refused(self, fake_socket):
        with pytest.raises(RuntimeError):
            ResponseWriter(fake_socket).write(b"x")

    def test_send_failure_is_transport_error(self, socket_factory):
        writer = ResponseWriter(socket_factory(fail_after=0))

        with pytest.raises(TransportError):
            writer.send(200)
