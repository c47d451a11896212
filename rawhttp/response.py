#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
HTTP Response Module
--------------------
Assembles status lines and header blocks by hand and writes them, followed
by the body, to the client socket.
"""

from .exceptions import TransportError

# HTTP status codes with descriptions
HTTP_STATUS = {
    200: 'OK',
    201: 'Created',
    400: 'Bad Request',
    404: 'Not Found',
    500: 'Internal Server Error'
}

HEADER_ENCODING = 'iso-8859-1'


def build_head(status_code, headers=()):
    """
    Build the status line and header block of a response.

    Args:
        status_code: HTTP status code
        headers: Sequence of (name, value) pairs, written in order

    Returns:
        bytes: The response head, ending with the blank line
    """
    status_message = HTTP_STATUS[status_code]
    head = f"HTTP/1.1 {status_code} {status_message}\r\n"
    for name, value in headers:
        head += f"{name}: {value}\r\n"
    head += "\r\n"
    return head.encode(HEADER_ENCODING)


class ResponseWriter:
    """
    Writes one response to a socket.

    The response is committed as soon as its head has been sent. After that
    the status seen by the client can no longer change.
    """

    def __init__(self, sock):
        self.sock = sock
        self.status_code = None
        self.bytes_sent = 0

    @property
    def committed(self):
        return self.status_code is not None

    def _sendall(self, data):
        try:
            self.sock.sendall(data)
        except OSError as e:
            raise TransportError(f"Error sending response: {e}") from e
        self.bytes_sent += len(data)

    def start(self, status_code, headers=()):
        """
        Send the response head.

        Raises:
            RuntimeError: If a head was already sent
            TransportError: If the connection fails
        """
        if self.committed:
            raise RuntimeError("Response head already sent")
        head = build_head(status_code, headers)
        self.status_code = status_code
        self._sendall(head)

    def write(self, chunk):
        """Send a chunk of the response body."""
        if not self.committed:
            raise RuntimeError("Response head not sent")
        if chunk:
            self._sendall(chunk)

    def send(self, status_code, headers=(), body=b''):
        """Send a complete response in a single write."""
        if self.committed:
            raise RuntimeError("Response head already sent")
        data = build_head(status_code, headers) + body
        self.status_code = status_code
        self._sendall(data)


def text_headers(body, content_encoding=None):
    """Headers for a buffered text/plain body."""
    headers = []
    if content_encoding:
        headers.append(('Content-Encoding', content_encoding))
    headers.append(('Content-Type', 'text/plain'))
    headers.append(('Content-Length', str(len(body))))
    return headers
