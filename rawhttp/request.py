#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
HTTP Request Parsing Module
---------------------------
Turns the raw byte stream of a connection into a request:
- read_header_lines: reads lines up to the blank line ending the head
- parse_request_line: splits the first line into method, target and version
- lookup_header: first-match header lookup over the raw lines

Lines are decoded as ISO-8859-1 so that every byte maps to exactly one
character and can be encoded back without loss.
"""

import logging

from .exceptions import MalformedRequestError, TransportError

HEADER_ENCODING = 'iso-8859-1'

logger = logging.getLogger('Request')


def read_header_lines(rfile):
    """
    Read header lines from a buffered binary stream.

    Reading stops after the empty line that terminates the head, or at end
    of input. A trailing line without a newline at end of input is dropped.

    Args:
        rfile: Buffered binary reader over the connection

    Returns:
        list: Header lines, request line first, including the final empty line

    Raises:
        TransportError: If the connection fails while reading
        MalformedRequestError: If no line could be read at all
    """
    lines = []
    while True:
        try:
            raw = rfile.readline()
        except OSError as e:
            raise TransportError(f"Error reading request: {e}") from e

        if not raw.endswith(b'\n'):
            break

        if raw.endswith(b'\r\n'):
            raw = raw[:-2]
        else:
            raw = raw[:-1]

        line = raw.decode(HEADER_ENCODING)
        lines.append(line)

        if line == '':
            break

    if not lines:
        raise MalformedRequestError("empty request")

    return lines


class RequestLine:
    """The method, target and version tokens of a request line."""

    def __init__(self, method, target, version=''):
        self.method = method
        self.target = target
        self.version = version

    @property
    def route_path(self):
        """The target with its leading and trailing slashes trimmed."""
        return self.target.strip('/')

    def __repr__(self):
        return f"RequestLine({self.method!r}, {self.target!r}, {self.version!r})"


def parse_request_line(line):
    """
    Split a request line on single spaces.

    Args:
        line: The first line of the request head

    Returns:
        RequestLine: Parsed request line

    Raises:
        MalformedRequestError: If the line has fewer than two tokens
    """
    tokens = line.split(' ')
    if len(tokens) < 2:
        raise MalformedRequestError(f"invalid request line: {line!r}")

    version = tokens[2] if len(tokens) > 2 else ''
    return RequestLine(tokens[0], tokens[1], version)


def lookup_header(lines, name):
    """
    Return the value of the first line starting with "<name>: ".

    The match is case-sensitive. Returns an empty string if no line matches.
    """
    prefix = f"{name}: "
    for line in lines:
        if line.startswith(prefix):
            return line[len(prefix):]
    return ''


class Request:
    """A parsed request head: the raw lines plus the request line view."""

    def __init__(self, lines, request_line):
        self.lines = lines
        self.request_line = request_line

    @property
    def method(self):
        return self.request_line.method

    @property
    def target(self):
        return self.request_line.target

    @property
    def route_path(self):
        return self.request_line.route_path

    def header(self, name):
        return lookup_header(self.lines, name)


def read_request(rfile):
    """
    Read and parse a request head from the connection.

    Args:
        rfile: Buffered binary reader over the connection

    Returns:
        Request: The parsed request; the body, if any, is left unread in rfile
    """
    lines = read_header_lines(rfile)
    request_line = parse_request_line(lines[0])
    logger.debug(f"Request line: {request_line!r}, {len(lines) - 1} header lines")
    return Request(lines, request_line)
