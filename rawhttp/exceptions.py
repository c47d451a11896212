#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Exception Hierarchy for the Raw HTTP Server
-------------------------------------------
Every error a connection can run into falls into one of these classes.
The connection driver maps them onto responses:

- MalformedRequestError: answered with 400 Bad Request
- TransportError: the connection is closed without a response
- ConfigError: raised before the server starts accepting connections
"""


class HTTPServerError(Exception):
    """Base class for all server errors."""
    pass


class MalformedRequestError(HTTPServerError):
    """Raised when the request head cannot be parsed."""
    pass


class TransportError(HTTPServerError):
    """Raised when reading from or writing to the connection fails."""
    pass


class ConfigError(HTTPServerError):
    """Raised when the server configuration is invalid."""
    pass
