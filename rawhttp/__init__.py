#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Raw HTTP Server
---------------
A minimal HTTP/1.1 server written directly against Python's socket library.

Routes:
- /                 200 OK
- /user-agent       echoes the User-Agent header
- /echo/<text>      echoes <text>, gzip-compressed on request
- /files/<name>     GET streams a file, POST stores the request body
"""

__version__ = '1.0.0'

from .server import WebServer
from .config import ServerConfig
from .handler import RequestHandler
from .files import FileTransferHandler
from .utils import setup_logging

__all__ = ['WebServer', 'ServerConfig', 'RequestHandler', 'FileTransferHandler', 'setup_logging']
