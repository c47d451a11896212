#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
HTTP Request Handler Module
---------------------------
Drives a single connection through one request/response cycle:
read the head, route it, respond, close. There is no keep-alive.
"""

import time
import logging
import threading
import traceback

from .encoding import negotiate, encode_body
from .exceptions import MalformedRequestError, TransportError
from .files import FileTransferHandler
from .request import read_request, HEADER_ENCODING
from .response import ResponseWriter, text_headers
from .router import Router, Route, ECHO_PREFIX


class RequestHandler:
    """
    Handles HTTP requests by reading the request head, routing on the
    request path and writing the response.
    """

    def __init__(self, server_config, file_handler=None):
        """
        Initialize the request handler.

        Args:
            server_config: Server configuration object
            file_handler: FileTransferHandler for /files/ requests; built
                from the configuration when a directory is configured
        """
        self.config = server_config
        self.logger = logging.getLogger('RequestHandler')

        if file_handler is None and server_config.directory:
            file_handler = FileTransferHandler.from_config(server_config)
        self.file_handler = file_handler

        self.router = Router({
            Route.ROOT: self.handle_root,
            Route.USER_AGENT: self.handle_user_agent,
            Route.ECHO: self.handle_echo,
            Route.FILES: self.file_handler or self.handle_no_directory,
            Route.NOT_FOUND: self.handle_not_found,
        })

        # Request statistics
        self._stats_lock = threading.Lock()
        self._stats = {
            'total_requests': 0,
            'status_2xx': 0,
            'status_4xx': 0,
            'status_5xx': 0,
            'aborted': 0
        }

    @property
    def stats(self):
        with self._stats_lock:
            return dict(self._stats)

    def _record(self, status_code):
        with self._stats_lock:
            self._stats['total_requests'] += 1
            if status_code is None:
                self._stats['aborted'] += 1
            else:
                self._stats[f"status_{status_code // 100}xx"] += 1

    def handle_request(self, client_socket, client_address):
        """
        Handle a single request on an accepted connection.

        The socket is closed before returning, whatever the outcome.

        Args:
            client_socket: Client socket object
            client_address: Client address tuple (ip, port)
        """
        start_time = time.time()
        client = f"{client_address[0]}:{client_address[1]}" if client_address else "-"
        writer = ResponseWriter(client_socket)
        request = None
        rfile = None

        try:
            rfile = client_socket.makefile('rb')

            try:
                request = read_request(rfile)
            except MalformedRequestError as e:
                self.logger.warning(f"Malformed request from {client}: {e}")
                writer.send(400)
                return

            self.router.dispatch(request, writer, rfile)

        except TransportError as e:
            self.logger.warning(f"Connection error with {client}: {e}")
        except Exception as e:
            self.logger.error(f"Error handling request from {client}: {e}")
            self.logger.debug(traceback.format_exc())
            if not writer.committed:
                try:
                    writer.send(500)
                except TransportError as send_error:
                    self.logger.warning(f"Connection error with {client}: {send_error}")
        finally:
            self._record(writer.status_code)
            elapsed = (time.time() - start_time) * 1000
            if request is not None:
                self.logger.info(
                    f"{client} - {request.method} {request.target} - "
                    f"{writer.status_code or 'aborted'} {writer.bytes_sent} bytes ({elapsed:.1f} ms)"
                )

            if rfile is not None:
                rfile.close()
            client_socket.close()

    def handle_root(self, request, writer, rfile):
        writer.send(200)

    def handle_user_agent(self, request, writer, rfile):
        body = request.header('User-Agent').encode(HEADER_ENCODING)
        writer.send(200, text_headers(body), body)

    def handle_echo(self, request, writer, rfile):
        """Echo the rest of the path, gzip-compressed if the client accepts it."""
        word = request.route_path[len(ECHO_PREFIX):]
        encoding = negotiate(request)
        body = encode_body(word.encode(HEADER_ENCODING), encoding)
        writer.send(200, text_headers(body, content_encoding=encoding), body)

    def handle_not_found(self, request, writer, rfile):
        writer.send(404)

    def handle_no_directory(self, request, writer, rfile):
        self.logger.error("No directory configured for /files/ requests")
        writer.send(500)
