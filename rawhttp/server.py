#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Raw HTTP Server Main Module
---------------------------
Listens on a TCP socket and hands every accepted connection to a worker
thread from a bounded pool. Each worker serves exactly one request.
"""

import socket
import threading
import time
import logging
from concurrent.futures import ThreadPoolExecutor

from .config import ServerConfig
from .handler import RequestHandler
from .utils import check_hostname_availability


class WebServer:
    """
    Web server class that accepts connections and dispatches them to the
    request handler.
    """

    ACCEPT_POLL_INTERVAL = 0.5

    def __init__(self, config=None, request_handler=None):
        """
        Initialize the web server.

        Args:
            config: ServerConfig instance (default: all defaults)
            request_handler: RequestHandler to use (default: built from config)
        """
        self.config = config or ServerConfig()
        self.logger = logging.getLogger('WebServer')

        self.request_handler = request_handler or RequestHandler(self.config)

        # Server state
        self.server_socket = None
        self.is_running = False
        self.start_time = None
        self._accept_thread = None
        self.thread_pool = None

        # Active connections tracking
        self.active_connections = 0
        self.active_connections_lock = threading.Lock()
        self.client_sockets = set()

    @property
    def address(self):
        """The (host, port) the server is bound to, or None before start()."""
        if self.server_socket is None:
            return None
        return self.server_socket.getsockname()[:2]

    def start(self):
        """
        Bind the listening socket and start the accept loop.

        Returns:
            bool: True if the server started, False otherwise
        """
        if self.is_running:
            self.logger.warning("Server is already running")
            return True

        if not check_hostname_availability(self.config.host, self.config.port):
            self.logger.error(f"Address {self.config.host}:{self.config.port} is already in use")
            return False

        try:
            self.server_socket = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
            self.server_socket.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            self.server_socket.bind((self.config.host, self.config.port))
            self.server_socket.listen(self.config.connection_queue)
            # Lets the accept loop notice shutdown()
            self.server_socket.settimeout(self.ACCEPT_POLL_INTERVAL)
        except OSError as e:
            self.logger.error(f"Error starting server: {e}")
            if self.server_socket:
                self.server_socket.close()
                self.server_socket = None
            return False

        self.thread_pool = ThreadPoolExecutor(
            max_workers=self.config.max_threads,
            thread_name_prefix="WebServerWorker"
        )
        self.is_running = True
        self.start_time = time.time()

        host, port = self.address
        self.logger.info(f"Server started and bound to http://{host}:{port}")
        if self.config.directory:
            self.logger.info(f"Serving files from {self.config.directory}")
        else:
            self.logger.info("No directory configured, /files/ requests will fail")

        self._accept_thread = threading.Thread(
            target=self._accept_connections,
            name="WebServerAccept",
            daemon=True
        )
        self._accept_thread.start()
        return True

    def shutdown(self):
        """
        Shut down the web server gracefully.

        Open client connections are shut down so that workers blocked on a
        read return; requests already being answered may be cut short.
        """
        if not self.is_running:
            return

        self.logger.info("Shutting down server...")
        self.is_running = False

        if self._accept_thread:
            self._accept_thread.join(timeout=5)
            self._accept_thread = None

        if self.server_socket:
            self.server_socket.close()
            self.server_socket = None

        with self.active_connections_lock:
            open_sockets = list(self.client_sockets)
        for client_socket in open_sockets:
            try:
                client_socket.shutdown(socket.SHUT_RDWR)
            except OSError as e:
                # Already closed by its worker
                self.logger.debug(f"Could not shut down client socket: {e}")

        self.logger.debug("Shutting down thread pool...")
        self.thread_pool.shutdown(wait=True)

        self.logger.info(f"Server shutdown complete, {self.request_handler.stats['total_requests']} requests served")

    def _accept_connections(self):
        """
        Accept incoming connections.
        """
        server_socket = self.server_socket
        while self.is_running:
            try:
                client_socket, client_address = server_socket.accept()
            except (socket.timeout, ConnectionError):
                # Non-fatal errors, continue accepting connections
                continue
            except OSError as e:
                if self.is_running:
                    self.logger.error(f"Error accepting connection: {e}")
                    # Sleep a bit to prevent CPU spinning on repeated errors
                    time.sleep(0.1)
                    continue
                break

            client_socket.settimeout(self.config.request_timeout)

            with self.active_connections_lock:
                self.active_connections += 1
                self.client_sockets.add(client_socket)

            try:
                self.thread_pool.submit(self._handle_client, client_socket, client_address)
            except RuntimeError:
                # Pool already shut down
                client_socket.close()
                with self.active_connections_lock:
                    self.active_connections -= 1
                    self.client_sockets.discard(client_socket)
                break

    def _handle_client(self, client_socket, client_address):
        """
        Handle client connection.

        Args:
            client_socket: Client socket object
            client_address: Client address tuple (ip, port)
        """
        try:
            self.request_handler.handle_request(client_socket, client_address)
        except Exception as e:
            self.logger.error(f"Error handling client {client_address}: {e}")
        finally:
            with self.active_connections_lock:
                self.active_connections -= 1
                self.client_sockets.discard(client_socket)
            client_socket.close()

    def wait_for_shutdown(self):
        """
        Wait for server shutdown (can be called after start() to keep the main thread alive).
        """
        try:
            while self.is_running:
                time.sleep(1)
        except KeyboardInterrupt:
            self.logger.info("Received keyboard interrupt, shutting down...")
            self.shutdown()

    def serve_forever(self):
        """Start the server and block until it is shut down."""
        if not self.start():
            return False
        try:
            self.wait_for_shutdown()
        finally:
            self.shutdown()
        return True

    @property
    def stats(self):
        """
        Get server statistics.

        Returns:
            dict: Server statistics
        """
        uptime = time.time() - self.start_time if self.start_time else 0
        stats = self.request_handler.stats
        stats.update({
            'uptime': uptime,
            'active_connections': self.active_connections,
            'requests_per_second': stats['total_requests'] / max(1, uptime)
        })
        return stats
