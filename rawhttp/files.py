#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
File Transfer Module
--------------------
Serves GET and POST requests under /files/ from a single root directory.

- GET streams the file to the client in fixed-size chunks.
- POST reads exactly Content-Length bytes from the connection in
  fixed-size chunks and writes them to the file as they arrive.

Memory per request is bounded by the chunk size in both directions.

Content-Length must be a plain run of digits: a negative length such as
"-5" is answered with 400 Bad Request rather than an empty 201.
"""

import os
import re
import logging

from .router import FILES_PREFIX
from .utils import is_path_safe, human_readable_size

DEFAULT_CHUNK_SIZE = 4096

CONTENT_LENGTH_RE = re.compile(r'[0-9]+')


class FileTransferHandler:
    """
    Handles /files/<name> requests against a root directory.
    """

    def __init__(self, root, chunk_size=DEFAULT_CHUNK_SIZE, allow_traversal=False):
        """
        Initialize the file handler.

        Args:
            root: Root directory; names are appended to it directly
            chunk_size: Size of each read and write in bytes
            allow_traversal: Serve names that resolve outside the root
        """
        self.root = os.path.join(root, '')
        self.chunk_size = chunk_size
        self.allow_traversal = allow_traversal
        self.logger = logging.getLogger('FileTransfer')

    @classmethod
    def from_config(cls, config):
        return cls(
            config.directory,
            chunk_size=config.chunk_size,
            allow_traversal=config.allow_path_traversal
        )

    def resolve(self, route_path):
        """
        Map a route path to a file path.

        Args:
            route_path: Route path starting with "files/"

        Returns:
            str: The file path, or None if the name escapes the root
        """
        name = route_path[len(FILES_PREFIX):]
        file_path = self.root + name

        if not self.allow_traversal and not is_path_safe(self.root, file_path):
            self.logger.warning(f"Rejected path outside root: {name!r}")
            return None

        return file_path

    def __call__(self, request, writer, rfile):
        file_path = self.resolve(request.route_path)
        if file_path is None:
            writer.send(404)
            return

        if request.method == 'GET':
            self.send_file(file_path, writer)
        elif request.method == 'POST':
            self.receive_file(file_path, request, writer, rfile)
        else:
            writer.send(404)

    def send_file(self, file_path, writer):
        """
        Stream a file to the client.

        Args:
            file_path: Path of the file to send
            writer: ResponseWriter for the connection
        """
        try:
            f = open(file_path, 'rb')
        except (OSError, ValueError) as e:
            self.logger.debug(f"Cannot open {file_path}: {e}")
            writer.send(404)
            return

        with f:
            try:
                size = os.fstat(f.fileno()).st_size
            except OSError as e:
                self.logger.error(f"Error getting file metadata {file_path}: {e}")
                writer.send(500)
                return

            writer.start(200, [
                ('Content-Type', 'application/octet-stream'),
                ('Content-Length', str(size)),
            ])

            while True:
                chunk = f.read(self.chunk_size)
                if not chunk:
                    break
                writer.write(chunk)

        self.logger.debug(f"Sent {file_path} ({human_readable_size(size)})")

    def receive_file(self, file_path, request, writer, rfile):
        """
        Write the request body to a file.

        Args:
            file_path: Path of the file to create or truncate
            request: Parsed request head
            writer: ResponseWriter for the connection
            rfile: Buffered reader positioned at the start of the body
        """
        content_length = request.header('Content-Length').strip()
        if not CONTENT_LENGTH_RE.fullmatch(content_length):
            self.logger.warning(f"Invalid Content-Length {content_length!r} for {file_path}")
            writer.send(400)
            return

        remaining = int(content_length)

        try:
            f = open(file_path, 'wb')
        except (OSError, ValueError) as e:
            self.logger.error(f"Error creating file {file_path}: {e}")
            writer.send(500)
            return

        received = 0
        with f:
            while remaining > 0:
                try:
                    chunk = rfile.read1(min(self.chunk_size, remaining))
                except OSError as e:
                    self.logger.error(f"Error reading request body for {file_path}: {e}")
                    writer.send(500)
                    return

                # Short bodies are accepted as they are
                if not chunk:
                    break

                try:
                    f.write(chunk)
                except OSError as e:
                    self.logger.error(f"Error writing file {file_path}: {e}")
                    writer.send(500)
                    return

                received += len(chunk)
                remaining -= len(chunk)

        if remaining > 0:
            self.logger.warning(f"Body for {file_path} ended {remaining} bytes early")

        self.logger.debug(f"Stored {file_path} ({human_readable_size(received)})")
        writer.send(201)
