#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Configuration Module for the Raw HTTP Server
--------------------------------------------
Handles loading server configuration from various sources:
- Default configuration
- Configuration file (JSON)
- Command-line arguments

A ServerConfig is built once at startup and is read-only afterwards; the
same instance is handed to every component that needs it.
"""

import os
import json
import logging
import argparse

from .exceptions import ConfigError


class ServerConfig:
    """
    Server configuration.

    Values are resolved with the following precedence (highest to lowest):
    1. Keyword arguments (command-line flags)
    2. Configuration file
    3. Default values
    """

    DEFAULT_CONFIG = {
        "host": "0.0.0.0",
        "port": 4221,
        "directory": None,
        "log_level": "INFO",
        "log_file": None,
        "colored_logging": True,
        "max_threads": 64,
        "request_timeout": None,  # None blocks without a deadline
        "connection_queue": 128,
        "chunk_size": 4096,
        "allow_path_traversal": False,
    }

    def __init__(self, config_file=None, **kwargs):
        """
        Initialize the configuration with values from file and kwargs.

        Args:
            config_file: Path to a JSON configuration file
            **kwargs: Configuration parameters that override file values

        Raises:
            ConfigError: If the file cannot be read or a key is unknown
        """
        self._config = self.DEFAULT_CONFIG.copy()
        self.logger = logging.getLogger('ServerConfig')

        if config_file:
            self._merge(self._load_file(config_file))

        self._merge(kwargs)

        directory = self._config['directory']
        if directory:
            # Files are addressed as root + name, so the root ends with a separator
            self._config['directory'] = os.path.join(os.path.abspath(directory), '')

    def _load_file(self, config_path):
        try:
            with open(config_path, 'r') as f:
                file_config = json.load(f)
        except (OSError, ValueError) as e:
            raise ConfigError(f"Error loading configuration from {config_path}: {e}") from e

        if not isinstance(file_config, dict):
            raise ConfigError(f"Configuration file {config_path} must contain a JSON object")

        self.logger.info(f"Loaded configuration from {config_path}")
        return file_config

    def _merge(self, values):
        unknown = sorted(set(values) - set(self.DEFAULT_CONFIG))
        if unknown:
            raise ConfigError(f"Unknown configuration keys: {', '.join(unknown)}")
        self._config.update(values)

    @classmethod
    def from_args(cls, args=None):
        """
        Build a configuration from command line arguments.

        Args:
            args: Command line arguments to parse (default: None, uses sys.argv)

        Returns:
            ServerConfig: Configuration instance
        """
        parser = argparse.ArgumentParser(description='Raw socket HTTP/1.1 server')
        parser.add_argument('--directory', type=str,
                            help='Root directory for /files/ requests')
        parser.add_argument('--host', type=str, help='Host address to bind to')
        parser.add_argument('-p', '--port', type=int, help='Port to listen on')
        parser.add_argument('-c', '--config', type=str, help='Path to JSON configuration file')
        parser.add_argument('--log-level', type=str,
                            choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
                            help='Logging level')
        parser.add_argument('--log-file', type=str, help='Path to log file')
        parser.add_argument('--no-color', action='store_true', help='Disable colored logging')
        parser.add_argument('--max-threads', type=int, help='Maximum number of worker threads')
        parser.add_argument('--request-timeout', type=float,
                            help='Per-connection socket timeout in seconds')
        parser.add_argument('--allow-path-traversal', action='store_true',
                            help='Do not reject /files/ names that escape the directory')

        parsed_args = parser.parse_args(args)

        overrides = {
            key: value for key, value in vars(parsed_args).items()
            if value is not None and key in cls.DEFAULT_CONFIG
        }
        if parsed_args.no_color:
            overrides['colored_logging'] = False
        if not parsed_args.allow_path_traversal:
            overrides.pop('allow_path_traversal', None)

        return cls(config_file=parsed_args.config, **overrides)

    def validate(self):
        """
        Check settings that must hold before the server starts.

        Raises:
            ConfigError: If the configuration cannot be served
        """
        directory = self.directory
        if directory is not None and not os.path.isdir(directory):
            raise ConfigError(f"Directory {directory} does not exist")

        if not 0 <= self.port <= 65535:
            raise ConfigError(f"Invalid port: {self.port}")

        if self.max_threads < 1:
            raise ConfigError("max_threads must be at least 1")

        if self.chunk_size < 1:
            raise ConfigError("chunk_size must be at least 1")

    def get(self, key, default=None):
        """
        Get a configuration value.

        Args:
            key: Configuration key
            default: Default value if key is not found

        Returns:
            Value for the key or default if not found
        """
        return self._config.get(key, default)

    @property
    def host(self):
        return self.get('host')

    @property
    def port(self):
        return self.get('port')

    @property
    def directory(self):
        return self.get('directory')

    @property
    def log_level(self):
        return self.get('log_level')

    @property
    def log_file(self):
        return self.get('log_file')

    @property
    def colored_logging(self):
        return self.get('colored_logging')

    @property
    def max_threads(self):
        return self.get('max_threads')

    @property
    def request_timeout(self):
        return self.get('request_timeout')

    @property
    def connection_queue(self):
        return self.get('connection_queue')

    @property
    def chunk_size(self):
        return self.get('chunk_size')

    @property
    def allow_path_traversal(self):
        return self.get('allow_path_traversal')
