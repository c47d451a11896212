#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Raw Socket HTTP Server
----------------------
Command line entry point: parses flags, validates the configuration and
serves until interrupted.
"""

import sys
import signal
import logging

from rawhttp.config import ServerConfig
from rawhttp.exceptions import ConfigError
from rawhttp.server import WebServer
from rawhttp.utils import setup_logging


def main(args=None):
    """
    Main entry point for the server.
    """
    try:
        config = ServerConfig.from_args(args)
        config.validate()
    except ConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    setup_logging(
        log_level=config.log_level,
        log_file=config.log_file,
        use_colored_logging=config.colored_logging
    )
    logger = logging.getLogger('main')

    server = WebServer(config)

    def _signal_handler(sig, frame):
        logger.info(f"Received signal {sig}, shutting down...")
        server.shutdown()

    signal.signal(signal.SIGINT, _signal_handler)
    signal.signal(signal.SIGTERM, _signal_handler)

    if not server.serve_forever():
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
