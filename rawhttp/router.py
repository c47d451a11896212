#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Routing Module
--------------
Classifies a route path into one of the server's handlers. Rules are
checked in a fixed order and the first match wins.
"""

from enum import Enum


class Route(Enum):
    ROOT = 'root'
    USER_AGENT = 'user-agent'
    ECHO = 'echo'
    FILES = 'files'
    NOT_FOUND = 'not-found'


ECHO_PREFIX = 'echo/'
FILES_PREFIX = 'files/'

# (route, predicate) pairs in priority order
ROUTE_RULES = (
    (Route.ROOT, lambda path: path == ''),
    (Route.USER_AGENT, lambda path: path == 'user-agent'),
    (Route.ECHO, lambda path: path.startswith(ECHO_PREFIX)),
    (Route.FILES, lambda path: path.startswith(FILES_PREFIX)),
)


def classify(route_path):
    """
    Classify a route path.

    Args:
        route_path: Slash-trimmed request target

    Returns:
        Route: The first matching route, or Route.NOT_FOUND
    """
    for route, matches in ROUTE_RULES:
        if matches(route_path):
            return route
    return Route.NOT_FOUND


class Router:
    """
    Dispatches requests to handlers registered per route.

    Handlers are called as handler(request, writer, rfile). Routes without a
    registered handler fall back to the NOT_FOUND handler.
    """

    def __init__(self, handlers=None):
        self._handlers = {}
        for route, handler in (handlers or {}).items():
            self.add_handler(route, handler)

    def add_handler(self, route, handler):
        self._handlers[route] = handler

    def resolve(self, route_path):
        """
        Return the route and handler for a route path.

        Raises:
            KeyError: If neither the route nor NOT_FOUND has a handler
        """
        route = classify(route_path)
        handler = self._handlers.get(route)
        if handler is None:
            handler = self._handlers[Route.NOT_FOUND]
        return route, handler

    def dispatch(self, request, writer, rfile):
        route, handler = self.resolve(request.route_path)
        handler(request, writer, rfile)
        return route
