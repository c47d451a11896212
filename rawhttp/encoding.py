#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Content Encoding Negotiation
----------------------------
Decides whether a response body is gzip-compressed. The Accept-Encoding
value is split on single spaces and a trailing comma is stripped from each
token, so "gzip, deflate" and "deflate gzip" both select gzip. Quality
values are not interpreted.
"""

import gzip

GZIP = 'gzip'


def accepts_gzip(accept_encoding):
    """
    Check whether an Accept-Encoding value lists gzip.

    Args:
        accept_encoding: Raw header value, possibly empty

    Returns:
        bool: True if one of the tokens is exactly "gzip"
    """
    for token in accept_encoding.split(' '):
        if token.endswith(','):
            token = token[:-1]
        if token == GZIP:
            return True
    return False


def negotiate(request):
    """Return the content encoding to use for a request, or None."""
    if accepts_gzip(request.header('Accept-Encoding')):
        return GZIP
    return None


def encode_body(body, encoding):
    """
    Apply a content encoding to a fully buffered body.

    Args:
        body: Body bytes
        encoding: "gzip" or None

    Returns:
        bytes: A complete gzip stream, or the body unchanged
    """
    if encoding == GZIP:
        return gzip.compress(body)
    return body
