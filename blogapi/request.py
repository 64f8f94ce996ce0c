#!/usr/bin/env python3

# The MIT License (MIT)
#
# Copyright (c) 2016 Benedikt Schmitt
#
# Permission is hereby granted, free of charge, to any person obtaining a copy
# of this software and associated documentation files (the "Software"), to deal
# in the Software without restriction, including without limitation the rights
# to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
# copies of the Software, and to permit persons to whom the Software is
# furnished to do so, subject to the following conditions:
#
# The above copyright notice and this permission notice shall be included in all
# copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
# IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
# FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
# AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
# LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
# OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.

"""
blogapi.request
===============

A framework independent HTTP request with some JSON API specific helpers. The
parent web framework creates a :class:`Request` and passes it to
:meth:`blogapi.api.API.handle_request`.
"""

__all__ = [
    "Request"
]

# std
import logging
import urllib.parse

# third party
from cached_property import cached_property
import rfc3986

# local
from .errors import BadRequest, UnsupportedMediaType
from .includes import parse_include


LOG = logging.getLogger(__name__)


class Request(object):
    """
    :arg str uri:
        The requested URI (path and query string, the scheme and host are
        optional).
    :arg str method:
        The HTTP method (*GET*, *POST*, ...)
    :arg dict headers:
        The HTTP request headers.
    :arg bytes body:
        The raw request body.
    :arg dict settings:
        A dictionary, which can be used by the API or handlers to attach
        request specific data (the authenticated *user* and *token*, ...).
    """

    def __init__(self, uri, method="GET", headers=None, body=b"", settings=None):
        self.uri = uri
        self.method = method.upper()
        self.headers = {
            key.lower(): value for key, value in (headers or {}).items()
        }
        self.body = body.encode("utf-8") if isinstance(body, str) else body
        self.settings = settings if settings is not None else dict()

        #: The :class:`~blogapi.api.API`, which handles this request. Set by
        #: the API.
        self.api = None

        #: The arguments encoded in the URL (``{"id": "my-post"}``). Set by
        #: the API after routing.
        self.japi_uri_arguments = dict()
        return None

    def __repr__(self):
        return "<Request {} {}>".format(self.method, self.uri)

    def get_header(self, name, default=None):
        return self.headers.get(name.lower(), default)

    @cached_property
    def parsed_uri(self):
        """
        The :attr:`uri` parsed with :func:`rfc3986.urlparse`.
        """
        return rfc3986.urlparse(self.uri)

    @property
    def path(self):
        return urllib.parse.unquote(self.parsed_uri.path or "")

    @cached_property
    def query(self):
        """
        A dictionary, which maps each query parameter to its value. If a
        parameter is given more than once, the last value wins.
        """
        pairs = urllib.parse.parse_qsl(
            self.parsed_uri.query or "", keep_blank_values=True
        )
        return dict(pairs)

    @cached_property
    def json(self):
        """
        The decoded JSON body.

        :raises ~blogapi.errors.BadRequest:
            If the body is not valid JSON.
        """
        if not self.body:
            return None

        try:
            return self.api.load_json(self.body.decode("utf-8"))
        except ValueError:
            detail = "The body does not contain valid JSON."
            raise BadRequest(detail=detail)

    @cached_property
    def japi_include(self):
        """
        The relationship names requested with the *include* query parameter,
        in the order they were given and without duplicates. They are not
        validated yet.

        :seealso: :func:`blogapi.includes.resolve_include`
        """
        return parse_include(self.query.get("include"))

    @property
    def bearer_token(self):
        """
        The token sent in the *Authorization* header with the *Bearer*
        scheme or *None*.
        """
        authorization = self.get_header("Authorization", "")
        scheme, _, token = authorization.partition(" ")
        if scheme.lower() != "bearer" or not token.strip():
            return None
        return token.strip()

    @property
    def user(self):
        """The authenticated user or *None*."""
        return self.settings.get("user")

    @property
    def token(self):
        """The personal access token used to authenticate the request."""
        return self.settings.get("token")

    def assert_jsonapi_content(self):
        """
        Asserts that the request body is a JSON API document.

        :raises ~blogapi.errors.UnsupportedMediaType:
        """
        content_type = self.get_header("Content-Type", "")
        if not content_type.startswith("application/vnd.api+json"):
            detail = "Expected 'application/vnd.api+json' as content type."
            raise UnsupportedMediaType(detail=detail)
        return None
