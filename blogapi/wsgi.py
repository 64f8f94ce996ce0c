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
blogapi.wsgi
============

Integrates an :class:`~blogapi.api.API` in any WSGI server. The WSGI
*environ* is parsed with :mod:`werkzeug`:

.. code-block:: python3

    application = create_app({"base_url": "/api/v1"})
"""

__all__ = [
    "Application",
    "create_app"
]

# std
import logging
import urllib.parse

# third party
import werkzeug.wrappers

# local
from .app import create_api
from .request import Request


LOG = logging.getLogger(__name__)


class Application(object):
    """
    A WSGI application, which passes all requests to the *api*.

    :arg ~blogapi.api.API api:
    """

    def __init__(self, api):
        self.api = api
        return None

    def create_request(self, environ):
        """
        Creates a :class:`~blogapi.request.Request` from the WSGI *environ*.

        :class:`werkzeug.wrappers.Request` decodes the path. It is quoted
        again, because :attr:`blogapi.request.Request.path` expects the URI
        form.
        """
        wrequest = werkzeug.wrappers.Request(environ)

        uri = urllib.parse.quote(wrequest.script_root + wrequest.path)
        if wrequest.query_string:
            uri += "?" + wrequest.query_string.decode("latin-1")

        return Request(
            uri=uri,
            method=wrequest.method,
            headers=dict(wrequest.headers),
            body=wrequest.get_data()
        )

    def __call__(self, environ, start_response):
        request = self.create_request(environ)
        resp = self.api.handle_request(request)

        wresponse = werkzeug.wrappers.Response(
            resp.body, status=resp.status, headers=resp.headers
        )
        return wresponse(environ, start_response)


def create_app(settings=None, store=None):
    """
    Creates the blog API and wraps it in an :class:`Application`.

    :seealso: :func:`blogapi.app.create_api`
    """
    return Application(create_api(settings=settings, store=store))
