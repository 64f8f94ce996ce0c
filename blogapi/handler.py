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
blogapi.handler
===============

The base class for all request handlers. A handler implements one method per
supported HTTP verb (:meth:`~Handler.get`, :meth:`~Handler.post`, ...) and
returns either a :class:`~blogapi.response.Response` or a
:class:`~blogapi.document.Document`, which is serialized by the API.

Handlers are shared between threads. They never store the request on
themselves, :attr:`Handler.request` is looked up in the request context of the
API.
"""

__all__ = [
    "Handler"
]

# std
import logging

# local
from .errors import MethodNotAllowed, Unauthorized, Forbidden


LOG = logging.getLogger(__name__)


class Handler(object):
    """
    :arg ~blogapi.api.API api:
        The API, which owns this handler.
    """

    #: The HTTP methods a handler may implement.
    METHODS = ("get", "post", "patch", "delete")

    def __init__(self, api=None):
        self.api = api
        return None

    def init_api(self, api):
        """Binds the handler to the *api*. Called by the router."""
        assert self.api is None or self.api is api
        self.api = api
        return None

    @property
    def request(self):
        """The currently handled :class:`~blogapi.request.Request`."""
        return self.api.current_request

    @property
    def allowed_methods(self):
        return [
            method.upper() for method in self.METHODS if hasattr(self, method)
        ]

    def handle(self, request):
        """
        Dispatches the *request* to the method handler.

        :raises ~blogapi.errors.MethodNotAllowed:
        """
        method = request.method.lower()
        f = getattr(self, method, None) if method in self.METHODS else None
        if f is None:
            detail = "This endpoint only supports: {}."\
                .format(", ".join(self.allowed_methods))
            raise MethodNotAllowed(detail=detail)
        return f()

    # Authentication
    # --------------

    def require_user(self):
        """
        Returns the authenticated user.

        :raises ~blogapi.errors.Unauthorized:
            If the request is not authenticated.
        """
        user = self.request.user
        if user is None:
            raise Unauthorized(detail="Unauthenticated.")
        return user

    def require_ability(self, ability):
        """
        Asserts that the request is authenticated with a token, which has
        the *ability*.

        :raises ~blogapi.errors.Unauthorized:
        :raises ~blogapi.errors.Forbidden:
        """
        user = self.require_user()
        token = self.request.token
        if token is None or not token.can(ability):
            LOG.info("User '%s' lacks the ability '%s'.", user.pk, ability)
            raise Forbidden(detail="This action is unauthorized.")
        return user
