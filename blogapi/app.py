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
blogapi.app
===========

Wires the blog together: the store, the schemas and the authentication
endpoints.

.. code-block:: python3

    api = create_api({"debug": True})
    resp = api.handle_request(Request("/api/v1/articles?include=category"))
"""

__all__ = [
    "DEFAULT_SETTINGS",
    "BlogAPI",
    "create_api"
]

# std
import logging

# local
from . import auth
from .api import API
from .resources import ArticleSchema, CategorySchema, UserSchema
from .store import Store


LOG = logging.getLogger(__name__)


#: The default configuration. Every key can be overridden with the *settings*
#: passed to :func:`create_api`.
DEFAULT_SETTINGS = {
    # The prefix of all endpoints.
    "base_url": "/api/v1",

    # Pretty prints the JSON output and lets unexpected exceptions propagate.
    "debug": False,

    # The PBKDF2 iterations for new password hashes.
    "password_iterations": 260000,

    # The length of the random part of a plain text token.
    "token_length": 40
}


class BlogAPI(API):
    """
    The :class:`~blogapi.api.API` of the blog. Requests are authenticated
    with the bearer token before they are handled.

    :arg ~blogapi.store.Store store:
        The data store.
    """

    def __init__(self, store, **kargs):
        super().__init__(**kargs)
        self.store = store
        return None

    def prepare_request(self, request):
        super().prepare_request(request)
        user, token = auth.authenticate(self.store, request)
        request.settings["user"] = user
        request.settings["token"] = token
        return None


def create_api(settings=None, store=None):
    """
    Creates the :class:`BlogAPI` with all endpoints.

    :arg dict settings:
        Overrides for :data:`DEFAULT_SETTINGS`.
    :arg ~blogapi.store.Store store:
        The data store. A new, empty store is created if not given.
    :rtype: BlogAPI
    """
    config = dict(DEFAULT_SETTINGS)
    config.update(settings or {})

    store = store if store is not None else Store()
    api = BlogAPI(
        store=store,
        uri=config["base_url"],
        debug=config["debug"],
        settings=config
    )

    api.add_schema(CategorySchema(store))
    api.add_schema(ArticleSchema(store))
    api.add_schema(UserSchema(store))

    api.add_handler("register", "/register", auth.RegisterHandler(store=store))
    api.add_handler("login", "/login", auth.LoginHandler(store=store))
    api.add_handler("logout", "/logout", auth.LogoutHandler(store=store))

    LOG.debug("Created the API with the types %s.", api.get_typenames())
    return api
