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
blogapi.router
==============

Maps the URL paths below the base URL to their request handlers and builds
the URLs of the JSON API endpoints. Each schema gets four kinds of
endpoints::

    /api/v1/articles                            collection
    /api/v1/articles/{id}                       resource
    /api/v1/articles/{id}/relationships/author  relationship
    /api/v1/articles/{id}/author                related

Other endpoints (``/login``, ...) are added with :meth:`Router.add_url`.

:seealso: http://jsonapi.org/recommendations/#urls
"""

__all__ = [
    "Route",
    "Router"
]

# std
import collections
import logging
import re


LOG = logging.getLogger(__name__)


#: A compiled route. *template* is a :meth:`str.format` template for building
#: the URL and *regex* matches the requested path.
Route = collections.namedtuple("Route", ["name", "regex", "template", "handler"])


class Router(object):
    """
    :arg str base_url:
        The prefix of all endpoints (``/api/v1``).
    :arg ~blogapi.api.API api:
        The API which owns this router.
    """

    #: A parameter in a path: ``{id}`` or with a custom regex ``{id:[0-9]+}``.
    PARAM_RE = re.compile(r"\{(?P<name>[A-Za-z_][A-Za-z0-9_]*)(?::(?P<re>[^}]+))?\}")

    #: The paths of the schema endpoints, relative to the base URL.
    ENDPOINTS = {
        "collection": "/{type}",
        "resource": "/{type}/{{id}}",
        "relationship": "/{type}/{{id}}/relationships/{relname}",
        "related": "/{type}/{{id}}/{relname}"
    }

    def __init__(self, base_url, api=None):
        """ """
        self.api = api
        self.base_url = base_url.rstrip("/")

        # name to route, in registration order
        self._routes = collections.OrderedDict()
        return None

    def _compile(self, path):
        """
        Returns the regex matching the absolute *path* and the template for
        building it.
        """
        regex = ""
        template = ""
        index = 0
        for param in self.PARAM_RE.finditer(path):
            literal = path[index:param.start()]
            regex += re.escape(literal) + "(?P<{}>{})".format(
                param.group("name"), param.group("re") or "[^/]+"
            )
            template += literal + "{" + param.group("name") + "}"
            index = param.end()

        regex += re.escape(path[index:])
        template += path[index:]
        return (re.compile(regex), template)

    def add_url(self, name, path, handler):
        """
        Routes the *path* below the base URL to the *handler*::

            router.add_url("login", "/login", LoginHandler(store))

        :arg str name:
            The unique name of the endpoint, used by :meth:`url`.
        :arg str path:
            The path relative to the base URL, may contain parameters.
        :arg ~blogapi.handler.Handler handler:
        """
        assert name not in self._routes, name
        handler.init_api(self.api)

        regex, template = self._compile(self.base_url + path)
        self._routes[name] = Route(name, regex, template, handler)
        LOG.debug("Routed '%s' to %s.", template, name)
        return None

    def url(self, name, **params):
        """Builds the URL of the endpoint *name* with the path *params*."""
        return self._routes[name].template.format(**params)

    def get_handler(self, path):
        """
        Returns the two tuple ``(params, handler)`` of the route matching the
        absolute *path* or *None*::

            params, handler = router.get_handler("/api/v1/articles/my-post")
        """
        for route in self._routes.values():
            m = route.regex.fullmatch(path)
            if m:
                return (m.groupdict(), route.handler)
        return None

    # Schema endpoints
    # ----------------

    @staticmethod
    def endpoint_name(kind, type, relname=""):
        """``articles-collection``, ``articles-related-author``, ..."""
        return "-".join(part for part in (type, kind, relname) if part)

    def add_endpoint(self, kind, handler, type, relname=""):
        """
        Adds a schema endpoint::

            router.add_endpoint("related", handler, "articles", "author")

        :arg str kind:
            A key of :attr:`ENDPOINTS`.
        """
        path = self.ENDPOINTS[kind].format(type=type, relname=relname)
        name = self.endpoint_name(kind, type, relname)
        return self.add_url(name, path, handler)

    def endpoint_url(self, kind, type, id=None, relname=""):
        """
        Builds the URL of a schema endpoint::

            >>> router.endpoint_url("relationship", "articles", "hello", "author")
            '/api/v1/articles/hello/relationships/author'
        """
        name = self.endpoint_name(kind, type, relname)
        if kind == "collection":
            return self.url(name)
        return self.url(name, id=id)
