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
blogapi.api
===========

The :class:`~blogapi.api.API` class is the piece, which puts all components
together. It sets up the request context and allows you to encode resources
easily.

By overriding the :meth:`API.handle_request` method, it can be easily integrated
in other web frameworks.
"""

# std
import contextlib
import json
import logging
import threading

# local
from . import version
from .document import Document
from .errors import (
    NotFound, Error, ErrorList, InternalServerError, error_to_response
)
from .response import Response
from .router import Router
from .schema import handler as schema_handler
from .utilities import jsonapi_id_tuple, Symbol


__all__ = [
    "API"
]


LOG = logging.getLogger(__name__)

ARG_DEFAULT = Symbol("ARG_DEFAULT")


class API(object):
    """
    This class is responsible for the request dispatching. It knows all
    schemas and api endpoints.

    :arg str uri:
        The base URL for all API endpoints.
    :arg bool debug:
        If true, unexpected exceptions are not caught and the JSON output is
        pretty printed.
    :arg dict settings:
        A dictionary, which can be used by extensions for configuration stuff.
    """

    def __init__(self, uri="/api", debug=False, settings=None):
        """ """
        #: When *debug* is *True*, the api is more verbose and unexpected
        #: exceptions are not caught.
        self.debug = debug

        #: A dictionary, which can be used to store configuration values
        #: or data for extensions.
        self.settings = settings or {}
        assert isinstance(self.settings, dict)

        #: The :class:`~blogapi.router.Router` used to determine the URLs
        #: for relationships, collections, ...
        #: Feel free to add your own handlers to the router.
        self.router = Router(base_url=uri, api=self)

        #: The global jsonapi object, which is added to each response.
        #:
        #: :seealso: http://jsonapi.org/format/#document-jsonapi-object
        self.jsonapi_object = dict()
        self.jsonapi_object["version"] = version.jsonapi_version

        # typename to schema
        self._schema_by_type = {}

        # resource class to schema
        self._schema_by_resource_class = {}

        # The request, which is currently handled by this thread.
        self._request_local = threading.local()
        return None

    def dump_json(self, obj):
        """
        Serializes the Python object *obj* to a JSON string.

        You *can* override this method.
        """
        indent = 4 if self.debug else None
        sort_keys = self.debug
        return json.dumps(obj, indent=indent, sort_keys=sort_keys)

    def load_json(self, obj):
        """
        Decodes the JSON string *obj* and returns a corresponding Python object.

        You *can* override this method.
        """
        return json.loads(obj)

    def json_response(self, obj, *, status=200, headers=None):
        """
        Creates a JSON API response with the document *obj*. The global
        :attr:`jsonapi_object` is added to the document.
        """
        obj = dict(obj)
        obj.setdefault("jsonapi", self.jsonapi_object)

        resp_headers = {"Content-Type": "application/vnd.api+json"}
        resp_headers.update(headers or {})
        return Response(
            status=status, headers=resp_headers, body=self.dump_json(obj)
        )

    # Schemas
    # -------

    def get_schema(self, o, default=ARG_DEFAULT):
        """
        Returns the :class:`~blogapi.schema.schema.Schema` associated with *o*.
        *o* must be either a typename, a resource class or resource object.

        :arg o:
            A typename, resource object or a resource class
        :arg default:
            Returned if no schema for *o* is found.
        :raises KeyError:
            If no schema for *o* is found and no *default* value is given.
        :rtype: ~blogapi.schema.schema.Schema
        """
        if isinstance(o, str):
            schema = self._schema_by_type.get(o)
        elif isinstance(o, type):
            schema = self._schema_by_resource_class.get(o)
        else:
            schema = self._schema_by_resource_class.get(type(o))

        if schema is not None:
            return schema
        if default is not ARG_DEFAULT:
            return default
        raise KeyError(o)

    def get_typenames(self):
        """
        :rtype: list
        :returns: A list with all typenames known to the API.
        """
        return list(self._schema_by_type.keys())

    @property
    def allowed_includes(self):
        """
        Maps each typename to the relationship names, which may be included
        in a compound document::

            >>> api.allowed_includes
            {"articles": frozenset({"category", "author"}), ...}
        """
        return {
            typename: schema.allowed_includes
            for typename, schema in self._schema_by_type.items()
        }

    def add_schema(self, schema, add_handlers=True):
        """
        Adds a schema to the API. This method will call
        :meth:`~blogapi.schema.schema.Schema.init_api`, which binds the schema
        instance to the API.

        :arg ~blogapi.schema.schema.Schema schema:
        :arg bool add_handlers:
            If *true*, the request handlers for this schema are created
            automatic.
        """
        if schema.resource_class is None:
            LOG.warning(
                "The schema '%s' is not bound to a resource class.",
                schema.type
            )

        schema.init_api(self)
        self._schema_by_type[schema.type] = schema
        if schema.resource_class:
            self._schema_by_resource_class[schema.resource_class] = schema

        if add_handlers:
            handler = schema_handler.Collection(schema=schema)
            self.router.add_endpoint("collection", handler, schema.type)

            handler = schema_handler.Resource(schema=schema)
            self.router.add_endpoint("resource", handler, schema.type)

            for relname, field in schema.japi_relationships.items():
                handler = schema_handler.Relationship(
                    schema=schema, relname=relname
                )
                self.router.add_endpoint(
                    "relationship", handler, schema.type, relname
                )

                if field.to_one:
                    handler = schema_handler.ToOneRelated(
                        schema=schema, relname=relname
                    )
                else:
                    handler = schema_handler.ToManyRelated(
                        schema=schema, relname=relname
                    )
                self.router.add_endpoint(
                    "related", handler, schema.type, relname
                )
        return None

    def add_handler(self, name, path, handler):
        """
        Adds a custom endpoint below the base URL::

            api.add_handler("login", "/login", LoginHandler())
        """
        return self.router.add_url(name, path, handler)

    # Utilities
    # ---------

    def ensure_identifier_object(self, resource):
        """
        Returns the identifier object of the *resource* or *None*:

        .. code-block:: python3

            {
                "type": "categories",
                "id": "news"
            }

        :seealso: http://jsonapi.org/format/#document-resource-identifier-objects
        """
        if resource is None:
            return None
        return dict(self.ensure_identifier(resource)._asdict())

    def ensure_identifier(self, resource):
        """
        Does the same as :meth:`ensure_identifier_object`, but returns the two
        tuple ``(typename, id)``.
        """
        schema = self.get_schema(resource)
        return jsonapi_id_tuple(schema.type, schema.id(resource))

    def resource_uri(self, resource):
        """Returns the URL of the *resource* endpoint."""
        schema = self.get_schema(resource)
        return self.router.endpoint_url(
            "resource", schema.type, schema.id(resource)
        )

    # Request handling
    # ----------------

    @property
    def current_request(self):
        """
        The currently handled :class:`~blogapi.request.Request`.
        """
        return getattr(self._request_local, "request", None)

    @contextlib.contextmanager
    def request_context(self, request):
        """
        Contextmanager for changing the current request context::

            with api.request_context(request):
                pass
        """
        assert request.api is None or request.api is self
        request.api = self

        old = self.current_request
        self._request_local.request = request
        try:
            yield
        finally:
            self._request_local.request = old
        return None

    def prepare_request(self, request):
        """
        Called, before the :meth:`~blogapi.handler.Handler.handle`
        method of the request handler.

        You *can* override this method to modify the request. (Add some
        settings, headers, the authenticated user...).

        .. code-block:: python3

            def prepare_request(self, request):
                super().prepare_request(request)
                request.settings["user"] = current_user
                return None
        """
        return None

    def handle_request(self, request):
        """
        Handles a request and returns a response object.

        This method should be overridden for integration in other frameworks.
        It is the **entry point** for all requests handled by this API instance.

        :arg ~blogapi.request.Request request:
            The request which should be handled.

        :rtype: ~blogapi.response.Response
        """
        LOG.debug("Handling %r.", request)
        with self.request_context(request):
            try:
                self.prepare_request(request)

                match = self.router.get_handler(request.path)
                if match is None:
                    detail = "The URL '{}' does not exist.".format(request.path)
                    raise NotFound(detail=detail)

                request.japi_uri_arguments, handler = match
                resp = handler.handle(request)

                # If the handler only returned a document, we need to
                # convert it to a proper response.
                if isinstance(resp, Document):
                    resp = resp.to_response(self)
            except (Error, ErrorList) as err:
                LOG.info(
                    "%r failed with status %s.", request, err.http_status
                )
                resp = error_to_response(err, dump_json=self.dump_json)
            except Exception:
                if self.debug:
                    raise
                LOG.exception("Unexpected error while handling %r.", request)
                resp = error_to_response(
                    InternalServerError(), dump_json=self.dump_json
                )
            return resp
