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
blogapi.schema.handler
======================

This module contains the handlers which are based on a
:class:`~blogapi.schema.schema.Schema`.
"""

__all__ = [
    "Collection",
    "Resource",
    "Relationship",
    "ToOneRelated",
    "ToManyRelated"
]

# std
import collections.abc
import logging

# local
from blogapi.errors import InvalidType, MethodNotAllowed
from blogapi.handler import Handler as BaseHandler
from blogapi.document import Document
from blogapi.utilities import ensure_pointer


LOG = logging.getLogger(__name__)


class Handler(BaseHandler):
    """
    The base for all handlers based on a :class:`~blogapi.schema.schema.Schema`.
    """

    def __init__(self, schema, **kargs):
        super().__init__(**kargs)
        self.schema = schema
        return None


class Collection(Handler):
    """
    Implements the handler for the collection endpoint based on a schema.
    """

    def get(self):
        """
        Validates the *include* parameter and uses the
        :meth:`~blogapi.schema.schema.Schema.query_collection` method of the
        schema to query the resources in the collection.

        :seealso: http://jsonapi.org/format/#fetching
        """
        include = self.schema.resolve_include(self.request.japi_include)
        resources = self.schema.query_collection(include=include)

        links = {
            "self": self.api.router.endpoint_url("collection", self.schema.type)
        }
        return Document(resources, many=True, include=include, links=links)

    def post(self):
        """
        Uses the :meth:`~blogapi.schema.schema.Schema.create_resource`
        method of the schema to create a new resource.

        :seealso: http://jsonapi.org/format/#crud-creating
        """
        if not self.schema.opts.get("creatable"):
            detail = "Resources of the type '{}' can not be created."\
                .format(self.schema.type)
            raise MethodNotAllowed(detail=detail)

        ability = self.schema.opts.get("create_ability")
        if ability:
            self.require_ability(ability)

        self.request.assert_jsonapi_content()

        if not isinstance(self.request.json, collections.abc.Mapping):
            detail = "Must be an object."
            raise InvalidType(detail=detail, source_pointer="")

        resource = self.schema.create_resource(
            data=self.request.json.get("data"),
            sp=ensure_pointer("/data"),
            request=self.request
        )
        LOG.info("Created %r.", resource)

        location = self.api.resource_uri(resource)
        return Document(
            resource, status=201, headers={"Location": location}
        )


class Resource(Handler):
    """
    Implements the handler for the resource endpoint based on a schema.
    """

    def get(self):
        """
        Validates the *include* parameter and uses the
        :meth:`~blogapi.schema.schema.Schema.query_resource` method of the
        schema to query the requested resource.

        :seealso: http://jsonapi.org/format/#fetching-resources
        """
        include = self.schema.resolve_include(self.request.japi_include)
        resource = self.schema.query_resource(
            id_=self.request.japi_uri_arguments["id"], include=include
        )
        return Document(resource, include=include)


class Relationship(Handler):
    """
    Implements the handler for a relationship endpoint, which returns the
    resource linkage of the relationship *relname*.

    :seealso: http://jsonapi.org/format/#fetching-relationships
    """

    def __init__(self, relname, **kargs):
        super().__init__(**kargs)
        self.relname = relname
        return None

    def get(self):
        resource = self.schema.query_resource(
            id_=self.request.japi_uri_arguments["id"]
        )
        d = self.schema.encode_relationship(self.relname, resource)
        return self.api.json_response(d)


class Related(Handler):
    """
    Base class for the *related* endpoints.
    """

    def __init__(self, relname, **kargs):
        super().__init__(**kargs)
        self.relname = relname
        return None

    @property
    def foreign_schema(self):
        field = self.schema.japi_relationships[self.relname]
        return self.api.get_schema(field.foreign_type)


class ToOneRelated(Related):
    """
    Implements the handler for fetching the relative in a to-one relationship.
    """

    def get(self):
        """
        Uses the :meth:`~blogapi.schema.schema.Schema.query_relative` method
        of the schema to query the related resource. The *include* parameter
        is checked against the related schema.

        :seealso: http://jsonapi.org/format/#fetching
        """
        include = self.foreign_schema.resolve_include(self.request.japi_include)
        resource = self.schema.query_resource(
            id_=self.request.japi_uri_arguments["id"]
        )
        relative = self.schema.query_relative(self.relname, resource)
        return Document(relative, include=include)


class ToManyRelated(Related):
    """
    Implements the handler for fetching the relatives in a to-many
    relationship.
    """

    def get(self):
        """
        Uses the :meth:`~blogapi.schema.schema.Schema.query_relatives` method
        of the schema to query the related resources.

        :seealso: http://jsonapi.org/format/#fetching
        """
        include = self.foreign_schema.resolve_include(self.request.japi_include)
        resource = self.schema.query_resource(
            id_=self.request.japi_uri_arguments["id"]
        )
        relatives = self.schema.query_relatives(self.relname, resource)
        return Document(relatives, many=True, include=include)
