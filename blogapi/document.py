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
blogapi.document
================

.. seealso::

    *   http://jsonapi.org/format/#document-top-level
    *   http://jsonapi.org/format/#document-compound-documents

Builds the top level JSON API document for the primary data and the
*included* resources. A request handler returns a :class:`Document` and the
:class:`~blogapi.api.API` turns it into a response.

The *included* array is built per primary resource: for each primary
resource (in order) and each requested relationship (in request order), the
related resources are appended. Related resources shared by several primary
resources appear once per primary resource, they are **not** de-duplicated.
"""

__all__ = [
    "serialize",
    "build_document",
    "Document"
]

# std
import logging


LOG = logging.getLogger(__name__)


def serialize(api, resource, include=()):
    """
    Serializes a single primary *resource*.

    :arg ~blogapi.api.API api:
    :arg resource:
        The resource object.
    :arg tuple include:
        The validated names of the relationships, which are included.
    :returns:
        A two tuple with the JSON API resource object and the list with the
        resource objects of the included relatives.
    """
    schema = api.get_schema(resource)
    data = schema.encode_resource(resource, include=include)

    included = list()
    for relname in include:
        for relative in schema.fetch_include(resource, relname):
            relative_schema = api.get_schema(relative)
            included.append(relative_schema.encode_resource(relative))
    return (data, included)


def build_document(api, data, include=(), *, many=False):
    """
    Creates the JSON API document for the primary *data*.

    :arg ~blogapi.api.API api:
    :arg data:
        A resource, *None* or a list of resources if *many* is true.
    :arg tuple include:
        The validated names of the relationships, which are included.
    :arg bool many:
        True, if *data* is a collection.
    :rtype: dict
    """
    included = list()

    if many:
        primary = list()
        for resource in data:
            resource_data, resource_included = serialize(api, resource, include)
            primary.append(resource_data)
            included.extend(resource_included)
    elif data is not None:
        primary, included = serialize(api, data, include)
    else:
        primary = None

    d = dict()
    d["data"] = primary
    if include:
        d["included"] = included
    return d


class Document(object):
    """
    A response builder for a JSON API document with primary data.

    :arg data:
        A resource, *None* or a list of resources.
    :arg bool many:
        True, if *data* is a collection.
    :arg tuple include:
        The validated names of the relationships, which are included.
    :arg int status:
        The HTTP status of the response.
    :arg dict headers:
        Additional HTTP headers.
    :arg dict links:
        The top level JSON API links object.
    """

    def __init__(
            self, data, *, many=False, include=(), status=200, headers=None,
            links=None
        ):
        self.data = data
        self.many = many
        self.include = tuple(include)
        self.status = status
        self.headers = headers or {}
        self.links = links
        return None

    def to_json(self, api):
        d = build_document(api, self.data, self.include, many=self.many)
        if self.links:
            d["links"] = self.links
        return d

    def to_response(self, api):
        return api.json_response(
            self.to_json(api), status=self.status, headers=self.headers
        )
