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
blogapi.errors
==============

This module contains the exceptions which are raised whenever a request can not
be fulfilled. Each :class:`Error` knows how it is rendered as a JSON API error
object, so the :class:`~blogapi.api.API` only needs to catch them once and
convert them with :func:`error_to_response`.

:seealso: http://jsonapi.org/format/#errors
"""

__all__ = [
    "Error",
    "ErrorList",
    "BadRequest",
    "InvalidInclude",
    "Unauthorized",
    "Forbidden",
    "NotFound",
    "ResourceNotFound",
    "MethodNotAllowed",
    "Conflict",
    "UnsupportedMediaType",
    "ValidationError",
    "InvalidType",
    "InvalidValue",
    "InternalServerError",
    "error_to_response"
]

# std
import logging

# third party
from jsonpointer import JsonPointer

# local
from .response import Response


LOG = logging.getLogger(__name__)


class Error(Exception):
    """
    The base class for all exceptions, which can be rendered as a JSON API
    error object.

    :arg int http_status:
        The HTTP status code applicable to this problem.
    :arg str title:
        A short, human-readable summary of the problem. Defaults to the
        class' :attr:`title`.
    :arg str detail:
        A human-readable explanation specific to this occurrence.
    :arg source_pointer:
        A JSON pointer (string or :class:`jsonpointer.JsonPointer`) to the
        member of the request document which caused the error.
    :arg str source_parameter:
        The name of the query parameter which caused the error.
    :arg dict meta:
        Non-standard meta information.
    """

    #: The default HTTP status of this error.
    http_status = 500

    #: The default title of this error.
    title = "Internal Server Error"

    def __init__(
            self, *,
            http_status=None,
            title=None,
            detail=None,
            source_pointer=None,
            source_parameter=None,
            meta=None
        ):
        """ """
        self.http_status = http_status or type(self).http_status
        self.title = title or type(self).title
        self.detail = detail

        if isinstance(source_pointer, JsonPointer):
            source_pointer = source_pointer.path
        self.source_pointer = source_pointer
        self.source_parameter = source_parameter
        self.meta = meta
        super().__init__(detail or self.title)
        return None

    @property
    def json(self):
        """
        The serialized version of this error as JSON API error object.
        Members without a value are omitted.
        """
        d = dict()
        d["title"] = self.title
        if self.detail:
            d["detail"] = self.detail
        d["status"] = str(self.http_status)

        if self.source_pointer is not None:
            d["source"] = {"pointer": self.source_pointer}
        elif self.source_parameter is not None:
            d["source"] = {"parameter": self.source_parameter}

        if self.meta:
            d["meta"] = self.meta
        return d


class ErrorList(Exception):
    """
    Collects several :class:`Error` instances, which are reported together.
    The HTTP status of the list is the status of the errors, if they all
    agree, otherwise the most general *4xx* or *5xx* class.

    :arg list errors:
        The initial errors.
    """

    def __init__(self, errors=None):
        self.errors = list()
        for error in errors or []:
            self.append(error)
        super().__init__()
        return None

    def __bool__(self):
        return bool(self.errors)

    def __len__(self):
        return len(self.errors)

    def __iter__(self):
        return iter(self.errors)

    def append(self, error):
        """Adds an :class:`Error` or all errors in another :class:`ErrorList`."""
        if isinstance(error, ErrorList):
            self.errors.extend(error.errors)
        else:
            assert isinstance(error, Error)
            self.errors.append(error)
        return None

    @property
    def http_status(self):
        statuses = {error.http_status for error in self.errors}
        if len(statuses) == 1:
            return statuses.pop()
        elif any(status >= 500 for status in statuses):
            return 500
        else:
            return 400

    @property
    def json(self):
        """A list with the JSON API error objects of all errors."""
        return [error.json for error in self.errors]


class BadRequest(Error):
    http_status = 400
    title = "Bad Request"


class InvalidInclude(BadRequest):
    """
    Raised if a client requests the inclusion of a relationship, which is not
    on the allow-list of the requested resource type.

    :arg str relname:
        The (first) rejected relationship name.
    :arg str typename:
        The JSON API type of the primary resource.
    """

    def __init__(self, relname, typename, **kargs):
        self.relname = relname
        self.typename = typename

        detail = "The included relationship '{}' is not allowed in the "\
            "'{}' resource".format(relname, typename)
        kargs.setdefault("detail", detail)
        super().__init__(**kargs)
        return None


class Unauthorized(Error):
    http_status = 401
    title = "Unauthorized"


class Forbidden(Error):
    http_status = 403
    title = "Forbidden"


class NotFound(Error):
    http_status = 404
    title = "Not Found"


class ResourceNotFound(NotFound):
    """
    Raised if a resource with the given *type* and *id* does not exist.
    """

    def __init__(self, typename, id_, **kargs):
        self.typename = typename
        self.id = id_

        detail = "The resource (type='{}', id='{}') does not exist."\
            .format(typename, id_)
        kargs.setdefault("detail", detail)
        super().__init__(**kargs)
        return None


class MethodNotAllowed(Error):
    http_status = 405
    title = "Method Not Allowed"


class Conflict(Error):
    http_status = 409
    title = "Conflict"


class UnsupportedMediaType(Error):
    http_status = 415
    title = "Unsupported Media Type"


class ValidationError(Error):
    http_status = 422
    title = "Unprocessable Entity"


class InvalidType(ValidationError):
    title = "Invalid Type"


class InvalidValue(ValidationError):
    title = "Invalid Value"


class InternalServerError(Error):
    http_status = 500
    title = "Internal Server Error"


def error_to_response(error, dump_json):
    """
    Converts an :class:`Error` or :class:`ErrorList` to a
    :class:`~blogapi.response.Response`.

    :arg error:
        An :class:`Error` or :class:`ErrorList`.
    :arg callable dump_json:
        The JSON serializer (usually :meth:`blogapi.api.API.dump_json`).
    """
    if isinstance(error, ErrorList):
        errors = error.json
    else:
        errors = [error.json]

    body = dump_json({"errors": errors})

    resp = Response(
        status=error.http_status,
        headers={"Content-Type": "application/vnd.api+json"},
        body=body
    )
    LOG.debug("Rendered error response (status=%s).", resp.status)
    return resp
