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
blogapi.utilities
=================

This module contains some helpers, which are frequently needed in different
modules and situations.
"""

__all__ = [
    "Symbol",
    "jsonapi_id_tuple",
    "ensure_pointer",
    "sp_join"
]

# std
import collections

# third party
from jsonpointer import JsonPointer


class Symbol(object):
    """
    A simple symbol implementation.

    .. code-block:: python3

        foo = Symbol()
        assert foo == foo

        bar = Symbol()
        assert bar != foo

        assert Symbol("foo") != Symbol("foo")
    """

    def __init__(self, name=""):
        self.name = name
        return None

    def __str__(self):
        return self.name if self.name else repr(self)

    def __repr__(self):
        return "Symbol(name={})".format(self.name)

    def __eq__(self, other):
        return other is self

    def __ne__(self, other):
        return other is not self

    def __hash__(self):
        return id(self)


#: A named tuple for JSON API identifiers:
#:
#: .. code-block:: python3
#:
#:      jsonapi_id_tuple(type="articles", id="my-first-post")
jsonapi_id_tuple = collections.namedtuple("jsonapi_id_tuple", ["type", "id"])


def ensure_pointer(sp):
    """
    Returns *sp* as :class:`jsonpointer.JsonPointer`.

    :arg sp:
        A JSON pointer string (``"/data/attributes"``) or a
        :class:`~jsonpointer.JsonPointer`.
    """
    if isinstance(sp, JsonPointer):
        return sp
    return JsonPointer(sp)


def sp_join(sp, *parts):
    """
    Appends the (unescaped) reference tokens *parts* to the pointer *sp*:

    .. code-block:: python3

        >>> sp_join(ensure_pointer("/data"), "attributes", "title").path
        '/data/attributes/title'
    """
    sp = ensure_pointer(sp)
    return JsonPointer.from_parts(list(sp.parts) + [str(part) for part in parts])
