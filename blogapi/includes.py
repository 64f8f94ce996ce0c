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
blogapi.includes
================

.. seealso::

    http://jsonapi.org/format/#fetching-includes

Parses the *include* query parameter and checks it against the relationships
a resource type allows to be included:

.. code-block:: python3

    >>> resolve_include("category, author,category", {"category", "author"}, "articles")
    ('category', 'author')
    >>> resolve_include("unknown,category", {"category"}, "articles")
    Traceback (most recent call last):
    ...
    InvalidInclude: The included relationship 'unknown' is not allowed in the 'articles' resource

Nested include paths (``comments.author``) are not supported, a dotted name is
simply not on any allow-list.
"""

__all__ = [
    "parse_include",
    "resolve_include"
]

# std
import logging

# local
from .errors import InvalidInclude


LOG = logging.getLogger(__name__)


def parse_include(value):
    """
    Splits the comma separated *value* into relationship names. Whitespace
    around the names and empty segments are dropped, duplicates are collapsed
    and the first occurrence determines the position.

    :arg str value:
        The raw value of the *include* query parameter or *None*.
    :rtype: tuple
    """
    if not value:
        return tuple()

    names = list()
    for name in value.split(","):
        name = name.strip()
        if name and name not in names:
            names.append(name)
    return tuple(names)


def resolve_include(value, allowed, typename):
    """
    Returns the relationship names requested in *value*, if all of them are
    in *allowed*.

    The names are checked from left to right and the first one, which is not
    allowed, is reported. The remaining names are not looked at.

    :arg value:
        The raw *include* parameter (a string or *None*) or an already parsed
        sequence of names.
    :arg allowed:
        The set of includable relationship names of the resource type.
    :arg str typename:
        The JSON API type of the primary data.

    :rtype: tuple
    :raises ~blogapi.errors.InvalidInclude:
    """
    if value is None or isinstance(value, str):
        names = parse_include(value)
    else:
        names = parse_include(",".join(value))

    for name in names:
        if name not in allowed:
            LOG.debug("Rejected include '%s' on '%s'.", name, typename)
            raise InvalidInclude(name, typename)
    return names
