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
blogapi.models
==============

The domain entities. They are plain Python objects, which are kept in a
:class:`~blogapi.store.Store`. Relationships are plain references to other
entities (or lists of them), so the store does not need to join anything.

Each entity has an internal primary key (*pk*), which is assigned by the store,
and a *route_key*, the identifier used in URLs and JSON API documents.
"""

__all__ = [
    "Entity",
    "Permission",
    "User",
    "Category",
    "Article",
    "PersonalAccessToken"
]

# std
import datetime


def _utcnow():
    return datetime.datetime.now(datetime.timezone.utc).replace(microsecond=0)


class Entity(object):
    """
    The base class for all entities stored in a
    :class:`~blogapi.store.Store`.
    """

    def __init__(self, pk=None):
        self.pk = pk
        return None

    @property
    def route_key(self):
        """The external identifier. Defaults to the primary key."""
        return str(self.pk)

    def __repr__(self):
        return "<{} pk={}>".format(type(self).__name__, self.pk)


class Permission(Entity):

    def __init__(self, name, pk=None):
        super().__init__(pk=pk)
        self.name = name
        return None


class User(Entity):
    """
    :arg str password:
        The already hashed password (see :func:`blogapi.auth.hash_password`).
    """

    def __init__(self, name, email, password, permissions=None, pk=None):
        super().__init__(pk=pk)
        self.name = name
        self.email = email
        self.password = password
        self.permissions = list(permissions or [])
        self.created_at = _utcnow()
        return None

    @property
    def permission_names(self):
        return [permission.name for permission in self.permissions]


class Category(Entity):

    def __init__(self, name, slug, pk=None):
        super().__init__(pk=pk)
        self.name = name
        self.slug = slug
        self.articles = list()
        return None

    @property
    def route_key(self):
        return self.slug


class Article(Entity):

    def __init__(
            self, title, slug, content, category, author,
            published_at=None, pk=None
        ):
        super().__init__(pk=pk)
        self.title = title
        self.slug = slug
        self.content = content
        self.category = category
        self.author = author
        self.published_at = published_at
        self.created_at = _utcnow()
        return None

    @property
    def route_key(self):
        return self.slug


class PersonalAccessToken(Entity):
    """
    A token issued to a user. Only the SHA-256 hash of the plain text token
    is stored.

    :arg User tokenable:
        The owner of the token.
    :arg list abilities:
        The granted abilities. ``"*"`` grants everything.
    """

    def __init__(self, tokenable, name, token_hash, abilities=None, pk=None):
        super().__init__(pk=pk)
        self.tokenable = tokenable
        self.name = name
        self.token_hash = token_hash
        self.abilities = list(abilities if abilities is not None else ["*"])
        self.created_at = _utcnow()
        self.last_used_at = None
        return None

    def can(self, ability):
        return "*" in self.abilities or ability in self.abilities
