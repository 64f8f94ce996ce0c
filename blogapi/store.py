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
blogapi.store
=============

A small in-memory data store. It keeps one table per entity class and assigns
the primary keys. All operations are thread safe.
"""

__all__ = [
    "Store"
]

# std
import collections
import itertools
import logging
import threading


LOG = logging.getLogger(__name__)


class Store(object):

    def __init__(self):
        self._lock = threading.Lock()

        # entity class to (pk -> entity)
        self._tables = collections.defaultdict(collections.OrderedDict)

        # entity class to pk counter
        self._counters = collections.defaultdict(lambda: itertools.count(1))
        return None

    def _insert(self, entity):
        """Stores the *entity*. The caller must hold the lock."""
        cls = type(entity)
        if entity.pk is None:
            entity.pk = next(self._counters[cls])
        self._tables[cls][entity.pk] = entity
        return None

    def _match(self, cls, criteria):
        """Returns the entities matching *criteria*. The caller must hold the
        lock.
        """
        return [
            entity for entity in self._tables[cls].values()
            if all(
                getattr(entity, key) == value
                for key, value in criteria.items()
            )
        ]

    def add(self, entity):
        """
        Adds the *entity* to its table and assigns a primary key, if it has
        none yet.
        """
        with self._lock:
            self._insert(entity)
        LOG.debug("Stored %r.", entity)
        return entity

    def add_unique(self, entity, error, **criteria):
        """
        Adds the *entity* like :meth:`add`, but only if no other entity of its
        class matches *criteria*. The check and the insert are atomic::

            store.add_unique(
                user, ValidationError(detail="Taken."), email=user.email
            )

        :arg ~blogapi.errors.Error error:
            Raised if a matching entity already exists.
        """
        with self._lock:
            if self._match(type(entity), criteria):
                LOG.info("Rejected %r, %s is taken.", entity, criteria)
                raise error
            self._insert(entity)
        LOG.debug("Stored %r.", entity)
        return entity

    def delete(self, entity):
        with self._lock:
            self._tables[type(entity)].pop(entity.pk, None)
        return None

    def get(self, cls, pk):
        """Returns the entity with the primary key *pk* or *None*."""
        with self._lock:
            return self._tables[cls].get(pk)

    def all(self, cls):
        """Returns all entities of the class *cls* in insertion order."""
        with self._lock:
            return list(self._tables[cls].values())

    def filter(self, cls, **criteria):
        """
        Returns all entities of *cls*, whose attributes are equal to
        *criteria*::

            store.filter(User, email="jane@example.org")
        """
        with self._lock:
            return self._match(cls, criteria)

    def first(self, cls, **criteria):
        """Like :meth:`filter`, but returns only the first match or *None*."""
        entities = self.filter(cls, **criteria)
        return entities[0] if entities else None

    def find_by_route_key(self, cls, route_key):
        """Returns the entity whose *route_key* is *route_key* or *None*."""
        for entity in self.all(cls):
            if entity.route_key == route_key:
                return entity
        return None
