#!/usr/bin/env python3

"""
blogapi.schema
==============

This package contains the toolkit for creating a
:class:`~blogapi.schema.schema.Schema`, which not only allows to serialize and
deserialize a resource, but also to query it. Therefore a schema shares some
similarities with a controller.

.. toctree::
    :maxdepth: 1

    base_fields
    fields
    handler
    schema
"""

# local
from . import base_fields
from . import fields
from . import handler
from . import schema
