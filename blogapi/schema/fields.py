#!/usr/bin/env python3

"""
blogapi.schema.fields
=====================

.. sidebar:: Index

    *   :class:`String`
    *   :class:`DateTime`
    *   :class:`EMail`

This module contains fields for several standard Python types.
"""

__all__ = [
    "String",
    "DateTime",
    "EMail"
]

# std
import datetime
import logging
import re

# third party
import dateutil.parser

# local
from .base_fields import Attribute
from blogapi.errors import InvalidType, InvalidValue


LOG = logging.getLogger(__name__)


class String(Attribute):
    """
    :arg str regex:
        If given, the string must match this regex.
    :arg int min_length:
        The string must have at least this many characters.
    :arg int max_length:
        The string must have at most this many characters.
    """

    def __init__(self, *, regex=None, min_length=None, max_length=None, **kargs):
        super().__init__(**kargs)

        # min must be <= max
        assert min_length is None or max_length is None \
            or min_length <= max_length

        self.regex = re.compile(regex) if regex is not None else None
        self.min_length = min_length
        self.max_length = max_length
        return None

    def validate_pre_decode(self, schema, data, sp, context):
        if not isinstance(data, str):
            detail = "Must be a string."
            raise InvalidType(detail=detail, source_pointer=sp)
        if self.regex is not None and not self.regex.fullmatch(data):
            detail = "Did not match regex."
            raise InvalidValue(detail=detail, source_pointer=sp)
        if self.min_length is not None and len(data) < self.min_length:
            detail = "Must have at least {} characters.".format(self.min_length)
            raise InvalidValue(detail=detail, source_pointer=sp)
        if self.max_length is not None and len(data) > self.max_length:
            detail = "Must have at most {} characters.".format(self.max_length)
            raise InvalidValue(detail=detail, source_pointer=sp)
        return super().validate_pre_decode(schema, data, sp, context)

    def encode(self, schema, data, **kargs):
        return None if data is None else str(data)


class DateTime(Attribute):
    """Stores a :class:`datetime.datetime` in ISO-8601 as recommended in
    http://jsonapi.org/recommendations/#date-and-time-fields.
    """

    def validate_pre_decode(self, schema, data, sp, context):
        if not isinstance(data, str):
            detail = "Must be an ISO-8601 formatted date/time string."
            raise InvalidType(detail=detail, source_pointer=sp)
        try:
            dateutil.parser.isoparse(data)
        except ValueError:
            detail = "Must be an ISO-8601 formatted date/time stamp."
            raise InvalidValue(detail=detail, source_pointer=sp)
        return super().validate_pre_decode(schema, data, sp, context)

    def decode(self, schema, data, sp, **kargs):
        d = dateutil.parser.isoparse(data)
        if d.tzinfo is None:
            d = d.replace(tzinfo=datetime.timezone.utc)
        return d

    def encode(self, schema, data, **kargs):
        return None if data is None else data.isoformat()


class EMail(String):
    """Checks if a string is syntactically correct EMail address."""

    #: Taken from http://emailregex.com/
    EMAIL_RE = re.compile(r"(^[a-zA-Z0-9_.+-]+@[a-zA-Z0-9-]+\.[a-zA-Z0-9-.]+$)")

    def validate_pre_decode(self, schema, data, sp, context):
        if isinstance(data, str) and not EMail.EMAIL_RE.fullmatch(data):
            detail = "Not a valid EMail address."
            raise InvalidValue(detail=detail, source_pointer=sp)
        return super().validate_pre_decode(schema, data, sp, context)

