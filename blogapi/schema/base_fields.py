#!/usr/bin/env python3

"""
blogapi.schema.base_fields
==========================

This module contains the definition for all basic fields. A field describes
how data should be encoded to JSON and decoded again.

You should only work with the following fields directly:

*   :class:`Attribute`

    Represent information about a resource object (but not a relationship).

    :seealso: http://jsonapi.org/format/#document-resource-object-attributes

*   :class:`ToOneRelationship`, :class:`ToManyRelationship`

    Represent relationships on a resource object. A relationship created with
    ``includable=True`` is on the allow-list of the *include* query parameter.

    :seealso: http://jsonapi.org/format/#document-resource-object-relationships
"""

__all__ = [
    "BaseField",
    "Attribute",
    "Relationship",
    "ToOneRelationship",
    "ToManyRelationship"
]

# std
import collections.abc
import logging

# local
from blogapi.errors import InvalidType, InvalidValue
from blogapi.utilities import sp_join


LOG = logging.getLogger(__name__)


class BaseField(object):
    """
    This class describes the base for all fields defined on a schema and
    knows how to encode, decode and validate the field. A field is mapped to a
    property (*mapped_key*) on the resource object.

    :arg str name:
        The name of the field in the JSON API document. If not explicitly
        given, it's the same as :attr:`key`.
    :arg str mapped_key:
        The name of the associated property on the resource class. If not
        explicitly given, it's the same as :attr:`key`.
    :arg str writable:
        Can be either *never*, *always* or *creation* and describes in which
        CRUD context the field is writable.
    :arg str required:
        Can be either *never*, *always* or *creation* and describes in which
        CRUD context the field is required as input.
    """

    #: The CRUD contexts a field knows about.
    CONTEXTS = ("always", "never", "creation")

    def __init__(
            self, *,
            name="",
            mapped_key="",
            writable="always",
            required="never"
        ):
        """ """
        #: The name of this field on the :class:`~blogapi.schema.schema.Schema`
        #: it has been defined on.
        self.key = None

        #: A :class:`jsonpointer.JsonPointer` to this field in a JSON API
        #: resource object. The source pointer is set from the Schema class
        #: during initialisation.
        self.sp = None

        self.name = name
        self.mapped_key = mapped_key

        assert writable in self.CONTEXTS
        self.writable = writable

        assert required in self.CONTEXTS
        self.required = required

        self.fvalidators = list()
        return None

    def validator(self, f, when="post-decode", context="always"):
        """
        Descriptor to add a validator.

        :arg str when:
            Must be either *pre-decode* or *post-decode*.
        :arg str context:
            The CRUD context in which the validator is invoked. Must
            be *never*, *always* or *creation*.
        """
        assert when in ("pre-decode", "post-decode")
        assert context in self.CONTEXTS
        self.fvalidators.append({
            "validator": f, "when": when, "context": context
        })
        return self

    def is_writable(self, context):
        return self.writable in ("always", context)

    def is_required(self, context):
        return self.required in ("always", context)

    def get(self, schema, resource):
        """
        Returns the value of the field on the resource.

        :arg ~blogapi.schema.schema.Schema schema:
            The schema this field has been defined on.
        """
        return getattr(resource, self.mapped_key)

    def encode(self, schema, data, **kargs):
        """Encodes the *data* returned from :meth:`get` so that it can be
        serialized with :func:`json.dumps`. Can be overridden.
        """
        return data

    def decode(self, schema, data, sp, **kargs):
        """Decodes the raw *data* from the JSON API input document and returns
        it. Can be overridden.
        """
        return data

    def _run_validators(self, when, schema, data, sp, context):
        for validator in self.fvalidators:
            if validator["when"] != when:
                continue
            if validator["context"] not in ("always", context):
                continue

            f = validator["validator"]
            f(schema, data, sp)
        return None

    def validate_pre_decode(self, schema, data, sp, context):
        """Validates the raw JSON API input for this field. This method is
        called before :meth:`decode`.

        :arg ~blogapi.schema.schema.Schema schema:
            The schema this field has been defined on.
        :arg data:
            The raw input data
        :arg ~jsonpointer.JsonPointer sp:
            A JSON pointer to the source of *data*.
        :arg str context:
            The CRUD context (*creation*).
        """
        return self._run_validators("pre-decode", schema, data, sp, context)

    def validate_post_decode(self, schema, data, sp, context):
        """Validates the decoded input *data* for this field. This method is
        called after :meth:`decode`.
        """
        return self._run_validators("post-decode", schema, data, sp, context)


class Attribute(BaseField):
    """
    .. seealso::

        http://jsonapi.org/format/#document-resource-object-attributes

    An attribute is part of the resource's JSON API attributes object and
    mapped to a property of the resource object:

    .. code-block:: python3

        class ArticleSchema(Schema):

            title = Attribute()
            published_at = Attribute(name="published-at", allow_none=True)
    """

    def __init__(self, *, allow_none=False, **kargs):
        super().__init__(**kargs)
        self.allow_none = bool(allow_none)
        return None


class Relationship(BaseField):
    """
    .. seealso::

        http://jsonapi.org/format/#document-resource-object-relationships

    Additionally to attributes and basic fields, we must know how to *include*
    the related resources in the case of relationships. This class defines
    the common interface of *to-one* and *to-many* relationships.

    :arg bool includable:
        If true, the relationship may be requested with the *include* query
        parameter.
    :arg str foreign_type:
        The JSON API type of the related resources.
    """

    #: True, if this is to-one relationship::
    #:
    #:      field.to_one == isinstance(field, ToOneRelationship)
    to_one = None

    #: True, if this is a to-many relationship::
    #:
    #:      field.to_many == isinstance(field, ToManyRelationship)
    to_many = None

    def __init__(
            self, *,
            foreign_type,
            includable=False,
            allow_none=True,
            **kargs
        ):
        """ """
        super().__init__(**kargs)
        self.foreign_type = foreign_type
        self.allow_none = bool(allow_none)
        self.includable = bool(includable)
        return None

    def include(self, schema, resource):
        """
        Returns the related resources as list. The list is empty or has
        exactly one element in the case of *to-one* relationships.

        :arg ~blogapi.schema.schema.Schema schema:
            The schema this field has been defined on.
        """
        relatives = self.get(schema, resource)

        if self.to_one:
            return [] if relatives is None else [relatives]
        return list(relatives)

    def validate_resource_identifier(self, schema, data, sp):
        """
        :seealso: http://jsonapi.org/format/#document-resource-identifier-objects

        Asserts that *data* is a JSON API resource identifier with the correct
        *type* value.
        """
        if not isinstance(data, collections.abc.Mapping):
            detail = "Must be an object."
            raise InvalidType(detail=detail, source_pointer=sp)

        if not ("type" in data and "id" in data):
            detail = "Must contain a 'type' and an 'id' member."
            raise InvalidValue(detail=detail, source_pointer=sp)

        if data["type"] != self.foreign_type:
            detail = "Unexpected type: '{}'.".format(data["type"])
            raise InvalidValue(detail=detail, source_pointer=sp_join(sp, "type"))
        return None

    def validate_relationship_object(self, schema, data, sp):
        """
        Asserts that *data* is a JSON API relationship object with a *data*
        member.
        """
        if not isinstance(data, collections.abc.Mapping):
            detail = "Must be an object."
            raise InvalidType(detail=detail, source_pointer=sp)

        if not (data.keys() <= {"links", "data", "meta"}):
            unexpected = sorted(data.keys() - {"links", "data", "meta"})[0]
            detail = "Unexpected member: '{}'.".format(unexpected)
            raise InvalidValue(detail=detail, source_pointer=sp)

        if "data" not in data:
            detail = "The 'data' member is required."
            raise InvalidValue(detail=detail, source_pointer=sp)
        return None

    def validate_pre_decode(self, schema, data, sp, context):
        self.validate_relationship_object(schema, data, sp)
        return super().validate_pre_decode(schema, data, sp, context)

    def dereference(self, schema, identifier, sp):
        """
        Loads the resource the *identifier* points to.

        :raises ~blogapi.errors.InvalidValue:
            If the resource does not exist.
        """
        foreign_schema = schema.api.get_schema(self.foreign_type)
        relative = foreign_schema.get_resource(identifier["id"])
        if relative is None:
            detail = "The related resource '{}' does not exist."\
                .format(identifier["id"])
            raise InvalidValue(detail=detail, source_pointer=sp)
        return relative


class ToOneRelationship(Relationship):
    """
    .. seealso::

        *   http://jsonapi.org/format/#document-resource-object-relationships
        *   http://jsonapi.org/format/#document-resource-object-linkage

    Describes how to serialize and deserialize a *to-one* relationship.
    """

    to_one = True
    to_many = False

    def validate_relationship_object(self, schema, data, sp):
        """Checks additionally to
        :meth:`Relationship.validate_relationship_object` that the *data*
        member is a valid resource linkage.
        """
        super().validate_relationship_object(schema, data, sp)
        if data["data"] is None:
            if not self.allow_none:
                detail = "Must not be null."
                raise InvalidValue(
                    detail=detail, source_pointer=sp_join(sp, "data")
                )
        else:
            self.validate_resource_identifier(
                schema, data["data"], sp_join(sp, "data")
            )
        return None

    def decode(self, schema, data, sp, **kargs):
        if data["data"] is None:
            return None
        return self.dereference(schema, data["data"], sp_join(sp, "data"))

    def encode(self, schema, data, **kargs):
        """Returns the JSON API resource linkage."""
        if data is None:
            return None
        return schema.api.ensure_identifier_object(data)


class ToManyRelationship(Relationship):
    """
    .. seealso::

        *   http://jsonapi.org/format/#document-resource-object-relationships
        *   http://jsonapi.org/format/#document-resource-object-linkage

    Describes how to serialize and deserialize a *to-many* relationship.
    """

    to_one = False
    to_many = True

    def validate_relationship_object(self, schema, data, sp):
        """Checks additionally to
        :meth:`Relationship.validate_relationship_object` that the *data*
        member is a list of resource identifier objects.
        """
        super().validate_relationship_object(schema, data, sp)

        data_sp = sp_join(sp, "data")
        if not isinstance(data["data"], list):
            detail = "The 'data' must be an array of resource identifier "\
                "objects."
            raise InvalidType(detail=detail, source_pointer=data_sp)

        for i, item in enumerate(data["data"]):
            self.validate_resource_identifier(schema, item, sp_join(data_sp, i))
        return None

    def decode(self, schema, data, sp, **kargs):
        data_sp = sp_join(sp, "data")
        return [
            self.dereference(schema, item, sp_join(data_sp, i))
            for i, item in enumerate(data["data"])
        ]

    def encode(self, schema, data, **kargs):
        """Returns the JSON API resource linkage."""
        return [schema.api.ensure_identifier_object(item) for item in data]
