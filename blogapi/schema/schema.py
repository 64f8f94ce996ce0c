#!/usr/bin/env python3

"""
blogapi.schema.schema
=====================

This module contains the base schema which implements the encoding, decoding,
validation and query operations based on
:class:`fields <blogapi.schema.base_fields.BaseField>`.

A schema is the single place, where a resource type is described: its JSON API
*type*, its attributes, its relationships and which of the relationships may
be included into a compound document.
"""

__all__ = [
    "SchemaMeta",
    "Schema"
]

# std
import collections
import collections.abc
import copy
import logging

# local
from blogapi.schema.base_fields import BaseField, Attribute, Relationship
from blogapi.errors import (
    Error, ErrorList, ValidationError, InvalidValue, InvalidType, Conflict,
    ResourceNotFound
)
from blogapi.includes import resolve_include
from blogapi.utilities import ensure_pointer, sp_join


LOG = logging.getLogger(__name__)


class SchemaMeta(type):

    @classmethod
    def _assign_sp(cls, fields, sp):
        """Sets the :attr:`BaseField.sp` (source pointer) property for all
        *fields*.
        """
        for field in fields:
            field.sp = sp_join(sp, field.name)
        return None

    def __new__(cls, name, bases, attrs):
        """
        Detects all fields and wires everything up. These class attributes are
        defined here:

        *   *type*

            The JSON API typename

        *   *_fields_by_key*

            Maps the key (schema property name) to the associated
            :class:`BaseField`.

        *   *_japi_attributes*

            Maps the JSON API attribute name to the :class:`Attribute`
            instance.

        *   *_japi_relationships*

            Maps the JSON API relationship name to the :class:`Relationship`
            instance.

        *   *_japi_includable*

            The names of all relationships, which may be included.

        :arg str name:
            The name of the schema class
        :arg tuple bases:
            The direct bases of the schema class
        :arg dict attrs:
            A dictionary with all properties defined on the schema class
            (attributes, methods, ...)
        """
        fields_by_key = collections.OrderedDict()

        # Create a copy of the inherited fields.
        for base in reversed(bases):
            if isinstance(base, SchemaMeta):
                fields_by_key.update(base._fields_by_key)
        fields_by_key = copy.deepcopy(fields_by_key)

        for key, prop in attrs.items():
            if isinstance(prop, BaseField):
                prop.key = key
                prop.name = prop.name or key
                prop.mapped_key = prop.mapped_key or key
                fields_by_key[prop.key] = prop
        attrs["_fields_by_key"] = fields_by_key

        japi_attributes = collections.OrderedDict(
            (field.name, field)\
            for field in fields_by_key.values()\
            if isinstance(field, Attribute)
        )
        cls._assign_sp(japi_attributes.values(), ensure_pointer("/attributes"))
        attrs["_japi_attributes"] = japi_attributes

        japi_relationships = collections.OrderedDict(
            (field.name, field)\
            for field in fields_by_key.values()\
            if isinstance(field, Relationship)
        )
        cls._assign_sp(
            japi_relationships.values(), ensure_pointer("/relationships")
        )
        attrs["_japi_relationships"] = japi_relationships

        attrs["_japi_includable"] = frozenset(
            field.name\
            for field in japi_relationships.values()\
            if field.includable
        )

        # Determine 'type' name.
        if (not attrs.get("type")) and attrs.get("resource_class"):
            attrs["type"] = attrs["resource_class"].__name__
        if (not attrs.get("type")):
            attrs["type"] = name
        return super().__new__(cls, name, bases, attrs)


class Schema(metaclass=SchemaMeta):
    """
    A schema defines how we can encode and decode a resource. It also
    queries the resources, so all in all, it defines a **controller** for a
    *type* in the JSON API.

    :arg ~blogapi.api.API api:
        The API this schema is bound to. Set by
        :meth:`~blogapi.api.API.add_schema`.
    """

    #: Options for the request handlers:
    #:
    #: *   *creatable*: If true, new resources can be POSTed to the collection.
    #: *   *create_ability*: The token ability needed to create a resource.
    opts = {
        "creatable": False,
        "create_ability": None
    }

    #: The resource class associated with this schema.
    resource_class = None

    #: The JSON API *type*. (Leave it empty to derive it automatic from the
    #: resource class name or the schema name).
    type = ""

    def __init__(self, api=None):
        """ """
        self.api = api
        return None

    def init_api(self, api):
        """
        Binds the schema to the API instance. This method is called automatic
        from the :class:`~blogapi.api.API` instance.
        """
        assert self.api is None or self.api is api
        self.api = api
        return None

    @property
    def japi_attributes(self):
        return self._japi_attributes

    @property
    def japi_relationships(self):
        return self._japi_relationships

    @property
    def allowed_includes(self):
        """
        The names of all relationships, which may be requested with the
        *include* query parameter.
        """
        return self._japi_includable

    # ID
    # --

    def id(self, resource):
        """
        :rtype: str
        :returns: The id (route key) of the resource.
        """
        return str(resource.route_key)

    # Include
    # -------

    def resolve_include(self, value):
        """
        Validates the requested *include* parameter against
        :attr:`allowed_includes`.

        :seealso: :func:`blogapi.includes.resolve_include`

        :rtype: tuple
        :raises ~blogapi.errors.InvalidInclude:
        """
        return resolve_include(value, self.allowed_includes, self.type)

    def fetch_include(self, resource, relname):
        """
        .. seealso::

            http://jsonapi.org/format/#fetching-includes

        Fetches the related resources. The default method uses the
        :meth:`~blogapi.schema.base_fields.Relationship.include` method of
        the *Relationship* fields. **Can be overridden.**

        :arg resource:
            A resource object.
        :arg str relname:
            The name of the relationship.
        :rtype: list
        :returns:
            A list with the related resources. The list is empty or has
            exactly one element in the case of *to-one* relationships.
        """
        field = self._japi_relationships[relname]
        return field.include(self, resource)

    # Encoding
    # --------

    def encode_relationship(self, relname, resource, *, linkage=True):
        """
        .. seealso::

            http://jsonapi.org/format/#document-resource-object-relationships

        Creates the JSON API relationship object of the relationship *relname*.

        :arg str relname:
            The name of the relationship
        :arg resource:
            A resource object
        :arg bool linkage:
            If true, the resource linkage (*data* member) is added.

        :rtype: dict
        """
        field = self._japi_relationships[relname]
        resource_id = self.id(resource)

        d = dict()
        d["links"] = {
            "self": self.api.router.endpoint_url(
                "relationship", self.type, resource_id, relname
            ),
            "related": self.api.router.endpoint_url(
                "related", self.type, resource_id, relname
            )
        }
        if linkage:
            data = field.get(self, resource)
            d["data"] = field.encode(self, data)
        return d

    def encode_resource(self, resource, *, include=()):
        """
        .. seealso::

            http://jsonapi.org/format/#document-resource-objects

        Creates the JSON API resource object. Only the declared attributes
        are part of the resource object.

        :arg resource:
            A resource object
        :arg include:
            The names of the included relationships. Their resource linkage
            is added to the relationships object.
        :rtype: dict
        :returns:
            The JSON API resource object
        """
        d = dict()
        d["type"] = self.type
        d["id"] = self.id(resource)

        # JSON API attributes object
        d["attributes"] = {
            field.name: field.encode(self, field.get(self, resource))\
            for field in self._japi_attributes.values()
        }

        # JSON API relationships object
        relationships = {
            field.name: self.encode_relationship(
                field.name, resource, linkage=field.name in include
            )\
            for field in self._japi_relationships.values()
        }
        if relationships:
            d["relationships"] = relationships

        # JSON API links object
        d["links"] = {"self": self.api.resource_uri(resource)}
        return d

    # Validation (pre decode)
    # -----------------------

    def _validate_field_pre_decode(self, field, data, sp, present, context):
        """
        Validates the input data for a field, **before** it is decoded.

        :arg BaseField field:
        :arg data:
            The input data for the field.
        :arg ~jsonpointer.JsonPointer sp:
            The pointer to *data* in the original document.
        :arg bool present:
            False, if there was no input data for this field.
        :arg str context:
            The current crud context.
        """
        if present and not field.is_writable(context):
            detail = "The field '{}' is readonly.".format(field.name)
            raise ValidationError(detail=detail, source_pointer=sp)

        if not present:
            if field.is_required(context):
                detail = "The field '{}' is required.".format(field.name)
                raise InvalidValue(detail=detail, source_pointer=sp)
            return None

        if data is None and isinstance(field, Attribute):
            if not field.allow_none:
                detail = "The field '{}' must not be null.".format(field.name)
                raise InvalidValue(detail=detail, source_pointer=sp)
            return None

        field.validate_pre_decode(self, data, sp, context)
        return None

    def _validate_object_pre_decode(self, fields, data, sp, context, errors):
        """Validates the fields in the attributes or relationships object
        *data* and collects the errors in *errors*.
        """
        if not isinstance(data, collections.abc.Mapping):
            detail = "Must be an object."
            errors.append(InvalidType(detail=detail, source_pointer=sp))
            return None

        for name in data.keys() - fields.keys():
            detail = "The field '{}' does not exist.".format(name)
            errors.append(
                InvalidValue(detail=detail, source_pointer=sp_join(sp, name))
            )

        for field in fields.values():
            try:
                self._validate_field_pre_decode(
                    field, data.get(field.name), sp_join(sp, field.name),
                    field.name in data, context
                )
            except (Error, ErrorList) as err:
                errors.append(err)
        return None

    def validate_resource_pre_decode(self, data, sp, context):
        """
        Validates a JSON API resource object received from an API client::

            schema.validate_resource_pre_decode(
                data=request.json["data"], sp=ensure_pointer("/data"),
                context="creation"
            )

        All problems are reported together.

        :arg data:
            The received JSON API resource object
        :arg ~jsonpointer.JsonPointer sp:
            The JSON pointer to the source of *data*.
        :arg str context:
            The current crud context (*creation*).
        :raises ~blogapi.errors.ErrorList:
        """
        if not isinstance(data, collections.abc.Mapping):
            detail = "Must be an object."
            raise InvalidType(detail=detail, source_pointer=sp)

        if data.get("type") != self.type:
            detail = "The type must be '{}'.".format(self.type)
            raise Conflict(detail=detail, source_pointer=sp_join(sp, "type"))

        errors = ErrorList()
        self._validate_object_pre_decode(
            self._japi_attributes, data.get("attributes", {}),
            sp_join(sp, "attributes"), context, errors
        )
        self._validate_object_pre_decode(
            self._japi_relationships, data.get("relationships", {}),
            sp_join(sp, "relationships"), context, errors
        )
        if errors:
            raise errors
        return None

    # Decoding
    # --------

    def decode_resource(self, data, sp):
        """
        Decodes the JSON API resource object *data* and returns a dictionary
        which maps the key of a field to its decoded input data.

        :rtype: ~collections.OrderedDict
        :returns:
            An ordered dictionary which maps a fields key to a two tuple
            ``(data, sp)`` which contains the decoded input data and the
            source pointer to it.
        :raises ~blogapi.errors.ErrorList:
        """
        memo = collections.OrderedDict()
        errors = ErrorList()

        members = (
            ("attributes", self._japi_attributes),
            ("relationships", self._japi_relationships)
        )
        for member, fields in members:
            values = data.get(member, {})
            for field in fields.values():
                if field.name not in values:
                    continue

                field_sp = sp_join(sp, member, field.name)
                field_data = values[field.name]
                try:
                    if field_data is None and isinstance(field, Attribute):
                        decoded = None
                    else:
                        decoded = field.decode(self, field_data, field_sp)
                except (Error, ErrorList) as err:
                    errors.append(err)
                else:
                    memo[field.key] = (decoded, field_sp)

        if errors:
            raise errors
        return memo

    # Validate (post decode)
    # ----------------------

    def validate_resource_post_decode(self, memo, context):
        """
        Validates the decoded *data* of JSON API resource object.

        :arg ~collections.OrderedDict memo:
            The *memo* object returned from :meth:`decode_resource`.
        :arg str context:
            The current crud context.
        :raises ~blogapi.errors.ErrorList:
        """
        errors = ErrorList()
        for key, (data, sp) in memo.items():
            field = self._fields_by_key[key]
            try:
                field.validate_post_decode(self, data, sp, context)
            except (Error, ErrorList) as err:
                errors.append(err)

        if errors:
            raise errors
        return None

    # CRUD (resource)
    # ---------------

    def create_resource(self, data, sp, **kargs):
        """
        .. seealso::

            http://jsonapi.org/format/#crud-creating

        Creates a new resource instance and returns it. **You should override
        this method** in order to save the resource.

        The default implementation passes the attributes and (dereferenced)
        relationships from the JSON API resource object *data* to the
        constructor of the resource class. The additional keyword arguments
        *kargs* are passed to the constructor too.

        :arg dict data:
            The JSON API resource object with the initial data.
        :arg ~jsonpointer.JsonPointer sp:
            The JSON pointer to the source of *data*.
        """
        self.validate_resource_pre_decode(data, sp, "creation")
        memo = self.decode_resource(data, sp)
        self.validate_resource_post_decode(memo, "creation")

        # Map the property names on the resource instance to its initial data.
        init = {
            self._fields_by_key[key].mapped_key: value\
            for key, (value, field_sp) in memo.items()
        }
        init.update(kargs)

        resource = self.resource_class(**init)
        return resource

    # Querying
    # --------

    def get_resource(self, id_):
        """
        Returns the resource with the id *id_* or *None*. **Must be
        overridden.**
        """
        raise NotImplementedError()

    def query_collection(self, include=()):
        """
        .. seealso::

            http://jsonapi.org/format/#fetching

        Returns all resources in the collection represented by this schema.
        **Must be overridden.**

        :arg tuple include:
            The (validated) names of the relationships which will be included
            into the response, so that they can be loaded eagerly.
        """
        raise NotImplementedError()

    def query_resource(self, id_, include=()):
        """
        .. seealso::

            http://jsonapi.org/format/#fetching

        Fetches the resource with the id *id_*.

        :arg str id_:
            The id of the requested resource.
        :arg tuple include:
            The (validated) names of the relationships which will be included
            into the response.
        :raises ~blogapi.errors.ResourceNotFound:
            If there is no resource with the given *id_*.
        """
        resource = self.get_resource(id_)
        if resource is None:
            raise ResourceNotFound(self.type, id_)
        return resource

    def query_relative(self, relname, resource):
        """
        Controller for the *related* endpoint of the to-one relationship with
        the name *relname*.

        Returns the related resource or ``None``.
        """
        field = self._japi_relationships[relname]
        assert field.to_one
        return field.get(self, resource)

    def query_relatives(self, relname, resource):
        """
        Controller for the *related* endpoint of the to-many relationship with
        the name *relname*.

        Returns a list with the related resources.
        """
        field = self._japi_relationships[relname]
        assert field.to_many
        return list(field.get(self, resource))
