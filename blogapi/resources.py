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
blogapi.resources
=================

The schemas of the blog: *articles*, *categories* and *users*. Each schema
declares the exposed attributes, the relationships and which relationships a
client may include.
"""

__all__ = [
    "StoreSchema",
    "CategorySchema",
    "ArticleSchema",
    "UserSchema"
]

# std
import logging

# local
from .errors import ValidationError
from .models import Article, Category, User
from .schema import base_fields, fields
from .schema.schema import Schema
from .utilities import sp_join


LOG = logging.getLogger(__name__)


class StoreSchema(Schema):
    """
    A schema, whose resources are kept in a :class:`~blogapi.store.Store`.

    :arg ~blogapi.store.Store store:
    """

    def __init__(self, store, api=None):
        super().__init__(api=api)
        self.store = store
        return None

    def get_resource(self, id_):
        return self.store.find_by_route_key(self.resource_class, id_)

    def query_collection(self, include=()):
        return self.store.all(self.resource_class)


class CategorySchema(StoreSchema):

    resource_class = Category
    type = "categories"

    name = fields.String()

    articles = base_fields.ToManyRelationship(
        foreign_type="articles", writable="never"
    )


class UserSchema(StoreSchema):

    resource_class = User
    type = "users"

    name = fields.String()
    email = fields.EMail()


class ArticleSchema(StoreSchema):

    resource_class = Article
    type = "articles"

    opts = {
        "creatable": True,
        "create_ability": "articles:create"
    }

    title = fields.String(required="creation", min_length=4)
    slug = fields.String(
        required="creation", regex=r"[a-z0-9]+(?:-[a-z0-9]+)*"
    )
    content = fields.String(required="creation")
    published_at = fields.DateTime(name="published-at", allow_none=True)
    created_at = fields.DateTime(name="created-at", writable="never")

    category = base_fields.ToOneRelationship(
        foreign_type="categories", includable=True, required="creation",
        allow_none=False
    )
    author = base_fields.ToOneRelationship(
        foreign_type="users", includable=True, writable="never"
    )

    @slug.validator
    def slug(self, data, sp):
        if self.store.first(Article, slug=data) is not None:
            raise self.slug_taken(sp)
        return None

    @staticmethod
    def slug_taken(sp):
        detail = "The slug has already been taken."
        return ValidationError(detail=detail, source_pointer=sp)

    def create_resource(self, data, sp, *, request=None):
        """
        Creates the article, links it with its category and stores it. The
        authenticated user becomes the author.

        The slug is checked again when the article is stored, so that
        concurrent requests can not create two articles with the same slug.
        """
        article = super().create_resource(data, sp, author=request.user)
        self.store.add_unique(
            article, self.slug_taken(sp_join(sp, "attributes", "slug")),
            slug=article.slug
        )
        article.category.articles.append(article)
        return article
