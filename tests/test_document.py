import pytest

from blogapi.api import API
from blogapi.document import build_document, serialize
from blogapi.request import Request
from blogapi.schema import base_fields, fields
from blogapi.schema.schema import Schema


class Author(object):

    def __init__(self, key, name, secret="hidden"):
        self.route_key = key
        self.name = name
        self.secret = secret


class Post(object):

    def __init__(self, key, title, author, editors=()):
        self.route_key = key
        self.title = title
        self.author = author
        self.editors = list(editors)


class AuthorSchema(Schema):
    resource_class = Author
    type = "authors"

    name = fields.String()


class PostSchema(Schema):
    resource_class = Post
    type = "posts"

    title = fields.String()
    author = base_fields.ToOneRelationship(
        foreign_type="authors", includable=True
    )
    editors = base_fields.ToManyRelationship(
        foreign_type="authors", includable=True
    )
    reviewer = base_fields.ToOneRelationship(
        foreign_type="authors", includable=True, mapped_key="missing"
    )

    def __init__(self, posts, **kargs):
        super().__init__(**kargs)
        self.posts = posts

    def get_resource(self, id_):
        return next((post for post in self.posts if post.route_key == id_), None)

    def query_collection(self, include=()):
        return list(self.posts)


@pytest.fixture()
def alice():
    return Author("alice", "Alice")


@pytest.fixture()
def bob():
    return Author("bob", "Bob")


@pytest.fixture()
def posts(alice, bob):
    return [
        Post("first", "First", alice, editors=[bob, alice]),
        Post("second", "Second", None)
    ]


@pytest.fixture()
def api(posts):
    api = API(uri="/api")
    api.add_schema(AuthorSchema())
    api.add_schema(PostSchema(posts))
    return api


def test_allow_list_is_collected_from_the_schemas(api):
    assert api.allowed_includes == {
        "authors": frozenset(),
        "posts": frozenset(["author", "editors", "reviewer"])
    }


def test_attributes_are_an_explicit_mapping(api, alice):
    data = api.get_schema("authors").encode_resource(alice)

    assert data["attributes"] == {"name": "Alice"}
    assert "secret" not in data["attributes"]
    assert "relationships" not in data


def test_serialize_without_include(api, posts):
    data, included = serialize(api, posts[0])

    assert data["type"] == "posts"
    assert data["id"] == "first"
    assert data["relationships"]["author"] == {
        "links": {
            "self": "/api/posts/first/relationships/author",
            "related": "/api/posts/first/author"
        }
    }
    assert included == []


def test_to_many_relatives_keep_their_order(api, posts):
    data, included = serialize(api, posts[0], ("editors",))

    assert [item["id"] for item in included] == ["bob", "alice"]
    assert data["relationships"]["editors"]["data"] == [
        {"type": "authors", "id": "bob"}, {"type": "authors", "id": "alice"}
    ]


def test_missing_to_one_relative_is_not_included(api, posts):
    document = build_document(api, posts, ("author",), many=True)

    assert [item["id"] for item in document["included"]] == ["alice"]
    assert document["data"][1]["relationships"]["author"]["data"] is None


def test_included_is_flattened_per_primary_resource(api, posts):
    document = build_document(api, posts, ("author", "editors"), many=True)

    assert [item["id"] for item in document["included"]] == \
        ["alice", "bob", "alice"]


def test_no_included_member_without_include(api, posts):
    document = build_document(api, posts, many=True)

    assert "included" not in document
    assert [item["id"] for item in document["data"]] == ["first", "second"]


def test_null_primary_data(api):
    assert build_document(api, None) == {"data": None}


def test_included_resources_are_one_level_deep(api, posts):
    document = build_document(api, posts[0], ("author",))

    author = document["included"][0]
    assert author == {
        "type": "authors",
        "id": "alice",
        "attributes": {"name": "Alice"},
        "links": {"self": "/api/authors/alice"}
    }


def test_unloadable_relation_is_a_server_error(api, posts):
    with pytest.raises(AttributeError):
        serialize(api, posts[0], ("reviewer",))

    resp = api.handle_request(Request("/api/posts/first?include=reviewer"))
    assert resp.status == 500
    assert b"Internal Server Error" in resp.body


def test_debug_mode_propagates_unexpected_errors(api):
    api.debug = True

    with pytest.raises(AttributeError):
        api.handle_request(Request("/api/posts/first?include=reviewer"))
