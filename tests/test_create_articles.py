import threading
import time

import pytest

from blogapi import auth
from blogapi.models import Article


JSONAPI = "application/vnd.api+json"


@pytest.fixture()
def author(make_user, make_permission):
    return make_user(permissions=[make_permission("articles:create")])


@pytest.fixture()
def token(store, author):
    token, plain = auth.issue_token(
        store, author, "tests", abilities=author.permission_names
    )
    return plain


def article_document(category, **attributes):
    attrs = {
        "title": "A new article",
        "slug": "a-new-article",
        "content": "Some content"
    }
    attrs.update(attributes)
    return {
        "data": {
            "type": "articles",
            "attributes": attrs,
            "relationships": {
                "category": {"data": {"type": "categories", "id": category.slug}}
            }
        }
    }


def test_authenticated_users_can_create_articles(
        client, store, author, token, make_category):
    category = make_category()

    resp = client.post(
        "/articles", article_document(category, **{"published-at": "2024-05-01T10:00:00Z"}),
        content_type=JSONAPI, token=token
    )

    assert resp.status == 201
    assert resp.headers["Location"] == "/api/v1/articles/a-new-article"
    assert resp.json["data"]["attributes"]["published-at"] == \
        "2024-05-01T10:00:00+00:00"

    article = store.first(Article, slug="a-new-article")
    assert article.author is author
    assert article.category is category
    assert article in category.articles


def test_guests_cannot_create_articles(client, make_category):
    resp = client.post(
        "/articles", article_document(make_category()), content_type=JSONAPI
    )

    assert resp.status == 401


def test_token_needs_the_create_ability(client, store, make_user, make_category):
    user = make_user()
    token, plain = auth.issue_token(store, user, "tests", abilities=[])

    resp = client.post(
        "/articles", article_document(make_category()),
        content_type=JSONAPI, token=plain
    )

    assert resp.status == 403


def test_content_type_must_be_jsonapi(client, token, make_category):
    resp = client.post("/articles", article_document(make_category()), token=token)

    assert resp.status == 415


def test_required_fields_are_reported_together(client, token):
    document = {"data": {"type": "articles", "attributes": {}}}

    resp = client.post("/articles", document, content_type=JSONAPI, token=token)

    assert resp.status == 422
    pointers = {error["source"]["pointer"] for error in resp.json["errors"]}
    assert pointers == {
        "/data/attributes/title",
        "/data/attributes/slug",
        "/data/attributes/content",
        "/data/relationships/category"
    }


@pytest.mark.parametrize("attributes, pointer", [
    ({"title": "abc"}, "/data/attributes/title"),
    ({"slug": "Not A Slug"}, "/data/attributes/slug"),
    ({"content": 42}, "/data/attributes/content"),
    ({"published-at": "yesterday"}, "/data/attributes/published-at"),
    ({"created-at": "2024-05-01T10:00:00Z"}, "/data/attributes/created-at"),
])
def test_invalid_attributes_are_rejected(
        client, token, make_category, attributes, pointer):
    resp = client.post(
        "/articles", article_document(make_category(), **attributes),
        content_type=JSONAPI, token=token
    )

    assert resp.status == 422
    assert [error["source"]["pointer"] for error in resp.json["errors"]] == \
        [pointer]


def test_slug_must_be_unique(client, token, make_article, make_category):
    make_article(slug="a-new-article")

    resp = client.post(
        "/articles", article_document(make_category()),
        content_type=JSONAPI, token=token
    )

    assert resp.status == 422
    assert resp.json["errors"][0]["detail"] == "The slug has already been taken."


def test_category_must_exist(client, token, make_category):
    category = make_category()
    document = article_document(category)
    document["data"]["relationships"]["category"]["data"]["id"] = "missing"

    resp = client.post("/articles", document, content_type=JSONAPI, token=token)

    assert resp.status == 422
    assert resp.json["errors"][0]["source"]["pointer"] == \
        "/data/relationships/category/data"


def test_type_must_match_the_collection(client, token, make_category):
    document = article_document(make_category())
    document["data"]["type"] = "categories"

    resp = client.post("/articles", document, content_type=JSONAPI, token=token)

    assert resp.status == 409


def test_categories_cannot_be_created(client, token):
    document = {"data": {"type": "categories", "attributes": {"name": "News"}}}

    resp = client.post("/categories", document, content_type=JSONAPI, token=token)

    assert resp.status == 405


def test_concurrent_requests_cannot_reuse_a_slug(
        client, store, token, make_category, monkeypatch):
    category = make_category()
    first = store.first

    def slow_first(cls, **criteria):
        result = first(cls, **criteria)
        time.sleep(0.1)
        return result
    monkeypatch.setattr(store, "first", slow_first)

    statuses = []

    def create():
        resp = client.post(
            "/articles", article_document(category, slug="same-slug"),
            content_type=JSONAPI, token=token
        )
        statuses.append(resp.status)

    threads = [threading.Thread(target=create) for i in range(2)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert sorted(statuses) == [201, 422]
    assert len(store.filter(Article, slug="same-slug")) == 1
    assert len(category.articles) == 1


def test_client_generated_id_is_ignored(client, token, make_category):
    document = article_document(make_category())
    document["data"]["id"] = "chosen-by-the-client"

    resp = client.post("/articles", document, content_type=JSONAPI, token=token)

    assert resp.status == 201
    assert resp.json["data"]["id"] == "a-new-article"
