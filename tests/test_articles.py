def category_resource(category):
    return {
        "type": "categories",
        "id": category.slug,
        "attributes": {"name": category.name},
        "relationships": {
            "articles": {
                "links": {
                    "self": "/api/v1/categories/{}/relationships/articles"
                        .format(category.slug),
                    "related": "/api/v1/categories/{}/articles"
                        .format(category.slug)
                }
            }
        },
        "links": {"self": "/api/v1/categories/" + category.slug}
    }


def test_can_fetch_a_single_article(client, make_article):
    article = make_article()

    resp = client.get("/articles/" + article.slug)

    assert resp.status == 200
    assert resp.headers["Content-Type"] == "application/vnd.api+json"
    data = resp.json["data"]
    assert data["type"] == "articles"
    assert data["id"] == article.slug
    assert data["attributes"] == {
        "title": article.title,
        "slug": article.slug,
        "content": article.content,
        "published-at": None,
        "created-at": article.created_at.isoformat()
    }
    assert data["links"] == {"self": "/api/v1/articles/" + article.slug}
    assert "data" not in data["relationships"]["category"]
    assert "included" not in resp.json


def test_can_fetch_all_articles(client, make_article):
    articles = [make_article(), make_article(), make_article()]

    resp = client.get("/articles")

    assert resp.status == 200
    assert [item["id"] for item in resp.json["data"]] == \
        [article.slug for article in articles]
    assert resp.json["links"] == {"self": "/api/v1/articles"}
    assert "included" not in resp.json


def test_unknown_article_is_not_found(client):
    resp = client.get("/articles/does-not-exist")

    assert resp.status == 404
    assert resp.json["errors"][0]["status"] == "404"


def test_can_include_related_category_of_an_article(client, make_article):
    article = make_article()

    resp = client.get("/articles/{}?include=category".format(article.slug))

    assert resp.status == 200
    assert resp.json["included"] == [category_resource(article.category)]
    assert resp.json["data"]["relationships"]["category"]["data"] == {
        "type": "categories", "id": article.category.slug
    }


def test_can_include_related_categories_of_multiple_articles(
        client, make_article):
    article = make_article()
    article2 = make_article()

    resp = client.get("/articles?include=category")

    assert resp.status == 200
    assert resp.json["included"] == [
        category_resource(article.category),
        category_resource(article2.category)
    ]


def test_shared_categories_are_not_deduplicated(
        client, make_article, make_category):
    category = make_category()
    make_article(category=category)
    make_article(category=category)

    resp = client.get("/articles?include=category")

    assert resp.json["included"] == [
        category_resource(category), category_resource(category)
    ]


def test_included_order_follows_articles_then_include_order(
        client, make_article):
    article = make_article()
    article2 = make_article()

    resp = client.get("/articles?include=author,category")

    assert [(item["type"], item["id"]) for item in resp.json["included"]] == [
        ("users", str(article.author.pk)),
        ("categories", article.category.slug),
        ("users", str(article2.author.pk)),
        ("categories", article2.category.slug),
    ]


def test_included_author_exposes_only_declared_attributes(
        client, make_article):
    article = make_article()

    resp = client.get("/articles/{}?include=author".format(article.slug))

    author = resp.json["included"][0]
    assert author["attributes"] == {
        "name": article.author.name, "email": article.author.email
    }


def test_cannot_include_unknown_relationships(client, make_article):
    article = make_article()

    resp = client.get("/articles/{}?include=unknown,unknown2".format(article.slug))
    assert resp.status == 400

    resp = client.get("/articles?include=unknown,unknown2")
    assert resp.status == 400
    assert resp.json == {
        "errors": [{
            "title": "Bad Request",
            "detail": "The included relationship 'unknown' is not allowed "
                      "in the 'articles' resource",
            "status": "400"
        }]
    }


def test_valid_include_is_not_served_next_to_an_invalid_one(
        client, make_article):
    article = make_article()

    resp = client.get("/articles/{}?include=category,unknown".format(article.slug))

    assert resp.status == 400
    assert "data" not in resp.json
    assert "included" not in resp.json
    assert resp.json["errors"][0]["detail"] == \
        "The included relationship 'unknown' is not allowed in the 'articles' resource"


def test_empty_include_is_ignored(client, make_article):
    article = make_article()

    plain = client.get("/articles/" + article.slug)
    resp = client.get("/articles/{}?include=".format(article.slug))

    assert resp.status == 200
    assert "included" not in resp.json
    assert resp.json["data"] == plain.json["data"]


def test_same_request_yields_identical_body(client, make_article):
    make_article()
    make_article()

    first = client.get("/articles?include=category,author")
    second = client.get("/articles?include=category,author")

    assert first.body == second.body


def test_categories_do_not_allow_includes(client, make_article):
    article = make_article()

    resp = client.get("/categories/{}?include=articles".format(article.category.slug))

    assert resp.status == 400
    assert resp.json["errors"][0]["detail"] == \
        "The included relationship 'articles' is not allowed in the 'categories' resource"


def test_can_fetch_related_category(client, make_article):
    article = make_article()

    resp = client.get("/articles/{}/category".format(article.slug))

    assert resp.status == 200
    assert resp.json["data"] == category_resource(article.category)


def test_can_fetch_category_linkage(client, make_article):
    article = make_article()

    resp = client.get("/articles/{}/relationships/category".format(article.slug))

    assert resp.status == 200
    assert resp.json["data"] == {
        "type": "categories", "id": article.category.slug
    }
    assert resp.json["links"]["related"] == \
        "/api/v1/articles/{}/category".format(article.slug)


def test_can_fetch_articles_of_a_category_with_includes(
        client, make_article, make_category):
    category = make_category()
    article = make_article(category=category)
    make_article()

    resp = client.get("/categories/{}/articles?include=author".format(category.slug))

    assert resp.status == 200
    assert [item["id"] for item in resp.json["data"]] == [article.slug]
    assert resp.json["included"][0]["id"] == str(article.author.pk)


def test_unknown_url_is_not_found(client):
    resp = client.get("/comments")
    assert resp.status == 404


def test_method_not_allowed(client, make_article):
    article = make_article()

    resp = client.request("DELETE", "/articles/" + article.slug)

    assert resp.status == 405
