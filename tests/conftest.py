import itertools
import json

import pytest

from blogapi import auth
from blogapi.app import create_api
from blogapi.models import Article, Category, Permission, User
from blogapi.request import Request
from blogapi.store import Store


class Client(object):
    """Sends requests to the API and decodes the JSON responses."""

    def __init__(self, api):
        self.api = api
        self.token = None

    def request(self, method, path, body=None, content_type="application/json",
                token=None):
        headers = {}
        token = token or self.token
        if token:
            headers["Authorization"] = "Bearer " + token
        if body is not None:
            headers["Content-Type"] = content_type
            body = json.dumps(body)

        uri = self.api.router.base_url + path
        resp = self.api.handle_request(
            Request(uri, method=method, headers=headers, body=body or b"")
        )
        resp.json = json.loads(resp.body) if resp.body else None
        return resp

    def get(self, path, **kargs):
        return self.request("GET", path, **kargs)

    def post(self, path, body=None, **kargs):
        return self.request("POST", path, body=body, **kargs)


@pytest.fixture()
def store() -> Store:
    return Store()


@pytest.fixture()
def api(store):
    return create_api({"password_iterations": 1000}, store=store)


@pytest.fixture()
def client(api) -> Client:
    return Client(api)


@pytest.fixture()
def make_user(store):
    counter = itertools.count(1)

    def factory(name=None, email=None, password="password", permissions=()):
        n = next(counter)
        user = User(
            name=name or "User {}".format(n),
            email=email or "user{}@example.org".format(n),
            password=auth.hash_password(password, iterations=1000),
            permissions=permissions
        )
        return store.add(user)
    return factory


@pytest.fixture()
def make_permission(store):
    counter = itertools.count(1)

    def factory(name=None):
        return store.add(
            Permission(name=name or "permission-{}".format(next(counter)))
        )
    return factory


@pytest.fixture()
def make_category(store):
    counter = itertools.count(1)

    def factory(name=None, slug=None):
        n = next(counter)
        category = Category(
            name=name or "Category {}".format(n),
            slug=slug or "category-{}".format(n)
        )
        return store.add(category)
    return factory


@pytest.fixture()
def make_article(store, make_category, make_user):
    counter = itertools.count(1)

    def factory(title=None, slug=None, content="Lorem ipsum", category=None,
                author=None):
        n = next(counter)
        article = Article(
            title=title or "Article {}".format(n),
            slug=slug or "article-{}".format(n),
            content=content,
            category=category or make_category(),
            author=author or make_user()
        )
        article.category.articles.append(article)
        return store.add(article)
    return factory
