import io
import json

import pytest
from werkzeug.test import Client as WSGIClient

from blogapi import auth
from blogapi.wsgi import Application


@pytest.fixture()
def app(api):
    return Application(api)


@pytest.fixture()
def wsgi_client(app):
    return WSGIClient(app)


def call(app, method, path, query="", body=b"", **extra):
    """Calls *app* with a PEP 3333 environ, *path* is a native str."""
    environ = {
        "REQUEST_METHOD": method,
        "SCRIPT_NAME": "",
        "PATH_INFO": path.encode("utf-8").decode("latin-1"),
        "QUERY_STRING": query,
        "SERVER_NAME": "localhost",
        "SERVER_PORT": "80",
        "SERVER_PROTOCOL": "HTTP/1.1",
        "CONTENT_LENGTH": str(len(body)),
        "wsgi.url_scheme": "http",
        "wsgi.input": io.BytesIO(body)
    }
    environ.update(extra)

    started = {}

    def start_response(status, headers, exc_info=None):
        started["status"] = int(status.split()[0])
        started["headers"] = dict(headers)
        return None

    body = b"".join(app(environ, start_response))
    return started["status"], started["headers"], body


def test_get_with_query_string(app, make_article):
    article = make_article()

    status, headers, body = call(
        app, "GET", "/api/v1/articles/" + article.slug, query="include=category"
    )

    assert status == 200
    assert headers["Content-Type"] == "application/vnd.api+json"
    assert json.loads(body.decode())["included"][0]["id"] == article.category.slug


def test_error_status(app):
    status, headers, body = call(app, "GET", "/api/v1/articles/missing")

    assert status == 404
    assert json.loads(body.decode())["errors"][0]["status"] == "404"


def test_non_ascii_path_info(app, make_category):
    category = make_category(slug="café")

    status, headers, body = call(app, "GET", "/api/v1/categories/café")

    assert status == 200
    assert json.loads(body.decode())["data"]["id"] == category.slug


def test_percent_encoded_non_ascii_path(wsgi_client, make_category):
    make_category(slug="café")

    resp = wsgi_client.get("/api/v1/categories/caf%C3%A9")

    assert resp.status_code == 200
    assert json.loads(resp.get_data())["data"]["id"] == "café"


def test_path_is_decoded_only_once(wsgi_client, make_category):
    make_category(slug="100%-news")

    resp = wsgi_client.get("/api/v1/categories/100%25-news")

    assert resp.status_code == 200
    assert json.loads(resp.get_data())["data"]["id"] == "100%-news"


def test_authorization_header_is_passed_on(wsgi_client, store, make_user):
    token, plain = auth.issue_token(store, make_user(), "device")

    resp = wsgi_client.post(
        "/api/v1/logout", headers={"Authorization": "Bearer " + plain}
    )

    assert resp.status_code == 204
    assert resp.get_data() == b""
    assert auth.find_token(store, plain) is None


def test_json_body_is_read(wsgi_client, make_user):
    make_user(email="jane@example.org")

    resp = wsgi_client.post(
        "/api/v1/login",
        data=json.dumps({
            "email": "jane@example.org",
            "password": "password",
            "device_name": "wsgi"
        }),
        content_type="application/json"
    )

    assert resp.status_code == 200
    assert "plain-text-token" in json.loads(resp.get_data())
