import pytest

from blogapi.errors import InvalidInclude
from blogapi.includes import parse_include, resolve_include


ALLOWED = frozenset(["category", "author"])


@pytest.mark.parametrize("value", [None, "", ",", " , ,"])
def test_empty_include_yields_nothing(value):
    assert parse_include(value) == ()
    assert resolve_include(value, ALLOWED, "articles") == ()


def test_names_are_trimmed_and_deduplicated_in_request_order():
    value = " author ,category,, author,category "
    assert parse_include(value) == ("author", "category")


def test_allowed_names_are_returned():
    assert resolve_include("category", ALLOWED, "articles") == ("category",)
    assert resolve_include("category,author", ALLOWED, "articles") == (
        "category", "author"
    )


def test_already_parsed_names_are_accepted():
    assert resolve_include(("author", "category"), ALLOWED, "articles") == (
        "author", "category"
    )


def test_first_invalid_name_is_reported():
    with pytest.raises(InvalidInclude) as excinfo:
        resolve_include("unknown,unknown2", ALLOWED, "articles")

    err = excinfo.value
    assert err.relname == "unknown"
    assert err.typename == "articles"
    assert err.http_status == 400
    assert err.json == {
        "title": "Bad Request",
        "detail": "The included relationship 'unknown' is not allowed in "
                  "the 'articles' resource",
        "status": "400"
    }


@pytest.mark.parametrize("value, rejected", [
    ("category,unknown", "unknown"),
    ("unknown,category", "unknown"),
    ("author,category.articles,unknown", "category.articles"),
])
def test_valid_names_do_not_hide_invalid_ones(value, rejected):
    with pytest.raises(InvalidInclude) as excinfo:
        resolve_include(value, ALLOWED, "articles")
    assert excinfo.value.relname == rejected


def test_nothing_is_allowed_without_relationships():
    with pytest.raises(InvalidInclude):
        resolve_include("articles", frozenset(), "categories")
