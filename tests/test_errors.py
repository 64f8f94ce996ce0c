import json

from jsonpointer import JsonPointer

from blogapi import errors


def test_error_object_omits_empty_members():
    err = errors.NotFound()

    assert err.json == {"title": "Not Found", "status": "404"}


def test_source_pointer_accepts_json_pointers():
    err = errors.InvalidValue(
        detail="Must be a string.",
        source_pointer=JsonPointer("/data/attributes/title")
    )

    assert err.http_status == 422
    assert err.json["source"] == {"pointer": "/data/attributes/title"}


def test_source_parameter():
    err = errors.BadRequest(source_parameter="include", meta={"hint": "x"})

    assert err.json["source"] == {"parameter": "include"}
    assert err.json["meta"] == {"hint": "x"}


def test_error_list_flattens_nested_lists():
    inner = errors.ErrorList([errors.InvalidValue(), errors.InvalidType()])
    outer = errors.ErrorList()
    outer.append(inner)
    outer.append(errors.ValidationError())

    assert len(outer) == 3
    assert outer.http_status == 422


def test_error_list_status_of_mixed_errors():
    assert errors.ErrorList(
        [errors.NotFound(), errors.Conflict()]
    ).http_status == 400
    assert errors.ErrorList(
        [errors.NotFound(), errors.InternalServerError()]
    ).http_status == 500


def test_error_to_response():
    err = errors.ResourceNotFound("articles", "missing")

    resp = errors.error_to_response(err, dump_json=json.dumps)

    assert resp.status == 404
    assert resp.headers["Content-Type"] == "application/vnd.api+json"
    assert json.loads(resp.body.decode()) == {
        "errors": [{
            "title": "Not Found",
            "detail": "The resource (type='articles', id='missing') does not exist.",
            "status": "404"
        }]
    }
