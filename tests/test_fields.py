import datetime

import pytest

from blogapi.errors import InvalidType, InvalidValue
from blogapi.schema import fields


SP = "/data/attributes/field"


def test_string_type_and_length():
    field = fields.String(min_length=2, max_length=4)

    field.validate_pre_decode(None, "abc", SP, "creation")
    with pytest.raises(InvalidType):
        field.validate_pre_decode(None, 42, SP, "creation")
    with pytest.raises(InvalidValue):
        field.validate_pre_decode(None, "a", SP, "creation")
    with pytest.raises(InvalidValue) as excinfo:
        field.validate_pre_decode(None, "abcde", SP, "creation")
    assert excinfo.value.source_pointer == SP


def test_string_regex_must_match_completely():
    field = fields.String(regex="[a-z]+")

    field.validate_pre_decode(None, "slug", SP, "creation")
    with pytest.raises(InvalidValue):
        field.validate_pre_decode(None, "slug-2", SP, "creation")


def test_email():
    field = fields.EMail()

    field.validate_pre_decode(None, "jane@example.org", SP, "creation")
    with pytest.raises(InvalidValue):
        field.validate_pre_decode(None, "jane", SP, "creation")


def test_datetime_decoding_assumes_utc():
    field = fields.DateTime()

    field.validate_pre_decode(None, "2024-05-01T10:00:00", SP, "creation")
    decoded = field.decode(None, "2024-05-01T10:00:00", SP)

    assert decoded == datetime.datetime(
        2024, 5, 1, 10, tzinfo=datetime.timezone.utc
    )
    assert field.encode(None, decoded) == "2024-05-01T10:00:00+00:00"
    assert field.encode(None, None) is None


def test_datetime_rejects_garbage():
    field = fields.DateTime()

    with pytest.raises(InvalidValue):
        field.validate_pre_decode(None, "yesterday", SP, "creation")
    with pytest.raises(InvalidType):
        field.validate_pre_decode(None, 1714557600, SP, "creation")


def test_custom_validators_run_in_their_context():
    calls = []
    field = fields.String()
    field.validator(
        lambda schema, data, sp: calls.append(("creation", data)),
        context="creation"
    )
    field.validator(
        lambda schema, data, sp: calls.append(("never", data)), context="never"
    )
    field.validator(
        lambda schema, data, sp: calls.append(("pre", data)), when="pre-decode"
    )

    field.validate_post_decode(None, "title", SP, "creation")

    assert calls == [("creation", "title")]
