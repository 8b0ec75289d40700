import pytest

from infrastructure.utils.validation_utils import (
    INT32_MAX,
    INT32_MIN,
    generate_object_id,
    is_object_id,
    parse_int,
    parse_whole_number,
)


def test_generated_ids_are_object_ids():
    assert is_object_id(generate_object_id())


@pytest.mark.parametrize("value", [
    "a" * 24 + "\n", "\n" + "a" * 24, "a" * 23, "a" * 25, "g" * 24, " " + "a" * 23, None, 12345,
])
def test_is_object_id_rejects(value):
    assert not is_object_id(value)


@pytest.mark.parametrize("raw, expected", [
    ("1", 1), ("1.0", 1), (" 2 ", 2), ("-3", -3), (0, 0),
    ("1.5", None), ("0.9", None), ("abc", None), ("", None), (None, None), ("nan", None),
    ("1e20", None), (True, None),
])
def test_parse_whole_number(raw, expected):
    assert parse_whole_number(raw) == expected


@pytest.mark.parametrize("raw, expected", [
    ("7.9", 7), ("-7.9", -7), ("abc", 0), ("1e20", INT32_MAX), ("-1e20", INT32_MIN),
])
def test_parse_int(raw, expected):
    assert parse_int(raw) == expected
