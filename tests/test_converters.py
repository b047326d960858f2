import pytest

from utilkit.core.exceptions import ValidationError
from utilkit.utils.converters import (
    compare_json_objects,
    convert_double_to_int,
    get_unique_objects,
    has_duplicates,
    number_to_str_or_empty,
    to_boolean_safe,
    to_json,
)


@pytest.mark.parametrize(
    "value, expected",
    [
        (None, False),
        (True, True),
        (False, False),
        (1, True),
        (1.0, True),
        (0, False),
        (2, False),
        (" TRUE ", True),
        ("false", False),
        ("1", True),
        ("0", False),
        ("yes", False),
        ([], False),
    ],
)
def test_to_boolean_safe(value, expected):
    assert to_boolean_safe(value) is expected


@pytest.mark.parametrize(
    "value, expected",
    [
        (123.456, 12346),
        (0.125, 13),
        (1.005, 100),
        (-1.5, -150),
        (float("nan"), 0),
        (float("inf"), 0),
        ("abc", 0),
        (None, 0),
        ("2.5", 250),
    ],
)
def test_convert_double_to_int(value, expected):
    assert convert_double_to_int(value) == expected


def test_number_to_str_or_empty():
    assert number_to_str_or_empty(0) == ""
    assert number_to_str_or_empty(12) == "12"


def test_to_json():
    data = {"name": "Alice"}
    assert to_json(data) is data
    assert to_json('{"name": "John", "age": 30}') == {"name": "John", "age": 30}
    assert to_json("[1, 2]") == [1, 2]
    assert to_json(42) is None
    assert to_json(None) is None


def test_to_json_rejects_invalid_string():
    with pytest.raises(ValidationError):
        to_json("not a valid JSON")


def test_get_unique_objects():
    items = [
        {"id": 1, "name": "Alice"},
        {"id": 2, "name": "Bob"},
        {"id": 1, "name": "Alice"},
    ]
    assert get_unique_objects(items) == [{"id": 1, "name": "Alice"}, {"id": 2, "name": "Bob"}]


def test_compare_json_objects():
    assert compare_json_objects({"a": 1, "b": {"c": [1, 2]}}, {"b": {"c": [1, 2]}, "a": 1})
    assert not compare_json_objects({"a": 1}, {"a": 1, "b": 2})
    assert not compare_json_objects({"a": {"c": 1}}, {"a": {"c": 2}})
    assert not compare_json_objects({"a": [1, 2]}, {"a": [2, 1]})


def test_has_duplicates():
    assert has_duplicates([1, 2, 1]) is True
    assert has_duplicates([1, 2, 3]) is False
    assert has_duplicates([{"a": 1}, {"a": 1}]) is True
    assert has_duplicates([{"a": 1}, {"a": 2}]) is False
