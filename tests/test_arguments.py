"""
Unit tests for tool argument coercion.
"""
from issue_assistant.tools.arguments import coerce_arguments, coerce_value

SCHEMA = {
    "type": "object",
    "properties": {
        "q": {"type": "string"},
        "perPage": {"type": "number"},
        "issue_number": {"type": "integer"},
        "labels": {"type": "array", "items": {"type": "string"}},
        "ids": {"type": "array", "items": {"type": "integer"}},
        "draft": {"type": "boolean"},
    },
}


def test_numeric_strings_become_numbers():
    result = coerce_arguments({"perPage": "3", "issue_number": "42"}, SCHEMA)
    assert result == {"perPage": 3, "issue_number": 42}
    assert isinstance(result["perPage"], int)


def test_decimal_string_for_number():
    assert coerce_value("2.5", {"type": "number"}) == 2.5


def test_string_properties_untouched():
    assert coerce_arguments({"q": "123"}, SCHEMA) == {"q": "123"}


def test_non_numeric_string_left_for_server_validation():
    assert coerce_arguments({"perPage": "three"}, SCHEMA) == {"perPage": "three"}


def test_array_items_coerced():
    assert coerce_arguments({"ids": ["1", "2"]}, SCHEMA) == {"ids": [1, 2]}


def test_booleans_never_coerced():
    assert coerce_arguments({"draft": True, "perPage": True}, SCHEMA) == {"draft": True, "perPage": True}


def test_unknown_properties_passed_through():
    assert coerce_arguments({"extra": "5"}, SCHEMA) == {"extra": "5"}


def test_nullable_integer_via_type_list():
    assert coerce_value("7", {"type": ["integer", "null"]}) == 7


def test_any_of_number():
    assert coerce_value("7", {"anyOf": [{"type": "number"}, {"type": "null"}]}) == 7


def test_none_arguments():
    assert coerce_arguments(None, SCHEMA) == {}
