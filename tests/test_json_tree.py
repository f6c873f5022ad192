"""Tests for optional-field JSON navigation."""
import pytest

from app.services.json_tree import (
    MISSING,
    as_list,
    decode_first_value,
    format_double,
    is_present,
    lookup,
    text_at,
    text_value,
)


class TestLookup:
    """Path navigation never raises."""

    def test_nested_path(self):
        tree = {"choices": [{"message": {"content": "hello"}}]}

        assert lookup(tree, "choices", 0, "message", "content") == "hello"

    @pytest.mark.parametrize(
        "tree, path",
        [
            ({}, ("missing",)),
            ({"items": []}, ("items", 0)),
            ({"items": [1]}, ("items", 1)),
            ({"items": [1]}, ("items", -1)),
            ({"items": {"0": "x"}}, ("items", 0)),
            ([1, 2], ("key",)),
            ("text", ("key",)),
            (None, ("key",)),
        ],
    )
    def test_mismatch_returns_missing(self, tree, path):
        assert lookup(tree, *path) is MISSING

    def test_null_is_not_missing(self):
        value = lookup({"overall": None}, "overall")

        assert value is None
        assert not is_present(value)
        assert not is_present(MISSING)
        assert is_present("")

    def test_missing_is_falsy(self):
        assert not MISSING
        assert repr(MISSING) == "MISSING"

    def test_text_at_requires_string(self):
        tree = {"text": 12, "label": "ok"}

        assert text_at(tree, "text") is None
        assert text_at(tree, "label") == "ok"
        assert text_at(tree, "absent") is None

    def test_as_list(self):
        assert as_list([1]) == [1]
        assert as_list({"a": 1}) == []
        assert as_list(MISSING) == []


class TestTextValue:
    """Scalar rendering."""

    @pytest.mark.parametrize(
        "value, expected",
        [
            ("Good", "Good"),
            (True, "true"),
            (False, "false"),
            (520, "520"),
            (5.5, "5.5"),
            (None, "null"),
            ({"a": 1}, ""),
            ([1, 2], ""),
            (MISSING, ""),
        ],
    )
    def test_text_value(self, value, expected):
        assert text_value(value) == expected

    @pytest.mark.parametrize(
        "value, expected",
        [
            (0.0, "0.0"),
            (0.001, "0.001"),
            (1234567.5, "1234567.5"),
            (1e-05, "1.0E-5"),
            (0.0001, "1.0E-4"),
            (1e8, "1.0E8"),
            (12345678.9, "1.23456789E7"),
            (-1.5e20, "-1.5E20"),
            (float("inf"), "Infinity"),
        ],
    )
    def test_float_notation(self, value, expected):
        assert format_double(value) == expected
        assert text_value(value) == expected


class TestDecodeFirstValue:
    """Lenient JSON decoding."""

    def test_ignores_trailing_text(self):
        assert decode_first_value('  {"a": 1} and more') == {"a": 1}

    def test_decodes_null(self):
        assert decode_first_value("null") is None

    def test_overflowing_exponent_is_a_number(self):
        assert decode_first_value("1e999") == float("inf")

    @pytest.mark.parametrize("text", ["", "   ", "nope", "{", "```json", "NaN", "-Infinity", "[1, Infinity]"])
    def test_invalid_returns_missing(self, text):
        assert decode_first_value(text) is MISSING
