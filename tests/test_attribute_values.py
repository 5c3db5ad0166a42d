"""Tests for attribute value classification and strict equality."""

from enum import Enum

import pytest

from rescue_match.domain.attributes import (
    BooleanValue,
    NumericValue,
    ScalarValue,
    SequenceValue,
    to_attribute_value,
    values_equal,
)


class Color(str, Enum):
    BROWN = "brown"


class TestToAttributeValue:
    """Test classification of raw values into variants."""

    @pytest.mark.parametrize(
        "raw,expected",
        [
            (True, BooleanValue(True)),
            (False, BooleanValue(False)),
            (3, NumericValue(3)),
            (2.5, NumericValue(2.5)),
            (["a", "b"], SequenceValue(("a", "b"))),
            (("a",), SequenceValue(("a",))),
            ("medium", ScalarValue("medium")),
            (None, ScalarValue(None)),
        ],
    )
    def test_classification(self, raw, expected):
        assert to_attribute_value(raw) == expected

    def test_bool_is_not_numeric(self):
        """Booleans are classified before the int check."""
        assert isinstance(to_attribute_value(True), BooleanValue)

    def test_enum_unwrapped_to_scalar(self):
        assert to_attribute_value(Color.BROWN) == ScalarValue("brown")


class TestValuesEqual:
    """Test strict scalar equality."""

    def test_equal_strings(self):
        assert values_equal("medium", "medium")

    def test_string_case_sensitive(self):
        assert not values_equal("Medium", "medium")

    def test_int_equals_float(self):
        assert values_equal(3, 3.0)

    def test_bool_never_equals_int(self):
        assert not values_equal(True, 1)
        assert not values_equal(0, False)

    def test_number_never_equals_string(self):
        assert not values_equal(3, "3")

    def test_enum_compares_by_value(self):
        assert values_equal(Color.BROWN, "brown")


class TestSequenceValue:
    def test_contains_uses_strict_equality(self):
        sequence = SequenceValue((1, "guide"))
        assert sequence.contains("guide")
        assert sequence.contains(1.0)
        assert not sequence.contains(True)
        assert not sequence.contains("1")
