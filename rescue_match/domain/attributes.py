"""Typed attribute values for candidate records.

Candidate attributes arrive as an open-ended map of JSON-like values. Before
scoring, each raw value is classified into exactly one variant:

- BooleanValue: ``True`` / ``False``
- NumericValue: ints and floats (booleans excluded)
- SequenceValue: lists and tuples of scalars, order preserved
- ScalarValue: everything else (strings, enum values, None, nested mappings)

Scorers dispatch over these variants instead of inspecting raw Python types.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Tuple, Union


@dataclass(frozen=True)
class BooleanValue:
    value: bool


@dataclass(frozen=True)
class NumericValue:
    value: float


@dataclass(frozen=True)
class SequenceValue:
    items: Tuple[Any, ...]

    def contains(self, item: Any) -> bool:
        """Membership test using strict scalar equality."""
        return any(values_equal(element, item) for element in self.items)


@dataclass(frozen=True)
class ScalarValue:
    value: Any


AttributeValue = Union[BooleanValue, NumericValue, SequenceValue, ScalarValue]


def to_attribute_value(raw: Any) -> AttributeValue:
    """Classify a raw attribute value into its variant.

    Args:
        raw: JSON-like value read from a candidate or from request criteria

    Returns:
        The matching AttributeValue variant
    """
    # bool is a subclass of int, so it must be checked first
    if isinstance(raw, bool):
        return BooleanValue(raw)
    if isinstance(raw, (int, float)):
        return NumericValue(raw)
    if isinstance(raw, (list, tuple)):
        return SequenceValue(tuple(raw))
    if isinstance(raw, Enum):
        return ScalarValue(raw.value)
    return ScalarValue(raw)


def values_equal(left: Any, right: Any) -> bool:
    """Strict equality between two raw scalar values.

    Booleans only equal booleans, and numbers never equal strings, so
    ``True`` does not match ``1`` the way plain ``==`` would allow.
    """
    if isinstance(left, Enum):
        left = left.value
    if isinstance(right, Enum):
        right = right.value
    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool) and left == right
    if isinstance(left, (int, float)) and isinstance(right, (int, float)):
        return left == right
    if type(left) is not type(right):
        return False
    return left == right
