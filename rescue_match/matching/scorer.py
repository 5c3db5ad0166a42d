"""Per-attribute similarity scoring.

Two comparison rules live here:

- score_attribute: graded contribution used by weighted matching
- matches_approximately: looser yes/no rule used by priority-queue matching

Both dispatch on the candidate's AttributeValue variant. A candidate
attribute that is absent never contributes and never matches.
"""

from typing import Any, Optional, Tuple

from rescue_match.domain.attributes import (
    AttributeValue,
    BooleanValue,
    NumericValue,
    ScalarValue,
    SequenceValue,
    to_attribute_value,
    values_equal,
)

# Full credit is lost over this many units of absolute numeric difference
NUMERIC_DECAY_RANGE = 10.0

# Numeric values within this distance count as an approximate match
NUMERIC_MATCH_TOLERANCE = 1


def score_attribute(
    candidate_value: Optional[AttributeValue], desired: Any, weight: float
) -> Tuple[float, float]:
    """Score one candidate attribute against a desired value.

    Rules by candidate variant:
    - absent: (0, 0), the attribute is excluded from normalization
    - boolean: full weight on exact match
    - numeric: weight * (1 - |diff| / 10); not clamped, so differences
      larger than 10 produce a negative contribution
    - sequence vs sequence: weight * fraction of desired items present
    - sequence vs scalar: full weight if the scalar is a member
    - scalar: full weight on exact match

    Any other combination falls back to exact equality.

    Args:
        candidate_value: Candidate attribute variant, or None when absent
        desired: Desired raw value from the criteria
        weight: Importance weight for this attribute

    Returns:
        Tuple of (contribution, max_possible)
    """
    if candidate_value is None:
        return 0.0, 0.0

    desired_value = to_attribute_value(desired)

    if isinstance(candidate_value, NumericValue) and isinstance(desired_value, NumericValue):
        difference = abs(candidate_value.value - desired_value.value)
        similarity = 1 - difference / NUMERIC_DECAY_RANGE
        return similarity * weight, weight

    if isinstance(candidate_value, SequenceValue):
        if isinstance(desired_value, SequenceValue):
            overlap = sum(1 for item in desired_value.items if candidate_value.contains(item))
            similarity = overlap / max(len(desired_value.items), 1)
            return similarity * weight, weight
        if candidate_value.contains(_raw(desired_value)):
            return weight, weight
        return 0.0, weight

    if _exact_match(candidate_value, desired_value):
        return weight, weight
    return 0.0, weight


def matches_approximately(candidate_value: Optional[AttributeValue], desired: Any) -> bool:
    """Loose yes/no match used for priority ranking.

    Rules by candidate variant:
    - absent: never matches
    - boolean: exact match
    - numeric: within 1 unit of the desired number
    - sequence vs sequence: any desired item present
    - sequence vs scalar: scalar is a member
    - scalar: exact match

    Args:
        candidate_value: Candidate attribute variant, or None when absent
        desired: Desired raw value from the criteria

    Returns:
        True if the candidate attribute approximately matches
    """
    if candidate_value is None:
        return False

    desired_value = to_attribute_value(desired)

    if isinstance(candidate_value, NumericValue) and isinstance(desired_value, NumericValue):
        return abs(candidate_value.value - desired_value.value) <= NUMERIC_MATCH_TOLERANCE

    if isinstance(candidate_value, SequenceValue):
        if isinstance(desired_value, SequenceValue):
            return any(candidate_value.contains(item) for item in desired_value.items)
        return candidate_value.contains(_raw(desired_value))

    return _exact_match(candidate_value, desired_value)


def _exact_match(candidate_value: AttributeValue, desired_value: AttributeValue) -> bool:
    """Exact equality across variants; mismatched variants never match."""
    if type(candidate_value) is not type(desired_value):
        return False
    return values_equal(_raw(candidate_value), _raw(desired_value))


def _raw(value: AttributeValue) -> Any:
    if isinstance(value, (BooleanValue, NumericValue, ScalarValue)):
        return value.value
    return value.items
