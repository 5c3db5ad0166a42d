"""Domain models for the rescue animal matching service."""

from .attributes import (
    AttributeValue,
    BooleanValue,
    NumericValue,
    ScalarValue,
    SequenceValue,
    to_attribute_value,
    values_equal,
)
from .models import (
    AnimalType,
    Candidate,
    ServiceType,
    TherapyAssessment,
    TrainingSpecialization,
    TrainingStatus,
    assess_therapy_suitability,
)

__all__ = [
    "AnimalType",
    "Candidate",
    "ServiceType",
    "TherapyAssessment",
    "TrainingSpecialization",
    "TrainingStatus",
    "assess_therapy_suitability",
    "AttributeValue",
    "BooleanValue",
    "NumericValue",
    "ScalarValue",
    "SequenceValue",
    "to_attribute_value",
    "values_equal",
]
