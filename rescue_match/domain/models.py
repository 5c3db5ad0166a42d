"""Core domain models for rescue animals and their service eligibility.

This module defines the data structures used throughout the application:
- AnimalType: the closed set of animal subtypes the shelter manages
- ServiceType: assignment kinds used by service matching
- TrainingStatus / TrainingSpecialization: lifecycle values read by the prefilters
- Candidate: read-only snapshot of an animal record supplied by the entity store
- TherapyAssessment: result of evaluating a horse for equine therapy work
"""

from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, field_validator

from .attributes import AttributeValue, to_attribute_value


class AnimalType(str, Enum):
    """Animal subtypes, each backed by its own candidate pool."""

    DOG = "dog"
    MONKEY = "monkey"
    BIRD = "bird"
    HORSE = "horse"

    @classmethod
    def from_token(cls, token: Any) -> Optional["AnimalType"]:
        """Resolve a textual animal type token (case-insensitive).

        Args:
            token: Raw token such as "dog" or "Horse"

        Returns:
            Matching AnimalType, or None if the token is not recognized
        """
        if isinstance(token, cls):
            return token
        if not isinstance(token, str):
            return None
        normalized = token.strip().lower()
        for member in cls:
            if member.value == normalized:
                return member
        return None


class ServiceType(str, Enum):
    """Kinds of service assignment an animal can be matched for."""

    SERVICE = "SERVICE"
    THERAPY = "THERAPY"
    SEARCH = "SEARCH"
    EQUINE_THERAPY = "EQUINE_THERAPY"

    @property
    def animal_type(self) -> AnimalType:
        """Animal subtype whose pool serves this kind of assignment."""
        if self is ServiceType.EQUINE_THERAPY:
            return AnimalType.HORSE
        return AnimalType.DOG


class TrainingStatus(str, Enum):
    """Training lifecycle states."""

    NOT_STARTED = "Not Started"
    IN_TRAINING = "In Training"
    READY = "Ready"
    REQUIRES_REVIEW = "Requires Review"


class TrainingSpecialization(str, Enum):
    """Horse training specializations."""

    THERAPY = "Therapy"
    RIDING = "Riding"
    WORKING = "Working"
    NONE = "None"


class Candidate(BaseModel):
    """Read-only snapshot of an animal record.

    The matching core only reads attribute values from a candidate and hands
    the same object back alongside its score. Attribute names follow the wire
    format used by callers (for example ``obedienceLevel`` or
    ``maxRiderWeight``), so criteria keys can be looked up directly.
    """

    id: str = Field(..., min_length=1, description="Stable record identifier")
    animal_type: AnimalType = Field(..., description="Animal subtype")
    attributes: Dict[str, Any] = Field(
        default_factory=dict, description="Open-ended map of named attributes"
    )

    model_config = {"frozen": True}

    @field_validator("id")
    @classmethod
    def strip_id(cls, v: str) -> str:
        """Strip whitespace from the identifier."""
        stripped = v.strip()
        if not stripped:
            raise ValueError("id cannot be empty or whitespace-only")
        return stripped

    @field_validator("animal_type", mode="before")
    @classmethod
    def resolve_animal_type(cls, v: Any) -> AnimalType:
        """Accept animal type tokens in any case."""
        animal_type = AnimalType.from_token(v)
        if animal_type is None:
            raise ValueError(f"Unknown animal type: {v}")
        return animal_type

    def get(self, name: str, default: Any = None) -> Any:
        """Return the raw attribute value, or default when absent."""
        return self.attributes.get(name, default)

    def has_attribute(self, name: str) -> bool:
        return name in self.attributes

    def attribute_value(self, name: str) -> Optional[AttributeValue]:
        """Return the attribute as a typed variant, or None when absent."""
        if name not in self.attributes:
            return None
        return to_attribute_value(self.attributes[name])

    def is_available_for_service(self) -> bool:
        """Whether the animal has finished training and is not reserved."""
        return (
            self.get("trainingStatus") == TrainingStatus.READY.value
            and not self.get("reserved", False)
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize as a flat JSON-like record."""
        return {
            "id": self.id,
            "animalType": self.animal_type.value,
            **self.attributes,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Candidate":
        """Build a candidate from a flat record.

        ``id`` and ``animalType`` are lifted out of the record; every other key
        becomes an attribute.
        """
        record = dict(data)
        candidate_id = record.pop("id", None)
        if candidate_id is None:
            candidate_id = record.pop("_id", None)
        animal_type = record.pop("animalType", None)
        if animal_type is None:
            animal_type = record.pop("animal_type", None)
        return cls(
            id=str(candidate_id) if candidate_id is not None else "",
            animal_type=animal_type,
            attributes=record,
        )


class TherapyAssessment(BaseModel):
    """Suitability of a horse for equine therapy work."""

    score: float = Field(..., description="Mean of the four suitability factors (1-5)")
    recommendation: str = Field(..., description="Human-readable recommendation")


def assess_therapy_suitability(candidate: Candidate) -> Optional[TherapyAssessment]:
    """Assess how suitable a horse is for therapy work.

    The score is the average of four factors on a 1-5 scale: temperament,
    ground manners, arena behavior, and 5 if the horse is riding-safe else 1.

    Args:
        candidate: Horse candidate

    Returns:
        TherapyAssessment, or None if a numeric factor is missing
    """
    factors = []
    for name in ("temperament", "groundManners", "arenaBehavior"):
        value = candidate.get(name)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return None
        factors.append(value)
    factors.append(5 if candidate.get("ridingSafe") else 1)

    average = sum(factors) / len(factors)

    if average > 4:
        recommendation = "Highly Suitable for Therapy"
    elif average > 3:
        recommendation = "Potentially Suitable"
    else:
        recommendation = "Not Recommended for Therapy"

    return TherapyAssessment(score=average, recommendation=recommendation)
