"""Request schemas for the three matching operations using Pydantic.

Request bodies are JSON-like dicts with camelCase keys. Each schema accepts
either the camelCase alias or the snake_case field name. Validation failures
are converted into InvalidRequest with one message per offending field.
"""

from typing import Any, Dict, List, Mapping, Optional, Type, TypeVar

from pydantic import BaseModel, Field, ValidationError, field_validator

from rescue_match.domain.models import AnimalType, ServiceType

from .exceptions import InvalidRequest

RequestModel = TypeVar("RequestModel", bound=BaseModel)

_ALIAS_CONFIG = {"populate_by_name": True}


def _resolve_animal_type(value: Any) -> AnimalType:
    animal_type = AnimalType.from_token(value)
    if animal_type is None:
        valid = ", ".join(member.value for member in AnimalType)
        raise ValueError(f"Invalid animal type '{value}'. Must be one of: {valid}")
    return animal_type


class WeightedMatchRequest(BaseModel):
    """Body of a weighted match request."""

    animal_type: AnimalType = Field(..., alias="animalType", description="Animal subtype")
    attributes: Dict[str, Any] = Field(
        ..., min_length=1, description="Desired attribute values"
    )
    weights: Dict[str, float] = Field(
        default_factory=dict, description="Importance weight per attribute (default 1)"
    )
    limit: Optional[int] = Field(None, ge=0, description="Maximum number of matches")

    model_config = _ALIAS_CONFIG

    @field_validator("animal_type", mode="before")
    @classmethod
    def validate_animal_type(cls, v: Any) -> AnimalType:
        """Resolve the animal type token case-insensitively."""
        return _resolve_animal_type(v)

    @field_validator("weights", mode="before")
    @classmethod
    def default_weights(cls, v: Any) -> Any:
        """Treat an explicit null as no weights."""
        return {} if v is None else v

    @field_validator("weights")
    @classmethod
    def validate_weights(cls, v: Dict[str, float]) -> Dict[str, float]:
        """Weights must be positive."""
        invalid = sorted(name for name, weight in v.items() if weight <= 0)
        if invalid:
            raise ValueError(f"Weights must be positive: {', '.join(invalid)}")
        return v


class ClientNeeds(BaseModel):
    """Client-specific needs for service matching.

    Recognized keys depend on the service type; unrecognized keys are kept.
    """

    specializations: Optional[List[str]] = None
    rider_weight: Optional[float] = Field(None, alias="riderWeight", ge=0)
    mobility_issues: Optional[bool] = Field(None, alias="mobilityIssues")
    age_group: Optional[str] = Field(None, alias="ageGroup")
    environmental_factors: Optional[List[str]] = Field(None, alias="environmentalFactors")

    model_config = {"populate_by_name": True, "extra": "allow"}

    def as_mapping(self) -> Dict[str, Any]:
        """Return the needs keyed by their camelCase names, omitting unset values."""
        return self.model_dump(by_alias=True, exclude_none=True)


class ServiceMatchRequest(BaseModel):
    """Body of a service match request."""

    service_type: ServiceType = Field(..., alias="serviceType", description="Kind of service")
    client_needs: ClientNeeds = Field(default_factory=ClientNeeds, alias="clientNeeds")
    limit: Optional[int] = Field(None, ge=0, description="Maximum number of matches")

    model_config = _ALIAS_CONFIG

    @field_validator("service_type", mode="before")
    @classmethod
    def normalize_service_type(cls, v: Any) -> Any:
        """Accept service types in any case."""
        if isinstance(v, str):
            return v.strip().upper()
        return v

    @field_validator("client_needs", mode="before")
    @classmethod
    def default_client_needs(cls, v: Any) -> Any:
        """Treat an explicit null as no needs."""
        return {} if v is None else v


class PriorityCriteria(BaseModel):
    """Criteria block of a priority match request."""

    animal_type: AnimalType = Field(..., alias="animalType", description="Animal subtype")
    attributes: Dict[str, Any] = Field(
        ..., min_length=1, description="Desired attribute values"
    )

    model_config = _ALIAS_CONFIG

    @field_validator("animal_type", mode="before")
    @classmethod
    def validate_animal_type(cls, v: Any) -> AnimalType:
        """Resolve the animal type token case-insensitively."""
        return _resolve_animal_type(v)


class PriorityMatchRequest(BaseModel):
    """Body of a priority match request."""

    criteria: PriorityCriteria
    priority_attributes: List[str] = Field(
        ..., alias="priorityAttributes", min_length=1, description="Most important first"
    )
    limit: Optional[int] = Field(None, ge=0, description="Maximum number of matches")

    model_config = _ALIAS_CONFIG

    @field_validator("priority_attributes")
    @classmethod
    def validate_priority_attributes(cls, v: List[str]) -> List[str]:
        """Attribute names must be non-empty strings."""
        names = [name.strip() for name in v]
        if any(not name for name in names):
            raise ValueError("priorityAttributes cannot contain empty names")
        return names


def parse_request(model: Type[RequestModel], body: Any) -> RequestModel:
    """Validate a request body against a schema.

    Args:
        model: Request schema class
        body: Raw request body, or an already-validated instance of model

    Returns:
        Validated request model

    Raises:
        InvalidRequest: If the body is missing fields or has invalid values
    """
    if isinstance(body, model):
        return body
    if not isinstance(body, Mapping):
        raise InvalidRequest(
            "Invalid request body",
            errors=[f"Expected a JSON object, got {type(body).__name__}"],
        )

    try:
        return model.model_validate(dict(body))
    except ValidationError as e:
        errors = []
        for error in e.errors():
            field_path = " -> ".join(str(loc) for loc in error["loc"])
            if error["type"] == "missing":
                errors.append(f"Missing required field: {field_path}")
            elif field_path:
                errors.append(f"{field_path}: {error['msg']}")
            else:
                errors.append(error["msg"])
        raise InvalidRequest("Invalid match request", errors=errors) from e
