"""Configuration schema models using Pydantic."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, model_validator


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    """Log output formats."""

    JSON = "json"
    KEY_VALUE = "key-value"


class MatchingConfig(BaseModel):
    """Settings shared by the matching operations."""

    default_limit: int = Field(
        5, ge=0, description="Number of matches returned when a request gives no limit"
    )
    max_limit: Optional[int] = Field(
        None, ge=1, description="Largest limit a request may ask for (None = unlimited)"
    )

    @model_validator(mode="after")
    def validate_limits(self):
        """Ensure the default limit does not exceed the maximum."""
        if self.max_limit is not None and self.default_limit > self.max_limit:
            raise ValueError(
                f"default_limit ({self.default_limit}) cannot exceed max_limit ({self.max_limit})"
            )
        return self


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: LogLevel = Field(LogLevel.INFO, description="Log level")
    format: LogFormat = Field(
        LogFormat.KEY_VALUE, description="Log output format (json or key-value)"
    )

    model_config = {"use_enum_values": True}


class AppConfig(BaseModel):
    """Root configuration object for the rescue match service."""

    matching: MatchingConfig = Field(
        default_factory=MatchingConfig, description="Matching settings"
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )
