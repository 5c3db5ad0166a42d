"""Configuration loader for the rescue match service.

Settings come from an optional YAML file plus environment variables. When no
file is given, the first existing entry of DEFAULT_CONFIG_LOCATIONS is used,
and if none exists every setting keeps its built-in default.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import ValidationError

from rescue_match.logging import get_logger

from .environment import EnvironmentConfig, load_environment_config
from .exceptions import ConfigurationError
from .models import AppConfig
from .validators import check_for_warnings, emit_warnings

logger = get_logger(__name__, component="config")

DEFAULT_CONFIG_LOCATIONS = [
    Path("rescue_match.yaml"),
    Path("config") / "rescue_match.yaml",
]

EXAMPLE_HINT = "Start from rescue_match.example.yaml"


def load_config(config_path: Optional[Path] = None) -> tuple[AppConfig, EnvironmentConfig]:
    """
    Build the application and environment configuration.

    Args:
        config_path: Explicit YAML file; must exist when given

    Returns:
        Tuple of (AppConfig, EnvironmentConfig)

    Raises:
        ConfigurationError: If the file or an environment variable is invalid
    """
    config_file = _find_config_file(config_path)

    if config_file is None:
        logger.debug("No configuration file found, using defaults")
        app_config = AppConfig()
    else:
        raw = _read_yaml(config_file)
        emit_warnings(check_for_warnings(raw))
        app_config = _validate_app_config(raw)
        logger.debug(
            f"Loaded configuration from {config_file}",
            extra={"event": "config.file.loaded", "config_path": str(config_file)},
        )

    try:
        env_config = load_environment_config()
    except ConfigurationError:
        raise
    except Exception as e:
        raise ConfigurationError(
            f"Could not read environment variables: {e}",
            suggestions=["Copy .env.example to .env and adjust the values"],
        ) from e

    return app_config, env_config


def _read_yaml(config_file: Path) -> Dict[str, Any]:
    """Parse a YAML file; an empty document yields an empty mapping."""
    try:
        raw = yaml.safe_load(config_file.read_text())
    except FileNotFoundError as e:
        raise ConfigurationError(
            f"Configuration file not found: {config_file}",
            suggestions=[EXAMPLE_HINT],
        ) from e
    except yaml.YAMLError as e:
        raise ConfigurationError(
            f"Failed to parse YAML in {config_file}: {e}",
            suggestions=["Check indentation and quoting; tabs are not allowed in YAML"],
        ) from e
    except OSError as e:
        raise ConfigurationError(
            f"Configuration file {config_file} could not be read: {e}",
            suggestions=["Check the file permissions"],
        ) from e

    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigurationError(
            f"Configuration file {config_file} must contain a mapping at the top level",
            suggestions=[EXAMPLE_HINT],
        )
    return raw


def describe_validation_errors(error: ValidationError) -> List[str]:
    """Turn a pydantic ValidationError into one readable line per problem."""
    messages = []
    for item in error.errors():
        location = ".".join(str(part) for part in item["loc"])
        if item["type"] == "missing":
            messages.append(f"Missing required field: {location}")
        elif location:
            messages.append(f"{location}: {item['msg']} (got {item.get('input')!r})")
        else:
            messages.append(item["msg"])
    return messages


def _validate_app_config(raw: Dict[str, Any]) -> AppConfig:
    try:
        return AppConfig.model_validate(raw)
    except ValidationError as e:
        raise ConfigurationError(
            "Configuration validation failed",
            errors=describe_validation_errors(e),
            suggestions=[EXAMPLE_HINT, "Limits must be non-negative integers"],
        ) from e


def _find_config_file(config_path: Optional[Path] = None) -> Optional[Path]:
    """
    Resolve which configuration file to load.

    Returns:
        The explicit path, the first existing default location, or None

    Raises:
        ConfigurationError: If an explicit config_path does not exist
    """
    if config_path is not None:
        if not config_path.exists():
            raise ConfigurationError(
                f"Configuration file not found: {config_path}",
                suggestions=["Check the --config path", EXAMPLE_HINT],
            )
        return config_path

    return next((path for path in DEFAULT_CONFIG_LOCATIONS if path.exists()), None)


def validate_config_file(config_path: Path) -> bool:
    """
    Check a configuration file without touching environment variables.

    Prints a one-line verdict (and the problems, if any) to stdout.

    Returns:
        True if the file is valid
    """
    try:
        _validate_app_config(_read_yaml(config_path))
    except ConfigurationError as e:
        print(f"✗ {config_path} is invalid:\n{e}")
        return False
    print(f"✓ {config_path} is valid")
    return True
