"""Command line entry point for the rescue match service."""

import argparse
import json
import sys
import time
from pathlib import Path
from typing import Any, Callable, List, Optional, Tuple

import yaml
from dotenv import load_dotenv
from pydantic import ValidationError

from rescue_match.config.environment import EnvironmentConfig
from rescue_match.config.exceptions import ConfigurationError
from rescue_match.config.loader import (
    describe_validation_errors,
    load_config,
    validate_config_file,
)
from rescue_match.config.models import AppConfig
from rescue_match.domain.models import Candidate
from rescue_match.logging import get_logger
from rescue_match.logging.config import configure_logging
from rescue_match.matching.exceptions import InternalFailure, InvalidRequest
from rescue_match.matching.models import MatchResult
from rescue_match.matching.utils import build_response_envelope
from rescue_match.orchestrator import CandidateStore, InMemoryCandidateStore, MatchOrchestrator
from rescue_match.persistence import (
    AnimalRepository,
    PersistenceError,
    close_database,
    get_session,
    init_database,
)

logger = get_logger(__name__, component="cli")

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INVALID_REQUEST = 2

MATCH_COMMANDS = {
    "weighted": "find_best_matches",
    "service": "match_for_service",
    "priority": "find_matches_with_priority_queue",
}


def load_runtime_config(
    config_path: Optional[Path], log_level_override: Optional[str]
) -> Tuple[AppConfig, EnvironmentConfig]:
    """
    Load configuration and settle the effective log level.

    Args:
        config_path: Path to configuration file (None to search default locations)
        log_level_override: Log level from CLI (takes precedence)

    Returns:
        Tuple of (AppConfig, EnvironmentConfig) with env_config.log_level resolved

    Raises:
        ConfigurationError: If configuration is invalid
    """
    app_config, env_config = load_config(config_path)

    # Log level priority: CLI > Environment > Config
    if log_level_override:
        env_config.log_level = log_level_override
    elif not env_config.log_level:
        env_config.log_level = app_config.logging.level

    return app_config, env_config


def read_document(path: Path) -> Any:
    """Read a JSON or YAML document (JSON is parsed as YAML)."""
    with open(path, "r") as f:
        return yaml.safe_load(f)


def read_request(path: Path) -> Any:
    """Read a request body; unreadable or unparseable files are invalid requests."""
    try:
        return read_document(path)
    except OSError as e:
        raise InvalidRequest("Request file could not be read", errors=[str(e)]) from e
    except yaml.YAMLError as e:
        raise InvalidRequest("Request file is not valid JSON or YAML", errors=[str(e)]) from e


def load_candidates(path: Path) -> List[Candidate]:
    """
    Load animal records from a JSON or YAML file.

    The document is either a list of flat animal records or a mapping with an
    ``animals`` list.

    Raises:
        ConfigurationError: If the file is missing, malformed or has invalid records
    """
    try:
        document = read_document(path)
    except OSError as e:
        raise ConfigurationError(
            f"Failed to read animal data file: {e}",
            suggestions=[f"Ensure {path} exists and is readable"],
        ) from e
    except yaml.YAMLError as e:
        raise ConfigurationError(
            f"Failed to parse animal data file: {e}",
            suggestions=["Check JSON/YAML syntax in the data file"],
        ) from e

    if isinstance(document, dict) and "animals" in document:
        document = document["animals"]
    if document is None:
        document = []
    if not isinstance(document, list):
        raise ConfigurationError(
            f"Animal data file {path} must contain a list of animal records",
            suggestions=["Wrap the records in a top-level list or an 'animals' key"],
        )

    candidates = []
    errors = []
    for index, record in enumerate(document):
        if not isinstance(record, dict):
            errors.append(f"Record {index}: expected a mapping, got {type(record).__name__}")
            continue
        try:
            candidates.append(Candidate.from_dict(record))
        except ValidationError as e:
            errors.extend(f"Record {index}: {message}" for message in describe_validation_errors(e))

    if errors:
        raise ConfigurationError(
            f"Invalid animal records in {path}",
            errors=errors,
            suggestions=["Every record needs an 'id' and a known 'animalType'"],
        )

    return candidates


def with_store(
    env_config: EnvironmentConfig,
    data_path: Optional[Path],
    operation: Callable[[CandidateStore], Any],
) -> Any:
    """Run an operation against the in-memory store or the database store."""
    if data_path is not None:
        store = InMemoryCandidateStore(load_candidates(data_path))
        logger.info(
            f"Loaded {len(store)} animals from {data_path}",
            extra={"event": "store.memory.loaded", "animal_count": len(store)},
        )
        return operation(store)

    init_database(env_config.database_url)
    try:
        with get_session() as session:
            return operation(AnimalRepository(session))
    finally:
        close_database()


def run_match(
    app_config: AppConfig,
    env_config: EnvironmentConfig,
    command: str,
    request_path: Path,
    limit: Optional[int] = None,
    data_path: Optional[Path] = None,
) -> List[MatchResult]:
    """Execute one match request and return the ranked results."""
    body = read_request(request_path)

    def operation(store: CandidateStore) -> List[MatchResult]:
        orchestrator = MatchOrchestrator(store, matching_config=app_config.matching)
        return getattr(orchestrator, MATCH_COMMANDS[command])(body, limit=limit)

    return with_store(env_config, data_path, operation)


def run_import(env_config: EnvironmentConfig, data_path: Path) -> int:
    """Save every animal in a data file into the database. Returns the count."""
    candidates = load_candidates(data_path)

    init_database(env_config.database_url)
    try:
        with get_session() as session:
            saved = AnimalRepository(session).bulk_save(candidates)
    finally:
        close_database()

    logger.info(
        f"Imported {len(saved)} animals from {data_path}",
        extra={"event": "store.import.completed", "animal_count": len(saved)},
    )
    return len(saved)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rescue-match",
        description="Rescue Match - rank rescue animals for adoption and service assignments",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to configuration file (default: rescue_match.yaml or config/rescue_match.yaml)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Log level (overrides config and environment)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    match_help = {
        "weighted": "Rank adoptable animals by weighted attribute similarity",
        "service": "Rank trained animals for a service assignment",
        "priority": "Rank adoptable animals by attribute priority order",
    }
    for command, help_text in match_help.items():
        sub = subparsers.add_parser(command, help=help_text)
        sub.add_argument(
            "--request", type=Path, required=True, help="JSON or YAML file with the request body"
        )
        sub.add_argument(
            "--limit", type=int, default=None, help="Maximum number of matches to return"
        )
        sub.add_argument(
            "--data",
            type=Path,
            default=None,
            help="Match against animals in this JSON/YAML file instead of the database",
        )

    import_parser = subparsers.add_parser("import", help="Save animals from a file into the database")
    import_parser.add_argument("file", type=Path, help="JSON or YAML list of animal records")

    check_parser = subparsers.add_parser(
        "check-config", help="Validate a configuration file without running anything"
    )
    check_parser.add_argument("file", type=Path, help="YAML configuration file to check")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the rescue-match CLI.

    Returns:
        Exit code (0 success, 2 invalid request, 1 configuration or internal failure).
    """
    load_dotenv()
    start_time = time.time()
    args = build_parser().parse_args(argv)

    # Checked before loading, so a broken file can still be reported
    if args.command == "check-config":
        return EXIT_OK if validate_config_file(args.file) else EXIT_FAILURE

    try:
        app_config, env_config = load_runtime_config(args.config, args.log_level)

        configure_logging(
            level=env_config.log_level,
            format_type=app_config.logging.format,
            environment=env_config.environment,
        )

        logger.info(
            f"Running {args.command}",
            extra={
                "event": "cli.starting",
                "command": args.command,
                "config_path": str(args.config) if args.config else None,
                "log_level": env_config.log_level,
            },
        )

        if args.command == "import":
            count = run_import(env_config, args.file)
            print(json.dumps({"status": "success", "imported": count}))
        else:
            results = run_match(
                app_config,
                env_config,
                args.command,
                args.request,
                limit=args.limit,
                data_path=args.data,
            )
            print(json.dumps(build_response_envelope(results), indent=2))

        logger.info(
            f"Finished {args.command}",
            extra={
                "event": "cli.completed",
                "command": args.command,
                "duration_seconds": round(time.time() - start_time, 3),
            },
        )
        return EXIT_OK

    except InvalidRequest as e:
        print(json.dumps(e.to_dict(), indent=2))
        return EXIT_INVALID_REQUEST
    except InternalFailure as e:
        print(json.dumps(e.to_dict(), indent=2))
        return EXIT_FAILURE
    except ConfigurationError as e:
        print(f"Configuration Error: {e}", file=sys.stderr)
        logger.error(
            f"Configuration error: {e}",
            extra={"event": "config.error", "error_type": "ConfigurationError"},
        )
        return EXIT_FAILURE
    except PersistenceError as e:
        print(f"Database Error: {e}", file=sys.stderr)
        logger.error(
            f"Database error: {e}",
            extra={"event": "database.error", "error_type": type(e).__name__},
            exc_info=True,
        )
        return EXIT_FAILURE
    except KeyboardInterrupt:
        print("\nInterrupted by user", file=sys.stderr)
        return EXIT_FAILURE


if __name__ == "__main__":
    sys.exit(main())
