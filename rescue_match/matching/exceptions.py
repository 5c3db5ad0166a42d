"""Custom exceptions for match requests."""

from typing import List, Optional


class MatchingError(Exception):
    """Base exception for all matching errors.

    Stores a primary message plus an optional list of specific problems,
    formatted the same way configuration errors are.
    """

    def __init__(self, message: str, errors: Optional[List[str]] = None):
        """Initialize MatchingError.

        Args:
            message: Primary error message (safe to show to callers)
            errors: List of specific problems with the request
        """
        self.message = message
        self.errors = errors or []
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        parts = [self.message]

        if self.errors:
            parts.append("\nValidation Errors:")
            for i, error in enumerate(self.errors, 1):
                parts.append(f"  {i}. {error}")

        return "\n".join(parts)

    def to_dict(self) -> dict:
        """Serialize for an error response body."""
        body = {"status": "error", "message": self.message}
        if self.errors:
            body["errors"] = list(self.errors)
        return body


class InvalidRequest(MatchingError):
    """Request failed validation.

    Raised for missing required fields, unrecognized animal or service types,
    malformed priority attributes, or an out-of-range limit. Detected before
    any scoring starts and never retried.
    """

    pass


class InternalFailure(MatchingError):
    """Unexpected failure while loading the candidate pool or scoring.

    The message is deliberately generic; the underlying exception is chained
    and logged, never returned to the caller.
    """

    pass
