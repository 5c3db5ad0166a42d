"""Data models for the matching engines.

This module defines the ranked output shared by all three engines and the
entry type held by the priority queue.
"""

from dataclasses import dataclass
from typing import Any, Dict, Union

from rescue_match.domain.models import Candidate


@dataclass(frozen=True)
class MatchResult:
    """A candidate paired with its computed score.

    Attributes:
        candidate: The original candidate snapshot (never copied or mutated)
        match_score: Percentage in [0, 100] for weighted and service matching,
            or the raw integer priority for priority-queue matching
    """

    candidate: Candidate
    match_score: Union[int, float]

    def to_dict(self) -> Dict[str, Any]:
        """Serialize using the response field names."""
        return {
            "animal": self.candidate.to_dict(),
            "matchScore": self.match_score,
        }


@dataclass(frozen=True)
class PriorityEntry:
    """Candidate and its integer priority inside the priority queue."""

    candidate: Candidate
    priority: int
