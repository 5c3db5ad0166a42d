"""Ordinal ranking driven by a caller-supplied attribute priority order.

Instead of weights, the caller lists attribute names from most to least
important. A candidate earns ``len(order) - i`` points for every attribute
at position ``i`` that approximately matches the desired value. Candidates
are then drained from an insertion-ordered priority queue.
"""

import logging
from typing import Any, List, Mapping, Optional, Sequence

from rescue_match.domain.models import Candidate

from .exceptions import InvalidRequest
from .models import MatchResult, PriorityEntry
from .scorer import matches_approximately

logger = logging.getLogger(__name__)


class CandidatePriorityQueue:
    """Priority queue kept as a list sorted by descending priority.

    A new entry is inserted immediately before the first entry with a strictly
    lower priority, or appended when there is none. Entries with equal
    priority therefore leave the queue in the order they arrived.
    """

    def __init__(self):
        self._items: List[PriorityEntry] = []

    def enqueue(self, entry: PriorityEntry) -> None:
        for index, existing in enumerate(self._items):
            if entry.priority > existing.priority:
                self._items.insert(index, entry)
                return
        self._items.append(entry)

    def dequeue(self) -> Optional[PriorityEntry]:
        """Remove and return the highest priority entry (None when empty)."""
        if self.is_empty():
            return None
        return self._items.pop(0)

    def peek(self) -> Optional[PriorityEntry]:
        if self.is_empty():
            return None
        return self._items[0]

    def is_empty(self) -> bool:
        return not self._items

    def __len__(self) -> int:
        return len(self._items)


class PriorityRankEngine:
    """Ranks candidates by an explicit attribute priority ordering.

    Matching uses the loose approximate rule (numbers within 1, any overlap
    for sequences) and the returned score is the raw integer priority, not a
    percentage.
    """

    def __init__(self, logger_instance: logging.Logger = None):
        """Initialize PriorityRankEngine.

        Args:
            logger_instance: Optional logger instance (defaults to module logger)
        """
        self.logger = logger_instance or logger

    def find_matches_with_priority_queue(
        self,
        pool: Sequence[Candidate],
        criteria: Mapping[str, Any],
        priority_attributes: Sequence[str],
        limit: int = 5,
    ) -> List[MatchResult]:
        """Rank candidates by attribute priority.

        Args:
            pool: Candidates to evaluate (already prefiltered)
            criteria: Attribute name to desired value
            priority_attributes: Attribute names, most important first
            limit: Maximum number of results to return

        Returns:
            MatchResults in dequeue order; match_score holds the integer priority

        Raises:
            InvalidRequest: If priority_attributes is not a non-empty list of names
        """
        if (
            isinstance(priority_attributes, (str, bytes))
            or not isinstance(priority_attributes, Sequence)
            or not priority_attributes
        ):
            raise InvalidRequest("priorityAttributes must be a non-empty ordered list")

        queue = CandidatePriorityQueue()
        for candidate in pool:
            queue.enqueue(
                PriorityEntry(
                    candidate=candidate,
                    priority=self.compute_priority(candidate, criteria, priority_attributes),
                )
            )

        matches = []
        while len(matches) < limit and not queue.is_empty():
            entry = queue.dequeue()
            matches.append(MatchResult(candidate=entry.candidate, match_score=entry.priority))

        self.logger.debug(
            f"Ranked {len(pool)} candidates by priority",
            extra={
                "candidate_count": len(pool),
                "priority_attribute_count": len(priority_attributes),
                "limit": limit,
            },
        )

        return matches

    @staticmethod
    def compute_priority(
        candidate: Candidate,
        criteria: Mapping[str, Any],
        priority_attributes: Sequence[str],
    ) -> int:
        """Sum the positional weights of approximately matching attributes.

        Attributes without a desired value in criteria contribute nothing.
        """
        priority = 0
        total = len(priority_attributes)

        for index, attribute in enumerate(priority_attributes):
            if attribute not in criteria:
                continue
            if matches_approximately(candidate.attribute_value(attribute), criteria[attribute]):
                priority += total - index

        return priority
