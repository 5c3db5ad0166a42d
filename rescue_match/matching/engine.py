"""Weighted matching engine for ranking candidates against desired attributes.

This module implements the generic matching strategy that:
1. Scores every candidate attribute named in the criteria
2. Scales each contribution by its importance weight
3. Normalizes the total onto a 0-100 scale
4. Ranks candidates by score, keeping pool order among equal scores
"""

import logging
from typing import Any, List, Mapping, Optional, Sequence

from rescue_match.domain.models import Candidate

from .exceptions import InvalidRequest
from .models import MatchResult
from .scorer import score_attribute

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 5
DEFAULT_WEIGHT = 1


class WeightedMatchEngine:
    """Ranks candidates by weighted attribute similarity.

    Responsibilities:
    - Look up each criteria attribute on the candidate (absent ones are skipped)
    - Apply per-attribute weights (default 1)
    - Normalize achieved score against the maximum achievable score
    - Sort descending with a stable sort and truncate to the limit
    """

    def __init__(self, logger_instance: logging.Logger = None):
        """Initialize WeightedMatchEngine.

        Args:
            logger_instance: Optional logger instance (defaults to module logger)
        """
        self.logger = logger_instance or logger

    def find_best_matches(
        self,
        pool: Sequence[Candidate],
        criteria: Mapping[str, Any],
        weights: Optional[Mapping[str, float]] = None,
        limit: int = DEFAULT_LIMIT,
    ) -> List[MatchResult]:
        """Score and rank a candidate pool.

        Args:
            pool: Candidates to evaluate (already prefiltered)
            criteria: Attribute name to desired value
            weights: Optional attribute name to importance weight
            limit: Maximum number of results to return

        Returns:
            MatchResults sorted by match_score descending

        Raises:
            InvalidRequest: If criteria is empty
        """
        if not criteria:
            raise InvalidRequest("Missing required matching criteria")

        weights = weights or {}

        scored = [self.score_candidate(candidate, criteria, weights) for candidate in pool]

        # sorted() is stable, so equal scores keep their pool order
        ranked = sorted(scored, key=lambda result: result.match_score, reverse=True)

        self.logger.debug(
            f"Scored {len(scored)} candidates",
            extra={
                "candidate_count": len(scored),
                "criteria_count": len(criteria),
                "limit": limit,
            },
        )

        return ranked[: max(limit, 0)]

    def score_candidate(
        self,
        candidate: Candidate,
        criteria: Mapping[str, Any],
        weights: Mapping[str, float],
    ) -> MatchResult:
        """Compute the normalized score for a single candidate.

        Args:
            candidate: Candidate to score
            criteria: Attribute name to desired value
            weights: Attribute name to importance weight

        Returns:
            MatchResult with the score rounded to two decimals
        """
        total_score = 0.0
        max_possible_score = 0.0

        for attribute, desired in criteria.items():
            weight = weights.get(attribute) or DEFAULT_WEIGHT
            contribution, max_possible = score_attribute(
                candidate.attribute_value(attribute), desired, weight
            )
            total_score += contribution
            max_possible_score += max_possible

        if max_possible_score > 0:
            normalized = (total_score / max_possible_score) * 100
        else:
            normalized = 0.0

        return MatchResult(candidate=candidate, match_score=round(normalized, 2))
