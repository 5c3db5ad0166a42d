"""Service eligibility scoring for service, therapy, search and equine therapy work.

Every candidate handed to this scorer has already passed the eligibility
prefilter, so it starts from a fixed baseline and earns rule-based bonuses
for the requested service type. Equine therapy has a hard disqualification
when the client's weight exceeds what the horse can carry.
"""

import logging
from typing import Any, List, Mapping, Optional, Sequence

from rescue_match.domain.models import Candidate, ServiceType, assess_therapy_suitability

from .models import MatchResult

logger = logging.getLogger(__name__)

BASELINE_SCORE = 70
MAX_SCORE = 100

OBEDIENCE_POINTS = 4
SPECIALIZATION_POINTS = 5
TEMPERAMENT_POINTS = 5
SUITABILITY_POINTS = 5


class ServiceEligibilityScorer:
    """Scores eligible animals for a service assignment.

    Scoring starts at 70 and adds:
    - SERVICE: obedienceLevel * 4, plus 5 per client specialization the dog has
    - THERAPY: temperament * 5
    - EQUINE_THERAPY: therapy suitability * 5, forced to 0 if the rider is too heavy
    - SEARCH: nothing beyond the baseline

    Final scores are capped at 100.
    """

    def __init__(self, logger_instance: logging.Logger = None):
        """Initialize ServiceEligibilityScorer.

        Args:
            logger_instance: Optional logger instance (defaults to module logger)
        """
        self.logger = logger_instance or logger

    def match_for_service(
        self,
        pool: Sequence[Candidate],
        service_type: ServiceType,
        client_needs: Optional[Mapping[str, Any]] = None,
        limit: int = 5,
    ) -> List[MatchResult]:
        """Score and rank eligible candidates for a service type.

        Args:
            pool: Candidates that passed the service eligibility prefilter
            service_type: Requested kind of service
            client_needs: Client-specific needs (specializations, riderWeight, ...)
            limit: Maximum number of results to return

        Returns:
            MatchResults sorted by match_score descending, pool order among ties
        """
        client_needs = client_needs or {}
        service_type = ServiceType(service_type)

        scored = [
            MatchResult(
                candidate=candidate,
                match_score=self.score(candidate, service_type, client_needs),
            )
            for candidate in pool
        ]
        ranked = sorted(scored, key=lambda result: result.match_score, reverse=True)

        self.logger.debug(
            f"Scored {len(scored)} candidates for {service_type.value}",
            extra={
                "service_type": service_type.value,
                "candidate_count": len(scored),
                "limit": limit,
            },
        )

        return ranked[: max(limit, 0)]

    def score(
        self,
        candidate: Candidate,
        service_type: ServiceType,
        client_needs: Mapping[str, Any],
    ) -> float:
        """Compute the service score for one candidate.

        Args:
            candidate: Eligible candidate
            service_type: Requested kind of service
            client_needs: Client-specific needs

        Returns:
            Score in [0, 100], rounded to two decimals
        """
        score = BASELINE_SCORE

        if service_type is ServiceType.SERVICE:
            score += self._service_bonus(candidate, client_needs)
        elif service_type is ServiceType.THERAPY:
            temperament = _number(candidate.get("temperament"))
            if temperament:
                score += temperament * TEMPERAMENT_POINTS
        elif service_type is ServiceType.EQUINE_THERAPY:
            assessment = assess_therapy_suitability(candidate)
            if assessment is not None:
                score += assessment.score * SUITABILITY_POINTS

            if self._exceeds_rider_weight(candidate, client_needs):
                self.logger.debug(
                    f"Candidate {candidate.id} disqualified: rider weight exceeds limit",
                    extra={
                        "candidate_id": candidate.id,
                        "rider_weight": client_needs.get("riderWeight"),
                        "max_rider_weight": candidate.get("maxRiderWeight"),
                    },
                )
                score = 0

        return round(min(MAX_SCORE, score), 2)

    @staticmethod
    def _service_bonus(candidate: Candidate, client_needs: Mapping[str, Any]) -> float:
        bonus = 0.0

        obedience = _number(candidate.get("obedienceLevel"))
        if obedience:
            bonus += obedience * OBEDIENCE_POINTS

        wanted = client_needs.get("specializations")
        offered = candidate.get("specializations")
        if wanted and isinstance(offered, (list, tuple)):
            # Each requested entry counts, duplicates included
            matching = sum(1 for spec in wanted if spec in offered)
            bonus += matching * SPECIALIZATION_POINTS

        return bonus

    @staticmethod
    def _exceeds_rider_weight(candidate: Candidate, client_needs: Mapping[str, Any]) -> bool:
        rider_weight = _number(client_needs.get("riderWeight"))
        max_rider_weight = _number(candidate.get("maxRiderWeight"))
        if not rider_weight or not max_rider_weight:
            return False
        return max_rider_weight < rider_weight


def _number(value: Any) -> Optional[float]:
    """Return value if it is a real number (not a bool), else None."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return value
